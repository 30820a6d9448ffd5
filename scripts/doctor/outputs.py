"""Step outputs for downstream workflow steps."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from uuid import uuid4

from doctor.scoring import ScoreReport


def step_outputs(report: ScoreReport) -> dict[str, str]:
    return {
        "score": str(report.score),
        "has_findings": "true" if report.has_findings else "false",
    }


def _format_output(key: str, value: str) -> str:
    if "\n" not in value:
        return f"{key}={value}\n"
    delimiter = f"PYDOCTOR_{key.upper()}_{uuid4().hex}"
    while delimiter in value:
        delimiter = f"PYDOCTOR_{key.upper()}_{uuid4().hex}"
    tail = "" if value.endswith("\n") else "\n"
    return f"{key}<<{delimiter}\n{value}{tail}{delimiter}\n"


def write_outputs(path: Path, outputs: Mapping[str, str]) -> None:
    """Append outputs to the GITHUB_OUTPUT file."""
    with path.open("a", encoding="utf-8") as fh:
        for key, value in outputs.items():
            fh.write(_format_output(key, value))
