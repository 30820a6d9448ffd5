"""Read analyzer output files and classify them as clean or with findings."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from doctor.tools_config import ToolsConfig, ToolSpec


class ResultReadError(RuntimeError):
    """Result file exists but could not be read."""


@dataclass(frozen=True)
class ToolResult:
    tool: ToolSpec
    content: str | None
    has_findings: bool


def compile_noise_patterns(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    """Compile noise patterns (case-insensitive, anchored at the start of the text)."""
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _is_blank(text: str, _noise: Sequence[re.Pattern[str]]) -> bool:
    return not text


def _is_noise(text: str, noise: Sequence[re.Pattern[str]]) -> bool:
    return any(pattern.match(text) for pattern in noise)


# Evaluated in order; the first rule that fires marks the output clean.
CLEAN_RULES: tuple[Callable[[str, Sequence[re.Pattern[str]]], bool], ...] = (
    _is_blank,
    _is_noise,
)


def is_clean_output(text: str, noise: Sequence[re.Pattern[str]]) -> bool:
    """True when trimmed tool output carries no findings."""
    return any(rule(text, noise) for rule in CLEAN_RULES)


def read_tool(tool: ToolSpec, noise: Sequence[re.Pattern[str]]) -> ToolResult:
    """Read one tool's result file.

    A missing file is a clean run. A file that exists but can't be read
    raises ResultReadError: scoring it as clean would hide a broken step.
    """
    path = tool.result_path
    if not path.exists():
        return ToolResult(tool=tool, content=None, has_findings=False)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ResultReadError(f"unable to read {tool.id} results at {path}: {exc}") from exc

    text = raw.strip()
    if is_clean_output(text, noise):
        return ToolResult(tool=tool, content=None, has_findings=False)
    return ToolResult(tool=tool, content=text, has_findings=True)


def read_all(config: ToolsConfig) -> list[ToolResult]:
    """One result per registered tool, in registry order."""
    noise = compile_noise_patterns(config.noise_patterns)
    return [read_tool(tool, noise) for tool in config.tools]
