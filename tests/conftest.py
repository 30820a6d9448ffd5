"""Shared fixtures; scripts/ is not a package, so put it on sys.path."""
import sys
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"

# Add scripts/ to sys.path so tests can import the doctor package.
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from doctor.tools_config import ToolsConfig, ToolSpec  # noqa: E402


def make_tool(tool_id: str, weight: int, tmp_path: Path, **kwargs) -> ToolSpec:
    return ToolSpec(
        id=tool_id,
        label=kwargs.get("label", tool_id.title()),
        description=kwargs.get("description", f"{tool_id} check"),
        result_path=tmp_path / f"pydoctor_{tool_id}.txt",
        weight=weight,
    )


@pytest.fixture
def tools_config(tmp_path: Path) -> ToolsConfig:
    """Stock weights, but with result files under tmp_path."""
    from doctor.tools_config import DEFAULT_NOISE_PATTERNS, DEFAULT_TOOLS

    tools = tuple(
        ToolSpec(
            id=t.id,
            label=t.label,
            description=t.description,
            result_path=tmp_path / t.result_path.name,
            weight=t.weight,
        )
        for t in DEFAULT_TOOLS
    )
    return ToolsConfig(tools=tools, noise_patterns=DEFAULT_NOISE_PATTERNS)

