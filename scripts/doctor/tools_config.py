"""Typed registry of the analyzers Python Doctor scores.

The built-in table covers the stock workflow. A YAML override file can
replace it; parsing/validation lives here so the entry script stays small.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

TOTAL_WEIGHT = 100
DEFAULT_RESULTS_DIR = Path("/tmp")


class ConfigError(RuntimeError):
    """Tools config is missing or invalid."""


@dataclass(frozen=True)
class ToolSpec:
    """One analyzer: where its output lands and what a finding costs."""
    id: str
    label: str
    description: str
    result_path: Path
    weight: int


@dataclass(frozen=True)
class ToolsConfig:
    """Immutable registry loaded once per run."""
    tools: tuple[ToolSpec, ...]
    noise_patterns: tuple[str, ...]

    @property
    def total_weight(self) -> int:
        return sum(tool.weight for tool in self.tools)

    def tool(self, tool_id: str) -> ToolSpec | None:
        """Tool by id."""
        for tool in self.tools:
            if tool.id == tool_id:
                return tool
        return None


def _tool(tool_id: str, label: str, description: str, weight: int) -> ToolSpec:
    return ToolSpec(
        id=tool_id,
        label=label,
        description=description,
        result_path=DEFAULT_RESULTS_DIR / f"pydoctor_{tool_id}.txt",
        weight=weight,
    )


# weight: points deducted from 100 when the tool reports findings.
DEFAULT_TOOLS: tuple[ToolSpec, ...] = (
    _tool("ruff", "🔍 Ruff", "lint + style", 20),
    _tool("mypy", "🔷 mypy", "type check", 20),
    _tool("bandit", "🔒 Bandit", "security", 20),
    _tool("vulture", "🪦 Vulture", "dead code", 15),
    _tool("radon", "📐 Radon", "complexity", 15),
    _tool("sqlfluff", "🗄️ SQLFluff", "SQL", 8),
    _tool("markdownlint", "📝 markdownlint", "Markdown", 2),
)

# Output consisting only of one of these means the tool ran clean.
DEFAULT_NOISE_PATTERNS: tuple[str, ...] = (
    r"^no python files",
    r"^no sql files",
    r"^no issues",
    r"^success",
    r"^\s*$",
)


def default_tools_config() -> ToolsConfig:
    """Built-in registry."""
    return ToolsConfig(tools=DEFAULT_TOOLS, noise_patterns=DEFAULT_NOISE_PATTERNS)


def _require_mapping(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{ctx}: expected mapping")
    return value


def _require_list(value: Any, ctx: str) -> list[Any]:
    if not isinstance(value, list):
        raise ConfigError(f"{ctx}: expected list")
    return value


def _require_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    s = value.strip()
    if not s:
        raise ConfigError(f"{ctx}: must be non-empty")
    return s


def _require_weight(value: Any, ctx: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{ctx}: expected integer")
    if value < 0:
        raise ConfigError(f"{ctx}: must be >= 0")
    return value


def _require_pattern(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    try:
        re.compile(value)
    except re.error as e:
        raise ConfigError(f"{ctx}: invalid regular expression: {e}") from e
    return value


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"missing config file: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e


def load_tools_config(path: Path) -> ToolsConfig:
    """Load tools config."""
    raw = _load_yaml(path)

    # Loose format: top-level list means "tools".
    if isinstance(raw, list):
        raw = {"tools": raw}

    cfg = _require_mapping(raw, "config")

    results_dir = DEFAULT_RESULTS_DIR
    if cfg.get("results_dir") is not None:
        results_dir = Path(_require_str(cfg.get("results_dir"), "config.results_dir"))

    tools_raw = cfg.get("tools")
    if tools_raw is None:
        raise ConfigError("config.tools: missing required key")
    tools_list = _require_list(tools_raw, "config.tools")
    if not tools_list:
        raise ConfigError("config.tools: must be non-empty")

    tools: list[ToolSpec] = []
    seen: set[str] = set()
    for idx, item in enumerate(tools_list):
        entry = _require_mapping(item, f"config.tools[{idx}]")
        tool_id = _require_str(entry.get("id"), f"config.tools[{idx}].id")
        if tool_id in seen:
            raise ConfigError(f"config.tools[{idx}].id: duplicate tool id '{tool_id}'")
        seen.add(tool_id)

        label = entry.get("label")
        label = tool_id if label is None else _require_str(label, f"config.tools[{idx}].label")
        description = entry.get("description")
        description = (
            "" if description is None
            else _require_str(description, f"config.tools[{idx}].description")
        )

        file_raw = entry.get("file")
        if file_raw is None:
            result_path = results_dir / f"pydoctor_{tool_id}.txt"
        else:
            result_path = results_dir / _require_str(file_raw, f"config.tools[{idx}].file")

        tools.append(
            ToolSpec(
                id=tool_id,
                label=label,
                description=description,
                result_path=result_path,
                weight=_require_weight(entry.get("weight"), f"config.tools[{idx}].weight"),
            )
        )

    noise: tuple[str, ...] = DEFAULT_NOISE_PATTERNS
    noise_raw = cfg.get("noise_patterns")
    if noise_raw is not None:
        noise = tuple(
            _require_pattern(item, f"config.noise_patterns[{idx}]")
            for idx, item in enumerate(_require_list(noise_raw, "config.noise_patterns"))
        )

    config = ToolsConfig(tools=tuple(tools), noise_patterns=noise)
    if config.total_weight != TOTAL_WEIGHT:
        raise ConfigError(
            f"config.tools: weights must sum to {TOTAL_WEIGHT}, got {config.total_weight}"
        )
    return config
