"""Render the Python Doctor PR comment from scored tool results."""

from __future__ import annotations

from collections.abc import Sequence

from doctor.markdown import code_block, details_block, score_bar, truncate_block, truncate_body
from doctor.results import ToolResult
from doctor.scoring import ScoreReport
from doctor.tools_config import ToolSpec

MARKER = "<!-- python-doctor -->"

# Per-tool cap so one noisy analyzer can't crowd out the others.
MAX_TOOL_CHARS = 8000

# GitHub PR comments are rejected above 65,536 chars.
# Budget headroom so the notice always fits.
MAX_COMMENT_SIZE = 60000

TRUNCATION_NOTICE = (
    "\n\n⚠️ _Comment truncated — total output exceeded GitHub's 65 536-char limit._"
)

TITLE = "🐍 Python Doctor"


def section_title(tool: ToolSpec) -> str:
    if tool.description:
        return f"{tool.label} ({tool.description})"
    return tool.label


def render_section(tool: ToolSpec, content: str) -> str:
    """Collapsible section for a tool that has findings."""
    body = truncate_block(content, max_len=MAX_TOOL_CHARS)
    lines = details_block(
        code_block(body),
        summary=f"<strong>{section_title(tool)}</strong>",
    )
    return "\n".join(lines)


def passed_line(clean: Sequence[ToolResult]) -> str:
    if not clean:
        return ""
    return "\n**Passed:** " + " · ".join(r.tool.label for r in clean) + "\n"


def render_comment(
    results: Sequence[ToolResult],
    report: ScoreReport,
    *,
    marker: str = MARKER,
) -> str:
    """Full comment body, capped at MAX_COMMENT_SIZE."""
    findings = [r for r in results if r.has_findings]
    clean = [r for r in results if not r.has_findings]

    sections = [render_section(r.tool, r.content or "") for r in findings]

    body = "\n".join(
        [
            marker,
            f"## {TITLE} {report.band.emoji}",
            "",
            f"**Health Score: {report.score}/100** — {report.band.label}",
            f"`{score_bar(report.score)}`",
            passed_line(clean),
            "---",
            "",
            "\n\n".join(sections),
        ]
    )

    return truncate_body(body, max_len=MAX_COMMENT_SIZE, notice=TRUNCATION_NOTICE)
