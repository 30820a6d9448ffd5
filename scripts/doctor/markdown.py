"""Markdown helpers for Python Doctor PR comments.

Keep surface area small: score bar + truncation + <details> blocks.
"""

from __future__ import annotations

import math

BAR_SEGMENTS = 10
BAR_FILLED = "█"
BAR_EMPTY = "░"


def score_bar(score: int) -> str:
    """Ten-segment bar, one filled segment per 10 points (half rounds up)."""
    filled = math.floor(score / BAR_SEGMENTS + 0.5)
    filled = max(0, min(BAR_SEGMENTS, filled))
    return BAR_FILLED * filled + BAR_EMPTY * (BAR_SEGMENTS - filled)


def truncate_block(text: str, *, max_len: int) -> str:
    """Cut text to max_len chars and say how much was dropped."""
    if len(text) <= max_len:
        return text
    omitted = len(text) - max_len
    return text[:max_len] + f"\n\n… _(truncated — {omitted} chars omitted)_"


def truncate_body(body: str, *, max_len: int, notice: str) -> str:
    """Hard cap for a whole comment; the result always ends with notice."""
    if len(body) <= max_len:
        return body
    return body[: max_len - len(notice)] + notice


def code_block(text: str) -> list[str]:
    """Code block."""
    return ["```", text, "```"]


def details_block(body_lines: list[str], *, summary: str = "Details") -> list[str]:
    """Details block."""
    if not body_lines:
        return []
    return [
        "<details>",
        f"<summary>{summary}</summary>",
        "",
        *body_lines,
        "</details>",
    ]
