"""Weighted-deduction health score."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from doctor.results import ToolResult

MAX_SCORE = 100


@dataclass(frozen=True)
class Band:
    emoji: str
    label: str


@dataclass(frozen=True)
class ScoreReport:
    score: int
    band: Band
    deducted: int
    findings_count: int

    @property
    def has_findings(self) -> bool:
        return self.findings_count > 0


# Inclusive lower bounds, highest first.
SCORE_BANDS: tuple[tuple[int, Band], ...] = (
    (90, Band("😊", "Great")),
    (75, Band("🙂", "Good")),
    (50, Band("😐", "Needs work")),
)
CRITICAL_BAND = Band("😞", "Critical")


def score_band(score: int) -> Band:
    """Map a score to its label + emoji."""
    for floor, band in SCORE_BANDS:
        if score >= floor:
            return band
    return CRITICAL_BAND


def score_results(results: Sequence[ToolResult]) -> ScoreReport:
    """Deduct each failing tool's weight from 100, floored at 0."""
    findings = [r for r in results if r.has_findings]
    deducted = sum(r.tool.weight for r in findings)
    score = max(0, MAX_SCORE - deducted)
    return ScoreReport(
        score=score,
        band=score_band(score),
        deducted=deducted,
        findings_count=len(findings),
    )
