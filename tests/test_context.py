"""Tests for doctor.context and doctor.outputs."""

import json
from pathlib import Path

import pytest

from doctor.context import ContextError, RunContext, load_run_context, parse_bool
from doctor.outputs import step_outputs, write_outputs
from doctor.scoring import Band, ScoreReport


def write_event(tmp_path: Path, payload) -> Path:
    p = tmp_path / "event.json"
    p.write_text(json.dumps(payload))
    return p


class TestParseBool:
    def test_unset_uses_default(self):
        assert parse_bool(None, default=True) is True
        assert parse_bool(None, default=False) is False

    @pytest.mark.parametrize("value", ["true", "TRUE", " True "])
    def test_true(self, value):
        assert parse_bool(value, default=False) is True

    @pytest.mark.parametrize("value", ["false", "0", "", "yes"])
    def test_anything_else_is_false(self, value):
        assert parse_bool(value, default=True) is False


class TestLoadRunContext:
    def test_pull_request_event(self, tmp_path):
        event = write_event(tmp_path, {"pull_request": {"number": 17}})
        ctx = load_run_context(
            {
                "GITHUB_EVENT_NAME": "pull_request",
                "GITHUB_REPOSITORY": "octo/widgets",
                "GITHUB_EVENT_PATH": str(event),
            }
        )
        assert ctx == RunContext(
            event_name="pull_request", repo="octo/widgets", pr_number=17, post_comment=True
        )
        assert ctx.owner == "octo"
        assert ctx.name == "widgets"
        assert ctx.can_comment is True

    def test_top_level_number_fallback(self, tmp_path):
        event = write_event(tmp_path, {"number": 5})
        ctx = load_run_context(
            {"GITHUB_EVENT_NAME": "pull_request", "GITHUB_EVENT_PATH": str(event)}
        )
        assert ctx.pr_number == 5

    def test_push_event_cannot_comment(self):
        ctx = load_run_context({"GITHUB_EVENT_NAME": "push", "GITHUB_REPOSITORY": "o/r"})
        assert ctx.is_pull_request is False
        assert ctx.pr_number is None
        assert ctx.can_comment is False

    def test_posting_disabled(self):
        ctx = load_run_context(
            {"GITHUB_EVENT_NAME": "pull_request", "GITHUB_REPOSITORY": "o/r", "POST_COMMENT": "false"},
            pr_override=3,
        )
        assert ctx.post_comment is False
        assert ctx.can_comment is False

    def test_pr_override_skips_event_file(self):
        ctx = load_run_context(
            {
                "GITHUB_EVENT_NAME": "pull_request",
                "GITHUB_REPOSITORY": "o/r",
                "GITHUB_EVENT_PATH": "/nonexistent/event.json",
            },
            pr_override=9,
        )
        assert ctx.pr_number == 9

    def test_unreadable_event_file(self, tmp_path):
        with pytest.raises(ContextError, match="unable to read event payload"):
            load_run_context(
                {
                    "GITHUB_EVENT_NAME": "pull_request",
                    "GITHUB_EVENT_PATH": str(tmp_path / "missing.json"),
                }
            )

    def test_invalid_event_json(self, tmp_path):
        event = tmp_path / "event.json"
        event.write_text("{nope")
        with pytest.raises(ContextError, match="invalid JSON"):
            load_run_context(
                {"GITHUB_EVENT_NAME": "pull_request", "GITHUB_EVENT_PATH": str(event)}
            )

    def test_event_without_number(self, tmp_path):
        event = write_event(tmp_path, {"pull_request": {"number": "12"}})
        ctx = load_run_context(
            {"GITHUB_EVENT_NAME": "pull_request", "GITHUB_REPOSITORY": "o/r", "GITHUB_EVENT_PATH": str(event)}
        )
        assert ctx.pr_number is None
        assert ctx.can_comment is False


class TestOutputs:
    def test_step_outputs(self):
        report = ScoreReport(score=72, band=Band("😐", "Needs work"), deducted=28, findings_count=2)
        assert step_outputs(report) == {"score": "72", "has_findings": "true"}

    def test_clean_outputs(self):
        report = ScoreReport(score=100, band=Band("😊", "Great"), deducted=0, findings_count=0)
        assert step_outputs(report) == {"score": "100", "has_findings": "false"}

    def test_write_outputs_appends(self, tmp_path):
        out = tmp_path / "github_output"
        out.write_text("earlier=1\n")
        write_outputs(out, {"score": "72", "has_findings": "true"})
        assert out.read_text() == "earlier=1\nscore=72\nhas_findings=true\n"

    def test_multiline_value_uses_delimiter(self, tmp_path):
        out = tmp_path / "github_output"
        write_outputs(out, {"summary": "a\nb"})
        lines = out.read_text().splitlines()
        assert lines[0].startswith("summary<<PYDOCTOR_SUMMARY_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:] == ["a", "b", delimiter]
