"""Workflow run context: event kind, target PR, and the posting toggle."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


class ContextError(RuntimeError):
    """Workflow context is missing or malformed."""


@dataclass(frozen=True)
class RunContext:
    event_name: str
    repo: str
    pr_number: int | None
    post_comment: bool = True

    @property
    def owner(self) -> str:
        return self.repo.partition("/")[0]

    @property
    def name(self) -> str:
        return self.repo.partition("/")[2]

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == "pull_request"

    @property
    def can_comment(self) -> bool:
        """Posting enabled, PR event, and a target thread to post on."""
        return (
            self.post_comment
            and self.is_pull_request
            and bool(self.repo)
            and self.pr_number is not None
        )


def parse_bool(value: str | None, *, default: bool) -> bool:
    """Only a literal "true" enables a toggle; unset falls back to default."""
    if value is None:
        return default
    return value.strip().lower() == "true"


def _as_pr_number(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def pr_number_from_event(path: Path) -> int | None:
    """PR number from the GITHUB_EVENT_PATH payload, if the event has one."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ContextError(f"unable to read event payload {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ContextError(f"invalid JSON in event payload {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ContextError(f"invalid event payload {path}: expected object")

    pull_request = payload.get("pull_request")
    if isinstance(pull_request, dict):
        number = _as_pr_number(pull_request.get("number"))
        if number is not None:
            return number
    return _as_pr_number(payload.get("number"))


def load_run_context(
    env: Mapping[str, str],
    *,
    pr_override: int | None = None,
) -> RunContext:
    """Build the run context from the Actions environment."""
    event_name = (env.get("GITHUB_EVENT_NAME") or "").strip()
    repo = (env.get("GITHUB_REPOSITORY") or "").strip()
    post_comment = parse_bool(env.get("POST_COMMENT"), default=True)

    pr_number = pr_override
    if pr_number is None:
        event_path = (env.get("GITHUB_EVENT_PATH") or "").strip()
        if event_path and event_name == "pull_request":
            pr_number = pr_number_from_event(Path(event_path))

    return RunContext(
        event_name=event_name,
        repo=repo,
        pr_number=pr_number,
        post_comment=post_comment,
    )
