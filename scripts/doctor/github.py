"""GitHub PR comment utilities.

One report comment per PR, identified by an HTML marker at the start of its
body. Replacing it is delete-then-create; nothing here retries, so any API
failure propagates and fails the step.
"""
from __future__ import annotations

import json
import os
import subprocess
import tempfile
from dataclasses import dataclass


class CommentPermissionError(Exception):
    """Token lacks pull-requests: write permission."""


class GitHubAPIError(Exception):
    """GitHub API returned a payload we can't use."""


@dataclass(frozen=True)
class CommentSyncResult:
    deleted: int
    created: bool
    comment_id: int | None = None


def _run_gh(args: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a gh CLI command.

    Raises:
        CommentPermissionError: Token lacks pull-requests: write permission
        subprocess.CalledProcessError: Other gh CLI failures
    """
    result = subprocess.run(
        ["gh", *args], capture_output=True, text=True, check=False
    )
    if result.returncode == 0:
        return result

    stderr = (result.stderr or "").lower()
    if any(s in stderr for s in ("403", "resource not accessible", "insufficient")):
        raise CommentPermissionError(
            "Unable to manage PR comment: token lacks pull-requests: write permission.\n"
            "Add this to your workflow:\n"
            "permissions:\n"
            "  contents: read\n"
            "  pull-requests: write"
        )
    raise subprocess.CalledProcessError(
        result.returncode, result.args, result.stdout, result.stderr
    )


def fetch_comments(
    repo: str,
    pr_number: int,
    *,
    per_page: int = 100,
    max_pages: int = 20,
) -> list[dict]:
    """Fetch all issue comments for a PR (paginated, oldest first)."""
    comments: list[dict] = []
    for page in range(1, max_pages + 1):
        endpoint = f"repos/{repo}/issues/{pr_number}/comments?per_page={per_page}&page={page}"
        result = _run_gh(["api", endpoint])
        try:
            payload = json.loads(result.stdout or "[]")
        except json.JSONDecodeError as exc:
            raise GitHubAPIError(f"invalid JSON from {endpoint}: {exc}") from exc
        if not isinstance(payload, list):
            raise GitHubAPIError(
                f"unexpected comments payload type: {type(payload).__name__}"
            )
        if not payload:
            break
        comments.extend([c for c in payload if isinstance(c, dict)])
        if len(payload) < per_page:
            break
    return comments


def find_comment_ids_by_marker(comments: list[dict], marker: str) -> list[int]:
    """IDs of comments whose body starts with the marker, most recent first."""
    ids: list[int] = []
    for comment in reversed(comments):
        body = comment.get("body")
        if not isinstance(body, str) or not body.startswith(marker):
            continue
        comment_id = comment.get("id")
        if isinstance(comment_id, int) and not isinstance(comment_id, bool):
            ids.append(comment_id)
    return ids


def delete_comment(repo: str, comment_id: int) -> None:
    _run_gh(["api", "-X", "DELETE", f"repos/{repo}/issues/comments/{comment_id}"])


def create_comment(repo: str, pr_number: int, body: str) -> dict:
    """Create an issue comment; returns the API response."""
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", suffix=".json", delete=False
    ) as handle:
        json.dump({"body": body}, handle)
        tmp_path = handle.name

    try:
        result = _run_gh(
            [
                "api",
                "-X",
                "POST",
                f"repos/{repo}/issues/{pr_number}/comments",
                "--input",
                tmp_path,
            ]
        )
    finally:
        os.unlink(tmp_path)

    try:
        data = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as exc:
        raise GitHubAPIError(f"invalid JSON from comment create: {exc}") from exc
    return data if isinstance(data, dict) else {}


def delete_marked_comments(
    repo: str,
    pr_number: int,
    marker: str,
    *,
    comments: list[dict] | None = None,
) -> int:
    """Delete every comment carrying the marker. Returns how many were deleted."""
    if comments is None:
        comments = fetch_comments(repo, pr_number)
    ids = find_comment_ids_by_marker(comments, marker)
    for comment_id in ids:
        delete_comment(repo, comment_id)
    return len(ids)


def sync_report_comment(
    *,
    repo: str,
    pr_number: int,
    marker: str,
    body: str | None,
    comments: list[dict] | None = None,
) -> CommentSyncResult:
    """Leave the PR with exactly the report comment for this run.

    body=None clears any stale report (clean run). Otherwise the old
    report is deleted and a fresh one created. Not atomic: a crash between
    the two leaves no comment until the next run.
    """
    deleted = delete_marked_comments(repo, pr_number, marker, comments=comments)
    if body is None:
        return CommentSyncResult(deleted=deleted, created=False)

    created = create_comment(repo, pr_number, body)
    comment_id = created.get("id")
    if not isinstance(comment_id, int) or isinstance(comment_id, bool):
        comment_id = None
    return CommentSyncResult(deleted=deleted, created=True, comment_id=comment_id)
