#!/usr/bin/env python3
"""Score analyzer output and post (or clear) the Python Doctor PR comment."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path

from doctor.context import ContextError, RunContext, load_run_context
from doctor.github import CommentPermissionError, GitHubAPIError, sync_report_comment
from doctor.outputs import step_outputs, write_outputs
from doctor.render_comment import MARKER, TITLE, render_comment
from doctor.results import ResultReadError, read_all
from doctor.scoring import ScoreReport, score_results
from doctor.tools_config import (
    ConfigError,
    ToolsConfig,
    default_tools_config,
    load_tools_config,
)


def fail(message: str, code: int = 1) -> int:
    """Fail."""
    print(f"::error::post-comment: {message}", file=sys.stderr)
    return code


def warn(message: str) -> None:
    """Warn."""
    print(f"::warning::{message}", file=sys.stderr)


def notice(message: str) -> None:
    """Notice."""
    print(f"::notice::{message}", file=sys.stderr)


def resolve_config(config_path: str, env: Mapping[str, str]) -> ToolsConfig:
    path = (config_path or env.get("PYDOCTOR_CONFIG") or "").strip()
    if not path:
        return default_tools_config()
    return load_tools_config(Path(path))


def publish_outputs(report: ScoreReport, github_output: str) -> None:
    outputs = step_outputs(report)
    if github_output:
        write_outputs(Path(github_output), outputs)
        return
    for key, value in outputs.items():
        print(f"{key}={value}")


def sync_comment(ctx: RunContext, body: str | None) -> None:
    """Post the report, or clear a stale one when this run is clean."""
    if body is None or not ctx.can_comment:
        if body is None:
            notice(f"{TITLE}: no issues found — skipping comment.")
        elif ctx.is_pull_request and ctx.pr_number is None:
            warn(f"{TITLE}: pull_request event without a PR number — skipping comment.")

        # A clean run still removes the report left by an earlier, dirtier run.
        if ctx.can_comment:
            result = sync_report_comment(
                repo=ctx.repo, pr_number=ctx.pr_number, marker=MARKER, body=None
            )
            if result.deleted:
                notice(f"{TITLE}: removed stale PR comment.")
        return

    sync_report_comment(repo=ctx.repo, pr_number=ctx.pr_number, marker=MARKER, body=body)
    notice(f"💬 {TITLE}: PR comment posted.")


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Score static-analysis output and upsert the Python Doctor PR comment.",
    )
    parser.add_argument(
        "--config",
        default="",
        help="Tools config YAML (default: env PYDOCTOR_CONFIG, else built-in tools).",
    )
    parser.add_argument(
        "--pr",
        type=int,
        default=None,
        help="PR number (default: read from GITHUB_EVENT_PATH).",
    )
    parser.add_argument(
        "--github-output",
        default="",
        help="Path to GITHUB_OUTPUT file (default: env GITHUB_OUTPUT, else stdout).",
    )
    parser.add_argument(
        "--output",
        default="",
        help="Also write the rendered comment markdown to this path.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the comment to stdout instead of calling the GitHub API.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, env: Mapping[str, str] | None = None) -> int:
    """Main."""
    args = parse_args(argv)
    env = os.environ if env is None else env

    try:
        config = resolve_config(args.config, env)
    except ConfigError as exc:
        return fail(f"tools config error: {exc}", code=2)

    try:
        results = read_all(config)
    except ResultReadError as exc:
        return fail(str(exc))

    report = score_results(results)
    try:
        publish_outputs(report, args.github_output or env.get("GITHUB_OUTPUT", ""))
    except OSError as exc:
        return fail(f"unable to write step outputs: {exc}")
    notice(f"🐍 Python Doctor — score: {report.score}/100 ({report.band.label})")

    body = render_comment(results, report) if report.has_findings else None

    if body is not None and args.output:
        try:
            Path(args.output).write_text(body, encoding="utf-8")
        except OSError as exc:
            return fail(f"unable to write {args.output}: {exc}")

    if args.dry_run:
        print(body if body is not None else f"{TITLE}: no issues found.")
        return 0

    try:
        ctx = load_run_context(env, pr_override=args.pr)
        sync_comment(ctx, body)
    except ContextError as exc:
        return fail(str(exc))
    except CommentPermissionError as exc:
        return fail(str(exc))
    except GitHubAPIError as exc:
        return fail(f"GitHub API error: {exc}")
    except subprocess.CalledProcessError as exc:
        return fail(f"gh command failed: {exc.stderr or exc}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
