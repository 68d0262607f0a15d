"""Markdown and JSON export of reports."""

from typing import List

from devlog.models.commit import Commit, CommitGroup
from devlog.models.report import ReportEnvelope


def _commit_lines(commits: List[Commit]) -> List[str]:
    lines = []
    for commit in commits:
        lines.append(f"- `{commit.hash_short}` {commit.message}")
        if commit.files_changed:
            files = ", ".join(f"`{path}`" for path in commit.files_changed)
            lines.append(f"  - Files: {files}")
        if commit.diff:
            lines.append(f"  - {commit.diff}")
    return lines


def _summary_lines(summary: str) -> List[str]:
    if not summary:
        return []
    return ["## Summary", "", summary, ""]


def export_daily_markdown(
    repo_name: str, date_label: str, commits: List[Commit], summary: str
) -> str:
    """Markdown journal entry for one day (also used for standups and recaps)."""
    lines = [
        f"# Dev Log — {repo_name}",
        "",
        f"**Date:** {date_label}  ",
        f"**Commits:** {len(commits)}",
        "",
    ]
    lines += _summary_lines(summary)
    lines += ["## Commits", ""] + _commit_lines(commits)
    return "\n".join(lines) + "\n"


def export_weekly_markdown(
    repo_name: str, groups: List[CommitGroup], summary: str, commit_count: int
) -> str:
    """Markdown weekly recap with one section per day."""
    lines = [
        f"# Weekly Recap — {repo_name}",
        "",
        f"**Commits:** {commit_count}  ",
        f"**Active days:** {len(groups)}",
        "",
    ]
    lines += _summary_lines(summary)
    for group in groups:
        lines += [f"## {group.label}", ""] + _commit_lines(group.commits) + [""]
    return "\n".join(lines).rstrip("\n") + "\n"


def export_release_markdown(
    repo_name: str, tag: str, commits: List[Commit], summary: str
) -> str:
    """Markdown release notes for the commits since ``tag``."""
    lines = [
        f"# Release Notes — {repo_name}",
        "",
        f"**Since:** {tag}  ",
        f"**Commits:** {len(commits)}",
        "",
    ]
    if summary:
        lines += [summary, ""]
    lines += ["## Changes", ""] + _commit_lines(commits)
    return "\n".join(lines) + "\n"


def export_json(envelope: ReportEnvelope) -> str:
    """Pretty-printed JSON document, absent fields omitted."""
    return envelope.model_dump_json(by_alias=True, exclude_none=True, indent=2)
