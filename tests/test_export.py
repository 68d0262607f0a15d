"""Tests for markdown and JSON export."""

import json
from datetime import datetime, timezone

from devlog.cli.export import (
    export_daily_markdown,
    export_json,
    export_release_markdown,
    export_weekly_markdown,
)
from devlog.core.grouping import group_commits_by_date
from devlog.models.commit import Commit
from devlog.models.report import RangeRefs, ReportEnvelope


def make_commit(index: int, message: str, day: int = 4, files=None) -> Commit:
    sha = f"{index:040x}"
    return Commit(
        hash=sha,
        hash_short=sha[:7],
        date=datetime(2025, 3, day, 12, 0, tzinfo=timezone.utc),
        message=message,
        author="Test User",
        email="test@example.com",
        files_changed=files or [],
        diff="1 file changed, 2 insertions(+)" if files else "",
    )


def test_daily_markdown():
    commits = [make_commit(1, "feat: login", files=["auth.py"]), make_commit(2, "docs")]

    md = export_daily_markdown("myrepo", "March 4, 2025", commits, "Did things")

    assert md.startswith("# Dev Log — myrepo\n")
    assert "**Date:** March 4, 2025" in md
    assert "**Commits:** 2" in md
    assert "## Summary\n\nDid things\n" in md
    assert f"- `{commits[0].hash_short}` feat: login" in md
    assert "  - Files: `auth.py`" in md
    assert md.index("## Summary") < md.index("## Commits")


def test_daily_markdown_without_summary():
    md = export_daily_markdown("myrepo", "today", [make_commit(1, "chore")], "")

    assert "## Summary" not in md
    assert "## Commits" in md


def test_weekly_markdown_sections_per_day():
    commits = [make_commit(1, "newest", day=5), make_commit(2, "older", day=3)]
    groups = group_commits_by_date(commits)

    md = export_weekly_markdown("myrepo", groups, "Week summary", len(commits))

    assert md.startswith("# Weekly Recap — myrepo\n")
    assert "**Active days:** 2" in md
    for group in groups:
        assert f"## {group.label}" in md
    assert md.index("newest") < md.index("older")


def test_release_markdown():
    commits = [make_commit(1, "feat: export")]

    md = export_release_markdown("myrepo", "v1.2.0", commits, "### Features\n- export")

    assert md.startswith("# Release Notes — myrepo\n")
    assert "**Since:** v1.2.0" in md
    assert "### Features\n- export" in md
    assert "## Changes" in md


def test_json_envelope_daily():
    commit = make_commit(1, "feat: login", files=["auth.py"])
    envelope = ReportEnvelope(
        type="daily",
        repo="myrepo",
        branch="main",
        author="Jane",
        commit_count=1,
        commits=[commit],
        summary="text",
    )

    data = json.loads(export_json(envelope))

    assert data["type"] == "daily"
    assert data["commitCount"] == 1
    assert "tag" not in data
    assert "range" not in data
    entry = data["commits"][0]
    assert entry["hashShort"] == commit.hash_short
    assert entry["filesChanged"] == ["auth.py"]
    assert entry["date"].startswith("2025-03-04T12:00:00")


def test_json_envelope_recap_range():
    envelope = ReportEnvelope(
        type="recap",
        repo="myrepo",
        range=RangeRefs(from_ref="abc123", to_ref="def456"),
        commit_count=0,
        commits=[],
        summary="",
    )

    data = json.loads(export_json(envelope))

    assert data["range"] == {"from": "abc123", "to": "def456"}
    assert data["commits"] == []


def test_json_envelope_release_notes_key():
    envelope = ReportEnvelope(type="release", repo="r", tag="v1", release_notes="n")

    data = json.loads(export_json(envelope))

    assert data["releaseNotes"] == "n"
    assert data["tag"] == "v1"
