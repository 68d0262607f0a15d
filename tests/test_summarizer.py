"""Tests for prompt building, the local summarizer and the fallback strategy."""

from datetime import datetime, timezone
from typing import List

import pytest

from devlog.core.summarizer import (
    NO_COMMITS_MESSAGE,
    CopilotSummarizer,
    classify_message,
    format_commits_for_prompt,
    local_summarize,
    summarize_with_fallback,
)
from devlog.models.commit import Commit


class RecordingAssistant:
    """Stands in for CopilotCLI and remembers every prompt."""

    def __init__(self, answer: str = ""):
        self.answer = answer
        self.prompts: List[str] = []

    def is_available(self) -> bool:
        return True

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


def make_commit(message: str, files=None, diff: str = "", index: int = 1) -> Commit:
    sha = f"{index:040x}"
    return Commit(
        hash=sha,
        hash_short=sha[:7],
        date=datetime(2025, 3, 4, 12, 0, tzinfo=timezone.utc),
        message=message,
        author="Test User",
        files_changed=files or [],
        diff=diff,
    )


class TestLocalSummarize:
    def test_no_commits(self):
        assert local_summarize([]) == NO_COMMITS_MESSAGE

    def test_buckets_in_order(self):
        commits = [
            make_commit("fix: crash on startup", index=1),
            make_commit("feat: dark mode", index=2),
            make_commit("Update docs", index=3),
        ]

        summary = local_summarize(commits)

        assert summary == (
            "Features:\n  - feat: dark mode\n\n"
            "Fixes:\n  - fix: crash on startup\n\n"
            "Other:\n  - Update docs"
        )

    def test_only_nonempty_sections(self):
        summary = local_summarize([make_commit("Refactor parser")])

        assert summary == "Other:\n  - Refactor parser"
        assert "Features:" not in summary
        assert "Fixes:" not in summary

    def test_each_commit_in_exactly_one_bucket(self):
        messages = [
            "feat: login",
            "Add bug workaround",
            "fix: typo",
            "Patch release script",
            "chore: bump deps",
            "New onboarding flow",
        ]
        commits = [make_commit(m, index=i) for i, m in enumerate(messages)]

        summary = local_summarize(commits)

        for message in messages:
            assert summary.count(f"  - {message}\n") + summary.endswith(
                f"  - {message}"
            ) == 1

    def test_result_is_trimmed(self):
        summary = local_summarize([make_commit("feat: x")])
        assert summary == summary.strip()


class TestClassifyMessage:
    @pytest.mark.parametrize(
        "message,bucket",
        [
            ("feat: add search", "features"),
            ("FEAT(ui): toolbar", "features"),
            ("Add retry helper", "features"),
            ("Brand new page", "features"),
            ("fix: null pointer", "fixes"),
            ("Resolve BUG in parser", "fixes"),
            ("patch release", "fixes"),
            ("docs: readme", "other"),
            ("Refactor module layout", "other"),
        ],
    )
    def test_buckets(self, message, bucket):
        assert classify_message(message) == bucket

    def test_features_win_over_fixes(self):
        """A message matching both is a feature: features are checked first."""
        assert classify_message("add bug report template") == "features"
        assert classify_message("fix: add missing null check") == "features"


class TestPromptFormatting:
    def test_commit_line(self):
        commit = make_commit(
            "feat: add login",
            files=["src/auth.py", "tests/test_auth.py"],
            diff="2 files changed, 40 insertions(+)",
        )

        line = format_commits_for_prompt([commit])

        assert line == (
            f"- [{commit.hash_short}] feat: add login "
            "(files: src/auth.py, tests/test_auth.py) "
            "| 2 files changed, 40 insertions(+)"
        )

    def test_files_capped_at_five(self):
        files = [f"file{i}.py" for i in range(7)]
        line = format_commits_for_prompt([make_commit("Big change", files=files)])

        assert "file4.py" in line
        assert "file5.py" not in line
        assert "file4.py...)" in line

    def test_bare_commit(self):
        commit = make_commit("Initial commit")
        assert format_commits_for_prompt([commit]) == (
            f"- [{commit.hash_short}] Initial commit"
        )

    def test_one_line_per_commit(self):
        commits = [make_commit(f"commit {i}", index=i) for i in range(3)]
        assert len(format_commits_for_prompt(commits).splitlines()) == 3


class TestCopilotSummarizer:
    def test_empty_commits_skip_assistant(self):
        assistant = RecordingAssistant("unused")
        summarizer = CopilotSummarizer(assistant)

        assert summarizer.daily([], "repo", "Dev") == ""
        assert summarizer.weekly([], "repo", "Dev") == ""
        assert summarizer.release([], "repo", "v1.0") == ""
        assert summarizer.range([], "repo", "a", "b") == ""
        assert summarizer.standup([], [], "repo", "Dev") == ""
        assert assistant.prompts == []

    def test_daily_prompt_context(self):
        assistant = RecordingAssistant("- Worked on login")
        commit = make_commit("feat: add login")

        result = CopilotSummarizer(assistant).daily([commit], "myrepo", "Jane")

        assert result == "- Worked on login"
        prompt = assistant.prompts[0]
        assert '"myrepo"' in prompt
        assert "Jane" in prompt
        assert f"[{commit.hash_short}] feat: add login" in prompt

    def test_standup_prompt_marks_empty_day(self):
        assistant = RecordingAssistant("report")
        commit = make_commit("fix: login redirect")

        CopilotSummarizer(assistant).standup([commit], [], "myrepo", "Jane")

        prompt = assistant.prompts[0]
        assert "YESTERDAY" in prompt and "BLOCKERS" in prompt
        assert "fix: login redirect" in prompt
        assert "No commits yet today" in prompt

    def test_release_prompt_mentions_tag(self):
        assistant = RecordingAssistant("notes")
        CopilotSummarizer(assistant).release([make_commit("feat: x")], "myrepo", "v2.1.0")

        assert "since v2.1.0" in assistant.prompts[0]
        assert "Breaking Changes" in assistant.prompts[0]

    def test_range_prompt_mentions_refs(self):
        assistant = RecordingAssistant("recap")
        CopilotSummarizer(assistant).range(
            [make_commit("feat: x")], "myrepo", "abc123", "def456"
        )

        assert "from abc123 to def456" in assistant.prompts[0]

    def test_failure_returns_empty_string(self):
        assistant = RecordingAssistant("")
        assert CopilotSummarizer(assistant).daily([make_commit("x")], "r", "a") == ""


class TestFallbackStrategy:
    def test_uses_primary_text(self):
        commits = [make_commit("feat: x")]

        summary = summarize_with_fallback(lambda: "AI text", commits)

        assert summary.text == "AI text"
        assert summary.from_ai

    def test_empty_primary_falls_back(self):
        commits = [make_commit("feat: x")]

        summary = summarize_with_fallback(lambda: "", commits)

        assert not summary.from_ai
        assert summary.text == "Features:\n  - feat: x"

    def test_no_primary_uses_local(self):
        summary = summarize_with_fallback(None, [make_commit("chore: deps")])

        assert not summary.from_ai
        assert summary.text.startswith("Other:")
