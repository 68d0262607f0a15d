"""Turn commits into narrative summaries.

AI summaries come from the Copilot CLI; ``local_summarize`` is the
deterministic fallback used when the assistant is disabled, missing or
returns nothing.
"""

import logging
from typing import Callable, Dict, List, Optional

from devlog.core.assistant import CopilotCLI
from devlog.models.commit import Commit
from devlog.models.report import Summary

logger = logging.getLogger(__name__)

MAX_PROMPT_FILES = 5
NO_COMMITS_MESSAGE = "No commits found in this period."

FEATURE_WORDS = ("add", "new")
FIX_WORDS = ("bug", "patch")


def format_commits_for_prompt(commits: List[Commit]) -> str:
    """One line per commit: hash, subject, a few files and the diff stat."""
    lines = []
    for commit in commits:
        entry = f"- [{commit.hash_short}] {commit.message}"
        if commit.files_changed:
            files = ", ".join(commit.files_changed[:MAX_PROMPT_FILES])
            more = "..." if len(commit.files_changed) > MAX_PROMPT_FILES else ""
            entry += f" (files: {files}{more})"
        if commit.diff:
            entry += f" | {commit.diff}"
        lines.append(entry)
    return "\n".join(lines)


def classify_message(message: str) -> str:
    """Bucket a commit subject into ``features``, ``fixes`` or ``other``."""
    msg = message.lower()
    if msg.startswith("feat") or any(word in msg for word in FEATURE_WORDS):
        return "features"
    if msg.startswith("fix") or any(word in msg for word in FIX_WORDS):
        return "fixes"
    return "other"


def local_summarize(commits: List[Commit]) -> str:
    """Keyword-based summary that needs no external tool."""
    if not commits:
        return NO_COMMITS_MESSAGE

    buckets: Dict[str, List[str]] = {"features": [], "fixes": [], "other": []}
    for commit in commits:
        buckets[classify_message(commit.message)].append(commit.message)

    titles = {"features": "Features:", "fixes": "Fixes:", "other": "Other:"}
    sections = []
    for key, messages in buckets.items():
        if messages:
            bullets = "\n".join(f"  - {message}" for message in messages)
            sections.append(f"{titles[key]}\n{bullets}")
    return "\n\n".join(sections).strip()


def summarize_with_fallback(
    primary: Optional[Callable[[], str]], commits: List[Commit]
) -> Summary:
    """Use the AI summary when it produced text, else the local one."""
    if primary is not None:
        text = primary()
        if text:
            return Summary(text=text, from_ai=True)
        logger.debug("AI summary empty, falling back to local summary")
    return Summary(text=local_summarize(commits), from_ai=False)


class CopilotSummarizer:
    """Builds report prompts and asks the Copilot CLI to answer them."""

    def __init__(self, assistant: Optional[CopilotCLI] = None):
        self.assistant = assistant or CopilotCLI()

    def daily(self, commits: List[Commit], repo_name: str, author: str) -> str:
        if not commits:
            return ""
        prompt = (
            f'Summarize these git commits from today in the "{repo_name}" project '
            f"by {author} as a short developer journal entry. Group related work "
            "together. Use bullet points. Be concise but informative:\n\n"
            f"{format_commits_for_prompt(commits)}"
        )
        return self.assistant.ask(prompt)

    def standup(
        self,
        yesterday: List[Commit],
        today: List[Commit],
        repo_name: str,
        author: str,
    ) -> str:
        if not yesterday and not today:
            return ""
        yesterday_list = format_commits_for_prompt(yesterday) or "No commits yesterday"
        today_list = format_commits_for_prompt(today) or "No commits yet today"
        prompt = (
            f'Generate a standup report for developer {author} on project "{repo_name}". '
            "Format it as: YESTERDAY (what was done), TODAY (what's planned based on "
            "recent work direction), BLOCKERS (potential issues spotted). "
            f"Yesterday's commits:\n{yesterday_list}\n\n"
            f"Today's commits so far:\n{today_list}"
        )
        return self.assistant.ask(prompt)

    def weekly(self, commits: List[Commit], repo_name: str, author: str) -> str:
        if not commits:
            return ""
        prompt = (
            f'Summarize this week\'s git activity in "{repo_name}" by {author} as a '
            "weekly developer recap. Highlight key accomplishments, areas of focus, "
            "and overall progress. Use sections and bullet points:\n\n"
            f"{format_commits_for_prompt(commits)}"
        )
        return self.assistant.ask(prompt)

    def release(self, commits: List[Commit], repo_name: str, from_tag: str) -> str:
        if not commits:
            return ""
        prompt = (
            f'Generate release notes for "{repo_name}" covering changes since '
            f"{from_tag}. Categorize into: Features, Bug Fixes, Improvements, and "
            "Breaking Changes. Use markdown formatting. Only include categories "
            f"that have entries:\n\n{format_commits_for_prompt(commits)}"
        )
        return self.assistant.ask(prompt)

    def range(
        self, commits: List[Commit], repo_name: str, from_ref: str, to_ref: str
    ) -> str:
        if not commits:
            return ""
        prompt = (
            f'Summarize the git activity in "{repo_name}" from {from_ref} to '
            f"{to_ref}. Provide a narrative overview of what was accomplished, "
            "key changes, and their impact:\n\n"
            f"{format_commits_for_prompt(commits)}"
        )
        return self.assistant.ask(prompt)
