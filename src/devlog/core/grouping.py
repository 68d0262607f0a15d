"""Group commits by the calendar day they were made."""

from typing import Dict, List

from devlog.models.commit import Commit, CommitGroup


def format_day_label(commit: Commit) -> str:
    """Full date label such as ``Tuesday, March 4, 2025``."""
    moment = commit.date.astimezone()
    return f"{moment:%A, %B} {moment.day}, {moment.year}"


def group_commits_by_date(commits: List[Commit]) -> List[CommitGroup]:
    """Bucket commits by local calendar day, most recent day first.

    Commits keep their input order inside a group; only the groups are
    sorted, by the timestamp of each group's first commit.
    """
    buckets: Dict[object, List[Commit]] = {}
    for commit in commits:
        buckets.setdefault(commit.local_day, []).append(commit)

    groups = [
        CommitGroup(label=format_day_label(day_commits[0]), commits=day_commits)
        for day_commits in buckets.values()
    ]
    groups.sort(key=lambda group: group.commits[0].date, reverse=True)
    return groups
