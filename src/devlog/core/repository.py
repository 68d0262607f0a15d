"""Read commit history from a git repository."""

import logging
import re
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

import git
from git import Repo

from devlog.errors import NotAGitRepository
from devlog.models.commit import Commit

logger = logging.getLogger(__name__)

INITIAL_TAG = "(initial)"
DEFAULT_AUTHOR = "Developer"

# Unit and record separators keep subjects and bodies intact while parsing.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%aI", "%an", "%ae", "%s", "%b"]) + _RECORD_SEP

_REMOTE_NAME_RE = re.compile(r"[/:]([^/:]+?)(?:\.git)?/?$")
_GIT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Return the first and last second of a calendar day."""
    return datetime.combine(day, time.min), datetime.combine(
        day, time(23, 59, 59)
    )


def week_bounds(day: date) -> Tuple[datetime, datetime]:
    """Return the bounds of the Monday-to-Sunday week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    sunday = monday + timedelta(days=6)
    return day_bounds(monday)[0], day_bounds(sunday)[1]


def parse_log_output(output: str) -> List[dict]:
    """Split ``git log`` output produced with the devlog format into fields."""
    entries = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        fields = record.split(_FIELD_SEP)
        if len(fields) < 6:
            logger.debug("Skipping malformed log record: %r", record[:80])
            continue
        full_hash, iso_date, author, email, subject, body = fields[:6]
        entries.append(
            {
                "hash": full_hash.strip(),
                "date": datetime.fromisoformat(iso_date.strip()),
                "author": author,
                "email": email,
                "message": subject,
                "body": body.strip(),
            }
        )
    return entries


def derive_repo_name(remote_url: Optional[str], root: Optional[Path]) -> str:
    """Name a repository after its remote URL, else its root directory."""
    if remote_url:
        match = _REMOTE_NAME_RE.search(remote_url.strip())
        if match:
            return match.group(1)
    if root is not None and Path(root).name:
        return Path(root).name
    return "unknown"


class GitHistoryReader:
    """Extracts commits and repository metadata through git."""

    def __init__(self, cwd: Optional[Path] = None, max_commits: Optional[int] = None):
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.max_commits = max_commits
        try:
            self.repo = Repo(self.cwd, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise NotAGitRepository(self.cwd) from e
        if self.repo.bare:
            raise NotAGitRepository(self.cwd)

    @property
    def root(self) -> Path:
        """Top-level directory of the work tree."""
        return Path(self.repo.working_tree_dir)

    def commits_today(self, today: Optional[date] = None) -> List[Commit]:
        """Commits authored today."""
        start, end = day_bounds(today or date.today())
        return self._commits_between(start, end)

    def commits_yesterday(self, today: Optional[date] = None) -> List[Commit]:
        """Commits authored yesterday."""
        start, end = day_bounds((today or date.today()) - timedelta(days=1))
        return self._commits_between(start, end)

    def commits_this_week(self, today: Optional[date] = None) -> List[Commit]:
        """Commits authored in the current Monday-to-Sunday week."""
        start, end = week_bounds(today or date.today())
        return self._commits_between(start, end)

    def commits_since_last_tag(self) -> Tuple[str, List[Commit]]:
        """Return the most recent tag and the commits made after it.

        Without any tag, every commit is returned along with a placeholder
        tag label.
        """
        try:
            tag = self.repo.git.describe("--tags", "--abbrev=0").strip()
        except git.exc.GitCommandError:
            logger.debug("No tag found, using full history")
            return INITIAL_TAG, self._log()
        return tag, self._log(f"{tag}..HEAD")

    def commits_in_range(self, from_ref: str, to_ref: str) -> List[Commit]:
        """Commits reachable from ``to_ref`` but not from ``from_ref``."""
        return self._log(f"{from_ref}..{to_ref}")

    def repo_name(self) -> str:
        """Repository name from the origin remote or the work tree directory."""
        remote_url = None
        try:
            remote_url = self.repo.remote("origin").url
        except (ValueError, git.exc.GitCommandError):
            logger.debug("No origin remote, naming repository after its root")
        return derive_repo_name(remote_url, self.root)

    def current_branch(self) -> str:
        """Name of the checked-out branch, ``HEAD`` when detached."""
        try:
            return self.repo.git.rev_parse("--abbrev-ref", "HEAD").strip()
        except git.exc.GitCommandError:
            # Unborn branch: HEAD has no commit yet but still names a branch.
            return self.repo.head.reference.name

    def author_name(self) -> str:
        """Configured git user name."""
        try:
            name = self.repo.git.config("user.name").strip()
        except git.exc.GitCommandError:
            return DEFAULT_AUTHOR
        return name or DEFAULT_AUTHOR

    def _commits_between(self, start: datetime, end: datetime) -> List[Commit]:
        return self._log(
            f"--after={start.strftime(_GIT_DATE_FORMAT)}",
            f"--before={end.strftime(_GIT_DATE_FORMAT)}",
        )

    def _log(self, *args: str) -> List[Commit]:
        """Run ``git log`` and build Commit records, newest first."""
        if not self.repo.head.is_valid():
            logger.debug("Repository has no commits yet")
            return []

        log_args = [f"--format={_LOG_FORMAT}"]
        if self.max_commits:
            log_args.append(f"--max-count={self.max_commits}")
        output = self.repo.git.log(*log_args, *args)

        commits = []
        for entry in parse_log_output(output):
            diff, files = self._commit_diff(entry["hash"])
            commits.append(
                Commit(
                    hash=entry["hash"],
                    hash_short=entry["hash"][:7],
                    date=entry["date"],
                    message=entry["message"],
                    body=entry["body"],
                    author=entry["author"],
                    email=entry["email"],
                    files_changed=files,
                    diff=diff,
                )
            )
        return commits

    def _commit_diff(self, commit_hash: str) -> Tuple[str, List[str]]:
        """Shortstat line and changed paths of a commit against its parent."""
        parent = f"{commit_hash}~1"
        try:
            stat = self.repo.git.diff(parent, commit_hash, "--shortstat")
            names = self.repo.git.diff(parent, commit_hash, "--name-only")
        except git.exc.GitCommandError:
            logger.debug("Commit %s has no parent, skipping diff", commit_hash[:7])
            return "", []
        files = [line.strip() for line in names.splitlines() if line.strip()]
        return stat.strip(), files
