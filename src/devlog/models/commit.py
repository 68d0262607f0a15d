"""Commit models read from git history."""

from datetime import datetime
from typing import List

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class Commit(BaseModel):
    """A single commit as read from the repository."""

    hash: str
    hash_short: str
    date: datetime
    message: str
    body: str = ""
    author: str
    email: str = ""
    files_changed: List[str] = []
    diff: str = ""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @property
    def local_day(self):
        """Calendar date of the commit in the local timezone."""
        return self.date.astimezone().date()


class CommitGroup(BaseModel):
    """Commits sharing one calendar day."""

    label: str
    commits: List[Commit]

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
