"""Report models: summaries and the JSON export envelope."""

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .commit import Commit, CommitGroup


class Summary(BaseModel):
    """Summary text and where it came from."""

    text: str
    from_ai: bool = False


class RangeRefs(BaseModel):
    """Endpoints of a recap range."""

    from_ref: str = Field(alias="from")
    to_ref: str = Field(alias="to")

    model_config = {"populate_by_name": True}


class ReportEnvelope(BaseModel):
    """JSON document emitted by --json; fields depend on the command."""

    type: str
    repo: str
    branch: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    week: Optional[str] = None
    tag: Optional[str] = None
    range: Optional[RangeRefs] = None
    commit_count: Optional[int] = None
    commits: Optional[List[Commit]] = None
    groups: Optional[List[CommitGroup]] = None
    yesterday: Optional[List[Commit]] = None
    today: Optional[List[Commit]] = None
    summary: Optional[str] = None
    release_notes: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
