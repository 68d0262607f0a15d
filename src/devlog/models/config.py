"""User configuration model."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Default output format of report commands."""

    TERMINAL = "terminal"
    MARKDOWN = "markdown"
    JSON = "json"


class Config(BaseModel):
    """Settings read from a .devlogrc file."""

    format: OutputFormat = OutputFormat.TERMINAL
    use_copilot: bool = Field(default=True, alias="useCopilot")
    author: Optional[str] = None
    show_files: bool = Field(default=True, alias="showFiles")
    show_stats: bool = Field(default=True, alias="showStats")
    max_commits: int = Field(default=100, alias="maxCommits", gt=0)

    model_config = {"populate_by_name": True, "frozen": True}
