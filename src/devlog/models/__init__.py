"""Data models for devlog."""

from .commit import Commit, CommitGroup
from .config import Config, OutputFormat
from .report import RangeRefs, ReportEnvelope, Summary

__all__ = [
    "Commit",
    "CommitGroup",
    "Config",
    "OutputFormat",
    "RangeRefs",
    "ReportEnvelope",
    "Summary",
]
