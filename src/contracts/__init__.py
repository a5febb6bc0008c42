"""Shared value types, report layout and error taxonomy."""

from __future__ import annotations

from .errors import (
    ConfigError,
    ExitCode,
    LetterFreqError,
    MissingFileError,
    OpenError,
    SpawnError,
    TaskError,
    TaskIssue,
    UsageError,
    WriteError,
)
from .frequency import ALPHABET, FrequencyTable
from .report import ReportBlock, parse_report, render_block

__all__ = [
    "ALPHABET",
    "ConfigError",
    "ExitCode",
    "FrequencyTable",
    "LetterFreqError",
    "MissingFileError",
    "OpenError",
    "ReportBlock",
    "SpawnError",
    "TaskError",
    "TaskIssue",
    "UsageError",
    "WriteError",
    "parse_report",
    "render_block",
]
