"""Error taxonomy and exit codes shared by the counting pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit statuses reported by the command line front-end."""

    OK = 0
    MISSING_ARGS = 1
    INVALID_COUNT = 2
    COUNT_MISMATCH = 3
    MISSING_FILE = 4
    OUTPUT_ERROR = 5
    CONFIG_ERROR = 6
    BAD_OPTION = 7


class LetterFreqError(Exception):
    """Base class for every error raised by this project."""


class UsageError(LetterFreqError):
    """Bad or missing command line arguments."""

    def __init__(self, message: str, exit_code: ExitCode) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class MissingFileError(LetterFreqError):
    """An input file does not exist; raised before any task is started."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File {path} does not exist!")
        self.path = path


class ConfigError(LetterFreqError):
    """The configuration file could not be read or failed validation."""


class TaskError(LetterFreqError):
    """Failure local to a single counting task.

    Task errors are recorded in the run summary and never abort sibling
    tasks.  ``kind`` names the failure in summaries and event logs.
    """

    kind = "TaskError"

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class OpenError(TaskError):
    """The task could not open or read its input file."""

    kind = "OpenError"


class WriteError(TaskError):
    """The sink could not open or append to the output destination."""

    kind = "WriteError"


class SpawnError(TaskError):
    """The executor refused to start the task."""

    kind = "SpawnError"


@dataclass(frozen=True)
class TaskIssue:
    """Single task-local failure as recorded in a run summary."""

    path: str
    kind: str
    msg: str


def issue_from(error: TaskError) -> TaskIssue:
    """Construct a :class:`TaskIssue` describing ``error``."""

    return TaskIssue(path=error.path, kind=error.kind, msg=str(error))


__all__ = [
    "ConfigError",
    "ExitCode",
    "LetterFreqError",
    "MissingFileError",
    "OpenError",
    "SpawnError",
    "TaskError",
    "TaskIssue",
    "UsageError",
    "WriteError",
    "issue_from",
]
