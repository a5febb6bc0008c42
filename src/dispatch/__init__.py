"""Concurrent dispatch of counting tasks to a shared report sink."""

from .barrier import InFlightCounter
from .dispatcher import Dispatcher, run_letter_count
from .executor import Executor, SequentialExecutor, ThreadedExecutor, make_executor
from .sink import ReportSink
from .task import Summary, Task, TaskState
from . import log

__all__ = [
    "Dispatcher",
    "Executor",
    "InFlightCounter",
    "ReportSink",
    "SequentialExecutor",
    "Summary",
    "Task",
    "TaskState",
    "ThreadedExecutor",
    "log",
    "make_executor",
    "run_letter_count",
]
