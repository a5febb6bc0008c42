"""Counting task definitions and run summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from contracts.errors import TaskIssue
from contracts.frequency import FrequencyTable


class TaskState(str, Enum):
    CREATED = "created"
    COUNTING = "counting"
    SUBMITTING = "submitting"
    COUNT_FAILED = "count_failed"
    SUBMIT_FAILED = "submit_failed"
    SPAWN_FAILED = "spawn_failed"
    DONE = "done"


_TRANSITIONS: Dict[TaskState, Tuple[TaskState, ...]] = {
    TaskState.CREATED: (TaskState.COUNTING, TaskState.SPAWN_FAILED),
    TaskState.COUNTING: (TaskState.SUBMITTING, TaskState.COUNT_FAILED),
    TaskState.SUBMITTING: (TaskState.DONE, TaskState.SUBMIT_FAILED),
    TaskState.COUNT_FAILED: (TaskState.DONE,),
    TaskState.SUBMIT_FAILED: (TaskState.DONE,),
    TaskState.SPAWN_FAILED: (TaskState.DONE,),
    TaskState.DONE: (),
}

_FAILED_STATES = (TaskState.COUNT_FAILED, TaskState.SUBMIT_FAILED, TaskState.SPAWN_FAILED)


class IllegalTransition(RuntimeError):
    """Raised when a task is moved along an edge its state machine lacks."""


@dataclass
class Task:
    """One input file's unit of work.

    A task is only ever touched by the thread executing it until it reaches
    :attr:`TaskState.DONE`; the dispatcher reads it again after the barrier.
    """

    index: int
    path: str
    state: TaskState = TaskState.CREATED
    history: List[TaskState] = field(default_factory=lambda: [TaskState.CREATED])
    table: Optional[FrequencyTable] = None
    issue: Optional[TaskIssue] = None

    def advance(self, state: TaskState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise IllegalTransition(f"{self.path}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def release_table(self) -> FrequencyTable:
        """Hand the counted table over; the task keeps no reference to it."""

        if self.table is None:
            raise RuntimeError(f"{self.path}: no table to release")
        table, self.table = self.table, None
        return table

    @property
    def done(self) -> bool:
        return self.state is TaskState.DONE

    @property
    def succeeded(self) -> bool:
        return self.done and not any(state in _FAILED_STATES for state in self.history)


@dataclass(frozen=True)
class Summary:
    """Outcome of a dispatcher run, in input order."""

    succeeded: Tuple[str, ...]
    failed: Tuple[TaskIssue, ...]
    blocks_written: int = 0

    @classmethod
    def from_tasks(cls, tasks: List[Task], *, blocks_written: int = 0) -> "Summary":
        ordered = sorted(tasks, key=lambda task: task.index)
        pending = [task.path for task in ordered if not task.done]
        if pending:
            raise RuntimeError(f"Tasks still in flight: {pending}")
        succeeded = tuple(task.path for task in ordered if task.succeeded)
        failed = tuple(task.issue for task in ordered if task.issue is not None)
        return cls(succeeded=succeeded, failed=failed, blocks_written=blocks_written)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": list(self.succeeded),
            "failed": [{"path": issue.path, "kind": issue.kind, "msg": issue.msg} for issue in self.failed],
            "blocks_written": self.blocks_written,
        }


__all__ = ["IllegalTransition", "Summary", "Task", "TaskState"]
