"""Fan-out of counting tasks with a blocking completion barrier."""

from __future__ import annotations

import logging
import threading
from functools import partial
from os import PathLike
from typing import Callable, Iterable, List, Union

from contracts.errors import OpenError, SpawnError, TaskError, TaskIssue, WriteError, issue_from
from contracts.frequency import FrequencyTable
from counting.letters import count_letters

from . import log as event_log
from .barrier import InFlightCounter
from .executor import Executor, ThreadedExecutor
from .sink import ReportSink
from .task import Summary, Task, TaskState

_LOGGER = logging.getLogger(__name__)

CountFn = Callable[[str], FrequencyTable]


class Dispatcher:
    """Runs one counting task per input file and joins them all.

    The in-flight counter shares the sink's lock, so the write step and the
    task accounting are guarded by the same mutual-exclusion primitive.  When
    no executor is supplied a :class:`ThreadedExecutor` is created for each
    run and shut down once the barrier is passed.
    """

    def __init__(
        self,
        sink: ReportSink,
        *,
        executor: Executor | None = None,
        max_workers: int = 0,
        counter: CountFn = count_letters,
    ) -> None:
        self.sink = sink
        self.executor = executor
        self.max_workers = max_workers
        self.counter = counter
        self._in_flight = InFlightCounter(lock=sink.lock)
        self._claim_lock = threading.Lock()

    @property
    def in_flight(self) -> int:
        return self._in_flight.value

    def run(self, paths: Iterable[Union[str, PathLike]]) -> Summary:
        tasks = [Task(index=index, path=str(path)) for index, path in enumerate(paths)]
        executor = self.executor
        owned = executor is None
        if executor is None:
            executor = ThreadedExecutor(self.max_workers)
        resize = getattr(executor, "resize", None)
        if resize is not None:
            resize(len(tasks))

        _LOGGER.info("Dispatching %d counting task(s)", len(tasks))
        try:
            for task in tasks:
                self._in_flight.increment()
                try:
                    executor.spawn(f"count-{task.index}", partial(self._execute, task))
                except RuntimeError as exc:
                    self._spawn_failed(task, exc)
            self._in_flight.wait()
        finally:
            if owned:
                executor.shutdown()

        summary = Summary.from_tasks(tasks, blocks_written=self.sink.blocks_written)
        _LOGGER.info(
            "All tasks finished: %d succeeded, %d failed",
            len(summary.succeeded),
            len(summary.failed),
        )
        _emit({"event": "run.completed", **summary.to_dict()})
        return summary

    def _claim(self, task: Task, state: TaskState) -> bool:
        """Move ``task`` out of CREATED; only the first caller succeeds.

        A pool may still run work whose spawn was reported as failed, so the
        task body and the spawn-failure path race for the task here.  The
        winner alone finishes the task and decrements the in-flight counter.
        """

        with self._claim_lock:
            if task.state is not TaskState.CREATED:
                return False
            task.advance(state)
            return True

    def _execute(self, task: Task) -> None:
        if not self._claim(task, TaskState.COUNTING):
            return
        try:
            try:
                task.table = self.counter(task.path)
            except OpenError as exc:
                self._fail(task, TaskState.COUNT_FAILED, exc)
                return

            task.advance(TaskState.SUBMITTING)
            try:
                self.sink.submit(task.path, task.release_table())
            except WriteError as exc:
                self._fail(task, TaskState.SUBMIT_FAILED, exc)
                return
            task.advance(TaskState.DONE)
        except Exception as exc:  # keep the failure local to this task
            _LOGGER.exception("Unexpected failure while processing %s", task.path)
            self._crashed(task, exc)
        finally:
            try:
                _emit(_task_event(task))
            finally:
                self._in_flight.decrement()

    def _fail(self, task: Task, state: TaskState, exc: TaskError) -> None:
        _LOGGER.error("%s", exc)
        task.issue = issue_from(exc)
        task.advance(state)
        task.advance(TaskState.DONE)

    def _crashed(self, task: Task, exc: Exception) -> None:
        task.table = None
        task.issue = TaskIssue(path=task.path, kind=TaskError.kind, msg=repr(exc))
        failed_state = {
            TaskState.COUNTING: TaskState.COUNT_FAILED,
            TaskState.SUBMITTING: TaskState.SUBMIT_FAILED,
        }.get(task.state)
        if failed_state is not None:
            task.advance(failed_state)
        if not task.done:
            task.advance(TaskState.DONE)

    def _spawn_failed(self, task: Task, exc: RuntimeError) -> None:
        if not self._claim(task, TaskState.SPAWN_FAILED):
            return
        error = SpawnError(task.path, f"Could not start task for {task.path}: {exc}")
        try:
            _LOGGER.error("%s", error)
            task.issue = issue_from(error)
            task.advance(TaskState.DONE)
            _emit(_task_event(task))
        finally:
            self._in_flight.decrement()


def _task_event(task: Task) -> dict:
    event = {
        "event": "task.completed",
        "path": task.path,
        "states": [state.value for state in task.history],
        "ok": task.succeeded,
    }
    if task.issue is not None:
        event["error_kind"] = task.issue.kind
        event["error"] = task.issue.msg
    return event


def _emit(event: dict) -> None:
    try:
        event_log.append_event(event)
    except OSError as exc:
        _LOGGER.warning("Could not write event log entry: %s", exc)


def run_letter_count(
    paths: List[Union[str, PathLike]],
    destination: Union[str, PathLike],
    *,
    executor: Executor | None = None,
    max_workers: int = 0,
    counter: CountFn = count_letters,
) -> Summary:
    """Reset ``destination`` and write one report block per readable input."""

    sink = ReportSink(destination)
    sink.reset()
    dispatcher = Dispatcher(sink, executor=executor, max_workers=max_workers, counter=counter)
    return dispatcher.run(paths)


__all__ = ["CountFn", "Dispatcher", "run_letter_count"]
