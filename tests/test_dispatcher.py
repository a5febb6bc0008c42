from __future__ import annotations

import logging
import threading

from contracts.frequency import FrequencyTable
from contracts.report import parse_report
from counting.letters import count_letters
from dispatch.dispatcher import Dispatcher, run_letter_count
from dispatch.executor import SequentialExecutor, ThreadedExecutor
from dispatch.sink import ReportSink


def _inputs(tmp_path, count: int) -> list[str]:
    paths = []
    for idx in range(count):
        path = tmp_path / f"in{idx}.txt"
        path.write_text("ab" * (idx + 1))
        paths.append(str(path))
    return paths


def _sink(tmp_path) -> ReportSink:
    sink = ReportSink(tmp_path / "results.txt")
    sink.reset()
    return sink


def test_three_files_give_three_blocks(tmp_path) -> None:
    paths = _inputs(tmp_path, 3)
    out = tmp_path / "results.txt"

    summary = run_letter_count(paths, out)

    blocks = parse_report(out.read_text())
    assert len(blocks) == 3
    assert sorted(block.source for block in blocks) == sorted(paths)
    by_source = {block.source: block.table for block in blocks}
    assert by_source[paths[2]]["a"] == 3
    assert summary.succeeded == tuple(paths)
    assert summary.failed == ()
    assert summary.blocks_written == 3


def test_rerun_appends_unless_reset(tmp_path) -> None:
    paths = _inputs(tmp_path, 3)
    sink = _sink(tmp_path)
    dispatcher = Dispatcher(sink)

    dispatcher.run(paths)
    dispatcher.run(paths)
    assert len(parse_report(sink.destination.read_text())) == 6

    sink.reset()
    dispatcher.run(paths)
    assert len(parse_report(sink.destination.read_text())) == 3


def test_zero_tasks_complete_immediately(tmp_path) -> None:
    dispatcher = Dispatcher(_sink(tmp_path))
    summary = dispatcher.run([])
    assert summary.total == 0
    assert dispatcher.in_flight == 0


def test_tasks_run_in_parallel(tmp_path) -> None:
    paths = _inputs(tmp_path, 4)
    rendezvous = threading.Barrier(4, timeout=5)

    def counter(path: str) -> FrequencyTable:
        # Only returns if all four tasks are counting at the same time.
        rendezvous.wait()
        return count_letters(path)

    summary = Dispatcher(_sink(tmp_path), counter=counter).run(paths)
    assert len(summary.succeeded) == 4


def test_run_waits_for_every_task(tmp_path) -> None:
    paths = _inputs(tmp_path, 5)
    gate = threading.Event()
    sink = _sink(tmp_path)

    def counter(path: str) -> FrequencyTable:
        gate.wait(5)
        return count_letters(path)

    dispatcher = Dispatcher(sink, counter=counter)
    result = {}

    def run() -> None:
        result["summary"] = dispatcher.run(paths)

    runner = threading.Thread(target=run)
    runner.start()
    runner.join(timeout=0.2)

    assert runner.is_alive()
    assert dispatcher.in_flight == 5
    assert "summary" not in result

    gate.set()
    runner.join(timeout=5)
    assert not runner.is_alive()
    assert dispatcher.in_flight == 0
    assert len(result["summary"].succeeded) == 5
    assert sink.blocks_written == 5


def test_open_error_is_task_local(tmp_path, caplog) -> None:
    paths = _inputs(tmp_path, 2)
    missing = str(tmp_path / "gone.txt")
    sink = _sink(tmp_path)

    with caplog.at_level(logging.ERROR):
        summary = Dispatcher(sink).run([paths[0], missing, paths[1]])

    assert summary.succeeded == (paths[0], paths[1])
    assert [(issue.path, issue.kind) for issue in summary.failed] == [(missing, "OpenError")]
    assert len(parse_report(sink.destination.read_text())) == 2
    assert any(missing in record.getMessage() for record in caplog.records)


def test_write_error_is_task_local(tmp_path) -> None:
    paths = _inputs(tmp_path, 3)
    sink = ReportSink(tmp_path / "no-such-dir" / "results.txt")
    dispatcher = Dispatcher(sink)

    summary = dispatcher.run(paths)

    assert summary.succeeded == ()
    assert [issue.kind for issue in summary.failed] == ["WriteError"] * 3
    assert dispatcher.in_flight == 0


def test_spawn_failure_is_recorded(tmp_path) -> None:
    executor = SequentialExecutor()
    executor.shutdown()
    dispatcher = Dispatcher(_sink(tmp_path), executor=executor)

    summary = dispatcher.run(_inputs(tmp_path, 2))

    assert [issue.kind for issue in summary.failed] == ["SpawnError", "SpawnError"]
    assert dispatcher.in_flight == 0


def test_unexpected_exception_is_contained(tmp_path) -> None:
    paths = _inputs(tmp_path, 3)

    def counter(path: str) -> FrequencyTable:
        if path == paths[1]:
            raise ZeroDivisionError("boom")
        return count_letters(path)

    dispatcher = Dispatcher(_sink(tmp_path), counter=counter)
    summary = dispatcher.run(paths)

    assert summary.succeeded == (paths[0], paths[2])
    assert [(issue.path, issue.kind) for issue in summary.failed] == [(paths[1], "TaskError")]
    assert dispatcher.in_flight == 0


def test_sequential_executor_runs_in_input_order(tmp_path) -> None:
    paths = _inputs(tmp_path, 4)
    sink = _sink(tmp_path)

    Dispatcher(sink, executor=SequentialExecutor()).run(paths)

    assert [block.source for block in parse_report(sink.destination.read_text())] == paths


def test_worker_cap_limits_concurrency(tmp_path) -> None:
    paths = _inputs(tmp_path, 8)
    lock = threading.Lock()
    active = {"now": 0, "peak": 0}

    def counter(path: str) -> FrequencyTable:
        with lock:
            active["now"] += 1
            active["peak"] = max(active["peak"], active["now"])
        try:
            threading.Event().wait(0.02)
            return count_letters(path)
        finally:
            with lock:
                active["now"] -= 1

    executor = ThreadedExecutor(max_workers=2)
    try:
        summary = Dispatcher(_sink(tmp_path), executor=executor, counter=counter).run(paths)
    finally:
        executor.shutdown()

    assert len(summary.succeeded) == 8
    assert active["peak"] <= 2


class _RunsThenRefuses:
    """Runs the task inline, then reports the spawn as failed."""

    def spawn(self, name, fn) -> None:
        fn()
        raise RuntimeError("can't start new thread")

    def shutdown(self) -> None:
        pass


class _RefusesThenRunsLater:
    """Reports the spawn as failed but keeps the work queued."""

    def __init__(self) -> None:
        self.queued = []

    def spawn(self, name, fn) -> None:
        self.queued.append(fn)
        raise RuntimeError("can't start new thread")

    def shutdown(self) -> None:
        pass


def test_task_that_ran_despite_spawn_error_counts_once(tmp_path) -> None:
    paths = _inputs(tmp_path, 3)
    sink = _sink(tmp_path)
    dispatcher = Dispatcher(sink, executor=_RunsThenRefuses())

    summary = dispatcher.run(paths)

    assert summary.succeeded == tuple(paths)
    assert summary.failed == ()
    assert dispatcher.in_flight == 0
    assert len(parse_report(sink.destination.read_text())) == 3


def test_late_run_after_spawn_error_is_ignored(tmp_path) -> None:
    paths = _inputs(tmp_path, 2)
    sink = _sink(tmp_path)
    executor = _RefusesThenRunsLater()
    dispatcher = Dispatcher(sink, executor=executor)

    summary = dispatcher.run(paths)
    for fn in executor.queued:
        fn()

    assert [issue.kind for issue in summary.failed] == ["SpawnError", "SpawnError"]
    assert dispatcher.in_flight == 0
    assert sink.destination.read_text() == ""
