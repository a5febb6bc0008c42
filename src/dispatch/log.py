"""Optional JSONL log of task and run events.

Nothing is written until :func:`configure` names a directory.  Events go to
``<dir>/<YYYYMMDD>/events_NN.jsonl``; a file that reaches ``max_bytes``
is left behind and the next number is used.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

__all__ = ["configure", "disable", "is_enabled", "append_event", "current_log_path"]


class _EventWriter:
    def __init__(self, base_dir: Path, max_bytes: int) -> None:
        self.base_dir = base_dir
        self.max_bytes = max_bytes
        self.path: Path | None = None

    def _target(self, now: datetime) -> Path:
        day_dir = self.base_dir / now.strftime("%Y%m%d")
        if self.path is not None and self.path.parent == day_dir and self._has_room(self.path):
            return self.path
        day_dir.mkdir(parents=True, exist_ok=True)
        index = 0
        while not self._has_room(day_dir / f"events_{index:02d}.jsonl"):
            index += 1
        self.path = day_dir / f"events_{index:02d}.jsonl"
        return self.path

    def _has_room(self, path: Path) -> bool:
        return not path.exists() or path.stat().st_size < self.max_bytes

    def write(self, event: Dict[str, Any]) -> Path:
        now = datetime.now(timezone.utc)
        record = {"ts": now.isoformat(timespec="milliseconds"), **event}
        path = self._target(now)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True) + "\n")
        return path


_LOCK = threading.Lock()
_WRITER: _EventWriter | None = None


def configure(base_dir: str | Path, *, max_bytes: int = 100 * 1024 * 1024) -> None:
    global _WRITER
    with _LOCK:
        _WRITER = _EventWriter(Path(base_dir), max_bytes)


def disable() -> None:
    global _WRITER
    with _LOCK:
        _WRITER = None


def is_enabled() -> bool:
    return _WRITER is not None


def append_event(event: Dict[str, Any]) -> Path | None:
    """Write ``event`` with a UTC timestamp; ``None`` when logging is off."""

    with _LOCK:
        if _WRITER is None:
            return None
        return _WRITER.write(event)


def current_log_path() -> Path | None:
    writer = _WRITER
    return writer.path if writer is not None else None
