"""Serialized writer for the shared report destination."""

from __future__ import annotations

import threading
from os import PathLike
from pathlib import Path
from typing import Optional, Union

from contracts.errors import WriteError
from contracts.frequency import FrequencyTable
from contracts.report import ReportBlock


class ReportSink:
    """Append-only report writer owning one destination file.

    Every submission renders its block first and then holds :attr:`lock` for
    the whole open-append-close sequence, so two blocks never interleave.
    Source names that came from undecodable file names are written back as
    their original bytes.
    """

    def __init__(
        self,
        destination: Union[str, PathLike],
        *,
        lock: Optional[threading.Lock] = None,
        encoding: str = "utf-8",
    ) -> None:
        self.destination = Path(destination)
        self.encoding = encoding
        self._lock = lock if lock is not None else threading.Lock()
        self._written = 0

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    @property
    def blocks_written(self) -> int:
        with self._lock:
            return self._written

    def reset(self) -> None:
        """Create or truncate the destination before any submissions."""

        with self._lock:
            try:
                with self.destination.open("w", encoding=self.encoding, errors="surrogateescape"):
                    pass
            except OSError as exc:
                raise WriteError(str(self.destination), f"Error resetting output file: {exc}") from exc
            self._written = 0

    def submit(self, source: str, table: FrequencyTable) -> ReportBlock:
        block = ReportBlock(source=source, table=table)
        payload = block.render()
        with self._lock:
            try:
                with self.destination.open("a", encoding=self.encoding, errors="surrogateescape") as handle:
                    handle.write(payload)
            except OSError as exc:
                raise WriteError(source, f"Error opening output file {self.destination}: {exc}") from exc
            self._written += 1
        return block


__all__ = ["ReportSink"]
