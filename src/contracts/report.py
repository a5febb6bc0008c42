"""Text layout of report blocks.

A report file is a sequence of blocks, one per successfully counted input.
Each block is a header naming the source, one ``<letter>: <count>`` line per
letter in alphabetical order, and a blank separator line::

    ********* Results of hamlet.txt *********
    a: 9950
    ...
    z: 71

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from .frequency import ALPHABET, FrequencyTable

HEADER_TEMPLATE = "********* Results of {source} *********"

_HEADER_RE = re.compile(r"^\*{9} Results of (?P<source>.*) \*{9}$")
_COUNT_RE = re.compile(r"^(?P<letter>[a-z]): (?P<count>\d+)$")


@dataclass(frozen=True)
class ReportBlock:
    """One source's frequency table, labelled for the report file."""

    source: str
    table: FrequencyTable

    def render(self) -> str:
        lines = [HEADER_TEMPLATE.format(source=self.source)]
        lines.extend(f"{letter}: {count}" for letter, count in self.table.items())
        lines.append("")
        return "\n".join(lines) + "\n"


def render_block(source: str, table: FrequencyTable) -> str:
    return ReportBlock(source=source, table=table).render()


def parse_report(text: str) -> List[ReportBlock]:
    """Parse report ``text`` back into blocks.

    Raises :class:`ValueError` with the offending line number when a block is
    truncated, out of order, or interleaved with another block.
    """

    lines = text.split("\n")
    # A well-formed report ends with the separator's newline.
    if lines and lines[-1] == "":
        lines.pop()

    blocks: List[ReportBlock] = []
    pos = 0
    while pos < len(lines):
        header = _HEADER_RE.match(lines[pos])
        if header is None:
            raise ValueError(f"line {pos + 1}: expected block header, got {lines[pos]!r}")
        pos += 1

        counts = []
        for letter in ALPHABET:
            if pos >= len(lines):
                raise ValueError(f"line {pos + 1}: block for {header['source']!r} is truncated")
            match = _COUNT_RE.match(lines[pos])
            if match is None or match["letter"] != letter:
                raise ValueError(f"line {pos + 1}: expected count for {letter!r}, got {lines[pos]!r}")
            counts.append(int(match["count"]))
            pos += 1

        if pos >= len(lines) or lines[pos] != "":
            raise ValueError(f"line {pos + 1}: missing blank separator after {header['source']!r}")
        pos += 1
        blocks.append(ReportBlock(source=header["source"], table=FrequencyTable(tuple(counts))))
    return blocks


__all__ = ["HEADER_TEMPLATE", "ReportBlock", "parse_report", "render_block"]
