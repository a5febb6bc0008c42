"""Immutable letter frequency tables."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, Tuple

ALPHABET = string.ascii_lowercase
NUM_LETTERS = len(ALPHABET)

_ZERO: Tuple[int, ...] = (0,) * NUM_LETTERS


@dataclass(frozen=True)
class FrequencyTable:
    """Occurrence counts for the letters ``a`` to ``z``.

    ``counts[i]`` holds the number of times ``ALPHABET[i]`` was seen, upper
    and lower case combined.  Tables are immutable once built; counters
    accumulate into a plain list and wrap it at the end.
    """

    counts: Tuple[int, ...] = field(default=_ZERO)

    def __post_init__(self) -> None:
        counts = tuple(self.counts)
        if len(counts) != NUM_LETTERS:
            raise ValueError(f"Frequency table needs {NUM_LETTERS} counts, got {len(counts)}")
        for value in counts:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Counts must be non-negative integers, got {value!r}")
        object.__setattr__(self, "counts", counts)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> "FrequencyTable":
        """Build a table from ``{letter: count}``; missing letters count zero."""

        unknown = set(mapping) - set(ALPHABET)
        if unknown:
            raise KeyError(f"Not lowercase ASCII letters: {sorted(unknown)}")
        return cls(tuple(mapping.get(letter, 0) for letter in ALPHABET))

    def __getitem__(self, key: str | int) -> int:
        if isinstance(key, str):
            if len(key) != 1 or key.lower() not in ALPHABET:
                raise KeyError(key)
            return self.counts[ALPHABET.index(key.lower())]
        return self.counts[key]

    def __add__(self, other: "FrequencyTable") -> "FrequencyTable":
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return FrequencyTable(tuple(a + b for a, b in zip(self.counts, other.counts)))

    def total(self) -> int:
        return sum(self.counts)

    def items(self) -> Iterator[Tuple[str, int]]:
        """Yield ``(letter, count)`` pairs in alphabetical order."""

        return zip(ALPHABET, self.counts)

    def as_dict(self) -> Dict[str, int]:
        return dict(self.items())


__all__ = ["ALPHABET", "NUM_LETTERS", "FrequencyTable"]
