"""Case-insensitive letter counting over a file's byte stream."""

from __future__ import annotations

from os import PathLike
from typing import List, Union

from contracts.errors import OpenError
from contracts.frequency import ALPHABET, FrequencyTable

DEFAULT_CHUNK_SIZE = 64 * 1024

_LETTER_BYTES = [letter.encode("ascii") for letter in ALPHABET]


def count_letters(path: Union[str, PathLike], *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> FrequencyTable:
    """Count the letters ``a``-``z`` in ``path``, folding upper case onto lower.

    The file is read as raw bytes, so only ASCII letters are counted; bytes
    belonging to multi-byte sequences, digits, punctuation and whitespace are
    skipped.  Any failure to open or read the file is raised as
    :class:`~contracts.errors.OpenError`.
    """

    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")

    name = str(path)
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise OpenError(name, f"Error opening file {name}: {exc.strerror or exc}") from exc

    counts: List[int] = [0] * len(ALPHABET)
    with handle:
        try:
            while True:
                chunk = handle.read(chunk_size)
                if not chunk:
                    break
                # bytes.lower() only folds A-Z, which is exactly the bucket rule.
                folded = chunk.lower()
                for index, letter in enumerate(_LETTER_BYTES):
                    counts[index] += folded.count(letter)
        except OSError as exc:
            raise OpenError(name, f"Error reading file {name}: {exc.strerror or exc}") from exc

    return FrequencyTable(tuple(counts))


__all__ = ["DEFAULT_CHUNK_SIZE", "count_letters"]
