from __future__ import annotations

import pytest

from contracts.frequency import ALPHABET, FrequencyTable


def test_default_table_is_all_zero() -> None:
    table = FrequencyTable()
    assert table.counts == (0,) * 26
    assert table.total() == 0


def test_lookup_by_letter_and_index() -> None:
    table = FrequencyTable.from_mapping({"a": 3, "z": 1})
    assert table["a"] == 3
    assert table["A"] == 3
    assert table[25] == 1
    assert table["m"] == 0


def test_items_are_alphabetical() -> None:
    table = FrequencyTable(tuple(range(26)))
    assert [letter for letter, _ in table.items()] == list(ALPHABET)
    assert table.as_dict()["c"] == 2


def test_rejects_wrong_length_and_negative_counts() -> None:
    with pytest.raises(ValueError):
        FrequencyTable((1, 2, 3))
    with pytest.raises(ValueError):
        FrequencyTable((-1,) + (0,) * 25)


def test_rejects_unknown_letters() -> None:
    with pytest.raises(KeyError):
        FrequencyTable.from_mapping({"ä": 1})
    with pytest.raises(KeyError):
        FrequencyTable()["1"]


def test_tables_add_elementwise() -> None:
    left = FrequencyTable.from_mapping({"a": 1, "b": 2})
    right = FrequencyTable.from_mapping({"b": 3, "q": 4})
    assert (left + right).as_dict() == {**{letter: 0 for letter in ALPHABET}, "a": 1, "b": 5, "q": 4}


def test_table_is_immutable() -> None:
    table = FrequencyTable()
    with pytest.raises(AttributeError):
        table.counts = (1,) * 26  # type: ignore[misc]
