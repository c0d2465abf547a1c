import pytest

from frequency import FrequencyTable, count


def test_count_orders_by_symbol(cannata):
    assert count(cannata) == [("A", 3), ("C", 1), ("N", 2), ("T", 1)]


def test_count_empty_input():
    assert count([]) == []
    table = FrequencyTable.count("")
    assert len(table) == 0
    assert table.total == 0


def test_table_total_and_lookup(cannata):
    table = FrequencyTable.count(cannata)
    assert table.total == len(cannata)
    assert table["N"] == 2
    assert "Z" not in table
    assert list(table) == table.entries


def test_count_bytes_input():
    table = FrequencyTable.count(b"abca")
    assert table.entries == [(97, 2), (98, 1), (99, 1)]


def test_from_mapping_sorts_entries():
    table = FrequencyTable.from_mapping({3: 1, 1: 5, 2: 2})
    assert table.entries == [(1, 5), (2, 2), (3, 1)]


@pytest.mark.parametrize("bad", [0, -1, 1.5, "2", True])
def test_from_mapping_rejects_bad_counts(bad):
    with pytest.raises(ValueError):
        FrequencyTable.from_mapping({"a": bad})


def test_duplicate_symbols_rejected():
    with pytest.raises(ValueError):
        FrequencyTable([("a", 1), ("a", 2)])
