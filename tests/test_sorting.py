"""
Tests for display ordering.
"""

from wozny.schemas.quality import SortConfig, SortDirection
from wozny.services.sorting import natural_key, parse_number, parse_timestamp, sort_rows


def _rows(column, values):
    return [{column: v, "__wozny_index": str(i)} for i, v in enumerate(values)]


def _values(rows, column):
    return [r[column] for r in rows]


class TestParsers:
    def test_parse_number(self):
        assert parse_number("$1,000") == 1000.0
        assert parse_number(" -2.5 ") == -2.5
        assert parse_number("abc") is None
        assert parse_number("$") is None
        assert parse_number("inf") is None

    def test_parse_timestamp(self):
        assert parse_timestamp("2024-01-05") < parse_timestamp("2024-01-06")
        assert parse_timestamp("3/4") is None
        assert parse_timestamp("not a date") is None

    def test_natural_key(self):
        assert natural_key("item2") < natural_key("item10")
        assert natural_key("Éclair") == natural_key("eclair")


class TestSortRows:
    def test_currency_ascending(self):
        rows = _rows("price", ["$10", "2", "[MISSING]", "$1,000"])
        ordered = sort_rows(rows, SortConfig(column_id="price"))
        assert _values(ordered, "price") == ["2", "$10", "$1,000", "[MISSING]"]

    def test_currency_descending(self):
        rows = _rows("price", ["$10", "2", "[MISSING]", "$1,000"])
        ordered = sort_rows(rows, SortConfig(columnId="price", direction=SortDirection.DESC))
        assert _values(ordered, "price") == ["[MISSING]", "$1,000", "$10", "2"]

    def test_dates(self):
        rows = _rows("joined", ["2024-01-05", "March 1, 2023", "12/31/2023"])
        ordered = sort_rows(rows, SortConfig(column_id="joined"))
        assert _values(ordered, "joined") == ["March 1, 2023", "12/31/2023", "2024-01-05"]

    def test_natural_text(self):
        rows = _rows("sku", ["item10", "Item2", "item1"])
        ordered = sort_rows(rows, SortConfig(column_id="sku"))
        assert _values(ordered, "sku") == ["item1", "Item2", "item10"]

    def test_mixed_column_falls_back_to_text(self):
        rows = _rows("code", ["10", "apple", "9"])
        ordered = sort_rows(rows, SortConfig(column_id="code"))
        assert _values(ordered, "code") == ["9", "10", "apple"]

    def test_short_values_not_treated_as_dates(self):
        rows = _rows("when", ["2020", "3/4"])
        ordered = sort_rows(rows, SortConfig(column_id="when"))
        assert _values(ordered, "when") == ["3/4", "2020"]

    def test_stable_for_ties(self):
        rows = _rows("grade", ["B", "A", "b", "a"])
        ordered = sort_rows(rows, SortConfig(column_id="grade"))
        assert [r["__wozny_index"] for r in ordered] == ["1", "3", "0", "2"]

    def test_no_config_restores_original_order(self):
        rows = _rows("price", ["$10", "2", "$1,000"])
        shuffled = sort_rows(rows, SortConfig(column_id="price"))
        assert sort_rows(shuffled) == rows

    def test_input_not_mutated(self):
        rows = _rows("price", ["3", "1", "2"])
        snapshot = [dict(r) for r in rows]
        sort_rows(rows, SortConfig(column_id="price"))
        assert rows == snapshot
