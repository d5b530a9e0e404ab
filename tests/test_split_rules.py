"""
Tests for address / name parsing and column splitting.
"""

import pytest

from wozny.schemas.quality import AddressComponents, NameComponents, SplitType
from wozny.services.split_rules import (
    apply_split,
    get_splittable_type,
    parse_address,
    parse_full_name,
    smart_split_column,
)

MISSING = "[MISSING]"


class TestParseAddress:
    def test_known_zip_overrides_city(self):
        assert parse_address("123 Main St, Manhattan, NY 10001") == AddressComponents(
            Street="123 Main St", City="New York", State="NY", Zip="10001",
        )

    def test_known_zip_without_commas(self):
        parsed = parse_address("45 Elm Ave Quincy MA 02169")
        assert parsed.Street == "45 Elm Ave"
        assert parsed.City == "Quincy"
        assert parsed.State == "MA"

    def test_known_zip_without_suffix_strips_tail(self):
        parsed = parse_address("500 Broadway New York NY 10012")
        assert parsed == AddressComponents(
            Street="500 Broadway", City="New York", State="NY", Zip="10012",
        )

    def test_unknown_zip_suffix_anchored(self):
        assert parse_address("742 Evergreen Terrace, Springfield, IL 62704") == AddressComponents(
            Street="742 Evergreen Terrace", City="Springfield", State="IL", Zip="62704",
        )

    def test_unknown_zip_single_token_city(self):
        parsed = parse_address("9 Foo Bar Springfield IL 62704")
        assert parsed.Street == "9 Foo Bar"
        assert parsed.City == "Springfield"
        assert parsed.State == "IL"

    def test_invalid_state_falls_back(self):
        raw = "12 Main St Springfield ZZ 62704"
        assert parse_address(raw) == AddressComponents(
            Street=raw, City=MISSING, State=MISSING, Zip=MISSING,
        )

    def test_comma_delimited_without_zip(self):
        assert parse_address("12 Oak Lane, Smallville, Kansas") == AddressComponents(
            Street="12 Oak Lane", City="Smallville", State="KA", Zip=MISSING,
        )

    def test_plus_four_zip(self):
        parsed = parse_address("1 Beacon St, Boston, MA 02108-1234")
        assert parsed.City == "Boston"
        assert parsed.Zip == "02108-1234"

    @pytest.mark.parametrize("raw", ["1 A", "x" * 201])
    def test_length_bounds(self, raw):
        parsed = parse_address(raw)
        assert parsed.Street == raw
        assert parsed.City == MISSING

    def test_lowercase_input_title_cased(self):
        parsed = parse_address("742 evergreen terrace, springfield, il 62704")
        assert parsed.Street == "742 Evergreen Terrace"
        assert parsed.City == "Springfield"
        assert parsed.State == "IL"


class TestParseFullName:
    def test_honorific_and_middle(self):
        assert parse_full_name("Dr. jane q public") == NameComponents(First="Jane", Middle="Q", Last="Public")

    def test_two_tokens(self):
        assert parse_full_name("john SMITH") == NameComponents(First="John", Middle="", Last="Smith")

    def test_single_token(self):
        assert parse_full_name("Cher") == NameComponents(First="Cher", Middle="", Last="")

    @pytest.mark.parametrize("raw", ["", "A", " "])
    def test_too_short(self, raw):
        assert parse_full_name(raw) is None


class TestSplittableType:
    def test_addresses(self):
        values = [
            "1 Main St", "2 Oak Ave", "3 Pine Rd", "4 Elm Blvd", "5 Lake Dr",
        ]
        assert get_splittable_type(values) == SplitType.ADDRESS

    def test_names(self):
        values = ["Jane Doe", "John Smith", "Ann Lee", "Bob Ray", "Eve Moss"]
        assert get_splittable_type(values) == SplitType.NAME

    def test_business_names_not_split(self):
        values = ["Acme Corp", "Beta Inc", "Gamma LLC", "Delta Group", "Omega Ltd"]
        assert get_splittable_type(values) == SplitType.NONE

    def test_too_few_values(self):
        assert get_splittable_type(["Jane Doe", "John Smith", "[MISSING]", "", "n/a"]) == SplitType.NONE

    def test_low_uniqueness(self):
        values = ["Jane Doe"] * 8 + ["John Smith"] * 2
        assert get_splittable_type(values) == SplitType.NONE


class TestSmartSplit:
    def test_counts_skip_missing(self):
        rows = [
            {"addr": "123 Main St, Manhattan, NY 10001"},
            {"addr": MISSING},
            {"addr": "nowhere special"},
        ]
        outcome = smart_split_column(rows, "addr", SplitType.ADDRESS)
        assert outcome.success_count == 1
        assert outcome.fail_count == 1
        assert outcome.results[1] is None
        assert outcome.results[2].Street == "nowhere special"

    def test_single_token_name_counts_as_success(self):
        rows = [{"who": "Cher"}, {"who": "A"}]
        outcome = smart_split_column(rows, "who", SplitType.NAME)
        assert outcome.results[0] == NameComponents(First="Cher", Middle="", Last="")
        assert outcome.success_count == 1
        assert outcome.fail_count == 1


class TestApplySplit:
    def test_columns_inserted_after_source(self):
        columns = ["id", "addr", "note"]
        rows = [
            {"id": "1", "addr": "123 Main St, Manhattan, NY 10001", "note": "x", "__wozny_index": "0"},
            {"id": "2", "addr": MISSING, "note": "y", "__wozny_index": "1"},
        ]
        new_rows, new_columns, outcome = apply_split(rows, columns, "addr", SplitType.ADDRESS)

        assert new_columns == [
            "id", "addr", "addr_Street", "addr_City", "addr_State", "addr_Zip", "note",
        ]
        assert new_rows[0]["addr_City"] == "New York"
        assert new_rows[0]["addr"] == "123 Main St, Manhattan, NY 10001"
        assert new_rows[1]["addr_Street"] == MISSING
        assert [r["__wozny_index"] for r in new_rows] == ["0", "1"]
        assert outcome.success_count == 1
        assert "addr_City" not in rows[0]

    def test_name_split_keeps_empty_middle(self):
        rows = [{"who": "Jane Doe"}, {"who": "Cher"}]
        new_rows, new_columns, _ = apply_split(rows, ["who"], "who", SplitType.NAME)
        assert new_columns == ["who", "who_First", "who_Middle", "who_Last"]
        assert new_rows[0] == {"who": "Jane Doe", "who_First": "Jane", "who_Middle": "", "who_Last": "Doe"}
        assert new_rows[1]["who_Last"] == ""

    def test_none_type_is_noop(self):
        rows = [{"a": "1"}]
        new_rows, new_columns, _ = apply_split(rows, ["a"], "a", SplitType.NONE)
        assert new_rows == rows
        assert new_columns == ["a"]
