"""
Unit tests for text utilities and table files.

Run: pytest tests/unit/test_utils.py -v
"""

import pytest

from utils.tables import read_table, write_table
from utils.text_utils import from_yes_no, is_blank, leading_token, normalize_code, to_yes_no


class TestNormalizeCode:
    """Tests for normalize_code()"""

    @pytest.mark.parametrize("raw, expected", [
        (" ABC-1 ", "abc-1"),
        ("Sku1", "sku1"),
        ("\tX\n", "x"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_code(raw) == expected


class TestFlags:
    """Tests for the yes/no helpers and is_blank()"""

    def test_round_trip(self):
        assert from_yes_no(to_yes_no(True)) is True
        assert from_yes_no(to_yes_no(False)) is False

    def test_from_yes_no_is_lenient(self):
        assert from_yes_no(" YES ") is True
        assert from_yes_no("") is False
        assert from_yes_no(None) is False
        assert from_yes_no("true") is False

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("   ")
        assert not is_blank(" x ")


class TestLeadingToken:
    """Tests for leading_token()"""

    def test_status_prefix(self):
        assert leading_token("404: Product not found") == "404"

    def test_no_colon_returns_whole_message(self):
        assert leading_token("Read timed out") == "Read timed out"

    def test_empty_is_unknown(self):
        assert leading_token("") == "Unknown"
        assert leading_token(": nothing before") == "Unknown"


class TestTables:
    """Tests for write_table() / read_table()"""

    def test_values_come_back_as_strings(self, tmp_path):
        path = tmp_path / "t.csv"

        write_table(path, [{"id": 7, "sku": "0012", "name": ""}], ["id", "sku", "name"])

        assert read_table(path) == [{"id": "7", "sku": "0012", "name": ""}]

    def test_column_order_is_fixed(self, tmp_path):
        path = tmp_path / "t.csv"

        write_table(path, [{"b": "2", "a": "1"}], ["a", "b"])

        assert path.read_text().splitlines()[0] == "a,b"

    def test_commas_and_quotes_survive(self, tmp_path):
        path = tmp_path / "t.csv"

        write_table(path, [{"name": 'Widget, "Large"'}], ["name"])

        assert read_table(path) == [{"name": 'Widget, "Large"'}]

    def test_zero_byte_file_reads_empty(self, tmp_path):
        path = tmp_path / "t.csv"
        path.write_text("")

        assert read_table(path) == []

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "t.csv"

        write_table(path, [], ["a"])

        assert path.exists()
