import pytest

from prod_compare.ingest.numbers import is_number_text, normalize_number_text, parse_number


class TestParseNumber:
    @pytest.mark.parametrize("text,expected", [
        ("3.135,60", 3135.60),
        ("1.000,5", 1000.5),
        ("12.345,0", 12345.0),
    ])
    def test_dot_thousands_comma_decimal(self, text, expected):
        assert parse_number(text) == pytest.approx(expected)

    def test_comma_only_is_decimal(self):
        assert parse_number("12,5") == 12.5

    def test_plain_text_parsed_as_is(self):
        assert parse_number("3135.60") == pytest.approx(3135.6)
        assert parse_number("-7") == -7.0

    def test_english_thousands_form_is_not_supported(self):
        """'3,135.60' follows the same policy and lands on 3.1356."""
        assert parse_number("3,135.60") == pytest.approx(3.1356)

    @pytest.mark.parametrize("text", ["", "   ", "\t\n", None])
    def test_empty_is_no_value(self, text):
        assert parse_number(text) is None

    @pytest.mark.parametrize("text", ["abc", "12abc", "1,234,567", "nan", "inf", "--5"])
    def test_malformed_is_no_value(self, text):
        assert parse_number(text) is None

    def test_native_numbers_pass_through(self):
        assert parse_number(7200) == 7200.0
        assert parse_number(float("nan")) is None
        assert parse_number(True) is None

    def test_surrounding_whitespace(self):
        assert parse_number("  42,0 ") == 42.0


def test_normalize_number_text():
    assert normalize_number_text("3.135,60") == "3135.60"
    assert normalize_number_text("0,5") == "0.5"


def test_is_number_text():
    assert is_number_text("100")
    assert not is_number_text("Makine")
