import pytest

from footprints.utils.parsing import clean_text, parse_float, parse_year


@pytest.mark.parametrize("raw, expected", [
    ("  1925 ", "1925"),
    ("", None),
    ("   ", None),
    (None, None),
    (1925, "1925"),
    (12.5, "12.5"),
    ({"nested": "value"}, None),
])
def test_clean_text(raw, expected):
    assert clean_text(raw) == expected


def test_parse_float_accepts_source_strings():
    assert parse_float("120.5") == 120.5
    assert parse_float(" 45 ") == 45.0
    assert parse_float(7) == 7.0


@pytest.mark.parametrize("raw", ["", "tall", None, "nan", "inf", "-inf", True])
def test_parse_float_rejects_unusable_values(raw):
    assert parse_float(raw) is None


def test_parse_year_accepts_whole_numbers_only():
    assert parse_year("1925") == 1925
    assert parse_year("1925.0") == 1925
    assert parse_year("1925.5") is None
    assert parse_year("unknown") is None

