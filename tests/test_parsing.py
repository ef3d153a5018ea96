import math

import pytest

from insights.parsing import headshot_url, is_valid_key, parse_numeric, parse_percentage, round_half_up


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,234", 1234.0),
        ("($500)", -500.0),
        ("", 0.0),
        ("Grand Total", 0.0),
        ("(blank)", 0.0),
        (" $ 2,500.50 ", 2500.5),
        ("1.75", 1.75),
        ("-42", -42.0),
        ("(1,000)", -1000.0),
        ("-", 0.0),
        ("abc", 0.0),
        ("12abc", 12.0),
        ("$1.2M", 1.2),
        ("1_000", 1.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("abc12", 0.0),
        ("nan", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
        (7, 7.0),
        (2.5, 2.5),
    ],
)
def test_parse_numeric(raw, expected):
    assert parse_numeric(raw) == expected


@pytest.mark.parametrize("raw", ["$1,234", "($500)", "", "Grand Total", "0.35", "$12,345,678.90", "(3)", "junk"])
def test_parse_numeric_is_idempotent_on_its_output(raw):
    once = parse_numeric(raw)
    assert parse_numeric(str(once)) == once


def test_parse_numeric_never_raises_on_odd_input():
    for raw in ["()", "$", ",,,", "((1))", "1e400", "inf", object()]:
        value = parse_numeric(raw)
        assert math.isfinite(value)


def test_parse_percentage():
    assert parse_percentage("55.0%") == 0.55
    assert parse_percentage(" 40 % ") == pytest.approx(0.40)
    assert parse_percentage("") == 0
    assert parse_percentage(None) == 0
    assert parse_percentage("n/a") == 0
    assert parse_percentage("87%") == pytest.approx(0.87)
    assert parse_percentage("62.5% of market") == pytest.approx(0.625)
    assert parse_percentage("1_000%") == pytest.approx(0.01)


def test_parse_percentage_does_not_clamp():
    assert parse_percentage("120%") == pytest.approx(1.2)
    assert parse_percentage("-15%") == pytest.approx(-0.15)


@pytest.mark.parametrize(
    "value, expected",
    [("Alice", True), (" Bob ", True), ("", False), ("  ", False), ("(blank)", False), ("Grand Total", False), (None, False), (float("nan"), False)],
)
def test_is_valid_key(value, expected):
    assert is_valid_key(value) is expected


def test_round_half_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(149.5) == 150.0
    assert round_half_up(1.234, 2) == 1.23
    assert round_half_up(None) is None


def test_headshot_url():
    assert headshot_url("Connor McDavid", "/headshots_cache/") == "/headshots_cache/connor_mcdavid.jpg"
    assert headshot_url("Jean  Luc  Picard", "/h/") == "/h/jean_luc_picard.jpg"
    assert headshot_url("", "/h/") == ""
    assert headshot_url(None, "/h/") == ""
