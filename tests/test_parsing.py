import pytest

from errors import ParseFormat
from rational import BigRational as R
from parsing import parse_rational as parse, try_parse_rational


@pytest.mark.parametrize("text,expected", [
    ("42", R(42)),
    ("-42", R(-42)),
    ("+7", R(7)),
    ("  12  ", R(12)),
    ("1,234,567", R(1234567)),
    ("-3.5", R(-7, 2)),
    ("0.125", R(1, 8)),
    (".25", R(1, 4)),
    ("-.5", R(-1, 2)),
    ("2.", R(2)),
    ("1,000.5", R(2001, 2)),
    ("0.1(6)", R(1, 6)),
    ("0.(3)", R(1, 3)),
    ("-0.(6)", R(-2, 3)),
    ("1.(9)", R(2)),
    ("0.(142857)", R(1, 7)),
    ("2.5(0)", R(5, 2)),
    ("3.(00)", R(3)),
    ("1/3", R(1, 3)),
    ("-6/4", R(-3, 2)),
    ("6/-4", R(-3, 2)),
    (" 1 / 2 ", R(1, 2)),
    ("0.5/0.25", R(2)),
    ("0.(3)/2", R(1, 6)),
    ("1/0", R.POSITIVE_INFINITY),
    ("-1/0", R.NEGATIVE_INFINITY),
])
def test_parse(text, expected):
    assert parse(text) == expected


def test_parse_zero_over_zero_is_nan():
    assert parse("0/0").is_nan()


def test_parse_special_symbols():
    assert parse("NaN").is_nan()
    assert parse("nan").is_nan()
    assert parse("Infinity") == R.POSITIVE_INFINITY
    assert parse("+Infinity") == R.POSITIVE_INFINITY
    assert parse("-Infinity") == R.NEGATIVE_INFINITY
    assert parse("∞", "en") == R.POSITIVE_INFINITY
    assert parse("-∞", "de") == R.NEGATIVE_INFINITY


def test_parse_with_number_format():
    assert parse("1.234,5", "de") == R(2469, 2)
    assert parse("-0,(3)", "de") == R(-1, 3)
    assert parse("1\u202f000,25", "fr") == R(4001, 4)
    assert parse("1,5", "de") == R(3, 2)


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "abc",
    "1/2/3",
    ".",
    "-.",
    "1.2.3",
    "0.()",
    "0.(3",
    "0.(3)4",
    "0.3)",
    "1,",
    ",1",
    "1,,2",
    "--1",
    "1e5",
    "١٢",
    "/2",
    "1/",
    "0x10",
])
def test_parse_rejects(text):
    with pytest.raises(ParseFormat) as info:
        parse(text)
    assert info.value.text == text
    assert try_parse_rational(text) is None


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse("one half")


def test_parse_requires_str():
    with pytest.raises(TypeError):
        parse(3)


@pytest.mark.parametrize("value", [
    R(0), R(5), R(-5), R(1, 3), R(-22, 7), R(10**50 + 1, 3**40),
    R.NAN, R.POSITIVE_INFINITY, R.NEGATIVE_INFINITY,
])
def test_fraction_form_round_trip(value):
    assert parse(str(value)) == value
    assert parse(value.to_string("de"), "de") == value


@pytest.mark.parametrize("value", [
    R(1, 6), R(-1, 7), R(22, 7), R(1, 8), R(-123456, 1000), R(1, 97), R(7),
])
def test_decimal_form_round_trip(value):
    assert parse(value.to_decimal_string(-1)) == value
    assert parse(value.to_decimal_string(-1, number_format="fr"), "fr") == value


def test_long_digit_strings():
    digits = "7" * 6000
    assert parse(digits) == R(7 * (10**6000 - 1) // 9)
    assert parse("0.(" + "3" * 5000 + ")") == R(1, 3)
