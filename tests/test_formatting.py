import pytest

from formats import get_number_format
from formatting import (DECIMAL_DIGITS, decimal_string, expand_fraction, fraction_string,
                        parse_format_spec)
from rational import BigRational as R


def test_fraction_string():
    assert fraction_string(3, 1) == "3"
    assert fraction_string(-3, 4) == "-3/4"
    assert fraction_string(0, 1) == "0"
    assert fraction_string(1, 0) == "Infinity"
    assert fraction_string(-1, 0, "en") == "-∞"
    assert fraction_string(0, 0, get_number_format("fr")) == "NaN"


def test_expand_fraction():
    assert expand_fraction(1, 6, -1) == ("1", "6")
    assert expand_fraction(1, 7, -1) == ("", "142857")
    assert expand_fraction(1, 8, -1) == ("125", "")
    assert expand_fraction(1, 7, 3) == ("142", "")
    assert expand_fraction(1, 2, 5) == ("5", "")


@pytest.mark.parametrize("value,max_digits,expected", [
    (R(1, 3), -1, "0.(3)"),
    (R(1, 6), -1, "0.1(6)"),
    (R(-1, 7), -1, "-0.(142857)"),
    (R(22, 7), -1, "3.(142857)"),
    (R(1, 8), -1, "0.125"),
    (R(5), -1, "5"),
    (R(-5, 2), 32, "-2.5"),
    (R(1, 7), 4, "0.1428"),
    (R(2, 3), 0, "0"),
    (R(-7, 3), 0, "-2"),
    (R(1, 1000), 2, "0"),
    (R(1, 3), 32, "0.(3)"),
])
def test_decimal_string(value, max_digits, expected):
    assert value.to_decimal_string(max_digits) == expected


def test_decimal_string_default_budget():
    assert DECIMAL_DIGITS == 32
    # the period of 1/97 is 96 digits, longer than the default budget
    s = R(1, 97).to_decimal_string()
    assert "(" not in s
    assert len(s) == 2 + DECIMAL_DIGITS


def test_decimal_string_expanded_cycle():
    assert R(1, 3).to_decimal_string(5, keep_repeating=False) == "0.33333"
    assert R(1, 6).to_decimal_string(6, keep_repeating=False) == "0.166666"
    assert R(1, 7).to_decimal_string(10, keep_repeating=False) == "0.1428571428"
    assert R(1, 3).to_decimal_string(-1, keep_repeating=False) == "0.(3)"


def test_decimal_string_number_format():
    assert R(-5, 4).to_decimal_string(number_format="de") == "-1,25"
    assert R(1, 3).to_decimal_string(number_format="fr") == "0,(3)"
    assert R.NAN.to_decimal_string() == "NaN"
    assert R.NEGATIVE_INFINITY.to_decimal_string(number_format="en") == "-∞"


def test_decimal_string_of_large_values():
    big = R(10**5000 + 1, 10)
    s = big.to_decimal_string()
    assert s == "1" + "0" * 4999 + ".1"


def test_parse_format_spec():
    assert parse_format_spec("") is None
    assert parse_format_spec("s") is None
    assert parse_format_spec("f") == DECIMAL_DIGITS
    assert parse_format_spec(".7f") == 7
    for bad in ("d", ".f", ".-1f", "10f", ".3e"):
        with pytest.raises(ValueError):
            parse_format_spec(bad)
