import pytest

import arithmetic
from arithmetic import (isqrt, nth_root, is_perfect_square, shift_left, shift_right,
                        decimal_digit_count, int_to_decimal, decimal_to_int)
from errors import NegativeArgument, InvalidExponent, NoRealRoot


@pytest.mark.parametrize("v", [0, 1, 2, 3, 4, 15, 16, 17, 99, 100, 10**20, 2**127 - 1, 3**200])
def test_isqrt_brackets_root(v):
    r = isqrt(v)
    assert r * r <= v < (r + 1) * (r + 1)


def test_isqrt_negative():
    with pytest.raises(NegativeArgument):
        isqrt(-1)


def test_is_perfect_square():
    assert is_perfect_square(0)
    assert is_perfect_square(1)
    assert is_perfect_square(12345678987654321 ** 2)
    assert not is_perfect_square(2)
    assert not is_perfect_square(10**20 + 1)
    assert not is_perfect_square(-4)


def test_nth_root():
    assert nth_root(27, 3) == 3
    assert nth_root(26, 3) == 2
    assert nth_root(-27, 3) == -3
    assert nth_root(-26, 3) == -2
    assert nth_root(2**100, 10) == 2**10
    assert nth_root(1, 5) == 1
    assert nth_root(-1, 5) == -1
    assert nth_root(0, 7) == 0
    assert nth_root(81, 2) == 9


@pytest.mark.parametrize("v,n", [(10**30 + 7, 3), (2**200 - 1, 5), (123456789, 4)])
def test_nth_root_brackets_root(v, n):
    r = nth_root(v, n)
    assert r ** n <= v < (r + 1) ** n


def test_nth_root_errors():
    with pytest.raises(InvalidExponent):
        nth_root(8, 1)
    with pytest.raises(NoRealRoot):
        nth_root(-16, 4)
    with pytest.raises(NegativeArgument):
        nth_root(-16, 2)


def test_shifts():
    assert shift_left(3, 4) == 48
    assert shift_left(-3, 4) == -48
    assert shift_right(48, 4) == 3
    assert shift_right(-49, 4) == -3
    assert shift_right(-1, 1) == 0
    assert shift_right(5, 3) == 0
    assert shift_right(5, 0) == 5
    assert shift_right(5, 2**40) == 0
    assert shift_right(-5, 2**40) == 0
    with pytest.raises(ValueError):
        shift_left(1, -1)
    with pytest.raises(ValueError):
        shift_right(1, -1)


def test_shifts_split_into_chunks(monkeypatch):
    monkeypatch.setattr(arithmetic, "MAX_SHIFT_CHUNK", 3)
    assert shift_left(1, 10) == 1024
    assert shift_left(-5, 7) == -640
    assert shift_right(1031, 10) == 1
    assert shift_right(-1031, 10) == -1
    assert shift_right(2**100 + 7, 97) == 8


def test_decimal_digit_count():
    assert decimal_digit_count(0) == 1
    assert decimal_digit_count(9) == 1
    assert decimal_digit_count(10) == 2
    assert decimal_digit_count(-999) == 3
    assert decimal_digit_count(10**50) == 51
    assert decimal_digit_count(10**50 - 1) == 50


def test_long_decimal_strings():
    v = 7 ** 20000
    s = int_to_decimal(v)
    assert len(s) == decimal_digit_count(v)
    assert decimal_to_int(s) == v
    assert int_to_decimal(-(10**5000)) == "-1" + "0" * 5000
