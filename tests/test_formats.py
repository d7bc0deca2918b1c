import math
from fractions import Fraction

import numpy as np
import pytest

from formats import (get_float_format, get_integer_format, get_number_format, find_native_format,
                     float_to_ratio, ratio_to_float, unpack_float, FloatFormat, IntegerFormat)


def test_float_format_registry():
    f64 = get_float_format("binary64")
    assert f64.p == 53
    assert f64.Fmax == np.finfo(np.float64).max
    assert f64.bits == 64
    assert f64.exponent_bits == 11
    f32 = get_float_format("single")
    assert f32.Fmax == float(np.finfo(np.float32).max)
    assert f32.min_normal == float(np.finfo(np.float32).tiny)
    f16 = get_float_format("half")
    assert f16.Fmax == 65504.0
    assert f16.bits == 16
    assert f16.exponent_bits == 5
    with pytest.raises(NotImplementedError):
        get_float_format("bfloat16")


def test_integer_format_registry():
    i8 = get_integer_format("int8")
    assert (i8.min, i8.max, i8.signed) == (-128, 127, True)
    u16 = get_integer_format("uint16")
    assert (u16.min, u16.max, u16.signed) == (0, 65535, False)
    assert i8.contains(-128) and not i8.contains(128)
    with pytest.raises(NotImplementedError):
        get_integer_format("int128")


def test_find_native_format():
    assert isinstance(find_native_format("float32"), FloatFormat)
    assert isinstance(find_native_format(np.int16), IntegerFormat)
    assert find_native_format(np.dtype("uint8")).name == "uint8"
    assert find_native_format(np.float16).name == "float16"
    assert find_native_format("complex128") is None
    assert find_native_format(object) is None


def test_unpack_float():
    f64 = get_float_format("float64")
    assert unpack_float(1.0, f64) == (False, 1023, 0)
    assert unpack_float(-2.0, f64) == (True, 1024, 0)
    assert unpack_float(1.5, f64) == (False, 1023, 1 << 51)


@pytest.mark.parametrize("value,fmt", [
    (0.1, "float64"),
    (-1234.5678, "float64"),
    (5e-324, "float64"),
    (1.7976931348623157e308, "float64"),
    (np.float32(0.1), "float32"),
    (np.float16(-0.333), "float16"),
    (np.float16(6e-8), "float16"),
])
def test_float_to_ratio_is_exact(value, fmt):
    num, den = float_to_ratio(value, get_float_format(fmt))
    assert den > 0
    assert Fraction(num, den) == Fraction(float(value))
    assert ratio_to_float(num, den, get_float_format(fmt)) == value


def test_float_to_ratio_specials():
    f64 = get_float_format("float64")
    assert float_to_ratio(math.nan, f64) == (0, 0)
    assert float_to_ratio(math.inf, f64) == (1, 0)
    assert float_to_ratio(-math.inf, f64) == (-1, 0)
    assert float_to_ratio(-0.0, f64) == (0, 1)


def test_ratio_to_float():
    f32 = get_float_format("float32")
    assert ratio_to_float(1, 3, f32) == np.float32(1) / np.float32(3)
    assert ratio_to_float(10**400, 1, get_float_format("float64")) == math.inf
    assert ratio_to_float(-(10**400), 3, get_float_format("float64")) == -math.inf
    assert ratio_to_float(1, 10**400, get_float_format("float64")) == 0.0
    assert ratio_to_float(10**600 + 1, 10**600, get_float_format("float64")) == 1.0
    assert ratio_to_float(70000, 1, get_float_format("float16")) == np.inf
    assert np.isnan(ratio_to_float(0, 0, f32))
    assert ratio_to_float(1, 3, f32).dtype == np.float32


def test_number_formats():
    nf = get_number_format()
    assert nf.name == "invariant"
    assert nf.decimal_separator == "."
    assert get_number_format("de").decimal_separator == ","
    assert get_number_format("fr").group_separator == "\u202f"
    with pytest.raises(NotImplementedError):
        get_number_format("xx")
