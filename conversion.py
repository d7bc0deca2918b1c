"""Conversions between BigRational and Python / numpy number types.

Three modes, as for fixed-width numeric types in general:

- CHECKED: the value must be representable, otherwise ConversionUndefined (NaN, infinity or a
  fraction where an integer is needed) or ConversionOverflow (out of range).
- SATURATING: out-of-range values clamp to the target's extremes; special values map to the
  target's own NaN/infinities where it has them.
- TRUNCATING: fractions are cut toward zero; out-of-range values clamp to the largest finite
  value of the target.
"""

from __future__ import annotations
from decimal import Decimal
from fractions import Fraction
import enum
import logging
import math
from typing import Optional

import numpy as np

from errors import ConversionOverflow, ConversionUndefined
from formats import FloatFormat, IntegerFormat, find_native_format, get_float_format, ratio_to_float
from rational import BigRational

logger = logging.getLogger(__name__)


class ConversionMode(enum.Enum):
    CHECKED = "checked"
    SATURATING = "saturating"
    TRUNCATING = "truncating"


def _truncated(value: BigRational) -> BigRational:
    return BigRational(math.trunc(value))


# ==============================================================================
# Into BigRational
# ==============================================================================

def convert_from(value, mode: ConversionMode = ConversionMode.CHECKED) -> BigRational:
    """Convert an int, float, numpy scalar, Fraction, Decimal or BigRational to BigRational.

    Args:
        value: Number to convert.
        mode: CHECKED and TRUNCATING reject NaN and infinities of floats and Decimals;
            SATURATING maps them to the special values. TRUNCATING drops the fractional part.

    Raises:
        ConversionUndefined: For a rejected NaN or infinity.
        TypeError: For unsupported types (including str; see parsing.parse_rational).
    """
    if isinstance(value, BigRational):
        if mode is ConversionMode.TRUNCATING:
            if not value.is_normal():
                raise ConversionUndefined(f"Cannot truncate {value}")
            return _truncated(value)
        return value

    if isinstance(value, (int, np.integer, Fraction)):
        result = BigRational(value)
    elif isinstance(value, (float, np.floating, Decimal)):
        result = BigRational(value)
        if not result.is_normal() and mode is not ConversionMode.SATURATING:
            raise ConversionUndefined(f"{value!r} has no finite rational value")
    else:
        raise TypeError(f"Cannot convert {type(value).__name__} to BigRational")

    if mode is ConversionMode.TRUNCATING and result.is_normal():
        return _truncated(result)
    return result


def try_convert_from(value, mode: ConversionMode = ConversionMode.CHECKED) -> Optional[BigRational]:
    try:
        return convert_from(value, mode)
    except (ConversionOverflow, ConversionUndefined):
        return None


# ==============================================================================
# Out of BigRational
# ==============================================================================

def _to_float(value: BigRational, fmt: FloatFormat, mode: ConversionMode):
    if not value.is_normal():
        if mode is ConversionMode.SATURATING:
            return ratio_to_float(value.numerator, value.denominator, fmt)
        raise ConversionUndefined(f"{value} cannot be converted to {fmt.name} in {mode.value} mode")

    result = ratio_to_float(value.numerator, value.denominator, fmt)
    if np.isinf(result):
        if mode is ConversionMode.CHECKED:
            raise ConversionOverflow(f"Value out of range for {fmt.name} (max {fmt.Fmax})")
        if mode is ConversionMode.TRUNCATING:
            logger.debug("%s overflow clamped to the largest finite value", fmt.name)
            return fmt.dtype.type(math.copysign(fmt.Fmax, value.sign))
        logger.debug("%s overflow saturated to infinity", fmt.name)
    return result


def _to_integer(value: BigRational, fmt: Optional[IntegerFormat], mode: ConversionMode):
    """fmt None means the unbounded Python int."""
    name = fmt.name if fmt is not None else "int"

    if mode is ConversionMode.TRUNCATING:
        if not value.is_normal():
            raise ConversionUndefined(f"{value} cannot be truncated to {name}")
        v = math.trunc(value)
        if fmt is None:
            return v
        if not fmt.contains(v):
            logger.debug("%s truncation clamped an out-of-range value", name)
            v = fmt.max if v > fmt.max else fmt.min
        return fmt.dtype.type(v)

    if value.is_nan():
        raise ConversionUndefined(f"NaN cannot be converted to {name}")
    if value.is_infinity():
        if mode is ConversionMode.SATURATING and fmt is not None:
            logger.debug("%s saturated %s", name, value)
            return fmt.dtype.type(fmt.max if value.is_positive() else fmt.min)
        raise ConversionUndefined(f"{value} cannot be converted to {name}")
    if not value.is_integer():
        raise ConversionUndefined(f"{value} is not an integer")

    v = value.numerator
    if fmt is None:
        return v
    if not fmt.contains(v):
        if mode is ConversionMode.CHECKED:
            raise ConversionOverflow(f"Value out of range for {name} [{fmt.min}, {fmt.max}]")
        logger.debug("%s saturated an out-of-range value", name)
        v = fmt.max if v > fmt.max else fmt.min
    return fmt.dtype.type(v)


def _to_decimal(value: BigRational, mode: ConversionMode) -> Decimal:
    if not value.is_normal():
        if mode is not ConversionMode.SATURATING:
            raise ConversionUndefined(f"{value} cannot be converted to Decimal in {mode.value} mode")
        if value.is_nan():
            return Decimal("NaN")
        return Decimal("Infinity") if value.is_positive() else Decimal("-Infinity")
    if mode is ConversionMode.TRUNCATING:
        return Decimal(math.trunc(value))
    # rounds in the current decimal context
    return Decimal(value.numerator) / Decimal(value.denominator)


def _to_fraction(value: BigRational, mode: ConversionMode) -> Fraction:
    if not value.is_normal():
        raise ConversionUndefined(f"{value} cannot be converted to Fraction")
    if mode is ConversionMode.TRUNCATING:
        return Fraction(math.trunc(value))
    return Fraction(value.numerator, value.denominator)


def convert_to(value: BigRational, target, mode: ConversionMode = ConversionMode.CHECKED):
    """Convert a BigRational to another number type.

    Args:
        value: Value to convert.
        target: ``int``, ``float``, ``Decimal``, ``Fraction``, ``BigRational``, a numpy dtype or
            scalar type, or a format name such as ``"int32"`` or ``"float16"``.
        mode: Conversion mode.

    Returns:
        A value of the target type. Fixed-width targets return numpy scalars.

    Raises:
        ConversionOverflow: CHECKED conversion out of the target's range.
        ConversionUndefined: The target cannot represent the value in this mode.
        TypeError: Unsupported target.
    """
    if not isinstance(value, BigRational):
        value = BigRational(value)
    if target is BigRational:
        if mode is ConversionMode.TRUNCATING and value.is_normal():
            return _truncated(value)
        return value
    if target is int:
        return _to_integer(value, None, mode)
    if target is float:
        return float(_to_float(value, get_float_format("float64"), mode))
    if target is Decimal:
        return _to_decimal(value, mode)
    if target is Fraction:
        return _to_fraction(value, mode)

    fmt = find_native_format(target)
    if isinstance(fmt, FloatFormat):
        return _to_float(value, fmt, mode)
    if isinstance(fmt, IntegerFormat):
        return _to_integer(value, fmt, mode)
    raise TypeError(f"Unsupported conversion target {target!r}")


def try_convert_to(value: BigRational, target, mode: ConversionMode = ConversionMode.CHECKED):
    try:
        return convert_to(value, target, mode)
    except (ConversionOverflow, ConversionUndefined):
        return None
