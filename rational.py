"""Exact rational numbers with IEEE-754 style special values.

A :class:`BigRational` is a pair ``(numerator, denominator)`` of Python ints:

- Normal values have ``denominator > 0`` and ``gcd(|numerator|, denominator) == 1``; zero is
  ``(0, 1)``.
- ``denominator == 0`` encodes the special values: ``(1, 0)`` is +Infinity, ``(-1, 0)`` is
  -Infinity and ``(0, 0)`` is NaN.

The kind of a value is always recomputed from the two fields. ``BigRational()`` is NaN, not
zero.

Arithmetic follows IEEE-754 propagation: NaN is absorbing, ``inf - inf`` and ``0 * inf`` are
NaN, and division goes through :attr:`BigRational.reciprocal`, which maps 0 to +Infinity and
both infinities to 0 (the sign of -Infinity is not kept).

Two departures from float semantics:

- ``NaN == NaN`` is True, so values can be used as dict keys and compared structurally.
- Ordering comparisons involving NaN raise :class:`errors.IncomparableNaN` instead of
  returning False.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Optional, Tuple
import enum
import logging
import math
import operator
import sys

import numpy as np

from arithmetic import isqrt, is_perfect_square, int_to_decimal
from errors import (IncomparableNaN, InvalidConstruction, InvalidExponent, NegativeArgument,
                    DivisionUndefined, ConversionUndefined)
from formats import float_format_of, float_to_ratio, ratio_to_float, get_float_format
from formatting import DECIMAL_DIGITS, fraction_string, decimal_string, parse_format_spec

logger = logging.getLogger(__name__)

# Defaults of BigRational.sqrt
SQRT_PRECISION = 10      # stop once successive iterates differ by less than 10^-SQRT_PRECISION
SQRT_ITERATIONS = 128

_FLOAT64 = get_float_format("float64")


class RationalKind(enum.Enum):
    NAN = 0
    NEGATIVE_INFINITY = 1
    NORMAL = 2
    POSITIVE_INFINITY = 3


class RoundingMode(enum.Enum):
    """How :meth:`BigRational.round` breaks an exact tie between two integers.

    Values that are not exactly halfway always round to the nearest integer.
    """
    TO_EVEN = "to_even"
    AWAY_FROM_ZERO = "away_from_zero"
    TO_ZERO = "to_zero"
    TO_NEGATIVE_INFINITY = "to_negative_infinity"
    TO_POSITIVE_INFINITY = "to_positive_infinity"


@dataclass(frozen=True)
class SqrtApproximation:
    """Result of the Newton square root.

    ``converged`` is False when the iteration cap was reached first; ``value`` is then the best
    approximation found, not an error.
    """
    value: "BigRational"
    iterations: int
    converged: bool


def _normalize(num: int, den: int) -> Tuple[int, int]:
    if den == 0:
        return (num > 0) - (num < 0), 0
    if num == 0:
        return 0, 1
    if den < 0:
        num, den = -num, -den
    g = math.gcd(num, den)
    return num // g, den // g


def _special_fields(kind: RationalKind) -> Tuple[int, int]:
    if kind is RationalKind.POSITIVE_INFINITY:
        return 1, 0
    if kind is RationalKind.NEGATIVE_INFINITY:
        return -1, 0
    if kind is RationalKind.NAN:
        return 0, 0
    raise InvalidConstruction("Normal values are built from a numerator and a denominator, not from a kind")


def _fields_of(value) -> Tuple[int, int]:
    """(numerator, denominator) of a single constructor argument, not yet normalized."""
    if isinstance(value, (int, np.integer)):
        return int(value), 1
    if isinstance(value, Fraction):
        return value.numerator, value.denominator
    if isinstance(value, (float, np.floating)):
        fmt = float_format_of(value)
        if fmt is None:
            raise TypeError(f"Unsupported floating-point type {type(value).__name__}")
        return float_to_ratio(value, fmt)
    if isinstance(value, Decimal):
        if value.is_nan():
            return 0, 0
        if value.is_infinite():
            return (-1 if value.is_signed() else 1), 0
        return value.as_integer_ratio()
    if isinstance(value, str):
        raise TypeError("BigRational does not take strings; use parsing.parse_rational")
    raise TypeError(f"Cannot build a BigRational from {type(value).__name__}")


class BigRational:
    """Arbitrary-precision rational number with NaN and signed infinities.

    Construction:
        BigRational()            -> NaN
        BigRational(n)           -> n/1 (int, numpy integer)
        BigRational(n, d)        -> n/d reduced; d == 0 gives +inf, -inf or NaN by the sign of n
        BigRational(kind)        -> special value of a RationalKind (NORMAL is rejected)
        BigRational(x)           -> exact value of a float, numpy float, Fraction or Decimal
    """

    __slots__ = ('_numerator', '_denominator')

    def __new__(cls, numerator=None, denominator=None):
        if denominator is None and type(numerator) is cls:
            return numerator
        self = super().__new__(cls)
        if denominator is None:
            if numerator is None:
                num, den = 0, 0
            elif isinstance(numerator, RationalKind):
                num, den = _special_fields(numerator)
            elif isinstance(numerator, BigRational):
                num, den = numerator._numerator, numerator._denominator
            else:
                num, den = _normalize(*_fields_of(numerator))
        else:
            num, den = _normalize(operator.index(numerator), operator.index(denominator))
        self._numerator = num
        self._denominator = den
        return self

    @classmethod
    def from_float(cls, value) -> "BigRational":
        """Exact value of a binary float; NaN and infinities map to the special values."""
        return cls(value)

    # ------------------------------------------------------------------------------
    # Fields and classification
    # ------------------------------------------------------------------------------

    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    @property
    def kind(self) -> RationalKind:
        if self._denominator != 0:
            return RationalKind.NORMAL
        if self._numerator == 0:
            return RationalKind.NAN
        if self._numerator > 0:
            return RationalKind.POSITIVE_INFINITY
        return RationalKind.NEGATIVE_INFINITY

    @property
    def sign(self) -> int:
        """-1, 0 or 1. NaN has sign 0."""
        return (self._numerator > 0) - (self._numerator < 0)

    @property
    def reciprocal(self) -> "BigRational":
        # (den, num): 0 -> +inf, +-inf -> 0 (sign of -inf is lost), NaN -> NaN
        return BigRational(self._denominator, self._numerator)

    def is_nan(self) -> bool:
        return self._denominator == 0 and self._numerator == 0

    def is_infinity(self) -> bool:
        return self._denominator == 0 and self._numerator != 0

    def is_positive_infinity(self) -> bool:
        return self._denominator == 0 and self._numerator > 0

    def is_negative_infinity(self) -> bool:
        return self._denominator == 0 and self._numerator < 0

    def is_normal(self) -> bool:
        return self._denominator != 0

    is_finite = is_normal

    def is_integer(self) -> bool:
        return self._denominator == 1

    def is_zero(self) -> bool:
        return self._denominator != 0 and self._numerator == 0

    def is_one(self) -> bool:
        return self._denominator == 1 and self._numerator == 1

    def is_negative(self) -> bool:
        return self._numerator < 0

    def is_positive(self) -> bool:
        return self._numerator > 0

    def is_even_integer(self) -> bool:
        return self._denominator == 1 and self._numerator % 2 == 0

    def is_odd_integer(self) -> bool:
        return self._denominator == 1 and self._numerator % 2 != 0

    def _require_normal(self, what: str) -> None:
        if self._denominator == 0:
            raise ConversionUndefined(f"{what} is undefined for {self}")

    # ------------------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------------------

    def compare_to(self, other) -> int:
        return compare(self, other)

    def __eq__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if self._denominator == 0 or other._denominator == 0:
            return self.kind is other.kind
        return self._numerator == other._numerator and self._denominator == other._denominator

    def __hash__(self):
        if self._denominator != 0:
            return hash(Fraction(self._numerator, self._denominator))
        if self._numerator > 0:
            return hash(math.inf)
        if self._numerator < 0:
            return hash(-math.inf)
        return sys.hash_info.nan

    def _ordered(self, other, test):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return test(compare(self, other), 0)

    def __lt__(self, other):
        return self._ordered(other, operator.lt)

    def __le__(self, other):
        return self._ordered(other, operator.le)

    def __gt__(self, other):
        return self._ordered(other, operator.gt)

    def __ge__(self, other):
        return self._ordered(other, operator.ge)

    def __bool__(self):
        return not self.is_zero()

    # ------------------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------------------

    def __neg__(self):
        return BigRational(-self._numerator, self._denominator)

    def __pos__(self):
        return self

    def __abs__(self):
        if self._denominator == 0:
            return NAN if self._numerator == 0 else POSITIVE_INFINITY
        return BigRational(abs(self._numerator), self._denominator)

    def _operator_fallbacks(monomorphic_operator):
        def forward(a, b):
            b = _coerce(b)
            if b is None:
                return NotImplemented
            return monomorphic_operator(a, b)

        def reverse(b, a):
            a = _coerce(a)
            if a is None:
                return NotImplemented
            return monomorphic_operator(a, b)

        forward.__name__ = '__' + monomorphic_operator.__name__.strip('_') + '__'
        reverse.__name__ = '__r' + monomorphic_operator.__name__.strip('_') + '__'
        return forward, reverse

    def _add(a, b):
        ka, kb = a.kind, b.kind
        if ka is RationalKind.NAN or kb is RationalKind.NAN:
            return NAN
        if ka is not kb:
            # one side infinite: Normal + inf is that inf, +inf + -inf is NaN
            if ka is RationalKind.NORMAL:
                return b
            if kb is RationalKind.NORMAL:
                return a
            return NAN
        if ka is not RationalKind.NORMAL:
            return a
        na, da = a._numerator, a._denominator
        nb, db = b._numerator, b._denominator
        g = math.gcd(da, db)
        if g == 1:
            return BigRational(na * db + nb * da, da * db)
        da_g, db_g = da // g, db // g
        return BigRational(na * db_g + nb * da_g, da * db_g)

    __add__, __radd__ = _operator_fallbacks(_add)

    def _sub(a, b):
        return BigRational._add(a, -b)

    __sub__, __rsub__ = _operator_fallbacks(_sub)

    def _mul(a, b):
        ka, kb = a.kind, b.kind
        if ka is RationalKind.NAN or kb is RationalKind.NAN:
            return NAN
        if ka is RationalKind.NORMAL and kb is RationalKind.NORMAL:
            return BigRational(a._numerator * b._numerator, a._denominator * b._denominator)
        if ka is RationalKind.NORMAL or kb is RationalKind.NORMAL:
            finite, infinite = (a, b) if ka is RationalKind.NORMAL else (b, a)
            if finite._numerator == 0:
                return NAN
            return -infinite if finite._numerator < 0 else infinite
        # both infinite: sign is the XOR of the signs
        return POSITIVE_INFINITY if ka is kb else NEGATIVE_INFINITY

    __mul__, __rmul__ = _operator_fallbacks(_mul)

    def _truediv(a, b):
        return BigRational._mul(a, b.reciprocal)

    __truediv__, __rtruediv__ = _operator_fallbacks(_truediv)

    def _mod(a, b):
        if a._denominator == 0 or b._denominator == 0 or b._numerator == 0:
            return NAN
        q = BigRational._truediv(a, b)
        return a - b * _truncate(q._numerator, q._denominator)

    __mod__, __rmod__ = _operator_fallbacks(_mod)

    del _operator_fallbacks

    def checked_mod(self, other) -> "BigRational":
        """``self % other``, raising DivisionUndefined where ``%`` would give NaN."""
        divisor = _coerce(other)
        if divisor is None:
            raise TypeError(f"unsupported operand type for checked_mod: {type(other).__name__}")
        other = divisor
        if not (self.is_normal() and other.is_normal()) or other.is_zero():
            raise DivisionUndefined(f"{self} mod {other} is undefined")
        return self % other

    def __pow__(self, exponent):
        if isinstance(exponent, BigRational):
            if not exponent.is_integer():
                return NotImplemented
            exponent = exponent._numerator
        elif isinstance(exponent, Fraction):
            if exponent.denominator != 1:
                return NotImplemented
            exponent = exponent.numerator
        elif not isinstance(exponent, (int, np.integer)):
            return NotImplemented
        return self.pow(int(exponent))

    def __rpow__(self, base):
        if not self.is_integer():
            return NotImplemented
        base = _coerce(base)
        if base is None:
            return NotImplemented
        return base.pow(self._numerator)

    # ------------------------------------------------------------------------------
    # Math
    # ------------------------------------------------------------------------------

    def try_decompose(self) -> Optional[Tuple[int, "BigRational"]]:
        """
        Split into (integer part, fractional part), both truncated toward zero, so that the
        fractional part has the sign of the whole: -17/10 -> (-1, -7/10).
        Returns None for NaN and infinities.
        """
        if self._denominator == 0:
            return None
        q = _truncate(self._numerator, self._denominator)
        return q, BigRational(self._numerator - q * self._denominator, self._denominator)

    def try_sqrt_exact(self) -> Optional["BigRational"]:
        """Exact square root when numerator and denominator are both perfect squares, else None."""
        if self._denominator == 0 or self._numerator < 0:
            return None
        # numerator and denominator are coprime, so each must be a square on its own
        if is_perfect_square(self._numerator) and is_perfect_square(self._denominator):
            return BigRational(isqrt(self._numerator), isqrt(self._denominator))
        return None

    def sqrt_approximation(self, precision_digits: int = SQRT_PRECISION,
                           max_iterations: int = SQRT_ITERATIONS) -> SqrtApproximation:
        """Newton-Raphson square root in exact rational arithmetic.

        Starts at ``isqrt(num) / isqrt(den)`` and iterates ``x <- (x + v / x) / 2`` until two
        successive iterates differ by less than ``10**-precision_digits``.

        Args:
            precision_digits: Number of decimal digits the stopping criterion asks for.
            max_iterations: Iteration cap. Reaching it is not an error; the report then has
                ``converged=False`` and carries the last iterate.

        Returns:
            SqrtApproximation with the value and the iteration count.

        Raises:
            NegativeArgument: For negative values and -Infinity.
            ValueError: If ``precision_digits < 0`` or ``max_iterations <= 0``.
        """
        if precision_digits < 0:
            raise ValueError(f"precision_digits must be >= 0, got {precision_digits}")
        if max_iterations <= 0:
            raise ValueError(f"max_iterations must be > 0, got {max_iterations}")
        if self.is_nan() or self.is_positive_infinity():
            return SqrtApproximation(self, 0, True)
        if self._numerator < 0:
            raise NegativeArgument(f"square root of negative value {self}")
        if self.is_zero() or self.is_one():
            return SqrtApproximation(self, 0, True)

        tolerance = BigRational(1, 10 ** precision_digits)
        x = BigRational(isqrt(self._numerator), isqrt(self._denominator))
        for i in range(max_iterations):
            x_next = (x + self / x) / 2
            if abs(x_next - x) < tolerance:
                return SqrtApproximation(x_next, i + 1, True)
            x = x_next
        logger.debug("sqrt: no convergence to 1e-%d within %d iterations", precision_digits, max_iterations)
        return SqrtApproximation(x, max_iterations, False)

    def sqrt(self, precision_digits: int = SQRT_PRECISION,
             max_iterations: int = SQRT_ITERATIONS) -> "BigRational":
        """Square root to about ``precision_digits`` decimal digits; see :meth:`sqrt_approximation`."""
        return self.sqrt_approximation(precision_digits, max_iterations).value

    def pow(self, n: int) -> "BigRational":
        """Integer power by repeated squaring.

        Zero raised to ``n <= 0`` raises InvalidExponent. For the special values: NaN stays
        NaN, ``inf ** 0 == 1``, a positive power keeps the infinity (negative only for -inf and
        odd ``n``) and a negative power gives 0.
        """
        n = operator.index(n)
        kind = self.kind
        if kind is RationalKind.NAN:
            return NAN
        if kind is not RationalKind.NORMAL:
            if n == 0:
                return ONE
            if n < 0:
                return ZERO
            if kind is RationalKind.NEGATIVE_INFINITY and n % 2:
                return NEGATIVE_INFINITY
            return POSITIVE_INFINITY
        if self._numerator == 0:
            if n <= 0:
                raise InvalidExponent(f"0 cannot be raised to the power {n}")
            return ZERO
        if n == 0:
            return ONE
        if n == 1 or self.is_one():
            return self
        if n < 0:
            return self.reciprocal.pow(-n)

        result = ONE
        base = self
        while True:
            if n & 1:
                result = result * base
            n >>= 1
            if n == 0:
                return result
            base = base * base

    def floor(self) -> int:
        self._require_normal("floor")
        # // rounds toward negative infinity for either sign
        return self._numerator // self._denominator

    def ceiling(self) -> int:
        self._require_normal("ceiling")
        return -(-self._numerator // self._denominator)

    def round(self, mode: RoundingMode = RoundingMode.TO_EVEN) -> int:
        """Nearest integer; ``mode`` decides exact halves."""
        self._require_normal("round")
        if self._denominator == 1:
            return self._numerator

        lower = self.floor()
        c = compare(self - lower, _HALF)
        if c < 0:
            return lower
        if c > 0:
            return lower + 1

        if mode is RoundingMode.TO_EVEN:
            return lower if lower % 2 == 0 else lower + 1
        if mode is RoundingMode.AWAY_FROM_ZERO:
            return lower + 1 if self._numerator > 0 else lower
        if mode is RoundingMode.TO_ZERO:
            return lower if self._numerator > 0 else lower + 1
        if mode is RoundingMode.TO_NEGATIVE_INFINITY:
            return lower
        if mode is RoundingMode.TO_POSITIVE_INFINITY:
            return lower + 1
        raise ValueError(f"Unsupported rounding mode {mode!r}")

    def __floor__(self):
        return self.floor()

    def __ceil__(self):
        return self.ceiling()

    def __round__(self, ndigits=None):
        if ndigits is None:
            return self.round()
        if self._denominator == 0:
            return self
        scale = BigRational(10).pow(ndigits)
        return BigRational((self * scale).round()) / scale

    def __trunc__(self):
        self._require_normal("truncation")
        return _truncate(self._numerator, self._denominator)

    __int__ = __trunc__

    def __float__(self):
        return float(ratio_to_float(self._numerator, self._denominator, _FLOAT64))

    # ------------------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------------------

    def to_string(self, number_format=None) -> str:
        """Fraction form "num/den" ("num" for integers); special values use the format's symbols."""
        return fraction_string(self._numerator, self._denominator, number_format)

    def to_decimal_string(self, max_digits: int = DECIMAL_DIGITS, keep_repeating: bool = True,
                          number_format=None) -> str:
        return decimal_string(self._numerator, self._denominator, max_digits, keep_repeating, number_format)

    def __str__(self):
        return fraction_string(self._numerator, self._denominator)

    def __repr__(self):
        kind = self.kind
        if kind is not RationalKind.NORMAL:
            return f"BigRational.{kind.name}"
        return f"BigRational({int_to_decimal(self._numerator)}, {int_to_decimal(self._denominator)})"

    def __format__(self, spec):
        digits = parse_format_spec(spec)
        if digits is None:
            return str(self)
        return self.to_decimal_string(digits)

    # immutable
    def __reduce__(self):
        return (self.__class__, (self._numerator, self._denominator))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


def _truncate(num: int, den: int) -> int:
    q = abs(num) // den
    return q if num >= 0 else -q


def _coerce(value) -> Optional[BigRational]:
    if isinstance(value, BigRational):
        return value
    if isinstance(value, (float, np.floating)) and float_format_of(value) is None:
        return None
    if isinstance(value, (int, np.integer, Fraction, float, np.floating, Decimal)):
        return BigRational(value)
    return None


def compare(a, b) -> int:
    """Three-way comparison: -1, 0 or 1.

    +Infinity is above every finite value and -Infinity below; equal infinities compare
    equal. Any NaN operand raises IncomparableNaN.
    """
    a = _coerce(a)
    b = _coerce(b)
    if a is None or b is None:
        raise TypeError("compare expects BigRational or numeric operands")
    ka, kb = a.kind, b.kind
    if ka is RationalKind.NAN or kb is RationalKind.NAN:
        raise IncomparableNaN("NaN cannot be ordered")
    if ka is not kb:
        if ka is RationalKind.POSITIVE_INFINITY or kb is RationalKind.NEGATIVE_INFINITY:
            return 1
        return -1
    if ka is not RationalKind.NORMAL:
        return 0
    # denominators are positive, so cross-multiplying keeps the order
    assert a._denominator > 0 and b._denominator > 0
    left = a._numerator * b._denominator
    right = b._numerator * a._denominator
    return (left > right) - (left < right)


def max_magnitude(x: BigRational, y: BigRational) -> BigRational:
    """The operand with the larger absolute value (y on a tie). NaN raises IncomparableNaN."""
    return x if compare(abs(x), abs(y)) > 0 else y


def min_magnitude(x: BigRational, y: BigRational) -> BigRational:
    return y if compare(abs(x), abs(y)) > 0 else x


def max_magnitude_number(x: BigRational, y: BigRational) -> BigRational:
    """Like max_magnitude, but a NaN operand is ignored in favour of the other one."""
    if x.is_nan():
        return y
    if y.is_nan():
        return x
    return max_magnitude(x, y)


def min_magnitude_number(x: BigRational, y: BigRational) -> BigRational:
    if x.is_nan():
        return y
    if y.is_nan():
        return x
    return min_magnitude(x, y)


NAN = BigRational(RationalKind.NAN)
POSITIVE_INFINITY = BigRational(RationalKind.POSITIVE_INFINITY)
NEGATIVE_INFINITY = BigRational(RationalKind.NEGATIVE_INFINITY)
ZERO = BigRational(0)
ONE = BigRational(1)
NEGATIVE_ONE = BigRational(-1)
_HALF = BigRational(1, 2)

BigRational.NAN = NAN
BigRational.POSITIVE_INFINITY = POSITIVE_INFINITY
BigRational.NEGATIVE_INFINITY = NEGATIVE_INFINITY
BigRational.ZERO = ZERO
BigRational.ONE = ONE
BigRational.NEGATIVE_ONE = NEGATIVE_ONE
