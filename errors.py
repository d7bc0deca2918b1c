"""Exceptions raised by the rational engine.

Every error is a recoverable condition and derives from :class:`RationalError`. Each class also
inherits the closest builtin exception, so callers that already catch ``ValueError`` or
``OverflowError`` keep working.
"""

from __future__ import annotations
from typing import Optional


class RationalError(ArithmeticError):
    pass


class NegativeArgument(RationalError, ValueError):
    """Square root (or even root) requested for a negative value."""


class InvalidExponent(RationalError, ValueError):
    """Root index below 2, or a zero base raised to a non-positive power."""


class NoRealRoot(RationalError, ValueError):
    """Even root of a negative integer."""


class IncomparableNaN(RationalError, TypeError):
    """Ordering comparison with NaN. NaN has no position on the number line."""


class DivisionUndefined(RationalError, ZeroDivisionError):
    """Modulus with a non-finite operand or a zero divisor."""


class ParseFormat(RationalError, ValueError):
    def __init__(self, message: str, text: Optional[str] = None):
        super().__init__(message)
        self.text = text


class ConversionOverflow(RationalError, OverflowError):
    pass


class ConversionUndefined(RationalError, ValueError):
    """The target type cannot represent the value at all (NaN, infinity, fraction)."""


class InvalidConstruction(RationalError, ValueError):
    pass
