from __future__ import annotations
import logging
import math

from errors import NegativeArgument, InvalidExponent, NoRealRoot

logger = logging.getLogger(__name__)

# Largest shift applied in a single step; matches a signed 32-bit platform int.
MAX_SHIFT_CHUNK = 2**31 - 1

# Cap for the Newton loops below. Each step at least doubles the number of correct leading
# bits, so valid inputs converge long before this.
ROOT_ITERATIONS = 100_000


def is_perfect_square(v: int) -> bool:
    if v < 0:
        return False
    if v in (0, 1):
        return True
    r = isqrt(v)
    return r * r == v


def isqrt(v: int, max_iterations: int = ROOT_ITERATIONS) -> int:
    """
    Integer square root, rounded down, by Newton's method:
      x := 1 << ceil(bitlength(v) / 2)
      y := (x + v / x) >> 1
      while y < x:
        x := y
        y := (x + v / x) >> 1
    The seed is always >= sqrt(v), so the sequence decreases until it reaches floor(sqrt(v)).
    """
    if v < 0:
        raise NegativeArgument("isqrt: negative input")
    if v in (0, 1):
        return v
    x = 1 << ((v.bit_length() + 1) >> 1)
    y = (x + v // x) >> 1
    i = 0
    while y < x:
        if i >= max_iterations:
            logger.debug("isqrt: stopped after %d iterations", i)
            break
        x = y
        y = (x + v // x) >> 1
        i += 1
    return x


def nth_root(v: int, n: int, max_iterations: int = ROOT_ITERATIONS) -> int:
    """Integer n-th root, truncated toward zero.

    Args:
        v: Radicand. May be negative when ``n`` is odd.
        n: Root index, at least 2.
        max_iterations: Newton iteration cap.

    Raises:
        InvalidExponent: If ``n < 2``.
        NoRealRoot: If ``v`` is negative and ``n`` is even (``n == 2`` goes through
            :func:`isqrt`, which raises NegativeArgument).
    """
    if n < 2:
        raise InvalidExponent(f"nth_root: root index must be >= 2, got {n}")
    if n == 2:
        return isqrt(v, max_iterations)
    if v < 0 and n % 2 == 0:
        raise NoRealRoot(f"nth_root: even root ({n}) of a negative value")
    if v in (0, 1, -1):
        return v

    a = abs(v)
    n1 = n - 1
    x = 1 << -(-a.bit_length() // n)
    y = (n1 * x + a // x ** n1) // n
    i = 0
    while y < x:
        if i >= max_iterations:
            logger.debug("nth_root: stopped after %d iterations", i)
            break
        x = y
        y = (n1 * x + a // x ** n1) // n
        i += 1
    return -x if v < 0 else x


def shift_left(v: int, count: int) -> int:
    if count < 0:
        raise ValueError(f"shift_left: negative shift count {count}")
    if count == 0 or v == 0:
        return v
    while count > 0:
        s = min(count, MAX_SHIFT_CHUNK)
        v <<= s
        count -= s
    return v


def shift_right(v: int, count: int) -> int:
    """
    Shift the magnitude of v right by count bits (truncation toward zero).
    Returns 0 as soon as count reaches the bit length of v.
    """
    if count < 0:
        raise ValueError(f"shift_right: negative shift count {count}")
    if count == 0 or v == 0:
        return v
    if count >= v.bit_length():
        return 0
    negative = v < 0
    a = -v if negative else v
    while count > 0:
        s = min(count, MAX_SHIFT_CHUNK)
        a >>= s
        count -= s
        if a == 0:
            return 0
    return -a if negative else a


def decimal_digit_count(v: int) -> int:
    """Number of decimal digits of |v|; 1 for zero."""
    if v == 0:
        return 1
    v = abs(v)
    digits = math.floor(math.log10(v)) + 1
    # log10 can be off by one at powers of ten
    if 10 ** (digits - 1) > v:
        digits -= 1
    elif 10 ** digits <= v:
        digits += 1
    return digits


# Decimal digits converted by a single str()/int() call. CPython 3.11+ refuses conversions of
# more than 4300 digits by default, so longer values are split in halves.
STR_CHUNK_DIGITS = 1000


def int_to_decimal(v: int) -> str:
    if v < 0:
        return "-" + int_to_decimal(-v)
    if v.bit_length() <= 3 * STR_CHUNK_DIGITS:
        return str(v)
    k = decimal_digit_count(v) // 2
    hi, lo = divmod(v, 10 ** k)
    return int_to_decimal(hi) + int_to_decimal(lo).rjust(k, "0")


def decimal_to_int(digits: str) -> int:
    """Inverse of int_to_decimal for a plain run of ASCII digits (no sign)."""
    if len(digits) <= STR_CHUNK_DIGITS:
        return int(digits)
    k = len(digits) // 2
    return decimal_to_int(digits[:-k]) * 10 ** k + decimal_to_int(digits[-k:])
