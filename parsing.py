from __future__ import annotations
import logging
from typing import Optional, Tuple, Union

from arithmetic import decimal_to_int
from errors import ParseFormat
from formats import NumberFormat, resolve_number_format
from rational import BigRational

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")


def _fail(message: str, text: str):
    logger.debug("parse_rational: rejected %r: %s", text, message)
    raise ParseFormat(message, text)


def scan_digits(s: str, i: int) -> int:
    """Index just past the run of ASCII digits starting at i."""
    n = len(s)
    while i < n and s[i] in DIGITS:
        i += 1
    return i


def parse_sign(s: str, i: int, nf: NumberFormat) -> Tuple[bool, int]:
    if s.startswith(nf.negative_sign, i):
        return True, i + len(nf.negative_sign)
    if s.startswith(nf.positive_sign, i):
        return False, i + len(nf.positive_sign)
    return False, i


def parse_grouped_digits(s: str, i: int, nf: NumberFormat, text: str) -> Tuple[str, int]:
    """
    Digits of an integer part, possibly split by the group separator ("1,234,567").
    A separator must sit between two digits. Returns the digits without separators.
    """
    sep = nf.group_separator
    start = i
    i = scan_digits(s, i)
    if i == start:
        _fail(f"Expected digit at position {i}", text)
    parts = [s[start:i]]
    while sep and s.startswith(sep, i):
        j = i + len(sep)
        k = scan_digits(s, j)
        if k == j:
            _fail(f"Group separator must be followed by digits at position {j}", text)
        parts.append(s[j:k])
        i = k
    return ''.join(parts), i


def parse_special(s: str, nf: NumberFormat) -> Optional[BigRational]:
    """NaN / infinity symbols of nf (case-insensitive), or None."""
    key = s.casefold()
    if key == nf.nan_symbol.casefold():
        return BigRational.NAN
    if key in (nf.positive_infinity_symbol.casefold(),
               (nf.positive_sign + nf.positive_infinity_symbol).casefold()):
        return BigRational.POSITIVE_INFINITY
    if key == nf.negative_infinity_symbol.casefold():
        return BigRational.NEGATIVE_INFINITY
    return None


def parse_decimal(s: str, nf: NumberFormat, text: str) -> BigRational:
    """
    Decimal form [sign] intpart sep [nonrepeat] [(repeat)]. Either side of the separator may be
    empty, but not both. For intpart.nonrepeat(repeat) with m = len(nonrepeat), r = len(repeat):
      value = (intpart * 10^m * (10^r - 1) + nonrepeat * (10^r - 1) + repeat) / (10^m * (10^r - 1))
    """
    sep = nf.decimal_separator
    negative, i = parse_sign(s, 0, nf)
    point = s.index(sep, i)

    if point == i:
        int_digits = ''
    else:
        int_digits, i = parse_grouped_digits(s, i, nf, text)
        if i != point:
            _fail(f"Unexpected character {s[i]!r} at position {i}", text)
    i = point + len(sep)

    start = i
    i = scan_digits(s, i)
    nonrepeat = s[start:i]
    repeat = ''
    if i < len(s) and s[i] == '(':
        start = i + 1
        i = scan_digits(s, start)
        repeat = s[start:i]
        if not repeat:
            _fail(f"Empty repeating group at position {start}", text)
        if i >= len(s) or s[i] != ')':
            _fail(f"Expected ')' at position {i}", text)
        i += 1
    if i != len(s):
        _fail(f"Unexpected trailing content at position {i}", text)
    if not int_digits and not nonrepeat and not repeat:
        _fail("No digits on either side of the decimal separator", text)

    int_part = decimal_to_int(int_digits) if int_digits else 0
    fixed = decimal_to_int(nonrepeat) if nonrepeat else 0
    a = 10 ** len(nonrepeat)
    if repeat.strip('0'):
        b = 10 ** len(repeat) - 1
        num = int_part * a * b + fixed * b + decimal_to_int(repeat)
        den = a * b
    else:
        # (0), (00), ... add nothing
        num = int_part * a + fixed
        den = a
    return BigRational(-num if negative else num, den)


def parse_integer(s: str, nf: NumberFormat, text: str) -> BigRational:
    negative, i = parse_sign(s, 0, nf)
    digits, i = parse_grouped_digits(s, i, nf, text)
    if i != len(s):
        _fail(f"Unexpected trailing content at position {i}", text)
    v = decimal_to_int(digits)
    return BigRational(-v if negative else v)


def parse_term(s: str, nf: NumberFormat, text: str) -> BigRational:
    s = s.strip()
    if not s:
        _fail("Empty number", text)
    special = parse_special(s, nf)
    if special is not None:
        return special
    if nf.decimal_separator in s:
        return parse_decimal(s, nf, text)
    return parse_integer(s, nf, text)


def parse_rational(s: str, number_format: Union[NumberFormat, str, None] = None) -> BigRational:
    """Parse the text forms of a rational number.

    Accepted forms (surrounding whitespace is ignored):

    - ``A/B``: both sides use the forms below and are divided, so ``1/0`` is +Infinity and
      ``0/0`` is NaN. Only one ``/`` is allowed.
    - Decimal with an optional repeating group: ``-3.5``, ``.25``, ``2.``, ``0.1(6)``.
    - Integer with optional sign and group separators: ``-1,234``.
    - The NaN and infinity symbols of the number format.

    Args:
        s: Text to parse.
        number_format: NumberFormat or registry name ("invariant", "en", "de", "fr").

    Returns:
        The parsed BigRational.

    Raises:
        ParseFormat: If s is not in one of the forms above. The exception carries s as ``text``.
    """
    if not isinstance(s, str):
        raise TypeError(f"parse_rational expects str, got {type(s).__name__}")
    nf = resolve_number_format(number_format)
    text = s
    s = s.strip()
    if not s:
        _fail("Empty string", text)

    left, slash, right = s.partition('/')
    if not slash:
        return parse_term(s, nf, text)
    if '/' in right:
        _fail(f"More than one '/' in {s!r}", text)
    return parse_term(left, nf, text) / parse_term(right, nf, text)


def try_parse_rational(s: str, number_format: Union[NumberFormat, str, None] = None) -> Optional[BigRational]:
    try:
        return parse_rational(s, number_format)
    except ParseFormat:
        return None
