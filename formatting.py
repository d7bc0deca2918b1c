from __future__ import annotations
from typing import Optional, Tuple, Union

from arithmetic import int_to_decimal
from formats import NumberFormat, resolve_number_format

# Default fractional-digit budget of decimal strings.
DECIMAL_DIGITS = 32

def special_symbol(num: int, nf: NumberFormat) -> str:
    """Symbol for a zero-denominator pair."""
    if num > 0:
        return nf.positive_infinity_symbol
    if num < 0:
        return nf.negative_infinity_symbol
    return nf.nan_symbol

def _signed(num: int, nf: NumberFormat) -> str:
    if num < 0:
        return nf.negative_sign + int_to_decimal(-num)
    return int_to_decimal(num)

def fraction_string(num: int, den: int, number_format: Union[NumberFormat, str, None] = None) -> str:
    """"num/den", or just "num" when den == 1."""
    nf = resolve_number_format(number_format)
    if den == 0:
        return special_symbol(num, nf)
    if den == 1:
        return _signed(num, nf)
    return f"{_signed(num, nf)}/{int_to_decimal(den)}"

def expand_fraction(rem: int, den: int, max_digits: int) -> Tuple[str, str]:
    """
    Long division of the proper fraction rem/den (0 <= rem < den) with cycle detection.

    Returns (prefix, cycle). cycle is non-empty when a remainder repeated within the digit
    budget; prefix then holds the digits before the cycle. Otherwise prefix holds the digits
    produced before the remainder hit zero or the budget ran out, with trailing zeros stripped.
    A negative max_digits means no budget.
    """
    digits = []
    seen = {}  # remainder -> index in digits

    while rem != 0 and (max_digits < 0 or len(digits) < max_digits):
        seen[rem] = len(digits)
        rem *= 10
        digit, rem = divmod(rem, den)
        digits.append(str(digit))
        if rem in seen:
            start = seen[rem]
            return ''.join(digits[:start]), ''.join(digits[start:])

    return ''.join(digits).rstrip('0'), ''

def decimal_string(
    num: int,
    den: int,
    max_digits: int = DECIMAL_DIGITS,
    keep_repeating: bool = True,
    number_format: Union[NumberFormat, str, None] = None,
) -> str:
    """Decimal expansion of num/den, e.g. "0.1(6)" for 1/6.

    Args:
        num: Numerator.
        den: Denominator, positive, or 0 for the special values.
        max_digits: Maximum number of fractional digits; negative means unlimited, which always
            terminates because a rational expansion either ends or cycles.
        keep_repeating: Wrap a detected repeating group in parentheses. When False and the
            budget is finite, the group is written out as many times as fits the budget.
        number_format: Symbols to use, a registry name or a NumberFormat.

    Returns:
        The decimal string. Without a detected cycle, a budget-limited expansion is a
        truncated approximation.
    """
    nf = resolve_number_format(number_format)
    if den == 0:
        return special_symbol(num, nf)

    sign = nf.negative_sign if num < 0 else ''
    int_part, rem = divmod(abs(num), den)
    head = sign + int_to_decimal(int_part)
    if rem == 0 or max_digits == 0:
        return head

    prefix, cycle = expand_fraction(rem, den, max_digits)
    if not cycle:
        frac = prefix
    elif keep_repeating or max_digits < 0:
        frac = f"{prefix}({cycle})"
    else:
        full, partial = divmod(max_digits - len(prefix), len(cycle))
        frac = prefix + cycle * full + cycle[:partial]

    if not frac:
        return head
    return f"{head}{nf.decimal_separator}{frac}"

def parse_format_spec(spec: str) -> Optional[int]:
    """
    Digit budget for a format() spec: "" and "s" select the fraction form (None),
    "f" the decimal form with DECIMAL_DIGITS, ".Nf" the decimal form with N digits.
    """
    if spec in ('', 's'):
        return None
    if spec == 'f':
        return DECIMAL_DIGITS
    if spec.startswith('.') and spec.endswith('f') and spec[1:-1].isdecimal():
        return int(spec[1:-1])
    raise ValueError(f"Invalid format specifier '{spec}' for BigRational")
