from __future__ import annotations
from dataclasses import dataclass
from math import ldexp
import math
from typing import NamedTuple, Optional, Tuple, Union

import numpy as np

from arithmetic import shift_left, shift_right

@dataclass(frozen=True)
class FloatFormat:
    name: str
    p: int              # precision in bits (incl. implicit 1)
    emin: int           # minimum normal exponent (unbiased)
    emax: int           # maximum finite exponent (unbiased)
    dtype: np.dtype     # native numpy type with this layout
    # Derived (IEEE-754, round-to-nearest-even):
    Fmax: float         # largest finite positive
    eps: float          # machine epsilon (nextafter(1,2) - 1) = 2^(1-p)
    min_normal: float   # smallest positive normal = 2^emin
    denorm_min: float   # smallest positive subnormal = 2^(emin - (p-1))

    @property
    def bias(self) -> int:
        return self.emax

    @property
    def mantissa_bits(self) -> int:
        return self.p - 1

    @property
    def exponent_bits(self) -> int:
        return (2 * self.emax + 1).bit_length()

    @property
    def bits(self) -> int:
        return 1 + self.exponent_bits + self.mantissa_bits

    @property
    def uint_dtype(self) -> np.dtype:
        return np.dtype(f"uint{self.bits}")

def _derive(name: str, p: int, emin: int, emax: int, dtype: str) -> FloatFormat:
    eps = ldexp(1.0, 1 - p)
    min_normal = ldexp(1.0, emin)
    denorm_min = min_normal * eps
    # all ones in the significand at the top exponent
    Fmax = (2.0 - eps) * ldexp(1.0, emax)
    return FloatFormat(
        name=name, p=p, emin=emin, emax=emax, dtype=np.dtype(dtype),
        Fmax=Fmax, eps=eps, min_normal=min_normal, denorm_min=denorm_min
    )

# IEEE-754 binary formats with a numpy counterpart (unbiased exponent bounds):
# - binary16:   p=11,  emin = -14, emax = 15
# - binary32:   p=24,  emin = -126, emax = 127
# - binary64:   p=53,  emin = -1022, emax = 1023
_REGISTRY = {
    "float16":   (11,  -14, 15, "float16"),
    "fp16":      (11,  -14, 15, "float16"),
    "binary16":  (11,  -14, 15, "float16"),
    "half":      (11,  -14, 15, "float16"),

    "float32":   (24, -126, 127, "float32"),
    "fp32":      (24, -126, 127, "float32"),
    "binary32":  (24, -126, 127, "float32"),
    "single":    (24, -126, 127, "float32"),

    "float64":   (53, -1022, 1023, "float64"),
    "fp64":      (53, -1022, 1023, "float64"),
    "binary64":  (53, -1022, 1023, "float64"),
    "double":    (53, -1022, 1023, "float64"),
}

def get_float_format(name: str) -> FloatFormat:
    key = (name or "float64").lower()
    try:
        p, emin, emax, dtype = _REGISTRY[key]
    except KeyError:
        raise NotImplementedError(f"Format '{name}' not implemented. Supported formats {_REGISTRY.keys()}")
    return _derive(key, p, emin, emax, dtype)

# ==============================================================================
# Fixed-width integers
# ==============================================================================

@dataclass(frozen=True)
class IntegerFormat:
    name: str
    bits: int
    signed: bool
    min: int
    max: int
    dtype: np.dtype

    def contains(self, v: int) -> bool:
        return self.min <= v <= self.max

_INT_REGISTRY = ("int8", "int16", "int32", "int64", "uint8", "uint16", "uint32", "uint64")

def get_integer_format(name: str) -> IntegerFormat:
    key = (name or "int64").lower()
    if key not in _INT_REGISTRY:
        raise NotImplementedError(f"Format '{name}' not implemented. Supported formats {_INT_REGISTRY}")
    dtype = np.dtype(key)
    info = np.iinfo(dtype)
    return IntegerFormat(name=key, bits=info.bits, signed=info.min < 0,
                         min=int(info.min), max=int(info.max), dtype=dtype)

NativeFormat = Union[FloatFormat, IntegerFormat]

def find_native_format(target) -> Optional[NativeFormat]:
    """
    Resolve a registry name, numpy dtype or numpy scalar type to its format.
    Returns None for anything that is not a fixed-width native number type.
    """
    if isinstance(target, str):
        key = target.lower()
    else:
        try:
            key = np.dtype(target).name
        except TypeError:
            return None
    if key in _REGISTRY:
        return get_float_format(key)
    if key in _INT_REGISTRY:
        return get_integer_format(key)
    return None

# ==============================================================================
# Bit-level decomposition of binary floating point
# ==============================================================================

class FloatParts(NamedTuple):
    negative: bool
    exponent: int       # biased exponent field
    mantissa: int       # stored fraction field, without the implicit leading bit

def unpack_float(value, fmt: FloatFormat) -> FloatParts:
    bits = int(np.asarray(value, dtype=fmt.dtype).view(fmt.uint_dtype))
    negative = (bits >> (fmt.bits - 1)) != 0
    exponent = (bits >> fmt.mantissa_bits) & ((1 << fmt.exponent_bits) - 1)
    mantissa = bits & ((1 << fmt.mantissa_bits) - 1)
    return FloatParts(negative, exponent, mantissa)

def float_to_ratio(value, fmt: FloatFormat) -> Tuple[int, int]:
    """Exact (numerator, denominator) of a binary float, not reduced.

    Uses the rational engine's encoding for non-finite values: NaN is (0, 0), +inf is (1, 0)
    and -inf is (-1, 0). Both zeros give (0, 1).

    Args:
        value: Python float or numpy floating scalar, stored as ``fmt``.
        fmt: Layout of ``value``.

    Returns:
        Tuple ``(numerator, denominator)``.
    """
    negative, exponent, mantissa = unpack_float(value, fmt)
    exponent_mask = (1 << fmt.exponent_bits) - 1

    if exponent == exponent_mask:
        if mantissa:
            return 0, 0
        return (-1 if negative else 1), 0

    if exponent == 0:
        if mantissa == 0:
            return 0, 1
        # subnormal: no implicit bit, exponent pinned at emin
        exponent = 1 - fmt.bias
    else:
        mantissa |= 1 << fmt.mantissa_bits
        exponent -= fmt.bias

    num = mantissa
    den = 1 << fmt.mantissa_bits
    if exponent > 0:
        num = shift_left(num, exponent)
    elif exponent < 0:
        den = shift_left(den, -exponent)
    if negative:
        num = -num
    return num, den

def ratio_to_float(num: int, den: int, fmt: FloatFormat):
    """
    Nearest value of type fmt.dtype to num/den (den >= 0, den == 0 encodes NaN/inf).
    Overflow gives a signed infinity, underflow a signed zero.

    When both operands are wide, they are right-shifted by a common amount first so that the
    smaller one keeps 2p+2 significant bits; the dropped low bits cannot move the rounded result
    by more than the double rounding through float64 already does.
    """
    to_native = fmt.dtype.type
    if den == 0:
        if num == 0:
            return to_native(np.nan)
        return to_native(np.inf if num > 0 else -np.inf)
    if num == 0:
        return to_native(0.0)

    a = abs(num)
    shift = max(0, min(a.bit_length(), den.bit_length()) - (2 * fmt.p + 2))
    a = shift_right(a, shift)
    d = shift_right(den, shift)
    try:
        q = a / d
    except OverflowError:
        q = math.inf
    if num < 0:
        q = -q
    with np.errstate(over="ignore"):
        return to_native(q)

def float_format_of(value) -> Optional[FloatFormat]:
    if isinstance(value, np.floating):
        return find_native_format(value.dtype)
    if isinstance(value, float):
        return get_float_format("float64")
    return None

# ==============================================================================
# Text symbols
# ==============================================================================

@dataclass(frozen=True)
class NumberFormat:
    name: str
    decimal_separator: str
    group_separator: str
    negative_sign: str
    positive_sign: str
    nan_symbol: str
    positive_infinity_symbol: str
    negative_infinity_symbol: str

_NUMBER_REGISTRY = {
    "invariant": (".", ",", "-", "+", "NaN", "Infinity", "-Infinity"),
    "en":        (".", ",", "-", "+", "NaN", "∞", "-∞"),
    "de":        (",", ".", "-", "+", "NaN", "∞", "-∞"),
    "fr":        (",", "\u202f", "-", "+", "NaN", "∞", "-∞"),
}

DEFAULT_NUMBER_FORMAT = "invariant"

def get_number_format(name: Optional[str] = None) -> NumberFormat:
    key = (name or DEFAULT_NUMBER_FORMAT).lower()
    try:
        fields = _NUMBER_REGISTRY[key]
    except KeyError:
        raise NotImplementedError(f"Number format '{name}' not implemented. Supported formats {_NUMBER_REGISTRY.keys()}")
    return NumberFormat(key, *fields)

def resolve_number_format(number_format: Union[NumberFormat, str, None]) -> NumberFormat:
    if isinstance(number_format, NumberFormat):
        return number_format
    return get_number_format(number_format)
