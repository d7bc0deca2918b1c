from __future__ import annotations
from typing import Optional

import numpy as np

from rational import BigRational, compare

DEFAULT_DENOMINATOR_BITS = 32


def _generator(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def random_bigint(rng: Optional[np.random.Generator], max_value: int) -> int:
    """
    Uniform integer in [0, max_value) by rejection sampling:
    draw bit_length(max_value - 1) random bits until the draw falls below max_value.
    Every draw is accepted with probability > 1/2.
    """
    if max_value < 0:
        raise ValueError(f"max_value must be >= 0, got {max_value}")
    if max_value <= 1:
        return 0
    rng = _generator(rng)
    bits = (max_value - 1).bit_length()
    nbytes = (bits + 7) // 8
    mask = (1 << bits) - 1
    while True:
        v = int.from_bytes(rng.bytes(nbytes), "little") & mask
        if v < max_value:
            return v


def random_bigint_between(rng: Optional[np.random.Generator], lo: int, hi: int) -> int:
    """Uniform integer in [lo, hi); lo when the range is empty."""
    if lo > hi:
        raise ValueError(f"lo ({lo}) must not exceed hi ({hi})")
    if lo == hi:
        return lo
    return lo + random_bigint(rng, hi - lo)


def random_rational(rng: Optional[np.random.Generator],
                    max_denominator_bits: int = DEFAULT_DENOMINATOR_BITS) -> BigRational:
    """Random value in [0, 1).

    The denominator's bit length is drawn uniformly from 1..max_denominator_bits, the
    denominator uniformly from [2**(bits-1), 2**bits) and the numerator from [0, denominator).
    The result is reduced, so its denominator may end up shorter.

    Args:
        rng: numpy Generator, or None for a freshly seeded one.
        max_denominator_bits: Upper bound for the denominator's bit length, at least 1.
    """
    if max_denominator_bits < 1:
        raise ValueError(f"max_denominator_bits must be >= 1, got {max_denominator_bits}")
    rng = _generator(rng)
    bits = int(rng.integers(1, max_denominator_bits, endpoint=True))
    den = random_bigint_between(rng, 1 << (bits - 1), 1 << bits)
    num = random_bigint(rng, den)
    return BigRational(num, den)


def random_rational_below(rng: Optional[np.random.Generator], max_value: BigRational,
                          max_denominator_bits: int = DEFAULT_DENOMINATOR_BITS) -> BigRational:
    """Random value in [0, max_value): random_rational scaled by max_value."""
    max_value = BigRational(max_value)
    if not max_value.is_normal():
        raise ValueError(f"max_value must be finite, got {max_value}")
    if max_value.is_negative():
        raise ValueError(f"max_value must be >= 0, got {max_value}")
    if max_value.is_zero():
        return BigRational.ZERO
    return random_rational(rng, max_denominator_bits) * max_value


def random_rational_between(rng: Optional[np.random.Generator], lo: BigRational, hi: BigRational,
                            max_denominator_bits: int = DEFAULT_DENOMINATOR_BITS) -> BigRational:
    """Random value in [lo, hi); lo when lo == hi."""
    lo = BigRational(lo)
    hi = BigRational(hi)
    if not (lo.is_normal() and hi.is_normal()):
        raise ValueError("Bounds must be finite")
    if compare(lo, hi) > 0:
        raise ValueError(f"lo ({lo}) must not exceed hi ({hi})")
    if lo == hi:
        return lo
    return random_rational(rng, max_denominator_bits) * (hi - lo) + lo
