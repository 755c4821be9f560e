# -----------------------------------------------------------------------------
#  fft.py
#  Transform-domain multiplication of limb lists
# -----------------------------------------------------------------------------
"""
Multiplication by convolution in the frequency domain.

Limbs of radix 10**9 are too wide for double-precision transforms, so every
limb is first split into three radix-1000 coefficients. The convolution of two
coefficient sequences is computed with an iterative radix-2 FFT, rounded back
to integers, carried at radix 1000 and regrouped into radix-10**9 limbs.

Exactness holds while the rounding error stays below 0.5, which is the case
for transform lengths up to about 2**20.
"""

from __future__ import annotations

import cmath

from limbnum.limbs import BASE, Limbs, normalize

SUB_BASE = 1000
SUB_PER_LIMB = 3

assert SUB_BASE**SUB_PER_LIMB == BASE


def reverse_bits(number: int, n_bits: int) -> int:
    res = 0
    for i in range(n_bits):
        if number & (1 << i):
            res |= 1 << (n_bits - 1 - i)
    return res


def padded_length(len_a: int, len_b: int) -> int:
    """
    Transform length for coefficient sequences of the given sizes: the next
    power of two covering the longer one, doubled so the linear convolution
    (len_a + len_b - 1 terms) never wraps around: with m = max(len_a, len_b)
    the result is at least 2*m, and 2*m >= len_a + len_b > len_a + len_b - 1.
    """
    n = 1
    while n < max(len_a, len_b):
        n *= 2
    return 2 * n


def fft(values: list[complex], invert: bool = False) -> list[complex]:
    """Return the (inverse) discrete Fourier transform of ``values``.

    ``len(values)`` must be a power of two. The input is not modified.
    """
    n = len(values)
    if n & (n - 1):
        raise ValueError(f"transform length {n} is not a power of two")
    n_bits = n.bit_length() - 1
    a = [values[reverse_bits(i, n_bits)] for i in range(n)]

    length = 2
    while length <= n:
        ang = 2 * cmath.pi / length * (-1 if invert else 1)
        wlen = cmath.exp(1j * ang)
        half = length // 2
        twiddles = [wlen**j for j in range(half)]
        for i in range(0, n, length):
            for j in range(half):
                u = a[i + j]
                v = a[i + j + half] * twiddles[j]
                a[i + j] = u + v
                a[i + j + half] = u - v
        length *= 2

    if invert:
        a = [x / n for x in a]
    return a


def split_limbs(limbs: Limbs) -> list[complex]:
    """Radix-10**9 limbs -> radix-1000 coefficients (low, mid, high per limb)."""
    out: list[complex] = []
    for d in limbs:
        out.append(complex(d % SUB_BASE))
        out.append(complex(d // SUB_BASE % SUB_BASE))
        out.append(complex(d // (SUB_BASE * SUB_BASE)))
    return out


def join_coefficients(coeffs: list[int]) -> Limbs:
    """Carry radix-1000 coefficients and regroup them into radix-10**9 limbs."""
    digits = list(coeffs)
    carry = 0
    i = 0
    while i < len(digits) or carry:
        if i == len(digits):
            digits.append(0)
        carry, digits[i] = divmod(digits[i] + carry, SUB_BASE)
        i += 1

    limbs: Limbs = []
    for i in range(0, len(digits), SUB_PER_LIMB):
        low = digits[i]
        mid = digits[i + 1] if i + 1 < len(digits) else 0
        high = digits[i + 2] if i + 2 < len(digits) else 0
        limbs.append(low + SUB_BASE * (mid + SUB_BASE * high))
    return normalize(limbs)


def fast_mult(a: Limbs, b: Limbs) -> Limbs:
    """Product of two canonical limb lists via FFT convolution (new list)."""
    fa = split_limbs(a)
    fb = split_limbs(b)
    n = padded_length(len(fa), len(fb))
    fa.extend([0j] * (n - len(fa)))
    fb.extend([0j] * (n - len(fb)))

    ta = fft(fa)
    tb = fft(fb)
    product = fft([x * y for x, y in zip(ta, tb)], invert=True)

    coeffs = [round(c.real) for c in product]
    return join_coefficients(coeffs)
