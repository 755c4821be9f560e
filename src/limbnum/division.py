# -----------------------------------------------------------------------------
#  division.py
#  Short division and normalized long division on limb lists
# -----------------------------------------------------------------------------
"""
Division engine.

``divmod_small`` handles divisors below BASE with a single pass from the most
significant limb. ``div_mod`` is normalized long division: both operands are
scaled so that the divisor's leading limb is at least BASE/2, which keeps the
trial quotient digit within 2 of the true one.

Divisors given as plain ints are always promoted to limb lists when they do
not fit a single limb, for both quotient and remainder.
"""

from __future__ import annotations

from limbnum.errors import NonPositiveDivisorError
from limbnum.limbs import (
    BASE,
    Limbs,
    compare,
    from_int,
    is_zero,
    mul_small,
    normalize,
    sub_limbs,
    to_int,
)


def _check_divisor(d: int) -> None:
    if d <= 0:
        raise NonPositiveDivisorError(f"divisor must be positive, got {d}")


def divmod_small(a: Limbs, d: int) -> tuple[Limbs, int]:
    """(a // d, a % d) for any positive int d; quotient is a new list."""
    _check_divisor(d)
    if d >= BASE:
        q, r = div_mod(a, from_int(d))
        return q, to_int(r)
    q = [0] * len(a)
    rem = 0
    for j in range(len(a) - 1, -1, -1):
        rem = rem * BASE + a[j]
        q[j], rem = divmod(rem, d)
    return normalize(q), rem


def div_small(a: Limbs, d: int) -> Limbs:
    return divmod_small(a, d)[0]


def mod_small(a: Limbs, d: int) -> int:
    _check_divisor(d)
    if d >= BASE:
        return divmod_small(a, d)[1]
    rem = 0
    for j in range(len(a) - 1, -1, -1):
        rem = (rem * BASE + a[j]) % d
    return rem


def div_mod(a: Limbs, b: Limbs) -> tuple[Limbs, Limbs]:
    """Quotient and remainder of two canonical limb lists (both new lists)."""
    if is_zero(b):
        raise NonPositiveDivisorError("division by zero")
    if len(b) == 1:
        q, r = divmod_small(a, b[0])
        return q, [r]
    if compare(a, b) < 0:
        return [0], list(a)

    norm = BASE // (b[-1] + 1)
    sa = mul_small(list(a), norm)
    sb = mul_small(list(b), norm)
    b_size = len(sb)
    lead = sb[-1]

    q = [0] * len(sa)
    r: Limbs = [0]
    for i in range(len(sa) - 1, -1, -1):
        # r = r * BASE + sa[i]
        if is_zero(r):
            r[0] = sa[i]
        else:
            r.insert(0, sa[i])
        s1 = r[b_size] if len(r) > b_size else 0
        s2 = r[b_size - 1] if len(r) > b_size - 1 else 0
        est = min((BASE * s1 + s2) // lead, BASE - 1)
        trial = mul_small(list(sb), est)
        while compare(r, trial) < 0:
            est -= 1
            sub_limbs(trial, sb)
        sub_limbs(r, trial)
        q[i] = est

    return normalize(q), divmod_small(r, norm)[0]
