# -----------------------------------------------------------------------------
#  limbs.py
#  Digit store, comparator and additive engine on raw limb lists
# -----------------------------------------------------------------------------
"""
Low-level limb arithmetic.

A value is a ``list[int]`` of limbs, least-significant first, every limb in
``[0, BASE)``. The canonical form has no most-significant zero limb, except
that zero itself is ``[0]``.

Functions named ``*_small`` take a plain non-negative int as second operand.
All "in place" functions mutate their first argument, re-normalize it and
return it, so they can be chained.
"""

from __future__ import annotations

from collections.abc import Iterable

from limbnum.errors import InvalidLimbError, NegativeResultError

BASE = 10**9   # radix of the internal representation
WIDTH = 9      # decimal digits per limb

Limbs = list[int]


def normalize(limbs: Limbs) -> Limbs:
    """Strip most-significant zero limbs (keeping one) and range-check the rest."""
    if not limbs:
        limbs.append(0)
    while len(limbs) > 1 and limbs[-1] == 0:
        limbs.pop()
    for i, d in enumerate(limbs):
        if not 0 <= d < BASE:
            raise InvalidLimbError(f"limb {i} = {d} is outside [0, {BASE})")
    return limbs


def from_int(number: int) -> Limbs:
    if number < 0:
        raise NegativeResultError(f"cannot represent negative value {number}")
    limbs: Limbs = []
    while True:
        number, d = divmod(number, BASE)
        limbs.append(d)
        if number == 0:
            break
    return normalize(limbs)


def from_sequence(digits: Iterable[int]) -> Limbs:
    limbs = list(digits)
    for i, d in enumerate(limbs):
        if not isinstance(d, int) or isinstance(d, bool):
            raise InvalidLimbError(f"limb {i} = {d!r} is not an integer")
    return normalize(limbs)


def to_int(limbs: Limbs) -> int:
    out = 0
    for d in reversed(limbs):
        out = out * BASE + d
    return out


def is_zero(limbs: Limbs) -> bool:
    return len(limbs) == 1 and limbs[0] == 0


def compare(a: Limbs, b: Limbs) -> int:
    """Return -1, 0 or 1. Both operands must be canonical."""
    if len(a) != len(b):
        return 1 if len(a) > len(b) else -1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return 1 if a[i] > b[i] else -1
    return 0


# --- addition ----------------------------------------------------------------

def add_small(a: Limbs, num: int) -> Limbs:
    if num < 0:
        raise NegativeResultError(f"cannot add negative value {num}")
    if num >= BASE:
        return add_limbs(a, from_int(num))
    carry = num
    i = 0
    while carry:
        if i == len(a):
            a.append(0)
        carry += a[i]
        if carry >= BASE:
            a[i] = carry - BASE
            carry = 1
        else:
            a[i] = carry
            carry = 0
        i += 1
    return normalize(a)


def add_limbs(a: Limbs, b: Limbs) -> Limbs:
    if len(b) == 1:
        return add_small(a, b[0])
    s1, s2 = len(a), len(b)
    carry = 0
    i = 0
    while i < s1 or i < s2 or carry:
        if i >= s1:
            a.append(0)
        carry += a[i] + (b[i] if i < s2 else 0)
        if carry >= BASE:
            a[i] = carry - BASE
            carry = 1
        else:
            a[i] = carry
            carry = 0
        i += 1
    return normalize(a)


# --- subtraction -------------------------------------------------------------

def sub_small(a: Limbs, num: int) -> Limbs:
    """a -= num; requires a >= num, otherwise raises before touching a."""
    if num < 0:
        raise NegativeResultError(f"cannot subtract negative value {num}")
    if num >= BASE:
        return sub_limbs(a, from_int(num))
    if len(a) == 1 and a[0] < num:
        raise NegativeResultError(f"{a[0]} - {num} is negative")
    borrow = num
    i = 0
    while borrow:
        cur = a[i] - borrow
        if cur < 0:
            a[i] = cur + BASE
            borrow = 1
        else:
            a[i] = cur
            borrow = 0
        i += 1
    return normalize(a)


def sub_limbs(a: Limbs, b: Limbs) -> Limbs:
    """a -= b; requires a >= b, otherwise raises before touching a."""
    if len(b) == 1:
        return sub_small(a, b[0])
    if compare(a, b) < 0:
        raise NegativeResultError("subtrahend is larger than minuend")
    s2 = len(b)
    borrow = 0
    i = 0
    while i < s2 or borrow:
        cur = a[i] - (b[i] if i < s2 else 0) - borrow
        if cur < 0:
            a[i] = cur + BASE
            borrow = 1
        else:
            a[i] = cur
            borrow = 0
        i += 1
    return normalize(a)


# --- short multiplication ----------------------------------------------------

def mul_small(a: Limbs, num: int) -> Limbs:
    """a *= num for 0 <= num < BASE (in place)."""
    if num < 0:
        raise NegativeResultError(f"cannot multiply by negative value {num}")
    if num >= BASE:
        raise ValueError(f"short multiplier {num} must be below {BASE}")
    carry = 0
    for i, d in enumerate(a):
        carry, a[i] = divmod(d * num + carry, BASE)
    if carry:
        a.append(carry)
    return normalize(a)
