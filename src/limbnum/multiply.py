# -----------------------------------------------------------------------------
#  multiply.py
#  Schoolbook product and adaptive choice between schoolbook and FFT
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
from typing import Literal

from limbnum.fft import SUB_PER_LIMB, fast_mult, padded_length
from limbnum.limbs import BASE, Limbs, mul_small, normalize
from limbnum.runtime import CFG, debug_print

Strategy = Literal["auto", "schoolbook", "transform"]
STRATEGIES: tuple[str, ...] = ("auto", "schoolbook", "transform")

# Benchmark-determined, not derived: schoolbook wins until n*m reaches
# CROSSOVER_FACTOR times the transform estimate. Re-tune with `limbnum bench`.
DEFAULT_CROSSOVER_FACTOR = 15
DEFAULT_TRANSFORM_COST = 3


def slow_mult(a: Limbs, b: Limbs) -> Limbs:
    """O(n*m) schoolbook product (new list)."""
    if len(b) == 1:
        return mul_small(list(a), b[0])
    if len(a) == 1:
        return mul_small(list(b), a[0])
    s1, s2 = len(a), len(b)
    temp = [0] * (s1 + s2)
    for i in range(s1):
        ai = a[i]
        if ai == 0:
            continue
        carry = 0
        for j in range(s2):
            carry, temp[i + j] = divmod(temp[i + j] + ai * b[j] + carry, BASE)
        k = i + s2
        while carry:
            carry, temp[k] = divmod(temp[k] + carry, BASE)
            k += 1
    return normalize(temp)


def estimate_costs(len_a: int, len_b: int, transform_cost: float = DEFAULT_TRANSFORM_COST) -> tuple[int, float]:
    """Return (schoolbook, transform) cost estimates for operands of these limb counts."""
    p = padded_length(SUB_PER_LIMB * len_a, SUB_PER_LIMB * len_b)
    return len_a * len_b, transform_cost * p * math.log2(p)


def choose_strategy(
    len_a: int,
    len_b: int,
    *,
    crossover: float | None = None,
    transform_cost: float | None = None,
) -> Literal["schoolbook", "transform"]:
    if crossover is None:
        crossover = float(CFG("MULTIPLICATION.CROSSOVER_FACTOR", DEFAULT_CROSSOVER_FACTOR))
    if transform_cost is None:
        transform_cost = float(CFG("MULTIPLICATION.TRANSFORM_COST", DEFAULT_TRANSFORM_COST))
    slow, fast = estimate_costs(len_a, len_b, transform_cost)
    return "schoolbook" if slow < crossover * fast else "transform"


def mult(
    a: Limbs,
    b: Limbs,
    *,
    strategy: Strategy | None = None,
    crossover: float | None = None,
    transform_cost: float | None = None,
) -> Limbs:
    """Product of two canonical limb lists, picking the cheaper algorithm."""
    if strategy is None:
        strategy = str(CFG("MULTIPLICATION.STRATEGY", "auto")).strip().lower()
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown multiplication strategy {strategy!r}; expected one of {STRATEGIES}")

    if len(a) == 1 or len(b) == 1:
        return slow_mult(a, b)

    if strategy == "auto":
        strategy = choose_strategy(len(a), len(b), crossover=crossover, transform_cost=transform_cost)
        debug_print(f"mult {len(a)}x{len(b)} limbs -> {strategy}")

    if strategy == "transform":
        return fast_mult(a, b)
    return slow_mult(a, b)
