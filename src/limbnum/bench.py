# -----------------------------------------------------------------------------
#  bench.py
#  Timing sweep for re-tuning the multiplication crossover
# -----------------------------------------------------------------------------

from __future__ import annotations

import random
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import gmpy2

from limbnum.limbs import BASE
from limbnum.multiply import DEFAULT_TRANSFORM_COST, choose_strategy, estimate_costs
from limbnum.progress import Progress
from limbnum.runtime import CFG
from limbnum.uint import UInt


@dataclass(frozen=True, slots=True)
class BenchRow:
    limbs: int
    schoolbook_s: float
    transform_s: float
    reference_s: float   # gmpy2
    chosen: str          # what the dispatcher picks at this size
    agree: bool          # schoolbook == transform == gmpy2

    @property
    def faster(self) -> str:
        return "schoolbook" if self.schoolbook_s <= self.transform_s else "transform"

    @property
    def cost_ratio(self) -> float:
        """Schoolbook estimate divided by transform estimate at this size."""
        transform_cost = float(CFG("MULTIPLICATION.TRANSFORM_COST", DEFAULT_TRANSFORM_COST))
        slow, fast = estimate_costs(self.limbs, self.limbs, transform_cost)
        return slow / fast


def random_operand(n_limbs: int, rng: random.Random) -> UInt:
    """Random value with exactly ``n_limbs`` limbs."""
    digits = [rng.randrange(BASE) for _ in range(n_limbs - 1)]
    digits.append(rng.randrange(1, BASE))
    return UInt.from_limbs(digits)


def best_time(fn: Callable[[], object], repeat: int) -> float:
    best = float("inf")
    for _ in range(max(1, repeat)):
        t0 = time.perf_counter()
        fn()
        best = min(best, time.perf_counter() - t0)
    return best


def run_bench(
    sizes: Iterable[int],
    *,
    repeat: int = 3,
    seed: int | None = None,
    progress: bool = True,
) -> list[BenchRow]:
    sizes = [int(s) for s in sizes]
    if any(s < 1 for s in sizes):
        raise ValueError("benchmark sizes must be positive limb counts")
    rng = random.Random(seed)
    rows: list[BenchRow] = []

    with Progress(len(sizes), enabled=progress) as bar:
        for i, n in enumerate(sizes):
            bar.update(i, f"{n} limbs")
            a = random_operand(n, rng)
            b = random_operand(n, rng)
            za, zb = gmpy2.mpz(str(a)), gmpy2.mpz(str(b))

            slow = a.slow_mult(b)
            fast = a.fast_mult(b)
            ref = za * zb
            agree = slow == fast and str(slow) == ref.digits(10)

            rows.append(BenchRow(
                limbs=n,
                schoolbook_s=best_time(lambda: a.slow_mult(b), repeat),
                transform_s=best_time(lambda: a.fast_mult(b), repeat),
                reference_s=best_time(lambda: za * zb, repeat),
                chosen=choose_strategy(n, n),
                agree=agree,
            ))
        bar.update(len(sizes), "done")

    return rows


def suggest_crossover(rows: list[BenchRow]) -> float | None:
    """
    Smallest schoolbook/transform estimate ratio at which the transform was
    measured faster, i.e. a CROSSOVER_FACTOR that matches this machine.
    None when schoolbook won everywhere.
    """
    ratios = [r.cost_ratio for r in rows if r.faster == "transform" and r.limbs > 1]
    return min(ratios) if ratios else None
