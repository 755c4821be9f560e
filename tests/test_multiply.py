# tests/test_multiply.py
"""
Schoolbook vs transform multiplication, cross-checked against gmpy2.

Run: pytest -v
"""

from __future__ import annotations

import random

import gmpy2
import pytest

from limbnum.fft import fast_mult, fft, join_coefficients, padded_length, reverse_bits, split_limbs
from limbnum.limbs import BASE, from_int, to_int
from limbnum.multiply import choose_strategy, estimate_costs, mult, slow_mult
from limbnum.runtime import APPLY

# ---------- helpers -----------------------------------------------------------


def _random_limbs(rng: random.Random, n: int) -> list[int]:
    out = [rng.randrange(BASE) for _ in range(n - 1)]
    out.append(rng.randrange(1, BASE))
    return out


def _as_mpz(limbs: list[int]) -> gmpy2.mpz:
    return gmpy2.mpz(to_int(limbs))


# ---------- transform building blocks -----------------------------------------


def test_reverse_bits():
    assert reverse_bits(0b001, 3) == 0b100
    assert reverse_bits(0b110, 3) == 0b011
    assert [reverse_bits(i, 2) for i in range(4)] == [0, 2, 1, 3]


@pytest.mark.parametrize(
    "la,lb,expected",
    [(1, 1, 2), (3, 3, 8), (4, 1, 8), (5, 2, 16), (300, 3, 1024)],
)
def test_padded_length(la, lb, expected):
    assert padded_length(la, lb) == expected


def test_fft_inverse_roundtrip():
    values = [complex(v) for v in (1, 2, 3, 4, 0, 0, 0, 0)]
    back = fft(fft(values), invert=True)
    assert [round(x.real) for x in back] == [1, 2, 3, 4, 0, 0, 0, 0]


def test_fft_rejects_non_power_of_two():
    with pytest.raises(ValueError):
        fft([0j] * 6)


def test_split_and_join():
    limbs = [123456789, 987654321]
    coeffs = [int(c.real) for c in split_limbs(limbs)]
    assert coeffs == [789, 456, 123, 321, 654, 987]
    assert join_coefficients(coeffs) == limbs


def test_join_carries_large_coefficients():
    # 1500 at radix 1000 -> 500, carry 1 ripples through the nines
    assert join_coefficients([1500, 999, 999]) == [500, 1]
    assert to_int(join_coefficients([1500, 999, 999])) == 1500 + 999 * 1000 + 999 * 1000**2


# ---------- golden values -----------------------------------------------------


GOLDEN = 121932631234567900112635269  # 123456789123456789 * 987654321


@pytest.mark.parametrize("fn", [slow_mult, fast_mult], ids=["schoolbook", "transform"])
def test_golden_product(fn):
    assert to_int(fn(from_int(123456789123456789), from_int(987654321))) == GOLDEN


@pytest.mark.parametrize("fn", [slow_mult, fast_mult], ids=["schoolbook", "transform"])
def test_multiply_by_zero(fn):
    assert fn(from_int(10**50), from_int(0)) == [0]
    assert fn(from_int(0), from_int(10**50)) == [0]


@pytest.mark.parametrize("fn", [slow_mult, fast_mult], ids=["schoolbook", "transform"])
def test_all_nines(fn):
    x = 10**90 - 1
    assert to_int(fn(from_int(x), from_int(x))) == x * x


# ---------- agreement across sizes -------------------------------------------


SIZES = [(1, 1), (2, 1), (2, 2), (7, 3), (16, 16), (40, 5), (64, 64), (200, 150)]


@pytest.mark.parametrize("la,lb", SIZES, ids=[f"{a}x{b}" for a, b in SIZES])
def test_strategies_agree_with_gmpy2(la, lb):
    rng = random.Random(la * 1000 + lb)
    a = _random_limbs(rng, la)
    b = _random_limbs(rng, lb)
    expected = _as_mpz(a) * _as_mpz(b)
    slow = slow_mult(a, b)
    fast = fast_mult(a, b)
    assert slow == fast
    assert gmpy2.mpz(to_int(slow)) == expected


def test_operands_not_mutated():
    a, b = from_int(10**30 + 7), from_int(10**25 + 3)
    a0, b0 = list(a), list(b)
    for strategy in ("auto", "schoolbook", "transform"):
        mult(a, b, strategy=strategy)
    assert (a, b) == (a0, b0)


# ---------- dispatcher --------------------------------------------------------


def test_estimate_costs():
    slow, fast = estimate_costs(4, 4)
    # p = padded_length(12, 12) = 32 -> 3 * 32 * 5
    assert slow == 16
    assert fast == 3 * 32 * 5


def test_small_operands_use_schoolbook():
    assert choose_strategy(2, 2) == "schoolbook"
    assert choose_strategy(50, 50) == "schoolbook"


def test_large_operands_use_transform():
    assert choose_strategy(20000, 20000) == "transform"


def test_crossover_override():
    assert choose_strategy(50, 50, crossover=0.001) == "transform"
    assert choose_strategy(20000, 20000, crossover=10**9) == "schoolbook"


def test_crossover_from_profile_settings():
    APPLY({"MULTIPLICATION": {"CROSSOVER_FACTOR": 0.001, "TRANSFORM_COST": 3}})
    assert choose_strategy(50, 50) == "transform"


def test_forced_strategy_from_settings(monkeypatch):
    calls = []
    monkeypatch.setattr("limbnum.multiply.fast_mult", lambda a, b: calls.append("fft") or fast_mult(a, b))
    APPLY({"MULTIPLICATION": {"STRATEGY": "transform"}})
    out = mult(from_int(10**20), from_int(10**20))
    assert to_int(out) == 10**40
    assert calls == ["fft"]


def test_unknown_strategy():
    with pytest.raises(ValueError):
        mult(from_int(10**20), from_int(10**20), strategy="karatsuba")


def test_auto_reports_choice_in_debug_mode(capsys):
    APPLY({"BEHAVIOUR": {"DEBUG": True}})
    mult(from_int(10**20), from_int(10**20))
    assert "mult 3x3 limbs -> schoolbook" in capsys.readouterr().err
