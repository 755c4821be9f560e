# tests/test_demo.py
"""
Message-encoding demo on top of UInt.

Run: pytest -v
"""

from __future__ import annotations

import io
import random

import pytest

from limbnum.demo import (
    OTHER_NUMERAL,
    PERIOD_NUMERAL,
    SPACE_NUMERAL,
    DemoConfig,
    encode_message,
    encrypt_digits,
    make_rng,
    numeral_for,
    read_demo_input,
    run_demo,
    split_digits,
)
from limbnum.runtime import APPLY
from limbnum.uint import UInt
from limbnum.utility import UserInputError

# ---------- helpers -----------------------------------------------------------


def _decode(pairs, prime: int, secret: int) -> int:
    """Invert the pairs with the secret exponent and rebuild the code."""
    code = 0
    for c1, c2 in reversed(pairs):
        shared_inv = pow(int(c1), prime - 1 - secret, prime)
        code = code * prime + int(c2) * shared_inv % prime
    return code


# ---------- numeral map / packing ---------------------------------------------


@pytest.mark.parametrize(
    "ch,expected",
    [("0", 0), ("9", 9), ("A", 10), ("Z", 35), ("a", 36), ("z", 61),
     (" ", SPACE_NUMERAL), (".", PERIOD_NUMERAL), ("!", OTHER_NUMERAL), ("é", OTHER_NUMERAL)],
)
def test_numeral_for(ch, expected):
    assert numeral_for(ch) == expected


def test_encode_message():
    assert encode_message("") == 0
    assert encode_message("a") == 36
    assert encode_message("ab") == 36 + 37 * 64
    text = "Hello world."
    assert encode_message(text) == sum(numeral_for(c) * 64**i for i, c in enumerate(text))


def test_encode_message_packs_utf8_bytes():
    # "\u00e9" is two bytes in UTF-8, each mapped to the catch-all numeral
    assert encode_message("\u00e9") == OTHER_NUMERAL + OTHER_NUMERAL * 64
    assert encode_message("a\u00e9.") == 36 + OTHER_NUMERAL * 64 + OTHER_NUMERAL * 64**2 + PERIOD_NUMERAL * 64**3


def test_split_digits():
    assert split_digits(UInt(2404), 5) == [4, 0, 1, 4, 3]
    assert split_digits(UInt(0), 7) == [0]


def test_split_digits_large_prime():
    value = UInt(10**40 + 12345)
    p = 10**12 + 39
    digits = split_digits(value, p)
    assert all(0 <= d < p for d in digits)
    assert sum(d * p**i for i, d in enumerate(digits)) == 10**40 + 12345
    assert value == 10**40 + 12345


# ---------- config ------------------------------------------------------------


def test_demo_config_validation():
    with pytest.raises(UserInputError):
        DemoConfig(prime=4, generator=2, key=3)
    with pytest.raises(UserInputError):
        DemoConfig(prime=11, generator=-1, key=3)
    with pytest.raises(UserInputError):
        DemoConfig(prime=11, generator=True, key=3)


def test_prime_check_uses_sympy():
    assert DemoConfig(prime=101, generator=2, key=3).prime_is_prime
    assert not DemoConfig(prime=100, generator=2, key=3).prime_is_prime


# ---------- encryption --------------------------------------------------------


def test_encrypt_digits_matches_python_pow():
    cfg = DemoConfig(prime=1000003, generator=2, key=12345)
    digits = [5, 0, 999, 1000002]
    pairs = encrypt_digits(digits, cfg, random.Random(1))

    rng = random.Random(1)
    for (c1, c2), d in zip(pairs, digits):
        b = rng.randint(2, cfg.prime - 2)
        assert c1 == pow(2, b, cfg.prime)
        assert c2 == pow(12345, b, cfg.prime) * d % cfg.prime


def test_run_demo_roundtrip():
    prime, g, secret = 1000003, 2, 4242
    cfg = DemoConfig(prime=prime, generator=g, key=pow(g, secret, prime))
    lines: list[str] = []
    message = "Hello world."

    pairs = run_demo(cfg, message, rng=random.Random(7), out=lines.append)

    assert len(lines) == len(pairs) == len(split_digits(encode_message(message), prime))
    assert lines[0] == f"{pairs[0][0]} {pairs[0][1]}"
    assert _decode(pairs, prime, secret) == encode_message(message)


def test_seed_from_profile_is_deterministic():
    APPLY({"DEMO": {"SEED": 99}})
    cfg = DemoConfig(prime=101, generator=2, key=3)
    first = run_demo(cfg, "abc", rng=make_rng(), out=lambda s: None)
    second = run_demo(cfg, "abc", rng=make_rng(), out=lambda s: None)
    assert [tuple(map(int, p)) for p in first] == [tuple(map(int, p)) for p in second]


# ---------- input layout ------------------------------------------------------


def test_read_demo_input():
    cfg, msg = read_demo_input(io.StringIO("101 2\n37\nHello world.\r\n"))
    assert (cfg.prime, cfg.generator, cfg.key) == (101, 2, 37)
    assert msg == "Hello world."


def test_read_demo_input_empty_message():
    _, msg = read_demo_input(io.StringIO("101 2 37\n"))
    assert msg == ""


@pytest.mark.parametrize(
    "text",
    ["", "101 2\n", "101 2 x\nhi\n", "101 2 3 4\nhi\n", "3 2 1\nhi\n"],
    ids=["empty", "short", "malformed", "too-many", "small-prime"],
)
def test_read_demo_input_errors(text):
    with pytest.raises(UserInputError):
        read_demo_input(io.StringIO(text))
