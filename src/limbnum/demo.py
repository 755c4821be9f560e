# -----------------------------------------------------------------------------
#  demo.py
#  Toy public-key message encoding on top of the UInt engine
# -----------------------------------------------------------------------------
"""
Message-encoding demo.

A message is mapped to one big integer (base-64 positional weights over its
UTF-8 bytes, first byte least significant), peeled into digits below
``prime`` by repeated division, and every digit is turned into a pair

    (g**b mod p, key**b * digit mod p)

with a fresh random exponent ``b`` in [2, p-2].
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from sympy import isprime

from limbnum.errors import MalformedNumeralError
from limbnum.runtime import CFG, debug_print
from limbnum.uint import UInt, power
from limbnum.utility import UserInputError

RADIX = 64
SPACE_NUMERAL = 62
PERIOD_NUMERAL = 63
OTHER_NUMERAL = 64
MIN_PRIME = 5


@dataclass(frozen=True)
class DemoConfig:
    prime: int
    generator: int
    key: int

    def __post_init__(self):
        for name in ("prime", "generator", "key"):
            val = getattr(self, name)
            if not isinstance(val, int) or isinstance(val, bool) or val < 0:
                raise UserInputError(f"{name} must be a non-negative integer, got {val!r}")
        if self.prime < MIN_PRIME:
            raise UserInputError(f"prime must be at least {MIN_PRIME}, got {self.prime}")

    @property
    def prime_is_prime(self) -> bool:
        return bool(isprime(self.prime))


def numeral_for(ch: str) -> int:
    """0-9 -> 0..9, A-Z -> 10..35, a-z -> 36..61, ' ' -> 62, '.' -> 63, else 64."""
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "A" <= ch <= "Z":
        return ord(ch) - ord("A") + 10
    if "a" <= ch <= "z":
        return ord(ch) - ord("a") + 36
    if ch == " ":
        return SPACE_NUMERAL
    if ch == ".":
        return PERIOD_NUMERAL
    return OTHER_NUMERAL


def encode_message(text: str) -> UInt:
    """
    Sum of numeral(byte_i) * 64**i over the UTF-8 bytes of ``text``.

    A non-ASCII character contributes one OTHER_NUMERAL per encoded byte.
    """
    code = UInt(0)
    for byte in reversed(text.encode("utf-8")):
        code *= RADIX
        code += numeral_for(chr(byte))
    return code


def split_digits(value: UInt, prime: int) -> list[int]:
    """Digits of ``value`` in base ``prime``, least significant first (never empty)."""
    rest = value.copy()
    digits: list[int] = []
    while True:
        digits.append(rest.mod_small(prime))
        rest //= prime
        if not rest:
            break
    return digits


def encrypt_digits(digits: list[int], config: DemoConfig, rng: random.Random) -> list[tuple[UInt, UInt]]:
    p = config.prime
    g = UInt(config.generator)
    key = UInt(config.key)
    pairs: list[tuple[UInt, UInt]] = []
    for digit in digits:
        b = rng.randint(2, p - 2)
        first = power(g, b, p)
        second = power(key, b, p) * digit % p
        pairs.append((first, second))
    return pairs


def make_rng(seed: int | None = None) -> random.Random:
    if seed is None:
        seed = CFG("DEMO.SEED", None)
    return random.Random(seed)


def run_demo(
    config: DemoConfig,
    message: str,
    *,
    rng: random.Random | None = None,
    out: Callable[[str], None] | None = None,
) -> list[tuple[UInt, UInt]]:
    """Encode ``message`` and emit one 'c1 c2' line per digit through ``out``."""
    rng = rng or make_rng()
    out = out or print

    code = encode_message(message)
    digits = split_digits(code, config.prime)
    debug_print(f"demo: {len(message)} chars -> {len(str(code))}-digit code -> {len(digits)} digit(s) mod {config.prime}")

    pairs = encrypt_digits(digits, config, rng)
    for first, second in pairs:
        out(f"{first} {second}")
    return pairs


def read_demo_input(stream: TextIO) -> tuple[DemoConfig, str]:
    """
    Parse the classic input layout: three integers (prime, generator, key)
    followed, on the next line, by the message.
    """
    tokens: list[str] = []
    while len(tokens) < 3:
        line = stream.readline()
        if not line:
            raise UserInputError("expected three integers (prime, generator, key) before end of input")
        tokens.extend(line.split())
    if len(tokens) > 3:
        raise UserInputError(f"expected three integers on the first line(s), got {len(tokens)} tokens")

    try:
        prime, generator, key = (int(UInt.parse(t)) for t in tokens)
    except MalformedNumeralError as e:
        raise UserInputError(f"Invalid input: {e}") from None

    message = stream.readline().rstrip("\r\n")
    return DemoConfig(prime=prime, generator=generator, key=key), message
