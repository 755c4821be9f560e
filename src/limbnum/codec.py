# -----------------------------------------------------------------------------
#  codec.py
#  Decimal text <-> limb lists
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import TextIO

from limbnum.errors import MalformedNumeralError
from limbnum.limbs import WIDTH, Limbs, normalize

_NUMERAL_RE = re.compile(r"[0-9]+")


def parse(text: str) -> Limbs:
    """Parse an unsigned decimal numeral (surrounding whitespace allowed)."""
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")
    s = text.strip()
    if not s:
        raise MalformedNumeralError(text, "empty numeral")
    if not _NUMERAL_RE.fullmatch(s):
        raise MalformedNumeralError(text)

    limbs: Limbs = []
    for end in range(len(s), 0, -WIDTH):
        limbs.append(int(s[max(0, end - WIDTH):end]))
    return normalize(limbs)


def format_limbs(limbs: Limbs) -> str:
    head = str(limbs[-1])
    return head + "".join(f"{d:0{WIDTH}d}" for d in reversed(limbs[:-1]))


def read_numeral(stream: TextIO) -> Limbs:
    """Read the next whitespace-delimited token from ``stream`` and parse it."""
    ch = stream.read(1)
    while ch and ch.isspace():
        ch = stream.read(1)
    if not ch:
        raise MalformedNumeralError("", "no numeral before end of input")
    chars = []
    while ch and not ch.isspace():
        chars.append(ch)
        ch = stream.read(1)
    return parse("".join(chars))


def write_numeral(stream: TextIO, limbs: Limbs) -> None:
    stream.write(format_limbs(limbs))
