# src/limbnum/fmt.py
from __future__ import annotations

import re

from colorama import Fore, Style

from limbnum.runtime import CFG
from limbnum.uint import UInt

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text)


def abbr_digits(digits: str, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate a long decimal string as first<head>…last<tail>."""
    d = len(digits)
    if threshold <= 0 or d <= threshold or head + tail >= d:
        return digits
    return f"{digits[:head]}{ellipsis}{digits[-tail:]}"


def format_value(value: UInt | int, *, abbreviate: bool = True) -> str:
    """
    Decimal text for display. Uses FORMATTING.NUM_ABBR_* for abbreviation
    when the value is longer than NUM_ABBR_THRESHOLD digits.
    """
    digits = str(value)
    if not abbreviate:
        return digits
    ell = CFG("FORMATTING.ELLIPSIS", "…")
    head = int(CFG("FORMATTING.NUM_ABBR_HEAD", 20))
    tail = int(CFG("FORMATTING.NUM_ABBR_TAIL", 20))
    thr = int(CFG("FORMATTING.NUM_ABBR_THRESHOLD", 0))
    return abbr_digits(digits, head, tail, thr, ell)


def render_result(expr: str, value: UInt, *, show_details: bool = True) -> list[str]:
    """Colored result block for one evaluated expression."""
    text = format_value(value)
    lines = [f"{Fore.YELLOW}{Style.BRIGHT}{text}{Style.RESET_ALL}"]
    if show_details:
        n_digits = len(str(value))
        lines.insert(0, f"{Fore.CYAN}{expr} ={Style.RESET_ALL}")
        lines.append(f"  digits={n_digits}, limbs={len(value)}")
    return lines
