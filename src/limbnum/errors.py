# -----------------------------------------------------------------------------
#  errors.py
#  Failure kinds raised by the arithmetic engine
# -----------------------------------------------------------------------------

from __future__ import annotations


class LimbnumError(Exception):
    """Base class for every error the engine raises."""


class InvalidLimbError(LimbnumError, ValueError):
    """A limb outside [0, BASE) reached normalization."""


class NegativeResultError(LimbnumError, ArithmeticError):
    """An operation would need a negative value on an unsigned type."""


class NonPositiveDivisorError(LimbnumError, ZeroDivisionError):
    """Division or remainder by a divisor <= 0."""


class MalformedNumeralError(LimbnumError, ValueError):
    """A decimal numeral contained something other than ASCII digits."""

    def __init__(self, text: str, reason: str = "not a decimal numeral"):
        shown = text if len(text) <= 40 else text[:37] + "..."
        super().__init__(f"{reason}: {shown!r}")
        self.text = text
        self.reason = reason
