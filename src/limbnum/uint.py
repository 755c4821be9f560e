# -----------------------------------------------------------------------------
#  uint.py
#  UInt: arbitrary-precision unsigned integer value cell
# -----------------------------------------------------------------------------
"""
The public value type.

``UInt`` wraps a canonical limb list. Binary operators return new values and
never touch their operands; compound operators (``+=``, ``-=``, ``*=``,
``//=``, ``%=``) mutate the receiver in place. Plain ``int`` operands are
accepted on either side as long as they are non-negative.

Subtraction requires ``minuend >= subtrahend`` and raises
``NegativeResultError`` otherwise; ``checked_sub`` is the non-raising variant.

    >>> a = UInt("123456789123456789")
    >>> str(a * 987654321)
    '121932631234567900112635269'
    >>> pow(UInt(2), 10, 1000)
    UInt('24')
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import total_ordering
from typing import TextIO, Union

from limbnum import codec, limbs
from limbnum.division import div_mod, divmod_small, mod_small
from limbnum.errors import NonPositiveDivisorError
from limbnum.fft import fast_mult
from limbnum.multiply import Strategy, mult, slow_mult
from limbnum.numtheory import gcd_limbs, power_limbs

Operand = Union["UInt", int]


@total_ordering
class UInt:
    __slots__ = ("_limbs",)

    def __init__(self, value: UInt | int | str | Sequence[int] = 0):
        if isinstance(value, UInt):
            self._limbs = list(value._limbs)
        elif isinstance(value, int):
            self._limbs = limbs.from_int(value)
        elif isinstance(value, str):
            self._limbs = codec.parse(value)
        elif isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            self._limbs = limbs.from_sequence(value)
        else:
            raise TypeError(f"cannot build UInt from {type(value).__name__}")

    # --- construction helpers -------------------------------------------------

    @classmethod
    def from_limbs(cls, digits: Sequence[int]) -> UInt:
        """Build from raw limbs, least-significant first."""
        out = cls.__new__(cls)
        out._limbs = limbs.from_sequence(digits)
        return out

    @classmethod
    def _wrap(cls, raw: limbs.Limbs) -> UInt:
        out = cls.__new__(cls)
        out._limbs = raw
        return out

    @classmethod
    def parse(cls, text: str) -> UInt:
        return cls._wrap(codec.parse(text))

    @classmethod
    def read(cls, stream: TextIO) -> UInt:
        """Read the next whitespace-delimited numeral from a text stream."""
        return cls._wrap(codec.read_numeral(stream))

    def write(self, stream: TextIO) -> None:
        codec.write_numeral(stream, self._limbs)

    def copy(self) -> UInt:
        return UInt._wrap(list(self._limbs))

    __copy__ = copy

    # --- inspection ---------------------------------------------------------

    @property
    def limbs(self) -> tuple[int, ...]:
        return tuple(self._limbs)

    def __len__(self) -> int:
        return len(self._limbs)

    def __bool__(self) -> bool:
        return not limbs.is_zero(self._limbs)

    def __int__(self) -> int:
        return limbs.to_int(self._limbs)

    def __str__(self) -> str:
        return codec.format_limbs(self._limbs)

    def __repr__(self) -> str:
        return f"UInt('{self}')"

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    # --- comparison ---------------------------------------------------------

    def compare(self, other: Operand) -> int:
        """Return -1, 0 or 1."""
        if isinstance(other, int) and other < 0:
            return 1
        return limbs.compare(self._limbs, _limbs_of(other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (UInt, int)):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: Operand) -> bool:
        if not isinstance(other, (UInt, int)):
            return NotImplemented
        return self.compare(other) < 0

    __hash__ = None  # mutable value cell

    # --- addition / subtraction ---------------------------------------------

    def __add__(self, other: Operand) -> UInt:
        return self.copy().__iadd__(other)

    __radd__ = __add__

    def __iadd__(self, other: Operand) -> UInt:
        if isinstance(other, int):
            limbs.add_small(self._limbs, other)
        elif isinstance(other, UInt):
            limbs.add_limbs(self._limbs, _own(other, self))
        else:
            return NotImplemented
        return self

    def __sub__(self, other: Operand) -> UInt:
        return self.copy().__isub__(other)

    def __rsub__(self, other: int) -> UInt:
        if not isinstance(other, int):
            return NotImplemented
        return UInt(other).__isub__(self)

    def __isub__(self, other: Operand) -> UInt:
        if isinstance(other, int):
            limbs.sub_small(self._limbs, other)
        elif isinstance(other, UInt):
            limbs.sub_limbs(self._limbs, _own(other, self))
        else:
            return NotImplemented
        return self

    def checked_sub(self, other: Operand) -> UInt | None:
        """self - other, or None when other > self."""
        if self.compare(other) < 0:
            return None
        return self - other

    # --- multiplication -----------------------------------------------------

    def mult(self, other: Operand, *, strategy: Strategy | None = None) -> UInt:
        """Product using the adaptive choice (or a forced ``strategy``)."""
        return UInt._wrap(mult(self._limbs, _limbs_of(other), strategy=strategy))

    def slow_mult(self, other: Operand) -> UInt:
        return UInt._wrap(slow_mult(self._limbs, _limbs_of(other)))

    def fast_mult(self, other: Operand) -> UInt:
        return UInt._wrap(fast_mult(self._limbs, _limbs_of(other)))

    def __mul__(self, other: Operand) -> UInt:
        if isinstance(other, int) and 0 <= other < limbs.BASE:
            return UInt._wrap(limbs.mul_small(list(self._limbs), other))
        if not isinstance(other, (UInt, int)):
            return NotImplemented
        return self.mult(other)

    __rmul__ = __mul__

    def __imul__(self, other: Operand) -> UInt:
        product = self.__mul__(other)
        if product is NotImplemented:
            return NotImplemented
        self._limbs = product._limbs
        return self

    # --- division -----------------------------------------------------------

    def div_mod(self, other: Operand) -> tuple[UInt, UInt]:
        if isinstance(other, int):
            q, r = divmod_small(self._limbs, other)
            return UInt._wrap(q), UInt(r)
        q, r = div_mod(self._limbs, _limbs_of(other))
        return UInt._wrap(q), UInt._wrap(r)

    def mod_small(self, divisor: int) -> int:
        """Remainder by a plain positive int, as a plain int."""
        return mod_small(self._limbs, divisor)

    def __divmod__(self, other: Operand) -> tuple[UInt, UInt]:
        if not isinstance(other, (UInt, int)):
            return NotImplemented
        return self.div_mod(other)

    def __rdivmod__(self, other: int) -> tuple[UInt, UInt]:
        if not isinstance(other, int):
            return NotImplemented
        return UInt(other).div_mod(self)

    def __floordiv__(self, other: Operand) -> UInt:
        if isinstance(other, int):
            return UInt._wrap(divmod_small(self._limbs, other)[0])
        if not isinstance(other, UInt):
            return NotImplemented
        return self.div_mod(other)[0]

    def __rfloordiv__(self, other: int) -> UInt:
        if not isinstance(other, int):
            return NotImplemented
        return UInt(other).__floordiv__(self)

    def __mod__(self, other: Operand) -> UInt:
        if isinstance(other, int):
            return UInt(mod_small(self._limbs, other))
        if not isinstance(other, UInt):
            return NotImplemented
        return self.div_mod(other)[1]

    def __rmod__(self, other: int) -> UInt:
        if not isinstance(other, int):
            return NotImplemented
        return UInt(other).__mod__(self)

    def __ifloordiv__(self, other: Operand) -> UInt:
        quotient = self.__floordiv__(other)
        if quotient is NotImplemented:
            return NotImplemented
        self._limbs = quotient._limbs
        return self

    def __imod__(self, other: Operand) -> UInt:
        remainder = self.__mod__(other)
        if remainder is NotImplemented:
            return NotImplemented
        self._limbs = remainder._limbs
        return self

    # --- powers -------------------------------------------------------------

    def __pow__(self, exponent: Operand, modulus: Operand | None = None) -> UInt:
        if not isinstance(exponent, (UInt, int)):
            return NotImplemented
        return power(self, exponent, modulus)

    def __rpow__(self, base: int) -> UInt:
        if not isinstance(base, int):
            return NotImplemented
        return power(base, self)


def _limbs_of(value: Operand) -> limbs.Limbs:
    if isinstance(value, UInt):
        return value._limbs
    if isinstance(value, int):
        return limbs.from_int(value)
    raise TypeError(f"unsupported operand type: {type(value).__name__}")


def _own(other: UInt, receiver: UInt) -> limbs.Limbs:
    """Operand limbs safe to read while ``receiver`` is being mutated."""
    return list(other._limbs) if other is receiver else other._limbs


def power(base: Operand, exponent: Operand, modulus: Operand | None = None) -> UInt:
    """base ** exponent, reduced modulo ``modulus`` when given."""
    if isinstance(modulus, int) and modulus <= 0:
        raise NonPositiveDivisorError(f"modulus must be positive, got {modulus}")
    mod = None if modulus is None else _limbs_of(modulus)
    return UInt._wrap(power_limbs(_limbs_of(base), int(exponent), mod))


def gcd(a: Operand, b: Operand) -> UInt:
    """Greatest common divisor; gcd(0, 0) == 0."""
    return UInt._wrap(gcd_limbs(_limbs_of(a), _limbs_of(b)))
