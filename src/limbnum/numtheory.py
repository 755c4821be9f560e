# -----------------------------------------------------------------------------
#  numtheory.py
#  Binary exponentiation and Euclidean GCD on limb lists
# -----------------------------------------------------------------------------

from __future__ import annotations

from limbnum.division import div_mod
from limbnum.errors import NonPositiveDivisorError
from limbnum.limbs import Limbs, is_zero
from limbnum.multiply import mult


def power_limbs(base: Limbs, exponent: int, modulus: Limbs | None = None) -> Limbs:
    """
    Square-and-multiply over the bits of ``exponent``, low to high.

    With a modulus both the running result and the squared base are reduced
    after every product, so intermediate sizes stay below modulus**2. Without
    one the result grows without bound; callers limit the exponent.
    """
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")
    if modulus is not None:
        if is_zero(modulus):
            raise NonPositiveDivisorError("modulus must be positive")
        base = div_mod(base, modulus)[1]

    result: Limbs = [1]
    while exponent > 0:
        if exponent & 1:
            result = mult(result, base)
            if modulus is not None:
                result = div_mod(result, modulus)[1]
        exponent >>= 1
        if exponent:
            base = mult(base, base)
            if modulus is not None:
                base = div_mod(base, modulus)[1]

    if modulus is not None:
        # exponent 0 under modulus 1
        result = div_mod(result, modulus)[1]
    return result


def gcd_limbs(a: Limbs, b: Limbs) -> Limbs:
    """Euclid: (a, b) <- (b, a mod b) until b is zero."""
    a, b = list(a), list(b)
    while not is_zero(b):
        a, b = b, div_mod(a, b)[1]
    return a
