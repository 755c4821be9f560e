from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("limbnum")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .config import has_profile, load_settings, read_current_profile
from .errors import (
    InvalidLimbError,
    LimbnumError,
    MalformedNumeralError,
    NegativeResultError,
    NonPositiveDivisorError,
)
from .limbs import BASE, WIDTH
from .runtime import APPLY, CFG
from .uint import UInt, gcd, power
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "BASE",
    "CFG",
    "WIDTH",
    "InvalidLimbError",
    "LimbnumError",
    "MalformedNumeralError",
    "NegativeResultError",
    "NonPositiveDivisorError",
    "UInt",
    "__version__",
    "gcd",
    "has_profile",
    "load_settings",
    "power",
    "read_current_profile",
    "workspace_dir",
]
