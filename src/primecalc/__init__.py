from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("primecalc")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .bignum import BigPrime
from .config import has_profile, load_settings
from .oracle import U128_MAX, Outcome, PrimeCalc
from .runtime import APPLY, CFG
from .sieve import SieveOfEratosthenes
from .solvers import Algorithm
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "U128_MAX",
    "Algorithm",
    "BigPrime",
    "Outcome",
    "PrimeCalc",
    "SieveOfEratosthenes",
    "__version__",
    "has_profile",
    "load_settings",
    "workspace_dir",
]
