# -----------------------------------------------------------------------------
#  oracle.py
#  Shared contract of the primality engines
# -----------------------------------------------------------------------------

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

# Largest candidate any engine accepts (unsigned 128 bit)
U128_MAX = 2**128 - 1


class Outcome(Enum):
    """Three-way answer of is_prime(); INDETERMINATE is never 'not prime'."""

    PRIME = "prime"
    NOT_PRIME = "not prime"
    INDETERMINATE = "indeterminate"

    @classmethod
    def from_bool(cls, flag: bool) -> Outcome:
        return cls.PRIME if flag else cls.NOT_PRIME


class PrimeCalc(ABC):
    """
    Primality oracle.

    is_prime() answers PRIME / NOT_PRIME, or INDETERMINATE when the engine
    cannot certify n. previous_prime() / next_prime() return the neighbouring
    prime or None when no prime exists (below 2) or the search is infeasible.
    """

    @abstractmethod
    def is_prime(self, n: int) -> Outcome:
        ...

    @abstractmethod
    def previous_prime(self, n: int) -> int | None:
        ...

    @abstractmethod
    def next_prime(self, n: int) -> int | None:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
