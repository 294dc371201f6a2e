# src/primecalc/solvers.py
from __future__ import annotations

from enum import Enum

from primecalc.bignum import BigPrime
from primecalc.oracle import PrimeCalc
from primecalc.sieve import SieveOfEratosthenes


class Algorithm(Enum):
    """Engine selector, fixed for one invocation."""

    BIG_NUM = "big-num"
    ERATOSTHENES = "eratosthenes"

    @classmethod
    def parse(cls, text: str) -> Algorithm:
        """Accept 'big-num', 'bignum', 'BigNum', 'eratosthenes', ... (case/dash-insensitive)."""
        key = text.strip().lower().replace("_", "").replace("-", "")
        for algo in cls:
            if algo.value.replace("-", "") == key:
                return algo
        raise ValueError(f"unknown algorithm: {text!r}")

    def solver(self) -> PrimeCalc:
        if self is Algorithm.ERATOSTHENES:
            return SieveOfEratosthenes()
        return BigPrime()

    def __str__(self) -> str:
        return self.value
