# -----------------------------------------------------------------------------
#  sieve.py
#  Sieve of Eratosthenes over a growing odd-only table
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

from primecalc.oracle import U128_MAX, Outcome, PrimeCalc
from primecalc.runtime import CFG_INT, debug

DEFAULT_INITIAL_BOUND = 1_024
DEFAULT_MAX_BOUND = 1 << 30          # 512 MiB of odd-only bytes
DEFAULT_MAX_GROWTH_RETRIES = 64


class SieveOfEratosthenes(PrimeCalc):
    """
    Answers from a table that covers every integer below `bound`.

    Only odd numbers are stored: byte i is 1 when 2*i + 1 is prime. Two and
    the other even numbers are decided without the table. Growing the table
    sieves just the appended segment with the odd primes already known, so
    an entry never changes once written and `bound` never shrinks.
    """

    def __init__(
        self,
        *,
        initial_bound: int | None = None,
        max_bound: int | None = None,
        max_growth_retries: int | None = None,
    ):
        self.max_bound = (
            max_bound if max_bound is not None
            else CFG_INT("SIEVE.MAX_BOUND", DEFAULT_MAX_BOUND)
        )
        self.max_growth_retries = (
            max_growth_retries if max_growth_retries is not None
            else CFG_INT("SIEVE.MAX_GROWTH_RETRIES", DEFAULT_MAX_GROWTH_RETRIES)
        )
        if initial_bound is None:
            initial_bound = CFG_INT("SIEVE.INITIAL_BOUND", DEFAULT_INITIAL_BOUND)

        # byte 0 stands for the number 1
        self._table = bytearray(1)
        self._ensure(min(max(initial_bound, 2), self.max_bound) - 1)

    @property
    def bound(self) -> int:
        """Every integer below this value is decided."""
        return 2 * len(self._table)

    # ---------- table management ----------------------------------------------

    def _ensure(self, n: int) -> bool:
        """Grow until n is covered; False when that needs more than max_bound or memory."""
        if n < self.bound:
            return True
        if n >= self.max_bound:
            debug(f"sieve: {n} is beyond the table ceiling {self.max_bound}")
            return False
        target = min(max(n + 1, 2 * self.bound), self.max_bound)
        try:
            self._extend(target)
        except MemoryError:
            debug(f"sieve: out of memory growing to {target}")
            return False
        return n < self.bound

    def _extend(self, target: int) -> None:
        new_len = (target + 1) // 2
        # 2*new_len - 1 is the largest number the grown table holds
        root = isqrt(2 * new_len - 1)
        if root >= self.bound:
            # base primes up to root must be in the table first
            self._extend(root + 1)

        old_len = len(self._table)
        if new_len <= old_len:
            return

        old_bound = self.bound
        segment = bytearray(b"\x01") * (new_len - old_len)
        size = len(segment)
        lo = 2 * old_len + 1  # number held by segment[0]

        table = self._table
        for i in range(1, (root - 1) // 2 + 1):
            if not table[i]:
                continue
            p = 2 * i + 1
            start = max(p * p, -(-lo // p) * p)
            if start % 2 == 0:
                start += p
            idx = (start - lo) // 2
            if idx < size:
                # consecutive odd multiples are p slots apart
                segment[idx::p] = bytes(len(range(idx, size, p)))

        self._table += segment
        debug(f"sieve: grew {old_bound} -> {self.bound} ({size} new odd slots)")

    # ---------- oracle ---------------------------------------------------------

    def is_prime(self, n: int) -> Outcome:
        n = int(n)
        if n < 2:
            return Outcome.NOT_PRIME
        if n > U128_MAX:
            return Outcome.INDETERMINATE
        if n % 2 == 0:
            return Outcome.from_bool(n == 2)
        if not self._ensure(n):
            return Outcome.INDETERMINATE
        return Outcome.from_bool(bool(self._table[n // 2]))

    def previous_prime(self, n: int) -> int | None:
        n = int(n)
        if n <= 2:
            return None
        if n == 3:
            return 2
        top = n - 1
        if not self._ensure(top):
            return None
        # odd numbers <= top live in slots [0, (top + 1) // 2); slot 1 holds 3
        hit = self._table.rfind(1, 0, (top + 1) // 2)
        return 2 * hit + 1

    def next_prime(self, n: int) -> int | None:
        n = int(n)
        if n < 2:
            return 2
        start = n + 1 if n % 2 == 0 else n + 2
        if not self._ensure(start):
            return None
        idx = start // 2
        for _ in range(self.max_growth_retries + 1):
            hit = self._table.find(1, idx)
            if hit != -1:
                return 2 * hit + 1
            idx = len(self._table)
            if not self._ensure(self.bound):
                return None
        debug(f"sieve: no prime after {n} within {self.max_growth_retries} doublings")
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bound={self.bound}, max_bound={self.max_bound})"
