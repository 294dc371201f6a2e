# -----------------------------------------------------------------------------
#  bignum.py
#  Deterministic primality for single large candidates
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache

import gmpy2
from sympy import primerange

from primecalc.oracle import U128_MAX, Outcome, PrimeCalc
from primecalc.runtime import CFG_INT, debug

"""
Decision path for one candidate n:
  1. strip factors below SMALL_PRIME_LIMIT (sympy prime list),
  2. odd trial division up to isqrt(n) while isqrt(n) <= TRIAL_DIVISION_LIMIT,
  3. strong probable prime test to the first thirteen prime bases, which is a
     proof of primality for every n < DETERMINISTIC_BOUND,
  4. INDETERMINATE above that bound.
"""

DETERMINISTIC_BOUND = 3_317_044_064_679_887_385_961_981
STRONG_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)

DEFAULT_SMALL_PRIME_LIMIT = 1_000
DEFAULT_TRIAL_DIVISION_LIMIT = 10_000_000
DEFAULT_MAX_WALK_STEPS = 100_000


@lru_cache(maxsize=8)
def small_primes(limit: int) -> tuple[int, ...]:
    """All primes below limit (at least [2, 3])."""
    return tuple(primerange(2, max(int(limit), 4)))


def _strong_prp_all_bases(n: int) -> bool:
    """Exact for odd n < DETERMINISTIC_BOUND."""
    for a in STRONG_BASES:
        if n % a == 0:
            return n == a
        if not gmpy2.is_strong_prp(n, a):
            return False
    return True


@lru_cache(maxsize=1024)
def _classify(n: int, small_limit: int, trial_limit: int) -> tuple[Outcome, str]:
    """Pure decision for n plus the path that decided it."""
    if n < 2:
        return Outcome.NOT_PRIME, "below 2"
    if n > U128_MAX:
        return Outcome.INDETERMINATE, "above 2**128 - 1"

    primes = small_primes(small_limit)
    for p in primes:
        if n % p == 0:
            return Outcome.from_bool(n == p), f"small prime {p}"

    root = int(gmpy2.isqrt(n))
    if root <= primes[-1]:
        # no divisor up to the largest small prime, so none up to sqrt(n)
        return Outcome.PRIME, "no small factor"

    if root <= trial_limit:
        for d in range(primes[-1] + 2, root + 1, 2):
            if n % d == 0:
                return Outcome.NOT_PRIME, f"factor {d}"
        return Outcome.PRIME, f"trial division up to {root}"

    if n < DETERMINISTIC_BOUND:
        return Outcome.from_bool(_strong_prp_all_bases(n)), "strong-prp certificate"

    return Outcome.INDETERMINATE, "beyond the deterministic bound"


class BigPrime(PrimeCalc):
    """
    Checks one large number at a time without any table.

    Neighbour searches walk outward candidate by candidate, so they are meant
    for sparse queries, not dense scans.
    """

    def __init__(
        self,
        *,
        small_prime_limit: int | None = None,
        trial_division_limit: int | None = None,
        max_walk_steps: int | None = None,
    ):
        self.small_prime_limit = (
            small_prime_limit if small_prime_limit is not None
            else CFG_INT("BIGNUM.SMALL_PRIME_LIMIT", DEFAULT_SMALL_PRIME_LIMIT)
        )
        self.trial_division_limit = (
            trial_division_limit if trial_division_limit is not None
            else CFG_INT("BIGNUM.TRIAL_DIVISION_LIMIT", DEFAULT_TRIAL_DIVISION_LIMIT)
        )
        self.max_walk_steps = (
            max_walk_steps if max_walk_steps is not None
            else CFG_INT("BIGNUM.MAX_WALK_STEPS", DEFAULT_MAX_WALK_STEPS)
        )

    def is_prime(self, n: int) -> Outcome:
        n = int(n)
        outcome, reason = _classify(n, self.small_prime_limit, self.trial_division_limit)
        debug(f"bignum: {n} -> {outcome.value} ({reason})")
        return outcome

    def _walk(self, start: int, step: int, stop: int) -> int | None:
        """First PRIME in start, start+step, ... not passing stop; None on INDETERMINATE or step cap."""
        cand = start
        for _ in range(self.max_walk_steps):
            if (step > 0 and cand > stop) or (step < 0 and cand < stop):
                return None
            outcome = self.is_prime(cand)
            if outcome is Outcome.PRIME:
                return cand
            if outcome is Outcome.INDETERMINATE:
                return None
            cand += step
        debug(f"bignum: walk from {start} gave up after {self.max_walk_steps} candidates")
        return None

    def previous_prime(self, n: int) -> int | None:
        n = int(n)
        if n <= 2:
            return None
        if n == 3:
            return 2
        start = n - 1 if n % 2 == 0 else n - 2
        # 3 is prime, so the downward walk always ends there at the latest
        return self._walk(start, -2, 3)

    def next_prime(self, n: int) -> int | None:
        n = int(n)
        if n < 2:
            return 2
        start = n + 1 if n % 2 == 0 else n + 2
        return self._walk(start, 2, U128_MAX)
