# tests/test_engines.py
"""
Tests for both primality engines (big-num checker and Eratosthenes sieve).

sympy serves as the reference oracle for the cross-validation tests.

Run: pytest -v
"""

from __future__ import annotations

import pytest
from sympy import isprime, nextprime, prevprime

from primecalc.bignum import DETERMINISTIC_BOUND, BigPrime
from primecalc.oracle import U128_MAX, Outcome
from primecalc.runtime import APPLY
from primecalc.sieve import SieveOfEratosthenes
from primecalc.solvers import Algorithm

P64 = 18_446_744_073_709_551_557          # 2**64 - 59, largest prime below 2**64
P64_NEXT = 18_446_744_073_709_551_629     # 2**64 + 13
P128 = 2**128 - 159                       # largest prime below 2**128

# ---------- helpers -----------------------------------------------------------


def _small_sieve(**kw) -> SieveOfEratosthenes:
    kw.setdefault("max_bound", 1 << 20)
    return SieveOfEratosthenes(**kw)


ENGINES = {
    "big-num": BigPrime,
    "eratosthenes": _small_sieve,
}


@pytest.fixture(params=sorted(ENGINES), ids=sorted(ENGINES))
def engine(request):
    return ENGINES[request.param]()


# ---------- shared contract ---------------------------------------------------


@pytest.mark.parametrize("n", [0, 1])
def test_below_two_is_not_prime(engine, n):
    assert engine.is_prime(n) is Outcome.NOT_PRIME


TEST_CASES = [
    (2,         Outcome.PRIME),
    (3,         Outcome.PRIME),
    (4,         Outcome.NOT_PRIME),
    (9,         Outcome.NOT_PRIME),
    (97,        Outcome.PRIME),
    (561,       Outcome.NOT_PRIME),     # Carmichael number
    (7919,      Outcome.PRIME),
    (1_000_001, Outcome.NOT_PRIME),     # 101 * 9901
    (1_000_003, Outcome.PRIME),
]

TEST_IDS = [f"{n}_{outcome.name}" for n, outcome in TEST_CASES]


@pytest.mark.parametrize("n,expected", TEST_CASES, ids=TEST_IDS)
def test_known_values(engine, n, expected):
    assert engine.is_prime(n) is expected


def test_neighbours_of_ten(engine):
    assert engine.next_prime(10) == 11
    assert engine.previous_prime(10) == 7


@pytest.mark.parametrize("n", [0, 1, 2])
def test_no_prime_before_two(engine, n):
    assert engine.previous_prime(n) is None


@pytest.mark.parametrize("n,expected", [(0, 2), (1, 2), (2, 3), (3, 5), (13, 17)])
def test_next_prime_small(engine, n, expected):
    assert engine.next_prime(n) == expected


def test_previous_prime_of_three_is_two(engine):
    assert engine.previous_prime(3) == 2
    assert engine.previous_prime(4) == 3


def test_neighbours_are_adjacent_primes(engine):
    for n in range(0, 2_000, 7):
        nxt = engine.next_prime(n)
        assert nxt == nextprime(n), n
        assert not any(isprime(k) for k in range(n + 1, nxt))
        prev = engine.previous_prime(n)
        if n <= 2:
            assert prev is None
        else:
            assert prev == prevprime(n), n
            assert not any(isprime(k) for k in range(prev + 1, n))


def test_engines_agree_with_each_other_and_sympy():
    big, sieve = BigPrime(), _small_sieve()
    for n in range(0, 5_000):
        a, b = big.is_prime(n), sieve.is_prime(n)
        assert a is b, n
        assert a is Outcome.from_bool(isprime(n)), n


def test_engines_agree_on_a_window_above_a_million():
    big, sieve = BigPrime(), _small_sieve()
    for n in range(999_000, 1_001_000):
        assert big.is_prime(n) is sieve.is_prime(n), n


def test_algorithm_selector_builds_matching_engine():
    assert isinstance(Algorithm.BIG_NUM.solver(), BigPrime)
    assert isinstance(Algorithm.ERATOSTHENES.solver(), SieveOfEratosthenes)
    assert Algorithm.parse("BigNum") is Algorithm.BIG_NUM
    assert Algorithm.parse("big-num") is Algorithm.BIG_NUM
    assert Algorithm.parse("Eratosthenes") is Algorithm.ERATOSTHENES
    with pytest.raises(ValueError):
        Algorithm.parse("atkin")


def test_outcome_is_not_a_bool():
    assert Outcome.INDETERMINATE is not Outcome.NOT_PRIME
    assert Outcome.from_bool(True) is Outcome.PRIME
    assert Outcome.from_bool(False) is Outcome.NOT_PRIME


# ---------- big-number checker ------------------------------------------------


BIG_CASES = [
    (1_000_000_007,          Outcome.PRIME),
    (1_000_000_009,          Outcome.PRIME),
    (1_000_000_000_039,      Outcome.PRIME),
    (1_000_000_007 * 1_000_000_009, Outcome.NOT_PRIME),
    (P64,                    Outcome.PRIME),
    (2**64 + 1,              Outcome.NOT_PRIME),   # 274177 * 67280421310721
    (3_825_123_056_546_413_051, Outcome.NOT_PRIME),  # strong pseudoprime to bases 2..31
    (2**89 - 1,              Outcome.INDETERMINATE),  # Mersenne prime above the bound
    (P128,                   Outcome.INDETERMINATE),
    (U128_MAX,               Outcome.NOT_PRIME),   # divisible by 3
    (U128_MAX + 2,           Outcome.INDETERMINATE),
]


@pytest.mark.parametrize("n,expected", BIG_CASES, ids=[f"{n}_{o.name}" for n, o in BIG_CASES])
def test_bignum_large_values(n, expected):
    assert BigPrime().is_prime(n) is expected


def test_bignum_certificate_path_matches_trial_division():
    trial = BigPrime()
    certificate = BigPrime(trial_division_limit=0)
    for n in range(1_000_000, 1_002_000):
        assert certificate.is_prime(n) is trial.is_prime(n), n
    # strong pseudoprime to bases 2..11 (6763 * 10627 * 29947)
    assert certificate.is_prime(2_152_302_898_747) is Outcome.NOT_PRIME


def test_bignum_small_prime_limit_is_configurable():
    tiny = BigPrime(small_prime_limit=10)
    assert tiny.is_prime(97) is Outcome.PRIME
    assert tiny.is_prime(121) is Outcome.NOT_PRIME
    assert tiny.is_prime(1_000_000_007) is Outcome.PRIME


def test_bignum_neighbours_around_two_to_the_64():
    big = BigPrime()
    assert big.next_prime(P64) == P64_NEXT
    assert big.previous_prime(P64_NEXT) == P64
    assert big.previous_prime(2**64) == P64


def test_bignum_walk_stops_at_the_deterministic_bound():
    big = BigPrime()
    assert big.next_prime(DETERMINISTIC_BOUND + 10) is None
    assert big.previous_prime(P128) is None
    assert big.next_prime(P128) is None
    assert big.next_prime(U128_MAX) is None


def test_bignum_walk_step_cap():
    assert BigPrime(max_walk_steps=0).next_prime(10) is None
    assert BigPrime(max_walk_steps=1).next_prime(10) == 11
    # gap after 1327 is 34 (16 odd composites first)
    assert BigPrime(max_walk_steps=10).next_prime(1327) is None
    assert BigPrime(max_walk_steps=17).next_prime(1327) == 1361


def test_bignum_reads_limits_from_runtime():
    APPLY({"BIGNUM": {"SMALL_PRIME_LIMIT": 50, "TRIAL_DIVISION_LIMIT": 123, "MAX_WALK_STEPS": 7}})
    big = BigPrime()
    assert (big.small_prime_limit, big.trial_division_limit, big.max_walk_steps) == (50, 123, 7)


# ---------- sieve engine ------------------------------------------------------


def test_sieve_is_indeterminate_beyond_its_ceiling():
    sieve = SieveOfEratosthenes()
    assert sieve.is_prime(P64) is Outcome.INDETERMINATE
    assert sieve.is_prime(U128_MAX + 2) is Outcome.INDETERMINATE
    assert sieve.previous_prime(P64) is None
    assert sieve.next_prime(P64) is None


def test_sieve_even_numbers_need_no_table():
    sieve = _small_sieve(max_bound=100)
    assert sieve.is_prime(2**100) is Outcome.NOT_PRIME
    assert sieve.bound <= 100


def test_sieve_small_ceiling():
    sieve = SieveOfEratosthenes(max_bound=1_000)
    assert sieve.is_prime(997) is Outcome.PRIME
    assert sieve.is_prime(1_009) is Outcome.INDETERMINATE
    assert sieve.previous_prime(1_000) == 997
    assert sieve.previous_prime(1_001) is None
    assert sieve.next_prime(996) == 997
    assert sieve.next_prime(997) is None


def test_sieve_grown_from_scratch_matches_sympy():
    sieve = _small_sieve(initial_bound=2)
    assert sieve.bound == 2
    for n in range(0, 20_000):
        assert sieve.is_prime(n) is Outcome.from_bool(isprime(n)), n


def test_sieve_growth_is_monotonic_and_amortised():
    sieve = _small_sieve(initial_bound=64)
    bounds = [sieve.bound]
    for n in (11, 101, 51, 5_001, 3, 70_001, 1_001):
        sieve.is_prime(n)
        bounds.append(sieve.bound)
    assert bounds == sorted(bounds)
    assert sieve.bound > 70_000
    # a query just past the bound at least doubles the table
    before = sieve.bound
    sieve.is_prime(before + 1)
    assert sieve.bound >= 2 * before


def test_sieve_answers_do_not_depend_on_growth_history():
    queries = [3, 97, 1_000, 7_919, 65_537, 65_535, 99_991, 12, 1]
    big_first = _small_sieve(initial_bound=2)
    big_first.is_prime(200_001)
    small_first = _small_sieve(initial_bound=2)

    first = [(small_first.is_prime(n), small_first.next_prime(n), small_first.previous_prime(n)) for n in queries]
    again = [(small_first.is_prime(n), small_first.next_prime(n), small_first.previous_prime(n)) for n in queries]
    other = [(big_first.is_prime(n), big_first.next_prime(n), big_first.previous_prime(n)) for n in queries]
    assert first == again == other


def test_sieve_next_prime_growth_retries():
    assert SieveOfEratosthenes(initial_bound=100, max_growth_retries=0).next_prime(97) is None
    assert SieveOfEratosthenes(initial_bound=100, max_growth_retries=1).next_prime(97) == 101


def test_sieve_square_of_prime_at_the_growth_edge():
    sieve = SieveOfEratosthenes()
    square = 1009**2
    # growing to exactly square must still sieve square itself
    assert sieve.previous_prime(square) == prevprime(square)
    assert sieve.is_prime(square) is Outcome.NOT_PRIME
    assert sieve.previous_prime(square + 2) == prevprime(square + 2)
    assert SieveOfEratosthenes().is_prime(square) is Outcome.NOT_PRIME


def test_sieve_odd_ceilings_match_sympy():
    assert SieveOfEratosthenes(max_bound=9).previous_prime(10) == 7
    for max_bound in range(3, 400, 2):
        sieve = SieveOfEratosthenes(initial_bound=2, max_bound=max_bound)
        assert sieve.previous_prime(max_bound) == prevprime(max_bound), max_bound
        for n in range(max_bound):
            assert sieve.is_prime(n) is Outcome.from_bool(isprime(n)), (max_bound, n)


def test_sieve_fails_soft_when_memory_runs_out():
    class StarvedSieve(SieveOfEratosthenes):
        def _extend(self, target):
            raise MemoryError

    sieve = StarvedSieve()
    assert sieve.bound == 2
    assert sieve.is_prime(2) is Outcome.PRIME
    assert sieve.is_prime(101) is Outcome.INDETERMINATE
    assert sieve.next_prime(10) is None
    assert sieve.previous_prime(10) is None


def test_sieve_reads_limits_from_runtime():
    APPLY({"SIEVE": {"INITIAL_BOUND": 256, "MAX_BOUND": 4_096, "MAX_GROWTH_RETRIES": 3}})
    sieve = SieveOfEratosthenes()
    assert sieve.bound == 256
    assert sieve.max_bound == 4_096
    assert sieve.max_growth_retries == 3
    assert sieve.is_prime(4_099) is Outcome.INDETERMINATE
