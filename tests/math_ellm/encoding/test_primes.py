import pytest

from math_ellm.encoding.primes import PrimeSource, sieve_primes

FIRST_TEN_PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]


@pytest.fixture
def source():
    return PrimeSource()


def test_first_ten_primes(source):
    assert [source.nth_prime(n) for n in range(10)] == FIRST_TEN_PRIMES


@pytest.mark.parametrize("sieve_limit", [1, 2, 10, 12])
def test_incremental_generation_past_sieve(sieve_limit):
    """Small sieves must hand over to trial division without gaps or repeats."""
    source = PrimeSource(sieve_limit=sieve_limit)
    assert [source.nth_prime(n) for n in range(10)] == FIRST_TEN_PRIMES


def test_nth_prime_extends_cache_once():
    source = PrimeSource(sieve_limit=10)
    assert source.cached_count == 4

    assert source.nth_prime(20) == 73
    assert source.cached_count == 21

    # Lookups inside the cache never grow it
    assert source.nth_prime(5) == 13
    assert source.cached_count == 21


def test_default_sieve_covers_primes_below_10000(source):
    assert source.cached_count == 1229
    assert source.nth_prime(1228) == 9973
    assert source.nth_prime(1229) == 10007


@pytest.mark.parametrize("bad_index", [-1, 1.5, "3", None, True])
def test_nth_prime_rejects_invalid_index(source, bad_index):
    with pytest.raises(ValueError):
        source.nth_prime(bad_index)


@pytest.mark.parametrize(
    "n,expected",
    [
        (-7, False),
        (0, False),
        (1, False),
        (2, True),
        (3, True),
        (4, False),
        (25, False),
        (49, False),
        (97, True),
        (7919, True),
        (7917, False),
    ],
)
def test_is_prime(source, n, expected):
    assert source.is_prime(n) is expected


def test_is_prime_caches_only_positive_results(source):
    assert source.is_prime(97)
    assert source.is_prime(91) is False

    assert 97 in source._prime_cache
    assert 91 not in source._prime_cache
    assert source.is_prime(97)


@pytest.mark.parametrize(
    "n,expected",
    [
        (1, []),
        (2, [2]),
        (360, [2, 2, 2, 3, 3, 5]),
        (97, [97]),
        (2 * 3 * 3 * 7919, [2, 3, 3, 7919]),
    ],
)
def test_factorize(source, n, expected):
    assert source.factorize(n) == expected


def test_factorize_keeps_unfactored_cofactor():
    source = PrimeSource(sieve_limit=10)
    # 11 and 13 are not cached, so 143 is left as a single cofactor
    assert source.factorize(2 * 11 * 13) == [2, 143]


def test_sieve_primes():
    assert sieve_primes(30) == FIRST_TEN_PRIMES
    assert sieve_primes(1) == []
    assert sieve_primes(2) == [2]
