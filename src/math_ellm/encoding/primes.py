"""
Prime number source for token encoding.

The cache is seeded once with a sieve of Eratosthenes and then extended one
prime at a time by trial division whenever an index past the seeded range is
requested.
"""

import logging
from typing import Dict, List

import coloredlogs

# Configure logger
logger = logging.getLogger(__name__)
coloredlogs.install(
    level="WARNING",
    logger=logger,
    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def sieve_primes(limit: int) -> List[int]:
    """Return all primes <= limit using a sieve of Eratosthenes."""
    if limit < 2:
        return []
    sieve = bytearray(limit + 1)
    primes: List[int] = []
    for i in range(2, limit + 1):
        if not sieve[i]:
            primes.append(i)
            for j in range(i * i, limit + 1, i):
                sieve[j] = 1
    return primes


class PrimeSource:
    """Generates and caches an expandable, strictly increasing sequence of primes."""

    def __init__(self, sieve_limit: int = 10000):
        logger.debug(f"Generating primes up to {sieve_limit}...")
        self._primes: List[int] = sieve_primes(sieve_limit)
        # Only positive answers are cached; composites are re-tested every time.
        self._prime_cache: Dict[int, bool] = {}
        logger.debug(f"Generated {len(self._primes)} prime numbers")

    @property
    def cached_count(self) -> int:
        return len(self._primes)

    def is_prime(self, n: int) -> bool:
        """Trial-division primality test on a 6k±1 wheel."""
        if n in self._prime_cache:
            return True
        if n <= 1:
            return False
        if n <= 3:
            return True
        if n % 2 == 0 or n % 3 == 0:
            return False

        i = 5
        while i * i <= n:
            if n % i == 0 or n % (i + 2) == 0:
                return False
            i += 6

        self._prime_cache[n] = True
        return True

    def nth_prime(self, n: int) -> int:
        """
        Return the 0-indexed n-th prime.

        Primes past the sieved range are generated on demand and appended to
        the cache, so each prime is computed at most once.

        Args:
            n: Non-negative index into the prime sequence

        Returns:
            The n-th prime (nth_prime(0) == 2)

        Raises:
            ValueError: If n is not a non-negative integer
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValueError(f"Prime index must be a non-negative integer, got {n!r}")

        if n < len(self._primes):
            return self._primes[n]

        if not self._primes:
            self._primes.append(2)
        candidate = 3 if self._primes[-1] == 2 else self._primes[-1] + 2
        while len(self._primes) <= n:
            if self.is_prime(candidate):
                self._primes.append(candidate)
            candidate += 2

        return self._primes[n]

    def factorize(self, n: int) -> List[int]:
        """
        Factor n by trial division over the cached primes.

        Factors are returned with multiplicity in ascending order. A cofactor
        left over once the cached primes run out is appended unfactored.
        """
        factors: List[int] = []
        remaining = n
        for p in self._primes:
            if remaining == 1 or p * p > remaining:
                break
            while remaining % p == 0:
                factors.append(p)
                remaining //= p

        if remaining > 1:
            factors.append(remaining)
        return factors
