"""
Inverted index from question key-term encodings to stored expressions.

Lookups compare the distinct prime factors of the query encoding with those of
every indexed key-term encoding (Jaccard similarity). Factor sets are found by
trial division over the primes the encoder has assigned so far and cached per
indexed key. Each query is linear in the number of distinct indexed keys; there
is no inverted factor index for pruning.
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, List, Optional

import coloredlogs

from math_ellm.encoding.term_encoder import TermEncoder

# Configure logger
logger = logging.getLogger(__name__)
coloredlogs.install(
    level="WARNING",
    logger=logger,
    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@dataclass(frozen=True)
class IndexedExpression:
    expression: str
    answer: str
    source_id: Optional[int]


@dataclass(frozen=True)
class Match:
    expression: str
    answer: str
    similarity: float
    source_id: Optional[int]


def jaccard_similarity(a: AbstractSet[int], b: AbstractSet[int]) -> float:
    """|a ∩ b| / |a ∪ b|, or 0.0 when both sets are empty."""
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    if union == 0:
        return 0.0
    return intersection / union


class SimilarityIndex:
    """Stores expressions under the key-term encoding of their question."""

    def __init__(self, encoder: TermEncoder):
        self.encoder = encoder
        # key-term encoding -> expression encodings, in insertion order
        self._question_index: Dict[str, List[str]] = {}
        # expression encoding -> record; last write wins
        self._expression_index: Dict[str, IndexedExpression] = {}
        # indexed key -> factor set; queries are never cached
        self._factor_cache: Dict[str, FrozenSet[int]] = {}

    @property
    def key_count(self) -> int:
        """Number of distinct key-term encodings indexed."""
        return len(self._question_index)

    @property
    def expression_count(self) -> int:
        """Number of distinct expression encodings indexed."""
        return len(self._expression_index)

    def insert(
        self,
        key_term_encoding: int,
        expression_encoding: int,
        expression: str,
        answer: str,
        source_id: Optional[int] = None,
    ) -> None:
        expression_key = str(expression_encoding)
        self._expression_index[expression_key] = IndexedExpression(
            expression=expression, answer=answer, source_id=source_id
        )
        self._question_index.setdefault(str(key_term_encoding), []).append(
            expression_key
        )

    def factor_set(self, encoding: int) -> FrozenSet[int]:
        """
        Distinct assigned primes dividing the encoding.

        Only indexed keys are cached, so the cache never outgrows the index.
        """
        key = str(encoding)
        cached = self._factor_cache.get(key)
        if cached is not None:
            return cached

        factors = frozenset(
            prime for prime in self.encoder.assigned_primes() if encoding % prime == 0
        )
        if key in self._question_index:
            self._factor_cache[key] = factors
        return factors

    def query_similar(
        self, key_term_encoding: int, threshold: float = 0.3, limit: int = 5
    ) -> List[Match]:
        """
        Find indexed expressions whose question resembles the query.

        Args:
            key_term_encoding: Key-term encoding of the query
            threshold: Similarity a key must strictly exceed to be kept
            limit: Maximum number of matches returned

        Returns:
            Matches sorted by similarity, highest first; ties keep insertion order
        """
        query_factors = self.factor_set(key_term_encoding)

        matches: List[Match] = []
        for key, expression_keys in self._question_index.items():
            similarity = jaccard_similarity(query_factors, self.factor_set(int(key)))
            if similarity <= threshold:
                continue
            for expression_key in expression_keys:
                entry = self._expression_index[expression_key]
                matches.append(
                    Match(
                        expression=entry.expression,
                        answer=entry.answer,
                        similarity=similarity,
                        source_id=entry.source_id,
                    )
                )

        matches.sort(key=lambda m: m.similarity, reverse=True)
        logger.debug(
            f"{len(matches)} matches above {threshold} across {self.key_count} keys"
        )
        return matches[:limit]
