"""
Prime-product encoding of mathematical tokens.

Every distinct normalized token is assigned the next unused prime in
first-seen order. An expression is encoded as the product of its tokens'
primes, so the encoding ignores token order but keeps multiplicity, and the
distinct prime factors of an encoding recover the set of tokens it contains.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Union

import coloredlogs

from math_ellm.encoding.primes import PrimeSource

# Configure logger
logger = logging.getLogger(__name__)
coloredlogs.install(
    level="WARNING",
    logger=logger,
    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Seeded before any corpus token so these always get the smallest primes
# fmt: off
COMMON_SYMBOLS = (
    "+", "-", "*", "/", "^", "=", "<", ">", "≤", "≥",
    "sin", "cos", "tan", "log", "ln", "exp",
    "lim", "int", "sum", "pi", "sqrt",
)
# fmt: on

KEY_SYMBOLS = frozenset(
    ["=", "+", "-", "*", "/", "^", "sin", "cos", "tan", "log", "int"]
)

_VARIABLE_RE = re.compile(r"^[a-zA-Z]$")
_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$", re.ASCII)

_FRAC_RE = re.compile(r"\\frac\{([^}]*)\}\{([^}]*)\}")
_SQRT_RE = re.compile(r"\\sqrt\{([^}]*)\}")
_WHITESPACE_RE = re.compile(r"\s+")
_OPERATOR_RE = re.compile(r"([+\-*/=<>^()])")
_COMMAND_RE = re.compile(r"\\([a-zA-Z]+)")

# (opening, closing) pairs stripped from around a whole expression, longest first
_DELIMITERS = (("$$", "$$"), ("$", "$"), ("\\(", "\\)"), ("\\[", "\\]"))

TokenInput = Union[str, Sequence[str]]


def strip_delimiters(expression: str) -> str:
    """Remove one pair of surrounding math delimiters, if present."""
    stripped = expression.strip()
    for opening, closing in _DELIMITERS:
        if (
            len(stripped) >= len(opening) + len(closing)
            and stripped.startswith(opening)
            and stripped.endswith(closing)
        ):
            return stripped[len(opening) : len(stripped) - len(closing)]
    return stripped


def tokenize(expression: str) -> List[str]:
    """
    Split a LaTeX-flavoured expression into tokens.

    This is a lexical pass, not a parser: fractions and square roots are
    rewritten into plain notation, whitespace is dropped, and the text is cut
    around operators, parentheses and backslash commands. Unbalanced or nested
    braces simply produce odd tokens.

    Args:
        expression: Expression text, optionally wrapped in math delimiters

    Returns:
        List of non-empty tokens in their original case
    """
    text = strip_delimiters(expression)
    text = _FRAC_RE.sub(r"(\1)/(\2)", text)
    text = _SQRT_RE.sub(r"sqrt(\1)", text)
    text = _WHITESPACE_RE.sub("", text)
    text = _OPERATOR_RE.sub(r" \1 ", text)
    text = _COMMAND_RE.sub(r" \1 ", text)
    return [token for token in _WHITESPACE_RE.split(text) if token]


def is_key_term(token: str) -> bool:
    """Single-letter variables, numeric literals and the key operators/functions."""
    return bool(
        _VARIABLE_RE.match(token) or _NUMBER_RE.match(token) or token in KEY_SYMBOLS
    )


class TermEncoder:
    """Assigns primes to tokens and encodes token sequences as prime products."""

    def __init__(self, prime_source: Optional[PrimeSource] = None):
        self.prime_source = prime_source or PrimeSource()
        self._term_to_prime: Dict[str, int] = {}
        self._prime_to_term: Dict[int, str] = {}
        self._next_index = 0

        for symbol in COMMON_SYMBOLS:
            self.get_prime(symbol)

    @property
    def assigned_count(self) -> int:
        """Number of distinct tokens (and primes) assigned so far."""
        return self._next_index

    def assigned_primes(self) -> List[int]:
        """Primes handed out so far, in assignment order."""
        return [self.prime_source.nth_prime(i) for i in range(self._next_index)]

    def get_prime(self, token: str) -> int:
        """Return the prime for a token, assigning the next unused one if new."""
        normalized = str(token).lower()

        prime = self._term_to_prime.get(normalized)
        if prime is not None:
            return prime

        prime = self.prime_source.nth_prime(self._next_index)
        self._next_index += 1
        self._term_to_prime[normalized] = prime
        self._prime_to_term[prime] = normalized
        logger.debug(f"Assigned prime {prime} to token '{normalized}'")
        return prime

    def term_for_prime(self, prime: int) -> Optional[str]:
        return self._prime_to_term.get(prime)

    def tokenize(self, expression: str) -> List[str]:
        return tokenize(expression)

    def key_terms(self, tokens: Iterable[str]) -> List[str]:
        return [token for token in tokens if is_key_term(token)]

    def encode_expression(self, tokens: TokenInput) -> int:
        """
        Encode tokens as the product of their primes.

        A string is tokenized first. The empty token sequence encodes to 1.
        """
        if isinstance(tokens, str):
            tokens = self.tokenize(tokens)

        encoding = 1
        for token in tokens:
            encoding *= self.get_prime(token)
        return encoding

    def encode_key_terms(self, tokens: TokenInput) -> int:
        """
        Encode only the key terms of a token sequence.

        This coarser encoding groups questions that share variables, numbers
        and core operators even when the surrounding wording differs.
        """
        if isinstance(tokens, str):
            tokens = self.tokenize(tokens)
        return self.encode_expression(self.key_terms(tokens))

    def decode(self, encoding: int) -> List[str]:
        """
        Recover the tokens of an encoding, with multiplicity.

        Factors that are not assigned primes are dropped.
        """
        terms = []
        for prime in self.prime_source.factorize(encoding):
            term = self.term_for_prime(prime)
            if term is not None:
                terms.append(term)
        return terms
