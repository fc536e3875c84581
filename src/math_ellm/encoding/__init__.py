"""Prime generation, tokenization and prime-product encoding."""

from .extractor import ExpressionExtractor
from .primes import PrimeSource
from .term_encoder import TermEncoder, tokenize

__all__ = ["ExpressionExtractor", "PrimeSource", "TermEncoder", "tokenize"]
