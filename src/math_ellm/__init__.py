"""
Math-ELLM: prime-encoded retrieval of mathematical question/answer pairs.

This package provides components for:
- Extracting LaTeX expressions embedded in question/answer text
- Encoding tokens and expressions as products of prime numbers
- Indexing question key terms against the expressions found in their answers
- Answering new questions by factor-set (Jaccard) similarity, with a templated
  fallback when nothing in the knowledge base is close enough
"""

__version__ = "0.1.0"
