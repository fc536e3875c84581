"""Similarity index, fallback generation and question answering."""

from .answer_engine import AnswerEngine, AnswerResult, AnswerStatus, IndexingStats
from .fallback import FallbackKind, generate_answer
from .similarity_index import Match, SimilarityIndex, jaccard_similarity

__all__ = [
    "AnswerEngine",
    "AnswerResult",
    "AnswerStatus",
    "FallbackKind",
    "IndexingStats",
    "Match",
    "SimilarityIndex",
    "generate_answer",
    "jaccard_similarity",
]
