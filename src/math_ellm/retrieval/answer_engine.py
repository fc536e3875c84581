"""
Indexing of Q&A corpora and answering of new questions.

Build time: every expression found in a record's answer is encoded and stored
under the key-term encoding of the record's question. Query time: the question
is key-term encoded, the most similar indexed questions are looked up, and the
best match is returned. When nothing clears the similarity threshold a
templated answer is generated instead, so every query produces an answer.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

import coloredlogs
from pydantic import BaseModel, ConfigDict, Field
from tqdm import tqdm

from math_ellm.core.exceptions import ExtractionError
from math_ellm.core.qa_record import QARecord
from math_ellm.encoding.extractor import ExpressionExtractor
from math_ellm.encoding.term_encoder import TermEncoder
from math_ellm.retrieval.fallback import FallbackKind, generate_answer
from math_ellm.retrieval.similarity_index import Match, SimilarityIndex

# Configure logger
logger = logging.getLogger(__name__)
coloredlogs.install(
    level="INFO",
    logger=logger,
    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

GENERATED_CONFIDENCE = 0.5
GENERATED_NOTE = "Generated answer (not from knowledge base)"

RecordInput = Union[QARecord, Mapping[str, Any]]


class AnswerStatus(str, Enum):
    MATCHED = "matched"
    GENERATED = "generated"
    GENERATED_DEFAULT = "generated_default"


class AnswerResult(BaseModel):
    """
    Answer to a single query.

    ``model_dump(exclude_none=True)`` gives the public payload
    ``{query, expression, confidence, answer, note?}``; ``status`` and
    ``source_id`` are kept for callers but left out of dumps.
    """

    query: str
    expression: str
    confidence: str
    answer: str
    note: Optional[str] = None
    status: AnswerStatus = Field(exclude=True)
    source_id: Optional[int] = Field(default=None, exclude=True)

    model_config = ConfigDict(frozen=True)

    @property
    def is_generated(self) -> bool:
        return self.status is not AnswerStatus.MATCHED


@dataclass
class IndexingStats:
    records_seen: int = 0
    records_skipped: int = 0
    records_with_expressions: int = 0
    expressions_found: int = 0
    question_patterns: int = 0
    unique_expressions: int = 0
    duration_seconds: float = 0.0

    @property
    def records_indexed(self) -> int:
        return self.records_with_expressions


class AnswerEngine:
    """Owns the encoder, extractor and index used to answer math questions."""

    def __init__(
        self,
        encoder: Optional[TermEncoder] = None,
        index: Optional[SimilarityIndex] = None,
        extractor: Optional[ExpressionExtractor] = None,
        threshold: float = 0.3,
        limit: int = 5,
    ):
        self.encoder = encoder or TermEncoder()
        self.index = index or SimilarityIndex(self.encoder)
        self.extractor = extractor or ExpressionExtractor()
        self.threshold = threshold
        self.limit = limit

    def index_record(self, record: RecordInput) -> int:
        """
        Index every expression in a record's answer.

        Returns:
            Number of expressions indexed

        Raises:
            ExtractionError: If the answer text cannot be scanned
            ValueError: If the record does not validate as a QARecord
        """
        if not isinstance(record, QARecord):
            record = QARecord.from_dict(record)

        expressions = self.extractor.extract(record.answer)
        if not expressions:
            return 0

        question_terms = self.encoder.encode_key_terms(record.question)
        for expression in expressions:
            self.index.insert(
                key_term_encoding=question_terms,
                expression_encoding=self.encoder.encode_expression(expression),
                expression=expression,
                answer=record.answer,
                source_id=record.id,
            )
        return len(expressions)

    def index_corpus(
        self,
        records: Iterable[RecordInput],
        show_progress: bool = False,
        progress_every: int = 1000,
    ) -> IndexingStats:
        """
        Index records one at a time, skipping any that fail.

        A broken record is logged and skipped; the rest of the corpus is still
        indexed.

        Args:
            records: QARecord instances or mappings with id/qid, question, answer
            show_progress: Show a tqdm progress bar
            progress_every: Log progress after this many records with expressions

        Returns:
            IndexingStats for this call
        """
        stats = IndexingStats()
        start_time = time.perf_counter()

        for record in tqdm(records, desc="Indexing", disable=not show_progress):
            stats.records_seen += 1
            try:
                found = self.index_record(record)
            except (ExtractionError, ValueError, TypeError) as e:
                stats.records_skipped += 1
                logger.warning(f"Skipping record #{stats.records_seen}: {e}")
                continue

            if found:
                stats.records_with_expressions += 1
                stats.expressions_found += found
                if stats.records_with_expressions % progress_every == 0:
                    logger.info(
                        f"Processed {stats.records_with_expressions} records with "
                        "expressions so far..."
                    )

        stats.duration_seconds = time.perf_counter() - start_time
        stats.question_patterns = self.index.key_count
        stats.unique_expressions = self.index.expression_count

        logger.info(f"Completed processing in {stats.duration_seconds:.2f} seconds")
        logger.info(
            f"Indexed {stats.records_with_expressions}/{stats.records_seen} records "
            f"({stats.records_skipped} skipped)"
        )
        logger.info(
            f"Indexed {stats.question_patterns} unique question term patterns and "
            f"{stats.unique_expressions} unique mathematical expressions"
        )
        return stats

    def find_similar(self, question: str) -> List[Match]:
        """Ranked matches for a question, without fallback generation."""
        question_terms = self.encoder.encode_key_terms(question)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Query key terms: {self.encoder.decode(question_terms)}")
        return self.index.query_similar(
            question_terms, threshold=self.threshold, limit=self.limit
        )

    def answer_question(self, question: str) -> AnswerResult:
        """
        Answer a question from the index, or generate a templated answer.

        Args:
            question: Free-text question, possibly containing LaTeX

        Returns:
            AnswerResult; generated answers carry a note and confidence 0.5000
        """
        logger.debug(f"Answering question: {question}")

        matches = self.find_similar(question)
        if matches:
            best = matches[0]
            return AnswerResult(
                query=question,
                expression=best.expression,
                confidence=f"{best.similarity:.4f}",
                answer=best.answer,
                status=AnswerStatus.MATCHED,
                source_id=best.source_id,
            )

        generated = generate_answer(question)
        status = (
            AnswerStatus.GENERATED_DEFAULT
            if generated.kind is FallbackKind.DEFAULT
            else AnswerStatus.GENERATED
        )
        return AnswerResult(
            query=question,
            expression=generated.expression,
            confidence=f"{GENERATED_CONFIDENCE:.4f}",
            answer=generated.answer,
            note=GENERATED_NOTE,
            status=status,
        )
