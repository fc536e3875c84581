"""
Plain-text rendering of answers and index statistics.

Used by the CLI for console output and by anything that wants a readable dump
of an AnswerResult.
"""

from typing import List, Optional, Sequence

from tabulate import tabulate

from math_ellm.retrieval.answer_engine import AnswerResult, IndexingStats


def format_answer(
    result: AnswerResult, index: int, elapsed_ms: Optional[float] = None
) -> str:
    """
    Format a single AnswerResult into a readable string representation.

    Args:
        result: Answer to format
        index: 1-based index of the answer for display
        elapsed_ms: Optional time taken to answer, in milliseconds

    Returns:
        Formatted string for the single answer
    """
    parts: List[str] = [f"\n===== Answer {index} =====\n"]
    parts.append(f"Question: {result.query}\n")
    if elapsed_ms is not None:
        parts.append(f"Time taken: {elapsed_ms:.0f}ms\n")
    parts.append(f"Confidence: {result.confidence}\n")
    parts.append(f"Expression: {result.expression}\n")
    parts.append(f"Answer: {result.answer}\n")
    if result.note:
        parts.append(f"Note: {result.note}\n")
    if result.source_id is not None:
        parts.append(f"Source: #{result.source_id}\n")
    parts.append("-" * 40)
    return "".join(parts)


def format_answers(results: Sequence[AnswerResult]) -> str:
    parts = [f"\nAnswered {len(results)} questions:\n"]
    for i, result in enumerate(results, 1):
        parts.append(format_answer(result, i))
    return "".join(parts)


def indexing_stats_table(stats: IndexingStats, tablefmt: str = "plain") -> str:
    rows = [
        ["Records seen", stats.records_seen],
        ["Records indexed", stats.records_indexed],
        ["Records skipped", stats.records_skipped],
        ["Expressions found", stats.expressions_found],
        ["Unique question term patterns", stats.question_patterns],
        ["Unique expressions", stats.unique_expressions],
        ["Duration", f"{stats.duration_seconds:.2f}s"],
    ]
    return tabulate(rows, tablefmt=tablefmt)
