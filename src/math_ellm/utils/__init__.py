"""Utility functions for the math_ellm package."""

from .formatting import format_answer, format_answers, indexing_stats_table

__all__ = ["format_answer", "format_answers", "indexing_stats_table"]
