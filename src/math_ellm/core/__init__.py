"""Core module containing fundamental data models and utilities."""

from .exceptions import ExtractionError, MathEllmError
from .project_root import ROOT
from .qa_record import QARecord

__all__ = ["ExtractionError", "MathEllmError", "QARecord", "ROOT"]
