"""Exception types raised by math_ellm."""


class MathEllmError(Exception):
    """Base class for all math_ellm errors."""


class ExtractionError(MathEllmError):
    """Raised when a text span cannot be scanned for math expressions."""
