import re
from typing import List

from math_ellm.core.exceptions import ExtractionError

INLINE_RE = re.compile(r"\$(.*?)\$")
BLOCK_RE = re.compile(r"\$\$(.*?)\$\$")
BRACKET_RE = re.compile(r"\\[\(\[](.+?)\\[\)\]]")


class ExpressionExtractor:
    """
    Finds math expressions embedded in free text.

    Three scans run independently over the whole text: inline ``$...$``,
    block ``$$...$$`` and bracketed ``\\(...\\)`` / ``\\[...\\]``. Matches from
    different scans are not merged, so a span can be reported more than once.
    """

    scans = (INLINE_RE, BLOCK_RE, BRACKET_RE)

    def extract(self, text: str) -> List[str]:
        """
        Return trimmed, non-empty expressions in scan order.

        Raises:
            ExtractionError: If text is not a string
        """
        if not isinstance(text, str):
            raise ExtractionError(
                f"Cannot extract expressions from {type(text).__name__}"
            )

        expressions: List[str] = []
        for pattern in self.scans:
            for match in pattern.finditer(text):
                expression = match.group(1).strip()
                if expression:
                    expressions.append(expression)
        return expressions
