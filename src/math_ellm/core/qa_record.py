import logging
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class QARecord(BaseModel):
    """A single question/answer pair from a math Q&A dataset."""

    id: int = Field(validation_alias=AliasChoices("id", "qid"))
    question: str
    answer: str

    # Pydantic v2 model configuration
    model_config = ConfigDict(
        frozen=True,  # Records are never updated once loaded
        extra="ignore",  # Datasets carry extra columns (author, author_id, ...)
    )

    @field_validator("question", "answer")
    @classmethod
    def warn_on_blank(cls, v: str, info):
        """Blank text is allowed but usually means a broken dataset row."""
        if not v.strip():
            logger.warning(f"Record field '{info.field_name}' is blank")
        return v

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QARecord":
        """
        Creates a QARecord instance from a dictionary.

        Accepts either ``id`` or the MathStack-QA ``qid`` column as identifier.

        Args:
            data: Dictionary containing the record data

        Returns:
            An instance of QARecord
        """
        return cls.model_validate(data)
