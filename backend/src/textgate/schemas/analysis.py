"""Pydantic schemas for text analysis requests and responses."""
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

SummaryType = Literal["extractive", "abstractive"]


class TextRequest(BaseModel):
    """Base request carrying the text to analyze.

    Emptiness is checked by the analyzers so that a blank text is reported
    as invalid input rather than a schema error.
    """

    text: str = Field(..., description="UTF-8 text to analyze")


class KeywordRequest(TextRequest):
    """Keyword extraction request."""

    max_keywords: Optional[int] = Field(
        default=None,
        ge=1,
        le=100,
        validation_alias=AliasChoices("max_keywords", "maxKeywords"),
        description="Maximum number of keywords to return (default 10)",
    )


class SentimentRequest(TextRequest):
    """Sentiment analysis request."""


class SummaryRequest(TextRequest):
    """Summarization request.

    ``max_length``, ``type`` and ``language`` are validated for compatibility
    with existing clients; the summary itself is always extractive.
    """

    max_length: int = Field(
        default=200,
        ge=50,
        le=1000,
        validation_alias=AliasChoices("max_length", "maxLength"),
        description="Requested summary length",
    )
    type: SummaryType = Field(default="abstractive", description="Requested summary style")
    language: str = Field(default="en", min_length=2, max_length=16, description="Language of the text")


class KeywordResponse(BaseModel):
    """Ranked keywords, most frequent first."""

    keywords: list[str]


class SentimentResponse(BaseModel):
    """Sentiment label and score in [-1, 1]."""

    label: Literal["positive", "negative", "neutral"]
    score: float = Field(..., ge=-1.0, le=1.0)


class SummaryResponse(BaseModel):
    """Extractive summary of the submitted text."""

    summary: str
