"""Word tokenization shared by the keyword ranker and the summarizer."""
import re
from collections.abc import Iterable

from textgate.analysis.lexicon import DEFAULT_STOPWORDS
from textgate.exceptions import InvalidInputError
from textgate.schemas.error import ErrorCode

WORD_PATTERN = re.compile(r"\b\w+\b")


def words(text: str) -> list[str]:
    """Lowercase every word-boundary match in *text*, with no filtering."""
    return WORD_PATTERN.findall(text.lower())


def require_text(text: str) -> str:
    """Reject missing or blank text before any processing."""
    if text is None or not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Text is required", field="text", code=ErrorCode.EMPTY_TEXT)
    return text


class TokenExtractor:
    """
    Extract qualifying word tokens from text.

    Tokens are lowercase, longer than ``min_length - 1`` characters and not in
    the stopword set. Output is a plain list in document order.
    """

    def __init__(self, stopwords: Iterable[str] = DEFAULT_STOPWORDS, min_length: int = 4) -> None:
        """Initialize with a stopword set and the minimum token length."""
        if min_length < 1:
            raise ValueError("min_length must be at least 1")
        self.stopwords = frozenset(word.lower() for word in stopwords)
        self.min_length = min_length

    def extract(self, text: str) -> list[str]:
        """Return qualifying tokens in the order they appear."""
        return [
            token
            for token in words(text)
            if len(token) >= self.min_length and token not in self.stopwords
        ]

    def frequencies(self, text: str) -> dict[str, int]:
        """Count qualifying tokens. Keys keep first-seen order."""
        counts: dict[str, int] = {}
        for token in self.extract(text):
            counts[token] = counts.get(token, 0) + 1
        return counts
