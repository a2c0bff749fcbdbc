"""Frequency-based keyword ranking."""
from typing import Optional

from textgate.analysis.tokenizer import TokenExtractor, require_text
from textgate.exceptions import InvalidInputError

DEFAULT_MAX_KEYWORDS = 10


class KeywordRanker:
    """Rank qualifying tokens by how often they occur."""

    def __init__(self, extractor: Optional[TokenExtractor] = None) -> None:
        """Initialize with the token extractor to count."""
        self.extractor = extractor or TokenExtractor()

    def rank_with_counts(self, text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> list[tuple[str, int]]:
        """
        Return up to *max_keywords* ``(token, count)`` pairs, most frequent first.

        Ties keep the order in which tokens first appear in the text.

        Raises:
            InvalidInputError: If text is empty or max_keywords is below 1
        """
        require_text(text)
        if isinstance(max_keywords, bool) or not isinstance(max_keywords, int) or max_keywords < 1:
            raise InvalidInputError("max_keywords must be a positive integer", field="max_keywords")

        counts = self.extractor.frequencies(text)
        # sorted() is stable, also with reverse=True
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return ranked[:max_keywords]

    def rank(self, text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> list[str]:
        """Return up to *max_keywords* tokens, most frequent first."""
        return [token for token, _ in self.rank_with_counts(text, max_keywords)]
