"""Lexicon-based sentiment scoring."""
from dataclasses import dataclass
from typing import Literal

from textgate.analysis.lexicon import DEFAULT_LEXICON, SentimentLexicon
from textgate.analysis.tokenizer import require_text, words

SentimentLabel = Literal["positive", "negative", "neutral"]

POSITIVE_THRESHOLD = 0.1
NEGATIVE_THRESHOLD = -0.1


@dataclass(frozen=True)
class SentimentResult:
    """Polarity label and normalized score in [-1, 1]."""

    label: SentimentLabel
    score: float
    positive_count: int
    negative_count: int
    word_count: int


def _clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class SentimentScorer:
    """
    Score text polarity by counting lexicon words.

    Every lowercase word is compared for exact equality against the positive
    and negative lists. The difference is normalized by one tenth of the word
    count (at least 1) and clamped to [-1, 1].
    """

    def __init__(self, lexicon: SentimentLexicon = DEFAULT_LEXICON) -> None:
        """Initialize with the polarity word lists."""
        self.lexicon = lexicon

    def score(self, text: str) -> SentimentResult:
        """Return the label and score for *text*."""
        require_text(text)
        tokens = words(text)

        positive_count = sum(1 for token in tokens if token in self.lexicon.positive)
        negative_count = sum(1 for token in tokens if token in self.lexicon.negative)

        raw_score = positive_count - negative_count
        score = _clamp(raw_score / max(1.0, len(tokens) / 10))

        if score > POSITIVE_THRESHOLD:
            label: SentimentLabel = "positive"
        elif score < NEGATIVE_THRESHOLD:
            label = "negative"
        else:
            label = "neutral"

        return SentimentResult(
            label=label,
            score=score,
            positive_count=positive_count,
            negative_count=negative_count,
            word_count=len(tokens),
        )
