"""Word lists used by the text analyzers.

Held as immutable configuration and passed into each analyzer, so tests and
callers can substitute their own lists.
"""
from dataclasses import dataclass, field

# Articles, conjunctions, common auxiliary verbs and the function words the
# keyword extractor has always excluded.
DEFAULT_STOPWORDS: frozenset[str] = frozenset(
    {
        # articles
        "a", "an", "the",
        # conjunctions
        "and", "but", "or", "nor", "for", "yet", "so", "because", "although", "though",
        "while", "unless", "since", "whereas", "whether",
        # auxiliary verbs
        "am", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "having", "do", "does", "did",
        "will", "would", "shall", "should", "can", "could", "may", "might", "must",
        # demonstratives, prepositions, pronouns
        "this", "that", "these", "those", "with", "from", "their", "there", "about", "which",
        "they", "them", "then", "than", "what", "when", "where", "into", "your", "some",
    }
)

DEFAULT_POSITIVE_WORDS: frozenset[str] = frozenset(
    {
        "good", "great", "excellent", "amazing", "wonderful", "fantastic", "best",
        "love", "like", "happy", "pleased",
    }
)

DEFAULT_NEGATIVE_WORDS: frozenset[str] = frozenset(
    {
        "bad", "worst", "terrible", "awful", "poor", "hate", "dislike", "angry",
        "sad", "disappointed", "frustrated", "annoyed",
    }
)


@dataclass(frozen=True)
class SentimentLexicon:
    """Positive and negative polarity words, matched as whole lowercase words."""

    positive: frozenset[str] = field(default=DEFAULT_POSITIVE_WORDS)
    negative: frozenset[str] = field(default=DEFAULT_NEGATIVE_WORDS)

    def __post_init__(self) -> None:
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "positive", frozenset(word.lower() for word in self.positive))
        object.__setattr__(self, "negative", frozenset(word.lower() for word in self.negative))
        overlap = self.positive & self.negative
        if overlap:
            raise ValueError(f"Words cannot carry both polarities: {sorted(overlap)}")


DEFAULT_LEXICON = SentimentLexicon()
