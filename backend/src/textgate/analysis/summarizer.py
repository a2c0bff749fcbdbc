"""Extractive summarization by sentence frequency scoring."""
import re
from typing import Optional

from textgate.analysis.tokenizer import TokenExtractor, require_text

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")
DEFAULT_SENTENCE_COUNT = 3


def split_sentences(text: str) -> list[str]:
    """Split on runs of terminal punctuation, dropping empty fragments."""
    return [fragment.strip() for fragment in SENTENCE_BOUNDARY.split(text) if fragment.strip()]


class Summarizer:
    """
    Pick the highest-scoring sentences of a text.

    A sentence scores the sum of the whole-text frequencies of its tokens.
    Texts with no more sentences than requested come back unchanged; longer
    ones are reduced to the best sentences, kept in document order.
    """

    def __init__(
        self,
        sentence_count: int = DEFAULT_SENTENCE_COUNT,
        extractor: Optional[TokenExtractor] = None,
    ) -> None:
        """Initialize with the number of sentences to keep and the scoring tokenizer."""
        if sentence_count < 1:
            raise ValueError("sentence_count must be at least 1")
        self.sentence_count = sentence_count
        # Scoring counts every word longer than three letters, stopwords included
        self.extractor = extractor or TokenExtractor(stopwords=(), min_length=4)

    def summarize(self, text: str) -> str:
        """Return the extractive summary of *text*."""
        require_text(text)
        sentences = split_sentences(text)
        if len(sentences) <= self.sentence_count:
            return text

        frequencies = self.extractor.frequencies(text)
        scores = [
            sum(frequencies.get(token, 0) for token in self.extractor.extract(sentence))
            for sentence in sentences
        ]

        best = sorted(range(len(sentences)), key=lambda index: scores[index], reverse=True)
        chosen = sorted(best[: self.sentence_count])
        return ". ".join(sentences[index] for index in chosen) + "."
