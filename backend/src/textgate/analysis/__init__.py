"""Deterministic text analyzers: keywords, sentiment and extractive summaries."""

from textgate.analysis.keywords import KeywordRanker
from textgate.analysis.lexicon import DEFAULT_LEXICON, DEFAULT_STOPWORDS, SentimentLexicon
from textgate.analysis.sentiment import SentimentResult, SentimentScorer
from textgate.analysis.summarizer import Summarizer, split_sentences
from textgate.analysis.tokenizer import TokenExtractor

__all__ = [
    "DEFAULT_LEXICON",
    "DEFAULT_STOPWORDS",
    "KeywordRanker",
    "SentimentLexicon",
    "SentimentResult",
    "SentimentScorer",
    "Summarizer",
    "TokenExtractor",
    "split_sentences",
]
