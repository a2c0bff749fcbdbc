"""Unit tests for lexicon sentiment scoring."""
import pytest

from textgate.analysis.lexicon import SentimentLexicon
from textgate.analysis.sentiment import SentimentScorer
from textgate.exceptions import InvalidInputError


def test_positive_text() -> None:
    """Test that praise scores positive above the threshold."""
    result = SentimentScorer().score("I love this! It is amazing and wonderful.")

    assert result.label == "positive"
    assert result.score > 0.1
    assert result.positive_count == 3
    assert result.negative_count == 0


def test_negative_text() -> None:
    """Test that complaints score negative and clamp at -1."""
    result = SentimentScorer().score("This product is terrible and awful.")

    assert result.label == "negative"
    assert result.score == -1.0


def test_neutral_text() -> None:
    """Test that text without lexicon words is neutral with score 0."""
    result = SentimentScorer().score("The meeting is at noon.")

    assert result.label == "neutral"
    assert result.score == 0.0


def test_score_normalized_by_text_length() -> None:
    """Test that the raw difference is divided by a tenth of the word count."""
    text = "good " + "word " * 19

    result = SentimentScorer().score(text)

    assert result.word_count == 20
    assert result.score == pytest.approx(0.5)
    assert result.label == "positive"


def test_weak_signal_in_long_text_is_neutral() -> None:
    """Test that one polarity word in a hundred stays inside the neutral band."""
    text = "bad " + "filler " * 99

    result = SentimentScorer().score(text)

    assert result.score == pytest.approx(-0.1)
    assert result.label == "neutral"


def test_matching_is_whole_word() -> None:
    """Test that words containing a lexicon word are not counted."""
    result = SentimentScorer().score("Goodness gracious, badminton unlikely")

    assert result.positive_count == 0
    assert result.negative_count == 0
    assert result.label == "neutral"


@pytest.mark.parametrize(
    "text",
    [
        "love love love love love",
        "hate hate hate",
        "good bad good bad",
        "great " * 200,
        "awful day, poor service, sad ending, but a happy dog",
    ],
)
def test_score_within_bounds(text: str) -> None:
    """Test that every score lies in [-1, 1]."""
    assert -1.0 <= SentimentScorer().score(text).score <= 1.0


def test_custom_lexicon() -> None:
    """Test that an injected lexicon replaces the defaults."""
    scorer = SentimentScorer(SentimentLexicon(positive=frozenset({"Shiny"}), negative=frozenset({"rusty"})))

    assert scorer.score("shiny shiny").label == "positive"
    assert scorer.score("good good").label == "neutral"


def test_lexicon_rejects_overlapping_words() -> None:
    """Test that a word cannot be both positive and negative."""
    with pytest.raises(ValueError):
        SentimentLexicon(positive=frozenset({"sick"}), negative=frozenset({"SICK"}))


def test_empty_text_rejected() -> None:
    """Test that empty input is invalid input."""
    with pytest.raises(InvalidInputError):
        SentimentScorer().score("  ")
