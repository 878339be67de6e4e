"""Tests for text ingestion."""

import pytest

from learnwords.services.text_service import extract_subtitle_words, extract_words, unknown_words


def test_extract_words_counts_and_spans() -> None:
    """Test tokenising, lower-casing and span collection."""
    extracted = extract_words("The cat and the dog. The end")

    assert extracted.words_count == 7
    assert extracted.unique_words_count == 5
    assert extracted.words_with_context[0] == ("the", [(0, 3), (12, 15), (21, 24)])
    assert [word for word, _ in extracted.words_with_context[1:]] == ["and", "cat", "dog", "end"]


def test_apostrophes_and_hyphens_are_part_of_words() -> None:
    """Test that contractions and compounds stay whole."""
    extracted = extract_words("Don't use well-known words!")
    assert sorted(word for word, _ in extracted.words_with_context) == ["don't", "use", "well-known", "words"]


def test_non_latin_text() -> None:
    """Test that any alphabet is recognised."""
    extracted = extract_words("Привет, мир! 123")
    assert [word for word, _ in extracted.words_with_context] == ["мир", "привет"]


def test_empty_text() -> None:
    """Test that an empty text yields nothing."""
    extracted = extract_words("")
    assert extracted.words_with_context == []
    assert extracted.words_count == 0


def test_unknown_words_filters_known() -> None:
    """Test dropping words already in the store."""
    extracted = extract_words("the cat sat on the mat")
    assert [word for word, _ in unknown_words(extracted, {"the", "on"})] == ["cat", "mat", "sat"]


SUBTITLES = """1
00:00:01,000 --> 00:00:02,500
Hello there!

2
00:00:03,000 --> 00:00:05,000
Hello, General Kenobi.
"""


def test_extract_subtitle_words_joins_cues() -> None:
    """Test that only cue texts are tokenised, one cue per line."""
    extracted = extract_subtitle_words(SUBTITLES)

    assert extracted.text == "Hello there!\nHello, General Kenobi."
    assert extracted.words_with_context[0] == ("hello", [(0, 5), (13, 18)])
    assert extracted.words_count == 5
    assert extracted.unique_words_count == 4


def test_extract_subtitle_words_rejects_plain_text() -> None:
    """Test that text which is not SRT raises ValueError."""
    with pytest.raises(ValueError):
        extract_subtitle_words("Just some words, no cues at all")
