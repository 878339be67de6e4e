"""Extract candidate words from a learning text or subtitles."""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import srt

# Character span of one occurrence: (start, end)
Span = Tuple[int, int]


@dataclass
class ExtractedText:
    """Words found in a text with the spans where they occur."""
    text: str
    words_with_context: List[Tuple[str, List[Span]]] = field(default_factory=list)
    words_count: int = 0
    unique_words_count: int = 0


def is_word_symbol(char: str) -> bool:
    """Letters, apostrophes and hyphens belong to words."""
    return char.isalpha() or char in "'-"


def extract_words(text: str) -> ExtractedText:
    """Split a text into lower-cased words, most frequent first."""
    words: Dict[str, List[Span]] = defaultdict(list)
    words_count = 0
    current = []
    start = 0
    # Trailing separator flushes the last word
    for position, char in enumerate(text + "."):
        if is_word_symbol(char):
            if not current:
                start = position
            current.append(char.lower())
        elif current:
            words["".join(current)].append((start, position))
            words_count += 1
            current = []

    ordered = sorted(sorted(words.items()), key=lambda item: len(item[1]), reverse=True)
    return ExtractedText(
        text=text,
        words_with_context=ordered,
        words_count=words_count,
        unique_words_count=len(ordered),
    )


def extract_subtitle_words(srt_text: str) -> ExtractedText:
    """Extract words from the cue texts of SRT subtitles, one cue per line.

    Raises:
        ValueError: if the subtitles cannot be parsed.
    """
    try:
        cues = list(srt.parse(srt_text))
    except srt.SRTParseError as e:
        raise ValueError(f"Invalid subtitles: {e}") from e
    return extract_words("\n".join(cue.content.strip() for cue in cues))


def unknown_words(extracted: ExtractedText, known: Iterable[str]) -> List[Tuple[str, List[Span]]]:
    """Drop the words already present in the store."""
    known = set(known)
    return [(word, spans) for word, spans in extracted.words_with_context if word not in known]
