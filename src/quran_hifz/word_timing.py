"""
Word-level timing estimates used to highlight the verse while audio plays.

No per-word timestamps are available for the recitation, so each word gets a
share of the audio duration proportional to its length plus a fixed pause.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

INITIAL_DELAY_SECONDS = 0.5
WORD_PADDING_SECONDS = 0.15


@dataclass
class WordTiming:
    """Estimated time span of one word, in seconds from the start of the audio."""
    index: int
    word: str
    start: float
    end: float


def split_words(text: Optional[str]) -> List[str]:
    """Split verse text on spaces, dropping empty pieces."""
    if not text:
        return []
    return [word for word in text.split(" ") if word.strip()]


def estimate_word_timings(words: Sequence[str], duration: Optional[float]) -> List[WordTiming]:
    """
    Estimate when each word starts and ends within the recitation.

    Args:
        words: Words of the verse in reading order
        duration: Total audio duration in seconds

    Returns:
        One WordTiming per word; empty when there are no words or no duration
    """
    if not words or not duration or duration <= 0:
        return []

    total_characters = sum(len(word) for word in words)
    if total_characters == 0:
        return []
    character_time = duration / total_characters

    raw_starts = []
    accumulated = 0.0
    for word in words:
        raw_starts.append(accumulated)
        accumulated += len(word) * character_time + WORD_PADDING_SECONDS

    delay = min(INITIAL_DELAY_SECONDS, duration)
    scale = (duration - delay) / accumulated
    starts = [start * scale + delay for start in raw_starts]

    return [
        WordTiming(
            index=index,
            word=word,
            start=starts[index],
            end=starts[index + 1] if index + 1 < len(words) else duration,
        )
        for index, word in enumerate(words)
    ]


def active_word_index(timings: Sequence[WordTiming], current_time: float) -> int:
    """Index of the word being recited at current_time, or -1 before the first word."""
    for timing in reversed(timings):
        if current_time >= timing.start:
            return timing.index
    return -1


def word_translation_excerpt(text: str, translation: Optional[str], index: int) -> str:
    """
    Approximate the slice of the English translation matching an Arabic word.

    The translation is cut into equal segments, one per Arabic word.
    """
    if not translation:
        return ""

    arabic_count = len(split_words(text))
    translation_words = translation.split(" ")
    total = len(translation_words)
    if arabic_count == 0 or index < 0:
        return ""

    segment = math.ceil(total / arabic_count)
    start = max(0, min(index * segment, total - segment))
    end = min(start + segment, total)
    return " ".join(translation_words[start:end])
