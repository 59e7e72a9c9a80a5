"""
HTML fragments for the verse panel and the progress bar.
"""

from html import escape
from typing import List, Optional, Sequence

from .api_clients import Verse
from .phases import LAST_PHASE, coerce_phase, phase_view, progress_percentage
from .word_timing import WordTiming, split_words, word_translation_excerpt

HOLE_HTML = "<span class='hole'></span>"


def words_with_holes(text: str) -> List[Optional[str]]:
    """Verse words with every third word (indices 1, 4, 7, ...) blanked out as None."""
    return [None if index % 3 == 1 else word for index, word in enumerate(text.split(" "))] if text else []


def render_holes(text: str) -> str:
    return " ".join(HOLE_HTML if word is None else escape(word) for word in words_with_holes(text))


def render_highlighted_words(verse: Verse, timings: Sequence[WordTiming]) -> str:
    """One span per word, carrying its estimated time span and a hover translation."""
    spans = []
    for index, word in enumerate(split_words(verse.text)):
        attrs = [f'class="hifz-word" data-index="{index}"']
        if index < len(timings):
            attrs.append(f'data-start="{timings[index].start:.3f}" data-end="{timings[index].end:.3f}"')
        excerpt = word_translation_excerpt(verse.text, verse.translation, index)
        if excerpt:
            attrs.append(f'title="{escape(excerpt)}"')
        spans.append(f"<span {' '.join(attrs)}>{escape(word)}</span>")
    return " ".join(spans)


def render_verse_html(
    verse: Optional[Verse],
    phase,
    timings: Sequence[WordTiming] = (),
    audio_url: Optional[str] = None,
) -> str:
    """Render the verse as the learner should see it in the given phase."""
    if verse is None:
        return "<div class='hifz-empty'>No verse selected</div>"

    view = phase_view(phase)
    if not view.show_text:
        body = f"<div class='hifz-prompt'>{escape(view.prompt or '')}</div>"
    elif view.highlight_words:
        highlight = "true" if timings else "false"
        body = (
            f"<div class='arabic-text hifz-verse' dir='rtl' data-highlight='{highlight}'>"
            f"{render_highlighted_words(verse, timings)}</div>"
        )
    elif view.show_holes:
        body = f"<div class='arabic-text hifz-verse' dir='rtl'>{render_holes(verse.text)}</div>"
    else:
        body = f"<div class='arabic-text hifz-verse' dir='rtl'>{escape(verse.text)}</div>"

    surah = verse.surah
    header = (
        f"<h3 class='hifz-title'>{escape(surah.english_name)} ({escape(surah.name)}) "
        f"<span>({verse.number_in_surah})</span></h3>"
    )

    audio = ""
    if audio_url:
        audio = f"<audio class='hifz-audio' controls preload='auto' src='{escape(audio_url, quote=True)}'></audio>"

    return f"<div class='hifz-panel'>{header}{body}{audio}</div>"


def render_progress_html(phase, verse_number: int, number_of_ayahs: int) -> str:
    phase = coerce_phase(phase)
    percentage = progress_percentage(phase)
    return (
        "<div class='hifz-progress'>"
        "<div class='hifz-progress-track'>"
        f"<div class='hifz-progress-bar' style='width: {percentage:.0f}%'></div>"
        "</div>"
        "<div class='hifz-progress-labels'>"
        f"<span>Phase {int(phase)}/{int(LAST_PHASE)}</span>"
        f"<span>Verse {verse_number}/{number_of_ayahs}</span>"
        "</div></div>"
    )
