"""
The five fixed memorization phases and what each phase shows the learner.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class MemorizationPhase(IntEnum):
    TEXT_WITH_AUDIO = 1
    TEXT_WITHOUT_AUDIO = 2
    TEXT_WITH_HOLES = 3
    EMPTY_WITH_AUDIO = 4
    COMPLETE_MEMORIZATION = 5

    @property
    def title(self) -> str:
        return PHASE_TITLES[self]

    @property
    def is_last(self) -> bool:
        return self is MemorizationPhase.COMPLETE_MEMORIZATION

    def next(self) -> "MemorizationPhase":
        """Return the following phase; the last phase stays where it is."""
        if self.is_last:
            return self
        return MemorizationPhase(self + 1)


FIRST_PHASE = MemorizationPhase.TEXT_WITH_AUDIO
LAST_PHASE = MemorizationPhase.COMPLETE_MEMORIZATION

PHASE_TITLES = {
    MemorizationPhase.TEXT_WITH_AUDIO: "Text with Audio",
    MemorizationPhase.TEXT_WITHOUT_AUDIO: "Text without Audio",
    MemorizationPhase.TEXT_WITH_HOLES: "Text with Holes",
    MemorizationPhase.EMPTY_WITH_AUDIO: "Empty with Audio",
    MemorizationPhase.COMPLETE_MEMORIZATION: "Complete Memorization",
}


@dataclass(frozen=True)
class PhaseView:
    """What the verse panel displays in a given phase."""
    show_text: bool
    show_holes: bool
    highlight_words: bool
    prompt: Optional[str] = None


PHASE_VIEWS = {
    MemorizationPhase.TEXT_WITH_AUDIO: PhaseView(show_text=True, show_holes=False, highlight_words=True),
    MemorizationPhase.TEXT_WITHOUT_AUDIO: PhaseView(show_text=True, show_holes=False, highlight_words=False),
    MemorizationPhase.TEXT_WITH_HOLES: PhaseView(show_text=True, show_holes=True, highlight_words=False),
    MemorizationPhase.EMPTY_WITH_AUDIO: PhaseView(
        show_text=False, show_holes=False, highlight_words=False,
        prompt="[Listen to the audio and recite from memory]",
    ),
    MemorizationPhase.COMPLETE_MEMORIZATION: PhaseView(
        show_text=False, show_holes=False, highlight_words=False,
        prompt="[Recite the verse completely from memory]",
    ),
}


def coerce_phase(value) -> MemorizationPhase:
    """Validate an integer-like value into a phase, raising ValueError if out of range."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid phase: {value!r}")
    try:
        number = int(value)
        # int() truncates 2.7 to 2
        if not isinstance(value, str) and number != value:
            raise ValueError(value)
        return MemorizationPhase(number)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid phase: {value!r} (expected {int(FIRST_PHASE)}-{int(LAST_PHASE)})")


def phase_view(phase) -> PhaseView:
    return PHASE_VIEWS[coerce_phase(phase)]


def progress_percentage(phase) -> float:
    """Share of the phase ladder already climbed, 0 at phase 1 and 100 at phase 5."""
    phase = coerce_phase(phase)
    return (phase - FIRST_PHASE) / (LAST_PHASE - FIRST_PHASE) * 100
