"""
Per-learner memorization state: the selected surah and verse, the current
phase, and the transitions between them.
"""

import logging
from typing import List, Optional

from .api_clients import AlQuranAPIClient, QuranAPIError, Surah, Verse
from .audio_processing import AudioCache
from .phases import FIRST_PHASE, MemorizationPhase, coerce_phase, progress_percentage
from .progress_store import MemoryProgressStore
from .word_timing import WordTiming, estimate_word_timings, split_words


class MemorizationSession:
    """Walks one learner through the five phases of a verse."""

    def __init__(
        self,
        client: AlQuranAPIClient,
        store: MemoryProgressStore,
        user_id: int,
        audio_cache: Optional[AudioCache] = None,
    ):
        self.client = client
        self.store = store
        self.user_id = user_id
        self.audio_cache = audio_cache
        self.logger = logging.getLogger(__name__)

        self.surahs: List[Surah] = []
        self.selected_surah: Optional[Surah] = None
        self.verse_number: int = 1
        self.current_verse: Optional[Verse] = None
        self.audio_url: Optional[str] = None
        self.phase: MemorizationPhase = FIRST_PHASE
        self.error: Optional[str] = None

    @property
    def progress_percentage(self) -> float:
        return progress_percentage(self.phase)

    @property
    def has_previous_verse(self) -> bool:
        return self.current_verse is not None and self.verse_number > 1

    @property
    def has_next_verse(self) -> bool:
        return (
            self.selected_surah is not None
            and self.current_verse is not None
            and self.verse_number < self.selected_surah.number_of_ayahs
        )

    def load_surahs(self) -> List[Surah]:
        """Fetch the surah list and open the first surah if nothing is selected yet."""
        self.error = None
        try:
            self.surahs = self.client.get_surahs()
        except QuranAPIError as e:
            self.logger.error(f"Error fetching surahs: {e}")
            self.error = "Failed to load Surahs. Please try again."
            return self.surahs

        if self.surahs and self.selected_surah is None:
            self.select_surah(self.surahs[0].number)
        return self.surahs

    def select_surah(self, surah_number: int) -> None:
        """Open a surah at its first verse."""
        self.error = None
        try:
            surah, _ = self.client.get_surah(surah_number)
            verse = self._load_verse(surah, 1)
        except (QuranAPIError, ValueError) as e:
            self.logger.error(f"Error loading surah {surah_number}: {e}")
            self.error = "Failed to load Surah. Please try again."
            return

        self.selected_surah = surah
        self._show_verse(verse)

    def select_verse(self, verse_number: int) -> None:
        """Open a verse of the selected surah and restore its saved phase."""
        if self.selected_surah is None:
            return

        self.error = None
        try:
            verse = self._load_verse(self.selected_surah, verse_number)
        except (QuranAPIError, ValueError) as e:
            self.logger.error(f"Error loading verse {self.selected_surah.number}:{verse_number}: {e}")
            self.error = "Failed to load verse. Please try again."
            return

        self._show_verse(verse)

    def set_phase(self, phase) -> None:
        """Jump to a phase without recording progress."""
        self.phase = coerce_phase(phase)

    def next_phase(self) -> None:
        """Advance one phase and record it. No-op on the last phase."""
        if self.phase.is_last:
            return

        self.phase = self.phase.next()
        if self.selected_surah is None or self.current_verse is None:
            return

        try:
            self.store.update_progress(
                user_id=self.user_id,
                surah_id=self.selected_surah.number,
                verse_number=self.verse_number,
                phase=int(self.phase),
                completed=self.phase.is_last,
            )
        except ValueError as e:
            self.logger.error(f"Failed to update progress: {e}")

    def next_verse(self) -> None:
        if self.has_next_verse:
            self.select_verse(self.verse_number + 1)

    def previous_verse(self) -> None:
        if self.has_previous_verse:
            self.select_verse(self.verse_number - 1)

    def switch_user(self, username: str) -> None:
        """Continue as another learner, creating the account on first use."""
        username = (username or "").strip()
        if not username:
            return

        user = self.store.get_user_by_username(username)
        if user is None:
            user = self.store.create_user(username)
        self.user_id = user.id
        self.logger.info(f"Session switched to user {user.id} ({user.username})")
        self._restore_phase()

    def audio_timings(self) -> List[WordTiming]:
        """Estimated word timings for the current verse's recitation, if the audio can be measured."""
        if self.current_verse is None or self.audio_cache is None:
            return []
        duration = self.audio_cache.get_duration_for_url(self.audio_url)
        return estimate_word_timings(split_words(self.current_verse.text), duration)

    def _load_verse(self, surah: Surah, verse_number: int) -> Verse:
        if verse_number < 1 or verse_number > surah.number_of_ayahs:
            raise ValueError("Invalid verse number")

        verse = self.client.get_verse(surah.number, verse_number)
        if not verse.audio_url:
            verse.audio_url = self.client.fetch_audio_url(surah.number, verse_number)
        return verse

    def _show_verse(self, verse: Verse) -> None:
        self.current_verse = verse
        self.verse_number = verse.number_in_surah
        self.audio_url = verse.audio_url
        self._restore_phase()

    def _restore_phase(self) -> None:
        if self.selected_surah is None or self.current_verse is None:
            self.phase = FIRST_PHASE
            return
        progress = self.store.get_progress(self.user_id, self.selected_surah.number, self.verse_number)
        self.phase = coerce_phase(progress.phase) if progress else FIRST_PHASE
