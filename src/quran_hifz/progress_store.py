"""
In-memory store for learners and their per-verse memorization progress.
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .phases import coerce_phase

ProgressKey = Tuple[int, int, int]


@dataclass
class User:
    id: int
    username: str


@dataclass
class Progress:
    """Phase reached by a user on one verse."""
    id: int
    user_id: int
    surah_id: int
    verse_number: int
    phase: int
    completed: bool
    last_accessed: str


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class MemoryProgressStore:
    """Key-value progress store keyed by (user, surah, verse)."""

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._progress: Dict[ProgressKey, Progress] = {}
        self._next_user_id = 1
        self._next_progress_id = 1
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return replace(user) if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return replace(user)
        return None

    def create_user(self, username: str) -> User:
        username = username.strip()
        if not username:
            raise ValueError("Username must not be empty")

        with self._lock:
            if any(user.username == username for user in self._users.values()):
                raise ValueError(f"Username already taken: {username}")
            user = User(id=self._next_user_id, username=username)
            self._next_user_id += 1
            self._users[user.id] = user

        self.logger.info(f"Created user {user.id} ({username})")
        return replace(user)

    # Progress

    def get_progress(self, user_id: int, surah_id: int, verse_number: int) -> Optional[Progress]:
        progress = self._progress.get((user_id, surah_id, verse_number))
        return replace(progress) if progress else None

    def update_progress(
        self,
        user_id: int,
        surah_id: int,
        verse_number: int,
        phase: int,
        completed: Optional[bool] = None,
        last_accessed: Optional[str] = None,
    ) -> Progress:
        """
        Insert or update the progress record for (user, surah, verse).

        An existing record keeps its id; `completed=None` keeps its stored flag.

        Raises:
            ValueError: If phase is outside 1-5
        """
        phase = int(coerce_phase(phase))
        last_accessed = last_accessed or utc_timestamp()
        key = (user_id, surah_id, verse_number)

        with self._lock:
            existing = self._progress.get(key)
            if existing:
                progress = replace(
                    existing,
                    phase=phase,
                    completed=existing.completed if completed is None else completed,
                    last_accessed=last_accessed,
                )
            else:
                progress = Progress(
                    id=self._next_progress_id,
                    user_id=user_id,
                    surah_id=surah_id,
                    verse_number=verse_number,
                    phase=phase,
                    completed=bool(completed),
                    last_accessed=last_accessed,
                )
                self._next_progress_id += 1
            self._progress[key] = progress

        self.logger.debug(f"Progress {key} -> phase {phase}, completed={progress.completed}")
        return replace(progress)

    def get_all_progress_for_user(self, user_id: int) -> List[Progress]:
        return [replace(progress) for progress in self._progress.values() if progress.user_id == user_id]


# Shared by the HTTP API and the web UI
storage = MemoryProgressStore()
