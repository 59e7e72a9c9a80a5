"""
Audio utilities for the memorization trainer: a download cache for verse
recitations and duration measurement for word highlighting.
"""

import contextlib
import os
import hashlib
import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import urlparse

import requests
from pydub import AudioSegment

from .config import get_settings


class AudioCache:
    """Downloads recitation audio once and keeps it on disk."""

    def __init__(
        self,
        cache_dir: Optional[Union[str, Path]] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize AudioCache.

        Args:
            cache_dir: Directory for cached files (default from settings)
            session: HTTP session used for downloads
            timeout: Download timeout in seconds
        """
        settings = get_settings()
        self.cache_dir = Path(cache_dir or settings.audio_cache_dir)
        self.session = session or requests.Session()
        self.timeout = timeout or settings.request_timeout
        self.logger = logging.getLogger(__name__)
        # Decoded durations by audio URL
        self._durations: Dict[str, float] = {}

    def cache_path(self, audio_url: str) -> Path:
        """Local file path for an audio URL."""
        name = os.path.basename(urlparse(audio_url).path) or "audio.mp3"
        # Several editions reuse the same file name under different folders
        digest = hashlib.sha1(audio_url.encode("utf-8")).hexdigest()[:12]
        return self.cache_dir / f"{digest}_{name}"

    def fetch(self, audio_url: str) -> Optional[str]:
        """Download audio if not already cached. Returns the file path or None on failure."""
        cached_file_path = self.cache_path(audio_url)
        if cached_file_path.exists():
            return str(cached_file_path)

        self.logger.info(f"Downloading audio {audio_url}...")
        try:
            response = self.session.get(audio_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"Error downloading audio {audio_url}: {e}")
            return None

        tmp_path = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            # Unique per download so concurrent requests for one URL never share a temp file
            with tempfile.NamedTemporaryFile(dir=self.cache_dir, delete=False, suffix=".part") as f:
                tmp_path = f.name
                f.write(response.content)
            os.replace(tmp_path, cached_file_path)
        except OSError as e:
            self.logger.error(f"Error caching audio {audio_url} in {self.cache_dir}: {e}")
            if tmp_path:
                with contextlib.suppress(OSError):
                    os.remove(tmp_path)
            return None

        self.logger.debug(f"Cached audio at {cached_file_path}")
        return str(cached_file_path)

    def get_audio_duration(self, audio_path: Union[str, Path]) -> Optional[float]:
        """
        Get duration of audio file in seconds.

        Returns:
            Duration in seconds, or None when the file cannot be decoded
        """
        try:
            segment = AudioSegment.from_file(str(audio_path))
        except Exception as e:
            self.logger.warning(f"Could not decode audio {audio_path}: {e}")
            return None
        return len(segment) / 1000.0

    def get_duration_for_url(self, audio_url: Optional[str]) -> Optional[float]:
        """Fetch (or reuse) the audio for a URL and return its duration in seconds."""
        if not audio_url:
            return None
        if audio_url in self._durations:
            return self._durations[audio_url]
        audio_path = self.fetch(audio_url)
        if not audio_path:
            return None
        duration = self.get_audio_duration(audio_path)
        if duration is not None:
            self._durations[audio_url] = duration
        return duration
