"""
API client for the AlQuran Cloud content API (text, translation, audio).
"""

import requests
import logging
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from urllib.parse import urljoin

from .config import get_settings


class QuranAPIError(Exception):
    """Raised when the upstream Quran API cannot serve a request."""


@dataclass
class Surah:
    """Represents a surah header from AlQuran API."""
    number: int
    name: str
    english_name: str
    english_name_translation: str
    number_of_ayahs: int
    revelation_type: str

    @classmethod
    def from_api(cls, data: Dict) -> "Surah":
        return cls(
            number=int(data["number"]),
            name=data.get("name", ""),
            english_name=data.get("englishName", ""),
            english_name_translation=data.get("englishNameTranslation", ""),
            number_of_ayahs=int(data["numberOfAyahs"]),
            revelation_type=data.get("revelationType", ""),
        )


@dataclass
class Verse:
    """Represents a single ayah with its translation and audio."""
    surah: Surah
    number: int
    number_in_surah: int
    text: str
    translation: str = ""
    audio_url: Optional[str] = None
    audio_secondary: List[str] = field(default_factory=list)
    juz: Optional[int] = None
    manzil: Optional[int] = None
    page: Optional[int] = None
    ruku: Optional[int] = None
    hizb_quarter: Optional[int] = None
    sajda: bool = False

    @classmethod
    def from_api(cls, data: Dict, surah: Optional[Surah] = None) -> "Verse":
        if surah is None:
            surah = Surah.from_api(data["surah"])
        return cls(
            surah=surah,
            number=int(data.get("number", 0)),
            number_in_surah=int(data["numberInSurah"]),
            text=data.get("text", ""),
            translation=data.get("translation", ""),
            audio_url=data.get("audio"),
            audio_secondary=list(data.get("audioSecondary") or []),
            juz=data.get("juz"),
            manzil=data.get("manzil"),
            page=data.get("page"),
            ruku=data.get("ruku"),
            hizb_quarter=data.get("hizbQuarter"),
            # The API sends either false or an object describing the sajda
            sajda=bool(data.get("sajda")),
        )


class AlQuranAPIClient:
    """Client for AlQuran Cloud API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        translation_edition: Optional[str] = None,
        audio_edition: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.quran_api_base_url
        self.translation_edition = translation_edition or settings.translation_edition
        self.audio_edition = audio_edition or settings.audio_edition
        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    # Raw envelopes, passed through by the HTTP proxy

    def fetch_surahs(self) -> Dict:
        """Get the list of all surahs as returned by the API."""
        return self._make_request("surah")

    def fetch_surah(self, surah_number: int) -> Dict:
        """
        Get a surah with its ayahs, each ayah carrying a `translation` field.

        Args:
            surah_number: Surah number (1-114)

        Returns:
            Envelope dict with `code`, `status` and `data`
        """
        arabic = self._make_request(f"surah/{surah_number}")
        translated = self._make_request(f"surah/{surah_number}/{self.translation_edition}")

        surah_data = arabic.get("data")
        translation_data = translated.get("data")
        if not isinstance(surah_data, dict) or not isinstance(translation_data, dict):
            raise QuranAPIError("Failed to fetch surah data or translations")

        ayahs = surah_data.get("ayahs") or []
        translated_ayahs = translation_data.get("ayahs") or []
        if ayahs and len(ayahs) == len(translated_ayahs):
            surah_data["ayahs"] = [
                {**ayah, "translation": translated_ayah.get("text", "")}
                for ayah, translated_ayah in zip(ayahs, translated_ayahs)
            ]
        else:
            self.logger.warning(
                f"Translation for surah {surah_number} has {len(translated_ayahs)} ayahs, "
                f"expected {len(ayahs)}; serving text without translation"
            )

        return {"code": arabic.get("code"), "status": arabic.get("status"), "data": surah_data}

    def fetch_verse(self, surah_number: int, verse_number: int) -> Dict:
        """Get one ayah with a merged `translation` field."""
        arabic = self._make_request(f"ayah/{surah_number}:{verse_number}")
        translated = self._make_request(f"ayah/{surah_number}:{verse_number}/{self.translation_edition}")

        verse_data = arabic.get("data")
        translation_data = translated.get("data")
        if not isinstance(verse_data, dict) or not isinstance(translation_data, dict):
            raise QuranAPIError("Failed to fetch verse data or translation")

        verse_data["translation"] = translation_data.get("text", "")
        return {"code": arabic.get("code"), "status": arabic.get("status"), "data": verse_data}

    def fetch_audio_url(self, surah_number: int, verse_number: int) -> str:
        """Get the recitation audio URL for an ayah."""
        response = self._make_request(f"ayah/{surah_number}:{verse_number}/{self.audio_edition}")
        data = response.get("data")
        audio_url = data.get("audio") if isinstance(data, dict) else None
        if not audio_url:
            raise QuranAPIError("Audio URL not found in response")
        return audio_url

    # Typed accessors

    def get_surahs(self) -> List[Surah]:
        data = self.fetch_surahs().get("data")
        if not isinstance(data, list):
            raise QuranAPIError("Surah list missing from API response")
        try:
            return [Surah.from_api(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise QuranAPIError(f"Malformed surah list: {e}")

    def get_surah(self, surah_number: int) -> Tuple[Surah, List[Verse]]:
        data = self.fetch_surah(surah_number)["data"]
        try:
            surah = Surah.from_api(data)
            verses = [Verse.from_api(ayah, surah=surah) for ayah in data.get("ayahs") or []]
        except (KeyError, TypeError, ValueError) as e:
            raise QuranAPIError(f"Malformed surah {surah_number}: {e}")
        return surah, verses

    def get_verse(self, surah_number: int, verse_number: int) -> Verse:
        data = self.fetch_verse(surah_number, verse_number)["data"]
        try:
            return Verse.from_api(data)
        except (KeyError, TypeError, ValueError) as e:
            raise QuranAPIError(f"Malformed verse {surah_number}:{verse_number}: {e}")

    def _make_request(self, endpoint: str) -> Dict:
        """Make a request to the AlQuran API."""
        url = urljoin(self.base_url, endpoint)
        self.logger.debug(f"Making request to: {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            self.logger.error(f"Network error accessing AlQuran API: {e}")
            raise QuranAPIError(f"Request to {endpoint} failed: {e}")
        except ValueError as e:
            self.logger.error(f"Invalid JSON from AlQuran API: {e}")
            raise QuranAPIError(f"Invalid JSON response from {endpoint}: {e}")

        if not isinstance(payload, dict) or payload.get("code") != 200:
            status = payload.get("status", "Unknown error") if isinstance(payload, dict) else "Unknown error"
            raise QuranAPIError(f"API Error: {status}")

        return payload
