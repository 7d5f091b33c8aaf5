import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests

from daily_forge.core.config import (
    SCRIPTURE_API_KEY,
    SCRIPTURE_API_URL,
    SCRIPTURE_TIMEOUT_SECONDS,
)
from daily_forge.core.errors import ScriptureProviderError
from daily_forge.reading_plans.schemas import Verse

logger = logging.getLogger(__name__)


def format_verse_id(book_id: str, chapter: int, verse: int) -> str:
    """Formats an API.Bible verse id, e.g. `GEN.1.1`."""
    return f"{book_id}.{chapter}.{verse}"


class ScriptureProvider(ABC):
    """Fetches verse text by reference. Plans only store identifiers."""

    @abstractmethod
    def get_verse_range(
        self, version: str, book_id: str, chapter: int, start_verse: int, end_verse: int
    ) -> List[Verse]:
        pass

    @abstractmethod
    def get_passage(self, version: str, reference: str) -> Optional[Verse]:
        """Fetches a passage such as `PSA.18.1-PSA.18.3` or a single verse id."""
        pass


class ApiBibleScriptureProvider(ScriptureProvider):
    def __init__(
        self,
        api_key: Optional[str] = SCRIPTURE_API_KEY,
        base_url: str = SCRIPTURE_API_URL,
        timeout: float = SCRIPTURE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str) -> Optional[dict]:
        if not self.api_key:
            raise ScriptureProviderError("No scripture API key configured")

        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url,
                headers={"api-key": self.api_key},
                params={"content-type": "text", "include-verse-numbers": "false"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Scripture request to {url} failed: {e}")
            raise ScriptureProviderError(f"Scripture request failed: {e}") from e

        if response.status_code == 404:
            return None
        if not response.ok:
            logger.error(f"Scripture request to {url} returned {response.status_code}")
            raise ScriptureProviderError(
                f"Scripture provider returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json().get("data")
        except ValueError as e:
            raise ScriptureProviderError("Scripture provider returned invalid JSON") from e

    @staticmethod
    def _to_verse(data: dict) -> Verse:
        return Verse(
            reference=data.get("reference", ""),
            content=(data.get("content") or "").strip(),
            verse_id=data.get("id", ""),
        )

    def get_verse(self, version: str, verse_id: str) -> Optional[Verse]:
        data = self._get(f"/bibles/{version}/verses/{verse_id}")
        return self._to_verse(data) if data else None

    def get_verse_range(
        self, version: str, book_id: str, chapter: int, start_verse: int, end_verse: int
    ) -> List[Verse]:
        verses: List[Verse] = []
        for number in range(start_verse, end_verse + 1):
            verse = self.get_verse(version, format_verse_id(book_id, chapter, number))
            if verse is not None:
                verses.append(verse)
        return verses

    def get_passage(self, version: str, reference: str) -> Optional[Verse]:
        endpoint = "passages" if "-" in reference else "verses"
        data = self._get(f"/bibles/{version}/{endpoint}/{reference}")
        return self._to_verse(data) if data else None
