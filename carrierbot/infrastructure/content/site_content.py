from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from html.parser import HTMLParser
from pathlib import Path
from typing import Callable

import httpx

from carrierbot.application.exceptions import GenerationError
from carrierbot.application.ports.content_provider import ContentProviderPort
from carrierbot.application.use_cases.generate_text import GenerateTextUseCase
from carrierbot.application.utils.message_rules import truncate_text
from carrierbot.application.utils.prompts import build_pitch_prompt
from carrierbot.application.utils.replies import fallback_pitch

SITE_TEXT_LIMIT = 8000
SKIPPED_TAGS = {"head", "script", "style", "noscript", "svg"}


@dataclass(frozen=True)
class _CacheEntry:
    text: str
    at: float


class _VisibleTextParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__()
        self._chunks: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag in SKIPPED_TAGS:
            self._skip_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in SKIPPED_TAGS and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self._chunks.append(data)

    def text(self) -> str:
        return " ".join(" ".join(self._chunks).split())


def extract_visible_text(html: str, limit: int = SITE_TEXT_LIMIT) -> str:
    parser = _VisibleTextParser()
    parser.feed(html)
    parser.close()
    return parser.text()[:limit]


class SiteContentProvider(ContentProviderPort):
    """
    Company pitch composed by the model from the scraped company site.

    Both the scraped text and the composed pitch are cached for their own
    freshness windows. Refreshes are not locked: concurrent callers may both
    refresh and the last write wins.
    """

    def __init__(
        self,
        site_url: str,
        generate_text: GenerateTextUseCase,
        business_name: str,
        image_path: str | None = None,
        site_ttl_seconds: float = 6 * 60 * 60,
        pitch_ttl_seconds: float = 2 * 60 * 60,
        max_chars: int = 4000,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._site_url = site_url
        self._generate_text = generate_text
        self._business_name = business_name
        self._image_path = Path(image_path) if image_path else None
        self._site_ttl_seconds = site_ttl_seconds
        self._pitch_ttl_seconds = pitch_ttl_seconds
        self._max_chars = max_chars
        self._client = client or httpx.AsyncClient(timeout=10.0, follow_redirects=True)
        self._clock = clock
        self._site_cache: _CacheEntry | None = None
        self._pitch_cache: _CacheEntry | None = None
        self._logger = logging.getLogger(__name__)

    async def get_pitch_text(self) -> str:
        now = self._clock()
        if self._is_fresh(self._pitch_cache, now, self._pitch_ttl_seconds):
            return self._pitch_cache.text

        try:
            site_text = await self.scrape_site_text()
            pitch = await self._generate_text.execute(build_pitch_prompt(site_text, self._business_name))
            text = truncate_text(pitch, self._max_chars)
        except (httpx.HTTPError, httpx.InvalidURL, GenerationError) as e:
            self._logger.warning("Pitch generation failed, using fallback", extra={"error": str(e)})
            text = fallback_pitch(self._business_name)

        self._pitch_cache = _CacheEntry(text=text, at=now)
        return text

    async def scrape_site_text(self) -> str:
        now = self._clock()
        if self._is_fresh(self._site_cache, now, self._site_ttl_seconds):
            return self._site_cache.text

        response = await self._client.get(self._site_url)
        response.raise_for_status()
        text = extract_visible_text(response.text)
        self._site_cache = _CacheEntry(text=text, at=now)
        self._logger.info("Company site scraped", extra={"length": len(text)})
        return text

    def get_company_image(self) -> Path | None:
        if self._image_path is not None and self._image_path.is_file():
            return self._image_path
        return None

    @staticmethod
    def _is_fresh(entry: _CacheEntry | None, now: float, ttl: float) -> bool:
        return entry is not None and bool(entry.text) and now - entry.at < ttl
