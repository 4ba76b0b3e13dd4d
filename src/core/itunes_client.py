from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import requests

from core.errors import LookupCancelled, LookupFailure
from core.utils import norm

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://itunes.apple.com"


@dataclass(frozen=True)
class TrackInfo:
    track_name: Optional[str] = None
    artist_name: Optional[str] = None
    album_name: Optional[str] = None
    artwork_url: Optional[str] = None


def normalize_base_url(url: str | None) -> str:
    u = (url or "").strip().rstrip("/")
    return u or DEFAULT_BASE_URL


def upsize_artwork(url: str | None, size: int) -> str | None:
    # iTunes serves any square size if the "100x100" segment is swapped.
    if not url or size <= 0:
        return url
    return url.replace("100x100", f"{size}x{size}")


class ItunesClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        country: str | None = "US",
        artwork_size: int = 600,
        timeout_s: float | None = 15.0,
        user_agent: str = "pymetaget/0.1",
    ):
        self.base_url = normalize_base_url(base_url)
        self.country = country
        self.artwork_size = artwork_size
        self.timeout_s = timeout_s
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def search_one(self, query: str, cancel_event: threading.Event | None = None) -> Optional[TrackInfo]:
        """
        Best single match for a free-text query, or None when nothing matches.

        Raises LookupCancelled if `cancel_event` is set before the request or
        by the time the response arrives, LookupFailure on any transport,
        HTTP or decoding error.
        """
        def cancelled() -> bool:
            return cancel_event is not None and cancel_event.is_set()

        if cancelled():
            raise LookupCancelled(query)

        # GET /search?term=...&media=music&entity=song&limit=1
        params = {"term": query, "media": "music", "entity": "song", "limit": 1}
        if self.country:
            params["country"] = self.country

        logger.info("iTunes search: %r", query)
        try:
            r = self.session.get(f"{self.base_url}/search", params=params, timeout=self.timeout_s)
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            if cancelled():
                raise LookupCancelled(query) from e
            raise LookupFailure(f"iTunes request failed: {e}") from e
        except ValueError as e:
            raise LookupFailure(f"iTunes returned invalid JSON: {e}") from e

        if cancelled():
            raise LookupCancelled(query)

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            return None

        best = results[0]
        if not isinstance(best, dict):
            raise LookupFailure("iTunes returned a malformed result")

        return TrackInfo(
            track_name=norm(best.get("trackName")),
            artist_name=norm(best.get("artistName")),
            album_name=norm(best.get("collectionName")),
            artwork_url=upsize_artwork(norm(best.get("artworkUrl100")), self.artwork_size),
        )
