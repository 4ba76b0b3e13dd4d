# core/images.py
from __future__ import annotations

import logging
import os
from typing import Callable, Optional
from urllib.parse import urlparse

from core.events import PLACEHOLDER_IMAGE, DisplayImage
from core.utils import is_blank, path_key

logger = logging.getLogger(__name__)

ROTATION_INTERVAL_MS = 3000


def build_candidates(record) -> tuple[str, ...]:
    """
    Ordered image candidates for a record:
      1) user image_paths that exist on disk (list order), else
      2) the remote artwork URL, else
      3) nothing -> placeholder.
    """
    if record is None:
        return ()

    local = tuple(
        p for p in (record.image_paths or ())
        if not is_blank(p) and os.path.isfile(p)
    )
    if local:
        return local

    if not is_blank(record.artwork_url):
        return (record.artwork_url,)

    return ()


def classify_candidate(ref: str | None) -> str | None:
    """Return "file", "url", or None (render the placeholder)."""
    if is_blank(ref):
        return None
    if os.path.isfile(ref):
        return "file"
    try:
        parsed = urlparse(ref)
    except ValueError:
        return None
    if parsed.scheme and parsed.netloc:
        return "url"
    return None


class ImageRotation:
    """
    Holds the displayed candidate list for the active record and cycles it
    on a timer while that record's track is playing.

    `timer` only needs start()/stop(); the shell connects its timeout to
    advance(). `emit` receives DisplayImage values.
    """

    def __init__(self, emit: Callable[[object], None], timer):
        self.emit = emit
        self.timer = timer

        self.candidates: tuple[str, ...] = ()
        self.current_index: int = 0
        self._record_path: Optional[str] = None
        self._playing_path: Optional[str] = None
        self._playing = False
        self._running = False

    @property
    def current_candidate(self) -> Optional[str]:
        if not self.candidates:
            return None
        return self.candidates[self.current_index]

    @property
    def is_rotating(self) -> bool:
        return self._running

    def show(self, record, file_path: str | None = None) -> None:
        self.candidates = build_candidates(record)
        self.current_index = 0
        self._record_path = file_path or (record.file_path if record is not None else None)

        if len(self.candidates) > 1:
            logger.debug("Rotating %d images for %s", len(self.candidates), self._record_path)

        self._emit_current()
        self._update_timer()

    def clear(self) -> None:
        self.show(None)

    def set_playback(self, file_path: str | None, playing: bool) -> None:
        self._playing_path = file_path
        self._playing = bool(playing)
        self._update_timer()

    def advance(self) -> None:
        if not self._should_rotate():
            self._update_timer()
            return
        self.current_index = (self.current_index + 1) % len(self.candidates)
        self._emit_current()

    # ----------------------------
    # Internals
    # ----------------------------

    def _emit_current(self) -> None:
        if not self.candidates:
            self.emit(PLACEHOLDER_IMAGE)
        else:
            self.emit(DisplayImage(candidate_index=self.current_index, candidate=self.current_candidate))

    def _owns_playback(self) -> bool:
        if not self._playing or not self._record_path or not self._playing_path:
            return False
        return path_key(self._record_path) == path_key(self._playing_path)

    def _should_rotate(self) -> bool:
        return len(self.candidates) > 1 and self._owns_playback()

    def _update_timer(self) -> None:
        should = self._should_rotate()
        if should and not self._running:
            self.timer.start()
            self._running = True
        elif not should and self._running:
            self.timer.stop()
            self._running = False
