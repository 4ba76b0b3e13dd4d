# core/fetch_orchestrator.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from core.errors import LookupCancelled
from core.events import ClearDisplay, DisplayMetadata, DisplayStatus
from core.utils import query_from_path
from store.models import MetadataRecord

logger = logging.getLogger(__name__)

STATUS_SEARCHING = "Searching song info..."
STATUS_CACHED = "Info loaded from cache."
STATUS_LOADED = "Info loaded."
STATUS_NOT_FOUND = "No information found."
STATUS_ERROR = "Error loading song info."
STATUS_SAVE_ERROR = "Error saving song info."


class FetchState(Enum):
    IDLE = auto()
    RESOLVING = auto()
    CACHE_HIT = auto()
    FETCHING = auto()
    SETTLED = auto()


@dataclass
class LookupSession:
    session_id: int
    file_path: str
    query: str
    cancel_event: threading.Event = field(default_factory=threading.Event)
    future: Optional[Future] = None

    def cancel(self) -> None:
        self.cancel_event.set()
        if self.future is not None:
            self.future.cancel()  # no-op once running


class FetchOrchestrator:
    """
    Cache-or-fetch policy for the active track.

    Only the newest activation may apply a result. Every session carries the
    generation number it was issued under; results are applied under the same
    lock that bumps the generation, and only when the numbers still match.
    The cancel event is a courtesy to the lookup client, not the guarantee.

    `emit` receives event values (core.events) and may be called from a
    worker thread.
    """

    def __init__(self, store, client, emit: Callable[[object], None], executor=None):
        self.store = store
        self.client = client
        self.emit = emit

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="lookup")

        self._lock = threading.Lock()
        self._generation = 0
        self._session: Optional[LookupSession] = None
        self._state = FetchState.IDLE

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def current_session(self) -> Optional[LookupSession]:
        return self._session

    # ----------------------------
    # Public API
    # ----------------------------

    def activate(self, track) -> Optional[Future]:
        """
        Start resolving metadata for `track` (anything with .file_path).
        Returns the lookup future on a cache miss, None otherwise.
        """
        file_path = track.file_path

        with self._lock:
            self._supersede_locked()
            session_id = self._generation
            self._state = FetchState.RESOLVING

        self.emit(ClearDisplay())

        record = self.store.get(file_path)
        if record is not None:
            logger.debug("Cache hit for %s", file_path)
            with self._lock:
                if session_id != self._generation:
                    return None
                self._state = FetchState.CACHE_HIT
                self.emit(DisplayMetadata(record=record, file_path=file_path, from_cache=True))
                self.emit(DisplayStatus(STATUS_CACHED))
                self._state = FetchState.SETTLED
            return None

        query = query_from_path(file_path)
        if not query:
            with self._lock:
                if session_id == self._generation:
                    self.emit(DisplayStatus(STATUS_NOT_FOUND))
                    self._state = FetchState.SETTLED
            return None

        session = LookupSession(session_id=session_id, file_path=file_path, query=query)
        with self._lock:
            if session_id != self._generation:
                return None
            self._session = session
            self._state = FetchState.FETCHING
            self.emit(DisplayStatus(STATUS_SEARCHING))
            logger.info("Looking up %r for %s (session %d)", query, file_path, session_id)

        # Outside the lock: _run_lookup acquires it.
        session.future = self._executor.submit(self._run_lookup, session)
        return session.future

    def cancel(self) -> None:
        """Cancel any outstanding lookup without starting a new one."""
        with self._lock:
            self._supersede_locked()
            if self._state in (FetchState.RESOLVING, FetchState.FETCHING):
                self._state = FetchState.IDLE

    def shutdown(self) -> None:
        self.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # ----------------------------
    # Internals
    # ----------------------------

    def _supersede_locked(self) -> None:
        self._generation += 1
        if self._session is not None:
            logger.debug("Cancelling lookup session %d", self._session.session_id)
            self._session.cancel()
            self._session = None

    def _is_current(self, session: LookupSession) -> bool:
        return session.session_id == self._generation

    def _settle_locked(self) -> None:
        self._session = None
        self._state = FetchState.SETTLED

    def _run_lookup(self, session: LookupSession) -> None:
        try:
            info = self.client.search_one(session.query, session.cancel_event)
        except LookupCancelled:
            logger.debug("Lookup session %d cancelled", session.session_id)
            return
        except Exception:
            with self._lock:
                if not self._is_current(session):
                    logger.debug("Dropping failure of superseded session %d", session.session_id)
                    return
                logger.exception("Lookup failed for %s", session.file_path)
                self.emit(DisplayStatus(STATUS_ERROR))
                self._settle_locked()
            return

        with self._lock:
            if not self._is_current(session):
                logger.debug("Dropping result of superseded session %d", session.session_id)
                return

            if info is None:
                self.emit(DisplayStatus(STATUS_NOT_FOUND))
                self._settle_locked()
                return

            record = MetadataRecord.from_track_info(session.file_path, info)
            try:
                self.store.upsert(record)
            except OSError:
                logger.exception("Failed to save metadata for %s", session.file_path)
                self.emit(DisplayStatus(STATUS_SAVE_ERROR))
                self._settle_locked()
                return

            self.emit(DisplayMetadata(record=record, file_path=session.file_path, from_cache=False))
            self.emit(DisplayStatus(STATUS_LOADED))
            self._settle_locked()
