"""Shared test fixtures."""

import sys
import threading
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.errors import LookupCancelled  # noqa: E402
from core.itunes_client import TrackInfo  # noqa: E402
from store.metadata_store import MetadataStore  # noqa: E402


class FakeLookupClient:
    """Stand-in for ItunesClient.

    Results are configured per query. A query can be "gated": its lookup
    blocks until the test releases it, which lets tests supersede a lookup
    while it is in flight.
    """

    def __init__(self, honor_cancel: bool = False):
        self.honor_cancel = honor_cancel
        self.results = {}
        self.calls = []
        self.cancel_events = {}
        self._gates = {}
        self._started = {}
        self._lock = threading.Lock()

    def set_result(self, query, result):
        """result: TrackInfo, None, or an exception instance to raise."""
        self.results[query] = result

    def gate(self, query):
        self._gates[query] = threading.Event()
        self._started[query] = threading.Event()

    def release(self, query):
        self._gates[query].set()

    def wait_started(self, query, timeout=5):
        assert self._started[query].wait(timeout), f"lookup for {query!r} never started"

    def search_one(self, query, cancel_event=None):
        with self._lock:
            self.calls.append(query)
            self.cancel_events[query] = cancel_event

        if query in self._started:
            self._started[query].set()
        gate = self._gates.get(query)
        if gate is not None:
            assert gate.wait(5), f"gate for {query!r} never released"

        if self.honor_cancel and cancel_event is not None and cancel_event.is_set():
            raise LookupCancelled(query)

        result = self.results.get(query)
        if isinstance(result, BaseException):
            raise result
        return result


class EventRecorder:
    """Thread-safe event sink."""

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def __call__(self, event):
        with self._lock:
            self.events.append(event)

    def of_type(self, cls):
        with self._lock:
            return [e for e in self.events if isinstance(e, cls)]

    def clear(self):
        with self._lock:
            self.events.clear()


class FakeTimer:
    def __init__(self):
        self.active = False
        self.starts = 0
        self.stops = 0

    def start(self):
        self.active = True
        self.starts += 1

    def stop(self):
        self.active = False
        self.stops += 1


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "songMetadata.json")


@pytest.fixture
def store(store_path):
    return MetadataStore.open(store_path)


@pytest.fixture
def fake_client():
    return FakeLookupClient()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def sultans_info():
    return TrackInfo(
        track_name="Sultans of Swing",
        artist_name="Dire Straits",
        album_name="Dire Straits",
        artwork_url="https://is1-ssl.mzstatic.com/image/thumb/a/600x600bb.jpg",
    )
