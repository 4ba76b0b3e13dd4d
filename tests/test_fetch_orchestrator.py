"""Tests for the cache-or-fetch orchestrator."""

from unittest.mock import MagicMock

import pytest

from core.errors import LookupCancelled, LookupFailure
from core.events import ClearDisplay, DisplayMetadata, DisplayStatus
from core.fetch_orchestrator import (
    STATUS_CACHED,
    STATUS_ERROR,
    STATUS_LOADED,
    STATUS_NOT_FOUND,
    STATUS_SAVE_ERROR,
    STATUS_SEARCHING,
    FetchOrchestrator,
    FetchState,
)
from core.itunes_client import TrackInfo
from library.track_library import Track
from store.models import MetadataRecord

P1 = "/music/Dire Straits - Sultans of Swing.mp3"
Q1 = "Dire Straits Sultans of Swing"
P2 = "/music/Queen - Bohemian Rhapsody.mp3"
Q2 = "Queen Bohemian Rhapsody"


@pytest.fixture
def orchestrator(store, fake_client, recorder):
    orch = FetchOrchestrator(store, fake_client, recorder)
    yield orch
    orch.shutdown()


def _track(path):
    return Track(file_path=path, title=path.rsplit("/", 1)[-1])


def _statuses(recorder):
    return [e.message for e in recorder.of_type(DisplayStatus)]


class TestCacheHit:
    def test_does_not_call_client(self, orchestrator, store, fake_client, recorder):
        """A cached record is displayed without any network call."""
        record = MetadataRecord(file_path=P1, track_name="Cached")
        store.upsert(record)

        assert orchestrator.activate(_track(P1)) is None

        assert fake_client.calls == []
        assert recorder.events == [
            ClearDisplay(),
            DisplayMetadata(record=record, file_path=P1, from_cache=True),
            DisplayStatus(STATUS_CACHED),
        ]
        assert orchestrator.state == FetchState.SETTLED

    def test_hit_ignores_path_case(self, orchestrator, store, fake_client, recorder):
        store.upsert(MetadataRecord(file_path=P1.upper(), track_name="Cached"))
        orchestrator.activate(_track(P1))
        assert fake_client.calls == []
        assert recorder.of_type(DisplayMetadata)[0].from_cache is True


class TestCacheMiss:
    def test_success_upserts_and_displays(self, orchestrator, store, fake_client, recorder, sultans_info):
        """A found match becomes a new record and a non-cached display event."""
        fake_client.set_result(Q1, sultans_info)

        future = orchestrator.activate(_track(P1))
        future.result(timeout=5)

        record = store.get(P1)
        assert record == MetadataRecord(
            file_path=P1,
            track_name="Sultans of Swing",
            artist_name="Dire Straits",
            album_name="Dire Straits",
            artwork_url=sultans_info.artwork_url,
        )
        assert record.custom_title is None
        assert record.image_paths == ()

        assert recorder.events == [
            ClearDisplay(),
            DisplayStatus(STATUS_SEARCHING),
            DisplayMetadata(record=record, file_path=P1, from_cache=False),
            DisplayStatus(STATUS_LOADED),
        ]
        assert orchestrator.state == FetchState.SETTLED
        assert orchestrator.current_session is None

    def test_query_is_derived_from_file_name(self, orchestrator, fake_client):
        orchestrator.activate(_track(P1)).result(timeout=5)
        assert fake_client.calls == [Q1]

    def test_not_found_leaves_store_alone(self, orchestrator, store, fake_client, recorder):
        """No match is a valid outcome: status only, no record."""
        fake_client.set_result(Q1, None)

        orchestrator.activate(_track(P1)).result(timeout=5)

        assert store.get(P1) is None
        assert len(store) == 0
        assert _statuses(recorder) == [STATUS_SEARCHING, STATUS_NOT_FOUND]
        assert not recorder.of_type(DisplayMetadata)

    def test_failure_surfaces_status_and_keeps_store(self, orchestrator, store, fake_client, recorder):
        """Lookup errors become a status message; cached data is untouched."""
        other = MetadataRecord(file_path="/music/other.mp3", track_name="Other")
        store.upsert(other)
        fake_client.set_result(Q1, LookupFailure("boom"))

        orchestrator.activate(_track(P1)).result(timeout=5)

        assert _statuses(recorder) == [STATUS_SEARCHING, STATUS_ERROR]
        assert store.records() == [other]
        assert orchestrator.state == FetchState.SETTLED

    def test_unexpected_exception_is_absorbed(self, orchestrator, fake_client, recorder):
        fake_client.set_result(Q1, RuntimeError("unexpected"))
        orchestrator.activate(_track(P1)).result(timeout=5)
        assert _statuses(recorder)[-1] == STATUS_ERROR

    def test_cancelled_lookup_emits_nothing(self, orchestrator, fake_client, recorder):
        fake_client.set_result(Q1, LookupCancelled(Q1))
        orchestrator.activate(_track(P1)).result(timeout=5)
        assert _statuses(recorder) == [STATUS_SEARCHING]

    def test_always_requeries_after_not_found(self, orchestrator, fake_client):
        """No negative caching: each activation of an unknown track looks it up again."""
        fake_client.set_result(Q1, None)
        orchestrator.activate(_track(P1)).result(timeout=5)
        orchestrator.activate(_track(P1)).result(timeout=5)
        assert fake_client.calls == [Q1, Q1]

    def test_empty_query_skips_lookup(self, orchestrator, fake_client, recorder):
        assert orchestrator.activate(_track("/music/---.mp3")) is None
        assert fake_client.calls == []
        assert _statuses(recorder) == [STATUS_NOT_FOUND]

    def test_save_failure_reports_status(self, fake_client, recorder, sultans_info):
        store = MagicMock()
        store.get.return_value = None
        store.upsert.side_effect = OSError("read-only")
        fake_client.set_result(Q1, sultans_info)

        orch = FetchOrchestrator(store, fake_client, recorder)
        try:
            orch.activate(_track(P1)).result(timeout=5)
        finally:
            orch.shutdown()

        assert _statuses(recorder) == [STATUS_SEARCHING, STATUS_SAVE_ERROR]
        assert not recorder.of_type(DisplayMetadata)


class TestCancelAndReplace:
    def _supersede(self, orchestrator, fake_client, p1_result):
        fake_client.gate(Q1)
        fake_client.set_result(Q1, p1_result)
        fake_client.set_result(Q2, TrackInfo(track_name="Bohemian Rhapsody", artist_name="Queen"))

        f1 = orchestrator.activate(_track(P1))
        fake_client.wait_started(Q1)
        first_session_cancel = fake_client.cancel_events[Q1]

        f2 = orchestrator.activate(_track(P2))
        f2.result(timeout=5)

        fake_client.release(Q1)
        f1.result(timeout=5)
        return first_session_cancel

    def test_superseded_success_is_discarded(self, orchestrator, store, fake_client, recorder, sultans_info):
        """P1's late result must not be written or displayed."""
        cancel = self._supersede(orchestrator, fake_client, sultans_info)

        assert cancel.is_set()
        assert store.get(P1) is None
        assert store.get(P2).track_name == "Bohemian Rhapsody"
        shown = [e.file_path for e in recorder.of_type(DisplayMetadata)]
        assert shown == [P2]
        assert _statuses(recorder).count(STATUS_LOADED) == 1

    def test_superseded_failure_is_silent(self, orchestrator, store, fake_client, recorder):
        """P1's late failure must not produce an error status."""
        self._supersede(orchestrator, fake_client, LookupFailure("late"))

        assert STATUS_ERROR not in _statuses(recorder)
        assert store.get(P1) is None

    def test_nothing_for_p1_after_p2(self, orchestrator, fake_client, recorder, sultans_info):
        """Events of a superseded session never follow those of its successor."""
        self._supersede(orchestrator, fake_client, sultans_info)

        last_clear = max(i for i, e in enumerate(recorder.events) if isinstance(e, ClearDisplay))
        after = recorder.events[last_clear:]
        assert all(getattr(e, "file_path", P2) == P2 for e in after)
        assert after[-1] == DisplayStatus(STATUS_LOADED)

    def test_cache_hit_supersedes_pending_lookup(self, orchestrator, store, fake_client, recorder, sultans_info):
        """Switching to a cached track also cancels the outstanding lookup."""
        cached = MetadataRecord(file_path=P2, track_name="Cached")
        store.upsert(cached)
        fake_client.gate(Q1)
        fake_client.set_result(Q1, sultans_info)

        f1 = orchestrator.activate(_track(P1))
        fake_client.wait_started(Q1)
        orchestrator.activate(_track(P2))
        fake_client.release(Q1)
        f1.result(timeout=5)

        assert store.get(P1) is None
        assert [e.file_path for e in recorder.of_type(DisplayMetadata)] == [P2]

    def test_cancel_without_replacement(self, orchestrator, store, fake_client, recorder, sultans_info):
        fake_client.gate(Q1)
        fake_client.set_result(Q1, sultans_info)

        f1 = orchestrator.activate(_track(P1))
        fake_client.wait_started(Q1)
        orchestrator.cancel()
        fake_client.release(Q1)
        f1.result(timeout=5)

        assert store.get(P1) is None
        assert orchestrator.current_session is None
        assert _statuses(recorder) == [STATUS_SEARCHING]
