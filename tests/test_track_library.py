"""Tests for the persisted track library."""

import json
import os

import pytest

import library.track_library as track_library
from core.errors import CorruptStateError
from library.track_library import Track, TrackLibrary, iter_audio_paths, read_title


@pytest.fixture
def library_path(tmp_path):
    return str(tmp_path / "library.json")


@pytest.fixture(autouse=True)
def fake_titles(monkeypatch):
    monkeypatch.setattr(track_library, "read_title", lambda p: "title of " + p.rsplit("/", 1)[-1])


class TestLoadSave:
    def test_missing_file_is_empty(self, library_path):
        assert TrackLibrary.open(library_path).tracks == []

    def test_round_trip(self, library_path):
        lib = TrackLibrary.open(library_path)
        lib.add_files(["/music/a.mp3", "/music/b.mp3"])

        reopened = TrackLibrary.open(library_path)
        assert reopened.tracks == [
            Track("/music/a.mp3", "title of a.mp3"),
            Track("/music/b.mp3", "title of b.mp3"),
        ]

    def test_pascal_case_and_missing_title(self, library_path):
        with open(library_path, "w", encoding="utf-8") as f:
            json.dump([{"FilePath": "/music/Song Name.mp3", "Title": None}], f)
        lib = TrackLibrary.open(library_path)
        assert lib.tracks == [Track("/music/Song Name.mp3", "Song Name")]

    def test_corrupt_file_raises(self, library_path):
        with open(library_path, "w", encoding="utf-8") as f:
            f.write("{]")
        with pytest.raises(CorruptStateError):
            TrackLibrary.open(library_path)

    def test_bad_entry_raises(self, library_path):
        with open(library_path, "w", encoding="utf-8") as f:
            json.dump([{"filePath": 42}], f)
        with pytest.raises(CorruptStateError):
            TrackLibrary.open(library_path)


class TestMutation:
    def test_add_skips_case_duplicates(self, library_path):
        lib = TrackLibrary.open(library_path)
        lib.add_files(["/music/a.mp3"])
        added = lib.add_files(["/MUSIC/A.MP3", "/music/b.mp3", "/music/b.mp3", "  "])
        assert [t.file_path for t in added] == ["/music/b.mp3"]
        assert len(lib.tracks) == 2

    def test_nothing_added_does_not_write(self, library_path):
        lib = TrackLibrary.open(library_path)
        assert lib.add_files([]) == []
        assert not os.path.exists(library_path)

    def test_find_and_index_ignore_case(self, library_path):
        lib = TrackLibrary.open(library_path)
        lib.add_files(["/music/a.mp3", "/music/b.mp3"])
        assert lib.find("/Music/B.mp3").file_path == "/music/b.mp3"
        assert lib.index_of("/MUSIC/b.MP3") == 1
        assert lib.find("/music/c.mp3") is None
        assert lib.find("") is None
        assert lib.index_of("/music/c.mp3") == -1

    def test_remove_persists(self, library_path):
        lib = TrackLibrary.open(library_path)
        lib.add_files(["/music/a.mp3", "/music/b.mp3"])
        assert lib.remove("/MUSIC/A.mp3") is True
        assert lib.remove("/music/a.mp3") is False
        assert [t.file_path for t in TrackLibrary.open(library_path).tracks] == ["/music/b.mp3"]

    def test_add_folder_finds_audio_sorted(self, library_path, tmp_path):
        music = tmp_path / "music"
        (music / "sub").mkdir(parents=True)
        for name in ("b.mp3", "a.FLAC", "notes.txt"):
            (music / name).write_bytes(b"")
        (music / "sub" / "c.m4a").write_bytes(b"")

        lib = TrackLibrary.open(library_path)
        added = lib.add_folder(str(music))

        names = [t.file_path.replace("\\", "/").rsplit("/", 1)[-1] for t in added]
        assert names == ["a.FLAC", "b.mp3", "c.m4a"]


class TestScanning:
    def test_iter_audio_paths_ignores_missing_dirs(self, tmp_path):
        assert iter_audio_paths([str(tmp_path / "nope"), ""]) == []

    def test_read_title_falls_back_to_stem(self, tmp_path):
        bogus = tmp_path / "Artist - Song.mp3"
        bogus.write_bytes(b"not really audio")
        assert read_title(str(bogus)) == "Artist - Song"
