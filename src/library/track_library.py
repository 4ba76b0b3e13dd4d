# src/library/track_library.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional

from mutagen import File as MutagenFile
from mutagen._util import MutagenError

from core.errors import CorruptStateError
from core.utils import atomic_write_json, is_blank, path_key, read_json_list

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".m4a", ".flac", ".ogg", ".opus", ".wav"}


@dataclass(frozen=True)
class Track:
    file_path: str
    title: str

    @staticmethod
    def from_dict(d: dict) -> "Track":
        if not isinstance(d, dict):
            raise ValueError(f"track must be an object, got {type(d).__name__}")
        file_path = d.get("filePath", d.get("FilePath"))
        title = d.get("title", d.get("Title"))
        if not isinstance(file_path, str) or (title is not None and not isinstance(title, str)):
            raise ValueError("track needs a string filePath and title")
        return Track(file_path=file_path, title=title or _stem(file_path))

    def to_dict(self) -> dict:
        return {"filePath": self.file_path, "title": self.title}


def _stem(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def iter_audio_paths(directories: list[str]) -> list[str]:
    paths: list[str] = []
    for root in directories:
        if not root or not os.path.isdir(root):
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for fn in sorted(filenames):
                ext = os.path.splitext(fn)[1].lower()
                if ext in AUDIO_EXTS:
                    paths.append(os.path.join(dirpath, fn))
    return paths


def read_title(path: str) -> str:
    """Title tag if the file has one, else the file name without extension."""
    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError) as e:
        logger.debug("Cannot read tags from %s: %s", path, e)
        audio = None

    if audio is not None and audio.tags:
        v = audio.tags.get("title")
        if isinstance(v, list):
            v = v[0] if v else None
        title = str(v).strip() if v else ""
        if title:
            return title

    return _stem(path)


class TrackLibrary:
    """Ordered list of the user's tracks, persisted as JSON on every change."""

    def __init__(self, path: str):
        self.path = path
        self.tracks: list[Track] = []

    @classmethod
    def open(cls, path: str) -> "TrackLibrary":
        library = cls(path)
        library.load()
        return library

    def load(self) -> None:
        try:
            items = read_json_list(self.path)
            tracks = [Track.from_dict(d) for d in items or []]
        except (OSError, ValueError) as e:
            raise CorruptStateError(self.path, str(e)) from e
        self.tracks = [t for t in tracks if not is_blank(t.file_path)]

    def save(self) -> None:
        atomic_write_json(self.path, [t.to_dict() for t in self.tracks])

    def find(self, file_path: str) -> Optional[Track]:
        if is_blank(file_path):
            return None
        key = path_key(file_path)
        for t in self.tracks:
            if path_key(t.file_path) == key:
                return t
        return None

    def index_of(self, file_path: str) -> int:
        key = path_key(file_path or "")
        for i, t in enumerate(self.tracks):
            if path_key(t.file_path) == key:
                return i
        return -1

    def add_files(self, paths: Iterable[str]) -> list[Track]:
        added: list[Track] = []
        known = {path_key(t.file_path) for t in self.tracks}
        for p in paths:
            if is_blank(p) or path_key(p) in known:
                continue
            track = Track(file_path=p, title=read_title(p))
            self.tracks.append(track)
            known.add(path_key(p))
            added.append(track)

        if added:
            self.save()
            logger.info("Added %d track(s) to library", len(added))
        return added

    def add_folder(self, directory: str) -> list[Track]:
        return self.add_files(iter_audio_paths([directory]))

    def remove(self, file_path: str) -> bool:
        i = self.index_of(file_path)
        if i < 0:
            return False
        del self.tracks[i]
        self.save()
        return True
