from __future__ import annotations

import dataclasses
import logging
import os
from typing import Optional

from core.utils import is_blank, norm
from store.models import MetadataRecord

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Image Files (*.png *.jpg *.jpeg *.bmp)"


class SongEditor:
    """
    Edit session for one track's user-owned fields (custom title and image list).

    Nothing is written until save(); artist/album/artwork are carried through
    untouched.
    """

    def __init__(self, track, record: Optional[MetadataRecord], store):
        self.store = store
        self._record = record or MetadataRecord(file_path=track.file_path)

        self.file_path: str = track.file_path
        self.title: str = self._record.custom_title or self._record.track_name or track.title
        self.image_paths: list[str] = list(self._record.image_paths)
        self.selected_index: Optional[int] = 0 if self.image_paths else None

    @property
    def artist_name(self) -> Optional[str]:
        return self._record.artist_name

    @property
    def album_name(self) -> Optional[str]:
        return self._record.album_name

    @property
    def artwork_url(self) -> Optional[str]:
        return self._record.artwork_url

    @property
    def selected_image_path(self) -> Optional[str]:
        i = self.selected_index
        if i is None or i >= len(self.image_paths):
            return None
        return self.image_paths[i]

    def select(self, index: Optional[int]) -> None:
        """Select by position; duplicates of one path are distinct rows."""
        if index is not None and 0 <= index < len(self.image_paths):
            self.selected_index = index
        else:
            self.selected_index = None

    def add_image(self, path: str) -> None:
        if is_blank(path):
            return
        self.image_paths.append(path)
        self.selected_index = len(self.image_paths) - 1

    def remove_selected(self) -> bool:
        if self.selected_index is None:
            return False
        del self.image_paths[self.selected_index]
        self.selected_index = 0 if self.image_paths else None
        return True

    def preview_candidate(self) -> Optional[str]:
        # selected image -> remote artwork -> placeholder (None)
        if self.selected_image_path and os.path.isfile(self.selected_image_path):
            return self.selected_image_path
        if not is_blank(self.artwork_url):
            return self.artwork_url
        return None

    def save(self) -> MetadataRecord:
        record = dataclasses.replace(
            self._record,
            file_path=self.file_path,
            custom_title=norm(self.title),
            image_paths=tuple(self.image_paths),
        )
        self.store.upsert(record)
        self._record = record
        logger.info("Saved metadata edits for %s", self.file_path)
        return record
