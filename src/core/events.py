# core/events.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from store.models import MetadataRecord


@dataclass(frozen=True)
class DisplayMetadata:
    record: MetadataRecord
    file_path: str
    from_cache: bool


@dataclass(frozen=True)
class DisplayStatus:
    message: str


@dataclass(frozen=True)
class DisplayImage:
    candidate_index: int            # -1 -> placeholder
    candidate: Optional[str] = None  # local path or remote URL


@dataclass(frozen=True)
class ClearDisplay:
    pass


PLACEHOLDER_IMAGE = DisplayImage(candidate_index=-1, candidate=None)
