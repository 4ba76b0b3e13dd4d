from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from core.utils import norm

# JSON name -> attribute name. Older files use
# PascalCase ("FilePath"), we write camelCase ("filePath"); both load.
_FIELDS = {
    "filePath": "file_path",
    "trackName": "track_name",
    "artistName": "artist_name",
    "albumName": "album_name",
    "artworkUrl": "artwork_url",
    "customTitle": "custom_title",
}


@dataclass(frozen=True)
class MetadataRecord:
    file_path: str
    track_name: Optional[str] = None
    artist_name: Optional[str] = None
    album_name: Optional[str] = None
    artwork_url: Optional[str] = None   # remote origin
    custom_title: Optional[str] = None  # user override, wins over track_name
    image_paths: tuple[str, ...] = field(default_factory=tuple)

    def display_title(self, fallback: str = "") -> str:
        return self.custom_title or self.track_name or fallback

    @staticmethod
    def from_track_info(file_path: str, info) -> "MetadataRecord":
        return MetadataRecord(
            file_path=file_path,
            track_name=norm(info.track_name),
            artist_name=norm(info.artist_name),
            album_name=norm(info.album_name),
            artwork_url=norm(info.artwork_url),
        )

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "MetadataRecord":
        if not isinstance(d, dict):
            raise ValueError(f"record must be an object, got {type(d).__name__}")

        def opt(json_name: str) -> Optional[str]:
            pascal = json_name[0].upper() + json_name[1:]
            v = d.get(json_name, d.get(pascal))
            if v is not None and not isinstance(v, str):
                raise ValueError(f"field {json_name!r} must be a string or null")
            return v

        raw_paths = d.get("imagePaths", d.get("ImagePaths")) or []
        if not isinstance(raw_paths, list) or not all(isinstance(p, str) for p in raw_paths):
            raise ValueError("field 'imagePaths' must be a list of strings")

        values = {attr: opt(json_name) for json_name, attr in _FIELDS.items()}
        values["file_path"] = values["file_path"] or ""
        return MetadataRecord(image_paths=tuple(raw_paths), **values)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            json_name: getattr(self, attr) for json_name, attr in _FIELDS.items()
        }
        d["imagePaths"] = list(self.image_paths)
        return d
