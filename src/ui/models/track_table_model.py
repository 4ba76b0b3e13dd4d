# ui/models/track_table_model.py
from __future__ import annotations
from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from core.utils import path_key
from library.track_library import Track

class TrackTableModel(QAbstractTableModel):
    """Library rows; the Title column prefers the cached metadata title."""

    def __init__(self, tracks, store=None):
        super().__init__()
        self._rows: list[Track] = list(tracks)
        self.store = store

    def set_rows(self, tracks):
        self.beginResetModel()
        self._rows = list(tracks)
        self.endResetModel()

    def refresh_path(self, file_path: str):
        row = self.row_for_path(file_path)
        if row >= 0:
            self.dataChanged.emit(self.index(row, 0), self.index(row, self.columnCount() - 1))

    def rowCount(self, parent=QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 3

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        return ["Title", "Artist", "File"][section]

    def data(self, index: QModelIndex, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        track = self._rows[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            record = self.store.get(track.file_path) if self.store else None
            if col == 0:
                return record.display_title(track.title) if record else track.title
            if col == 1:
                return (record.artist_name or "") if record else ""
            if col == 2:
                return track.file_path
        if role == Qt.ToolTipRole:
            return track.file_path
        if role == Qt.UserRole:
            return track
        return None

    def track_at(self, row: int) -> Track | None:
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row]

    def row_for_path(self, file_path: str) -> int:
        key = path_key(file_path or "")
        for i, t in enumerate(self._rows):
            if path_key(t.file_path) == key:
                return i
        return -1

    def all_tracks(self) -> list[Track]:
        return list(self._rows)
