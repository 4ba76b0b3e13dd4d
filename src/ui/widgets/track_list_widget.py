# ui/widgets/track_list_widget.py
from __future__ import annotations

from PySide6.QtCore import Signal, Qt, QItemSelectionModel
from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableView, QMenu

from ui.models.track_table_model import TrackTableModel
from ui.theme import TRACK_TABLE_QSS


class TrackListWidget(QWidget):
    playTrack = Signal(object)     # Track
    editTrack = Signal(object)     # Track
    removeTrack = Signal(object)   # Track

    def __init__(self, app_state):
        super().__init__()
        self.app_state = app_state

        self.table = QTableView()
        self.model = TrackTableModel([], store=app_state.store)
        self.table.setModel(self.model)

        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)

        self.table.setColumnWidth(0, 260)
        self.table.setColumnWidth(1, 160)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setObjectName("TrackTable")

        self.table.verticalHeader().setDefaultSectionSize(24)

        self.setStyleSheet(TRACK_TABLE_QSS)

        # Double click -> play
        self.table.doubleClicked.connect(self._on_double_click)

        # Right-click context menu
        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._on_context_menu)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

    # -------------------------
    # External API
    # -------------------------
    def refresh(self):
        self.model.set_rows(self.app_state.library.tracks)

    def refresh_path(self, file_path: str):
        self.model.refresh_path(file_path)

    def selected_track(self):
        idx = self.table.currentIndex()
        if not idx.isValid():
            return None
        return self.model.track_at(idx.row())

    def current_queue(self):
        return self.model.all_tracks()

    def set_now_playing(self, file_path: str | None):
        if file_path is None:
            self.table.clearSelection()
            return

        row = self.model.row_for_path(file_path)
        if row < 0:
            return

        idx = self.model.index(row, 0)
        sm = self.table.selectionModel()
        if sm is None:
            return

        sm.setCurrentIndex(idx, QItemSelectionModel.ClearAndSelect | QItemSelectionModel.Rows)
        self.table.scrollTo(idx, QTableView.ScrollHint.EnsureVisible)

    # -------------------------
    # UI Events
    # -------------------------
    def _on_double_click(self, index):
        if not index.isValid():
            return
        track = self.model.track_at(index.row())
        if track is not None:
            self.playTrack.emit(track)

    def _on_context_menu(self, pos):
        idx = self.table.indexAt(pos)
        if not idx.isValid():
            return

        track = self.model.track_at(idx.row())
        if track is None:
            return

        menu = QMenu(self)
        act_play = menu.addAction("Play")
        act_edit = menu.addAction("Edit…")
        act_remove = menu.addAction("Remove from library")

        chosen = menu.exec(self.table.viewport().mapToGlobal(pos))
        if chosen == act_play:
            self.playTrack.emit(track)
        elif chosen == act_edit:
            self.editTrack.emit(track)
        elif chosen == act_remove:
            self.removeTrack.emit(track)

