from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter,
    QFileDialog, QToolButton, QStyle, QDialog
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QShortcut, QKeySequence
import logging

from core.events import ClearDisplay, DisplayImage, DisplayMetadata, DisplayStatus
from core.fetch_orchestrator import FetchOrchestrator
from core.images import ImageRotation
from core.state import OrchestratorEvents
from core.utils import path_key
from library.track_library import AUDIO_EXTS
from player.player import NowPlaying, PlayerStatus
from ui.dialogs.edit_song_dialog import EditSongDialog
from ui.player_bar import PlayerBar
from ui.widgets.now_playing_panel import NowPlayingPanel
from ui.widgets.track_list_widget import TrackListWidget

logger = logging.getLogger(__name__)

AUDIO_FILE_FILTER = "Audio Files (" + " ".join(f"*{e}" for e in sorted(AUDIO_EXTS)) + ")"


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("MetaGet Python")
        self.resize(960, 600)
        self.app_state = app_state
        cfg = app_state.config

        self._active_track = None

        # --- core wiring: everything the core reports arrives through one signal ---
        self.core_events = OrchestratorEvents(self)
        # Queued even for same-thread emits, so delivery follows emission order.
        self.core_events.event.connect(self._on_core_event, Qt.QueuedConnection)

        self.orchestrator = FetchOrchestrator(
            store=app_state.store,
            client=app_state.client,
            emit=self.core_events.event.emit,
        )

        self.rotation_timer = QTimer(self)
        self.rotation_timer.setInterval(cfg.rotation_interval_ms)
        self.rotation = ImageRotation(emit=self.core_events.event.emit, timer=self.rotation_timer)
        self.rotation_timer.timeout.connect(self.rotation.advance)

        # --- Player signals ---
        if self.app_state.player:
            self.app_state.player.statusChanged.connect(self._on_player_status_changed)
            self.app_state.player.ended.connect(self.play_next)

        # --- Shortcuts ---
        QShortcut(QKeySequence("Space"), self, activated=self._toggle_play_pause)
        QShortcut(QKeySequence("Return"), self, activated=self._play_selected)
        QShortcut(QKeySequence("Enter"), self, activated=self._play_selected)
        QShortcut(QKeySequence("Ctrl+Right"), self, activated=self.play_next)
        QShortcut(QKeySequence("Ctrl+Left"), self, activated=self.play_prev)
        QShortcut(QKeySequence("Ctrl+E"), self, activated=self._edit_selected)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.app_state.notification.connect(self._on_notify)

        # --- Top controls ---
        top_bar = QHBoxLayout()
        top_bar.addStretch(1)

        self.btn_add_files = QToolButton()
        self.btn_add_files.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileIcon))
        self.btn_add_files.setToolTip("Add files")
        self.btn_add_files.clicked.connect(self.add_files)

        self.btn_add_folder = QToolButton()
        self.btn_add_folder.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DirOpenIcon))
        self.btn_add_folder.setToolTip("Add folder")
        self.btn_add_folder.clicked.connect(self.add_folder)

        self.btn_edit = QToolButton()
        self.btn_edit.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView))
        self.btn_edit.setToolTip("Edit song")
        self.btn_edit.clicked.connect(self._edit_selected)

        self.btn_remove = QToolButton()
        self.btn_remove.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_TrashIcon))
        self.btn_remove.setToolTip("Remove from library")
        self.btn_remove.clicked.connect(self._remove_selected)

        top_bar.addWidget(self.btn_add_files)
        top_bar.addWidget(self.btn_add_folder)
        top_bar.addWidget(self.btn_edit)
        top_bar.addWidget(self.btn_remove)
        self.layout.addLayout(top_bar)

        # --- Library + now playing ---
        splitter = QSplitter(Qt.Orientation.Horizontal)

        self.track_list = TrackListWidget(self.app_state)
        self.track_list.playTrack.connect(self.on_play_track)
        self.track_list.editTrack.connect(self.edit_track)
        self.track_list.removeTrack.connect(self.remove_track)
        splitter.addWidget(self.track_list)

        self.now_playing = NowPlayingPanel(user_agent=cfg.user_agent)
        splitter.addWidget(self.now_playing)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)

        self.layout.addWidget(splitter, 1)

        # --- PlayerBar ---
        self.player_bar = PlayerBar(self.app_state.player, self)
        self.layout.addWidget(self.player_bar)
        self.player_bar.set_prev_next_handlers(self.play_prev, self.play_next)

        self.track_list.refresh()
        self.now_playing.set_status("Select a track to play")
        self.show_queued_notifications()

    # ------------------ core events ------------------
    def _on_core_event(self, ev):
        if isinstance(ev, ClearDisplay):
            self.now_playing.clear()
            if self._active_track is not None:
                self.now_playing.set_title(self._active_track.title)
            self.rotation.clear()
        elif isinstance(ev, DisplayMetadata):
            self._show_record(ev.record, ev.file_path)
        elif isinstance(ev, DisplayStatus):
            self.now_playing.set_status(ev.message)
            self.statusBar().showMessage(ev.message, 4000)
        elif isinstance(ev, DisplayImage):
            self.now_playing.show_image(ev.candidate)

    def _is_active(self, file_path: str) -> bool:
        return self._active_track is not None and path_key(self._active_track.file_path) == path_key(file_path)

    def _show_record(self, record, file_path: str):
        self.track_list.refresh_path(file_path)
        if not self._is_active(file_path):
            return

        title = record.display_title(self._active_track.title)
        self.now_playing.show_metadata(record, self._active_track.title)
        self.player_bar.set_title(f"{record.artist_name} - {title}" if record.artist_name else title)
        self.rotation.show(record, file_path)

    # ------------------ library actions ------------------
    def add_files(self):
        paths, _ = QFileDialog.getOpenFileNames(self, "Add Music Files", "", AUDIO_FILE_FILTER)
        if paths:
            self._add_to_library(lambda: self.app_state.library.add_files(paths))

    def add_folder(self):
        directory = QFileDialog.getExistingDirectory(self, "Select Music Folder")
        if directory:
            self._add_to_library(lambda: self.app_state.library.add_folder(directory))

    def _add_to_library(self, add):
        try:
            added = add()
        except OSError as e:
            self.app_state.notify(f"Failed to save library: {e}", "error")
            return
        self.track_list.refresh()
        self.app_state.notify(f"Added {len(added)} track(s).", "success")

    def remove_track(self, track):
        try:
            self.app_state.library.remove(track.file_path)
        except OSError as e:
            self.app_state.notify(f"Failed to save library: {e}", "error")
        self.track_list.refresh()

    def _remove_selected(self):
        track = self.track_list.selected_track()
        if track is not None:
            self.remove_track(track)

    def edit_track(self, track):
        dlg = EditSongDialog(self.app_state, track, self)
        if dlg.exec() != QDialog.Accepted or dlg.saved_record is None:
            return

        self.track_list.refresh_path(track.file_path)
        if self._is_active(track.file_path):
            self._show_record(dlg.saved_record, track.file_path)
        self.app_state.notify("Song info saved.", "success")

    def _edit_selected(self):
        track = self.track_list.selected_track()
        if track is not None:
            self.edit_track(track)

    # ------------------ playback ------------------
    def on_play_track(self, track):
        self._active_track = track
        record = self.app_state.store.get(track.file_path)
        title = record.display_title(track.title) if record else track.title

        if self.app_state.player:
            self.app_state.player.play_file(track.file_path, NowPlaying(file_path=track.file_path, title=title))
        self.track_list.set_now_playing(track.file_path)

        self.orchestrator.activate(track)

    def _step(self, delta: int):
        queue = self.track_list.current_queue()
        if not queue:
            return

        i = -1
        if self._active_track is not None:
            i = self.track_list.model.row_for_path(self._active_track.file_path)
        nxt = i + delta
        if 0 <= nxt < len(queue):
            self.on_play_track(queue[nxt])

    def play_next(self):
        self._step(1)

    def play_prev(self):
        self._step(-1)

    def _play_selected(self):
        track = self.track_list.selected_track()
        if track is not None:
            self.on_play_track(track)

    def _toggle_play_pause(self):
        if self.app_state.player:
            self.app_state.player.toggle_play_pause()

    def _on_player_status_changed(self, status):
        player = self.app_state.player
        path = player.track.file_path if player and player.track else None
        self.rotation.set_playback(path, status == PlayerStatus.PLAYING)

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        msg = getattr(n, "message", "") or ""
        if not msg:
            return
        kind = (getattr(n, "notify_type", "info") or "info").lower()
        if kind == "error":
            logger.error(msg)
        self.statusBar().showMessage(msg, 6000 if kind in ("error", "warn") else 3000)

    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()

    def closeEvent(self, event):
        self.rotation_timer.stop()
        self.orchestrator.shutdown()
        if self.app_state.player:
            self.app_state.player.stop()
        super().closeEvent(event)
