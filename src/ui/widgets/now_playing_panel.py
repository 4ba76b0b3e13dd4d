# ui/widgets/now_playing_panel.py
from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel

from core.images import classify_candidate
from ui.artwork import ARTWORK_SIZE, load_local_pixmap, pixmap_from_bytes, placeholder_pixmap
from ui.theme import NOW_PLAYING_QSS
from ui.workers.artwork_download_worker import ArtworkDownloadWorker, cached_artwork


class NowPlayingPanel(QWidget):
    def __init__(self, user_agent: str = "pymetaget/0.1", parent=None):
        super().__init__(parent)
        self.user_agent = user_agent

        self._current_candidate: str | None = None
        self._workers: dict[str, ArtworkDownloadWorker] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(8)

        self.lbl_artwork = QLabel()
        self.lbl_artwork.setObjectName("Artwork")
        self.lbl_artwork.setFixedSize(ARTWORK_SIZE, ARTWORK_SIZE)
        self.lbl_artwork.setAlignment(Qt.AlignCenter)

        self.lbl_title = QLabel()
        self.lbl_title.setObjectName("TrackTitle")
        self.lbl_title.setWordWrap(True)
        self.lbl_title.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self.lbl_artist = QLabel()
        self.lbl_album = QLabel()
        self.lbl_status = QLabel()
        self.lbl_status.setObjectName("Status")

        layout.addWidget(self.lbl_artwork, 0, Qt.AlignHCenter)
        layout.addWidget(self.lbl_title)
        layout.addWidget(self.lbl_artist)
        layout.addWidget(self.lbl_album)
        layout.addStretch(1)
        layout.addWidget(self.lbl_status)

        self.setObjectName("NowPlayingPanel")
        self.setStyleSheet(NOW_PLAYING_QSS)

        self.clear()

    # -------------------------
    # Display events
    # -------------------------
    def clear(self):
        self.lbl_title.setText("")
        self.lbl_artist.setText("")
        self.lbl_album.setText("")
        self.show_image(None)

    def show_metadata(self, record, fallback_title: str = ""):
        self.lbl_title.setText(record.display_title(fallback_title))
        self.lbl_artist.setText(record.artist_name or "")
        self.lbl_album.setText(record.album_name or "")

    def set_title(self, title: str):
        self.lbl_title.setText(title)

    def set_status(self, message: str):
        self.lbl_status.setText(message)

    def show_image(self, candidate: str | None):
        self._current_candidate = candidate
        kind = classify_candidate(candidate)

        if kind == "file":
            self.lbl_artwork.setPixmap(load_local_pixmap(candidate))
            return

        if kind == "url":
            data = cached_artwork(candidate)
            if data is not None:
                self.lbl_artwork.setPixmap(pixmap_from_bytes(data))
                return
            # placeholder until the download lands
            self.lbl_artwork.setPixmap(placeholder_pixmap())
            self._download(candidate)
            return

        self.lbl_artwork.setPixmap(placeholder_pixmap())

    # -------------------------
    # Remote artwork
    # -------------------------
    def _download(self, url: str):
        if url in self._workers:
            return
        worker = ArtworkDownloadWorker(url, user_agent=self.user_agent, parent=self)
        worker.finished_signal.connect(self._on_artwork_downloaded)
        worker.finished.connect(lambda u=url: self._workers.pop(u, None))
        self._workers[url] = worker
        worker.start()

    def _on_artwork_downloaded(self, url: str, data):
        if url != self._current_candidate:
            return  # rotated or switched tracks meanwhile
        self.lbl_artwork.setPixmap(pixmap_from_bytes(data))
