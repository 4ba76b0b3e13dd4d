# ui/workers/artwork_download_worker.py
from __future__ import annotations

import logging
import threading

import requests
from PySide6.QtCore import QThread, Signal

logger = logging.getLogger(__name__)

# url -> bytes, for the lifetime of the process
_downloaded: dict[str, bytes] = {}
_downloaded_lock = threading.Lock()


def cached_artwork(url: str) -> bytes | None:
    with _downloaded_lock:
        return _downloaded.get(url)


class ArtworkDownloadWorker(QThread):
    finished_signal = Signal(str, object)   # url, bytes | None

    def __init__(self, url: str, user_agent: str = "pymetaget/0.1", timeout_s: float = 15.0, parent=None):
        super().__init__(parent)
        self.url = url
        self.user_agent = user_agent
        self.timeout_s = timeout_s

    def run(self):
        data = cached_artwork(self.url)
        if data is not None:
            self.finished_signal.emit(self.url, data)
            return

        try:
            r = requests.get(self.url, headers={"User-Agent": self.user_agent}, timeout=self.timeout_s)
            r.raise_for_status()
            data = r.content
        except requests.RequestException as e:
            logger.warning("Artwork download failed for %s: %s", self.url, e)
            self.finished_signal.emit(self.url, None)
            return

        with _downloaded_lock:
            _downloaded[self.url] = data
        self.finished_signal.emit(self.url, data)
