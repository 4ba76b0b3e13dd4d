# src/player/player.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from PySide6.QtCore import QObject, Signal, QUrl
from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput

class PlayerStatus(Enum):
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()

_STATUS_BY_STATE = {
    QMediaPlayer.PlayingState: PlayerStatus.PLAYING,
    QMediaPlayer.PausedState: PlayerStatus.PAUSED,
}

@dataclass
class NowPlaying:
    file_path: str
    title: str

class Player(QObject):
    statusChanged = Signal(object)      # PlayerStatus
    positionChanged = Signal(int)       # ms
    durationChanged = Signal(int)       # ms
    trackChanged = Signal(object)       # NowPlaying | None
    ended = Signal()

    def __init__(self):
        super().__init__()

        self.status = PlayerStatus.STOPPED
        self.track: NowPlaying | None = None

        self.audio = QAudioOutput()
        self.media = QMediaPlayer()
        self.media.setAudioOutput(self.audio)

        self._volume_0_to_1 = 0.7
        self.audio.setVolume(self._volume_0_to_1)

        self.media.positionChanged.connect(self.positionChanged.emit)
        self.media.durationChanged.connect(self.durationChanged.emit)
        self.media.playbackStateChanged.connect(self._on_state_changed)
        self.media.mediaStatusChanged.connect(self._on_media_status)

    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        self._set_status(_STATUS_BY_STATE.get(state, PlayerStatus.STOPPED))

    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.EndOfMedia:
            self._set_status(PlayerStatus.STOPPED)
            self.ended.emit()

    def _set_status(self, new_status: PlayerStatus) -> None:
        if self.status != new_status:
            self.status = new_status
            self.statusChanged.emit(self.status)

    # ----------------------------
    # Public API
    # ----------------------------

    def play_file(self, path: str, meta: NowPlaying | None = None) -> None:
        self.track = meta or NowPlaying(file_path=path, title=path)
        self.trackChanged.emit(self.track)

        self.media.setSource(QUrl.fromLocalFile(path))
        self.media.play()

    def play(self) -> None:
        self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def stop(self) -> None:
        self.media.stop()

    def toggle_play_pause(self) -> None:
        if self.media.playbackState() == QMediaPlayer.PlayingState:
            self.pause()
        else:
            self.play()

    def seek_ms(self, ms: int) -> None:
        self.media.setPosition(max(0, int(ms)))

    def set_volume(self, volume_0_to_1: float) -> None:
        v = min(1.0, max(0.0, float(volume_0_to_1)))
        self._volume_0_to_1 = v
        self.audio.setVolume(v)

    def volume(self) -> float:
        return self._volume_0_to_1
