# ui/player_bar.py
from __future__ import annotations

from PySide6.QtCore import Qt, QSize, QByteArray
from PySide6.QtGui import QIcon, QPixmap, QPainter
from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QToolButton, QSlider
from PySide6.QtSvg import QSvgRenderer

from player.player import PlayerStatus
from ui.theme import PLAYER_BAR_QSS, TEXT

NOTHING_PLAYING = "Nothing playing"

SVG_PREV = "M6 18V6h2v12H6zm3.5-6L18 6v12l-8.5-6z"
SVG_NEXT = "M16 6v12h2V6h-2zM6 18l8.5-6L6 6v12z"
SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"
SVG_STOP = "M6 6h12v12H6z"


def _fmt(ms: int) -> str:
    total_s = max(0, int(ms)) // 1000
    return f"{total_s // 60}:{total_s % 60:02d}"


def _svg_icon(path_d: str, size: int = 20, color: str = TEXT) -> QIcon:
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">'
        f'<path d="{path_d}" fill="{color}"/></svg>'
    )
    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)
    p = QPainter(pm)
    renderer.render(p)
    p.end()
    return QIcon(pm)


class PlayerBar(QWidget):
    """Transport controls, seek slider and volume for the shared Player."""

    def __init__(self, player, parent=None):
        super().__init__(parent)
        self.player = player
        self._dragging = False

        self.btn_prev = self._button(SVG_PREV, 20, "Previous")
        self.btn_play = self._button(SVG_PLAY, 22, "Play")
        self.btn_play.setObjectName("BtnPlay")
        self.btn_stop = self._button(SVG_STOP, 20, "Stop")
        self.btn_next = self._button(SVG_NEXT, 20, "Next")

        self.lbl_title = QLabel(NOTHING_PLAYING)
        self.lbl_title.setObjectName("NowPlaying")
        self.lbl_title.setMinimumWidth(220)
        self.lbl_time = QLabel("0:00")
        self.lbl_dur = QLabel("0:00")

        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.setSingleStep(1000)
        self.slider.setPageStep(5000)

        self.volume = QSlider(Qt.Orientation.Horizontal)
        self.volume.setRange(0, 100)
        self.volume.setFixedWidth(90)
        self.volume.setToolTip("Volume")

        row = QHBoxLayout(self)
        row.setContentsMargins(8, 6, 8, 6)
        row.setSpacing(10)
        for btn in (self.btn_prev, self.btn_play, self.btn_stop, self.btn_next):
            row.addWidget(btn)
        row.addSpacing(6)
        row.addWidget(self.lbl_title, 1)
        row.addWidget(self.lbl_time)
        row.addWidget(self.slider, 3)
        row.addWidget(self.lbl_dur)
        row.addWidget(self.volume)

        self.slider.sliderPressed.connect(self._begin_drag)
        self.slider.sliderMoved.connect(lambda v: self.lbl_time.setText(_fmt(v)))
        self.slider.sliderReleased.connect(self._end_drag)

        if self.player:
            self.volume.setValue(int(round(self.player.volume() * 100)))
            self.volume.valueChanged.connect(lambda v: self.player.set_volume(v / 100.0))

            self.player.trackChanged.connect(self._on_track_changed)
            self.player.statusChanged.connect(self._on_status_changed)
            self.player.positionChanged.connect(self._on_position)
            self.player.durationChanged.connect(self._on_duration)

            self.btn_play.clicked.connect(self.player.toggle_play_pause)
            self.btn_stop.clicked.connect(self.player.stop)
        else:
            for w in (self.btn_play, self.btn_stop, self.slider, self.volume):
                w.setEnabled(False)

        self.setObjectName("PlayerBar")
        self.setStyleSheet(PLAYER_BAR_QSS)

    def _button(self, svg: str, size: int, tip: str) -> QToolButton:
        btn = QToolButton()
        btn.setIcon(_svg_icon(svg, size))
        btn.setIconSize(QSize(size, size))
        btn.setToolTip(tip)
        return btn

    def set_prev_next_handlers(self, prev_fn, next_fn):
        self.btn_prev.clicked.connect(prev_fn)
        self.btn_next.clicked.connect(next_fn)

    def set_title(self, title: str):
        self.lbl_title.setText(title or NOTHING_PLAYING)

    def _begin_drag(self):
        self._dragging = True

    def _end_drag(self):
        self._dragging = False
        if self.player:
            self.player.seek_ms(self.slider.value())

    def _reset_position(self):
        self.slider.setValue(0)
        self.lbl_time.setText("0:00")

    def _on_track_changed(self, now_playing):
        self.set_title(now_playing.title if now_playing else "")
        if now_playing is None:
            self._reset_position()
            self.lbl_dur.setText("0:00")
            self._show_playing(False)

    def _on_status_changed(self, status):
        self._show_playing(status == PlayerStatus.PLAYING)
        if status == PlayerStatus.STOPPED and not self._dragging:
            self._reset_position()

    def _show_playing(self, playing: bool):
        self.btn_play.setIcon(_svg_icon(SVG_PAUSE if playing else SVG_PLAY, 22))
        self.btn_play.setToolTip("Pause" if playing else "Play")

    def _on_duration(self, ms: int):
        self.slider.setRange(0, max(0, int(ms)))
        self.lbl_dur.setText(_fmt(ms))

    def _on_position(self, ms: int):
        if not self._dragging:
            self.slider.setValue(int(ms))
            self.lbl_time.setText(_fmt(ms))
