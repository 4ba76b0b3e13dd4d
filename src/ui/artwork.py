# ui/artwork.py
from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QByteArray
from PySide6.QtGui import QPixmap, QPainter
from PySide6.QtSvg import QSvgRenderer

logger = logging.getLogger(__name__)

ARTWORK_SIZE = 260

# Material "music note" on a rounded tile
_PLACEHOLDER_SVG = """
<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">
  <rect x="0" y="0" width="24" height="24" rx="3" fill="#0b1222"/>
  <path d="M12 5v8.55A3.96 3.96 0 0 0 10 13c-2.21 0-4 1.79-4 4s1.79 4 4 4 4-1.79 4-4V9h4V5h-6z"
        fill="#1f2937" transform="translate(0 -1)"/>
</svg>
""".strip()

_placeholder_cache: dict[int, QPixmap] = {}


def placeholder_pixmap(size: int = ARTWORK_SIZE) -> QPixmap:
    pm = _placeholder_cache.get(size)
    if pm is not None:
        return pm

    renderer = QSvgRenderer(QByteArray(_PLACEHOLDER_SVG.format(size=size).encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()

    _placeholder_cache[size] = pm
    return pm


def _fit(pm: QPixmap, size: int) -> QPixmap:
    return pm.scaled(size, size, Qt.KeepAspectRatio, Qt.SmoothTransformation)


def load_local_pixmap(path: str, size: int = ARTWORK_SIZE) -> QPixmap:
    """Image from disk, or the placeholder if it is missing or undecodable."""
    pm = QPixmap(path)
    if pm.isNull():
        logger.warning("Cannot load image %s; using placeholder", path)
        return placeholder_pixmap(size)
    return _fit(pm, size)


def pixmap_from_bytes(data: bytes | None, size: int = ARTWORK_SIZE) -> QPixmap:
    pm = QPixmap()
    if not data or not pm.loadFromData(data):
        return placeholder_pixmap(size)
    return _fit(pm, size)
