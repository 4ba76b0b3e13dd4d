# ui/theme.py
from __future__ import annotations

BG = "#020617"
BG_ALT = "#030712"
SURFACE = "#0b1222"
BORDER = "#1f2937"
TEXT = "#e5e7eb"
TEXT_DIM = "#9ca3af"
TEXT_MUTED = "#6b7280"
ACCENT = "#38bdf8"

PLAYER_BAR_QSS = f"""
QWidget#PlayerBar {{ background-color: {BG}; border-top: 1px solid #111827; }}
QToolButton {{ border: 1px solid transparent; background: transparent; padding: 6px; border-radius: 10px; }}
QToolButton:hover {{ background: {SURFACE}; border-color: {BORDER}; }}
QToolButton#BtnPlay {{ background: #111827; border: 1px solid {BORDER}; border-radius: 999px; padding: 8px; }}
QSlider::groove:horizontal {{ height: 4px; background: #0f172a; border-radius: 2px; }}
QSlider::handle:horizontal {{ width: 12px; height: 12px; margin: -4px 0; border-radius: 6px; background: {ACCENT}; }}
QSlider::sub-page:horizontal {{ background: {ACCENT}; border-radius: 2px; }}
QLabel {{ color: {TEXT_DIM}; font-size: 11px; }}
QLabel#NowPlaying {{ color: {TEXT}; font-size: 12px; }}
"""

TRACK_TABLE_QSS = f"""
QTableView#TrackTable {{
    background-color: {BG}; alternate-background-color: {BG_ALT}; border: none; color: {TEXT};
    selection-background-color: rgba(56, 189, 248, 0.2); selection-color: {TEXT};
}}
QHeaderView::section {{
    background-color: {BG}; color: {TEXT_DIM}; padding: 4px 6px;
    border: none; border-bottom: 1px solid #111827; font-size: 11px;
}}
"""

NOW_PLAYING_QSS = f"""
QLabel {{ color: {TEXT_DIM}; font-size: 12px; }}
QLabel#TrackTitle {{ color: {TEXT}; font-size: 16px; font-weight: 600; }}
QLabel#Status {{ color: {TEXT_MUTED}; font-size: 11px; }}
"""
