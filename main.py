import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import load_config
from core.errors import CorruptStateError
from core.itunes_client import ItunesClient
from core.state import AppState, Notify
from library.track_library import TrackLibrary
from player.player import Player
from store.metadata_store import MetadataStore
from ui.main_window import MainWindow

logger = logging.getLogger("pymetaget")

def setup_logging() -> None:
    level = os.getenv("PYMETAGET_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

def get_app_data_dir() -> str:
    base = os.getenv("PYMETAGET_DATA_DIR") or QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    os.makedirs(base, exist_ok=True)
    return base

def open_or_reset(opener, path: str, app_state: AppState):
    """
    Open a persisted JSON file. If it is corrupt, move it aside to
    <path>.corrupt and start empty, queueing a warning for the UI.
    """
    try:
        return opener(path)
    except CorruptStateError as e:
        backup = path + ".corrupt"
        logger.error("%s; moving it to %s", e, backup)
        os.replace(path, backup)
        app_state.queued_notifications.append(
            Notify(message=f"{os.path.basename(path)} was unreadable and has been reset "
                           f"(backup: {os.path.basename(backup)})", notify_type="warn")
        )
        return opener(path)

def init_app_state() -> AppState:
    app_state = AppState()

    app_data_dir = get_app_data_dir()
    app_state.app_data_dir = app_data_dir
    app_state.config = cfg = load_config(app_data_dir)
    logger.info("App data directory: %s", app_data_dir)

    app_state.store = open_or_reset(
        MetadataStore.open, os.path.join(app_data_dir, cfg.metadata_file_name), app_state
    )
    app_state.library = open_or_reset(
        TrackLibrary.open, os.path.join(app_data_dir, cfg.library_file_name), app_state
    )

    app_state.client = ItunesClient(
        base_url=cfg.itunes_base_url,
        country=cfg.itunes_country,
        artwork_size=cfg.artwork_size,
        timeout_s=cfg.request_timeout_s,
        user_agent=cfg.user_agent,
    )

    try:
        app_state.player = Player()
    except Exception as e:
        app_state.player = None
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
        )

    return app_state

def main() -> int:
    setup_logging()
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("pymetaget")

    app_state = init_app_state()
    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()

if __name__ == "__main__":
    raise SystemExit(main())
