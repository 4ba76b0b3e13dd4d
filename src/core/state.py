from __future__ import annotations
from dataclasses import dataclass
from PySide6.QtCore import QObject, Signal, Slot

@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warn/error

class OrchestratorEvents(QObject):
    # Core code emits from worker threads; receivers on the GUI thread get
    # the events queued.
    event = Signal(object)      # core.events.*

class AppState(QObject):
    notification = Signal(object)   # emits Notify

    def __init__(self):
        super().__init__()
        self.app_data_dir: str | None = None
        self.config = None
        self.store = None
        self.library = None
        self.client = None
        self.player = None
        self.queued_notifications: list[Notify] = []

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))
