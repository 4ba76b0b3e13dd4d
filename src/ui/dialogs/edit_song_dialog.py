from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QListWidget, QPushButton, QLabel, QLineEdit,
    QFileDialog, QHBoxLayout, QFormLayout, QMessageBox
)

from core.song_editor import IMAGE_FILE_FILTER, SongEditor
from ui.widgets.now_playing_panel import NowPlayingPanel

class EditSongDialog(QDialog):
    def __init__(self, app_state, track, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Song")
        self.resize(620, 440)
        self.app_state = app_state
        self.editor = SongEditor(track, app_state.store.get(track.file_path), app_state.store)
        self.saved_record = None

        root = QHBoxLayout(self)

        # --- left: fields + images ---
        left = QVBoxLayout()

        form = QFormLayout()
        self.title_edit = QLineEdit(self.editor.title)
        form.addRow("Title", self.title_edit)
        form.addRow("Artist", QLabel(self.editor.artist_name or "Unknown"))
        form.addRow("Album", QLabel(self.editor.album_name or "Unknown"))
        path_label = QLabel(self.editor.file_path)
        path_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        path_label.setWordWrap(True)
        form.addRow("File", path_label)
        left.addLayout(form)

        left.addWidget(QLabel("Images"))
        self.list_widget = QListWidget()
        left.addWidget(self.list_widget, 1)

        btn_layout = QHBoxLayout()
        self.add_btn = QPushButton("Add Image")
        self.remove_btn = QPushButton("Remove Selected")
        btn_layout.addWidget(self.add_btn)
        btn_layout.addWidget(self.remove_btn)
        left.addLayout(btn_layout)

        actions = QHBoxLayout()
        actions.addStretch(1)
        self.cancel_btn = QPushButton("Cancel")
        self.save_btn = QPushButton("Save")
        self.save_btn.setDefault(True)
        actions.addWidget(self.cancel_btn)
        actions.addWidget(self.save_btn)
        left.addLayout(actions)

        root.addLayout(left, 1)

        # --- right: preview ---
        user_agent = app_state.config.user_agent if app_state.config else "pymetaget/0.1"
        self.preview = NowPlayingPanel(user_agent=user_agent, parent=self)
        root.addWidget(self.preview)

        self._load()

        # connect
        self.add_btn.clicked.connect(self.add_image)
        self.remove_btn.clicked.connect(self.remove_selected)
        self.list_widget.currentRowChanged.connect(self._on_row_changed)
        self.cancel_btn.clicked.connect(self.reject)
        self.save_btn.clicked.connect(self.save)

    def _load(self):
        self.list_widget.blockSignals(True)
        self.list_widget.clear()
        for p in self.editor.image_paths:
            self.list_widget.addItem(p)

        if self.editor.selected_index is not None:
            self.list_widget.setCurrentRow(self.editor.selected_index)
        self.list_widget.blockSignals(False)

        self.remove_btn.setEnabled(self.editor.selected_index is not None)
        self.preview.show_image(self.editor.preview_candidate())

    def _on_row_changed(self, row: int):
        self.editor.select(row)
        self.remove_btn.setEnabled(self.editor.selected_index is not None)
        self.preview.show_image(self.editor.preview_candidate())

    def add_image(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select Image", "", IMAGE_FILE_FILTER)
        if not path:
            return
        self.editor.add_image(path)
        self._load()

    def remove_selected(self):
        if self.editor.remove_selected():
            self._load()

    def save(self):
        self.editor.title = self.title_edit.text()
        try:
            self.saved_record = self.editor.save()
        except OSError as e:
            QMessageBox.critical(self, "Edit Song", f"Failed to save metadata:\n{e}")
            return
        self.accept()
