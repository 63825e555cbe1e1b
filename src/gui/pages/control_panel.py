"""
ControlPanel — fixed-width left panel of the main window.

Hosts the address bar, the status line and the PACS / image-viewer
buttons.  The panel only owns presentation; MainWindow connects the
buttons to the store, the dialogs and the viewer bridge.

Layout
──────
  ┌──────────────────────────────┐
  │ Web Previewer                │
  │ [https://…________________]  │
  │ [Load Website]               │
  │ Website loaded successfully  │
  │ ──────────────────────────── │
  │ [Add PACS]   [View PACS]     │
  │ [Open Image Viewer]          │
  └──────────────────────────────┘
"""

import logging

from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from src.gui.viewmodels import ShellViewModel, StatusMessage

__all__ = ["ControlPanel"]

logger = logging.getLogger(__name__)

_STATUS_COLOR = "#666"
_ERROR_COLOR = "#d32f2f"


class ControlPanel(QWidget):
    """Address bar, status line and action buttons."""

    def __init__(self, width: int = 400, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = ShellViewModel()
        self.setFixedWidth(width)
        self._build_ui()
        self.show_status(self._vm.status)

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        layout.addWidget(QLabel("<b>Web Previewer</b>"))

        self._url_edit = QLineEdit()
        self._url_edit.setPlaceholderText("https://example.com")
        layout.addWidget(self._url_edit)

        self._load_btn = QPushButton("Load Website")
        layout.addWidget(self._load_btn)

        self._status_label = QLabel()
        self._status_label.setWordWrap(True)
        layout.addWidget(self._status_label)

        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        layout.addWidget(line)

        layout.addWidget(QLabel("<b>PACS</b>"))
        pacs_row = QHBoxLayout()
        self._add_pacs_btn = QPushButton("Add PACS")
        self._view_pacs_btn = QPushButton("View PACS")
        pacs_row.addWidget(self._add_pacs_btn)
        pacs_row.addWidget(self._view_pacs_btn)
        layout.addLayout(pacs_row)

        self._eye_btn = QPushButton("Open Image Viewer")
        self._eye_btn.setToolTip("Select the first study and open it in the image viewer")
        layout.addWidget(self._eye_btn)

        layout.addStretch()

    # ── Public helpers ──────────────────────────────────────────────────────

    @property
    def url_text(self) -> str:
        return self._url_edit.text()

    def set_url_text(self, text: str) -> None:
        self._url_edit.setText(text)

    def show_status(self, status: StatusMessage) -> None:
        """Render *status* in the status label."""
        self._vm.status = status
        color = _ERROR_COLOR if status.is_error else _STATUS_COLOR
        self._status_label.setStyleSheet(f"color: {color};")
        self._status_label.setText(status.text)

    def update_status(self, text: str, is_error: bool = False) -> None:
        self.show_status(StatusMessage(text, is_error))

    def set_loading(self, loading: bool) -> None:
        """Disable the load button and relabel it while a page is loading."""
        self._load_btn.setEnabled(not loading)
        self._load_btn.setText("Loading..." if loading else "Load Website")
