"""
PacsFormDialog — modal form for adding a PACS endpoint.

Layout
──────
  ┌────────────────────────────────┐
  │ Node:   [____________________] │
  │ IP:     [____________________] │
  │ Port:   [____________________] │
  │ AE:     [____________________] │
  │          [Show existing] [Save]│
  └────────────────────────────────┘

Outcome messages are emitted through status_changed(text, is_error) and
shown in the main window's status line.
"""

import logging

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from src.gui.viewmodels import PacsFormViewModel, summarize_records
from src.store.json_store import PacsStore
from src.store.models import RECORD_FIELDS

__all__ = ["PacsFormDialog"]

logger = logging.getLogger(__name__)

_FIELD_LABELS = {
    "node": "Node:",
    "ip":   "IP:",
    "port": "Port:",
    "ae":   "AE Title:",
}


class PacsFormDialog(QDialog):
    """Collects node / IP / port / AE and saves them as a new record."""

    status_changed = pyqtSignal(str, bool)   # text, is_error

    def __init__(self, store: PacsStore, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._store = store
        self._vm = PacsFormViewModel()
        self._edits: dict[str, QLineEdit] = {}
        self.setWindowTitle("Add PACS")
        self.setModal(True)
        self._build_ui()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)

        form = QFormLayout()
        for name in RECORD_FIELDS:
            edit = QLineEdit()
            edit.textChanged.connect(lambda text, n=name: self._vm.set_field(n, text))
            self._edits[name] = edit
            form.addRow(_FIELD_LABELS[name], edit)
        layout.addLayout(form)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._show_existing_btn = QPushButton("Show existing")
        self._show_existing_btn.clicked.connect(self._on_show_existing)
        self._save_btn = QPushButton("Save")
        self._save_btn.setDefault(True)
        self._save_btn.clicked.connect(self._on_save)
        btn_row.addWidget(self._show_existing_btn)
        btn_row.addWidget(self._save_btn)
        layout.addLayout(btn_row)

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_save(self) -> None:
        record = self._vm.submit(self._store)
        if self._vm.status is not None:
            self.status_changed.emit(self._vm.status.text, self._vm.status.is_error)
        if record is not None:
            self.accept()

    def _on_show_existing(self) -> None:
        self.status_changed.emit(summarize_records(self._store.list_records()), False)

    # ── Public helpers ──────────────────────────────────────────────────────

    def set_values(self, **values: str) -> None:
        """Fill the form fields (used by tests and for prefilling)."""
        for name, value in values.items():
            self._edits[name].setText(value)
