"""
PacsListDialog — table of saved PACS endpoints with inline row editing.

Layout
──────
  ┌─────────────────────────────────────────────────────┐
  │ Node    │ IP        │ Port │ AE   │ Actions         │
  │ Main    │ 10.0.0.1  │ 104  │ AE1  │ [Edit]          │
  │ [Backup]│ [10.0.0.2]│ [11] │ [AE2]│ [Save] [Cancel] │
  │                                   [Refresh] [Close] │
  └─────────────────────────────────────────────────────┘

Only one row is editable at a time (see PacsListViewModel).
"""

import logging

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from src.gui.viewmodels import PacsListViewModel, PacsRowViewModel
from src.store.json_store import PacsStore
from src.store.models import RECORD_FIELDS

__all__ = ["PacsListDialog"]

logger = logging.getLogger(__name__)

# Column indices
_COL_NODE    = 0
_COL_IP      = 1
_COL_PORT    = 2
_COL_AE      = 3
_COL_ACTIONS = 4
_HEADERS = ["Node", "IP", "Port", "AE", "Actions"]
_FIELD_COLUMNS = dict(zip(RECORD_FIELDS, (_COL_NODE, _COL_IP, _COL_PORT, _COL_AE)))

_EMPTY_TEXT = "No PACS added yet"


class PacsListDialog(QDialog):
    """Browse saved PACS records and edit them one row at a time."""

    status_changed = pyqtSignal(str, bool)   # text, is_error

    def __init__(self, store: PacsStore, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._store = store
        self._vm = PacsListViewModel()
        self._draft_edits: dict[str, QLineEdit] = {}
        self.setWindowTitle("PACS List")
        self.setModal(True)
        self.resize(720, 360)
        self._build_ui()
        self.refresh()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        self._table = QTableWidget(0, len(_HEADERS))
        self._table.setHorizontalHeaderLabels(_HEADERS)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setStretchLastSection(True)
        layout.addWidget(self._table)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._refresh_btn = QPushButton("Refresh")
        self._refresh_btn.clicked.connect(self.refresh)
        self._close_btn = QPushButton("Close")
        self._close_btn.clicked.connect(self.reject)
        btn_row.addWidget(self._refresh_btn)
        btn_row.addWidget(self._close_btn)
        layout.addLayout(btn_row)

    # ── Public API ─────────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Reload records from the store and redraw (drops any edit in progress)."""
        self._vm.refresh(self._store)
        self._render()

    def begin_edit(self, record_id: int) -> None:
        if self._vm.begin_edit(record_id) is not None:
            self._render()

    def save_edit(self) -> bool:
        row = self._vm.editing_row
        if row is None:
            return False
        for name, edit in self._draft_edits.items():
            row.set_draft(name, edit.text())
        ok = self._vm.save_edit(self._store)
        if self._vm.status is not None:
            self.status_changed.emit(self._vm.status.text, self._vm.status.is_error)
        if ok:
            self.refresh()
        return ok

    def cancel_edit(self) -> None:
        self._vm.cancel_edit()
        self._render()

    # ── Rendering ──────────────────────────────────────────────────────────

    def _render(self) -> None:
        self._table.clearSpans()
        self._draft_edits = {}

        if self._vm.is_empty:
            self._table.setRowCount(1)
            item = QTableWidgetItem(_EMPTY_TEXT)
            item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
            self._table.setItem(0, 0, item)
            self._table.setSpan(0, 0, 1, len(_HEADERS))
            return

        self._table.setRowCount(len(self._vm.rows))
        for index, row in enumerate(self._vm.rows):
            if row.is_editing:
                self._render_editing_row(index, row)
            else:
                self._render_display_row(index, row)

    def _render_display_row(self, index: int, row: PacsRowViewModel) -> None:
        for name, col in _FIELD_COLUMNS.items():
            self._table.removeCellWidget(index, col)
            self._table.setItem(index, col, QTableWidgetItem(getattr(row.record, name)))

        edit_btn = QPushButton("Edit")
        edit_btn.clicked.connect(lambda _=False, rid=row.record_id: self.begin_edit(rid))
        self._table.setCellWidget(index, _COL_ACTIONS, self._wrap(edit_btn))

    def _render_editing_row(self, index: int, row: PacsRowViewModel) -> None:
        for name, col in _FIELD_COLUMNS.items():
            edit = QLineEdit(row.draft[name])
            edit.returnPressed.connect(self.save_edit)
            self._draft_edits[name] = edit
            self._table.setItem(index, col, QTableWidgetItem(""))
            self._table.setCellWidget(index, col, edit)

        save_btn = QPushButton("Save")
        save_btn.clicked.connect(self.save_edit)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.cancel_edit)
        self._table.setCellWidget(index, _COL_ACTIONS, self._wrap(save_btn, cancel_btn))

    @staticmethod
    def _wrap(*buttons: QPushButton) -> QWidget:
        holder = QWidget()
        row = QHBoxLayout(holder)
        row.setContentsMargins(2, 2, 2, 2)
        for btn in buttons:
            row.addWidget(btn)
        row.addStretch()
        return holder
