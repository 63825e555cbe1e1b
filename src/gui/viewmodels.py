"""
GUI ViewModels — pure-Python observable state containers.

No Qt imports here; every class is testable without a display.
Qt widgets observe these objects and update themselves in response to state
changes.  (Signal emission is handled by the Qt layer, not here.)

Public API
──────────
StatusMessage        — text + error flag shown in the control panel
ShellViewModel       — address bar + load state + status line
PacsFormViewModel    — "Add PACS" form fields and submission
summarize_records    — one-line "Existing PACS: …" status text
RowState             — DISPLAY / EDITING
PacsRowViewModel     — one table row with its edit draft
PacsListViewModel    — table rows, single-row editing
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.exceptions import InvalidUrlError
from src.store.json_store import PacsStore
from src.store.models import RECORD_FIELDS, PacsRecord
from src.viewer.urls import normalize_url

__all__ = [
    "StatusMessage",
    "ShellViewModel",
    "PacsFormViewModel",
    "summarize_records",
    "RowState",
    "PacsRowViewModel",
    "PacsListViewModel",
]

logger = logging.getLogger(__name__)

INITIAL_STATUS = 'Enter a URL and click "Load Website" to preview'


# ── Status line ────────────────────────────────────────────────────────────────

@dataclass
class StatusMessage:
    """A status line; is_error switches the label to the error colour."""
    text:     str
    is_error: bool = False


# ── ShellViewModel ─────────────────────────────────────────────────────────────

class ShellViewModel:
    """
    State of the left control panel's address bar.

    Attributes
    ──────────
    url      — last URL that passed validation
    loading  — True between begin_load() and finish_load()
    status   — StatusMessage currently displayed
    """

    def __init__(self) -> None:
        self.url:     str           = ""
        self.loading: bool          = False
        self.status:  StatusMessage = StatusMessage(INITIAL_STATUS)

    def set_status(self, text: str, is_error: bool = False) -> None:
        self.status = StatusMessage(text, is_error)

    def begin_load(self, text: str) -> Optional[str]:
        """
        Validate *text* and enter the loading state.

        Returns the URL to navigate to, or None (with an error status) when
        the text is blank or not a URL.
        """
        try:
            url = normalize_url(text)
        except InvalidUrlError as exc:
            self.set_status(str(exc), is_error=True)
            return None
        self.url = url
        self.loading = True
        self.set_status("Loading website...")
        return url

    def finish_load(self, ok: bool, error: Optional[str] = None) -> None:
        """Leave the loading state and report the outcome."""
        self.loading = False
        if ok:
            self.set_status("Website loaded successfully")
        else:
            self.set_status(f"Error loading website: {error or 'unknown error'}", is_error=True)


# ── PacsFormViewModel ──────────────────────────────────────────────────────────

class PacsFormViewModel:
    """
    Backing state for the "Add PACS" dialog.

    Attributes
    ──────────
    fields — current text per field (node, ip, port, ae)
    status — outcome of the last collect()/submit(), or None
    """

    def __init__(self) -> None:
        self.fields: dict[str, str]          = {name: "" for name in RECORD_FIELDS}
        self.status: Optional[StatusMessage] = None

    def set_field(self, name: str, value: str) -> None:
        if name not in self.fields:
            raise KeyError(name)
        self.fields[name] = value

    def clear(self) -> None:
        self.fields = {name: "" for name in RECORD_FIELDS}
        self.status = None

    def collect(self) -> Optional[dict[str, str]]:
        """Return stripped field values, or None if any is blank."""
        values = {name: value.strip() for name, value in self.fields.items()}
        if not all(values.values()):
            self.status = StatusMessage("Please fill all PACS fields", is_error=True)
            return None
        return values

    def submit(self, store: PacsStore) -> Optional[PacsRecord]:
        """Save the form through *store*; returns the stored record on success."""
        values = self.collect()
        if values is None:
            return None
        result = store.save(values)
        if not result.ok or result.record is None:
            logger.warning("PACS save failed: %s", result.error)
            self.status = StatusMessage("Failed to save PACS", is_error=True)
            return None
        self.status = StatusMessage(f"Saved PACS: {result.record.summary()}")
        return result.record


def summarize_records(records: list[PacsRecord]) -> str:
    """Status text listing every record on one line."""
    if not records:
        return "Existing PACS: (none yet)"
    return "Existing PACS: " + " | ".join(r.summary() for r in records)


# ── Table rows ─────────────────────────────────────────────────────────────────

class RowState(str, Enum):
    DISPLAY = "display"
    EDITING = "editing"


class PacsRowViewModel:
    """
    One row of the PACS table.

    DISPLAY ──begin_edit()──▶ EDITING
    EDITING ──cancel()──────▶ DISPLAY   (draft discarded, store untouched)
    EDITING ──commit() ok───▶ DISPLAY   (record replaced by stored value)
    EDITING ──commit() fail─▶ EDITING   (draft kept, status set)
    """

    def __init__(self, record: PacsRecord) -> None:
        self.record: PacsRecord               = record
        self.state:  RowState                 = RowState.DISPLAY
        self.draft:  dict[str, str]           = {}
        self.status: Optional[StatusMessage]  = None

    @property
    def record_id(self) -> int:
        return self.record.id

    @property
    def is_editing(self) -> bool:
        return self.state is RowState.EDITING

    def begin_edit(self) -> None:
        """Copy the record into the draft and switch to EDITING."""
        self.draft = {name: getattr(self.record, name) for name in RECORD_FIELDS}
        self.state = RowState.EDITING
        self.status = None

    def set_draft(self, name: str, value: str) -> None:
        if not self.is_editing:
            raise RuntimeError("Row is not being edited")
        if name not in self.draft:
            raise KeyError(name)
        self.draft[name] = value

    def cancel(self) -> None:
        """Discard the draft without touching the store."""
        self.draft = {}
        self.state = RowState.DISPLAY

    def commit(self, store: PacsStore) -> bool:
        """
        Send the draft to store.update().

        Returns True and returns to DISPLAY on success; otherwise stays in
        EDITING with an error status.
        """
        if not self.is_editing:
            return False
        payload = {name: value.strip() for name, value in self.draft.items()}
        if not all(payload.values()):
            self.status = StatusMessage("Please fill all fields to save PACS", is_error=True)
            return False
        payload["id"] = self.record.id
        result = store.update(payload)
        if not result.ok or result.record is None:
            logger.warning("PACS update failed for id=%s: %s", self.record.id, result.error)
            self.status = StatusMessage("Failed to update PACS", is_error=True)
            return False
        self.record = result.record
        self.cancel()
        self.status = StatusMessage("PACS updated")
        return True


# ── PacsListViewModel ──────────────────────────────────────────────────────────

class PacsListViewModel:
    """
    Rows of the "View PACS" table.

    At most one row is in EDITING state; starting an edit on another row
    cancels the current one.
    """

    def __init__(self) -> None:
        self.rows:   list[PacsRowViewModel]   = []
        self.status: Optional[StatusMessage]  = None

    def load(self, records: list[PacsRecord]) -> None:
        """Replace all rows (any edit in progress is dropped)."""
        self.rows = [PacsRowViewModel(r) for r in records]

    def refresh(self, store: PacsStore) -> None:
        self.load(store.list_records())

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def editing_row(self) -> Optional[PacsRowViewModel]:
        return next((r for r in self.rows if r.is_editing), None)

    def row_for(self, record_id: int) -> Optional[PacsRowViewModel]:
        return next((r for r in self.rows if r.record_id == record_id), None)

    def begin_edit(self, record_id: int) -> Optional[PacsRowViewModel]:
        """Put the row for *record_id* into EDITING, cancelling any other edit."""
        row = self.row_for(record_id)
        if row is None:
            return None
        current = self.editing_row
        if current is not None and current is not row:
            current.cancel()
        row.begin_edit()
        return row

    def cancel_edit(self) -> None:
        row = self.editing_row
        if row is not None:
            row.cancel()

    def save_edit(self, store: PacsStore) -> bool:
        """Commit the editing row; the row's status is mirrored onto the list."""
        row = self.editing_row
        if row is None:
            return False
        ok = row.commit(store)
        self.status = row.status
        return ok
