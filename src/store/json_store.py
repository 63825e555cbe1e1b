"""
PacsStore — JSON-file-backed persistence for PACS endpoint records.

Usage::

    store = PacsStore(path="~/.pacs-previewer/pacs.json")

    result = store.save({"node": "A", "ip": "10.0.0.1", "port": "104", "ae": "AE1"})
    if result.ok:
        print(result.record.id)

    for rec in store.list_records():
        print(rec.summary())

    store.update({"id": result.record.id, "ae": "NEW"})

The whole list is held in memory and every successful mutation rewrites
the file from that list.  There is no locking: one application instance
is expected to own the file.
"""

import copy
import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from src.exceptions import RecordValidationError
from src.store.models import PacsRecord, StoreResult, clean_fields

__all__ = ["PacsStore"]

logger = logging.getLogger(__name__)


class PacsStore:
    """
    Ordered, file-backed list of PacsRecord objects.

    Read problems (missing file, bad JSON, wrong shape) are logged and
    treated as an empty list.  Write problems are reported to the caller
    as StoreResult(ok=False) and the in-memory change is undone.
    """

    def __init__(
        self,
        path: str | Path,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._path = Path(path).expanduser()
        self._clock = clock or time.time
        self._records: list[PacsRecord] = []
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    # ── Internal helpers ──────────────────────────────────────────────────

    def _read_file(self) -> list[PacsRecord]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("PacsStore: %s does not exist yet", self._path)
            return []
        except OSError as exc:
            logger.warning("PacsStore: cannot read %s — %s", self._path, exc)
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("PacsStore: %s is not valid JSON — %s", self._path, exc)
            return []

        if not isinstance(data, list):
            logger.warning("PacsStore: %s does not hold a JSON array", self._path)
            return []

        records: list[PacsRecord] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            rec = PacsRecord.from_dict(item)
            if rec is None:
                logger.debug("PacsStore: skipping entry without id: %r", item)
                continue
            records.append(rec)
        return records

    def _next_id(self) -> int:
        now_ms = int(round(self._clock() * 1000))
        highest = max((r.id for r in self._records), default=0)
        return max(now_ms, highest + 1)

    def _index_of(self, record_id: int) -> int:
        for idx, rec in enumerate(self._records):
            if rec.id == record_id:
                return idx
        return -1

    # ── Public API ────────────────────────────────────────────────────────

    def load(self) -> list[PacsRecord]:
        """(Re)read the backing file into memory and return the records."""
        self._records = self._read_file()
        logger.debug("PacsStore: loaded %d record(s) from %s", len(self._records), self._path)
        return self.list_records()

    def flush(self) -> bool:
        """
        Rewrite the backing file from the in-memory list.

        Returns:
            True on success, False if the file could not be written.
        """
        payload = [rec.to_dict() for rec in self._records]
        text = json.dumps(payload, indent=2) + os.linesep
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8", newline="")
        except OSError as exc:
            logger.error("PacsStore: failed to write %s — %s", self._path, exc)
            return False
        return True

    def list_records(self) -> list[PacsRecord]:
        """Return copies of all records in insertion order."""
        return [copy.copy(rec) for rec in self._records]

    def get(self, record_id: int) -> Optional[PacsRecord]:
        """Return a copy of the record with *record_id*, or None."""
        idx = self._index_of(record_id)
        return copy.copy(self._records[idx]) if idx >= 0 else None

    def save(self, fields: Mapping[str, Any]) -> StoreResult:
        """
        Append a new record built from *fields* (node, ip, port, ae).

        Returns:
            StoreResult(ok=True, record=<stored record with its new id>), or
            ok=False when a field is blank or the file cannot be written.
        """
        try:
            cleaned = clean_fields(fields, required=True)
        except RecordValidationError as exc:
            return StoreResult(ok=False, error=str(exc))

        record = PacsRecord(id=self._next_id(), **cleaned)
        self._records.append(record)
        if not self.flush():
            self._records.pop()
            return StoreResult(ok=False, error=f"Could not write {self._path}")

        logger.info("PacsStore: saved %s (id=%d)", record.node, record.id)
        return StoreResult(ok=True, record=copy.copy(record))

    def update(self, payload: Mapping[str, Any]) -> StoreResult:
        """
        Merge the fields present in *payload* over the record matching payload["id"].

        Fields absent from *payload* keep their stored values.  An unknown
        id leaves the store untouched and returns ok=False.
        """
        try:
            record_id = int(payload.get("id"))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return StoreResult(ok=False, error=f"Invalid record id: {payload.get('id')!r}")

        idx = self._index_of(record_id)
        if idx < 0:
            logger.info("PacsStore: update for unknown id=%d ignored", record_id)
            return StoreResult(ok=False, error=f"No PACS record with id={record_id}")

        try:
            changes = clean_fields(payload, required=False)
        except RecordValidationError as exc:
            return StoreResult(ok=False, error=str(exc))

        previous = self._records[idx]
        updated = copy.copy(previous)
        for name, value in changes.items():
            setattr(updated, name, value)

        self._records[idx] = updated
        if not self.flush():
            self._records[idx] = previous
            return StoreResult(ok=False, error=f"Could not write {self._path}")

        logger.info("PacsStore: updated id=%d (%s)", record_id, ", ".join(changes) or "no fields")
        return StoreResult(ok=True, record=copy.copy(updated))
