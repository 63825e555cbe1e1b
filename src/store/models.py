"""Data models for the store module."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from src.exceptions import RecordValidationError

__all__ = ["RECORD_FIELDS", "PacsRecord", "StoreResult", "clean_fields"]

logger = logging.getLogger(__name__)

# Editable fields, in the order they are written to disk after "id"
RECORD_FIELDS = ("node", "ip", "port", "ae")


@dataclass
class PacsRecord:
    """
    One PACS endpoint entry.

    Fields
    ──────
    id    — integer assigned by PacsStore.save(); never reused
    node  — display name of the PACS node
    ip    — host address (not format-checked)
    port  — port as a string (not numerically validated)
    ae    — AE title, opaque to this application
    """
    id:   int
    node: str
    ip:   str
    port: str
    ae:   str

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the on-disk JSON object shape."""
        return {
            "id":   self.id,
            "node": self.node,
            "ip":   self.ip,
            "port": self.port,
            "ae":   self.ae,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["PacsRecord"]:
        """
        Build a record from a decoded JSON object.

        Returns None when *data* has no usable integer id; missing text
        fields become empty strings so a hand-edited file still loads.
        """
        raw_id = data.get("id")
        if isinstance(raw_id, bool):
            return None
        try:
            record_id = int(raw_id)
        except (TypeError, ValueError):
            return None
        return cls(
            id=record_id,
            node=_text(data.get("node")),
            ip=_text(data.get("ip")),
            port=_text(data.get("port")),
            ae=_text(data.get("ae")),
        )

    def summary(self) -> str:
        """One-line form used in status messages, e.g. ``A (10.0.0.1:104) AE=AE1``."""
        return f"{self.node} ({self.ip}:{self.port}) AE={self.ae}"


@dataclass
class StoreResult:
    """
    Outcome of a mutating PacsStore call.

    ok      — True iff the change was applied and written to disk
    record  — the stored record on success
    error   — human-readable reason when ok is False
    """
    ok:     bool
    record: Optional[PacsRecord] = None
    error:  Optional[str]        = None

    def __str__(self) -> str:
        if self.ok:
            return f"StoreResult(OK, id={self.record.id if self.record else None})"
        return f"StoreResult(FAIL, error={self.error!r})"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def clean_fields(fields: Mapping[str, Any], required: bool = True) -> dict[str, str]:
    """
    Normalise record fields to stripped strings.

    Args:
        fields:   Mapping that may contain any of RECORD_FIELDS; other keys
                  are ignored.
        required: If True every field in RECORD_FIELDS must be present.

    Raises:
        RecordValidationError: a required field is missing, or any provided
                               field is blank after stripping.
    """
    cleaned: dict[str, str] = {}
    for name in RECORD_FIELDS:
        if name not in fields:
            if required:
                raise RecordValidationError(f"Missing field: {name}")
            continue
        value = _text(fields[name])
        if not value:
            raise RecordValidationError(f"Field must not be empty: {name}")
        cleaned[name] = value
    return cleaned
