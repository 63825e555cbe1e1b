"""
store — JSON-file persistence layer for PACS endpoint records.

Public API
──────────
PacsRecord   — dataclass representing one endpoint entry
StoreResult  — ok/record/error outcome of save() and update()
PacsStore    — ordered record list (load, list_records, save, update, flush)
"""

from src.store.models import PacsRecord, StoreResult
from src.store.json_store import PacsStore

__all__ = ["PacsRecord", "StoreResult", "PacsStore"]
