"""
Project-wide custom exception hierarchy.
All modules raise subclasses of PreviewerBaseError — never bare Exception.
"""

__all__ = [
    "PreviewerBaseError",
    "ConfigError",
    "StoreError",
    "RecordValidationError",
    "ViewerError",
    "ViewerNotAvailableError",
    "InvalidUrlError",
]


class PreviewerBaseError(Exception):
    """Root exception for all pacs-previewer errors."""


# ── Config ────────────────────────────────────────────────────────────────────

class ConfigError(PreviewerBaseError):
    """Raised when an environment override cannot be parsed."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(PreviewerBaseError):
    """Base class for PACS record store errors."""


class RecordValidationError(StoreError):
    """Raised when record fields are missing or blank."""


# ── Viewer ────────────────────────────────────────────────────────────────────

class ViewerError(PreviewerBaseError):
    """Base class for embedded viewer errors."""


class ViewerNotAvailableError(ViewerError):
    """Raised when Qt WebEngine is not installed or cannot be created."""


class InvalidUrlError(ViewerError):
    """Raised when a user-entered address is empty or not a usable URL."""
