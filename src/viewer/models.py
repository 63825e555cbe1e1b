"""Data models for the viewer module."""

from dataclasses import dataclass
from typing import Any, Optional

__all__ = ["Bounds", "ProbeResult", "layout_bounds", "collapsed_bounds"]


@dataclass(frozen=True)
class Bounds:
    """Viewer geometry in window content coordinates (pixels)."""
    x:      int
    y:      int
    width:  int
    height: int


@dataclass
class ProbeResult:
    """
    Result of ViewerBridge.probe_and_activate().

    ok     — True iff the image-viewer icon was found and clicked
    error  — message from the page script or the bridge when ok is False
             (None when the icon simply was not present)
    """
    ok:    bool
    error: Optional[str] = None

    @classmethod
    def from_script_value(cls, value: Any) -> "ProbeResult":
        """
        Convert a runJavaScript() callback value.

        The page scripts return ``{ok: bool, error: string|null}``; Qt hands
        that over as a dict.  Anything else (None when the script threw
        before returning, or a bare bool) is handled too.
        """
        if isinstance(value, dict):
            error = value.get("error")
            return cls(ok=bool(value.get("ok")), error=str(error) if error else None)
        if isinstance(value, bool):
            return cls(ok=value)
        return cls(ok=False, error="Page script returned no result")

    def __str__(self) -> str:
        if self.ok:
            return "ProbeResult(OK)"
        return f"ProbeResult(FAIL, error={self.error!r})"


def layout_bounds(content_width: int, content_height: int, left_panel_width: int) -> Bounds:
    """Area right of the control panel, filling the content height."""
    return Bounds(
        x=left_panel_width,
        y=0,
        width=max(0, content_width - left_panel_width),
        height=max(0, content_height),
    )


def collapsed_bounds(content_width: int) -> Bounds:
    """Zero-size rectangle at the right edge, so the view takes no input."""
    return Bounds(x=max(0, content_width), y=0, width=0, height=0)
