"""
ViewerBridge — narrow wrapper around the embedded QWebEngineView.

Design
──────
• The view is built by an injectable _view_factory so tests can pass a
  fake; production uses QWebEngineView, imported lazily so the rest of
  the app still starts when PyQt6-WebEngine is missing.
• The view is a free child of the main window positioned by geometry
  (not by a layout) so it can be collapsed to zero size while a dialog
  is open and restored afterwards.
• probe_and_activate() sequences its two page scripts with a single-shot
  timer (_scheduler, default QTimer.singleShot).

Raises
──────
ViewerNotAvailableError  — Qt WebEngine not importable
ViewerError              — the view could not be created
"""

import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import QTimer, QUrl

from src.exceptions import ViewerError, ViewerNotAvailableError
from src.viewer.models import Bounds, ProbeResult, collapsed_bounds, layout_bounds
from src.viewer.probe import (
    STYLE_RESET_SCRIPT,
    build_icon_click_script,
    build_row_click_script,
)

__all__ = ["ViewerBridge", "preload_web_engine"]

logger = logging.getLogger(__name__)

_ZOOM_STEP = 0.1
_ZOOM_MIN = 0.25
_ZOOM_MAX = 5.0


def preload_web_engine() -> bool:
    """
    Import Qt WebEngine ahead of QApplication construction.

    Qt requires QtWebEngineWidgets to be loaded before the application
    object exists.  Returns False when the module is not installed; the
    bridge then reports ViewerNotAvailableError from create_view().
    """
    try:
        import PyQt6.QtWebEngineWidgets  # noqa: F401
    except ImportError:
        logger.warning("ViewerBridge: PyQt6-WebEngine is not installed")
        return False
    return True


class ViewerBridge:
    """
    Forwards navigation, scripted clicks and geometry to the embedded view.

    Usage (production)::

        bridge = ViewerBridge(parent=main_window)
        view = bridge.create_view()
        bridge.relayout(width, height)
        bridge.load_resource("https://pacs.example/")
        bridge.probe_and_activate(lambda result: print(result))

    Usage (tests)::

        fake_view = MagicMock()
        bridge = ViewerBridge(_view_factory=lambda parent: fake_view,
                              _scheduler=lambda ms, fn: fn())
    """

    def __init__(
        self,
        parent: Any = None,
        left_panel_width: int = 400,
        probe_delay_ms: int = 250,
        _view_factory: Optional[Callable[[Any], Any]] = None,
        _scheduler: Optional[Callable[[int, Callable[[], None]], None]] = None,
        _devtools_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._parent = parent
        self._left_panel_width = left_panel_width
        self._probe_delay_ms = probe_delay_ms
        self._view_factory = _view_factory
        self._schedule = _scheduler or QTimer.singleShot
        self._devtools_factory = _devtools_factory
        self._devtools: Optional[Any] = None
        self._view: Optional[Any] = None
        self._content_size: Optional[tuple[int, int]] = None
        self._bounds: Optional[Bounds] = None
        self._suspended = False

    # ── View lifecycle ─────────────────────────────────────────────────────

    @property
    def view(self) -> Optional[Any]:
        return self._view

    @property
    def suspended(self) -> bool:
        return self._suspended

    def create_view(self) -> Any:
        """
        Build the embedded view (once) and return it.

        Raises:
            ViewerNotAvailableError: Qt WebEngine is not installed.
            ViewerError:             the factory failed for another reason.
        """
        if self._view is not None:
            return self._view
        factory = self._view_factory or self._default_view_factory
        try:
            view = factory(self._parent)
        except ViewerNotAvailableError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise ViewerError(f"Failed to create web view: {exc}") from exc
        view.loadFinished.connect(self._on_load_finished)
        self._view = view
        logger.debug("ViewerBridge: web view created")
        if self._content_size is not None:
            self._apply_bounds()
        return view

    def close(self) -> None:
        """Drop the view reference (the widget itself is owned by its parent)."""
        if self._devtools is not None:
            self._devtools.close()
            self._devtools = None
        self._view = None

    # ── Navigation ─────────────────────────────────────────────────────────

    def load_resource(self, url: str) -> bool:
        """
        Navigate the view to *url*.

        Returns False when there is no view or the navigation call raised;
        load errors reported later by the page itself are only logged.
        """
        if self._view is None:
            logger.warning("ViewerBridge: load_resource(%s) with no view", url)
            return False
        try:
            self._view.load(QUrl(url))
        except Exception as exc:  # noqa: BLE001
            logger.warning("ViewerBridge: failed to load %s — %s", url, exc)
            return False
        logger.info("ViewerBridge: loading %s", url)
        return True

    def _on_load_finished(self, ok: bool) -> None:
        if not ok:
            logger.warning("ViewerBridge: page failed to load")
            return
        try:
            self._view.page().runJavaScript(STYLE_RESET_SCRIPT)
        except Exception as exc:  # noqa: BLE001
            logger.debug("ViewerBridge: style reset failed — %s", exc)

    def reload(self) -> None:
        if self._view is not None:
            self._view.reload()

    def force_reload(self) -> None:
        """Reload bypassing the HTTP cache."""
        if self._view is None:
            return
        from PyQt6.QtWebEngineCore import QWebEnginePage
        self._view.page().triggerAction(QWebEnginePage.WebAction.ReloadAndBypassCache)

    def zoom_in(self) -> None:
        self._set_zoom(self._view.zoomFactor() + _ZOOM_STEP if self._view else 1.0)

    def zoom_out(self) -> None:
        self._set_zoom(self._view.zoomFactor() - _ZOOM_STEP if self._view else 1.0)

    def reset_zoom(self) -> None:
        self._set_zoom(1.0)

    def _set_zoom(self, factor: float) -> None:
        if self._view is None:
            return
        self._view.setZoomFactor(max(_ZOOM_MIN, min(_ZOOM_MAX, factor)))

    def toggle_dev_tools(self) -> bool:
        """
        Show or hide the inspector window for the embedded page.

        The inspector is a second top-level web view attached once via
        setDevToolsPage().  Returns True if it is visible afterwards.
        """
        if self._view is None:
            return False
        if self._devtools is None:
            factory = self._devtools_factory or self._default_devtools_factory
            try:
                devtools = factory()
            except Exception as exc:  # noqa: BLE001
                logger.warning("ViewerBridge: developer tools unavailable — %s", exc)
                return False
            self._view.page().setDevToolsPage(devtools.page())
            devtools.setWindowTitle("Developer Tools")
            self._devtools = devtools
        visible = not self._devtools.isVisible()
        self._devtools.setVisible(visible)
        return visible

    # ── Scripted interaction ───────────────────────────────────────────────

    def probe_and_activate(self, callback: Callable[[ProbeResult], None]) -> None:
        """
        Click the first study row, wait probe_delay_ms, then click the
        image-viewer icon.  *callback* receives exactly one ProbeResult.

        Never raises; every failure is delivered through *callback*.
        """
        if self._view is None:
            callback(ProbeResult(ok=False, error="Viewer is not available"))
            return

        page = self._view.page()

        def on_icon_result(value: Any) -> None:
            result = ProbeResult.from_script_value(value)
            logger.info("ViewerBridge: probe finished — %s", result)
            callback(result)

        def run_icon_step() -> None:
            try:
                page.runJavaScript(build_icon_click_script(), on_icon_result)
            except Exception as exc:  # noqa: BLE001
                logger.warning("ViewerBridge: icon script failed — %s", exc)
                callback(ProbeResult(ok=False, error=str(exc)))

        def on_row_result(value: Any) -> None:
            row = ProbeResult.from_script_value(value)
            if not row.ok:
                # The icon may still be clickable if a row was already selected
                logger.debug("ViewerBridge: row step — %s", row.error)
            self._schedule(self._probe_delay_ms, run_icon_step)

        try:
            page.runJavaScript(build_row_click_script(), on_row_result)
        except Exception as exc:  # noqa: BLE001
            logger.warning("ViewerBridge: row script failed — %s", exc)
            callback(ProbeResult(ok=False, error=str(exc)))

    # ── Geometry ───────────────────────────────────────────────────────────

    def bounds(self) -> Optional[Bounds]:
        """Current geometry applied to the view, or None before the first layout."""
        if self._view is None:
            return None
        return self._bounds

    def relayout(self, content_width: int, content_height: int) -> None:
        """Record the window content size and reposition the view."""
        self._content_size = (content_width, content_height)
        self._apply_bounds()

    def suspend(self) -> bool:
        """Collapse the view so overlay dialogs receive all input."""
        if self._view is None or self._content_size is None:
            return False
        self._suspended = True
        self._apply_bounds()
        return True

    def resume(self) -> bool:
        """Restore the view to its layout geometry."""
        if self._view is None or self._content_size is None:
            return False
        self._suspended = False
        self._apply_bounds()
        return True

    def _apply_bounds(self) -> None:
        if self._content_size is None:
            return
        width, height = self._content_size
        if self._suspended:
            self._bounds = collapsed_bounds(width)
        else:
            self._bounds = layout_bounds(width, height, self._left_panel_width)
        if self._view is not None:
            b = self._bounds
            self._view.setGeometry(b.x, b.y, b.width, b.height)

    @staticmethod
    def _default_view_factory(parent: Any) -> Any:
        """
        Build the real QWebEngineView.

        Imported lazily so the application still starts without
        PyQt6-WebEngine.  Raises ViewerNotAvailableError if it is missing.
        """
        try:
            from PyQt6.QtWebEngineWidgets import QWebEngineView
        except ImportError as exc:
            raise ViewerNotAvailableError(
                "Qt WebEngine is not installed. Install with: pip install PyQt6-WebEngine"
            ) from exc
        return QWebEngineView(parent)

    @staticmethod
    def _default_devtools_factory() -> Any:
        from PyQt6.QtWebEngineWidgets import QWebEngineView
        view = QWebEngineView()
        view.resize(900, 600)
        return view
