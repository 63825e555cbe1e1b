"""
MainWindow — top-level application window for pacs-previewer.

The window is split in two: a fixed-width ControlPanel on the left and the
embedded web viewer on the right.  The viewer is not part of a layout; it
is positioned by ViewerBridge.relayout() whenever the central widget is
resized, so it can be collapsed while a PACS dialog is open.

  ┌────────────┬──────────────────────────────────────┐
  │ Control    │                                      │
  │ panel      │        embedded web viewer           │
  │ (400 px)   │                                      │
  └────────────┴──────────────────────────────────────┘
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from PyQt6.QtCore import QEvent, QObject, Qt
from PyQt6.QtGui import QAction, QIcon, QKeySequence
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QWidget,
)

from src.config import AppConfig
from src.exceptions import ViewerError
from src.gui.dialogs.pacs_form import PacsFormDialog
from src.gui.dialogs.pacs_list import PacsListDialog
from src.gui.pages.control_panel import ControlPanel
from src.store.json_store import PacsStore
from src.viewer.bridge import ViewerBridge
from src.viewer.models import ProbeResult

__all__ = ["MainWindow", "find_window_icon"]

logger = logging.getLogger(__name__)

# Checked in order; the first file Qt can decode becomes the window icon
_ICON_CANDIDATES = (
    "favicon.png",
    "favicon.ico",
    "icon.ico",
    "icon.png",
)

_PLACEHOLDER_TEXT = "Website preview will appear here"


def find_window_icon(search_dirs: Iterable[Path]) -> Optional[QIcon]:
    """Return the first usable icon from the candidate names in *search_dirs*."""
    for directory in search_dirs:
        for name in _ICON_CANDIDATES:
            path = Path(directory).expanduser() / name
            if not path.is_file():
                continue
            icon = QIcon(str(path))
            if not icon.isNull():
                logger.debug("Using window icon %s", path)
                return icon
    return None


class MainWindow(QMainWindow):
    """Root window: control panel, embedded viewer, PACS dialogs and menu."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        store: Optional[PacsStore] = None,
        bridge: Optional[ViewerBridge] = None,
        parent: QWidget = None,
    ) -> None:
        super().__init__(parent)
        self._config = config or AppConfig()
        self._store = store or PacsStore(self._config.store_path)
        self.setWindowTitle("PACS Web Previewer")
        self.resize(self._config.window_width, self._config.window_height)

        self._build_ui()

        self._bridge = bridge or ViewerBridge(
            parent=self._central,
            left_panel_width=self._config.left_panel_width,
            probe_delay_ms=self._config.probe_delay_ms,
        )
        self._viewer_error: Optional[str] = None
        self._create_viewer()

        self._build_menu()
        self._connect_signals()

        icon = find_window_icon([Path(__file__).parent / "icons", self._config.data_dir])
        if icon is not None:
            self.setWindowIcon(icon)

        if self._config.home_url:
            self._panel.set_url_text(self._config.home_url)
            self.load_url()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        self._central = QWidget()
        self.setCentralWidget(self._central)

        layout = QHBoxLayout(self._central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._panel = ControlPanel(width=self._config.left_panel_width)
        layout.addWidget(self._panel)

        self._placeholder = QLabel(_PLACEHOLDER_TEXT)
        self._placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._placeholder.setStyleSheet("color: #999;")
        layout.addWidget(self._placeholder, 1)

        # Resize events of the central widget drive the viewer geometry
        self._central.installEventFilter(self)

    def _create_viewer(self) -> None:
        try:
            view = self._bridge.create_view()
        except ViewerError as exc:
            logger.warning("Embedded viewer unavailable: %s", exc)
            self._viewer_error = str(exc)
            self._placeholder.setText(f"Embedded viewer unavailable.\n{exc}")
            self._panel.update_status(str(exc), is_error=True)
            return
        view.loadFinished.connect(self._on_page_load_finished)
        view.show()
        view.raise_()

    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("&File")

        def add(text: str, slot, shortcut=None) -> QAction:
            action = QAction(text, self)
            if shortcut is not None:
                action.setShortcut(shortcut)
            action.triggered.connect(slot)
            menu.addAction(action)
            return action

        add("Reload", self._bridge.reload, QKeySequence.StandardKey.Refresh)
        add("Force Reload", self._bridge.force_reload, QKeySequence("Ctrl+Shift+R"))
        menu.addSeparator()
        add("Actual Size", self._bridge.reset_zoom, QKeySequence("Ctrl+0"))
        add("Zoom In", self._bridge.zoom_in, QKeySequence.StandardKey.ZoomIn)
        add("Zoom Out", self._bridge.zoom_out, QKeySequence.StandardKey.ZoomOut)
        menu.addSeparator()
        add("Toggle Full Screen", self.toggle_full_screen, QKeySequence("F11"))
        add("Toggle Developer Tools", self._bridge.toggle_dev_tools, QKeySequence("Ctrl+Shift+I"))
        menu.addSeparator()
        add("Exit", self.close, QKeySequence.StandardKey.Quit)

    def _connect_signals(self) -> None:
        self._panel._load_btn.clicked.connect(self.load_url)
        self._panel._url_edit.returnPressed.connect(self.load_url)
        self._panel._add_pacs_btn.clicked.connect(self.open_add_pacs)
        self._panel._view_pacs_btn.clicked.connect(self.open_pacs_list)
        self._panel._eye_btn.clicked.connect(self.trigger_image_viewer)

    # ── Qt overrides ───────────────────────────────────────────────────────

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._central and event.type() == QEvent.Type.Resize:
            size = self._central.size()
            self._bridge.relayout(size.width(), size.height())
        return super().eventFilter(watched, event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._bridge.close()
        super().closeEvent(event)

    # ── Viewer actions ─────────────────────────────────────────────────────

    def load_url(self) -> None:
        """Validate the address bar and navigate the viewer."""
        vm = self._panel._vm
        if vm.loading:
            # Enter in the address bar while the Load button is disabled
            logger.debug("load_url ignored: a page is still loading")
            return
        url = vm.begin_load(self._panel.url_text)
        self._panel.show_status(vm.status)
        if url is None:
            return

        self._panel.set_loading(True)
        self._placeholder.setText("")
        if not self._bridge.load_resource(url):
            vm.finish_load(False, self._viewer_error or "viewer is not available")
            self._finish_loading()
        # Otherwise _on_page_load_finished() completes the load

    def _on_page_load_finished(self, ok: bool) -> None:
        vm = self._panel._vm
        if not vm.loading:
            # Navigation started inside the page (links, redirects)
            if not ok:
                self._panel.update_status("Error loading website: page failed to load", is_error=True)
            return
        vm.finish_load(ok, None if ok else "page failed to load")
        self._finish_loading()

    def _finish_loading(self) -> None:
        vm = self._panel._vm
        self._panel.set_loading(False)
        self._panel.show_status(vm.status)
        if vm.status.is_error:
            self._placeholder.setText(_PLACEHOLDER_TEXT)

    def trigger_image_viewer(self) -> None:
        """Run the scripted row/icon click inside the loaded page."""
        self._bridge.probe_and_activate(self._on_probe_finished)

    def _on_probe_finished(self, result: ProbeResult) -> None:
        if result.ok:
            self._panel.update_status("Triggered image viewer")
        elif result.error:
            self._panel.update_status(f"Failed to trigger image viewer: {result.error}", is_error=True)
        else:
            self._panel.update_status("Failed to trigger image viewer: icon not found", is_error=True)

    def toggle_full_screen(self) -> None:
        if self.isFullScreen():
            self.showNormal()
        else:
            self.showFullScreen()

    # ── PACS dialogs ───────────────────────────────────────────────────────

    def open_add_pacs(self) -> PacsFormDialog:
        return self._open_dialog(PacsFormDialog(self._store, parent=self))

    def open_pacs_list(self) -> PacsListDialog:
        return self._open_dialog(PacsListDialog(self._store, parent=self))

    def _open_dialog(self, dialog: QDialog) -> QDialog:
        """Show *dialog* window-modally with the viewer suspended until it closes."""
        self._bridge.suspend()
        dialog.status_changed.connect(self._panel.update_status)
        dialog.finished.connect(self._on_dialog_finished)
        dialog.open()
        return dialog

    def _on_dialog_finished(self, _result: int) -> None:
        self._bridge.resume()
