"""
Unit tests for src/gui/ Qt widgets — requires PyQt6 + offscreen display.

Run with: QT_QPA_PLATFORM=offscreen pytest tests/unit/test_gui_widgets.py

The embedded web view is replaced by a MagicMock through ViewerBridge's
_view_factory, so Qt WebEngine is never started.

Coverage plan
─────────────
find_window_icon    → 2 tests
ControlPanel        → 2 tests
MainWindow          → 10 tests (menu, load flow, image viewer, dialogs)
PacsFormDialog      → 3 tests
PacsListDialog      → 5 tests
─────────────────────────────────
Total               = 22 tests
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Ensure offscreen rendering when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

PyQt6 = pytest.importorskip("PyQt6", reason="PyQt6 not installed")

from PyQt6.QtCore import QObject, pyqtSignal  # noqa: E402


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def app():
    """Single QApplication for the entire module (can only have one per process)."""
    from PyQt6.QtWidgets import QApplication
    _app = QApplication.instance() or QApplication(sys.argv)
    yield _app
    # Don't call app.quit() — other tests in the session may still need it.


@pytest.fixture
def store(tmp_path):
    from src.store.json_store import PacsStore
    return PacsStore(tmp_path / "pacs.json")


def _fields(node="Main", ip="10.0.0.1", port="104", ae="MAIN"):
    return {"node": node, "ip": ip, "port": port, "ae": ae}


def _make_window(qtbot, store, tmp_path, view=None, factory=None, **config):
    """MainWindow wired to a fake web view; returns (window, bridge, view)."""
    from src.config import AppConfig
    from src.gui.main_window import MainWindow
    from src.viewer.bridge import ViewerBridge

    view = view or MagicMock(name="QWebEngineView")
    bridge = ViewerBridge(
        _view_factory=factory or (lambda parent: view),
        _scheduler=lambda ms, fn: fn(),
    )
    win = MainWindow(config=AppConfig(data_dir=tmp_path, **config), store=store, bridge=bridge)
    qtbot.addWidget(win)
    bridge.relayout(1400, 900)
    return win, bridge, view


def _status(win):
    return win._panel._status_label.text()


class _SignalView(QObject):
    """Stand-in web view with a real loadFinished signal, so connections are exercised."""

    loadFinished = pyqtSignal(bool)

    def __init__(self) -> None:
        super().__init__()
        self.urls: list[str] = []
        self._page = MagicMock(name="QWebEnginePage")

    def load(self, url) -> None:
        self.urls.append(url.toString())

    def page(self):
        return self._page

    def setGeometry(self, *args) -> None:
        pass

    def show(self) -> None:
        pass

    def raise_(self) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# 1. find_window_icon
# ─────────────────────────────────────────────────────────────────────────────

class TestFindWindowIcon:

    def test_no_candidates_returns_none(self, app, tmp_path):
        from src.gui.main_window import find_window_icon
        assert find_window_icon([tmp_path]) is None

    def test_first_existing_candidate_is_used(self, app, tmp_path):
        from PyQt6.QtGui import QPixmap
        from src.gui.main_window import find_window_icon
        pixmap = QPixmap(16, 16)
        pixmap.fill()
        assert pixmap.save(str(tmp_path / "icon.png"))
        icon = find_window_icon([tmp_path / "missing", tmp_path])
        assert icon is not None and not icon.isNull()


# ─────────────────────────────────────────────────────────────────────────────
# 2. ControlPanel
# ─────────────────────────────────────────────────────────────────────────────

class TestControlPanel:

    def test_has_expected_buttons(self, app):
        from src.gui.pages.control_panel import ControlPanel
        from PyQt6.QtWidgets import QPushButton
        panel = ControlPanel()
        labels = [b.text() for b in panel.findChildren(QPushButton)]
        for label in ("Load Website", "Add PACS", "View PACS", "Open Image Viewer"):
            assert label in labels
        assert panel.maximumWidth() == 400

    def test_set_loading_toggles_button(self, app):
        from src.gui.pages.control_panel import ControlPanel
        panel = ControlPanel()
        panel.set_loading(True)
        assert panel._load_btn.isEnabled() is False
        assert panel._load_btn.text() == "Loading..."
        panel.set_loading(False)
        assert panel._load_btn.isEnabled() is True
        assert panel._load_btn.text() == "Load Website"


# ─────────────────────────────────────────────────────────────────────────────
# 3. MainWindow
# ─────────────────────────────────────────────────────────────────────────────

class TestMainWindow:

    def test_file_menu_has_viewer_actions(self, app, qtbot, store, tmp_path):
        win, _, _ = _make_window(qtbot, store, tmp_path)
        from PyQt6.QtWidgets import QMenu
        menu = win.menuBar().findChildren(QMenu)[0]
        assert menu.title() == "&File"
        texts = [a.text() for a in menu.actions() if not a.isSeparator()]
        assert texts == ["Reload", "Force Reload", "Actual Size", "Zoom In",
                         "Zoom Out", "Toggle Full Screen", "Toggle Developer Tools", "Exit"]

    def test_invalid_url_shows_error_without_navigating(self, app, qtbot, store, tmp_path):
        win, _, view = _make_window(qtbot, store, tmp_path)
        win._panel.set_url_text("not a url")
        win.load_url()
        assert _status(win) == "Please enter a valid URL"
        view.load.assert_not_called()

    def test_load_flow_reports_success(self, app, qtbot, store, tmp_path):
        win, _, view = _make_window(qtbot, store, tmp_path)
        win._panel.set_url_text("https://pacs.example/")
        win.load_url()
        assert view.load.called
        assert _status(win) == "Loading website..."
        assert win._panel._load_btn.isEnabled() is False

        win._on_page_load_finished(True)
        assert _status(win) == "Website loaded successfully"
        assert win._panel._load_btn.isEnabled() is True

    def test_load_finished_signal_completes_load(self, app, qtbot, store, tmp_path):
        from src.viewer.probe import STYLE_RESET_SCRIPT
        view = _SignalView()
        win, _, _ = _make_window(qtbot, store, tmp_path, view=view)
        win._panel.set_url_text("https://pacs.example/")
        win.load_url()
        assert view.urls == ["https://pacs.example/"]

        view.loadFinished.emit(True)

        assert _status(win) == "Website loaded successfully"
        assert win._panel._load_btn.isEnabled() is True
        view.page().runJavaScript.assert_called_once_with(STYLE_RESET_SCRIPT)

    def test_enter_while_loading_does_not_start_second_navigation(self, app, qtbot, store, tmp_path):
        view = _SignalView()
        win, _, _ = _make_window(qtbot, store, tmp_path, view=view)
        win._panel.set_url_text("https://pacs.example/")

        win._panel._url_edit.returnPressed.emit()
        win._panel._url_edit.returnPressed.emit()
        assert view.urls == ["https://pacs.example/"]
        assert _status(win) == "Loading website..."

        view.loadFinished.emit(True)
        assert _status(win) == "Website loaded successfully"

        # Once finished, Enter navigates again
        win._panel._url_edit.returnPressed.emit()
        assert len(view.urls) == 2

    def test_load_failure_reports_error(self, app, qtbot, store, tmp_path):
        win, _, _ = _make_window(qtbot, store, tmp_path)
        win._panel.set_url_text("https://pacs.example/")
        win.load_url()
        win._on_page_load_finished(False)
        assert _status(win).startswith("Error loading website:")

    def test_home_url_is_loaded_at_startup(self, app, qtbot, store, tmp_path):
        win, _, view = _make_window(qtbot, store, tmp_path, home_url="https://pacs.example/")
        assert win._panel.url_text == "https://pacs.example/"
        assert view.load.called

    def test_viewer_unavailable_is_reported(self, app, qtbot, store, tmp_path):
        from src.exceptions import ViewerNotAvailableError

        def missing(parent):
            raise ViewerNotAvailableError("Qt WebEngine is not installed")

        win, _, _ = _make_window(qtbot, store, tmp_path, factory=missing)
        assert "unavailable" in win._placeholder.text()
        win._panel.set_url_text("https://pacs.example/")
        win.load_url()
        assert _status(win).startswith("Error loading website:")
        assert win._panel._load_btn.isEnabled() is True

    @pytest.mark.parametrize("icon_value, expected", [
        ({"ok": True, "error": None}, "Triggered image viewer"),
        ({"ok": False, "error": None}, "Failed to trigger image viewer: icon not found"),
        ({"ok": False, "error": "boom"}, "Failed to trigger image viewer: boom"),
    ])
    def test_image_viewer_status(self, app, qtbot, store, tmp_path, icon_value, expected):
        win, _, view = _make_window(qtbot, store, tmp_path)
        values = [{"ok": True, "error": None}, icon_value]
        view.page.return_value.runJavaScript.side_effect = (
            lambda script, callback=None: callback(values.pop(0)) if callback else None
        )
        win._panel._eye_btn.click()
        assert _status(win) == expected

    def test_dialog_suspends_viewer_until_closed(self, app, qtbot, store, tmp_path):
        win, bridge, view = _make_window(qtbot, store, tmp_path)
        dialog = win.open_pacs_list()
        assert bridge.suspended is True
        collapsed = bridge.bounds()
        assert (collapsed.width, collapsed.height) == (0, 0)
        assert view.setGeometry.call_args[0] == (collapsed.x, 0, 0, 0)

        dialog.reject()
        assert bridge.suspended is False
        restored = bridge.bounds()
        assert restored.x == 400
        assert view.setGeometry.call_args[0] == (400, 0, restored.width, restored.height)


# ─────────────────────────────────────────────────────────────────────────────
# 4. PacsFormDialog
# ─────────────────────────────────────────────────────────────────────────────

class TestPacsFormDialog:

    def test_save_stores_record_and_reports_to_window(self, app, qtbot, store, tmp_path):
        win, bridge, _ = _make_window(qtbot, store, tmp_path)
        dialog = win.open_add_pacs()
        dialog.set_values(**_fields())
        dialog._save_btn.click()

        assert [r.node for r in store.list_records()] == ["Main"]
        assert _status(win) == "Saved PACS: Main (10.0.0.1:104) AE=MAIN"
        assert dialog.isVisible() is False
        assert bridge.suspended is False

    def test_blank_field_keeps_dialog_open(self, app, qtbot, store):
        from src.gui.dialogs.pacs_form import PacsFormDialog
        dialog = PacsFormDialog(store)
        qtbot.addWidget(dialog)
        seen = []
        dialog.status_changed.connect(lambda text, err: seen.append((text, err)))
        dialog.set_values(**_fields(ae=""))
        dialog._save_btn.click()
        assert seen == [("Please fill all PACS fields", True)]
        assert store.list_records() == []

    def test_show_existing_lists_records(self, app, qtbot, store):
        from src.gui.dialogs.pacs_form import PacsFormDialog
        store.save(_fields())
        dialog = PacsFormDialog(store)
        qtbot.addWidget(dialog)
        seen = []
        dialog.status_changed.connect(lambda text, err: seen.append(text))
        dialog._show_existing_btn.click()
        assert seen == ["Existing PACS: Main (10.0.0.1:104) AE=MAIN"]


# ─────────────────────────────────────────────────────────────────────────────
# 5. PacsListDialog
# ─────────────────────────────────────────────────────────────────────────────

class TestPacsListDialog:

    def _dialog(self, qtbot, store):
        from src.gui.dialogs.pacs_list import PacsListDialog
        dialog = PacsListDialog(store)
        qtbot.addWidget(dialog)
        return dialog

    def test_empty_store_shows_placeholder_row(self, app, qtbot, store):
        dialog = self._dialog(qtbot, store)
        assert dialog._table.rowCount() == 1
        assert dialog._table.item(0, 0).text() == "No PACS added yet"
        assert dialog._table.columnSpan(0, 0) == 5

    def test_rows_show_records_with_edit_button(self, app, qtbot, store):
        from PyQt6.QtWidgets import QPushButton
        store.save(_fields())
        store.save(_fields(node="Backup", ip="10.0.0.2"))
        dialog = self._dialog(qtbot, store)
        assert dialog._table.rowCount() == 2
        assert dialog._table.item(1, 0).text() == "Backup"
        buttons = dialog._table.cellWidget(0, 4).findChildren(QPushButton)
        assert [b.text() for b in buttons] == ["Edit"]

    def test_edit_and_save_updates_store(self, app, qtbot, store):
        from PyQt6.QtWidgets import QLineEdit
        rec = store.save(_fields()).record
        dialog = self._dialog(qtbot, store)
        seen = []
        dialog.status_changed.connect(lambda text, err: seen.append(text))

        dialog.begin_edit(rec.id)
        ae_edit = dialog._table.cellWidget(0, 3)
        assert isinstance(ae_edit, QLineEdit)
        ae_edit.setText("NEW_AE")

        assert dialog.save_edit() is True
        assert store.get(rec.id).ae == "NEW_AE"
        assert dialog._table.item(0, 3).text() == "NEW_AE"
        assert seen == ["PACS updated"]

    def test_non_numeric_port_row_saves_on_enter(self, app, qtbot, store):
        from PyQt6.QtCore import Qt
        rec = store.save(_fields(port="dicom-tls")).record
        dialog = self._dialog(qtbot, store)
        dialog.begin_edit(rec.id)

        port_edit = dialog._table.cellWidget(0, 2)
        assert port_edit.validator() is None
        dialog._table.cellWidget(0, 3).setText("NEW_AE")
        qtbot.keyClick(port_edit, Qt.Key.Key_Return)

        assert store.get(rec.id).ae == "NEW_AE"
        assert store.get(rec.id).port == "dicom-tls"

    def test_cancel_restores_display_without_saving(self, app, qtbot, store):
        rec = store.save(_fields()).record
        dialog = self._dialog(qtbot, store)
        dialog.begin_edit(rec.id)
        dialog._table.cellWidget(0, 0).setText("Changed")
        dialog.cancel_edit()
        assert dialog._table.cellWidget(0, 0) is None
        assert dialog._table.item(0, 0).text() == "Main"
        assert store.get(rec.id).node == "Main"
