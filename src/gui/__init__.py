"""
gui — PyQt6 front-end for the PACS web previewer.

Public API
──────────
main_window.MainWindow  — top-level application window
app.run_gui             — build the QApplication and show MainWindow
viewmodels              — pure-Python state containers (no Qt)
pages                   — control panel
dialogs                 — Add PACS form, PACS list with inline editing

Only viewmodels is imported here so that it stays usable without PyQt6.
"""

from src.gui import viewmodels

__all__ = ["viewmodels"]
