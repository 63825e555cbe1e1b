"""
cli — command-line interface for pacs-previewer.

Entry points
────────────
  python -m src            (via src/__main__.py)
  pacs-previewer           (via pyproject.toml [project.scripts])

Subcommands: gui | list | add | update
"""

from src.cli.main import build_parser, cmd_add, cmd_list, cmd_update, main

__all__ = ["build_parser", "cmd_add", "cmd_list", "cmd_update", "main"]
