"""
CLI entry point for pacs-previewer.

Usage
─────
  # Open the previewer window (default when no subcommand is given)
  python -m src gui --url "https://pacs.example/"

  # List saved PACS endpoints
  python -m src list

  # Add an endpoint
  python -m src add --node Main --ip 10.0.0.1 --port 104 --ae MAIN_AE

  # Change fields of an existing endpoint
  python -m src update --id 1700000000000 --ae NEW_AE

Subcommands are implemented as standalone functions (cmd_list, cmd_add,
cmd_update) so they can be unit-tested without invoking argparse.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

from src.config import AppConfig
from src.exceptions import ConfigError, StoreError
from src.store.json_store import PacsStore
from src.store.models import RECORD_FIELDS, PacsRecord

__all__ = ["build_parser", "cmd_list", "cmd_add", "cmd_update", "main"]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: gui | list | add | update
    """
    parser = argparse.ArgumentParser(
        prog="pacs-previewer",
        description="Web page previewer with a local PACS endpoint list",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        dest="data_dir",
        metavar="PATH",
        help="Directory holding pacs.json (default: ~/.pacs-previewer "
             "or $PACS_PREVIEWER_DATA_DIR)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── gui ───────────────────────────────────────────────────────────────
    gui = sub.add_parser("gui", help="Open the previewer window")
    gui.add_argument(
        "--url",
        default=None,
        metavar="URL",
        help="Page to load at startup (default: $PACS_PREVIEWER_URL)",
    )

    # ── list ──────────────────────────────────────────────────────────────
    sub.add_parser("list", help="List saved PACS endpoints")

    # ── add ───────────────────────────────────────────────────────────────
    add = sub.add_parser("add", help="Save a new PACS endpoint")
    for name in RECORD_FIELDS:
        add.add_argument(f"--{name}", required=True, metavar=name.upper())

    # ── update ────────────────────────────────────────────────────────────
    upd = sub.add_parser("update", help="Change fields of a saved PACS endpoint")
    upd.add_argument(
        "--id",
        required=True,
        type=int,
        metavar="ID",
        help="Record id as shown by 'list'",
    )
    for name in RECORD_FIELDS:
        upd.add_argument(f"--{name}", default=None, metavar=name.upper())

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def _format_record(rec: PacsRecord) -> str:
    return f"[{rec.id}]  {rec.node:<20} {rec.ip + ':' + rec.port:<24} AE={rec.ae}"


def _resolve_config(ns: argparse.Namespace) -> AppConfig:
    """Environment defaults with command-line flags applied on top."""
    config = AppConfig.from_env()
    overrides: dict = {}
    if ns.data_dir:
        overrides["data_dir"] = Path(ns.data_dir)
    if ns.debug:
        overrides["log_level"] = "DEBUG"
    if getattr(ns, "url", None):
        overrides["home_url"] = ns.url
    return dataclasses.replace(config, **overrides) if overrides else config


# ── Command implementations ───────────────────────────────────────────────────


def cmd_list(store: PacsStore) -> None:
    """Print saved records to stdout in insertion order."""
    records = store.list_records()
    if not records:
        print("0 PACS endpoints saved.")
        return
    for rec in records:
        print(_format_record(rec))


def cmd_add(store: PacsStore, node: str, ip: str, port: str, ae: str) -> PacsRecord:
    """
    Save a new record.

    Raises:
        StoreError: a field is blank or the file could not be written.
    """
    result = store.save({"node": node, "ip": ip, "port": port, "ae": ae})
    if not result.ok or result.record is None:
        raise StoreError(result.error or "save failed")
    print(f"Saved → {_format_record(result.record)}")
    return result.record


def cmd_update(store: PacsStore, record_id: int, **fields: Optional[str]) -> PacsRecord:
    """
    Update the given fields of record *record_id*; None values are left out.

    Raises:
        StoreError: unknown id, blank field, or the file could not be written.
    """
    payload = {name: value for name, value in fields.items() if value is not None}
    payload["id"] = record_id
    result = store.update(payload)
    if not result.ok or result.record is None:
        raise StoreError(result.error or "update failed")
    print(f"Updated → {_format_record(result.record)}")
    return result.record


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    try:
        config = _resolve_config(ns)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="[%(levelname)s] %(message)s",
    )

    store = PacsStore(config.store_path)

    if ns.subcommand is None or ns.subcommand == "gui":
        from src.gui.app import run_gui
        return run_gui(config, store=store)

    try:
        if ns.subcommand == "list":
            cmd_list(store=store)
        elif ns.subcommand == "add":
            cmd_add(store=store, node=ns.node, ip=ns.ip, port=ns.port, ae=ns.ae)
        elif ns.subcommand == "update":
            cmd_update(
                store=store,
                record_id=ns.id,
                node=ns.node,
                ip=ns.ip,
                port=ns.port,
                ae=ns.ae,
            )
    except StoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
