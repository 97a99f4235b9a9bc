"""
Command-line entry point for the ExportVault cache.

Usage:
    exportvault status                  # Load the cache (rebuilding if stale) and show counts
    exportvault refresh                 # Rebuild the cache from the export file
    exportvault clear                   # Delete the cache file
    exportvault list credentials        # List cached items of one kind, secrets masked
"""

import sys
import logging
import argparse
import datetime
from typing import List, Optional

from . import config
from .errors import ExportVaultError
from .source_locator import resolve_cache_path, resolve_source_path
from .storage import CacheManager

LIST_KINDS = ("credentials", "cards", "notes")


def _mask_card_number(number: Optional[str]) -> str:
    if not number:
        return ""
    return config.SECRET_MASK_TEXT + number[-4:]


def _format_timestamp(millis: int) -> str:
    return datetime.datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _print_snapshot_summary(manager: CacheManager, snapshot) -> None:
    print(f"Export file:  {manager.source_path}")
    print(f"Cache file:   {manager.cache_path}")
    print(f"Last updated: {_format_timestamp(snapshot.last_updated)}")
    print(f"Credentials:  {len(snapshot.credentials)}")
    print(f"Cards:        {len(snapshot.cards)}")
    print(f"Notes:        {len(snapshot.notes)}")


def _list_items(manager: CacheManager, kind: str) -> None:
    if kind == "credentials":
        for item in manager.get_credentials():
            print("\t".join([item.name, item.username or "", item.url or "", config.SECRET_MASK_TEXT]))
    elif kind == "cards":
        for item in manager.get_cards():
            print("\t".join([item.name, item.cardholder_name or "", _mask_card_number(item.card_number),
                             item.expiry_date or ""]))
    else:
        for item in manager.get_notes():
            print("\t".join([item.name, item.folder or ""]))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exportvault", description=config.APP_DESCRIPTION)
    parser.add_argument("--version", action="version", version=f"{config.APP_NAME} {config.APP_VERSION}")
    parser.add_argument("--source", help="Path to the CSV export (default: auto-detect)")
    parser.add_argument("--cache", help=f"Path to the cache file (default: ~/{config.CONFIG_DIR_NAME}/{config.DEFAULT_CACHE_FILE})")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("status", help="Show cache contents, rebuilding if the export changed")
    subparsers.add_parser("refresh", help="Rebuild the cache from the export file")
    subparsers.add_parser("clear", help="Delete the cache file")
    list_parser = subparsers.add_parser("list", help="List cached items of one kind")
    list_parser.add_argument("kind", choices=LIST_KINDS)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=config.LOG_FORMAT,
    )

    manager = CacheManager(
        cache_path=resolve_cache_path(args.cache),
        source_path=resolve_source_path(args.source),
    )

    try:
        if args.command == "clear":
            manager.clear()
            print(f"Cleared {manager.cache_path}")
        elif args.command == "refresh":
            _print_snapshot_summary(manager, manager.refresh())
        elif args.command == "status":
            _print_snapshot_summary(manager, manager.get())
        elif args.command == "list":
            _list_items(manager, args.kind)
    except ExportVaultError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
