#!/usr/bin/env python3
"""
kvstore Command Line Entry Point

Runs one operation against a backing file and saves it afterwards if the
operation changed anything.

Usage:
    python -m kvstore.cli set FR France          # Store a value
    python -m kvstore.cli append FR Francia      # Add a second value
    python -m kvstore.cli get FR                 # Print the value(s)
    python -m kvstore.cli closest FRA            # Nearest stored key
    python -m kvstore.cli swap --unique          # Swap keys and values
    python -m kvstore.cli --file other.kvs keys  # Use another backing file
    python -m kvstore.cli --debug show           # Enable debug logging

Environment Variables:
    KVSTORE_FILE        - Default backing file
    KVSTORE_DEBUG       - Enable debug mode (true/false)

Exit status:
    0 on success, 1 if a key was not found or a swap failed,
    2 on usage errors or unreadable/malformed backing files.
"""

import argparse
import json
import logging
import sys
from typing import Callable, Dict, List, Optional

from . import library_version
from .config.settings import settings
from .exceptions import KVStoreError
from .store.store import KVStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_ERROR = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kvstore",
        description="kvstore: JSON key/value store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--file",
        type=str,
        default=settings.DEFAULT_FILENAME,
        help="Backing file to operate on",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {library_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
            ("get", "Print the value stored for a key"),
            ("first", "Print the first value stored for a key"),
            ("all", "Print every value stored for a key, one per line"),
            ("remove", "Remove a key"),
            ("has", "Exit 0 if the key is stored, 1 otherwise"),
            ("depth", "Print the number of values stored for a key"),
            ("entry", "Print the entry as a JSON fragment"),
            ("tuple", "Print key and values as a JSON array"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("key")

    for name, help_text in (
            ("set", "Replace the value(s) of a key"),
            ("append", "Append value(s) to a key"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("key")
        sub.add_argument("values", nargs="+")

    keys = commands.add_parser("keys", help="List all keys")
    keys.add_argument("--sorted", action="store_true", help="Sort the keys")

    closest = commands.add_parser("closest", help="Print the stored key nearest to a query")
    closest.add_argument("query")
    closest.add_argument(
        "--penalize-substitution",
        action="store_true",
        help="Count a substitution as two edits",
    )

    swap = commands.add_parser("swap", help="Swap key and value of one entry or of all entries")
    swap.add_argument("key", nargs="?", default=None)
    swap.add_argument("--unique", action="store_true", help="Fail if a new key already exists")
    swap.add_argument(
        "--atomic",
        action="store_true",
        help="Roll back a whole-store swap if any entry fails",
    )

    commands.add_parser("clear", help="Remove all entries")
    commands.add_parser("drop", help="Delete the backing file")
    commands.add_parser("show", help="Print the whole store as JSON")
    commands.add_parser("info", help="Print store statistics")

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def _print_optional(value: Optional[str]) -> int:
    if value is None:
        return EXIT_MISSING
    print(value)
    return EXIT_OK


def _cmd_get(store: KVStore, args: argparse.Namespace) -> int:
    return _print_optional(store.get(args.key))


def _cmd_first(store: KVStore, args: argparse.Namespace) -> int:
    return _print_optional(store.get_first(args.key))


def _cmd_all(store: KVStore, args: argparse.Namespace) -> int:
    values = store.get_all(args.key)
    if values is None:
        return EXIT_MISSING
    for value in values:
        print(value)
    return EXIT_OK


def _cmd_set(store: KVStore, args: argparse.Namespace) -> int:
    store.set(args.key, args.values)
    return EXIT_OK


def _cmd_append(store: KVStore, args: argparse.Namespace) -> int:
    store.append(args.key, args.values)
    return EXIT_OK


def _cmd_remove(store: KVStore, args: argparse.Namespace) -> int:
    if not store.has_key(args.key):
        return EXIT_MISSING
    store.remove(args.key)
    return EXIT_OK


def _cmd_has(store: KVStore, args: argparse.Namespace) -> int:
    return EXIT_OK if store.has_key(args.key) else EXIT_MISSING


def _cmd_depth(store: KVStore, args: argparse.Namespace) -> int:
    print(store.depth(args.key))
    return EXIT_OK


def _cmd_entry(store: KVStore, args: argparse.Namespace) -> int:
    return _print_optional(store.entry(args.key))


def _cmd_tuple(store: KVStore, args: argparse.Namespace) -> int:
    entry = store.tuple(args.key)
    if entry is None:
        return EXIT_MISSING
    print(json.dumps(entry, ensure_ascii=False))
    return EXIT_OK


def _cmd_keys(store: KVStore, args: argparse.Namespace) -> int:
    for key in (store.sorted_keys() if args.sorted else store.keys()):
        print(key)
    return EXIT_OK


def _cmd_closest(store: KVStore, args: argparse.Namespace) -> int:
    return _print_optional(store.closest(args.query, args.penalize_substitution))


def _cmd_swap(store: KVStore, args: argparse.Namespace) -> int:
    if args.key is None:
        swapped = store.swap_all(unique=args.unique, atomic=args.atomic)
    else:
        swapped = store.swap(args.key, unique=args.unique)
    if not swapped:
        logger.error("Swap failed")
    return EXIT_OK if swapped else EXIT_MISSING


def _cmd_clear(store: KVStore, args: argparse.Namespace) -> int:
    store.clear()
    return EXIT_OK


def _cmd_drop(store: KVStore, args: argparse.Namespace) -> int:
    return EXIT_OK if store.drop() else EXIT_MISSING


def _cmd_show(store: KVStore, args: argparse.Namespace) -> int:
    print(store)
    return EXIT_OK


def _cmd_info(store: KVStore, args: argparse.Namespace) -> int:
    stats = store.get_stats()
    stats["version"] = library_version()
    for name, value in stats.items():
        print(f"{name}: {value}")
    return EXIT_OK


COMMANDS: Dict[str, Callable[[KVStore, argparse.Namespace], int]] = {
    "get": _cmd_get,
    "first": _cmd_first,
    "all": _cmd_all,
    "set": _cmd_set,
    "append": _cmd_append,
    "remove": _cmd_remove,
    "has": _cmd_has,
    "depth": _cmd_depth,
    "entry": _cmd_entry,
    "tuple": _cmd_tuple,
    "keys": _cmd_keys,
    "closest": _cmd_closest,
    "swap": _cmd_swap,
    "clear": _cmd_clear,
    "drop": _cmd_drop,
    "show": _cmd_show,
    "info": _cmd_info,
}

# Commands that never write the backing file back
READ_ONLY = {"get", "first", "all", "has", "depth", "entry", "tuple", "keys", "closest", "show", "info", "drop"}


def run(argv: Optional[List[str]] = None) -> int:
    """
    Execute one command and return its exit status.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    try:
        store = KVStore(args.file)
        status = COMMANDS[args.command](store, args)
        if status == EXIT_OK and args.command not in READ_ONLY and store.is_dirty:
            store.save()
    except KVStoreError as e:
        logger.error(f"{e}")
        return EXIT_ERROR

    return status


def main() -> None:
    """Main entry point for the command line tool."""
    sys.exit(run())


if __name__ == "__main__":
    main()
