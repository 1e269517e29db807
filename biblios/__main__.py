"""Entry point for biblios."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from biblios import __version__
from biblios.app import BibliosApp
from biblios.backend import default_database, import_json_bible, open_provider
from biblios.logger import get_logger
from biblios.navigator import Navigator, Session

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="biblios",
        description="Terminal Bible reader",
    )
    parser.add_argument(
        "--db",
        type=Path,
        help="Bible SQLite database (default: the KJV database or a sample one)",
    )
    parser.add_argument(
        "--import-json",
        type=Path,
        metavar="FILE",
        help="Import a JSON Bible into the database and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the biblios TUI, or import a Bible and exit."""
    args = build_parser().parse_args(argv)

    if args.import_json is not None:
        db_path = args.db or default_database()
        try:
            count = import_json_bible(args.import_json, db_path)
        except (OSError, ValueError) as exc:
            logger.error(f"Import of {args.import_json} failed: {exc}")
            print(f"Import failed: {exc}", file=sys.stderr)
            return 1
        print(f"Imported {count} verses into {db_path}")
        return 0

    logger.info("Starting biblios")
    try:
        provider = open_provider(args.db)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        return 1
    navigator: Optional[Navigator] = None
    try:
        navigator = Navigator(provider, Session.load())
        navigator.start()
        app = BibliosApp(navigator, provider.load_translation())
        app.run()
    finally:
        if navigator is not None:
            navigator.shutdown()
        provider.close()
    logger.info("biblios exited")
    return 0


if __name__ == "__main__":
    sys.exit(main())
