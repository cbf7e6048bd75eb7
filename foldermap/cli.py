"""CLI entry point for foldermap."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .classifier import MessageClassifier
from .codec import PersistenceError
from .commands import (
    add_folder_cmd,
    apply_cli_overrides,
    clear_cmd,
    ingest_cmd,
    list_folders_cmd,
    move_cmd,
    run_operations_cmd,
    stats_cmd,
)
from .config import Config, load_config
from .database import Database
from .models import FOLDER_TYPES, USER
from .store import FrequencyStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("foldermap")


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=Path("config.toml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Override database path",
    )
    parser.add_argument(
        "--data-path",
        type=str,
        help="Override classifier data file path",
    )
    parser.add_argument(
        "--enable",
        action="store_true",
        help="Enable classification regardless of configuration",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Learn mail folders and auto-file new messages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_common_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # folder-add - Register a folder
    folder_add_parser = subparsers.add_parser("folder-add", help="Register a folder")
    add_common_args(folder_add_parser)
    folder_add_parser.add_argument("account", type=int, help="Account id")
    folder_add_parser.add_argument("name", help="Folder name")
    folder_add_parser.add_argument(
        "--type",
        choices=FOLDER_TYPES,
        default=USER,
        dest="folder_type",
        help="Folder type (default: user)",
    )
    folder_add_parser.add_argument(
        "--auto-classify",
        action="store_true",
        help="Allow the classifier to move messages into this folder",
    )

    # folders - List folders
    folders_parser = subparsers.add_parser("folders", help="List folders with message counts")
    add_common_args(folders_parser)
    folders_parser.add_argument("--account", type=int, help="Only list this account")

    # ingest - File message files into a folder
    ingest_parser = subparsers.add_parser("ingest", help="File message files into a folder and classify them")
    add_common_args(ingest_parser)
    ingest_parser.add_argument("account", type=int, help="Account id")
    ingest_parser.add_argument("folder", help="Folder name")
    ingest_parser.add_argument("files", type=Path, nargs="+", help="RFC822 message files")

    # move - Refile a message
    move_parser = subparsers.add_parser("move", help="Move a message to another folder")
    add_common_args(move_parser)
    move_parser.add_argument("message_id", type=int, help="Message id")
    move_parser.add_argument("dest", help="Destination folder")

    # stats - Learned statistics
    stats_parser = subparsers.add_parser("stats", help="Show learned statistics per folder")
    add_common_args(stats_parser)
    stats_parser.add_argument("--account", type=int, help="Only show this account")

    # clear - Forget learned statistics
    clear_parser = subparsers.add_parser("clear", help="Forget all learned statistics")
    add_common_args(clear_parser)

    # run-operations - Execute queued moves
    run_parser = subparsers.add_parser("run-operations", help="Execute queued moves on the IMAP server")
    add_common_args(run_parser)

    return parser


def build_classifier(config: Config, db: Database) -> MessageClassifier:
    """Create the classifier with its store, loading persisted statistics."""
    store = FrequencyStore(config.classifier.data_path)
    classifier = MessageClassifier(config.classifier, store, db)
    try:
        classifier.load()
    except PersistenceError as e:
        logger.error(f"Discarding unreadable classifier data {config.classifier.data_path}: {e}")
        store.clear()
    except OSError as e:
        logger.error(f"Cannot read classifier data {config.classifier.data_path}: {e}")
        store.clear(dirty=False)
    return classifier


def main() -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    # Show help if no command specified
    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.config.exists():
        config = load_config(args.config)
    elif args.config == Path("config.toml"):
        config = Config()
    else:
        logger.error(f"Configuration file not found: {args.config}")
        sys.exit(1)
    config = apply_cli_overrides(config, args)

    with Database(config.database.path) as db:
        if args.command == "folder-add":
            folder = add_folder_cmd(db, args.account, args.name, args.folder_type, args.auto_classify)
            sys.exit(0 if folder else 1)
        elif args.command == "folders":
            list_folders_cmd(db, args.account)
            return

        classifier = build_classifier(config, db)
        if args.command == "ingest":
            if not classifier.is_enabled():
                logger.warning("Classification is disabled; messages are stored but not learned")
            ingest_cmd(classifier, db, args.account, args.folder, args.files)
        elif args.command == "move":
            if not move_cmd(classifier, db, args.message_id, args.dest):
                sys.exit(1)
        elif args.command == "stats":
            stats_cmd(classifier.store, args.account)
        elif args.command == "clear":
            clear_cmd(classifier)
        elif args.command == "run-operations":
            run_operations_cmd(config, db, classifier)


if __name__ == "__main__":
    main()
