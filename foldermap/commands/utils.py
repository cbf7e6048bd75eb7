"""Utility commands - stats, clear, run queued operations, and config helpers."""

from __future__ import annotations

import argparse
import logging

from ..classifier import MessageClassifier
from ..config import Config
from ..database import Database
from ..imap_client import ImapMailbox
from ..operations import run_operations
from ..store import FrequencyStore

logger = logging.getLogger("foldermap")


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides to configuration."""
    if getattr(args, "db_path", None):
        config.database.path = args.db_path
    if getattr(args, "data_path", None):
        config.classifier.data_path = args.data_path
    if getattr(args, "enable", False):
        config.classifier.enabled = True
    return config


def stats_cmd(store: FrequencyStore, account: int | None = None) -> None:
    """Show learned document and word counts per class."""
    store.load()
    accounts = [account] if account is not None else store.accounts()
    if not accounts:
        print("Nothing learned yet.")
        return

    print(f"{'Account':>8} {'Class':<35} {'Messages':>9} {'Words':>8}")
    print("-" * 63)
    for acct in accounts:
        stats = store.stats(acct)
        for clazz in sorted(stats):
            messages, words = stats[clazz]
            print(f"{acct:>8} {clazz[:33]:<35} {messages:>9} {words:>8}")
        words_total = store.word_count(acct)
        print(f"{acct:>8} {'(distinct words)':<35} {'':>9} {words_total:>8}")


def clear_cmd(classifier: MessageClassifier) -> None:
    """Forget everything the classifier has learned."""
    if classifier.clear() and classifier.save():
        print("Cleared classifier data")
    else:
        print("Failed to clear classifier data")


def run_operations_cmd(config: Config, db: Database, classifier: MessageClassifier) -> int:
    """Execute queued moves against the IMAP server."""
    if not db.get_pending_operations():
        print("No pending operations.")
        return 0

    if not config.imap.host:
        logger.error("No IMAP host configured")
        return 0

    with ImapMailbox(config.imap) as mailbox:
        executed = run_operations(db, mailbox, classifier)
    classifier.save()

    print(f"Executed {executed} operations")
    return executed
