"""Ingest and move commands - file messages and let the classifier learn."""

from __future__ import annotations

import email
import logging
from email.utils import parsedate_to_datetime
from pathlib import Path

from ..classifier import ClassifyResult, MessageClassifier
from ..database import Database
from ..models import Folder, Message
from ..text import decode_mime_header

logger = logging.getLogger("foldermap")


def read_message_file(path: Path, account: int, folder: Folder) -> Message:
    """Build a Message record from the headers of a raw message file."""
    with path.open("rb") as f:
        msg = email.message_from_binary_file(f)

    def addresses(header: str) -> list[str]:
        return [decode_mime_header(value) for value in msg.get_all(header, [])]

    received = None
    date = msg.get("Date")
    if date:
        try:
            received = parsedate_to_datetime(date)
        except (TypeError, ValueError):
            logger.debug(f"Unparseable Date header in {path}: {date}")

    return Message(
        id=None,
        account=account,
        folder_id=folder.id,
        file=str(path.resolve()),
        subject=decode_mime_header(msg.get("Subject")) if msg.get("Subject") is not None else None,
        from_addrs=addresses("From"),
        to_addrs=addresses("To"),
        cc_addrs=addresses("Cc"),
        bcc_addrs=addresses("Bcc"),
        reply_addrs=addresses("Reply-To"),
        received=received,
    )


def ingest_cmd(
    classifier: MessageClassifier,
    db: Database,
    account: int,
    folder_name: str,
    files: list[Path],
) -> list[ClassifyResult]:
    """Store message files in a folder and classify each one."""
    folder = db.get_folder_by_name(account, folder_name)
    if folder is None:
        logger.error(f"Folder '{folder_name}' not found in account {account}")
        return []

    results = []
    for path in files:
        if not path.exists():
            logger.error(f"Message file not found: {path}")
            continue

        message = db.insert_message(read_message_file(path, account, folder))
        result = classifier.classify(message, folder)
        results.append(result)

        suggestion = f" -> {result.moved_to}" if result.moved_to else ""
        print(f"{message.id:>6} {path.name[:40]:<42} {result.status.value:<10} {result.reason}{suggestion}")

    classifier.save()
    return results


def move_cmd(
    classifier: MessageClassifier,
    db: Database,
    message_id: int,
    dest_name: str,
) -> bool:
    """Move a message to another folder in the same account.

    The message is retracted from its current folder and learned in the
    destination, as if the user had refiled it.
    """
    message = db.get_message(message_id)
    if message is None:
        logger.error(f"Message {message_id} not found")
        return False

    source = db.get_folder(message.folder_id)
    target = db.get_folder_by_name(message.account, dest_name)
    if target is None:
        logger.error(f"Folder '{dest_name}' not found in account {message.account}")
        return False
    if source is not None and source.id == target.id:
        logger.info(f"Message {message_id} is already in '{dest_name}'")
        return True

    if source is not None:
        classifier.classify(message, source, target)

    db.move_message(message.id, target.id, uid=None, auto_classified=False)
    moved = db.get_message(message.id)
    result = classifier.classify(moved, target)
    classifier.save()

    print(f"Moved message {message_id} to '{dest_name}' ({result.status.value}: {result.reason})")
    return True
