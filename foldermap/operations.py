"""Execute folder moves queued by the classifier."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .database import MOVE, Database
from .imap_client import ImapMailbox

if TYPE_CHECKING:
    from .classifier import MessageClassifier

logger = logging.getLogger("foldermap")


def run_operations(
    db: Database,
    mailbox: ImapMailbox,
    classifier: MessageClassifier | None = None,
) -> int:
    """Run pending move operations in the order they were queued.

    A failed operation is logged and stays queued for the next run. With a
    classifier, each moved message is retracted from its old folder and
    learned in its new one.

    Returns:
        Number of operations executed
    """
    executed = 0
    for op in db.get_pending_operations():
        if op.name != MOVE:
            logger.warning(f"Unknown operation {op.name} id={op.id}")
            continue

        message = db.get_message(op.message_id)
        if message is None:
            logger.warning(f"Operation {op.id}: message {op.message_id} no longer exists")
            db.complete_operation(op.id)
            continue

        source = db.get_folder(message.folder_id)
        target = db.get_folder(op.folder_id)
        if source is None or target is None:
            logger.warning(f"Operation {op.id}: folder no longer exists")
            db.complete_operation(op.id)
            continue

        try:
            if message.uid is not None:
                mailbox.move_email(message.uid, source.name, target.name)
            else:
                logger.info(f"Message {message.id} has no UID, moving locally only")
        except Exception as e:
            logger.error(f"Failed to move message {message.id} to {target.name}: {e}")
            continue

        if classifier is not None:
            classifier.classify(message, source, target)

        # The UID is only valid in the source folder; it is refreshed on next sync
        db.move_message(message.id, target.id, uid=None, auto_classified=op.auto_classified)
        db.complete_operation(op.id)
        executed += 1
        logger.info(f"Moved message {message.id} from {source.name} to {target.name}")

        if classifier is not None:
            moved = db.get_message(message.id)
            if moved is not None:
                classifier.classify(moved, target)

    return executed
