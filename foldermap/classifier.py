"""Learn folders from filed messages and auto-file new ones.

Every message filed into a folder is learned as an example of that folder
(its class). Before it is learned, the message is scored against the other
folders of the account; when another folder wins clearly, a move there is
queued through the storage layer. Moving a message out of a folder retracts
it from that folder's statistics.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from email.utils import getaddresses
from enum import Enum
from pathlib import Path

from .config import ClassifierConfig
from .models import INBOX, JUNK, USER, Folder, Message
from .scorer import Scorer
from .storage import FolderStorage
from .store import FrequencyStore
from .text import extract_full_text
from .tokenizer import extract_words

logger = logging.getLogger("foldermap")

CLASSIFY_FOLDER_TYPES = (INBOX, JUNK, USER)


class ClassifyStatus(Enum):
    CLASSIFIED = "classified"  # learned, and a move was queued
    LEARNED = "learned"  # learned, no move
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ClassifyResult:
    """Outcome of classify() for one message."""
    status: ClassifyStatus
    reason: str = ""
    classified: str | None = None  # Suggested class, if any
    moved_to: str | None = None  # Folder a move was queued to
    error: BaseException | None = None

    @classmethod
    def skipped(cls, reason: str) -> ClassifyResult:
        return cls(ClassifyStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, error: BaseException) -> ClassifyResult:
        return cls(ClassifyStatus.FAILED, f"{type(error).__name__}: {error}", error=error)


class MessageClassifier:
    """Per-account folder classifier.

        store = FrequencyStore(config.classifier.data_path)
        classifier = MessageClassifier(config.classifier, store, db)
        result = classifier.classify(message, folder)
        classifier.save()
    """

    def __init__(
        self,
        config: ClassifierConfig,
        store: FrequencyStore,
        storage: FolderStorage,
        extract_text: Callable[[str | Path], str] = extract_full_text,
    ):
        self.config = config
        self.store = store
        self.storage = storage
        self.extract_text = extract_text
        self.scorer = Scorer(
            store,
            min_matched_words=config.min_matched_words,
            chance_threshold=config.chance_threshold,
            folder_exists=self._folder_exists,
        )

    def is_enabled(self) -> bool:
        return self.config.enabled

    @staticmethod
    def can_classify(folder_type: str) -> bool:
        """Only inbox, junk and user folders take part in classification."""
        return folder_type in CLASSIFY_FOLDER_TYPES

    def _folder_exists(self, account: int, name: str) -> bool:
        return self.storage.get_folder_by_name(account, name) is not None

    def build_text(self, message: Message) -> str:
        """Assemble addresses, their domains, subject and body into one text."""
        lines = []
        for _name, addr in getaddresses(message.addresses):
            if not addr:
                continue
            lines.append(addr)
            _, at, domain = addr.partition("@")
            if at and domain:
                lines.append(domain)

        if message.subject is not None:
            lines.append(message.subject)

        text = "\n".join(lines)
        if lines:
            text += "\n"
        return text + self.extract_text(message.file)

    def classify(
        self,
        message: Message,
        folder: Folder,
        target: Folder | None = None,
    ) -> ClassifyResult:
        """Learn from a message and possibly queue a move.

        Args:
            message: The message being filed or moved
            folder: Folder the message is in
            target: Destination when the message is being moved away from
                    ``folder``, None when it has just been filed there

        Returns:
            ClassifyResult; never raises
        """
        try:
            return self._classify(message, folder, target)
        except Exception as e:
            logger.exception(f"Classifier failed message={message.id}")
            return ClassifyResult.failed(e)

    def _classify(self, message: Message, folder: Folder, target: Folder | None) -> ClassifyResult:
        if not self.is_enabled():
            return ClassifyResult.skipped("disabled")
        if not self.can_classify(folder.type):
            return ClassifyResult.skipped(f"folder type {folder.type}")
        if target is not None and not self.can_classify(target.type):
            return ClassifyResult.skipped(f"target type {target.type}")
        if not Path(message.file).exists():
            return ClassifyResult.skipped("missing file")

        text = self.build_text(message)
        if not text:
            return ClassifyResult.skipped("empty text")

        self.store.load()

        added = target is None
        words = extract_words(text)
        logger.debug(f"Classifier words={', '.join(words)}")

        # Score first: the message must not vote for the folder it is in
        classified = None
        if added:
            decision = self.scorer.decide(folder.account, words, exclude_class=folder.name)
            classified = decision.clazz
            logger.info(f"Classifier classify={folder.name} classified={classified} ({decision.reason})")

        self.store.learn(folder.account, folder.name, words, added)

        logger.info(
            f"Classifier folder={folder.name}"
            f" message={message.id}"
            f"@{message.received}"
            f":{message.subject}"
            f" class={classified}"
            f" re={message.auto_classified}"
            f" messages={self.store.message_count(folder.account, folder.name)}"
        )

        if not added:
            return ClassifyResult(ClassifyStatus.LEARNED, "retracted")
        if classified is None:
            return ClassifyResult(ClassifyStatus.LEARNED, "no decision")
        if message.auto_classified:
            return ClassifyResult(ClassifyStatus.LEARNED, "auto classified", classified)
        if folder.type == JUNK:
            return ClassifyResult(ClassifyStatus.LEARNED, "junk folder", classified)

        dest = self.storage.get_folder_by_name(folder.account, classified)
        if dest is None or not dest.auto_classify:
            return ClassifyResult(ClassifyStatus.LEARNED, "no auto classify folder", classified)

        self.storage.queue_move(message, dest)
        self.storage.hide_message(message)
        message.ui_hide = True
        logger.info(f"Classifier move message={message.id} to={dest.name}")
        return ClassifyResult(ClassifyStatus.CLASSIFIED, "move queued", classified, dest.name)

    def load(self) -> None:
        """Load persisted statistics.

        Raises:
            PersistenceError: If the data file is malformed
            OSError: If the data file cannot be read
        """
        self.store.load()

    def save(self) -> bool:
        """Persist statistics if changed. Returns False if saving failed."""
        try:
            self.store.save()
            return True
        except Exception:
            logger.exception("Classifier save failed")
            return False

    def clear(self) -> bool:
        """Forget all learned statistics."""
        try:
            self.store.clear()
            return True
        except Exception:
            logger.exception("Classifier clear failed")
            return False
