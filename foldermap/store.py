"""In-memory word frequency statistics with file persistence."""

import logging
import os
import threading
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from . import codec
from .codec import ClassMessages, WordClassFrequency

logger = logging.getLogger("foldermap")


class StoreState(Enum):
    """Persistence state of a FrequencyStore.

    UNLOADED: nothing read from disk yet, load() will read the file
    CLEAN: in-memory tables match the file
    DIRTY: in-memory tables have changes not yet saved
    """
    UNLOADED = "unloaded"
    CLEAN = "clean"
    DIRTY = "dirty"


class FrequencyStore:
    """Per-account class document counts and word/class frequencies.

    Statistics are updated incrementally as messages are filed into or
    moved out of folders; nothing is ever retrained in bulk.

        store = FrequencyStore(Path("classifier.json"))
        store.load()
        store.learn(1, "Work", ["invoice", "payment"], added=True)
        store.save()
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self.class_messages: ClassMessages = {}
        self.word_class_frequency: WordClassFrequency = {}
        self.state = StoreState.UNLOADED
        self._lock = threading.RLock()

    @property
    def dirty(self) -> bool:
        return self.state is StoreState.DIRTY

    def learn(self, account: int, clazz: str, words: Iterable[str], added: bool) -> None:
        """Add a document to a class, or retract it from the class.

        Adding then retracting the same words for the same class restores
        the tables exactly. Retracting something that was never added is a
        no-op for that word, and counts never drop below zero.

        Args:
            account: Account the document belongs to
            clazz: Folder name acting as the class label
            words: Distinct words of the document
            added: True when the document is filed into the class,
                   False when it is moved away from it
        """
        with self._lock:
            if added:
                self._add(account, clazz, words)
            else:
                self._retract(account, clazz, words)
            self.state = StoreState.DIRTY

    def _add(self, account: int, clazz: str, words: Iterable[str]) -> None:
        word_table = self.word_class_frequency.setdefault(account, {})
        for word in words:
            class_frequency = word_table.setdefault(word, {})
            class_frequency[clazz] = class_frequency.get(clazz, 0) + 1
        if not word_table:
            del self.word_class_frequency[account]

        classes = self.class_messages.setdefault(account, {})
        classes[clazz] = classes.get(clazz, 0) + 1

    def _retract(self, account: int, clazz: str, words: Iterable[str]) -> None:
        # Zero counts are removed rather than stored
        word_table = self.word_class_frequency.get(account)
        if word_table is not None:
            for word in words:
                class_frequency = word_table.get(word)
                if class_frequency is None or clazz not in class_frequency:
                    continue
                if class_frequency[clazz] > 1:
                    class_frequency[clazz] -= 1
                else:
                    del class_frequency[clazz]
                    if not class_frequency:
                        del word_table[word]
            if not word_table:
                del self.word_class_frequency[account]

        classes = self.class_messages.get(account)
        if classes is not None and classes.get(clazz, 0) > 0:
            if classes[clazz] > 1:
                classes[clazz] -= 1
            else:
                del classes[clazz]
                if not classes:
                    del self.class_messages[account]

    def message_count(self, account: int, clazz: str) -> int:
        """Number of documents currently attributed to a class."""
        with self._lock:
            return self.class_messages.get(account, {}).get(clazz, 0)

    def frequencies(self, account: int, word: str) -> dict[str, int] | None:
        """Per-class frequencies of a word, or None for an unseen word."""
        with self._lock:
            class_frequency = self.word_class_frequency.get(account, {}).get(word)
            return dict(class_frequency) if class_frequency is not None else None

    def accounts(self) -> list[int]:
        with self._lock:
            return sorted(set(self.class_messages) | set(self.word_class_frequency))

    def stats(self, account: int) -> dict[str, tuple[int, int]]:
        """Return class -> (document count, distinct words) for an account."""
        with self._lock:
            result = {
                clazz: (count, 0)
                for clazz, count in self.class_messages.get(account, {}).items()
            }
            for class_frequency in self.word_class_frequency.get(account, {}).values():
                for clazz in class_frequency:
                    count, words = result.get(clazz, (0, 0))
                    result[clazz] = (count, words + 1)
            return result

    def word_count(self, account: int) -> int:
        """Number of distinct words learned for an account."""
        with self._lock:
            return len(self.word_class_frequency.get(account, {}))

    def load(self) -> None:
        """Load persisted statistics once.

        Skipped when the store was already loaded or holds unsaved changes,
        so newer in-memory statistics are never replaced by the file.

        Raises:
            PersistenceError: If the file exists but cannot be parsed
            OSError: If the file cannot be read
        """
        with self._lock:
            if self.state is not StoreState.UNLOADED:
                return

            self.class_messages.clear()
            self.word_class_frequency.clear()

            if self.path is not None and self.path.exists():
                data = self.path.read_bytes()
                class_messages, word_class_frequency = codec.loads(data)
                self.class_messages.update(class_messages)
                self.word_class_frequency.update(word_class_frequency)

            self.state = StoreState.CLEAN
            logger.info("Classifier data loaded")

    def save(self) -> None:
        """Write statistics to disk if they changed since the last save.

        Raises:
            OSError: If the file cannot be written
        """
        with self._lock:
            if self.state is not StoreState.DIRTY:
                return

            if self.path is not None:
                text = codec.dumps(self.class_messages, self.word_class_frequency)
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.path.with_name(self.path.name + ".tmp")
                try:
                    tmp_path.write_text(text, encoding="utf-8")
                    os.replace(tmp_path, self.path)
                except OSError:
                    tmp_path.unlink(missing_ok=True)
                    raise

            self.state = StoreState.CLEAN
            logger.info("Classifier data saved")

    def clear(self, dirty: bool = True) -> None:
        """Forget all statistics.

        The empty state is saved on the next save() unless dirty is False,
        which leaves the file alone until something new is learned.
        """
        with self._lock:
            self.class_messages.clear()
            self.word_class_frequency.clear()
            self.state = StoreState.DIRTY if dirty else StoreState.CLEAN
            logger.info("Classifier data cleared")
