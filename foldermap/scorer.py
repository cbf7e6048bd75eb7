"""Folder scoring and the confidence-margin decision rule.

For every class that shares words with a document the scorer collects the
number of matched words and their summed frequencies, then computes

    chance = total_frequency / class_messages / max_matched_words

A class is only chosen when enough words matched, at least two classes
could be scored, and the best chance is at least ``chance_threshold``
times the runner-up.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .store import FrequencyStore

logger = logging.getLogger("foldermap")

MIN_MATCHED_WORDS = 10
CHANCE_THRESHOLD = 2.0


@dataclass
class Stat:
    matched_words: int = 0
    total_frequency: int = 0


@dataclass
class Chance:
    clazz: str
    chance: float

    def __str__(self) -> str:
        return f"{self.clazz}={self.chance}"


@dataclass
class Decision:
    """Outcome of scoring one document.

    ``clazz`` is None when no decision was made; ``reason`` then says why.
    """
    clazz: str | None
    reason: str
    chances: list[Chance] = field(default_factory=list)
    max_matched_words: int = 0


def pick(chances: Sequence[Chance], threshold: float = CHANCE_THRESHOLD) -> str | None:
    """Apply the margin gate to scored classes.

    The sort is stable, so among equal chances the class encountered first
    ranks first.

    Returns:
        The best class if it beats the runner-up by ``threshold``, else None
    """
    if len(chances) < 2:
        return None

    ranked = sorted(chances, key=lambda c: c.chance, reverse=True)
    best, second = ranked[0], ranked[1]
    if second.chance <= 0:
        return best.clazz if best.chance > 0 else None
    if best.chance / second.chance >= threshold:
        return best.clazz
    return None


class Scorer:
    """Scores documents against the learned statistics of an account."""

    def __init__(
        self,
        store: FrequencyStore,
        min_matched_words: int = MIN_MATCHED_WORDS,
        chance_threshold: float = CHANCE_THRESHOLD,
        folder_exists: Callable[[int, str], bool] | None = None,
    ):
        self.store = store
        self.min_matched_words = min_matched_words
        self.chance_threshold = chance_threshold
        self.folder_exists = folder_exists

    def collect(self, account: int, words: Sequence[str]) -> tuple[dict[str, Stat], int]:
        """Gather per-class word statistics for a document.

        Returns:
            Tuple of (class -> Stat, max matched words over all classes)
        """
        class_stats: dict[str, Stat] = {}
        max_matched_words = 0
        for word in words:
            class_frequency = self.store.frequencies(account, word)
            if not class_frequency:
                continue
            for clazz, frequency in class_frequency.items():
                stat = class_stats.setdefault(clazz, Stat())
                stat.matched_words += 1
                stat.total_frequency += frequency
                max_matched_words = max(max_matched_words, stat.matched_words)
        return class_stats, max_matched_words

    def decide(
        self,
        account: int,
        words: Sequence[str],
        exclude_class: str | None = None,
    ) -> Decision:
        """Pick the folder a document most likely belongs to.

        Args:
            account: Account whose statistics are used
            words: Distinct words of the document
            exclude_class: Class the document already belongs to; choosing
                           it counts as no decision

        Returns:
            Decision with the chosen class, or None and the reason
        """
        class_stats, max_matched_words = self.collect(account, words)
        if max_matched_words == 0:
            return Decision(None, "no-match")
        if max_matched_words < self.min_matched_words:
            return Decision(None, "too-few-words", max_matched_words=max_matched_words)

        chances: list[Chance] = []
        for clazz, stat in class_stats.items():
            messages = self.store.message_count(account, clazz)
            if messages == 0:
                logger.warning(f"Classifier no messages class={account}:{clazz}")
                continue
            if self.folder_exists is not None and not self.folder_exists(account, clazz):
                logger.warning(f"Classifier no folder class={account}:{clazz}")
                continue

            chance = Chance(clazz, stat.total_frequency / messages / max_matched_words)
            logger.debug(
                f"Classifier {chance}"
                f" frequency={stat.total_frequency}/{messages}"
                f" matched={stat.matched_words}/{max_matched_words}"
            )
            chances.append(chance)

        if len(chances) < 2:
            return Decision(None, "single-candidate", chances, max_matched_words)

        clazz = pick(chances, self.chance_threshold)
        if clazz is None:
            return Decision(None, "below-margin", chances, max_matched_words)
        if clazz == exclude_class:
            return Decision(None, "same-class", chances, max_matched_words)
        return Decision(clazz, "decided", chances, max_matched_words)
