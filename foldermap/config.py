"""Configuration management for foldermap."""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class ClassifierConfig:
    """Folder classifier settings.

    Classification is opt-in: nothing is learned or moved until
    ``enabled`` is set.
    """
    enabled: bool = False
    data_path: str = "classifier.json"
    min_matched_words: int = 10
    chance_threshold: float = 2.0


@dataclass
class DatabaseConfig:
    path: str = "foldermap.db"


@dataclass
class ImapConfig:
    """IMAP server used to execute queued moves.

    Credentials can be provided via environment variables:
    - FOLDERMAP_IMAP_USERNAME: IMAP username
    - FOLDERMAP_IMAP_PASSWORD: IMAP password
    """
    host: str = ""
    port: int = 993
    username: str = ""
    password: str = field(default="", repr=False)
    use_ssl: bool = True

    def __post_init__(self):
        """Load credentials from environment variables."""
        env_username = os.environ.get("FOLDERMAP_IMAP_USERNAME")
        env_password = os.environ.get("FOLDERMAP_IMAP_PASSWORD")

        if env_username:
            self.username = env_username
        if env_password:
            self.password = env_password


@dataclass
class Config:
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    imap: ImapConfig = field(default_factory=ImapConfig)


def load_config(path: str | Path) -> Config:
    """Load configuration from a TOML file."""
    path = Path(path)
    with path.open("rb") as f:
        data = tomllib.load(f)

    classifier_data = data.get("classifier", {})
    classifier_config = ClassifierConfig(
        enabled=classifier_data.get("enabled", False),
        data_path=classifier_data.get("data_path", "classifier.json"),
        min_matched_words=classifier_data.get("min_matched_words", 10),
        chance_threshold=float(classifier_data.get("chance_threshold", 2.0)),
    )

    db_data = data.get("database", {})
    db_config = DatabaseConfig(
        path=db_data.get("path", "foldermap.db"),
    )

    imap_data = data.get("imap", {})
    imap_config = ImapConfig(
        host=imap_data.get("host", ""),
        port=imap_data.get("port", 993),
        username=imap_data.get("username", ""),
        use_ssl=imap_data.get("use_ssl", True),
    )

    logger.debug(f"Loaded configuration from {path}")
    return Config(
        classifier=classifier_config,
        database=db_config,
        imap=imap_config,
    )
