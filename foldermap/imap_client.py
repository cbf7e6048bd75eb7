"""IMAP client used to carry out queued folder moves."""

import contextlib
import logging

from imapclient import IMAPClient

from .config import ImapConfig

logger = logging.getLogger("foldermap")


class ImapMailbox:
    """Synchronous IMAP mailbox operations.

        with ImapMailbox(config.imap) as mailbox:
            mailbox.move_email(42, "INBOX", "Work")
    """

    def __init__(self, config: ImapConfig):
        self.config = config
        self._client: IMAPClient | None = None

    def __enter__(self) -> "ImapMailbox":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    def connect(self) -> None:
        """Connect and log in to the IMAP server."""
        self._client = IMAPClient(
            self.config.host,
            port=self.config.port,
            ssl=self.config.use_ssl,
        )
        self._client.login(self.config.username, self.config.password)
        logger.info(f"Connected to {self.config.host}")

    def disconnect(self) -> None:
        """Disconnect from the IMAP server."""
        if self._client:
            with contextlib.suppress(Exception):
                self._client.logout()
            self._client = None

    @property
    def client(self) -> IMAPClient:
        if self._client is None:
            raise RuntimeError("Not connected to IMAP server")
        return self._client

    def select_folder(self, folder: str) -> dict:
        """Select a folder for operations."""
        return self.client.select_folder(folder)

    def move_email(self, uid: int, from_folder: str, to_folder: str) -> None:
        """Move an email from one folder to another."""
        self.select_folder(from_folder)
        self.client.move([uid], to_folder)
