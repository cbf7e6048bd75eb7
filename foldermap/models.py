"""Folder and message records shared by the classifier and storage."""

from dataclasses import dataclass, field
from datetime import datetime

# Folder types
INBOX = "inbox"
OUTBOX = "outbox"
ARCHIVE = "archive"
DRAFTS = "drafts"
TRASH = "trash"
JUNK = "junk"
SENT = "sent"
SYSTEM = "system"
USER = "user"

FOLDER_TYPES = (INBOX, OUTBOX, ARCHIVE, DRAFTS, TRASH, JUNK, SENT, SYSTEM, USER)


@dataclass
class Folder:
    """A mail folder; its name is the class label within its account."""
    id: int | None
    account: int
    name: str
    type: str = USER
    auto_classify: bool = False  # Accept messages moved here by the classifier


@dataclass
class Message:
    """A stored message and the metadata the classifier reads from it."""
    id: int | None
    account: int
    folder_id: int
    file: str  # Path to the raw RFC822 message
    subject: str | None = None
    from_addrs: list[str] = field(default_factory=list)
    to_addrs: list[str] = field(default_factory=list)
    cc_addrs: list[str] = field(default_factory=list)
    bcc_addrs: list[str] = field(default_factory=list)
    reply_addrs: list[str] = field(default_factory=list)
    uid: int | None = None  # IMAP UID in its current folder
    received: datetime | None = None
    auto_classified: bool = False  # Last moved here by the classifier
    ui_hide: bool = False  # Hidden while a move is pending

    @property
    def addresses(self) -> list[str]:
        """All participant addresses: from, to, cc, bcc, reply-to."""
        return [
            *self.from_addrs,
            *self.to_addrs,
            *self.cc_addrs,
            *self.bcc_addrs,
            *self.reply_addrs,
        ]
