"""SQLite database operations for foldermap."""

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .models import Folder, Message

MOVE = "move"


@dataclass
class Operation:
    """A queued folder operation awaiting execution."""
    id: int
    message_id: int
    name: str
    folder_id: int
    auto_classified: bool
    created: datetime | None = None


SCHEMA = """
CREATE TABLE IF NOT EXISTS folders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account INTEGER NOT NULL,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    auto_classify INTEGER DEFAULT 0,
    UNIQUE (account, name)
);

CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account INTEGER NOT NULL,
    folder_id INTEGER NOT NULL REFERENCES folders(id),
    uid INTEGER,
    file TEXT NOT NULL,
    subject TEXT,
    addresses TEXT,
    received TIMESTAMP,
    auto_classified INTEGER DEFAULT 0,
    ui_hide INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS operations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    message_id INTEGER NOT NULL REFERENCES messages(id),
    name TEXT NOT NULL,
    folder_id INTEGER NOT NULL REFERENCES folders(id),
    auto_classified INTEGER DEFAULT 0,
    created TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_messages_folder ON messages(folder_id);
CREATE INDEX IF NOT EXISTS idx_operations_message ON operations(message_id);
"""

_ADDRESS_FIELDS = ("from_addrs", "to_addrs", "cc_addrs", "bcc_addrs", "reply_addrs")


class Database:
    """SQLite database wrapper with connection management.

    Implements the FolderStorage protocol used by the classifier.
    Can be used as a context manager for automatic connection handling:

        with Database(path) as db:
            folder = db.get_folder_by_name(1, "Work")
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> "Database":
        """Connect to database and initialize schema."""
        self.connect()
        self.init_schema()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close database connection."""
        self.close()

    def connect(self) -> None:
        """Open database connection."""
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Get the active database connection.

        Raises:
            RuntimeError: If database is not connected
        """
        if self._conn is None:
            raise RuntimeError("Database not connected")
        return self._conn

    def init_schema(self) -> None:
        """Initialize database schema."""
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    # Folders

    def insert_folder(self, folder: Folder) -> Folder:
        """Insert a folder and return it with its assigned id."""
        cursor = self.conn.execute(
            "INSERT INTO folders (account, name, type, auto_classify) VALUES (?, ?, ?, ?)",
            (folder.account, folder.name, folder.type, 1 if folder.auto_classify else 0),
        )
        self.conn.commit()
        folder.id = cursor.lastrowid
        return folder

    def get_folder(self, folder_id: int) -> Folder | None:
        row = self.conn.execute(
            "SELECT * FROM folders WHERE id = ?", (folder_id,)
        ).fetchone()
        return self._row_to_folder(row) if row else None

    def get_folder_by_name(self, account: int, name: str) -> Folder | None:
        """Resolve a folder by name within an account."""
        row = self.conn.execute(
            "SELECT * FROM folders WHERE account = ? AND name = ?", (account, name)
        ).fetchone()
        return self._row_to_folder(row) if row else None

    def list_folders(self, account: int | None = None) -> list[Folder]:
        if account is None:
            rows = self.conn.execute("SELECT * FROM folders ORDER BY account, name").fetchall()
        else:
            rows = self.conn.execute(
                "SELECT * FROM folders WHERE account = ? ORDER BY name", (account,)
            ).fetchall()
        return [self._row_to_folder(row) for row in rows]

    def _row_to_folder(self, row: sqlite3.Row) -> Folder:
        return Folder(
            id=row["id"],
            account=row["account"],
            name=row["name"],
            type=row["type"],
            auto_classify=bool(row["auto_classify"]),
        )

    # Messages

    def insert_message(self, message: Message) -> Message:
        """Insert a message and return it with its assigned id."""
        addresses = {name: getattr(message, name) for name in _ADDRESS_FIELDS}
        cursor = self.conn.execute(
            """
            INSERT INTO messages
            (account, folder_id, uid, file, subject, addresses, received,
             auto_classified, ui_hide)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                message.account,
                message.folder_id,
                message.uid,
                message.file,
                message.subject,
                json.dumps(addresses),
                message.received.isoformat() if message.received else None,
                1 if message.auto_classified else 0,
                1 if message.ui_hide else 0,
            ),
        )
        self.conn.commit()
        message.id = cursor.lastrowid
        return message

    def get_message(self, message_id: int) -> Message | None:
        row = self.conn.execute(
            "SELECT * FROM messages WHERE id = ?", (message_id,)
        ).fetchone()
        return self._row_to_message(row) if row else None

    def get_messages_in_folder(self, folder_id: int) -> list[Message]:
        rows = self.conn.execute(
            "SELECT * FROM messages WHERE folder_id = ? ORDER BY id", (folder_id,)
        ).fetchall()
        return [self._row_to_message(row) for row in rows]

    def _row_to_message(self, row: sqlite3.Row) -> Message:
        addresses = json.loads(row["addresses"]) if row["addresses"] else {}
        received = row["received"]
        if isinstance(received, str):
            received = datetime.fromisoformat(received)
        return Message(
            id=row["id"],
            account=row["account"],
            folder_id=row["folder_id"],
            uid=row["uid"],
            file=row["file"],
            subject=row["subject"],
            received=received,
            auto_classified=bool(row["auto_classified"]),
            ui_hide=bool(row["ui_hide"]),
            **{name: addresses.get(name, []) for name in _ADDRESS_FIELDS},
        )

    def move_message(
        self,
        message_id: int,
        folder_id: int,
        uid: int | None = None,
        auto_classified: bool = False,
    ) -> None:
        """Record a message as residing in a new folder."""
        self.conn.execute(
            """
            UPDATE messages
            SET folder_id = ?, uid = ?, auto_classified = ?, ui_hide = 0
            WHERE id = ?
            """,
            (folder_id, uid, 1 if auto_classified else 0, message_id),
        )
        self.conn.commit()

    def hide_message(self, message: Message) -> None:
        """Hide a message from view while its move is pending."""
        self.conn.execute("UPDATE messages SET ui_hide = 1 WHERE id = ?", (message.id,))
        self.conn.commit()

    # Operations

    def queue_move(self, message: Message, folder: Folder) -> None:
        """Queue a move of a message into a folder chosen by the classifier."""
        self.conn.execute(
            """
            INSERT INTO operations (message_id, name, folder_id, auto_classified, created)
            VALUES (?, ?, ?, 1, ?)
            """,
            (message.id, MOVE, folder.id, datetime.now().isoformat()),
        )
        self.conn.commit()

    def get_pending_operations(self) -> list[Operation]:
        """Get queued operations in the order they were queued."""
        rows = self.conn.execute("SELECT * FROM operations ORDER BY id").fetchall()
        return [
            Operation(
                id=row["id"],
                message_id=row["message_id"],
                name=row["name"],
                folder_id=row["folder_id"],
                auto_classified=bool(row["auto_classified"]),
                created=datetime.fromisoformat(row["created"]) if row["created"] else None,
            )
            for row in rows
        ]

    def complete_operation(self, operation_id: int) -> None:
        self.conn.execute("DELETE FROM operations WHERE id = ?", (operation_id,))
        self.conn.commit()
