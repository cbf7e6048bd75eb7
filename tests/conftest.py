"""Shared test fixtures."""

import tempfile
from email.message import EmailMessage
from pathlib import Path

import pytest

from foldermap.config import ClassifierConfig
from foldermap.database import Database
from foldermap.models import INBOX, USER, Folder
from foldermap.store import FrequencyStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_db(temp_dir):
    """Create a test database."""
    db = Database(temp_dir / "test.db")
    db.connect()
    db.init_schema()
    yield db
    db.close()


@pytest.fixture
def store(temp_dir):
    """Create an empty frequency store backed by a temp file."""
    return FrequencyStore(temp_dir / "classifier.json")


@pytest.fixture
def classifier_config():
    return ClassifierConfig(enabled=True)


@pytest.fixture
def folders(test_db):
    """Register an inbox and two auto-classify user folders for account 1."""
    return {
        "INBOX": test_db.insert_folder(Folder(id=None, account=1, name="INBOX", type=INBOX)),
        "Work": test_db.insert_folder(
            Folder(id=None, account=1, name="Work", type=USER, auto_classify=True)
        ),
        "Personal": test_db.insert_folder(
            Folder(id=None, account=1, name="Personal", type=USER, auto_classify=True)
        ),
    }


@pytest.fixture
def write_message(temp_dir):
    """Write an RFC822 message file and return its path."""
    counter = iter(range(1, 10_000))

    def _write(
        body: str,
        subject: str = "Hello",
        from_addr: str = "sender@example.com",
        to_addr: str = "me@example.org",
    ) -> Path:
        msg = EmailMessage()
        msg["From"] = from_addr
        msg["To"] = to_addr
        msg["Subject"] = subject
        msg["Date"] = "Mon, 06 Jan 2025 10:00:00 +0000"
        msg.set_content(body)
        path = temp_dir / f"message-{next(counter)}.eml"
        path.write_bytes(msg.as_bytes())
        return path

    return _write


@pytest.fixture
def sample_config_toml(temp_dir, monkeypatch):
    """Create a sample TOML config file."""
    monkeypatch.setenv("FOLDERMAP_IMAP_PASSWORD", "secret")

    config_path = temp_dir / "config.toml"
    config_path.write_text('''
[classifier]
enabled = true
data_path = "data/classifier.json"
min_matched_words = 5
chance_threshold = 3

[database]
path = "test.db"

[imap]
host = "imap.test.com"
port = 993
username = "user@test.com"
use_ssl = true
''')
    return config_path
