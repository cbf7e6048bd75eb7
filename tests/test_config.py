"""Tests for config module."""

import argparse

import pytest

from foldermap.commands.utils import apply_cli_overrides
from foldermap.config import (
    ClassifierConfig,
    Config,
    DatabaseConfig,
    ImapConfig,
    load_config,
)


class TestClassifierConfig:
    def test_defaults(self):
        config = ClassifierConfig()
        assert config.enabled is False
        assert config.data_path == "classifier.json"
        assert config.min_matched_words == 10
        assert config.chance_threshold == 2.0


class TestDatabaseConfig:
    def test_defaults(self):
        assert DatabaseConfig().path == "foldermap.db"


class TestImapConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FOLDERMAP_IMAP_USERNAME", raising=False)
        monkeypatch.delenv("FOLDERMAP_IMAP_PASSWORD", raising=False)
        config = ImapConfig(host="imap.example.com")
        assert config.port == 993
        assert config.use_ssl is True
        assert config.password == ""

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("FOLDERMAP_IMAP_USERNAME", "env-user")
        monkeypatch.setenv("FOLDERMAP_IMAP_PASSWORD", "env-pass")
        config = ImapConfig(host="imap.example.com", username="file-user")
        assert config.username == "env-user"
        assert config.password == "env-pass"

    def test_password_not_in_repr(self):
        assert "secret" not in repr(ImapConfig(host="h", password="secret"))


class TestLoadConfig:
    def test_load_config(self, sample_config_toml):
        config = load_config(sample_config_toml)

        assert config.classifier.enabled is True
        assert config.classifier.data_path == "data/classifier.json"
        assert config.classifier.min_matched_words == 5
        assert config.classifier.chance_threshold == 3.0

        assert config.database.path == "test.db"

        assert config.imap.host == "imap.test.com"
        assert config.imap.username == "user@test.com"
        assert config.imap.password == "secret"

    def test_load_empty_config(self, temp_dir):
        path = temp_dir / "empty.toml"
        path.write_text("")
        config = load_config(path)
        assert config.classifier == ClassifierConfig()
        assert config.database == DatabaseConfig()

    def test_load_config_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "nonexistent.toml")


class TestApplyCliOverrides:
    def test_overrides(self):
        args = argparse.Namespace(db_path="other.db", data_path="other.json", enable=True)
        config = apply_cli_overrides(Config(), args)
        assert config.database.path == "other.db"
        assert config.classifier.data_path == "other.json"
        assert config.classifier.enabled is True

    def test_no_overrides(self):
        args = argparse.Namespace(db_path=None, data_path=None, enable=False)
        config = apply_cli_overrides(Config(), args)
        assert config.database.path == "foldermap.db"
        assert config.classifier.enabled is False
