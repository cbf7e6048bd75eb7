"""Tests for CLI commands."""

import json
from unittest.mock import MagicMock, patch

import pytest

from foldermap.classifier import ClassifyStatus
from foldermap.cli import build_classifier, build_parser, main
from foldermap.commands import (
    add_folder_cmd,
    clear_cmd,
    ingest_cmd,
    list_folders_cmd,
    move_cmd,
    read_message_file,
    run_operations_cmd,
    stats_cmd,
)
from foldermap.config import ClassifierConfig, Config, DatabaseConfig, ImapConfig
from foldermap.store import StoreState


@pytest.fixture
def config(temp_dir):
    return Config(
        classifier=ClassifierConfig(enabled=True, data_path=str(temp_dir / "classifier.json")),
        database=DatabaseConfig(path=str(temp_dir / "test.db")),
        imap=ImapConfig(host="imap.example.com", username="user", password="pass"),
    )


@pytest.fixture
def classifier(config, test_db):
    return build_classifier(config, test_db)


class TestParser:
    def test_ingest_args(self):
        args = build_parser().parse_args(["ingest", "1", "Work", "a.eml", "b.eml", "--enable"])
        assert args.command == "ingest"
        assert args.account == 1
        assert args.folder == "Work"
        assert [p.name for p in args.files] == ["a.eml", "b.eml"]
        assert args.enable is True

    def test_folder_add_defaults(self):
        args = build_parser().parse_args(["folder-add", "1", "Work"])
        assert args.folder_type == "user"
        assert args.auto_classify is False

    def test_rejects_unknown_folder_type(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["folder-add", "1", "Work", "--type", "bogus"])


class TestFolderCommands:
    def test_add_and_list(self, test_db, capsys):
        folder = add_folder_cmd(test_db, 1, "Work", "user", auto_classify=True)
        assert folder is not None
        assert test_db.get_folder_by_name(1, "Work").auto_classify is True

        list_folders_cmd(test_db)
        out = capsys.readouterr().out
        assert "Work" in out
        assert "Total: 1 folders" in out

    def test_add_duplicate(self, test_db, folders):
        assert add_folder_cmd(test_db, 1, "Work", "user") is None

    def test_add_unknown_type(self, test_db):
        assert add_folder_cmd(test_db, 1, "Work", "bogus") is None

    def test_list_empty(self, test_db, capsys):
        list_folders_cmd(test_db)
        assert "No folders found." in capsys.readouterr().out


class TestReadMessageFile:
    def test_headers(self, write_message, folders):
        path = write_message("Body", subject="Invoice 42", from_addr="Billing <billing@vendor.example>")
        message = read_message_file(path, 1, folders["INBOX"])
        assert message.subject == "Invoice 42"
        assert message.from_addrs == ["Billing <billing@vendor.example>"]
        assert message.to_addrs == ["me@example.org"]
        assert message.folder_id == folders["INBOX"].id
        assert message.received.year == 2025


class TestIngestCmd:
    def test_ingest_learns_and_saves(self, classifier, test_db, folders, write_message, config):
        paths = [write_message("quarterly budget invoice"), write_message("vendor contract")]
        results = ingest_cmd(classifier, test_db, 1, "Work", paths)

        assert [r.status for r in results] == [ClassifyStatus.LEARNED, ClassifyStatus.LEARNED]
        assert len(test_db.get_messages_in_folder(folders["Work"].id)) == 2
        assert classifier.store.message_count(1, "Work") == 2
        assert classifier.store.state is StoreState.CLEAN

        document = json.loads(open(config.classifier.data_path).read())
        assert {"account": 1, "class": "Work", "count": 2} in document["messages"]

    def test_unknown_folder(self, classifier, test_db, write_message):
        assert ingest_cmd(classifier, test_db, 1, "Nowhere", [write_message("x")]) == []

    def test_missing_file_skipped(self, classifier, test_db, folders, temp_dir):
        assert ingest_cmd(classifier, test_db, 1, "Work", [temp_dir / "missing.eml"]) == []


class TestMoveCmd:
    def test_move_relearns(self, classifier, test_db, folders, write_message):
        [result] = ingest_cmd(classifier, test_db, 1, "INBOX", [write_message("quarterly invoice")])
        message = test_db.get_messages_in_folder(folders["INBOX"].id)[0]

        assert move_cmd(classifier, test_db, message.id, "Work") is True
        assert test_db.get_message(message.id).folder_id == folders["Work"].id
        assert classifier.store.message_count(1, "INBOX") == 0
        assert classifier.store.message_count(1, "Work") == 1

    def test_move_unknown_message(self, classifier, test_db, folders):
        assert move_cmd(classifier, test_db, 999, "Work") is False

    def test_move_unknown_folder(self, classifier, test_db, folders, write_message):
        ingest_cmd(classifier, test_db, 1, "INBOX", [write_message("hello there")])
        message = test_db.get_messages_in_folder(folders["INBOX"].id)[0]
        assert move_cmd(classifier, test_db, message.id, "Nowhere") is False


class TestStatsAndClear:
    def test_stats(self, classifier, test_db, folders, write_message, capsys):
        ingest_cmd(classifier, test_db, 1, "Work", [write_message("quarterly invoice")])
        capsys.readouterr()
        stats_cmd(classifier.store)
        out = capsys.readouterr().out
        assert "Work" in out
        assert "(distinct words)" in out

    def test_stats_empty(self, classifier, capsys):
        stats_cmd(classifier.store)
        assert "Nothing learned yet." in capsys.readouterr().out

    def test_clear(self, classifier, test_db, folders, write_message, config, capsys):
        ingest_cmd(classifier, test_db, 1, "Work", [write_message("quarterly invoice")])
        clear_cmd(classifier)
        assert "Cleared classifier data" in capsys.readouterr().out
        document = json.loads(open(config.classifier.data_path).read())
        assert document == {"messages": [], "words": []}


class TestBuildClassifier:
    def test_corrupt_data_discarded(self, config, test_db, temp_dir):
        (temp_dir / "classifier.json").write_text("{broken")
        classifier = build_classifier(config, test_db)
        assert classifier.store.class_messages == {}
        assert classifier.store.dirty

    def test_invalid_utf8_data_discarded(self, config, test_db, temp_dir):
        (temp_dir / "classifier.json").write_bytes(b"\xff\xfe garbage")
        classifier = build_classifier(config, test_db)
        assert classifier.store.class_messages == {}
        assert classifier.store.dirty

    def test_unreadable_data_path_starts_empty(self, config, test_db, temp_dir, capsys):
        (temp_dir / "classifier.json").mkdir()
        classifier = build_classifier(config, test_db)
        assert classifier.store.state is StoreState.CLEAN
        assert classifier.store.class_messages == {}
        stats_cmd(classifier.store)
        assert "Nothing learned yet." in capsys.readouterr().out


class TestRunOperationsCmd:
    def test_nothing_pending(self, config, test_db, classifier, capsys):
        assert run_operations_cmd(config, test_db, classifier) == 0
        assert "No pending operations." in capsys.readouterr().out

    def test_runs_with_mailbox(self, config, test_db, classifier, folders, write_message):
        ingest_cmd(classifier, test_db, 1, "INBOX", [write_message("hello there")])
        message = test_db.get_messages_in_folder(folders["INBOX"].id)[0]
        test_db.queue_move(message, folders["Work"])

        with patch("foldermap.commands.utils.ImapMailbox") as mock_class:
            mock_class.return_value.__enter__.return_value = MagicMock()
            assert run_operations_cmd(config, test_db, classifier) == 1

        assert test_db.get_message(message.id).folder_id == folders["Work"].id


class TestMain:
    def test_end_to_end(self, temp_dir, write_message, monkeypatch, capsys):
        config_path = temp_dir / "config.toml"
        config_path.write_text(f'''
[classifier]
enabled = true
data_path = "{temp_dir / 'classifier.json'}"

[database]
path = "{temp_dir / 'cli.db'}"
''')
        path = write_message("quarterly invoice")

        for argv in (
            ["folder-add", "1", "Work", "--auto-classify"],
            ["ingest", "1", "Work", str(path)],
        ):
            monkeypatch.setattr("sys.argv", ["foldermap", *argv, "-c", str(config_path)])
            try:
                main()
            except SystemExit as e:
                assert e.code == 0

        document = json.loads((temp_dir / "classifier.json").read_text())
        assert {"account": 1, "class": "Work", "count": 1} in document["messages"]

    def test_missing_config(self, temp_dir, monkeypatch):
        monkeypatch.setattr("sys.argv", ["foldermap", "stats", "-c", str(temp_dir / "nope.toml")])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
