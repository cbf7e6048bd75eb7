"""Command implementations for foldermap CLI."""

from .folders import add_folder_cmd, list_folders_cmd
from .ingest import ingest_cmd, move_cmd, read_message_file
from .utils import (
    apply_cli_overrides,
    clear_cmd,
    run_operations_cmd,
    stats_cmd,
)

__all__ = [
    # folders
    "add_folder_cmd",
    "list_folders_cmd",
    # ingest
    "ingest_cmd",
    "move_cmd",
    "read_message_file",
    # utils
    "apply_cli_overrides",
    "clear_cmd",
    "run_operations_cmd",
    "stats_cmd",
]
