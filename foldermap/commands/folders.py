"""Folder commands - register and list folders."""

from __future__ import annotations

import logging

from ..database import Database
from ..models import FOLDER_TYPES, Folder

logger = logging.getLogger("foldermap")


def add_folder_cmd(
    db: Database,
    account: int,
    name: str,
    folder_type: str,
    auto_classify: bool = False,
) -> Folder | None:
    """Register a folder so messages can be filed into it."""
    if folder_type not in FOLDER_TYPES:
        logger.error(f"Unknown folder type '{folder_type}', expected one of {', '.join(FOLDER_TYPES)}")
        return None

    if db.get_folder_by_name(account, name) is not None:
        logger.error(f"Folder '{name}' already exists in account {account}")
        return None

    folder = db.insert_folder(Folder(
        id=None,
        account=account,
        name=name,
        type=folder_type,
        auto_classify=auto_classify,
    ))
    print(f"Created folder '{name}' (id {folder.id}) in account {account}")
    return folder


def list_folders_cmd(db: Database, account: int | None = None) -> None:
    """List registered folders with message counts."""
    folders = db.list_folders(account)
    if not folders:
        print("No folders found.")
        return

    print(f"{'Account':>8} {'Folder':<30} {'Type':<8} {'Auto':<5} {'Messages':>8}")
    print("-" * 63)
    for folder in folders:
        count = len(db.get_messages_in_folder(folder.id))
        auto = "yes" if folder.auto_classify else "no"
        print(f"{folder.account:>8} {folder.name[:28]:<30} {folder.type:<8} {auto:<5} {count:>8}")

    print(f"\nTotal: {len(folders)} folders")
