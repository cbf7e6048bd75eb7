"""Base protocol for the storage layer the classifier files messages through."""

from typing import Protocol, runtime_checkable

from foldermap.models import Folder, Message


@runtime_checkable
class FolderStorage(Protocol):
    """Protocol for folder lookup and move requests."""

    def get_folder_by_name(self, account: int, name: str) -> Folder | None:
        """Resolve a folder name within an account.

        Returns:
            The folder, or None if the account has no folder by that name
        """
        ...

    def queue_move(self, message: Message, folder: Folder) -> None:
        """Queue an asynchronous move of a message to a folder.

        The move is executed later; nothing is returned.
        """
        ...

    def hide_message(self, message: Message) -> None:
        """Hide a message from view while its move is pending."""
        ...
