"""
Record store interface shared by the relational and document backends.

Handlers only talk to this interface, so both backends expose the same REST
behavior.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from ..schemas import StoredItem


def new_item_id() -> str:
    """Generate a fresh item identifier."""
    return str(uuid.uuid4())


def require_name(name: Optional[str]) -> str:
    """
    Validate the mandatory item name.

    Raises:
        ValueError: if the name is missing or empty
    """
    if not name:
        raise ValueError("inventory_name is required")
    return name


class RecordStore(ABC):
    """Holds inventory records keyed by id."""

    @abstractmethod
    def create(self, name: str, description: str = "", photo_path: Optional[str] = None) -> StoredItem:
        """
        Insert a new record with a freshly generated id.

        Raises:
            ValueError: if name is empty or missing
        """

    @abstractmethod
    def get_all(self) -> List[StoredItem]:
        """Every record, in storage order."""

    @abstractmethod
    def get_by_id(self, item_id: str) -> Optional[StoredItem]:
        """The record with this id, or None."""

    @abstractmethod
    def update(self, item_id: str, name: Optional[str] = None, description: Optional[str] = None) -> Optional[StoredItem]:
        """
        Overwrite name and/or description.

        Empty values keep the existing value. Returns None if the id is unknown.
        """

    @abstractmethod
    def set_photo(self, item_id: str, photo_path: Optional[str]) -> Optional[StoredItem]:
        """Point the record at a new photo file. Returns None if the id is unknown."""

    @abstractmethod
    def delete(self, item_id: str) -> Optional[StoredItem]:
        """
        Remove a record.

        Returns the removed record so the caller can release its photo file,
        or None if the id is unknown.
        """
