"""
Document record store: an in-memory list mirrored to a single JSON file.

The file holds {"items": [...]} and is rewritten wholesale after every
mutation. One lock serializes each read-modify-persist cycle so concurrent
requests cannot interleave a mutation with another request's write-out.
"""
from typing import List, Optional
import json
import logging
import os
import tempfile
import threading

from ..schemas import StoredItem
from .base import RecordStore, new_item_id, require_name

logger = logging.getLogger(__name__)


class DocumentRecordStore(RecordStore):
    def __init__(self, path: str):
        self.path = path
        self._lock = threading.RLock()
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        self._items: List[StoredItem] = self._load()

    def _load(self) -> List[StoredItem]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as fh:
            document = json.load(fh)
        items = [StoredItem.model_validate(raw) for raw in document.get("items", [])]
        logger.info(f"Loaded {len(items)} inventory items from {self.path}")
        return items

    def _persist(self, items: List[StoredItem]) -> None:
        # Caller holds the lock
        document = {"items": [item.model_dump() for item in items]}
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(prefix=".inventory-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _commit(self, items: List[StoredItem]) -> None:
        """Write the new list out, then adopt it; a failed write leaves memory unchanged."""
        self._persist(items)
        self._items = items

    def _find(self, item_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def create(self, name: str, description: str = "", photo_path: Optional[str] = None) -> StoredItem:
        name = require_name(name)
        item = StoredItem(id=new_item_id(), name=name, description=description or "", photo_path=photo_path)
        with self._lock:
            self._commit(self._items + [item])
        return item.model_copy()

    def get_all(self) -> List[StoredItem]:
        with self._lock:
            return [item.model_copy() for item in self._items]

    def get_by_id(self, item_id: str) -> Optional[StoredItem]:
        with self._lock:
            index = self._find(item_id)
            return self._items[index].model_copy() if index is not None else None

    def _replace(self, item_id: str, **changes) -> Optional[StoredItem]:
        with self._lock:
            index = self._find(item_id)
            if index is None:
                return None
            updated = self._items[index].model_copy(update=changes)
            items = list(self._items)
            items[index] = updated
            self._commit(items)
            return updated.model_copy()

    def update(self, item_id: str, name: Optional[str] = None, description: Optional[str] = None) -> Optional[StoredItem]:
        changes = {key: value for key, value in (("name", name), ("description", description)) if value}
        return self._replace(item_id, **changes)

    def set_photo(self, item_id: str, photo_path: Optional[str]) -> Optional[StoredItem]:
        return self._replace(item_id, photo_path=photo_path)

    def delete(self, item_id: str) -> Optional[StoredItem]:
        with self._lock:
            index = self._find(item_id)
            if index is None:
                return None
            removed = self._items[index]
            self._commit(self._items[:index] + self._items[index + 1:])
        logger.info(f"Deleted inventory document entry {item_id}")
        return removed
