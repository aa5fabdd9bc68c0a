"""
Relational record store backed by SQLAlchemy.

Each operation runs in its own session; concurrency safety is whatever the
database gives a single statement.
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import sessionmaker

from .. import crud
from ..schemas import StoredItem
from .base import RecordStore, new_item_id, require_name

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create(self, name: str, description: str = "", photo_path: Optional[str] = None) -> StoredItem:
        name = require_name(name)
        with self.session_factory() as db:
            db_item = crud.create_inventory_item(
                db, item_id=new_item_id(), name=name, description=description or "", photo_path=photo_path
            )
            return StoredItem.model_validate(db_item)

    def get_all(self) -> List[StoredItem]:
        with self.session_factory() as db:
            return [StoredItem.model_validate(row) for row in crud.get_inventory_items(db)]

    def get_by_id(self, item_id: str) -> Optional[StoredItem]:
        with self.session_factory() as db:
            db_item = crud.get_inventory_item(db, item_id)
            return StoredItem.model_validate(db_item) if db_item is not None else None

    def update(self, item_id: str, name: Optional[str] = None, description: Optional[str] = None) -> Optional[StoredItem]:
        fields = {key: value for key, value in (("name", name), ("description", description)) if value}
        with self.session_factory() as db:
            db_item = crud.update_inventory_item(db, item_id, **fields)
            return StoredItem.model_validate(db_item) if db_item is not None else None

    def set_photo(self, item_id: str, photo_path: Optional[str]) -> Optional[StoredItem]:
        with self.session_factory() as db:
            db_item = crud.update_inventory_item(db, item_id, photo_path=photo_path)
            return StoredItem.model_validate(db_item) if db_item is not None else None

    def delete(self, item_id: str) -> Optional[StoredItem]:
        with self.session_factory() as db:
            db_item = crud.get_inventory_item(db, item_id)
            if db_item is None:
                return None
            # Snapshot before the row goes away
            removed = StoredItem.model_validate(db_item)
            crud.delete_inventory_item(db, item_id)
            logger.info(f"Deleted inventory row {item_id}")
            return removed
