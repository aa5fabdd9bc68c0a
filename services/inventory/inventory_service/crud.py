"""
CRUD (Create, Read, Update, Delete) operations for the Inventory service.

This module contains all database operations for the relational backend.
"""
from typing import List, Optional
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from . import models

logger = logging.getLogger(__name__)

def get_inventory_item(db: Session, item_id: str) -> Optional[models.InventoryItem]:
    """
    Retrieve a single inventory item by ID.

    Args:
        db: Database session
        item_id: ID of the inventory item to retrieve

    Returns:
        InventoryItem object or None if not found
    """
    return db.query(models.InventoryItem).filter(models.InventoryItem.id == item_id).first()

def get_inventory_items(db: Session) -> List[models.InventoryItem]:
    """
    Retrieve every inventory item.

    Args:
        db: Database session

    Returns:
        List of InventoryItem objects
    """
    return db.query(models.InventoryItem).all()

def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error, rolled back: {e}")
        raise

def create_inventory_item(
    db: Session, item_id: str, name: str, description: str, photo_path: Optional[str]
) -> models.InventoryItem:
    """
    Insert a new inventory item.

    Args:
        db: Database session
        item_id: Pre-generated UUID for the item
        name: Item name
        description: Item description
        photo_path: Stored photo file name or None

    Returns:
        Created InventoryItem object
    """
    db_item = models.InventoryItem(id=item_id, name=name, description=description, photo_path=photo_path)
    db.add(db_item)
    _commit(db)
    db.refresh(db_item)
    return db_item

def update_inventory_item(db: Session, item_id: str, **fields) -> Optional[models.InventoryItem]:
    """
    Update columns of an existing inventory item.

    Args:
        db: Database session
        item_id: ID of the inventory item to update
        **fields: Column values to set

    Returns:
        Updated InventoryItem object or None if not found
    """
    db_item = get_inventory_item(db, item_id)
    if db_item is None:
        return None

    for key, value in fields.items():
        setattr(db_item, key, value)

    _commit(db)
    db.refresh(db_item)
    return db_item

def delete_inventory_item(db: Session, item_id: str) -> bool:
    """
    Delete an inventory item from the database.

    Args:
        db: Database session
        item_id: ID of the inventory item to delete

    Returns:
        True if item was deleted, False if not found
    """
    db_item = get_inventory_item(db, item_id)
    if db_item is None:
        return False

    db.delete(db_item)
    _commit(db)
    return True
