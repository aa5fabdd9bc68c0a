"""
SQLAlchemy ORM models for the Inventory service.

Defines the database schema for the inventory table.
"""
from sqlalchemy import Column, String, Text
from .database import Base

class InventoryItem(Base):
    """
    Inventory item row.

    Attributes:
        id (str): Primary key, UUID4 string generated by the service
        name (str): Item name
        description (str): Free-text description, empty string by default
        photo_path (str): File name of the item's photo in the photo
            directory, or NULL when the item has no photo
    """
    __tablename__ = "inventory"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    photo_path = Column(String(255), nullable=True)
