"""
Pydantic schemas for request/response validation in the Inventory service.

These schemas define the structure of stored records, API requests and
API responses.
"""
from typing import Optional
from pydantic import BaseModel


def photo_url(item_id: str) -> str:
    """Public URL path of an item's photo."""
    return f"/inventory/{item_id}/photo"


class StoredItem(BaseModel):
    """
    Inventory record as held by a record store.

    `photo_path` is the file name inside the photo directory and must never
    be sent to clients; use `InventoryItem.from_stored` for responses.
    """
    id: str
    name: str
    description: Optional[str] = ""
    photo_path: Optional[str] = None

    class Config:
        from_attributes = True


class InventoryItemUpdate(BaseModel):
    """Schema for updating an existing inventory item. All fields are optional."""
    name: Optional[str] = None
    description: Optional[str] = None


class InventoryItem(BaseModel):
    """
    Public projection of an inventory item.

    Attributes:
        id (str): Item's unique identifier
        name (str): Item name
        description (str): Item description
        photo (str): URL path of the photo, or None when there is no photo
    """
    id: str
    name: str
    description: str
    photo: Optional[str] = None

    @classmethod
    def from_stored(cls, item: StoredItem) -> "InventoryItem":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description or "",
            photo=photo_url(item.id) if item.photo_path else None,
        )


class PhotoReference(BaseModel):
    """Response body of a photo replacement."""
    id: str
    photo: str


class SearchResult(BaseModel):
    """Search response; description may carry a photo URL suffix."""
    id: str
    name: str
    description: str


class Message(BaseModel):
    message: str
