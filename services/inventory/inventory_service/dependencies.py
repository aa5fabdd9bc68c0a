"""
Store construction and FastAPI dependencies for the Inventory service.
"""
import logging
from fastapi import Request

from . import config
from .database import create_session_factory
from .photos import PhotoStore
from .stores.base import RecordStore
from .stores.document import DocumentRecordStore
from .stores.sql import SqlRecordStore

logger = logging.getLogger(__name__)

def build_record_store(backend: str = None) -> RecordStore:
    """
    Build the record store selected by configuration.

    Args:
        backend: "sql" or "document"; defaults to STORE_BACKEND

    Raises:
        ValueError: for an unknown backend name
    """
    backend = (backend or config.STORE_BACKEND).lower()
    if backend == "sql":
        logger.info("Using relational record store")
        return SqlRecordStore(create_session_factory(config.DATABASE_URL))
    if backend == "document":
        logger.info(f"Using document record store at {config.DOCUMENT_PATH}")
        return DocumentRecordStore(config.DOCUMENT_PATH)
    raise ValueError(f"Unknown STORE_BACKEND '{backend}', expected 'sql' or 'document'")

def build_photo_store() -> PhotoStore:
    return PhotoStore(config.PHOTOS_DIR)

def get_record_store(request: Request) -> RecordStore:
    """Dependency returning the record store created at startup."""
    return request.app.state.record_store

def get_photo_store(request: Request) -> PhotoStore:
    """Dependency returning the photo store created at startup."""
    return request.app.state.photo_store
