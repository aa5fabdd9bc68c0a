"""
    Inventory Service API

    This module implements a FastAPI-based service for tracking inventory items
    with optional photos. Items can be registered, listed, searched, updated and
    deleted; photos are stored on disk and served back by item id.

    Records live in one of two interchangeable stores selected by STORE_BACKEND:
    - sql: a relational table accessed through SQLAlchemy
    - document: a JSON file under CACHE_DIR rewritten after every change

    The service also exposes:
    - Health endpoint: Provides service health status for monitoring and orchestration
    - Static HTML forms for registering and searching items
"""
from contextlib import asynccontextmanager
from typing import List, Optional
import logging
import os
from fastapi import FastAPI, Depends, HTTPException, Query, Request, status, UploadFile, File, Form
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from . import config, schemas
from .dependencies import build_photo_store, build_record_store, get_photo_store, get_record_store
from .photos import PhotoStore
from .stores.base import RecordStore

logger = logging.getLogger(__name__)

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")
TRUTHY_FLAGS = {"1", "true", "on", "yes"}

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.record_store = build_record_store()
    app.state.photo_store = build_photo_store()
    logger.info(f"Inventory service ready, data directory {config.CACHE_DIR}")
    yield


app = FastAPI(
    title="inventory-service",
    description="Inventory items with photos, backed by a relational table or a JSON document",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def allowed_methods(request: Request) -> List[str]:
    """Every method any route accepts for the request's path."""
    methods = set()
    for route in request.app.router.routes:
        route_methods = getattr(route, "methods", None)
        if not route_methods:
            continue
        match, _ = route.matches(request.scope)
        if match != Match.NONE:
            methods.update(route_methods)
    return sorted(methods)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """
    Answer 405 with an Allow header listing all methods of the path.

    The router only reports the methods of the first route that matched the
    path, so the header is rebuilt from every route here. Other HTTP errors
    go through FastAPI's default handler.
    """
    if exc.status_code != status.HTTP_405_METHOD_NOT_ALLOWED:
        return await http_exception_handler(request, exc)
    return PlainTextResponse(
        "Method Not Allowed",
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers={"Allow": ", ".join(allowed_methods(request))},
    )


def is_truthy(value) -> bool:
    """Interpret a search flag sent as JSON, form field or query string."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_FLAGS
    return bool(value)


def has_upload(photo: Optional[UploadFile]) -> bool:
    return photo is not None and bool(photo.filename)


@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the inventory service.

    Returns:
        dict: {"status": "healthy"} while the service is operational.
    """
    return {"status": "healthy"}

@app.get("/RegisterForm.html", include_in_schema=False)
def register_form():
    return FileResponse(os.path.join(STATIC_DIR, "RegisterForm.html"), media_type="text/html")

@app.get("/SearchForm.html", include_in_schema=False)
def search_form():
    return FileResponse(os.path.join(STATIC_DIR, "SearchForm.html"), media_type="text/html")

@app.post("/register", response_model=schemas.InventoryItem, status_code=status.HTTP_201_CREATED)
def register_item(
    inventory_name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    store: RecordStore = Depends(get_record_store),
    photos: PhotoStore = Depends(get_photo_store),
):
    """
    Register a new inventory item from a multipart form.

    Args:
        inventory_name: Item name (required)
        description: Item description (optional, defaults to "")
        photo: Image upload (optional)

    Returns:
        Public projection of the created item

    Raises:
        HTTPException: 400 if inventory_name is missing
    """
    if not inventory_name:
        raise HTTPException(status_code=400, detail="inventory_name is required")

    photo_path = photos.save(photo.file, photo.filename) if has_upload(photo) else None
    try:
        item = store.create(inventory_name, description or "", photo_path)
    except Exception:
        # Nothing references the new file yet
        photos.delete(photo_path)
        raise

    logger.info(f"Registered item {item.id} ({'with' if photo_path else 'without'} photo)")
    return schemas.InventoryItem.from_stored(item)

@app.get("/inventory", response_model=List[schemas.InventoryItem])
def list_inventory_items(store: RecordStore = Depends(get_record_store)):
    """
    List every inventory item.

    Returns:
        List of public item projections in storage order
    """
    return [schemas.InventoryItem.from_stored(item) for item in store.get_all()]

@app.get("/inventory/{item_id}", response_model=schemas.InventoryItem)
def get_inventory_item(item_id: str, store: RecordStore = Depends(get_record_store)):
    """
    Get a single inventory item by ID.

    Raises:
        HTTPException: 404 if item not found
    """
    item = store.get_by_id(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return schemas.InventoryItem.from_stored(item)

@app.put("/inventory/{item_id}", response_model=schemas.InventoryItem)
def update_inventory_item(
    item_id: str,
    item: Optional[schemas.InventoryItemUpdate] = None,
    store: RecordStore = Depends(get_record_store),
):
    """
    Update the name and/or description of an item.

    Fields that are missing or empty keep their current value.

    Raises:
        HTTPException: 404 if item not found
    """
    item = item or schemas.InventoryItemUpdate()
    updated = store.update(item_id, name=item.name, description=item.description)
    if updated is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    logger.info(f"Updated item {item_id}")
    return schemas.InventoryItem.from_stored(updated)

@app.get("/inventory/{item_id}/photo", response_class=StreamingResponse)
def get_inventory_photo(
    item_id: str,
    store: RecordStore = Depends(get_record_store),
    photos: PhotoStore = Depends(get_photo_store),
):
    """
    Stream an item's photo as image/jpeg.

    Raises:
        HTTPException: 404 if the item, its photo reference or the file is missing
    """
    item = store.get_by_id(item_id)
    chunks = photos.read(item.photo_path) if item is not None else None
    if chunks is None:
        raise HTTPException(status_code=404, detail="Photo not found")
    return StreamingResponse(chunks, media_type="image/jpeg")

@app.put("/inventory/{item_id}/photo", response_model=schemas.PhotoReference)
def replace_inventory_photo(
    item_id: str,
    photo: Optional[UploadFile] = File(None),
    store: RecordStore = Depends(get_record_store),
    photos: PhotoStore = Depends(get_photo_store),
):
    """
    Replace (or add) an item's photo.

    The new file is written and the record repointed before the old file is
    removed, so a failure can leave an orphaned file but never a record
    pointing at a deleted one.

    Raises:
        HTTPException: 404 if item not found, 400 if no file was uploaded
    """
    existing = store.get_by_id(item_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    if not has_upload(photo):
        raise HTTPException(status_code=400, detail="No file uploaded")

    new_path = photos.save(photo.file, photo.filename)
    updated = store.set_photo(item_id, new_path)
    if updated is None:
        # Deleted between lookup and update
        photos.delete(new_path)
        raise HTTPException(status_code=404, detail="Inventory item not found")

    if existing.photo_path and existing.photo_path != new_path:
        photos.delete(existing.photo_path)

    logger.info(f"Replaced photo of item {item_id}")
    return schemas.PhotoReference(id=item_id, photo=schemas.photo_url(item_id))

@app.delete("/inventory/{item_id}", response_model=schemas.Message)
def delete_inventory_item(
    item_id: str,
    store: RecordStore = Depends(get_record_store),
    photos: PhotoStore = Depends(get_photo_store),
):
    """
    Delete an item and its photo file.

    Raises:
        HTTPException: 404 if item not found
    """
    removed = store.delete(item_id)
    if removed is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    photos.delete(removed.photo_path)
    logger.info(f"Deleted item {item_id}")
    return schemas.Message(message="Deleted")


def search_item(store: RecordStore, item_id, include_photo: bool) -> schemas.SearchResult:
    """
    Look up one item for the search endpoints.

    When include_photo is set and the item has a photo, the photo URL is
    appended to the description as " Photo: <url>".

    Raises:
        HTTPException: 400 if id is missing, 404 if item not found
    """
    if not item_id:
        raise HTTPException(status_code=400, detail="id required")

    item = store.get_by_id(str(item_id))
    if item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")

    description = item.description or ""
    if include_photo and item.photo_path:
        description += f" Photo: {schemas.photo_url(item.id)}"
    return schemas.SearchResult(id=item.id, name=item.name, description=description)

def search_flag(has_photo, include_photo) -> bool:
    """has_photo wins over includePhoto when both are sent."""
    return is_truthy(has_photo if has_photo is not None else include_photo)

@app.post("/search", response_model=schemas.SearchResult)
async def search_post(request: Request, store: RecordStore = Depends(get_record_store)):
    """
    Search by id from a JSON body or a submitted form.

    Accepted fields: id, has_photo (or includePhoto).

    Raises:
        HTTPException: 400 if the JSON body cannot be parsed
    """
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(payload, dict):
            payload = {}
    else:
        payload = dict(await request.form())

    flag = search_flag(payload.get("has_photo"), payload.get("includePhoto"))
    return await run_in_threadpool(search_item, store, payload.get("id"), flag)

@app.get("/search", response_model=schemas.SearchResult)
def search_get(
    id: Optional[str] = None,
    include_photo: Optional[str] = Query(None, alias="includePhoto"),
    has_photo: Optional[str] = None,
    store: RecordStore = Depends(get_record_store),
):
    """
    Search by id from query parameters: id, has_photo (or includePhoto).
    """
    return search_item(store, id, search_flag(has_photo, include_photo))


def run():
    """Start the service with uvicorn on HOST:PORT."""
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
