# app/routers/admin_router.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.auth import CurrentUser, require_admin
from app.core.media_resolver import to_embed_url
from app.schemas.portfolio_schema import (
    PortfolioItemCreate,
    PortfolioItemOut,
    PortfolioItemUpdate,
)
from app.store.base import ItemStore, ItemStoreError
from app.store.factory import get_item_store

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/admin/items", tags=["Admin"])


def _store_failed(e: ItemStoreError) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Store error: {e}")


# =====================================================================
# LIST
# =====================================================================

@router.get("/", response_model=List[PortfolioItemOut])
def list_items(
    store: ItemStore = Depends(get_item_store),
    admin: CurrentUser = Depends(require_admin),
):
    return [PortfolioItemOut.from_reference(r) for r in store.list_media_references()]


# =====================================================================
# CREATE
# =====================================================================

@router.post("/", response_model=PortfolioItemOut, status_code=201)
def create_item(
    payload: PortfolioItemCreate,
    store: ItemStore = Depends(get_item_store),
    admin: CurrentUser = Depends(require_admin),
):
    data = {
        "media_type": payload.media_type.value,
        "category": payload.category.value,
        # Store the embeddable form so every page can use it directly
        "embed_url": to_embed_url(payload.embed_url),
        "full_url": payload.full_url,
        "title": payload.title,
    }

    try:
        ref = store.create(data)
    except ItemStoreError as e:
        raise _store_failed(e)

    logger.info("Portfolio item %s added by %s", ref.id, admin.email)
    return PortfolioItemOut.from_reference(ref)


# =====================================================================
# UPDATE
# =====================================================================

@router.put("/{item_id}", response_model=PortfolioItemOut)
def update_item(
    item_id: str,
    payload: PortfolioItemUpdate,
    store: ItemStore = Depends(get_item_store),
    admin: CurrentUser = Depends(require_admin),
):
    data = payload.model_dump(exclude_unset=True)

    for key in ("media_type", "category", "embed_url"):
        if key in data and data[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be empty")

    if "media_type" in data:
        # an item keeps the media type it was created with
        try:
            existing = store.get(item_id)
        except ItemStoreError as e:
            raise _store_failed(e)
        if not existing:
            raise HTTPException(status_code=404, detail="Item not found")
        if existing.media_type is not data["media_type"]:
            raise HTTPException(status_code=400, detail="media_type cannot be changed")
        del data["media_type"]
        if not data:
            return PortfolioItemOut.from_reference(existing)

    if "category" in data:
        data["category"] = data["category"].value
    if "embed_url" in data:
        data["embed_url"] = to_embed_url(data["embed_url"])

    try:
        ref = store.update(item_id, data)
    except ItemStoreError as e:
        raise _store_failed(e)

    if not ref:
        raise HTTPException(status_code=404, detail="Item not found")

    logger.info("Portfolio item %s updated by %s", item_id, admin.email)
    return PortfolioItemOut.from_reference(ref)


# =====================================================================
# DELETE
# =====================================================================

@router.delete("/{item_id}")
def delete_item(
    item_id: str,
    store: ItemStore = Depends(get_item_store),
    admin: CurrentUser = Depends(require_admin),
):
    try:
        deleted = store.delete(item_id)
    except ItemStoreError as e:
        raise _store_failed(e)

    if not deleted:
        raise HTTPException(status_code=404, detail="Item not found")

    logger.info("Portfolio item %s deleted by %s", item_id, admin.email)
    return {"message": "Portfolio item deleted successfully"}
