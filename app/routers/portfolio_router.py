# app/routers/portfolio_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.media_resolver import CATEGORY_LABELS, MediaType, PortfolioCategory
from app.schemas.portfolio_schema import (
    CategoryGalleryOut,
    CategoryOut,
    PortfolioItemOut,
)
from app.store.base import ItemStore
from app.store.factory import get_item_store


router = APIRouter(prefix="/portfolio", tags=["Portfolio"])


# =====================================================================
# FALLBACK CATEGORY CARDS (used until the table is populated)
# =====================================================================

FALLBACK_THUMBNAILS = {
    PortfolioCategory.WEDDING: "/static/portfolio/wedding-1.jpg",
    PortfolioCategory.PRE_WEDDING: "/static/portfolio/prewedding-1.jpg",
    PortfolioCategory.BABY_SHOWER_MATERNITY: "/static/portfolio/babyshower-1.jpg",
    PortfolioCategory.BIRTHDAYS_FAMILY: "/static/portfolio/birthday-1.jpg",
    PortfolioCategory.DRONE: "/static/portfolio/drone-1.jpg",
    PortfolioCategory.MODEL_CANDID: "/static/portfolio/model-1.jpg",
}

FALLBACK_CATEGORIES = [
    CategoryOut(
        id=category.value,
        name=category.value,
        slug=category.value,
        display_label=label,
        thumbnail_url=FALLBACK_THUMBNAILS[category],
        display_order=position,
    )
    for position, (category, label) in enumerate(CATEGORY_LABELS.items(), start=1)
]


# =====================================================================
# CATEGORIES
# =====================================================================

@router.get("/categories", response_model=List[CategoryOut])
def list_categories(store: ItemStore = Depends(get_item_store)):
    cards = [c for c in store.list_categories() if c.slug != "all"]
    if not cards:
        return FALLBACK_CATEGORIES
    return [CategoryOut.model_validate(c) for c in cards]


# =====================================================================
# ITEMS
# =====================================================================

@router.get("/items", response_model=List[PortfolioItemOut])
def list_items(
    category: Optional[PortfolioCategory] = None,
    media_type: Optional[MediaType] = None,
    order: str = Query("newest", pattern="^(newest|oldest)$"),
    store: ItemStore = Depends(get_item_store),
):
    refs = store.list_media_references(
        category=category.value if category else None,
        media_type=media_type.value if media_type else None,
        newest_first=order == "newest",
    )
    return [PortfolioItemOut.from_reference(r) for r in refs]


@router.get("/items/{item_id}", response_model=PortfolioItemOut)
def get_item(item_id: str, store: ItemStore = Depends(get_item_store)):
    ref = store.get(item_id)
    if not ref:
        raise HTTPException(status_code=404, detail="Item not found")
    return PortfolioItemOut.from_reference(ref)


# =====================================================================
# CATEGORY GALLERY PAGE
# =====================================================================

@router.get("/gallery/{slug}", response_model=CategoryGalleryOut)
def category_gallery(slug: str, store: ItemStore = Depends(get_item_store)):
    category = PortfolioCategory.from_slug(slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")

    refs = store.list_media_references(category=category.value)

    return CategoryGalleryOut(
        category=category,
        label=category.label,
        count=len(refs),
        items=[PortfolioItemOut.from_reference(r) for r in refs],
    )
