# app/schemas/portfolio_schema.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.config import settings
from app.core.media_resolver import (
    HostKind,
    MediaReference,
    MediaType,
    PortfolioCategory,
    classify_host,
    to_embed_url,
    to_full_screen_url,
    to_thumbnail_url,
)


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        return None
    if not (value.startswith("http://") or value.startswith("https://")):
        raise ValueError("Please enter a valid URL")
    return value


# ------------------------------------------------------
# ADMIN INPUT
# ------------------------------------------------------
class PortfolioItemCreate(BaseModel):
    media_type: MediaType
    category: PortfolioCategory
    embed_url: str
    full_url: Optional[str] = None
    title: Optional[str] = None

    @field_validator("embed_url")
    @classmethod
    def validate_embed_url(cls, v):
        v = _check_url(v)
        if not v:
            raise ValueError("Please enter a valid URL")
        return v

    @field_validator("full_url")
    @classmethod
    def validate_full_url(cls, v):
        return _check_url(v)

    @field_validator("title")
    @classmethod
    def blank_title_is_none(cls, v):
        return (v.strip() or None) if v is not None else None


class PortfolioItemUpdate(BaseModel):
    media_type: Optional[MediaType] = None
    category: Optional[PortfolioCategory] = None
    embed_url: Optional[str] = None
    full_url: Optional[str] = None
    title: Optional[str] = None

    @field_validator("embed_url", "full_url")
    @classmethod
    def validate_urls(cls, v):
        return _check_url(v)


# ------------------------------------------------------
# PUBLIC OUTPUT
# ------------------------------------------------------
class PortfolioItemOut(BaseModel):
    id: str
    media_type: MediaType
    category: str
    category_label: str
    host: HostKind

    embed_url: str
    full_url: Optional[str] = None
    title: Optional[str] = None
    created_at: Optional[datetime] = None

    # Derived renditions
    player_url: str
    thumbnail_url: str
    full_screen_url: str

    @classmethod
    def from_reference(cls, ref: MediaReference) -> "PortfolioItemOut":
        category = PortfolioCategory.from_slug(ref.category)
        return cls(
            id=ref.id,
            media_type=ref.media_type,
            category=category.value if category else str(ref.category),
            category_label=category.label if category else str(ref.category),
            host=classify_host(ref.raw_url),
            embed_url=ref.raw_url,
            full_url=ref.full_resolution_url,
            title=ref.title,
            created_at=ref.created_at,
            player_url=to_embed_url(ref.raw_url),
            thumbnail_url=to_thumbnail_url(ref.raw_url, ref.media_type, settings.THUMBNAIL_SIZE),
            full_screen_url=to_full_screen_url(ref, settings.FULL_SCREEN_SIZE),
        )


class CategoryOut(BaseModel):
    id: str
    name: str
    slug: str
    display_label: str
    thumbnail_url: Optional[str] = None
    display_order: int

    model_config = {
        "from_attributes": True
    }


class CategoryGalleryOut(BaseModel):
    category: PortfolioCategory
    label: str
    count: int
    items: List[PortfolioItemOut] = []
