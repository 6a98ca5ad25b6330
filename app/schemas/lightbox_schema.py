from typing import List, Optional

from pydantic import BaseModel

from app.core.lightbox import (
    ClickTarget,
    Direction,
    ItemStage,
    LightboxView,
    RemoteLightbox,
)
from app.core.media_resolver import MediaType, PortfolioCategory
from app.schemas.portfolio_schema import PortfolioItemOut


# ------------------------------------------------------
# REQUESTS
# ------------------------------------------------------
class LightboxOpen(BaseModel):
    category: Optional[PortfolioCategory] = None
    media_type: Optional[MediaType] = None
    start_index: int = 0


class NavigateRequest(BaseModel):
    direction: Direction


class SelectRequest(BaseModel):
    index: int


class KeyRequest(BaseModel):
    key: str


class SwipeRequest(BaseModel):
    start_x: float
    end_x: float


class ClickRequest(BaseModel):
    target: ClickTarget


class AssetReport(BaseModel):
    ok: bool
    error: Optional[str] = None


# ------------------------------------------------------
# OUTPUT
# ------------------------------------------------------
class AssetTicketOut(BaseModel):
    ticket: str
    index: int
    url: str
    prefetch: bool


class LightboxOut(BaseModel):
    session_id: str
    is_open: bool
    scroll_locked: bool
    generation: int

    item: PortfolioItemOut
    index: int
    total: int
    stage: ItemStage

    embed_url: str
    thumbnail_url: Optional[str] = None
    full_resolution_url: Optional[str] = None
    display_url: Optional[str] = None
    player_url: Optional[str] = None

    is_playing: bool
    is_zoomed: bool
    full_image_loaded: bool
    image_error: bool
    can_zoom: bool
    error_message: Optional[str] = None

    counter: str
    dots: List[bool] = []
    dots_overflow: int = 0

    # Assets the client should fetch and report back on
    assets: List[AssetTicketOut] = []

    @classmethod
    def build(cls, remote: RemoteLightbox) -> "LightboxOut":
        session = remote.session
        view: LightboxView = session.view()
        return cls(
            session_id=remote.id,
            is_open=session.is_open,
            scroll_locked=remote.scroll_lock.locked,
            generation=session.generation,
            item=PortfolioItemOut.from_reference(view.item),
            index=view.index,
            total=view.total,
            stage=view.stage,
            embed_url=view.embed_url,
            thumbnail_url=view.thumbnail_url,
            full_resolution_url=view.full_resolution_url,
            display_url=view.display_url,
            player_url=view.player_url,
            is_playing=view.is_playing,
            is_zoomed=view.is_zoomed,
            full_image_loaded=view.full_image_loaded,
            image_error=view.image_error,
            can_zoom=view.can_zoom,
            error_message=view.error_message,
            counter=view.counter,
            dots=view.dots,
            dots_overflow=view.dots_overflow,
            assets=[
                AssetTicketOut(
                    ticket=ticket,
                    index=req.index,
                    url=req.url,
                    prefetch=req.prefetch,
                )
                for ticket, req in remote.loader.pending()
            ],
        )
