# app/routers/lightbox_router.py
#
# Drives a lightbox session for a thin client. The client renders the
# returned view, fetches the listed assets and reports each one back.

from fastapi import APIRouter, Depends, HTTPException

from app.config import settings
from app.core.lightbox import LightboxError, LightboxRegistry, RemoteLightbox
from app.schemas.lightbox_schema import (
    AssetReport,
    ClickRequest,
    KeyRequest,
    LightboxOpen,
    LightboxOut,
    NavigateRequest,
    SelectRequest,
    SwipeRequest,
)
from app.store.base import ItemStore
from app.store.factory import get_item_store


router = APIRouter(prefix="/lightbox", tags=["Lightbox"])

registry = LightboxRegistry(max_sessions=settings.LIGHTBOX_MAX_SESSIONS)


def get_registry() -> LightboxRegistry:
    return registry


def _remote(session_id: str, reg: LightboxRegistry) -> RemoteLightbox:
    remote = reg.get(session_id)
    if remote is None:
        raise HTTPException(status_code=404, detail="Lightbox session not found")
    return remote


# =====================================================================
# OPEN / READ / CLOSE
# =====================================================================

@router.post("/sessions", response_model=LightboxOut, status_code=201)
def open_session(
    payload: LightboxOpen,
    store: ItemStore = Depends(get_item_store),
    reg: LightboxRegistry = Depends(get_registry),
):
    items = store.list_media_references(
        category=payload.category.value if payload.category else None,
        media_type=payload.media_type.value if payload.media_type else None,
    )

    try:
        remote = reg.open(items, payload.start_index)
    except LightboxError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LightboxOut.build(remote)


@router.get("/sessions/{session_id}", response_model=LightboxOut)
def get_session(session_id: str, reg: LightboxRegistry = Depends(get_registry)):
    return LightboxOut.build(_remote(session_id, reg))


@router.delete("/sessions/{session_id}")
def close_session(session_id: str, reg: LightboxRegistry = Depends(get_registry)):
    if not reg.close(session_id):
        raise HTTPException(status_code=404, detail="Lightbox session not found")
    return {"message": "Lightbox closed"}


# =====================================================================
# NAVIGATION & INPUT
# =====================================================================

@router.post("/sessions/{session_id}/navigate", response_model=LightboxOut)
def navigate(
    session_id: str,
    payload: NavigateRequest,
    reg: LightboxRegistry = Depends(get_registry),
):
    remote = _remote(session_id, reg)
    remote.session.navigate(payload.direction)
    return LightboxOut.build(remote)


@router.post("/sessions/{session_id}/select", response_model=LightboxOut)
def select(
    session_id: str,
    payload: SelectRequest,
    reg: LightboxRegistry = Depends(get_registry),
):
    remote = _remote(session_id, reg)
    try:
        remote.session.select(payload.index)
    except LightboxError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LightboxOut.build(remote)


@router.post("/sessions/{session_id}/key", response_model=LightboxOut)
def key(
    session_id: str,
    payload: KeyRequest,
    reg: LightboxRegistry = Depends(get_registry),
):
    remote = _remote(session_id, reg)
    remote.session.handle_key(payload.key)
    return LightboxOut.build(remote)


@router.post("/sessions/{session_id}/swipe", response_model=LightboxOut)
def swipe(
    session_id: str,
    payload: SwipeRequest,
    reg: LightboxRegistry = Depends(get_registry),
):
    remote = _remote(session_id, reg)
    remote.session.touch_start(payload.start_x)
    remote.session.touch_end(payload.end_x)
    return LightboxOut.build(remote)


@router.post("/sessions/{session_id}/click", response_model=LightboxOut)
def click(
    session_id: str,
    payload: ClickRequest,
    reg: LightboxRegistry = Depends(get_registry),
):
    remote = _remote(session_id, reg)
    remote.session.handle_click(payload.target)
    return LightboxOut.build(remote)


# =====================================================================
# PLAYBACK / ZOOM
# =====================================================================

@router.post("/sessions/{session_id}/play", response_model=LightboxOut)
def play(session_id: str, reg: LightboxRegistry = Depends(get_registry)):
    remote = _remote(session_id, reg)
    remote.session.play_video()
    return LightboxOut.build(remote)


@router.post("/sessions/{session_id}/zoom", response_model=LightboxOut)
def zoom(session_id: str, reg: LightboxRegistry = Depends(get_registry)):
    remote = _remote(session_id, reg)
    remote.session.toggle_zoom()
    return LightboxOut.build(remote)


# =====================================================================
# ASSET COMPLETION
# =====================================================================

@router.post("/sessions/{session_id}/assets/{ticket}", response_model=LightboxOut)
def report_asset(
    session_id: str,
    ticket: str,
    payload: AssetReport,
    reg: LightboxRegistry = Depends(get_registry),
):
    remote = _remote(session_id, reg)
    if not remote.loader.complete(ticket, payload.ok, payload.error):
        raise HTTPException(status_code=404, detail="Unknown asset ticket")
    return LightboxOut.build(remote)
