"""
View state for the full-screen gallery viewer.

A ``LightboxSession`` lives from the moment a thumbnail is activated
until the viewer is closed. It owns the current index, the per-item
playback/zoom flags and the progressive image load (thumbnail first,
full resolution swapped in once it arrives), and it prefetches the
neighbours of whatever is on screen.

Asset loads are futures handed out by an ``AssetLoader``. Each request
is stamped with the session's generation, which moves forward on every
index change and on close, so a completion that arrives late for an
item the user already left is recognised and dropped.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from app.core.media_resolver import (
    MediaReference,
    MediaType,
    to_embed_url,
    to_full_screen_url,
    to_thumbnail_url,
    to_video_thumbnail,
    with_autoplay,
)

logger = logging.getLogger(__name__)


SWIPE_THRESHOLD = 50
MAX_DOTS = 10
PREVIEW_UNAVAILABLE = "Preview unavailable"


class LightboxError(ValueError):
    pass


class Direction(str, Enum):
    PREV = "prev"
    NEXT = "next"


class ItemStage(str, Enum):
    THUMBNAIL_SHOWN = "thumbnail_shown"
    FULL_RESOLUTION_LOADING = "full_resolution_loading"
    FULL_RESOLUTION_SHOWN = "full_resolution_shown"
    LOAD_FAILED = "load_failed"


class ClickTarget(str, Enum):
    BACKGROUND = "background"
    MEDIA_SURFACE = "media_surface"
    PREV = "prev"
    NEXT = "next"
    CLOSE = "close"


KEY_BINDINGS = {
    "Escape": None,
    "ArrowLeft": Direction.PREV,
    "ArrowRight": Direction.NEXT,
}


# =====================================================================
# LOADING
# =====================================================================

@dataclass(frozen=True)
class AssetRequest:
    index: int
    url: str
    generation: int
    prefetch: bool


class AssetLoadError(Exception):
    pass


class AssetLoader(ABC):
    @abstractmethod
    def load(self, request: AssetRequest) -> Future:
        """Start fetching ``request.url``; the future fails if the asset does."""


class ClientAssetLoader(AssetLoader):
    """
    Hands requests to a remote client (the browser) and waits for it to
    report back by ticket. Only the newest ``max_pending`` tickets are
    kept; older ones are cancelled.
    """

    def __init__(self, max_pending: int = 32):
        self.max_pending = max_pending
        self._pending: "OrderedDict[str, Tuple[AssetRequest, Future]]" = OrderedDict()
        self._lock = threading.Lock()

    def load(self, request: AssetRequest) -> Future:
        future: Future = Future()
        evicted = []

        with self._lock:
            self._pending[uuid.uuid4().hex] = (request, future)
            while len(self._pending) > self.max_pending:
                _, (_, old) = self._pending.popitem(last=False)
                evicted.append(old)

        for old in evicted:
            old.cancel()

        return future

    def pending(self) -> List[Tuple[str, AssetRequest]]:
        with self._lock:
            return [(ticket, req) for ticket, (req, _) in self._pending.items()]

    def complete(self, ticket: str, ok: bool, error: Optional[str] = None) -> bool:
        with self._lock:
            entry = self._pending.pop(ticket, None)

        if entry is None:
            return False

        # resolve outside our lock: done-callbacks take the session lock
        _, future = entry
        if ok:
            future.set_result(True)
        else:
            future.set_exception(AssetLoadError(error or "asset failed to load"))
        return True

    def discard_all(self) -> None:
        with self._lock:
            futures = [f for _, f in self._pending.values()]
            self._pending.clear()
        for future in futures:
            future.cancel()


class ScrollLock:
    """Page scroll lock held while any lightbox is open."""

    def __init__(self):
        self._holders = 0
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        return self._holders > 0

    def acquire(self) -> None:
        with self._lock:
            self._holders += 1

    def release(self) -> None:
        with self._lock:
            if self._holders > 0:
                self._holders -= 1


# =====================================================================
# VIEW SNAPSHOT
# =====================================================================

@dataclass(frozen=True)
class LightboxView:
    item: MediaReference
    index: int
    total: int
    stage: ItemStage
    embed_url: str
    thumbnail_url: Optional[str]
    full_resolution_url: Optional[str]
    display_url: Optional[str]
    player_url: Optional[str]
    is_playing: bool
    is_zoomed: bool
    full_image_loaded: bool
    image_error: bool
    can_zoom: bool
    error_message: Optional[str]
    counter: str
    dots: List[bool] = field(default_factory=list)
    dots_overflow: int = 0


# =====================================================================
# SESSION
# =====================================================================

class LightboxSession:
    def __init__(
        self,
        items: Sequence[MediaReference],
        start_index: int,
        loader: AssetLoader,
        scroll_lock: Optional[ScrollLock] = None,
        on_close: Optional[Callable[[], None]] = None,
        on_navigate: Optional[Callable[[int], None]] = None,
    ):
        if not items:
            raise LightboxError("Cannot open a lightbox without items")
        if not 0 <= start_index < len(items):
            raise LightboxError(
                f"Start index {start_index} out of range for {len(items)} items"
            )

        self.items: Tuple[MediaReference, ...] = tuple(items)
        self._loader = loader
        self._scroll_lock = scroll_lock
        self._on_close = on_close
        self._on_navigate = on_navigate

        self._lock = threading.RLock()
        self._index = start_index
        self._generation = 0
        self._opened = False
        self._closed = False
        self._touch_start: Optional[float] = None

        self._reset_item_state()

    # -----------------------------------------------------------------
    # lifecycle
    # -----------------------------------------------------------------

    def open(self) -> "LightboxSession":
        with self._lock:
            if self._opened or self._closed:
                return self
            self._opened = True
            if self._scroll_lock is not None:
                self._scroll_lock.acquire()
            logger.debug("Lightbox opened at %s/%s", self._index, len(self.items))
            self._begin_item()
        return self

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._generation += 1
            if self._opened and self._scroll_lock is not None:
                self._scroll_lock.release()
            logger.debug("Lightbox closed at %s", self._index)

        if self._on_close is not None:
            self._on_close()

    def __enter__(self) -> "LightboxSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_item(self) -> MediaReference:
        return self.items[self._index]

    @property
    def generation(self) -> int:
        return self._generation

    # -----------------------------------------------------------------
    # navigation
    # -----------------------------------------------------------------

    def navigate(self, direction: Direction) -> int:
        direction = Direction(direction)
        with self._lock:
            if not self.is_open:
                return self._index
            n = len(self.items)
            if direction is Direction.PREV:
                target = (self._index - 1 + n) % n
            else:
                target = (self._index + 1) % n
            self._move_to(target)
            return self._index

    def select(self, index: int) -> int:
        with self._lock:
            if not 0 <= index < len(self.items):
                raise LightboxError(f"Index {index} out of range")
            if self.is_open and index != self._index:
                self._move_to(index)
            return self._index

    def _move_to(self, index: int) -> None:
        self._index = index
        self._begin_item()
        if self._on_navigate is not None:
            self._on_navigate(index)

    # -----------------------------------------------------------------
    # per-item actions
    # -----------------------------------------------------------------

    def play_video(self) -> bool:
        with self._lock:
            if not self.is_open or self._is_playing:
                return False
            if self.current_item.media_type is not MediaType.VIDEO:
                return False
            self._is_playing = True
            return True

    def toggle_zoom(self) -> bool:
        with self._lock:
            if not self.is_open or not self._can_zoom():
                return False
            self._is_zoomed = not self._is_zoomed
            return True

    def _can_zoom(self) -> bool:
        return (
            self.current_item.media_type is MediaType.PHOTO
            and self._full_loaded
            and not self._image_error
        )

    # -----------------------------------------------------------------
    # input
    # -----------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        if key not in KEY_BINDINGS:
            return False
        direction = KEY_BINDINGS[key]
        if direction is None:
            self.close()
        else:
            self.navigate(direction)
        return True

    def touch_start(self, x: float) -> None:
        with self._lock:
            self._touch_start = x

    def touch_end(self, x: float) -> Optional[Direction]:
        """Finish a swipe; returns the direction navigated, if any."""
        with self._lock:
            if self._touch_start is None:
                return None
            diff = self._touch_start - x
            self._touch_start = None

            if abs(diff) <= SWIPE_THRESHOLD:
                return None

            direction = Direction.NEXT if diff > 0 else Direction.PREV
            self.navigate(direction)
            return direction

    def handle_click(self, target: ClickTarget) -> None:
        target = ClickTarget(target)
        if target in (ClickTarget.BACKGROUND, ClickTarget.CLOSE):
            self.close()
        elif target is ClickTarget.PREV:
            self.navigate(Direction.PREV)
        elif target is ClickTarget.NEXT:
            self.navigate(Direction.NEXT)
        # clicks on the media surface stop here

    # -----------------------------------------------------------------
    # loading
    # -----------------------------------------------------------------

    def _reset_item_state(self) -> None:
        self._is_playing = False
        self._is_zoomed = False
        self._full_loaded = False
        self._image_error = False
        self._loading = False

    def _begin_item(self) -> None:
        self._reset_item_state()
        self._generation += 1

        n = len(self.items)
        order = [self._index, (self._index - 1 + n) % n, (self._index + 1) % n]
        seen = set()
        for index in order:
            if index in seen:
                continue
            seen.add(index)
            tracked = index == self._index and self._is_photo(index)
            self._request(index, prefetch=not tracked)

    def _is_photo(self, index: int) -> bool:
        return self.items[index].media_type is MediaType.PHOTO

    def _asset_url(self, index: int) -> Optional[str]:
        item = self.items[index]
        if item.media_type is MediaType.VIDEO:
            return to_video_thumbnail(item.raw_url, "maxres")
        return to_full_screen_url(item)

    def _request(self, index: int, prefetch: bool) -> None:
        url = self._asset_url(index)
        if not url:
            return

        request = AssetRequest(
            index=index, url=url, generation=self._generation, prefetch=prefetch
        )
        if not prefetch:
            self._loading = True

        try:
            future = self._loader.load(request)
        except Exception as e:
            logger.warning("Asset loader refused %s: %s", url, e)
            if not prefetch:
                self._settle(request, ok=False)
            return

        future.add_done_callback(lambda f: self._on_done(request, f))

    def _on_done(self, request: AssetRequest, future: Future) -> None:
        if request.prefetch:
            if future.cancelled() or future.exception() is not None:
                logger.debug("Prefetch failed for %s", request.url)
            return

        ok = not future.cancelled() and future.exception() is None
        self._settle(request, ok)

    def _settle(self, request: AssetRequest, ok: bool) -> None:
        with self._lock:
            if (
                self._closed
                or request.generation != self._generation
                or request.index != self._index
            ):
                logger.debug(
                    "Discarding stale completion for index %s (generation %s, current %s)",
                    request.index, request.generation, self._generation,
                )
                return

            self._loading = False
            if ok:
                self._full_loaded = True
            else:
                self._image_error = True

    # -----------------------------------------------------------------
    # snapshot
    # -----------------------------------------------------------------

    @property
    def stage(self) -> ItemStage:
        if self._image_error:
            return ItemStage.LOAD_FAILED
        if self._full_loaded:
            return ItemStage.FULL_RESOLUTION_SHOWN
        if self._loading:
            return ItemStage.FULL_RESOLUTION_LOADING
        return ItemStage.THUMBNAIL_SHOWN

    def view(self) -> LightboxView:
        with self._lock:
            item = self.current_item
            embed_url = to_embed_url(item.raw_url)

            if item.media_type is MediaType.VIDEO:
                thumbnail = to_video_thumbnail(item.raw_url, "maxres")
                full = None
                display = thumbnail
                player = with_autoplay(embed_url) if self._is_playing else None
            else:
                thumbnail = to_thumbnail_url(item.raw_url, MediaType.PHOTO)
                full = to_full_screen_url(item)
                display = full if self._full_loaded else thumbnail
                player = None

            total = len(self.items)
            return LightboxView(
                item=item,
                index=self._index,
                total=total,
                stage=self.stage,
                embed_url=embed_url,
                thumbnail_url=thumbnail,
                full_resolution_url=full,
                display_url=display,
                player_url=player,
                is_playing=self._is_playing,
                is_zoomed=self._is_zoomed,
                full_image_loaded=self._full_loaded,
                image_error=self._image_error,
                can_zoom=self._can_zoom(),
                error_message=PREVIEW_UNAVAILABLE if self._image_error else None,
                counter=f"{self._index + 1} / {total}",
                dots=[i == self._index for i in range(min(total, MAX_DOTS))],
                dots_overflow=max(total - MAX_DOTS, 0),
            )


def open_lightbox(
    items: Sequence[MediaReference],
    start_index: int,
    loader: AssetLoader,
    **kwargs,
) -> LightboxSession:
    return LightboxSession(items, start_index, loader, **kwargs).open()


# =====================================================================
# REMOTE SESSIONS
# =====================================================================

@dataclass
class RemoteLightbox:
    id: str
    session: LightboxSession
    loader: ClientAssetLoader
    scroll_lock: ScrollLock


class LightboxRegistry:
    """Lightbox sessions driven over HTTP, oldest evicted past ``max_sessions``."""

    def __init__(self, max_sessions: int = 500):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, RemoteLightbox]" = OrderedDict()
        self._lock = threading.RLock()

    def open(self, items: Sequence[MediaReference], start_index: int) -> RemoteLightbox:
        session_id = uuid.uuid4().hex
        loader = ClientAssetLoader()
        scroll_lock = ScrollLock()
        session = LightboxSession(
            items,
            start_index,
            loader,
            scroll_lock=scroll_lock,
            on_close=lambda: self._forget(session_id),
        )
        remote = RemoteLightbox(
            id=session_id, session=session, loader=loader, scroll_lock=scroll_lock
        )

        evicted = []
        with self._lock:
            self._sessions[session_id] = remote
            while len(self._sessions) > self.max_sessions:
                _, old = self._sessions.popitem(last=False)
                evicted.append(old)

        for old in evicted:
            logger.info("Evicting lightbox session %s", old.id)
            old.session.close()
            old.loader.discard_all()

        session.open()
        return remote

    def get(self, session_id: str) -> Optional[RemoteLightbox]:
        with self._lock:
            return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        remote = self.get(session_id)
        if remote is None:
            return False
        remote.session.close()
        return True

    def _forget(self, session_id: str) -> None:
        with self._lock:
            remote = self._sessions.pop(session_id, None)
        if remote is not None:
            remote.loader.discard_all()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
