import threading
from concurrent.futures import Future

import pytest

from app.core.lightbox import (
    AssetLoader,
    AssetLoadError,
    ClickTarget,
    ClientAssetLoader,
    Direction,
    ItemStage,
    LightboxError,
    LightboxRegistry,
    LightboxSession,
    PREVIEW_UNAVAILABLE,
    ScrollLock,
    open_lightbox,
)
from app.core.media_resolver import MediaReference


class FakeLoader(AssetLoader):
    """Hands out futures the test resolves by hand."""

    def __init__(self):
        self.requests = []

    def load(self, request):
        future = Future()
        self.requests.append((request, future))
        return future

    def current(self, session):
        for request, future in reversed(self.requests):
            if not request.prefetch and request.index == session.current_index:
                return request, future
        raise AssertionError("no tracked request for the current item")


class BrokenLoader(AssetLoader):
    def load(self, request):
        raise RuntimeError("offline")


def photo(n):
    return MediaReference(
        id=f"p{n}",
        media_type="photo",
        category="wedding",
        raw_url=f"https://drive.google.com/file/d/file{n}/preview",
        title=f"Photo {n}",
    )


def video(n):
    return MediaReference(
        id=f"v{n}",
        media_type="video",
        category="wedding",
        raw_url=f"https://youtu.be/vid{n}",
    )


@pytest.fixture()
def loader():
    return FakeLoader()


@pytest.fixture()
def five(loader):
    return open_lightbox([photo(i) for i in range(5)], 2, loader)


def load_current(session, loader, ok=True):
    _, future = loader.current(session)
    if ok:
        future.set_result(True)
    else:
        future.set_exception(AssetLoadError("404"))


# ── open ─────────────────────────────────────────────────────────────


def test_open_rejects_empty_items(loader):
    with pytest.raises(LightboxError):
        LightboxSession([], 0, loader)


@pytest.mark.parametrize("start", [-1, 3])
def test_open_rejects_out_of_range_start(loader, start):
    with pytest.raises(LightboxError):
        LightboxSession([photo(0), photo(1), photo(2)], start, loader)


def test_open_requests_current_then_neighbours(five, loader):
    indices = [r.index for r, _ in loader.requests]
    assert indices == [2, 1, 3]
    assert [r.prefetch for r, _ in loader.requests] == [False, True, True]
    assert loader.requests[0][0].url == "https://drive.google.com/thumbnail?id=file2&sz=w4000"


def test_open_wraps_neighbours(loader):
    open_lightbox([photo(i) for i in range(5)], 0, loader)
    assert [r.index for r, _ in loader.requests] == [0, 4, 1]


def test_single_item_is_requested_once(loader):
    open_lightbox([photo(0)], 0, loader)
    assert len(loader.requests) == 1


def test_starts_loading_full_resolution(five):
    view = five.view()
    assert view.stage is ItemStage.FULL_RESOLUTION_LOADING
    assert view.display_url == "https://drive.google.com/thumbnail?id=file2&sz=w800"
    assert view.counter == "3 / 5"


# ── navigation ───────────────────────────────────────────────────────


def test_navigation_wraps(five):
    assert five.navigate(Direction.PREV) == 1
    for _ in range(3):
        five.navigate(Direction.PREV)
    assert five.current_index == 3

    five.navigate(Direction.NEXT)
    assert five.current_index == 4
    assert five.navigate(Direction.NEXT) == 0


def test_navigation_resets_item_state(five, loader):
    load_current(five, loader)
    assert five.toggle_zoom()
    assert five.view().is_zoomed

    five.navigate("next")
    view = five.view()
    assert not view.is_playing
    assert not view.is_zoomed
    assert not view.full_image_loaded
    assert not view.image_error


def test_navigation_prefetches_new_neighbours(five, loader):
    loader.requests.clear()
    five.navigate(Direction.NEXT)
    assert [r.index for r, _ in loader.requests] == [3, 2, 4]


def test_select_jumps_and_validates(five):
    assert five.select(4) == 4
    with pytest.raises(LightboxError):
        five.select(5)


def test_on_navigate_is_emitted(loader):
    seen = []
    session = open_lightbox([photo(i) for i in range(3)], 0, loader, on_navigate=seen.append)
    assert seen == []

    session.navigate(Direction.PREV)
    session.select(2)
    session.select(1)
    assert seen == [2, 1]


# ── loading ──────────────────────────────────────────────────────────


def test_full_resolution_swaps_in(five, loader):
    load_current(five, loader)
    view = five.view()
    assert view.stage is ItemStage.FULL_RESOLUTION_SHOWN
    assert view.display_url == view.full_resolution_url
    assert view.can_zoom


def test_load_failure_keeps_thumbnail(five, loader):
    load_current(five, loader, ok=False)
    view = five.view()
    assert view.stage is ItemStage.LOAD_FAILED
    assert view.image_error
    assert view.display_url == view.thumbnail_url
    assert view.error_message == PREVIEW_UNAVAILABLE
    assert five.is_open


def test_stale_completion_is_discarded(five, loader):
    _, stale = loader.current(five)
    five.navigate(Direction.NEXT)

    stale.set_result(True)

    assert not five.view().full_image_loaded
    assert five.view().stage is ItemStage.FULL_RESOLUTION_LOADING


def test_stale_failure_is_discarded(five, loader):
    _, stale = loader.current(five)
    five.navigate(Direction.PREV)
    stale.set_exception(AssetLoadError("timeout"))
    assert not five.view().image_error


def test_returning_to_an_item_ignores_its_old_request(five, loader):
    _, first = loader.current(five)
    five.navigate(Direction.NEXT)
    five.navigate(Direction.PREV)

    first.set_result(True)
    assert not five.view().full_image_loaded

    load_current(five, loader)
    assert five.view().full_image_loaded


def test_prefetch_completion_touches_nothing(five, loader):
    for request, future in loader.requests:
        if request.prefetch:
            future.set_result(True)
    assert not five.view().full_image_loaded


def test_completion_after_close_is_discarded(five, loader):
    _, future = loader.current(five)
    five.close()
    future.set_result(True)
    assert not five.view().full_image_loaded


def test_refusing_loader_marks_error():
    session = open_lightbox([photo(0), photo(1)], 0, BrokenLoader())
    assert session.view().image_error
    assert session.is_open


# ── zoom & playback ──────────────────────────────────────────────────


def test_zoom_requires_full_image(five, loader):
    assert not five.toggle_zoom()
    assert not five.view().is_zoomed

    load_current(five, loader, ok=False)
    assert not five.toggle_zoom()
    assert not five.view().is_zoomed


def test_zoom_toggles(five, loader):
    load_current(five, loader)
    five.toggle_zoom()
    five.toggle_zoom()
    assert not five.view().is_zoomed


def test_play_video(loader):
    session = open_lightbox([video(0), photo(1)], 0, loader)
    view = session.view()
    assert view.stage is ItemStage.THUMBNAIL_SHOWN
    assert view.thumbnail_url == "https://img.youtube.com/vi/vid0/maxresdefault.jpg"
    assert view.player_url is None

    assert session.play_video()
    assert not session.play_video()
    assert session.view().player_url == "https://www.youtube.com/embed/vid0?autoplay=1"


def test_video_item_is_not_tracked(loader):
    open_lightbox([video(0), photo(1)], 0, loader)
    assert all(r.prefetch for r, _ in loader.requests)


def test_play_ignored_for_photos(five):
    assert not five.play_video()


def test_zoom_ignored_for_videos(loader):
    session = open_lightbox([video(0)], 0, loader)
    assert not session.toggle_zoom()


# ── input ────────────────────────────────────────────────────────────


def test_keyboard(five):
    assert five.handle_key("ArrowLeft")
    assert five.current_index == 1
    assert five.handle_key("ArrowRight")
    assert five.current_index == 2
    assert not five.handle_key("Enter")
    assert five.handle_key("Escape")
    assert not five.is_open


@pytest.mark.parametrize(
    "start,end,expected,index",
    [
        (300, 200, Direction.NEXT, 3),
        (200, 300, Direction.PREV, 1),
        (200, 240, None, 2),
        (200, 150, None, 2),
    ],
)
def test_swipe(five, start, end, expected, index):
    five.touch_start(start)
    assert five.touch_end(end) is expected
    assert five.current_index == index


def test_touch_end_without_start(five):
    assert five.touch_end(10) is None


def test_touch_waits_for_session_lock(five):
    done = threading.Event()

    def swipe():
        five.touch_start(300)
        five.touch_end(200)
        done.set()

    with five._lock:
        worker = threading.Thread(target=swipe)
        worker.start()
        assert not done.wait(0.1)
        assert five.current_index == 2

    worker.join(timeout=2)
    assert done.is_set()
    assert five.current_index == 3


def test_clicks(five):
    five.handle_click(ClickTarget.MEDIA_SURFACE)
    assert five.is_open

    five.handle_click("next")
    assert five.current_index == 3
    five.handle_click(ClickTarget.PREV)
    assert five.current_index == 2

    five.handle_click(ClickTarget.BACKGROUND)
    assert not five.is_open


def test_navigation_after_close_is_ignored(five):
    five.close()
    assert five.navigate(Direction.NEXT) == 2


# ── scroll lock ──────────────────────────────────────────────────────


def test_scroll_lock_released_on_close(loader):
    lock = ScrollLock()
    closed = []
    session = open_lightbox([photo(0)], 0, loader, scroll_lock=lock, on_close=lambda: closed.append(1))
    assert lock.locked

    session.close()
    session.close()
    assert not lock.locked
    assert closed == [1]


def test_scroll_lock_released_when_block_raises(loader):
    lock = ScrollLock()
    with pytest.raises(RuntimeError):
        with LightboxSession([photo(0)], 0, loader, scroll_lock=lock):
            assert lock.locked
            raise RuntimeError("boom")
    assert not lock.locked


def test_unopened_session_does_not_touch_lock(loader):
    lock = ScrollLock()
    LightboxSession([photo(0)], 0, loader, scroll_lock=lock).close()
    assert not lock.locked


# ── client loader & registry ─────────────────────────────────────────


def test_client_loader_round_trip():
    loader = ClientAssetLoader()
    session = open_lightbox([photo(0), photo(1), photo(2)], 1, loader)

    tickets = loader.pending()
    assert [r.index for _, r in tickets] == [1, 0, 2]

    current_ticket = tickets[0][0]
    assert loader.complete(current_ticket, ok=True)
    assert session.view().full_image_loaded
    assert not loader.complete(current_ticket, ok=True)


def test_client_loader_caps_pending():
    loader = ClientAssetLoader(max_pending=2)
    session = open_lightbox([photo(0), photo(1), photo(2)], 1, loader)
    assert len(loader.pending()) == 2
    # the cancelled request was the current item's
    assert session.view().image_error


def test_registry_open_and_close():
    registry = LightboxRegistry(max_sessions=2)
    remote = registry.open([photo(0), photo(1)], 0)
    assert registry.get(remote.id) is remote
    assert remote.scroll_lock.locked

    assert registry.close(remote.id)
    assert registry.get(remote.id) is None
    assert not remote.scroll_lock.locked
    assert not registry.close(remote.id)


def test_registry_sessions_do_not_share_scroll_lock():
    registry = LightboxRegistry()
    first = registry.open([photo(0)], 0)
    second = registry.open([photo(1)], 0)
    assert first.scroll_lock is not second.scroll_lock

    registry.close(first.id)
    assert not first.scroll_lock.locked
    assert second.scroll_lock.locked


def test_evicted_session_releases_its_scroll_lock():
    registry = LightboxRegistry(max_sessions=1)
    first = registry.open([photo(0)], 0)
    registry.open([photo(1)], 0)
    assert not first.scroll_lock.locked


def test_registry_forgets_sessions_closed_by_input():
    registry = LightboxRegistry()
    remote = registry.open([photo(0)], 0)
    remote.session.handle_key("Escape")
    assert len(registry) == 0


def test_registry_evicts_oldest():
    registry = LightboxRegistry(max_sessions=2)
    first = registry.open([photo(0)], 0)
    registry.open([photo(1)], 0)
    registry.open([photo(2)], 0)

    assert len(registry) == 2
    assert registry.get(first.id) is None
    assert not first.session.is_open
