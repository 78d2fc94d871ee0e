import pytest
from PySide6.QtCore import QThreadPool

from scrapbook_viewer.core.async_image import AsyncImageController
from scrapbook_viewer.core.image_cache import ImageCache
from scrapbook_viewer.core.models import Post
from scrapbook_viewer.services.interfaces import IFeedService
from scrapbook_viewer.services.logging_service import MemoryLogger
from scrapbook_viewer.ui.async_image_label import AsyncImageLabel
from scrapbook_viewer.ui.feed_window import FeedWindow
from scrapbook_viewer.ui.post_card import ImageSources, PostCard, attachment_caption

IMAGE_URL = "https://x/img.png"


def _post(post_id="p1", attachments=()):
    return Post.model_validate({
        "id": post_id,
        "user": {"id": "u1", "username": "orpheus", "streakCount": 3, "avatar": "https://x/avatar.png"},
        "text": "made a robot",
        "timestamp": 1593561600,
        "attachments": list(attachments),
    })


IMAGE_ATTACHMENT = {
    "id": "a1", "url": "https://x/full.png", "type": "image/png", "filename": "img.png",
    "thumbnails": {"large": {"url": IMAGE_URL, "width": 10, "height": 10}},
}
VIDEO_ATTACHMENT = {
    "id": "a2", "url": "https://x/clip.mp4", "type": "video/mp4", "filename": "clip.mp4",
    "thumbnails": {"large": {"url": "https://x/clip.png", "width": 10, "height": 10}},
}


class StaticFeed(IFeedService):
    def __init__(self, posts):
        self.posts = posts
        self.calls = 0

    def fetch_posts(self):
        self.calls += 1
        return list(self.posts)


@pytest.fixture
def sources(make_fetch, png_bytes, pool):
    return ImageSources(fetch=make_fetch(png_bytes), cache=ImageCache(), pool=pool)


@pytest.mark.parametrize(("count", "expected"), [(0, "0 attachments"), (1, "1 attachment"), (3, "3 attachments")])
def test_attachment_caption(count, expected):
    assert attachment_caption(count) == expected


def test_post_card_only_builds_image_attachments(qapp, sources):
    card = PostCard(_post(attachments=[IMAGE_ATTACHMENT, VIDEO_ATTACHMENT]), sources)
    try:
        assert card.caption.text() == "2 attachments"
        assert len(card.attachments.images) == 1
        label = card.attachments.images[0]
        assert label.controller.url == IMAGE_URL
        assert label.text() == "Loading…"
        # nothing is fetched until the card is on screen
        assert sources.fetch.calls == []
    finally:
        card.release()
        card.deleteLater()


def test_showing_card_fetches_avatar_and_image(qapp, sources, wait_until):
    card = PostCard(_post(attachments=[IMAGE_ATTACHMENT, VIDEO_ATTACHMENT]), sources)
    card.show()
    try:
        label = card.attachments.images[0]
        assert wait_until(lambda: label.pixmap() is not None and not label.pixmap().isNull())
        assert sorted(sources.fetch.calls) == ["https://x/avatar.png", IMAGE_URL]
        assert IMAGE_URL in sources.cache
    finally:
        card.release()
        card.close()
        card.deleteLater()


def test_hiding_card_cancels_pending_fetches(qapp, make_fetch, png_bytes, wait_until):
    import threading

    gate = threading.Event()
    pool = QThreadPool()
    sources = ImageSources(fetch=make_fetch(png_bytes, gate=gate), cache=ImageCache(), pool=pool)
    card = PostCard(_post(attachments=[IMAGE_ATTACHMENT]), sources)
    card.show()
    label = card.attachments.images[0]
    assert wait_until(lambda: label.controller.loader.is_loading)

    card.hide()
    assert not label.controller.loader.is_loading
    gate.set()
    assert pool.waitForDone(3000)
    qapp.processEvents()
    assert label.text() == "Loading…"
    assert IMAGE_URL not in sources.cache
    card.release()
    card.deleteLater()


def test_feed_window_populates_cards(qapp, sources, wait_until):
    feed = StaticFeed([_post("p1"), _post("p2", [IMAGE_ATTACHMENT])])
    window = FeedWindow(feed, sources, MemoryLogger())
    try:
        assert window.windowTitle() == "Scrapbook"
        window.load_feed()
        assert wait_until(lambda: len(window.cards) == 2 and not window.is_loading)
        assert feed.calls == 1
        assert [c.post.id for c in window.cards] == ["p1", "p2"]
    finally:
        window.close()
        window.deleteLater()


def test_feed_window_empty_feed_leaves_list_empty(qapp, sources, wait_until):
    window = FeedWindow(StaticFeed([]), sources, MemoryLogger())
    try:
        window.load_feed()
        assert wait_until(lambda: not window.is_loading)
        assert window.cards == []
    finally:
        window.close()
        window.deleteLater()


def test_closing_image_label_closes_its_loader(qapp, make_fetch, png_bytes, pool, wait_until):
    import threading

    gate = threading.Event()
    controller = AsyncImageController(IMAGE_URL, make_fetch(png_bytes, gate=gate), pool=pool)
    label = AsyncImageLabel(controller)
    label.show()
    assert wait_until(lambda: controller.loader.is_loading)

    label.close()
    gate.set()
    assert pool.waitForDone(3000)
    qapp.processEvents()

    assert controller.loader.is_closed
    assert not controller.loader.is_loading
    assert label.text() == "Loading…"
    label.deleteLater()
