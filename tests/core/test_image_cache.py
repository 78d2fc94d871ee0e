from concurrent.futures import ThreadPoolExecutor

from PySide6.QtGui import QImage

from scrapbook_viewer.core.image_cache import ImageCache


def _img(w=2, h=2):
    return QImage(w, h, QImage.Format.Format_RGB888)


def test_get_missing_returns_none():
    assert ImageCache().get("https://x/none.png") is None


def test_set_get_remove():
    cache = ImageCache()
    image = _img()
    cache.set("https://x/a.png", image)
    assert cache.get("https://x/a.png") is image
    assert "https://x/a.png" in cache
    cache.remove("https://x/a.png")
    assert cache.get("https://x/a.png") is None
    # removing again is harmless
    cache.remove("https://x/a.png")


def test_set_overwrites_entry():
    cache = ImageCache()
    first, second = _img(), _img(3, 3)
    cache.set("https://x/a.png", first)
    cache.set("https://x/a.png", second)
    assert cache.get("https://x/a.png") is second
    assert len(cache) == 1


def test_bounded_cache_drops_least_recently_used():
    cache = ImageCache(max_items=2)
    cache.set("a", _img())
    cache.set("b", _img())
    cache.get("a")
    cache.set("c", _img())
    assert "b" not in cache
    assert "a" in cache and "c" in cache
    assert cache.max_items == 2


def test_clear_empties_cache():
    cache = ImageCache()
    cache.set("a", _img())
    cache.clear()
    assert len(cache) == 0


def test_concurrent_access_keeps_cache_consistent():
    cache = ImageCache(max_items=50)
    image = _img()

    def worker(i):
        for j in range(200):
            key = f"https://x/{(i * 7 + j) % 80}.png"
            cache.set(key, image)
            cache.get(key)
            if j % 5 == 0:
                cache.remove(key)

    with ThreadPoolExecutor(max_workers=8) as ex:
        list(ex.map(worker, range(8)))

    assert len(cache) <= 50
