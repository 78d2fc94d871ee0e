from __future__ import annotations
from typing import Optional
import logging
import threading

from cachetools import LRUCache
from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)


class ImageCache:
    """Process-wide LRU cache of decoded images keyed by absolute URL.

    Eviction is best-effort: entries can disappear whenever the LRU bound is hit
    or ``clear()`` is called, so a hit now says nothing about the next lookup.
    """

    def __init__(self, max_items: int = 256):
        self._images: LRUCache = LRUCache(maxsize=max(1, int(max_items)))
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[QImage]:
        """Get cached image by URL."""
        with self._lock:
            return self._images.get(url)

    def set(self, url: str, image: QImage) -> None:
        """Store (or overwrite) the image for URL."""
        with self._lock:
            self._images[url] = image
        logger.debug(f"Cached image for {url}")

    def remove(self, url: str) -> None:
        with self._lock:
            self._images.pop(url, None)

    def clear(self) -> None:
        """Drop every entry, e.g. under memory pressure."""
        with self._lock:
            self._images.clear()
        logger.debug("Image cache cleared")

    @property
    def max_items(self) -> int:
        return int(self._images.maxsize)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._images

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)
