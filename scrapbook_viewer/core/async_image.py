"""Non-UI half of an asynchronously loaded image view."""

from __future__ import annotations
from typing import Any, Callable, Optional
import logging

from PySide6.QtCore import QObject, QThreadPool, Signal
from PySide6.QtGui import QImage

from .image_cache import ImageCache
from .image_loader import FetchFn, ImageLoader
from .models import Attachment

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "Loading…"

ImageTransform = Callable[[QImage], QImage]


class AsyncImageController(QObject):
    """Binds one URL to an ``ImageLoader`` and tracks what should be displayed.

    ``display()`` is either the (post-processed) image or the placeholder, never
    both and never neither. Visibility drives the loader: ``appear()`` loads,
    ``disappear()`` cancels, and appearing again re-triggers the load.
    """

    displayChanged = Signal(object)

    def __init__(self, url: str, fetch: FetchFn, placeholder: Any = DEFAULT_PLACEHOLDER,
                 cache: Optional[ImageCache] = None, transform: Optional[ImageTransform] = None,
                 pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        if placeholder is None:
            raise ValueError("placeholder must not be None")
        self._placeholder = placeholder
        self._transform = transform
        self._shown_image: Optional[QImage] = None
        self._visible = False

        self._loader = ImageLoader(url, fetch, cache=cache, pool=pool, parent=self)
        self._loader.imageChanged.connect(self._on_image_changed)

    @classmethod
    def for_attachment(cls, attachment: Attachment, fetch: FetchFn,
                       **kwargs) -> Optional["AsyncImageController"]:
        """Controller for an attachment's large thumbnail, or None if there is nothing to fetch."""
        if not attachment.is_image:
            return None
        url = attachment.large_url
        if url is None:
            logger.debug(f"Attachment {attachment.id} has no usable large thumbnail")
            return None
        return cls(url, fetch, **kwargs)

    @property
    def url(self) -> str:
        return self._loader.url

    @property
    def loader(self) -> ImageLoader:
        return self._loader

    @property
    def placeholder(self) -> Any:
        return self._placeholder

    @property
    def is_visible(self) -> bool:
        return self._visible

    @property
    def has_image(self) -> bool:
        return self._shown_image is not None

    def display(self) -> Any:
        return self._shown_image if self._shown_image is not None else self._placeholder

    def appear(self) -> None:
        self._visible = True
        self._loader.load()

    def disappear(self) -> None:
        self._visible = False
        self._loader.cancel()

    def close(self) -> None:
        self._visible = False
        self._loader.close()

    def _on_image_changed(self, image: Optional[QImage]) -> None:
        shown = image
        if image is not None and self._transform is not None:
            try:
                shown = self._transform(image)
            except Exception as e:
                logger.warning(f"Image transform failed for {self.url}: {e}")
                shown = None
        self._shown_image = shown
        self.displayChanged.emit(self.display())
