"""
Per-URL image loader.

An ``ImageLoader`` turns one URL into a decoded image: it consults the shared
``ImageCache``, and on a miss runs a fetch+decode job on a ``QThreadPool``.
Results come back to the loader's own (UI) thread through a queued signal, so
every change of ``image`` and ``is_loading`` is published on that thread.
"""

from __future__ import annotations
from typing import Callable, Optional, Set
import logging
import threading

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal
from PySide6.QtGui import QImage

from .image_cache import ImageCache
from .image_codec import decode_image

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], bytes]
DecodeFn = Callable[[bytes], Optional[QImage]]


class FetchTicket:
    """Cancellation handle for a single outstanding fetch."""

    def __init__(self, generation: int):
        self.generation = generation
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()


class _FetchSignals(QObject):
    finished = Signal(object, object)  # ticket, QImage or None


# Jobs run with autoDelete off; this set keeps the Python side alive until run() returns.
_live_jobs: Set["_FetchJob"] = set()
_live_jobs_lock = threading.Lock()


def _retain(job: "_FetchJob") -> None:
    with _live_jobs_lock:
        _live_jobs.add(job)


def _release(job: "_FetchJob") -> None:
    with _live_jobs_lock:
        _live_jobs.discard(job)


class _FetchJob(QRunnable):
    """Fetch and decode one URL off the UI thread.

    Holds no reference to the loader: only the ticket and the signal object the
    result is reported through.
    """

    def __init__(self, url: str, ticket: FetchTicket, fetch: FetchFn,
                 decode: DecodeFn, signals: _FetchSignals):
        super().__init__()
        self.setAutoDelete(False)
        self._url = url
        self._ticket = ticket
        self._fetch = fetch
        self._decode = decode
        self._signals = signals

    def run(self) -> None:
        try:
            if self._ticket.is_cancelled():
                return
            image = self._fetch_and_decode()
            if self._ticket.is_cancelled():
                logger.debug(f"Fetch cancelled, dropping result for {self._url}")
                return
            try:
                self._signals.finished.emit(self._ticket, image)
            except RuntimeError:
                # loader (and its signal object) already destroyed
                logger.debug(f"Loader gone before result for {self._url} was delivered")
        finally:
            _release(self)

    def _fetch_and_decode(self) -> Optional[QImage]:
        try:
            data = self._fetch(self._url)
        except Exception as e:
            logger.debug(f"Image fetch failed for {self._url}: {e}")
            return None
        if self._ticket.is_cancelled():
            return None
        try:
            image = self._decode(data)
        except Exception as e:
            logger.debug(f"Image decode raised for {self._url}: {e}")
            return None
        if image is None:
            logger.debug(f"Could not decode {len(data)} bytes from {self._url}")
        return image


class _PendingFetch:
    """The loader's outstanding ticket and job, held apart from the loader.

    The loader's ``destroyed`` signal cancels through this object, so a loader
    that is discarded without ``close()`` still stops its fetch.
    """

    def __init__(self, pool: QThreadPool):
        self._pool = pool
        self.ticket: Optional[FetchTicket] = None
        self.job: Optional[_FetchJob] = None

    def start(self, ticket: FetchTicket, job: _FetchJob) -> None:
        self.ticket = ticket
        self.job = job
        _retain(job)
        self._pool.start(job)

    def finish(self) -> None:
        self.ticket = None
        self.job = None

    def cancel(self) -> bool:
        """Cancel the outstanding fetch; False when there was none."""
        ticket, job = self.ticket, self.job
        if ticket is None:
            return False
        ticket.cancel()
        self.finish()
        if job is not None and self._pool.tryTake(job):
            _release(job)
        return True


class ImageLoader(QObject):
    """Loads the image behind one URL, at most one fetch at a time.

    State machine: ``idle -> loading -> idle`` on success or failure, and
    ``loading -> idle`` on ``cancel()``. Failures are silent: the only
    observable outcome is an image or ``None``.
    """

    imageChanged = Signal(object)
    loadingChanged = Signal(bool)

    def __init__(self, url: str, fetch: FetchFn, cache: Optional[ImageCache] = None,
                 decode: DecodeFn = decode_image, pool: Optional[QThreadPool] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._url = url
        self._fetch = fetch
        self._cache = cache
        self._decode = decode
        self._pool = pool or QThreadPool.globalInstance()

        self._lock = threading.RLock()
        self._image: Optional[QImage] = None
        self._is_loading = False
        self._generation = 0
        self._pending = _PendingFetch(self._pool)
        self._closed = False

        self._signals = _FetchSignals(self)
        self._signals.finished.connect(self._on_fetch_finished)
        pending = self._pending
        self.destroyed.connect(lambda *_: pending.cancel())

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def url(self) -> str:
        return self._url

    @property
    def cache(self) -> Optional[ImageCache]:
        return self._cache

    @property
    def image(self) -> Optional[QImage]:
        with self._lock:
            return self._image

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._is_loading

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Start loading unless a fetch is already outstanding.

        A cache hit publishes the image synchronously without entering the
        loading state.
        """
        with self._lock:
            if self._closed or self._is_loading:
                return

            cached = self._cache.get(self._url) if self._cache is not None else None
            if cached is not None:
                logger.debug(f"Cache hit for {self._url}")
                self._set_image(cached)
                return

            self._generation += 1
            ticket = FetchTicket(self._generation)
            job = _FetchJob(self._url, ticket, self._fetch, self._decode, self._signals)
            self._set_loading(True)

            logger.debug(f"Fetching {self._url} (generation {ticket.generation})")
            self._pending.start(ticket, job)

    def cancel(self) -> None:
        """Abort the outstanding fetch, if any. Its result will be discarded."""
        with self._lock:
            if not self._pending.cancel():
                return
            logger.debug(f"Cancelled fetch for {self._url}")
            self._set_loading(False)

    def close(self) -> None:
        """Cancel any fetch and refuse further loads."""
        with self._lock:
            self.cancel()
            self._closed = True

    def __enter__(self) -> "ImageLoader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _on_fetch_finished(self, ticket: FetchTicket, image: Optional[QImage]) -> None:
        with self._lock:
            if ticket is not self._pending.ticket or ticket.is_cancelled():
                logger.debug(f"Ignoring stale fetch result for {self._url}")
                return
            self._pending.finish()

            if image is not None and self._cache is not None:
                self._cache.set(self._url, image)
            self._set_image(image)
            self._set_loading(False)

    def _set_image(self, image: Optional[QImage]) -> None:
        if image is self._image:
            return
        self._image = image
        self.imageChanged.emit(image)

    def _set_loading(self, loading: bool) -> None:
        if loading == self._is_loading:
            return
        self._is_loading = loading
        self.loadingChanged.emit(loading)
