"""Main window: a scrollable list of post cards."""

from __future__ import annotations
from typing import List, Optional

from PySide6.QtCore import QThread, Qt
from PySide6.QtWidgets import QLabel, QMainWindow, QScrollArea, QVBoxLayout, QWidget

from ..core.models import Post
from ..services.feed_service import FeedLoaderWorker
from ..services.interfaces import IFeedService, ILogger
from .post_card import ImageSources, PostCard


class FeedWindow(QMainWindow):
    def __init__(self, feed_service: IFeedService, sources: ImageSources,
                 logger: ILogger, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Scrapbook")
        self._feed_service = feed_service
        self._sources = sources
        self._logger = logger

        self._loader_thread: Optional[QThread] = None
        self._loader_worker: Optional[FeedLoaderWorker] = None
        self.cards: List[PostCard] = []

        self._list = QWidget()
        self._list_layout = QVBoxLayout(self._list)
        self._list_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self.status = QLabel("")
        self._list_layout.addWidget(self.status)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._list)
        self.setCentralWidget(scroll)

    @property
    def is_loading(self) -> bool:
        return self._loader_thread is not None

    # ------------------------------------------------------------------
    # Feed loading
    # ------------------------------------------------------------------
    def load_feed(self) -> None:
        if self._loader_thread is not None:
            self._logger.debug("Feed load already in progress")
            return
        self.status.setText("Loading posts…")
        self._loader_thread = QThread(self)
        self._loader_worker = FeedLoaderWorker(self._feed_service)
        self._loader_worker.moveToThread(self._loader_thread)
        self._loader_thread.started.connect(self._loader_worker.run)
        self._loader_worker.finished.connect(self._on_posts_loaded)
        self._loader_worker.failed.connect(self._on_posts_failed)
        self._loader_thread.start()

    def _on_posts_loaded(self, posts: List[Post]) -> None:
        self._teardown_loader_thread()
        self.status.setText("")
        self.set_posts(posts)

    def _on_posts_failed(self, message: str) -> None:
        self._teardown_loader_thread()
        self.status.setText("")
        self._logger.error(f"Feed load failed: {message}")

    def _teardown_loader_thread(self) -> None:
        if self._loader_thread is not None:
            self._loader_thread.quit()
            self._loader_thread.wait()
            self._loader_thread.deleteLater()
            self._loader_thread = None
        if self._loader_worker is not None:
            self._loader_worker.deleteLater()
            self._loader_worker = None

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------
    def set_posts(self, posts: List[Post]) -> None:
        self.clear_posts()
        for post in posts:
            card = PostCard(post, self._sources)
            self._list_layout.addWidget(card)
            self.cards.append(card)
        self._logger.info(f"Showing {len(self.cards)} posts")

    def clear_posts(self) -> None:
        for card in self.cards:
            card.release()
            self._list_layout.removeWidget(card)
            card.deleteLater()
        self.cards.clear()

    def closeEvent(self, e):
        self.clear_posts()
        self._teardown_loader_thread()
        super().closeEvent(e)
