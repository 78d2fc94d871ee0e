"""
Feed service: one-shot GET of the posts endpoint plus JSON decode.
Failures are logged and produce an empty feed; there is no retry.
"""

from __future__ import annotations
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError
from PySide6.QtCore import QObject, Signal

from .interfaces import IFeedService, IConfigService, ILogger
from .config_service import NetworkConfig
from ..core.models import Post

_POSTS = TypeAdapter(List[Post])


class FeedService(IFeedService):
    """Concrete implementation of the feed service."""

    def __init__(self, logger: ILogger, config_service: Optional[IConfigService] = None,
                 client: Optional[httpx.Client] = None):
        self._logger = logger
        network = config_service.get_setting("network") if config_service else None
        if not isinstance(network, NetworkConfig):
            network = NetworkConfig()
        self._feed_url = network.feed_url
        self._client = client or httpx.Client(
            timeout=network.timeout_s,
            follow_redirects=True,
            headers={"User-Agent": network.user_agent, "Accept": "application/json"},
        )

    @property
    def feed_url(self) -> str:
        return self._feed_url

    def fetch_posts(self) -> List[Post]:
        try:
            response = self._client.get(self._feed_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error(f"Feed request to {self._feed_url} failed", exception=e)
            return []

        try:
            posts = _POSTS.validate_json(response.content)
        except ValidationError as e:
            self._logger.error("Failed to decode feed", exception=e, errors=e.error_count())
            return []

        self._logger.info(f"Fetched {len(posts)} posts")
        return posts


class FeedLoaderWorker(QObject):
    """Background worker that fetches the feed for the UI thread."""

    finished = Signal(object)  # List[Post]
    failed = Signal(str)

    def __init__(self, feed_service: IFeedService):
        super().__init__()
        self._feed_service = feed_service

    def run(self):
        try:
            posts = self._feed_service.fetch_posts()
        except Exception as exc:  # pragma: no cover - services are expected to absorb errors
            self.failed.emit(str(exc))
            return
        self.finished.emit(posts)
