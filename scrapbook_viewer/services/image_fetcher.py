"""
HTTP image fetcher used by the image loaders.
One GET per call; any transport error or non-2xx status raises.
"""

from __future__ import annotations
from typing import Optional
import threading

import httpx

from .interfaces import IImageFetcher, IConfigService, ILogger
from .config_service import NetworkConfig

ACCEPT_IMAGES = "image/png,image/jpeg,image/webp,image/gif,*/*;q=0.5"


class ImageFetcher(IImageFetcher):
    """Thread-safe fetcher sharing one ``httpx.Client`` across pool workers."""

    def __init__(self, logger: ILogger, config_service: Optional[IConfigService] = None,
                 client: Optional[httpx.Client] = None):
        self._logger = logger
        network = config_service.get_setting("network") if config_service else None
        if not isinstance(network, NetworkConfig):
            network = NetworkConfig()
        self._timeout = network.timeout_s
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=network.timeout_s,
            follow_redirects=True,
            headers={"User-Agent": network.user_agent, "Accept": ACCEPT_IMAGES},
        )
        self._lock = threading.Lock()
        self._requests = 0

    @property
    def request_count(self) -> int:
        with self._lock:
            return self._requests

    def fetch(self, url: str) -> bytes:
        with self._lock:
            self._requests += 1
        self._logger.debug(f"GET {url}")
        response = self._client.get(url, timeout=self._timeout)
        if not response.is_success:
            self._logger.debug("Image request failed", url=url, status=response.status_code)
            response.raise_for_status()
        return response.content

    __call__ = fetch

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
