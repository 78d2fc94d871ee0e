"""
Abstract interfaces for Scrapbook Viewer services.
These interfaces define contracts for the service components,
so the UI can be wired against fakes in tests.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..core.models import Post


class ILogger(ABC):
    """Interface for logging operations."""

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        """Log a debug message."""
        pass

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        """Log an info message."""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs) -> None:
        """Log a warning message."""
        pass

    @abstractmethod
    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        """Log an error message."""
        pass


class IConfigService(ABC):
    """Interface for configuration management."""

    @abstractmethod
    def load_config(self) -> Dict[str, Any]:
        """Load application configuration."""
        pass

    @abstractmethod
    def save_config(self, config: Dict[str, Any]) -> bool:
        """Save application configuration."""
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific setting value."""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: Any) -> None:
        """Set a specific setting value."""
        pass


class IImageFetcher(ABC):
    """Interface for raw image downloads."""

    @abstractmethod
    def fetch(self, url: str) -> bytes:
        """Return the body of a successful GET; raise on any failure."""
        pass


class IFeedService(ABC):
    """Interface for the posts feed."""

    @abstractmethod
    def fetch_posts(self) -> List[Post]:
        """Fetch and decode the feed; empty list on any failure."""
        pass
