"""
Services package for Scrapbook Viewer.
This package contains service classes that handle networking, configuration
and logging, kept apart from the UI layer.
"""

# Interfaces
from .interfaces import IConfigService, IFeedService, IImageFetcher, ILogger

# Concrete implementations
from .config_service import ConfigService, AppConfig, CacheConfig, NetworkConfig, UIConfig
from .logging_service import LoggingService, LogLevel, NullLogger, MemoryLogger
from .image_fetcher import ImageFetcher
from .feed_service import FeedService, FeedLoaderWorker
from .container import (
    ServiceContainer, ServiceContainerBuilder,
    get_container, set_container, get_service, configure_services
)

__all__ = [
    # Interfaces
    'IConfigService', 'IFeedService', 'IImageFetcher', 'ILogger',

    # Implementations
    'ConfigService', 'LoggingService', 'ImageFetcher', 'FeedService', 'FeedLoaderWorker',

    # Configuration classes
    'AppConfig', 'CacheConfig', 'NetworkConfig', 'UIConfig',

    # Logging utilities
    'LogLevel', 'NullLogger', 'MemoryLogger',

    # Dependency injection
    'ServiceContainer', 'ServiceContainerBuilder',
    'get_container', 'set_container', 'get_service', 'configure_services',
]
