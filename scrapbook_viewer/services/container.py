"""
Dependency injection container for Scrapbook Viewer.
Manages service instances and their dependencies.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)
from pathlib import Path
import inspect
from dataclasses import dataclass

from .interfaces import IConfigService, IFeedService, IImageFetcher, ILogger
from .config_service import ConfigService
from .feed_service import FeedService
from .image_fetcher import ImageFetcher
from .logging_service import LoggingService, LogLevel
from ..core.image_cache import ImageCache

T = TypeVar("T")


@dataclass
class ServiceRegistration:
    """Registration information for a service."""

    service_type: Type
    implementation: Optional[Type] = None
    singleton: bool = True
    factory: Optional[Callable] = None


class ServiceContainer:
    """Dependency injection container resolving constructor/factory parameters by type hint."""

    def __init__(self):
        self._registrations: Dict[str, ServiceRegistration] = {}
        self._instances: Dict[str, Any] = {}
        self._building: set[str] = set()

    # ------------------------------------------------------------------
    # Registration helpers
    # ------------------------------------------------------------------
    def register_singleton(self, service_type: Type[T], implementation: Type[T]) -> "ServiceContainer":
        self._registrations[self._key(service_type)] = ServiceRegistration(service_type, implementation)
        return self

    def register_factory(self, service_type: Type[T], factory: Callable[..., T],
                         singleton: bool = True) -> "ServiceContainer":
        self._registrations[self._key(service_type)] = ServiceRegistration(
            service_type, singleton=singleton, factory=factory
        )
        return self

    def register_instance(self, service_type: Type[T], instance: T) -> "ServiceContainer":
        self._instances[self._key(service_type)] = instance
        return self

    # ------------------------------------------------------------------
    # Resolution API
    # ------------------------------------------------------------------
    def get(self, service_type: Type[T]) -> T:
        key = self._key(service_type)
        if key in self._instances:
            return self._instances[key]
        if key not in self._registrations:
            raise ValueError(f"Service {service_type.__name__} is not registered")
        if key in self._building:
            raise ValueError(f"Circular dependency detected for service {service_type.__name__}")

        registration = self._registrations[key]
        self._building.add(key)
        try:
            if registration.factory is not None:
                instance = self._call_with_dependencies(registration.factory)
            else:
                instance = self._call_with_dependencies(registration.implementation)
        finally:
            self._building.discard(key)

        if registration.singleton:
            self._instances[key] = instance
        return instance

    def is_registered(self, service_type: Type) -> bool:
        try:
            key = self._key(service_type)
        except TypeError:
            return False
        return key in self._registrations or key in self._instances

    def clear(self) -> None:
        self._registrations.clear()
        self._instances.clear()
        self._building.clear()

    def get_registered_services(self) -> List[str]:
        return sorted(set(self._registrations) | set(self._instances))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _call_with_dependencies(self, target: Callable[..., T]) -> T:
        init = target.__init__ if inspect.isclass(target) else target
        try:
            hints = get_type_hints(init)
        except Exception:
            hints = {}

        kwargs: Dict[str, Any] = {}
        for name, param in inspect.signature(init).parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            dependency = self._resolve_annotation(hints.get(name))
            if dependency is not None and self.is_registered(dependency):
                kwargs[name] = self.get(dependency)
            elif param.default is inspect.Parameter.empty:
                raise ValueError(
                    f"Cannot resolve dependency {getattr(dependency, '__name__', dependency)!r} "
                    f"for {getattr(target, '__name__', target)}.{name}"
                )
        return target(**kwargs)

    def _resolve_annotation(self, annotation: Any) -> Optional[Type]:
        """Reduce ``Optional[X]`` to ``X``; anything else non-class resolves to None."""
        if annotation is None or annotation is Any:
            return None
        if get_origin(annotation) is Union:
            args = [a for a in get_args(annotation) if a is not type(None)]  # noqa: E721
            return self._resolve_annotation(args[0]) if len(args) == 1 else None
        return annotation if isinstance(annotation, type) else None

    @staticmethod
    def _key(service_type: Type) -> str:
        if not hasattr(service_type, "__module__") or not hasattr(service_type, "__name__"):
            raise TypeError(f"Service key expects a type, got {service_type!r}")
        return f"{service_type.__module__}.{service_type.__name__}"


class ServiceContainerBuilder:
    """Builder for configuring the service container."""

    def __init__(self):
        self._container = ServiceContainer()
        self._log_file: Optional[Path] = None
        self._config_dir: Optional[Path] = None

    def configure_logging(self, log_file: Optional[Path] = None,
                          console_level: LogLevel = LogLevel.INFO) -> "ServiceContainerBuilder":
        self._log_file = log_file
        self._container.register_factory(
            ILogger, lambda: LoggingService("scrapbook_viewer", log_file, console_level)
        )
        return self

    def configure_config(self, config_dir: Optional[Path] = None) -> "ServiceContainerBuilder":
        self._config_dir = config_dir

        def config_factory(logger: ILogger) -> IConfigService:
            return ConfigService(logger, config_dir)

        self._container.register_factory(IConfigService, config_factory)
        return self

    def configure_default_services(self) -> "ServiceContainerBuilder":
        if not self._container.is_registered(ILogger):
            self.configure_logging(self._log_file)
        if not self._container.is_registered(IConfigService):
            self.configure_config(self._config_dir)

        def cache_factory(config_service: IConfigService) -> ImageCache:
            return ImageCache(config_service.get_setting("cache.max_items", 256))

        self._container.register_factory(ImageCache, cache_factory)
        self._container.register_singleton(IImageFetcher, ImageFetcher)
        self._container.register_singleton(IFeedService, FeedService)
        return self

    def add_instance(self, service_type: Type[T], instance: T) -> "ServiceContainerBuilder":
        self._container.register_instance(service_type, instance)
        return self

    def build(self) -> ServiceContainer:
        return self._container


# Global container instance
_global_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    global _global_container
    if _global_container is None:
        _global_container = ServiceContainerBuilder().configure_default_services().build()
    return _global_container


def set_container(container: Optional[ServiceContainer]) -> None:
    global _global_container
    _global_container = container


def get_service(service_type: Type[T]) -> T:
    return get_container().get(service_type)


def configure_services(log_file: Optional[Path] = None,
                       config_dir: Optional[Path] = None) -> ServiceContainer:
    container = (
        ServiceContainerBuilder()
        .configure_logging(log_file)
        .configure_config(config_dir)
        .configure_default_services()
        .build()
    )
    set_container(container)
    return container
