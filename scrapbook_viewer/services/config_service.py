"""
Configuration service implementation for Scrapbook Viewer.
Handles network, cache and window settings persisted as JSON.
"""

from __future__ import annotations
from typing import Dict, Any, Optional, Type, TypeVar
from pathlib import Path
import json
import os
import yaml
from dataclasses import dataclass, asdict, field, fields

from .interfaces import IConfigService, ILogger

FEED_URL = "https://scrapbook.hackclub.com/api/posts/"

T = TypeVar("T")


@dataclass
class NetworkConfig:
    """HTTP settings shared by the feed and image fetchers."""
    feed_url: str = FEED_URL
    timeout_s: float = 15.0
    user_agent: str = "ScrapbookViewer/1.0"


@dataclass
class CacheConfig:
    max_items: int = 256


@dataclass
class UIConfig:
    """UI-related configuration."""
    window_width: int = 480
    window_height: int = 800
    placeholder_text: str = "Loading…"


@dataclass
class AppConfig:
    """Main application configuration."""
    network: NetworkConfig = field(default_factory=NetworkConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _section(cls: Type[T], data: Any) -> T:
    if not isinstance(data, dict):
        return cls()
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


class ConfigService(IConfigService):
    """Concrete implementation of configuration service."""

    def __init__(self, logger: ILogger, config_dir: Optional[Path] = None):
        self._logger = logger
        self._config_dir = config_dir or self._get_default_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._config: AppConfig = AppConfig()
        self._ensure_config_dir()
        self._load_config_from_file()

    def _get_default_config_dir(self) -> Path:
        if os.name == 'nt':
            return Path.home() / "AppData" / "Local" / "ScrapbookViewer"
        return Path.home() / ".config" / "scrapbook-viewer"

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._logger.error(f"Failed to create config directory: {self._config_dir}", exception=e)

    def _load_config_from_file(self) -> None:
        if not self._config_file.exists():
            self._logger.info("No config file found, using defaults")
            return

        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self._config = self._dict_to_config(data)
            self._logger.info(f"Loaded configuration from: {self._config_file}")
        except (OSError, ValueError, TypeError) as e:
            self._logger.error(f"Failed to load config from {self._config_file}", exception=e)
            self._config = AppConfig()

    def _dict_to_config(self, data: Dict[str, Any]) -> AppConfig:
        """Convert dictionary to AppConfig, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise TypeError(f"Config root must be a mapping, got {type(data).__name__}")
        return AppConfig(
            network=_section(NetworkConfig, data.get('network')),
            cache=_section(CacheConfig, data.get('cache')),
            ui=_section(UIConfig, data.get('ui')),
        )

    @property
    def config_file(self) -> Path:
        return self._config_file

    @property
    def config(self) -> AppConfig:
        return self._config

    def load_config(self) -> Dict[str, Any]:
        return asdict(self._config)

    def save_config(self, config: Dict[str, Any]) -> bool:
        try:
            self._config = self._dict_to_config(config)
            with open(self._config_file, 'w', encoding='utf-8') as f:
                json.dump(asdict(self._config), f, indent=2, ensure_ascii=False)
            self._logger.info(f"Saved configuration to: {self._config_file}")
            return True
        except (OSError, TypeError) as e:
            self._logger.error(f"Failed to save config to {self._config_file}", exception=e)
            return False

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific setting value using dot notation, e.g. ``network.timeout_s``."""
        value: Any = self._config
        for part in key.split('.'):
            if not hasattr(value, part):
                return default
            value = getattr(value, part)
        return value

    def set_setting(self, key: str, value: Any) -> None:
        """Set a specific setting value using dot notation."""
        parts = key.split('.')
        if len(parts) < 2:
            self._logger.warning(f"Invalid setting key format: {key}")
            return

        obj: Any = self._config
        for part in parts[:-1]:
            if not hasattr(obj, part):
                self._logger.warning(f"Setting path not found: {key}")
                return
            obj = getattr(obj, part)

        if not hasattr(obj, parts[-1]):
            self._logger.warning(f"Setting key not found: {key}")
            return
        setattr(obj, parts[-1], value)
        self._logger.debug(f"Set setting '{key}' = {value}")

    def get_network_config(self) -> NetworkConfig:
        return self._config.network

    def get_cache_config(self) -> CacheConfig:
        return self._config.cache

    def get_ui_config(self) -> UIConfig:
        return self._config.ui

    def export_config(self, export_path: Path) -> bool:
        """Export configuration to a .yaml or .json file."""
        try:
            config_dict = self.load_config()
            with open(export_path, 'w', encoding='utf-8') as f:
                if export_path.suffix.lower() in ('.yaml', '.yml'):
                    yaml.safe_dump(config_dict, f, default_flow_style=False, allow_unicode=True)
                else:
                    json.dump(config_dict, f, indent=2, ensure_ascii=False)
            self._logger.info(f"Exported configuration to: {export_path}")
            return True
        except OSError as e:
            self._logger.error(f"Failed to export config to {export_path}", exception=e)
            return False

    def import_config(self, import_path: Path) -> bool:
        """Import configuration from a .yaml or .json file and persist it."""
        if not import_path.exists():
            self._logger.error(f"Config file not found: {import_path}")
            return False
        try:
            with open(import_path, 'r', encoding='utf-8') as f:
                if import_path.suffix.lower() in ('.yaml', '.yml'):
                    config_dict = yaml.safe_load(f) or {}
                else:
                    config_dict = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            self._logger.error(f"Failed to import config from {import_path}", exception=e)
            return False

        success = self.save_config(config_dict)
        if success:
            self._logger.info(f"Imported configuration from: {import_path}")
        return success
