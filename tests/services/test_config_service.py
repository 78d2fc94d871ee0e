import json

import yaml

from scrapbook_viewer.services.config_service import FEED_URL, ConfigService, NetworkConfig
from scrapbook_viewer.services.logging_service import MemoryLogger


def test_defaults_when_no_file(tmp_path):
    logger = MemoryLogger()
    service = ConfigService(logger, tmp_path)
    assert service.get_setting("network.feed_url") == FEED_URL
    assert service.get_setting("cache.max_items") == 256
    assert isinstance(service.get_network_config(), NetworkConfig)
    assert any("defaults" in e["message"] for e in logger.get_entries("INFO"))


def test_save_and_reload(tmp_path):
    service = ConfigService(MemoryLogger(), tmp_path)
    config = service.load_config()
    config["network"]["timeout_s"] = 3.5
    config["cache"]["max_items"] = 16
    assert service.save_config(config)

    reloaded = ConfigService(MemoryLogger(), tmp_path)
    assert reloaded.get_setting("network.timeout_s") == 3.5
    assert reloaded.get_cache_config().max_items == 16


def test_unknown_keys_are_ignored(tmp_path):
    (tmp_path / "config.json").write_text(
        json.dumps({"ui": {"window_width": 600, "legacy": True}, "keymap": {}}), encoding="utf-8"
    )
    service = ConfigService(MemoryLogger(), tmp_path)
    assert service.get_ui_config().window_width == 600
    assert service.get_setting("keymap") is None


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.json").write_text("{oops", encoding="utf-8")
    logger = MemoryLogger()
    service = ConfigService(logger, tmp_path)
    assert service.get_setting("cache.max_items") == 256
    assert logger.get_entries("ERROR")


def test_get_and_set_setting(tmp_path):
    logger = MemoryLogger()
    service = ConfigService(logger, tmp_path)
    service.set_setting("ui.placeholder_text", "…")
    assert service.get_setting("ui.placeholder_text") == "…"
    assert service.get_setting("ui.nope", "fallback") == "fallback"

    service.set_setting("placeholder_text", "x")
    service.set_setting("ui.nope", 1)
    service.set_setting("nope.placeholder_text", 1)
    assert len(logger.get_entries("WARNING")) == 3


def test_yaml_export_and_import(tmp_path):
    service = ConfigService(MemoryLogger(), tmp_path / "a")
    service.set_setting("network.user_agent", "Tester/2")
    export_path = tmp_path / "exported.yaml"
    assert service.export_config(export_path)
    assert yaml.safe_load(export_path.read_text(encoding="utf-8"))["network"]["user_agent"] == "Tester/2"

    other = ConfigService(MemoryLogger(), tmp_path / "b")
    assert other.import_config(export_path)
    assert other.get_setting("network.user_agent") == "Tester/2"
    assert other.config_file.exists()


def test_import_missing_file_fails(tmp_path):
    service = ConfigService(MemoryLogger(), tmp_path)
    assert not service.import_config(tmp_path / "missing.json")
