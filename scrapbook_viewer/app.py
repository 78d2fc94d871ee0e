from __future__ import annotations
import platform
import sys
from pathlib import Path

from PySide6 import __version__ as PYSIDE_VERSION
from PySide6.QtWidgets import QApplication

from .core.image_cache import ImageCache
from .services import (
    ConfigService, IConfigService, IFeedService, IImageFetcher, ILogger,
    configure_services, get_service,
)
from .ui.feed_window import FeedWindow
from .ui.post_card import ImageSources


def setup_application() -> QApplication:
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Scrapbook Viewer")
    app.setApplicationVersion("1.0.0")
    app.setOrganizationName("Scrapbook Viewer")
    return app


def setup_services() -> None:
    """Set up the service container with all dependencies."""
    log_dir = Path.home() / ".scrapbook-viewer" / "logs"
    log_file = log_dir / "scrapbook-viewer.log"
    configure_services(log_file=log_file)

    logger = get_service(ILogger)
    logger.info("Scrapbook Viewer starting up")
    logger.info(f"Log file: {log_file}")
    logger.log_system_info({
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "qt_version": f"PySide6 {PYSIDE_VERSION}",
    })


def build_main_window() -> FeedWindow:
    config_service = get_service(IConfigService)
    ui_config = config_service.get_ui_config() if isinstance(config_service, ConfigService) else None

    sources = ImageSources(
        fetch=get_service(IImageFetcher).fetch,
        cache=get_service(ImageCache),
        placeholder=ui_config.placeholder_text if ui_config else "Loading…",
    )
    window = FeedWindow(get_service(IFeedService), sources, get_service(ILogger))
    if ui_config:
        window.resize(ui_config.window_width, ui_config.window_height)
    return window


def main():
    """Main application entry point."""
    app = setup_application()
    setup_services()
    logger = get_service(ILogger)

    try:
        window = build_main_window()
    except Exception as e:
        logger.error("Fatal error during application startup", exception=e)
        return 1

    window.show()
    window.load_feed()
    logger.info("Main window displayed")

    app.aboutToQuit.connect(lambda: logger.info("Application shutting down"))
    exit_code = app.exec()
    logger.info(f"Application exited with code: {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
