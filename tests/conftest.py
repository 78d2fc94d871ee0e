# tests/conftest.py
import os
import threading
import time

import cv2
import numpy as np
import pytest

# Widgets need a platform plugin even when nothing is drawn
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QThreadPool  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402


class FakeFetch:
    """Thread-safe stand-in for ImageFetcher.fetch that records every URL."""

    def __init__(self, payload=b"", gate=None, error=None):
        self.payload = payload
        self.gate = gate
        self.error = error
        self.calls = []
        self.started = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, url):
        with self._lock:
            self.calls.append(url)
        self.started.set()
        if self.gate is not None:
            self.gate.wait(5)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def pool(qapp):
    p = QThreadPool()
    p.setMaxThreadCount(4)
    yield p
    p.waitForDone(5000)


@pytest.fixture
def wait_until(qapp):
    def _wait(predicate, timeout=3.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            qapp.processEvents()
            if predicate():
                return True
            time.sleep(0.005)
        qapp.processEvents()
        return predicate()

    return _wait


@pytest.fixture
def png_bytes():
    ok, buf = cv2.imencode(".png", np.full((4, 6, 3), 200, dtype=np.uint8))
    assert ok
    return buf.tobytes()


@pytest.fixture
def make_fetch():
    return FakeFetch
