import httpx
import pytest

from scrapbook_viewer.services.image_fetcher import ImageFetcher
from scrapbook_viewer.services.logging_service import NullLogger


def _fetcher(handler):
    return ImageFetcher(NullLogger(), client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_fetch_returns_body():
    fetcher = _fetcher(lambda request: httpx.Response(200, content=b"\x89PNG..."))
    assert fetcher.fetch("https://x/img.png") == b"\x89PNG..."
    assert fetcher("https://x/img.png") == b"\x89PNG..."
    assert fetcher.request_count == 2


@pytest.mark.parametrize("status", [404, 500, 304])
def test_non_success_status_raises(status):
    fetcher = _fetcher(lambda request: httpx.Response(status))
    with pytest.raises(httpx.HTTPStatusError):
        fetcher.fetch("https://x/img.png")


def test_transport_error_propagates():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(httpx.HTTPError):
        _fetcher(handler).fetch("https://x/img.png")
