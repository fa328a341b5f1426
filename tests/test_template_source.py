import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import httpx
import pytest

from crp_tools.services.manifest.errors import RenderError, TemplateFetchError
from crp_tools.services.manifest.template_source import TemplateSource

TEMPLATE_URL = "https://templates.test/template.docx"


class RecordingTransport(httpx.MockTransport):
    def __init__(self, status_code: int = 200, content: bytes = b"PK-template") -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.content = content
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)


def test_fetch_downloads_template():
    transport = RecordingTransport()
    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=0, transport=transport)

    assert source.fetch() == b"PK-template"
    assert str(transport.requests[0].url) == TEMPLATE_URL


def test_fetch_reuses_cached_template():
    transport = RecordingTransport()
    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=300, transport=transport)

    source.fetch()
    source.fetch()

    assert len(transport.requests) == 1

    source.clear()
    source.fetch()

    assert len(transport.requests) == 2


def test_cache_can_be_disabled():
    transport = RecordingTransport()
    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=0, transport=transport)

    source.fetch()
    source.fetch()

    assert len(transport.requests) == 2


@pytest.mark.parametrize("status_code", [404, 500, 503])
def test_http_error_status_raises(status_code):
    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=0, transport=RecordingTransport(status_code=status_code))

    with pytest.raises(TemplateFetchError, match=str(status_code)):
        source.fetch()


def test_network_error_raises_render_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=0, transport=httpx.MockTransport(handler))

    with pytest.raises(RenderError):
        source.fetch()


def test_empty_response_raises():
    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=0, transport=RecordingTransport(content=b""))

    with pytest.raises(TemplateFetchError):
        source.fetch()


def test_failed_fetch_is_not_cached():
    transport = RecordingTransport(status_code=503)
    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=300, transport=transport)

    with pytest.raises(TemplateFetchError):
        source.fetch()
    transport.status_code = 200
    assert source.fetch() == b"PK-template"


def test_local_file_takes_precedence(tmp_path: Path):
    template_path = tmp_path / "template.docx"
    template_path.write_bytes(b"local-template")
    transport = RecordingTransport()
    source = TemplateSource(url=TEMPLATE_URL, path=template_path, cache_seconds=0, transport=transport)

    assert source.fetch() == b"local-template"
    assert transport.requests == []
    assert source.check_health() is True


def test_missing_local_file_raises(tmp_path: Path):
    source = TemplateSource(path=tmp_path / "missing.docx", cache_seconds=0)

    with pytest.raises(TemplateFetchError):
        source.fetch()
    assert source.check_health() is False


def test_check_health_uses_head_request():
    transport = RecordingTransport()
    source = TemplateSource(url=TEMPLATE_URL, transport=transport)

    assert source.check_health() is True
    assert transport.requests[0].method == "HEAD"


def test_check_health_reports_unreachable_template():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    source = TemplateSource(url=TEMPLATE_URL, transport=httpx.MockTransport(handler))

    assert source.check_health() is False


def test_uncached_fetches_run_concurrently():
    # Each download waits for all the others; serialized fetches break the barrier.
    barrier = threading.Barrier(4, timeout=5)

    def handler(request: httpx.Request) -> httpx.Response:
        barrier.wait()
        return httpx.Response(200, content=b"PK-template")

    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=0, transport=httpx.MockTransport(handler))

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = [future.result() for future in [pool.submit(source.fetch) for _ in range(4)]]

    assert results == [b"PK-template"] * 4


def test_concurrent_fetches_fill_the_cache():
    barrier = threading.Barrier(2, timeout=5)
    transport = RecordingTransport()
    source = TemplateSource(url=TEMPLATE_URL, cache_seconds=300, transport=transport)

    def fetch_together() -> bytes:
        barrier.wait()
        return source.fetch()

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: fetch_together(), range(2)))

    assert results == [b"PK-template"] * 2
    source.fetch()
    assert len(transport.requests) <= 2
