"""URL scheme 校验 + HTTP 下载测试"""

from __future__ import annotations

import asyncio
import io
import socket
import threading
import time
import urllib.error
import urllib.request
from typing import Any

import pytest

from vendordeps.core.exceptions import TransportError, ValidationError
from vendordeps.utils.net import download_to_spool, http_get, validate_url_scheme

URL = "https://maven.example.com/release/a/b/1.0/b-1.0.jar"


class TestValidateUrlScheme:
    def test_http_ok(self) -> None:
        validate_url_scheme("http://example.com/api")

    def test_https_ok(self) -> None:
        validate_url_scheme("https://example.com/api")

    @pytest.mark.parametrize("url", [
        "file:///etc/passwd", "ftp://evil.com/payload", "/local/path",
    ])
    def test_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError, match="不允许的 URL 协议"):
            validate_url_scheme(url)

    def test_context_in_error(self) -> None:
        with pytest.raises(ValidationError, match="dep download"):
            validate_url_scheme("file:///x", context="dep download foo")


class TestDownload:
    def test_body_returned(self, fake_maven) -> None:
        fake_maven.add(URL, b"jar-bytes")
        with download_to_spool(URL) as body:
            assert body.read() == b"jar-bytes"

    def test_large_body_spills(self, fake_maven) -> None:
        payload = b"x" * 4096
        fake_maven.add(URL, payload)
        with download_to_spool(URL, spool_max_size=1024) as body:
            assert body.read() == payload

    def test_http_404(self, fake_maven) -> None:
        with pytest.raises(TransportError, match="HTTP 404") as exc_info:
            download_to_spool(URL)
        assert exc_info.value.url == URL

    def test_error_status_on_response(self, monkeypatch: pytest.MonkeyPatch) -> None:
        class _Response(io.BytesIO):
            status = 503

        monkeypatch.setattr(urllib.request, "urlopen", lambda req, **kw: _Response(b"busy"))
        with pytest.raises(TransportError, match="HTTP 503"):
            download_to_spool(URL)

    @pytest.mark.parametrize("error", [
        urllib.error.URLError("Name or service not known"),
        socket.timeout("timed out"),
        ConnectionResetError("reset"),
    ])
    def test_transport_failures(self, monkeypatch: pytest.MonkeyPatch, error: Exception) -> None:
        def fake_urlopen(req: Any, **kw: Any) -> Any:
            raise error

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        with pytest.raises(TransportError, match="下载失败"):
            download_to_spool(URL)

    def test_timeout_only_passed_when_set(self, fake_maven) -> None:
        fake_maven.add(URL, b"x")
        download_to_spool(URL).close()
        download_to_spool(URL, timeout=2.5).close()
        assert fake_maven.timeouts == [None, 2.5]

    def test_scheme_checked_first(self, fake_maven) -> None:
        with pytest.raises(ValidationError):
            download_to_spool("ftp://maven.example.com/a.jar")
        assert fake_maven.requests == []

    def test_async_get(self, fake_maven) -> None:
        fake_maven.add(URL, b"async-bytes")

        async def _run() -> bytes:
            with await http_get(URL) as body:
                return body.read()

        assert asyncio.run(_run()) == b"async-bytes"


class _SlowResponse:
    """每次 read 休眠一段时间再返回一块数据"""

    status = 200

    def __init__(self, chunks: int, delay: float) -> None:
        self.remaining = chunks
        self.delay = delay
        self.reads = 0

    def __enter__(self) -> _SlowResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def read(self, size: int = -1) -> bytes:
        if self.remaining == 0:
            return b""
        time.sleep(self.delay)
        self.remaining -= 1
        self.reads += 1
        return b"x" * 16


class TestCancellation:
    def test_cancel_stops_transfer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        response = _SlowResponse(chunks=40, delay=0.05)
        monkeypatch.setattr(urllib.request, "urlopen", lambda req, **kw: response)

        async def _run() -> int:
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(http_get(URL), 0.2)
            return response.reads

        reads_at_cancel = asyncio.run(_run())
        # asyncio.run 返回前已等待工作线程退出
        assert reads_at_cancel < 40
        assert response.reads <= reads_at_cancel + 1

    def test_preset_event_reads_nothing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        response = _SlowResponse(chunks=3, delay=0)
        monkeypatch.setattr(urllib.request, "urlopen", lambda req, **kw: response)
        event = threading.Event()
        event.set()

        with pytest.raises(TransportError, match="下载已取消"):
            download_to_spool(URL, cancel_event=event)
        assert response.reads == 0
