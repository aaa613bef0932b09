"""网络工具 - URL 安全校验 + HTTP 下载

下载走 urllib.request，阻塞调用通过 asyncio.to_thread 放到工作线程，
对调用方暴露 async 接口。响应体写入 SpooledTemporaryFile：
小于 spool_max_size 时留在内存，超过后自动落盘，避免大制品占满内存。
"""

from __future__ import annotations

import asyncio
import http.client
import logging
import tempfile
import threading
import urllib.error
import urllib.request
from typing import IO, Any
from urllib.parse import urlparse

from vendordeps.core.exceptions import TransportError, ValidationError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))
_USER_AGENT = "vendordeps-python"
_CHUNK_SIZE = 64 * 1024

DEFAULT_SPOOL_MAX_SIZE = 16 * 1024 * 1024


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def download_to_spool(
    url: str,
    *,
    timeout: float | None = None,
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
    cancel_event: threading.Event | None = None,
) -> IO[bytes]:
    """同步 GET 下载，返回已 seek(0) 的临时文件对象，由调用方负责 close

    timeout 为 None 时不传给 urlopen，沿用 urllib 默认行为。
    cancel_event 被置位后，下一次读取前中止传输。

    Raises:
        ValidationError: URL 协议不合法（不发起请求）
        TransportError: 非 2xx 状态、DNS/连接失败、超时、响应截断、已取消
    """
    validate_url_scheme(url, context="download")
    request = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    kwargs: dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout

    spool = tempfile.SpooledTemporaryFile(max_size=spool_max_size)
    try:
        _copy_response(request, spool, kwargs, cancel_event)
    except Exception:
        spool.close()
        raise
    spool.seek(0)
    return spool


def _copy_response(
    request: urllib.request.Request,
    spool: IO[bytes],
    kwargs: dict[str, Any],
    cancel_event: threading.Event | None,
) -> None:
    url = request.full_url
    try:
        with urllib.request.urlopen(request, **kwargs) as resp:  # nosec B310
            status = getattr(resp, "status", None) or 200
            if status >= 400:
                raise TransportError(f"HTTP {status}: {url}", url=url)
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise TransportError(f"下载已取消: {url}", url=url)
                chunk = resp.read(_CHUNK_SIZE)
                if not chunk:
                    break
                spool.write(chunk)
    except urllib.error.HTTPError as e:
        raise TransportError(f"HTTP {e.code}: {url}", url=url) from e
    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        raise TransportError(f"下载失败: {url} - {e}", url=url) from e


class _Transfer:
    """工作线程与等待方之间的取消状态

    等待方被取消时置位 event；线程在两次读取之间检查 event 并中止。
    线程恰好在取消前完成时，由等待方关闭已下载的临时文件。
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.event = threading.Event()
        self._lock = threading.Lock()
        self._body: IO[bytes] | None = None

    def finish(self, body: IO[bytes]) -> IO[bytes]:
        with self._lock:
            if self.event.is_set():
                body.close()
                raise TransportError(f"下载已取消: {self.url}", url=self.url)
            self._body = body
        return body

    def cancel(self) -> None:
        with self._lock:
            self.event.set()
            if self._body is not None:
                self._body.close()


async def http_get(
    url: str,
    *,
    timeout: float | None = None,
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
) -> IO[bytes]:
    """异步 GET 下载，语义同 download_to_spool

    取消等待中的任务会同时中止工作线程中的传输，已读取的数据随临时文件丢弃。
    """
    logger.debug("GET %s", url)
    transfer = _Transfer(url)

    def _run() -> IO[bytes]:
        return transfer.finish(download_to_spool(
            url, timeout=timeout, spool_max_size=spool_max_size,
            cancel_event=transfer.event,
        ))

    try:
        return await asyncio.to_thread(_run)
    except asyncio.CancelledError:
        transfer.cancel()
        logger.debug("下载已取消: %s", url)
        raise
