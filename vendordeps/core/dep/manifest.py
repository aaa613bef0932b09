"""vendordep 清单加载

职责:
- 解析 UTF-8 JSON 文本 / 字节
- 读取本地清单文件、写回清单文件
- 从 URL 下载清单
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from vendordeps.core.dep.models import VendorDep
from vendordeps.core.exceptions import ManifestError
from vendordeps.utils.fs import atomic_write
from vendordeps.utils.net import DEFAULT_SPOOL_MAX_SIZE, http_get

logger = logging.getLogger(__name__)


def loads(content: bytes | str) -> VendorDep:
    """解析清单 JSON

    Raises:
        ManifestError: 非 UTF-8、非法 JSON、缺字段或类型不符
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ManifestError(f"清单不是合法的 UTF-8 文本: {e}") from e
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(f"清单 JSON 格式错误: {e}") from e
    return VendorDep.from_dict(data)


def dumps(vendordep: VendorDep) -> str:
    return json.dumps(vendordep.to_dict(), indent=4, ensure_ascii=False) + "\n"


def load_file(path: str | Path) -> VendorDep:
    """读取本地清单文件，错误信息附带文件路径"""
    p = Path(path)
    data = p.read_bytes()
    try:
        vendordep = loads(data)
    except ManifestError as e:
        raise ManifestError(f"{p}: {e}") from e
    logger.info("已加载清单: %s %s (%s)", vendordep.name, vendordep.version, p)
    return vendordep


def save_file(vendordep: VendorDep, path: str | Path) -> Path:
    """以 camelCase JSON 原子写入清单文件"""
    p = Path(path)
    atomic_write(p, dumps(vendordep))
    logger.info("清单已保存: %s", p)
    return p


async def from_url(
    url: str,
    *,
    timeout: float | None = None,
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
) -> VendorDep:
    """下载并解析清单

    Raises:
        ValidationError: URL 协议不是 http/https
        TransportError: 下载失败
        ManifestError: 解析失败
    """
    with await http_get(url, timeout=timeout, spool_max_size=spool_max_size) as body:
        data = body.read()
    vendordep = loads(data)
    logger.info("已下载清单: %s %s (%s)", vendordep.name, vendordep.version, url)
    return vendordep


async def load(
    source: str | Path,
    *,
    timeout: float | None = None,
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
) -> VendorDep:
    """按来源自动选择：http(s) URL 走下载，其余视为本地路径"""
    text = str(source)
    if text.startswith(("http://", "https://")):
        return await from_url(text, timeout=timeout, spool_max_size=spool_max_size)
    return load_file(source)
