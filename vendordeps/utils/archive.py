"""zip 安全解压

先校验全部成员路径，再逐个写盘：只要有一个成员越界，整个包都不落盘。
目录条目直接跳过，父目录在写文件时按需创建。
"""

from __future__ import annotations

import logging
import shutil
import zipfile
import zlib
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import IO

from vendordeps.core.exceptions import ArchiveError, ZipSecurityError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024

# zipfile 读取成员时可能抛出的格式类错误
_MEMBER_READ_ERRORS = (
    zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError,
)


def enclosed_parts(member: str) -> tuple[str, ...]:
    """把 zip 成员名规整为相对路径分量

    - 反斜杠视为分隔符
    - 绝对路径、带盘符路径、含 NUL 的名字直接拒绝
    - ".." 只允许回退到已进入的子目录，越过根目录即拒绝

    Raises:
        ZipSecurityError: 成员路径不能安全地落在解压根目录内
    """
    name = member.replace("\\", "/")
    if "\x00" in name or name.startswith("/") or PureWindowsPath(name).drive:
        raise ZipSecurityError(member)

    parts: list[str] = []
    for part in PurePosixPath(name).parts:
        if part == "..":
            if not parts:
                raise ZipSecurityError(member)
            parts.pop()
        elif part not in ("", "."):
            parts.append(part)
    return tuple(parts)


def _plan(zf: zipfile.ZipFile, root: Path) -> list[tuple[zipfile.ZipInfo, Path]]:
    """计算每个文件成员的落盘路径，任何越界都在写盘前暴露"""
    plan: list[tuple[zipfile.ZipInfo, Path]] = []
    for info in zf.infolist():
        # Windows 打包工具可能用反斜杠结尾标记目录
        if info.is_dir() or info.filename.endswith("\\"):
            continue
        parts = enclosed_parts(info.filename)
        if not parts:
            continue
        target = root.joinpath(*parts)
        if not target.resolve().is_relative_to(root):
            # 已存在的符号链接可能把路径带出根目录
            raise ZipSecurityError(info.filename)
        plan.append((info, target))
    return plan


def extract_zip(source: IO[bytes] | Path, out_dir: Path) -> list[Path]:
    """把 zip 解压到 out_dir，返回写出的文件路径（按包内顺序）

    Raises:
        ArchiveError: 不是合法 zip，或成员数据损坏
        ZipSecurityError: 存在越界成员（此时不写任何文件）
        OSError: 写盘失败
    """
    try:
        zf = zipfile.ZipFile(source)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError) as e:
        raise ArchiveError(f"不是合法的 zip 包: {e}") from e

    root = Path(out_dir).resolve()
    written: list[Path] = []
    with zf:
        plan = _plan(zf, root)
        for info, target in plan:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as dst:
                try:
                    with zf.open(info) as src:
                        shutil.copyfileobj(src, dst, _CHUNK_SIZE)
                except _MEMBER_READ_ERRORS as e:
                    raise ArchiveError(
                        f"zip 成员损坏: {info.filename} - {e}"
                    ) from e
            written.append(target)

    logger.debug("解压完成: %d 个文件 -> %s", len(written), root)
    return written
