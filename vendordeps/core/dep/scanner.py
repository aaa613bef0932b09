"""已落盘制品目录扫描

按扩展名识别共享库文件（大小写敏感）:
  - .so:  文件名主干去掉前三个字符（约定形如 lib<name>.so）作为库名
  - .dll: 文件名主干即库名
文件所在目录作为库搜索路径候选，同一制品内按首次出现顺序去重；
库名保留重复。遍历为自顶向下，同级目录项按名称排序。
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from vendordeps.core.dep.models import CppInfo
from vendordeps.core.exceptions import WalkError

logger = logging.getLogger(__name__)

INCLUDE_DIR = "include"
LIBS_DIR = "libs"


def library_name(path: Path) -> str | None:
    """返回共享库对应的链接名，非库文件返回 None

    .so 主干不足以去掉 "lib" 前缀时（如 a.so）跳过。
    """
    if path.suffix == ".so":
        return path.stem[3:] or None
    if path.suffix == ".dll":
        return path.stem or None
    return None


def _raise_walk_error(err: OSError) -> None:
    raise WalkError(f"扫描目录失败: {err.filename}: {err}") from err


def iter_files(directory: Path) -> Iterator[Path]:
    """递归列出目录下的常规文件，顺序确定"""
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_raise_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.is_file():
                yield path


def scan_artifact(directory: Path, *, include_dir: Path | None = None) -> CppInfo:
    """扫描单个制品目录

    参数:
        directory: 递归查找库文件的目录，不存在时视为空
        include_dir: 需要记录的头文件目录（不检查是否存在）
    """
    info = CppInfo()
    if include_dir is not None:
        info.include_dirs.append(include_dir)
    if not directory.is_dir():
        logger.debug("库目录不存在，跳过: %s", directory)
        return info

    search_paths: dict[Path, None] = {}
    for path in iter_files(directory):
        name = library_name(path)
        if name is None:
            continue
        search_paths.setdefault(path.parent, None)
        info.libraries.append(name)

    info.library_search_paths.extend(search_paths)
    return info


def _artifact_dirs(root: Path) -> list[Path]:
    try:
        return sorted(p for p in root.iterdir() if p.is_dir())
    except OSError as e:
        raise WalkError(f"无法读取目录 {root}: {e}") from e


def scan_cpp_layout(root: Path) -> CppInfo:
    """扫描 <root>/<artifact>/{include,libs} 结构，include 目录无条件记录"""
    info = CppInfo()
    for artifact_dir in _artifact_dirs(root):
        info.extend(scan_artifact(
            artifact_dir / LIBS_DIR, include_dir=artifact_dir / INCLUDE_DIR,
        ))
    logger.debug(
        "C++ 目录扫描: %s -> %d 个库", root, len(info.libraries),
    )
    return info


def scan_jni_layout(root: Path) -> CppInfo:
    """扫描 <root>/<artifact>/... 结构，不产生 include 目录"""
    info = CppInfo()
    for artifact_dir in _artifact_dirs(root):
        info.extend(scan_artifact(artifact_dir))
    return info
