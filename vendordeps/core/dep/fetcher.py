"""vendordep 制品拉取器

职责:
- 单个制品下载：java 直接写 jar，jni / cpp 下载后安全解压
- 多镜像回退：按 maven_urls 顺序尝试，首个成功即提交
- 整份清单拉取：java / jni / cpp 三条流水线，拉取后扫描目录生成 CppInfo

回退策略:
  - TransportError / ArchiveError 视为该镜像不可用，换下一个镜像
  - ZipSecurityError / OSError / ValidationError 立即抛出，不再尝试其他镜像
  - 全部镜像失败: skip_failed_packages=True 时跳过该依赖，否则抛 NotFoundError

依赖与镜像均顺序处理；取消外层任务时已写出的部分文件不做清理。
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import IO, Any

from vendordeps.core.dep.models import (
    CppDependency,
    CppInfo,
    JavaDependency,
    JniDependency,
    VendorDep,
)
from vendordeps.core.dep.platform import BinaryPlatform
from vendordeps.core.dep.scanner import INCLUDE_DIR, LIBS_DIR, scan_artifact
from vendordeps.core.exceptions import (
    ArchiveError,
    ManifestError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from vendordeps.utils.archive import extract_zip
from vendordeps.utils.net import DEFAULT_SPOOL_MAX_SIZE, http_get

logger = logging.getLogger(__name__)

# 可换镜像重试的错误
_MIRROR_ERRORS = (TransportError, ArchiveError)


def coerce_platform(platform: BinaryPlatform | str) -> BinaryPlatform:
    """接受枚举或 classifier 字符串"""
    if isinstance(platform, BinaryPlatform):
        return platform
    try:
        return BinaryPlatform.from_str(platform)
    except ManifestError as e:
        raise ValidationError(str(e)) from e


class ArtifactFetcher:
    """vendordep 制品拉取器 - 多镜像顺序回退"""

    def __init__(
        self,
        vendordep: VendorDep,
        *,
        timeout: float | None = None,
        spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
    ) -> None:
        self.vendordep = vendordep
        self.timeout = timeout
        self.spool_max_size = spool_max_size

    async def _get(self, url: str) -> IO[bytes]:
        return await http_get(
            url, timeout=self.timeout, spool_max_size=self.spool_max_size,
        )

    async def _download_zip(self, url: str, out_dir: Path) -> list[Path]:
        with await self._get(url) as body:
            return extract_zip(body, Path(out_dir))

    # ------------------------------------------------------------------
    # 单个制品（指定镜像）
    # ------------------------------------------------------------------

    async def download_java(
        self, dep: JavaDependency, out_dir: str | Path, maven_url: str,
    ) -> Path:
        """下载 jar 到 out_dir/<artifact>-<version>.jar"""
        out = Path(out_dir)
        with await self._get(dep.get_url(maven_url)) as body:
            out.mkdir(parents=True, exist_ok=True)
            dest = out / dep.file_name()
            with open(dest, "wb") as f:
                shutil.copyfileobj(body, f)
        return dest

    async def download_jni(
        self,
        dep: JniDependency,
        out_dir: str | Path,
        maven_url: str,
        platform: BinaryPlatform | str,
        is_debug: bool = False,
    ) -> list[Path]:
        """下载 JNI 制品并解压（.jar 与 .zip 都按 zip 处理）"""
        url = dep.get_url(maven_url, coerce_platform(platform), is_debug)
        return await self._download_zip(url, Path(out_dir))

    async def download_cpp(
        self,
        dep: CppDependency,
        out_dir: str | Path,
        maven_url: str,
        platform: BinaryPlatform | str,
        is_static: bool = False,
        is_debug: bool = False,
    ) -> list[Path]:
        """下载 C++ 平台二进制包并解压"""
        url = dep.get_url(maven_url, coerce_platform(platform), is_static, is_debug)
        return await self._download_zip(url, Path(out_dir))

    async def download_cpp_headers(
        self, dep: CppDependency, out_dir: str | Path, maven_url: str,
    ) -> list[Path]:
        """下载 C++ 头文件包并解压"""
        return await self._download_zip(dep.get_headers_url(maven_url), Path(out_dir))

    # ------------------------------------------------------------------
    # 镜像回退
    # ------------------------------------------------------------------

    async def _try_mirrors(
        self, coordinate: str, attempt: Callable[[str], Awaitable[Any]],
    ) -> bool:
        """按顺序尝试全部镜像，成功返回 True，全部失败返回 False"""
        for maven_url in self.vendordep.maven_urls:
            logger.debug("尝试镜像: %s @ %s", coordinate, maven_url)
            try:
                await attempt(maven_url)
            except _MIRROR_ERRORS as e:
                logger.debug("镜像失败: %s @ %s - %s", coordinate, maven_url, e)
                continue
            logger.info(
                "已下载 %s (%s)", coordinate, maven_url,
                extra={"coordinate": coordinate, "url": maven_url},
            )
            return True
        return False

    @staticmethod
    def _exhausted(coordinate: str, skip_failed_packages: bool) -> None:
        if not skip_failed_packages:
            raise NotFoundError(coordinate)
        logger.warning(
            "所有镜像均失败，跳过: %s", coordinate,
            extra={"coordinate": coordinate},
        )

    # ------------------------------------------------------------------
    # 整份清单
    # ------------------------------------------------------------------

    async def download_all_java(
        self, out_dir: str | Path, *, skip_failed_packages: bool = False,
    ) -> list[Path]:
        """拉取全部 Java 依赖到平铺目录，返回目录下的文件（按名称排序）

        不包含 JNI 依赖。
        """
        out = Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)
        for dep in self.vendordep.java_dependencies:
            ok = await self._try_mirrors(
                dep.coordinate,
                lambda url, dep=dep: self.download_java(dep, out, url),
            )
            if not ok:
                self._exhausted(dep.coordinate, skip_failed_packages)

        files = sorted(p for p in out.iterdir() if p.is_file())
        logger.info("Java 依赖拉取完成: %s (%d 个文件)", out, len(files))
        return files

    async def download_all_jni(
        self,
        out_root: str | Path,
        platform: BinaryPlatform | str,
        *,
        is_debug: bool = False,
        skip_failed_packages: bool = False,
    ) -> CppInfo:
        """拉取全部 JNI 依赖，目录结构为 <out_root>/<artifact_id>/"""
        root = Path(out_root)
        target = coerce_platform(platform)
        committed: list[Path] = []
        for dep in self.vendordep.jni_dependencies:
            dep_path = root / dep.artifact_id
            ok = await self._try_mirrors(
                dep.coordinate,
                lambda url, dep=dep, dep_path=dep_path: self.download_jni(
                    dep, dep_path, url, target, is_debug,
                ),
            )
            if ok:
                committed.append(dep_path)
            else:
                self._exhausted(dep.coordinate, skip_failed_packages)

        info = CppInfo()
        for dep_path in committed:
            info.extend(scan_artifact(dep_path))
        logger.info(
            "JNI 依赖拉取完成: %d/%d (%s)",
            len(committed), len(self.vendordep.jni_dependencies), target.value,
        )
        return info

    async def download_all_cpp(
        self,
        out_root: str | Path,
        platform: BinaryPlatform | str,
        *,
        is_static: bool = False,
        is_debug: bool = False,
        skip_failed_packages: bool = False,
    ) -> CppInfo:
        """拉取全部 C++ 依赖，目录结构为 <out_root>/<artifact_id>/(include|libs)

        头文件与二进制分别独立做镜像回退；跳过模式下任一失败即跳过整个依赖。
        """
        root = Path(out_root)
        target = coerce_platform(platform)
        committed: list[tuple[Path, Path]] = []
        for dep in self.vendordep.cpp_dependencies:
            dep_path = root / dep.artifact_id
            header_path = dep_path / INCLUDE_DIR
            libs_path = dep_path / LIBS_DIR

            ok = await self._try_mirrors(
                dep.coordinate,
                lambda url, dep=dep, header_path=header_path:
                    self.download_cpp_headers(dep, header_path, url),
            )
            if not ok:
                self._exhausted(dep.coordinate, skip_failed_packages)
                continue

            ok = await self._try_mirrors(
                dep.coordinate,
                lambda url, dep=dep, libs_path=libs_path: self.download_cpp(
                    dep, libs_path, url, target, is_static, is_debug,
                ),
            )
            if not ok:
                self._exhausted(dep.coordinate, skip_failed_packages)
                continue
            committed.append((header_path, libs_path))

        info = CppInfo()
        for header_path, libs_path in committed:
            info.extend(scan_artifact(libs_path, include_dir=header_path))
        logger.info(
            "C++ 依赖拉取完成: %d/%d (%s)",
            len(committed), len(self.vendordep.cpp_dependencies), target.value,
        )
        return info
