"""vendordep 清单数据模型

数据类:
- PackageSpec: 冲突声明（仅携带，不参与解析）
- JavaDependency / JniDependency / CppDependency: 三种制品依赖
- VendorDep: 一个 vendor 库发布版本的完整清单
- CppInfo: C/C++ 编译所需的 include 目录、库搜索路径、库名

JSON 线上格式为 camelCase，Python 侧为 snake_case，映射一一对应且固定。
未知字段在解码时忽略，编码时不回写。
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from vendordeps.core.dep import resolver
from vendordeps.core.dep.platform import BinaryPlatform
from vendordeps.core.exceptions import ManifestError

T = TypeVar("T")

_MISSING: Any = object()


# =========================================================================
# 解码辅助：错误信息带字段路径，如 cppDependencies[1].headerClassifier
# =========================================================================


def _path(ctx: str, key: str) -> str:
    return f"{ctx}.{key}" if ctx else key


def _get(data: dict[str, Any], key: str, ctx: str, default: Any) -> Any:
    if key in data:
        return data[key]
    if default is _MISSING:
        raise ManifestError(f"缺少必填字段: {_path(ctx, key)}")
    return default


def _str(data: dict[str, Any], key: str, ctx: str, default: Any = _MISSING) -> str:
    value = _get(data, key, ctx, default)
    if not isinstance(value, str):
        raise ManifestError(
            f"字段 {_path(ctx, key)} 应为字符串，实际为 {type(value).__name__}"
        )
    return value


def _bool(data: dict[str, Any], key: str, ctx: str) -> bool:
    value = _get(data, key, ctx, _MISSING)
    if not isinstance(value, bool):
        raise ManifestError(
            f"字段 {_path(ctx, key)} 应为布尔值，实际为 {type(value).__name__}"
        )
    return value


def _list(data: dict[str, Any], key: str, ctx: str, default: Any = _MISSING) -> list[Any]:
    value = _get(data, key, ctx, default)
    if not isinstance(value, list):
        raise ManifestError(
            f"字段 {_path(ctx, key)} 应为数组，实际为 {type(value).__name__}"
        )
    return value


def _str_list(
    data: dict[str, Any], key: str, ctx: str, default: Any = _MISSING,
) -> tuple[str, ...]:
    items = _list(data, key, ctx, default)
    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise ManifestError(f"字段 {_path(ctx, key)}[{i}] 应为字符串")
    return tuple(items)


def _obj_list(
    data: dict[str, Any],
    key: str,
    ctx: str,
    decode: Callable[[dict[str, Any], str], T],
    default: Any = _MISSING,
) -> tuple[T, ...]:
    result = []
    for i, item in enumerate(_list(data, key, ctx, default)):
        item_ctx = f"{_path(ctx, key)}[{i}]"
        result.append(decode(_require_object(item, item_ctx), item_ctx))
    return tuple(result)


def _require_object(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        label = ctx or "清单顶层"
        raise ManifestError(f"{label} 应为 JSON 对象，实际为 {type(value).__name__}")
    return value


def parse_frc_year(value: Any, ctx: str = "frcYear") -> int:
    """frcYear 兼容整数与十进制数字字符串两种写法"""
    if isinstance(value, bool):
        raise ManifestError(f"字段 {ctx} 不能为布尔值")
    if isinstance(value, int):
        if value < 0:
            raise ManifestError(f"字段 {ctx} 不能为负数: {value}")
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise ManifestError(f"字段 {ctx} 应为整数或数字字符串: {value!r}")


# =========================================================================
# 清单模型
# =========================================================================


@dataclass(frozen=True)
class PackageSpec:
    """对另一个 vendordep 的引用，用于声明不兼容"""

    uuid: str
    error_message: str
    offline_file_name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any], ctx: str = "") -> PackageSpec:
        return cls(
            uuid=_str(data, "uuid", ctx),
            error_message=_str(data, "errorMessage", ctx),
            offline_file_name=_str(data, "offlineFileName", ctx),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "errorMessage": self.error_message,
            "offlineFileName": self.offline_file_name,
        }


@dataclass(frozen=True)
class JavaDependency:
    """Java 编译依赖，对应单个 jar"""

    group_id: str
    artifact_id: str
    version: str

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def file_name(self) -> str:
        return resolver.java_file_name(self.artifact_id, self.version)

    def get_url(self, maven_url: str) -> str:
        return resolver.java_url(maven_url, self.group_id, self.artifact_id, self.version)

    @classmethod
    def from_dict(cls, data: dict[str, Any], ctx: str = "") -> JavaDependency:
        return cls(
            group_id=_str(data, "groupId", ctx),
            artifact_id=_str(data, "artifactId", ctx),
            version=_str(data, "version", ctx),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "version": self.version,
        }


@dataclass(frozen=True)
class JniDependency:
    """Java 所需的原生库依赖

    is_jar 决定制品后缀是 .jar 还是 .zip；两者都是 zip 格式，下载后统一解压。
    skip_invalid_platforms / valid_platforms / sim_mode 原样携带，不参与下载逻辑。
    """

    group_id: str
    artifact_id: str
    version: str
    is_jar: bool
    skip_invalid_platforms: bool
    valid_platforms: tuple[str, ...] = ()
    sim_mode: str | None = None

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def get_url(
        self, maven_url: str, platform: BinaryPlatform | str, is_debug: bool = False,
    ) -> str:
        return resolver.jni_url(
            maven_url, self.group_id, self.artifact_id, self.version,
            platform, is_debug, self.is_jar,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], ctx: str = "") -> JniDependency:
        sim_mode = data.get("simMode")
        if sim_mode is not None and not isinstance(sim_mode, str):
            raise ManifestError(f"字段 {_path(ctx, 'simMode')} 应为字符串或 null")
        return cls(
            group_id=_str(data, "groupId", ctx),
            artifact_id=_str(data, "artifactId", ctx),
            version=_str(data, "version", ctx),
            is_jar=_bool(data, "isJar", ctx),
            skip_invalid_platforms=_bool(data, "skipInvalidPlatforms", ctx),
            valid_platforms=_str_list(data, "validPlatforms", ctx),
            sim_mode=sim_mode,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "version": self.version,
            "isJar": self.is_jar,
            "skipInvalidPlatforms": self.skip_invalid_platforms,
            "validPlatforms": list(self.valid_platforms),
        }
        if self.sim_mode is not None:
            out["simMode"] = self.sim_mode
        return out


@dataclass(frozen=True)
class CppDependency:
    """C++ 编译依赖

    头文件不随平台制品发布，而是单独一个制品，下载时用 header_classifier
    代替平台标识（通常为 "headers"）。
    """

    group_id: str
    artifact_id: str
    version: str
    header_classifier: str
    binary_platforms: tuple[str, ...] = ()

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def get_url(
        self,
        maven_url: str,
        platform: BinaryPlatform | str,
        is_static: bool = False,
        is_debug: bool = False,
    ) -> str:
        return resolver.cpp_url(
            maven_url, self.group_id, self.artifact_id, self.version,
            platform, is_static, is_debug,
        )

    def get_headers_url(self, maven_url: str) -> str:
        return self.get_url(maven_url, self.header_classifier, False, False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], ctx: str = "") -> CppDependency:
        return cls(
            group_id=_str(data, "groupId", ctx),
            artifact_id=_str(data, "artifactId", ctx),
            version=_str(data, "version", ctx),
            header_classifier=_str(data, "headerClassifier", ctx),
            binary_platforms=_str_list(data, "binaryPlatforms", ctx, default=[]),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "version": self.version,
            "headerClassifier": self.header_classifier,
        }
        if self.binary_platforms:
            out["binaryPlatforms"] = list(self.binary_platforms)
        return out


@dataclass(frozen=True)
class VendorDep:
    """vendordep 清单，加载后不可变"""

    file_name: str          # GradleRIO 写入 vendordeps/ 目录时的文件名
    name: str
    version: str            # 通常与各制品的 Maven 版本一致
    frc_year: int
    uuid: str               # 用于兼容性检查
    maven_urls: tuple[str, ...]
    json_url: str           # 清单自身的规范 URL
    conflicts_with: tuple[PackageSpec, ...] = ()
    java_dependencies: tuple[JavaDependency, ...] = ()
    jni_dependencies: tuple[JniDependency, ...] = ()
    cpp_dependencies: tuple[CppDependency, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> VendorDep:
        """从已解析的 JSON 对象构建清单

        Raises:
            ManifestError: 缺少必填字段或字段类型不符
        """
        data = _require_object(data, "")
        maven_urls = _str_list(data, "mavenUrls", "")
        if not maven_urls:
            raise ManifestError("字段 mavenUrls 至少需要一个镜像地址")
        return cls(
            file_name=_str(data, "fileName", ""),
            name=_str(data, "name", ""),
            version=_str(data, "version", ""),
            frc_year=parse_frc_year(_get(data, "frcYear", "", _MISSING)),
            uuid=_str(data, "uuid", ""),
            maven_urls=maven_urls,
            json_url=_str(data, "jsonUrl", ""),
            conflicts_with=_obj_list(
                data, "conflictsWith", "", PackageSpec.from_dict, default=[],
            ),
            java_dependencies=_obj_list(
                data, "javaDependencies", "", JavaDependency.from_dict,
            ),
            jni_dependencies=_obj_list(
                data, "jniDependencies", "", JniDependency.from_dict,
            ),
            cpp_dependencies=_obj_list(
                data, "cppDependencies", "", CppDependency.from_dict,
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "name": self.name,
            "version": self.version,
            "frcYear": self.frc_year,
            "uuid": self.uuid,
            "mavenUrls": list(self.maven_urls),
            "jsonUrl": self.json_url,
            "conflictsWith": [c.to_dict() for c in self.conflicts_with],
            "javaDependencies": [d.to_dict() for d in self.java_dependencies],
            "jniDependencies": [d.to_dict() for d in self.jni_dependencies],
            "cppDependencies": [d.to_dict() for d in self.cpp_dependencies],
        }


# =========================================================================
# C++ 编译信息
# =========================================================================


@dataclass
class CppInfo:
    """C/C++ 编译链接所需信息

    由拉取流程逐步构建，或通过 from_existing() 扫描已有目录得到。
    extend() 只做拼接，不去重。
    """

    include_dirs: list[Path] = field(default_factory=list)
    library_search_paths: list[Path] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)

    @classmethod
    def new_empty(cls) -> CppInfo:
        return cls()

    @classmethod
    def from_existing(cls, root: str | Path) -> CppInfo:
        """扫描 <root>/<artifact>/{include,libs} 目录结构"""
        from vendordeps.core.dep.scanner import scan_cpp_layout
        return scan_cpp_layout(Path(root))

    def extend(self, other: CppInfo) -> None:
        self.include_dirs.extend(other.include_dirs)
        self.library_search_paths.extend(other.library_search_paths)
        self.libraries.extend(other.libraries)

    def ld_library_path(self) -> str:
        """运行时链接用的 LD_LIBRARY_PATH 值"""
        return ":".join(str(p) for p in self.library_search_paths)

    def gcc_clang_include_dir_args(self) -> Iterator[str]:
        return (f"-I{p}" for p in self.include_dirs)

    def gcc_clang_library_search_path_args(self) -> Iterator[str]:
        return (f"-L{p}" for p in self.library_search_paths)

    def gcc_clang_library_args(self) -> Iterator[str]:
        return (f"-l{name}" for name in self.libraries)

    def gcc_clang_args(self) -> Iterator[str]:
        """include 参数、库搜索路径参数、库参数依次拼接"""
        yield from self.gcc_clang_include_dir_args()
        yield from self.gcc_clang_library_search_path_args()
        yield from self.gcc_clang_library_args()
