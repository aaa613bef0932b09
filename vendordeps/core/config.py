"""集中配置管理

命令行层的默认值集中于此，支持从 YAML 文件加载 + 编程式覆盖。
核心模型与拉取器不读取全局配置，由调用方显式传参。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any

from vendordeps.core.dep.platform import BinaryPlatform
from vendordeps.core.exceptions import ConfigError, ManifestError
from vendordeps.utils.net import DEFAULT_SPOOL_MAX_SIZE
from vendordeps.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

WPILIB_LATEST_VERSION = "2024.3.2"
WPILIB_RELEASE_MAVEN_REPO = "https://frcmaven.wpi.edu/artifactory/release/"


@dataclass
class Config:
    """全局配置"""

    # 输出
    output_dir: str = "build/vendordeps"
    default_platform: str = BinaryPlatform.LINUX_X86_64.value

    # 下载
    http_timeout: float | None = None  # None 表示沿用 urllib 默认
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE
    skip_failed_packages: bool = False

    # WPILib 默认值
    wpilib_latest_version: str = WPILIB_LATEST_VERSION
    wpilib_release_maven_repo: str = WPILIB_RELEASE_MAVEN_REPO

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        try:
            BinaryPlatform.from_str(self.default_platform)
        except ManifestError as e:
            raise ConfigError(f"default_platform 无效: {e}") from e
        if self.spool_max_size <= 0:
            raise ConfigError(f"spool_max_size 必须为正数: {self.spool_max_size}")

    @property
    def platform(self) -> BinaryPlatform:
        return BinaryPlatform.from_str(self.default_platform)

    @classmethod
    def from_file(cls, path: str = "vendordeps.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in fields(cls)} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件 {path} 内容无效: {e}") from e
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "vendordeps.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
