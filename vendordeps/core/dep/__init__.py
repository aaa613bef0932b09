"""vendordep 清单与制品拉取

- platform.py: 目标平台枚举
- models.py:   清单数据模型 + CppInfo
- resolver.py: Maven 坐标 -> URL / 文件名
- manifest.py: 清单加载与保存
- fetcher.py:  多镜像下载、解压、整份清单拉取
- scanner.py:  已落盘目录扫描
"""

from vendordeps.core.dep.fetcher import ArtifactFetcher
from vendordeps.core.dep.models import (
    CppDependency,
    CppInfo,
    JavaDependency,
    JniDependency,
    PackageSpec,
    VendorDep,
)
from vendordeps.core.dep.platform import BinaryPlatform

__all__ = [
    "ArtifactFetcher",
    "BinaryPlatform",
    "CppDependency",
    "CppInfo",
    "JavaDependency",
    "JniDependency",
    "PackageSpec",
    "VendorDep",
]
