"""vendordeps - 按 WPILib vendordep 格式下载 Maven 制品"""

__version__ = "0.3.0"

from vendordeps.core.dep import (  # noqa: E402
    ArtifactFetcher,
    BinaryPlatform,
    CppDependency,
    CppInfo,
    JavaDependency,
    JniDependency,
    PackageSpec,
    VendorDep,
)
from vendordeps.core.exceptions import VendorDepsError  # noqa: E402

__all__ = [
    "ArtifactFetcher",
    "BinaryPlatform",
    "CppDependency",
    "CppInfo",
    "JavaDependency",
    "JniDependency",
    "PackageSpec",
    "VendorDep",
    "VendorDepsError",
    "__version__",
]
