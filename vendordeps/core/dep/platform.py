"""WPILib 二进制目标平台

枚举值即 Maven classifier 中使用的平台标识，逐字拼入制品文件名。
"""

from __future__ import annotations

from enum import Enum

from vendordeps.core.exceptions import ManifestError


class BinaryPlatform(str, Enum):
    """WPILib 支持的二进制平台"""

    LINUX_ARM32 = "linuxarm32"
    LINUX_ARM64 = "linuxarm64"
    LINUX_ATHENA = "linuxathena"
    LINUX_X86_64 = "linuxx86-64"
    OSX_UNIVERSAL = "osxuniversal"
    WINDOWS_ARM64 = "windowsarm64"
    WINDOWS_X86_64 = "windowsx86-64"
    HEADERS = "headers"

    def to_str(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, value: str) -> BinaryPlatform:
        """按 classifier 字符串解码，大小写敏感"""
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ManifestError(
                f"未知平台 '{value}'，可用: {valid}"
            ) from None
