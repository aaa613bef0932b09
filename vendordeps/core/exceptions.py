"""统一异常体系

所有业务异常继承 VendorDepsError，CLI 层据此输出友好提示。

拉取流程中的错误分两类:
- 可换镜像重试: TransportError / ArchiveError
- 立即终止: ZipSecurityError / OSError / ValidationError
"""

from __future__ import annotations


class VendorDepsError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(VendorDepsError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(VendorDepsError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ManifestError(VendorDepsError):
    """vendordep 清单 JSON 解析失败（缺字段 / 类型错误 / 非法 JSON）"""

    code = "MANIFEST_ERROR"


class TransportError(VendorDepsError):
    """HTTP 请求失败：非 2xx 状态、DNS、连接、超时"""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class ArchiveError(VendorDepsError):
    """下载内容不是合法的 zip 包"""

    code = "ARCHIVE_ERROR"


class ZipSecurityError(VendorDepsError):
    """zip 成员路径为绝对路径或越出解压根目录"""

    code = "ZIP_SECURITY_ERROR"

    def __init__(self, member: str) -> None:
        super().__init__(f"zip 成员路径越界，拒绝解压: {member!r}")
        self.member = member


class NotFoundError(VendorDepsError):
    """所有镜像均未找到该 Maven 制品"""

    code = "NOT_FOUND"

    def __init__(self, coordinate: str) -> None:
        super().__init__(f"找不到 Maven 制品 {coordinate}")
        self.coordinate = coordinate


class WalkError(VendorDepsError):
    """扫描目录查找 C++ 库文件失败"""

    code = "WALK_ERROR"
