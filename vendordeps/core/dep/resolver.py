"""Maven 坐标解析

把 (group, artifact, version, 平台修饰) 拼成完整下载 URL 与本地文件名。
纯字符串运算，不做校验也不会失败；base 约定以 "/" 结尾。

URL 模板:
  java: {base}{group/}/{artifact}/{version}/{artifact}-{version}.jar
  jni:  .../{artifact}-{version}-{platform}[debug].{jar|zip}
  cpp:  .../{artifact}-{version}-{platform}[static][debug].zip
"""

from __future__ import annotations

from vendordeps.core.dep.platform import BinaryPlatform


def _platform_str(platform: BinaryPlatform | str) -> str:
    if isinstance(platform, BinaryPlatform):
        return platform.value
    return platform


def group_path(group_id: str) -> str:
    """group 中的 "." 仅在拼 URL 时替换为 "/" """
    return group_id.replace(".", "/")


def artifact_dir_url(base: str, group_id: str, artifact_id: str, version: str) -> str:
    return f"{base}{group_path(group_id)}/{artifact_id}/{version}/"


def classifier(
    platform: BinaryPlatform | str, is_static: bool = False, is_debug: bool = False,
) -> str:
    """平台标识 + 修饰后缀，后缀顺序固定为 static 在前、debug 在后"""
    return (
        _platform_str(platform)
        + ("static" if is_static else "")
        + ("debug" if is_debug else "")
    )


def java_file_name(artifact_id: str, version: str) -> str:
    return f"{artifact_id}-{version}.jar"


def java_url(base: str, group_id: str, artifact_id: str, version: str) -> str:
    return (
        artifact_dir_url(base, group_id, artifact_id, version)
        + java_file_name(artifact_id, version)
    )


def jni_file_name(
    artifact_id: str,
    version: str,
    platform: BinaryPlatform | str,
    is_debug: bool = False,
    is_jar: bool = False,
) -> str:
    ext = "jar" if is_jar else "zip"
    return f"{artifact_id}-{version}-{classifier(platform, False, is_debug)}.{ext}"


def jni_url(
    base: str,
    group_id: str,
    artifact_id: str,
    version: str,
    platform: BinaryPlatform | str,
    is_debug: bool = False,
    is_jar: bool = False,
) -> str:
    return artifact_dir_url(base, group_id, artifact_id, version) + jni_file_name(
        artifact_id, version, platform, is_debug, is_jar,
    )


def cpp_file_name(
    artifact_id: str,
    version: str,
    platform: BinaryPlatform | str,
    is_static: bool = False,
    is_debug: bool = False,
) -> str:
    return f"{artifact_id}-{version}-{classifier(platform, is_static, is_debug)}.zip"


def cpp_url(
    base: str,
    group_id: str,
    artifact_id: str,
    version: str,
    platform: BinaryPlatform | str,
    is_static: bool = False,
    is_debug: bool = False,
) -> str:
    return artifact_dir_url(base, group_id, artifact_id, version) + cpp_file_name(
        artifact_id, version, platform, is_static, is_debug,
    )
