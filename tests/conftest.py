"""测试共享 fixture - 假 Maven 仓库 + zip 构造 + 示例清单

fake_maven 替换 urllib.request.urlopen：已登记的 URL 返回对应字节，
未登记的 URL 返回 404，所有请求按顺序记录在 requests 中，无需真实网络。
"""

from __future__ import annotations

import io
import urllib.error
import urllib.request
import zipfile
from collections.abc import Callable
from copy import deepcopy
from typing import Any

import pytest

from vendordeps.core import config as cfgmod
from vendordeps.utils.logger import reset_logging

MIRROR_A = "https://mirror-a.example.com/release/"
MIRROR_B = "https://mirror-b.example.com/maven/"

_MANIFEST: dict[str, Any] = {
    "fileName": "Phoenix6.json",
    "name": "CTRE-Phoenix (v6)",
    "version": "24.1.0",
    "frcYear": 2024,
    "uuid": "e995de00-2c64-4df5-8831-c1441420ff19",
    "mavenUrls": [MIRROR_A],
    "jsonUrl": "https://maven.ctr-electronics.com/release/com/ctre/phoenix6/latest/Phoenix6-frc2024-latest.json",
    "conflictsWith": [
        {
            "uuid": "3fcf3402-e646-4fa6-971e-18afe8173b1a",
            "errorMessage": "The combined Phoenix-6-And-5 vendordep is no longer supported.",
            "offlineFileName": "PhoenixProAnd5.json",
        },
    ],
    "javaDependencies": [
        {"groupId": "com.ctre.phoenix6", "artifactId": "wpiapi-java", "version": "24.1.0"},
    ],
    "jniDependencies": [
        {
            "groupId": "com.ctre.phoenix6",
            "artifactId": "tools",
            "version": "24.1.0",
            "isJar": False,
            "skipInvalidPlatforms": True,
            "validPlatforms": ["windowsx86-64", "linuxx86-64", "linuxathena"],
            "simMode": "hwsim",
        },
    ],
    "cppDependencies": [
        {
            "groupId": "com.ctre.phoenix6",
            "artifactId": "wpiapi-cpp",
            "version": "24.1.0",
            "libName": "CTRE_Phoenix6_WPI",
            "headerClassifier": "headers",
            "sharedLibrary": True,
            "skipInvalidPlatforms": True,
            "binaryPlatforms": ["windowsx86-64", "linuxx86-64", "linuxathena"],
            "simMode": "hwsim",
        },
    ],
}


class _FakeResponse(io.BytesIO):
    status = 200


class FakeMaven:
    """内存中的 Maven 仓库"""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.requests: list[str] = []
        self.timeouts: list[Any] = []

    def add(self, url: str, body: bytes) -> None:
        self.files[url] = body

    def urlopen(self, request: Any, **kwargs: Any) -> _FakeResponse:
        url = request.full_url if isinstance(request, urllib.request.Request) else request
        self.requests.append(url)
        self.timeouts.append(kwargs.get("timeout"))
        if url not in self.files:
            raise urllib.error.HTTPError(url, 404, "Not Found", hdrs=None, fp=None)  # type: ignore[arg-type]
        return _FakeResponse(self.files[url])


@pytest.fixture
def fake_maven(monkeypatch: pytest.MonkeyPatch) -> FakeMaven:
    server = FakeMaven()
    monkeypatch.setattr(urllib.request, "urlopen", server.urlopen)
    return server


def build_zip(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    return build_zip


@pytest.fixture
def manifest_dict() -> dict[str, Any]:
    return deepcopy(_MANIFEST)


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch: pytest.MonkeyPatch):
    """每个用例独立的全局配置与日志器"""
    monkeypatch.setattr(cfgmod, "_current", None)
    yield
    reset_logging()
