"""CLI - vendordep 拉取与编译参数命令"""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from vendordeps.cli import friendly_errors
from vendordeps.core.config import get_config
from vendordeps.core.dep import manifest
from vendordeps.core.dep.fetcher import ArtifactFetcher, coerce_platform
from vendordeps.core.dep.models import CppInfo, VendorDep
from vendordeps.core.dep.platform import BinaryPlatform

_PLATFORMS = [p.value for p in BinaryPlatform if p is not BinaryPlatform.HEADERS]


def register(group: click.Group) -> None:
    group.add_command(show)
    group.add_command(java)
    group.add_command(jni)
    group.add_command(cpp)
    group.add_command(flags)


def _load(source: str) -> VendorDep:
    cfg = get_config()
    return asyncio.run(manifest.load(
        source, timeout=cfg.http_timeout, spool_max_size=cfg.spool_max_size,
    ))


def _fetcher(vendordep: VendorDep) -> ArtifactFetcher:
    cfg = get_config()
    return ArtifactFetcher(
        vendordep, timeout=cfg.http_timeout, spool_max_size=cfg.spool_max_size,
    )


def _echo_cpp_info(info: CppInfo, ld_path: bool) -> None:
    for arg in info.gcc_clang_args():
        click.echo(arg)
    if ld_path:
        click.echo(f"LD_LIBRARY_PATH={info.ld_library_path()}")


@click.command()
@click.argument("source")
@friendly_errors
def show(source: str) -> None:
    """显示清单摘要（SOURCE 为本地路径或 http(s) URL）"""
    vd = _load(source)
    click.echo(f"{vd.name} {vd.version} (frc{vd.frc_year})")
    click.echo(f"  uuid:     {vd.uuid}")
    click.echo(f"  fileName: {vd.file_name}")
    click.echo(f"  jsonUrl:  {vd.json_url}")
    click.echo("  mavenUrls:")
    for url in vd.maven_urls:
        click.echo(f"    {url}")
    click.echo(
        f"  依赖: java={len(vd.java_dependencies)} "
        f"jni={len(vd.jni_dependencies)} cpp={len(vd.cpp_dependencies)}"
    )
    for spec in vd.conflicts_with:
        click.echo(f"  冲突: {spec.offline_file_name} ({spec.uuid})")


@click.command()
@click.argument("source")
@click.option("--output", "-o", default=None, help="输出目录（默认取配置 output_dir）")
@click.option("--skip-failed", is_flag=True, help="所有镜像都失败时跳过该依赖")
@friendly_errors
def java(source: str, output: str | None, skip_failed: bool) -> None:
    """拉取全部 Java 依赖 jar"""
    cfg = get_config()
    fetcher = _fetcher(_load(source))
    files = asyncio.run(fetcher.download_all_java(
        Path(output or cfg.output_dir),
        skip_failed_packages=skip_failed or cfg.skip_failed_packages,
    ))
    for f in files:
        click.echo(str(f))


@click.command()
@click.argument("source")
@click.option("--output", "-o", default=None, help="输出目录（默认取配置 output_dir）")
@click.option("--platform", "-p", default=None, type=click.Choice(_PLATFORMS), help="目标平台")
@click.option("--debug", is_flag=True, help="拉取 debug 版本")
@click.option("--skip-failed", is_flag=True, help="所有镜像都失败时跳过该依赖")
@click.option("--ld-path", is_flag=True, help="同时输出 LD_LIBRARY_PATH")
@friendly_errors
def jni(
    source: str, output: str | None, platform: str | None,
    debug: bool, skip_failed: bool, ld_path: bool,
) -> None:
    """拉取全部 JNI 依赖并输出链接参数"""
    cfg = get_config()
    fetcher = _fetcher(_load(source))
    info = asyncio.run(fetcher.download_all_jni(
        Path(output or cfg.output_dir),
        coerce_platform(platform or cfg.default_platform),
        is_debug=debug,
        skip_failed_packages=skip_failed or cfg.skip_failed_packages,
    ))
    _echo_cpp_info(info, ld_path)


@click.command()
@click.argument("source")
@click.option("--output", "-o", default=None, help="输出目录（默认取配置 output_dir）")
@click.option("--platform", "-p", default=None, type=click.Choice(_PLATFORMS), help="目标平台")
@click.option("--static", "is_static", is_flag=True, help="拉取静态库版本")
@click.option("--debug", is_flag=True, help="拉取 debug 版本")
@click.option("--skip-failed", is_flag=True, help="所有镜像都失败时跳过该依赖")
@click.option("--ld-path", is_flag=True, help="同时输出 LD_LIBRARY_PATH")
@friendly_errors
def cpp(
    source: str, output: str | None, platform: str | None,
    is_static: bool, debug: bool, skip_failed: bool, ld_path: bool,
) -> None:
    """拉取全部 C++ 依赖并输出 gcc/clang 参数"""
    cfg = get_config()
    fetcher = _fetcher(_load(source))
    info = asyncio.run(fetcher.download_all_cpp(
        Path(output or cfg.output_dir),
        coerce_platform(platform or cfg.default_platform),
        is_static=is_static,
        is_debug=debug,
        skip_failed_packages=skip_failed or cfg.skip_failed_packages,
    ))
    _echo_cpp_info(info, ld_path)


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--ld-path", is_flag=True, help="同时输出 LD_LIBRARY_PATH")
@friendly_errors
def flags(directory: str, ld_path: bool) -> None:
    """扫描已有 C++ 目录结构并输出 gcc/clang 参数（不联网）"""
    _echo_cpp_info(CppInfo.from_existing(directory), ld_path)
