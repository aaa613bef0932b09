"""vendordeps 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import functools
import os
from collections.abc import Callable
from typing import Any

import click

from vendordeps import __version__
from vendordeps.core.config import init_config
from vendordeps.core.exceptions import VendorDepsError
from vendordeps.utils.logger import setup_logging


def friendly_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """把业务异常转换为 click 错误输出（退出码 1），不打印堆栈"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except VendorDepsError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e
        except OSError as e:
            raise click.ClickException(f"[IO_ERROR] {e}") from e

    return wrapper


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", default="vendordeps.yml", help="配置文件路径")
@friendly_errors
def main(config: str) -> None:
    """vendordeps - 下载 WPILib vendordep 制品并生成编译参数"""
    setup_logging(
        level=os.getenv("VENDORDEPS_LOG_LEVEL", "INFO"),
        json_output=os.getenv("VENDORDEPS_LOG_JSON", "") == "1",
    )
    init_config(config)


# 注册各领域子命令
from vendordeps.cli.cmd_deps import register as _reg_deps  # noqa: E402

_reg_deps(main)
