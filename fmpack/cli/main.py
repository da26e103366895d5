"""
fmpack CLI 主入口

提供命令行接口，支持 pack/validate/inspect/info 等命令。
"""

import os
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..utils import configure_logging
from .commands import inspect, pack, validate


app = typer.Typer(
    name="fmpack",
    help="fmpack - Factorio mod 打包工具",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        console.print(f"fmpack v{__version__}")
        raise typer.Exit()


def verbose_callback(verbose: bool) -> None:
    """配置详细输出"""
    configure_logging(level="DEBUG" if verbose else "INFO")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        callback=verbose_callback,
        help="启用详细输出"
    )
) -> None:
    """fmpack - Factorio mod 打包工具

    使用 --help 查看可用命令的详细信息。
    """
    pass


app.command("pack", help="打包 mod 并安装到 mods 目录")(pack.pack_command)
app.command("validate", help="验证 info.json 与配置文件")(validate.validate_command)
app.command("inspect", help="查看 mod 归档内容")(inspect.inspect_command)


@app.command("info")
def info_command() -> None:
    """显示系统信息"""
    from ..pack.target import INSTALL_DIR_ENV, default_install_dir

    table = Table(title="fmpack 系统信息")
    table.add_column("项目", style="cyan")
    table.add_column("值", style="green")

    table.add_row("fmpack", __version__)
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("平台", sys.platform)
    table.add_row("默认安装目录", str(default_install_dir()))
    table.add_row(INSTALL_DIR_ENV, os.environ.get(INSTALL_DIR_ENV) or "-")
    table.add_row("CPU 核心数", str(os.cpu_count() or 1))

    console.print(table)


if __name__ == "__main__":
    app()
