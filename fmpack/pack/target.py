"""
安装目录解析

优先级：显式指定 > 环境变量 FMPACK_INSTALL_DIR > 配置文件 > 平台默认目录。
安装目录必须已经存在，本工具从不创建它。
"""

import os
import sys
from pathlib import Path
from typing import Mapping, Optional, Union

from ..utils.logging import LogStage, debug, warning
from ..utils.paths import expand_path
from .pack_context import TargetNotFoundError


INSTALL_DIR_ENV = "FMPACK_INSTALL_DIR"


def default_install_dir(
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """返回当前平台下 Factorio 的默认 mods 目录

    Args:
        platform: 平台标识，默认 sys.platform
        environ: 环境变量映射，默认 os.environ
        home: 用户目录，默认 Path.home()

    Returns:
        Path: 默认安装目录；未知平台回退到当前工作目录
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ
    home = home or Path.home()

    if platform.startswith("linux"):
        return home / ".factorio" / "mods"

    if platform in ("win32", "cygwin"):
        appdata = environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
        return base / "Factorio" / "mods"

    if platform == "darwin":
        return home / "Library" / "Application Support" / "factorio" / "mods"

    warning(f"未知平台 {platform!r}，使用当前目录作为安装目录", stage=LogStage.TARGET)
    return Path(".")


def resolve_install_dir(
    override: Optional[Union[str, Path]] = None,
    *,
    configured: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[Path] = None,
) -> Path:
    """解析安装目录并确认其存在

    Args:
        override: 显式指定的安装目录（命令行参数），优先级最高
        configured: 配置文件中的安装目录，优先级低于环境变量
        environ: 环境变量映射，默认 os.environ
        platform: 平台标识，默认 sys.platform
        home: 用户目录，默认 Path.home()

    Returns:
        Path: 已存在的安装目录

    Raises:
        TargetNotFoundError: 目录不存在或不是目录
    """
    environ = os.environ if environ is None else environ

    if override is not None and str(override):
        install_dir = expand_path(override)
        debug(f"使用指定的安装目录: {install_dir}", stage=LogStage.TARGET)
    elif environ.get(INSTALL_DIR_ENV):
        install_dir = expand_path(environ[INSTALL_DIR_ENV])
        debug(f"使用环境变量 {INSTALL_DIR_ENV}: {install_dir}", stage=LogStage.TARGET)
    elif configured is not None and str(configured):
        install_dir = expand_path(configured)
        debug(f"使用配置文件中的安装目录: {install_dir}", stage=LogStage.TARGET)
    else:
        install_dir = default_install_dir(platform, environ, home)
        debug(f"使用平台默认安装目录: {install_dir}", stage=LogStage.TARGET)

    if not install_dir.exists():
        raise TargetNotFoundError(f"安装目录不存在: {install_dir}")

    if not install_dir.is_dir():
        raise TargetNotFoundError(f"安装路径不是目录: {install_dir}")

    return install_dir
