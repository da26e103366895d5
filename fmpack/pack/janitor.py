"""
旧版本清理

在安装目录中查找同名 mod 的已打包版本（任意版本号）并删除，
以及写入前对最终输出路径的清理。
"""

import fnmatch
import glob
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from ..utils.logging import LogStage, info, warning
from .pack_context import PurgeError


# 形如 1.2.3 的版本号
VERSION_GLOB = "*[0-9].*[0-9].*[0-9].zip"


@dataclass
class PurgeResult:
    """清理结果"""
    removed: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def stale_pattern(mod_name: str) -> str:
    """匹配同名 mod 任意版本归档的文件名模式

    mod 名称中的 glob 元字符按字面匹配。
    """
    return f"{glob.escape(mod_name)}_{VERSION_GLOB}"


def stale_glob(target: Union[str, Path], mod_name: str) -> str:
    """完整的 glob 模式：<target>/<mod_name>_*[0-9].*[0-9].*[0-9].zip"""
    return os.path.join(glob.escape(os.fspath(target)), stale_pattern(mod_name))


def find_stale(target: Union[str, Path], mod_name: str) -> List[Path]:
    """列出安装目录中匹配的旧版本（按名称排序）

    Raises:
        PurgeError: 无法枚举安装目录
    """
    target = Path(target)
    pattern = stale_pattern(mod_name)

    try:
        with os.scandir(target) as entries:
            names = [entry.name for entry in entries]
    except OSError as e:
        raise PurgeError(f"无法枚举安装目录 {target}: {e}") from e

    return [target / name for name in sorted(names) if fnmatch.fnmatch(name, pattern)]


def purge_stale(target: Union[str, Path], mod_name: str) -> PurgeResult:
    """删除安装目录中同名 mod 的所有已打包版本

    匹配项不是普通文件时只报告并跳过；删除普通文件失败则中止。

    Args:
        target: 安装目录
        mod_name: mod 名称（不含版本号）

    Returns:
        PurgeResult: 已删除与已跳过的路径

    Raises:
        PurgeError: 枚举或删除失败
    """
    result = PurgeResult()

    for stale in find_stale(target, mod_name):
        info(f"删除旧版本: {stale}", stage=LogStage.PURGE)

        if not stale.is_file():
            warning(f"无法删除 {stale}: 不是普通文件，已跳过", stage=LogStage.PURGE)
            result.skipped.append(stale)
            continue

        try:
            stale.unlink()
        except OSError as e:
            raise PurgeError(f"删除 {stale} 失败: {e}") from e
        result.removed.append(stale)

    return result


def purge_output(output_path: Union[str, Path]) -> bool:
    """写入前删除最终输出路径上已存在的条目

    与 purge_stale 不同，这里遇到目录会尝试 rmdir（目录非空时失败）。

    Returns:
        bool: 是否删除了已有条目

    Raises:
        PurgeError: 删除失败
    """
    output_path = Path(output_path)

    if not os.path.lexists(output_path):
        return False

    info(f"{output_path} 已存在，正在删除", stage=LogStage.PURGE)

    try:
        if output_path.is_dir() and not output_path.is_symlink():
            output_path.rmdir()
        else:
            output_path.unlink()
    except OSError as e:
        raise PurgeError(f"删除 {output_path} 失败: {e}") from e

    return True
