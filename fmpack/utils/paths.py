"""
路径工具

提供路径处理相关的工具函数。
"""

import os
from pathlib import Path
from typing import Union


def expand_path(path: Union[str, Path]) -> Path:
    """扩展路径（处理环境变量和用户目录）

    与 resolve 不同，这里不会把相对路径变成绝对路径。

    Args:
        path: 原始路径

    Returns:
        Path: 扩展后的路径
    """
    path = os.path.expandvars(str(path))
    path = os.path.expanduser(path)
    return Path(path)


def normalize_path(path: Union[str, Path]) -> str:
    """把路径规范化为可直接比较的字符串（绝对路径 + 大小写规范）"""
    return os.path.normcase(os.path.abspath(os.fspath(path)))


def is_within(path: Union[str, Path], parent: Union[str, Path]) -> bool:
    """判断 path 是否等于 parent 或位于 parent 之下

    两个参数都应已经过 normalize_path。
    """
    path = os.fspath(path)
    parent = os.fspath(parent)
    if path == parent:
        return True
    return path.startswith(parent.rstrip(os.sep) + os.sep)


def format_size(size_bytes: int) -> str:
    """格式化文件大小

    Args:
        size_bytes: 字节数

    Returns:
        str: 格式化的大小字符串
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    else:
        return f"{size:.1f} {units[unit_index]}"


def is_safe_filename(filename: str) -> bool:
    """检查文件名是否安全

    Args:
        filename: 文件名

    Returns:
        bool: 是否安全
    """
    if not filename or filename in (".", ".."):
        return False

    # Windows 非法字符
    illegal_chars = '<>:"/\\|?*'

    if any(char in filename for char in illegal_chars):
        return False

    if any(ord(char) < 32 for char in filename):
        return False

    # 检查保留名称（Windows）
    reserved_names = {
        'CON', 'PRN', 'AUX', 'NUL',
        'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
        'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
    }

    name_only = filename.split('.')[0].upper()
    if name_only in reserved_names:
        return False

    if len(filename) > 255:
        return False

    return True
