"""打包服务模块

解析安装目录、清理旧版本、遍历源码树并写入 zip 归档。
"""

from .pack_context import (
    PackContext,
    PackOptions,
    PackError,
    TargetNotFoundError,
    PurgeError,
    EmitterError,
)
from .target import INSTALL_DIR_ENV, default_install_dir, resolve_install_dir
from .janitor import PurgeResult, find_stale, purge_output, purge_stale, stale_glob
from .walker import ArchiveEntry, EntryKind, TreeWalker, walk_entries
from .emitter import ArchiveEmitter, EmitResult
from .pipeline import PackPipeline
from .packer import Packer, PackResult

__all__ = [
    # 主入口
    "Packer",
    "PackResult",
    "PackPipeline",
    "PackContext",
    "PackOptions",

    # 异常
    "PackError",
    "TargetNotFoundError",
    "PurgeError",
    "EmitterError",

    # 安装目录
    "INSTALL_DIR_ENV",
    "default_install_dir",
    "resolve_install_dir",

    # 旧版本清理
    "PurgeResult",
    "find_stale",
    "purge_stale",
    "purge_output",
    "stale_glob",

    # 遍历与归档
    "ArchiveEntry",
    "EntryKind",
    "TreeWalker",
    "walk_entries",
    "ArchiveEmitter",
    "EmitResult",
]
