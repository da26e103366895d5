"""
打包上下文模块

定义打包过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..config.schema import DEFAULT_LEVEL, ModInfo

if TYPE_CHECKING:
    from .emitter import ArchiveEmitter
    from .janitor import PurgeResult

# 进度回调类型：(阶段, 当前, 总数, 消息)
ProgressCallback = Callable[[str, int, int, str], None]
EmitterFactory = Callable[..., 'ArchiveEmitter']


class PackError(Exception):
    """打包错误（致命）"""
    pass


class TargetNotFoundError(PackError):
    """安装目录不存在"""
    pass


class PurgeError(PackError):
    """清理旧版本失败"""
    pass


class EmitterError(PackError):
    """归档写入失败"""
    pass


@dataclass
class PackOptions:
    """一次打包运行的参数，由命令行与配置文件合并而来"""
    source_dir: Path
    install_dir: Optional[Path] = None
    configured_install_dir: Optional[Path] = None
    excludes: List[Path] = field(default_factory=list)
    keep_old_versions: bool = False
    level: int = DEFAULT_LEVEL
    stored: bool = False
    threads: Optional[int] = None


@dataclass
class PackContext:
    """打包上下文，包含各步骤间共享的数据"""
    mod_info: ModInfo
    options: PackOptions
    emitter_factory: EmitterFactory
    progress_callback: Optional[ProgressCallback] = None

    # 打包过程中生成的数据
    install_dir: Optional[Path] = None
    purge_result: Optional['PurgeResult'] = None
    output_removed: bool = False
    emitter: Optional['ArchiveEmitter'] = None

    pack_stats: Dict[str, Any] = field(default_factory=lambda: {
        'start_time': 0.0,
        'end_time': 0.0,
        'total_files': 0,
        'total_directories': 0,
        'total_size': 0,
        'visited': 0,
        'skipped': 0,
        'archive_size': 0,
    })

    @property
    def output_path(self) -> Path:
        """最终归档路径：<install_dir>/<name>_<version>.zip"""
        if self.install_dir is None:
            raise PackError("安装目录尚未解析")
        return self.install_dir / self.mod_info.archive_name

    def report_progress(self, stage: str, current: int, message: str = "") -> None:
        if self.progress_callback:
            self.progress_callback(stage, current, 100, message)
