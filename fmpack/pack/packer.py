"""
打包器主类

对外的统一入口：给定 mod 元数据与打包参数，执行完整的打包管道。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..config.schema import ModInfo
from .emitter import ArchiveEmitter
from .pack_context import EmitterFactory, PackContext, PackError, PackOptions, ProgressCallback
from .pipeline import PackPipeline


@dataclass
class PackResult:
    """打包结果"""
    success: bool
    output_path: Optional[Path] = None
    output_size: Optional[int] = None
    pack_time: Optional[float] = None
    stats: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


class Packer:
    """mod 打包器

    归档写入器以工厂形式注入，便于测试时替换。
    """

    def __init__(self, emitter_factory: EmitterFactory = ArchiveEmitter,
                 pipeline: Optional[PackPipeline] = None):
        self.emitter_factory = emitter_factory
        self.pipeline = pipeline or PackPipeline()

    def pack(
        self,
        mod_info: ModInfo,
        options: PackOptions,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> PackResult:
        """打包 mod

        Args:
            mod_info: mod 元数据
            options: 打包参数
            progress_callback: 进度回调函数

        Returns:
            PackResult: 打包结果，失败时 success 为 False 且带有错误信息
        """
        context = PackContext(
            mod_info=mod_info,
            options=options,
            emitter_factory=self.emitter_factory,
            progress_callback=progress_callback,
        )

        try:
            self.pipeline.execute(context)
        except PackError as e:
            return PackResult(success=False, stats=context.pack_stats, error=str(e))

        stats = context.pack_stats
        return PackResult(
            success=True,
            output_path=context.output_path,
            output_size=stats['archive_size'],
            pack_time=stats['end_time'] - stats['start_time'],
            stats=stats,
        )
