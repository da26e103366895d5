"""
归档写入步骤模块

先写入同目录下的临时文件，成功后再原子替换为最终输出，
失败时删除临时文件，最终路径上不会留下残缺的归档。
"""

import os
from pathlib import Path

from ...utils import format_size
from ...utils.logging import debug, info, success, LogStage
from fmpack.pack.pack_context import EmitterError, PackContext, PackError
from .pack_step import PackStep


PARTIAL_SUFFIX = ".part"


class WriteStep(PackStep):
    """写入归档文件步骤"""

    def __init__(self):
        super().__init__("write", "写入归档文件")

    def get_progress_range(self) -> tuple[int, int]:
        return (40, 100)

    def execute(self, context: PackContext) -> None:
        if context.emitter is None:
            raise PackError("没有可写入的归档条目")

        output_path = context.output_path
        partial_path = output_path.with_name(output_path.name + PARTIAL_SUFFIX)

        info(f"写入 {len(context.emitter)} 个条目到 {output_path}", stage=LogStage.WRITE)
        context.report_progress("写入归档文件", self.get_progress_range()[0], output_path.name)

        try:
            with open(partial_path, "wb") as sink:
                result = context.emitter.write(sink)
            os.replace(partial_path, output_path)
        except OSError as e:
            self._discard(partial_path)
            raise EmitterError(f"无法写入 {output_path}: {e}") from e
        except BaseException:
            self._discard(partial_path)
            raise

        archive_size = output_path.stat().st_size
        # 以实际写入的条目为准，写入时被跳过的文件不计入
        context.pack_stats['total_files'] = result.files
        context.pack_stats['total_directories'] = result.directories
        context.pack_stats['total_size'] = result.total_size
        context.pack_stats['archive_size'] = archive_size
        context.pack_stats['skipped'] += result.skipped

        success(f"归档已写入: {output_path}", stage=LogStage.WRITE)
        info(f"  原始大小: {format_size(result.total_size)}")
        info(f"  归档大小: {format_size(archive_size)}")

        context.report_progress("写入归档文件", self.get_progress_range()[1], format_size(archive_size))

    @staticmethod
    def _discard(partial_path: Path) -> None:
        if partial_path.exists():
            debug(f"删除临时文件 {partial_path}", stage=LogStage.WRITE)
            partial_path.unlink()
