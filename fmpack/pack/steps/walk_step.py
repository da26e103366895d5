"""
源码遍历步骤模块

遍历源码树，把每个条目直接登记到归档写入器，不缓存整棵树。
"""

from ...utils.logging import info, success, LogStage
from fmpack.pack.pack_context import PackContext
from fmpack.pack.walker import TreeWalker
from .pack_step import PackStep


class WalkStep(PackStep):
    """遍历源码树步骤"""

    def __init__(self):
        super().__init__("walk", "遍历源码目录")

    def get_progress_range(self) -> tuple[int, int]:
        return (15, 40)

    def execute(self, context: PackContext) -> None:
        options = context.options
        mod_info = context.mod_info

        info(f"遍历源码目录: {options.source_dir}", stage=LogStage.WALK)

        emitter = context.emitter_factory(
            level=options.level,
            stored=options.stored,
            threads=options.threads,
        )
        context.emitter = emitter

        # 先登记归档根目录
        emitter.add_directory(mod_info.qualified_name, options.source_dir)
        context.pack_stats['total_directories'] += 1

        walker = TreeWalker(
            options.source_dir,
            mod_info.qualified_name,
            output_name=mod_info.archive_name,
            excludes=options.excludes,
        )

        stats = context.pack_stats
        for entry in walker:
            if entry.is_directory:
                emitter.add_directory(entry.archive_path, entry.source_path)
                stats['total_directories'] += 1
            else:
                emitter.add_file(entry.source_path, entry.archive_path)
                stats['total_files'] += 1

        stats['visited'] = walker.visited
        stats['skipped'] += len(walker.errors)

        success("遍历完成", stage=LogStage.WALK)
        info(f"  文件数量: {stats['total_files']}")
        info(f"  目录数量: {stats['total_directories']}")

        context.report_progress("遍历源码目录", self.get_progress_range()[1],
                                f"找到 {stats['total_files']} 个文件")
