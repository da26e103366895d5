"""
旧版本清理步骤模块

PurgeStaleStep 删除同名 mod 的其它版本；PurgeOutputStep 无论是否保留
旧版本，都会在写入前删除最终输出路径上的已有条目。
"""

from ...utils.logging import debug, info, LogStage
from fmpack.pack.janitor import purge_output, purge_stale, stale_glob
from fmpack.pack.pack_context import PackContext
from .pack_step import PackStep


class PurgeStaleStep(PackStep):
    """清理旧版本步骤"""

    def __init__(self):
        super().__init__("purge", "清理旧版本")

    def get_progress_range(self) -> tuple[int, int]:
        return (5, 10)

    def execute(self, context: PackContext) -> None:
        if context.options.keep_old_versions:
            info("保留旧版本，跳过清理", stage=LogStage.PURGE)
            return

        debug(f"匹配模式: {stale_glob(context.install_dir, context.mod_info.name)}", stage=LogStage.PURGE)
        result = purge_stale(context.install_dir, context.mod_info.name)
        context.purge_result = result

        if result.removed or result.skipped:
            info(f"已删除 {len(result.removed)} 个旧版本，跳过 {len(result.skipped)} 个", stage=LogStage.PURGE)
        else:
            debug("没有找到旧版本", stage=LogStage.PURGE)

        context.report_progress("清理旧版本", self.get_progress_range()[1])


class PurgeOutputStep(PackStep):
    """删除输出路径上已存在的条目"""

    def __init__(self):
        super().__init__("purge-output", "清理输出路径")

    def get_progress_range(self) -> tuple[int, int]:
        return (10, 15)

    def execute(self, context: PackContext) -> None:
        context.output_removed = purge_output(context.output_path)
        context.report_progress("清理输出路径", self.get_progress_range()[1])
