"""
打包管道模块

按固定顺序执行打包步骤：解析安装目录 -> 清理旧版本 -> 清理输出路径
-> 遍历源码树 -> 写入归档。后面的步骤不会影响前面的步骤。
"""

import time
from typing import List, Optional

from ..utils.logging import debug, error, info, success, LogStage
from .pack_context import PackContext, PackError
from .steps.pack_step import PackStep
from .steps.target_step import ResolveTargetStep
from .steps.purge_step import PurgeOutputStep, PurgeStaleStep
from .steps.walk_step import WalkStep
from .steps.write_step import WriteStep


class PackPipeline:
    """打包管道，负责协调打包步骤的执行"""

    def __init__(self, steps: Optional[List[PackStep]] = None):
        self._steps: List[PackStep] = list(steps) if steps is not None else self._default_steps()

    @staticmethod
    def _default_steps() -> List[PackStep]:
        return [
            ResolveTargetStep(),
            PurgeStaleStep(),
            PurgeOutputStep(),
            WalkStep(),
            WriteStep(),
        ]

    def get_steps(self) -> List[PackStep]:
        """获取所有打包步骤"""
        return self._steps.copy()

    def execute(self, context: PackContext) -> PackContext:
        """执行打包管道

        Raises:
            PackError: 任一步骤失败
        """
        context.pack_stats['start_time'] = time.time()

        try:
            info(f"开始打包 {context.mod_info.qualified_name}", stage=LogStage.PACK)
            debug(
                f"打包参数: source={context.options.source_dir} level={context.options.level} "
                f"stored={context.options.stored} threads={context.options.threads}",
                stage=LogStage.PACK,
            )

            for step in self._steps:
                debug(f"执行步骤: {step.description}", stage=LogStage.PACK)
                step.execute(context)

            context.pack_stats['end_time'] = time.time()
            elapsed = context.pack_stats['end_time'] - context.pack_stats['start_time']
            success(f"打包完成: {context.output_path} ({elapsed:.1f}秒)", stage=LogStage.DONE)
            return context

        except Exception as e:
            context.pack_stats['end_time'] = time.time()
            error(f"打包失败: {e}", stage=LogStage.PACK)
            if isinstance(e, PackError):
                raise
            raise PackError(f"打包失败: {e}") from e

    def validate_pipeline(self) -> List[str]:
        """验证各步骤进度范围是否连续覆盖 0-100"""
        errors = []

        if not self._steps:
            errors.append("打包管道中没有步骤")
            return errors

        prev_end = 0
        for step in self._steps:
            start, end = step.get_progress_range()
            if start != prev_end:
                errors.append(f"步骤 '{step.name}' 的进度范围不连续: 期望起始 {prev_end}%, 实际 {start}%")
            if start >= end:
                errors.append(f"步骤 '{step.name}' 的进度范围无效: {start}% - {end}%")
            prev_end = end

        if prev_end != 100:
            errors.append(f"打包管道的总进度范围不是100%: {prev_end}%")

        return errors
