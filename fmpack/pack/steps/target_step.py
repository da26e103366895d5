"""
安装目录解析步骤
"""

from ...utils.logging import info, LogStage
from fmpack.pack.pack_context import PackContext
from fmpack.pack.target import resolve_install_dir
from .pack_step import PackStep


class ResolveTargetStep(PackStep):
    """解析并校验安装目录"""

    def __init__(self):
        super().__init__("target", "解析安装目录")

    def get_progress_range(self) -> tuple[int, int]:
        return (0, 5)

    def execute(self, context: PackContext) -> None:
        options = context.options
        context.install_dir = resolve_install_dir(
            options.install_dir,
            configured=options.configured_install_dir,
        )
        info(f"安装目录: {context.install_dir}", stage=LogStage.TARGET)
        context.report_progress("解析安装目录", self.get_progress_range()[1], str(context.install_dir))
