"""通用工具模块"""

from .logging import (
    configure_logging,
    get_output_facade,
    set_log_level,
    set_log_file,
    OutputLevel,
    LogStage,
)

from .paths import (
    expand_path,
    normalize_path,
    is_within,
    format_size,
    is_safe_filename,
)

__all__ = [
    # 日志相关
    "configure_logging",
    "get_output_facade",
    "set_log_level",
    "set_log_file",
    "OutputLevel",
    "LogStage",

    # 路径相关
    "expand_path",
    "normalize_path",
    "is_within",
    "format_size",
    "is_safe_filename",
]
