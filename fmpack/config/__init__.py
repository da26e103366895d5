"""配置和 Schema 模块

提供 info.json 元数据与 fmpack.yaml 打包配置的加载和验证功能。
"""

from .schema import ModInfo, PackConfig, CompressionModel
from .loader import (
    ConfigLoader,
    ConfigError,
    ConfigValidationError,
    MetadataError,
    ValidationResult,
    INFO_FILE_NAME,
    CONFIG_FILE_NAME,
    load_mod_info,
    load_config,
    validate_source,
    config_loader,
)

__all__ = [
    # 模型
    "ModInfo",
    "PackConfig",
    "CompressionModel",
    "ConfigLoader",

    # 异常类
    "ConfigError",
    "ConfigValidationError",
    "MetadataError",
    "ValidationResult",

    # 常量
    "INFO_FILE_NAME",
    "CONFIG_FILE_NAME",

    # 便捷函数
    "load_mod_info",
    "load_config",
    "validate_source",

    # 单例
    "config_loader",
]
