"""
配置加载器

负责加载 mod 元数据（info.json）和可选的打包配置（fmpack.yaml）。
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .schema import ModInfo, PackConfig


INFO_FILE_NAME = "info.json"
CONFIG_FILE_NAME = "fmpack.yaml"


class ConfigError(Exception):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def __init__(self, message: str, errors: List[Dict[str, Any]]):
        super().__init__(message)
        self.errors = errors

    def format_errors(self) -> str:
        """格式化错误信息为人类可读的格式"""
        formatted = []
        for error in self.errors:
            loc = " -> ".join(str(item) for item in error.get('loc', []))
            msg = error.get('msg', '未知错误')
            if loc:
                formatted.append(f"字段 '{loc}': {msg}")
            else:
                formatted.append(f"根级别: {msg}")
        return "\n".join(formatted)


class MetadataError(ConfigValidationError):
    """info.json 缺失或格式错误"""
    pass


@dataclass
class ValidationResult:
    """验证结果"""
    is_valid: bool
    errors: List[Dict[str, Any]] = field(default_factory=list)


class ConfigLoader:
    """配置加载器"""

    def __init__(self):
        self.yaml = YAML(typ="safe")

    def load_mod_info(self, source_dir: Union[str, Path]) -> ModInfo:
        """读取源码目录下的 info.json

        Raises:
            MetadataError: 文件缺失、JSON 语法错误或字段不合法
        """
        info_path = Path(source_dir) / INFO_FILE_NAME

        if not info_path.is_file():
            raise MetadataError(f"找不到 {INFO_FILE_NAME}: {info_path}", [])

        try:
            with open(info_path, 'r', encoding='utf-8-sig') as f:
                raw_data = json.load(f)
        except json.JSONDecodeError as e:
            raise MetadataError(f"{INFO_FILE_NAME} 解析错误: {e}", [])
        except OSError as e:
            raise MetadataError(f"{INFO_FILE_NAME} 读取错误: {e}", [])

        if not isinstance(raw_data, dict):
            raise MetadataError(f"{INFO_FILE_NAME} 根级别必须是对象", [])

        try:
            return ModInfo.model_validate(raw_data)
        except ValidationError as e:
            raise MetadataError(f"{INFO_FILE_NAME} 验证失败", e.errors())

    def load_from_file(self, config_path: Union[str, Path]) -> PackConfig:
        """从 YAML 文件加载打包配置

        install_dir 若为相对路径，则相对于配置文件所在目录解析。

        Raises:
            ConfigError: 配置加载或验证错误
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"配置文件不存在: {config_path}")

        if not config_path.is_file():
            raise ConfigError(f"配置路径不是文件: {config_path}")

        if config_path.suffix.lower() not in ['.yaml', '.yml']:
            raise ConfigError(f"配置文件必须是 .yaml 或 .yml 格式: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw_data = self.yaml.load(f)
        except YAMLError as e:
            raise ConfigError(f"YAML 解析错误: {e}")
        except OSError as e:
            raise ConfigError(f"文件读取错误: {e}")

        # 空文件等同于全部默认值
        if raw_data is None:
            raw_data = {}

        if not isinstance(raw_data, dict):
            raise ConfigError("配置文件根级别必须是对象/字典格式")

        config = self.load_from_dict(raw_data)

        if config.install_dir is not None and not config.install_dir.is_absolute():
            install_dir = str(config.install_dir)
            # ~ 和环境变量留给目标解析时展开
            if not install_dir.startswith(("~", "$", "%")):
                config.install_dir = config_path.parent / config.install_dir

        return config

    def load_from_dict(self, data: Dict[str, Any]) -> PackConfig:
        """从字典加载打包配置

        Raises:
            ConfigValidationError: 配置验证错误
        """
        try:
            return PackConfig.from_dict(data)
        except ValidationError as e:
            raise ConfigValidationError("配置验证失败", e.errors())

    def find_config(self, source_dir: Union[str, Path]) -> Optional[Path]:
        """查找源码目录下的默认配置文件"""
        candidate = Path(source_dir) / CONFIG_FILE_NAME
        return candidate if candidate.is_file() else None

    def validate_source(self, source_dir: Union[str, Path],
                        config_path: Optional[Union[str, Path]] = None) -> ValidationResult:
        """验证 info.json 以及配置文件，收集所有错误而不抛出"""
        errors: List[Dict[str, Any]] = []

        try:
            self.load_mod_info(source_dir)
        except MetadataError as e:
            if e.errors:
                for item in e.errors:
                    errors.append({**item, 'loc': (INFO_FILE_NAME, *item.get('loc', ()))})
            else:
                errors.append({'loc': (INFO_FILE_NAME,), 'msg': str(e)})

        config_path = config_path or self.find_config(source_dir)
        if config_path is not None:
            name = Path(config_path).name
            try:
                self.load_from_file(config_path)
            except ConfigValidationError as e:
                for item in e.errors:
                    errors.append({**item, 'loc': (name, *item.get('loc', ()))})
            except ConfigError as e:
                errors.append({'loc': (name,), 'msg': str(e)})

        return ValidationResult(is_valid=not errors, errors=errors)


# 全局加载器实例
config_loader = ConfigLoader()


def load_mod_info(source_dir: Union[str, Path]) -> ModInfo:
    """便捷函数：读取 info.json"""
    return config_loader.load_mod_info(source_dir)


def load_config(config_path: Union[str, Path]) -> PackConfig:
    """便捷函数：加载配置文件"""
    return config_loader.load_from_file(config_path)


def validate_source(source_dir: Union[str, Path],
                    config_path: Optional[Union[str, Path]] = None) -> ValidationResult:
    """便捷函数：验证源码目录"""
    return config_loader.validate_source(source_dir, config_path)
