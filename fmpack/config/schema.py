"""
配置 Schema 定义

使用 Pydantic 定义 mod 元数据（info.json）与打包配置（fmpack.yaml）模型。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.paths import is_safe_filename


# zlib 可接受的压缩级别范围
MIN_LEVEL = 0
MAX_LEVEL = 9
DEFAULT_LEVEL = 6


class ModInfo(BaseModel):
    """mod 元数据模型

    只关心 name 和 version，info.json 中的其它字段（title、author、
    dependencies 等）一律忽略。
    """
    name: str = Field(..., description="mod 名称", min_length=1)
    version: str = Field(..., description="mod 版本号", min_length=1)

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    @model_validator(mode='after')
    def validate_qualified_name(self) -> 'ModInfo':
        """归档根目录与输出文件都以限定名命名，必须是合法文件名"""
        if not is_safe_filename(self.qualified_name):
            raise ValueError(f"mod 名称或版本号包含非法字符: {self.qualified_name!r}")
        return self

    @property
    def qualified_name(self) -> str:
        """限定名：<name>_<version>"""
        return f"{self.name}_{self.version}"

    @property
    def archive_name(self) -> str:
        """输出归档文件名"""
        return f"{self.qualified_name}.zip"


class CompressionModel(BaseModel):
    """压缩配置模型"""
    level: int = Field(
        DEFAULT_LEVEL,
        description="Deflate 压缩级别",
        ge=MIN_LEVEL,
        le=MAX_LEVEL,
    )
    stored: bool = Field(
        False,
        description="不压缩，直接存储"
    )


class PackConfig(BaseModel):
    """打包配置模型

    对应源码目录下可选的 fmpack.yaml，所有字段都可被命令行参数覆盖。
    """
    install_dir: Optional[Union[str, Path]] = Field(
        None,
        description="安装目录（覆盖平台默认值）"
    )
    exclude: List[str] = Field(
        default_factory=list,
        description="排除路径列表（相对于源码目录）"
    )
    keep_old_versions: bool = Field(
        False,
        description="保留安装目录中的旧版本"
    )
    compression: CompressionModel = Field(
        default_factory=CompressionModel,
        description="压缩配置"
    )
    threads: Optional[int] = Field(
        None,
        description="读取线程数，默认使用 CPU 核心数",
        ge=1,
    )

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    @field_validator('install_dir')
    @classmethod
    def validate_install_dir(cls, v: Optional[Union[str, Path]]) -> Optional[Path]:
        if v is None:
            return None
        if not str(v).strip():
            raise ValueError("安装目录不能为空")
        return Path(v)

    @field_validator('exclude')
    @classmethod
    def validate_exclude(cls, v: List[str]) -> List[str]:
        """去除空白和重复项"""
        cleaned = []
        for item in v:
            item = item.strip()
            if item and item not in cleaned:
                cleaned.append(item)
        return cleaned

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PackConfig':
        """从字典创建配置实例"""
        return cls.model_validate(data)
