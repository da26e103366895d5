"""
fmpack - Factorio mod 打包工具

把 mod 源码目录打包为 <name>_<version>.zip，安装到 mods 目录并清理旧版本。
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config.schema import ModInfo
from .pack.packer import Packer, PackResult

__all__ = ["ModInfo", "Packer", "PackResult", "__version__"]
