"""打包步骤"""

from .pack_step import PackStep
from .target_step import ResolveTargetStep
from .purge_step import PurgeStaleStep, PurgeOutputStep
from .walk_step import WalkStep
from .write_step import WriteStep

__all__ = [
    "PackStep",
    "ResolveTargetStep",
    "PurgeStaleStep",
    "PurgeOutputStep",
    "WalkStep",
    "WriteStep",
]
