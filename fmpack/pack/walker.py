"""
源码树遍历器

递归遍历源码目录，按排除规则在遍历时剪枝，并把每个保留下来的路径
映射为 <qualified_name>/<相对路径> 形式的归档条目。
条目按需生成，不会一次性收集整棵树。
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from ..utils.logging import LogStage, debug, info, warning
from ..utils.paths import is_within, normalize_path


class EntryKind(str, Enum):
    """归档条目类型"""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class ArchiveEntry:
    """归档条目"""
    source_path: Path  # 源文件路径
    archive_path: str  # 归档内路径（正斜杠分隔）
    kind: EntryKind

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class TreeWalker:
    """源码树遍历器

    迭代器本身即为一次性的遍历过程：遍历结束后不能重新开始。

    过滤规则（在进入目录之前判断，被排除的目录整体剪枝）：
      - 文件名等于输出归档文件名
      - 文件名以 "." 开头（根目录本身除外）
      - 路径等于或位于某个排除路径之下
    """

    def __init__(
        self,
        root: Union[str, Path],
        prefix: str,
        output_name: Optional[str] = None,
        excludes: Optional[Iterable[Union[str, Path]]] = None,
    ):
        """
        Args:
            root: 遍历根目录
            prefix: 归档根目录名（即限定名）
            output_name: 输出归档文件名，遍历时跳过同名条目
            excludes: 排除路径，相对路径相对于 root 解析
        """
        self.root = Path(root)
        self.prefix = prefix.strip("/")
        self.output_name = output_name
        self.excludes: List[str] = [
            normalize_path(self._anchor(Path(path))) for path in (excludes or [])
        ]

        # 统计信息
        self.visited = 0
        self.errors: List[Tuple[Path, str]] = []

        self._entries = self._walk(self.root, ())

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return self

    def __next__(self) -> ArchiveEntry:
        return next(self._entries)

    def _anchor(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    def is_excluded(self, name: str, path: Union[str, Path]) -> bool:
        """判断单个目录项是否被排除"""
        if self.output_name and name == self.output_name:
            debug(f"跳过输出文件: {path}", stage=LogStage.WALK)
            return True

        if name.startswith("."):
            debug(f"跳过隐藏项: {path}", stage=LogStage.WALK)
            return True

        if self.excludes:
            normalized = normalize_path(path)
            if any(is_within(normalized, excluded) for excluded in self.excludes):
                info(f"排除: {path}", stage=LogStage.WALK)
                return True

        return False

    def _report(self, path: Path, reason: str) -> None:
        warning(f"跳过 {path}: {reason}", stage=LogStage.WALK)
        self.errors.append((path, reason))

    def _walk(self, directory: Path, parts: Tuple[str, ...]) -> Iterator[ArchiveEntry]:
        """深度优先遍历，同一目录下按名称排序"""
        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            self._report(directory, e.strerror or str(e))
            return

        seen = set()
        for child in children:
            self.visited += 1
            child_path = Path(child.path)

            if self.is_excluded(child.name, child_path):
                continue

            try:
                is_dir = child.is_dir()
                is_file = not is_dir and child.is_file()
                is_link = child.is_symlink()
            except OSError as e:
                self._report(child_path, e.strerror or str(e))
                continue

            archive_name = _archive_name(child.name)
            if archive_name != child.name:
                warning(f"文件名不是有效的 UTF-8，归档中使用 {archive_name!r}: {child_path}", stage=LogStage.WALK)
            if archive_name in seen:
                self._report(child_path, f"归档名称 {archive_name!r} 与同目录条目重复")
                continue
            seen.add(archive_name)

            child_parts = parts + (archive_name,)
            archive_path = "/".join((self.prefix,) + child_parts)

            if is_file:
                yield ArchiveEntry(child_path, archive_path, EntryKind.FILE)
            elif is_dir:
                yield ArchiveEntry(child_path, archive_path, EntryKind.DIRECTORY)
                # 不跟随目录符号链接
                if not is_link:
                    yield from self._walk(child_path, child_parts)
            elif is_link:
                self._report(child_path, "符号链接目标不存在")
            else:
                self._report(child_path, "既不是文件也不是目录")


def _archive_name(name: str) -> str:
    """把文件系统名称转换为可写入 zip 的 UTF-8 名称

    无法解码的字节替换为 U+FFFD。
    """
    return os.fsencode(name).decode("utf-8", "replace")


def walk_entries(
    root: Union[str, Path],
    prefix: str,
    output_name: Optional[str] = None,
    excludes: Optional[Iterable[Union[str, Path]]] = None,
) -> Iterator[ArchiveEntry]:
    """便捷函数：遍历源码树，生成归档条目"""
    return TreeWalker(root, prefix, output_name, excludes)
