"""
归档写入器

接收“添加目录 / 添加文件”请求，最终把 zip 容器写入给定的输出流。
文件内容由线程池并行读取，写入顺序严格等于提交顺序，每个条目只写一次。
"""

import os
import stat
import zipfile
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Deque, List, Optional, Set, Union

from ..config.schema import DEFAULT_LEVEL, MAX_LEVEL, MIN_LEVEL
from ..utils.logging import LogStage, debug, warning
from .pack_context import EmitterError
from .walker import EntryKind


# 目录条目缺少元数据时使用的默认权限
_DEFAULT_DIR_MODE = stat.S_IFDIR | 0o755


@dataclass
class _Job:
    kind: EntryKind
    archive_path: str
    source: Optional[Path] = None
    level: int = DEFAULT_LEVEL
    stored: bool = False


@dataclass
class _Prepared:
    job: _Job
    zinfo: Optional[zipfile.ZipInfo] = None
    data: bytes = b""
    error: Optional[str] = None


@dataclass
class EmitResult:
    """写入结果"""
    files: int = 0
    directories: int = 0
    skipped: int = 0
    total_size: int = 0


def _check_level(level: int) -> int:
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValueError(f"压缩级别必须在 {MIN_LEVEL}-{MAX_LEVEL} 之间: {level}")
    return level


class ArchiveEmitter:
    """zip 归档写入器

    add_directory / add_file 只登记条目，write 时才读取文件内容。
    线程池只负责读取元数据与文件内容，Deflate 压缩在调用 write 的线程中按顺序进行。
    """

    def __init__(self, level: int = DEFAULT_LEVEL, stored: bool = False, threads: Optional[int] = None):
        """
        Args:
            level: 默认压缩级别（0-9）
            stored: 默认不压缩
            threads: 读取线程数，默认 CPU 核心数
        """
        if threads is not None and threads < 1:
            raise ValueError(f"线程数必须大于 0: {threads}")

        self.level = _check_level(level)
        self.stored = stored
        self.threads = threads or os.cpu_count() or 1
        self._jobs: List[_Job] = []
        self._names: Set[str] = set()

    def __len__(self) -> int:
        return len(self._jobs)

    def _register(self, job: _Job) -> None:
        if job.archive_path in self._names:
            raise EmitterError(f"重复的归档条目: {job.archive_path}")
        self._names.add(job.archive_path)
        self._jobs.append(job)

    def add_directory(self, archive_path: str, source: Optional[Union[str, Path]] = None) -> None:
        """登记目录条目

        Args:
            archive_path: 归档内路径
            source: 源目录，用于复制时间戳与权限
        """
        archive_path = archive_path.strip("/")
        if not archive_path:
            raise ValueError("目录条目路径不能为空")
        self._register(_Job(
            kind=EntryKind.DIRECTORY,
            archive_path=archive_path,
            source=Path(source) if source is not None else None,
        ))

    def add_file(
        self,
        source: Union[str, Path],
        archive_path: str,
        level: Optional[int] = None,
        stored: Optional[bool] = None,
    ) -> None:
        """登记文件条目

        Args:
            source: 源文件路径
            archive_path: 归档内路径
            level: 覆盖默认压缩级别
            stored: 覆盖默认的“不压缩”设置
        """
        archive_path = archive_path.strip("/")
        if not archive_path:
            raise ValueError("文件条目路径不能为空")
        self._register(_Job(
            kind=EntryKind.FILE,
            archive_path=archive_path,
            source=Path(source),
            level=self.level if level is None else _check_level(level),
            stored=self.stored if stored is None else stored,
        ))

    def _prepare(self, job: _Job) -> _Prepared:
        """在工作线程中读取元数据与文件内容"""
        try:
            job.archive_path.encode("utf-8")
        except UnicodeEncodeError:
            return _Prepared(job, error="归档路径不是有效的 UTF-8")

        if job.kind is EntryKind.DIRECTORY:
            if job.source is not None:
                try:
                    zinfo = zipfile.ZipInfo.from_file(job.source, job.archive_path, strict_timestamps=False)
                    return _Prepared(job, zinfo)
                except OSError as e:
                    error = f"无法读取目录元数据: {e.strerror or e}"
                    return _Prepared(job, self._bare_directory(job.archive_path), error=error)
            return _Prepared(job, self._bare_directory(job.archive_path))

        try:
            zinfo = zipfile.ZipInfo.from_file(job.source, job.archive_path, strict_timestamps=False)
            with open(job.source, "rb") as f:
                data = f.read()
        except OSError as e:
            return _Prepared(job, error=f"无法读取文件: {e.strerror or e}")

        zinfo.compress_type = zipfile.ZIP_STORED if job.stored else zipfile.ZIP_DEFLATED
        return _Prepared(job, zinfo, data)

    @staticmethod
    def _bare_directory(archive_path: str) -> zipfile.ZipInfo:
        zinfo = zipfile.ZipInfo(archive_path + "/")
        zinfo.external_attr = (_DEFAULT_DIR_MODE << 16) | 0x10
        return zinfo

    def _write_one(self, zf: zipfile.ZipFile, prepared: _Prepared, result: EmitResult) -> None:
        job = prepared.job

        if prepared.error:
            warning(f"{job.archive_path}: {prepared.error}", stage=LogStage.ARCHIVE)

        if prepared.zinfo is None:
            warning(f"跳过 {job.source or job.archive_path}", stage=LogStage.ARCHIVE)
            result.skipped += 1
            return

        if job.kind is EntryKind.DIRECTORY:
            zf.writestr(prepared.zinfo, b"")
            result.directories += 1
            debug(f"目录 {prepared.zinfo.filename}", stage=LogStage.ARCHIVE)
            return

        if job.stored:
            zf.writestr(prepared.zinfo, prepared.data, compress_type=zipfile.ZIP_STORED)
        else:
            zf.writestr(prepared.zinfo, prepared.data, compress_type=zipfile.ZIP_DEFLATED,
                        compresslevel=job.level)
        result.files += 1
        result.total_size += len(prepared.data)
        debug(f"文件 {job.archive_path}", stage=LogStage.ARCHIVE)

    def write(self, sink: BinaryIO) -> EmitResult:
        """把所有已登记条目写入 zip 输出流

        最多同时预读 threads * 2 个条目，避免整棵树的内容驻留内存。

        Args:
            sink: 可写二进制流

        Returns:
            EmitResult: 写入统计

        Raises:
            EmitterError: 输出流写入失败
        """
        result = EmitResult()
        jobs = iter(self._jobs)
        window: Deque[Future] = deque()
        lookahead = self.threads * 2

        try:
            with zipfile.ZipFile(sink, "w", allowZip64=True) as zf, \
                    ThreadPoolExecutor(max_workers=self.threads, thread_name_prefix="fmpack") as pool:
                while True:
                    while len(window) < lookahead:
                        job = next(jobs, None)
                        if job is None:
                            break
                        window.append(pool.submit(self._prepare, job))

                    if not window:
                        break

                    self._write_one(zf, window.popleft().result(), result)
        except (OSError, zipfile.LargeZipFile) as e:
            raise EmitterError(f"写入归档失败: {e}") from e

        return result
