"""
Pack 命令实现

把当前 mod 源码目录打包为 <name>_<version>.zip 并放入安装目录。
"""

import traceback
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ...config import ConfigError, ConfigValidationError, PackConfig, config_loader
from ...config.schema import DEFAULT_LEVEL, MAX_LEVEL, MIN_LEVEL
from ...utils import format_size
from ...utils.logging import OutputLevel, set_log_file, set_log_level


console = Console()


def pack_command(
    install_dir: Optional[Path] = typer.Option(
        None, "--install-dir", "-i",
        help="安装目录，默认读取环境变量 FMPACK_INSTALL_DIR，其次为平台默认的 mods 目录",
    ),
    keep_old_versions: bool = typer.Option(
        False, "--keep-old-versions", "--no-clean", "-n",
        help="不查找也不删除该 mod 的其它版本",
    ),
    exclude: Optional[List[Path]] = typer.Option(
        None, "--exclude", "-e",
        help="排除的文件或目录（可重复，相对路径相对于源码目录）",
    ),
    level: Optional[int] = typer.Option(
        None, "--level", "-l", min=MIN_LEVEL, max=MAX_LEVEL,
        help=f"压缩级别 {MIN_LEVEL}-{MAX_LEVEL}（默认 {DEFAULT_LEVEL}）",
    ),
    stored: bool = typer.Option(False, "--stored", help="不压缩，直接存储文件"),
    threads: Optional[int] = typer.Option(
        None, "--threads", "-j", min=1,
        help="读取线程数，默认使用 CPU 核心数",
    ),
    source_dir: Path = typer.Option(Path("."), "--source-dir", "-s", help="mod 源码目录"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="配置文件路径，默认使用源码目录下的 fmpack.yaml（如存在）",
    ),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志 (DEBUG 级别)"),
) -> None:
    """打包 mod

    读取源码目录下的 info.json，清理安装目录中的旧版本，并写入新的归档。

    示例:
        fmpack pack
        fmpack pack -i ~/factorio/mods -e build -e docs
        fmpack pack --no-clean --stored
    """
    from ...pack import Packer, PackOptions
    from ...config import load_mod_info

    set_log_level(OutputLevel.DEBUG if verbose else OutputLevel.INFO)

    if log_file:
        try:
            set_log_file(log_file)
        except OSError as e:
            console.print(f"[yellow]无法写入日志文件 {log_file}: {e}[/yellow]")

    if not source_dir.is_dir():
        console.print(f"[red]源码目录不存在: {source_dir}[/red]")
        raise typer.Exit(1)

    try:
        mod_info = load_mod_info(source_dir)

        config_path = config if config is not None else config_loader.find_config(source_dir)
        if config_path is not None:
            console.print(f"[cyan]使用配置文件[/cyan]: {config_path}")
            pack_config = config_loader.load_from_file(config_path)
        else:
            pack_config = PackConfig()
    except ConfigValidationError as e:
        console.print(f"[red]{e}[/red]")
        if e.errors:
            console.print(e.format_errors())
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {e}")
        raise typer.Exit(1)

    excludes: List[Path] = [Path(item) for item in pack_config.exclude]
    excludes.extend(exclude or [])
    if config_path is not None:
        excludes.append(Path(config_path).absolute())

    options = PackOptions(
        source_dir=source_dir,
        install_dir=install_dir,
        configured_install_dir=pack_config.install_dir,
        excludes=excludes,
        keep_old_versions=keep_old_versions or pack_config.keep_old_versions,
        level=level if level is not None else pack_config.compression.level,
        stored=stored or pack_config.compression.stored,
        threads=threads or pack_config.threads,
    )

    def progress_callback(stage: str, current: int, total: int, message: str = "") -> None:
        """进度回调函数，显示进度"""
        if total > 0:
            percentage = (current / total) * 100
            if message:
                console.print(f"[blue]{stage}[/blue]: {message} ({percentage:.0f}%)")
            else:
                console.print(f"[blue]{stage}[/blue]: {percentage:.0f}%")

    console.print(f"[cyan]打包 {mod_info.qualified_name}[/cyan]")

    try:
        result = Packer().pack(mod_info, options, progress_callback if verbose else None)
    except Exception as e:
        console.print(f"[red]✗ 打包过程中发生意外错误[/red]: {e}")
        if log_file:
            console.print(f"[yellow]详细错误信息:[/yellow]\n{traceback.format_exc()}")
        raise typer.Exit(1)

    if not result.success:
        console.print(f"[red]✗ 打包失败[/red]: {result.error}")
        if log_file:
            console.print(f"[yellow]请检查日志文件 {log_file} 获取详细信息。[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓ 打包完成[/green]: {result.output_path}")
    console.print(f"[blue]文件数[/blue]: {result.stats.get('total_files', 0)}")
    if result.output_size is not None:
        console.print(f"[blue]文件大小[/blue]: {format_size(result.output_size)}")
    if result.stats.get('skipped'):
        console.print(f"[yellow]跳过条目[/yellow]: {result.stats['skipped']}")
