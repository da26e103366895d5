"""
Inspect 命令实现

查看已打包的 mod 归档内容。
"""

import json
import zipfile
from pathlib import Path
from typing import Any, Dict

import typer
from rich.console import Console
from rich.table import Table

from ...utils import format_size


console = Console()


def inspect_command(
    archive: Path = typer.Argument(..., help="mod 归档文件路径"),
    json_output: bool = typer.Option(False, "--json", help="输出 JSON 格式"),
    show_files: bool = typer.Option(False, "--files", help="显示条目列表"),
) -> None:
    """查看 mod 归档信息

    示例:
        fmpack inspect ~/.factorio/mods/my-mod_1.0.0.zip
        fmpack inspect my-mod_1.0.0.zip --files
    """
    if not archive.is_file():
        console.print(f"[red]归档文件不存在: {archive}[/red]")
        raise typer.Exit(1)

    try:
        data = read_archive_summary(archive)
    except (zipfile.BadZipFile, OSError) as e:
        console.print(f"[red]读取归档失败: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(json.dumps(data, ensure_ascii=False))
        return

    _display_summary(data, show_files)


def read_archive_summary(archive: Path) -> Dict[str, Any]:
    """读取归档条目与根目录下的 info.json"""
    with zipfile.ZipFile(archive) as zf:
        infos = zf.infolist()

        roots = sorted({info.filename.split("/", 1)[0] for info in infos})
        mod_info = None
        if len(roots) == 1:
            info_name = f"{roots[0]}/info.json"
            if info_name in zf.namelist():
                try:
                    mod_info = json.loads(zf.read(info_name).decode("utf-8-sig"))
                except (ValueError, UnicodeDecodeError):
                    mod_info = None

        entries = [
            {
                "path": info.filename,
                "is_directory": info.is_dir(),
                "size": info.file_size,
                "compressed_size": info.compress_size,
            }
            for info in infos
        ]

    return {
        "archive": str(archive),
        "roots": roots,
        "info": mod_info,
        "file_count": sum(1 for e in entries if not e["is_directory"]),
        "directory_count": sum(1 for e in entries if e["is_directory"]),
        "original_size": sum(e["size"] for e in entries),
        "compressed_size": sum(e["compressed_size"] for e in entries),
        "entries": entries,
    }


def _display_summary(data: Dict[str, Any], show_files: bool) -> None:
    """显示归档信息（人类可读格式）"""
    table = Table(title="归档信息")
    table.add_column("属性", style="cyan")
    table.add_column("值", style="green")

    table.add_row("文件", data["archive"])
    table.add_row("根目录", ", ".join(data["roots"]) or "-")

    mod_info = data.get("info")
    if isinstance(mod_info, dict):
        table.add_row("mod 名称", str(mod_info.get("name", "未知")))
        table.add_row("版本", str(mod_info.get("version", "未知")))
    else:
        table.add_row("info.json", "[yellow]未找到[/yellow]")

    table.add_row("文件数", str(data["file_count"]))
    table.add_row("目录数", str(data["directory_count"]))
    table.add_row("原始大小", format_size(data["original_size"]))
    table.add_row("压缩大小", format_size(data["compressed_size"]))

    if len(data["roots"]) > 1:
        table.add_row("警告", "[yellow]归档包含多个根目录[/yellow]")

    console.print(table)

    if show_files:
        files_table = Table(title=f"条目列表 ({len(data['entries'])} 个条目)")
        files_table.add_column("路径", style="cyan")
        files_table.add_column("大小", style="green")
        files_table.add_column("压缩后", style="yellow")

        for entry in data["entries"]:
            if entry["is_directory"]:
                files_table.add_row(entry["path"], "-", "-")
            else:
                files_table.add_row(
                    entry["path"],
                    format_size(entry["size"]),
                    format_size(entry["compressed_size"]),
                )

        console.print(files_table)
