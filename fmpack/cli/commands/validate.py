"""
Validate 命令实现

验证 info.json 与打包配置文件。
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...config import validate_source


console = Console()


def validate_command(
    source_dir: Path = typer.Option(Path("."), "--source-dir", "-s", help="mod 源码目录"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="配置文件路径"),
    json_output: bool = typer.Option(False, "--json", help="输出 JSON 格式的错误信息"),
) -> None:
    """验证 mod 元数据与配置文件

    示例:
        fmpack validate
        fmpack validate -s ./my-mod --json
    """
    if not source_dir.is_dir():
        console.print(f"[red]源码目录不存在: {source_dir}[/red]")
        raise typer.Exit(1)

    result = validate_source(source_dir, config)

    if result.is_valid:
        if json_output:
            console.print_json(json.dumps({"source": str(source_dir), "errors": [], "error_count": 0}))
        else:
            console.print("[green]✓ 验证通过[/green]")
        return

    if json_output:
        error_data = {
            "source": str(source_dir),
            "errors": [
                {"loc": [str(item) for item in error.get('loc', ())], "msg": error.get('msg', '')}
                for error in result.errors
            ],
            "error_count": len(result.errors),
        }
        console.print_json(json.dumps(error_data, ensure_ascii=False))
    else:
        console.print(f"[red]验证失败 ({len(result.errors)} 个错误):[/red]")
        console.print()

        table = Table(title="验证错误")
        table.add_column("位置", style="cyan", no_wrap=True)
        table.add_column("错误信息", style="red")
        table.add_column("输入值", style="yellow")

        for error in result.errors:
            location = " -> ".join(str(item) for item in error.get('loc', ()))
            message = error.get('msg', '未知错误')
            input_value = str(error.get('input', ''))
            if len(input_value) > 47:
                input_value = input_value[:47] + "..."

            table.add_row(location or "根级别", message, input_value or "-")

        console.print(table)

    raise typer.Exit(1)
