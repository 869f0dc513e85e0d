"""Shared formatting and file utilities for the CLI."""

import json
from pathlib import Path
from typing import Any, Dict

from rich.console import Console
from rich.table import Table

# Shared console instance
console = Console()


def format_hash(value: int) -> str:
    """Format a 256-bit value as a 0x-prefixed, zero-padded hex string."""
    return "0x%064x" % value


def format_short_hash(value: int, length: int = 10) -> str:
    """Shorten a hash for table display, e.g. "0x1234...abcd"."""
    full = format_hash(value)
    if len(full) <= length:
        return full
    return f"{full[:6]}...{full[-4:]}"


def build_table(title: str, columns: Dict[str, str]) -> Table:
    """Create a rich table with the given column names and styles."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for name, style in columns.items():
        table.add_column(name, style=style)
    return table


def load_json_file(file_path: str) -> Any:
    with open(file_path, "r") as file:
        return json.load(file)


def save_json_output(
    data: Dict[str, Any],
    filename: str,
    output_dir: str = "output",
    print_path: bool = True,
) -> str:
    """
    Save data to a JSON file with automatic directory creation.

    Args:
        data: Data to save
        filename: Output filename (can include subdirectories)
        output_dir: Base output directory (default: 'output')
        print_path: Whether to print the saved file path

    Returns:
        Full path to saved file
    """
    filepath = Path(output_dir) / filename
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)

    if print_path:
        console.print(f"[green]Saved → {filepath}[/green]")

    return str(filepath)
