"""Shared utility functions for infra-gen.

Provides Rich-based console reporting and the file-system side of
generation: writing ``GeneratedFile`` records below an output directory.
The generators themselves never touch the disk.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from .models import GeneratedFile

console = Console()


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def write_generated_files(
    files: Iterable[GeneratedFile],
    output_dir: str | Path,
) -> list[Path]:
    """Write every file below *output_dir*, creating parent directories.

    Raises:
        ValueError: If a file path would escape *output_dir*.
    """
    root = ensure_dir(output_dir)
    written: list[Path] = []
    for generated in files:
        destination = (root / generated.path).resolve()
        if not destination.is_relative_to(root):
            raise ValueError(f"refusing to write outside {root}: {generated.path}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(generated.content, encoding=generated.encoding)
        written.append(destination)
    return written


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str) -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold cyan] {title} [/bold cyan]", style="cyan"))
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
