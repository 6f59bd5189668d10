"""Rich console output helpers for the CLI."""

from typing import Any

from rich.console import Console
from rich.markup import escape

console = Console()
error_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[bold red]✗[/bold red] {escape(message)}")


def print_json(data: dict[str, Any]) -> None:
    """Print data as highlighted, indented JSON."""
    console.print_json(data=data, indent=2)
