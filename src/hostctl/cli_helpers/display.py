#!/usr/bin/env python3
"""
Display helper functions for the hostctl CLI
"""

from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..models import Config, Environment, HostEntry

console = Console()


def display_environments(config: Config) -> None:
    """Pretty-print a table of environments with their entry counts."""
    table = Table(title="Environments", header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Entries", style="green", justify="right")
    table.add_column("Description", style="yellow")
    table.add_column("Current", style="blue")

    for name in sorted(config.environment_names()):
        env = config.environments[name]
        current = "✓" if config.current_environment == name else ""
        table.add_row(escape(name), str(len(env.entries)), escape(env.description or ""), current)

    console.print(table)


def display_entries(entries: Iterable[HostEntry], empty_message: str = "(no entries)") -> None:
    """Print entries one per line in hosts-file form."""
    lines: List[str] = [entry.to_line() for entry in entries]
    if not lines:
        console.print(f"  [dim]{empty_message}[/dim]")
        return
    for line in lines:
        console.print(f"  {escape(line)}")


def display_environment(env: Environment, title: Optional[str] = None) -> None:
    """Print an environment header, description and entries."""
    console.print(f"[bold]{title or 'Environment'}:[/bold] [cyan]{escape(env.name)}[/cyan]")
    if env.description is not None:
        console.print(f"[bold]Description:[/bold] {escape(env.description)}")
    console.print("[bold]Entries:[/bold]")
    display_entries(env.entries)


def display_diff(diff_lines: Iterable[str]) -> None:
    """Print a unified diff, colouring added and removed lines."""
    for line in diff_lines:
        safe_line = escape(line)
        if line.startswith("+") and not line.startswith("+++"):
            console.print(f"[green]{safe_line}[/green]")
        elif line.startswith("-") and not line.startswith("---"):
            console.print(f"[red]{safe_line}[/red]")
        else:
            console.print(safe_line)


def display_success(message: str):
    """Display success message"""
    console.print(f"[green]✅ {escape(message)}[/green]")


def display_warning(message: str):
    """Display warning message"""
    console.print(f"[yellow]⚠️  {escape(message)}[/yellow]")


def display_error(message: str):
    """Display error message"""
    console.print(f"[red]❌ {escape(message)}[/red]")


def display_info(message: str):
    """Display info message"""
    console.print(f"[blue]ℹ️  {escape(message)}[/blue]")
