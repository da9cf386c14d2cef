"""Preference commands: operating mode, theme, and categories."""

import sqlite3
import sys

from rich.columns import Columns
from rich.console import Console

from shandu.domain.models import MODES, THEMES
from shandu.state import open_state

console = Console()


def mode_command(mode: str | None = None) -> None:
    """Show or switch the operating mode."""
    state = open_state()

    if mode is None:
        console.print(f"Current mode: [bold]{state.mode}[/bold] [dim](available: {', '.join(MODES)})[/dim]")
        return

    try:
        state.set_mode(mode.lower())
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Switched to {state.mode} mode")


def theme_command(theme_id: str | None = None) -> None:
    """Show or select the theme."""
    state = open_state()

    if theme_id is None:
        for key, name in THEMES.items():
            marker = "[green]●[/green]" if key == state.theme else " "
            console.print(f"  {marker} {key:10} [dim]{name}[/dim]")
        return

    try:
        state.set_theme(theme_id.lower())
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Theme set to {THEMES[state.theme]}")


def category_command(name: str | None = None) -> None:
    """List categories, or add a new one."""
    state = open_state()

    if name is None:
        console.print("[cyan]Categories:[/cyan]")
        items = [f"{idx}. {cat}" for idx, cat in enumerate(state.categories, 1)]
        console.print(Columns(items, equal=True, expand=False, column_first=True))
        return

    try:
        added = state.add_category(name)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if added:
        console.print(f"[green]✓[/green] Added category: {name.strip()}")
    else:
        console.print(f"[yellow]Category '{name.strip()}' already exists[/yellow]")
