"""Admin commands for backup, init, and listing transactions."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from shandu.config import create_default_config, get_advisor_settings, get_config_path
from shandu.domain.ledger import sort_by_date
from shandu.formatting import format_signed, short_id
from shandu.state import open_state
from shandu.store.schema import get_db_path, init_database

console = Console()


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        console.print("[red]Database not found. Run 'shandu init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".shandu" / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"shandu_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        # Config is optional; defaults apply without it
        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def init_command(force: bool = False) -> None:
    """Initialize shandu database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'shandu init --force' to overwrite[/yellow]")
            sys.exit(1)

        if force and db_exists:
            db_path.unlink()

        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        console.print("[green]✓[/green] Database initialized")

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        console.print("\n[green]Initialization complete![/green]", style="bold")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def list_command(
    limit: int = 50,
    all: bool = False,
) -> None:
    """List transactions, newest first."""
    state = open_state()
    currency = get_advisor_settings().currency

    transactions = sort_by_date(state.transactions, newest_first=True)
    if not all:
        transactions = transactions[:limit]

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    title = (
        f"Transactions (showing all {len(transactions)})" if all else f"Transactions (showing {len(transactions)})"
    )
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="magenta")

    for txn in transactions:
        table.add_row(
            short_id(txn.id),
            txn.date.date().isoformat(),
            txn.description or "[dim]-[/dim]",
            format_signed(txn.amount, txn.type, currency),
            txn.category,
        )

    console.print(table)
