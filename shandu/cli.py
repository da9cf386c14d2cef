"""CLI entry point for shandu."""

import typer

from shandu.commands.admin import backup_command, init_command, list_command
from shandu.commands.advice import ask_command, search_command, shop_command
from shandu.commands.goals import goal_add_command, goal_advice_command, goal_delete_command, goal_list_command
from shandu.commands.report import summary_command
from shandu.commands.settings import category_command, mode_command, theme_command
from shandu.commands.transactions import add_command, delete_command
from shandu.log import configure_logging

app = typer.Typer(
    name="shandu",
    help="Shandu - a personal and small-business ledger with a financial advisor",
    add_completion=False,
)

goal_app = typer.Typer(help="Track savings and spending goals.")
app.add_typer(goal_app, name="goal")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Shandu - a personal and small-business ledger with a financial advisor."""
    configure_logging(verbose)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.shandu/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize shandu database and configuration."""
    init_command(force)


@app.command()
def add(
    type: str = typer.Argument(..., help="income or expense"),
    amount: float = typer.Argument(..., min=0, help="Amount (non-negative)"),
    description: str = typer.Argument(..., help="What it was for"),
    category: str = typer.Option(None, "--category", "-c", help="Category (default: Other)"),
    date: str = typer.Option(None, "--date", "-d", help="Date of the transaction (default: now)"),
) -> None:
    """Record an income or expense."""
    add_command(type.lower(), amount, description, category, date)


@app.command()
def delete(
    txn_id: str = typer.Argument(..., help="Transaction id or unique prefix"),
) -> None:
    """Delete a transaction."""
    delete_command(txn_id)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions."""
    list_command(limit, all)


@app.command()
def summary(
    histogram: bool = typer.Option(True, help="Show histogram of your spending"),
) -> None:
    """Show your balance, monthly rates and spending breakdown."""
    summary_command(histogram)


@goal_app.command(name="add")
def goal_add(
    type: str = typer.Option(None, "--type", "-t", help="save, debt, emergency, buy, waste_reduction, profit_increase"),
    title: str = typer.Option(None, "--title", help="Goal title"),
    target: float = typer.Option(None, "--target", help="Target amount"),
    deadline: str = typer.Option(None, "--deadline", help="Deadline (YYYY-MM-DD)"),
    priority: str = typer.Option(None, "--priority", "-p", help="low, medium or high"),
    category: str = typer.Option(None, "--category", "-c", help="Goal category"),
) -> None:
    """Create a goal (prompts for anything not given)."""
    goal_add_command(type, title, target, deadline, priority, category)


@goal_app.command(name="list")
def goal_list() -> None:
    """Show your goals and whether they are achievable."""
    goal_list_command()


@goal_app.command(name="delete")
def goal_delete(
    goal_id: str = typer.Argument(..., help="Goal id or unique prefix"),
) -> None:
    """Delete a goal."""
    goal_delete_command(goal_id)


@goal_app.command(name="advice")
def goal_advice(
    goal_id: str = typer.Argument(None, help="Goal id or unique prefix (default: all goals)"),
) -> None:
    """Ask Buddy how to reach your goals."""
    goal_advice_command(goal_id)


@app.command()
def mode(
    name: str = typer.Argument(None, help="personal or business"),
) -> None:
    """Show or switch your operating mode."""
    mode_command(name)


@app.command()
def theme(
    theme_id: str = typer.Argument(None, help="Theme id"),
) -> None:
    """Show or select your theme."""
    theme_command(theme_id)


@app.command()
def category(
    name: str = typer.Argument(None, help="New category name"),
) -> None:
    """List your categories or add a new one."""
    category_command(name)


@app.command()
def ask(question: str) -> None:
    """Ask Buddy a question about your finances."""
    ask_command(question)


@app.command()
def search(query: str) -> None:
    """Look up current prices for a product."""
    search_command(query)


@app.command()
def shop(query: str) -> None:
    """Find cheaper, healthier or discounted options for a product."""
    shop_command(query)


if __name__ == "__main__":
    app()
