"""Goal commands: wizard, feasibility table, delete, and advice."""

import sqlite3
import sys

import typer
from rich.console import Console
from rich.table import Table

from shandu.advisor import get_goal_advice_batch
from shandu.config import get_advisor_settings
from shandu.domain.goals import GOAL_TYPE_LABELS, GoalError, find_goal, goal_type_label, new_goal
from shandu.domain.models import PRIORITIES, GoalType, Mode
from shandu.formatting import format_money, short_id
from shandu.state import open_state

console = Console()


def prompt_goal_type(mode: Mode) -> GoalType:
    """Show the goal types offered in a mode and prompt for one."""
    options = list(GOAL_TYPE_LABELS[mode].items())
    console.print("[cyan]What do you want to achieve?[/cyan]")
    for idx, (_, label) in enumerate(options, 1):
        console.print(f"  {idx}. {label}")

    while True:
        choice: str = typer.prompt(f"Select goal type (1-{len(options)})", type=str, default="1")
        try:
            idx = int(choice) - 1
            if 0 <= idx < len(options):
                return options[idx][0]
        except ValueError:
            pass
        console.print("[red]Invalid selection[/red]")


def goal_add_command(
    type: str | None = None,
    title: str | None = None,
    target: float | None = None,
    deadline: str | None = None,
    priority: str | None = None,
    category: str | None = None,
) -> None:
    """Create a goal in the active mode, prompting for anything not given."""
    state = open_state()
    mode = state.mode

    goal_type = type or prompt_goal_type(mode)
    if goal_type not in GOAL_TYPE_LABELS[mode]:
        offered = ", ".join(GOAL_TYPE_LABELS[mode])
        console.print(f"[red]Goal type '{goal_type}' is not offered in {mode} mode. Choose from: {offered}[/red]")
        sys.exit(1)

    if title is None:
        title = typer.prompt("Goal title", type=str)
    if target is None:
        target = typer.prompt("Target amount", type=float)
    if deadline is None:
        deadline = typer.prompt("Target deadline (YYYY-MM-DD)", type=str)
    if priority is None:
        priority = typer.prompt(f"Priority ({'/'.join(PRIORITIES)})", type=str, default="medium")
    if category is None:
        category = typer.prompt("Category", type=str, default="General")

    try:
        goal = new_goal(mode, goal_type, title, target, deadline, priority.lower(), category)
    except GoalError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    try:
        state.add_goal(goal)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Goal created: {goal.title} [dim]{short_id(goal.id)}[/dim]")


def goal_list_command() -> None:
    """Show every goal of the active mode with its feasibility verdict."""
    state = open_state()
    currency = get_advisor_settings().currency
    report = state.feasibility()

    if not report:
        console.print(f"[yellow]No {state.mode} goals yet. Add one with 'shandu goal add'.[/yellow]")
        return

    table = Table(title=f"{state.mode.title()} goals")
    table.add_column("ID", style="dim")
    table.add_column("Goal", style="white")
    table.add_column("Priority", justify="center")
    table.add_column("Target", justify="right")
    table.add_column("Deadline", style="cyan")
    table.add_column("Months left", justify="right")
    table.add_column("Needed / month", justify="right")
    table.add_column("Surplus / month", justify="right")
    table.add_column("Verdict", justify="center")

    for item in report:
        goal, verdict = item.goal, item.verdict
        if verdict.is_achievable:
            status = "[green]On track[/green]"
        else:
            status = f"[red]Short {format_money(verdict.gap, currency)}[/red]"
        table.add_row(
            short_id(goal.id),
            f"{goal.title}\n[dim]{goal_type_label(goal.type, goal.mode)}[/dim]",
            goal.priority,
            format_money(goal.target_amount, currency),
            goal.deadline.date().isoformat(),
            f"{verdict.months_left:.1f}",
            format_money(verdict.required_per_month, currency),
            format_money(verdict.monthly_surplus, currency),
            status,
        )

    console.print(table)


def goal_delete_command(goal_id: str) -> None:
    """Delete a goal by id or unique id prefix."""
    state = open_state()

    goal = find_goal(state.goals, goal_id)
    if goal is None:
        console.print(f"[red]No unique goal matches '{goal_id}'[/red]")
        sys.exit(1)

    try:
        state.delete_goal(goal.id)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted goal {short_id(goal.id)}: {goal.title}")


def goal_advice_command(goal_id: str | None = None) -> None:
    """Ask the advisor about one goal, or every goal of the active mode."""
    state = open_state()
    settings = get_advisor_settings()

    if goal_id:
        goal = find_goal(state.visible_goals(), goal_id)
        if goal is None:
            console.print(f"[red]No unique {state.mode} goal matches '{goal_id}'[/red]")
            sys.exit(1)
        goals = [goal]
    else:
        goals = state.visible_goals()

    if not goals:
        console.print(f"[yellow]No {state.mode} goals to analyse[/yellow]")
        return

    with console.status("Consulting Buddy..."):
        advice = get_goal_advice_batch(goals, state.transactions, state.mode, settings)

    for goal in goals:
        console.rule(f"[bold]{goal.title}[/bold]")
        console.print(advice.get(goal.id, "Goal analysis unavailable."))
        console.print()
