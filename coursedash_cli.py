#!/usr/bin/env python3
"""
Course Dashboard - Command Line Interface
Renders a user's course dashboard, task list, urgent items and stats in the terminal
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import logging
from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coursedash.core import Config, UserDirectory
from coursedash.core.errors import CourseDashError
from coursedash.core.models import UserRecord
from coursedash.dashboard import DashboardAggregator, DashboardFormatter
from coursedash.integrations.edusphere import EduSphereClient

# Initialize CLI app and console
app = typer.Typer(help="Course Dashboard - prioritized tasks, meetings and announcements")

console = Console()
config = Config()


def get_aggregator() -> DashboardAggregator:
    """Build an aggregator wired to the configured EduSphere service."""
    client = EduSphereClient.from_config(config)
    return DashboardAggregator(client, client, client, config)


def resolve_user(email: str) -> UserRecord:
    """Resolve an email through the local user directory."""
    directory = UserDirectory(config.get_database_path())
    return directory.resolve(email)


def get_formatter() -> DashboardFormatter:
    return DashboardFormatter(console, max_rows=config.get("max_rows", "preferences", 15))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging for every command."""
    level = "DEBUG" if verbose else config.get("log_level", default="WARNING")
    logging.basicConfig(
        level=str(level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def dashboard(
    email: str = typer.Argument(..., help="Email of the user"),
):
    """
    Show the full prioritized dashboard

    Example:
        coursedash dashboard student@example.edu
    """
    try:
        user = resolve_user(email)
        data = get_aggregator().get_dashboard(user.user_id, user.role)
        get_formatter().render_dashboard(data, email=user.email)

        if data.dropped:
            console.print(f"[dim]{data.dropped} records could not be displayed[/dim]")

    except (CourseDashError, FileNotFoundError) as e:
        console.print(f"[red]Error loading dashboard: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def tasks(
    email: str = typer.Argument(..., help="Email of the user"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter by status (pending, completed, ...)"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="Filter by priority (urgent, warning, safe)"),
    type: Optional[str] = typer.Option(None, "--type", "-t", help="'meeting' or 'all' to include meetings"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum number of items"),
):
    """
    List tasks and meetings

    Example:
        coursedash tasks student@example.edu --priority urgent
    """
    if limit is None:
        limit = config.get("tasks_limit", "preferences", 20)
    if limit < 0:
        console.print("[red]--limit must not be negative[/red]")
        raise typer.Exit(1)

    try:
        user = resolve_user(email)
        items = get_aggregator().get_tasks(
            user.user_id, user.role, status=status, priority=priority, type=type, limit=limit
        )
        get_formatter().render_items(items, "Tasks", date.today())

    except (CourseDashError, FileNotFoundError) as e:
        console.print(f"[red]Error loading tasks: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def announcements(
    email: str = typer.Argument(..., help="Email of the user"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum number of announcements"),
):
    """List announcements addressed to the user"""
    if limit is None:
        limit = config.get("announcements_limit", "preferences", 10)
    if limit < 0:
        console.print("[red]--limit must not be negative[/red]")
        raise typer.Exit(1)

    try:
        user = resolve_user(email)
        items = get_aggregator().get_announcements(user.user_id, limit=limit)
        get_formatter().render_items(items, "Announcements", date.today())

    except (CourseDashError, FileNotFoundError) as e:
        console.print(f"[red]Error loading announcements: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def urgent(
    email: str = typer.Argument(..., help="Email of the user"),
):
    """Show only urgent items, soonest due first"""
    try:
        user = resolve_user(email)
        items = get_aggregator().get_urgent_items(user.user_id, user.role)
        get_formatter().render_items(items, "Urgent", date.today())

    except (CourseDashError, FileNotFoundError) as e:
        console.print(f"[red]Error loading urgent items: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def stats(
    email: str = typer.Argument(..., help="Email of the user"),
):
    """Show dashboard statistics"""
    try:
        user = resolve_user(email)
        result = get_aggregator().get_user_stats(user.user_id, user.role)
    except (CourseDashError, FileNotFoundError) as e:
        console.print(f"[red]Error loading stats: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Dashboard Statistics for {escape(user.email)}", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Total items", str(result.total))
    table.add_row("Urgent", f"[red]{result.urgent}[/red]")
    table.add_row("Pending", str(result.pending))
    table.add_row("Completed", f"[green]{result.completed}[/green]")
    table.add_row("Overdue", f"[red bold]{result.overdue}[/red bold]" if result.overdue else "0")
    table.add_row("Tasks", str(result.tasks))
    table.add_row("Meetings", str(result.meetings))
    table.add_row("Announcements", str(result.announcements))
    table.add_row("Completion rate", f"{result.completion_rate:.2f}%")
    table.add_row("Due this week", str(result.this_week_due))
    table.add_row("Due next week", str(result.next_week_due))

    console.print(table)


if __name__ == "__main__":
    app()
