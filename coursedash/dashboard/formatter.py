"""
Rich formatter module for the course dashboard.

Handles all Rich-based CLI formatting for the dashboard display.
"""

from datetime import date
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from coursedash.core.models import DashboardData, DashboardStats, Item, ItemType


# Icons per item type
TYPE_ICONS = {
    ItemType.TASK.value: "[white]✎[/white]",
    ItemType.MEETING.value: "[cyan]◷[/cyan]",
    ItemType.ANNOUNCEMENT.value: "[magenta]✉[/magenta]",
}

# Priority colors; upstream announcement priorities fall back to white
PRIORITY_COLORS = {
    "urgent": "red bold",
    "warning": "yellow",
    "safe": "green",
}


class DashboardFormatter:
    """
    Rich-based formatter for the course dashboard.

    Renders the prioritized item list and the summary stats as panels.
    """

    def __init__(self, console: Optional[Console] = None, max_rows: int = 15):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
            max_rows: Maximum item rows per panel
        """
        self.console = console or Console()
        self.max_rows = max_rows

    def _format_priority(self, priority: str) -> str:
        """Format priority as colored badge."""
        color = PRIORITY_COLORS.get(priority, "white")
        return f"[{color}]{escape(str(priority))}[/{color}]"

    def _format_due_date(self, item: Item, today: date) -> str:
        """Format due date relative to the processing date."""
        days_diff = (item.due_date - today).days

        if days_diff < 0:
            abs_days = abs(days_diff)
            if abs_days == 1:
                return "[red bold]1 day ago[/red bold]"
            return f"[red bold]{abs_days} days ago[/red bold]"
        elif days_diff == 0:
            return "[yellow bold]Due today[/yellow bold]"
        elif days_diff == 1:
            return "[yellow]Due tmrw[/yellow]"
        elif days_diff <= 7:
            return f"[white]Due {item.due_date.strftime('%a')}[/white]"
        else:
            return f"[dim]{item.due_date.strftime('%b %d')}[/dim]"

    def _truncate(self, text: Optional[str], width: int) -> str:
        text = text or "(untitled)"
        return text[:width] + "..." if len(text) > width else text

    def format_items(
        self,
        items: Sequence[Item],
        title: str,
        today: date,
        border_style: str = "green"
    ) -> Panel:
        """
        Create panel listing items in their dashboard order.

        Args:
            items: Items to display
            title: Panel title
            today: Processing date for relative due dates
            border_style: Rich border style

        Returns:
            Rich Panel with item table
        """
        if not items:
            return Panel(
                Text("Nothing due", style="dim", justify="center"),
                title=f"[bold]{title}[/bold]",
                border_style=border_style,
                padding=(0, 1),
            )

        table = Table(
            show_header=False,
            box=None,
            padding=(0, 1),
            expand=True,
        )
        table.add_column("Type", width=2)
        table.add_column("Name", ratio=1)
        table.add_column("Course", width=18)
        table.add_column("Due", width=12, justify="right")
        table.add_column("Priority", width=8, justify="right")

        for item in items[:self.max_rows]:
            table.add_row(
                TYPE_ICONS.get(item.type.value, "○"),
                escape(self._truncate(item.name, 40)),
                f"[dim]{escape(self._truncate(item.course, 18))}[/dim]",
                self._format_due_date(item, today),
                self._format_priority(item.priority),
            )

        if len(items) > self.max_rows:
            table.add_row("", f"[dim]+ {len(items) - self.max_rows} more...[/dim]", "", "", "")

        return Panel(
            table,
            title=f"[bold]{title} ({len(items)})[/bold]",
            border_style=border_style,
            padding=(0, 1),
        )

    def format_stats_bar(self, stats: DashboardStats) -> str:
        """
        Create bottom stats bar.

        Args:
            stats: Dashboard statistics

        Returns:
            Formatted stats string
        """
        parts = [
            f"[white]{stats.total} items[/white]",
            f"[red]⚠ {stats.urgent} urgent[/red]",
            f"[white]○ {stats.pending} pending[/white]",
            f"[green]✓ {stats.completed} completed[/green]",
        ]

        if stats.overdue > 0:
            parts.append(f"[red bold]{stats.overdue} overdue[/red bold]")

        parts.append(f"[dim]{stats.completion_rate:.2f}% done[/dim]")
        parts.append(f"[dim]{stats.this_week_due} this week • {stats.next_week_due} next week[/dim]")

        return " │ ".join(parts)

    def render_dashboard(self, data: DashboardData, email: str = "") -> None:
        """
        Render the complete dashboard to console.

        Args:
            data: Complete dashboard data
            email: Requesting user, shown in the header
        """
        header = Text()
        header.append(f"{email}\n" if email else "", style="bold")
        header.append(data.generated_on.strftime("%A, %B %d, %Y"), style="dim")
        self.console.print(Panel(header, title="[bold]Course Dashboard[/bold]",
                                 title_align="center", border_style="blue", padding=(0, 2)))
        self.console.print()

        self.console.print(self.format_items(list(data.items), "Dashboard", data.generated_on))
        self.console.print()

        self.console.print("─" * 60)
        self.console.print(self.format_stats_bar(data.stats), justify="center")
        self.console.print("─" * 60)

    def render_items(self, items: Sequence[Item], title: str, today: date) -> None:
        """Render a single item panel (tasks, urgent items, announcements)."""
        self.console.print(self.format_items(items, title, today))
