"""
Console output formatting using Rich.
"""

import calendar

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from time_workdays.data.schemas import (
    PROVIDER_DESCRIPTIONS,
    Provider,
    TimeResult,
    WorkdayResult,
    iso_date,
)

WEEKDAY_HEADERS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class ConsoleFormatter:
    """Formats output for console display using Rich."""

    def __init__(self, console: Console = None):
        """Initialize the console formatter."""
        self.console = console or Console()

    def print_result(self, result: WorkdayResult) -> None:
        """
        Print a workday result: summary, calendar grid and date lists.

        Args:
            result: WorkdayResult to display.
        """
        self.console.print()
        self.console.rule(
            f"[bold blue]Workdays {result.year}-{result.month:02d}[/bold blue]"
        )
        self.console.print()

        summary_table = Table(show_header=False, box=None)
        summary_table.add_column("Label", style="cyan", width=20)
        summary_table.add_column("Value", style="white", justify="right", width=10)

        summary_table.add_row("Provider:", result.provider.value)
        summary_table.add_row("Calendar Days:", str(result.days_in_month))
        summary_table.add_row("Holidays:", str(len(result.holidays)))
        summary_table.add_row("Makeup Workdays:", str(len(result.makeup_workdays)))
        summary_table.add_row("", "─" * 10)
        summary_table.add_row(
            Text("Workdays:", style="bold green"),
            Text(str(len(result.workdays)), style="bold green"),
        )

        self.console.print(Panel(summary_table, title="[bold]Summary[/bold]"))
        self.print_calendar(result)

        if result.holidays:
            self.console.print(f"[red]Holidays:[/red] {', '.join(result.holidays)}")
        if result.makeup_workdays:
            self.console.print(
                f"[yellow]Makeup workdays:[/yellow] {', '.join(result.makeup_workdays)}"
            )
        self.console.print()

    def print_calendar(self, result: WorkdayResult) -> None:
        """
        Print the month as a calendar grid.

        Workdays are green, makeup workdays yellow, holidays red and
        ordinary weekend days dim.
        """
        workdays = set(result.workdays)
        holidays = set(result.holidays)
        makeup = set(result.makeup_workdays)

        grid = Table(title=f"[bold]{calendar.month_name[result.month]} {result.year}[/bold]")
        for header in WEEKDAY_HEADERS:
            grid.add_column(header, justify="right", width=4)

        for week in calendar.monthcalendar(result.year, result.month):
            cells = []
            for day in week:
                if day == 0:
                    cells.append("")
                    continue
                date_str = iso_date(result.year, result.month, day)
                if date_str in makeup:
                    style = "bold yellow"
                elif date_str in workdays:
                    style = "green"
                elif date_str in holidays:
                    style = "bold red"
                else:
                    style = "dim"
                cells.append(Text(str(day), style=style))
            grid.add_row(*cells)

        self.console.print(grid)

    def print_time(self, result: TimeResult) -> None:
        """Print a formatted current time."""
        self.console.print(
            f"[cyan]{result.timezone}[/cyan] {result.text} [dim](UTC{result.offset})[/dim]"
        )

    def print_providers(self) -> None:
        """Print a table of supported providers."""
        self.console.print()
        self.console.rule("[bold blue]Holiday Data Providers[/bold blue]")
        self.console.print()

        table = Table()
        table.add_column("Name", style="cyan", width=8)
        table.add_column("Source", style="white")

        for provider in Provider:
            table.add_row(provider.value, PROVIDER_DESCRIPTIONS[provider])

        self.console.print(table)
        self.console.print()

    def print_error(self, message: str) -> None:
        """
        Print an error message.

        Args:
            message: Error message to display.
        """
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def print_success(self, message: str) -> None:
        """
        Print a success message.

        Args:
            message: Success message to display.
        """
        self.console.print(f"[bold green]Success:[/bold green] {message}")
