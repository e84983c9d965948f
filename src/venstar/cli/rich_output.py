"""Rich-enhanced output formatting with a plain-text mode."""

import json
import logging
import os
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

_logger = logging.getLogger(__name__)


def _should_use_rich() -> bool:
    """Check if Rich should be used.

    Returns:
        False when ``VENSTAR_NO_RICH=1`` is set, True otherwise.
    """
    return os.getenv("VENSTAR_NO_RICH", "0") != "1"


class OutputFormatter:
    """Routes CLI output to Rich renderables or plain text."""

    def __init__(self) -> None:
        self.use_rich = _should_use_rich()
        self.console: Console | None = Console() if self.use_rich else None

    def print_zone_list(self, zones: list[tuple[str, str]]) -> None:
        """Print discovered thermostats.

        Args:
            zones: List of (name, base URL) tuples
        """
        if not self.use_rich:
            self._print_zone_list_plain(zones)
        else:
            self._print_zone_list_rich(zones)

    def print_status_table(self, items: list[tuple[str, str, str]]) -> None:
        """Print status items grouped by category.

        Args:
            items: List of (category, label, value) tuples
        """
        if not self.use_rich:
            self._print_status_plain(items)
        else:
            self._print_status_rich(items)

    def print_table(
        self, title: str, columns: list[str], rows: list[list[str]]
    ) -> None:
        """Print rows of readings under a header."""
        if not self.use_rich:
            self._print_table_plain(title, columns, rows)
        else:
            self._print_table_rich(title, columns, rows)

    def print_error(
        self,
        message: str,
        title: str = "Error",
        details: list[str] | None = None,
    ) -> None:
        """Print an error message.

        Args:
            message: Main error message
            title: Panel title
            details: Optional list of detail lines
        """
        if not self.use_rich:
            self._print_error_plain(message, title, details)
        else:
            self._print_error_rich(message, title, details)

    def print_success(self, message: str) -> None:
        if not self.use_rich:
            print(f"✓ {message}")
        else:
            self._print_panel(f"[green]✓ {message}[/green]", "green")

    def print_info(self, message: str) -> None:
        if not self.use_rich:
            print(f"ℹ {message}")
        else:
            self._print_panel(f"[blue]ℹ {message}[/blue]", "blue")

    def print_json_highlighted(self, data: Any) -> None:
        """Print JSON, syntax highlighted when Rich is enabled."""
        json_str = json.dumps(data, indent=2, default=str)
        if not self.use_rich:
            print(json_str)
        else:
            assert self.console is not None
            self.console.print(
                Syntax(json_str, "json", theme="monokai", line_numbers=False)
            )

    # Plain text implementations

    def _print_zone_list_plain(self, zones: list[tuple[str, str]]) -> None:
        if not zones:
            print("No thermostats found")
            return
        print("THERMOSTATS")
        print("-" * 60)
        for name, url in zones:
            print(f"  {name or '(unnamed)':<24} {url}")
        print("-" * 60)

    def _print_status_plain(self, items: list[tuple[str, str, str]]) -> None:
        max_label = max((len(label) for _, label, _ in items), default=20)
        max_value = max((len(str(value)) for _, _, value in items), default=20)
        width = max_label + max_value + 4

        print("=" * width)
        print("THERMOSTAT STATUS")
        print("=" * width)

        current_category: str | None = None
        for category, label, value in items:
            if category != current_category:
                if current_category is not None:
                    print()
                print(category)
                print("-" * width)
                current_category = category
            print(f"  {label:<{max_label}}  {value}")

        print("=" * width)

    def _print_table_plain(
        self, title: str, columns: list[str], rows: list[list[str]]
    ) -> None:
        widths = [
            max([len(col)] + [len(row[i]) for row in rows])
            for i, col in enumerate(columns)
        ]
        print(title.upper())
        print("  ".join(c.ljust(w) for c, w in zip(columns, widths)))
        print("-" * (sum(widths) + 2 * (len(widths) - 1)))
        for row in rows:
            print("  ".join(v.ljust(w) for v, w in zip(row, widths)))

    def _print_error_plain(
        self,
        message: str,
        title: str,
        details: list[str] | None = None,
    ) -> None:
        print(f"{title}: {message}")
        if details:
            for detail in details:
                print(f"  • {detail}")

    # Rich implementations

    def _print_panel(self, content: str, style: str) -> None:
        assert self.console is not None
        self.console.print(Panel(content, border_style=style, padding=(0, 2)))

    def _print_zone_list_rich(self, zones: list[tuple[str, str]]) -> None:
        assert self.console is not None
        if not zones:
            self.console.print(
                Panel("No thermostats found", border_style="yellow")
            )
            return

        table = Table(title="Thermostats", show_header=True)
        table.add_column("Zone", style="cyan")
        table.add_column("Address", style="dim")
        for name, url in zones:
            table.add_row(name or "(unnamed)", url)
        self.console.print(table)

    def _print_status_rich(self, items: list[tuple[str, str, str]]) -> None:
        assert self.console is not None
        if not items:
            self._print_status_plain(items)
            return

        table = Table(title="THERMOSTAT STATUS", show_header=False)
        current_category: str | None = None
        for category, label, value in items:
            if category != current_category:
                if current_category is not None:
                    table.add_row()
                table.add_row(Text(category, style="bold cyan"))
                current_category = category
            table.add_row(
                Text(f"  {label}", style="magenta"),
                Text(str(value), style="green"),
            )
        self.console.print(table)

    def _print_table_rich(
        self, title: str, columns: list[str], rows: list[list[str]]
    ) -> None:
        assert self.console is not None
        table = Table(title=title, show_header=True)
        for i, column in enumerate(columns):
            table.add_column(column, style="cyan" if i == 0 else None)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)

    def _print_error_rich(
        self,
        message: str,
        title: str,
        details: list[str] | None = None,
    ) -> None:
        assert self.console is not None
        content = f"❌ {title}\n\n{message}"
        if details:
            content += "\n\nDetails:"
            for detail in details:
                content += f"\n  • {detail}"
        self.console.print(Panel(content, border_style="red", padding=(1, 2)))


_formatter: OutputFormatter | None = None


def get_formatter() -> OutputFormatter:
    """Get the global formatter instance."""
    global _formatter
    if _formatter is None:
        _formatter = OutputFormatter()
    return _formatter
