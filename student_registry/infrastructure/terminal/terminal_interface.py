# student_registry/infrastructure/terminal/terminal_interface.py
"""
Terminal interface with colored output and result tables for the command line.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from enum import Enum
from dataclasses import dataclass, fields, is_dataclass

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback


class LogLevel(Enum):
    """Log level enumeration."""
    SILENT = 0
    MINIMAL = 1
    NORMAL = 2
    VERBOSE = 3
    DEBUG = 4


_ROOT_LEVELS = {
    LogLevel.SILENT: logging.CRITICAL,
    LogLevel.MINIMAL: logging.ERROR,
    LogLevel.NORMAL: logging.WARNING,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG
}


@dataclass
class TerminalConfig:
    """Terminal interface configuration."""
    log_level: LogLevel = LogLevel.NORMAL
    use_colors: bool = True
    show_timestamps: bool = False


class TerminalInterface:
    """Rich console output and logging setup for the CLI."""

    def __init__(self, config: TerminalConfig = None, console: Optional[Console] = None):
        self.config = config or TerminalConfig()
        self.console = console or Console(no_color=not self.config.use_colors)

        install_rich_traceback(show_locals=self.config.log_level == LogLevel.DEBUG)

    @property
    def silent(self) -> bool:
        return self.config.log_level == LogLevel.SILENT

    def setup_logging(self, log_file: Optional[str] = None) -> None:
        """Setup logging with rich formatting; the log file always receives DEBUG records."""
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(_ROOT_LEVELS[self.config.log_level])

        if not self.silent:
            console_handler = RichHandler(
                console=self.console,
                show_time=self.config.show_timestamps,
                show_path=self.config.log_level == LogLevel.DEBUG,
                rich_tracebacks=True
            )
            console_handler.setLevel(root_logger.level)
            root_logger.addHandler(console_handler)

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
            ))
            root_logger.addHandler(file_handler)
            root_logger.setLevel(logging.DEBUG)

    def print_header(self, title: str, subtitle: Optional[str] = None) -> None:
        """Print application header."""
        if self.silent:
            return

        header_text = Text(title, style="bold blue")
        if subtitle:
            header_text.append(f"\n{subtitle}", style="italic")

        self.console.print(Panel(header_text, border_style="blue", padding=(1, 2)))
        self.console.print()

    def print_section(self, title: str, style: str = "bold cyan") -> None:
        if self.silent:
            return
        self.console.print(f"\n[{style}]{title}[/{style}]")

    def print_success(self, message: str) -> None:
        if self.silent:
            print(f"OK {message}")
        else:
            self.console.print(f"[green]✅ {message}[/green]")

    def print_error(self, message: str) -> None:
        if self.silent:
            print(f"ERROR {message}")
        else:
            self.console.print(f"[red]❌ {message}[/red]")

    def print_warning(self, message: str) -> None:
        if not self.silent:
            self.console.print(f"[yellow]⚠️  {message}[/yellow]")

    def print_info(self, message: str) -> None:
        if self.config.log_level in (LogLevel.VERBOSE, LogLevel.DEBUG):
            self.console.print(f"[blue]ℹ️  {message}[/blue]")

    def print_results_table(self, title: str, data: Dict[str, Any]) -> None:
        """Print key/value results in a formatted table."""
        if self.silent:
            return

        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        for key, value in data.items():
            display_key = key.replace('_', ' ').title()

            if isinstance(value, bool):
                display_value = "✅" if value else "❌"
            elif value is None:
                display_value = "-"
            else:
                display_value = str(value)

            table.add_row(display_key, display_value)

        self.console.print(table)

    def print_records_table(self, title: str, records: Sequence[Any],
                            columns: Optional[List[str]] = None) -> None:
        """Print dataclass records one per row; columns default to the record fields."""
        if self.silent:
            return

        if not records:
            self.print_warning(f"{title}: no records found")
            return

        first = records[0]
        if columns is None:
            columns = [f.name for f in fields(first)] if is_dataclass(first) else list(first.keys())

        table = Table(title=f"{title} ({len(records)})", show_header=True, header_style="bold magenta")
        for column in columns:
            table.add_column(column.replace('_', ' ').title(), overflow="fold")

        for record in records:
            getter = record.get if isinstance(record, dict) else lambda name: getattr(record, name, None)
            table.add_row(*["" if getter(column) is None else str(getter(column)) for column in columns])

        self.console.print(table)


def get_terminal_interface(verbose: bool = False, debug: bool = False,
                           quiet: bool = False, silent: bool = False) -> TerminalInterface:
    """Get terminal interface instance for the parsed verbosity flags."""
    log_level = LogLevel.NORMAL

    if debug:
        log_level = LogLevel.DEBUG
    elif verbose:
        log_level = LogLevel.VERBOSE
    elif quiet:
        log_level = LogLevel.MINIMAL
    elif silent:
        log_level = LogLevel.SILENT

    config = TerminalConfig(
        log_level=log_level,
        use_colors=True,
        show_timestamps=log_level == LogLevel.DEBUG
    )

    return TerminalInterface(config)
