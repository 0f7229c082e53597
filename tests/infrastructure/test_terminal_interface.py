"""Tests for the rich terminal interface."""

import logging

from rich.console import Console

from student_registry.domain.models import EligibleStudentRecord
from student_registry.infrastructure.terminal.terminal_interface import (
    LogLevel, TerminalConfig, TerminalInterface, get_terminal_interface
)


def recording_terminal(log_level=LogLevel.NORMAL):
    return TerminalInterface(TerminalConfig(log_level=log_level), console=Console(record=True, width=120))


class TestOutput:
    def test_records_table(self):
        terminal = recording_terminal()
        terminal.print_records_table("Eligible", [EligibleStudentRecord("10", "M1", "ANA", "01/01/2012")])

        text = terminal.console.export_text()
        assert "Eligible (1)" in text
        assert "ANA" in text
        assert "Setps Code" in text

    def test_empty_records_warns(self):
        terminal = recording_terminal()
        terminal.print_records_table("Eligible", [])

        assert "no records found" in terminal.console.export_text()

    def test_results_table_formats_values(self):
        terminal = recording_terminal()
        terminal.print_results_table("Connection", {"database": "oracle", "connected": False, "city": None})

        text = terminal.console.export_text()
        assert "oracle" in text
        assert "❌" in text

    def test_info_only_when_verbose(self):
        quiet = recording_terminal(LogLevel.NORMAL)
        quiet.print_info("hidden")
        verbose = recording_terminal(LogLevel.VERBOSE)
        verbose.print_info("shown")

        assert "hidden" not in quiet.console.export_text()
        assert "shown" in verbose.console.export_text()


class TestLogging:
    def test_file_handler_receives_debug(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        terminal = recording_terminal(LogLevel.MINIMAL)
        root_logger = logging.getLogger()
        saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
        try:
            terminal.setup_logging(str(log_file))
            logging.getLogger("student_registry.test").debug("debug line")
            for handler in root_logger.handlers:
                handler.flush()
        finally:
            for handler in root_logger.handlers:
                handler.close()
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)

        assert "debug line" in log_file.read_text(encoding="utf-8")


def test_verbosity_flags():
    assert get_terminal_interface(debug=True).config.log_level is LogLevel.DEBUG
    assert get_terminal_interface(verbose=True).config.log_level is LogLevel.VERBOSE
    assert get_terminal_interface(quiet=True).config.log_level is LogLevel.MINIMAL
    assert get_terminal_interface(silent=True).config.log_level is LogLevel.SILENT
    assert get_terminal_interface().config.log_level is LogLevel.NORMAL
