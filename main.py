# main.py
"""
Command line entry point for the student registry legacy data access.
"""

import sys
import argparse
import signal
from pathlib import Path
from typing import Optional

from student_registry.application.bootstrap.application_bootstrap import ApplicationContainer
from student_registry.application.services.student_service import StudentService
from student_registry.domain.models import DatabaseKind
from student_registry.infrastructure.configuration.configuration_manager import EnhancedConfigurationManager
from student_registry.infrastructure.terminal.terminal_interface import (
    LogLevel, TerminalInterface, get_terminal_interface
)

# Global references for graceful shutdown
app_container: Optional[ApplicationContainer] = None
terminal_interface: Optional[TerminalInterface] = None


def setup_signal_handlers() -> None:
    """Setup signal handlers for graceful shutdown."""

    def signal_handler(_signum, _frame):
        if terminal_interface:
            terminal_interface.print_warning("Received interrupt signal, shutting down gracefully...")
        if app_container:
            app_container.shutdown()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def report_exception(exception: Exception, operation_context: str) -> None:
    terminal_interface.print_error(f"{operation_context}: {exception}")
    if terminal_interface.config.log_level in (LogLevel.VERBOSE, LogLevel.DEBUG):
        terminal_interface.console.print_exception()


def create_sample_configuration(output_path: str = "config.yaml") -> int:
    """Create a sample configuration file."""
    terminal_interface.print_section("📝 Creating Sample Configuration")

    if Path(output_path).exists():
        terminal_interface.print_error(f"Configuration file already exists: {output_path}")
        return 1

    try:
        config_manager = EnhancedConfigurationManager(output_path)
        config_manager.save_configuration(output_path)
        terminal_interface.print_success(f"Sample configuration created: {output_path}")
        terminal_interface.print_info("Please edit the configuration file with your connection settings.")
        return 0
    except Exception as config_error:
        terminal_interface.print_error(f"Failed to create configuration: {config_error}")
        return 1


def validate_configuration_file(config_path: str) -> int:
    """Validate configuration file."""
    terminal_interface.print_section("🔧 Configuration Validation")

    config_manager = EnhancedConfigurationManager(config_path)
    errors = config_manager.validate_configuration()

    if errors:
        terminal_interface.print_error("Configuration validation failed:")
        for error in errors:
            terminal_interface.print_error(f"  • {error}")
        return 1

    terminal_interface.print_success("Configuration validation passed!")
    return 0


def check_connection(container: ApplicationContainer, kind: str) -> int:
    """Open a connection of the given kind and run its test query."""
    resolved = DatabaseKind.from_selector(kind)
    terminal_interface.print_section(f"🔌 Connection Check [{resolved.value}]")

    with terminal_interface.console.status(f"Connecting to {resolved.value}..."):
        working = container.get_connection_factory().test_connection(resolved)

    terminal_interface.print_results_table("Connection", {"database": resolved.value, "connected": working})
    return 0 if working else 1


def search_by_name(container: ApplicationContainer, args: argparse.Namespace) -> int:
    terminal_interface.print_section("🔍 Student Search")
    results = container.get_student_service().search_by_name(
        args.search_name, args.birth_date, args.cpf, args.mother_name
    )
    terminal_interface.print_records_table(
        "Students", results, ["setps_code", "name", "birth_date", "mother_name"]
    )
    return 0


def list_eligible(container: ApplicationContainer, args: argparse.Namespace) -> int:
    if not args.school or not args.year:
        terminal_interface.print_error("--eligible requires --school and --year")
        return 2

    terminal_interface.print_section("📋 Eligible Students")
    records = container.get_student_service().list_eligible(args.initials, args.school, args.year, args.birth_date)
    terminal_interface.print_records_table("Eligible students", records)
    return 0


def show_student(container: ApplicationContainer, args: argparse.Namespace) -> int:
    terminal_interface.print_section("👤 Student Record")
    student = container.get_student_service().get_student_by_setps_code(args.student, args.school)

    if student == "-1":
        terminal_interface.print_error("Student lookup failed, see the log for details")
        return 1
    if student is None:
        terminal_interface.print_warning(f"No student found for SETPS code {args.student}")
        return 0

    terminal_interface.print_results_table(f"Student {student.setps_code}", {
        "name": student.name,
        "birth_date": student.birth_date,
        "mother_name": student.mother_name,
        "enrollment": student.enrollment,
        "series": student.series,
        "grade": student.grade,
        "shift": student.shift,
        "city": student.address.city
    })
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Student registry legacy database tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --create-config
  python main.py --check-connection oracle
  python main.py --search-name silva --birth-date 01/02/2010
  python main.py --eligible --school 1234 --year 2024 --initials A,B
        """
    )

    parser.add_argument("-c", "--config", default="config.yaml", help="Path to configuration file")
    parser.add_argument("--create-config", action="store_true", help="Create a sample configuration file and exit")
    parser.add_argument("--validate-config", action="store_true", help="Validate configuration file and exit")
    parser.add_argument("--check-connection", metavar="KIND",
                        help="Test a database connection (oracle, sqlserver or default)")

    parser.add_argument("--search-name", metavar="NAME", help="Search students by name")
    parser.add_argument("--student", metavar="SETPS_CODE", help="Show the full record of a student")
    parser.add_argument("--eligible", action="store_true", help="List eligible students for a school and year")
    parser.add_argument("--birth-date", help="Birth date filter (dd/mm/yyyy)")
    parser.add_argument("--cpf", help="CPF filter (11 digits)")
    parser.add_argument("--mother-name", help="Mother name filter")
    parser.add_argument("--school", help="School code")
    parser.add_argument("--year", help="Validity year")
    parser.add_argument("--initials", help="Comma-separated name initials")

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Quiet mode (minimal output)")
    parser.add_argument("--silent", action="store_true", help="Silent mode (no output)")
    return parser


def main(argv: Optional[list] = None) -> int:
    """Main application entry point."""
    global app_container, terminal_interface

    parser = build_parser()
    args = parser.parse_args(argv)

    terminal_interface = get_terminal_interface(args.verbose, args.debug, args.quiet, args.silent)
    terminal_interface.print_header("Student Registry", "Legacy database access")

    if args.create_config:
        return create_sample_configuration(args.config)

    if args.validate_config:
        return validate_configuration_file(args.config)

    if args.cpf and not StudentService.verify_cpf(args.cpf):
        terminal_interface.print_error(f"Invalid CPF: {args.cpf}")
        return 2

    if args.birth_date and not StudentService.verify_date(args.birth_date):
        terminal_interface.print_error(f"Invalid birth date: {args.birth_date}")
        return 2

    try:
        config_manager = EnhancedConfigurationManager(args.config)
        terminal_interface.setup_logging(config_manager.get_value("files.log_file"))
        setup_signal_handlers()

        app_container = ApplicationContainer(config_manager=config_manager)

        if args.check_connection:
            return check_connection(app_container, args.check_connection)
        if args.student:
            return show_student(app_container, args)
        if args.search_name:
            return search_by_name(app_container, args)
        if args.eligible:
            return list_eligible(app_container, args)

        parser.print_help()
        return 0

    except Exception as fatal_exception:
        report_exception(fatal_exception, "Fatal error")
        return 1

    finally:
        if app_container:
            app_container.shutdown()


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(1)
