#!/usr/bin/env python3
"""
Attendance System administration CLI

Usage:
    python -m attendance_backend.cli <command> [options]

Commands:
    db      Database operations (init, seed)
    user    Account operations (create-admin)

Environment:
    DATABASE_URL    SQLAlchemy async URL (default: sqlite+aiosqlite:///./attendance.db)
    BCRYPT_ROUNDS   bcrypt work factor for created accounts
    LOG_LEVEL       DEBUG|INFO|WARNING|ERROR
"""
import argparse
from typing import Optional

from attendance_backend.cli.db_commands import DbCommand
from attendance_backend.cli.user_commands import UserCommand
from attendance_backend.config import load_settings, setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="attendance-cli",
        description="University Attendance System administration CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s db init
  %(prog)s db seed
  %(prog)s user create-admin --email admin@university.edu --password secret1 --first-name Ada --last-name Admin
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL or INFO)"
    )

    parser.add_argument(
        "--env-file",
        default=None,
        help="Load environment variables from this file instead of ./.env"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Database commands
    db_parser = subparsers.add_parser("db", help="Database operations")
    db_subparsers = db_parser.add_subparsers(dest="db_action")
    db_subparsers.add_parser("init", help="Create all tables")
    db_subparsers.add_parser("seed", help="Insert the demo university (idempotent)")

    # User commands
    user_parser = subparsers.add_parser("user", help="Account operations")
    user_subparsers = user_parser.add_subparsers(dest="user_action")
    admin_parser = user_subparsers.add_parser("create-admin", help="Create an ADMIN account")
    admin_parser.add_argument("--email", required=True, help="Login email")
    admin_parser.add_argument("--password", required=True, help="Password (at least 6 characters)")
    admin_parser.add_argument("--first-name", required=True, help="First name")
    admin_parser.add_argument("--last-name", required=True, help="Last name")

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 1

    settings = load_settings(parsed.env_file)
    setup_logging(parsed.log_level or settings.log_level)

    if parsed.command == "db":
        return DbCommand(settings).execute(parsed)
    elif parsed.command == "user":
        return UserCommand(settings).execute(parsed)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
