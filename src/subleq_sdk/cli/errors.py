"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes across all CLI tools.
Every fatal condition (bad usage, assembly error, unreadable program
array) exits with status 1.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    FATAL_ERROR = 1      # Usage, assembly or simulation error
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for all CLI tools.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Assembly")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from subleq_sdk.errors import SubleqError

    if isinstance(error, SubleqError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.FATAL_ERROR)

    elif isinstance(error, (click.BadParameter, ValueError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.FATAL_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.FATAL_ERROR)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)


def run_command(command: click.Command) -> NoReturn:
    """
    Console-script entry point for a click command.

    Click reports usage errors (such as a missing filename) with status 2;
    this runs the command without standalone mode so they exit with 1
    like every other fatal error.
    """
    try:
        result = command.main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(ExitCode.FATAL_ERROR)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(ExitCode.FATAL_ERROR)
    sys.exit(result if isinstance(result, int) else ExitCode.SUCCESS)
