"""
CLI Error Handling
==================

Maps exceptions raised while assembling to messages and exit codes.
Argument errors never get here: click reports them itself (exit code 2)
before the command body runs.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from r16asm.errors import R16Error


class ExitCode(IntEnum):
    """Exit codes of the r16asm command."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Error in the assembly source
    INVALID_ARGS = 2     # Bad arguments, unreadable input, unwritable output
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception from an assembler run and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print the traceback of internal errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, R16Error):
        click.echo(f"Assembly error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    if isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: source file is not valid text: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if isinstance(error, OSError):
        # Reading the source or writing the ROM file
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
