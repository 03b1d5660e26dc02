"""
Unified CLI Error Handling
==========================

Provides consistent error reporting and exit codes across CLI tools.
Compiler errors are printed with the offending source line and a caret
under the error column:

    prog.src:3:10: error: undeclared variable 'x'
        result = x + 1;
                 ^
    hint: declare it first with 'VAR x = ...;'
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn, Optional

import click

from acc8.errors import Acc8Error
from acc8.compiler.errors import CompilerError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Compilation error or machine fault
    INVALID_ARGS = 2     # Invalid arguments, missing or undecodable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def format_diagnostic(error: CompilerError, source: Optional[str] = None) -> str:
    """
    Format a compiler error for the terminal.

    Adds the source line and a caret pointer when the error has a
    location and the source text is available.
    """
    if error.location:
        parts = [f"{error.location}: error: {error.message}"]
    else:
        parts = [f"error: {error.message}"]

    if source is not None and error.location is not None:
        lines = source.splitlines()
        if 0 < error.location.line <= len(lines):
            parts.append(f"    {lines[error.location.line - 1]}")
            if error.location.column > 0:
                padding = " " * (4 + error.location.column - 1)
                parts.append(f"{padding}^")

    if error.hint:
        parts.append(f"hint: {error.hint}")

    return "\n".join(parts)


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    source: Optional[str] = None,
) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        source: Source text, used to show context for compiler errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, CompilerError):
        click.echo(format_diagnostic(error, source), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, Acc8Error):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError, click.BadParameter)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: source file is not valid UTF-8 ({error})", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
