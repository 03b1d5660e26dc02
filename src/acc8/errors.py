"""
acc8 Error Hierarchy
====================

This module defines the root of the exception hierarchy for the acc8
toolchain. All exceptions inherit from Acc8Error, allowing callers to
catch every toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
Acc8Error (base)
├── ConfigurationError - invalid compiler or machine configuration
├── CompilerError (see acc8.compiler.errors)
│   ├── LexError, ParseError
│   ├── SemanticError - undeclared/duplicate variables, out of memory
│   ├── CodeGenError - unsupported operators/constructs, register pressure
│   └── LabelError - unresolved/duplicate labels
└── MachineError (see acc8.machine) - reference machine faults

Design Philosophy
-----------------
Errors derived from source text capture a SourceLocation (filename, line,
column). Errors derived from code generation carry a description of the
offending construct instead. Formatting a user-facing diagnostic with the
source line and a caret is left to the caller (see acc8.cli.errors).
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class Acc8Error(Exception):
    """
    Base exception for all acc8 errors.

    All exceptions in the toolchain inherit from this class:

        try:
            compile_source("VAR a = 1;")
        except Acc8Error as e:
            print(f"Error: {e}")
    """
    pass


class ConfigurationError(Acc8Error):
    """
    Invalid configuration value.

    Raised when CompilerOptions or the reference machine are given values
    they cannot work with, such as a zero memory size or a register set
    with fewer than two registers.
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
