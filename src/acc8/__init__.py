"""
acc8 - Compiler Toolchain for an 8-bit Accumulator Machine
==========================================================

This package compiles a small imperative language into assembly for a
simple 8-bit accumulator machine: four general registers (A, B, C, D),
byte-addressed data memory, flag-based comparison and absolute-address
jumps.

Main Components
---------------
- **compiler**: lexer, parser, symbol allocator, code generator and
    label resolver (acc8c)
- **machine**: reference emulator that executes resolved programs
- **cli**: command-line tools

Quick Start
-----------
Compile a program:
    >>> from acc8 import compile_source
    >>> result = compile_source("VAR a = 5; VAR b = a + 1;")
    >>> print(result.assembly)

Run it on the reference machine:
    >>> from acc8 import Acc8Machine
    >>> machine = Acc8Machine()
    >>> machine.load(result.program)
    >>> steps = machine.run()
    >>> machine.memory[1]
    6

Or use the command-line tool:
    $ acc8c prog.src -o prog.asm
    $ acc8c prog.src --run

Version History
---------------
1.0.0 - Initial release with compiler, reference machine and acc8c
"""

__version__ = "1.0.0"
__author__ = "acc8 Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from acc8.errors import Acc8Error, ConfigurationError, SourceLocation
from acc8.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
    CompilerError,
    LexError,
    ParseError,
    UndeclaredVariableError,
    DuplicateDeclarationError,
    OutOfMemoryError,
    UnsupportedOperatorError,
    UnsupportedConstructError,
    RegisterPressureError,
    UnresolvedLabelError,
    DuplicateLabelError,
)
from acc8.machine import Acc8Machine, MachineError

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Compiler
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    # Exception hierarchy
    "Acc8Error",
    "ConfigurationError",
    "SourceLocation",
    "CompilerError",
    "LexError",
    "ParseError",
    "UndeclaredVariableError",
    "DuplicateDeclarationError",
    "OutOfMemoryError",
    "UnsupportedOperatorError",
    "UnsupportedConstructError",
    "RegisterPressureError",
    "UnresolvedLabelError",
    "DuplicateLabelError",
    # Reference machine
    "Acc8Machine",
    "MachineError",
]
