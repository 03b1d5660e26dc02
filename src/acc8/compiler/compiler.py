"""
acc8 Compiler Main Module
=========================

This module provides the main compiler interface. It runs the whole
pipeline for one compilation unit:

    Source → Lex → Parse → Allocate symbols → Generate → Resolve labels

Usage
-----
Command line:
    $ acc8c prog.src -o prog.asm

Programmatic:
    >>> from acc8.compiler import compile_source
    >>> result = compile_source("VAR a = 5;")
    >>> print(result.assembly)
    LOAD A, #5
    STORE A, 0x00

Compilation State
-----------------
The only mutable state of a compilation (the label counter and the
symbol table) lives in a CompilationContext created by each call to
Compiler.compile_source. Nothing is shared between calls, so separate
compilations may run concurrently on different threads.

Error Handling
--------------
Every stage stops at the first error and the exception propagates to
the caller unchanged; no partial result is returned.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from acc8.errors import ConfigurationError
from acc8.compiler.ast import Program
from acc8.compiler.codegen import DEFAULT_REGISTERS, CodeGenerator, LabelAllocator
from acc8.compiler.instructions import Instruction
from acc8.compiler.lexer import Lexer, Token
from acc8.compiler.parser import Parser
from acc8.compiler.resolver import ResolvedProgram, resolve_labels
from acc8.compiler.symbols import SymbolTable, allocate_symbols

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        memory_size: Number of addressable data-memory bytes (default 256,
                     an 8-bit address space)
        variable_base_address: Address of the first declared variable
        register_set: Ordered register names; the first is the accumulator
                      and at least two are required for binary operations
        zero_initialized_memory: The machine clears memory at reset, so a
                      declaration initialized to literal 0 needs no code
    """
    memory_size: int = 256
    variable_base_address: int = 0
    register_set: tuple[str, ...] = DEFAULT_REGISTERS
    zero_initialized_memory: bool = True

    def __post_init__(self):
        self.register_set = tuple(self.register_set)

        if self.memory_size <= 0:
            raise ConfigurationError(f"memory size must be positive, got {self.memory_size}")
        if not 0 <= self.variable_base_address < self.memory_size:
            raise ConfigurationError(
                f"variable base address {self.variable_base_address} is outside "
                f"memory of {self.memory_size} bytes"
            )
        if len(self.register_set) < 2:
            raise ConfigurationError("register set needs at least two registers")
        if len(set(self.register_set)) != len(self.register_set):
            raise ConfigurationError(f"duplicate register in {self.register_set}")


@dataclass
class CompilationContext:
    """
    State owned by exactly one compilation.

    Attributes:
        options: Configuration in effect
        labels: Label counter, seeded at zero
        symbols: Symbol table, filled by the allocation pass
    """
    options: CompilerOptions
    labels: LabelAllocator = field(default_factory=LabelAllocator)
    symbols: Optional[SymbolTable] = None


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    Attributes:
        filename: Source filename
        tokens: Token stream including the final EOF token
        ast: Parsed program
        symbols: Variable -> address table
        instructions: Generated instructions with symbolic labels
        program: Address-resolved program
    """
    filename: str
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Program] = None
    symbols: Optional[SymbolTable] = None
    instructions: list[Instruction] = field(default_factory=list)
    program: Optional[ResolvedProgram] = None

    @property
    def assembly(self) -> str:
        """The resolved program as assembly text."""
        return self.program.render() if self.program else ""


class Compiler:
    """
    acc8 compiler for the 8-bit accumulator machine.

    Example:
        compiler = Compiler(CompilerOptions(variable_base_address=0x10))
        result = compiler.compile_file("prog.src")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile source text to resolved assembly.

        Raises:
            CompilerError: From whichever stage fails first
        """
        context = CompilationContext(self.options)
        result = CompilerResult(filename=filename)

        # Stage 1: Lexical analysis
        result.tokens = list(Lexer(source, filename).tokenize())
        logger.debug("%s: %d tokens", filename, len(result.tokens))

        # Stage 2: Parsing
        result.ast = Parser(result.tokens, filename).parse()
        logger.debug("%s: %d top-level statements", filename, len(result.ast.statements))

        # Stage 3: Memory allocation
        context.symbols = allocate_symbols(
            result.ast,
            base_address=self.options.variable_base_address,
            memory_size=self.options.memory_size,
        )
        result.symbols = context.symbols
        logger.debug("%s: %d variables allocated", filename, len(context.symbols))

        # Stage 4: Code generation
        generator = CodeGenerator(
            context.symbols,
            context.labels,
            registers=self.options.register_set,
            zero_initialized_memory=self.options.zero_initialized_memory,
        )
        result.instructions = generator.generate(result.ast)

        # Stage 5: Label resolution
        result.program = resolve_labels(result.instructions)
        logger.debug("%s: %d instructions after resolution", filename, len(result.program))

        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a UTF-8 source file.

        Raises:
            FileNotFoundError: If the source file does not exist
            CompilerError: From whichever stage fails first
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        return self.compile_source(path.read_text(encoding="utf-8"), str(path))


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> CompilerResult:
    """Compile source text with the given (or default) options."""
    return Compiler(options).compile_source(source, filename)


def compile_file(filepath: str | Path, options: Optional[CompilerOptions] = None) -> CompilerResult:
    """Compile a source file with the given (or default) options."""
    return Compiler(options).compile_file(filepath)
