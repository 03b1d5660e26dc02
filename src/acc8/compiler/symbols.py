"""
Symbol Table and Memory Allocator
=================================

Maps declared variable names to fixed data-memory addresses.

Allocation Model
----------------
Every variable occupies exactly one machine word (one byte). Addresses
are handed out in declaration order starting at the configured base
address:

    address(n-th declaration) = base_address + n * WORD_SIZE

Addresses are never reused and never reach memory_size.

Scoping
-------
The language has a single flat program scope. Declarations inside IF
blocks still belong to it. A name must be declared before it is used,
and may only be declared once.

The SymbolAllocator walks the AST in program order before any code is
generated, so semantic errors surface before a single instruction is
emitted.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from acc8.errors import SourceLocation
from acc8.compiler.ast import ASTVisitor, Assignment, Program, VarDecl, VariableRef
from acc8.compiler.errors import (
    UndeclaredVariableError,
    DuplicateDeclarationError,
    OutOfMemoryError,
)

logger = logging.getLogger(__name__)


WORD_SIZE = 1


@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Variable name
        address: Data-memory address of the variable's byte
        location: Where the variable was declared
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Declaration-ordered table of variables and their addresses.

    Usage:
        table = SymbolTable(base_address=0, memory_size=256)
        table.declare("a", location)
        table.resolve("a")      # -> 0
    """

    def __init__(self, base_address: int = 0, memory_size: int = 256):
        self.base_address = base_address
        self.memory_size = memory_size
        self._symbols: dict[str, Symbol] = {}
        self._next_address = base_address

    def declare(self, name: str, location: Optional[SourceLocation] = None) -> Symbol:
        """
        Allocate the next free address to a new variable.

        Raises:
            DuplicateDeclarationError: If the name is already declared
            OutOfMemoryError: If no address is left below memory_size
        """
        existing = self._symbols.get(name)
        if existing is not None:
            raise DuplicateDeclarationError(
                name,
                location=location,
                original_location=existing.location,
            )

        if self._next_address + WORD_SIZE > self.memory_size:
            raise OutOfMemoryError(name, self.memory_size, location=location)

        symbol = Symbol(name, self._next_address, location)
        self._symbols[name] = symbol
        self._next_address += WORD_SIZE

        logger.debug("allocated %s at 0x%02X", name, symbol.address)
        return symbol

    def resolve(self, name: str, location: Optional[SourceLocation] = None) -> int:
        """
        Return the address of a declared variable.

        Raises:
            UndeclaredVariableError: If the name has not been declared
        """
        symbol = self._symbols.get(name)
        if symbol is None:
            raise UndeclaredVariableError(name, location=location)
        return symbol.address

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)

    def addresses(self) -> dict[str, int]:
        """Name -> address mapping in declaration order."""
        return {symbol.name: symbol.address for symbol in self._symbols.values()}


class SymbolAllocator(ASTVisitor):
    """
    Fills a SymbolTable by walking the AST in program order.

    Reads are checked in the same order the code generator evaluates
    them: a declaration's initializer before the declared name, an
    assignment's value before its target.
    """

    def __init__(self, table: SymbolTable):
        self.table = table

    def visit_VarDecl(self, node: VarDecl):
        self.visit(node.initializer)
        self.table.declare(node.name, node.location)

    def visit_Assignment(self, node: Assignment):
        self.visit(node.value)
        self.table.resolve(node.target, node.location)

    def visit_VariableRef(self, node: VariableRef):
        self.table.resolve(node.name, node.location)


def allocate_symbols(
    program: Program,
    base_address: int = 0,
    memory_size: int = 256,
) -> SymbolTable:
    """Build the symbol table for a whole program."""
    table = SymbolTable(base_address, memory_size)
    SymbolAllocator(table).visit(program)
    return table
