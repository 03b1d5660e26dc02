"""
Compiler Error Hierarchy
========================

This module defines the exception hierarchy for the acc8 compiler.
All exceptions inherit from CompilerError, which itself inherits from
the package-wide Acc8Error.

Exception Hierarchy
-------------------
CompilerError (base for all compiler errors)
├── LexError - character that matches no token class
├── ParseError - token that does not fit the grammar
├── SemanticError - symbol table violations
│   ├── UndeclaredVariableError - use before declaration
│   ├── DuplicateDeclarationError - name declared twice
│   └── OutOfMemoryError - no address left for a variable
├── CodeGenError - code generation errors
│   ├── UnsupportedOperatorError - operator the machine cannot evaluate
│   ├── UnsupportedConstructError - AST node with no translation rule
│   └── RegisterPressureError - expression nests deeper than the register set
└── LabelError - label resolution errors
    ├── UnresolvedLabelError - branch to a label never emitted
    └── DuplicateLabelError - label emitted twice

Every stage fails fast: the first error stops compilation and propagates
to the caller unchanged.

Error Message Format
--------------------
    filename:line:column: error: description
    hint: suggestion for fixing

Example:
    prog.src:3:10: error: undeclared variable 'x'
    hint: declare it first with 'VAR x = ...;'
"""

from typing import Optional

from acc8.errors import Acc8Error, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompilerError(Acc8Error):
    """
    Base exception for all compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (if known)
        hint: A suggestion for fixing the error
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location prefix and hint."""
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical and Syntax Errors
# =============================================================================

class LexError(CompilerError):
    """
    Character in the source that starts no token.

    Example:
        VAR a = 5 * 2;    // '*' is not an operator of the language
    """

    def __init__(
        self,
        character: str,
        location: Optional[SourceLocation] = None,
        message: Optional[str] = None,
    ):
        self.character = character
        if message is None:
            message = f"unexpected character '{character}' (0x{ord(character):02X})"
        super().__init__(message, location=location)


class ParseError(CompilerError):
    """
    Token that does not match what the grammar expects.

    Attributes:
        expected: Descriptions of the tokens that would have been accepted
        found: The lexeme actually found ("end of input" at EOF)
    """

    def __init__(
        self,
        expected: tuple[str, ...],
        found: str,
        location: Optional[SourceLocation] = None,
    ):
        self.expected = tuple(expected)
        self.found = found

        if len(self.expected) == 1:
            wanted = self.expected[0]
        else:
            wanted = ", ".join(self.expected[:-1]) + f" or {self.expected[-1]}"

        super().__init__(f"expected {wanted}, found {found}", location=location)


# =============================================================================
# Semantic Errors (Symbol Table)
# =============================================================================

class SemanticError(CompilerError):
    """Source is syntactically valid but breaks a naming or memory rule."""
    pass


class UndeclaredVariableError(SemanticError):
    """
    Variable used before its declaration.

    Declarations are processed in program order, so a variable must be
    declared with VAR before the first statement that reads or assigns it.
    """

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        self.name = name
        super().__init__(
            f"undeclared variable '{name}'",
            location=location,
            hint=f"declare it first with 'VAR {name} = ...;'",
        )


class DuplicateDeclarationError(SemanticError):
    """Variable declared more than once."""

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
    ):
        self.name = name
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{name}' was first declared at {original_location}"

        super().__init__(
            f"duplicate declaration of '{name}'",
            location=location,
            hint=hint,
        )


class OutOfMemoryError(SemanticError):
    """Declaring another variable would exceed the machine's memory."""

    def __init__(
        self,
        name: str,
        memory_size: int,
        location: Optional[SourceLocation] = None,
    ):
        self.name = name
        self.memory_size = memory_size
        super().__init__(
            f"no memory left for '{name}' ({memory_size} addresses available)",
            location=location,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(CompilerError):
    """Error raised while translating the AST into instructions."""
    pass


class UnsupportedOperatorError(CodeGenError):
    """Operator the target machine has no translation for in this position."""

    def __init__(
        self,
        operator: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.operator = operator
        super().__init__(
            f"unsupported operator '{operator}'",
            location=location,
            hint=hint,
        )


class UnsupportedConstructError(CodeGenError):
    """AST node kind with no translation rule."""

    def __init__(self, node_kind: str, location: Optional[SourceLocation] = None):
        self.node_kind = node_kind
        super().__init__(f"unsupported construct '{node_kind}'", location=location)


class RegisterPressureError(CodeGenError):
    """Expression needs more registers than the register set provides."""

    def __init__(
        self,
        needed: int,
        available: int,
        location: Optional[SourceLocation] = None,
    ):
        self.needed = needed
        self.available = available
        super().__init__(
            f"expression needs {needed} registers but only {available} are available",
            location=location,
            hint="split the expression into several assignments",
        )


# =============================================================================
# Label Resolution Errors
# =============================================================================

class LabelError(CompilerError):
    """Error raised while resolving labels to addresses."""
    pass


class UnresolvedLabelError(LabelError):
    """Branch refers to a label that is never defined."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"unresolved label '{label}'")


class DuplicateLabelError(LabelError):
    """Label defined more than once in one instruction stream."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"duplicate label '{label}'")
