"""
acc8 Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the AST node types produced by the parser and
consumed by the symbol allocator and the code generator.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node, the flat program scope
├── Statements
│   ├── VarDecl - VAR name = expr;
│   ├── Assignment - name = expr;
│   ├── IfStmt - IF condition { ... } ELSE { ... }
│   └── Block - { statement* }
└── Expressions
    ├── BinaryExpr - left op right
    ├── Literal - integer constant
    └── VariableRef - variable read

The set of variants is closed: the code generator handles exactly these
classes and rejects anything else with UnsupportedConstructError.

Design Notes
------------
- All nodes are dataclasses carrying their source location
- Fields after ``location`` default to None/empty so nodes can be built
  with keyword arguments only, as the parser does
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from acc8.errors import SourceLocation


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.location.line}:{self.location.column}"


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """Binary operators; each value is the operator's source symbol."""
    ADD = "+"
    SUBTRACT = "-"
    GREATER = ">"
    LESS = "<"
    EQUAL = "=="

    @property
    def is_relational(self) -> bool:
        return self in (BinaryOperator.GREATER, BinaryOperator.LESS, BinaryOperator.EQUAL)


@dataclass
class Literal(ASTNode):
    """Integer constant, stored as written (wrapping happens in codegen)."""
    value: int = 0


@dataclass
class VariableRef(ASTNode):
    """Read of a declared variable."""
    name: str = ""


@dataclass
class BinaryExpr(ASTNode):
    """
    Binary operation (left op right).

    Arithmetic operators (+, -) may appear anywhere an expression is
    allowed. Relational operators (>, <, ==) only appear as the top-level
    condition of an IfStmt.
    """
    operator: BinaryOperator = None
    left: "Expr" = None
    right: "Expr" = None


Expr = Union[BinaryExpr, Literal, VariableRef]


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class VarDecl(ASTNode):
    """
    Variable declaration with its mandatory initializer.

    Attributes:
        name: Variable name
        initializer: Expression evaluated and stored on declaration
    """
    name: str = ""
    initializer: Expr = None


@dataclass
class Assignment(ASTNode):
    """
    Assignment to a previously declared variable.

    Attributes:
        target: Name of the variable written
        value: Expression evaluated and stored
    """
    target: str = ""
    value: Expr = None


@dataclass
class Block(ASTNode):
    """Braced sequence of statements."""
    statements: list["Stmt"] = field(default_factory=list)


@dataclass
class IfStmt(ASTNode):
    """
    If statement with optional else block.

    Attributes:
        condition: Relational BinaryExpr, or any expression tested for nonzero
        then_block: Block executed when the condition holds
        else_block: Optional block executed otherwise
    """
    condition: Expr = None
    then_block: Block = None
    else_block: Optional[Block] = None


Stmt = Union[VarDecl, Assignment, IfStmt, Block]


@dataclass
class Program(ASTNode):
    """Root node: the statements of the single flat program scope."""
    statements: list[Stmt] = field(default_factory=list)


# =============================================================================
# Visitor Pattern Support
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; everything else falls through to generic_visit, which visits
    child nodes in field order (which is also program order).

    Usage:
        class Counter(ASTVisitor):
            def visit_VarDecl(self, node):
                ...

        Counter().visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append(f"{'  ' * self.indent_level}{text}")

    def _nested(self, title: str, node: ASTNode) -> None:
        self._emit(title)
        self.indent_level += 1
        self.visit(node)
        self.indent_level -= 1

    def visit_Program(self, node: Program):
        self._emit("Program")
        self.indent_level += 1
        for stmt in node.statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_Block(self, node: Block):
        self._emit("Block")
        self.indent_level += 1
        for stmt in node.statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_VarDecl(self, node: VarDecl):
        self._nested(f"VarDecl: {node.name}", node.initializer)

    def visit_Assignment(self, node: Assignment):
        self._nested(f"Assignment: {node.target}", node.value)

    def visit_IfStmt(self, node: IfStmt):
        self._emit("If")
        self.indent_level += 1
        self._nested("Condition:", node.condition)
        self._nested("Then:", node.then_block)
        if node.else_block is not None:
            self._nested("Else:", node.else_block)
        self.indent_level -= 1

    def visit_BinaryExpr(self, node: BinaryExpr):
        self._emit(f"BinaryExpr: {node.operator.value}")
        self.indent_level += 1
        self.visit(node.left)
        self.visit(node.right)
        self.indent_level -= 1

    def visit_Literal(self, node: Literal):
        self._emit(f"Literal: {node.value}")

    def visit_VariableRef(self, node: VariableRef):
        self._emit(f"VariableRef: {node.name}")
