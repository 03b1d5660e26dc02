"""
acc8 Compiler
=============

Compiles a small imperative language (VAR declarations, + and -
arithmetic, comparisons and IF/ELSE) into assembly for an 8-bit
accumulator machine with four general registers, flag-based comparison
and absolute jumps.

Pipeline
--------
    Source → Lexer → Parser → AST → Symbol Allocation → Code Generator
           → Label Resolver → Assembly

Usage
-----
>>> from acc8.compiler import compile_source
>>> result = compile_source('''
... VAR a = 5;
... VAR b = 10;
... VAR result = 0;
... result = a + b;
... ''')
>>> print(result.assembly)
LOAD A, #5
STORE A, 0x00
LOAD A, #10
STORE A, 0x01
LOAD A, 0x00
LOAD B, 0x01
ADD A, B
STORE A, 0x02

Language Summary
----------------
    VAR name = expr;
    name = expr;
    IF expr [> | < | == expr] { ... } [ELSE { ... }]

Expressions are integers, variables, + and - and parentheses. All
arithmetic is 8-bit and wraps around.
"""

from acc8.compiler.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    CompilationContext,
    compile_source,
    compile_file,
)
from acc8.compiler.errors import (
    CompilerError,
    LexError,
    ParseError,
    SemanticError,
    UndeclaredVariableError,
    DuplicateDeclarationError,
    OutOfMemoryError,
    CodeGenError,
    UnsupportedOperatorError,
    UnsupportedConstructError,
    RegisterPressureError,
    LabelError,
    UnresolvedLabelError,
    DuplicateLabelError,
)
from acc8.compiler.lexer import Lexer, Token, TokenKind, tokenize
from acc8.compiler.parser import Parser, parse_source
from acc8.compiler.symbols import Symbol, SymbolTable, allocate_symbols
from acc8.compiler.codegen import CodeGenerator, LabelAllocator
from acc8.compiler.resolver import ResolvedProgram, resolve_labels
from acc8.compiler.instructions import (
    Opcode,
    Instruction,
    Register,
    Immediate,
    MemoryAddress,
    LabelRef,
)
from acc8.compiler.ast import (
    ASTNode,
    Program,
    Block,
    VarDecl,
    Assignment,
    IfStmt,
    BinaryExpr,
    BinaryOperator,
    Literal,
    VariableRef,
    ASTPrinter,
)

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "CompilationContext",
    "compile_source",
    "compile_file",
    # Errors
    "CompilerError",
    "LexError",
    "ParseError",
    "SemanticError",
    "UndeclaredVariableError",
    "DuplicateDeclarationError",
    "OutOfMemoryError",
    "CodeGenError",
    "UnsupportedOperatorError",
    "UnsupportedConstructError",
    "RegisterPressureError",
    "LabelError",
    "UnresolvedLabelError",
    "DuplicateLabelError",
    # Stages
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    "Parser",
    "parse_source",
    "Symbol",
    "SymbolTable",
    "allocate_symbols",
    "CodeGenerator",
    "LabelAllocator",
    "ResolvedProgram",
    "resolve_labels",
    # Instructions
    "Opcode",
    "Instruction",
    "Register",
    "Immediate",
    "MemoryAddress",
    "LabelRef",
    # AST
    "ASTNode",
    "Program",
    "Block",
    "VarDecl",
    "Assignment",
    "IfStmt",
    "BinaryExpr",
    "BinaryOperator",
    "Literal",
    "VariableRef",
    "ASTPrinter",
]
