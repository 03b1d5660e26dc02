"""
Accumulator Machine Code Generator
==================================

This module walks the AST depth-first and emits the instruction
sequence for the 8-bit accumulator machine. Label references are left
symbolic; the label resolver turns them into addresses afterwards.

Code Generation Strategy
------------------------
Expressions are evaluated into registers taken from the configured
register set, used as a small stack:

1. An expression evaluated at depth n leaves its result in register n
   (the first register, A, for every statement-level expression)
2. For a binary operation, the left operand goes to register n and the
   right operand to register n + 1; the result overwrites register n
3. Variables are loaded from and stored to the absolute addresses
   assigned by the symbol table

With the default register set (A, B, C, D) an arithmetic expression
uses A and B, and parenthesized right operands use C and D.

Example:
    result = a + b;

    LOAD A, 0x00
    LOAD B, 0x01
    ADD A, B
    STORE A, 0x02

Arithmetic Model
----------------
All values are 8 bits wide. Literals are truncated to 0-255 when
loaded and ADD/SUB wrap around on the machine, so 250 + 10 yields 4.

Conditional Branches
--------------------
CMP X, Y sets Z when X == Y and C when X < Y (unsigned). Every IF emits
exactly one conditional branch that skips to the else label when the
condition is false:

| Condition  | Loads             | Branch to else |
|------------|-------------------|----------------|
| l == r     | A <- l, B <- r    | JNZ            |
| l < r      | A <- l, B <- r    | JNC            |
| l > r      | A <- r, B <- l    | JNC            |
| e          | A <- e, B <- #0   | JZ             |

For '>' the operands are loaded in reverse so that the carry test
(A < B) reads r < l.

Layout of an IF statement:

        <condition>
        J?? _elseN
        <then block>
        JMP _endifM
    _elseN:
        <else block>
    _endifM:
"""

import logging
from typing import Optional

from acc8.errors import SourceLocation
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
)
from acc8.compiler.errors import (
    UnsupportedOperatorError,
    UnsupportedConstructError,
    RegisterPressureError,
)
from acc8.compiler.instructions import (
    WORD_MASK,
    Opcode,
    Instruction,
    Register,
    Immediate,
    MemoryAddress,
    LabelRef,
)
from acc8.compiler.symbols import SymbolTable

logger = logging.getLogger(__name__)


DEFAULT_REGISTERS = ("A", "B", "C", "D")

ARITHMETIC_OPCODES = {
    BinaryOperator.ADD: Opcode.ADD,
    BinaryOperator.SUBTRACT: Opcode.SUB,
}

# Branch taken when the condition is false, keyed by relational operator
FALSE_BRANCHES = {
    BinaryOperator.EQUAL: Opcode.JNZ,
    BinaryOperator.LESS: Opcode.JNC,
    BinaryOperator.GREATER: Opcode.JNC,
}


# =============================================================================
# Label Allocation
# =============================================================================

class LabelAllocator:
    """
    Hands out unique label names for one compilation.

    The counter starts at zero and is incremented on every allocation,
    so labels are numbered 1, 2, 3, ... across the whole compilation
    regardless of prefix.
    """

    def __init__(self):
        self.counter = 0

    def allocate(self, prefix: str = "L") -> str:
        self.counter += 1
        label = f"_{prefix}{self.counter}"
        logger.debug("allocated label %s", label)
        return label


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator:
    """
    Generates accumulator machine instructions from the AST.

    The symbol table must already contain every declaration of the
    program (see acc8.compiler.symbols.allocate_symbols).

    Attributes:
        symbols: Variable -> address table
        labels: Label allocator shared with the rest of the compilation
        registers: Register names usable for expression evaluation
    """

    def __init__(
        self,
        symbols: SymbolTable,
        labels: Optional[LabelAllocator] = None,
        registers: tuple[str, ...] = DEFAULT_REGISTERS,
        zero_initialized_memory: bool = True,
    ):
        """
        Initialize the code generator.

        Args:
            symbols: Symbol table for the program being compiled
            labels: Label allocator (a fresh one if None)
            registers: Ordered register set; the first is the accumulator
            zero_initialized_memory: Whether memory is all zeros when the
                program starts, making stores of literal 0 on declaration
                unnecessary
        """
        self.symbols = symbols
        self.labels = labels or LabelAllocator()
        self.registers = tuple(registers)
        self.zero_initialized_memory = zero_initialized_memory
        self._output: list[Instruction] = []

    def generate(self, program: Program) -> list[Instruction]:
        """
        Generate the instruction sequence for a program.

        Returns:
            Instructions in execution order, LABEL markers included

        Raises:
            CodeGenError: On operators, constructs or register needs the
                machine cannot handle
            UndeclaredVariableError: If the symbol table lacks a variable
        """
        self._output = []
        self._generate_statement(program)
        logger.debug("generated %d instructions", len(self._output))
        return list(self._output)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _emit(self, opcode: Opcode, *operands) -> None:
        self._output.append(Instruction(opcode, tuple(operands)))

    def _emit_label(self, label: str) -> None:
        self._emit(Opcode.LABEL, LabelRef(label))

    def _register(self, depth: int, location: SourceLocation) -> Register:
        if depth >= len(self.registers):
            raise RegisterPressureError(depth + 1, len(self.registers), location)
        return Register(self.registers[depth])

    def _address(self, name: str, location: SourceLocation) -> MemoryAddress:
        return MemoryAddress(self.symbols.resolve(name, location))

    # =========================================================================
    # Statement Code Generation
    # =========================================================================

    def _generate_statement(self, stmt: ASTNode) -> None:
        if isinstance(stmt, (Program, Block)):
            for child in stmt.statements:
                self._generate_statement(child)
        elif isinstance(stmt, VarDecl):
            self._generate_var_decl(stmt)
        elif isinstance(stmt, Assignment):
            self._generate_store(stmt.value, stmt.target, stmt.location)
        elif isinstance(stmt, IfStmt):
            self._generate_if(stmt)
        else:
            raise UnsupportedConstructError(
                type(stmt).__name__, getattr(stmt, "location", None)
            )

    def _generate_var_decl(self, stmt: VarDecl) -> None:
        initializer = stmt.initializer
        if (self.zero_initialized_memory and isinstance(initializer, Literal) and
                initializer.value & WORD_MASK == 0):
            # Memory is still zero: the address has never been written
            self._address(stmt.name, stmt.location)
            return
        self._generate_store(initializer, stmt.name, stmt.location)

    def _generate_store(self, value: ASTNode, name: str, location: SourceLocation) -> None:
        accumulator = self._generate_expression(value, 0)
        self._emit(Opcode.STORE, accumulator, self._address(name, location))

    def _generate_if(self, stmt: IfStmt) -> None:
        else_label = self.labels.allocate("else")
        end_label = self.labels.allocate("endif")

        self._generate_condition(stmt.condition, else_label)

        self._generate_statement(stmt.then_block)
        self._emit(Opcode.JMP, LabelRef(end_label))

        self._emit_label(else_label)
        if stmt.else_block is not None:
            self._generate_statement(stmt.else_block)
        self._emit_label(end_label)

    def _generate_condition(self, condition: ASTNode, false_label: str) -> None:
        """Emit CMP plus one branch to false_label taken when condition fails."""
        if isinstance(condition, BinaryExpr) and condition.operator in FALSE_BRANCHES:
            first, second = condition.left, condition.right
            if condition.operator == BinaryOperator.GREATER:
                first, second = second, first

            left = self._generate_expression(first, 0)
            right = self._generate_expression(second, 1)
            self._emit(Opcode.CMP, left, right)
            self._emit(FALSE_BRANCHES[condition.operator], LabelRef(false_label))
            return

        value = self._generate_expression(condition, 0)
        zero = self._register(1, condition.location)
        self._emit(Opcode.LOAD, zero, Immediate(0))
        self._emit(Opcode.CMP, value, zero)
        self._emit(Opcode.JZ, LabelRef(false_label))

    # =========================================================================
    # Expression Code Generation
    # =========================================================================

    def _generate_expression(self, expr: ASTNode, depth: int) -> Register:
        """
        Evaluate an expression into the register at the given depth.

        Returns:
            The register holding the result
        """
        if isinstance(expr, Literal):
            register = self._register(depth, expr.location)
            self._emit(Opcode.LOAD, register, Immediate(expr.value & WORD_MASK))
            return register

        if isinstance(expr, VariableRef):
            register = self._register(depth, expr.location)
            self._emit(Opcode.LOAD, register, self._address(expr.name, expr.location))
            return register

        if isinstance(expr, BinaryExpr):
            opcode = ARITHMETIC_OPCODES.get(expr.operator)
            if opcode is None:
                raise self._operator_error(expr)

            left = self._generate_expression(expr.left, depth)
            right = self._generate_expression(expr.right, depth + 1)
            self._emit(opcode, left, right)
            return left

        raise UnsupportedConstructError(
            type(expr).__name__, getattr(expr, "location", None)
        )

    def _operator_error(self, expr: BinaryExpr) -> UnsupportedOperatorError:
        symbol = getattr(expr.operator, "value", str(expr.operator))
        hint = None
        if isinstance(expr.operator, BinaryOperator) and expr.operator.is_relational:
            hint = "comparisons can only be used as an IF condition"
        return UnsupportedOperatorError(symbol, expr.location, hint=hint)
