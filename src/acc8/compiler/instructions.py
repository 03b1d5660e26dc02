"""
Target Instruction Model
========================

Structured, in-memory representation of the accumulator machine's
assembly, and its one-line textual rendering.

Instruction Set
---------------
| Opcode | Operands        | Effect                                   |
|--------|-----------------|------------------------------------------|
| LOAD   | reg, #imm       | reg <- imm                               |
| LOAD   | reg, addr       | reg <- mem[addr]                         |
| STORE  | reg, addr       | mem[addr] <- reg                         |
| ADD    | reg, reg2       | reg <- (reg + reg2) & 0xFF, sets Z, C    |
| SUB    | reg, reg2       | reg <- (reg - reg2) & 0xFF, sets Z, C    |
| CMP    | reg, reg2       | flags of reg - reg2, registers unchanged |
| JMP    | target          | jump always                              |
| JZ     | target          | jump if Z set (equal)                    |
| JNZ    | target          | jump if Z clear (not equal)              |
| JC     | target          | jump if C set (reg < reg2, unsigned)     |
| JNC    | target          | jump if C clear (reg >= reg2, unsigned)  |
| LABEL  | name            | pseudo-instruction marking an address    |

Operand Syntax
--------------
- Register:      A
- Immediate:     #42
- Address:       0x2A
- Label:         _else1

Example:
    LOAD A, #5
    STORE A, 0x00
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


WORD_MASK = 0xFF


class Opcode(Enum):
    """Machine opcodes; LABEL is an assembler pseudo-instruction."""
    LOAD = "LOAD"
    STORE = "STORE"
    ADD = "ADD"
    SUB = "SUB"
    CMP = "CMP"
    JMP = "JMP"
    JNZ = "JNZ"
    JZ = "JZ"
    JC = "JC"
    JNC = "JNC"
    LABEL = "LABEL"

    @property
    def is_jump(self) -> bool:
        return self in JUMP_OPCODES


JUMP_OPCODES = frozenset({Opcode.JMP, Opcode.JNZ, Opcode.JZ, Opcode.JC, Opcode.JNC})


# =============================================================================
# Operands
# =============================================================================

@dataclass(frozen=True)
class Register:
    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class Immediate:
    value: int

    def render(self) -> str:
        return f"#{self.value}"


@dataclass(frozen=True)
class MemoryAddress:
    """Absolute address: a data-memory cell, or a resolved jump target."""
    value: int

    def render(self) -> str:
        return f"0x{self.value:02X}"


@dataclass(frozen=True)
class LabelRef:
    name: str

    def render(self) -> str:
        return self.name


Operand = Union[Register, Immediate, MemoryAddress, LabelRef]


# =============================================================================
# Instruction Record
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    One instruction (or LABEL marker).

    Attributes:
        opcode: The operation
        operands: Operands in source order
    """
    opcode: Opcode
    operands: tuple[Operand, ...] = ()

    def render(self) -> str:
        """Render as 'OPCODE OPERAND[, OPERAND]' (labels as 'name:')."""
        if self.opcode == Opcode.LABEL:
            return f"{self.operands[0].render()}:"
        if not self.operands:
            return self.opcode.value
        operands = ", ".join(operand.render() for operand in self.operands)
        return f"{self.opcode.value} {operands}"

    def __str__(self) -> str:
        return self.render()


def render_instructions(instructions) -> str:
    """Render a sequence of instructions, one per line."""
    return "\n".join(instruction.render() for instruction in instructions)
