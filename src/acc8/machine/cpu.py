"""
Accumulator Machine Reference Emulator
======================================

Executes address-resolved acc8 programs so the behaviour of generated
code can be checked without hardware.

Machine Model
-------------
- General registers: 8-bit, named by the register set (default A, B, C, D)
- Data memory: memory_size bytes, all zero after reset
- Code memory: one instruction per address, separate from data memory
- Flags: Z (zero/equal) and C (carry out of ADD, borrow of SUB/CMP)
- PC: index of the next instruction; execution halts when it reaches
  the end of the program

Flag Behaviour
--------------
| Opcode | Z                  | C                        |
|--------|--------------------|--------------------------|
| LOAD   | unchanged          | unchanged                |
| STORE  | unchanged          | unchanged                |
| ADD    | result == 0        | a + b > 0xFF             |
| SUB    | result == 0        | a < b                    |
| CMP    | a == b             | a < b                    |

Example:
    >>> machine = Acc8Machine()
    >>> machine.load(compile_source("VAR a = 250 + 10;").program)
    >>> steps = machine.run()
    >>> machine.memory[0]
    4
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from acc8.errors import Acc8Error, ConfigurationError
from acc8.compiler.instructions import (
    WORD_MASK,
    Opcode,
    Instruction,
    Register,
    Immediate,
    MemoryAddress,
)
from acc8.compiler.resolver import ResolvedProgram

logger = logging.getLogger(__name__)


class MachineError(Acc8Error):
    """Fault raised while executing a program on the reference machine."""

    def __init__(self, message: str, pc: Optional[int] = None):
        self.pc = pc
        if pc is not None:
            message = f"pc=0x{pc:02X}: {message}"
        super().__init__(message)


@dataclass
class MachineState:
    """
    Complete machine state for snapshotting.

    Attributes:
        registers: Register name -> 8-bit value
        memory: Data memory contents
        pc: Program counter (instruction index)
        flag_z: Zero flag
        flag_c: Carry/borrow flag
        steps: Instructions executed since reset
    """
    registers: dict[str, int] = field(default_factory=dict)
    memory: bytearray = field(default_factory=bytearray)
    pc: int = 0
    flag_z: bool = False
    flag_c: bool = False
    steps: int = 0


class Acc8Machine:
    """
    Reference emulator for the 8-bit accumulator machine.

    Instrumentation:
        on_instruction(pc, instruction) -> bool is called before each
        instruction; returning False stops run() before executing it.

    Example:
        >>> machine = Acc8Machine(memory_size=256)
        >>> machine.load(program)
        >>> steps = machine.run(max_steps=1000)
        >>> machine.registers["A"]
    """

    def __init__(
        self,
        memory_size: int = 256,
        register_set: tuple[str, ...] = ("A", "B", "C", "D"),
    ):
        if memory_size <= 0:
            raise ConfigurationError(f"memory size must be positive, got {memory_size}")
        if not register_set:
            raise ConfigurationError("machine needs at least one register")

        self.memory_size = memory_size
        self.register_set = tuple(register_set)
        self.program: tuple[Instruction, ...] = ()
        self.state = MachineState()
        self.on_instruction: Optional[Callable[[int, Instruction], bool]] = None
        self.reset()

    # ========================================
    # State Access
    # ========================================

    @property
    def registers(self) -> dict[str, int]:
        return self.state.registers

    @property
    def memory(self) -> bytearray:
        return self.state.memory

    @property
    def pc(self) -> int:
        return self.state.pc

    @property
    def halted(self) -> bool:
        return self.state.pc >= len(self.program)

    def reset(self) -> None:
        """Clear registers, memory and flags; PC back to 0."""
        self.state = MachineState(
            registers={name: 0 for name in self.register_set},
            memory=bytearray(self.memory_size),
        )

    def load(self, program: ResolvedProgram | tuple[Instruction, ...] | list[Instruction]) -> None:
        """Load a resolved program and reset the machine."""
        if isinstance(program, ResolvedProgram):
            program = program.instructions
        self.program = tuple(program)
        self.reset()

    # ========================================
    # Execution
    # ========================================

    def run(self, max_steps: int = 10000) -> int:
        """
        Run until the program ends, a hook stops it, or max_steps is hit.

        Returns:
            Number of instructions executed by this call

        Raises:
            MachineError: On a fault or if max_steps is exceeded
        """
        executed = 0
        while not self.halted:
            if self.on_instruction is not None:
                if not self.on_instruction(self.pc, self.program[self.pc]):
                    break
            if executed >= max_steps:
                raise MachineError(f"step limit of {max_steps} exceeded", self.pc)
            self.step()
            executed += 1

        logger.debug("executed %d instructions, pc=0x%02X", executed, self.pc)
        return executed

    def step(self) -> None:
        """Execute exactly one instruction."""
        if self.halted:
            raise MachineError("program has halted", self.pc)

        pc = self.state.pc
        instruction = self.program[pc]
        opcode = instruction.opcode
        operands = instruction.operands
        self.state.pc = pc + 1

        if opcode == Opcode.LOAD:
            self._write_register(operands[0], self._read_source(operands[1], pc), pc)
        elif opcode == Opcode.STORE:
            self._write_memory(operands[1], self._read_register(operands[0], pc), pc)
        elif opcode == Opcode.ADD:
            a = self._read_register(operands[0], pc)
            b = self._read_register(operands[1], pc)
            result = a + b
            self.state.flag_c = result > WORD_MASK
            self._set_result(operands[0], result, pc)
        elif opcode in (Opcode.SUB, Opcode.CMP):
            a = self._read_register(operands[0], pc)
            b = self._read_register(operands[1], pc)
            self.state.flag_c = a < b
            if opcode == Opcode.SUB:
                self._set_result(operands[0], a - b, pc)
            else:
                self.state.flag_z = a == b
        elif opcode.is_jump:
            if self._jump_taken(opcode):
                self.state.pc = self._jump_target(operands[0], pc)
        else:
            raise MachineError(f"cannot execute {instruction.render()!r}", pc)

        self.state.steps += 1

    def _jump_taken(self, opcode: Opcode) -> bool:
        if opcode == Opcode.JMP:
            return True
        if opcode == Opcode.JZ:
            return self.state.flag_z
        if opcode == Opcode.JNZ:
            return not self.state.flag_z
        if opcode == Opcode.JC:
            return self.state.flag_c
        return not self.state.flag_c

    # ========================================
    # Operand Access
    # ========================================

    def _set_result(self, register: Register, value: int, pc: int) -> None:
        value &= WORD_MASK
        self.state.flag_z = value == 0
        self._write_register(register, value, pc)

    def _read_register(self, operand, pc: int) -> int:
        if not isinstance(operand, Register) or operand.name not in self.state.registers:
            raise MachineError(f"invalid register operand {operand!r}", pc)
        return self.state.registers[operand.name]

    def _write_register(self, operand, value: int, pc: int) -> None:
        if not isinstance(operand, Register) or operand.name not in self.state.registers:
            raise MachineError(f"invalid register operand {operand!r}", pc)
        self.state.registers[operand.name] = value & WORD_MASK

    def _read_source(self, operand, pc: int) -> int:
        if isinstance(operand, Immediate):
            return operand.value & WORD_MASK
        if isinstance(operand, MemoryAddress):
            return self.state.memory[self._check_address(operand.value, pc)]
        raise MachineError(f"invalid source operand {operand!r}", pc)

    def _write_memory(self, operand, value: int, pc: int) -> None:
        if not isinstance(operand, MemoryAddress):
            raise MachineError(f"invalid destination operand {operand!r}", pc)
        self.state.memory[self._check_address(operand.value, pc)] = value & WORD_MASK

    def _check_address(self, address: int, pc: int) -> int:
        if not 0 <= address < self.memory_size:
            raise MachineError(f"address 0x{address:02X} outside memory", pc)
        return address

    def _jump_target(self, operand, pc: int) -> int:
        if not isinstance(operand, MemoryAddress):
            raise MachineError(f"unresolved jump target {operand!r}", pc)
        if not 0 <= operand.value <= len(self.program):
            raise MachineError(f"jump target 0x{operand.value:02X} outside program", pc)
        return operand.value
