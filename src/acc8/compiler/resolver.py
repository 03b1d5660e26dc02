"""
Label Resolver
==============

Final pass over the generated instruction sequence. It assigns each
LABEL marker a concrete code address and rewrites every LabelRef
operand to that address.

Addressing
----------
Every machine instruction occupies one code address, counted from 0 in
stream order. LABEL markers occupy no space: a label's address is the
address of the instruction that follows it (or one past the last
instruction when it ends the stream, which is where execution stops).

Two passes, as in a classic two-pass assembler:

1. Walk the stream, recording label -> address and rejecting duplicates
2. Walk it again, dropping LABEL markers and replacing label operands
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from acc8.compiler.errors import DuplicateLabelError, UnresolvedLabelError
from acc8.compiler.instructions import Instruction, LabelRef, MemoryAddress, Opcode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedProgram:
    """
    Address-resolved program, ready for rendering or execution.

    Attributes:
        instructions: Machine instructions only, all operands concrete
        labels: Read-only label name -> code address map, in definition order
    """
    instructions: tuple[Instruction, ...]
    labels: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "instructions", tuple(self.instructions))
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))

    def __len__(self) -> int:
        return len(self.instructions)

    def render(self, annotate_labels: bool = False) -> str:
        """
        Render as assembly text, one instruction per line.

        Args:
            annotate_labels: Emit '; name' comment lines at label addresses
        """
        by_address: dict[int, list[str]] = {}
        if annotate_labels:
            for name, address in self.labels.items():
                by_address.setdefault(address, []).append(name)

        lines = []
        for address, instruction in enumerate(self.instructions):
            for name in by_address.get(address, ()):
                lines.append(f"; {name}")
            lines.append(instruction.render())
        for name in by_address.get(len(self.instructions), ()):
            lines.append(f"; {name}")

        return "\n".join(lines)


def resolve_labels(instructions: Iterable[Instruction]) -> ResolvedProgram:
    """
    Resolve all label references in an instruction stream.

    Raises:
        DuplicateLabelError: If two LABEL markers share a name
        UnresolvedLabelError: If an operand names a label never defined
    """
    stream = list(instructions)

    # Pass 1: label addresses
    labels: dict[str, int] = {}
    address = 0
    for instruction in stream:
        if instruction.opcode == Opcode.LABEL:
            name = instruction.operands[0].name
            if name in labels:
                raise DuplicateLabelError(name)
            labels[name] = address
        else:
            address += 1

    # Pass 2: rewrite operands
    resolved = []
    for instruction in stream:
        if instruction.opcode == Opcode.LABEL:
            continue
        if any(isinstance(operand, LabelRef) for operand in instruction.operands):
            instruction = Instruction(
                instruction.opcode,
                tuple(_resolve_operand(operand, labels) for operand in instruction.operands),
            )
        resolved.append(instruction)

    logger.debug("resolved %d labels over %d instructions", len(labels), len(resolved))
    return ResolvedProgram(tuple(resolved), labels)


def _resolve_operand(operand, labels: dict[str, int]):
    if not isinstance(operand, LabelRef):
        return operand
    if operand.name not in labels:
        raise UnresolvedLabelError(operand.name)
    return MemoryAddress(labels[operand.name])
