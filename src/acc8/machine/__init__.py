"""
acc8 Reference Machine
======================

Emulator for the 8-bit accumulator machine targeted by the compiler.

Usage
-----
>>> from acc8.compiler import compile_source
>>> from acc8.machine import Acc8Machine
>>> result = compile_source("VAR a = 250; VAR b = a + 10;")
>>> machine = Acc8Machine()
>>> machine.load(result.program)
>>> steps = machine.run()
>>> machine.memory[result.symbols.resolve("b")]
4
"""

from acc8.machine.cpu import Acc8Machine, MachineError, MachineState

__all__ = [
    "Acc8Machine",
    "MachineError",
    "MachineState",
]
