#!/usr/bin/env python3
"""
acc8 Compile-and-Run Demo
=========================

This script demonstrates how to use the acc8 toolchain to:
1. Compile a program with the default options
2. Inspect tokens, the AST and the generated assembly
3. Execute the result on the reference machine
4. Trace execution with the instruction hook
5. Handle a compilation error

Usage:
    source .venv/bin/activate
    python examples/compile_and_run.py
"""

from acc8.compiler import ASTPrinter, CompilerOptions, CompilerError, compile_source
from acc8.machine import Acc8Machine


PROGRAM = """\
// difference of two numbers, always non-negative
VAR a = 3;
VAR b = 10;
VAR result = 0;
IF a > b {
    result = a - b;
} ELSE {
    result = b - a;
}
"""


def main():
    # ==========================================================================
    # 1. Compile
    # ==========================================================================
    print("Compiling program...")
    result = compile_source(PROGRAM, "demo.src")

    print(f"  Tokens: {len(result.tokens)}")
    print(f"  Variables: {result.symbols.addresses()}")
    print(f"  Instructions: {len(result.program)}")

    # ==========================================================================
    # 2. Inspect each stage
    # ==========================================================================
    print("\nFirst tokens:")
    for token in result.tokens[:5]:
        print(f"  {token!r}")

    print("\nSyntax tree:")
    print(ASTPrinter().print(result.ast))

    print("\nAssembly (label addresses annotated):")
    print(result.program.render(annotate_labels=True))

    # ==========================================================================
    # 3. Run on the reference machine
    # ==========================================================================
    machine = Acc8Machine()
    machine.load(result.program)
    steps = machine.run()

    print(f"\nExecuted {steps} instructions")
    for symbol in result.symbols:
        print(f"  {symbol.name} = {machine.memory[symbol.address]}")

    # ==========================================================================
    # 4. Trace execution
    # ==========================================================================
    # The hook runs before every instruction; returning False stops run().
    print("\nTrace:")
    machine.load(result.program)
    machine.on_instruction = lambda pc, instruction: print(f"  {pc:02X}  {instruction}") is None
    machine.run()

    # ==========================================================================
    # 5. Custom layout and error reporting
    # ==========================================================================
    options = CompilerOptions(variable_base_address=0x80, register_set=("A", "B"))
    relocated = compile_source(PROGRAM, "demo.src", options)
    print(f"\nRelocated variables: {relocated.symbols.addresses()}")

    try:
        compile_source("VAR total = 0;\ntotal = count + 1;\n", "broken.src")
    except CompilerError as e:
        print(f"\nExpected error:\n{e}")


if __name__ == "__main__":
    main()
