"""
acc8c - Compiler Command-Line Interface
=======================================

Command-line front end for the acc8 compiler.

Usage Examples
--------------
Basic compilation (writes prog.asm):
    $ acc8c prog.src

With output file:
    $ acc8c prog.src -o out.asm

Inspect the front end:
    $ acc8c --tokens prog.src
    $ acc8c --ast prog.src

Compile and execute on the reference machine:
    $ acc8c --run prog.src

Custom machine layout:
    $ acc8c --memory-size 128 --base-address 0x40 --registers A,B,C prog.src
"""

import logging
from pathlib import Path
from typing import Optional

import click

from acc8 import __version__
from acc8.compiler import Compiler, CompilerOptions, ASTPrinter
from acc8.cli.errors import handle_cli_exception
from acc8.errors import ConfigurationError
from acc8.machine import Acc8Machine


def _parse_int(ctx, param, value):
    """Accept decimal or 0x-prefixed integers."""
    if value is None:
        return None
    try:
        return int(value, 0)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not an integer")


def _parse_registers(ctx, param, value):
    names = tuple(name.strip().upper() for name in value.split(",") if name.strip())
    if not names:
        raise click.BadParameter("at least one register name is required")
    return names


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: input.asm)",
)
@click.option("--tokens", is_flag=True, help="Print the token stream and exit")
@click.option("--ast", is_flag=True, help="Print the AST and exit")
@click.option(
    "--run",
    is_flag=True,
    help="Also execute the program on the reference machine and print variables",
)
@click.option(
    "--labels/--no-labels",
    default=True,
    help="Annotate label addresses with comments in the output",
)
@click.option(
    "--memory-size",
    callback=_parse_int,
    default="256",
    help="Addressable data memory in bytes (default: 256)",
)
@click.option(
    "--base-address",
    callback=_parse_int,
    default="0",
    help="Address of the first variable (default: 0)",
)
@click.option(
    "--registers",
    callback=_parse_registers,
    default="A,B,C,D",
    help="Comma-separated register set, accumulator first (default: A,B,C,D)",
)
@click.option(
    "--no-zero-init",
    is_flag=True,
    help="Do not assume memory is zero at reset",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.version_option(version=__version__, prog_name="acc8c")
def main(
    input_file: Path,
    output: Optional[Path],
    tokens: bool,
    ast: bool,
    run: bool,
    labels: bool,
    memory_size: int,
    base_address: int,
    registers: tuple[str, ...],
    no_zero_init: bool,
    verbose: bool,
) -> None:
    """
    Compile a program for the 8-bit accumulator machine.

    INPUT_FILE is the source file to compile.

    \b
    Examples:
        acc8c prog.src                # Outputs prog.asm
        acc8c prog.src -o out.asm     # Specify output file
        acc8c --ast prog.src          # Dump the syntax tree
        acc8c --run prog.src          # Compile, then execute
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if output is None:
        output = input_file.with_suffix(".asm")

    source = None
    try:
        source = input_file.read_text(encoding="utf-8")

        options = CompilerOptions(
            memory_size=memory_size,
            variable_base_address=base_address,
            register_set=registers,
            zero_initialized_memory=not no_zero_init,
        )

        if verbose:
            click.echo(f"Compiling {input_file}...")
            click.echo(f"Memory: {memory_size} bytes, variables from 0x{base_address:02X}")
            click.echo(f"Registers: {', '.join(registers)}")

        if tokens:
            from acc8.compiler.lexer import Lexer
            for token in Lexer(source, str(input_file)).tokenize():
                click.echo(repr(token))
            return

        result = Compiler(options).compile_source(source, str(input_file))

        if ast:
            click.echo(ASTPrinter().print(result.ast))
            return

        output.write_text(result.program.render(annotate_labels=labels) + "\n")

        if verbose:
            click.echo(f"Tokenized: {len(result.tokens)} tokens")
            click.echo(f"Allocated: {len(result.symbols)} variables")
            click.echo(f"Generated: {len(result.program)} instructions")

        click.echo(f"Compiled {input_file} -> {output}")

        if run:
            machine = Acc8Machine(memory_size, registers)
            machine.load(result.program)
            steps = machine.run()
            if verbose:
                click.echo(f"Executed {steps} instructions")
            for symbol in result.symbols:
                click.echo(f"{symbol.name} = {machine.memory[symbol.address]}")

    except ConfigurationError as e:
        handle_cli_exception(click.BadParameter(str(e)), verbose)
    except Exception as e:
        handle_cli_exception(e, verbose, source)


if __name__ == "__main__":
    main()
