"""
r16asm - R16 Assembler Command-Line Interface
=============================================

Assembles an R16 source file into a ROM hex image.

Usage
-----
    $ r16asm program.asm program.hex

The output file is only created (or replaced) when assembly succeeds.

Environment
-----------
    R16ASM_LOG_LEVEL     DEBUG shows every label, ORG and ignored word
    R16ASM_MAX_LABELS    symbol table capacity (default 512)
    R16ASM_WARN_OVERLAP  warn when instructions overwrite each other (default 1)
"""

from pathlib import Path
import logging
import sys

import click

from r16asm import __version__
from r16asm.assembler import Assembler
from r16asm.cli.errors import ExitCode, handle_cli_exception
from r16asm.config import AssemblerConfig


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.version_option(version=__version__, prog_name="r16asm")
def main(input_file: Path, output_file: Path) -> None:
    """
    Assemble R16 source code into a ROM image.

    INPUT_FILE is the assembly source file (.asm) to assemble.
    OUTPUT_FILE receives the ROM image: 512 lines of four hex digits,
    one 16-bit word per line.

    \b
    Example:
        r16asm blink.asm blink.hex
    """
    try:
        config = AssemblerConfig.from_env()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    logging.basicConfig(
        level=config.logging_level(),
        format="%(levelname)s: %(message)s",
    )

    asm = Assembler(config)
    verbose = config.logging_level() <= logging.DEBUG

    try:
        asm.assemble_file(input_file)
        asm.write_rom(output_file)
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
