"""
R16 Toolchain
=============

Cross-development tools for the R16, a hobby CPU with a 16-bit
instruction word, eight instruction formats and a 1024-byte
instruction ROM.

Main Components
---------------
- **assembler**: two-phase R16 assembler
    Converts assembly source files (.asm) to ROM hex images

Quick Start
-----------
Assemble a program:
    >>> from r16asm import Assembler
    >>> asm = Assembler()
    >>> rom = asm.assemble_file("blink.asm")
    >>> asm.write_rom("blink.hex")

Or use the command-line tool:
    $ r16asm blink.asm blink.hex

Source Syntax
-------------
    ORG 0X0              ; set the address of the next instruction
    loop:                ; define a label
        loadimm.upper 0x20
        loadimm.lower 0x00
        mov r0 r7
        brr loop         ; relative branch to a label

The language is case-insensitive; ';' starts a comment.
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from r16asm.assembler import Assembler, RomImage
from r16asm.config import AssemblerConfig
from r16asm.errors import (
    R16Error,
    AssemblerError,
    AssemblySyntaxError,
    MalformedConstantError,
    OperandRangeError,
    BranchRangeError,
    UndefinedLabelError,
    DuplicateLabelError,
    InvalidRegisterError,
    OperandCountError,
    AddressRangeError,
    CapacityError,
    TooManyInstructionsError,
    TooManyLabelsError,
    SourceLocation,
)

__all__ = [
    "__version__",
    "Assembler",
    "AssemblerConfig",
    "RomImage",
    "R16Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "MalformedConstantError",
    "OperandRangeError",
    "BranchRangeError",
    "UndefinedLabelError",
    "DuplicateLabelError",
    "InvalidRegisterError",
    "OperandCountError",
    "AddressRangeError",
    "CapacityError",
    "TooManyInstructionsError",
    "TooManyLabelsError",
    "SourceLocation",
]
