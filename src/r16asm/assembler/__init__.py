"""
R16 Assembler Package
=====================

This package implements a two-phase assembler for the R16 CPU, a small
16-bit machine with a 1024-byte instruction ROM.

Modules
-------
- **lexer**: Splits source text into words
- **numbers**: Parses numeric literals with range checking
- **opcodes**: R16 instruction set definition
- **symbols**: Label table
- **encoder**: Encodes one instruction into a 16-bit word
- **rom**: ROM image and its hex text format
- **assembler**: Main Assembler class that coordinates all components

Usage
-----
>>> from r16asm.assembler import Assembler
>>> asm = Assembler()
>>> rom = asm.assemble("ADD R1, R2, R3")
>>> rom.to_text().splitlines()[0]
'0253'

Or from the command line:
    $ r16asm program.asm program.hex
"""

from r16asm.assembler.assembler import (
    Assembler,
    PendingInstruction,
    assemble,
    assemble_file,
)
from r16asm.assembler.encoder import InstructionEncoder, encode_instruction, parse_register
from r16asm.assembler.lexer import Lexer, Token, tokenize
from r16asm.assembler.numbers import parse_number, require_number, sign_extend
from r16asm.assembler.opcodes import (
    OPCODE_TABLE,
    InstructionFormat,
    OpcodeDescriptor,
    is_valid_instruction,
    lookup_opcode,
)
from r16asm.assembler.rom import ROM_SIZE, RomImage
from r16asm.assembler.symbols import Label, SymbolTable

__all__ = [
    # Main interface
    "Assembler",
    "assemble",
    "assemble_file",
    "PendingInstruction",
    # Lexer
    "Lexer",
    "Token",
    "tokenize",
    # Numbers
    "parse_number",
    "require_number",
    "sign_extend",
    # Instruction set
    "OPCODE_TABLE",
    "InstructionFormat",
    "OpcodeDescriptor",
    "lookup_opcode",
    "is_valid_instruction",
    # Encoding
    "InstructionEncoder",
    "encode_instruction",
    "parse_register",
    # Output
    "ROM_SIZE",
    "RomImage",
    # Symbols
    "Label",
    "SymbolTable",
]
