"""
R16 Assembler - Main Interface
==============================

This module provides the Assembler class, the primary interface for
turning R16 source code into a ROM image. It drives the lexer, builds
the symbol table and hands each instruction to the encoder.

Assembly runs in two phases over a single tokenization of the source:

1. **Scan**: walk the token stream once, recording every label at the
   current address and every instruction (address, mnemonic and raw
   operand words). Nothing is encoded yet, so labels may be used before
   they are defined.
2. **Encode**: encode the recorded instructions in order, now that all
   labels are known, and store each word in the ROM image.

The first error stops assembly; there is no partial output.

Example Usage
-------------
>>> from r16asm.assembler import Assembler
>>> asm = Assembler()
>>> rom = asm.assemble('''
...     ORG 0X0
... loop:
...     ADD R1, R2, R3
...     BRR loop
... ''')
>>> rom.read_word(0)
595
>>> asm.get_symbols()
{'LOOP': 0}
>>> asm.write_rom("program.hex")

Command-Line Usage
------------------
    $ r16asm program.asm program.hex
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional
import logging

from r16asm.assembler.encoder import InstructionEncoder
from r16asm.assembler.lexer import Lexer, Token
from r16asm.assembler.numbers import require_number, sign_extend
from r16asm.assembler.opcodes import InstructionFormat, is_valid_instruction, lookup_opcode
from r16asm.assembler.rom import ROM_SIZE, WORD_SIZE, RomImage
from r16asm.assembler.symbols import SymbolTable
from r16asm.config import AssemblerConfig
from r16asm.errors import (
    AddressRangeError,
    AssemblySyntaxError,
    OperandCountError,
    TooManyInstructionsError,
)


MAX_INSTRUCTIONS = ROM_SIZE // WORD_SIZE
MAX_OPERANDS = 3
ORG_BITS = 16
ORG_DIRECTIVE = "ORG"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingInstruction:
    """
    An instruction recorded in the first phase, not yet encoded.

    Attributes:
        address: ROM address assigned when the instruction was seen
        mnemonic: The mnemonic token
        operands: Raw operand tokens in source order (at most three)
    """
    address: int
    mnemonic: Token
    operands: tuple[Token, ...]

    @property
    def line(self) -> int:
        """Source line of the instruction."""
        return self.mnemonic.line


class Assembler:
    """
    Main R16 assembler class.

    An Assembler instance keeps the results of its most recent run
    (ROM image, symbols, instructions) so they can be inspected or
    written out afterwards.

    Attributes:
        config: Runtime settings (symbol table capacity, overlap warnings)
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        """
        Initialize the assembler.

        Args:
            config: Runtime settings; defaults to AssemblerConfig()
        """
        self.config = config or AssemblerConfig()
        self._reset("<input>", "")

    def _reset(self, filename: str, source: str) -> None:
        self._lexer = Lexer(source, filename)
        self._symbols = SymbolTable(max_labels=self.config.max_labels)
        self._instructions: list[PendingInstruction] = []
        self._rom = RomImage()
        self._words: dict[int, int] = {}

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(self, source: str, filename: str = "<input>") -> RomImage:
        """
        Assemble source code (alias for assemble_string).

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The assembled ROM image
        """
        return self.assemble_string(source, filename)

    def assemble_string(self, source: str, filename: str = "<input>") -> RomImage:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The assembled ROM image

        Raises:
            AssemblerError: If assembly fails
        """
        self._reset(filename, source)

        self._scan()
        logger.debug(
            f"{filename}: scanned {len(self._instructions)} instructions, "
            f"{len(self._symbols)} labels"
        )

        self._encode()
        logger.debug(f"{filename}: encoded {len(self._words)} words")

        return self._rom

    def assemble_file(self, filepath: str | Path) -> RomImage:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            The assembled ROM image

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        logger.info(f"Assembling {filepath}")
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Phase 1: Scan
    # =========================================================================

    def _scan(self) -> None:
        """Collect labels and instructions from the token stream."""
        cursor = 0
        tokens = self._lexer.tokenize()

        for token in tokens:
            if token.text == ORG_DIRECTIVE:
                cursor = self._scan_org(token, tokens)
            elif token.is_label_definition:
                self._scan_label(token, cursor)
            elif is_valid_instruction(token.text):
                self._scan_instruction(token, tokens, cursor)
                cursor += WORD_SIZE
            elif not token.is_newline:
                logger.debug(f"{token.location}: ignoring '{token.text}'")

    def _scan_org(self, directive: Token, tokens: Iterator[Token]) -> int:
        """Handle ORG: the next word is the new address."""
        operand = next(tokens, None)
        if operand is None or operand.is_newline:
            raise AssemblySyntaxError(
                "ORG requires an address",
                directive.location,
                source_line=self._line(directive.line),
            )

        address = require_number(
            operand.text, ORG_BITS, operand.location,
            signed=False, source_line=self._line(operand.line),
        )
        if address % WORD_SIZE or address >= ROM_SIZE:
            raise AddressRangeError(
                address,
                f"ORG address ${address:04X} must be even and below ${ROM_SIZE:04X}",
                location=operand.location,
                source_line=self._line(operand.line),
            )

        logger.debug(f"{directive.location}: origin set to ${address:04X}")
        return address

    def _scan_label(self, token: Token, cursor: int) -> None:
        """Record a 'NAME:' label at the current address."""
        name = token.text[:-1]
        source_line = self._line(token.line)
        if not name:
            raise AssemblySyntaxError(
                "label definition has no name",
                token.location,
                source_line=source_line,
            )

        self._symbols.define(name, cursor, token.location, source_line)
        logger.debug(f"{token.location}: label {name} = ${cursor:04X}")

    def _scan_instruction(
        self,
        mnemonic: Token,
        tokens: Iterator[Token],
        cursor: int,
    ) -> None:
        """
        Record an instruction and its operand words.

        Operands run up to the end of the line or the end of the source.
        The lexer has already dropped comments.
        """
        source_line = self._line(mnemonic.line)

        if len(self._instructions) >= MAX_INSTRUCTIONS:
            raise TooManyInstructionsError(
                f"too many instructions (the ROM holds {MAX_INSTRUCTIONS})",
                mnemonic.location,
                source_line=source_line,
            )
        if cursor + 1 >= ROM_SIZE:
            raise AddressRangeError(
                cursor,
                f"instruction at ${cursor:04X} does not fit in the "
                f"{ROM_SIZE}-byte ROM",
                location=mnemonic.location,
                source_line=source_line,
            )

        operands: list[Token] = []
        for token in tokens:
            if token.is_newline:
                break
            operands.append(token)

        if len(operands) > MAX_OPERANDS:
            op = lookup_opcode(mnemonic.text)
            raise OperandCountError(
                op.mnemonic,
                op.format.operand_count,
                len(operands),
                location=mnemonic.location,
                source_line=source_line,
            )

        self._instructions.append(PendingInstruction(cursor, mnemonic, tuple(operands)))

    # =========================================================================
    # Phase 2: Encode
    # =========================================================================

    def _encode(self) -> None:
        """Encode every recorded instruction into the ROM image."""
        encoder = InstructionEncoder(self._symbols, get_line=self._line)

        for inst in self._instructions:
            word = encoder.encode(inst.mnemonic, inst.operands, inst.address)

            if inst.address in self._words and self.config.warn_on_overlap:
                logger.warning(
                    f"{inst.mnemonic.location}: overwriting word at "
                    f"${inst.address:04X}"
                )

            self._rom.write_word(inst.address, word)
            self._words[inst.address] = word

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_rom(self) -> RomImage:
        """Get the ROM image from the last run."""
        return self._rom

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping label names to addresses
        """
        return self._symbols.as_dict()

    def get_instructions(self) -> list[PendingInstruction]:
        """Get the instructions recorded by the last run, in source order."""
        return list(self._instructions)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Each instruction is listed with its address, encoded word and
        source line, followed by the symbol table:

            0000  0253  add r1, r2, r3
            0002  81FF  brr loop
        """
        lines = []
        for inst in self._instructions:
            word = self._rom.read_word(inst.address)
            source = (self._line(inst.line) or "").strip()
            lines.append(f"{inst.address:04X}  {word:04X}  {source}")

            op = lookup_opcode(inst.mnemonic.text)
            if op.format is InstructionFormat.B1:
                displacement = sign_extend(word, 9)
                target = inst.address + displacement * WORD_SIZE
                lines[-1] += f"  ; -> {target & 0xFFFF:04X}"

        if len(self._symbols):
            lines.append("")
            lines.append("Symbols:")
            for label in self._symbols:
                lines.append(f"  {label.name:<16} {label.address:04X}")

        return "\n".join(lines) + "\n"

    def write_rom(self, filepath: str | Path) -> None:
        """
        Write the ROM image as hex text.

        Args:
            filepath: Output file path
        """
        self._rom.write(filepath)
        logger.info(f"Wrote {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write the assembly listing file.

        Args:
            filepath: Output file path
        """
        Path(filepath).write_text(self.get_listing())
        logger.info(f"Wrote listing to {filepath}")

    def _line(self, line_number: int) -> Optional[str]:
        return self._lexer.get_line(line_number)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> RomImage:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors

    Returns:
        The assembled ROM image

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> RomImage:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file

    Returns:
        The assembled ROM image

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
