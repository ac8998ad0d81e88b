"""
R16 Instruction Encoder
=======================

Turns a mnemonic and its operand words into a 16-bit instruction word.

The opcode always fills bits 15-9. What goes into the low nine bits
depends on the instruction format (see opcodes.py):

    15          9 8     6 5     3 2     0
    +------------+-------+-------+-------+
    |   opcode   |  reg0 |  reg1 |  reg2 |   A1
    +------------+-------+-------+-------+
    |   opcode   |  reg  |   -   | imm4  |   A2 (imm4 in bits 3-0)
    +------------+-------+---------------+
    |   opcode   |   displacement (9)    |   B1
    +------------+-------+---------------+
    |   opcode   |  reg  |    imm6       |   B2
    +------------+-+-----+---------------+
    |   opcode   |U|        imm8         |   L1
    +------------+-+---------------------+

Relative branches (B1) accept either a literal displacement or a label.
Numeric parsing is tried first; only a word that is not a number is
looked up as a label, and the displacement is then the distance to the
label in words: (target - address) / 2.
"""

from typing import Callable, Optional, Sequence

from r16asm.assembler.lexer import Token
from r16asm.assembler.numbers import fits_in_bits, mask, parse_number, require_number
from r16asm.assembler.opcodes import InstructionFormat, OpcodeDescriptor, lookup_opcode
from r16asm.assembler.symbols import SymbolTable
from r16asm.errors import BranchRangeError, InvalidRegisterError, OperandCountError


OPCODE_SHIFT = 9
UPPER_HALF_BIT = 1 << 8

# Field widths
SHIFT_BITS = 4
DISPLACEMENT_BITS = 9
IMM6_BITS = 6
IMM8_BITS = 8
REGISTER_BITS = 3


def parse_register(
    token: Token,
    source_line: Optional[str] = None,
) -> int:
    """
    Parse a register operand.

    Registers are written as 'R' followed by exactly one decimal digit.
    Register fields are three bits wide, so only R0-R7 can be encoded.

    Args:
        token: The operand token
        source_line: Source text quoted in error messages

    Returns:
        The register number

    Raises:
        InvalidRegisterError: If the operand is not an encodable register
    """
    text = token.text.upper()
    if len(text) != 2 or text[0] != "R" or not text[1].isdigit():
        raise InvalidRegisterError(text, token.location, source_line=source_line)

    number = int(text[1])
    if number >= 1 << REGISTER_BITS:
        raise InvalidRegisterError(
            text,
            token.location,
            hint=f"register fields are {REGISTER_BITS} bits wide; use R0 to R7",
            source_line=source_line,
        )
    return number


class InstructionEncoder:
    """
    Encodes instructions against a (complete) symbol table.

    The encoder only reads the symbol table; it must be fully populated
    before the first branch to a forward label is encoded.

    Usage:
        encoder = InstructionEncoder(symbols)
        word = encoder.encode(mnemonic_token, operand_tokens, address)
    """

    def __init__(
        self,
        symbols: SymbolTable,
        get_line: Optional[Callable[[int], Optional[str]]] = None,
    ):
        """
        Args:
            symbols: Labels defined in the first phase
            get_line: Returns the source text of a line number, used to
                      quote the offending line in error messages
        """
        self._symbols = symbols
        self._get_line = get_line or (lambda line: None)

        self._handlers: dict[InstructionFormat, Callable[..., int]] = {
            InstructionFormat.A0: self._encode_a0,
            InstructionFormat.A1: self._encode_a1,
            InstructionFormat.A2: self._encode_a2,
            InstructionFormat.A3: self._encode_a3,
            InstructionFormat.B1: self._encode_b1,
            InstructionFormat.B2: self._encode_b2,
            InstructionFormat.L1: self._encode_l1,
            InstructionFormat.L2: self._encode_l2,
        }

    def encode(self, mnemonic: Token, operands: Sequence[Token], address: int) -> int:
        """
        Encode one instruction.

        Args:
            mnemonic: The mnemonic token (must be a known mnemonic)
            operands: Operand tokens in source order
            address: ROM address of the instruction

        Returns:
            The 16-bit instruction word

        Raises:
            OperandCountError: If the operand count does not match the format
            InvalidRegisterError: If a register operand is malformed
            MalformedConstantError: If a numeric operand is malformed
            OperandRangeError: If a value does not fit its field
            UndefinedLabelError: If a branch target label is unknown
        """
        op = lookup_opcode(mnemonic.text)
        assert op is not None, f"encoder called with unknown mnemonic {mnemonic.text!r}"

        source_line = self._get_line(mnemonic.line)

        expected = op.format.operand_count
        if len(operands) != expected:
            raise OperandCountError(
                op.mnemonic,
                expected,
                len(operands),
                location=mnemonic.location,
                source_line=source_line,
            )

        word = op.opcode << OPCODE_SHIFT
        word |= self._handlers[op.format](op, operands, address, source_line)
        return word

    # =========================================================================
    # Format Handlers
    # =========================================================================
    # Each handler returns the low nine bits of the instruction word.

    def _encode_a0(self, op, operands, address, source_line) -> int:
        return 0

    def _encode_a1(self, op, operands, address, source_line) -> int:
        return (
            parse_register(operands[0], source_line) << 6
            | parse_register(operands[1], source_line) << 3
            | parse_register(operands[2], source_line)
        )

    def _encode_a2(self, op, operands, address, source_line) -> int:
        reg = parse_register(operands[0], source_line)
        amount = require_number(
            operands[1].text, SHIFT_BITS, operands[1].location,
            signed=False, source_line=source_line,
        )
        return reg << 6 | amount

    def _encode_a3(self, op, operands, address, source_line) -> int:
        return parse_register(operands[0], source_line) << 6

    def _encode_b1(self, op, operands, address, source_line) -> int:
        target = operands[0]
        displacement = parse_number(
            target.text, DISPLACEMENT_BITS, target.location, source_line=source_line
        )
        if displacement is not None:
            return displacement

        target_address = self._symbols.resolve(target.text, target.location, source_line)
        distance = (target_address - address) // 2
        if not fits_in_bits(distance, DISPLACEMENT_BITS):
            raise BranchRangeError(target.text, distance, target.location, source_line)
        return mask(distance, DISPLACEMENT_BITS)

    def _encode_b2(self, op, operands, address, source_line) -> int:
        reg = parse_register(operands[0], source_line)
        offset = require_number(
            operands[1].text, IMM6_BITS, operands[1].location, source_line=source_line
        )
        return reg << 6 | offset

    def _encode_l1(self, op: OpcodeDescriptor, operands, address, source_line) -> int:
        value = require_number(
            operands[0].text, IMM8_BITS, operands[0].location,
            signed=False, source_line=source_line,
        )
        return (UPPER_HALF_BIT if op.upper else 0) | value

    def _encode_l2(self, op, operands, address, source_line) -> int:
        return (
            parse_register(operands[0], source_line) << 6
            | parse_register(operands[1], source_line) << 3
        )


def encode_instruction(
    mnemonic: Token,
    operands: Sequence[Token],
    symbols: SymbolTable,
    address: int,
) -> int:
    """
    Convenience function to encode a single instruction.

    Args:
        mnemonic: The mnemonic token
        operands: Operand tokens
        symbols: Label table used by relative branches
        address: ROM address of the instruction

    Returns:
        The 16-bit instruction word
    """
    return InstructionEncoder(symbols).encode(mnemonic, operands, address)
