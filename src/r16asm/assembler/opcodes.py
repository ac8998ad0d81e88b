"""
R16 Instruction Set Definition
==============================

This module defines the complete R16 instruction set: every mnemonic, its
opcode and the format that governs how its operands are encoded.

Every instruction is a single 16-bit word. The opcode occupies the top
seven bits (15-9); the low nine bits are laid out according to the
instruction format.

Instruction Formats
-------------------

| Format | Operands              | Low 9 bits                          |
|--------|-----------------------|-------------------------------------|
| A0     | none                  | unused                              |
| A1     | Rd, Rs1, Rs2          | Rd<<6 | Rs1<<3 | Rs2                |
| A2     | Rd, imm4              | Rd<<6 | imm4                        |
| A3     | Rd                    | Rd<<6                               |
| B1     | displacement or label | signed 9-bit word displacement      |
| B2     | Rd, imm6              | Rd<<6 | signed imm6                 |
| L1     | imm8                  | upper-half flag (bit 8) | imm8      |
| L2     | Rd, Rs                | Rd<<6 | Rs<<3                       |

LOADIMM.UPPER and LOADIMM.LOWER share opcode 18 and differ only in
bit 8, which selects the half of R7 that receives the byte.

The table is closed: there is no way to add instructions at runtime.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Instruction Format Enumeration
# =============================================================================

class InstructionFormat(Enum):
    """
    R16 instruction formats.

    Each format fixes the number of operands and where they go in the
    low nine bits of the instruction word.
    """
    A0 = auto()  # No operands (NOP, RETURN)
    A1 = auto()  # Three registers (ADD R1, R2, R3)
    A2 = auto()  # Register + 4-bit immediate (SHL R1, 3)
    A3 = auto()  # One register (TEST R1)
    B1 = auto()  # PC-relative branch (BRR LOOP)
    B2 = auto()  # Register + 6-bit signed immediate (BR R1, -4)
    L1 = auto()  # 8-bit immediate (LOADIMM.LOWER 0XFF)
    L2 = auto()  # Two registers (MOV R0, R7)

    @property
    def operand_count(self) -> int:
        """Number of operands an instruction of this format takes."""
        return OPERAND_COUNTS[self]

    def __str__(self) -> str:
        return self.name


OPERAND_COUNTS: dict[InstructionFormat, int] = {
    InstructionFormat.A0: 0,
    InstructionFormat.A1: 3,
    InstructionFormat.A2: 2,
    InstructionFormat.A3: 1,
    InstructionFormat.B1: 1,
    InstructionFormat.B2: 2,
    InstructionFormat.L1: 1,
    InstructionFormat.L2: 2,
}


# =============================================================================
# Opcode Descriptor
# =============================================================================

@dataclass(frozen=True)
class OpcodeDescriptor:
    """
    Static description of one mnemonic.

    Attributes:
        mnemonic: Upper-case mnemonic (e.g. "BRR.Z")
        opcode: 7-bit opcode placed in bits 15-9
        format: Operand layout of the instruction
        upper: Set only for LOADIMM.UPPER (bit 8 of the L1 format)
    """
    mnemonic: str
    opcode: int
    format: InstructionFormat
    upper: bool = False

    def __repr__(self) -> str:
        return f"OpcodeDescriptor({self.mnemonic}, opcode={self.opcode}, format={self.format})"


# =============================================================================
# Opcode Table
# =============================================================================

_F = InstructionFormat

OPCODE_TABLE: tuple[OpcodeDescriptor, ...] = (
    # Arithmetic and logic
    OpcodeDescriptor("NOP", 0, _F.A0),
    OpcodeDescriptor("ADD", 1, _F.A1),
    OpcodeDescriptor("SUB", 2, _F.A1),
    OpcodeDescriptor("MUL", 3, _F.A1),
    OpcodeDescriptor("NAND", 4, _F.A1),
    OpcodeDescriptor("SHL", 5, _F.A2),
    OpcodeDescriptor("SHR", 6, _F.A2),
    OpcodeDescriptor("TEST", 7, _F.A3),
    OpcodeDescriptor("MUH", 8, _F.A1),   # Multiply, high word

    # Port I/O
    OpcodeDescriptor("OUT", 32, _F.A3),
    OpcodeDescriptor("IN", 33, _F.A3),

    # Relative branches
    OpcodeDescriptor("BRR", 64, _F.B1),
    OpcodeDescriptor("BRR.N", 65, _F.B1),
    OpcodeDescriptor("BRR.Z", 66, _F.B1),
    OpcodeDescriptor("BRR.O", 73, _F.B1),

    # Register branches
    OpcodeDescriptor("BR", 67, _F.B2),
    OpcodeDescriptor("BR.N", 68, _F.B2),
    OpcodeDescriptor("BR.Z", 69, _F.B2),
    OpcodeDescriptor("BR.O", 72, _F.B2),
    OpcodeDescriptor("BR.SUB", 70, _F.B2),
    OpcodeDescriptor("RETURN", 71, _F.A0),

    # Memory and moves
    OpcodeDescriptor("LOAD", 16, _F.L2),
    OpcodeDescriptor("STORE", 17, _F.L2),
    OpcodeDescriptor("LOADIMM.LOWER", 18, _F.L1),
    OpcodeDescriptor("LOADIMM.UPPER", 18, _F.L1, upper=True),
    OpcodeDescriptor("MOV", 19, _F.L2),
)

del _F

# Set of all valid mnemonics for quick lookup
MNEMONICS: frozenset[str] = frozenset(op.mnemonic for op in OPCODE_TABLE)


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup_opcode(mnemonic: str) -> Optional[OpcodeDescriptor]:
    """
    Look up a mnemonic in the opcode table.

    Args:
        mnemonic: The instruction mnemonic (any case)

    Returns:
        The matching OpcodeDescriptor, or None if the mnemonic is unknown
    """
    mnemonic = mnemonic.upper()
    for op in OPCODE_TABLE:
        if op.mnemonic == mnemonic:
            return op
    return None


def is_valid_instruction(mnemonic: str) -> bool:
    """
    Check if a word is an R16 mnemonic.

    Args:
        mnemonic: The word to check (any case)

    Returns:
        True if valid, False otherwise
    """
    return mnemonic.upper() in MNEMONICS

