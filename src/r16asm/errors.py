"""
R16 Toolchain Error Hierarchy
=============================

This module defines the exception hierarchy for the R16 assembler.
All exceptions inherit from R16Error, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
R16Error (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - malformed statement (e.g. empty label)
    ├── MalformedConstantError - bad digit or prefix in a numeric literal
    ├── OperandRangeError - value does not fit its instruction field
    │   └── BranchRangeError - branch target too far away
    ├── UndefinedLabelError - reference to a label that was never defined
    ├── DuplicateLabelError - label defined more than once
    ├── InvalidRegisterError - operand is not a usable register
    ├── OperandCountError - wrong number of operands for the format
    ├── AddressRangeError - address odd or outside the ROM
    └── CapacityError - a fixed-size table overflowed
        ├── TooManyInstructionsError
        └── TooManyLabelsError

Every assembler error is fatal: assembly stops at the first one.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class R16Error(Exception):
    """
    Base exception for all R16 toolchain errors.

        try:
            assembler.assemble_file("program.asm")
        except R16Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(R16Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """1-based line number of the error, if known."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            blink.asm:7:9: error: undefined label 'LOPP'
                brr lopp
                    ^
            hint: did you mean 'LOOP'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Malformed statement in assembly source.

    Examples:
        - A label definition with no name (a lone ':')
    """
    pass


class MalformedConstantError(AssemblerError):
    """
    A numeric literal could not be parsed.

    Raised for an illegal digit in a position that requires a number
    (shift amounts, immediates, ORG addresses), and for a broken base
    prefix such as '1X20'.
    """
    pass


class OperandRangeError(AssemblerError):
    """
    A value needs more bits than its instruction field provides.

    Values are never silently truncated; anything that would lose
    significant bits when masked to the field width is rejected.
    """

    def __init__(
        self,
        value: int,
        bits: int,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.value = value
        self.bits = bits
        super().__init__(
            message or f"value {value} does not fit in {bits} bits",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class BranchRangeError(OperandRangeError):
    """
    Branch target is out of range.

    Relative branches hold a signed 9-bit word displacement, so the
    target must lie within -256 to +255 instructions of the branch.
    """

    def __init__(
        self,
        target: str,
        displacement: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.target = target
        self.displacement = displacement

        direction = "forward" if displacement > 0 else "backward"
        hint = (
            f"displacement is {displacement} words, but range is -256 to +255; "
            f"use BR with a register for {direction} jumps this far"
        )

        super().__init__(
            displacement,
            9,
            location=location,
            hint=hint,
            source_line=source_line,
            message=f"branch target '{target}' is out of range (displacement: {displacement})",
        )


class UndefinedLabelError(AssemblerError):
    """
    Reference to a label that was never defined.

    Raised during the second phase when a branch operand is neither a
    number nor a known label. Similarly spelled labels are offered as
    a hint to help catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        if not hint and self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateLabelError(AssemblerError):
    """
    Label defined more than once.

    Labels are write-once; redefining one is an error even when both
    definitions resolve to the same address.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidRegisterError(AssemblerError):
    """
    Operand is not a usable register.

    Registers are written R0-R9; register fields in the instruction
    word are 3 bits wide.
    """

    def __init__(
        self,
        operand: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.operand = operand
        super().__init__(
            f"'{operand}' is not a valid register",
            location=location,
            hint=hint or "registers are written R0 to R7",
            source_line=source_line,
        )


class OperandCountError(AssemblerError):
    """
    Wrong number of operands for the instruction's format.

    Example:
        ADD R1, R2  ; Error: ADD takes three registers
    """

    def __init__(
        self,
        mnemonic: str,
        expected: int,
        actual: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected
        self.actual = actual

        plural = "operand" if expected == 1 else "operands"
        super().__init__(
            f"'{mnemonic}' takes {expected} {plural}, got {actual}",
            location=location,
            source_line=source_line,
        )


class AddressRangeError(AssemblerError):
    """
    Address is odd or lies outside the ROM.

    Instructions are one 16-bit word, so every instruction and label
    address must be even and leave room for both bytes in the ROM.
    """

    def __init__(
        self,
        address: int,
        message: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.address = address
        super().__init__(
            message or f"address ${address:04X} is outside the ROM",
            location=location,
            source_line=source_line,
        )


class CapacityError(AssemblerError):
    """A fixed-size assembler table is full."""
    pass


class TooManyInstructionsError(CapacityError):
    """More instructions than the ROM has word slots."""
    pass


class TooManyLabelsError(CapacityError):
    """More labels than the symbol table allows."""
    pass
