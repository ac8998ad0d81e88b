"""
R16 Numeric Literal Parser
==========================

Every numeric operand in the R16 instruction set goes through
parse_number(), with the width of the field it is destined for:

| Operand                 | Width | Mode             |
|-------------------------|-------|------------------|
| Shift amount (SHL, SHR) | 4     | unsigned-tolerant|
| Branch displacement     | 9     | signed           |
| Small immediate (BR*)   | 6     | signed           |
| Load-immediate byte     | 8     | unsigned-tolerant|
| ORG address             | 16    | unsigned-tolerant|

Literal Syntax
--------------
An optional sign followed by:

| Format      | Prefix | Example  | Value |
|-------------|--------|----------|-------|
| Decimal     | (none) | 123      | 123   |
| Hexadecimal | 0X     | 0X7F     | 127   |
| Binary      | 0B     | 0B1010   | 10    |

Literals arrive upper-cased from the lexer; lower-case prefixes and
digits are accepted too.

Not-a-number vs. errors
-----------------------
A word containing a digit that is illegal for its base is reported as
"not a number" (None) rather than raising, because callers use that to
tell label references from numbers. A broken base prefix or a value that
does not fit its field is always an error.
"""

from typing import Optional

from r16asm.errors import MalformedConstantError, OperandRangeError, SourceLocation


DIGITS = {
    10: frozenset("0123456789"),
    16: frozenset("0123456789ABCDEF"),
    2: frozenset("01"),
}

PREFIXES = {
    "X": 16,
    "B": 2,
}


def fits_in_bits(value: int, bits: int, signed: bool = True) -> bool:
    """
    Check whether a value can be stored in a field of the given width.

    Args:
        value: The value to check
        bits: Field width in bits
        signed: If True the value must be a two's-complement quantity
                (-2**(bits-1) .. 2**(bits-1)-1). If False, non-negative
                values may also use the full unsigned range up to
                2**bits - 1.

    Returns:
        True if the value fits
    """
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1 if signed else (1 << bits) - 1
    return low <= value <= high


def mask(value: int, bits: int) -> int:
    """Keep only the low `bits` bits of a value."""
    return value & ((1 << bits) - 1)


def sign_extend(value: int, bits: int) -> int:
    """
    Interpret the low `bits` bits of a value as a two's-complement number.

    >>> sign_extend(0x1FF, 9)
    -1
    >>> sign_extend(0x0FF, 9)
    255
    """
    value = mask(value, bits)
    if value & (1 << (bits - 1)):
        value -= 1 << bits
    return value


def parse_number(
    text: str,
    bits: int,
    location: Optional[SourceLocation] = None,
    signed: bool = True,
    source_line: Optional[str] = None,
) -> Optional[int]:
    """
    Parse a numeric literal destined for a field of `bits` bits.

    Args:
        text: The literal as written (e.g. "-0X1F")
        bits: Width of the destination field
        location: Where the literal appears (for error messages)
        signed: Range-check mode, see fits_in_bits()
        source_line: Source text quoted in error messages

    Returns:
        The value masked to `bits` bits, or None if `text` is not a number

    Raises:
        MalformedConstantError: If the base prefix is broken (e.g. "1X20",
            or "0X" with no digits)
        OperandRangeError: If the value does not fit in the field
    """
    digits = text.upper()

    negative = False
    if digits[:1] in ("+", "-"):
        negative = digits[0] == "-"
        digits = digits[1:]

    base = 10
    if len(digits) >= 2 and digits[1] in PREFIXES:
        if digits[0] == "0":
            prefix, digits = digits[:2], digits[2:]
            base = PREFIXES[prefix[1]]
            if not digits:
                raise MalformedConstantError(
                    f"missing digits after '{prefix}' in '{text}'",
                    location,
                    source_line=source_line,
                )
        elif digits[0].isdigit():
            raise MalformedConstantError(
                f"malformed constant '{text}'",
                location,
                hint="hexadecimal and binary constants start with 0X and 0B",
                source_line=source_line,
            )

    if not digits or not set(digits) <= DIGITS[base]:
        return None

    value = int(digits, base)
    if negative:
        value = -value

    if not fits_in_bits(value, bits, signed):
        raise OperandRangeError(value, bits, location, source_line=source_line)

    return mask(value, bits)


def require_number(
    text: str,
    bits: int,
    location: Optional[SourceLocation] = None,
    signed: bool = True,
    source_line: Optional[str] = None,
) -> int:
    """
    Parse a literal in a position where only a number is allowed.

    Same as parse_number(), but "not a number" is an error.

    Raises:
        MalformedConstantError: If `text` is not a valid literal
        OperandRangeError: If the value does not fit in the field
    """
    value = parse_number(text, bits, location, signed=signed, source_line=source_line)
    if value is None:
        raise MalformedConstantError(
            f"malformed constant '{text}'",
            location,
            source_line=source_line,
        )
    return value
