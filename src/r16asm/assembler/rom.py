"""
R16 ROM Image
=============

The assembler's output is a snapshot of the 1024-byte instruction ROM.
Bytes that no instruction writes stay zero, which the CPU executes as
NOP (opcode 0 with zero operands).

Text Format
-----------
The image is written as one big-endian 16-bit word per line, four
upper-case hex digits, every line newline-terminated:

    0253
    8000
    0000
    ...

A full image is always exactly ROM_SIZE / 2 = 512 lines.
"""

from pathlib import Path
from typing import Iterator
import logging
import os
import stat
import tempfile


ROM_SIZE = 1024
WORD_SIZE = 2
ROM_WORDS = ROM_SIZE // WORD_SIZE

logger = logging.getLogger(__name__)


class RomImage:
    """
    Fixed-size ROM contents.

    Only whole instruction words are written, always at even addresses,
    high byte first.

    Attributes:
        data: The raw ROM bytes (ROM_SIZE long)
    """

    def __init__(self, data: bytes | None = None):
        if data is None:
            self.data = bytearray(ROM_SIZE)
        else:
            if len(data) != ROM_SIZE:
                raise ValueError(f"ROM image must be {ROM_SIZE} bytes, got {len(data)}")
            self.data = bytearray(data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RomImage):
            return NotImplemented
        return self.data == other.data

    @staticmethod
    def _check_address(address: int) -> None:
        if address % WORD_SIZE or not 0 <= address < ROM_SIZE - 1:
            raise ValueError(f"word address ${address:04X} is odd or outside the ROM")

    def write_word(self, address: int, word: int) -> None:
        """
        Store a 16-bit word at an even address, high byte first.

        Raises:
            ValueError: If the address is odd or outside the ROM
        """
        self._check_address(address)
        self.data[address] = (word >> 8) & 0xFF
        self.data[address + 1] = word & 0xFF

    def read_word(self, address: int) -> int:
        """Return the 16-bit word stored at an even address."""
        self._check_address(address)
        return (self.data[address] << 8) | self.data[address + 1]

    def words(self) -> Iterator[int]:
        """Yield every word in the ROM in address order."""
        for address in range(0, ROM_SIZE, WORD_SIZE):
            yield (self.data[address] << 8) | self.data[address + 1]

    # =========================================================================
    # Text Serialization
    # =========================================================================

    def to_hex_lines(self) -> Iterator[str]:
        """Yield one 4-digit upper-case hex string per word."""
        for address in range(0, ROM_SIZE, WORD_SIZE):
            yield f"{self.data[address]:02X}{self.data[address + 1]:02X}"

    def to_text(self) -> str:
        """Return the whole image as newline-terminated hex lines."""
        return "".join(f"{line}\n" for line in self.to_hex_lines())

    @classmethod
    def from_text(cls, text: str) -> "RomImage":
        """
        Parse an image previously produced by to_text().

        Raises:
            ValueError: If the text does not hold exactly ROM_WORDS words
        """
        lines = text.split()
        if len(lines) != ROM_WORDS:
            raise ValueError(f"expected {ROM_WORDS} words, got {len(lines)}")

        image = cls()
        for index, line in enumerate(lines):
            if len(line) != 4:
                raise ValueError(f"line {index + 1}: expected 4 hex digits, got {line!r}")
            image.write_word(index * WORD_SIZE, int(line, 16))
        return image

    def write(self, filepath: str | Path) -> None:
        """
        Write the image to a file.

        The text goes to a temporary file next to the destination, which
        is then renamed over it, so the destination is either left alone
        or replaced by a complete image. A replaced file keeps its
        permissions; a new one gets the umask default, as with open().

        Args:
            filepath: Output file path
        """
        filepath = Path(filepath)
        directory = filepath.parent if str(filepath.parent) else Path(".")
        mode = _output_mode(filepath)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", newline="\n") as f:
                f.write(self.to_text())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, filepath)
        except BaseException:
            os.unlink(tmp_name)
            raise

        logger.debug(f"Wrote {ROM_WORDS} words to {filepath}")


def _output_mode(filepath: Path) -> int:
    """Permission bits for a ROM file written to filepath."""
    try:
        return stat.S_IMODE(filepath.stat().st_mode)
    except FileNotFoundError:
        pass

    # os.umask() can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
