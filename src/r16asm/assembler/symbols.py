"""
R16 Symbol Table
================

Maps label names to ROM addresses. Labels are collected during the first
phase of assembly and only read during the second, which is what allows
a branch to refer to a label defined further down the source.

Labels are write-once: a second definition of the same name is an error
even if it would resolve to the same address.
"""

from dataclasses import dataclass
from typing import Iterator, Optional
import difflib

from r16asm.assembler.rom import ROM_SIZE
from r16asm.errors import (
    AddressRangeError,
    DuplicateLabelError,
    SourceLocation,
    TooManyLabelsError,
    UndefinedLabelError,
)


MAX_LABELS = 512


@dataclass(frozen=True)
class Label:
    """
    Symbol table entry.

    Attributes:
        name: Label name, without the trailing colon
        address: Resolved ROM address (even, below ROM_SIZE)
        location: Where the label was defined
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Label name to address mapping with duplicate detection.

    Lookups are by exact (upper-cased) name. Callers are expected to try
    numeric parsing before label lookup, so a label can never shadow a
    number with the same spelling.
    """

    def __init__(self, max_labels: int = MAX_LABELS, rom_size: int = ROM_SIZE):
        self._labels: dict[str, Label] = {}
        self._max_labels = max_labels
        self._rom_size = rom_size

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, name: str) -> bool:
        return name.upper() in self._labels

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels.values())

    def define(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Label:
        """
        Define a label at an address.

        Args:
            name: Label name (case-insensitive, no trailing colon)
            address: ROM address the label refers to
            location: Where the label is defined
            source_line: Source text quoted in error messages

        Returns:
            The new Label

        Raises:
            DuplicateLabelError: If the label already exists
            AddressRangeError: If the address is odd or outside the ROM
            TooManyLabelsError: If the table is full
        """
        name = name.upper()

        existing = self._labels.get(name)
        if existing is not None:
            raise DuplicateLabelError(
                name,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        if address % 2:
            raise AddressRangeError(
                address,
                f"label '{name}' is at odd address ${address:04X}",
                location=location,
                source_line=source_line,
            )
        if not 0 <= address < self._rom_size:
            raise AddressRangeError(
                address,
                f"label '{name}' at ${address:04X} is outside the "
                f"{self._rom_size}-byte ROM",
                location=location,
                source_line=source_line,
            )

        if len(self._labels) >= self._max_labels:
            raise TooManyLabelsError(
                f"too many labels (limit is {self._max_labels})",
                location,
                source_line=source_line,
            )

        label = Label(name, address, location)
        self._labels[name] = label
        return label

    def lookup(self, name: str) -> Optional[int]:
        """
        Get the address of a label.

        Returns:
            The address, or None if the label is not defined
        """
        label = self._labels.get(name.upper())
        return label.address if label is not None else None

    def resolve(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Get the address of a label that must exist.

        Raises:
            UndefinedLabelError: If the label is not defined; similarly
                spelled labels are suggested in the hint
        """
        address = self.lookup(name)
        if address is None:
            similar = difflib.get_close_matches(name.upper(), list(self._labels), n=3)
            raise UndefinedLabelError(
                name.upper(),
                location=location,
                source_line=source_line,
                similar_labels=similar,
            )
        return address

    def as_dict(self) -> dict[str, int]:
        """Return a name -> address mapping in definition order."""
        return {label.name: label.address for label in self._labels.values()}
