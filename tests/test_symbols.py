# =============================================================================
# test_symbols.py - Symbol Table Unit Tests
# =============================================================================
# Tests for label definition and lookup.
#
# Test coverage includes:
#   - Define / resolve / lookup
#   - Duplicate detection
#   - Address validation (even, inside the ROM)
#   - Capacity limit
#   - Suggestions for misspelled labels
# =============================================================================

import pytest
from r16asm.assembler.symbols import Label, SymbolTable
from r16asm.errors import (
    AddressRangeError,
    DuplicateLabelError,
    SourceLocation,
    TooManyLabelsError,
    UndefinedLabelError,
)


def loc(line: int) -> SourceLocation:
    return SourceLocation("<test>", line, 1)


# =============================================================================
# Basic Operation Tests
# =============================================================================

class TestDefineAndResolve:
    """Test basic symbol table operations."""

    def test_define_and_resolve(self):
        table = SymbolTable()
        table.define("LOOP", 0x10)
        assert table.resolve("LOOP") == 0x10

    def test_define_returns_label(self):
        table = SymbolTable()
        label = table.define("START", 0, loc(3))
        assert label == Label("START", 0, loc(3))

    def test_case_insensitive(self):
        table = SymbolTable()
        table.define("Loop", 4)
        assert table.resolve("LOOP") == 4
        assert table.resolve("loop") == 4
        assert "lOoP" in table

    def test_lookup_missing_returns_none(self):
        assert SymbolTable().lookup("NOWHERE") is None

    def test_len_and_iteration_order(self):
        table = SymbolTable()
        table.define("B", 2)
        table.define("A", 0)
        assert len(table) == 2
        assert [label.name for label in table] == ["B", "A"]

    def test_as_dict(self):
        table = SymbolTable()
        table.define("START", 0)
        table.define("END", 0x3FE)
        assert table.as_dict() == {"START": 0, "END": 0x3FE}

    def test_several_labels_same_address(self):
        """Different labels may share an address."""
        table = SymbolTable()
        table.define("A", 8)
        table.define("B", 8)
        assert table.resolve("A") == table.resolve("B") == 8


# =============================================================================
# Duplicate Tests
# =============================================================================

class TestDuplicates:
    """Labels are write-once."""

    def test_duplicate_different_address(self):
        table = SymbolTable()
        table.define("LOOP", 0, loc(1))
        with pytest.raises(DuplicateLabelError):
            table.define("LOOP", 4, loc(5))

    def test_duplicate_same_address(self):
        """Redefinition fails even when the address matches."""
        table = SymbolTable()
        table.define("LOOP", 0, loc(1))
        with pytest.raises(DuplicateLabelError):
            table.define("LOOP", 0, loc(2))

    def test_duplicate_reports_both_locations(self):
        table = SymbolTable()
        table.define("LOOP", 0, loc(1))
        with pytest.raises(DuplicateLabelError) as exc_info:
            table.define("loop", 4, loc(9))
        error = exc_info.value
        assert error.label == "LOOP"
        assert error.line == 9
        assert error.original_location == loc(1)
        assert "first defined at <test>:1:1" in str(error)

    def test_original_kept_after_duplicate(self):
        table = SymbolTable()
        table.define("LOOP", 0)
        with pytest.raises(DuplicateLabelError):
            table.define("LOOP", 4)
        assert table.resolve("LOOP") == 0


# =============================================================================
# Address Validation Tests
# =============================================================================

class TestAddresses:
    """Label addresses are even and inside the ROM."""

    @pytest.mark.parametrize("address", [0, 2, 0x200, 0x3FE])
    def test_valid_addresses(self, address):
        table = SymbolTable()
        table.define("L", address)
        assert table.resolve("L") == address

    def test_odd_address(self):
        with pytest.raises(AddressRangeError, match="odd address"):
            SymbolTable().define("L", 3)

    @pytest.mark.parametrize("address", [0x400, 0x1000, -2])
    def test_outside_rom(self, address):
        with pytest.raises(AddressRangeError, match="outside"):
            SymbolTable().define("L", address)


# =============================================================================
# Capacity Tests
# =============================================================================

class TestCapacity:
    """The table has a hard limit."""

    def test_limit(self):
        table = SymbolTable(max_labels=2)
        table.define("A", 0)
        table.define("B", 2)
        with pytest.raises(TooManyLabelsError):
            table.define("C", 4)

    def test_default_limit(self):
        table = SymbolTable()
        for i in range(512):
            table.define(f"L{i}", (i * 2) % 1024)
        with pytest.raises(TooManyLabelsError):
            table.define("ONE_TOO_MANY", 0)


# =============================================================================
# Undefined Label Tests
# =============================================================================

class TestUndefined:
    """Resolving an unknown label is an error."""

    def test_undefined(self):
        with pytest.raises(UndefinedLabelError) as exc_info:
            SymbolTable().resolve("NOWHERE", loc(4))
        assert exc_info.value.label == "NOWHERE"
        assert exc_info.value.line == 4

    def test_suggestions(self):
        table = SymbolTable()
        table.define("LOOP", 0)
        table.define("VICTORY", 2)
        with pytest.raises(UndefinedLabelError) as exc_info:
            table.resolve("LOPP")
        assert "LOOP" in exc_info.value.similar_labels
        assert "did you mean 'LOOP'" in str(exc_info.value)
