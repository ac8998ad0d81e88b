"""
R16 Toolchain Command-Line Interface
====================================

This package provides the command-line tools for the R16 toolchain:

- **r16asm**: R16 assembler

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["r16asm"]
