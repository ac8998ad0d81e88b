"""
R16 Assembler - Configuration
=============================

Runtime settings for the assembler. Configuration can come from:
- Default values (defined here)
- Environment variables (see AssemblerConfig.from_env)

The ROM size and the opcode table are properties of the target CPU and
are not configurable.
"""

from dataclasses import dataclass
import logging
import os


# Environment variable names
ENV_MAX_LABELS = "R16ASM_MAX_LABELS"
ENV_LOG_LEVEL = "R16ASM_LOG_LEVEL"
ENV_WARN_OVERLAP = "R16ASM_WARN_OVERLAP"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembler run.

    Attributes:
        max_labels: Capacity of the symbol table (default: 512)
        log_level: Logging level name used by the CLI (default: "WARNING")
        warn_on_overlap: Log a warning when two instructions are placed
                         at the same ROM address (default: True)
    """

    max_labels: int = 512
    log_level: str = "WARNING"
    warn_on_overlap: bool = True

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            R16ASM_MAX_LABELS: Symbol table capacity (positive integer)
            R16ASM_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
            R16ASM_WARN_OVERLAP: 1/0, true/false, yes/no, on/off

        Raises:
            ValueError: If a variable is set to an unusable value
        """
        config = cls()

        max_labels = os.environ.get(ENV_MAX_LABELS)
        if max_labels is not None:
            config.max_labels = int(max_labels)
            if config.max_labels <= 0:
                raise ValueError(f"{ENV_MAX_LABELS} must be positive, got {max_labels}")

        log_level = os.environ.get(ENV_LOG_LEVEL)
        if log_level is not None:
            config.log_level = log_level.strip().upper()

        warn_overlap = os.environ.get(ENV_WARN_OVERLAP)
        if warn_overlap is not None:
            flag = warn_overlap.strip().lower()
            if flag in _TRUE_VALUES:
                config.warn_on_overlap = True
            elif flag in _FALSE_VALUES:
                config.warn_on_overlap = False
            else:
                raise ValueError(f"{ENV_WARN_OVERLAP} must be a boolean, got {warn_overlap!r}")

        # Unknown level names fail here, before any source is read
        config.logging_level()
        return config

    def logging_level(self) -> int:
        """
        Return the numeric logging level for log_level.

        Raises:
            ValueError: If log_level is not a standard level name
        """
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"unknown log level {self.log_level!r}")
        return level
