"""
SUBLEQ SDK - Configuration
==========================

Assembler configuration. Values come from:
- Default values (defined here)
- Environment variables (``AssemblerConfig.from_env()``)
- Command-line options, which override both

Environment variables:
    PRG_OFFSET: Load offset of the first instruction byte (default 0x0a)

The emulator's configuration lives beside the emulator in
``subleq_sdk.emulator.EmulatorConfig``.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from subleq_sdk.machine import DEFAULT_LOAD_OFFSET, MEMORY_SIZE, parse_number

logger = logging.getLogger(__name__)

PRG_OFFSET_ENV = "PRG_OFFSET"


def read_env_number(name: str, minimum: int, maximum: int) -> Optional[int]:
    """
    Read a decimal or hex numeral from the environment.

    Returns None when the variable is unset. Invalid or out-of-range
    values are ignored with a warning.
    """
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None

    try:
        value = parse_number(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return None

    if not minimum <= value <= maximum:
        logger.warning(f"Ignoring {name}={raw!r}: must be {minimum}..{maximum}")
        return None

    return value


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembly run.

    Attributes:
        load_offset: Address of the first instruction byte (default: 0x0a)
        strict_layout: Reject variables that sit inside the code region with
                       AddressCollisionError instead of overlaying them
                       with a warning (default: False)
    """

    load_offset: int = DEFAULT_LOAD_OFFSET
    strict_layout: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.load_offset < MEMORY_SIZE:
            raise ValueError(
                f"load offset must be 0..{MEMORY_SIZE - 1}, got {self.load_offset}"
            )

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """Create AssemblerConfig from environment variables."""
        config = cls()

        if (offset := read_env_number(PRG_OFFSET_ENV, 0, MEMORY_SIZE - 1)) is not None:
            config.load_offset = offset

        return config
