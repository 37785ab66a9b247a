"""
SUBLEQ Emulator
===============

Runs assembled memory images on the one-instruction machine.

Components:
    - Emulator: fetch/execute loop with step tracing and a step safety limit
    - EmulatorConfig: entry point and step limit
    - parse_program_text / load_program_file: read ``slasm`` output back

Quick Start:
    >>> from subleq_sdk.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator.from_file("program.h", EmulatorConfig(max_steps=100_000))
    >>> emu.run()
    >>> print("\\n".join(emu.hexdump()))
"""

from .emulator import Emulator, EmulatorConfig, EmulatorState, StepRecord
from .program import load_program_file, parse_program_text

__all__ = [
    "Emulator",
    "EmulatorConfig",
    "EmulatorState",
    "StepRecord",
    "parse_program_text",
    "load_program_file",
]
