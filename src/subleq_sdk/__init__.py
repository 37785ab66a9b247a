"""
SUBLEQ SDK - Assembler and Emulator for a One-Instruction Computer
==================================================================

This package provides a small toolchain for the SUBLEQ machine of the KIM
Uno: a computer whose only instruction is "subtract and branch if less
than or equal to zero", with 256 bytes of memory.

Main Components
---------------
- **assembler**: SUBLEQ assembler (slasm)
    Converts assembly source into a 256-byte memory image, printed as a
    C array for flash-resident firmware

- **emulator**: SUBLEQ emulator (slsim)
    Reads the C array back and runs it until the machine halts

Quick Start
-----------
Assemble a program:
    >>> from subleq_sdk.assembler import Assembler, render_listing
    >>> result = Assembler().assemble_file("count.asm")
    >>> open("count.h", "w").write(render_listing(result))

Run it:
    >>> from subleq_sdk.emulator import Emulator
    >>> emu = Emulator.from_file("count.h")
    >>> emu.run()

Or use the command-line tools:
    $ slasm count.asm -o count.h
    $ slsim count.h
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from subleq_sdk.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
    render_listing,
)
from subleq_sdk.config import AssemblerConfig
from subleq_sdk.emulator import (
    Emulator,
    EmulatorConfig,
    EmulatorState,
    parse_program_text,
)
from subleq_sdk.errors import (
    SubleqError,
    AssemblerError,
    AssemblySyntaxError,
    MalformedDirectiveError,
    DuplicateLabelError,
    UnknownInstructionError,
    UnresolvedLabelError,
    ProgramTooLargeError,
    AddressCollisionError,
    SimulatorError,
    MissingProgramDataError,
    MalformedProgramDataError,
    EmulatorHaltedError,
    StepLimitExceededError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "AssemblerConfig",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    "render_listing",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "EmulatorState",
    "parse_program_text",
    # Exception hierarchy
    "SubleqError",
    "AssemblerError",
    "AssemblySyntaxError",
    "MalformedDirectiveError",
    "DuplicateLabelError",
    "UnknownInstructionError",
    "UnresolvedLabelError",
    "ProgramTooLargeError",
    "AddressCollisionError",
    "SimulatorError",
    "MissingProgramDataError",
    "MalformedProgramDataError",
    "EmulatorHaltedError",
    "StepLimitExceededError",
]
