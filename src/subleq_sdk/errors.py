"""
SUBLEQ SDK Error Hierarchy
==========================

This module defines the exception hierarchy for the entire SUBLEQ SDK.
All exceptions inherit from SubleqError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
SubleqError (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - bad operand count or malformed numeral
│   ├── MalformedDirectiveError - .def missing or invalid fields
│   ├── DuplicateLabelError - label defined twice
│   ├── UnknownInstructionError - mnemonic not in the instruction set
│   ├── UnresolvedLabelError - reference to an undefined label
│   ├── ProgramTooLargeError - code does not fit after the load offset
│   └── AddressCollisionError - variable placed inside the code region
└── SimulatorError (emulator-related)
    ├── MissingProgramDataError - no program array in the input text
    │   └── MalformedProgramDataError - array present but unreadable
    ├── EmulatorHaltedError - stepping a halted machine
    └── StepLimitExceededError - safety step limit reached

Design Philosophy
-----------------
Every error is fatal: assembly either produces a complete 256-byte image
or raises before anything is emitted. Assembler errors capture the source
location when it is known, so messages look like:

    count.asm:7:1: error: unknown instruction 'jmp'
        jmp loop
    hint: valid instructions are add, hlt, mov, subleq
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SubleqError(Exception):
    """
    Base exception for all SUBLEQ SDK errors.

        try:
            Assembler().assemble_file("program.asm")
        except SubleqError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

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

class AssemblerError(SubleqError):
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

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.asm:4:1: error: label 'done' is not defined
                subleq a, b, dnoe
            hint: did you mean 'done'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in an instruction line.

    Examples:
        - Wrong number of operands (``mov a``)
        - Numeral that does not parse (``subleq 0x, z, 10``)
    """
    pass


class MalformedDirectiveError(AssemblerError):
    """
    Error in a ``.def`` directive.

    Raised when the variable name or address is missing, or when the
    address or initial value is not a valid decimal/hex numeral in range.
    """
    pass


class DuplicateLabelError(AssemblerError):
    """
    Label defined more than once.

    Label names are unique across the whole program. Includes the
    location of the first definition when available.
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
            f"label '{label}' already registered",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownInstructionError(AssemblerError):
    """First token of a line is not a known mnemonic or label."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.valid_mnemonics = valid_mnemonics or []

        hint = None
        if self.valid_mnemonics:
            hint = f"valid instructions are {', '.join(self.valid_mnemonics)}"

        super().__init__(
            f"unknown instruction '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnresolvedLabelError(AssemblerError):
    """
    Reference to a label that was never defined.

    Raised by the linker once all labels are known. Similar label names
    are offered as a hint to catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"label '{label}' not defined",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ProgramTooLargeError(AssemblerError):
    """Generated code does not fit in memory after the load offset."""

    def __init__(self, load_offset: int, code_length: int, memory_size: int):
        self.load_offset = load_offset
        self.code_length = code_length
        self.memory_size = memory_size

        super().__init__(
            f"program too long for {memory_size} bytes of memory",
            hint=(
                f"offset={load_offset}, program length={code_length}, "
                f"available={memory_size - load_offset}"
            ),
        )


class AddressCollisionError(AssemblerError):
    """
    A variable lives inside the code region (strict layout only).

    Writing its initial value would overwrite program bytes, and storing
    to it at run time would corrupt code.
    """

    def __init__(
        self,
        variable: str,
        address: int,
        code_start: int,
        code_end: int,
        location: Optional[SourceLocation] = None,
    ):
        self.variable = variable
        self.address = address
        self.code_start = code_start
        self.code_end = code_end

        super().__init__(
            f"variable '{variable}' at 0x{address:02x} overlaps the code "
            f"region 0x{code_start:02x}-0x{code_end - 1:02x}",
            location=location,
            hint="move the variable or the load offset",
        )


# =============================================================================
# Simulator Exceptions
# =============================================================================

class SimulatorError(SubleqError):
    """Base exception for simulator errors."""
    pass


class MissingProgramDataError(SimulatorError):
    """
    Input does not contain a program array.

    The simulator expects the assembler's array declaration:

        unsigned const PROGMEM char prg[256] = { 0x00, ... };
    """
    pass


class MalformedProgramDataError(MissingProgramDataError):
    """
    Program array is present but its contents cannot be read.

    Raised for tokens that are not numerals, byte values outside 0..255,
    or more values than fit in memory.
    """
    pass


class EmulatorHaltedError(SimulatorError):
    """Raised when stepping a machine that has already halted."""
    pass


class StepLimitExceededError(SimulatorError):
    """
    The optional step safety limit was reached before the machine halted.

    A program that never branches to a halt address runs forever on the
    real machine; the limit exists for tests and scripted runs.
    """

    def __init__(self, max_steps: int, pc: int):
        self.max_steps = max_steps
        self.pc = pc
        super().__init__(
            f"program did not halt within {max_steps} steps (pc=0x{pc & 0xFF:02x})"
        )
