"""
SUBLEQ Emulator - Fetch/Execute Loop
====================================

This module provides the `Emulator` class, which runs a 256-byte memory
image on the one-instruction machine.

One step:

    a, b, c = mem[pc], mem[pc + 1], mem[pc + 2]
    pc = pc + 3
    mem[b] = mem[b] - mem[a]
    if mem[b] <= 0:
        pc = c

The machine halts as soon as ``pc <= 0``. Programs halt by branching to
-1, which is stored in memory as the byte 0xff; a branch to 0xff is
therefore taken as a branch to -1.

Memory cells are bytes. Subtraction wraps modulo 256 and the ``<= 0``
test reads the result as a signed byte, so 0x80..0xff count as negative.
Fetches past the end of memory read as 0.

Example usage:
    >>> from subleq_sdk.emulator import Emulator
    >>> emu = Emulator.from_file("program.h")
    >>> emu.run(max_steps=10_000)
    42
    >>> print(emu.display_output())
    0001 02
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Callable, List, Optional

from subleq_sdk.config import read_env_number
from subleq_sdk.emulator.program import load_program_file, parse_program_text
from subleq_sdk.errors import EmulatorHaltedError, StepLimitExceededError
from subleq_sdk.machine import (
    DEFAULT_ENTRY_POINT,
    DISPLAY_ADDRESSES,
    HALT_ADDRESS,
    HALT_VECTOR,
    MEMORY_SIZE,
    TRIPLE_SIZE,
    to_byte,
    to_hex,
    to_signed,
)

logger = logging.getLogger(__name__)

ENTRY_POINT_ENV = "SUBLEQ_ENTRY_POINT"
MAX_STEPS_ENV = "SUBLEQ_MAX_STEPS"


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        entry_point: Initial program counter (default: 0x0a)
        max_steps: Safety limit for run(); None runs until halt, which never
                   happens for a program that loops forever
        trace_length: Number of recent pc values kept in pc_trace; None
                      keeps every value

    Example:
        >>> config = EmulatorConfig(max_steps=1_000)
    """
    entry_point: int = DEFAULT_ENTRY_POINT
    max_steps: Optional[int] = None
    trace_length: Optional[int] = 4096

    def __post_init__(self) -> None:
        if not 0 <= self.entry_point < MEMORY_SIZE:
            raise ValueError(
                f"entry point must be 0..{MEMORY_SIZE - 1}, got {self.entry_point}"
            )
        if self.max_steps is not None and self.max_steps < 1:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")
        if self.trace_length is not None and self.trace_length < 1:
            raise ValueError(f"trace_length must be positive, got {self.trace_length}")

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Environment variables (all optional):
            SUBLEQ_ENTRY_POINT: Initial program counter
            SUBLEQ_MAX_STEPS: Step safety limit
        """
        kwargs = {}

        if (entry := read_env_number(ENTRY_POINT_ENV, 0, MEMORY_SIZE - 1)) is not None:
            kwargs["entry_point"] = entry

        if (steps := read_env_number(MAX_STEPS_ENV, 1, 2**63)) is not None:
            kwargs["max_steps"] = steps

        return cls(**kwargs)


class EmulatorState(Enum):
    """Execution state of the machine."""
    RUNNING = auto()
    HALTED = auto()


@dataclass(frozen=True)
class StepRecord:
    """
    What one fetch/execute step did.

    Memory values (mem_*) are signed, as the machine compares them.

    Attributes:
        step: Step number, starting at 1
        pc: Address the triple was fetched from
        a, b, c: The fetched operands
        mem_a: mem[a]
        mem_b_before: mem[b] before the subtraction
        mem_b_after: mem[b] after the subtraction
        mem_c: mem[c] before the subtraction
        branched: True if mem[b] <= 0 and the branch was taken
        next_pc: Program counter after the step
    """
    step: int
    pc: int
    a: int
    b: int
    c: int
    mem_a: int
    mem_b_before: int
    mem_b_after: int
    mem_c: int
    branched: bool
    next_pc: int

    def format(self) -> List[str]:
        """Trace lines for this step."""
        lines = [
            f"--- ({self.step})",
            f"DEBUG | a = {self.a}, b = {self.b}, c = {self.c}",
            f"DEBUG | mem[a] = {self.mem_a}, mem[b] = {self.mem_b_before}, "
            f"mem[c] = {self.mem_c}",
            f"DEBUG | mem[b] = {self.mem_b_after}",
        ]
        if self.branched:
            lines.append(f"DEBUG | mem[b] <= 0 --> goto {self.next_pc}")
        return lines


class Emulator:
    """
    SUBLEQ machine emulator.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        pc: Current program counter
        state: RUNNING or HALTED
        steps: Number of steps executed since the last reset
        pc_trace: Recent program counter values, starting with the entry point
                  (at most config.trace_length of them)

    Example:
        >>> emu = Emulator(image)
        >>> emu.run()
        2
        >>> emu.pc_trace
        [10, 13, -1]
    """

    def __init__(self, memory: bytes | bytearray, config: Optional[EmulatorConfig] = None):
        """
        Initialize the emulator with a memory image.

        Args:
            memory: Up to MEMORY_SIZE bytes; shorter images are zero-extended
            config: EmulatorConfig; defaults to entry point 0x0a, no step limit

        Raises:
            ValueError: If the image is larger than memory
        """
        if len(memory) > MEMORY_SIZE:
            raise ValueError(f"memory image is {len(memory)} bytes, limit is {MEMORY_SIZE}")

        self.config = config or EmulatorConfig()
        self._initial = bytes(memory).ljust(MEMORY_SIZE, b"\x00")
        self.reset()

    @classmethod
    def from_text(cls, text: str, config: Optional[EmulatorConfig] = None) -> "Emulator":
        """Create an emulator from program array text."""
        return cls(parse_program_text(text), config)

    @classmethod
    def from_file(cls, path: str | Path, config: Optional[EmulatorConfig] = None) -> "Emulator":
        """Create an emulator from a program array file."""
        return cls(load_program_file(path), config)

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """Restore the loaded image and move pc back to the entry point."""
        self._memory = bytearray(self._initial)
        self.pc = self.config.entry_point
        self.steps = 0
        self._trace = deque([self.pc], maxlen=self.config.trace_length)
        self.state = EmulatorState.RUNNING if self.pc > 0 else EmulatorState.HALTED

    def step(self) -> StepRecord:
        """
        Execute one subleq instruction.

        Returns:
            StepRecord describing the step

        Raises:
            EmulatorHaltedError: If the machine has already halted
        """
        if self.state is EmulatorState.HALTED:
            raise EmulatorHaltedError(f"machine halted at pc={self.pc}")

        pc = self.pc
        a = self.read_byte(pc)
        b = self.read_byte(pc + 1)
        c = self.read_byte(pc + 2)
        next_pc = pc + TRIPLE_SIZE

        mem_a = self.read_byte(a)
        before = self.read_byte(b)
        mem_c = self.read_byte(c)
        after = to_byte(before - mem_a)
        self.write_byte(b, after)

        branched = to_signed(after) <= 0
        if branched:
            next_pc = HALT_ADDRESS if c == HALT_VECTOR else c

        self.pc = next_pc
        self.steps += 1
        self._trace.append(next_pc)
        if next_pc <= 0:
            self.state = EmulatorState.HALTED

        return StepRecord(
            step=self.steps,
            pc=pc,
            a=a,
            b=b,
            c=c,
            mem_a=to_signed(mem_a),
            mem_b_before=to_signed(before),
            mem_b_after=to_signed(after),
            mem_c=to_signed(mem_c),
            branched=branched,
            next_pc=next_pc,
        )

    def run(
        self,
        max_steps: Optional[int] = None,
        on_step: Optional[Callable[[StepRecord], None]] = None,
    ) -> int:
        """
        Run until the machine halts.

        Args:
            max_steps: Step safety limit (default: config.max_steps)
            on_step: Called with the StepRecord of every step

        Returns:
            Number of steps executed by this call

        Raises:
            StepLimitExceededError: If the limit is reached before halting
        """
        limit = max_steps if max_steps is not None else self.config.max_steps
        executed = 0

        while self.state is EmulatorState.RUNNING:
            if limit is not None and executed >= limit:
                raise StepLimitExceededError(limit, self.pc)
            record = self.step()
            executed += 1
            if on_step is not None:
                on_step(record)

        logger.debug(f"Halted after {executed} steps at pc={self.pc}")
        return executed

    @property
    def is_halted(self) -> bool:
        return self.state is EmulatorState.HALTED

    @property
    def pc_trace(self) -> List[int]:
        return list(self._trace)

    # =========================================================================
    # Memory Access
    # =========================================================================

    @property
    def memory(self) -> bytes:
        """Snapshot of the current memory."""
        return bytes(self._memory)

    def read_byte(self, address: int) -> int:
        """Read a byte; addresses outside memory read as 0."""
        if 0 <= address < MEMORY_SIZE:
            return self._memory[address]
        return 0

    def write_byte(self, address: int, value: int) -> None:
        """Write a byte (value is wrapped to 0..255)."""
        if not 0 <= address < MEMORY_SIZE:
            raise IndexError(f"address {address} outside memory")
        self._memory[address] = to_byte(value)

    # =========================================================================
    # Output
    # =========================================================================

    def hexdump(self) -> List[str]:
        """Memory as rows of 16 bytes with an address column."""
        lines = ["      " + " ".join(to_hex(col, prefix=False) for col in range(16))]
        for row in range(0, MEMORY_SIZE, 16):
            values = " ".join(to_hex(b, prefix=False) for b in self._memory[row:row + 16])
            lines.append(f"{row:04x}  {values}")
        return lines

    def display_output(self) -> str:
        """
        The KIM Uno 3-digit display readout.

        Bytes 0x09 and 0x08 form the left group, 0x07 the right one.
        """
        high, middle, low = (to_hex(self.read_byte(a), prefix=False) for a in DISPLAY_ADDRESSES)
        return f"{high}{middle} {low}"

    def __repr__(self) -> str:
        return f"Emulator(pc={self.pc}, state={self.state.name}, steps={self.steps})"
