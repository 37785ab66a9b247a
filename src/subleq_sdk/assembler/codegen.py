"""
SUBLEQ Code Generator
=====================

Walks the preprocessed instruction lines, expands pseudo-instructions into
``subleq`` triples and registers labels at the current memory pointer.

Expansions
----------
Every expansion falls through: the branch operand of each generated triple
is the address right after it, so the branch is taken or not with the same
result. ``Z`` is the zero register.

    mov a, b      subleq b, b     ; b = 0
                  subleq a, Z     ; Z = -a
                  subleq Z, b     ; b = a
                  subleq Z, Z     ; Z = 0

    add a, b      subleq a, Z     ; Z = -a
                  subleq Z, b     ; b = b + a
                  subleq Z, Z     ; Z = 0

    hlt           subleq 0, 0, -1 ; always branches to the halt address

Operand Resolution
------------------
1. A numeral (digits and 'x', optional leading '-') is a literal address
2. A known variable resolves to its address
3. Anything else is a label reference, left as an UnresolvedSymbol until
   the linker runs (labels may be used before they are defined)
"""

import logging
import re
from dataclasses import dataclass
from typing import Union

from subleq_sdk.assembler.lexer import SourceLine
from subleq_sdk.assembler.symbols import SymbolTable
from subleq_sdk.errors import (
    AssemblySyntaxError,
    SourceLocation,
    UnknownInstructionError,
)
from subleq_sdk.machine import (
    DEFAULT_LOAD_OFFSET,
    HALT_ADDRESS,
    MNEMONICS,
    OPERAND_COUNTS,
    TRIPLE_SIZE,
    ZERO_REGISTER,
    is_numeral,
    parse_number,
)

logger = logging.getLogger(__name__)

_LABEL_PATTERN = re.compile(r"^([a-z_][a-z0-9_]*):$")


# =============================================================================
# Instruction Words
# =============================================================================

@dataclass(frozen=True)
class ResolvedAddress:
    """An instruction word whose numeric value is known."""
    value: int


@dataclass(frozen=True)
class UnresolvedSymbol:
    """
    A label reference waiting for the linker.

    Attributes:
        name: Label name as written in the source
        location: Line that made the reference
        source_line: Text of that line, for error messages
    """
    name: str
    location: SourceLocation
    source_line: str = ""


Word = Union[ResolvedAddress, UnresolvedSymbol]

_ZERO = ResolvedAddress(ZERO_REGISTER)


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates subleq instruction words from preprocessed lines.

    Usage:
        codegen = CodeGenerator(symbols, load_offset=10)
        words = codegen.generate(lines)
        codegen.warnings  # zero-register diagnostics
    """

    def __init__(self, symbols: SymbolTable, load_offset: int = DEFAULT_LOAD_OFFSET):
        self._symbols = symbols
        self._load_offset = load_offset
        self._pc = load_offset
        self._words: list[Word] = []
        self.warnings: list[str] = []

    @property
    def pc(self) -> int:
        """Address the next emitted byte will occupy."""
        return self._pc

    def generate(self, lines: list[SourceLine]) -> list[Word]:
        """
        Generate instruction words for all lines.

        Raises:
            DuplicateLabelError: If a label is defined twice
            UnknownInstructionError: If a mnemonic is not recognized
            AssemblySyntaxError: If operands are missing or malformed
        """
        self._pc = self._load_offset
        self._words = []
        self.warnings = []

        for line in lines:
            self._generate_line(line)

        logger.debug(
            f"Generated {len(self._words)} bytes at 0x{self._load_offset:02x}, "
            f"{len(self._symbols.labels)} labels"
        )
        return list(self._words)

    # =========================================================================
    # Line Dispatch
    # =========================================================================

    def _generate_line(self, line: SourceLine) -> None:
        tokens = line.tokens

        if tokens[0].endswith(":"):
            self._define_label(tokens[0], line)
            tokens = tokens[1:]
            if not tokens:
                return

        mnemonic, operands = tokens[0], tokens[1:]
        if mnemonic not in MNEMONICS:
            raise UnknownInstructionError(
                mnemonic,
                location=line.location,
                source_line=line.text,
                valid_mnemonics=sorted(MNEMONICS),
            )

        expected = OPERAND_COUNTS[mnemonic]
        if len(operands) != expected:
            raise AssemblySyntaxError(
                f"'{mnemonic}' expects {expected} operands, got {len(operands)}",
                location=line.location,
                source_line=line.text,
            )

        resolved = [self.resolve_operand(op, line) for op in operands]

        if mnemonic == "subleq":
            self._emit_subleq(*resolved, line=line)
        elif mnemonic == "mov":
            self._emit_mov(*resolved, line=line)
        elif mnemonic == "add":
            self._emit_add(*resolved, line=line)
        else:
            self._emit_hlt()

    def _define_label(self, token: str, line: SourceLine) -> None:
        match = _LABEL_PATTERN.match(token)
        if not match:
            raise AssemblySyntaxError(
                f"invalid label '{token}'",
                location=line.location,
                source_line=line.text,
                hint="labels are letters, digits and '_', not starting with a digit",
            )
        self._symbols.define_label(match.group(1), self._pc, line.location, line.text)

    def resolve_operand(self, token: str, line: SourceLine) -> Word:
        """Resolve a token to an address, or defer it as a label reference."""
        if is_numeral(token):
            try:
                return ResolvedAddress(parse_number(token))
            except ValueError:
                raise AssemblySyntaxError(
                    f"invalid numeral '{token}'",
                    location=line.location,
                    source_line=line.text,
                ) from None

        variable = self._symbols.lookup_variable(token)
        if variable is not None:
            return ResolvedAddress(variable.location)

        return UnresolvedSymbol(token, line.location, line.text)

    # =========================================================================
    # Emitters
    # =========================================================================

    def _emit(self, word: Word) -> None:
        self._words.append(word)
        self._pc += 1

    def _emit_triple(self, a: Word, b: Word, c: Word) -> None:
        self._emit(a)
        self._emit(b)
        self._emit(c)

    def _emit_fallthrough(self, a: Word, b: Word) -> None:
        """Emit ``subleq a, b`` whose branch target is the next triple."""
        self._emit_triple(a, b, ResolvedAddress(self._pc + TRIPLE_SIZE))

    def _emit_subleq(self, a: Word, b: Word, c: Word, line: SourceLine) -> None:
        if b == _ZERO and a != _ZERO:
            self._warn_zero_write("subleq", line)
        self._emit_triple(a, b, c)

    def _emit_mov(self, a: Word, b: Word, line: SourceLine) -> None:
        if b == _ZERO:
            self._warn_zero_write("mov", line)
        self._emit_fallthrough(b, b)
        self._emit_fallthrough(a, _ZERO)
        self._emit_fallthrough(_ZERO, b)
        self._emit_fallthrough(_ZERO, _ZERO)

    def _emit_add(self, a: Word, b: Word, line: SourceLine) -> None:
        if b == _ZERO:
            self._warn_zero_write("add", line)
        self._emit_fallthrough(a, _ZERO)
        self._emit_fallthrough(_ZERO, b)
        self._emit_fallthrough(_ZERO, _ZERO)

    def _emit_hlt(self) -> None:
        self._emit_triple(_ZERO, _ZERO, ResolvedAddress(HALT_ADDRESS))

    def _warn_zero_write(self, mnemonic: str, line: SourceLine) -> None:
        warning = (
            f"{line.location}: warning: '{mnemonic}' writes the zero register "
            f"at address {ZERO_REGISTER}"
        )
        logger.warning(warning)
        self.warnings.append(warning)
