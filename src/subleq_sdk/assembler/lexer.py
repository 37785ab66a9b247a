"""
SUBLEQ Assembly Lexer and Preprocessor
======================================

Turns raw source text into cleaned token lists, one per instruction line.
The source language is line oriented and small enough that a single
preprocessing pass replaces a full tokenizer:

1. Lower-case the whole text
2. Strip each line and remove comments (``;`` to end of line)
3. Record ``.def`` directives in the variable table and drop them
4. Drop empty lines
5. Split what is left on whitespace and commas

Directive Syntax
----------------
    .def <name> <address> [initial]

``address`` and ``initial`` are decimal or hex numerals (any numeral
containing ``x`` is hex). A negative initial value is recorded as given
but never written into the memory image.

Example
-------
>>> from subleq_sdk.assembler.lexer import preprocess
>>> from subleq_sdk.assembler.symbols import SymbolTable
>>> symbols = SymbolTable()
>>> lines = preprocess(".def a 0x14 5\\nADD a, B ; sum", symbols)
>>> lines[0].tokens
['add', 'a', 'b']
>>> symbols.lookup_variable("a").location
20
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from subleq_sdk.assembler.symbols import SymbolTable, ZERO_REGISTER_NAME
from subleq_sdk.errors import MalformedDirectiveError, SourceLocation
from subleq_sdk.machine import MEMORY_SIZE, parse_number

logger = logging.getLogger(__name__)

COMMENT_CHAR = ";"
DEFINE_DIRECTIVE = ".def"

_TOKEN_SEPARATORS = re.compile(r"[\s,]+")


@dataclass
class SourceLine:
    """
    One cleaned instruction line.

    Attributes:
        tokens: Lower-cased tokens, mnemonic (or label) first
        location: Position of the line in the source file
        text: The original source line, for error messages
    """
    tokens: list[str]
    location: SourceLocation
    text: str

    @property
    def head(self) -> str:
        return self.tokens[0]


def tokenize(line: str) -> list[str]:
    """Split a cleaned line on whitespace and commas."""
    return [token for token in _TOKEN_SEPARATORS.split(line) if token]


def strip_comment(line: str) -> str:
    index = line.find(COMMENT_CHAR)
    if index > -1:
        line = line[:index]
    return line.strip()


class Preprocessor:
    """
    Source cleaner and ``.def`` collector.

    Usage:
        pre = Preprocessor(source, "prog.asm")
        lines = pre.process(symbols)
        for warning in pre.warnings:
            print(warning)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self._source = source
        self._filename = filename
        self.warnings: list[str] = []

    def process(self, symbols: SymbolTable) -> list[SourceLine]:
        lines: list[SourceLine] = []

        for number, raw in enumerate(self._source.splitlines(), start=1):
            location = SourceLocation(self._filename, number, 1)
            cleaned = strip_comment(raw.strip().lower())
            if not cleaned:
                continue

            tokens = tokenize(cleaned)
            if tokens[0] == DEFINE_DIRECTIVE:
                self._define(tokens[1:], symbols, location, raw.strip())
                continue

            lines.append(SourceLine(tokens, location, raw.strip()))

        logger.debug(
            f"Preprocessed {self._filename}: {len(lines)} instruction lines, "
            f"{len(symbols.variables)} variables"
        )
        return lines

    def _define(
        self,
        fields: list[str],
        symbols: SymbolTable,
        location: SourceLocation,
        text: str,
    ) -> None:
        """Handle ``.def <name> <address> [initial]``."""
        if len(fields) < 2:
            raise MalformedDirectiveError(
                f"{DEFINE_DIRECTIVE} requires a name and an address",
                location=location,
                source_line=text,
                hint=f"{DEFINE_DIRECTIVE} <name> <address> [initial]",
            )
        if len(fields) > 3:
            raise MalformedDirectiveError(
                f"too many fields in {DEFINE_DIRECTIVE}",
                location=location,
                source_line=text,
                hint=f"{DEFINE_DIRECTIVE} <name> <address> [initial]",
            )

        name = fields[0]
        address = self._number(fields[1], "address", location, text)
        if not 0 <= address < MEMORY_SIZE:
            raise MalformedDirectiveError(
                f"address {address} of '{name}' is outside memory",
                location=location,
                source_line=text,
                hint=f"addresses range from 0 to {MEMORY_SIZE - 1}",
            )

        initial_value = None
        if len(fields) == 3:
            initial_value = self._number(fields[2], "initial value", location, text)
            if not -0x80 <= initial_value <= 0xFF:
                raise MalformedDirectiveError(
                    f"initial value {initial_value} of '{name}' does not fit in a byte",
                    location=location,
                    source_line=text,
                )

        if not symbols.define_variable(name, address, initial_value, location):
            warning = (
                f"{location}: warning: '{ZERO_REGISTER_NAME}' is the zero "
                f"register and cannot be redefined"
            )
            logger.warning(warning)
            self.warnings.append(warning)

    @staticmethod
    def _number(token: str, what: str, location: SourceLocation, text: str) -> int:
        try:
            return parse_number(token)
        except ValueError:
            raise MalformedDirectiveError(
                f"invalid {what} '{token}' in {DEFINE_DIRECTIVE}",
                location=location,
                source_line=text,
                hint="use a decimal (20) or hex (0x14) numeral",
            ) from None


def preprocess(
    source: str,
    symbols: SymbolTable,
    filename: str = "<input>",
    warnings: Optional[list[str]] = None,
) -> list[SourceLine]:
    """
    Clean source text and collect its ``.def`` directives.

    Args:
        source: Raw assembly source
        symbols: Table receiving the variable definitions
        filename: Name used in error locations
        warnings: Optional list that receives diagnostic messages

    Returns:
        Instruction lines in source order

    Raises:
        MalformedDirectiveError: If a ``.def`` line is invalid
    """
    pre = Preprocessor(source, filename)
    lines = pre.process(symbols)
    if warnings is not None:
        warnings.extend(pre.warnings)
    return lines
