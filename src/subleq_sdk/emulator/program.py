"""
Program Image Parser
====================

Reads the array declaration written by ``slasm`` back into memory:

    unsigned const PROGMEM char prg[256] = {
    /*        0x00  0x01 ... */
    /*0x00*/  0x00, 0x00, ...
    };

Anything outside the braces (the report comment, other C code) is ignored.
Inside, ``/* ... */`` comments are stripped, the body is split on commas
and every value is read as a decimal or hex numeral. An array shorter than
memory is zero-extended.
"""

import logging
import re
from pathlib import Path

from subleq_sdk.errors import MalformedProgramDataError, MissingProgramDataError
from subleq_sdk.machine import MEMORY_SIZE, parse_number

logger = logging.getLogger(__name__)

_ARRAY_PATTERN = re.compile(r"PROGMEM[^{]*\{(.*?)\}", re.DOTALL)
_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)


def parse_program_text(text: str) -> bytearray:
    """
    Extract the memory image from program array text.

    Args:
        text: Contents of an ``slasm`` output file

    Returns:
        A bytearray of exactly MEMORY_SIZE bytes

    Raises:
        MissingProgramDataError: If no program array is present
        MalformedProgramDataError: If the array holds invalid values
    """
    match = _ARRAY_PATTERN.search(text)
    if match is None:
        raise MissingProgramDataError("file not containing program code")

    body = _COMMENT_PATTERN.sub("", match.group(1))
    tokens = [token.strip() for token in body.split(",")]
    tokens = [token for token in tokens if token]

    if not tokens:
        raise MissingProgramDataError("program array is empty")
    if len(tokens) > MEMORY_SIZE:
        raise MalformedProgramDataError(
            f"program array has {len(tokens)} values, memory holds {MEMORY_SIZE}"
        )

    memory = bytearray(MEMORY_SIZE)
    for address, token in enumerate(tokens):
        try:
            value = parse_number(token)
        except ValueError:
            raise MalformedProgramDataError(
                f"invalid value {token!r} at address 0x{address:02x}"
            ) from None
        if not 0 <= value <= 0xFF:
            raise MalformedProgramDataError(
                f"value {token} at address 0x{address:02x} is not a byte"
            )
        memory[address] = value

    if len(tokens) < MEMORY_SIZE:
        logger.debug(f"Program array has {len(tokens)} values, zero-extending")

    return memory


def load_program_file(path: str | Path) -> bytearray:
    """Read a program array file and parse it."""
    return parse_program_text(Path(path).read_text(encoding="utf-8"))
