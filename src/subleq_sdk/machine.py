"""
SUBLEQ Machine Definitions
==========================

Architecture constants and numeral helpers shared by the assembler and the
emulator. Both tools agree on this contract and nothing else:

- 256 bytes of addressable memory
- address 0 is the zero register ``z`` and is conventionally always 0
- a branch to address -1 halts the machine; once serialised into a byte
  the halt address becomes 0xFF (the halt vector)
- programs load at byte 10, which is also the emulator's entry point

Instruction Set
---------------
The only native instruction is ``subleq a, b, c``::

    mem[b] = mem[b] - mem[a]
    if mem[b] <= 0: goto c

Everything else is a pseudo-instruction built from it:

| Mnemonic | Operands | Expansion           | Bytes |
|----------|----------|---------------------|-------|
| subleq   | a, b, c  | itself              | 3     |
| mov      | a, b     | 4 x subleq          | 12    |
| add      | a, b     | 3 x subleq          | 9     |
| hlt      | (none)   | subleq 0, 0, -1     | 3     |

Numerals
--------
Any token containing the letter ``x`` is hexadecimal (``0x0a``), anything
else is decimal. Operands may carry a leading minus sign.
"""

import re


# =============================================================================
# Memory Layout
# =============================================================================

MEMORY_SIZE = 256
ZERO_REGISTER = 0x00
DEFAULT_LOAD_OFFSET = 0x0A
DEFAULT_ENTRY_POINT = 0x0A

HALT_ADDRESS = -1
HALT_VECTOR = HALT_ADDRESS & 0xFF

# The KIM Uno shows a 3-digit readout built from these bytes, left to right
DISPLAY_ADDRESSES = (0x09, 0x08, 0x07)

TRIPLE_SIZE = 3


# =============================================================================
# Instruction Set
# =============================================================================

# mnemonic -> number of source operands
OPERAND_COUNTS = {
    "subleq": 3,
    "mov": 2,
    "add": 2,
    "hlt": 0,
}

MNEMONICS = frozenset(OPERAND_COUNTS)


# =============================================================================
# Numerals
# =============================================================================

# Starts with a digit; whether it parses is up to parse_number()
_NUMERAL_PATTERN = re.compile(r"^-?[0-9][0-9a-fx]*$", re.IGNORECASE)


def is_numeral(token: str) -> bool:
    """True when the token is written as a number (optionally negated)."""
    return bool(_NUMERAL_PATTERN.match(token))


def parse_number(token: str) -> int:
    """
    Parse a decimal or hexadecimal numeral.

    Args:
        token: Numeral text, e.g. "10", "0x0a", "-1"

    Returns:
        The integer value

    Raises:
        ValueError: If the token is not a valid numeral
    """
    token = token.strip()
    if "x" in token.lower():
        return int(token, 16)
    return int(token, 10)


def to_byte(value: int) -> int:
    """Wrap an integer into an unsigned byte (two's complement for negatives)."""
    return value & 0xFF


def to_signed(value: int) -> int:
    """Interpret a byte as a signed value in -128..127."""
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def to_hex(value: int, prefix: bool = True) -> str:
    """
    Format a value as a two-digit lowercase hex byte.

    >>> to_hex(10)
    '0x0a'
    >>> to_hex(-1, prefix=False)
    'ff'
    """
    digits = f"{to_byte(value):02x}"
    return f"0x{digits}" if prefix else digits
