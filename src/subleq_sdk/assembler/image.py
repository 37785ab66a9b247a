"""
SUBLEQ Memory Image Builder
===========================

Lays out the final 256-byte memory image:

    0x00            z (zero register)
    ...             variables, anywhere outside the code region
    load_offset     first instruction byte
    ...             code
    0xFF            last byte

Instruction words are wrapped into bytes, so ``-1`` (the halt address)
becomes ``0xff``. Variable initial values are written after the code, so a
variable placed inside the code region overwrites program bytes. Programs
may rely on that overlay; it is reported as a warning, or rejected when
``strict_layout`` is set.

Negative initial values are skipped. The zero register is never written:
its cell is already 0, and with a load offset of 0 it is the first code
byte.
"""

import logging

from subleq_sdk.assembler.symbols import ZERO_REGISTER_NAME, SymbolTable
from subleq_sdk.errors import AddressCollisionError, ProgramTooLargeError
from subleq_sdk.machine import MEMORY_SIZE, to_byte

logger = logging.getLogger(__name__)


def build_image(
    code: list[int],
    symbols: SymbolTable,
    load_offset: int,
    strict_layout: bool = False,
    warnings: list[str] | None = None,
) -> bytearray:
    """
    Build the memory image from linked code and the variable table.

    Args:
        code: Linked instruction words
        symbols: Symbol table holding the variables
        load_offset: Address of the first code byte
        strict_layout: Fail instead of overlaying variables onto code
        warnings: Optional list that receives overlap diagnostics

    Returns:
        A bytearray of exactly MEMORY_SIZE bytes

    Raises:
        ProgramTooLargeError: If the code does not fit after load_offset
        AddressCollisionError: If strict_layout is set and a variable sits
                               inside the code region
    """
    if len(code) > MEMORY_SIZE - load_offset:
        raise ProgramTooLargeError(load_offset, len(code), MEMORY_SIZE)

    memory = bytearray(MEMORY_SIZE)
    memory[load_offset:load_offset + len(code)] = bytes(to_byte(w) for w in code)

    code_end = load_offset + len(code)
    for variable in symbols.variables.values():
        if variable.name == ZERO_REGISTER_NAME:
            continue

        if load_offset <= variable.location < code_end:
            if strict_layout:
                raise AddressCollisionError(
                    variable.name,
                    variable.location,
                    load_offset,
                    code_end,
                    location=variable.source,
                )
            warning = (
                f"warning: variable '{variable.name}' at 0x{variable.location:02x} "
                f"overlaps code"
            )
            logger.warning(warning)
            if warnings is not None:
                warnings.append(warning)

        if variable.initial_value is not None and variable.initial_value >= 0:
            memory[variable.location] = variable.initial_value

    logger.debug(
        f"Built image: {len(code)} code bytes at 0x{load_offset:02x}, "
        f"{len(symbols.variables)} variables"
    )
    return memory
