"""
SUBLEQ Linker (fixup pass)
==========================

Replaces every label reference left by the code generator with the
label's address. Runs only after code generation has finished, so forward
references resolve exactly like backward ones.
"""

import logging

from subleq_sdk.assembler.codegen import ResolvedAddress, Word
from subleq_sdk.assembler.symbols import SymbolTable
from subleq_sdk.errors import UnresolvedLabelError

logger = logging.getLogger(__name__)


def link(words: list[Word], symbols: SymbolTable) -> list[int]:
    """
    Resolve all instruction words to numbers.

    Args:
        words: Output of CodeGenerator.generate()
        symbols: Table holding every label of the program

    Returns:
        Numeric instruction words, in order

    Raises:
        UnresolvedLabelError: If a referenced label was never defined
    """
    code: list[int] = []
    fixups = 0

    for word in words:
        if isinstance(word, ResolvedAddress):
            code.append(word.value)
            continue

        label = symbols.lookup_label(word.name)
        if label is None:
            raise UnresolvedLabelError(
                word.name,
                location=word.location,
                source_line=word.source_line or None,
                similar_labels=symbols.similar_labels(word.name),
            )
        code.append(label.address)
        fixups += 1

    logger.debug(f"Linked {len(code)} words, {fixups} label fixups")
    return code
