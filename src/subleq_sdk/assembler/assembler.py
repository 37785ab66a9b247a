"""
SUBLEQ Assembler - Main Interface
=================================

This module provides the Assembler class, which runs the complete pipeline
from source text to a 256-byte memory image:

    preprocess -> generate -> link -> build image

Assembly is all or nothing. Any error aborts the run and no image is
produced.

Example Usage
-------------
>>> from subleq_sdk.assembler import Assembler
>>> asm = Assembler()
>>> result = asm.assemble('''
... .def a 0x14 5
... .def b 0x15 0
...     add a, b
...     hlt
... ''')
>>> result.code_length
12
>>> result.image[0x14]
5

Command-Line Usage
------------------
    $ slasm program.asm > program.h
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from subleq_sdk.assembler.codegen import CodeGenerator
from subleq_sdk.assembler.image import build_image
from subleq_sdk.assembler.lexer import preprocess
from subleq_sdk.assembler.linker import link
from subleq_sdk.assembler.symbols import Label, SymbolTable, Variable
from subleq_sdk.config import AssemblerConfig

logger = logging.getLogger(__name__)


@dataclass
class AssemblyResult:
    """
    Output of a successful assembly run.

    Attributes:
        image: The 256-byte memory image
        code: Linked instruction words, as generated (may include -1)
        load_offset: Address of the first code byte
        variables: Variable table, in definition order
        labels: Label table, in definition order
        warnings: Non-fatal diagnostics
    """
    image: bytearray
    code: list[int]
    load_offset: int
    variables: dict[str, Variable]
    labels: dict[str, Label]
    warnings: list[str] = field(default_factory=list)

    @property
    def code_length(self) -> int:
        return len(self.code)


class Assembler:
    """
    SUBLEQ assembler.

    Attributes:
        config: Load offset and overlap policy used for every run
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()

    def assemble(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source text into a memory image.

        Args:
            source: Assembly source
            filename: Name used in error messages

        Returns:
            AssemblyResult with the image and symbol tables

        Raises:
            AssemblerError: On any assembly error
        """
        symbols = SymbolTable()
        warnings: list[str] = []
        offset = self.config.load_offset

        lines = preprocess(source, symbols, filename, warnings)

        codegen = CodeGenerator(symbols, load_offset=offset)
        words = codegen.generate(lines)
        warnings.extend(codegen.warnings)

        code = link(words, symbols)
        image = build_image(
            code,
            symbols,
            offset,
            strict_layout=self.config.strict_layout,
            warnings=warnings,
        )

        logger.info(f"Assembled {filename}: {len(code)} bytes at 0x{offset:02x}")
        return AssemblyResult(
            image=image,
            code=code,
            load_offset=offset,
            variables=dict(symbols.variables),
            labels=dict(symbols.labels),
            warnings=warnings,
        )

    def assemble_file(self, path: str | Path) -> AssemblyResult:
        """Read a UTF-8 source file and assemble it."""
        path = Path(path)
        return self.assemble(path.read_text(encoding="utf-8"), filename=str(path))


def assemble(source: str, config: Optional[AssemblerConfig] = None) -> AssemblyResult:
    """Assemble source text with a one-off Assembler."""
    return Assembler(config).assemble(source)


def assemble_file(path: str | Path, config: Optional[AssemblerConfig] = None) -> AssemblyResult:
    """Assemble a source file with a one-off Assembler."""
    return Assembler(config).assemble_file(path)
