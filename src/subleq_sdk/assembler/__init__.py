"""
SUBLEQ Assembler
================

Two-pass assembler for the SUBLEQ one-instruction computer. It turns
symbolic source into the 256-byte memory image the emulator (and the KIM
Uno firmware) runs.

Main Components
---------------
- **Assembler**: Runs the whole pipeline and returns an AssemblyResult
- **Preprocessor**: Cleans source lines and collects ``.def`` variables
- **SymbolTable**: Variable and label tables for one run
- **CodeGenerator**: Expands pseudo-instructions into subleq triples
- **link**: Resolves label references once all labels are known
- **build_image**: Places code and variable values in memory

Source Language
---------------
    .def count 0x20 3     ; variable at 0x20, initial value 3
    .def one   0x21 1
    loop:
        subleq one, count, done
        subleq z, z, loop
    done:
        hlt

Instructions: ``subleq a, b, c``, ``mov a, b``, ``add a, b`` and ``hlt``.
"""

from subleq_sdk.assembler.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
)
from subleq_sdk.assembler.codegen import (
    CodeGenerator,
    ResolvedAddress,
    UnresolvedSymbol,
    Word,
)
from subleq_sdk.assembler.image import build_image
from subleq_sdk.assembler.lexer import Preprocessor, SourceLine, preprocess
from subleq_sdk.assembler.linker import link
from subleq_sdk.assembler.output import (
    render_listing,
    render_program_array,
    render_report,
)
from subleq_sdk.assembler.symbols import Label, SymbolTable, Variable

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Preprocessing
    "Preprocessor",
    "SourceLine",
    "preprocess",
    # Symbols
    "SymbolTable",
    "Variable",
    "Label",
    # Code generation and linking
    "CodeGenerator",
    "ResolvedAddress",
    "UnresolvedSymbol",
    "Word",
    "link",
    # Image and output
    "build_image",
    "render_report",
    "render_program_array",
    "render_listing",
]
