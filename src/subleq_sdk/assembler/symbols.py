"""
SUBLEQ Symbol Tables
====================

Variables and labels live in two independent namespaces:

- **Variables** come from ``.def`` directives. They name a memory address
  and optionally the byte stored there when the image is built. The zero
  register ``z`` always exists at address 0 with value 0.
- **Labels** come from ``name:`` lines. They name the address of the next
  instruction emitted after the label.

A SymbolTable is created per assembly run and passed explicitly through
the preprocessor, code generator and linker.
"""

import difflib
import logging
from dataclasses import dataclass
from typing import Optional

from subleq_sdk.errors import DuplicateLabelError, SourceLocation
from subleq_sdk.machine import ZERO_REGISTER

logger = logging.getLogger(__name__)

ZERO_REGISTER_NAME = "z"


# =============================================================================
# Symbol Table Entries
# =============================================================================

@dataclass(frozen=True)
class Variable:
    """
    A named memory cell.

    Attributes:
        name: Variable name (lower case)
        location: Byte address of the cell
        initial_value: Value written into the image; None or a negative
                       value leaves the cell zero
        source: Where the variable was defined
    """
    name: str
    location: int
    initial_value: Optional[int] = None
    source: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Label:
    """
    A named code address.

    Attributes:
        name: Label name (lower case, without the trailing colon)
        address: Address of the instruction following the label
        source: Where the label was defined
    """
    name: str
    address: int
    source: Optional[SourceLocation] = None


# =============================================================================
# Symbol Table
# =============================================================================

class SymbolTable:
    """
    Variable and label tables for one assembly run.

    Usage:
        symbols = SymbolTable()
        symbols.define_variable("count", 0x20, 5)
        symbols.define_label("loop", 13)
        symbols.lookup_variable("count").location   # 0x20
    """

    def __init__(self) -> None:
        self.variables: dict[str, Variable] = {
            ZERO_REGISTER_NAME: Variable(ZERO_REGISTER_NAME, ZERO_REGISTER, 0),
        }
        self.labels: dict[str, Label] = {}

    # =========================================================================
    # Variables
    # =========================================================================

    def define_variable(
        self,
        name: str,
        location: int,
        initial_value: Optional[int] = None,
        source: Optional[SourceLocation] = None,
    ) -> bool:
        """
        Insert or overwrite a variable.

        The zero register is reserved and cannot be redefined.

        Returns:
            True if the definition took effect, False if it was ignored
        """
        if name == ZERO_REGISTER_NAME:
            return False

        if name in self.variables:
            logger.debug(f"Redefining variable '{name}'")

        self.variables[name] = Variable(name, location, initial_value, source)
        return True

    def lookup_variable(self, name: str) -> Optional[Variable]:
        return self.variables.get(name)

    # =========================================================================
    # Labels
    # =========================================================================

    def define_label(
        self,
        name: str,
        address: int,
        source: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Label:
        """
        Register a label.

        Raises:
            DuplicateLabelError: If the label already exists
        """
        existing = self.labels.get(name)
        if existing is not None:
            raise DuplicateLabelError(
                name,
                location=source,
                original_location=existing.source,
                source_line=source_line,
            )

        label = Label(name, address, source)
        self.labels[name] = label
        logger.debug(f"Label '{name}' at 0x{address:02x}")
        return label

    def lookup_label(self, name: str) -> Optional[Label]:
        return self.labels.get(name)

    def similar_labels(self, name: str) -> list[str]:
        """Return defined label names that look like a misspelling of name."""
        return difflib.get_close_matches(name, list(self.labels), n=3)
