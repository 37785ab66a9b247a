# =============================================================================
# test_codegen.py - Code Generator, Symbol Table and Linker Tests
# =============================================================================
# Tests for pseudo-instruction expansion, label registration, operand
# resolution and the fixup pass.
# =============================================================================

import pytest

from subleq_sdk.assembler.codegen import (
    CodeGenerator,
    ResolvedAddress,
    UnresolvedSymbol,
)
from subleq_sdk.assembler.lexer import preprocess
from subleq_sdk.assembler.linker import link
from subleq_sdk.assembler.symbols import SymbolTable
from subleq_sdk.errors import (
    AssemblySyntaxError,
    DuplicateLabelError,
    SourceLocation,
    UnknownInstructionError,
    UnresolvedLabelError,
)


def generate(source, load_offset=10):
    """Preprocess and generate, returning (words, symbols, codegen)."""
    symbols = SymbolTable()
    lines = preprocess(source, symbols)
    codegen = CodeGenerator(symbols, load_offset=load_offset)
    words = codegen.generate(lines)
    return words, symbols, codegen


def values(words):
    return [w.value for w in words]


# =============================================================================
# Expansion Tests
# =============================================================================

class TestExpansion:
    """Test primitive and pseudo-instruction encoding."""

    def test_subleq_verbatim(self):
        words, _, _ = generate("subleq 1, 2, 3")
        assert values(words) == [1, 2, 3]

    def test_hlt(self):
        words, _, _ = generate("hlt")
        assert values(words) == [0, 0, -1]

    def test_mov_expansion(self):
        source = ".def a 0x14\n.def b 0x15\nmov a, b"
        words, _, _ = generate(source)
        assert values(words) == [
            0x15, 0x15, 13,
            0x14, 0x00, 16,
            0x00, 0x15, 19,
            0x00, 0x00, 22,
        ]

    def test_add_expansion(self):
        source = ".def a 0x14\n.def b 0x15\nadd a, b"
        words, _, _ = generate(source)
        assert values(words) == [
            0x14, 0x00, 13,
            0x00, 0x15, 16,
            0x00, 0x00, 19,
        ]

    def test_fallthrough_targets_follow_load_offset(self):
        words, _, _ = generate("add 1, 2", load_offset=0x40)
        assert values(words)[2::3] == [0x43, 0x46, 0x49]

    def test_byte_count_for_subleq_and_hlt(self):
        source = "subleq z, z, 13\nhlt\nsubleq 1, 2, 3\nhlt\nhlt"
        words, _, _ = generate(source)
        assert len(words) == 3 * 2 + 3 * 3

    def test_mov_and_add_sizes(self):
        words, _, _ = generate("mov 1, 2\nmov 3, 4\nadd 1, 2")
        assert len(words) == 12 * 2 + 9

    def test_pc_advances_per_byte(self):
        _, _, codegen = generate("mov 1, 2\nhlt")
        assert codegen.pc == 10 + 12 + 3


# =============================================================================
# Operand Resolution Tests
# =============================================================================

class TestOperandResolution:
    """Test numerals, variables and deferred label references."""

    def test_hex_and_decimal_literals(self):
        words, _, _ = generate("subleq 0x14, 21, 0x1f")
        assert values(words) == [20, 21, 31]

    def test_hex_literal_with_letters(self):
        words, _, _ = generate("subleq 0xab, 0xFF, 0x1f")
        assert values(words) == [0xAB, 0xFF, 0x1F]

    def test_hex_operand_is_not_a_label(self):
        words, symbols, _ = generate("subleq z, z, 0x1f")
        assert link(words, symbols) == [0, 0, 0x1F]

    def test_negative_literal(self):
        words, _, _ = generate("subleq z, z, -1")
        assert values(words) == [0, 0, -1]

    def test_variable_resolves_to_location(self):
        words, _, _ = generate(".def count 0x20 3\nsubleq count, count, 0")
        assert values(words) == [0x20, 0x20, 0]

    def test_unknown_name_is_deferred(self):
        words, _, _ = generate("subleq z, z, later")
        assert isinstance(words[2], UnresolvedSymbol)
        assert words[2].name == "later"
        assert words[2].location.line == 1

    def test_malformed_numeral(self):
        with pytest.raises(AssemblySyntaxError):
            generate("subleq 1x2, z, 10")


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label registration."""

    def test_label_at_current_pointer(self):
        _, symbols, _ = generate("start:\nhlt\nend:\nhlt")
        assert symbols.lookup_label("start").address == 10
        assert symbols.lookup_label("end").address == 13

    def test_label_emits_nothing(self):
        words, _, _ = generate("here:")
        assert words == []

    def test_label_followed_by_instruction(self):
        words, symbols, _ = generate("hlt\nloop: subleq z, z, loop")
        assert symbols.lookup_label("loop").address == 13
        assert isinstance(words[5], UnresolvedSymbol)

    def test_duplicate_label(self):
        with pytest.raises(DuplicateLabelError) as exc_info:
            generate("again:\nhlt\nagain:\nhlt")
        assert exc_info.value.label == "again"
        assert exc_info.value.original_location.line == 1

    def test_invalid_label_name(self):
        with pytest.raises(AssemblySyntaxError):
            generate("1st:")


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Test fatal code generation errors."""

    def test_unknown_instruction(self):
        with pytest.raises(UnknownInstructionError) as exc_info:
            generate("hlt\njmp loop")
        assert exc_info.value.mnemonic == "jmp"
        assert exc_info.value.location.line == 2

    def test_missing_operand(self):
        with pytest.raises(AssemblySyntaxError):
            generate("mov a")

    def test_extra_operand(self):
        with pytest.raises(AssemblySyntaxError):
            generate("hlt 1")


# =============================================================================
# Zero Register Diagnostics
# =============================================================================

class TestZeroRegisterWarnings:
    """Writes to address 0 are reported but not fatal."""

    def test_subleq_into_zero_register_warns(self):
        _, _, codegen = generate(".def a 0x14 1\nsubleq a, z, 13")
        assert len(codegen.warnings) == 1
        assert "zero register" in codegen.warnings[0]

    def test_z_minus_z_is_silent(self):
        _, _, codegen = generate("subleq z, z, 13\nhlt")
        assert codegen.warnings == []

    def test_mov_into_zero_register_warns(self):
        _, _, codegen = generate(".def a 0x14 1\nmov a, z")
        assert len(codegen.warnings) == 1

    def test_add_expansion_is_silent(self):
        _, _, codegen = generate(".def a 0x14\n.def b 0x15\nadd a, b\nmov a, b")
        assert codegen.warnings == []


# =============================================================================
# Symbol Table Tests
# =============================================================================

class TestSymbolTable:
    """Test the variable and label tables directly."""

    def test_starts_with_zero_register_only(self):
        symbols = SymbolTable()
        assert list(symbols.variables) == ["z"]
        assert symbols.labels == {}

    def test_define_label_twice(self):
        symbols = SymbolTable()
        symbols.define_label("loop", 10)
        with pytest.raises(DuplicateLabelError):
            symbols.define_label("loop", 13)

    def test_similar_labels(self):
        symbols = SymbolTable()
        symbols.define_label("loop", 10)
        symbols.define_label("done", 20)
        assert "loop" in symbols.similar_labels("lop")


# =============================================================================
# Linker Tests
# =============================================================================

class TestLinker:
    """Test the fixup pass."""

    def test_forward_and_backward_references_agree(self):
        source = """
            subleq z, z, target
            hlt
        target:
            subleq z, z, target
            hlt
        """
        words, symbols, _ = generate(source)
        code = link(words, symbols)
        assert symbols.lookup_label("target").address == 16
        assert code[2] == 16
        assert code[8] == 16

    def test_resolved_words_pass_through(self):
        symbols = SymbolTable()
        code = link([ResolvedAddress(1), ResolvedAddress(-1)], symbols)
        assert code == [1, -1]

    def test_label_at_address_zero_resolves(self):
        symbols = SymbolTable()
        symbols.define_label("origin", 0)
        location = SourceLocation("<input>", 1, 1)
        code = link([UnresolvedSymbol("origin", location)], symbols)
        assert code == [0]

    def test_unresolved_label(self):
        words, symbols, _ = generate("loop:\nsubleq z, z, lop")
        with pytest.raises(UnresolvedLabelError) as exc_info:
            link(words, symbols)
        assert exc_info.value.label == "lop"
        assert "loop" in exc_info.value.similar_labels
        assert "did you mean 'loop'" in str(exc_info.value)
