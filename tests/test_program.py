"""
Program Array Parser Tests
==========================

Tests for reading the C array declaration back into a memory image.
"""

import pytest

from subleq_sdk.emulator import load_program_file, parse_program_text
from subleq_sdk.errors import (
    MalformedProgramDataError,
    MissingProgramDataError,
    SimulatorError,
)


def array_text(values):
    body = ", ".join(values)
    return f"unsigned const PROGMEM char prg[256] = {{\n{body}\n}};\n"


class TestParseProgramText:
    """Test array extraction and value parsing."""

    def test_full_array(self):
        values = [f"0x{i:02x}" for i in range(256)]
        memory = parse_program_text(array_text(values))
        assert len(memory) == 256
        assert memory[0x7F] == 0x7F
        assert memory[255] == 0xFF

    def test_short_array_is_zero_extended(self):
        memory = parse_program_text(array_text(["0x01", "0x02", "0x03"]))
        assert len(memory) == 256
        assert list(memory[:4]) == [1, 2, 3, 0]

    def test_decimal_values(self):
        memory = parse_program_text(array_text(["10", "255", "0"]))
        assert list(memory[:3]) == [10, 255, 0]

    def test_comments_and_surrounding_text_ignored(self):
        text = (
            "/*\n   Program starts at: 0x0a\n*/\n\n"
            "unsigned const PROGMEM char prg[256] = {\n"
            "/*        0x00  0x01 */\n"
            "/*0x00*/  0x05, 0x06,\n"
            "};\n"
            "int main() { return 0; }\n"
        )
        memory = parse_program_text(text)
        assert list(memory[:3]) == [5, 6, 0]

    def test_trailing_comma_allowed(self):
        memory = parse_program_text(array_text(["0x01", "0x02,"]))
        assert list(memory[:3]) == [1, 2, 0]

    def test_missing_array(self):
        with pytest.raises(MissingProgramDataError) as exc_info:
            parse_program_text("int main() { return 0; }")
        assert "not containing program code" in str(exc_info.value)

    def test_empty_array(self):
        with pytest.raises(MissingProgramDataError):
            parse_program_text(array_text([]))

    def test_malformed_token(self):
        with pytest.raises(MalformedProgramDataError) as exc_info:
            parse_program_text(array_text(["0x01", "zz"]))
        assert "0x01" in str(exc_info.value)

    @pytest.mark.parametrize("token", ["0x100", "256", "-1"])
    def test_value_outside_byte(self, token):
        with pytest.raises(MalformedProgramDataError):
            parse_program_text(array_text([token]))

    def test_too_many_values(self):
        with pytest.raises(MalformedProgramDataError):
            parse_program_text(array_text(["0"] * 257))

    def test_errors_are_simulator_errors(self):
        with pytest.raises(SimulatorError):
            parse_program_text("")


class TestLoadProgramFile:
    """Test reading program arrays from disk."""

    def test_load(self, tmp_path):
        path = tmp_path / "prog.h"
        path.write_text(array_text(["0x00", "0x00", "0xff"]), encoding="utf-8")
        memory = load_program_file(path)
        assert list(memory[:3]) == [0, 0, 0xFF]

    def test_load_accepts_str_path(self, tmp_path):
        path = tmp_path / "prog.h"
        path.write_text(array_text(["7"]), encoding="utf-8")
        assert load_program_file(str(path))[0] == 7

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_program_file(tmp_path / "absent.h")
