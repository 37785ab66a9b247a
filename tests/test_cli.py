"""
Command-Line Interface Tests
============================

Tests for the slasm and slsim commands, driven through click's CliRunner.
"""

import sys

import pytest
from click.testing import CliRunner

from subleq_sdk.assembler import assemble, render_listing
from subleq_sdk.cli import slasm, slsim
from subleq_sdk.cli.errors import ExitCode


ADD_SOURCE = """
.def a 0x14 5
.def b 0x15 0
add a, b
hlt
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "add.asm"
    path.write_text(ADD_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def program_file(tmp_path):
    path = tmp_path / "add.h"
    path.write_text(render_listing(assemble(ADD_SOURCE)), encoding="utf-8")
    return path


# =============================================================================
# slasm
# =============================================================================

class TestSlasm:
    """Test the assembler command."""

    def test_prints_listing(self, runner, source_file):
        result = runner.invoke(slasm.main, [str(source_file)])
        assert result.exit_code == 0
        assert "Program starts at: 0x0a" in result.output
        assert "Code length: 12 bytes" in result.output
        assert "unsigned const PROGMEM char prg[256] = {" in result.output

    def test_writes_output_file(self, runner, source_file, tmp_path):
        out = tmp_path / "add.h"
        result = runner.invoke(slasm.main, [str(source_file), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == render_listing(assemble(ADD_SOURCE))

    def test_offset_option(self, runner, source_file):
        result = runner.invoke(slasm.main, ["--offset", "0x30", str(source_file)])
        assert result.exit_code == 0
        assert "Program starts at: 0x30" in result.output

    def test_offset_from_environment(self, runner, source_file):
        result = runner.invoke(slasm.main, [str(source_file)], env={"PRG_OFFSET": "0x20"})
        assert result.exit_code == 0
        assert "Program starts at: 0x20" in result.output

    def test_option_overrides_environment(self, runner, source_file):
        result = runner.invoke(
            slasm.main, ["--offset", "64", str(source_file)], env={"PRG_OFFSET": "0x20"}
        )
        assert "Program starts at: 0x40" in result.output

    def test_bad_offset(self, runner, source_file):
        result = runner.invoke(slasm.main, ["--offset", "0x100", str(source_file)])
        assert result.exit_code != 0

    def test_assembly_error_exits_with_one(self, runner, tmp_path):
        bad = tmp_path / "bad.asm"
        bad.write_text("hlt\njmp 10\n", encoding="utf-8")
        result = runner.invoke(slasm.main, [str(bad)])
        assert result.exit_code == ExitCode.FATAL_ERROR
        assert "PROGMEM" not in result.output
        assert "jmp" in result.output

    def test_strict_layout(self, runner, tmp_path):
        src = tmp_path / "overlap.asm"
        src.write_text(".def x 12 1\nhlt\n", encoding="utf-8")
        assert runner.invoke(slasm.main, [str(src)]).exit_code == 0
        result = runner.invoke(slasm.main, ["--strict-layout", str(src)])
        assert result.exit_code == 1
        assert "overlaps the code region" in result.output

    def test_missing_input_file(self, runner, tmp_path):
        result = runner.invoke(slasm.main, [str(tmp_path / "absent.asm")])
        assert result.exit_code != 0


# =============================================================================
# slsim
# =============================================================================

class TestSlsim:
    """Test the simulator command."""

    def test_runs_program(self, runner, program_file):
        result = runner.invoke(slsim.main, [str(program_file)])
        assert result.exit_code == 0
        assert "--- (1)" in result.output
        assert "Done." in result.output
        assert "Memory hexdump:" in result.output
        assert "0010  00 00 13 00 05 05" in result.output
        assert "Display output:" in result.output
        assert result.output.rstrip().endswith("0000 00")

    def test_quiet_hides_trace(self, runner, program_file):
        result = runner.invoke(slsim.main, ["--quiet", str(program_file)])
        assert result.exit_code == 0
        assert "--- (1)" not in result.output
        assert "Done." in result.output

    def test_missing_program_array(self, runner, tmp_path):
        path = tmp_path / "empty.h"
        path.write_text("int main() { return 0; }\n", encoding="utf-8")
        result = runner.invoke(slsim.main, [str(path)])
        assert result.exit_code == ExitCode.FATAL_ERROR
        assert "not containing program code" in result.output

    def test_max_steps_stops_infinite_loop(self, runner, tmp_path):
        path = tmp_path / "loop.h"
        path.write_text(
            render_listing(assemble("loop: subleq z, z, loop")), encoding="utf-8"
        )
        result = runner.invoke(slsim.main, ["-q", "--max-steps", "100", str(path)])
        assert result.exit_code == ExitCode.FATAL_ERROR
        assert "did not halt within 100 steps" in result.output

    def test_entry_option(self, runner, program_file):
        # Entry 0 halts before the first step; memory is printed unchanged.
        result = runner.invoke(slsim.main, ["--entry", "0", str(program_file)])
        assert result.exit_code == 0
        assert "--- (1)" not in result.output
        assert "0010  00 00 13 00 05 00" in result.output


# =============================================================================
# Console-script entry points
# =============================================================================

class TestRunCommand:
    """Usage errors exit with status 1, like every other fatal error."""

    def test_missing_argument_exits_with_one(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["slasm"])
        with pytest.raises(SystemExit) as exc_info:
            slasm.run()
        assert exc_info.value.code == 1

    def test_success_exits_with_zero(self, monkeypatch, source_file, tmp_path):
        out = tmp_path / "out.h"
        monkeypatch.setattr(sys, "argv", ["slasm", str(source_file), "-o", str(out)])
        with pytest.raises(SystemExit) as exc_info:
            slasm.run()
        assert exc_info.value.code == 0
        assert out.exists()

    def test_simulator_missing_argument(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["slsim"])
        with pytest.raises(SystemExit) as exc_info:
            slsim.run()
        assert exc_info.value.code == 1
