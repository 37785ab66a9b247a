#!/usr/bin/env python3
"""
SUBLEQ SDK Demo
===============

This script demonstrates how to use the SUBLEQ SDK to:
1. Assemble a source file into a memory image
2. Print the report and program array
3. Run the image on the emulator, stepping and tracing
4. Inspect memory and the display readout

Usage:
    source .venv/bin/activate
    python examples/emulator_demo.py
"""

from pathlib import Path

from subleq_sdk import Assembler, AssemblerConfig, Emulator, EmulatorConfig, render_listing


def main():
    source = Path(__file__).parent / "countdown.asm"

    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    print(f"Assembling {source.name}...")
    result = Assembler(AssemblerConfig()).assemble_file(source)

    print(f"  Code length: {result.code_length} bytes at 0x{result.load_offset:02x}")
    for name, label in result.labels.items():
        print(f"  Label {name}: 0x{label.address:02x}")
    for warning in result.warnings:
        print(f"  {warning}")

    # ==========================================================================
    # 2. Listing
    # ==========================================================================
    # render_listing() gives exactly what slasm prints: the report comment
    # followed by the program array, ready to paste into a sketch.
    print()
    print(render_listing(result))

    # ==========================================================================
    # 3. Run
    # ==========================================================================
    # A step limit turns a program that never halts into an error instead
    # of a hang.
    emu = Emulator(result.image, EmulatorConfig(max_steps=10_000))

    # Single step first...
    record = emu.step()
    print("\n".join(record.format()))

    # ...then run to the end, printing only taken branches
    def show_branch(step):
        if step.branched:
            print(f"  step {step.step}: 0x{step.pc:02x} -> {step.next_pc}")

    emu.run(on_step=show_branch)
    print(f"\nHalted after {emu.steps} steps")
    print(f"  pc trace: {emu.pc_trace}")

    # ==========================================================================
    # 4. Inspect
    # ==========================================================================
    print("\nMemory hexdump:")
    print("\n".join(emu.hexdump()))

    print(f"\nDisplay output: {emu.display_output()}")

    # reset() restores the loaded image for another run
    emu.reset()
    print(f"\nAfter reset: count = {emu.read_byte(0x20)}")


if __name__ == "__main__":
    main()
