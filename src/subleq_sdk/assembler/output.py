"""
SUBLEQ Assembler Output
=======================

Renders an AssemblyResult as the text ``slasm`` prints: a report comment
followed by a C array declaration for flash-resident firmware (KIM Uno)::

    /*
     --- Report ---
      Program starts at: 0x0a
      Code length: 12 bytes
      ...
    */

    unsigned const PROGMEM char prg[256] = {
    /*        0x00  0x01  ...  0x0f  */
    /*0x00*/  0x00, 0x00, ...
    ...
    };

The simulator reads the array back with
``subleq_sdk.emulator.parse_program_text``.
"""

from subleq_sdk.assembler.assembler import AssemblyResult
from subleq_sdk.machine import MEMORY_SIZE, to_hex

BYTES_PER_ROW = 16
ARRAY_NAME = "prg"


def render_report(result: AssemblyResult) -> list[str]:
    """Report comment listing offset, code length, variables and labels."""
    lines = [
        "/*",
        " --- Report ---",
        f"  Program starts at: {to_hex(result.load_offset)}",
        f"  Code length: {result.code_length} bytes",
        "",
        "  Variables:",
    ]

    for variable in result.variables.values():
        initial = "none" if variable.initial_value is None else variable.initial_value
        lines.append(
            f"   - {variable.name} at {to_hex(variable.location)} "
            f"(initial value: {initial})"
        )

    lines.append("")
    lines.append("  Labels:")
    for label in result.labels.values():
        lines.append(f"   - {label.name} at {to_hex(label.address)}")

    if result.warnings:
        lines.append("")
        lines.append("  Warnings:")
        for warning in result.warnings:
            lines.append(f"   - {warning}")

    lines.append("*/")
    return lines


def render_program_array(image: bytes | bytearray, name: str = ARRAY_NAME) -> list[str]:
    """
    C array declaration holding every byte of the image.

    Each row holds 16 bytes and starts with an address comment.
    """
    header = "".join(f"{to_hex(col)}  " for col in range(BYTES_PER_ROW))
    lines = [
        f"unsigned const PROGMEM char {name}[{MEMORY_SIZE}] = {{",
        f"/*        {header}*/",
    ]

    for row in range(0, len(image), BYTES_PER_ROW):
        values = "".join(f"{to_hex(b)}, " for b in image[row:row + BYTES_PER_ROW])
        lines.append(f"/*{to_hex(row)}*/  {values}".rstrip())

    lines.append("};")
    return lines


def render_listing(result: AssemblyResult) -> str:
    """Full ``slasm`` output: report, blank line, program array."""
    lines = render_report(result)
    lines.append("")
    lines.extend(render_program_array(result.image))
    return "\n".join(lines) + "\n"
