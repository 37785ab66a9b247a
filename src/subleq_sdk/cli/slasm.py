"""
slasm - SUBLEQ Assembler Command-Line Interface
===============================================

Assembles a SUBLEQ source file and prints a report followed by the
256-byte memory image as a C array declaration.

Usage Examples
--------------
Print to stdout:
    $ slasm count.asm

Write a header file:
    $ slasm count.asm -o count.h

Load the program at another address:
    $ slasm --offset 0x20 count.asm
    $ PRG_OFFSET=0x20 slasm count.asm
"""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from subleq_sdk import __version__
from subleq_sdk.assembler import Assembler, render_listing
from subleq_sdk.cli.common import BYTE_ADDRESS, setup_logging
from subleq_sdk.cli.errors import handle_cli_exception, run_command
from subleq_sdk.config import AssemblerConfig


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report and program array to FILE instead of stdout",
)
@click.option(
    "--offset",
    type=BYTE_ADDRESS,
    default=None,
    help="Load offset of the first instruction byte. "
         "Default: $PRG_OFFSET, or 0x0a.",
)
@click.option(
    "--strict-layout",
    is_flag=True,
    help="Fail when a variable sits inside the code region "
         "instead of overlaying it with a warning",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="slasm")
def main(
    input_file: Path,
    output: Optional[Path],
    offset: Optional[int],
    strict_layout: bool,
    verbose: bool,
) -> None:
    """
    Assemble SUBLEQ source code into a 256-byte memory image.

    INPUT_FILE is the assembly source file to assemble.

    \b
    Examples:
        slasm count.asm              # Print report and array
        slasm count.asm -o count.h   # Write them to count.h
        slasm --offset 0x20 a.asm    # Load at 0x20
    """
    setup_logging(verbose)

    try:
        config = AssemblerConfig.from_env()
        if offset is not None:
            config = replace(config, load_offset=offset)
        if strict_layout:
            config = replace(config, strict_layout=True)

        if verbose:
            click.echo(f"Assembling {input_file} at 0x{config.load_offset:02x}...", err=True)

        result = Assembler(config).assemble_file(input_file)
        listing = render_listing(result)

        if output is not None:
            output.write_text(listing, encoding="utf-8")
            if verbose:
                click.echo(f"Wrote {result.code_length} code bytes to {output}", err=True)
        else:
            click.echo(listing, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


def run() -> None:
    """Console-script entry point."""
    run_command(main)


if __name__ == "__main__":
    run()
