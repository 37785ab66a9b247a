"""
slsim - SUBLEQ Simulator Command-Line Interface
===============================================

Reads the program array written by ``slasm`` and runs it until the machine
halts, printing a trace of every step, a memory hexdump and the 3-digit
display readout.

Usage Examples
--------------
    $ slsim count.h
    $ slsim --quiet --max-steps 100000 count.h
"""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from subleq_sdk import __version__
from subleq_sdk.cli.common import BYTE_ADDRESS, setup_logging
from subleq_sdk.cli.errors import handle_cli_exception, run_command
from subleq_sdk.emulator import Emulator, EmulatorConfig, StepRecord


def echo_step(record: StepRecord) -> None:
    for line in record.format():
        click.echo(line)


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--entry",
    type=BYTE_ADDRESS,
    default=None,
    help="Initial program counter. Default: $SUBLEQ_ENTRY_POINT, or 0x0a.",
)
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Stop with an error if the program has not halted after N steps",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Do not print the per-step trace",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="slsim")
def main(
    input_file: Path,
    entry: Optional[int],
    max_steps: Optional[int],
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Run a SUBLEQ memory image until it halts.

    INPUT_FILE contains the program array printed by slasm.
    """
    setup_logging(verbose)

    try:
        config = EmulatorConfig.from_env()
        if entry is not None:
            config = replace(config, entry_point=entry)
        if max_steps is not None:
            config = replace(config, max_steps=max_steps)

        emu = Emulator.from_file(input_file, config)
        emu.run(on_step=None if quiet else echo_step)

        click.echo("Done.\n")
        click.echo("Memory hexdump:")
        for line in emu.hexdump():
            click.echo(line)

        click.echo("\nDisplay output:")
        click.echo(emu.display_output())

        if verbose:
            click.echo(f"Halted after {emu.steps} steps", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Simulation")


def run() -> None:
    """Console-script entry point."""
    run_command(main)


if __name__ == "__main__":
    run()
