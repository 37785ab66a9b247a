"""
Shared CLI helpers: numeral options and logging setup.
"""

import logging

import click

from subleq_sdk.machine import MEMORY_SIZE, parse_number


class ByteAddress(click.ParamType):
    """Click parameter accepting a decimal or hex (0x..) address in memory."""

    name = "address"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            number = value
        else:
            try:
                number = parse_number(value)
            except ValueError:
                self.fail(f"{value!r} is not a decimal or hex number", param, ctx)

        if not 0 <= number < MEMORY_SIZE:
            self.fail(f"{value} is outside memory (0..{MEMORY_SIZE - 1})", param, ctx)
        return number


BYTE_ADDRESS = ByteAddress()


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )
