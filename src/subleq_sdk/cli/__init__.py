"""
SUBLEQ SDK Command-Line Interface
=================================

This package provides command-line tools for the SUBLEQ SDK:

- **slasm**: SUBLEQ assembler
- **slsim**: SUBLEQ simulator

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["slasm", "slsim"]
