"""
Command line interface.
"""

from easycore.cli.main import cli, run_cli

__all__ = ["cli", "run_cli"]
