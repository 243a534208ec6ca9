"""Entry point for ``python -m easycore.cli``."""

from easycore.cli.main import run_cli


def main() -> int:
    """Run the CLI and return the exit code."""
    return run_cli()


if __name__ == "__main__":
    raise SystemExit(main())
