"""
CLI main entry - using the Click framework.
"""

from __future__ import annotations

import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Any

import click

from easycore.config.defaults import VERSION
from easycore.config.manager import ConfigManager
from easycore.config.settings import validate_settings
from easycore.errors import ConfigurationError, UnitLoadError
from easycore.kernel.logging import setup_logging
from easycore.kernel.mediator import CoreEvent
from easycore.loader import bootstrap, declared_units, resolve_creator

logger = logging.getLogger(__name__)

_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _load_settings(config_path: Path) -> dict[str, Any]:
    try:
        settings = ConfigManager(config_path).load()
        validate_settings(settings)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    return settings


def _log_error(site: str, context: Any, fault: Any = None) -> None:
    logger.error("[%s] %s: %s", site, context, fault)


def _log_warning(site: str, message: Any, fault: Any = None) -> None:
    if fault is None:
        logger.warning("[%s] %s", site, message)
    else:
        logger.warning("[%s] %s: %s", site, message, fault)


def _wait_for_shutdown() -> None:
    shutdown = threading.Event()
    if sys.platform != "win32":
        signal.signal(signal.SIGTERM, lambda *_: shutdown.set())
    while not shutdown.wait(0.5):
        pass


@click.group()
@click.version_option(VERSION, prog_name="easycore")
def cli() -> None:
    """easycore - compose an application from modules and extensions."""


@cli.command()
@click.argument(
    "config_path", type=click.Path(dir_okay=False, exists=True, path_type=Path)
)
def check(config_path: Path) -> None:
    """Validate a settings file and list the units it declares."""
    settings = _load_settings(config_path)
    units = declared_units(settings)

    if not units:
        click.echo("No units declared")
        return

    failures = 0
    for unit in units:
        try:
            resolve_creator(unit.creator_path)
            status = "ok"
        except UnitLoadError as exc:
            failures += 1
            status = f"error: {exc}"
        click.echo(
            f"{unit.kind.value:<10} {unit.unit_id:<24} {unit.creator_path} [{status}]"
        )

    if failures:
        raise click.ClickException(f"{failures} unit(s) could not be loaded")


@cli.command()
@click.argument(
    "config_path", type=click.Path(dir_okay=False, exists=True, path_type=Path)
)
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    type=click.Choice(_LEVELS, case_sensitive=False),
    help="Console log level.",
)
@click.option("--log-file", default=None, help="Also log to this file.")
@click.option("--once", is_flag=True, help="Stop right after starting.")
def run(config_path: Path, log_level: str, log_file: str | None, once: bool) -> None:
    """Run the application described by a settings file."""
    setup_logging(log_level, log_file)
    settings = _load_settings(config_path)

    core = bootstrap(
        settings,
        subscribers={CoreEvent.ERROR: _log_error, CoreEvent.WARNING: _log_warning},
    )
    core.init()
    core.start()

    try:
        if not once:
            logger.info("Running, press Ctrl+C to stop")
            _wait_for_shutdown()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        core.stop()
        logger.info("Stopped")


def run_cli() -> int:
    """Run the CLI and return the process exit code."""
    try:
        cli.main(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return 0
