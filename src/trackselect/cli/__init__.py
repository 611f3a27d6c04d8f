"""CLI module for trackselect."""

import logging
from pathlib import Path

import click

logger = logging.getLogger(__name__)

_logging_configured: bool = False


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options.

    Args:
        config_path: Config file given with --config, if any.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from trackselect.config.logging_factory import setup_cli_logging

    setup_cli_logging(
        config_path=config_path,
        level=log_level,
        file=log_file,
        json_format=log_json,
    )
    _logging_configured = True


@click.group()
@click.version_option(package_name="trackselect")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="TRACKSELECT_CONFIG_PATH",
    help="Path to config file (default: ~/.trackselect/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """trackselect - Select, mux and re-flavor media package tracks."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    try:
        _configure_logging(config_path, log_level, log_file, log_json)
    except ValueError as e:
        raise click.UsageError(f"Invalid logging configuration: {e}") from e


# Defer import to avoid circular dependency
def _register_commands():
    from trackselect.cli.info import options_command, tracks_command
    from trackselect.cli.run import run_command

    main.add_command(run_command)
    main.add_command(options_command)
    main.add_command(tracks_command)


_register_commands()
