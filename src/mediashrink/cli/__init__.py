"""CLI module for mediashrink."""

import logging
from pathlib import Path

import click

from mediashrink.cli.exit_codes import ExitCode
from mediashrink.cli.output import error_exit
from mediashrink.config import MediaShrinkConfig, get_config
from mediashrink.logging import configure_logging

logger = logging.getLogger(__name__)


def load_config(
    ctx: click.Context, **conversion_overrides: object
) -> MediaShrinkConfig:
    """Build the effective configuration for a subcommand.

    Exits with CONFIG_ERROR if a merged value fails validation.
    """
    try:
        return get_config(
            (ctx.obj or {}).get("config_path"),
            conversion_overrides=conversion_overrides,
        )
    except ValueError as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR)


def _configure_logging(
    config: MediaShrinkConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from the config file merged with CLI options."""
    try:
        logging_config = config.logging.with_overrides(log_level, log_file, log_json)
    except ValueError as e:
        error_exit(f"Invalid logging option: {e}", ExitCode.CONFIG_ERROR)
    run_log = configure_logging(logging_config)
    if run_log is not None:
        logger.debug("Run log: %s", run_log)


@click.group()
@click.version_option(package_name="mediashrink")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.mediashrink/config.toml).",
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
    """mediashrink - Re-encode a cloud-synced video library to AV1."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    config = load_config(ctx)
    _configure_logging(config, log_level, log_file, log_json)
    logger.debug(
        "mediashrink starting: data_dir=%s, history=%s",
        config.data_dir,
        config.history_path,
    )


# Defer import to avoid circular dependency
def _register_commands():
    from mediashrink.cli.encoders import encoders_command
    from mediashrink.cli.history import history_group
    from mediashrink.cli.run import run_command

    main.add_command(run_command)
    main.add_command(history_group)
    main.add_command(encoders_command)


_register_commands()
