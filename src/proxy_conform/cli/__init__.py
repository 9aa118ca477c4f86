"""CLI module for Proxy Conform."""

import logging
from pathlib import Path

import click

from proxy_conform.cli.output import error_exit
from proxy_conform.config import build_logging_config, get_config
from proxy_conform.exceptions import ConfigError
from proxy_conform.logging import configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="proxy-conform")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.proxy-conform/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
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
    """Proxy Conform - rebuild edit proxies against their broadcast masters."""
    ctx.ensure_object(dict)

    # An explicitly named config file must parse; the default one may be absent
    try:
        config = ctx.obj.get("config") or get_config(
            config_path=config_path, strict=config_path is not None
        )
        logging_config = build_logging_config(
            config.logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except (ConfigError, ValueError) as e:
        error_exit(f"Invalid configuration: {e}")

    ctx.obj["config"] = config
    configure_logging(logging_config)
    logger.debug(
        "Starting %s: log_level=%s, log_file=%s",
        ctx.invoked_subcommand,
        logging_config.level,
        logging_config.file or "stderr",
    )


# Defer import to avoid circular dependency
def _register_commands():
    from proxy_conform.cli.doctor import doctor_command
    from proxy_conform.cli.match import match_command
    from proxy_conform.cli.run import run_command

    main.add_command(run_command)
    main.add_command(match_command)
    main.add_command(doctor_command)


_register_commands()
