"""Shared CLI output helpers."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from proxy_conform.cli.exit_codes import ExitCode


def error_exit(
    message: str,
    code: ExitCode = ExitCode.SETUP_ERROR,
    json_output: bool = False,
) -> NoReturn:
    """Print an error and exit.

    Args:
        message: Error message to display.
        code: Exit code to use.
        json_output: Whether to format the error as JSON.
    """
    if json_output:
        click.echo(
            json.dumps(
                {"status": "failed", "error": {"code": code.name, "message": message}}
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))
