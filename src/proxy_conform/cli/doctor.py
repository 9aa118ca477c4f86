"""``proxy-conform doctor``: check external tool availability."""

import json

import click

from proxy_conform.cli.exit_codes import ExitCode
from proxy_conform.config import ConformConfig
from proxy_conform.tools import INSTALL_HINTS, detect_tools


def _format_status(available: bool) -> str:
    return "✓" if available else "✗"


@click.command("doctor")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.pass_context
def doctor_command(ctx: click.Context, json_output: bool) -> None:
    """Check that ffprobe and ffmpeg are installed.

    Exit codes:
      0 - Both tools available
      2 - A required tool is missing or broken
    """
    config: ConformConfig = ctx.obj["config"]
    tools = detect_tools(config.tools)
    healthy = all(info.is_available() for info in tools.values())

    if json_output:
        click.echo(
            json.dumps(
                {"ok": healthy, "tools": [info.to_dict() for info in tools.values()]},
                indent=2,
            )
        )
    else:
        click.echo("Proxy Conform Tool Check")
        click.echo("=" * 40)
        for name, info in tools.items():
            status = _format_status(info.is_available())
            detail = info.version or info.status_message or "not found"
            path = f" ({info.path})" if info.path else ""
            click.echo(f"  {status} {name}: {detail}{path}")
            if not info.is_available():
                click.echo(f"    └─ {INSTALL_HINTS[name]}")

    ctx.exit(int(ExitCode.SUCCESS if healthy else ExitCode.SETUP_ERROR))
