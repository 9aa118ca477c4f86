"""``proxy-conform run``: conform every proxy under a root."""

from pathlib import Path

import click

from proxy_conform.cli.exit_codes import ExitCode
from proxy_conform.cli.output import error_exit
from proxy_conform.config import ConformConfig
from proxy_conform.domain import RunSummary
from proxy_conform.exceptions import ConformError, ProfileValidationError
from proxy_conform.executor import FFmpegTranscoder
from proxy_conform.introspector import FFprobeProbe
from proxy_conform.profile import ConformProfile, load_profile, with_duration_fallback
from proxy_conform.tools import require_tools
from proxy_conform.workflow import ConformProcessor

_ROOT = click.Path(exists=True, file_okay=False, path_type=Path)


def load_profile_or_exit(
    profile_path: Path | None, *, no_duration_fallback: bool = False
) -> ConformProfile:
    """Load the profile, exiting with SETUP_ERROR when it is invalid."""
    try:
        profile = load_profile(profile_path)
    except (ProfileValidationError, FileNotFoundError) as e:
        error_exit(str(e))
    if no_duration_fallback:
        profile = with_duration_fallback(profile, False)
    return profile


def format_summary(summary: RunSummary) -> list[str]:
    return [
        f"Processed: {summary.processed}",
        f"OK: {summary.ok}",
        f"Skipped or errored: {summary.not_ok}",
        f"Output directory: {summary.output_dir}",
        f"Report: {summary.report_path}",
    ]


@click.command("run")
@click.argument("masters", type=_ROOT)
@click.argument("proxies", type=_ROOT)
@click.option(
    "--output",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: PROXIES/conformed).",
)
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Audit CSV path (default: OUTPUT/conform_report.csv).",
)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML conform profile.",
)
@click.option(
    "--no-duration-fallback",
    is_flag=True,
    default=False,
    help="Only match masters by name.",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    masters: Path,
    proxies: Path,
    output_dir: Path | None,
    report_path: Path | None,
    profile_path: Path | None,
    no_duration_fallback: bool,
) -> None:
    """Match each proxy in PROXIES to a master in MASTERS and conform it.

    Exit codes:
      0 - Every proxy conformed
      1 - At least one proxy was skipped or failed
      2 - Nothing processed (missing tools, invalid profile or roots)
    """
    config: ConformConfig = ctx.obj["config"]
    profile = load_profile_or_exit(
        profile_path, no_duration_fallback=no_duration_fallback
    )

    try:
        tools = require_tools(config.tools)
    except ConformError as e:
        error_exit(str(e))

    processor = ConformProcessor(
        FFprobeProbe(tools["ffprobe"], timeout=config.probe.timeout_seconds),
        FFmpegTranscoder(
            tools["ffmpeg"], profile, timeout=config.transcode.timeout_seconds
        ),
        profile,
    )
    try:
        summary = processor.run(masters, proxies, output_dir, report_path)
    except ConformError as e:
        error_exit(str(e))

    for line in format_summary(summary):
        click.echo(line)
    ctx.exit(int(ExitCode.SUCCESS if summary.not_ok == 0 else ExitCode.INCOMPLETE))
