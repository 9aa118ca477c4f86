"""``proxy-conform match``: preview matches and plans without transcoding."""

import json
from pathlib import Path

import click

from proxy_conform.cli.output import error_exit
from proxy_conform.cli.run import load_profile_or_exit
from proxy_conform.config import ConformConfig
from proxy_conform.domain import SkipReason
from proxy_conform.exceptions import ConformError
from proxy_conform.introspector import FFprobeProbe
from proxy_conform.planning import describe_plan
from proxy_conform.tools import require_tools
from proxy_conform.workflow import ConformProcessor, PreviewItem, describe_match

_ROOT = click.Path(exists=True, file_okay=False, path_type=Path)


def _preview_to_dict(item: PreviewItem) -> dict:
    outcome = item.outcome
    data: dict = {
        "proxy": str(item.task.path),
        "master": str(item.match.master.path) if item.match else None,
        "match": None,
        "output": str(item.output_path),
    }
    if item.match is not None:
        data["match"] = {
            "method": item.match.method.value,
            "score": item.match.score,
            "ambiguous": item.match.ambiguous,
            "delta_seconds": item.match.delta_seconds,
        }
    if isinstance(outcome, SkipReason):
        data["skip"] = outcome.message
        data["plan"] = None
    else:
        data["skip"] = None
        data["plan"] = {
            "video_op": outcome.video_op.value,
            "width": outcome.target_width,
            "height": outcome.target_height,
            "x_offset": outcome.x_offset,
            "y_offset": outcome.y_offset,
            "audio": [m.title for m in outcome.audio_mappings],
            "timecode": outcome.timecode,
        }
    return data


def _preview_line(item: PreviewItem) -> str:
    name = item.task.path.name
    outcome = item.outcome
    if item.match is None:
        return f"{name}: SKIPPED ({outcome.message})"
    master = item.match.master.path.name
    if isinstance(outcome, SkipReason):
        return f"{name} -> {master}: SKIPPED ({outcome.message})"
    match_note = describe_match(item.match)
    return f"{name} -> {master} [{match_note}]: {describe_plan(outcome)}"


@click.command("match")
@click.argument("masters", type=_ROOT)
@click.argument("proxies", type=_ROOT)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML conform profile.",
)
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.pass_context
def match_command(
    ctx: click.Context,
    masters: Path,
    proxies: Path,
    profile_path: Path | None,
    json_output: bool,
) -> None:
    """Show which master each proxy matches and how it would be conformed.

    Only ffprobe is required. Nothing is written.
    """
    config: ConformConfig = ctx.obj["config"]
    profile = load_profile_or_exit(profile_path)

    try:
        tools = require_tools(config.tools, names=("ffprobe",))
        probe = FFprobeProbe(tools["ffprobe"], timeout=config.probe.timeout_seconds)
        items = list(ConformProcessor(probe, None, profile).preview(masters, proxies))
    except ConformError as e:
        error_exit(str(e), json_output=json_output)

    if json_output:
        click.echo(json.dumps([_preview_to_dict(i) for i in items], indent=2))
        return
    if not items:
        click.echo("No proxy files found.")
        return
    for item in items:
        click.echo(_preview_line(item))
