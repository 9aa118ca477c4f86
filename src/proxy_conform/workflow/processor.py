"""Conform pipeline orchestration.

Each proxy moves through

    DISCOVERED -> MATCHING -> (SKIPPED | PLANNING -> (SKIPPED | EXECUTING
    -> (OK | ERROR)))

and produces exactly one audit row. Processing is strictly sequential and
per-item failures never stop the run; only validation of the run's inputs
raises, and it does so before the first proxy is touched.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from proxy_conform.domain import (
    MatchResult,
    ProxyTask,
    ReportRow,
    RowStatus,
    RunSummary,
    SkipCode,
    SkipReason,
    TransformPlan,
)
from proxy_conform.exceptions import ConformError
from proxy_conform.executor import Transcoder
from proxy_conform.introspector import MediaProbe
from proxy_conform.matching import MasterIndex, Matcher, build_index
from proxy_conform.planning import compute_plan, describe_plan
from proxy_conform.profile import DEFAULT_PROFILE, ConformProfile
from proxy_conform.reports import AuditLog
from proxy_conform.scanner import discover_files, display_name

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIRNAME = "conformed"
DEFAULT_REPORT_NAME = "conform_report.csv"


class ItemState(Enum):
    """Processing state of one proxy."""

    DISCOVERED = "discovered"
    MATCHING = "matching"
    PLANNING = "planning"
    EXECUTING = "executing"
    OK = "ok"
    SKIPPED = "skipped"
    ERROR = "error"


_TERMINAL_STATUS = {
    ItemState.OK: RowStatus.OK,
    ItemState.SKIPPED: RowStatus.SKIPPED,
    ItemState.ERROR: RowStatus.ERROR,
}


@dataclass
class _Item:
    """Mutable bookkeeping for the proxy currently being processed."""

    task: ProxyTask
    state: ItemState = ItemState.DISCOVERED
    match: MatchResult | None = None
    output: Path | None = None

    def advance(self, state: ItemState) -> None:
        logger.debug(
            "%s: %s -> %s", self.task.display_name, self.state.value, state.value
        )
        self.state = state

    def finish(self, state: ItemState, notes: str) -> ReportRow:
        self.advance(state)
        return ReportRow(
            proxy=str(self.task.path),
            master=str(self.match.master.path) if self.match else "",
            output=str(self.output) if self.output and state is ItemState.OK else "",
            status=_TERMINAL_STATUS[state],
            notes=notes,
        )


@dataclass(frozen=True)
class PreviewItem:
    """Match and plan for one proxy, computed without transcoding."""

    task: ProxyTask
    match: MatchResult | None
    outcome: TransformPlan | SkipReason
    output_path: Path


def describe_match(match: MatchResult) -> str:
    """Short description of how a master was found."""
    if match.delta_seconds is not None:
        text = f"duration match (delta {match.delta_seconds:.3f}s)"
    else:
        text = f"name match (score {match.score})"
    if match.ambiguous:
        text += ", ambiguous"
    return text


class ConformProcessor:
    """Matches, plans and transcodes every proxy under a root."""

    def __init__(
        self,
        probe: MediaProbe,
        transcoder: Transcoder | None,
        profile: ConformProfile = DEFAULT_PROFILE,
    ) -> None:
        """Initialize the processor.

        Args:
            probe: Metadata probe for masters and proxies.
            transcoder: Transcode adapter. May be None for preview().
            profile: Conform rules.
        """
        self.probe = probe
        self.transcoder = transcoder
        self.profile = profile

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def resolve_output_dir(self, proxies_root: Path, output_dir: Path | None) -> Path:
        return output_dir if output_dir is not None else (
            proxies_root / DEFAULT_OUTPUT_DIRNAME
        )

    def validate_roots(
        self, masters_root: Path, proxies_root: Path, output_dir: Path
    ) -> None:
        """Reject inputs that would make the run unsafe.

        Raises:
            ConformError: If a root is missing, outputs would land inside
                the masters tree, or the output directory is the proxies root.
        """
        for label, root in (("Masters", masters_root), ("Proxies", proxies_root)):
            if not root.is_dir():
                raise ConformError(f"{label} root is not a directory: {root}")

        masters = masters_root.resolve()
        out = output_dir.resolve()
        if out == masters or masters in out.parents:
            raise ConformError(
                f"Output directory {output_dir} is inside the masters root; "
                "masters are never written to"
            )
        # Discovery only excludes the output directory when it is below the root
        if out == proxies_root.resolve():
            raise ConformError(
                f"Output directory {output_dir} is the proxies root; "
                "use a subdirectory or a separate directory"
            )

    def build_index(self, masters_root: Path) -> MasterIndex:
        rules = self.profile.matching
        return build_index(
            masters_root,
            self.probe,
            rules.master_extensions,
            probe_durations=rules.duration_fallback,
        )

    def discover_proxies(self, proxies_root: Path, output_dir: Path) -> list[ProxyTask]:
        paths = discover_files(
            proxies_root, self.profile.matching.proxy_extensions, exclude=[output_dir]
        )
        return [ProxyTask(path=p, display_name=display_name(p)) for p in paths]

    def make_matcher(self, index: MasterIndex) -> Matcher:
        rules = self.profile.matching
        return Matcher(
            index,
            self.probe,
            duration_fallback=rules.duration_fallback,
            duration_tolerance=rules.duration_tolerance,
        )

    def output_path_for(self, task: ProxyTask, output_dir: Path) -> Path:
        """Final output path: ``<output_dir>/<stem><suffix>.<container>``."""
        rules = self.profile.output
        return output_dir / f"{task.display_name}{rules.suffix}.{rules.container}"

    # ------------------------------------------------------------------
    # Per-item steps
    # ------------------------------------------------------------------

    def plan_for(
        self, task: ProxyTask, match: MatchResult
    ) -> TransformPlan | SkipReason:
        """Probe the pair and compute its transform plan."""
        master_path = match.master.path
        return compute_plan(
            self.probe.probe_video(task.path),
            self.probe.probe_video(master_path),
            self.probe.probe_audio(master_path),
            self.probe.probe_timecode(task.path),
            dar_tolerance=self.profile.geometry.dar_tolerance,
        )

    def process_one(
        self,
        task: ProxyTask,
        matcher: Matcher,
        output_dir: Path,
        claimed_outputs: dict[Path, Path] | None = None,
    ) -> ReportRow:
        """Run one proxy to a terminal state.

        Args:
            task: Proxy to process.
            matcher: Matcher over the run's master index.
            output_dir: Directory receiving outputs.
            claimed_outputs: Output path -> proxy already written this run.

        Returns:
            The proxy's audit row. Never raises for per-item failures.
        """
        item = _Item(task)
        try:
            return self._process(item, matcher, output_dir, claimed_outputs or {})
        except Exception as e:
            logger.debug("Unhandled error for %s", task.path, exc_info=True)
            return item.finish(
                ItemState.ERROR, f"{item.state.value} failed: {type(e).__name__}: {e}"
            )

    def _process(
        self,
        item: _Item,
        matcher: Matcher,
        output_dir: Path,
        claimed_outputs: dict[Path, Path],
    ) -> ReportRow:
        task = item.task

        item.advance(ItemState.MATCHING)
        item.match = matcher.find_master(task.display_name, task.path)
        if item.match is None:
            return item.finish(ItemState.SKIPPED, SkipCode.NO_MASTER_MATCH.value)
        match_note = describe_match(item.match)

        item.advance(ItemState.PLANNING)
        outcome = self.plan_for(task, item.match)
        if isinstance(outcome, SkipReason):
            return item.finish(ItemState.SKIPPED, f"{outcome.message}; {match_note}")

        item.output = self.output_path_for(task, output_dir)
        if item.output.resolve() == task.path.resolve():
            return item.finish(
                ItemState.ERROR, f"output {item.output} would overwrite the proxy"
            )
        first_claim = claimed_outputs.get(item.output)
        if first_claim is not None:
            return item.finish(
                ItemState.ERROR,
                f"output name {item.output.name} already used by {first_claim}",
            )
        claimed_outputs[item.output] = task.path

        item.advance(ItemState.EXECUTING)
        if self.transcoder is None:
            raise ConformError("No transcoder configured")
        result = self.transcoder.transcode(
            task.path, item.match.master.path, outcome, item.output
        )
        plan_note = describe_plan(outcome)
        if not result.success:
            # The adapter's message already carries the exit status
            return item.finish(ItemState.ERROR, f"{result.error_message}; {plan_note}")
        return item.finish(ItemState.OK, f"{match_note}; {plan_note}")

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def run(
        self,
        masters_root: Path,
        proxies_root: Path,
        output_dir: Path | None = None,
        report_path: Path | None = None,
    ) -> RunSummary:
        """Conform every proxy under ``proxies_root``.

        Args:
            masters_root: Read-only masters tree.
            proxies_root: Proxies tree.
            output_dir: Output directory (default ``<proxies_root>/conformed``).
            report_path: Audit log path (default inside the output directory).

        Returns:
            RunSummary with totals and rows in discovery order.

        Raises:
            ConformError: If the roots are invalid. Raised before processing.
        """
        output_dir = self.resolve_output_dir(proxies_root, output_dir)
        self.validate_roots(masters_root, proxies_root, output_dir)
        report_path = report_path or output_dir / DEFAULT_REPORT_NAME

        start = time.monotonic()
        index = self.build_index(masters_root)
        matcher = self.make_matcher(index)
        tasks = self.discover_proxies(proxies_root, output_dir)
        logger.info("Found %d proxy file(s) under %s", len(tasks), proxies_root)

        output_dir.mkdir(parents=True, exist_ok=True)
        summary = RunSummary(output_dir=output_dir, report_path=report_path)
        claimed: dict[Path, Path] = {}

        with AuditLog(report_path) as audit:
            for position, task in enumerate(tasks, start=1):
                row = self.process_one(task, matcher, output_dir, claimed)
                audit.append(row)
                summary.record(row)
                log = logger.warning if row.status is RowStatus.ERROR else logger.info
                log(
                    "[%d/%d] %s: %s %s",
                    position,
                    len(tasks),
                    task.path.name,
                    row.status.value,
                    row.notes,
                )

        logger.info(
            "Processed %d proxy file(s) in %.1fs: %d OK, %d skipped, %d errors",
            summary.processed,
            time.monotonic() - start,
            summary.ok,
            summary.skipped,
            summary.errors,
        )
        return summary

    def preview(
        self,
        masters_root: Path,
        proxies_root: Path,
        output_dir: Path | None = None,
    ) -> Iterator[PreviewItem]:
        """Yield the match and plan for each proxy without writing anything."""
        output_dir = self.resolve_output_dir(proxies_root, output_dir)
        self.validate_roots(masters_root, proxies_root, output_dir)
        matcher = self.make_matcher(self.build_index(masters_root))

        for task in self.discover_proxies(proxies_root, output_dir):
            match = matcher.find_master(task.display_name, task.path)
            outcome: TransformPlan | SkipReason
            if match is None:
                outcome = SkipReason(SkipCode.NO_MASTER_MATCH)
            else:
                outcome = self.plan_for(task, match)
            yield PreviewItem(
                task=task,
                match=match,
                outcome=outcome,
                output_path=self.output_path_for(task, output_dir),
            )
