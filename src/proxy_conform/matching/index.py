"""Master index construction.

The index is built once per run and is read-only afterwards. Records keep
discovery order (sorted paths) so that every tie-break downstream is
deterministic.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import MappingProxyType

from proxy_conform.domain import MasterRecord
from proxy_conform.introspector import MediaProbe
from proxy_conform.matching.normalize import normalize_name
from proxy_conform.scanner import discover_files, display_name

logger = logging.getLogger(__name__)


class MasterIndex:
    """Immutable collection of MasterRecords with an exact-key lookup table.

    Records sharing a normalized key are all kept; the matcher decides
    between them.
    """

    def __init__(self, records: Iterable[MasterRecord]) -> None:
        self._records: tuple[MasterRecord, ...] = tuple(records)
        by_key: dict[str, list[MasterRecord]] = {}
        for record in self._records:
            if record.normalized_name:
                by_key.setdefault(record.normalized_name, []).append(record)
        self._by_key = MappingProxyType(
            {key: tuple(group) for key, group in by_key.items()}
        )

    @property
    def records(self) -> tuple[MasterRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MasterRecord]:
        return iter(self._records)

    def lookup(self, normalized_name: str) -> tuple[MasterRecord, ...]:
        """Return records whose key equals ``normalized_name`` exactly."""
        return self._by_key.get(normalized_name, ())

    def duplicate_keys(self) -> dict[str, tuple[MasterRecord, ...]]:
        """Keys shared by more than one master."""
        return {key: group for key, group in self._by_key.items() if len(group) > 1}


def make_record(path: Path, duration_seconds: float | None = None) -> MasterRecord:
    """Build a MasterRecord for a master file path."""
    stem = display_name(path)
    return MasterRecord(
        normalized_name=normalize_name(stem),
        display_name=stem,
        path=path,
        duration_seconds=duration_seconds,
    )


def build_index(
    masters_root: Path,
    probe: MediaProbe,
    extensions: Iterable[str],
    *,
    probe_durations: bool = True,
) -> MasterIndex:
    """Scan the masters tree and build the index.

    Args:
        masters_root: Directory holding master files (read-only).
        probe: Probe used for master durations.
        extensions: Master file extensions, case-insensitive.
        probe_durations: Probe each master's duration. Durations are only
            needed by the duration fallback.

    Returns:
        MasterIndex over every discovered master.
    """
    start = time.monotonic()
    paths = discover_files(masters_root, extensions)

    records: list[MasterRecord] = []
    for path in paths:
        duration = probe.probe_duration(path) if probe_durations else None
        if probe_durations and duration is None:
            logger.debug("No duration for master %s", path)
        records.append(make_record(path, duration))

    index = MasterIndex(records)
    for key, group in index.duplicate_keys().items():
        logger.warning(
            "%d masters share the name key %r: %s",
            len(group),
            key,
            ", ".join(str(r.path) for r in group),
        )
    logger.info(
        "Indexed %d master(s) under %s in %.2fs",
        len(index),
        masters_root,
        time.monotonic() - start,
    )
    return index
