"""Proxy to master matching.

Two passes:

1. Name scoring against every master's normalized key. Exact = 100,
   prefix = 90, suffix = 80, contains = 70. The best score wins; ties go to
   the longer (more specific) key. A best score below 70 is no match.
2. Duration fallback, when enabled: the master whose known duration is
   closest to the proxy's, provided the difference is within tolerance.

A proxy that matches in neither pass gets None, which the workflow records
as a skip.
"""

from __future__ import annotations

import logging
from pathlib import Path

from proxy_conform.domain import MatchMethod, MatchResult
from proxy_conform.introspector import MediaProbe
from proxy_conform.matching.index import MasterIndex
from proxy_conform.matching.normalize import normalize_name

logger = logging.getLogger(__name__)

SCORE_EXACT = 100
SCORE_PREFIX = 90
SCORE_SUFFIX = 80
SCORE_CONTAINS = 70
SCORE_NONE = 0

# Hard threshold: a best name score below this never matches
NAME_MATCH_THRESHOLD = 70

DEFAULT_DURATION_TOLERANCE = 0.5

# Float slack so a delta of exactly the tolerance is accepted
_DURATION_EPSILON = 1e-9


def score_name(proxy_key: str, master_key: str) -> int:
    """Score how well a master key matches a proxy key."""
    if not proxy_key or not master_key:
        return SCORE_NONE
    if proxy_key == master_key:
        return SCORE_EXACT
    if proxy_key.startswith(master_key):
        return SCORE_PREFIX
    if proxy_key.endswith(master_key):
        return SCORE_SUFFIX
    if master_key in proxy_key:
        return SCORE_CONTAINS
    return SCORE_NONE


def match_by_name(proxy_name: str, index: MasterIndex) -> MatchResult | None:
    """Run the name-scoring pass.

    Args:
        proxy_name: Proxy display name (not yet normalized).
        index: Master index.

    Returns:
        MatchResult for the best master scoring at least the threshold.
    """
    proxy_key = normalize_name(proxy_name)
    if not proxy_key:
        return None

    # Exact keys outrank everything, whatever their length
    exact = index.lookup(proxy_key)
    if exact:
        return MatchResult(
            master=exact[0],
            score=SCORE_EXACT,
            method=MatchMethod.NAME,
            ambiguous=len(exact) > 1,
        )

    best = None
    best_rank = (SCORE_NONE, 0)
    ambiguous = False
    for record in index:
        score = score_name(proxy_key, record.normalized_name)
        if score == SCORE_NONE:
            continue
        rank = (score, len(record.normalized_name))
        if rank > best_rank:
            best, best_rank, ambiguous = record, rank, False
        elif rank == best_rank:
            ambiguous = True

    if best is None or best_rank[0] < NAME_MATCH_THRESHOLD:
        return None
    return MatchResult(
        master=best,
        score=best_rank[0],
        method=MatchMethod.NAME,
        ambiguous=ambiguous,
    )


def match_by_duration(
    proxy_duration: float | None,
    index: MasterIndex,
    tolerance: float = DEFAULT_DURATION_TOLERANCE,
) -> MatchResult | None:
    """Run the duration fallback pass.

    Args:
        proxy_duration: Proxy duration in seconds, or None if unknown.
        index: Master index.
        tolerance: Maximum accepted absolute difference in seconds.

    Returns:
        MatchResult for the closest master within tolerance.
    """
    if proxy_duration is None:
        return None

    best = None
    best_delta = 0.0
    ambiguous = False
    for record in index:
        if record.duration_seconds is None:
            continue
        delta = abs(record.duration_seconds - proxy_duration)
        if delta > tolerance + _DURATION_EPSILON:
            continue
        if best is None or delta < best_delta:
            best, best_delta, ambiguous = record, delta, False
        elif delta == best_delta:
            ambiguous = True

    if best is None:
        return None
    return MatchResult(
        master=best,
        score=SCORE_NONE,
        method=MatchMethod.DURATION,
        ambiguous=ambiguous,
        delta_seconds=best_delta,
    )


class Matcher:
    """Finds the master for each proxy against a fixed index."""

    def __init__(
        self,
        index: MasterIndex,
        probe: MediaProbe,
        *,
        duration_fallback: bool = True,
        duration_tolerance: float = DEFAULT_DURATION_TOLERANCE,
    ) -> None:
        self.index = index
        self.probe = probe
        self.duration_fallback = duration_fallback
        self.duration_tolerance = duration_tolerance

    def find_master(
        self, proxy_display_name: str, proxy_path: Path
    ) -> MatchResult | None:
        """Find the master for one proxy.

        Args:
            proxy_display_name: Proxy file name without extension.
            proxy_path: Full proxy path, probed for the duration fallback.

        Returns:
            MatchResult, or None when neither pass finds a candidate.
        """
        result = match_by_name(proxy_display_name, self.index)
        if result is None and self.duration_fallback:
            proxy_duration = self.probe.probe_duration(proxy_path)
            result = match_by_duration(
                proxy_duration, self.index, self.duration_tolerance
            )

        if result is None:
            logger.debug("No master for %s", proxy_display_name)
            return None

        if result.ambiguous:
            logger.warning(
                "Ambiguous %s match for %s; using %s",
                result.method.value,
                proxy_display_name,
                result.master.path,
            )
        logger.debug(
            "Matched %s -> %s (%s, score=%d)",
            proxy_display_name,
            result.master.display_name,
            result.method.value,
            result.score,
        )
        return result


def find_master(
    proxy_display_name: str,
    proxy_path: Path,
    index: MasterIndex,
    probe: MediaProbe,
    *,
    duration_fallback: bool = True,
    duration_tolerance: float = DEFAULT_DURATION_TOLERANCE,
) -> MatchResult | None:
    """Functional form of Matcher.find_master."""
    matcher = Matcher(
        index,
        probe,
        duration_fallback=duration_fallback,
        duration_tolerance=duration_tolerance,
    )
    return matcher.find_master(proxy_display_name, proxy_path)
