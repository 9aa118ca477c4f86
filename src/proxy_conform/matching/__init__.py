"""Master index and proxy matcher."""

from proxy_conform.matching.index import MasterIndex, build_index, make_record
from proxy_conform.matching.matcher import (
    NAME_MATCH_THRESHOLD,
    Matcher,
    find_master,
    match_by_duration,
    match_by_name,
    score_name,
)
from proxy_conform.matching.normalize import normalize_name

__all__ = [
    "NAME_MATCH_THRESHOLD",
    "MasterIndex",
    "Matcher",
    "build_index",
    "find_master",
    "make_record",
    "match_by_duration",
    "match_by_name",
    "normalize_name",
    "score_name",
]
