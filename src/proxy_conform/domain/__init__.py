"""Domain models and enums for Proxy Conform.

Usage:
    from proxy_conform.domain import MasterRecord, TransformPlan, VideoOp
"""

from .enums import MatchMethod, RowStatus, SkipCode, VideoOp
from .models import (
    AudioMapping,
    AudioTrackInfo,
    GeometryInfo,
    MasterRecord,
    MatchResult,
    ProxyTask,
    ReportRow,
    RunSummary,
    SkipReason,
    TransformPlan,
    normalize_sar,
)

__all__ = [
    # Models
    "AudioMapping",
    "AudioTrackInfo",
    "GeometryInfo",
    "MasterRecord",
    "MatchResult",
    "ProxyTask",
    "ReportRow",
    "RunSummary",
    "SkipReason",
    "TransformPlan",
    "normalize_sar",
    # Enums
    "MatchMethod",
    "RowStatus",
    "SkipCode",
    "VideoOp",
]
