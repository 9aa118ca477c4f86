"""Domain enums for Proxy Conform.

These enums are shared across the matching, planning and workflow modules
and appear verbatim in the audit log.
"""

from enum import Enum


class VideoOp(Enum):
    """Video transformation applied to a proxy."""

    COPY = "copy"  # Display aspect already matches; remux only
    PILLARBOX = "pillarbox"  # Master is wider; pad left and right
    LETTERBOX = "letterbox"  # Master is taller; pad top and bottom


class MatchMethod(Enum):
    """Matching pass that produced a master candidate."""

    NAME = "name"
    DURATION = "duration"


class RowStatus(Enum):
    """Terminal status of a processed proxy."""

    OK = "OK"
    SKIPPED = "SKIPPED"
    ERROR = "ERROR"


class SkipCode(Enum):
    """Reasons a proxy is skipped without invoking the transcoder.

    The value is the human-readable reason written to the audit log.
    """

    NO_MASTER_MATCH = "no master match"
    NO_AUDIO_IN_MASTER = "no audio in MXF"
    NO_VIDEO_INFO = "no video info"
