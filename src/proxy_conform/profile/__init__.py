"""Conform profiles: YAML rules for matching, geometry and encoding."""

from proxy_conform.profile.loader import (
    load_profile,
    load_profile_from_dict,
    with_duration_fallback,
)
from proxy_conform.profile.models import (
    DEFAULT_PROFILE,
    AudioEncoding,
    ConformProfile,
    GeometryRules,
    MatchingRules,
    OutputRules,
    VideoEncoding,
)

__all__ = [
    "DEFAULT_PROFILE",
    "AudioEncoding",
    "ConformProfile",
    "GeometryRules",
    "MatchingRules",
    "OutputRules",
    "VideoEncoding",
    "load_profile",
    "load_profile_from_dict",
    "with_duration_fallback",
]
