"""Geometry and audio planning for matched proxy/master pairs."""

from proxy_conform.planning.planner import (
    DEFAULT_DAR_TOLERANCE,
    build_audio_mappings,
    compute_plan,
    describe_plan,
    floor_even,
    padded_dimension,
)

__all__ = [
    "DEFAULT_DAR_TOLERANCE",
    "build_audio_mappings",
    "compute_plan",
    "describe_plan",
    "floor_even",
    "padded_dimension",
]
