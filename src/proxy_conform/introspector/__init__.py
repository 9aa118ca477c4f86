"""Metadata probe adapter.

- MediaProbe: Protocol defining the four probe operations
- FFprobeProbe: Production implementation using ffprobe
- StubProbe: In-memory implementation for tests and previews
"""

from proxy_conform.introspector.ffprobe import FFprobeProbe
from proxy_conform.introspector.interface import (
    MediaIntrospectionError,
    MediaProbe,
)
from proxy_conform.introspector.stub import StubMedia, StubProbe

__all__ = [
    "FFprobeProbe",
    "MediaIntrospectionError",
    "MediaProbe",
    "StubMedia",
    "StubProbe",
]
