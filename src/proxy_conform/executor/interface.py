"""Transcoder protocol and result type."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from proxy_conform.domain import TransformPlan


@dataclass(frozen=True)
class TranscodeResult:
    """Result of one transcode invocation.

    Exactly one of the two shapes is produced: success with the promoted
    ``output_path``, or failure with ``error_message`` (and the tool's
    ``return_code`` when it ran).
    """

    success: bool
    output_path: Path | None = None
    return_code: int | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls, output_path: Path) -> TranscodeResult:
        return cls(success=True, output_path=output_path, return_code=0)

    @classmethod
    def failed(cls, message: str, return_code: int | None = None) -> TranscodeResult:
        return cls(success=False, return_code=return_code, error_message=message)


class Transcoder(Protocol):
    """Protocol for transcode adapters."""

    def transcode(
        self,
        proxy_path: Path,
        master_path: Path,
        plan: TransformPlan,
        output_path: Path,
    ) -> TranscodeResult:
        """Produce ``output_path`` from the proxy video and master audio.

        Implementations never raise for tool failures; they return a
        failed TranscodeResult.
        """
        ...
