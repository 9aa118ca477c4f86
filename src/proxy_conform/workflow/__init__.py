"""Conform pipeline orchestration."""

from proxy_conform.workflow.processor import (
    DEFAULT_OUTPUT_DIRNAME,
    DEFAULT_REPORT_NAME,
    ConformProcessor,
    ItemState,
    PreviewItem,
    describe_match,
)

__all__ = [
    "DEFAULT_OUTPUT_DIRNAME",
    "DEFAULT_REPORT_NAME",
    "ConformProcessor",
    "ItemState",
    "PreviewItem",
    "describe_match",
]
