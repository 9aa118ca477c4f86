"""File discovery for master and proxy trees."""

from proxy_conform.scanner.discovery import (
    discover_files,
    display_name,
    normalize_extensions,
)

__all__ = ["discover_files", "display_name", "normalize_extensions"]
