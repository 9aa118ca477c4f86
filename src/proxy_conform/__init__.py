"""Proxy Conform - match camera proxies to archival masters and conform them."""

__version__ = "0.1.0"
