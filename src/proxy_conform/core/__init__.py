"""Shared helpers used across Proxy Conform modules."""
