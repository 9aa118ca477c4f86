"""Audit reporting."""

from proxy_conform.reports.audit import AUDIT_COLUMNS, AuditLog, read_audit_log

__all__ = ["AUDIT_COLUMNS", "AuditLog", "read_audit_log"]
