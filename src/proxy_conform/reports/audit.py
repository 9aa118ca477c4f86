"""Audit log written alongside conform outputs.

The log is a CSV file with the header ``proxy,master,output,status,notes``
and one fully quoted row per processed proxy. It is opened once at the
start of a run, flushed after every row so that an interrupted run keeps
what it finished, and closed at the end.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from types import TracebackType
from typing import IO

from proxy_conform.domain import ReportRow, RowStatus

logger = logging.getLogger(__name__)

AUDIT_COLUMNS = ("proxy", "master", "output", "status", "notes")


class AuditLog:
    """Append-only CSV sink for ReportRows."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._file: IO[str] | None = None
        self._writer = None
        self.counts: dict[RowStatus, int] = {status: 0 for status in RowStatus}

    def open(self) -> AuditLog:
        """Create the file (truncating any previous log) and write the header."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", newline="", encoding="utf-8")
        self._file.write(",".join(AUDIT_COLUMNS) + "\r\n")
        self._writer = csv.writer(self._file, quoting=csv.QUOTE_ALL)
        self._file.flush()
        logger.debug("Opened audit log %s", self.path)
        return self

    def append(self, row: ReportRow) -> None:
        """Write one row and flush it to disk."""
        if self._file is None or self._writer is None:
            raise RuntimeError("Audit log is not open")
        self._writer.writerow(row.as_fields())
        self._file.flush()
        self.counts[row.status] += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None
            logger.debug("Closed audit log %s", self.path)

    def __enter__(self) -> AuditLog:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def read_audit_log(path: Path) -> list[ReportRow]:
    """Read an audit log back into ReportRows."""
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return [
            ReportRow(
                proxy=record["proxy"],
                master=record["master"],
                output=record["output"],
                status=RowStatus(record["status"]),
                notes=record["notes"],
            )
            for record in reader
        ]
