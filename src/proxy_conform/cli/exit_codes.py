"""Process exit codes for the proxy-conform CLI."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes shared by all commands."""

    # Every proxy conformed, or every tool present
    SUCCESS = 0
    # The run finished but at least one row is SKIPPED or ERROR
    INCOMPLETE = 1
    # Nothing was processed: missing tools, bad config or profile, bad roots
    SETUP_ERROR = 2
