"""Environment variable reader with dependency injection support.

EnvReader reads ``PROXY_CONFORM_*`` variables with type conversion. Tests
inject a plain dict instead of touching ``os.environ``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "PROXY_CONFORM_"

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Typed access to prefixed environment variables.

    Names passed to the getters are given without the prefix:

        reader = EnvReader(env={"PROXY_CONFORM_PROBE_TIMEOUT": "30"})
        reader.get_int("PROBE_TIMEOUT", 60)  # -> 30

    Unparseable values log a warning and fall back to the default.
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ
        self._prefix = prefix

    def name(self, var: str) -> str:
        """Return the full environment variable name for ``var``."""
        return f"{self._prefix}{var}"

    def _raw(self, var: str) -> str | None:
        value = self._env.get(self.name(var))
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._raw(var)
        return default if value is None else value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        value = self._raw(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", self.name(var), value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        value = self._raw(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", self.name(var), value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Read a boolean; ``true``, ``1``, ``yes`` and ``on`` are true."""
        value = self._raw(var)
        if value is None:
            return default
        return value.lower() in _TRUE_VALUES

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Read a path with tilde expansion.

        With ``must_exist`` a path that does not exist is reported and
        replaced by the default.
        """
        value = self._raw(var)
        if value is None:
            return default
        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                self.name(var),
                value,
            )
            return default
        return path
