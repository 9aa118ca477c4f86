"""Fixtures for CLI tests."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from proxy_conform.config import ConformConfig


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI invocations from replacing the root logger's handlers."""
    with patch("proxy_conform.cli.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def cli_obj() -> dict:
    """Click context object with a default configuration."""
    return {"config": ConformConfig()}
