"""Shared test fixtures for hubauth.

Provides config isolation, output reset, an OAuth2 resolver and a CLI runner.
These fixtures are discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest

from hubauth.config import ChainedVariableStore, ConfigResolver, create_resolver
from hubauth.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> Iterator[None]:
    """Reset the global CliOutput after every test.

    Each CLI invocation installs its own instance; a leftover one would
    carry the previous test's --json or --quiet flags.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at tmp_path, clears every HUBSPOT_* variable and
    HUBAUTH_CALLBACK_URI, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("hubauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in list(os.environ):
        if var.startswith("HUBSPOT_"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("HUBAUTH_CALLBACK_URI", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Resolver fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def oauth2_resolver() -> ConfigResolver:
    """A complete OAuth2 configuration without an API key."""
    overrides = {"Auth.clientId": "cid", "Auth.clientSecret": "s3cret", "Auth.scope": "contacts"}
    return create_resolver(overrides, variables=ChainedVariableStore())


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
