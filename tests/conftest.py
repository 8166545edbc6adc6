"""Pytest configuration and fixtures.

Provides environment isolation and small filesystem helpers for building
configuration directories. Autouse fixtures are marked as such.
"""

from __future__ import annotations

import io
import os
from pathlib import Path
import sys
import textwrap
from typing import TYPE_CHECKING

import pytest

import prompt_assembler.settings as settings_module

if TYPE_CHECKING:
    from collections.abc import Callable

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        monkeypatch.setattr(settings_module, "_DOTENV_LOADED", False)
        return
    monkeypatch.setattr(settings_module, "_DOTENV_LOADED", True)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Clear PROMPT_ASSEMBLER_* variables and point XDG at a scratch dir."""
    for key in list(os.environ):
        if key.startswith("PROMPT_ASSEMBLER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture(autouse=True)
def empty_stdin(monkeypatch):
    """Give every test an empty, non-interactive stdin."""
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))


# =============================================================================
# Filesystem helpers
# =============================================================================


@pytest.fixture
def write_file(tmp_path) -> Callable[[str, str], Path]:
    """Write dedented text to a path relative to ``tmp_path``."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_root(tmp_path) -> Path:
    """An empty configuration directory."""
    root = tmp_path / "config"
    root.mkdir()
    return root


@pytest.fixture
def write_config(config_root) -> Callable[..., Path]:
    """Write a file under the configuration root.

    Usage:
        write_config("config.toml", '[prompt.a]\\nprompts = ["a.md"]')
        write_config("conf.d/10-extra.toml", "...")
    """

    def _write(relative: str, content: str) -> Path:
        path = config_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write
