"""File discovery and reading for configuration loading.

These helpers locate and read configuration sources without validating them.
I/O failures here are structural and propagate as exceptions; content problems
are left to the merger, which records them as diagnostics.
"""

from __future__ import annotations

from datetime import UTC, datetime
import logging
from pathlib import Path
import re

from prompt_assembler.errors import (
    ConfigDirectoryError,
    ConfigReadError,
    SourceReadError,
)
from prompt_assembler.paths import read_text

log = logging.getLogger(__name__)

# --- Constants ---

BASE_CONFIG_NAME = "config.toml"
OVERRIDE_DIR_NAME = "conf.d"
CONFIG_SUFFIX = ".toml"


def base_config_path(root: Path) -> Path:
    return root / BASE_CONFIG_NAME


def override_dir_path(root: Path) -> Path:
    return root / OVERRIDE_DIR_NAME


def list_override_files(root: Path) -> list[Path]:
    """Return ``conf.d/*.toml`` files sorted lexically by filename.

    A missing directory yields an empty list. A path that exists but is not
    a directory, including a dangling symlink, is an enumeration failure.

    Raises:
        ConfigDirectoryError: The directory exists but cannot be enumerated.
    """
    conf_d = override_dir_path(root)
    if not conf_d.exists() and not conf_d.is_symlink():
        return []

    try:
        entries = [
            entry
            for entry in conf_d.iterdir()
            if entry.suffix == CONFIG_SUFFIX and entry.is_file()
        ]
    except OSError as e:
        raise ConfigDirectoryError(
            f"failed to enumerate {conf_d}: {e}", path=conf_d
        ) from e

    entries.sort(key=lambda p: p.name)
    log.debug("Found %d override file(s) in %s", len(entries), conf_d)
    return entries


def read_config_source(path: Path) -> str:
    """Read a configuration file.

    Raises:
        ConfigReadError: The file cannot be opened, read, or decoded.
    """
    try:
        return read_text(path)
    except SourceReadError as e:
        raise ConfigReadError(str(e), path=path) from e


def last_modified(path: Path) -> datetime | None:
    """Best-effort modification time; ``None`` when stat fails."""
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
    except OSError:
        return None


def find_table_line(text: str, name: str) -> int | None:
    """Return the 1-based line of the ``[prompt.<name>]`` header, if present.

    Prompts written as inline tables or dotted keys have no header and yield
    ``None``.
    """
    escaped = re.escape(name)
    key = rf"""(?:{escaped}|"{escaped}"|'{escaped}')"""
    pattern = re.compile(
        rf"^[ \t]*\[[ \t]*prompt[ \t]*\.[ \t]*{key}[ \t]*\]", re.MULTILINE
    )
    match = pattern.search(text)
    if match is None:
        return None
    return text.count("\n", 0, match.start()) + 1
