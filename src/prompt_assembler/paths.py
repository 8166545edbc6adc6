"""Path resolution and text reading shared by loading and rendering.

Resolution is purely lexical: nothing here touches the filesystem except
``read_text``.
"""

from __future__ import annotations

from pathlib import Path

from prompt_assembler.errors import (
    ResolutionError,
    SourceDecodeError,
    SourceNotFoundError,
    SourceReadError,
)

HOME_PREFIX = "~/"


def home_dir() -> Path:
    """The current user's home directory."""
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise ResolutionError(
            "cannot resolve '~' without home directory",
            hint="Set HOME or use an absolute path.",
        ) from e


def _ensure_text(path: Path) -> Path:
    try:
        str(path).encode("utf-8")
    except UnicodeEncodeError as e:
        raise ResolutionError(f"path is not valid UTF-8: {path!r}") from e
    return path


def resolve_path(root: Path, raw: str) -> Path:
    """Resolve a configured path string against ``root``.

    ``~/`` (or a bare ``~``) expands to the home directory; absolute paths are
    returned unchanged; everything else is joined onto ``root``.

    Raises:
        ResolutionError: The home directory is unknown or the result is not
            representable as UTF-8 text.
    """
    if raw == "~":
        return _ensure_text(home_dir())
    if raw.startswith(HOME_PREFIX):
        return _ensure_text(home_dir() / raw[len(HOME_PREFIX) :])

    candidate = Path(raw)
    if candidate.is_absolute():
        return _ensure_text(candidate)
    return _ensure_text(root / candidate)


def read_text(path: Path) -> str:
    """Read a whole file as UTF-8 text.

    Reads bytes first so that open/read failures and decoding failures are
    reported separately.

    Raises:
        SourceNotFoundError: The file does not exist.
        SourceDecodeError: The content is not valid UTF-8.
        SourceReadError: Any other I/O failure.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        raise SourceNotFoundError(
            f"failed to open {path}: not found", path=path
        ) from None
    except PermissionError as e:
        raise SourceReadError(
            f"failed to open {path}: permission denied",
            path=path,
            hint="Check file permissions.",
        ) from e
    except OSError as e:
        raise SourceReadError(f"failed to read {path}: {e}", path=path) from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceDecodeError(
            f"failed to read {path}: content is not valid UTF-8 ({e.reason})",
            path=path,
        ) from e
