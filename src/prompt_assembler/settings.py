"""Runtime settings for the prompt-assembler tool.

Settings cover the tool itself, not the prompt library: where the
configuration directory lives and how verbose logging is. Values resolve in
this order (highest first):

1. Explicit overrides (e.g. CLI flags)
2. ``PROMPT_ASSEMBLER_*`` environment variables (after an optional ``.env``)
3. Defaults

All values pass through the ``Settings`` model; validation failures surface
as ``ConfigurationError`` with a hint.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from prompt_assembler.errors import ConfigurationError
from prompt_assembler.paths import home_dir

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

ENV_PREFIX = "PROMPT_ASSEMBLER_"
APP_DIR_NAME = "prompt-assembler"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_DOTENV_LOADED: bool = False


def default_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/prompt-assembler``, else ``~/.config/prompt-assembler``."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return home_dir() / ".config" / APP_DIR_NAME


class Settings(BaseModel):
    """Validated tool settings."""

    config_dir: Path = Field(default_factory=default_config_dir)
    log_level: LogLevel = Field(default="WARNING")

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("config_dir", mode="before")
    @classmethod
    def expand_config_dir(cls, v: Any) -> Any:
        """Expand a leading ``~`` and reject empty values."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("config_dir must not be empty")
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once per process."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


def load_env() -> dict[str, Any]:
    """Read ``PROMPT_ASSEMBLER_*`` variables that name a settings field."""
    config: dict[str, Any] = {}
    for field_name in Settings.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            config[field_name] = value
    return config


def load_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Resolve settings from overrides, environment, and defaults.

    Overrides whose value is ``None`` are ignored, so unset CLI flags can be
    passed through as-is.

    Raises:
        ConfigurationError: A value failed validation.
    """
    _try_load_dotenv()

    merged = load_env()
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        msg = str(err.get("msg", ""))
        if msg.startswith("Value error, "):
            msg = msg[13:]
        raise ConfigurationError(
            f"invalid setting '{field}': {msg}",
            hint=f"Check {ENV_PREFIX}{field.upper()} or the matching CLI flag.",
        ) from e

    log.debug("Resolved settings: %s", settings)
    return settings
