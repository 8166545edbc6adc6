"""Pydantic schema for raw configuration files.

The models mirror the TOML layout one-to-one and forbid unknown keys. They only
check shape and value types; cross-field rules (exclusive kinds, duplicate
variables, path resolution) live in ``builder``.

File layout::

    prompt_path = "~/prompts"

    [prompt.<name>]
    prompt_path = "..."          # optional override
    prompts = ["a.md", "b.md"]   # or: template = "t.j2"
    description = "..."
    tags = ["..."]
    stdin_supported = true
    vars = [{ name = "x", required = true, type = "string", description = "..." }]
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class RawVariable(BaseModel):
    """One entry of a prompt's ``vars`` list."""

    model_config = ConfigDict(extra="forbid", strict=True)

    name: str = Field(min_length=1)
    required: bool = False
    # Checked against VariableKind by the builder so the message can name it.
    type: str = "string"
    description: str | None = None


class RawPrompt(BaseModel):
    """One ``[prompt.<name>]`` table."""

    model_config = ConfigDict(extra="forbid", strict=True)

    prompt_path: str | None = None
    prompts: list[str] | None = None
    template: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    vars: list[RawVariable] = Field(default_factory=list)
    stdin_supported: bool | None = None


class RawConfigFile(BaseModel):
    """Top level of a configuration file.

    Prompt tables are kept as plain mappings here so that one malformed prompt
    does not hide the others; each is validated separately as ``RawPrompt``.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    prompt_path: str | None = None
    prompt: dict[str, dict[str, Any]] = Field(default_factory=dict)


def describe_validation_error(exc: ValidationError) -> str:
    """Compact, single-line description of the first validation error."""
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    if err.get("type") == "extra_forbidden":
        return f"unknown key '{loc}'"

    msg = err.get("msg", "invalid value")
    # Remove "Value error, " prefix if present (Pydantic standard wrapper)
    if msg.startswith("Value error, "):
        msg = msg[13:]
    return f"{loc}: {msg}" if loc else msg
