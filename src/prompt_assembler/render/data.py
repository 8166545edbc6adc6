"""Structured data loading for template context.

JSON and TOML are parsed into the same plain tree (dict / list / str / int /
float / bool / None) so templates never see format-specific values. TOML
date and time values become ISO-8601 strings.
"""

from __future__ import annotations

from datetime import date, datetime, time
import json
import logging
import tomllib
from typing import TYPE_CHECKING, Any

from prompt_assembler.errors import DataFileError, SourceReadError
from prompt_assembler.paths import read_text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prompt_assembler.types import StructuredData

log = logging.getLogger(__name__)

#: Context key for a data root that is not a mapping.
VALUE_KEY = "value"
#: Context key for positional arguments.
ARGS_KEY = "_args"


def load_structured_data(data: StructuredData) -> Any:
    """Read and parse a data file into a plain tree.

    Raises:
        DataFileError: The file is missing, unreadable, or malformed.
    """
    try:
        content = read_text(data.path)
    except SourceReadError as e:
        raise DataFileError(
            f"failed to load data file {data.path}: {e}", path=data.path
        ) from e

    if data.format == "json":
        try:
            tree = json.loads(content)
        except json.JSONDecodeError as e:
            raise DataFileError(
                f"failed to parse JSON data from {data.path}: {e}", path=data.path
            ) from e
    else:
        try:
            tree = _normalize(tomllib.loads(content))
        except tomllib.TOMLDecodeError as e:
            raise DataFileError(
                f"failed to parse TOML data from {data.path}: {e}", path=data.path
            ) from e

    log.debug("Loaded %s data from %s", data.format, data.path)
    return tree


def build_context(tree: Any, args: Sequence[str] = ()) -> dict[str, Any]:
    """Turn a parsed data tree and positional arguments into a template context.

    A non-mapping root is wrapped under ``value``; non-empty ``args`` are
    exposed as a list under ``_args``.
    """
    context = dict(tree) if isinstance(tree, dict) else {VALUE_KEY: tree}
    if args:
        context[ARGS_KEY] = list(args)
    return context


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    return value
