"""Layered configuration resolution.

Resolution order is ``config.toml`` then ``conf.d/*.toml`` in lexical filename
order; later definitions of a prompt name replace earlier ones.

Content problems (TOML syntax, schema violations, invalid prompts) are
collected across every file and reported together once all files have been
visited. Structural I/O problems (unreadable file, unreadable ``conf.d``) abort
the load immediately.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import tomllib
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import ValidationError

from prompt_assembler._result import Failure
from prompt_assembler.errors import InvalidConfigError, ResolutionError
from prompt_assembler.paths import resolve_path
from prompt_assembler.types import PromptSource, PromptSpec

from .builder import build_prompt_spec
from .diagnostics import ConfigIssue, IssueCode, IssueCollector
from .loaders import (
    base_config_path,
    find_table_line,
    last_modified,
    list_override_files,
    read_config_source,
)
from .schema import RawConfigFile, describe_validation_error

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedConfig:
    """Result of a successful load.

    ``prompts`` is a read-only view in definition order. ``warnings`` holds
    non-fatal issues such as overridden prompt names.
    """

    root: Path
    default_prompt_path: Path
    prompts: Mapping[str, PromptSpec]
    warnings: tuple[ConfigIssue, ...] = ()


@dataclass
class _MergeState:
    """Running state threaded through the file loop."""

    default_base: Path
    prompts: dict[str, PromptSpec] = field(default_factory=dict)
    issues: IssueCollector = field(default_factory=IssueCollector)


def load_config(root: str | Path) -> LoadedConfig:
    """Load and merge every configuration file under ``root``.

    Args:
        root: Configuration directory. Relative paths in the files resolve
            against it, and it is the initial default base directory.

    Returns:
        LoadedConfig with the merged registry and any warnings.

    Raises:
        ConfigReadError: A configuration file could not be read.
        ConfigDirectoryError: ``conf.d`` could not be enumerated.
        InvalidConfigError: At least one error was collected; carries all
            errors and warnings.
    """
    root = Path(root)
    state = _MergeState(default_base=root)

    base = base_config_path(root)
    if base.exists():
        _merge_file(root, base, state)
    else:
        log.debug("No base configuration at %s", base)

    for path in list_override_files(root):
        _merge_file(root, path, state)

    diagnostics = state.issues.freeze()
    if not diagnostics.is_valid:
        log.debug(
            "Configuration under %s is invalid: %d error(s), %d warning(s)",
            root,
            len(diagnostics.errors),
            len(diagnostics.warnings),
        )
        raise InvalidConfigError(diagnostics)

    log.debug("Loaded %d prompt(s) from %s", len(state.prompts), root)
    return LoadedConfig(
        root=root,
        default_prompt_path=state.default_base,
        prompts=MappingProxyType(state.prompts),
        warnings=diagnostics.warnings,
    )


def _merge_file(root: Path, path: Path, state: _MergeState) -> None:
    """Fold one file into ``state``, recording issues instead of raising."""
    text = read_config_source(path)
    issues = state.issues

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        issues.error(IssueCode.PARSE_ERROR, str(e), path)
        return

    try:
        parsed = RawConfigFile.model_validate(data)
    except ValidationError as e:
        issues.error(IssueCode.PARSE_ERROR, describe_validation_error(e), path)
        return

    if parsed.prompt_path is not None:
        try:
            state.default_base = resolve_path(root, parsed.prompt_path)
        except ResolutionError as e:
            # Keep the previous default; this file's prompts still load.
            message = f"invalid prompt_path: {e}"
            issues.error(IssueCode.INVALID_PROMPT, message, path)

    source = PromptSource(path=path, last_modified=last_modified(path))
    for name, raw in parsed.prompt.items():
        line = find_table_line(text, name)
        result = build_prompt_spec(
            name,
            raw,
            root=root,
            default_base=state.default_base,
            source=source,
            line=line,
        )
        if isinstance(result, Failure):
            issues.add_error(result.error)
            continue

        previous = state.prompts.get(name)
        if previous is not None:
            issues.warn(
                IssueCode.OVERRIDE,
                f"prompt '{name}' overrides definition from "
                f"{previous.metadata.source.path}",
                path,
                line,
            )
            log.debug("Prompt %r from %s replaces earlier definition", name, path)
        state.prompts[name] = result.value

    log.debug("Merged %s (%d prompt table(s))", path, len(parsed.prompt))
