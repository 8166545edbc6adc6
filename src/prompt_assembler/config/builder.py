"""Validate one raw prompt table into a ``PromptSpec``.

Checks run in a fixed order and stop at the first failure, so each invalid
prompt reports exactly one issue:

1. table shape (unknown keys, wrong value types)
2. ``prompt_path`` resolution
3. exactly one of ``prompts`` / ``template``
4. non-empty sequence / template path
5. variable types, then variable name uniqueness
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from prompt_assembler._result import Failure, Result, Success
from prompt_assembler.errors import ResolutionError
from prompt_assembler.paths import resolve_path
from prompt_assembler.types import (
    PromptKind,
    PromptMetadata,
    PromptSource,
    PromptSpec,
    PromptVariable,
    SequenceKind,
    TemplateKind,
    VariableKind,
)

from .diagnostics import ConfigIssue, IssueCode
from .schema import RawPrompt, RawVariable, describe_validation_error

if TYPE_CHECKING:
    from collections.abc import Mapping

_VARIABLE_KINDS = {kind.value: kind for kind in VariableKind}


def build_prompt_spec(
    name: str,
    raw: Mapping[str, Any],
    *,
    root: Path,
    default_base: Path,
    source: PromptSource,
    line: int | None = None,
) -> Result[PromptSpec, ConfigIssue]:
    """Build a ``PromptSpec`` from a raw ``[prompt.<name>]`` table.

    Args:
        name: Prompt name (the table key).
        raw: Parsed table contents.
        root: Configuration root for relative paths.
        default_base: Base directory in force for prompts without an override.
        source: Provenance of the defining file.
        line: Line of the table header, attached to any issue.

    Returns:
        ``Success`` with the spec, or ``Failure`` with a single issue.
    """

    def fail(code: IssueCode, message: str) -> Failure[ConfigIssue]:
        issue = ConfigIssue(code, f"prompt '{name}': {message}", source.path, line)
        return Failure(issue)

    try:
        prompt = RawPrompt.model_validate(raw)
    except ValidationError as e:
        return fail(IssueCode.INVALID_PROMPT, describe_validation_error(e))

    override: Path | None = None
    if prompt.prompt_path is not None:
        try:
            override = resolve_path(root, prompt.prompt_path)
        except ResolutionError as e:
            return fail(IssueCode.INVALID_PROMPT, f"invalid prompt_path: {e}")

    kind: PromptKind
    match (prompt.prompts, prompt.template):
        case (None, None):
            return fail(
                IssueCode.INVALID_PROMPT,
                "prompt must define either 'prompts' or 'template'",
            )
        case (files, None):
            if not files:
                return fail(IssueCode.INVALID_PROMPT, "prompt sequence cannot be empty")
            kind = SequenceKind(files=tuple(Path(f) for f in files))
        case (None, template):
            if not template.strip():
                return fail(IssueCode.INVALID_PROMPT, "template path cannot be empty")
            kind = TemplateKind(template=Path(template))
        case _:
            return fail(
                IssueCode.INVALID_PROMPT, "prompts and template are exclusive options"
            )

    variables = _build_variables(prompt.vars)
    if isinstance(variables, Failure):
        code, message = variables.error
        return fail(code, message)

    metadata = PromptMetadata(
        source=source,
        description=prompt.description,
        tags=tuple(dict.fromkeys(prompt.tags)),
        variables=variables.value,
        stdin_supported=prompt.stdin_supported,
    )
    return Success(
        PromptSpec(
            kind=kind,
            base_dir=override if override is not None else default_base,
            metadata=metadata,
            prompt_path_override=override,
        )
    )


def _build_variables(
    raw_vars: list[RawVariable],
) -> Result[tuple[PromptVariable, ...], tuple[IssueCode, str]]:
    seen: set[str] = set()
    out: list[PromptVariable] = []
    for var in raw_vars:
        kind = _VARIABLE_KINDS.get(var.type)
        if kind is None:
            allowed = ", ".join(_VARIABLE_KINDS)
            return Failure(
                (
                    IssueCode.INVALID_PROMPT,
                    f"variable '{var.name}' has unknown type '{var.type}' "
                    f"(expected one of: {allowed})",
                )
            )
        if var.name in seen:
            return Failure(
                (IssueCode.DUPLICATE_VAR, f"duplicate variable '{var.name}'")
            )
        seen.add(var.name)
        out.append(
            PromptVariable(
                name=var.name,
                required=var.required,
                kind=kind,
                description=var.description,
            )
        )
    return Success(tuple(out))
