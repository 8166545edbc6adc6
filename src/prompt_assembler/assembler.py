"""Prompt assembler facade.

Overview
--------
``PromptAssembler`` owns one loaded, read-only registry and renders prompts
from it. Rendering dispatches on the prompt kind:

- sequence: read each fragment from the base directory, substitute ``{N}``
  placeholders from the positional arguments, normalize each fragment to end
  with one newline, and concatenate.
- template: render the template against a structured data file.

Render failures are raised immediately; nothing is validated ahead of time
beyond what loading already checked.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from prompt_assembler.config import load_config
from prompt_assembler.errors import (
    DataRequiredError,
    FragmentReadError,
    PartNotFoundError,
    SourceReadError,
    StructuredDataNotAcceptedError,
    UnknownPromptError,
)
from prompt_assembler.paths import read_text
from prompt_assembler.render import (
    ensure_trailing_newline,
    render_template,
    substitute_placeholders,
)
from prompt_assembler.types import (
    PromptPart,
    PromptProfile,
    TemplateKind,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from prompt_assembler.config import ConfigIssue, LoadedConfig
    from prompt_assembler.types import (
        PromptKind,
        PromptMetadata,
        PromptSpec,
        StructuredData,
    )

log = logging.getLogger(__name__)


class PromptAssembler:
    """Render prompts from a loaded configuration.

    Usage:
        assembler = PromptAssembler.from_directory(Path("~/.config/prompt-assembler"))
        text = assembler.render_prompt("review", ["PR-42"])
    """

    def __init__(self, config: LoadedConfig) -> None:
        self._config = config

    @classmethod
    def from_directory(cls, root: str | Path) -> PromptAssembler:
        """Load configuration from ``root``.

        Raises:
            ConfigReadError: A configuration file could not be read.
            ConfigDirectoryError: ``conf.d`` could not be enumerated.
            InvalidConfigError: Validation failed; carries all diagnostics.
        """
        return cls(load_config(root))

    # --- Registry queries ---

    @property
    def config(self) -> LoadedConfig:
        return self._config

    @property
    def warnings(self) -> tuple[ConfigIssue, ...]:
        """Non-fatal issues recorded while loading."""
        return self._config.warnings

    def has_prompts(self) -> bool:
        return bool(self._config.prompts)

    def prompt_specs(self) -> Mapping[str, PromptSpec]:
        """The full registry, in definition order (read-only)."""
        return self._config.prompts

    def prompt_spec(self, name: str) -> PromptSpec | None:
        return self._config.prompts.get(name)

    def prompt_kind(self, name: str) -> PromptKind | None:
        spec = self._config.prompts.get(name)
        return spec.kind if spec is not None else None

    def available_prompts(self) -> dict[str, PromptKind]:
        """Prompt names mapped to their kind, sorted by name."""
        return {
            name: self._config.prompts[name].kind
            for name in sorted(self._config.prompts)
        }

    def prompt_metadata(self) -> dict[str, PromptMetadata]:
        """Metadata of every prompt, in definition order."""
        return {name: spec.metadata for name, spec in self._config.prompts.items()}

    def stdin_supported(self, name: str) -> bool:
        return self._require(name).stdin_supported

    # --- Rendering ---

    def render_prompt(
        self,
        name: str,
        args: Sequence[str] = (),
        data: StructuredData | None = None,
    ) -> str:
        """Render the prompt ``name``.

        Args:
            name: Prompt name.
            args: Positional arguments. Sequence prompts substitute them into
                ``{N}`` placeholders; template prompts see them as ``_args``.
            data: Structured data file; required for template prompts and
                rejected for sequence prompts.

        Raises:
            UnknownPromptError: No such prompt.
            StructuredDataNotAcceptedError: ``data`` given for a sequence prompt.
            DataRequiredError: ``data`` missing for a template prompt.
            FragmentReadError: A fragment could not be read.
            PlaceholderError: A fragment has an invalid or unsatisfied placeholder.
            TemplateNotFoundError / TemplateRenderError / DataFileError:
                Template rendering failed.
        """
        spec = self._require(name)

        if isinstance(spec.kind, TemplateKind):
            if data is None:
                raise DataRequiredError(
                    f"prompt '{name}' requires a data file (JSON or TOML)",
                    hint="Pass a .json or .toml file as the first argument.",
                )
            return render_template(name, spec.base_dir, spec.kind.template, data, args)

        if data is not None:
            raise StructuredDataNotAcceptedError(
                f"prompt '{name}' does not accept structured data"
            )
        rendered: list[str] = []
        for file in spec.kind.files:
            content = self._read_fragment(name, spec.base_dir, file)
            text = substitute_placeholders(content, args)
            rendered.append(ensure_trailing_newline(text))
        log.debug("Rendered %d fragment(s) for prompt %r", len(rendered), name)
        return "".join(rendered)

    def prompt_profile(self, name: str) -> PromptProfile:
        """Read the raw files behind ``name`` without substitution.

        Raises:
            UnknownPromptError: No such prompt.
            FragmentReadError: A file could not be read.
        """
        spec = self._require(name)
        if isinstance(spec.kind, TemplateKind):
            path = spec.base_dir / spec.kind.template
            part = PromptPart(
                path=path,
                content=self._read_fragment(name, spec.base_dir, spec.kind.template),
            )
            return PromptProfile(kind="template", content=part.content, template=part)

        parts = tuple(
            PromptPart(
                path=spec.base_dir / file,
                content=self._read_fragment(name, spec.base_dir, file),
            )
            for file in spec.kind.files
        )
        return PromptProfile(
            kind="sequence",
            content="".join(part.content for part in parts),
            parts=parts,
        )

    def assemble_parts(self, working_dir: Path, part_names: Sequence[str]) -> str:
        """Concatenate raw files by name, without placeholder substitution.

        Each name is tried as an absolute path, then relative to
        ``working_dir``, then relative to the default prompt directory.

        Raises:
            PartNotFoundError: No names given, or a part cannot be located.
            FragmentReadError: A located part could not be read.
        """
        if not part_names:
            raise PartNotFoundError("no parts provided")

        output: list[str] = []
        for raw in part_names:
            path = self._resolve_part(working_dir, raw)
            try:
                output.append(read_text(path))
            except SourceReadError as e:
                raise FragmentReadError(
                    f"failed to read part '{raw}' at {path}: {e}"
                ) from e
        return "".join(output)

    # --- Internal helpers ---

    def _require(self, name: str) -> PromptSpec:
        spec = self._config.prompts.get(name)
        if spec is None:
            raise UnknownPromptError(name)
        return spec

    def _resolve_part(self, working_dir: Path, raw: str) -> Path:
        candidate = Path(raw)
        if candidate.is_absolute():
            if candidate.exists():
                return candidate
            raise PartNotFoundError(f"missing part '{raw}'")

        for base in (working_dir, self._config.default_prompt_path):
            path = base / candidate
            if path.exists():
                return path
        raise PartNotFoundError(f"missing part '{raw}'")

    @staticmethod
    def _read_fragment(prompt_name: str, base_dir: Path, file: Path) -> str:
        try:
            return read_text(base_dir / file)
        except SourceReadError as e:
            raise FragmentReadError(
                f"failed to read fragment '{file.as_posix()}' for prompt "
                f"'{prompt_name}': {e}"
            ) from e
