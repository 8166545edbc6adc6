"""Exception hierarchy for prompt-assembler."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prompt_assembler.config.diagnostics import ConfigDiagnostics


class PromptAssemblerError(Exception):
    """Base exception for all prompt-assembler errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(PromptAssemblerError):
    """Runtime settings for the tool itself are invalid."""


class ResolutionError(PromptAssemblerError):
    """A configured path could not be resolved."""


# --- Source reading ---


class SourceReadError(PromptAssemblerError):
    """A file could not be opened or read."""

    def __init__(
        self, message: str, *, path: str | Path, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.path = Path(path)


class SourceNotFoundError(SourceReadError):
    """The file does not exist."""


class SourceDecodeError(SourceReadError):
    """The file was opened but its content is not valid UTF-8."""


# --- Configuration loading ---


class ConfigLoadError(PromptAssemblerError):
    """Loading the prompt configuration failed."""


class ConfigReadError(ConfigLoadError):
    """A configuration file could not be read. Fatal for the whole load."""

    def __init__(self, message: str, *, path: str | Path) -> None:
        super().__init__(message)
        self.path = Path(path)


class ConfigDirectoryError(ConfigLoadError):
    """The override directory could not be enumerated. Fatal for the whole load."""

    def __init__(self, message: str, *, path: str | Path) -> None:
        super().__init__(message)
        self.path = Path(path)


class InvalidConfigError(ConfigLoadError):
    """One or more configuration files failed validation.

    Carries every error and warning collected across all files.
    """

    def __init__(self, diagnostics: ConfigDiagnostics) -> None:
        count = len(diagnostics.errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(
            f"configuration is invalid ({count} {noun})",
            hint="Run `prompt-assembler validate` to list every issue.",
        )
        self.diagnostics = diagnostics


# --- Rendering ---


class RenderError(PromptAssemblerError):
    """Rendering a prompt failed."""


class UnknownPromptError(RenderError):
    """No prompt with the requested name is configured."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown prompt: {name}")
        self.name = name


class StructuredDataNotAcceptedError(RenderError):
    """A data file was supplied for a sequence prompt."""


class DataRequiredError(RenderError):
    """A template prompt was rendered without a data file."""


class FragmentReadError(RenderError):
    """A fragment of a sequence prompt could not be read."""


class PartNotFoundError(RenderError):
    """A raw part could not be located."""


class DataFileError(RenderError):
    """A structured data file is missing, unreadable, or malformed."""

    def __init__(self, message: str, *, path: str | Path) -> None:
        super().__init__(message)
        self.path = Path(path)


class TemplateNotFoundError(RenderError):
    """The template named by a prompt does not exist under its base directory."""


class TemplateRenderError(RenderError):
    """The template engine failed to compile or render a template."""


class PlaceholderError(RenderError):
    """A fragment contains an invalid placeholder."""


class EmptyPlaceholderError(PlaceholderError):
    """``{}`` without an index."""


class MalformedPlaceholderError(PlaceholderError):
    """``{`` not followed by an index or a second ``{``."""


class UnmatchedBraceError(PlaceholderError):
    """A lone ``}`` that is not part of ``}}``."""


class PlaceholderIndexError(PlaceholderError):
    """An index outside the supported single-digit range."""

    def __init__(self, index: int) -> None:
        super().__init__(
            f"placeholder {{{index}}} is out of range: "
            "positional placeholders support up to 9 arguments"
        )
        self.index = index


class MissingArgumentError(PlaceholderError):
    """A placeholder references an argument that was not supplied."""

    def __init__(self, index: int, supplied: int) -> None:
        super().__init__(
            f"missing argument for placeholder {{{index}}}",
            hint=f"{supplied} argument(s) supplied",
        )
        self.index = index
        self.supplied = supplied
