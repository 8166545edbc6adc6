"""Domain types: prompt specifications, metadata, and render inputs.

Everything here is immutable. A loaded registry of ``PromptSpec`` values is
shared read-only by the assembler for the rest of the process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import ClassVar, Literal, TypeAlias

from prompt_assembler.errors import DataFileError

DataFormat = Literal["json", "toml"]

_DATA_SUFFIXES: dict[str, DataFormat] = {".json": "json", ".toml": "toml"}


class VariableKind(str, Enum):
    """Declared type of a prompt variable."""

    STRING = "string"
    PATH = "path"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True, slots=True)
class PromptVariable:
    """Descriptive metadata for one variable a prompt expects."""

    name: str
    required: bool = False
    kind: VariableKind = VariableKind.STRING
    description: str | None = None


@dataclass(frozen=True, slots=True)
class PromptSource:
    """Where a prompt was defined."""

    path: Path
    #: Best effort; ``None`` when the file could not be stat'ed.
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class PromptMetadata:
    """Descriptive fields attached to a prompt. Never affects rendering."""

    source: PromptSource
    description: str | None = None
    tags: tuple[str, ...] = ()
    variables: tuple[PromptVariable, ...] = ()
    stdin_supported: bool | None = None


@dataclass(frozen=True, slots=True)
class SequenceKind:
    """Ordered plain-text fragments, relative to the prompt's base directory."""

    files: tuple[Path, ...]

    label: ClassVar[str] = "sequence"


@dataclass(frozen=True, slots=True)
class TemplateKind:
    """A single template file, relative to the prompt's base directory."""

    template: Path

    label: ClassVar[str] = "template"


PromptKind: TypeAlias = SequenceKind | TemplateKind


@dataclass(frozen=True, slots=True)
class PromptSpec:
    """One prompt's resolved definition."""

    kind: PromptKind
    #: Effective base directory: the override if set, else the default in
    #: force when the prompt was defined.
    base_dir: Path
    metadata: PromptMetadata
    prompt_path_override: Path | None = None

    @property
    def stdin_supported(self) -> bool:
        """Explicit flag if declared, else true for sequence prompts."""
        if self.metadata.stdin_supported is not None:
            return self.metadata.stdin_supported
        return isinstance(self.kind, SequenceKind)


@dataclass(frozen=True, slots=True)
class StructuredData:
    """Reference to an external data file used as template context."""

    format: DataFormat
    path: Path

    @classmethod
    def json(cls, path: str | Path) -> StructuredData:
        return cls("json", Path(path))

    @classmethod
    def toml(cls, path: str | Path) -> StructuredData:
        return cls("toml", Path(path))

    @classmethod
    def from_path(cls, path: str | Path) -> StructuredData:
        """Select the format from the file extension (case-insensitive)."""
        p = Path(path)
        fmt = _DATA_SUFFIXES.get(p.suffix.lower())
        if fmt is None:
            raise DataFileError("data file must use JSON or TOML format", path=p)
        return cls(fmt, p)

    @staticmethod
    def looks_like_data_file(value: str) -> bool:
        return Path(value).suffix.lower() in _DATA_SUFFIXES


@dataclass(frozen=True, slots=True)
class PromptPart:
    """Raw, unsubstituted content of one prompt file."""

    path: Path
    content: str


@dataclass(frozen=True, slots=True)
class PromptProfile:
    """Raw content behind a prompt, for inspection.

    Sequence prompts list every fragment in ``parts``; template prompts set
    ``template``. ``content`` is the concatenation of what was read.
    """

    kind: Literal["sequence", "template"]
    content: str
    parts: tuple[PromptPart, ...] = field(default=())
    template: PromptPart | None = None
