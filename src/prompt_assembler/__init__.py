"""prompt-assembler: layered prompt configuration and rendering.

Public API:
    - PromptAssembler: Load a configuration directory and render prompts
    - load_config: Resolve a configuration directory into a registry
    - StructuredData: Data file reference for template prompts
    - PromptSpec / PromptMetadata: Resolved prompt definitions
"""

from __future__ import annotations

import logging

from prompt_assembler.assembler import PromptAssembler
from prompt_assembler.config import (
    ConfigDiagnostics,
    ConfigIssue,
    IssueCode,
    LoadedConfig,
    load_config,
)
from prompt_assembler.errors import (
    ConfigLoadError,
    ConfigurationError,
    InvalidConfigError,
    PromptAssemblerError,
    RenderError,
)
from prompt_assembler.types import (
    PromptKind,
    PromptMetadata,
    PromptPart,
    PromptProfile,
    PromptSource,
    PromptSpec,
    PromptVariable,
    SequenceKind,
    StructuredData,
    TemplateKind,
    VariableKind,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("prompt-assembler")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("prompt_assembler").addHandler(logging.NullHandler())

__all__ = [
    "ConfigDiagnostics",
    "ConfigIssue",
    "ConfigLoadError",
    "ConfigurationError",
    "InvalidConfigError",
    "IssueCode",
    "LoadedConfig",
    "PromptAssembler",
    "PromptAssemblerError",
    "PromptKind",
    "PromptMetadata",
    "PromptPart",
    "PromptProfile",
    "PromptSource",
    "PromptSpec",
    "PromptVariable",
    "RenderError",
    "SequenceKind",
    "StructuredData",
    "TemplateKind",
    "VariableKind",
    "__version__",
    "load_config",
]
