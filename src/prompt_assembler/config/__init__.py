"""Prompt configuration loading.

Configuration lives in a single directory: ``config.toml`` plus optional
override files in ``conf.d/``. ``load_config`` merges them into one read-only
registry and reports every problem it finds as a ``ConfigIssue``.

Key exports:
- load_config: Resolve a configuration directory into a LoadedConfig
- LoadedConfig: Merged registry plus warnings
- ConfigIssue / ConfigDiagnostics / IssueCode: Diagnostics model
- format_issue / diagnostic_lines: Text rendering of diagnostics
"""

from .builder import build_prompt_spec
from .core import LoadedConfig, load_config
from .diagnostics import (
    ConfigDiagnostics,
    ConfigIssue,
    IssueCode,
    diagnostic_lines,
    format_issue,
)
from .loaders import BASE_CONFIG_NAME, CONFIG_SUFFIX, OVERRIDE_DIR_NAME

__all__ = [
    "BASE_CONFIG_NAME",
    "CONFIG_SUFFIX",
    "OVERRIDE_DIR_NAME",
    "ConfigDiagnostics",
    "ConfigIssue",
    "IssueCode",
    "LoadedConfig",
    "build_prompt_spec",
    "diagnostic_lines",
    "format_issue",
    "load_config",
]
