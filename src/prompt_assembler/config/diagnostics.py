"""Configuration diagnostics.

Loading collects issues instead of stopping at the first bad file. Each issue
records a stable ``code``, the file it came from, and an optional line. Issues
render both as one line of text and as a plain ``dict`` for JSON output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class IssueCode(str, Enum):
    """Classification of a configuration issue."""

    DUPLICATE_VAR = "duplicate_var"
    OVERRIDE = "override"
    INVALID_PROMPT = "invalid_prompt"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True, slots=True)
class ConfigIssue:
    """A single problem found while loading configuration."""

    code: IssueCode
    message: str
    path: Path
    line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"file": str(self.path)}
        if self.line is not None:
            out["line"] = self.line
        out["code"] = self.code.value
        out["message"] = self.message
        return out


@dataclass(frozen=True, slots=True)
class ConfigDiagnostics:
    """Errors and warnings collected across every file of one load."""

    errors: tuple[ConfigIssue, ...] = ()
    warnings: tuple[ConfigIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


@dataclass
class IssueCollector:
    """Mutable accumulator threaded through a single load."""

    errors: list[ConfigIssue] = field(default_factory=list)
    warnings: list[ConfigIssue] = field(default_factory=list)

    def error(
        self, code: IssueCode, message: str, path: Path, line: int | None = None
    ) -> None:
        self.errors.append(ConfigIssue(code, message, path, line))

    def add_error(self, issue: ConfigIssue) -> None:
        """Record an issue built elsewhere as an error."""
        self.errors.append(issue)

    def warn(
        self, code: IssueCode, message: str, path: Path, line: int | None = None
    ) -> None:
        self.warnings.append(ConfigIssue(code, message, path, line))

    def freeze(self) -> ConfigDiagnostics:
        return ConfigDiagnostics(
            errors=tuple(self.errors), warnings=tuple(self.warnings)
        )


def format_issue(issue: ConfigIssue) -> str:
    """Format an issue as ``path[:line]: message``."""
    if issue.line is not None:
        return f"{issue.path}:{issue.line}: {issue.message}"
    return f"{issue.path}: {issue.message}"


def diagnostic_lines(diagnostics: ConfigDiagnostics) -> list[str]:
    """One line per issue, errors first, each tagged with level and code."""
    lines: list[str] = []
    levels = (("error", diagnostics.errors), ("warning", diagnostics.warnings))
    for level, issues in levels:
        for issue in issues:
            lines.append(f"{level}: {format_issue(issue)} ({issue.code.value})")
    return lines
