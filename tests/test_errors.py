from __future__ import annotations

from pathlib import Path

import pytest

from prompt_assembler.config import ConfigDiagnostics, ConfigIssue, IssueCode
from prompt_assembler.errors import (
    ConfigLoadError,
    ConfigReadError,
    DataFileError,
    FragmentReadError,
    InvalidConfigError,
    MissingArgumentError,
    PlaceholderError,
    PlaceholderIndexError,
    PromptAssemblerError,
    RenderError,
    SourceNotFoundError,
    SourceReadError,
    UnknownPromptError,
)

pytestmark = pytest.mark.unit


def test_base_error_carries_hint() -> None:
    err = PromptAssemblerError("boom", hint="do this")
    assert str(err) == "boom"
    assert err.hint == "do this"
    assert PromptAssemblerError("fail").hint is None


def test_source_errors_carry_path() -> None:
    err = SourceNotFoundError("gone", path="/x/y.md")
    assert isinstance(err, SourceReadError)
    assert err.path == Path("/x/y.md")


def test_subclass_hierarchy() -> None:
    """Load and render failures are catchable by family and by the base class."""
    assert issubclass(ConfigReadError, ConfigLoadError)
    assert issubclass(InvalidConfigError, ConfigLoadError)
    assert issubclass(MissingArgumentError, PlaceholderError)
    assert issubclass(PlaceholderError, RenderError)
    for cls in (ConfigLoadError, RenderError, SourceReadError):
        assert issubclass(cls, PromptAssemblerError)
    assert not issubclass(FragmentReadError, ConfigLoadError)


def test_invalid_config_error_counts_errors() -> None:
    issue = ConfigIssue(IssueCode.PARSE_ERROR, "bad", Path("/c.toml"))
    one = InvalidConfigError(ConfigDiagnostics(errors=(issue,)))
    two = InvalidConfigError(ConfigDiagnostics(errors=(issue, issue)))
    assert str(one) == "configuration is invalid (1 error)"
    assert str(two) == "configuration is invalid (2 errors)"
    assert one.diagnostics.errors == (issue,)
    assert "validate" in (one.hint or "")


def test_render_error_messages() -> None:
    assert str(UnknownPromptError("x")) == "unknown prompt: x"
    assert "missing argument for placeholder {4}" in str(MissingArgumentError(4, 2))
    assert "up to 9 arguments" in str(PlaceholderIndexError(12))


def test_data_file_error_path() -> None:
    assert DataFileError("bad", path="d.json").path == Path("d.json")
