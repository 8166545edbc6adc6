"""Building a PromptSpec from one raw prompt table."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from prompt_assembler._result import Failure, Success
from prompt_assembler.config.builder import build_prompt_spec
from prompt_assembler.config.diagnostics import IssueCode
from prompt_assembler.types import (
    PromptSource,
    SequenceKind,
    TemplateKind,
    VariableKind,
)

pytestmark = pytest.mark.unit

ROOT = Path("/cfg")
DEFAULT_BASE = Path("/cfg/prompts")
SOURCE = PromptSource(path=ROOT / "config.toml")


def _build(raw: dict[str, Any], name: str = "p", line: int | None = 3):
    return build_prompt_spec(
        name, raw, root=ROOT, default_base=DEFAULT_BASE, source=SOURCE, line=line
    )


def _issue(raw: dict[str, Any]):
    result = _build(raw)
    assert isinstance(result, Failure)
    return result.error


class TestKinds:
    def test_sequence(self):
        result = _build({"prompts": ["a.md", "sub/b.md"]})
        assert isinstance(result, Success)
        spec = result.value
        assert spec.kind == SequenceKind(files=(Path("a.md"), Path("sub/b.md")))
        assert spec.base_dir == DEFAULT_BASE
        assert spec.prompt_path_override is None

    def test_template(self):
        result = _build({"template": "t.j2"})
        assert isinstance(result, Success)
        assert result.value.kind == TemplateKind(template=Path("t.j2"))

    def test_both_kinds_are_exclusive(self):
        issue = _issue({"prompts": ["a.md"], "template": "t.j2"})
        assert issue.code is IssueCode.INVALID_PROMPT
        assert "prompts and template are exclusive options" in issue.message

    def test_neither_kind(self):
        issue = _issue({"description": "nothing to render"})
        assert issue.code is IssueCode.INVALID_PROMPT
        assert "must define either 'prompts' or 'template'" in issue.message

    def test_empty_sequence(self):
        issue = _issue({"prompts": []})
        assert issue.code is IssueCode.INVALID_PROMPT
        assert "prompt sequence cannot be empty" in issue.message

    def test_blank_template(self):
        issue = _issue({"template": "  "})
        assert "template path cannot be empty" in issue.message


class TestPromptPathOverride:
    def test_relative_override_resolves_against_root(self):
        result = _build({"prompts": ["a.md"], "prompt_path": "special"})
        assert isinstance(result, Success)
        assert result.value.base_dir == ROOT / "special"
        assert result.value.prompt_path_override == ROOT / "special"

    def test_absolute_override(self):
        result = _build({"template": "t.j2", "prompt_path": "/srv/tpl"})
        assert isinstance(result, Success)
        assert result.value.base_dir == Path("/srv/tpl")

    def test_unresolvable_override(self, monkeypatch):
        def _no_home(cls):
            raise RuntimeError("no home")

        monkeypatch.setattr(Path, "home", classmethod(_no_home))
        issue = _issue({"prompts": ["a.md"], "prompt_path": "~/x"})
        assert issue.code is IssueCode.INVALID_PROMPT
        assert "invalid prompt_path" in issue.message


class TestVariables:
    def test_variables_are_parsed(self):
        raw = {
            "prompts": ["a.md"],
            "vars": [
                {"name": "topic", "required": True, "description": "What to cover"},
                {"name": "out", "type": "path"},
            ],
        }
        result = _build(raw)
        assert isinstance(result, Success)
        topic, out = result.value.metadata.variables
        assert topic.name == "topic"
        assert topic.required is True
        assert topic.kind is VariableKind.STRING
        assert topic.description == "What to cover"
        assert out.kind is VariableKind.PATH
        assert out.required is False

    def test_duplicate_variable(self):
        raw = {"prompts": ["a.md"], "vars": [{"name": "seed"}, {"name": "seed"}]}
        issue = _issue(raw)
        assert issue.code is IssueCode.DUPLICATE_VAR
        assert "seed" in issue.message

    def test_unknown_variable_type(self):
        raw = {"prompts": ["a.md"], "vars": [{"name": "n", "type": "float"}]}
        issue = _issue(raw)
        assert issue.code is IssueCode.INVALID_PROMPT
        assert "unknown type 'float'" in issue.message

    def test_kind_errors_win_over_variable_errors(self):
        raw = {"vars": [{"name": "seed"}, {"name": "seed"}]}
        assert _issue(raw).code is IssueCode.INVALID_PROMPT


class TestShape:
    def test_unknown_key(self):
        issue = _issue({"prompts": ["a.md"], "colour": "blue"})
        assert issue.code is IssueCode.INVALID_PROMPT
        assert "unknown key 'colour'" in issue.message

    def test_wrong_value_type(self):
        issue = _issue({"prompts": "a.md"})
        assert issue.code is IssueCode.INVALID_PROMPT
        assert "prompts" in issue.message

    def test_issue_carries_name_source_and_line(self):
        issue = _issue({"prompts": []})
        assert issue.message.startswith("prompt 'p': ")
        assert issue.path == SOURCE.path
        assert issue.line == 3


class TestMetadata:
    def test_metadata_fields(self):
        raw = {
            "prompts": ["a.md"],
            "description": "Review a change",
            "tags": ["code", "review", "code"],
            "stdin_supported": False,
        }
        result = _build(raw)
        assert isinstance(result, Success)
        meta = result.value.metadata
        assert meta.description == "Review a change"
        assert meta.tags == ("code", "review")
        assert meta.stdin_supported is False
        assert meta.source is SOURCE
        assert result.value.stdin_supported is False

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ({"prompts": ["a.md"]}, True),
            ({"template": "t.j2"}, False),
            ({"template": "t.j2", "stdin_supported": True}, True),
        ],
    )
    def test_effective_stdin_support(self, raw, expected):
        result = _build(raw)
        assert isinstance(result, Success)
        assert result.value.stdin_supported is expected
