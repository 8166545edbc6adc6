"""Structured data loading and template context construction."""

from __future__ import annotations

import pytest

from prompt_assembler.errors import DataFileError
from prompt_assembler.render.data import (
    ARGS_KEY,
    VALUE_KEY,
    build_context,
    load_structured_data,
)
from prompt_assembler.types import StructuredData

pytestmark = pytest.mark.unit


def test_json_and_toml_produce_the_same_tree(write_file):
    json_path = write_file("data.json", '{"name": "Ada", "tags": ["x", "y"], "n": 3}')
    toml_path = write_file(
        "data.toml",
        """\
        name = "Ada"
        tags = ["x", "y"]
        n = 3
        """,
    )
    assert load_structured_data(StructuredData.json(json_path)) == load_structured_data(
        StructuredData.toml(toml_path)
    )


def test_toml_dates_become_iso_strings(write_file):
    path = write_file(
        "data.toml",
        """\
        day = 2024-05-01
        [nested]
        at = 2024-05-01T10:30:00Z
        """,
    )
    tree = load_structured_data(StructuredData.toml(path))
    assert tree["day"] == "2024-05-01"
    assert tree["nested"]["at"] == "2024-05-01T10:30:00+00:00"


def test_missing_file_raises_data_file_error(tmp_path):
    path = tmp_path / "absent.json"
    with pytest.raises(DataFileError, match="failed to load data file") as exc:
        load_structured_data(StructuredData.json(path))
    assert exc.value.path == path


@pytest.mark.parametrize(
    ("name", "content", "fmt"),
    [
        ("bad.json", "{not json", "json"),
        ("bad.toml", "key = = 1", "toml"),
    ],
)
def test_malformed_content_raises_data_file_error(write_file, name, content, fmt):
    path = write_file(name, content)
    data = StructuredData(fmt, path)
    with pytest.raises(DataFileError, match="failed to parse"):
        load_structured_data(data)


def test_mapping_root_becomes_context():
    assert build_context({"a": 1}) == {"a": 1}


@pytest.mark.parametrize("root", [[1, 2], "text", 5, None, True])
def test_non_mapping_root_is_wrapped(root):
    assert build_context(root) == {VALUE_KEY: root}


def test_args_are_exposed_only_when_present():
    assert ARGS_KEY not in build_context({"a": 1})
    assert build_context({"a": 1}, ("x", "y"))[ARGS_KEY] == ["x", "y"]


def test_build_context_does_not_mutate_tree():
    tree = {"a": 1}
    build_context(tree, ["x"])
    assert tree == {"a": 1}
