"""Path resolution and source reading."""

from __future__ import annotations

from pathlib import Path

import pytest

from prompt_assembler.errors import (
    ResolutionError,
    SourceDecodeError,
    SourceNotFoundError,
    SourceReadError,
)
from prompt_assembler.paths import read_text, resolve_path

pytestmark = pytest.mark.unit


class TestResolvePath:
    def test_relative_joins_onto_root(self, tmp_path):
        assert resolve_path(tmp_path, "prompts/a") == tmp_path / "prompts" / "a"

    def test_absolute_is_returned_unchanged(self, tmp_path):
        target = tmp_path / "elsewhere"
        assert resolve_path(Path("/unused"), str(target)) == target

    def test_home_prefix_expands(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert resolve_path(Path("/root-dir"), "~/lib") == tmp_path / "lib"

    def test_bare_tilde_is_home(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert resolve_path(Path("/root-dir"), "~") == tmp_path

    def test_tilde_without_slash_is_relative(self, tmp_path):
        assert resolve_path(tmp_path, "~other") == tmp_path / "~other"

    def test_unknown_home_raises_resolution_error(self, monkeypatch):
        def _no_home(cls):
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", classmethod(_no_home))
        with pytest.raises(ResolutionError, match="home directory") as exc:
            resolve_path(Path("/root-dir"), "~/lib")
        assert exc.value.hint is not None

    def test_resolution_is_lexical(self, tmp_path):
        resolved = resolve_path(tmp_path, "does/not/exist")
        assert not resolved.exists()


class TestReadText:
    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "a.md"
        path.write_text("héllo\n", encoding="utf-8")
        assert read_text(path) == "héllo\n"

    def test_missing_file_names_the_path(self, tmp_path):
        path = tmp_path / "missing.md"
        with pytest.raises(SourceNotFoundError) as exc:
            read_text(path)
        assert exc.value.path == path
        assert str(path) in str(exc.value)

    def test_invalid_utf8_is_a_decode_error(self, tmp_path):
        path = tmp_path / "bad.md"
        path.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(SourceDecodeError) as exc:
            read_text(path)
        assert exc.value.path == path

    def test_directory_is_a_read_error(self, tmp_path):
        with pytest.raises(SourceReadError) as exc:
            read_text(tmp_path)
        assert not isinstance(exc.value, SourceDecodeError)
