"""Tests for the interactive and script line sources."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest

from colctl.console.sources import InteractiveSource, ScriptSource, canonical_path
from colctl.errors import UnreadableSource


class TestCanonicalPath:
    def test_relative_resolves_against_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert canonical_path("a.txt") == (tmp_path / "a.txt").resolve()

    def test_dot_segments_collapse(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "sub").mkdir()
        assert canonical_path("sub/../a.txt") == canonical_path("a.txt")

    def test_symlink_resolves_to_target(self, tmp_path: Path) -> None:
        target = tmp_path / "real.txt"
        target.write_text("")
        link = tmp_path / "link.txt"
        link.symlink_to(target)
        assert canonical_path(link) == canonical_path(target)


class TestInteractiveSource:
    def test_reads_lines_without_newline(self) -> None:
        source = InteractiveSource(io.StringIO("show\r\ninfo\n"), echo=lambda *a, **k: None)
        assert source.readline() == "show"
        assert source.readline() == "info"

    def test_eof_returns_none_and_sticks(self) -> None:
        source = InteractiveSource(io.StringIO("last"), echo=lambda *a, **k: None)
        assert source.readline() == "last"
        assert source.readline() is None
        assert source.exhausted
        assert source.readline() is None

    def test_prompt_written_without_newline(self) -> None:
        written: list[tuple[str, dict]] = []
        source = InteractiveSource(
            io.StringIO("x\n"), echo=lambda text, **kw: written.append((text, kw))
        )
        source.readline("> ")
        assert written == [("> ", {"nl": False})]

    def test_empty_prompt_writes_nothing(self) -> None:
        written: list[str] = []
        source = InteractiveSource(io.StringIO("x\n"), echo=lambda text, **kw: written.append(text))
        source.readline()
        assert written == []

    def test_is_interactive(self) -> None:
        assert InteractiveSource(io.StringIO("")).interactive is True


class TestScriptSource:
    def test_reads_lazily_in_order(self, write_script: Callable[..., Path]) -> None:
        path = write_script("s.txt", "show", "", "info")
        source = ScriptSource(path)
        assert source.interactive is False
        assert source.readline() == "show"
        assert source.line_number == 1
        assert source.readline() == ""
        assert source.readline() == "info"
        assert source.readline() is None
        assert source.readline() is None
        assert source.line_number == 3

    def test_prompt_is_ignored(self, write_script: Callable[..., Path]) -> None:
        source = ScriptSource(write_script("s.txt", "Alice"))
        assert source.readline("Enter ticket name: ") == "Alice"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(UnreadableSource, match="cannot read script") as excinfo:
            ScriptSource(tmp_path / "missing.txt")
        assert excinfo.value.code == "UNREADABLE_SOURCE"

    def test_directory_is_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(UnreadableSource):
            ScriptSource(tmp_path)

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "bin.txt"
        path.write_bytes(b"\xff\xfe\xfa\n")
        source = ScriptSource(path)
        with pytest.raises(UnreadableSource, match="not UTF-8"):
            source.readline()
        assert source.readline() is None

    def test_close_is_idempotent(self, write_script: Callable[..., Path]) -> None:
        source = ScriptSource(write_script("s.txt", "show"))
        source.close()
        source.close()
        assert source.readline() is None
