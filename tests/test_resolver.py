"""Tests for PathResolver's three-tier lookup."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from yamlconfig.errors import NoReferenceError, PathResolutionError
from yamlconfig.resolver import PathResolver


class RecordingWriter:
    """create_default callback that writes an empty document and records paths."""

    def __init__(self) -> None:
        self.paths: list[str] = []

    def __call__(self, path: str) -> None:
        self.paths.append(path)
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        Path(path).write_text("{}\n")


def failing_home() -> str:
    raise RuntimeError("no home")


class TestResolve:
    def test_empty_reference(self) -> None:
        with pytest.raises(NoReferenceError):
            PathResolver(RecordingWriter()).resolve("")

    def test_absolute_existing_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """An existing absolute path is returned without consulting cwd or home."""
        target = tmp_path / "conf.yaml"
        target.write_text("a: 1\n")

        def no_getcwd() -> str:
            raise AssertionError("getcwd should not be called")

        monkeypatch.setattr(os, "getcwd", no_getcwd)
        writer = RecordingWriter()
        resolver = PathResolver(writer, home_dir=failing_home)
        assert resolver.resolve(str(target)) == str(target)
        assert writer.paths == []

    def test_relative_to_cwd(self, work_dir: Path, home_dir: Path) -> None:
        (work_dir / "conf").mkdir()
        (work_dir / "conf" / "app.yaml").write_text("a: 1\n")
        (home_dir / "conf").mkdir()
        (home_dir / "conf" / "app.yaml").write_text("a: 2\n")
        writer = RecordingWriter()
        path = PathResolver(writer).resolve("conf/../conf/app.yaml")
        assert path == str(work_dir / "conf" / "app.yaml")
        assert writer.paths == []

    def test_found_in_home(self, work_dir: Path, home_dir: Path) -> None:
        (home_dir / "app.yaml").write_text("a: 1\n")
        writer = RecordingWriter()
        assert PathResolver(writer).resolve("app.yaml") == str(home_dir / "app.yaml")
        assert writer.paths == []

    def test_created_in_home(self, work_dir: Path, home_dir: Path) -> None:
        writer = RecordingWriter()
        path = PathResolver(writer).resolve("sub/app.yaml")
        assert path == str(home_dir / "sub" / "app.yaml")
        assert writer.paths == [path]
        assert Path(path).is_file()
        assert not (work_dir / "sub" / "app.yaml").exists()

    def test_resolve_is_idempotent(self, work_dir: Path, home_dir: Path) -> None:
        writer = RecordingWriter()
        resolver = PathResolver(writer)
        first = resolver.resolve("app.yaml")
        second = resolver.resolve("app.yaml")
        assert first == second
        assert writer.paths == [first]

    def test_missing_absolute_reference_goes_under_home(self, work_dir: Path, home_dir: Path, tmp_path: Path) -> None:
        missing = tmp_path / "nowhere" / "app.yaml"
        writer = RecordingWriter()
        path = PathResolver(writer).resolve(str(missing))
        assert path == os.path.normpath(str(home_dir) + str(missing))

    def test_home_lookup_failure(self, work_dir: Path) -> None:
        with pytest.raises(PathResolutionError, match="home directory"):
            PathResolver(RecordingWriter(), home_dir=failing_home).resolve("app.yaml")

    def test_cwd_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken_getcwd() -> str:
            raise FileNotFoundError("cwd removed")

        monkeypatch.setattr(os, "getcwd", broken_getcwd)
        with pytest.raises(PathResolutionError, match="working directory"):
            PathResolver(RecordingWriter()).resolve("app.yaml")

    def test_create_failure_names_path(self, work_dir: Path, home_dir: Path) -> None:
        def broken_writer(path: str) -> None:
            raise PermissionError("read-only")

        with pytest.raises(PathResolutionError) as exc_info:
            PathResolver(broken_writer).resolve("app.yaml")
        assert exc_info.value.path == str(home_dir / "app.yaml")
        assert isinstance(exc_info.value.cause, PermissionError)

    def test_logs_fallbacks(self, work_dir: Path, home_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="yamlconfig.resolver"):
            PathResolver(RecordingWriter()).resolve("app.yaml")
        assert "looking in users home directory" in caplog.text
        assert "creating new config file" in caplog.text
