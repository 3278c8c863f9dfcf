# SPDX-License-Identifier: MIT
"""Tests for ccbuild.core.project."""

from __future__ import annotations

from pathlib import Path

import pytest

from ccbuild.configure import probe
from ccbuild.configure.config import COMPILER_ENV_VAR, BuildOptions
from ccbuild.configure.probe import CompilerDefaults
from ccbuild.core.errors import CcbuildError, ValidationError
from ccbuild.core.project import Project


@pytest.fixture
def fake_compiler(monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
    """Replace the compiler probe; returns the recorded probe calls."""
    calls: list[tuple] = []

    def probe_compiler(compiler, config_file, *, optimize=False, verbose=0):
        calls.append((compiler, config_file, optimize))
        return CompilerDefaults(
            macros={"__clang__": "1", "__linux__": "1"},
            include_paths=["/usr/include/"],
        )

    monkeypatch.setattr(probe, "find_compiler_config", lambda c: "./.clang")
    monkeypatch.setattr(probe, "probe_compiler", probe_compiler)
    monkeypatch.delenv(COMPILER_ENV_VAR, raising=False)
    return calls


class TestSetupCompiler:
    def test_default_compiler(self, fake_compiler):
        project = Project()
        project.setup_compiler("")
        assert project.compiler == "clang++"
        assert project.config_file == "./.clang"
        assert project.predefined_macros["__linux__"] == "1"
        assert project.include_paths == ["/usr/include/"]

    def test_environment_compiler(self, fake_compiler, monkeypatch):
        monkeypatch.setenv(COMPILER_ENV_VAR, "clang++16")
        project = Project()
        project.setup_compiler("")
        assert project.compiler == "clang++16"

    def test_optimize_passed_to_probe(self, fake_compiler):
        Project(BuildOptions(optimize=True)).setup_compiler("g++")
        assert fake_compiler == [("g++", "./.clang", True)]

    @pytest.mark.parametrize("compiler", ["gcc", "clang", "g++-12", "c++"])
    def test_invalid_compiler(self, fake_compiler, compiler):
        with pytest.raises(ValidationError, match="invalid compiler"):
            Project().setup_compiler(compiler)
        assert fake_compiler == []

    def test_config_not_found(self, fake_compiler, monkeypatch):
        monkeypatch.setattr(probe, "find_compiler_config", lambda c: None)
        with pytest.raises(CcbuildError, match='".gcc" config not found'):
            Project().setup_compiler("g++")


class TestMacros:
    def test_set_macros(self):
        project = Project()
        project.set_macros("NDEBUG,FOO")
        assert project.predefined_macros == {"NDEBUG": "1", "FOO": "1"}

    def test_user_macro_overrides_compiler(self, fake_compiler):
        project = Project(BuildOptions(macros="__linux__"))
        project.setup_compiler_and_macros()
        assert project.predefined_macros["__linux__"] == "1"
        assert project.predefined_macros["__clang__"] == "1"

    def test_invalid_macro(self):
        with pytest.raises(ValidationError):
            Project().set_macros("1X")

    def test_verbose_tables(self, fake_compiler, caplog):
        caplog.set_level("DEBUG", logger="ccbuild")
        Project(BuildOptions(macros="FOO", verbose=3)).setup_compiler_and_macros()
        assert " #define FOO 1" in caplog.text
        assert " /usr/include/" in caplog.text


class TestParse:
    def test_parse(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "a.hh").write_text("#pragma once\n")
        (tmp_path / "lib" / "a.cc").write_text('#include "lib/a.hh"\n')
        (tmp_path / "app.cc").write_text(
            '#include "lib/a.hh" // [#lib:ssl]\n\nint main() {}\n'
        )

        project = Project()
        project.compiler = "clang++"
        assert project.add_application("app.cc")
        project.parse()

        assert project.applications.frozen
        assert project.project_root == "./"
        assert project.graph.source_closure("app.cc") == {"app.cc", "./lib/a.cc"}
        assert project.graph.library_closure("app.cc") == {"ssl"}

        with pytest.raises(CcbuildError):
            project.add_application("other.cc")

    def test_generate(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "app.cc").write_text("int main() {}\n")

        project = Project()
        project.compiler = "clang++"
        project.config_file = "./.clang"
        project.add_application("app.cc")
        project.parse()
        project.generate(tmp_path / "makefile", tmp_path / "makefile.depend")

        assert "APP0 = app\n" in (tmp_path / "makefile").read_text()
        assert (tmp_path / "makefile.depend").read_text() == "app.o: app.cc\n"
