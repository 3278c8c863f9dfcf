# SPDX-License-Identifier: MIT
"""Tests for ccbuild.configure.config."""

import pytest

from ccbuild.configure.config import (
    COMPILER_ENV_VAR,
    DEFAULT_COMPILER,
    BuildOptions,
    default_compiler,
    parse_macros,
)
from ccbuild.core.errors import ValidationError


class TestParseMacros:
    def test_empty(self):
        assert parse_macros("") == []

    def test_list(self):
        assert parse_macros("NDEBUG,FOO_BAR") == ["NDEBUG", "FOO_BAR"]

    def test_trailing_commas(self):
        assert parse_macros("A,B,,") == ["A", "B"]

    def test_only_commas(self):
        assert parse_macros(",,") == []

    @pytest.mark.parametrize("macros", ["A,,B", "9A", ",A", "NO-DEBUG"])
    def test_invalid(self, macros):
        with pytest.raises(ValidationError, match="invalid macro"):
            parse_macros(macros)


class TestBuildOptions:
    def test_defaults(self):
        options = BuildOptions()
        assert options.compiler == ""
        assert options.verbose == 0
        assert not options.fuzz
        assert options.macro_list == []

    def test_time_execution_implies_verbose(self):
        assert BuildOptions(time_execution=True).verbose == 1
        assert BuildOptions(time_execution=True, verbose=3).verbose == 3


class TestDefaultCompiler:
    def test_default(self, monkeypatch):
        monkeypatch.delenv(COMPILER_ENV_VAR, raising=False)
        assert default_compiler() == DEFAULT_COMPILER

    def test_environment(self, monkeypatch):
        monkeypatch.setenv(COMPILER_ENV_VAR, "g++13")
        assert default_compiler() == "g++13"
