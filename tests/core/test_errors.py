# SPDX-License-Identifier: MIT
"""Tests for ccbuild.core.errors."""

from ccbuild.core.errors import (
    CcbuildError,
    FileReadError,
    FileWriteError,
    RecursionLimitError,
    ResolutionError,
    ValidationError,
)


class TestErrors:
    def test_context_prefix(self):
        err = CcbuildError("boom", context="app.cc")
        assert str(err) == "app.cc: boom"

    def test_validation_error(self):
        err = ValidationError("invalid macro", "9X")
        assert err.value == "9X"
        assert str(err) == "invalid macro: 9X"

    def test_file_read_error(self):
        err = FileReadError("a.hh")
        assert err.path == "a.hh"
        assert "a.hh" in str(err)

    def test_file_write_error(self):
        err = FileWriteError("makefile", "failed to create")
        assert str(err) == "failed to create: makefile"

    def test_recursion_limit_is_resolution_error(self):
        err = RecursionLimitError(128, context="deep.hh")
        assert isinstance(err, ResolutionError)
        assert err.limit == 128
        assert str(err) == "deep.hh: maximum recursion depth (128) exceeded"
