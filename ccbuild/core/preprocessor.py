# SPDX-License-Identifier: MIT
"""Minimal conditional-compilation evaluator.

The Preprocessor understands just enough of the C preprocessor to decide
which ``#include`` lines at the top of a file are live:

    #if defined(MACRO)        #if !defined(MACRO)
    #if __has_include(<path>) #if !__has_include(<path>)
    #elif ...                 #else
    #endif

Anything else in an ``#if``/``#elif`` expression is reported as
``Status.NOT_UNDERSTOOD``. There is no macro expansion.

Example:
    pp = Preprocessor({"__FreeBSD__": "1"}, ["/usr/include/"])
    for line in lines:
        status = pp.process(line.strip())
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from enum import Enum

from ccbuild.core import validator


class Status(Enum):
    """Classification of the line just processed."""

    COMPILE = "compile"
    SKIP = "skip"
    NOT_UNDERSTOOD = "not_understood"


_SPACE = " \t"


def _lstrip_lower(text: str) -> tuple[str, str]:
    """Split a leading run of lowercase ASCII letters from text."""
    i = 0
    while i < len(text) and "a" <= text[i] <= "z":
        i += 1
    return text[:i], text[i:]


class Preprocessor:
    """Stateful per-file directive evaluator.

    One instance is used for one file. The macro table and include paths
    are shared, read-only references owned by the caller.

    Attributes:
        state: Status of the current conditional level.
    """

    def __init__(
        self,
        predefined_macros: Mapping[str, str],
        include_paths: Sequence[str],
        *,
        is_file=os.path.isfile,
    ) -> None:
        self._predefined_macros = predefined_macros
        self._include_paths = include_paths
        self._is_file = is_file
        self._stack: list[tuple[Status, bool]] = []
        self.state = Status.COMPILE
        self._handled = False

    def process(self, trimmed_line: str) -> Status:
        """Feed one trimmed line and return the resulting status."""
        if not trimmed_line.startswith("#"):
            return self.state

        rest = trimmed_line[1:].lstrip(_SPACE)
        token, rest = _lstrip_lower(rest)
        rest = rest.lstrip(_SPACE)

        if token == "if":
            self._stack.append((self.state, self._handled))
            self._handled = True
            if self.state is Status.COMPILE:
                self.state = self._evaluate(rest)
                if self.state is Status.SKIP:
                    self._handled = False
        elif token == "elif":
            if not self._handled:
                self.state = self._evaluate(rest)
                if self.state is not Status.SKIP:
                    self._handled = True
            elif self.state is Status.COMPILE:
                self.state = Status.SKIP
        elif token == "else":
            if not self._handled:
                self.state = Status.COMPILE
                self._handled = True
            elif self.state is Status.COMPILE:
                self.state = Status.SKIP
        elif token == "endif":
            if self._stack:
                self.state, self._handled = self._stack.pop()

        return self.state

    @property
    def depth(self) -> int:
        """Number of open conditional levels."""
        return len(self._stack)

    def is_defined(self, macro: str) -> bool:
        return macro in self._predefined_macros

    def has_include(self, include: str) -> bool:
        """Check if include exists under any of the include paths."""
        return any(self._is_file(path + include) for path in self._include_paths)

    def _evaluate(self, expression: str) -> Status:
        negation = expression.startswith("!")
        if negation:
            expression = expression[1:]

        if expression.startswith("defined("):
            macro, sep, tail = expression[len("defined(") :].partition(")")
            if sep and not tail and validator.is_macro(macro):
                return self._result(self.is_defined(macro), negation)
        elif expression.startswith("__has_include(<"):
            include, sep, tail = expression[len("__has_include(<") :].partition(">")
            if sep and tail == ")" and validator.is_file_path(include):
                return self._result(self.has_include(include), negation)

        return Status.NOT_UNDERSTOOD

    @staticmethod
    def _result(value: bool, negation: bool) -> Status:
        return Status.COMPILE if value != negation else Status.SKIP
