# SPDX-License-Identifier: MIT
"""Custom exceptions for ccbuild.

All ccbuild exceptions inherit from CcbuildError, which includes
optional file context for better error messages. Any CcbuildError
aborts the whole run; no partial build script is ever produced.
"""

from __future__ import annotations


class CcbuildError(Exception):
    """Base class for all ccbuild exceptions.

    Attributes:
        message: The error message.
        context: Optional file being processed when the error occurred.
    """

    def __init__(self, message: str, context: str | None = None) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message


class ValidationError(CcbuildError):
    """A path, name, macro, library or compiler failed validation.

    Attributes:
        value: The offending value.
    """

    def __init__(self, message: str, value: str, context: str | None = None) -> None:
        self.value = value
        super().__init__(f"{message}: {value}", context)


class FileReadError(CcbuildError):
    """File is missing, unreadable or empty.

    Attributes:
        path: The path that could not be read.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"file is empty/unreadable: {path}")


class FileWriteError(CcbuildError):
    """Output file could not be written.

    Attributes:
        path: The path that could not be written.
    """

    def __init__(self, path: str, reason: str = "failed to write") -> None:
        self.path = path
        super().__init__(f"{reason}: {path}")


class ResolutionError(CcbuildError):
    """An include could not be resolved to a file."""


class RecursionLimitError(ResolutionError):
    """Include nesting went deeper than the crawler allows.

    Attributes:
        limit: The maximum depth that was exceeded.
    """

    def __init__(self, limit: int, context: str | None = None) -> None:
        self.limit = limit
        super().__init__(f"maximum recursion depth ({limit}) exceeded", context)


class CompilerProbeError(CcbuildError):
    """The compiler could not report predefined macros and include paths."""


class GenerateError(CcbuildError):
    """Error during makefile generation."""
