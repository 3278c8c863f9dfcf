# SPDX-License-Identifier: MIT
"""Name and path predicates.

Every path and name that ends up in a generated makefile goes through
one of these checks. They are pure pattern matches; none of them touch
the filesystem.
"""

from __future__ import annotations

import re

# Directories and filenames (excluding the ".cc" extension).
BASE_PATTERN = r"\.?[A-Za-z](?:[A-Za-z0-9._-]*[A-Za-z0-9])?"
COMPILER_PATTERN = r"(?:clang|g)\+\+(?:-devel|[0-9]{0,2})"

_BASE_RE = re.compile(BASE_PATTERN)
_COMPILER_RE = re.compile(COMPILER_PATTERN)
_DIRECTORY_RE = re.compile(rf"/?(?:\./)?(?:\.\./)*(?:{BASE_PATTERN}/)*")
_LIBRARY_RE = re.compile(r"[A-Za-z](?:[A-Za-z0-9_.-]*[A-Za-z0-9])?")
_MACRO_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

MAX_LIBRARY_LENGTH = 40

RESERVED_TARGETS = frozenset(
    {
        "all",
        "run",
        "clean",
        "clean-executables",
        "clean-object-files",
        "destruct",
        # Fuzzer
        "minimize-corpus",
        "compress-corpus",
    }
)


def is_compiler(s: str) -> bool:
    return _COMPILER_RE.fullmatch(s) is not None


def is_base(s: str) -> bool:
    """Check a single path component, hidden files allowed."""
    return _BASE_RE.fullmatch(s) is not None


def is_directory(s: str) -> bool:
    """Check a directory prefix; every component must end with a slash."""
    return _DIRECTORY_RE.fullmatch(s) is not None


def is_file_path(s: str) -> bool:
    directory, sep, base = s.rpartition("/")
    if not is_base(base):
        return False
    return is_directory(directory + sep)


def is_library(s: str) -> bool:
    if len(s) > MAX_LIBRARY_LENGTH:
        return False
    return _LIBRARY_RE.fullmatch(s) is not None


def is_macro(s: str) -> bool:
    return _MACRO_RE.fullmatch(s) is not None


def is_reserved_target(directory: str, base: str) -> bool:
    """Check if an executable would clash with a generated phony target.

    GNU make treats "./all" and "all" as the same target, so the check
    covers both the empty directory and "./".
    """
    if directory in ("", "./"):
        return base in RESERVED_TARGETS
    return False
