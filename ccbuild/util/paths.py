# SPDX-License-Identifier: MIT
"""Bounded filesystem probes for project conventions.

Projects keep their sources under a common root (for example
``~/project/cpp/``) and include headers relative to it, so
``#include "snn-core/vec.hh"`` must be resolved by finding the directory
that contains ``snn-core/``. The compiler config files (``.clang``,
``.gcc``) are found the same way.

All probes return string prefixes ending in ``/`` because the prefix is
concatenated with include paths and written into the makefile as is.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from ccbuild.core import validator

# Current directory plus up to nine parents.
MAX_LEVELS = 10

HOME_PROJECT_DIR = "project/cpp/"


def probe_upward(
    name: str,
    *,
    max_levels: int = MAX_LEVELS,
    is_file: Callable[[str], bool] = os.path.isfile,
) -> str | None:
    """Find the closest prefix under which name exists.

    Checks ``./name``, ``../name``, ``../../name`` and so on, never
    looking at more than max_levels directories.

    Args:
        name: Relative file path to look for.
        max_levels: Number of directories to check, including ``./``.
        is_file: Existence predicate.

    Returns:
        The prefix (``./``, ``../``, ...) or None if nothing matched.
    """
    if os.path.isabs(name):
        return None

    prefix = "./"
    if is_file(prefix + name):
        return prefix

    prefix = ""
    for _ in range(1, max_levels):
        prefix += "../"
        if is_file(prefix + name):
            return prefix

    return None


def home_project_dir() -> str | None:
    home = os.path.expanduser("~")
    if not home or home == "~":
        return None
    return os.path.join(home, HOME_PROJECT_DIR)


def detect_project_root(
    header: str,
    *,
    is_file: Callable[[str], bool] = os.path.isfile,
) -> str | None:
    """Detect the directory that relative header paths are resolved against.

    Tries the current directory and its parents first, then the
    conventional ``$HOME/project/cpp/`` directory.

    Args:
        header: Header path as written in the ``#include`` line.
        is_file: Existence predicate.

    Returns:
        Project root prefix, or None if header exists nowhere.
    """
    if os.path.isabs(header):
        return None

    prefix = probe_upward(header, is_file=is_file)
    if prefix is not None:
        return prefix

    home = home_project_dir()
    if home:
        candidate = home + header
        if validator.is_file_path(candidate) and is_file(candidate):
            return home

    return None
