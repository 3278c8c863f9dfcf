# SPDX-License-Identifier: MIT
"""Application registry.

An application is one entry ``.cc`` file that becomes one executable of
the same name without the extension. Entries are validated when added
and iterated in sorted order, which keeps APP0, APP1, ... stable across
runs.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator

from ccbuild.core import validator
from ccbuild.core.errors import CcbuildError, ValidationError

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".cc"
IGNORE_SUFFIX = ".ignore"

_COMPONENT_HINT = (
    "directories and filenames (excluding the .cc extension) must match "
    f"the regular expression {validator.BASE_PATTERN}"
)


def split_source_path(path: str) -> tuple[str, str, str]:
    """Split path into (directory, base, extension).

    The directory keeps its trailing slash: ``"a/b.cc"`` gives
    ``("a/", "b", ".cc")``.
    """
    directory, sep, name = path.rpartition("/")
    base, dot, ext = name.rpartition(".")
    if not dot or not base:
        return directory + sep, name, ""
    return directory + sep, base, dot + ext


class ApplicationRegistry:
    """Ordered, duplicate-rejecting set of validated entry files."""

    def __init__(self, *, is_file: Callable[[str], bool] = os.path.isfile) -> None:
        self._applications: set[str] = set()
        self._frozen = False
        self._is_file = is_file

    def add(self, path: str) -> bool:
        """Validate and add an application entry file.

        A file ``<path>.ignore`` next to the entry makes it silently
        skipped (with a warning).

        Returns:
            True if added, False if ignored.

        Raises:
            ValidationError: If the path is invalid or already registered.
            CcbuildError: If parsing has already started.
        """
        if self._frozen:
            raise CcbuildError("applications can't be added once parsing has begun")

        logger.debug("Adding application source: %s", path)

        directory, base, ext = split_source_path(path)

        if ext != SOURCE_SUFFIX:
            raise ValidationError('path must have ".cc" extension', path)

        if not validator.is_base(base):
            raise ValidationError(
                f"unsupported character in basename ({_COMPONENT_HINT})", base
            )

        if not validator.is_directory(directory):
            raise ValidationError(
                f"unsupported character in path ({_COMPONENT_HINT})", directory
            )

        if directory.startswith("/"):
            raise ValidationError("path must be relative", path)

        if validator.is_reserved_target(directory, base):
            raise ValidationError("reserved target", directory + base)

        if path.startswith(".") and "/" not in path:
            raise ValidationError(
                "a path starting with a dot must include a slash", path
            )

        if self._is_file(path + IGNORE_SUFFIX):
            logger.warning("Ignoring application source file: %s[.ignore]", path)
            return False

        if path in self._applications:
            raise ValidationError("duplicate application source file", path)

        self._applications.add(path)
        return True

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._applications))

    def __len__(self) -> int:
        return len(self._applications)

    def __contains__(self, path: object) -> bool:
        return path in self._applications

    def __repr__(self) -> str:
        return f"ApplicationRegistry({sorted(self._applications)!r})"
