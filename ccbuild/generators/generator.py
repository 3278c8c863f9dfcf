# SPDX-License-Identifier: MIT
"""Generator protocol for build file generation.

Generators take a parsed Project and produce build system files.
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ccbuild.core.project import Project


@runtime_checkable
class Generator(Protocol):
    """Protocol for build file generators."""

    @property
    def name(self) -> str:
        """Generator name (e.g., 'make')."""
        ...

    def generate(
        self, project: Project, output: Path, side_file: Path | None = None
    ) -> None:
        """Generate build files for a project.

        Args:
            project: The parsed project to generate for.
            output: Main build file to write.
            side_file: Optional auxiliary file (e.g. header dependencies).
        """
        ...


class BaseGenerator:
    """Base class for generators with common functionality."""

    def __init__(self, name: str) -> None:
        """Initialize a generator.

        Args:
            name: Generator name.
        """
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def generate(
        self, project: Project, output: Path, side_file: Path | None = None
    ) -> None:
        """Generate build files. Subclasses must implement."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


def wrap(text: str, width: int, delimiter: str) -> str:
    """Wrap every line of text at spaces, joining the pieces with delimiter.

    Words are never split, so a single long path stays on one line.
    """
    lines = []
    for line in text.split("\n"):
        parts = textwrap.wrap(
            line,
            width,
            break_long_words=False,
            break_on_hyphens=False,
        )
        lines.append(delimiter.join(parts))
    return "\n".join(lines)
