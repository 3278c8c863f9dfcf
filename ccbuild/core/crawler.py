# SPDX-License-Identifier: MIT
"""Recursive include crawler.

The crawler reads the leading block of a source file (blank lines,
comments and preprocessor directives), follows quote includes of ``.hh``
headers, pulls in the matching ``.cc`` file of every header, and records
``[#lib:NAME]`` link annotations. Scanning of a file stops at the first
line that is none of those, so only the include block is ever inspected.

Example:
    graph = DependencyGraph()
    crawler = DependencyCrawler(graph, macros, include_paths)
    crawler.parse("app.cc")
    graph.source_closure("app.cc")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping, Sequence

from ccbuild.core import validator
from ccbuild.core.errors import (
    CcbuildError,
    FileReadError,
    RecursionLimitError,
    ResolutionError,
    ValidationError,
)
from ccbuild.core.graph import DependencyGraph, FileDependencies
from ccbuild.core.preprocessor import Preprocessor, Status
from ccbuild.util.paths import detect_project_root

logger = logging.getLogger(__name__)

# Around 10 is normal for a real project.
MAX_DEPTH = 128

QUOTE_INCLUDE = '#include "'
ANGLE_INCLUDE = "#include <"
LIB_PREFIX = "[#lib:"

_ASCII_WHITESPACE = " \t\n\r\v\f"


def parse_libraries(line: str) -> list[str]:
    """Extract ``[#lib:NAME]`` annotations from an include line.

    Args:
        line: Trimmed ``#include`` line.

    Returns:
        Library names in the order they appear.

    Raises:
        ValidationError: If an annotated name is not a valid library name.
    """
    pos = line.find("[")
    if pos < 0:
        return []

    libraries: list[str] = []
    for word in line[pos:].split(" "):
        if word.startswith(LIB_PREFIX) and word.endswith("]"):
            name = word[len(LIB_PREFIX) : -1]
            if not validator.is_library(name):
                raise ValidationError("invalid library name", name)
            libraries.append(name)
    return libraries


def _is_transparent(line: str) -> bool:
    return not line or line.startswith("#") or line.startswith("//")


class DependencyCrawler:
    """Populate a DependencyGraph starting from entry files.

    The macro table and include-path list are read-only references to
    the compiler defaults of the run. The project root prefix is detected
    once, from the first quote include encountered, and reused for every
    later header.

    Attributes:
        graph: The graph being populated.
        project_root: Detected prefix for header paths, or None.
    """

    def __init__(
        self,
        graph: DependencyGraph,
        predefined_macros: Mapping[str, str],
        include_paths: Sequence[str],
        *,
        project_root: str | None = None,
        is_file: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self.graph = graph
        self.project_root = project_root
        self._predefined_macros = predefined_macros
        self._include_paths = include_paths
        self._is_file = is_file

    def parse(self, file: str, depth: int = 0) -> None:
        """Parse file and, recursively, everything it includes.

        Parsing a file that already has a record is a no-op, which makes
        include cycles safe.

        Raises:
            RecursionLimitError: If includes nest deeper than MAX_DEPTH.
            FileReadError: If a file is missing, unreadable or empty.
            ValidationError: On an invalid header path or library name.
            ResolutionError: If the project root cannot be detected.
        """
        if depth > MAX_DEPTH:
            raise RecursionLimitError(MAX_DEPTH, context=file)

        deps = self.graph.add(file)
        if deps is None:
            return

        logger.debug("Parsing: %s", file)
        text = self._read(file)
        try:
            self._scan(file, text, deps, depth)
        except CcbuildError:
            logger.error("Parsing failed while parsing: %s", file)
            raise

    def _read(self, file: str) -> str:
        try:
            with open(file, "rb") as f:
                contents = f.read()
        except OSError:
            raise FileReadError(file) from None

        if not contents:
            raise FileReadError(file)

        try:
            return contents.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("File does not pass UTF-8 validation: %s", file)
            return contents.decode("utf-8", errors="replace")

    def _scan(self, file: str, text: str, deps: FileDependencies, depth: int) -> None:
        preprocessor = Preprocessor(
            self._predefined_macros, self._include_paths, is_file=self._is_file
        )

        for raw_line in text.split("\n"):
            line = raw_line.strip(_ASCII_WHITESPACE)
            status = preprocessor.process(line)

            if status is not Status.COMPILE:
                if status is Status.NOT_UNDERSTOOD and line.startswith("#include "):
                    logger.warning(
                        "Ignoring #include directive in #if that is not understood:"
                        "\n         %s\n         %s",
                        line,
                        file,
                    )
                if _is_transparent(line):
                    continue
                break

            if line.startswith(QUOTE_INCLUDE):
                deps.libraries.update(parse_libraries(line))
                self._follow_header(line[len(QUOTE_INCLUDE) :], deps, depth)
            elif line.startswith(ANGLE_INCLUDE):
                deps.libraries.update(parse_libraries(line))
            elif not _is_transparent(line):
                break

    def _follow_header(self, include: str, deps: FileDependencies, depth: int) -> None:
        """Record and recurse into a quote-included header and its source."""
        pos = include.find('.hh"')
        if pos < 0:
            return
        header = include[: pos + len(".hh")]

        if not validator.is_file_path(header):
            raise ValidationError("invalid file path", header)

        if self.project_root is None:
            self.project_root = detect_project_root(header, is_file=self._is_file)
            if self.project_root is None:
                raise ResolutionError(f"failed to detect include path from: {header}")
            logger.debug("Detected include path: %s", self.project_root)

        header_path = self.project_root + header
        if header_path in deps.header_files:
            return
        deps.header_files.add(header_path)
        self.parse(header_path, depth + 1)

        source_path = header_path[: -len("hh")] + "cc"
        if source_path not in deps.source_files and self._is_file(source_path):
            deps.source_files.add(source_path)
            self.parse(source_path, depth + 1)
