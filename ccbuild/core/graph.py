# SPDX-License-Identifier: MIT
"""File dependency graph and its closures.

The crawler writes one FileDependencies record per file; the closure
functions only read the graph. Each closure runs its own depth-first
traversal with a private visited set, so include cycles terminate.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class FileDependencies:
    """Direct dependencies of one parsed file.

    Attributes:
        libraries: Link libraries named by ``[#lib:NAME]`` annotations.
        source_files: ``.cc`` implementation files pulled in by headers.
        header_files: Quote-included ``.hh`` headers.
    """

    libraries: set[str] = field(default_factory=set)
    source_files: set[str] = field(default_factory=set)
    header_files: set[str] = field(default_factory=set)


class DependencyGraph:
    """Map from file path to its FileDependencies record.

    A record is created at most once per path; the path strings are used
    verbatim as keys and end up verbatim in the makefile.
    """

    def __init__(self) -> None:
        self._files: dict[str, FileDependencies] = {}

    def add(self, path: str) -> FileDependencies | None:
        """Create the record for path.

        Returns:
            The new record, or None if path was already present.
        """
        if path in self._files:
            return None
        deps = FileDependencies()
        self._files[path] = deps
        return deps

    def get(self, path: str) -> FileDependencies:
        """Get the record for path.

        Raises:
            KeyError: If path was never parsed.
        """
        return self._files[path]

    def files(self) -> list[str]:
        return list(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def source_closure(self, entry: str) -> set[str]:
        """Get every source file that must be compiled for entry.

        Headers are traversed to reach further source files but are
        never part of the result. The entry itself always is.
        """
        result = {entry}
        visited = {entry}
        stack = [entry]
        while stack:
            deps = self.get(stack.pop())
            for source in deps.source_files:
                if source not in visited:
                    visited.add(source)
                    result.add(source)
                    stack.append(source)
            for header in deps.header_files:
                if header not in visited:
                    visited.add(header)
                    stack.append(header)
        return result

    def library_closure(self, entry: str) -> set[str]:
        """Get every library needed to link entry."""
        libraries: set[str] = set()
        visited = {entry}
        stack = [entry]
        while stack:
            deps = self.get(stack.pop())
            libraries.update(deps.libraries)
            for path in (*deps.source_files, *deps.header_files):
                if path not in visited:
                    visited.add(path)
                    stack.append(path)
        return libraries

    def header_closure(self, path: str) -> set[str]:
        """Get every header the object file of path depends on."""
        headers: set[str] = set()
        stack = [path]
        while stack:
            for header in self.get(stack.pop()).header_files:
                if header not in headers:
                    headers.add(header)
                    stack.append(header)
        return headers

    def __repr__(self) -> str:
        return f"DependencyGraph({len(self._files)} files)"
