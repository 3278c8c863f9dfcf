# SPDX-License-Identifier: MIT
"""Project: the context of one ccbuild run.

A Project owns everything a run produces: the compiler setup (macro
table and include paths), the application registry and the dependency
graph. There is no module-level state, so several projects can exist
side by side (tests rely on this).

Example:
    project = Project(BuildOptions(optimize=True))
    project.setup_compiler_and_macros()
    project.add_application("app.cc")
    project.parse()
    project.generate(Path("makefile"), Path("makefile.depend"))
"""

from __future__ import annotations

import logging
from pathlib import Path

from ccbuild.configure import probe
from ccbuild.configure.config import BuildOptions, default_compiler, parse_macros
from ccbuild.core import validator
from ccbuild.core.crawler import DependencyCrawler
from ccbuild.core.errors import CcbuildError, ValidationError
from ccbuild.core.graph import DependencyGraph
from ccbuild.core.registry import ApplicationRegistry
from ccbuild.generators.makefile import MakefileGenerator

logger = logging.getLogger(__name__)


class Project:
    """State of one run, from compiler probe to makefile.

    Attributes:
        options: Build options for this run.
        compiler: Validated compiler command ('' until set up).
        config_file: Path of the compiler config file ('' until set up).
        predefined_macros: Compiler macros plus user macros (value "1").
        include_paths: Compiler include directories, in search order.
        applications: Registered entry files.
        graph: File dependency graph, filled by parse().
        project_root: Prefix used for header paths, once detected.
    """

    def __init__(self, options: BuildOptions | None = None) -> None:
        self.options = options or BuildOptions()
        self.compiler = ""
        self.config_file = ""
        self.predefined_macros: dict[str, str] = {}
        self.include_paths: list[str] = []
        self.applications = ApplicationRegistry()
        self.graph = DependencyGraph()
        self.project_root: str | None = None

    def setup_compiler_and_macros(self) -> None:
        """Validate the compiler, probe it, and add the user macros.

        Raises:
            ValidationError: If the compiler or a macro name is invalid.
            CcbuildError: If no compiler config file is found.
            CompilerProbeError: If the compiler probe fails.
        """
        self.setup_compiler(self.options.compiler)
        self.set_macros(self.options.macros)

        if self.options.verbose >= 3:
            self._log_predefined_macros()
            self._log_include_paths()

    def setup_compiler(self, compiler: str) -> None:
        compiler = compiler or default_compiler()
        if not validator.is_compiler(compiler):
            raise ValidationError(
                "invalid compiler (must match the regular expression "
                f"{validator.COMPILER_PATTERN})",
                compiler,
            )

        config_file = probe.find_compiler_config(compiler)
        if config_file is None:
            raise CcbuildError(
                f'"{probe.config_file_name(compiler)}" config not found in '
                "current directory or in any parent directory"
            )

        defaults = probe.probe_compiler(
            compiler,
            config_file,
            optimize=self.options.optimize,
            verbose=self.options.verbose,
        )

        self.compiler = compiler
        self.config_file = config_file
        self.predefined_macros.update(defaults.macros)
        self.include_paths = defaults.include_paths

    def set_macros(self, macros: str) -> None:
        """Define each comma-separated macro as "1".

        Raises:
            ValidationError: If a macro name is invalid.
        """
        for macro in parse_macros(macros):
            logger.debug("Adding macro: #define %s 1", macro)
            self.predefined_macros[macro] = "1"
        self.options.macros = macros

    def add_application(self, path: str) -> bool:
        return self.applications.add(path)

    def parse(self) -> None:
        """Crawl every application; the registry is frozen from here on.

        Raises:
            CcbuildError: On any parse failure. The graph must not be used
                after a failure.
        """
        self.applications.freeze()
        crawler = DependencyCrawler(
            self.graph,
            self.predefined_macros,
            self.include_paths,
            project_root=self.project_root,
        )
        for source in self.applications:
            crawler.parse(source)
        self.project_root = crawler.project_root

    def generate(self, makefile: Path, makefile_depend: Path | None = None) -> None:
        """Write the makefile (and optional dependency side-file)."""
        MakefileGenerator().generate(self, makefile, makefile_depend)

    def _log_predefined_macros(self) -> None:
        lines = ["Predefined macros (from compiler and command line):"]
        for name, value in sorted(self.predefined_macros.items()):
            lines.append(f" #define {name} {value}")
        lines.append("End of predefined macros.")
        logger.debug("\n".join(lines))

    def _log_include_paths(self) -> None:
        lines = ["Include paths (from compiler):"]
        lines.extend(f" {path}" for path in self.include_paths)
        lines.append("End of include paths.")
        logger.debug("\n".join(lines))

    def __repr__(self) -> str:
        return (
            f"Project(compiler={self.compiler!r}, "
            f"applications={len(self.applications)}, files={len(self.graph)})"
        )
