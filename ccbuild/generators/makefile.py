# SPDX-License-Identifier: MIT
"""Makefile generator.

Renders a parsed Project into a makefile that works with both GNU make
and BSD make, plus an optional dependency side-file mapping every object
file to the headers it depends on.

Layout of the generated makefile:

    CC / CFLAGS / INC / LINK        shared variables
    APP<i> / SRC<i> / OBJ<i> / LIB<i>  one numbered group per application
    .cc.o                           suffix rule
    all, clean*, destruct, run      phony targets
    minimize-corpus, compress-corpus  (fuzz mode only)

Rendering is a pure function of the project; nothing is written unless
the whole makefile rendered successfully.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ccbuild.configure.platform import Platform, get_platform
from ccbuild.configure.probe import is_clang
from ccbuild.core.errors import FileWriteError, GenerateError
from ccbuild.core.registry import split_source_path
from ccbuild.generators.generator import BaseGenerator, wrap

if TYPE_CHECKING:
    from ccbuild.core.project import Project

logger = logging.getLogger(__name__)

WRAP_WIDTH = 90

LINK_SEARCH_PATH = "/usr/local/lib/"

FUZZ_FLAGS = [
    "-fsanitize=fuzzer,address,undefined,integer",
    "-fno-sanitize-recover=all",
    "-DFUZZING_BUILD_MODE_UNSAFE_FOR_PRODUCTION",
]

SANITIZE_FLAGS = [
    "-fsanitize=address,undefined,integer",
    "-fno-sanitize-recover=all",
]

# libFuzzer limits for "make run" in fuzz mode.
FUZZ_RUN_ARGS = "-rss_limit_mb=3072 -timeout=5"
# Seconds, only when fuzzing more than one application.
FUZZ_MAX_TOTAL_TIME = 900


def object_file(source: str) -> str:
    """Object file for a ``.cc`` source file."""
    return source[: -len(".cc")] + ".o"


def executable(source: str) -> str:
    """Executable built from an application entry file (``.cc`` dropped)."""
    return source[: -len(".cc")]


class MakefileGenerator(BaseGenerator):
    """Generator for make.

    Example:
        generator = MakefileGenerator()
        generator.generate(project, Path("makefile"), Path("makefile.depend"))
    """

    def __init__(self, *, platform: Platform | None = None) -> None:
        """Initialize the makefile generator.

        Args:
            platform: Host platform; detected when not given.
        """
        super().__init__("make")
        self._platform = platform or get_platform()

    def generate(
        self, project: Project, output: Path, side_file: Path | None = None
    ) -> None:
        """Write the makefile and, if requested, the dependency side-file.

        The makefile must not exist yet; the side-file is overwritten.

        Raises:
            GenerateError: If there is nothing to generate.
            FileWriteError: If a file can't be written.
        """
        logger.debug("Generating: %s", output)
        if side_file is not None:
            logger.debug("Generating: %s", side_file)

        text, depend_text = self.render(
            project,
            str(output),
            str(side_file) if side_file is not None else None,
        )

        try:
            with open(output, "x") as f:
                f.write(text)
        except OSError as e:
            raise FileWriteError(str(output), "failed to create") from e

        if side_file is not None and depend_text is not None:
            try:
                with open(side_file, "w") as f:
                    f.write(depend_text)
            except OSError as e:
                raise FileWriteError(str(side_file), "failed to write to") from e

    def render(
        self,
        project: Project,
        makefile: str,
        makefile_depend: str | None = None,
    ) -> tuple[str, str | None]:
        """Render the makefile text and the dependency side-file text.

        Args:
            project: Parsed project.
            makefile: Name of the makefile (used by the destruct target).
            makefile_depend: Name of the side-file, or None to skip it.

        Returns:
            Tuple of (makefile text, side-file text or None).

        Raises:
            GenerateError: If no applications are registered or no
                compiler is configured.
        """
        applications = list(project.applications)
        if not applications or not project.compiler:
            raise GenerateError("nothing to generate")

        parts = [
            self._shared_variables(project, makefile_depend),
            self._application_variables(project, applications),
            self._suffix_rule(),
        ]
        phony: list[str] = []
        parts.append(self._build_targets(applications, phony))
        parts.append(self._clean_targets(applications, phony))
        parts.append(
            self._destruct_target(
                project, applications, makefile, makefile_depend, phony
            )
        )
        if project.options.fuzz:
            parts.append(self._fuzz_targets(applications, phony))
        else:
            parts.append(self._run_target(applications, phony))

        parts.append(f"\n.PHONY: {' '.join(phony)}\n")

        if makefile_depend and not self._platform.is_freebsd:
            parts.append(f"\n-include {makefile_depend}\n")

        depend_text = self.render_dependencies(project) if makefile_depend else None
        return "".join(parts), depend_text

    def render_dependencies(self, project: Project) -> str:
        """Render ``object: source headers...`` for every parsed source file."""
        lines = []
        for path in sorted(project.graph):
            if not path.endswith(".cc"):
                continue
            headers = sorted(project.graph.header_closure(path))
            lines.append(" ".join([f"{object_file(path)}:", path, *headers]))
        if not lines:
            return ""
        return wrap("\n".join(lines), WRAP_WIDTH, " \\\n  ") + "\n"

    def _shared_variables(self, project: Project, makefile_depend: str | None) -> str:
        options = project.options
        out = []

        time_prefix = "time " if options.time_execution else ""
        out.append(f"CC = {time_prefix}{project.compiler}\n")

        if is_clang(project.compiler):
            cflags = f"CFLAGS = --config {project.config_file}"
        else:
            cflags = f"CFLAGS = @{project.config_file}"
        if options.optimize:
            cflags += " -O2"

        extra: list[str] = []
        if options.fuzz:
            extra.extend(FUZZ_FLAGS)
        elif options.sanitize:
            extra.extend(SANITIZE_FLAGS)
        extra.extend(f"-D{macro}" for macro in options.macro_list)

        for flag in extra:
            cflags += f" \\\n\t\t {flag}"
        out.append(cflags + "\n")

        out.append(f"INC = -iquote {project.project_root or './'}\n")
        out.append(f"LINK = -L{LINK_SEARCH_PATH}\n")

        if makefile_depend and self._platform.is_freebsd:
            out.append(f"\n.MAKE.DEPENDFILE={makefile_depend}\n")

        return "".join(out)

    def _application_variables(self, project: Project, applications: list[str]) -> str:
        out = []
        for i, app in enumerate(applications):
            closure = project.graph.source_closure(app)
            closure.discard(app)
            sources = [app, *sorted(closure)]
            libraries = sorted(project.graph.library_closure(app))

            out.append(f"\nAPP{i} = {executable(app)}\n")
            out.append(f"SRC{i} = " + " \\\n\t   ".join(sources) + "\n")
            out.append(f"OBJ{i} = $(SRC{i}:.cc=.o)\n")
            out.append(f"LIB{i} =" + "".join(f" -l{lib}" for lib in libraries) + "\n")
        return "".join(out)

    def _suffix_rule(self) -> str:
        return (
            "\n"
            "# Suffixes (how to build object files).\n"
            "# First line deletes all previously specified suffixes.\n"
            ".SUFFIXES:\n"
            ".SUFFIXES: .cc .o\n"
            ".cc.o:\n"
            "\t$(CC) $(CFLAGS) $(INC) -c -o $@ $<\n"
        )

    def _build_targets(self, applications: list[str], phony: list[str]) -> str:
        phony.append("all")
        all_line = "all: " + " ".join(f"$(APP{i})" for i in range(len(applications)))
        out = ["\n", wrap(all_line, WRAP_WIDTH, " \\\n\t "), "\n"]
        for i in range(len(applications)):
            out.append(f"\n$(APP{i}): ${{OBJ{i}}}\n")
            out.append(f"\t$(CC) $(CFLAGS) -o $(APP{i}) $(OBJ{i}) $(LINK) $(LIB{i})\n")
        return "".join(out)

    def _clean_targets(self, applications: list[str], phony: list[str]) -> str:
        indices = range(len(applications))
        phony.extend(["clean-executables", "clean-object-files", "clean"])
        return (
            "\nclean-executables:\n"
            + "".join(f"\trm -f $(APP{i})\n" for i in indices)
            + "\nclean-object-files:\n"
            + "".join(f"\trm -f $(OBJ{i})\n" for i in indices)
            + "\nclean: clean-object-files clean-executables\n"
        )

    def _destruct_target(
        self,
        project: Project,
        applications: list[str],
        makefile: str,
        makefile_depend: str | None,
        phony: list[str],
    ) -> str:
        phony.append("destruct")
        remove = f"\trm -f {makefile}"
        if makefile_depend:
            remove += f" {makefile_depend}"
        out = ["\ndestruct: clean\n", remove, "\n"]
        if project.options.fuzz:
            out.extend(f"\trm -rf $(APP{i}).corpus\n" for i in range(len(applications)))
        return "".join(out)

    def _run_target(self, applications: list[str], phony: list[str]) -> str:
        phony.append("run")
        return "\nrun: all\n" + "".join(
            f"\t./$(APP{i})\n" for i in range(len(applications))
        )

    def _fuzz_targets(self, applications: list[str], phony: list[str]) -> str:
        """Corpus handling targets for libFuzzer binaries.

        Each application keeps its corpus in ``<app>.corpus/`` and an
        archived copy in ``<app>.corpus.tar.gz`` that ``run`` extracts
        when the directory is missing.
        """
        tar_create = self._platform.tar_create_command
        minimize: list[str] = []
        compress: list[str] = []
        run: list[str] = []

        for app in applications:
            directory, base, _ = split_source_path(app)
            corpus = f"{directory}{base}.corpus"
            cd = f"cd {directory} && " if directory else ""

            minimize.append(
                f"\t@test ! -e {corpus}.old || \\\n"
                f"\t\t(echo 'Error: Directory exists: {corpus}.old'; exit 1;)\n"
                f"\tmv {corpus} {corpus}.old\n"
                f"\tmkdir {corpus}\n"
                f"\t{cd}./{base} -merge=1 {base}.corpus {base}.corpus.old\n"
                f"\trm -rf {corpus}.old\n"
            )

            compress.append(
                f"\trm -f {corpus}.tar.gz\n"
                f"\t{cd}{tar_create}{base}.corpus.tar.gz {base}.corpus\n"
                f"\trm -rf {corpus}\n"
            )

            max_time = ""
            if len(applications) > 1:
                max_time = f" -max_total_time={FUZZ_MAX_TOTAL_TIME}"
            run.append(
                f"\t@test -d {corpus} || test ! -e {corpus}.tar.gz || \\\n"
                f"\t\t(echo '{cd}tar -xzf {base}.corpus.tar.gz' && \\\n"
                f"\t\t{cd}tar -xzf {base}.corpus.tar.gz)\n"
                f"\t@test -d {corpus} || \\\n"
                f"\t\t(echo 'mkdir {corpus}' && mkdir {corpus})\n"
                f"\t{cd}./{base} {FUZZ_RUN_ARGS}{max_time} {base}.corpus/\n"
            )

        phony.extend(["minimize-corpus", "compress-corpus", "run"])
        return (
            "\nminimize-corpus: all\n"
            + "".join(minimize)
            + "\ncompress-corpus: minimize-corpus\n"
            + "".join(compress)
            + "\nrun: all\n"
            + "".join(run)
        )
