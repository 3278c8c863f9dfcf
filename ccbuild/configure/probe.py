# SPDX-License-Identifier: MIT
"""Ask the compiler for its predefined macros and include paths.

The directive evaluator needs the same view of the world as the real
compiler: ``defined(__linux__)`` must be true on Linux and
``__has_include(<openssl/ssl.h>)`` must search the compiler's own
include directories. Both come from a single
``-v -x c++ /dev/null -dM -E`` invocation.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field

from ccbuild.core.errors import CompilerProbeError
from ccbuild.util.paths import probe_upward

logger = logging.getLogger(__name__)

INCLUDE_LIST_START = "#include <...> search starts here:"

_CONTROL_OR_SPACE = "".join(chr(c) for c in range(33)) + "\x7f"


@dataclass
class CompilerDefaults:
    """What the compiler reported.

    Attributes:
        macros: Predefined macro name -> value.
        include_paths: System include directories, each ending in '/'.
    """

    macros: dict[str, str] = field(default_factory=dict)
    include_paths: list[str] = field(default_factory=list)


def is_clang(compiler: str) -> bool:
    return compiler.startswith("clang")


def config_file_name(compiler: str) -> str:
    """Name of the compiler config file (``.clang`` or ``.gcc``)."""
    return ".clang" if is_clang(compiler) else ".gcc"


def config_flags(compiler: str, config_file: str) -> list[str]:
    """Compiler arguments that load config_file."""
    if is_clang(compiler):
        return ["--config", config_file]
    return [f"@{config_file}"]


def find_compiler_config(compiler: str) -> str | None:
    """Find the compiler config file in the current or a parent directory.

    The returned path always contains a directory separator; without one
    clang looks for the config file in its own directories instead.

    Returns:
        Path like ``./.clang`` or ``../../.gcc``, or None.
    """
    name = config_file_name(compiler)
    prefix = probe_upward(name)
    if prefix is None:
        return None
    return prefix + name


def parse_compiler_output(output: str) -> CompilerDefaults:
    """Parse ``-v -dM -E`` output into macros and include paths.

    ``#define NAME VALUE`` lines fill the macro table (later definitions
    win). The lines following ``#include <...> search starts here:`` that
    start with '/' are include directories.
    """
    defaults = CompilerDefaults()
    in_include_list = False

    for raw_line in output.splitlines():
        line = raw_line.strip(_CONTROL_OR_SPACE)

        if in_include_list:
            if line.startswith("/"):
                if not line.endswith("/"):
                    line += "/"
                defaults.include_paths.append(line)
                continue
            in_include_list = False

        if line.startswith("#define "):
            macro, _, value = line[len("#define ") :].partition(" ")
            if macro:
                defaults.macros[macro] = value
        elif line == INCLUDE_LIST_START:
            in_include_list = True

    return defaults


def probe_compiler(
    compiler: str,
    config_file: str,
    *,
    optimize: bool = False,
    verbose: int = 0,
) -> CompilerDefaults:
    """Run the compiler once and collect its defaults.

    Raises:
        CompilerProbeError: If the compiler can't be run, fails, or
            reports no macros or no include paths.
    """
    cmd = [compiler, *config_flags(compiler, config_file)]
    if optimize:
        cmd.append("-O2")
    cmd.extend(["-v", "-x", "c++", "/dev/null", "-dM", "-E"])

    if verbose >= 2:
        logger.info("%s", " ".join(cmd))

    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise CompilerProbeError(f"failed to run {compiler}: {e}") from e

    defaults = parse_compiler_output(result.stdout)
    if result.returncode != 0 or not defaults.macros or not defaults.include_paths:
        raise CompilerProbeError(
            "could not get predefined macros and include paths from compiler"
        )
    return defaults
