# SPDX-License-Identifier: MIT
"""Build options for a ccbuild run.

BuildOptions collects everything the command line can set. It is
created once per run and handed to the Project; nothing reads options
from global state afterwards.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ccbuild.core import validator
from ccbuild.core.errors import ValidationError

DEFAULT_COMPILER = "clang++"

# Environment variable consulted when no compiler is given on the command line.
COMPILER_ENV_VAR = "CCBUILD_COMPILER"


def default_compiler() -> str:
    """Get the compiler to use when none is given on the command line.

    Precedence (highest to lowest):
        1. CCBUILD_COMPILER environment variable
        2. clang++
    """
    return os.environ.get(COMPILER_ENV_VAR) or DEFAULT_COMPILER


def parse_macros(macros: str) -> list[str]:
    """Split a comma-separated macro list.

    Trailing commas are ignored; any other empty or invalid entry is an
    error.

    Raises:
        ValidationError: If a macro name is invalid.
    """
    macros = macros.rstrip(",")
    if not macros:
        return []

    names = macros.split(",")
    for name in names:
        if not validator.is_macro(name):
            raise ValidationError("invalid macro", name)
    return names


@dataclass
class BuildOptions:
    """Options for one run.

    Attributes:
        compiler: Compiler command; empty means default_compiler().
        macros: Comma-separated user macros, each defined as 1.
        fuzz: Build libFuzzer binaries (implies sanitizers).
        optimize: Add -O2.
        sanitize: Enable address/undefined/integer sanitizers.
        time_execution: Prefix compiler invocations with ``time``.
        verbose: Verbosity level 0-3.
    """

    compiler: str = ""
    macros: str = ""
    fuzz: bool = False
    optimize: bool = False
    sanitize: bool = False
    time_execution: bool = False
    verbose: int = 0

    def __post_init__(self) -> None:
        if self.time_execution:
            self.verbose = max(self.verbose, 1)

    @property
    def macro_list(self) -> list[str]:
        return parse_macros(self.macros)
