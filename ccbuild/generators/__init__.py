# SPDX-License-Identifier: MIT
"""Build file generators for ccbuild."""

from ccbuild.generators.generator import BaseGenerator, Generator
from ccbuild.generators.makefile import MakefileGenerator

__all__ = [
    "BaseGenerator",
    "Generator",
    "MakefileGenerator",
]
