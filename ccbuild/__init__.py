# SPDX-License-Identifier: MIT
"""
ccbuild: makefile generation from #include dependencies.

ccbuild finds every header, source file and link library an application
needs by reading the include block at the top of each file, evaluating
just enough of the preprocessor to pick the right platform branch, and
writes a makefile that builds it.
"""

from __future__ import annotations

from ccbuild.configure.config import BuildOptions
from ccbuild.core.graph import DependencyGraph
from ccbuild.core.preprocessor import Preprocessor, Status
from ccbuild.core.project import Project
from ccbuild.generators.makefile import MakefileGenerator

__version__ = "0.1.0"

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Core classes
    "BuildOptions",
    "DependencyGraph",
    "Preprocessor",
    "Project",
    "Status",
    # Generators
    "MakefileGenerator",
]
