# SPDX-License-Identifier: MIT
"""Host platform detection.

The generated makefile differs slightly between hosts: BSD make reads
the dependency side-file through ``.MAKE.DEPENDFILE`` while GNU make
needs ``-include``, and the corpus archive command uses each tar's own
spelling of "owned by root".
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class Platform:
    """Information about the host platform.

    Attributes:
        os: Operating system name ('freebsd', 'linux', 'darwin', ...).
        arch: Machine architecture ('x86_64', 'arm64', ...).
    """

    os: str
    arch: str

    @property
    def is_freebsd(self) -> bool:
        return self.os == "freebsd"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def tar_create_command(self) -> str:
        """tar invocation that creates a gzipped archive owned by root."""
        if self.is_freebsd:
            return "tar -cz --gid 0 --uid 0 -f "
        if self.is_linux:
            return "tar -cz --owner=0 --group=0 -f "
        return "tar -czf "


def _normalize_os(name: str) -> str:
    name = name.lower()
    if name.startswith("freebsd"):
        return "freebsd"
    if name.startswith("linux"):
        return "linux"
    return name


_platform: Platform | None = None


def get_platform() -> Platform:
    """Get the (cached) host platform."""
    global _platform
    if _platform is None:
        _platform = Platform(os=_normalize_os(sys.platform), arch=platform.machine())
    return _platform
