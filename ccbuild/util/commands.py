# SPDX-License-Identifier: MIT
"""Process helpers: running make and the built executables."""

from __future__ import annotations

import logging
import os
import random
import subprocess
from collections.abc import Sequence

from ccbuild.core.errors import CcbuildError

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1

# Attempts at finding an unused temporary makefile name.
TEMPORARY_NAME_ATTEMPTS = 10


def spawn(path: str, arguments: Sequence[str] = ()) -> int:
    """Run a program and wait for it.

    Returns:
        The program's exit status, or EXIT_FAILURE if it could not be
        started or was terminated by a signal.
    """
    try:
        result = subprocess.run([path, *arguments])
    except OSError as e:
        logger.error("Failed to execute: %s", path)
        logger.error("%s", e)
        return EXIT_FAILURE

    if result.returncode < 0:
        logger.error("Exited abnormally: %s", path)
        return EXIT_FAILURE
    return result.returncode


def make(makefile: str, target: str, verbose: int = 0) -> int:
    """Run ``make -f makefile target``.

    Commands are echoed from verbosity 1, except for the clean targets
    which need verbosity 2.
    """
    if verbose >= 2:
        logger.info("make -f %s %s", makefile, target)

    args = []
    if verbose == 0 or (verbose == 1 and target.startswith("clean")):
        args.append("-s")
    args.extend(["-f", makefile, target])
    return spawn("make", args)


def temporary_makefile_name() -> str:
    """Get an unused ``tmp-XXXXXXXX.mk`` name in the current directory.

    Raises:
        CcbuildError: If no unused name was found.
    """
    for _ in range(TEMPORARY_NAME_ATTEMPTS):
        name = f"tmp-{random.getrandbits(32):08x}.mk"
        if not os.path.lexists(name):
            return name
    raise CcbuildError("failed to generate unique makefile name")
