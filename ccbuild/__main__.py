# SPDX-License-Identifier: MIT
"""Allow ``python -m ccbuild``."""

import sys

from ccbuild.cli import main

sys.exit(main())
