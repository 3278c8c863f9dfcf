# SPDX-License-Identifier: MIT
"""Configuration: build options, host platform and compiler probe."""
