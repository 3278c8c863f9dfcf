# SPDX-License-Identifier: MIT
"""Core components: directive evaluator, crawler, graph and run context."""
