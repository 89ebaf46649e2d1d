"""
Common constants for the blocks world planner.

This package provides centralized default values shared by the planner
components and the rendering adapter.
"""

from common.constants import *

__all__ = [
    # Reference Universe
    "REFERENCE_BLOCK_NAMES",
    "REFERENCE_LOCATION_NAMES",
    "LOCATION_PREFIX",
    "STACK_TERMINATOR",
    # Rendering
    "DEFAULT_STACK_DEPTH",
    "EMPTY_SLOT",
    "COLUMN_SPACING",
    # Search
    "POLICY_GREEDY",
    "POLICY_ASTAR",
    "DEFAULT_POLICY",
    "DEDUP_INDEXED",
    "DEDUP_LINEAR",
    "DEFAULT_DEDUP_STRATEGY",
    "ENV_POLICY",
    "ENV_MAX_EXPANSIONS",
    "ENV_TIME_LIMIT",
    "ENV_DEDUP",
    "ENV_VALIDATE",
    "ENV_LOG_LEVEL",
    "TRUTHY_VALUES",
]
