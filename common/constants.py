"""
Centralized constants for the blocks world planner.

Single source of truth for defaults used across the components.

Organization:
    - Reference Universe: the block/location names of the reference domain
    - Rendering: column depth and padding of the plan renderer
    - Search: priority policy names, dedup strategies and env variable names

Usage:
    from common.constants import DEFAULT_STACK_DEPTH, EMPTY_SLOT

Note:
    These are defaults. PlannerConfig and the renderer accept overrides via
    constructor parameters.
"""

# =============================================================================
# Reference Universe
# =============================================================================

REFERENCE_BLOCK_NAMES: tuple = ("A", "B", "C", "D", "E", "F", "G", "H", "I", "J")
"""Ten blocks of the reference domain."""

REFERENCE_LOCATION_NAMES: tuple = ("L1", "L2", "L3", "L4")
"""Four fixed table locations of the reference domain."""

LOCATION_PREFIX: str = "L"

STACK_TERMINATOR: str = "CLEAR"
"""Answer that closes a stack during interactive world definition."""

# =============================================================================
# Rendering
# =============================================================================

DEFAULT_STACK_DEPTH: int = 10
"""
Rows per rendered column. Matches the reference universe size, so a single
tower of every block still fits.
"""

EMPTY_SLOT: str = "_"

COLUMN_SPACING: str = "   "

# =============================================================================
# Search
# =============================================================================

POLICY_GREEDY: str = "greedy"
POLICY_ASTAR: str = "astar"
DEFAULT_POLICY: str = POLICY_GREEDY
"""
Greedy best-first (h only) is the default. A* (g + h) finds shortest plans
but its frontier grows too fast beyond roughly seven blocks.
"""

DEDUP_INDEXED: str = "indexed"
DEDUP_LINEAR: str = "linear"
DEFAULT_DEDUP_STRATEGY: str = DEDUP_INDEXED

ENV_POLICY: str = "BLOCKS_PLANNER_POLICY"
ENV_MAX_EXPANSIONS: str = "BLOCKS_PLANNER_MAX_EXPANSIONS"
ENV_TIME_LIMIT: str = "BLOCKS_PLANNER_TIME_LIMIT"
ENV_DEDUP: str = "BLOCKS_PLANNER_DEDUP"
ENV_VALIDATE: str = "BLOCKS_PLANNER_VALIDATE"
ENV_LOG_LEVEL: str = "BLOCKS_PLANNER_LOG_LEVEL"

TRUTHY_VALUES: frozenset = frozenset({"1", "true", "yes", "on"})
"""Accepted spellings of an enabled boolean environment variable."""
