"""
Component 5: Search Heuristics and Priority Policies

Heuristics estimate how far a world is from the goal world:
- GoalDissimilarityHeuristic: count of world facts absent from the goal

Priority policies turn (g, h) into the frontier ordering key:
- GreedyPolicy: h only (default; fast, plans not necessarily shortest)
- AStarPolicy: g + h (shortest plans on small problems, frontier explodes
  beyond a handful of blocks)

Author: Blocks Planner Team
"""

from typing import Dict, Type

from blocks_exceptions import InvalidConfigError
from common.constants import POLICY_ASTAR, POLICY_GREEDY
from component_2_blocks_facts import World, count_unmatched

# ============================================================================
# Heuristics
# ============================================================================


class Heuristic:
    """Base class for world-distance heuristics."""

    def estimate(self, world: World, goal: World) -> int:
        """Estimate the distance from world to goal."""
        raise NotImplementedError


class GoalDissimilarityHeuristic(Heuristic):
    """
    Number of facts in the world that the goal does not contain.

    This is a dissimilarity count, not a lower bound on the remaining
    number of actions. It is 0 exactly when every fact of the world is
    also a goal fact.
    """

    def estimate(self, world: World, goal: World) -> int:
        return count_unmatched(world, goal)


# ============================================================================
# Priority Policies
# ============================================================================


class PriorityPolicy:
    """Maps a node's path cost g and estimate h to its frontier key."""

    name: str = ""

    def key(self, cost: int, estimate: int) -> int:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class GreedyPolicy(PriorityPolicy):
    """Greedy best-first: order by h alone."""

    name = POLICY_GREEDY

    def key(self, cost: int, estimate: int) -> int:
        return estimate


class AStarPolicy(PriorityPolicy):
    """Classic A*: order by g + h."""

    name = POLICY_ASTAR

    def key(self, cost: int, estimate: int) -> int:
        return cost + estimate


_POLICIES: Dict[str, Type[PriorityPolicy]] = {
    GreedyPolicy.name: GreedyPolicy,
    AStarPolicy.name: AStarPolicy,
}


def available_policies() -> list:
    return sorted(_POLICIES)


def get_policy(name: str) -> PriorityPolicy:
    """
    Look up a priority policy by name ("greedy" or "astar").

    Raises:
        InvalidConfigError: for unknown names
    """
    try:
        return _POLICIES[name.lower()]()
    except KeyError:
        raise InvalidConfigError(
            f"Unknown priority policy '{name}'",
            context={"available": available_policies()},
        ) from None
