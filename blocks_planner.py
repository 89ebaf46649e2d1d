"""
Blocks World Planner

Facade module giving one import point for the planner:
- component_1_blocks_entities: Block, Location, EntityRegistry
- component_2_blocks_facts: facts and world helpers
- component_3_blocks_actions: STRIPS operators
- component_4_world_state: search nodes, legal actions, stack views
- component_5_search_policies: heuristic and priority policies
- component_6_planning_engine: greedy best-first search
- component_7_plan_renderer: column rendering

Run ``python blocks_planner.py`` for an example problem on the reference
universe (blocks A-J, locations L1-L4), or add ``--interactive`` to
enter the initial and goal stacks at the console.

Author: Blocks Planner Team
"""

import argparse
import time
from typing import Callable, List, Optional

from blocks_exceptions import (
    BlocksPlannerException,
    get_user_friendly_message,
)
from component_1_blocks_entities import Block, EntityRegistry, Location
from component_2_blocks_facts import (
    Fact,
    FactKind,
    World,
    clear,
    clearloc,
    count_unmatched,
    find_world_violations,
    holding,
    on,
    ontable,
    world_contains,
    worlds_equal,
)
from component_3_blocks_actions import Action, ActionKind, Effect, apply_action
from component_4_world_state import (
    WorldStateNode,
    build_world,
    define_world,
    legal_actions,
    world_from_layout,
    world_to_stacks,
)
from component_5_search_policies import (
    AStarPolicy,
    GoalDissimilarityHeuristic,
    GreedyPolicy,
    Heuristic,
    PriorityPolicy,
    get_policy,
)
from component_6_planning_engine import (
    PlannerConfig,
    PlanningEngine,
    PlanResult,
    reconstruct_plan,
)
from component_7_plan_renderer import render_plan, render_world_columns
from component_8_logging_config import (
    console_level_from_env,
    get_logger,
    log_component_error,
    setup_logging,
)

__all__ = [
    # Entities
    "Block",
    "Location",
    "EntityRegistry",
    # Facts
    "Fact",
    "FactKind",
    "World",
    "on",
    "ontable",
    "clear",
    "clearloc",
    "holding",
    "world_contains",
    "worlds_equal",
    "count_unmatched",
    "find_world_violations",
    # Actions
    "Action",
    "ActionKind",
    "Effect",
    "apply_action",
    # World state
    "WorldStateNode",
    "legal_actions",
    "world_to_stacks",
    "build_world",
    "define_world",
    "world_from_layout",
    # Policies
    "Heuristic",
    "GoalDissimilarityHeuristic",
    "PriorityPolicy",
    "GreedyPolicy",
    "AStarPolicy",
    "get_policy",
    # Engine
    "PlannerConfig",
    "PlanningEngine",
    "PlanResult",
    "reconstruct_plan",
    "solve",
    # Rendering
    "render_plan",
    "render_world_columns",
]

logger = get_logger(__name__)


def solve(start: World, goal: World, config: Optional[PlannerConfig] = None) -> PlanResult:
    """Plan from ``start`` to ``goal`` with a fresh engine."""
    return PlanningEngine(config).run(start, goal)


DEMO_START_LAYOUT = {"L1": ["A", "B", "C"], "L2": ["D", "E"], "L3": ["F"], "L4": []}
DEMO_GOAL_LAYOUT = {"L1": [], "L2": ["C", "B", "A"], "L3": ["F", "E"], "L4": ["D"]}


def print_world(title: str, world: World) -> None:
    print(f"{title}:")
    for fact in world:
        print(fact)
    print("")


def main(argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input):
    """
    Example usage: rebuild two towers of the reference universe, or solve
    a problem entered at the console with ``--interactive``.
    """
    parser = argparse.ArgumentParser(description="Blocks world planner")
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Define the start and goal worlds stack by stack",
    )
    args = parser.parse_args(argv)

    setup_logging(console_level=console_level_from_env(), enable_file_logging=False)
    registry = EntityRegistry.reference()

    try:
        if args.interactive:
            print("Define the initial state.")
            start = define_world(registry, input_fn)
            print("Define the goal state.")
            goal = define_world(registry, input_fn)
        else:
            start = world_from_layout(registry, DEMO_START_LAYOUT)
            goal = world_from_layout(registry, DEMO_GOAL_LAYOUT)

        print_world("Init State", start)
        print_world("Goal State", goal)

        config = PlannerConfig.from_env()
        engine = PlanningEngine(config)

        started = time.monotonic()
        result = engine.run(start, goal)
        elapsed = time.monotonic() - started
    except BlocksPlannerException as e:
        log_component_error(logger, "blocks_planner", e)
        print(get_user_friendly_message(e, include_details=True))
        return

    if result.success:
        print(render_plan(result.plan, registry.locations, show_actions=True))
        print(f"\nActions: {', '.join(str(a) for a in result.actions)}")
        valid, error = engine.validate_plan(start, goal, result.actions)
        print(f"Plan valid: {valid}")
        if error:
            print(f"Error: {error}")
        print(f"Solution found in {elapsed:.3f} seconds.")
    else:
        print("No plan found!")


if __name__ == "__main__":
    main()
