"""
Component 7: Plan Renderer

Console presentation of world snapshots as fixed-depth block columns, one
column per location, bottom row last:

    State 1:
    _____________________
    |   _   _   _   _   |
    ...
    |   B   _   _   _   |
    |   A   _   C   _   |
        L1  L2  L3  L4

Presentation only; the planner never depends on this module.

Author: Blocks Planner Team
"""

from typing import List, Optional, Sequence

from common.constants import COLUMN_SPACING, DEFAULT_STACK_DEPTH, EMPTY_SLOT
from component_1_blocks_entities import Location
from component_2_blocks_facts import World
from component_4_world_state import WorldStateNode, world_locations, world_to_stacks


def world_to_columns(
    world: World,
    locations: Optional[Sequence[Location]] = None,
    depth: int = DEFAULT_STACK_DEPTH,
) -> List[List[str]]:
    """
    Block names per location, bottom-up, padded with EMPTY_SLOT to ``depth``.

    Stacks taller than ``depth`` are not truncated.
    """
    stacks = world_to_stacks(world, locations)
    columns = []
    for column in stacks.values():
        names = [block.name for block in column]
        names.extend(EMPTY_SLOT for _ in range(depth - len(names)))
        columns.append(names)
    return columns


def render_world_columns(
    world: World,
    locations: Optional[Sequence[Location]] = None,
    depth: int = DEFAULT_STACK_DEPTH,
) -> str:
    if locations is None:
        locations = world_locations(world)

    columns = world_to_columns(world, locations, depth)
    height = max([depth] + [len(column) for column in columns])
    width = max([1] + [len(name) for column in columns for name in column])

    spacing = len(COLUMN_SPACING)
    lines = ["_" * (2 + (len(columns) + 1) * spacing + len(columns) * width)]
    for row in range(height - 1, -1, -1):
        cells = [
            (column[row] if row < len(column) else EMPTY_SLOT).ljust(width)
            for column in columns
        ]
        lines.append("|" + COLUMN_SPACING + COLUMN_SPACING.join(cells) + COLUMN_SPACING + "|")

    footer = " " * (1 + spacing)
    footer += "".join(location.name.ljust(width + spacing) for location in locations)
    lines.append(footer.rstrip())
    return "\n".join(lines)


def render_plan(
    plan: Sequence[WorldStateNode],
    locations: Optional[Sequence[Location]] = None,
    depth: int = DEFAULT_STACK_DEPTH,
    show_actions: bool = False,
) -> str:
    """Render every snapshot of a plan as numbered column diagrams."""
    if not plan:
        return "No plan."

    if locations is None:
        locations = world_locations(plan[0].facts)

    blocks = []
    for i, node in enumerate(plan):
        header = f"State {i}:"
        if show_actions and node.action is not None:
            header += f" (after {node.action})"
        blocks.append(header + "\n" + render_world_columns(node.facts, locations, depth))
    return "\n\n".join(blocks)
