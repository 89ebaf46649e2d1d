"""
Component 4: World-State Nodes

Search-tree nodes and the world views derived from them:
- WorldStateNode: world snapshot + lineage (parent index, action) + g/h
- legal_actions: applicable operators for a world
- world_to_stacks: per-location bottom-up stacks of a world
- build_world / world_from_layout: world description from stacks
- define_stack / define_world: interactive world description

Nodes reference their parent by arena index (see NodeArena in
component_6_planning_engine), so the search tree never holds object cycles.

Author: Blocks Planner Team
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set

from blocks_exceptions import MalformedWorldError
from common.constants import STACK_TERMINATOR
from component_1_blocks_entities import Block, EntityRegistry, Location
from component_2_blocks_facts import (
    FactKind,
    World,
    clear,
    clearloc,
    has_holding,
    held_block,
    on,
    ontable,
)
from component_3_blocks_actions import Action


# ============================================================================
# Search Node
# ============================================================================


@dataclass(frozen=True)
class WorldStateNode:
    """
    Node in the search tree.

    Attributes:
        index: Position in the owning arena
        facts: World snapshot of this node
        action: Action that produced it (None at the root)
        parent: Arena index of the parent (None at the root)
        cost: Steps from the root (g)
        estimate: Goal dissimilarity (h)
    """

    index: int
    facts: World
    action: Optional[Action] = None
    parent: Optional[int] = None
    cost: int = 0
    estimate: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_holding(self) -> bool:
        return has_holding(self.facts)

    def legal_actions(self) -> List[Action]:
        return legal_actions(self.facts)

    def to_stacks(
        self, locations: Optional[Sequence[Location]] = None
    ) -> Dict[Location, List[Block]]:
        return world_to_stacks(self.facts, locations)

    def __str__(self):
        action = self.action if self.action is not None else "ROOT"
        return f"Node#{self.index}[{action}, g={self.cost}, h={self.estimate}]"


# ============================================================================
# Legal Actions
# ============================================================================


def legal_actions(world: World) -> List[Action]:
    """
    Applicable actions for a world.

    Empty hand: PICKUP every clear block on the table, UNSTACK every clear
    block resting on another block. Holding h: PUTDOWN h on every clear
    location, STACK h on every clear block. Actions come out grouped by
    operator, each group in fact order.
    """
    held = held_block(world)
    actions: List[Action] = []

    if held is None:
        clear_blocks = _clear_blocks(world)
        for fact in world:
            if fact.kind is FactKind.ONTABLE and fact.block in clear_blocks:
                actions.append(Action.pickup(fact.block, fact.location))
        for fact in world:
            if fact.kind is FactKind.ON and fact.block in clear_blocks:
                actions.append(Action.unstack(fact.block, fact.below))
    else:
        for fact in world:
            if fact.kind is FactKind.CLEARLOC and fact.location is not None:
                actions.append(Action.putdown(held, fact.location))
        for fact in world:
            if fact.kind is FactKind.CLEAR and fact.block is not None:
                actions.append(Action.stack(held, fact.block))

    return actions


def _clear_blocks(world: World) -> Set[Block]:
    return {
        fact.block
        for fact in world
        if fact.kind is FactKind.CLEAR and fact.block is not None
    }


# ============================================================================
# Stack View
# ============================================================================


def world_locations(world: World) -> List[Location]:
    """Locations mentioned by a world, in first-mention order."""
    seen: List[Location] = []
    for fact in world:
        if fact.location is not None and fact.location not in seen:
            seen.append(fact.location)
    return seen


def world_to_stacks(
    world: World, locations: Optional[Sequence[Location]] = None
) -> Dict[Location, List[Block]]:
    """
    Bottom-up block stack per location.

    Args:
        world: World snapshot
        locations: Locations to report, in order (default: as mentioned by the world)

    Returns:
        Mapping location -> [bottom, ..., top]; empty list for a clear location.
        A held block appears in no stack.
    """
    if locations is None:
        locations = world_locations(world)

    bottoms: Dict[Location, Block] = {}
    above: Dict[Block, Block] = {}
    for fact in world:
        if fact.kind is FactKind.ONTABLE and fact.location is not None:
            bottoms.setdefault(fact.location, fact.block)
        elif fact.kind is FactKind.ON and fact.below is not None:
            above.setdefault(fact.below, fact.block)

    stacks: Dict[Location, List[Block]] = {}
    for location in locations:
        column: List[Block] = []
        current = bottoms.get(location)
        # malformed worlds may contain ON cycles
        while current is not None and current not in column:
            column.append(current)
            current = above.get(current)
        stacks[location] = column

    return stacks


# ============================================================================
# World Definition
# ============================================================================


def build_world(stacks: Mapping[Location, Sequence[Block]]) -> World:
    """
    Describe a world from bottom-up stacks.

    Per location, in mapping order: ONTABLE for the bottom block, ON for
    every block above, then CLEAR for the top block; CLEARLOC for an empty
    location.

    Raises:
        MalformedWorldError: if a block appears in more than one place
    """
    facts = []
    placed: Set[Block] = set()

    for location, column in stacks.items():
        if not column:
            facts.append(clearloc(location))
            continue

        below: Optional[Block] = None
        for block in column:
            if block in placed:
                raise MalformedWorldError(
                    f"Block {block} placed twice",
                    violations=[f"block {block} appears more than once"],
                )
            placed.add(block)
            if below is None:
                facts.append(ontable(block, location))
            else:
                facts.append(on(block, below))
            below = block
        facts.append(clear(below))

    return tuple(facts)


def world_from_layout(
    registry: EntityRegistry, layout: Mapping[str, Sequence[str]]
) -> World:
    """
    Describe a world from block names per location name.

    Every registry location is described; locations missing from the
    layout are empty.

    Example:
        world_from_layout(registry, {"L1": ["A", "B"], "L3": ["C"]})

    Raises:
        UnknownEntityError: for names not in the registry
        MalformedWorldError: if a block appears twice
    """
    for name in layout:
        registry.location(name)

    stacks: Dict[Location, List[Block]] = {}
    for location in registry.locations:
        names = layout.get(location.name, ())
        stacks[location] = [registry.block(name) for name in names]

    return build_world(stacks)


def define_stack(
    registry: EntityRegistry,
    location: Location,
    input_fn: Callable[[str], str] = input,
) -> List[str]:
    """
    Ask for the blocks of one location, from the table upward.

    Each prompt names the current top of the stack. An empty answer or
    STACK_TERMINATOR closes the stack. Answers are matched case-insensitively
    against the registry.

    Returns:
        Block names, bottom first

    Raises:
        UnknownEntityError: for an answer that names no registered block
    """
    names: List[str] = []
    top = location.name

    while True:
        answer = input_fn(f"Enter a block to stack on {top} (or clear): ").strip()
        if not answer or answer.upper() == STACK_TERMINATOR:
            return names

        name = answer if registry.has_block(answer) else answer.upper()
        registry.block(name)
        names.append(name)
        top = name


def define_world(
    registry: EntityRegistry, input_fn: Callable[[str], str] = input
) -> World:
    """
    Interactively describe a world, one stack per registry location.

    Raises:
        UnknownEntityError: for unknown block names
        MalformedWorldError: if a block is placed twice
    """
    layout = {
        location.name: define_stack(registry, location, input_fn)
        for location in registry.locations
    }
    return world_from_layout(registry, layout)
