"""
Component 3: Blocks World Actions

The four STRIPS operators of the blocks world plus a no-effect sentinel:
- PICKUP(b, loc): lift b from a table location
- PUTDOWN(b, loc): set the held block b on a free location
- UNSTACK(b, under): lift b from the block under it
- STACK(b, under): set the held block b on a clear block
- NOOP: produces the root node

Every action exposes a deterministic delete/add list (its STRIPS effect).
``apply_action`` never validates preconditions; illegal applications are
ruled out by the legal-action generator in component_4_world_state.

Author: Blocks Planner Team
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from component_1_blocks_entities import Block, Location
from component_2_blocks_facts import (
    Fact,
    World,
    clear,
    clearloc,
    holding,
    on,
    ontable,
)


class ActionKind(Enum):
    PICKUP = "PICKUP"
    PUTDOWN = "PUTDOWN"
    UNSTACK = "UNSTACK"
    STACK = "STACK"
    NOOP = "NOOP"


@dataclass(frozen=True)
class Effect:
    """STRIPS effect: facts removed from and appended to a world."""

    deletes: Tuple[Fact, ...] = ()
    adds: Tuple[Fact, ...] = ()


@dataclass(frozen=True)
class Action:
    """
    A ground operator instance.

    Attributes:
        kind: Operator
        block: The block being moved
        target: Block underneath (UNSTACK, STACK)
        location: Table location (PICKUP, PUTDOWN)
    """

    kind: ActionKind
    block: Optional[Block] = None
    target: Optional[Block] = None
    location: Optional[Location] = None

    @classmethod
    def pickup(cls, block: Block, location: Location) -> "Action":
        return cls(ActionKind.PICKUP, block=block, location=location)

    @classmethod
    def putdown(cls, block: Block, location: Location) -> "Action":
        return cls(ActionKind.PUTDOWN, block=block, location=location)

    @classmethod
    def unstack(cls, block: Block, under: Block) -> "Action":
        return cls(ActionKind.UNSTACK, block=block, target=under)

    @classmethod
    def stack(cls, block: Block, under: Block) -> "Action":
        return cls(ActionKind.STACK, block=block, target=under)

    @classmethod
    def noop(cls) -> "Action":
        return cls(ActionKind.NOOP)

    def effect(self) -> Effect:
        """Delete and add lists of this action."""
        if self.kind is ActionKind.PICKUP:
            return Effect(
                deletes=(ontable(self.block, self.location), clear(self.block)),
                adds=(clearloc(self.location), holding(self.block)),
            )
        if self.kind is ActionKind.PUTDOWN:
            return Effect(
                deletes=(clearloc(self.location), holding(self.block)),
                adds=(ontable(self.block, self.location), clear(self.block)),
            )
        if self.kind is ActionKind.UNSTACK:
            return Effect(
                deletes=(on(self.block, self.target), clear(self.block)),
                adds=(clear(self.target), holding(self.block)),
            )
        if self.kind is ActionKind.STACK:
            return Effect(
                deletes=(clear(self.target), holding(self.block)),
                adds=(on(self.block, self.target), clear(self.block)),
            )
        return Effect()

    def preconditions(self) -> Tuple[Fact, ...]:
        """
        Facts that must hold before the action. For this domain they are
        exactly the delete list; PICKUP and UNSTACK additionally need an
        empty hand, which ``legal_actions`` enforces.
        """
        return self.effect().deletes

    def apply(self, world: World) -> World:
        return apply_action(self, world)

    @property
    def is_noop(self) -> bool:
        return self.kind is ActionKind.NOOP

    def __str__(self):
        args = [
            str(slot)
            for slot in (self.block, self.target, self.location)
            if slot is not None
        ]
        return f"{self.kind.value}({', '.join(args)})"


def apply_action(action: Action, world: World) -> World:
    """
    Return a new world with the action's effect applied.

    Each deleted fact removes the first matching fact of the world; the
    added facts are appended in effect order. The input is not modified.
    """
    effect = action.effect()
    remaining: List[Fact] = list(world)

    for deleted in effect.deletes:
        for index, fact in enumerate(remaining):
            if deleted == fact:
                del remaining[index]
                break

    remaining.extend(effect.adds)
    return tuple(remaining)
