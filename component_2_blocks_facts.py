"""
Component 2: Blocks World Facts

Typed logical atoms that describe one world snapshot:
- ON(b1, b2): b1 rests directly on b2
- ONTABLE(b, loc): b rests directly on location loc
- CLEAR(b): nothing rests on b
- CLEARLOC(loc): nothing rests on loc
- HOLDING(b): the effector holds b

Fact equality compares only the argument slots that are set on BOTH sides.
An unset slot acts as a wildcard, so a bare ``Fact(FactKind.CLEAR)`` equals
every CLEAR fact. This relation is symmetric but not transitive; worlds
built by the factories below only contain fully populated (ground) facts,
where it coincides with plain structural equality.

A world is an immutable tuple of facts. Order carries no meaning except for
stable rendering and deterministic action generation.

Author: Blocks Planner Team
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from component_1_blocks_entities import Block, Location


class FactKind(Enum):
    ON = "ON"
    ONTABLE = "ONTABLE"
    CLEAR = "CLEAR"
    CLEARLOC = "CLEARLOC"
    HOLDING = "HOLDING"


# slots each kind needs to be ground: (block, below, location)
_REQUIRED_SLOTS: Dict[FactKind, Tuple[bool, bool, bool]] = {
    FactKind.ON: (True, True, False),
    FactKind.ONTABLE: (True, False, True),
    FactKind.CLEAR: (True, False, False),
    FactKind.CLEARLOC: (False, False, True),
    FactKind.HOLDING: (True, False, False),
}


@dataclass(frozen=True, eq=False)
class Fact:
    """
    A single ground (or partially ground) atom.

    Attributes:
        kind: Predicate kind
        block: Subject block (ON, ONTABLE, CLEAR, HOLDING)
        below: Supporting block (ON only)
        location: Table location (ONTABLE, CLEARLOC)
    """

    kind: FactKind
    block: Optional[Block] = None
    below: Optional[Block] = None
    location: Optional[Location] = None

    def __eq__(self, other):
        if not isinstance(other, Fact):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        for mine, theirs in (
            (self.block, other.block),
            (self.below, other.below),
            (self.location, other.location),
        ):
            if mine is not None and theirs is not None and mine != theirs:
                return False
        return True

    def __hash__(self):
        # equal facts always share a kind; slots may be wildcards
        return hash(self.kind)

    @property
    def is_ground(self) -> bool:
        """True if every slot the kind requires is set."""
        need_block, need_below, need_location = _REQUIRED_SLOTS[self.kind]
        return (
            (not need_block or self.block is not None)
            and (not need_below or self.below is not None)
            and (not need_location or self.location is not None)
        )

    def key(self) -> Tuple[str, Optional[str], Optional[str], Optional[str]]:
        """Strict structural key (no wildcards), usable for hashing ground worlds."""
        return (
            self.kind.value,
            self.block.name if self.block is not None else None,
            self.below.name if self.below is not None else None,
            self.location.name if self.location is not None else None,
        )

    def __str__(self):
        args = [
            str(slot)
            for slot in (self.block, self.below, self.location)
            if slot is not None
        ]
        return f"{self.kind.value}({', '.join(args)})"

    def __repr__(self):
        return f"Fact<{self}>"


# ============================================================================
# Factories
# ============================================================================


def on(block: Block, below: Block) -> Fact:
    return Fact(FactKind.ON, block=block, below=below)


def ontable(block: Block, location: Location) -> Fact:
    return Fact(FactKind.ONTABLE, block=block, location=location)


def clear(block: Block) -> Fact:
    return Fact(FactKind.CLEAR, block=block)


def clearloc(location: Location) -> Fact:
    return Fact(FactKind.CLEARLOC, location=location)


def holding(block: Block) -> Fact:
    return Fact(FactKind.HOLDING, block=block)


# ============================================================================
# World helpers
# ============================================================================

World = Tuple[Fact, ...]


def world_contains(world: Iterable[Fact], fact: Fact) -> bool:
    """True if any fact of the world matches ``fact``."""
    return any(fact == candidate for candidate in world)


def worlds_equal(world: World, other: World) -> bool:
    """
    Order-independent world equality: every fact of each world is matched
    by some fact of the other.
    """
    return all(world_contains(other, fact) for fact in world) and all(
        world_contains(world, fact) for fact in other
    )


def count_unmatched(world: World, goal: World) -> int:
    """Number of facts in ``world`` with no matching fact in ``goal``."""
    return sum(1 for fact in world if not world_contains(goal, fact))


def is_ground_world(world: World) -> bool:
    return all(fact.is_ground for fact in world)


def held_block(world: World) -> Optional[Block]:
    """Block named by the first HOLDING fact, or None when the hand is empty."""
    for fact in world:
        if fact.kind is FactKind.HOLDING:
            return fact.block
    return None


def has_holding(world: World) -> bool:
    return any(fact.kind is FactKind.HOLDING for fact in world)


def find_world_violations(world: World) -> List[str]:
    """
    Check the closure properties a well-formed world satisfies.

    Returns:
        Human-readable violation messages (empty for a well-formed world)
    """
    violations: List[str] = []

    supports: Counter = Counter()
    location_uses: Counter = Counter()
    blocks_below: Counter = Counter()
    clear_blocks: Counter = Counter()
    held: List[Block] = []

    for fact in world:
        if not fact.is_ground:
            violations.append(f"partial fact {fact}")
            continue
        if fact.kind is FactKind.ON:
            supports[fact.block] += 1
            blocks_below[fact.below] += 1
        elif fact.kind is FactKind.ONTABLE:
            supports[fact.block] += 1
            location_uses[fact.location] += 1
        elif fact.kind is FactKind.HOLDING:
            supports[fact.block] += 1
            held.append(fact.block)
        elif fact.kind is FactKind.CLEARLOC:
            location_uses[fact.location] += 1
        elif fact.kind is FactKind.CLEAR:
            clear_blocks[fact.block] += 1

    for block, count in supports.items():
        if count > 1:
            violations.append(f"block {block} has {count} supports")

    for location, count in location_uses.items():
        if count > 1:
            violations.append(f"location {location} is described {count} times")

    if len(held) > 1:
        violations.append(
            f"{len(held)} blocks held at once: {', '.join(str(b) for b in held)}"
        )

    for block, count in blocks_below.items():
        if count > 1:
            violations.append(f"block {block} carries {count} blocks")
        if clear_blocks[block]:
            violations.append(f"block {block} is CLEAR but carries a block")

    for block in supports:
        if block not in blocks_below and block not in held and not clear_blocks[block]:
            violations.append(f"block {block} is on top of its stack but not CLEAR")

    for block in clear_blocks:
        if block not in supports:
            violations.append(f"block {block} is CLEAR but has no support")

    return violations
