"""
Component 1: Blocks World Entities

Identity types for the blocks world:
- Block: a named block
- Location: a named fixed table location
- EntityRegistry: per-run mapping from names to entities

The registry is created once per planning run and passed explicitly to
whatever builds world descriptions. There is no process-wide block table.

Author: Blocks Planner Team
"""

import string
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from blocks_exceptions import InvalidConfigError, UnknownEntityError
from common.constants import (
    LOCATION_PREFIX,
    REFERENCE_BLOCK_NAMES,
    REFERENCE_LOCATION_NAMES,
)


@dataclass(frozen=True)
class Block:
    """A block, identified by name only."""

    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Location:
    """A fixed table location, identified by name only."""

    name: str

    def __str__(self):
        return self.name


class EntityRegistry:
    """
    Name -> entity lookup for one planning run.

    Blocks and locations live in separate namespaces, so a block "L1" and a
    location "L1" may coexist. Insertion order is kept; it drives the order
    of rendered columns.

    Example:
        registry = EntityRegistry(["A", "B"], ["L1", "L2"])
        a = registry.block("A")
    """

    def __init__(self, block_names: Iterable[str], location_names: Iterable[str]):
        self._blocks: Dict[str, Block] = self._index(block_names, Block, "block")
        self._locations: Dict[str, Location] = self._index(
            location_names, Location, "location"
        )

    @staticmethod
    def _index(names: Iterable[str], factory, kind: str) -> Dict:
        index: Dict = {}
        for name in names:
            if not name:
                raise InvalidConfigError(f"Empty {kind} name")
            if name in index:
                raise InvalidConfigError(
                    f"Duplicate {kind} name '{name}'",
                    context={"entity_name": name, "entity_type": kind},
                )
            index[name] = factory(name)
        return index

    @classmethod
    def reference(
        cls, block_count: Optional[int] = None, location_count: Optional[int] = None
    ) -> "EntityRegistry":
        """
        Build the reference universe (blocks A-J, locations L1-L4), or a
        generalized one with ``block_count`` blocks and ``location_count``
        locations.
        """
        if block_count is None:
            block_names: Tuple[str, ...] = REFERENCE_BLOCK_NAMES
        else:
            block_names = tuple(_block_name(i) for i in range(block_count))

        if location_count is None:
            location_names: Tuple[str, ...] = REFERENCE_LOCATION_NAMES
        else:
            location_names = tuple(
                f"{LOCATION_PREFIX}{i + 1}" for i in range(location_count)
            )

        return cls(block_names, location_names)

    def block(self, name: str) -> Block:
        try:
            return self._blocks[name]
        except KeyError:
            raise UnknownEntityError(
                f"Unknown block '{name}'", entity_name=name, entity_type="block"
            ) from None

    def location(self, name: str) -> Location:
        try:
            return self._locations[name]
        except KeyError:
            raise UnknownEntityError(
                f"Unknown location '{name}'", entity_name=name, entity_type="location"
            ) from None

    def has_block(self, name: str) -> bool:
        return name in self._blocks

    def has_location(self, name: str) -> bool:
        return name in self._locations

    @property
    def blocks(self) -> List[Block]:
        return list(self._blocks.values())

    @property
    def locations(self) -> List[Location]:
        return list(self._locations.values())

    def __repr__(self):
        return (
            f"EntityRegistry(blocks={list(self._blocks)}, "
            f"locations={list(self._locations)})"
        )


def _block_name(index: int) -> str:
    letters = string.ascii_uppercase
    if index < len(letters):
        return letters[index]
    return f"B{index + 1}"
