"""
tests/test_blocks_facts.py

Unit tests for blocks world entities and facts.

Tests cover:
- Block/Location identity and the entity registry
- Partial-slot fact equality (including its non-transitive corner case)
- Order-independent world equality and the dissimilarity count
- World invariant diagnostics
"""

import pytest

from blocks_exceptions import InvalidConfigError, UnknownEntityError
from component_1_blocks_entities import Block, EntityRegistry, Location
from component_2_blocks_facts import (
    Fact,
    FactKind,
    clear,
    clearloc,
    count_unmatched,
    find_world_violations,
    held_block,
    holding,
    is_ground_world,
    on,
    ontable,
    world_contains,
    worlds_equal,
)
from component_4_world_state import world_from_layout

A, B, C = Block("A"), Block("B"), Block("C")
L1, L2 = Location("L1"), Location("L2")


@pytest.fixture
def registry():
    return EntityRegistry.reference()


class TestEntities:
    """Tests for Block, Location and EntityRegistry"""

    def test_equality_by_name(self):
        """Test 1: Entities with the same name are equal"""
        assert Block("A") == Block("A")
        assert Location("L1") == Location("L1")
        assert Block("A") != Block("B")

    def test_block_never_equals_location(self):
        """Test 2: Block and Location namespaces are separate"""
        assert Block("X") != Location("X")

    def test_reference_universe(self, registry):
        """Test 3: Reference registry has blocks A-J and locations L1-L4"""
        assert [b.name for b in registry.blocks] == list("ABCDEFGHIJ")
        assert [loc.name for loc in registry.locations] == ["L1", "L2", "L3", "L4"]

    def test_generalized_universe(self):
        """Test 4: Registry generalizes to N blocks and M locations"""
        registry = EntityRegistry.reference(block_count=3, location_count=2)
        assert [b.name for b in registry.blocks] == ["A", "B", "C"]
        assert [loc.name for loc in registry.locations] == ["L1", "L2"]

        large = EntityRegistry.reference(block_count=30)
        assert large.has_block("Z")
        assert large.has_block("B27")
        assert len(large.blocks) == 30

    def test_lookup(self, registry):
        """Test 5: Lookup returns the registered entity"""
        assert registry.block("C") == Block("C")
        assert registry.location("L4") == Location("L4")

    def test_unknown_names_raise(self, registry):
        """Test 6: Unknown names raise UnknownEntityError"""
        with pytest.raises(UnknownEntityError) as exc_info:
            registry.block("Z")
        assert exc_info.value.context["entity_name"] == "Z"

        with pytest.raises(UnknownEntityError):
            registry.location("L9")

    def test_duplicate_names_rejected(self):
        """Test 7: Duplicate names are a configuration error"""
        with pytest.raises(InvalidConfigError):
            EntityRegistry(["A", "A"], ["L1"])


class TestFactEquality:
    """Tests for partial-slot fact equality"""

    def test_structural_equality(self):
        """Test 1: Ground facts compare structurally"""
        assert on(A, B) == on(A, B)
        assert on(A, B) != on(B, A)
        assert ontable(A, L1) != ontable(A, L2)
        assert clear(A) != clear(B)

    def test_kind_must_match(self):
        """Test 2: Facts of different kinds never match"""
        assert clear(A) != holding(A)
        assert Fact(FactKind.CLEAR) != Fact(FactKind.CLEARLOC)

    def test_unset_slots_are_wildcards(self):
        """Test 3: A bare fact matches every fact of its kind"""
        assert Fact(FactKind.CLEAR) == clear(A)
        assert clear(A) == Fact(FactKind.CLEAR)
        assert Fact(FactKind.CLEARLOC) == clearloc(L2)
        assert Fact(FactKind.ONTABLE, block=A) == ontable(A, L1)
        assert Fact(FactKind.ONTABLE, block=A) != ontable(B, L1)

    def test_equality_is_not_transitive(self):
        """Test 4: Wildcard equality is not transitive"""
        partial = Fact(FactKind.ON, block=A)

        assert partial == on(A, B)
        assert partial == on(A, C)
        assert on(A, B) != on(A, C)

    def test_hash_consistent_with_equality(self):
        """Test 5: Equal facts hash equally"""
        assert hash(Fact(FactKind.ON, block=A)) == hash(on(A, B))
        assert hash(on(A, B)) == hash(on(B, C))

    def test_ground_detection(self):
        """Test 6: is_ground reflects the slots each kind requires"""
        assert on(A, B).is_ground
        assert clearloc(L1).is_ground
        assert not Fact(FactKind.ON, block=A).is_ground
        assert not Fact(FactKind.CLEARLOC).is_ground
        assert is_ground_world((on(A, B), clear(A)))
        assert not is_ground_world((on(A, B), Fact(FactKind.CLEAR)))

    def test_string_form(self):
        """Test 7: Facts print as KIND(args)"""
        assert str(on(A, B)) == "ON(A, B)"
        assert str(ontable(A, L1)) == "ONTABLE(A, L1)"
        assert str(clearloc(L2)) == "CLEARLOC(L2)"
        assert str(holding(C)) == "HOLDING(C)"


class TestWorldHelpers:
    """Tests for world-level helpers"""

    def test_contains(self):
        """Test 1: world_contains uses fact equality"""
        world = (ontable(A, L1), clear(A))
        assert world_contains(world, clear(A))
        assert world_contains(world, Fact(FactKind.ONTABLE))
        assert not world_contains(world, clear(B))

    def test_worlds_equal_ignores_order(self):
        """Test 2: World equality is order independent"""
        world = (ontable(A, L1), on(B, A), clear(B), clearloc(L2))
        shuffled = (clear(B), clearloc(L2), on(B, A), ontable(A, L1))
        assert worlds_equal(world, shuffled)

    def test_worlds_equal_needs_mutual_containment(self):
        """Test 3: A strict subset is not equal"""
        world = (ontable(A, L1), clear(A), clearloc(L2))
        subset = (ontable(A, L1), clear(A))
        assert not worlds_equal(world, subset)
        assert not worlds_equal(subset, world)

    def test_worlds_equal_ignores_duplicates(self):
        """Test 4: Duplicated facts do not break equality"""
        assert worlds_equal((clear(A), clear(A), ontable(A, L1)), (ontable(A, L1), clear(A)))

    def test_count_unmatched(self):
        """Test 5: Dissimilarity counts world facts missing from the goal"""
        world = (ontable(A, L1), clear(A), clearloc(L2))
        goal = (ontable(A, L2), clear(A), clearloc(L1))
        assert count_unmatched(world, goal) == 2
        assert count_unmatched(goal, goal) == 0

    def test_held_block(self):
        """Test 6: held_block finds the HOLDING fact"""
        assert held_block((clearloc(L1), holding(B))) == B
        assert held_block((ontable(A, L1), clear(A))) is None


class TestWorldViolations:
    """Tests for find_world_violations"""

    def test_well_formed_world(self, registry):
        """Test 1: A layout-built world has no violations"""
        world = world_from_layout(registry, {"L1": ["A", "B"], "L3": ["C"]})
        assert find_world_violations(world) == []

    def test_holding_world_is_well_formed(self):
        """Test 2: A world with one held block is well formed"""
        world = (ontable(A, L1), clear(A), clearloc(L2), holding(B))
        assert find_world_violations(world) == []

    def test_block_with_two_supports(self):
        """Test 3: A block on two locations is reported"""
        world = (ontable(A, L1), ontable(A, L2), clear(A))
        violations = find_world_violations(world)
        assert any("2 supports" in v for v in violations)

    def test_location_occupied_and_clear(self):
        """Test 4: A location both occupied and clear is reported"""
        world = (ontable(A, L1), clear(A), clearloc(L1))
        violations = find_world_violations(world)
        assert any("location L1" in v for v in violations)

    def test_two_blocks_held(self):
        """Test 5: More than one held block is reported"""
        world = (holding(A), holding(B), clearloc(L1))
        violations = find_world_violations(world)
        assert any("held at once" in v for v in violations)

    def test_clear_block_carrying_block(self):
        """Test 6: CLEAR on a block that carries another is reported"""
        world = (ontable(A, L1), on(B, A), clear(A), clear(B))
        violations = find_world_violations(world)
        assert any("CLEAR but carries" in v for v in violations)
