"""
tests/test_plan_renderer.py

Tests for the column renderer.
"""

from component_1_blocks_entities import Block, EntityRegistry, Location
from component_4_world_state import world_from_layout
from component_6_planning_engine import PlanningEngine
from component_7_plan_renderer import (
    render_plan,
    render_world_columns,
    world_to_columns,
)

A, B = Block("A"), Block("B")
L1, L2 = Location("L1"), Location("L2")


def small_registry():
    return EntityRegistry.reference(block_count=2, location_count=2)


class TestWorldToColumns:
    """Tests for world_to_columns"""

    def test_padding(self):
        """Test 1: Columns are padded with '_' to the default depth of 10"""
        world = world_from_layout(small_registry(), {"L1": ["A", "B"]})
        columns = world_to_columns(world)

        assert columns[0] == ["A", "B"] + ["_"] * 8
        assert columns[1] == ["_"] * 10

    def test_tall_stack_not_truncated(self):
        """Test 2: A stack taller than the depth keeps every block"""
        world = world_from_layout(small_registry(), {"L1": ["A", "B"]})
        assert world_to_columns(world, depth=1)[0] == ["A", "B"]


class TestRenderWorldColumns:
    """Tests for render_world_columns"""

    def test_layout(self):
        """Test 1: Header, rows top-down and location footer"""
        world = world_from_layout(small_registry(), {"L1": ["A"]})

        rendered = render_world_columns(world, [L1, L2], depth=2)

        assert rendered.split("\n") == [
            "_____________",
            "|   _   _   |",
            "|   A   _   |",
            "    L1  L2",
        ]

    def test_default_depth(self):
        """Test 2: Ten rows plus header and footer by default"""
        world = world_from_layout(small_registry(), {"L2": ["B", "A"]})
        lines = render_world_columns(world).split("\n")

        assert len(lines) == 12
        assert lines[-2] == "|   _   B   |"
        assert lines[-3] == "|   _   A   |"


class TestRenderPlan:
    """Tests for render_plan"""

    def test_empty_plan(self):
        """Test 1: An empty plan renders a short notice"""
        assert render_plan([]) == "No plan."

    def test_numbered_states(self):
        """Test 2: Every snapshot gets a numbered header"""
        registry = small_registry()
        start = world_from_layout(registry, {"L1": ["A"]})
        goal = world_from_layout(registry, {"L2": ["A"]})
        plan = PlanningEngine().solve(start, goal)

        rendered = render_plan(plan, registry.locations, depth=2, show_actions=True)

        assert rendered.startswith("State 0:\n")
        assert "State 1: (after PUTDOWN(A, L2))" in rendered
        assert "State 2:" not in rendered
