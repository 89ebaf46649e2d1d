"""
Component 6: Planning Engine

Priority-ordered graph search from a start world to a goal world:
- PlannerConfig: policy, budgets, dedup strategy (frozen, validated)
- NodeArena: owns every search node; parents are arena indices
- ClosedIndex: expanded worlds with hashed lookup for ground worlds
- PlanningEngine: search, plan reconstruction, plan validation/simulation
- PlanResult: plan plus search statistics

The default ordering is greedy best-first (h only). It does not return
shortest plans, but it solves ten-block problems that A* (g + h) cannot
finish in reasonable time. AStarPolicy remains available for comparison.

Revisits are discarded against the closed set only; a cheaper path to an
already expanded world is not relaxed.

Author: Blocks Planner Team
"""

import heapq
import itertools
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple

from blocks_exceptions import (
    InvalidConfigError,
    NoSolutionError,
    PlanValidationError,
    ResourceExhaustedError,
    wrap_exception,
)
from common.constants import (
    DEDUP_INDEXED,
    DEDUP_LINEAR,
    DEFAULT_DEDUP_STRATEGY,
    DEFAULT_POLICY,
    ENV_DEDUP,
    ENV_MAX_EXPANSIONS,
    ENV_POLICY,
    ENV_TIME_LIMIT,
    ENV_VALIDATE,
    TRUTHY_VALUES,
)
from component_2_blocks_facts import (
    World,
    find_world_violations,
    held_block,
    is_ground_world,
    world_contains,
    worlds_equal,
)
from component_3_blocks_actions import Action, ActionKind, apply_action
from component_4_world_state import WorldStateNode, legal_actions
from component_5_search_policies import (
    GoalDissimilarityHeuristic,
    Heuristic,
    PriorityPolicy,
    available_policies,
    get_policy,
)
from component_8_logging_config import PerformanceLogger, get_logger

logger = get_logger(__name__)


# ============================================================================
# Configuration
# ============================================================================


@dataclass(frozen=True)
class PlannerConfig:
    """
    Immutable search configuration.

    Attributes:
        policy: Priority policy name ("greedy" or "astar")
        max_expansions: Expansion budget, None for unbounded
        time_limit_seconds: Wall-clock budget, None for unbounded
        dedup_strategy: "indexed" (hashed closed set) or "linear" (plain scan)
        validate_inputs: Reject malformed start/goal worlds with an empty plan
    """

    policy: str = DEFAULT_POLICY
    max_expansions: Optional[int] = None
    time_limit_seconds: Optional[float] = None
    dedup_strategy: str = DEFAULT_DEDUP_STRATEGY
    validate_inputs: bool = False

    def __post_init__(self):
        # frozen: normalized names are written through object.__setattr__
        object.__setattr__(self, "policy", self.policy.strip().lower())
        object.__setattr__(self, "dedup_strategy", self.dedup_strategy.strip().lower())

        if self.policy not in available_policies():
            raise InvalidConfigError(
                f"Unknown priority policy '{self.policy}'",
                context={"available": available_policies()},
            )
        if self.max_expansions is not None and self.max_expansions < 1:
            raise InvalidConfigError("max_expansions must be >= 1")
        if self.time_limit_seconds is not None and self.time_limit_seconds <= 0:
            raise InvalidConfigError("time_limit_seconds must be > 0")
        if self.dedup_strategy not in (DEDUP_INDEXED, DEDUP_LINEAR):
            raise InvalidConfigError(
                f"Unknown dedup strategy '{self.dedup_strategy}'",
                context={"available": [DEDUP_INDEXED, DEDUP_LINEAR]},
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PlannerConfig":
        """
        Build a config from BLOCKS_PLANNER_* environment variables, falling
        back to the defaults for anything unset.
        """
        env = os.environ if environ is None else environ

        def read_number(name: str, convert):
            raw = env.get(name)
            if raw is None or raw.strip() == "":
                return None
            try:
                return convert(raw)
            except ValueError as e:
                raise wrap_exception(
                    e, InvalidConfigError, f"Invalid value for {name}", raw=raw
                ) from e

        return cls(
            policy=env.get(ENV_POLICY, DEFAULT_POLICY),
            max_expansions=read_number(ENV_MAX_EXPANSIONS, int),
            time_limit_seconds=read_number(ENV_TIME_LIMIT, float),
            dedup_strategy=env.get(ENV_DEDUP, DEFAULT_DEDUP_STRATEGY),
            validate_inputs=env.get(ENV_VALIDATE, "").strip().lower() in TRUTHY_VALUES,
        )


# ============================================================================
# Node Arena
# ============================================================================


class NodeArena:
    """Append-only store of search nodes, addressed by index."""

    def __init__(self):
        self._nodes: List[WorldStateNode] = []

    def add(
        self,
        facts: World,
        action: Optional[Action],
        parent: Optional[int],
        cost: int,
        estimate: int,
    ) -> WorldStateNode:
        node = WorldStateNode(
            index=len(self._nodes),
            facts=facts,
            action=action,
            parent=parent,
            cost=cost,
            estimate=estimate,
        )
        self._nodes.append(node)
        return node

    def lineage(self, index: int) -> List[WorldStateNode]:
        """Nodes from the root down to ``index``."""
        chain: List[WorldStateNode] = []
        current: Optional[int] = index
        while current is not None:
            node = self._nodes[current]
            chain.append(node)
            current = node.parent
        chain.reverse()
        return chain

    def __getitem__(self, index: int) -> WorldStateNode:
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[WorldStateNode]:
        return iter(self._nodes)


# ============================================================================
# Closed Set
# ============================================================================


def canonical_key(world: World) -> FrozenSet[Tuple]:
    return frozenset(fact.key() for fact in world)


class ClosedIndex:
    """
    Expanded worlds, queried with order-independent world equality.

    Ground worlds are bucketed by their canonical fact-key set; a bucket hit
    is confirmed with ``worlds_equal``. Worlds holding partial facts cannot
    be hashed that way and are always scanned linearly. With ``indexed``
    False every lookup is a linear scan.
    """

    def __init__(self, indexed: bool = True):
        self.indexed = indexed
        self._buckets: Dict[FrozenSet[Tuple], List[World]] = {}
        self._unindexed: List[World] = []
        self._all: List[World] = []
        self.node_indices: List[int] = []

    def add(self, node: WorldStateNode) -> None:
        world = node.facts
        if self.indexed and is_ground_world(world):
            self._buckets.setdefault(canonical_key(world), []).append(world)
        else:
            self._unindexed.append(world)
        self._all.append(world)
        self.node_indices.append(node.index)

    def contains(self, world: World) -> bool:
        if not self.indexed or not is_ground_world(world):
            return any(worlds_equal(world, closed) for closed in self._all)

        for closed in self._buckets.get(canonical_key(world), ()):
            if worlds_equal(world, closed):
                return True
        return any(worlds_equal(world, closed) for closed in self._unindexed)

    def __len__(self) -> int:
        return len(self._all)


@dataclass(order=True)
class FrontierEntry:
    """Heap entry: lowest key first, insertion order breaks ties."""

    priority: int
    sequence: int
    node_index: int = field(compare=False)


@dataclass
class SearchTrace:
    """Arena and closed set of the most recent search, kept for inspection."""

    arena: NodeArena = field(default_factory=NodeArena)
    closed: ClosedIndex = field(default_factory=ClosedIndex)
    solution_index: Optional[int] = None


# ============================================================================
# Results
# ============================================================================


@dataclass
class PlanResult:
    """
    Outcome of one planning run.

    Attributes:
        success: Whether the goal world was reached
        plan: Snapshots from start to goal, intermediate HOLDING snapshots removed
        actions: Full action sequence (pick/place pairs included)
        stats: Search counters
        policy: Name of the priority policy used
        reason: Failure reason ("search_exhausted", "malformed_world") or ""
    """

    success: bool
    plan: List[WorldStateNode] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    policy: str = ""
    reason: str = ""

    @property
    def snapshots(self) -> List[World]:
        return [node.facts for node in self.plan]

    def unwrap(self) -> List[WorldStateNode]:
        """Return the plan, or raise NoSolutionError if there is none."""
        if not self.success:
            raise NoSolutionError(
                "No plan reaches the goal world",
                context={"reason": self.reason, **self.stats},
            )
        return self.plan


def reconstruct_plan(arena: NodeArena, solution_index: int) -> List[WorldStateNode]:
    """
    Root-to-solution chain with the intermediate HOLDING snapshots removed.

    Snapshots with a held block are the in-between states of a pick/place
    pair and are not shown as world configurations. The start and goal
    snapshots are always kept, even when they hold a block.
    """
    return [
        node
        for node in arena.lineage(solution_index)
        if node.is_root or node.index == solution_index or not node.is_holding
    ]


def reconstruct_actions(arena: NodeArena, solution_index: int) -> List[Action]:
    return [
        node.action
        for node in arena.lineage(solution_index)
        if node.action is not None and not node.action.is_noop
    ]


# ============================================================================
# Planning Engine
# ============================================================================


class PlanningEngine:
    """
    Greedy best-first planner for the blocks world.

    Features:
    - Configurable priority policy (greedy h, or A* g + h)
    - Closed-set deduplication with order-independent world equality
    - Optional expansion and wall-clock budgets
    - Plan validation, simulation and failure diagnosis
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        heuristic: Optional[Heuristic] = None,
        policy: Optional[PriorityPolicy] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Search configuration (default: PlannerConfig())
            heuristic: World distance estimate (default: GoalDissimilarityHeuristic)
            policy: Frontier ordering; overrides ``config.policy`` when given
        """
        self.config = config or PlannerConfig()
        self.heuristic = heuristic or GoalDissimilarityHeuristic()
        self.policy = policy or get_policy(self.config.policy)
        self.stats: Dict[str, Any] = self._fresh_stats()
        self.last_trace: Optional[SearchTrace] = None

    @staticmethod
    def _fresh_stats() -> Dict[str, Any]:
        return {
            "expansions": 0,
            "generated": 0,
            "duplicates": 0,
            "stale": 0,
            "plan_length": 0,
        }

    def solve(self, start: World, goal: World) -> List[WorldStateNode]:
        """
        Find a plan from ``start`` to ``goal``.

        Returns:
            Snapshots from start to goal (intermediate HOLDING snapshots
            removed), or an empty list if no plan exists

        Raises:
            ResourceExhaustedError: if a configured budget runs out
        """
        return self.run(start, goal).plan

    def run(self, start: World, goal: World) -> PlanResult:
        """Like solve(), but returns the full PlanResult."""
        self.stats = self._fresh_stats()
        trace = SearchTrace(closed=ClosedIndex(self.config.dedup_strategy == DEDUP_INDEXED))
        self.last_trace = trace

        logger.info(
            "Starting search",
            extra={
                "start_facts": len(start),
                "goal_facts": len(goal),
                "policy": self.policy.name,
            },
        )

        if self.config.validate_inputs:
            rejected = self._reject_malformed(start, goal)
            if rejected is not None:
                return rejected

        with PerformanceLogger(
            logger.logger, "Blocks world search", policy=self.policy.name
        ):
            solution_index = self._search(start, goal, trace)

        trace.solution_index = solution_index
        self.stats["arena_size"] = len(trace.arena)

        if solution_index is None:
            logger.warning(
                "No plan found, open frontier exhausted",
                extra={
                    "expansions": self.stats["expansions"],
                    "generated": self.stats["generated"],
                },
            )
            return PlanResult(
                success=False,
                stats=dict(self.stats),
                policy=self.policy.name,
                reason="search_exhausted",
            )

        plan = reconstruct_plan(trace.arena, solution_index)
        actions = reconstruct_actions(trace.arena, solution_index)
        self.stats["plan_length"] = len(actions)

        logger.info(
            "Plan found",
            extra={
                "actions": len(actions),
                "snapshots": len(plan),
                "expansions": self.stats["expansions"],
            },
        )
        return PlanResult(
            success=True,
            plan=plan,
            actions=actions,
            stats=dict(self.stats),
            policy=self.policy.name,
        )

    def _reject_malformed(self, start: World, goal: World) -> Optional[PlanResult]:
        violations = {
            "start": find_world_violations(start),
            "goal": find_world_violations(goal),
        }
        if not violations["start"] and not violations["goal"]:
            return None

        logger.warning("Malformed world rejected", extra=violations)
        return PlanResult(
            success=False,
            stats=dict(self.stats),
            policy=self.policy.name,
            reason="malformed_world",
        )

    def _search(self, start: World, goal: World, trace: SearchTrace) -> Optional[int]:
        arena = trace.arena
        closed = trace.closed

        root = arena.add(
            start,
            action=None,
            parent=None,
            cost=0,
            estimate=self.heuristic.estimate(start, goal),
        )
        if worlds_equal(start, goal):
            logger.info("Start world already matches the goal")
            return root.index

        sequence = itertools.count()
        open_heap: List[FrontierEntry] = [
            FrontierEntry(self.policy.key(root.cost, root.estimate), next(sequence), root.index)
        ]
        started = time.monotonic()

        while open_heap:
            current = arena[heapq.heappop(open_heap).node_index]

            # a set-equal sibling may have been expanded since this was queued
            if closed.contains(current.facts):
                self.stats["stale"] += 1
                continue

            self._check_budget(started)
            closed.add(current)
            self.stats["expansions"] += 1

            logger.debug(
                "Expanding node",
                extra={
                    "node": current.index,
                    "g": current.cost,
                    "h": current.estimate,
                    "open": len(open_heap),
                },
            )

            for action in legal_actions(current.facts):
                candidate = apply_action(action, current.facts)

                if closed.contains(candidate):
                    self.stats["duplicates"] += 1
                    continue

                child = arena.add(
                    candidate,
                    action=action,
                    parent=current.index,
                    cost=current.cost + 1,
                    estimate=self.heuristic.estimate(candidate, goal),
                )
                self.stats["generated"] += 1

                if worlds_equal(candidate, goal):
                    return child.index

                heapq.heappush(
                    open_heap,
                    FrontierEntry(
                        self.policy.key(child.cost, child.estimate),
                        next(sequence),
                        child.index,
                    ),
                )

        return None

    def _check_budget(self, started: float) -> None:
        expansions = self.stats["expansions"]
        elapsed = time.monotonic() - started

        if (
            self.config.max_expansions is not None
            and expansions >= self.config.max_expansions
        ):
            raise ResourceExhaustedError(
                f"Expansion budget of {self.config.max_expansions} exhausted",
                expansions=expansions,
                elapsed_seconds=elapsed,
            )

        if (
            self.config.time_limit_seconds is not None
            and elapsed > self.config.time_limit_seconds
        ):
            raise ResourceExhaustedError(
                f"Time budget of {self.config.time_limit_seconds}s exhausted",
                expansions=expansions,
                elapsed_seconds=elapsed,
            )

    # ========================================================================
    # Plan checking
    # ========================================================================

    def validate_plan(
        self, start: World, goal: World, actions: List[Action]
    ) -> Tuple[bool, Optional[str]]:
        """
        Replay ``actions`` from ``start`` and check they reach ``goal``.

        Returns:
            (success, error_message)
        """
        world = start

        for i, action in enumerate(actions):
            if action not in legal_actions(world):
                return False, f"Action {i} ({action}) not legal in world"
            world = apply_action(action, world)

        if not worlds_equal(world, goal):
            return False, "Final world does not match the goal"

        return True, None

    def require_valid_plan(self, start: World, goal: World, actions: List[Action]) -> None:
        """
        Like validate_plan(), but raises on an invalid plan.

        Raises:
            PlanValidationError: with the index of the failing step
        """
        diagnosis = self.diagnose_failure(start, goal, actions)
        if diagnosis["error"] is not None:
            raise PlanValidationError(
                diagnosis["error"], step_index=diagnosis["failed_at"]
            )

    def simulate_actions(self, start: World, actions: List[Action]) -> List[World]:
        """Worlds visited by ``actions``, starting with ``start``."""
        worlds = [start]
        world = start

        for action in actions:
            world = apply_action(action, world)
            worlds.append(world)

        return worlds

    def diagnose_failure(
        self, start: World, goal: World, actions: List[Action]
    ) -> Dict[str, Any]:
        """
        Find where a plan breaks.

        Returns:
            Diagnostic information:
            - failed_at: index of the failing action (len(actions) if the
              plan runs but misses the goal)
            - failed_action: the failing action or None
            - missing_preconditions: facts that were required but absent
            - world_before: world before the failing step
            - error: description, None if the plan is valid
        """
        world = start

        for i, action in enumerate(actions):
            if action not in legal_actions(world):
                missing = [
                    fact
                    for fact in action.preconditions()
                    if not world_contains(world, fact)
                ]
                held = held_block(world)
                needs_empty_hand = action.kind in (ActionKind.PICKUP, ActionKind.UNSTACK)
                if needs_empty_hand and held is not None:
                    problem = f"hand already holds {held}"
                elif missing:
                    problem = "requires " + ", ".join(str(f) for f in missing)
                else:
                    problem = "not applicable"

                return {
                    "failed_at": i,
                    "failed_action": action,
                    "missing_preconditions": missing,
                    "world_before": world,
                    "error": f"Action {action} {problem}",
                }

            world = apply_action(action, world)

        if not worlds_equal(world, goal):
            missing_goals = [fact for fact in goal if not world_contains(world, fact)]
            return {
                "failed_at": len(actions),
                "failed_action": None,
                "missing_preconditions": missing_goals,
                "world_before": world,
                "error": "Goal not achieved. Missing: "
                + ", ".join(str(f) for f in missing_goals),
            }

        return {"error": None}

