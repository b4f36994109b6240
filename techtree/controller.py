"""
Tech Tree Controller

Owns the node table and one spring rope per prerequisite edge, and is the
only component that changes node state or excites ropes:
- Lays the graph out once at startup (positions published all at once)
- Binds a SpringRope to the two nodes of every edge
- Processes unlock requests against the currency ledger
- Re-evaluates every node after an unlock, a restore or a balance change
- Steps all ropes once per frame

Collaborators (ledger, effect target, notify sink) are passed in; nothing
is looked up globally.
"""

from typing import Callable, Dict, Any, Iterable, List, Optional, Union
from dataclasses import dataclass
import time

import numpy as np

from .config import TechTreeConfig, load_config
from .core.graph import Edge, TechGraph
from .core.math_utils import Vector2D
from .core.node import NodeState, TechNode
from .economy import CurrencyLedger, EffectTarget
from .layout import get_layout
from .physics.spring_rope import Color, SpringRope
from .unlock import UnlockStateMachine


@dataclass
class NodeView:
    """What the presentation layer needs to draw one node."""
    id: str
    display_name: str
    state: NodeState
    position: Vector2D
    cost: float
    affordable: bool


@dataclass
class EdgeView:
    """What the presentation layer needs to draw one rope."""
    from_id: str
    to_id: str
    points: List[Vector2D]
    color: Color
    line_width: float


class FrameClock:
    """Wall-clock time elapsed between consecutive ticks."""

    def __init__(self, time_source: Callable[[], float] = time.perf_counter):
        self._time = time_source
        self._last: Optional[float] = None

    def tick(self) -> float:
        """Seconds since the previous tick (0.0 on the first)."""
        now = self._time()
        dt = 0.0 if self._last is None else now - self._last
        self._last = now
        return max(dt, 0.0)

    def reset(self) -> None:
        self._last = None


class TechTreeController:
    """Builds and runs one tech tree for a play session."""

    def __init__(self,
                 nodes: Union[TechGraph, Iterable[Union[TechNode, Dict[str, Any]]]],
                 ledger: CurrencyLedger,
                 effects: EffectTarget,
                 notify: Optional[Callable[[], None]] = None,
                 config: Union[TechTreeConfig, Dict[str, Any], None] = None,
                 rng: Union[None, int, np.random.Generator] = None,
                 clock: Optional[FrameClock] = None):
        """
        Args:
            nodes: Static node table (TechNode objects or dicts) or a TechGraph
            ledger: Currency ledger; only its try_spend is used to pay
            effects: Receives each unlocked node's bonus
            notify: Zero-argument "graph changed" sink
            config: TechTreeConfig or dict
            rng: Seed or Generator; defaults to the config seed

        Raises:
            ValueError: on duplicate node ids or invalid tuning
            KeyError: if the configured layout does not exist
        """
        self.cfg = load_config(config)
        self.graph = nodes if isinstance(nodes, TechGraph) else TechGraph(nodes)
        self.ledger = ledger
        self.effects = effects
        self.notify = notify
        self.rng = np.random.default_rng(rng if rng is not None else self.cfg.seed)
        self.clock = clock or FrameClock()

        self.states = UnlockStateMachine(self.graph)
        self.layout_engine = get_layout(self.cfg.layout.name, self.cfg.layout)

        self.ropes: List[SpringRope] = []
        self._rope_edges: List[Edge] = []
        self._ropes_by_node: Dict[str, List[SpringRope]] = {nid: [] for nid in self.graph.ids}
        self._unlocked: List[str] = []

        self._build()

    # -- Graph construction ----------------------------------------------------

    def _build(self) -> None:
        """Lay out the graph, then create one rope per edge (constructor only)."""
        for node_id, missing in self.graph.dangling_prerequisites().items():
            print(f"[TechTree] WARNING: '{node_id}' requires unknown node(s) "
                  f"{', '.join(missing)}; it will stay locked")

        self.states.reset()

        # Positions must all be in place before any rope reads them
        self._publish_positions(self.layout_engine.layout(self.graph, rng=self.rng))

        for from_id, to_id in self.graph.edges:
            rope = SpringRope(self.cfg.rope, rng=self.rng)
            rope.connect(self.graph.get(from_id), self.graph.get(to_id))
            self.ropes.append(rope)
            self._rope_edges.append((from_id, to_id))
            self._ropes_by_node[from_id].append(rope)
            if to_id != from_id:
                self._ropes_by_node[to_id].append(rope)

        self.reevaluate()

        if self.cfg.verbose:
            print(f"[TechTree] Built {len(self.graph)} nodes, {len(self.ropes)} ropes "
                  f"({self.layout_engine.name} layout)")

    def relayout(self, rng: Union[None, int, np.random.Generator] = None) -> None:
        """
        Recompute and publish node positions.

        Ropes keep their state and follow their anchors on the next tick.
        """
        self._publish_positions(
            self.layout_engine.layout(self.graph, rng=rng if rng is not None else self.rng))

    def _publish_positions(self, positions: Dict[str, Vector2D]) -> None:
        for node in self.graph:
            node.position = positions.get(node.id, Vector2D())

    # -- Queries ---------------------------------------------------------------

    @property
    def nodes(self) -> List[TechNode]:
        return list(self.graph)

    def get_node(self, node_id: str) -> Optional[TechNode]:
        return self.graph.get(node_id)

    def is_unlocked(self, node_id: str) -> bool:
        node = self.graph.get(node_id)
        return node is not None and node.is_unlocked

    def can_unlock(self, node_id: str) -> bool:
        """True if every prerequisite is unlocked and the node itself is not."""
        node = self.graph.get(node_id)
        if node is None:
            return False
        return self.states.evaluate(node) is NodeState.AVAILABLE

    def can_afford(self, node_id: str) -> bool:
        """can_unlock plus enough balance; never spends."""
        if not self.can_unlock(node_id):
            return False
        return self.ledger.balance >= self.graph.get(node_id).cost

    def all_unlocked_ids(self) -> List[str]:
        """Unlocked ids in the order they were unlocked (for saving)."""
        return list(self._unlocked)

    def ropes_for(self, node_id: str) -> List[SpringRope]:
        return list(self._ropes_by_node.get(node_id, []))

    # -- State changes ---------------------------------------------------------

    def attempt_unlock(self, node_id: str) -> bool:
        """
        Try to buy a node.

        Fails silently (returns False, changes nothing) if the node is
        unknown, not AVAILABLE, or the ledger refuses the spend.
        """
        node = self.graph.get(node_id)
        if node is None:
            return False
        if self.states.evaluate(node) is not NodeState.AVAILABLE:
            return False
        if not self.ledger.try_spend(node.cost):
            return False

        self.states.force_unlock(node)
        self._unlocked.append(node.id)
        node.effect.apply(self.effects)

        # Only after the transition, so no rope wobbles for a locked node
        for rope in self._ropes_by_node[node.id]:
            rope.excite()

        self.reevaluate()
        self._emit_changed()

        if self.cfg.verbose:
            print(f"[TechTree] Unlocked '{node.id}' for {node.cost:g}")
        return True

    def restore_unlocked(self, ids: Optional[Iterable[str]]) -> None:
        """
        Replay a saved unlock set.

        Trusted: prerequisites are not checked and nothing is spent. Unknown
        ids are skipped; ids already unlocked are skipped so no effect is
        applied twice.
        """
        if ids is None:
            return

        restored = 0
        for node_id in ids:
            node = self.graph.get(node_id)
            if node is None:
                print(f"[Restore] WARNING: unknown tech node '{node_id}', skipped")
                continue
            if node.is_unlocked:
                continue
            node.effect.apply(self.effects)
            self.states.force_unlock(node)
            self._unlocked.append(node.id)
            restored += 1

        self.reevaluate()
        self._emit_changed()

        if self.cfg.verbose:
            print(f"[Restore] Restored {restored} unlocked node(s)")

    def reevaluate(self) -> Dict[str, NodeState]:
        """Recompute every node's derived state and recolour the ropes."""
        states = self.states.reevaluate_all()
        for (_, to_id), rope in zip(self._rope_edges, self.ropes):
            rope.set_state(states[to_id])
        return states

    def on_currency_changed(self, balance: Optional[float] = None) -> Dict[str, NodeState]:
        """Re-evaluation pass after the balance changed (signal-compatible)."""
        return self.reevaluate()

    def _emit_changed(self) -> None:
        if self.notify is not None:
            self.notify()

    # -- Simulation ------------------------------------------------------------

    def tick(self, dt: Optional[float] = None) -> float:
        """
        Step every rope once.

        Args:
            dt: Seconds to integrate; None uses the wall-clock time since
                the previous tick

        Returns:
            The dt that was used
        """
        if dt is None:
            dt = self.clock.tick()
        for rope in self.ropes:
            rope.step(dt)
        return dt

    # -- Presentation ----------------------------------------------------------

    def node_view(self, node_id: str) -> Optional[NodeView]:
        node = self.graph.get(node_id)
        if node is None:
            return None
        return NodeView(
            id=node.id,
            display_name=node.display_name,
            state=node.state,
            position=node.position,
            cost=node.cost,
            affordable=node.state is NodeState.AVAILABLE and self.ledger.balance >= node.cost,
        )

    def snapshot(self) -> List[NodeView]:
        return [self.node_view(node_id) for node_id in self.graph.ids]

    def edge_polylines(self) -> List[EdgeView]:
        return [EdgeView(from_id, to_id, rope.points, rope.color, rope.config.line_width)
                for (from_id, to_id), rope in zip(self._rope_edges, self.ropes)]
