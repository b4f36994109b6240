"""
Unlock state machine for tech nodes.

States:
    LOCKED     - at least one prerequisite is not unlocked (or does not exist)
    AVAILABLE  - every prerequisite is unlocked; the node may be bought
    UNLOCKED   - terminal, never reverts

Derived states (LOCKED/AVAILABLE) are recomputed from the graph every time
they are evaluated, never cached across unlocks.
"""

from typing import Dict

from .core.graph import TechGraph
from .core.node import NodeState, TechNode


class UnlockStateMachine:
    """Evaluates and applies state transitions for every node of a graph."""

    def __init__(self, graph: TechGraph):
        self.graph = graph

    def initial_state(self, node: TechNode) -> NodeState:
        return NodeState.AVAILABLE if node.is_root else NodeState.LOCKED

    def prerequisites_met(self, node: TechNode) -> bool:
        """True when every prerequisite names a known, unlocked node."""
        for prereq_id in node.prerequisites:
            prereq = self.graph.get(prereq_id)
            if prereq is None or not prereq.is_unlocked:
                return False
        return True

    def evaluate(self, node: TechNode) -> NodeState:
        """State the node should be in right now (does not mutate)."""
        if node.is_unlocked:
            return NodeState.UNLOCKED
        return NodeState.AVAILABLE if self.prerequisites_met(node) else NodeState.LOCKED

    def reset(self) -> None:
        """Put every node that is not unlocked back in its initial state."""
        for node in self.graph:
            if not node.is_unlocked:
                node.state = self.initial_state(node)

    def reevaluate_all(self) -> Dict[str, NodeState]:
        """
        Recompute LOCKED/AVAILABLE for every node that is not unlocked.

        Running it twice with no unlock in between gives the same result.

        Returns:
            Mapping of node id -> state after the pass
        """
        states = {}
        for node in self.graph:
            node.state = self.evaluate(node)
            states[node.id] = node.state
        return states

    def force_unlock(self, node: TechNode) -> None:
        """Mark unlocked without checking prerequisites (trusted replay)."""
        node.state = NodeState.UNLOCKED

