"""
Tiered layout - designer columns.

Places nodes in columns by tier (0 = leftmost) and rows by slot within the
tier. The tier is either the designer's ``tier`` field or the node's depth
in the prerequisite graph.
"""

from typing import Dict, List, Optional, Sequence
from collections import defaultdict

from ..core.graph import Edge, TechGraph
from ..core.math_utils import Vector2D, clamp
from ..core.registry import register_layout
from .base import LayoutEngine, RandomSource


def prerequisite_depths(graph: TechGraph) -> Dict[str, int]:
    """
    Longest prerequisite chain above each node (roots are 0).

    Cycles are cut where they are found, so a cyclic node counts its
    in-cycle prerequisite as depth 0.
    """
    depths: Dict[str, int] = {}
    visiting = set()

    def depth_of(node_id: str) -> int:
        if node_id in depths:
            return depths[node_id]
        if node_id in visiting:
            return -1
        visiting.add(node_id)
        node = graph.get(node_id)
        best = 0
        for prereq in node.prerequisites:
            if prereq in graph:
                best = max(best, depth_of(prereq) + 1)
        visiting.discard(node_id)
        depths[node_id] = best
        return best

    for node_id in graph.ids:
        depth_of(node_id)
    return depths


@register_layout("tiered")
class TieredLayout(LayoutEngine):
    """Orderly columns, one per tier, rows spread evenly."""

    name = "tiered"
    description = "Columns by tier, rows by slot"

    def layout(self, graph: TechGraph, rng: RandomSource = None) -> Dict[str, Vector2D]:
        if self.config.tier_source == "designer":
            tiers = {node.id: node.tier for node in graph}
        else:
            tiers = prerequisite_depths(graph)
        slots = {node.id: node.slot for node in graph}
        return self.place(graph.ids, tiers, slots,
                          self.config.width, self.config.height)

    def compute(self, node_ids: Sequence[str], edges: Sequence[Edge],
                width: float, height: float, rng: RandomSource = None,
                graph: Optional[TechGraph] = None) -> Dict[str, Vector2D]:
        if graph is not None:
            tiers = {nid: graph.get(nid).tier for nid in node_ids if nid in graph}
            slots = {nid: graph.get(nid).slot for nid in node_ids if nid in graph}
        else:
            tiers, slots = {}, {}
        return self.place(node_ids, tiers, slots, width, height)

    @staticmethod
    def place(node_ids: Sequence[str], tiers: Dict[str, int], slots: Dict[str, int],
              width: float, height: float) -> Dict[str, Vector2D]:
        if not node_ids:
            return {}

        columns: Dict[int, List[str]] = defaultdict(list)
        for node_id in node_ids:
            columns[tiers.get(node_id, 0)].append(node_id)

        ordered_tiers = sorted(columns)
        col_width = width / len(ordered_tiers)
        half_w = width * 0.5
        half_h = height * 0.5

        positions: Dict[str, Vector2D] = {}
        for col, tier in enumerate(ordered_tiers):
            members = sorted(columns[tier], key=lambda nid: (slots.get(nid, 0), nid))
            row_height = height / len(members)
            x = -half_w + (col + 0.5) * col_width
            for row, node_id in enumerate(members):
                # Slot 0 sits at the top of the column
                y = half_h - (row + 0.5) * row_height
                positions[node_id] = Vector2D(clamp(x, -half_w, half_w),
                                              clamp(y, -half_h, half_h))
        return positions
