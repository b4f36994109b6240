"""
Fruchterman-Reingold force-directed layout.

Treats nodes as particles:
- Repulsive force between ALL pairs of nodes (keeps them spread out)
- Attractive force along each prerequisite edge (pulls connected nodes together)
- A cooling temperature caps how far any node may move per iteration

Every force of an iteration is computed from the positions at the start of
that iteration, then all displacements are applied together.
"""

from typing import Dict, Optional, Sequence
import math

import numpy as np

from ..core.graph import Edge, TechGraph
from ..core.math_utils import Vector2D, array_to_positions
from ..core.registry import register_layout
from .base import LayoutEngine, RandomSource


@register_layout("fruchterman_reingold")
class FruchtermanReingoldLayout(LayoutEngine):
    """Organic layout: roots float near the centre, branches spread outward."""

    name = "fruchterman_reingold"
    description = "Force-directed layout with repulsion, edge attraction and cooling"

    def compute(self, node_ids: Sequence[str], edges: Sequence[Edge],
                width: float, height: float, rng: RandomSource = None,
                graph: Optional[TechGraph] = None) -> Dict[str, Vector2D]:
        """
        Compute one position per node.

        Args:
            node_ids: Unique node identifiers
            edges: (from_id, to_id) pairs; pairs naming unknown ids are skipped,
                duplicates and self-loops are tolerated
            width: Width of the bounding rectangle centred on the origin
            height: Height of the bounding rectangle centred on the origin
            rng: Seed or numpy Generator for the initial scatter

        Returns:
            Mapping of node id -> Vector2D, every position inside the rectangle
        """
        ids = list(node_ids)
        n = len(ids)
        if n == 0:
            return {}

        cfg = self.config
        rng = self.make_rng(rng)
        index = {node_id: i for i, node_id in enumerate(ids)}

        half = self.bounds(width, height)
        spread = half * cfg.initial_spread
        pos = rng.uniform(-spread, spread, size=(n, 2))

        pairs = np.array(
            [(index[a], index[b]) for a, b in edges if a in index and b in index],
            dtype=np.intp,
        ).reshape(-1, 2)

        k = math.sqrt(width * height / n)
        temp = cfg.temperature
        upper = np.triu(np.ones((n, n), dtype=bool), k=1)

        for _ in range(cfg.iterations):
            disp = self._repulsion(pos, k, upper, rng)
            if len(pairs):
                disp += self._attraction(pos, pairs, k)

            # Cap by temperature, then clamp to the graph bounds
            length = np.linalg.norm(disp, axis=1)
            capped = np.minimum(length, temp)
            step = np.divide(disp * capped[:, None], length[:, None],
                             out=np.zeros_like(disp), where=length[:, None] > 0)
            pos = np.clip(pos + step, -half, half)

            temp *= cfg.cooling

        return array_to_positions(ids, pos)

    def _repulsion(self, pos: np.ndarray, k: float, upper: np.ndarray,
                   rng: np.random.Generator) -> np.ndarray:
        """k^2 / d push between every pair, directed away from each other."""
        delta = pos[:, None, :] - pos[None, :, :]
        dist = np.linalg.norm(delta, axis=-1)
        unit = np.divide(delta, dist[..., None],
                         out=np.zeros_like(delta), where=dist[..., None] > 0)

        # Exactly coincident nodes have no direction; split them randomly
        coincident = (dist == 0.0) & upper
        if coincident.any():
            ii, jj = np.nonzero(coincident)
            angles = rng.uniform(0.0, 2.0 * math.pi, size=len(ii))
            u = np.stack([np.cos(angles), np.sin(angles)], axis=-1)
            unit[ii, jj] = u
            unit[jj, ii] = -u

        magnitude = (k * k) / np.maximum(dist, self.config.epsilon)
        np.fill_diagonal(magnitude, 0.0)
        return (unit * magnitude[..., None]).sum(axis=1)

    def _attraction(self, pos: np.ndarray, pairs: np.ndarray, k: float) -> np.ndarray:
        """d^2 / k pull along each edge, applied oppositely to both ends."""
        src = pairs[:, 0]
        dst = pairs[:, 1]
        delta = pos[dst] - pos[src]
        dist = np.linalg.norm(delta, axis=1)
        unit = np.divide(delta, dist[:, None],
                         out=np.zeros_like(delta), where=dist[:, None] > 0)
        force = unit * (np.maximum(dist, self.config.epsilon) ** 2 / k)[:, None]

        disp = np.zeros_like(pos)
        np.add.at(disp, dst, -force)
        np.add.at(disp, src, force)
        return disp
