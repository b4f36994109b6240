"""
Base class and configuration for layout engines.

A layout engine turns a tech graph into one 2D position per node inside a
bounding rectangle centred on the origin. Engines are stateless between
runs: everything an engine needs comes in through ``layout``/``compute``.
"""

from typing import Dict, Any, List, Optional, Sequence, Union
from dataclasses import dataclass

import numpy as np

from ..core.graph import Edge, TechGraph
from ..core.math_utils import Vector2D


RandomSource = Union[None, int, np.random.Generator]


@dataclass
class LayoutConfig:
    """Configuration shared by all layout engines."""

    name: str = "fruchterman_reingold"

    # Bounding rectangle, centred on the origin
    width: float = 900.0
    height: float = 700.0

    # Fruchterman-Reingold
    iterations: int = 150
    temperature: float = 200.0   # initial max displacement per iteration
    cooling: float = 0.95        # temperature multiplied each iteration
    epsilon: float = 0.01        # distance floor
    initial_spread: float = 0.8  # fraction of each dimension used for seeding

    # Tiered
    tier_source: str = "depth"   # "depth" (from prerequisites) or "designer"

    def validate(self) -> None:
        """
        Raises:
            ValueError: if the rectangle is empty or the schedule cannot cool down
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"layout width and height must be positive, got "
                             f"{self.width} x {self.height}")
        if self.iterations < 0:
            raise ValueError(f"iterations must not be negative, got {self.iterations}")
        if self.temperature < 0:
            raise ValueError(f"temperature must not be negative, got {self.temperature}")
        if not 0 < self.cooling < 1:
            raise ValueError(f"cooling must be in (0, 1), got {self.cooling}")
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if not 0 <= self.initial_spread <= 1:
            raise ValueError(f"initial_spread must be in [0, 1], got {self.initial_spread}")
        if self.tier_source not in ("depth", "designer"):
            raise ValueError(f"tier_source must be 'depth' or 'designer', "
                             f"got {self.tier_source!r}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'LayoutConfig':
        """Create config from dictionary (camelCase keys accepted)."""
        return cls(
            name=d.get('name', 'fruchterman_reingold'),
            width=float(d.get('width', d.get('graphWidth', 900.0))),
            height=float(d.get('height', d.get('graphHeight', 700.0))),
            iterations=int(d.get('iterations', d.get('frIterations', 150))),
            temperature=float(d.get('temperature', d.get('frTemperature', 200.0))),
            cooling=float(d.get('cooling', d.get('frCooling', 0.95))),
            epsilon=float(d.get('epsilon', 0.01)),
            initial_spread=float(d.get('initial_spread', d.get('initialSpread', 0.8))),
            tier_source=d.get('tier_source', d.get('tierSource', 'depth')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'iterations': self.iterations,
            'temperature': self.temperature,
            'cooling': self.cooling,
            'epsilon': self.epsilon,
            'initial_spread': self.initial_spread,
            'tier_source': self.tier_source,
        }


class LayoutEngine:
    """
    Base class for layout plugins.

    Subclasses implement ``compute`` and register themselves with
    ``@register_layout``.
    """

    name = "base"
    description = ""

    def __init__(self, config: Union[LayoutConfig, Dict[str, Any], None] = None):
        if isinstance(config, LayoutConfig):
            self.config = config
        else:
            self.config = LayoutConfig.from_dict(config or {})
        self.config.validate()

    def layout(self, graph: TechGraph, rng: RandomSource = None) -> Dict[str, Vector2D]:
        """Lay out every node of ``graph`` inside the configured rectangle."""
        return self.compute(graph.ids, graph.edges,
                            self.config.width, self.config.height,
                            rng=rng, graph=graph)

    def compute(self, node_ids: Sequence[str], edges: Sequence[Edge],
                width: float, height: float, rng: RandomSource = None,
                graph: Optional[TechGraph] = None) -> Dict[str, Vector2D]:
        raise NotImplementedError

    @staticmethod
    def make_rng(rng: RandomSource) -> np.random.Generator:
        """Accept a seed, a Generator or None."""
        return np.random.default_rng(rng)

    @staticmethod
    def bounds(width: float, height: float) -> np.ndarray:
        """Half extents of the bounding rectangle."""
        return np.array([width * 0.5, height * 0.5], dtype=np.float64)


def mean_pairwise_distance(positions: Dict[str, Vector2D]) -> float:
    """Average distance over all unordered node pairs."""
    points: List[Vector2D] = list(positions.values())
    total = 0.0
    pairs = 0
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            total += points[i].distance_to(points[j])
            pairs += 1
    return total / pairs if pairs else 0.0


def mean_edge_length(positions: Dict[str, Vector2D], edges: Sequence[Edge]) -> float:
    """Average length of the edges whose endpoints were laid out."""
    lengths = [positions[a].distance_to(positions[b])
               for a, b in edges if a in positions and b in positions]
    return sum(lengths) / len(lengths) if lengths else 0.0
