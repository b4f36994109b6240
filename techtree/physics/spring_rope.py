"""
Spring-rope simulation for tech tree edges.

Each rope is a chain of mass points between two anchors. The two end
points are pinned to the anchors' current positions every step; interior
points are pulled towards their rest spot on the straight line between the
ends by a damped spring and integrated with semi-implicit Euler.

Tuning:
    stiffness 60-120, damping 4-8 gives a satisfying organic feel.
    segment_count 6-10 is plenty for short branches.
"""

from typing import Dict, Any, List, Optional, Tuple, Union
from dataclasses import dataclass, field

import numpy as np

from ..core.math_utils import Vector2D
from ..core.node import NodeState


Color = Tuple[float, float, float, float]

DEFAULT_COLORS: Dict[str, Color] = {
    NodeState.LOCKED.value: (0.3, 0.3, 0.3, 0.6),
    NodeState.AVAILABLE.value: (0.7, 0.9, 0.7, 0.9),
    NodeState.UNLOCKED.value: (0.2, 1.0, 0.4, 1.0),
}


@dataclass
class RopeConfig:
    """Configuration for spring ropes."""

    segment_count: int = 8        # interior mass points
    stiffness: float = 80.0
    damping: float = 5.0
    mass: float = 1.0

    impulse_strength: float = 50.0  # default excite strength
    impulse_jitter: float = 0.3     # +/- fraction applied per point

    colors: Dict[str, Color] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    line_width: float = 4.0

    def validate(self) -> None:
        """
        Raises:
            ValueError: if any tuning value would break the integration
        """
        if self.segment_count < 1:
            raise ValueError(f"segment_count must be at least 1, got {self.segment_count}")
        if self.mass <= 0:
            raise ValueError(f"mass must be positive, got {self.mass}")
        if self.stiffness < 0:
            raise ValueError(f"stiffness must not be negative, got {self.stiffness}")
        if self.damping < 0:
            raise ValueError(f"damping must not be negative, got {self.damping}")
        if not 0 <= self.impulse_jitter < 1:
            raise ValueError(f"impulse_jitter must be in [0, 1), got {self.impulse_jitter}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'RopeConfig':
        colors = dict(DEFAULT_COLORS)
        for state, rgba in (d.get('colors') or {}).items():
            colors[state.lower()] = tuple(float(c) for c in rgba)
        return cls(
            segment_count=int(d.get('segment_count', d.get('segmentCount', 8))),
            stiffness=float(d.get('stiffness', 80.0)),
            damping=float(d.get('damping', 5.0)),
            mass=float(d.get('mass', 1.0)),
            impulse_strength=float(d.get('impulse_strength', d.get('impulseStrength', 50.0))),
            impulse_jitter=float(d.get('impulse_jitter', d.get('impulseJitter', 0.3))),
            colors=colors,
            line_width=float(d.get('line_width', d.get('lineWidth', 4.0))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'segment_count': self.segment_count,
            'stiffness': self.stiffness,
            'damping': self.damping,
            'mass': self.mass,
            'impulse_strength': self.impulse_strength,
            'impulse_jitter': self.impulse_jitter,
            'colors': {k: list(v) for k, v in self.colors.items()},
            'line_width': self.line_width,
        }


class SpringRope:
    """
    Damped spring chain between two moving anchors.

    Anchors are any objects with a ``position`` Vector2D (tech nodes in
    practice). The rope only reads them; it never moves an anchor.
    """

    def __init__(self, config: Union[RopeConfig, Dict[str, Any], None] = None,
                 rng: Union[None, int, np.random.Generator] = None):
        if isinstance(config, RopeConfig):
            self.config = config
        else:
            self.config = RopeConfig.from_dict(config or {})
        self.config.validate()

        self.rng = np.random.default_rng(rng)

        # Visual only; never read by the physics
        self.state = NodeState.LOCKED

        self.from_anchor: Any = None
        self.to_anchor: Any = None
        self._positions: Optional[np.ndarray] = None
        self._velocities: Optional[np.ndarray] = None

    # -- Public API ----------------------------------------------------------

    @property
    def connected(self) -> bool:
        return self._positions is not None

    @property
    def point_count(self) -> int:
        return self.config.segment_count + 2

    def connect(self, from_anchor: Any, to_anchor: Any) -> None:
        """Bind to two anchors and lay the points evenly between them."""
        self.from_anchor = from_anchor
        self.to_anchor = to_anchor

        start = from_anchor.position.to_array()
        end = to_anchor.position.to_array()
        t = np.linspace(0.0, 1.0, self.point_count)[:, None]
        self._positions = start + (end - start) * t
        self._velocities = np.zeros_like(self._positions)

    def step(self, dt: float) -> List[Vector2D]:
        """
        Advance the simulation by ``dt`` seconds.

        Returns:
            The updated polyline (empty before ``connect``)
        """
        if not self.connected:
            return []

        cfg = self.config
        pos = self._positions
        vel = self._velocities

        # Pin endpoints to where the anchors are now
        pos[0] = self.from_anchor.position.to_array()
        pos[-1] = self.to_anchor.position.to_array()

        interior = slice(1, -1)
        disp = pos[interior] - self._rest_line()[interior]
        force = -cfg.stiffness * disp - cfg.damping * vel[interior]
        vel[interior] += (force / cfg.mass) * dt
        pos[interior] += vel[interior] * dt

        return self.points

    def excite(self, strength: Optional[float] = None) -> None:
        """
        Pluck the rope: add a perpendicular impulse to each interior point.

        Each point gets a random sign and a strength jittered by
        ``impulse_jitter``, which gives an uneven wobble instead of a clean
        standing wave.
        """
        if not self.connected:
            return
        if strength is None:
            strength = self.config.impulse_strength

        line = Vector2D.from_array(self._positions[-1] - self._positions[0])
        perp = line.normalized.perpendicular.to_array()
        if not perp.any():
            return

        count = self.config.segment_count
        jitter = self.config.impulse_jitter
        signs = self.rng.choice((-1.0, 1.0), size=count)
        scales = self.rng.uniform(1.0 - jitter, 1.0 + jitter, size=count)
        self._velocities[1:-1] += perp * (signs * scales * strength)[:, None]

    def set_state(self, state: NodeState) -> None:
        self.state = state

    @property
    def color(self) -> Color:
        return self.config.colors.get(self.state.value, DEFAULT_COLORS[self.state.value])

    # -- Inspection ----------------------------------------------------------

    @property
    def points(self) -> List[Vector2D]:
        if not self.connected:
            return []
        return [Vector2D.from_array(p) for p in self._positions]

    @property
    def velocities(self) -> List[Vector2D]:
        if not self.connected:
            return []
        return [Vector2D.from_array(v) for v in self._velocities]

    def displacement_from_rest(self) -> float:
        """Largest distance of an interior point from its rest position."""
        if not self.connected:
            return 0.0
        disp = self._positions[1:-1] - self._rest_line()[1:-1]
        return float(np.linalg.norm(disp, axis=1).max())

    def is_settled(self, tolerance: float = 0.01) -> bool:
        return self.displacement_from_rest() < tolerance

    def _rest_line(self) -> np.ndarray:
        """Evenly spaced points on the straight line between the ends."""
        start = self._positions[0]
        end = self._positions[-1]
        t = np.linspace(0.0, 1.0, self.point_count)[:, None]
        return start + (end - start) * t
