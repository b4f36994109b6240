"""
Math utilities for graph layout and rope simulation.

Provides:
- Vector2D: 2D vector operations
- Conversions to and from numpy arrays for the vectorised solvers
- Common math helpers: clamp
"""

from typing import Dict, List, Tuple
from dataclasses import dataclass
import math

import numpy as np


@dataclass
class Vector2D:
    """Simple 2D vector for layout and rope calculations."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> 'Vector2D':
        return Vector2D(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> 'Vector2D':
        if scalar == 0:
            return Vector2D(0, 0)
        return Vector2D(self.x / scalar, self.y / scalar)

    def __neg__(self) -> 'Vector2D':
        return Vector2D(-self.x, -self.y)

    @property
    def magnitude(self) -> float:
        """Length of the vector."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    @property
    def normalized(self) -> 'Vector2D':
        """Unit vector in same direction (zero vector stays zero)."""
        mag = self.magnitude
        if mag == 0:
            return Vector2D(0, 0)
        return self / mag

    @property
    def perpendicular(self) -> 'Vector2D':
        """Clockwise perpendicular, i.e. this vector crossed with +Z."""
        return Vector2D(self.y, -self.x)

    def distance_to(self, other: 'Vector2D') -> float:
        """Distance to another vector."""
        return (self - other).magnitude

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple."""
        return (self.x, self.y)

    def to_array(self) -> np.ndarray:
        """Convert to a float64 numpy array of shape (2,)."""
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, a: np.ndarray) -> 'Vector2D':
        """Create vector from the first two components of an array."""
        return cls(float(a[0]), float(a[1]))


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to [min_val, max_val] range."""
    return max(min_val, min(max_val, value))


def array_to_positions(ids: List[str], arr: np.ndarray) -> Dict[str, Vector2D]:
    """Map row i of an (n, 2) array back to ids[i]."""
    return {node_id: Vector2D.from_array(arr[i]) for i, node_id in enumerate(ids)}
