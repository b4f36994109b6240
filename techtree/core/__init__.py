"""
Core data model for the tech tree engine.

Provides:
- TechNode, NodeEffect, NodeState: node representation
- TechGraph: node table with derived prerequisite edges
- Vector2D, math utilities: geometry helpers
- LayoutRegistry: plugin registry for layout engines
"""

from .math_utils import Vector2D, clamp
from .node import TechNode, NodeEffect, NodeState, make_node
from .graph import TechGraph, Edge
from .registry import LayoutRegistry, register_layout

__all__ = [
    'Vector2D',
    'clamp',
    'TechNode',
    'NodeEffect',
    'NodeState',
    'make_node',
    'TechGraph',
    'Edge',
    'LayoutRegistry',
    'register_layout',
]
