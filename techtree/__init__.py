"""
Tech tree graph engine for the cell clicker game.

- Fruchterman-Reingold layout of the prerequisite graph
- One spring rope per edge, plucked when a node unlocks
- Locked -> Available -> Unlocked state machine driven by prerequisites
  and the currency ledger
"""

from .core import NodeEffect, NodeState, TechGraph, TechNode, Vector2D
from .config import DEFAULT_NODE_TABLE, TechTreeConfig, load_config, load_node_table
from .controller import EdgeView, FrameClock, NodeView, TechTreeController
from .economy import CellLedger, CurrencyLedger, EffectTarget, GameStats
from .events import EventBus, Signal
from .layout import FruchtermanReingoldLayout, LayoutConfig, TieredLayout, get_layout
from .physics import RopeConfig, SpringRope
from .unlock import UnlockStateMachine

__version__ = "0.1.0"

__all__ = [
    'CellLedger',
    'CurrencyLedger',
    'DEFAULT_NODE_TABLE',
    'EdgeView',
    'EffectTarget',
    'EventBus',
    'FrameClock',
    'FruchtermanReingoldLayout',
    'GameStats',
    'LayoutConfig',
    'NodeEffect',
    'NodeState',
    'NodeView',
    'RopeConfig',
    'Signal',
    'SpringRope',
    'TechGraph',
    'TechNode',
    'TechTreeConfig',
    'TechTreeController',
    'TieredLayout',
    'UnlockStateMachine',
    'Vector2D',
    'get_layout',
    'load_config',
    'load_node_table',
]
