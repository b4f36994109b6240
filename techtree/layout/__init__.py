"""
Layout plugins for the tech tree.

Each layout turns the prerequisite graph into one position per node.
Layouts are auto-discovered via the @register_layout decorator.
"""

import importlib
import pkgutil
from pathlib import Path

from ..core.registry import LayoutRegistry

# Auto-import all layout_*.py modules to trigger registration
_package_dir = Path(__file__).parent
for _, module_name, _ in pkgutil.iter_modules([str(_package_dir)]):
    if module_name.startswith('layout_'):
        importlib.import_module(f'.{module_name}', package=__name__)

from .base import LayoutConfig, LayoutEngine, mean_edge_length, mean_pairwise_distance
from .layout_force import FruchtermanReingoldLayout
from .layout_tiered import TieredLayout, prerequisite_depths

__all__ = [
    'LayoutConfig',
    'LayoutEngine',
    'LayoutRegistry',
    'FruchtermanReingoldLayout',
    'TieredLayout',
    'get_layout',
    'list_layouts',
    'mean_edge_length',
    'mean_pairwise_distance',
    'prerequisite_depths',
]


def get_layout(name: str, config=None) -> LayoutEngine:
    """
    Get a layout engine instance by name.

    Args:
        name: Layout name (e.g., 'fruchterman_reingold', 'tiered')
        config: Optional LayoutConfig or configuration dict

    Returns:
        LayoutEngine instance
    """
    return LayoutRegistry.create(name, config)


def list_layouts() -> list:
    """Get list of all available layout names."""
    return LayoutRegistry.names()
