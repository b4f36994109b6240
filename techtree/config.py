"""
Configuration for the tech tree engine.

Settings come from a dict or a JSON file. Missing keys fall back to the
defaults below; camelCase keys (as exported by the game editor) are
accepted alongside snake_case.
"""

from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field
from pathlib import Path
import json

from .layout.base import LayoutConfig
from .physics.spring_rope import RopeConfig


# The cell game's tech tree, as shipped
DEFAULT_NODE_TABLE: List[Dict[str, Any]] = [
    {'id': 'node_mitosis', 'displayName': 'Mitosis Boost', 'cost': 10,
     'cpcFlatBonus': 0.5, 'prerequisites': []},
    {'id': 'node_membrane', 'displayName': 'Membrane', 'cost': 50,
     'cpcFlatBonus': 1.0, 'prerequisites': ['node_mitosis']},
    {'id': 'node_atp', 'displayName': 'ATP Synthesis', 'cost': 50,
     'cpsBonus': 0.5, 'prerequisites': ['node_mitosis']},
    {'id': 'node_nuclear', 'displayName': 'Nuclear Division', 'cost': 200,
     'cpcMultiplier': 2.0, 'prerequisites': ['node_membrane']},
    {'id': 'node_mito1', 'displayName': 'Mitochondria', 'cost': 200,
     'cpsBonus': 2.0, 'prerequisites': ['node_atp']},
    {'id': 'node_colony', 'displayName': 'Colony Formation', 'cost': 1000,
     'cpsBonus': 10.0, 'prerequisites': ['node_mito1']},
]


@dataclass
class TechTreeConfig:
    """Top-level engine configuration."""

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    rope: RopeConfig = field(default_factory=RopeConfig)

    # Seeds the layout scatter and rope impulses; None = nondeterministic
    seed: Optional[int] = None

    # Print informational messages (warnings always print)
    verbose: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TechTreeConfig':
        seed = d.get('seed')
        return cls(
            layout=LayoutConfig.from_dict(d.get('layout') or {}),
            rope=RopeConfig.from_dict(d.get('rope') or {}),
            seed=int(seed) if seed is not None else None,
            verbose=bool(d.get('verbose', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'layout': self.layout.to_dict(),
            'rope': self.rope.to_dict(),
            'seed': self.seed,
            'verbose': self.verbose,
        }


def load_config(config: Union[TechTreeConfig, Dict[str, Any], str, Path, None] = None
                ) -> TechTreeConfig:
    """
    Build a TechTreeConfig from a dict, a JSON file path or nothing.

    Raises:
        ValueError: if the layout or rope tuning is invalid
    """
    if isinstance(config, TechTreeConfig):
        cfg = config
    elif config is None:
        cfg = TechTreeConfig()
    elif isinstance(config, (str, Path)):
        with open(config, 'r', encoding='utf-8') as f:
            cfg = TechTreeConfig.from_dict(json.load(f))
    else:
        cfg = TechTreeConfig.from_dict(config)
    cfg.layout.validate()
    cfg.rope.validate()
    return cfg


def load_node_table(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read a node table from JSON.

    The file holds either a list of node dicts or an object with a
    ``nodes`` list.

    Raises:
        ValueError: if the file has neither shape
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('nodes')
    if not isinstance(data, list):
        raise ValueError(f"Node table {path} must be a list or contain a 'nodes' list")
    return data
