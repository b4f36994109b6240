"""
Tech node representation.

A TechNode is created once from static configuration. Its unlock state
changes over a play session; its position is written only when the
controller publishes a layout.
"""

from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from enum import Enum
import math

from .math_utils import Vector2D


class NodeState(Enum):
    """Unlock state of a tech node (also used to colour ropes)."""
    LOCKED = "locked"
    AVAILABLE = "available"
    UNLOCKED = "unlocked"


def check_cost(node_id: str, cost: float) -> float:
    """Return ``cost`` if it is a finite, non-negative number, else raise ValueError."""
    if not math.isfinite(cost) or cost < 0:
        raise ValueError(f"Tech node '{node_id}' has invalid cost {cost}")
    return cost


def _pick(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in ``d`` (camelCase or snake_case)."""
    for key in keys:
        if key in d and d[key] is not None:
            return d[key]
    return default


@dataclass
class NodeEffect:
    """
    Bonus granted when a node is unlocked.

    Only one field is meant to be set per node, but this is a convention,
    not a rule: every field above zero is applied.
    """

    cpc_flat_bonus: float = 0.0   # flat cells-per-click addition
    cpc_multiplier: float = 0.0   # e.g. 2.0 doubles CPC
    cps_bonus: float = 0.0        # flat cells-per-second addition

    def apply(self, target: Any) -> None:
        """Apply every configured bonus to an effect target."""
        if self.cpc_multiplier > 0:
            target.apply_cpc_multiplier(self.cpc_multiplier)
        if self.cpc_flat_bonus > 0:
            target.apply_flat_cpc_bonus(self.cpc_flat_bonus)
        if self.cps_bonus > 0:
            target.apply_flat_cps_bonus(self.cps_bonus)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'NodeEffect':
        return cls(
            cpc_flat_bonus=float(_pick(d, 'cpcFlatBonus', 'cpc_flat_bonus', default=0.0)),
            cpc_multiplier=float(_pick(d, 'cpcMultiplier', 'cpc_multiplier', default=0.0)),
            cps_bonus=float(_pick(d, 'cpsBonus', 'cps_bonus', default=0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cpcFlatBonus': self.cpc_flat_bonus,
            'cpcMultiplier': self.cpc_multiplier,
            'cpsBonus': self.cps_bonus,
        }


@dataclass
class TechNode:
    """A single node of the tech tree."""

    id: str
    cost: float = 0.0
    effect: NodeEffect = field(default_factory=NodeEffect)
    prerequisites: List[str] = field(default_factory=list)

    # Display data, carried through for the presentation layer
    display_name: str = ""
    description: str = ""

    # Designer layout hints (tier = column, slot = row within tier)
    tier: int = 0
    slot: int = 0

    state: NodeState = NodeState.LOCKED
    position: Vector2D = field(default_factory=Vector2D)

    @property
    def is_root(self) -> bool:
        return not self.prerequisites

    @property
    def is_unlocked(self) -> bool:
        return self.state is NodeState.UNLOCKED

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TechNode':
        """
        Create a node from one row of the static node table.

        Raises:
            ValueError: if the id is missing or the cost is negative or not finite
        """
        node_id = _pick(d, 'id')
        if not node_id:
            raise ValueError(f"Tech node entry has no id: {d!r}")

        cost = check_cost(node_id, float(_pick(d, 'cost', 'unlockCost', 'unlock_cost',
                                                 default=0.0)))

        prereqs = _pick(d, 'prerequisites', 'prerequisiteIds', 'prerequisite_ids',
                        default=[])
        effect_data = d.get('effect')
        effect = NodeEffect.from_dict(effect_data if isinstance(effect_data, dict) else d)

        return cls(
            id=str(node_id),
            cost=cost,
            effect=effect,
            prerequisites=[str(p) for p in prereqs],
            display_name=str(_pick(d, 'displayName', 'display_name', 'name', default=node_id)),
            description=str(_pick(d, 'description', default='')),
            tier=int(_pick(d, 'tier', default=0)),
            slot=int(_pick(d, 'slot', default=0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'displayName': self.display_name,
            'description': self.description,
            'cost': self.cost,
            'prerequisites': list(self.prerequisites),
            'tier': self.tier,
            'slot': self.slot,
            'state': self.state.value,
            'position': self.position.to_tuple(),
        }
        result.update(self.effect.to_dict())
        return result


def make_node(node_id: str, cost: float = 0.0,
              prerequisites: Optional[List[str]] = None,
              **effect: float) -> TechNode:
    """Shorthand for building a node in code rather than from a table row."""
    return TechNode(
        id=node_id,
        cost=float(cost),
        effect=NodeEffect(**effect),
        prerequisites=list(prerequisites or []),
        display_name=node_id,
    )
