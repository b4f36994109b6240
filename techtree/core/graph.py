"""
Tech graph model.

Holds the node table (id -> TechNode) and derives the prerequisite edges.
Edges point from a prerequisite to its dependent and only exist when both
ids are known; dangling prerequisite ids are reported but never crash.
"""

from typing import Dict, Any, Iterable, Iterator, List, Optional, Tuple, Union

from .node import TechNode, check_cost


Edge = Tuple[str, str]  # (prerequisite_id, dependent_id)


class TechGraph:
    """Node table plus derived edges for one tech tree."""

    def __init__(self, nodes: Iterable[Union[TechNode, Dict[str, Any]]]):
        """
        Args:
            nodes: TechNode instances or node-table dicts

        Raises:
            ValueError: on duplicate ids or negative or non-finite costs
        """
        self._nodes: Dict[str, TechNode] = {}
        for entry in nodes:
            node = entry if isinstance(entry, TechNode) else TechNode.from_dict(entry)
            if node.id in self._nodes:
                raise ValueError(f"Duplicate tech node id '{node.id}'")
            check_cost(node.id, node.cost)
            self._nodes[node.id] = node

        self._edges: List[Edge] = []
        self._dependents: Dict[str, List[str]] = {nid: [] for nid in self._nodes}
        for node in self._nodes.values():
            for prereq in node.prerequisites:
                if prereq not in self._nodes:
                    continue
                self._edges.append((prereq, node.id))
                self._dependents[prereq].append(node.id)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[TechNode]:
        return iter(self._nodes.values())

    def get(self, node_id: str) -> Optional[TechNode]:
        """Return the node or None when the id is unknown."""
        return self._nodes.get(node_id)

    @property
    def ids(self) -> List[str]:
        return list(self._nodes.keys())

    @property
    def edges(self) -> List[Edge]:
        """All (prerequisite, dependent) pairs between known nodes."""
        return list(self._edges)

    def dependents_of(self, node_id: str) -> List[str]:
        return list(self._dependents.get(node_id, []))

    def dangling_prerequisites(self) -> Dict[str, List[str]]:
        """Map of node id -> prerequisite ids that name no known node."""
        dangling = {}
        for node in self._nodes.values():
            missing = [p for p in node.prerequisites if p not in self._nodes]
            if missing:
                dangling[node.id] = missing
        return dangling
