# graph.py
from __future__ import annotations

from collections import deque
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple


class FunctionGraph:
    """
    Directed acyclic graph of pipeline functions.

    An edge (a, b) means function `a` must fully complete before function `b`
    starts. Vertices can carry string attributes, which executors use to pass
    information (e.g. dependency group ids) from upstream to downstream functions.
    """

    def __init__(
        self,
        vertices: Iterable[str] = (),
        edges: Iterable[Tuple[str, str]] = (),
    ):
        self._adj: Dict[str, Set[str]] = {}    # function -> dependents
        self._pred: Dict[str, Set[str]] = {}   # function -> upstream functions
        self._attrs: Dict[str, Dict[str, str]] = {}
        for v in vertices:
            self.add_vertex(v)
        for a, b in edges:
            self.add_edge(a, b)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_vertex(self, name: str) -> None:
        if not name:
            raise ValueError("Function name cannot be empty")
        self._adj.setdefault(name, set())
        self._pred.setdefault(name, set())

    def add_edge(self, source: str, target: str) -> None:
        for v in (source, target):
            if v not in self._adj:
                raise ValueError(
                    f"Edge {source} -> {target} refers to unknown function '{v}'. "
                    f"Known functions: {sorted(self._adj)}"
                )
        if source == target:
            raise ValueError(f"Function '{source}' cannot depend on itself")
        self._adj[source].add(target)
        self._pred[target].add(source)

    def delete_vertex_bridged(self, name: str) -> None:
        """Remove a vertex, connecting each of its predecessors to each of its successors."""
        self._require(name)
        preds = self._pred.pop(name)
        succs = self._adj.pop(name)
        for p in preds:
            self._adj[p].discard(name)
        for s in succs:
            self._pred[s].discard(name)
        for p in preds:
            for s in succs:
                self.add_edge(p, s)
        self._attrs.pop(name, None)

    def copy(self) -> FunctionGraph:
        g = FunctionGraph(self.vertices(), self.edges())
        g._attrs = {v: dict(a) for v, a in self._attrs.items()}
        return g

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FunctionGraph:
        """
        Build a graph from the JSON structure pipeline function lists use:

            {"graph": {"nodes": [{"id": "a"}, ...],
                       "edges": [{"source": "a", "target": "b"}, ...]}}
        """
        graph = data.get("graph", data)
        try:
            nodes = [n["id"] for n in graph.get("nodes", [])]
            edges = [(e["source"], e["target"]) for e in graph.get("edges", [])]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed function graph: {e}") from e
        return cls(nodes, edges)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _require(self, name: str) -> None:
        if name not in self._adj:
            raise KeyError(f"Unknown function '{name}'")

    def has_vertex(self, name: str) -> bool:
        return name in self._adj

    def vertices(self) -> List[str]:
        return sorted(self._adj)

    def edges(self) -> List[Tuple[str, str]]:
        return sorted((a, b) for a, targets in self._adj.items() for b in targets)

    def predecessors(self, name: str) -> List[str]:
        self._require(name)
        return sorted(self._pred[name])

    def successors(self, name: str) -> List[str]:
        self._require(name)
        return sorted(self._adj[name])

    def is_source_vertex(self, name: str) -> bool:
        self._require(name)
        return not self._pred[name]

    def source_vertices(self) -> List[str]:
        return [v for v in self.vertices() if not self._pred[v]]

    def topological_sort(self) -> List[str]:
        """
        Kahn's algorithm. Among functions that are ready at the same time the
        lexically smaller name comes first.
        """
        indeg = {v: len(p) for v, p in self._pred.items()}
        q = deque(sorted(v for v, d in indeg.items() if d == 0))
        order: List[str] = []

        while q:
            node = q.popleft()
            order.append(node)
            ready = []
            for child in self._adj[node]:
                indeg[child] -= 1
                if indeg[child] == 0:
                    ready.append(child)
            # keep the queue sorted so that ties break lexically
            q = deque(sorted(list(q) + ready))

        if len(order) != len(indeg):
            remaining = sorted(v for v, d in indeg.items() if d > 0)
            raise ValueError(f"Function graph has a cycle. Stuck functions: {remaining}")

        return order

    # ------------------------------------------------------------------
    # Vertex attributes
    # ------------------------------------------------------------------

    def get_vertex_attribute(self, name: str, attr: str) -> Optional[str]:
        self._require(name)
        return self._attrs.get(name, {}).get(attr)

    def set_vertex_attribute(self, name: str, attr: str, value: str) -> None:
        self._require(name)
        self._attrs.setdefault(name, {})[attr] = value

    def __len__(self) -> int:
        return len(self._adj)

    def __contains__(self, name: object) -> bool:
        return name in self._adj
