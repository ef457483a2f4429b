"""
Directed acyclic graph over string-labelled vertices.

An edge ``u -> v`` means "v depends on u": u must be available before v.
Cycles are rejected when an edge is inserted, so a graph built through
``add_edge`` is always sortable.
"""

import heapq
from collections import defaultdict, deque
from typing import Dict, Iterator, List, Optional, Set, Tuple

from autodeps.exceptions import CycleError

TIE_BREAKS = ("insertion", "lexical")


class Graph:
    """Directed acyclic graph with a reverse index and deterministic topological sort."""

    def __init__(self, tie_break: str = "insertion"):
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"Unknown tie_break '{tie_break}', expected one of {', '.join(TIE_BREAKS)}")
        self.tie_break = tie_break
        # dict keeps insertion order, which is the default tie-break
        self._vertices: Dict[str, int] = {}
        self._dependents: Dict[str, List[str]] = defaultdict(list)  # vertex -> vertices that depend on it
        self._dependencies: Dict[str, List[str]] = defaultdict(list)  # vertex -> vertices it depends on
        self._eager: Set[str] = set()  # taken before other ready vertices

    def add_vertex(self, name: str, eager: bool = False) -> None:
        """
        Add a vertex. Re-adding an existing name can only mark it eager.

        An eager vertex is emitted as soon as it is ready, ahead of any
        non-eager vertex that is ready at the same time.
        """
        if name not in self._vertices:
            self._vertices[name] = len(self._vertices)
        if eager:
            self._eager.add(name)

    def add_edge(self, source: str, target: str) -> None:
        """
        Add edge ``source -> target`` (target depends on source).

        Missing endpoints are added as vertices first. Raises CycleError if
        target already reaches source, leaving the graph unchanged.
        """
        self.add_vertex(source)
        self.add_vertex(target)

        if target in self._dependents[source]:
            return

        path = self.find_path(target, source)
        if path is not None:
            raise CycleError.for_edge(source, target, [source] + path)

        self._dependents[source].append(target)
        self._dependencies[target].append(source)

    def has_vertex(self, name: str) -> bool:
        return name in self._vertices

    def __contains__(self, name: str) -> bool:
        return name in self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    @property
    def vertices(self) -> List[str]:
        """Vertex names in insertion order."""
        return list(self._vertices)

    def edges(self) -> Iterator[Tuple[str, str]]:
        """Iterate ``(source, target)`` pairs in insertion order."""
        for source in self._vertices:
            for target in self._dependents.get(source, []):
                yield source, target

    def get_dependents(self, name: str) -> List[str]:
        """Get vertices that depend on ``name`` (empty if none or absent)."""
        return list(self._dependents.get(name, []))

    def get_dependencies(self, name: str) -> List[str]:
        """Get vertices ``name`` depends on (empty if none or absent)."""
        return list(self._dependencies.get(name, []))

    def find_path(self, start: str, goal: str) -> Optional[List[str]]:
        """
        Find a path from ``start`` to ``goal`` following edges.

        Returns the vertices along the path (both ends included), or None.
        """
        if start == goal:
            return [start]
        previous: Dict[str, str] = {}
        queue = deque([start])
        seen: Set[str] = {start}
        while queue:
            node = queue.popleft()
            for nxt in self._dependents.get(node, []):
                if nxt in seen:
                    continue
                previous[nxt] = node
                if nxt == goal:
                    path = [goal]
                    while path[-1] != start:
                        path.append(previous[path[-1]])
                    return list(reversed(path))
                seen.add(nxt)
                queue.append(nxt)
        return None

    def topological_sort(self) -> List[str]:
        """
        Topological sort of all vertices.

        Returns vertices in evaluation order (dependencies before dependents).
        Among ready vertices, eager ones come first; within each group they are
        taken in insertion order, or lexical order when ``tie_break`` is "lexical".
        """
        in_degree: Dict[str, int] = {name: len(self._dependencies.get(name, [])) for name in self._vertices}

        # Kahn's algorithm; heap entries are (key, name) so one loop serves both tie-breaks
        ready: List[Tuple[Tuple[int, object], str]] = [
            (self._rank(name), name) for name, degree in in_degree.items() if degree == 0
        ]
        heapq.heapify(ready)
        result: List[str] = []

        while ready:
            _, name = heapq.heappop(ready)
            result.append(name)
            for dependent in self._dependents.get(name, []):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, (self._rank(dependent), dependent))

        if len(result) != len(self._vertices):
            remaining = [name for name in self._vertices if in_degree[name] > 0]
            raise CycleError(
                f"Graph contains a cycle among: {', '.join(remaining)}",
                cycle=remaining,
            )

        return result

    def _rank(self, name: str) -> Tuple[int, object]:
        group = 0 if name in self._eager else 1
        if self.tie_break == "lexical":
            return group, name
        return group, self._vertices[name]

    def get_layers(self) -> Dict[str, int]:
        """
        Get layer (evaluation level) for each vertex.

        Returns a dictionary mapping vertex -> layer number (0-based).
        Vertices in the same layer do not depend on each other.
        """
        layers: Dict[str, int] = {}
        for name in self.topological_sort():
            deps = self._dependencies.get(name, [])
            layers[name] = max((layers[d] + 1 for d in deps), default=0)
        return layers

    def visualize_layers(self) -> str:
        """
        Visualize the graph as layers (evaluation levels).

        Returns one line per layer, vertices in the same layer joined by ``──``.
        """
        grouped: Dict[int, List[str]] = defaultdict(list)
        for name, layer in self.get_layers().items():
            grouped[layer].append(name)

        lines = []
        for layer_num in sorted(grouped):
            names = sorted(grouped[layer_num])
            if len(names) == 1:
                lines.append(f"Layer {layer_num}: {names[0]}")
            else:
                lines.append(f"Layer {layer_num}: {' ── '.join(names)}")

        return "\n".join(lines)

    def visualize_tree(self, root: Optional[str] = None) -> str:
        """
        Visualize the graph as a tree starting from root vertices (no dependencies).

        Shows dependents with tree branches (│, ├─, └─).
        """
        if root:
            roots = [root] if root in self._vertices else []
        else:
            roots = [name for name in self._vertices if not self._dependencies.get(name)]

        if not roots:
            return "No root vertices found"

        lines: List[str] = []

        def build_tree(name: str, prefix: str = "", is_last: bool = True) -> None:
            branch = "└─ " if is_last else "├─ "
            lines.append(f"{prefix}{branch}{name}")

            dependents = sorted(self._dependents.get(name, []))
            extension = "   " if is_last else "│  "
            for i, dep in enumerate(dependents):
                build_tree(dep, prefix + extension, i == len(dependents) - 1)

        for i, root_name in enumerate(sorted(roots)):
            if i > 0:
                lines.append("")
            build_tree(root_name)

        return "\n".join(lines)
