"""
Populate a Graph from a Model.

Two passes over the flattened model: first every entry key and published
result name becomes a vertex, then signature and service entries contribute
edges ``result -> entry`` and ``input -> result``.
"""

from typing import Dict

from autodeps.core.graph import Graph
from autodeps.core.types import Entry, EntryKind, Model
from autodeps.exceptions import DuplicateEntryError
from autodeps.utils.logging import get_logger

logger = get_logger("autodeps.mapper")


class Mapper:
    """Maps one model into one graph. Build a fresh instance per analysis."""

    def __init__(self, graph: Graph):
        self.graph = graph
        self.entries: Dict[str, Entry] = {}  # flattened entry key -> entry
        self.owners: Dict[str, Model] = {}  # flattened entry key -> model holding it
        self.producers: Dict[str, str] = {}  # result name -> producing entry key

    def map(self, model: Model) -> Graph:
        """Run both passes over ``model`` (and its nested models)."""
        self.add_vertices(model)
        self.add_edges()
        logger.debug(
            f"Mapped model '{model.name}': {len(self.entries)} entries, "
            f"{len(self.producers)} results, {len(self.graph)} vertices"
        )
        return self.graph

    def add_vertices(self, model: Model) -> None:
        """Vertex pass. Raises DuplicateEntryError before any edge is added."""
        for owner, entry in model.walk():
            existing = self.entries.get(entry.key)
            if existing is not None:
                if existing != entry:
                    first = self.owners[entry.key]
                    raise DuplicateEntryError(
                        entry.key,
                        owner.name,
                        owner.id,
                        existing=existing,
                        duplicate=entry,
                        existing_model=f"{first.name}({first.id})",
                    )
                continue

            # entries go ahead of result names so a producer precedes its readers
            self.graph.add_vertex(entry.key, eager=True)
            self.entries[entry.key] = entry
            self.owners[entry.key] = owner

            rp = entry.return_path
            if rp is not None:
                self.graph.add_vertex(rp.name)
                previous = self.producers.get(rp.name)
                if previous is not None and previous != entry.key:
                    logger.warning(
                        f"Result '{rp.name}' is published by both '{previous}' and '{entry.key}'; "
                        f"using '{entry.key}'"
                    )
                self.producers[rp.name] = entry.key

    def add_edges(self) -> None:
        """Edge pass over the flattened entries, in vertex-pass order."""
        edge_count = 0
        for key, entry in self.entries.items():
            if entry.kind not in (EntryKind.SIGNATURE, EntryKind.SERVICE):
                continue
            rp = entry.return_path
            if rp is None:
                continue
            self.graph.add_edge(rp.name, key)
            edge_count += 1
            for input_path in rp.input_paths:
                self.graph.add_edge(input_path, rp.name)
                edge_count += 1
        logger.debug(f"Added {edge_count} edges")
