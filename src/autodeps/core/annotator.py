"""
Turn a sorted graph into per-entry dependency annotations.

Entries publish results under a ReturnPath name that usually differs from
the entry key, so an entry's upstream entries are found in two hops::

    entry X  <-  result R (published by X)  <-  result R2 (published by Y)

which becomes the annotation "X depends on Y". Chains that would need a
third hop are reported, never resolved.
"""

from typing import Dict, List, Tuple

from autodeps.core.graph import Graph
from autodeps.core.types import Entry, Model
from autodeps.exceptions import UnsupportedChainError
from autodeps.utils.logging import get_logger

logger = get_logger("autodeps.annotator")

DEEP_CHAIN_POLICIES = ("warn", "error", "ignore")


class Annotator:
    """Computes and writes dependency annotations for one analysis run."""

    def __init__(
        self,
        graph: Graph,
        entries: Dict[str, Entry],
        producers: Dict[str, str],
        deep_chains: str = "warn",
    ):
        if deep_chains not in DEEP_CHAIN_POLICIES:
            raise ValueError(f"Unknown deep_chains policy '{deep_chains}'")
        self.graph = graph
        self.entries = entries
        self.producers = producers
        self.deep_chains = deep_chains
        self.unsupported_chains: List[Tuple[str, str, str]] = []

    def resolve(self, entry_name: str) -> List[str]:
        """
        Entry names ``entry_name`` depends on, deduplicated in discovery order.

        Raises UnsupportedChainError under the "error" policy.
        """
        paths: List[str] = []
        for result in self.graph.get_dependencies(entry_name):
            if result not in self.producers:
                continue
            for upstream in self.graph.get_dependencies(result):
                if upstream in self.producers:
                    producer = self.producers[upstream]
                    if producer not in paths:
                        paths.append(producer)
                elif self.graph.get_dependencies(upstream):
                    self._unsupported(entry_name, result, upstream)
        return paths

    def _unsupported(self, entry_name: str, result: str, via: str) -> None:
        chain = (entry_name, result, via)
        if chain in self.unsupported_chains:
            return
        self.unsupported_chains.append(chain)
        if self.deep_chains == "error":
            raise UnsupportedChainError(entry_name, result, via)
        if self.deep_chains == "warn":
            logger.warning(
                f"Entry '{entry_name}' reads '{via}' through '{result}'; chains deeper than "
                f"two hops are not resolved, no dependency recorded for it"
            )

    def annotate(self, model: Model, order: List[str]) -> Dict[str, List[str]]:
        """
        Annotate ``model`` following the topological ``order``.

        All annotations are computed before the model is touched, so a
        failure leaves it unchanged. Previous annotations of the flattened
        entries are replaced.
        """
        annotations: Dict[str, List[str]] = {}
        for name in order:
            if name not in self.entries:
                continue
            paths = self.resolve(name)
            if paths:
                annotations[name] = paths

        for name in self.entries:
            model.dependencies.pop(name, None)
        for name, paths in annotations.items():
            model.depends_on(name, paths)

        logger.debug(f"Annotated {len(annotations)} of {len(self.entries)} entries in '{model.name}'")
        return annotations
