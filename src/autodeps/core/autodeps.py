"""
One-shot dependency analysis of a model.

Builds the graph, sorts it and writes dependency annotations back onto the
model. Every failure surfaces as SortingError.
"""

import time
from typing import Dict, List, Optional, Tuple

from autodeps.config.loader import AnalysisOptions
from autodeps.core.annotator import Annotator
from autodeps.core.graph import Graph
from autodeps.core.mapper import Mapper
from autodeps.core.types import Model
from autodeps.exceptions import CycleError, DuplicateEntryError, SortingError, UnsupportedChainError
from autodeps.utils.logging import get_logger

logger = get_logger("autodeps.analysis")


class ModelAutoDeps:
    """
    Sort the entries of a model taking their dependencies into account.

    The graph and lookup maps belong to this instance and live for one run;
    create a new instance per model. The model is annotated in place.

    Usage:
        analysis = ModelAutoDeps(model)
        model = analysis.analyze()
        analysis.order          # topological order of all vertices
        model.get_dependencies("b")
    """

    def __init__(self, model: Model, options: Optional[AnalysisOptions] = None):
        self.model = model
        self.options = options or AnalysisOptions()
        self.graph = Graph(tie_break=self.options.tie_break)
        self.mapper = Mapper(self.graph)
        self.order: List[str] = []
        self.annotations: Dict[str, List[str]] = {}
        self.unsupported_chains: List[Tuple[str, str, str]] = []
        self._done = False

    def analyze(self) -> Model:
        """Run the analysis and return the annotated model."""
        if self._done:
            raise RuntimeError("ModelAutoDeps instances are single-use; create a new one per analysis")
        self._done = True

        start_time = time.time()
        try:
            self.mapper.map(self.model)
            self.order = self.graph.topological_sort()
            logger.debug(f"Order for '{self.model.name}': {', '.join(self.order)}")

            annotator = Annotator(
                self.graph,
                self.mapper.entries,
                self.mapper.producers,
                deep_chains=self.options.deep_chains,
            )
            try:
                self.annotations = annotator.annotate(self.model, self.order)
            finally:
                self.unsupported_chains = list(annotator.unsupported_chains)
        except DuplicateEntryError as e:
            raise SortingError(e.message, details={**e.details, "error": "duplicate_entry"}) from e
        except CycleError as e:
            raise SortingError(
                f"Model '{self.model.name}({self.model.id})' has cyclic dependencies: {e.message}",
                details={**e.details, "model": self.model.name, "model_id": self.model.id, "error": "cycle"},
            ) from e
        except UnsupportedChainError as e:
            raise SortingError(
                e.message,
                details={**e.details, "model": self.model.name, "model_id": self.model.id, "error": "deep_chain"},
            ) from e

        elapsed = time.time() - start_time
        logger.info(
            f"Analyzed model '{self.model.name}': {len(self.graph)} vertices, "
            f"{len(self.annotations)} entries with dependencies ({elapsed * 1000:.0f}ms)"
        )
        return self.model

    def get(self) -> Model:
        """Return the (annotated) model."""
        return self.model


def analyze(model: Model, options: Optional[AnalysisOptions] = None) -> Model:
    """
    Annotate ``model`` with the entry dependencies implied by its return paths.

    Args:
        model: Fully populated model; annotated in place
        options: Analysis options (defaults when omitted)

    Returns:
        The same model instance

    Raises:
        SortingError: on duplicate entries, cycles, or (policy "error")
            unsupported dependency chains
    """
    return ModelAutoDeps(model, options).analyze()
