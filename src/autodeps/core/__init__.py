"""
Core dependency analysis: model types, graph, mapping, annotation.
"""

from autodeps.core.annotator import Annotator
from autodeps.core.autodeps import ModelAutoDeps, analyze
from autodeps.core.graph import Graph
from autodeps.core.loader import load_model, model_from_dict
from autodeps.core.mapper import Mapper
from autodeps.core.types import Entry, EntryKind, Model, ReturnPath, Signature

__all__ = [
    "analyze",
    "ModelAutoDeps",
    "Graph",
    "Mapper",
    "Annotator",
    "load_model",
    "model_from_dict",
    "Model",
    "Entry",
    "EntryKind",
    "Signature",
    "ReturnPath",
]
