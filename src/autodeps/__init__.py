"""
Autodeps - dependency ordering and annotation for declarative service models.
"""

__version__ = "0.1.0"

from autodeps.config.loader import AnalysisOptions, load_config
from autodeps.core.autodeps import ModelAutoDeps, analyze
from autodeps.core.graph import Graph
from autodeps.core.loader import load_model, model_from_dict
from autodeps.core.types import Entry, EntryKind, Model, ReturnPath, Signature

# Exceptions
from autodeps.exceptions import (
    AutoDepsError,
    ConfigurationError,
    CycleError,
    DuplicateEntryError,
    ModelDefinitionError,
    SortingError,
    UnsupportedChainError,
)

# Logging utilities
from autodeps.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    # Analysis
    "analyze",
    "ModelAutoDeps",
    "AnalysisOptions",
    "Graph",
    # Model
    "Model",
    "Entry",
    "EntryKind",
    "Signature",
    "ReturnPath",
    "load_model",
    "model_from_dict",
    # Config
    "load_config",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Exceptions
    "AutoDepsError",
    "ConfigurationError",
    "ModelDefinitionError",
    "DuplicateEntryError",
    "CycleError",
    "UnsupportedChainError",
    "SortingError",
]
