"""
Autodeps exception hierarchy.

All domain-specific exceptions inherit from AutoDepsError, so callers can
catch any analysis failure with a single base class while still handling
individual failures when needed.

Hierarchy::

    AutoDepsError
    ├── ConfigurationError      - config loading, parsing, validation
    ├── ModelDefinitionError    - YAML model definitions
    ├── DuplicateEntryError     - same key twice with different values
    ├── CycleError              - edge would close a cycle / cyclic graph
    ├── UnsupportedChainError   - dependency chain deeper than two hops
    └── SortingError            - uniform wrapper surfaced by the analysis
"""

from __future__ import annotations

from typing import Any


class AutoDepsError(Exception):
    """Base exception for all autodeps errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(AutoDepsError):
    """Raised when configuration loading, parsing, or validation fails."""


class ModelDefinitionError(AutoDepsError):
    """Raised when a model definition file cannot be turned into a Model."""

    def __init__(self, message: str, *, path: str | None = None, entry: str | None = None) -> None:
        parts = []
        if path:
            parts.append(f"{path}")
        if entry:
            parts.append(f"entry '{entry}'")
        full = f"{': '.join(parts)}: {message}" if parts else message
        super().__init__(full, details={"path": path, "entry": entry})
        self.path = path
        self.entry = entry


# --- Analysis ----------------------------------------------------------------


class DuplicateEntryError(AutoDepsError):
    """Raised when a flattened model holds the same key with two different values."""

    def __init__(
        self,
        entry_name: str,
        model_name: str,
        model_id: str,
        *,
        existing: Any = None,
        duplicate: Any = None,
        existing_model: str | None = None,
    ) -> None:
        location = f" (first defined in '{existing_model}')" if existing_model else ""
        full = (
            f"Entry named: '{entry_name}' is duplicated in the model: '{model_name}({model_id})'{location}\n"
            f"{entry_name}={existing!r}\n"
            f"{entry_name}={duplicate!r}"
        )
        details: dict[str, Any] = {"entry": entry_name, "model": model_name, "model_id": model_id}
        if existing_model:
            details["existing_model"] = existing_model
        super().__init__(full, details=details)
        self.entry_name = entry_name
        self.model_name = model_name
        self.model_id = model_id
        self.existing = existing
        self.duplicate = duplicate
        self.existing_model = existing_model


class CycleError(AutoDepsError):
    """Raised when an edge would introduce a cycle, or the graph is cyclic at sort time."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        target: str | None = None,
        cycle: list[str] | None = None,
    ) -> None:
        super().__init__(message, details={"source": source, "target": target, "cycle": cycle or []})
        self.source = source
        self.target = target
        self.cycle = cycle or []

    @classmethod
    def for_edge(cls, source: str, target: str, cycle: list[str]) -> "CycleError":
        """Build the error for edge ``source -> target`` closing ``cycle``."""
        return cls(
            f"Edge between '{source}' and '{target}' introduces a cycle in the graph: "
            + " --> ".join(cycle),
            source=source,
            target=target,
            cycle=cycle,
        )


class UnsupportedChainError(AutoDepsError):
    """Raised when an entry depends on a chain the two-hop resolution cannot express."""

    def __init__(self, entry_name: str, result_name: str, via: str) -> None:
        full = (
            f"Entry '{entry_name}' reads '{via}' through result '{result_name}', "
            f"but '{via}' is not a published result; dependency chains deeper "
            f"than two hops are not supported"
        )
        super().__init__(full, details={"entry": entry_name, "result": result_name, "via": via})
        self.entry_name = entry_name
        self.result_name = result_name
        self.via = via


class SortingError(AutoDepsError):
    """Raised by the analysis when the model cannot be ordered.

    Wraps DuplicateEntryError, CycleError and UnsupportedChainError; the
    original exception is kept as ``__cause__``.
    """
