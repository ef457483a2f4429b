"""
Model data types.

A Model is a named, keyed collection of entries. Entries are tagged by kind:
opaque values, signature wrappers, service entries and nested models. Only
signature and service entries carry a ReturnPath and take part in the
dependency graph.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from autodeps.exceptions import DuplicateEntryError


class EntryKind(str, Enum):
    """Discriminator for the value an Entry holds."""

    VALUE = "value"
    SIGNATURE = "signature"
    SERVICE = "service"
    MODEL = "model"


@dataclass(frozen=True)
class ReturnPath:
    """Name a result is published under, plus the names it reads first."""

    name: str
    input_paths: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ReturnPath name must be a non-empty string")
        # Accept any iterable of names, store a tuple
        object.__setattr__(self, "input_paths", tuple(self.input_paths))


@dataclass(frozen=True)
class Signature:
    """Description of an invocable unit of work."""

    operation: str
    return_path: ReturnPath | None = None


@dataclass(frozen=True)
class Entry:
    """
    Named value slot in a model.

    Use the ``value``/``signature``/``service``/``model`` constructors rather
    than building entries by hand so ``kind`` always matches the payload.
    """

    key: str
    kind: EntryKind
    value: Any = None
    signature: Signature | None = None
    service_path: ReturnPath | None = None

    @classmethod
    def of_value(cls, key: str, value: Any) -> Entry:
        return cls(key=key, kind=EntryKind.VALUE, value=value)

    @classmethod
    def of_signature(cls, key: str, signature: Signature) -> Entry:
        return cls(key=key, kind=EntryKind.SIGNATURE, signature=signature)

    @classmethod
    def of_service(cls, key: str, return_path: ReturnPath) -> Entry:
        return cls(key=key, kind=EntryKind.SERVICE, service_path=return_path)

    @classmethod
    def of_model(cls, key: str, model: Model) -> Entry:
        return cls(key=key, kind=EntryKind.MODEL, value=model)

    @property
    def return_path(self) -> ReturnPath | None:
        """ReturnPath this entry publishes under, if any."""
        if self.kind is EntryKind.SIGNATURE and self.signature is not None:
            return self.signature.return_path
        if self.kind is EntryKind.SERVICE:
            return self.service_path
        return None

    @property
    def model(self) -> Model | None:
        """Nested model held by a MODEL entry."""
        if self.kind is EntryKind.MODEL:
            return self.value
        return None


@dataclass(eq=False)
class Model:
    """
    Named, keyed collection of entries.

    ``dependencies`` holds the derived dependency annotations: entry name ->
    ordered list of entry names that must be evaluated first. It is rewritten
    by every analysis run and never read back into the graph.
    """

    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    entries: dict[str, Entry] = field(default_factory=dict)
    dependencies: dict[str, list[str]] = field(default_factory=dict)

    def add(self, entry: Entry) -> Model:
        """Add an entry. Re-adding an equal entry is a no-op."""
        existing = self.entries.get(entry.key)
        if existing is not None and existing != entry:
            raise DuplicateEntryError(entry.key, self.name, self.id, existing=existing, duplicate=entry)
        self.entries[entry.key] = entry
        return self

    def value(self, key: str, value: Any) -> Model:
        return self.add(Entry.of_value(key, value))

    def signature(
        self, key: str, operation: str, return_path: str | None = None, inputs: list[str] | None = None
    ) -> Model:
        rp = ReturnPath(return_path, tuple(inputs or ())) if return_path else None
        return self.add(Entry.of_signature(key, Signature(operation, rp)))

    def service(self, key: str, return_path: str, inputs: list[str] | None = None) -> Model:
        return self.add(Entry.of_service(key, ReturnPath(return_path, tuple(inputs or ()))))

    def nest(self, key: str, model: Model) -> Model:
        return self.add(Entry.of_model(key, model))

    def depends_on(self, entry_name: str, paths: list[str]) -> None:
        """Set the dependency annotation of ``entry_name``."""
        self.dependencies[entry_name] = list(paths)

    def get_dependencies(self, entry_name: str) -> list[str] | None:
        """Dependency annotation of ``entry_name``, or None when it has none."""
        return self.dependencies.get(entry_name)

    def walk(self) -> Iterator[tuple[Model, Entry]]:
        """Yield ``(owning model, entry)`` for every entry, descending into nested models."""
        for entry in self.entries.values():
            yield self, entry
            if entry.kind is EntryKind.MODEL and entry.model is not None:
                yield from entry.model.walk()

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> Entry:
        return self.entries[key]

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Model(name={self.name!r}, id={self.id!r}, entries={list(self.entries)!r})"

    def to_dict(self) -> dict[str, Any]:
        """Render the model in the YAML definition shape, plus annotations."""
        entries: dict[str, Any] = {}
        for key, entry in self.entries.items():
            if entry.kind is EntryKind.VALUE:
                entries[key] = {"value": entry.value}
            elif entry.kind is EntryKind.SIGNATURE:
                sig: dict[str, Any] = {"operation": entry.signature.operation if entry.signature else None}
                if entry.return_path is not None:
                    sig["return_path"] = _return_path_dict(entry.return_path)
                entries[key] = {"signature": sig}
            elif entry.kind is EntryKind.SERVICE:
                entries[key] = {"service": {"return_path": _return_path_dict(entry.return_path)}}
            elif entry.kind is EntryKind.MODEL:
                entries[key] = {"model": entry.model.to_dict()}
        data: dict[str, Any] = {"name": self.name, "id": self.id, "entries": entries}
        if self.dependencies:
            data["dependencies"] = {k: list(v) for k, v in self.dependencies.items()}
        return data


def _return_path_dict(rp: ReturnPath | None) -> dict[str, Any] | None:
    if rp is None:
        return None
    return {"name": rp.name, "inputs": list(rp.input_paths)}
