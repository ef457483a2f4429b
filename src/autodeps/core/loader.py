"""
Model definitions from YAML.

A definition file looks like::

    name: pricing
    entries:
      base_price:
        value: 100
      discount:
        signature:
          operation: compute_discount
          return_path:
            name: discount_result
            inputs: [base_price]
      quote:
        service:
          return_path: {name: quote_result, inputs: [discount_result]}
      regional:
        model:
          name: regional
          entries: {...}
"""

from pathlib import Path
from typing import Any

import yaml

from autodeps.core.types import Entry, Model, ReturnPath, Signature
from autodeps.exceptions import DuplicateEntryError, ModelDefinitionError

_ENTRY_KINDS = ("value", "signature", "service", "model")


def load_model(path: str | Path) -> Model:
    """
    Load a model definition file.

    Args:
        path: YAML file path

    Returns:
        Model instance

    Raises:
        ModelDefinitionError: If the file is missing, not valid YAML, or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise ModelDefinitionError("model definition file not found", path=str(path))

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            if hasattr(e, "problem_mark"):
                mark = e.problem_mark
                raise ModelDefinitionError(
                    f"invalid YAML at line {mark.line + 1}, column {mark.column + 1}: {e}", path=str(path)
                ) from e
            raise ModelDefinitionError(f"invalid YAML: {e}", path=str(path)) from e

    return model_from_dict(data, source=str(path))


def model_from_dict(data: Any, source: str | None = None) -> Model:
    """Build a Model (recursively) from its definition mapping."""
    if not isinstance(data, dict):
        raise ModelDefinitionError(
            f"model definition must be a mapping, got {type(data).__name__}", path=source
        )

    name = data.get("name")
    if not name or not isinstance(name, str):
        raise ModelDefinitionError("model definition requires a string 'name'", path=source)

    model = Model(name=name, id=str(data["id"])) if data.get("id") is not None else Model(name=name)

    entries = data.get("entries") or {}
    if not isinstance(entries, dict):
        raise ModelDefinitionError(f"'entries' of model '{name}' must be a mapping", path=source)

    for key, definition in entries.items():
        try:
            model.add(_entry_from_dict(str(key), definition, source))
        except DuplicateEntryError as e:
            raise ModelDefinitionError(e.message, path=source, entry=str(key)) from e

    return model


def _entry_from_dict(key: str, definition: Any, source: str | None) -> Entry:
    if not isinstance(definition, dict):
        # Bare scalars and lists are plain values
        return Entry.of_value(key, definition)

    kinds = [k for k in _ENTRY_KINDS if k in definition]
    if len(kinds) != 1:
        raise ModelDefinitionError(
            f"entry must define exactly one of {', '.join(_ENTRY_KINDS)}, got {sorted(definition)}",
            path=source,
            entry=key,
        )

    kind = kinds[0]
    body = definition[kind]
    if kind == "value":
        return Entry.of_value(key, body)
    if kind == "model":
        return Entry.of_model(key, model_from_dict(body, source=source))

    if not isinstance(body, dict):
        raise ModelDefinitionError(f"'{kind}' must be a mapping", path=source, entry=key)

    if kind == "signature":
        operation = body.get("operation") or key
        rp = _return_path_from_dict(body.get("return_path"), key, source)
        return Entry.of_signature(key, Signature(str(operation), rp))

    rp = _return_path_from_dict(body.get("return_path"), key, source)
    if rp is None:
        raise ModelDefinitionError("service entries require a 'return_path'", path=source, entry=key)
    return Entry.of_service(key, rp)


def _return_path_from_dict(data: Any, key: str, source: str | None) -> ReturnPath | None:
    if data is None:
        return None
    if isinstance(data, str):
        return ReturnPath(data)
    if not isinstance(data, dict) or not data.get("name"):
        raise ModelDefinitionError("'return_path' requires a 'name'", path=source, entry=key)

    inputs = data.get("inputs") or []
    if isinstance(inputs, str):
        inputs = [inputs]
    if not isinstance(inputs, list):
        raise ModelDefinitionError("'return_path.inputs' must be a list of names", path=source, entry=key)

    return ReturnPath(str(data["name"]), tuple(str(i) for i in inputs))
