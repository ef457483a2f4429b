"""
Tests for YAML model definitions.
"""

import textwrap
from pathlib import Path

import pytest

from autodeps import analyze
from autodeps.core.loader import load_model, model_from_dict
from autodeps.core.types import EntryKind, ReturnPath
from autodeps.exceptions import ModelDefinitionError

EXAMPLE_MODEL = Path(__file__).parent.parent / "examples" / "pricing" / "model.yaml"


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "model.yaml"
    path.write_text(textwrap.dedent(content))
    return path


class TestLoadModel:
    """Loading well-formed definitions."""

    def test_all_entry_kinds(self, tmp_path):
        path = _write(
            tmp_path,
            """
            name: pricing
            id: p-1
            entries:
              currency: EUR
              rate:
                value: [1, 2]
              base:
                signature:
                  operation: lookup
                  return_path:
                    name: price/base
                    inputs: [currency]
              quote:
                service:
                  return_path: {name: price/quote, inputs: price/base}
              regional:
                model:
                  name: regional
                  entries:
                    region: north
            """,
        )
        model = load_model(path)

        assert model.name == "pricing"
        assert model.id == "p-1"
        assert list(model.entries) == ["currency", "rate", "base", "quote", "regional"]
        assert model["currency"].value == "EUR"
        assert model["rate"].value == [1, 2]
        assert model["base"].kind is EntryKind.SIGNATURE
        assert model["base"].signature.operation == "lookup"
        assert model["base"].return_path == ReturnPath("price/base", ("currency",))
        assert model["quote"].return_path == ReturnPath("price/quote", ("price/base",))
        assert model["regional"].model.name == "regional"
        assert model["regional"].model["region"].value == "north"

    def test_signature_defaults(self):
        model = model_from_dict({"name": "m", "entries": {"a": {"signature": {"return_path": "ra"}}}})
        assert model["a"].signature.operation == "a"
        assert model["a"].return_path == ReturnPath("ra")

    def test_signature_without_return_path(self):
        model = model_from_dict({"name": "m", "entries": {"a": {"signature": {"operation": "op"}}}})
        assert model["a"].return_path is None

    def test_empty_entries(self):
        model = model_from_dict({"name": "m"})
        assert len(model) == 0

    def test_example_model_analysis(self):
        model = load_model(EXAMPLE_MODEL)
        analyze(model)

        assert model.get_dependencies("discount") == ["base_price", "factor"]
        assert model.get_dependencies("quote") == ["base_price", "discount"]
        assert model.get_dependencies("base_price") is None


class TestInvalidDefinitions:
    """Malformed definitions raise ModelDefinitionError."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModelDefinitionError, match="not found"):
            load_model(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path, "name: [unclosed\n")
        with pytest.raises(ModelDefinitionError, match="invalid YAML"):
            load_model(path)

    def test_not_a_mapping(self, tmp_path):
        path = _write(tmp_path, "- a\n- b\n")
        with pytest.raises(ModelDefinitionError, match="must be a mapping"):
            load_model(path)

    def test_missing_name(self):
        with pytest.raises(ModelDefinitionError, match="'name'"):
            model_from_dict({"entries": {}})

    def test_entries_not_mapping(self):
        with pytest.raises(ModelDefinitionError, match="'entries'"):
            model_from_dict({"name": "m", "entries": ["a"]})

    def test_two_kinds(self):
        with pytest.raises(ModelDefinitionError) as exc_info:
            model_from_dict({"name": "m", "entries": {"a": {"value": 1, "model": {"name": "x"}}}})
        assert exc_info.value.entry == "a"

    def test_service_requires_return_path(self):
        with pytest.raises(ModelDefinitionError, match="return_path"):
            model_from_dict({"name": "m", "entries": {"s": {"service": {}}}})

    def test_return_path_requires_name(self):
        with pytest.raises(ModelDefinitionError, match="requires a 'name'"):
            model_from_dict({"name": "m", "entries": {"s": {"service": {"return_path": {"inputs": []}}}}})

    def test_inputs_must_be_list(self):
        with pytest.raises(ModelDefinitionError, match="inputs"):
            model_from_dict(
                {"name": "m", "entries": {"s": {"service": {"return_path": {"name": "r", "inputs": {"a": 1}}}}}}
            )

    def test_colliding_keys(self):
        with pytest.raises(ModelDefinitionError) as exc_info:
            model_from_dict({"name": "m", "entries": {1: "x", "1": "y"}})
        assert exc_info.value.entry == "1"

    def test_error_names_file(self, tmp_path):
        path = _write(tmp_path, "entries: {}\n")
        with pytest.raises(ModelDefinitionError) as exc_info:
            load_model(path)
        assert exc_info.value.path == str(path)
