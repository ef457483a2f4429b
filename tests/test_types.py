"""
Tests for the model data types.
"""

import pytest

from autodeps.core.types import Entry, EntryKind, Model, ReturnPath, Signature
from autodeps.exceptions import DuplicateEntryError


class TestReturnPath:
    def test_inputs_stored_as_tuple(self):
        rp = ReturnPath("ra", ["x", "y"])
        assert rp.input_paths == ("x", "y")

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            ReturnPath("")


class TestEntry:
    """Entry kinds and the return path each kind exposes."""

    def test_value_entry(self):
        entry = Entry.of_value("price", 10)
        assert entry.kind is EntryKind.VALUE
        assert entry.return_path is None
        assert entry.model is None

    def test_signature_entry(self):
        rp = ReturnPath("ra", ("x",))
        entry = Entry.of_signature("a", Signature("computeA", rp))
        assert entry.kind is EntryKind.SIGNATURE
        assert entry.return_path == rp

    def test_signature_without_return_path(self):
        entry = Entry.of_signature("a", Signature("computeA"))
        assert entry.return_path is None

    def test_service_entry(self):
        rp = ReturnPath("rs")
        entry = Entry.of_service("s", rp)
        assert entry.kind is EntryKind.SERVICE
        assert entry.return_path == rp

    def test_model_entry(self):
        inner = Model("inner")
        entry = Entry.of_model("outer", inner)
        assert entry.kind is EntryKind.MODEL
        assert entry.model is inner
        assert entry.return_path is None


class TestModel:
    """Model construction, lookup and annotations."""

    def test_builder_methods(self):
        model = (
            Model("m")
            .value("x", 1)
            .signature("a", "computeA", return_path="ra", inputs=["x"])
            .service("s", "rs", inputs=["ra"])
        )
        assert len(model) == 3
        assert "a" in model
        assert model["a"].return_path == ReturnPath("ra", ("x",))
        assert model["s"].kind is EntryKind.SERVICE

    def test_model_has_identity(self):
        first = Model("m")
        second = Model("m")
        assert first.id != second.id
        assert Model("m", id="fixed").id == "fixed"

    def test_add_conflicting_entry_raises(self):
        model = Model("m", id="42").value("x", 1)
        with pytest.raises(DuplicateEntryError) as exc_info:
            model.value("x", 2)
        assert exc_info.value.entry_name == "x"
        assert "m(42)" in str(exc_info.value)

    def test_add_equal_entry_is_noop(self):
        model = Model("m").value("x", 1)
        model.value("x", 1)
        assert len(model) == 1

    def test_walk_descends_into_nested_models(self):
        inner = Model("inner").value("y", 2)
        outer = Model("outer").value("x", 1).nest("sub", inner)

        walked = [(owner.name, entry.key) for owner, entry in outer.walk()]
        assert walked == [("outer", "x"), ("outer", "sub"), ("inner", "y")]

    def test_dependency_annotations(self):
        model = Model("m")
        assert model.get_dependencies("a") is None
        model.depends_on("a", ["b", "c"])
        assert model.get_dependencies("a") == ["b", "c"]

    def test_to_dict(self):
        inner = Model("inner", id="i").service("s", "rs")
        model = (
            Model("m", id="1")
            .value("x", 1)
            .signature("a", "computeA", return_path="ra", inputs=["x"])
            .nest("sub", inner)
        )
        model.depends_on("a", ["s"])

        assert model.to_dict() == {
            "name": "m",
            "id": "1",
            "entries": {
                "x": {"value": 1},
                "a": {"signature": {"operation": "computeA", "return_path": {"name": "ra", "inputs": ["x"]}}},
                "sub": {
                    "model": {
                        "name": "inner",
                        "id": "i",
                        "entries": {"s": {"service": {"return_path": {"name": "rs", "inputs": []}}}},
                    }
                },
            },
            "dependencies": {"a": ["s"]},
        }
