"""
Tests for JSON flattening and schema extraction.
"""
import pytest

from canonical_mapper.flattening import flatten_json
from canonical_mapper.io_utils import parse_json_text
from canonical_mapper.schema_utils import extract_schema, format_sample_value


class TestFlattenJson:
    """Flattening rules for each JSON value kind"""

    def test_root_primitive_uses_empty_key(self):
        assert flatten_json(42, "") == {"": 42}

    def test_null_with_prefix(self):
        assert flatten_json(None, "k") == {"k": None}

    def test_null_at_root_is_empty(self):
        assert flatten_json(None, "") == {}

    def test_nested_objects(self):
        assert flatten_json({"a": {"b": 1, "c": 2}}, "") == {"a.b": 1, "a.c": 2}

    def test_only_first_array_element_is_used(self):
        """Elements after index 0 never contribute paths"""
        result = flatten_json({"a": [{"x": 1}, {"x": 2, "y": 3}]}, "")
        assert result == {"a.0.x": 1}

    def test_empty_array_is_a_leaf(self):
        assert flatten_json({"a": []}, "") == {"a": []}

    def test_root_array_uses_index_segment(self):
        assert flatten_json([7, 8], "") == {"0": 7}

    def test_primitives_keep_their_values(self):
        result = flatten_json({"s": "x", "b": False, "f": 1.5, "n": None})
        assert result == {"s": "x", "b": False, "f": 1.5, "n": None}

    def test_prefix_is_prepended(self):
        assert flatten_json({"a": 1}, "root") == {"root.a": 1}

    def test_empty_object_yields_nothing(self):
        assert flatten_json({"a": {}}) == {}

    def test_collision_last_write_wins(self):
        """A literal dotted key collides with a nested path; the later one wins"""
        result = flatten_json({"a": {"b": 1}, "a.b": 2})
        assert result == {"a.b": 2}

    def test_non_json_value_rejected(self):
        with pytest.raises(TypeError):
            flatten_json({"a": object()})


class TestExtractSchema:
    """Schema extraction from raw uploads"""

    def test_object_root(self):
        schema = extract_schema({"b": 1, "a": {"z": None, "c": "x"}})
        assert schema["keys"] == ["a.c", "a.z", "b"]
        assert schema["sample"]["a.c"] == "x"

    def test_array_root_uses_first_element(self):
        schema = extract_schema([{"x": 1}, {"y": 2}])
        assert schema["keys"] == ["x"]
        assert schema["sample"] == {"x": 1}

    def test_empty_array_root_has_no_keys(self):
        assert extract_schema([]) == {"sample": {}, "keys": []}

    def test_keys_sorted_by_code_point(self):
        schema = extract_schema({"b": 1, "B": 2, "a": 3, "_": 4})
        assert schema["keys"] == ["B", "_", "a", "b"]

    def test_keys_strictly_ascending(self):
        raw = {"z": [{"q": 1, "a": [[]]}], "m": {"n": {"o": None}}, "a": True}
        keys = extract_schema(raw)["keys"]
        assert all(left < right for left, right in zip(keys, keys[1:]))

    def test_scalar_root(self):
        assert extract_schema("hello") == {"sample": {"": "hello"}, "keys": [""]}

    def test_deeply_nested_document(self):
        """Nesting far past the recursion limit still flattens"""
        depth = 5000
        raw = 1
        for _ in range(depth):
            raw = {"a": raw}
        schema = extract_schema(raw)
        path = ".".join(["a"] * depth)
        assert schema == {"sample": {path: 1}, "keys": [path]}

    def test_deep_document_parsed_from_text(self):
        """A document json accepts is also accepted by extraction"""
        text = '{"a":' * 500 + "[1, 2]" + "}" * 500
        schema = extract_schema(parse_json_text(text))
        assert schema["keys"] == [".".join(["a"] * 500 + ["0"])]


class TestFormatSampleValue:
    """Display formatting of leaf values"""

    def test_values(self):
        assert format_sample_value(None) == "null"
        assert format_sample_value([]) == "[]"
        assert format_sample_value(True) == "true"
        assert format_sample_value(3) == "3"
        assert format_sample_value("text") == "text"
