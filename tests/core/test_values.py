"""
Tests for nested value assembly from dotted field identifiers.
"""

import pytest

from steptree import build_nested_values
from steptree.exceptions import FieldPathError


class TestBuildNestedValues:
    """Test build_nested_values."""

    def test_sibling_keys_share_parent(self):
        assert build_nested_values(["a.b", "a.c"], [1, 2]) == {"a": {"b": 1, "c": 2}}

    def test_numeric_segment_creates_list(self):
        assert build_nested_values(["items.0.x"], [9]) == {"items": [{"x": 9}]}

    def test_flat_fields(self):
        assert build_nested_values(["name", "email"], ["Ada", "ada@example.org"]) == {
            "name": "Ada",
            "email": "ada@example.org",
        }

    def test_list_items_merge(self):
        result = build_nested_values(
            ["items.0.name", "items.0.qty", "items.1.name"], ["pen", 2, "ink"]
        )
        assert result == {"items": [{"name": "pen", "qty": 2}, {"name": "ink"}]}

    def test_skipped_list_slots_are_padded(self):
        assert build_nested_values(["tags.2"], ["c"]) == {"tags": [None, None, "c"]}

    def test_empty_input(self):
        assert build_nested_values([], []) == {}

    def test_does_not_share_state_between_calls(self):
        first = build_nested_values(["a.b"], [1])
        second = build_nested_values(["a.c"], [2])
        assert first == {"a": {"b": 1}}
        assert second == {"a": {"c": 2}}

    @pytest.mark.parametrize("field_id", ["", "a..b", ".a", "a."])
    def test_empty_segments_rejected(self, field_id):
        with pytest.raises(FieldPathError):
            build_nested_values([field_id], [1])

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            build_nested_values(["a", "b"], [1])

    def test_scalar_in_the_way(self):
        with pytest.raises(FieldPathError) as exc_info:
            build_nested_values(["a", "a.b"], [1, 2])
        assert exc_info.value.field_id == "a.b"

    def test_list_where_object_expected(self):
        with pytest.raises(FieldPathError):
            build_nested_values(["a.0", "a.b"], [1, 2])
