"""
Tests for the step tree registry.

This module tests the registry components:
- Group registration, insertion and in-place replacement
- Field registration into steps
- Rebuild and position reconciliation
- Validation ledgers
"""

import pytest

from steptree import Group, StepRegistry
from steptree.core import to_raw
from steptree.exceptions import PathValidationError


class TestGroupRegistration:
    """Test register_group and replace_group_at."""

    def test_register_appends_and_returns_index(self):
        registry = StepRegistry()
        assert registry.register_group(["a"]) == 0
        assert registry.register_group(["b"]) == 1
        assert to_raw(registry.tree) == [["a"], ["b"]]

    def test_first_registration_sets_position(self):
        registry = StepRegistry()
        assert registry.position is None
        registry.register_group([["a"], ["b"]])
        assert registry.position == (0, 0)

    def test_group_without_steps_leaves_position_unset(self):
        registry = StepRegistry()
        registry.register_group(Group())
        assert registry.position is None

    def test_insert_before_position_keeps_current_step(self, two_step_registry):
        assert two_step_registry.register_group(["z"], 0) == 0
        assert to_raw(two_step_registry.tree) == [["z"], ["f1", "f2"], ["f3"]]
        assert two_step_registry.position == (1,)
        assert two_step_registry.current_fields() == ["f1", "f2"]

    def test_suggested_index_is_clamped(self, two_step_registry):
        assert two_step_registry.register_group(["z"], 10) == 2

    def test_negative_index_rejected(self, two_step_registry):
        with pytest.raises(PathValidationError):
            two_step_registry.register_group(["z"], -1)

    def test_placeholder_step(self):
        registry = StepRegistry()
        registry.register_group([""])
        assert registry.position == (0,)
        assert registry.current_fields() == []

    def test_replace_in_place(self, two_step_registry):
        assert two_step_registry.replace_group_at(1, ["f3", "f4"])
        assert to_raw(two_step_registry.tree) == [["f1", "f2"], ["f3", "f4"]]

    def test_replace_unassigned_index_is_noop(self, two_step_registry):
        assert not two_step_registry.replace_group_at(5, ["x"])
        assert to_raw(two_step_registry.tree) == [["f1", "f2"], ["f3"]]


class TestFieldRegistration:
    """Test register_field."""

    def test_field_replaces_placeholder(self):
        registry = StepRegistry()
        registry.register_group([""])
        assert registry.register_field((0,), "email")
        assert to_raw(registry.tree) == [["email"]]

    def test_field_registration_is_idempotent(self, two_step_registry):
        assert two_step_registry.register_field((0,), "f1")
        assert two_step_registry.register_field((0,), "f5")
        assert two_step_registry.register_field((0,), "f5")
        assert to_raw(two_step_registry.tree) == [["f1", "f2", "f5"], ["f3"]]

    def test_field_into_empty_group(self):
        registry = StepRegistry()
        registry.register_group(Group())
        assert registry.register_field((0,), "x")
        assert registry.position == (0,)

    def test_field_into_group_of_steps_is_rejected(self):
        registry = StepRegistry()
        registry.register_group([["a"], ["b"]])
        assert not registry.register_field((0,), "x")
        assert not registry.register_field((0, 0, 0), "x")
        assert not registry.register_field((4,), "x")


class TestRebuild:
    """Test rebuild and position reconciliation."""

    def test_rebuild_without_scopes_clears_tree(self, two_step_registry):
        key = two_step_registry.rebuild()
        assert key == 1
        assert two_step_registry.registration_key == 1
        assert two_step_registry.tree == Group()
        assert two_step_registry.position is None

    def test_replace_moves_position_to_nearest_remaining_step(self):
        registry = StepRegistry()
        registry.register_group([["a"], ["b"]])
        assert registry.commit((0, 1))

        registry.replace_group_at(0, [["a"]])

        assert registry.position == (0, 0)

    def test_replace_keeps_valid_position(self, two_step_registry):
        two_step_registry.commit((1,))
        two_step_registry.replace_group_at(0, ["f1"])
        assert two_step_registry.position == (1,)


class TestPositionQueries:
    """Test current step queries and commit."""

    def test_unset_registry(self):
        registry = StepRegistry()
        assert registry.current_fields() is None
        assert registry.current_node is None
        assert registry.is_first_step
        assert registry.is_last_step

    def test_first_and_last(self, two_step_registry):
        assert two_step_registry.is_first_step
        assert not two_step_registry.is_last_step
        two_step_registry.commit((1,))
        assert not two_step_registry.is_first_step
        assert two_step_registry.is_last_step

    def test_single_step_is_first_and_last(self):
        registry = StepRegistry()
        registry.register_group(["x"])
        assert registry.is_first_step
        assert registry.is_last_step

    def test_commit_rejects_non_steps(self):
        registry = StepRegistry()
        registry.register_group([["a"], ["b"]])
        assert not registry.commit((0,))
        assert not registry.commit((3,))
        assert registry.position == (0, 0)

    def test_leaf_parent_paths(self, two_step_registry):
        assert two_step_registry.leaf_parent_paths() == [(0,), (1,)]


class TestLedgers:
    """Test validated field and step ledgers."""

    def test_record_and_discard(self, two_step_registry):
        two_step_registry.record_validated(["f1", "f2"], (0,))
        two_step_registry.record_validated(["f3"], (1,))
        assert two_step_registry.validated_fields == ["f1", "f2", "f3"]
        assert two_step_registry.validated_steps == [(0,), (1,)]

        two_step_registry.discard_validated(["f1", "f2"], (0,))
        assert two_step_registry.validated_fields == ["f3"]
        assert two_step_registry.validated_steps == [(1,)]

    def test_record_is_a_set(self, two_step_registry):
        two_step_registry.record_validated(["f1"], (0,))
        two_step_registry.record_validated(["f1"], (0,))
        assert two_step_registry.validated_fields == ["f1"]
