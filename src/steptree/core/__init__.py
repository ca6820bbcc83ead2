"""
Core steptree components.

This package provides the step tree node model, the path algebra used for
navigation and the nested value builder.
"""

from steptree.core.path_utils import (
    compare_paths,
    fields_of,
    first_leaf_parent,
    is_leaf_parent,
    last_leaf_parent,
    leaf_parent_paths,
    next_leaf_parent,
    node_at,
    prev_leaf_parent,
    set_node_at,
    validate_path,
)
from steptree.core.tree_node import (
    PLACEHOLDER,
    Group,
    Leaf,
    StepNode,
    as_node,
    leaf_parent,
    to_raw,
)
from steptree.core.types import (
    FieldId,
    LeaveHook,
    MaybeAwaitable,
    RawStepTree,
    StepPath,
    StepValues,
)
from steptree.core.values import build_nested_values

__all__ = [
    "Leaf",
    "Group",
    "StepNode",
    "PLACEHOLDER",
    "as_node",
    "leaf_parent",
    "to_raw",
    "FieldId",
    "StepPath",
    "RawStepTree",
    "StepValues",
    "MaybeAwaitable",
    "LeaveHook",
    "build_nested_values",
    "compare_paths",
    "fields_of",
    "first_leaf_parent",
    "is_leaf_parent",
    "last_leaf_parent",
    "leaf_parent_paths",
    "next_leaf_parent",
    "node_at",
    "prev_leaf_parent",
    "set_node_at",
    "validate_path",
]
