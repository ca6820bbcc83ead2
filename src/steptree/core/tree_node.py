"""
Step tree node model for steptree.

A step tree is a tagged union: a ``Leaf`` carries a single field identifier,
a ``Group`` carries an ordered tuple of child nodes. A group whose children
are all leaves is a leaf-parent, i.e. one navigable step.
"""

from collections.abc import Iterable
from typing import Union

from attrs import field, frozen

from steptree.core.types import FieldId, RawStepTree
from steptree.exceptions import TreeStructureError

# Field id standing in for a mounted step that has not registered any fields yet
PLACEHOLDER: FieldId = ""


@frozen
class Leaf:
    """A single field identifier."""

    field_id: FieldId


@frozen
class Group:
    """An ordered sequence of sub-steps, or of fields when it is a leaf-parent."""

    children: tuple["StepNode", ...] = field(default=(), converter=tuple)

    @property
    def is_leaf_parent(self) -> bool:
        return bool(self.children) and all(
            isinstance(child, Leaf) for child in self.children
        )


StepNode = Union[Leaf, Group]


def leaf_parent(field_ids: Iterable[FieldId]) -> Group:
    """
    Build a leaf-parent from field ids.

    Duplicates are dropped keeping first-seen order. An empty input yields
    the placeholder step so the group remains navigable.

    Params:
        field_ids: Field identifiers owned by the step

    Returns:
        Group whose children are all leaves
    """
    unique = list(dict.fromkeys(field_ids)) or [PLACEHOLDER]
    return Group(Leaf(field_id) for field_id in unique)


def as_node(raw: "RawStepTree | StepNode") -> StepNode:
    """
    Convert a raw nested list/string tree into ``Leaf``/``Group`` nodes.

    Nodes that are already ``Leaf`` or ``Group`` instances pass through, so
    callers may mix both forms. Leaf-parents are de-duplicated.

    Params:
        raw: A field id string, a list/tuple of raw trees, or a node

    Returns:
        The equivalent StepNode

    Raises:
        TreeStructureError: If an element is neither a string nor a list/tuple

    Examples:
        "email" -> Leaf("email")
        [["a", "b"], ["c"]] -> Group((Group((Leaf("a"), Leaf("b"))), Group((Leaf("c"),))))
    """
    if isinstance(raw, (Leaf, Group)):
        return raw
    if isinstance(raw, str):
        return Leaf(raw)
    if not isinstance(raw, (list, tuple)):
        raise TreeStructureError(raw, "expected a field id string or a list of nodes")

    children = [as_node(child) for child in raw]
    if children and all(isinstance(child, Leaf) for child in children):
        return leaf_parent(child.field_id for child in children)
    return Group(children)


def to_raw(node: StepNode) -> RawStepTree:
    """Convert a node back into nested lists of field ids."""
    if isinstance(node, Leaf):
        return node.field_id
    return [to_raw(child) for child in node.children]
