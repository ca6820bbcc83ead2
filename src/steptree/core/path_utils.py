"""
Path algebra over step trees.

A path is a tuple of child indices leading from the root of a step tree to
one of its nodes. Navigable positions are the paths of leaf-parents; the
functions here find the first, last, previous and next of them by walking
the tree, so empty groups and arbitrarily deep nesting are skipped over
correctly and the first/last navigable positions yield ``None``.

All functions are pure and never mutate the tree they receive.
"""

from collections.abc import Sequence
from typing import Any

from steptree.core.tree_node import PLACEHOLDER, Group, StepNode
from steptree.core.types import FieldId, StepPath
from steptree.exceptions import PathValidationError


def validate_path(path: Any) -> StepPath:
    """
    Normalise a sequence of indices into a ``StepPath`` tuple.

    Params:
        path: Sequence of non-negative integers

    Returns:
        The path as a tuple

    Raises:
        PathValidationError: If path is not a sequence of non-negative ints
    """
    if isinstance(path, (str, bytes)) or not isinstance(path, Sequence):
        raise PathValidationError(path, "must be a sequence of integers")

    for index in path:
        # bool is an int subclass but never a meaningful index
        if isinstance(index, bool) or not isinstance(index, int):
            raise PathValidationError(path, f"index {index!r} is not an integer")
        if index < 0:
            raise PathValidationError(path, f"index {index} is negative")
    return tuple(path)


def node_at(tree: StepNode, path: Sequence[int]) -> StepNode | None:
    """
    Descend ``tree`` by the successive indices of ``path``.

    Returns:
        The node at path, or None if an index is out of range or the walk
        runs into a leaf before the path is exhausted
    """
    current = tree
    for index in path:
        if not isinstance(current, Group) or not 0 <= index < len(current.children):
            return None
        current = current.children[index]
    return current


def is_leaf_parent(node: StepNode | None) -> bool:
    """Check whether node is a non-empty group made only of leaves."""
    return isinstance(node, Group) and node.is_leaf_parent


def fields_of(node: StepNode | None) -> list[FieldId] | None:
    """
    Return the de-duplicated field ids of a leaf-parent.

    The placeholder of an empty step is not a field and is left out.

    Returns:
        Field ids in registration order, or None if node is not a leaf-parent
    """
    if not is_leaf_parent(node):
        return None
    field_ids = dict.fromkeys(child.field_id for child in node.children)
    return [field_id for field_id in field_ids if field_id != PLACEHOLDER]


def first_leaf_parent(tree: StepNode, from_path: Sequence[int] = ()) -> StepPath | None:
    """
    Find the first leaf-parent at or below ``from_path``, depth-first left to right.

    Params:
        tree: Step tree to search
        from_path: Root of the subtree to search, defaults to the whole tree

    Returns:
        Path of the first leaf-parent, or None if the subtree has none
    """
    start = tuple(from_path)
    node = node_at(tree, start)
    if node is None:
        return None
    if is_leaf_parent(node):
        return start
    if isinstance(node, Group):
        for index in range(len(node.children)):
            found = first_leaf_parent(tree, start + (index,))
            if found is not None:
                return found
    return None


def last_leaf_parent(tree: StepNode, from_path: Sequence[int] = ()) -> StepPath | None:
    """
    Find the last leaf-parent at or below ``from_path``, depth-first right to left.

    Params:
        tree: Step tree to search
        from_path: Root of the subtree to search, defaults to the whole tree

    Returns:
        Path of the last leaf-parent, or None if the subtree has none
    """
    start = tuple(from_path)
    node = node_at(tree, start)
    if node is None:
        return None
    if is_leaf_parent(node):
        return start
    if isinstance(node, Group):
        for index in reversed(range(len(node.children))):
            found = last_leaf_parent(tree, start + (index,))
            if found is not None:
                return found
    return None


def prev_leaf_parent(tree: StepNode, path: Sequence[int]) -> StepPath | None:
    """
    Find the navigable position immediately before ``path``.

    Walks the ancestor chain upward. At each level the earlier siblings are
    scanned nearest first, and the last leaf-parent of the first sibling
    subtree that has one is returned.

    Returns:
        Path of the previous leaf-parent, or None if path is the first one
    """
    current = tuple(path)
    while current:
        parent_path, branch = current[:-1], current[-1]
        parent = node_at(tree, parent_path)
        if isinstance(parent, Group):
            for index in range(min(branch, len(parent.children)) - 1, -1, -1):
                found = last_leaf_parent(tree, parent_path + (index,))
                if found is not None:
                    return found
        current = parent_path
    return None


def next_leaf_parent(tree: StepNode, path: Sequence[int]) -> StepPath | None:
    """
    Find the navigable position immediately after ``path``.

    Mirror of ``prev_leaf_parent``: later siblings are scanned in increasing
    order and the first leaf-parent of the first one that has one wins.

    Returns:
        Path of the next leaf-parent, or None if path is the last one
    """
    current = tuple(path)
    while current:
        parent_path, branch = current[:-1], current[-1]
        parent = node_at(tree, parent_path)
        if isinstance(parent, Group):
            for index in range(branch + 1, len(parent.children)):
                found = first_leaf_parent(tree, parent_path + (index,))
                if found is not None:
                    return found
        current = parent_path
    return None


def compare_paths(a: Sequence[int], b: Sequence[int]) -> int:
    """
    Compare two paths lexicographically.

    A missing index counts as -1, so a strict prefix sorts before every path
    that extends it.

    Returns:
        -1 if a sorts before b, 1 if after, 0 if equal

    Examples:
        (0, 1) vs (0, 2) -> -1
        (0,) vs (0, 0) -> -1
        (1,) vs (0, 5) -> 1
    """
    for depth in range(max(len(a), len(b))):
        ai = a[depth] if depth < len(a) else -1
        bi = b[depth] if depth < len(b) else -1
        if ai != bi:
            return -1 if ai < bi else 1
    return 0


def leaf_parent_paths(tree: StepNode) -> list[StepPath]:
    """List every navigable position of the tree in navigation order."""
    paths = []
    current = first_leaf_parent(tree)
    while current is not None:
        paths.append(current)
        current = next_leaf_parent(tree, current)
    return paths


def set_node_at(tree: StepNode, path: Sequence[int], node: StepNode) -> StepNode:
    """
    Return a copy of ``tree`` with the node at ``path`` replaced.

    Only the groups along the path are rebuilt; untouched siblings are shared
    with the original tree.

    Raises:
        PathValidationError: If path does not resolve to an existing node
    """
    if not path:
        return node
    index, rest = path[0], path[1:]
    if not isinstance(tree, Group) or not 0 <= index < len(tree.children):
        raise PathValidationError(tuple(path), "does not resolve to a node")
    children = list(tree.children)
    children[index] = set_node_at(children[index], rest, node)
    return Group(children)
