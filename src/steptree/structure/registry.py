"""
Step tree registry for steptree.

The registry owns the mutable state of a multi-step form: the current step
tree, the position pointer, the validated field/step ledgers and the
registration key that drives re-registration after structural changes.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from steptree.core.path_utils import (
    fields_of,
    first_leaf_parent,
    is_leaf_parent,
    leaf_parent_paths,
    next_leaf_parent,
    node_at,
    prev_leaf_parent,
    set_node_at,
    validate_path,
)
from steptree.core.tree_node import Group, Leaf, StepNode, as_node, leaf_parent
from steptree.core.types import FieldId, RawStepTree, StepPath

if TYPE_CHECKING:
    from steptree.structure.scopes import StepScope

logger = logging.getLogger(__name__)


class StepRegistry:
    """Registry of mounted step groups and the navigation position.

    The tree is the ordered sequence of registered top-level fragments, so the
    first fragment is addressed by paths starting with 0. Fragments are
    inserted with ``register_group`` and overwritten in place with
    ``replace_group_at``.

    Structural churn is not diffed. ``rebuild`` clears the tree, bumps
    ``registration_key`` and asks every attached scope to announce its
    subtree again, in positional order, which converges to a consistent tree.

    Invariants:
    - ``position`` is None or the path of a leaf-parent in ``tree``
    - ``revision`` increases every time ``tree`` is replaced
    - the ledgers are only mutated through ``record_validated``,
      ``discard_validated`` and ``shift_position``
    """

    def __init__(self):
        self._tree: Group = Group()
        self.revision = 0
        self.position: StepPath | None = None
        self.registration_key = 0
        self._validated_fields: dict[FieldId, None] = {}
        self._validated_steps: set[StepPath] = set()
        self._scopes: list["StepScope"] = []
        self._rebuilding = False

    @property
    def tree(self) -> Group:
        return self._tree

    @tree.setter
    def tree(self, tree: Group) -> None:
        self._tree = tree
        self.revision += 1

    # Registration

    def register_group(
        self, contents: "RawStepTree | StepNode", index: int | None = None
    ) -> int:
        """
        Insert a top-level fragment.

        Params:
            contents: Fragment to insert, raw nested lists or nodes
            index: Suggested index; appended when None, clamped to the
                current number of fragments otherwise

        Returns:
            The index the fragment was actually inserted at
        """
        node = as_node(contents)
        children = list(self.tree.children)
        assigned = len(children) if index is None else min(validate_path((index,))[0], len(children))
        children.insert(assigned, node)
        self.tree = Group(children)

        if not self._rebuilding:
            for scope in self._scopes:
                if scope.index is not None and scope.index >= assigned:
                    scope.index += 1
            self.shift_position((), assigned, 1)
        if self.position is None:
            self.position = first_leaf_parent(self.tree)

        logger.debug(
            "Registered group at index %d (key %d), position %s",
            assigned,
            self.registration_key,
            self.position,
        )
        return assigned

    def replace_group_at(self, index: int, contents: "RawStepTree | StepNode") -> bool:
        """
        Overwrite a previously registered top-level fragment in place.

        Returns:
            True if replaced, False if index was never assigned
        """
        if not 0 <= index < len(self.tree.children):
            logger.warning(
                "Ignoring replace at unassigned index %d (%d groups registered)",
                index,
                len(self.tree.children),
            )
            return False

        self.tree = set_node_at(self.tree, (index,), as_node(contents))
        self._reconcile_position()
        return True

    def register_field(self, group_path: Sequence[int], field_id: FieldId) -> bool:
        """
        Add a field to the step at ``group_path``.

        Registering a field twice is a no-op. The placeholder of an empty
        step is replaced by the first real field.

        Params:
            group_path: Path of a leaf-parent, a placeholder step or an empty group
            field_id: Field identifier to add

        Returns:
            True if the field is registered, False if group_path is not a step
        """
        path = validate_path(group_path)
        node = node_at(self.tree, path)
        if node is None or isinstance(node, Leaf) or (node.children and not is_leaf_parent(node)):
            logger.warning("Cannot register field '%s' at %s: not a step", field_id, path)
            return False

        existing = fields_of(node) or []
        if field_id in existing:
            return True

        self.tree = set_node_at(self.tree, path, leaf_parent(existing + [field_id]))
        if self.position is None:
            self.position = first_leaf_parent(self.tree)
        logger.debug("Registered field '%s' at %s", field_id, path)
        return True

    def rebuild(self) -> int:
        """
        Clear the tree and have every attached scope re-register.

        The position is kept while scopes re-register and reconciled once
        the tree has converged.

        Returns:
            The new registration key
        """
        self.tree = Group()
        self.registration_key += 1
        logger.debug("Rebuilding tree under registration key %d", self.registration_key)

        self._rebuilding = True
        try:
            for scope in sorted(self._scopes, key=lambda s: s.index or 0):
                scope.reannounce()
        finally:
            self._rebuilding = False

        self._reconcile_position()
        return self.registration_key

    def attach(self, scope: "StepScope") -> None:
        """Track a top-level scope so it re-registers on rebuild."""
        if scope not in self._scopes:
            self._scopes.append(scope)

    def detach(self, scope: "StepScope") -> None:
        """
        Stop tracking a top-level scope.

        The tree keeps the scope's fragment until the next ``rebuild``.
        """
        if scope not in self._scopes:
            return
        self._scopes.remove(scope)
        if scope.index is not None:
            self.shift_position((), scope.index, -1)

    def shift_position(self, parent_path: Sequence[int], index: int, delta: int) -> None:
        """
        Keep the position and the validated steps on the same steps across a
        sibling insert or removal.

        Validated steps inside a removed subtree are dropped. The position is
        left for ``_reconcile_position`` when its own subtree is removed.

        Params:
            parent_path: Path of the group whose children are shifting
            index: Child index where a node was inserted (delta 1) or removed (delta -1)
            delta: 1 or -1
        """
        parent_path = tuple(parent_path)
        if self.position is not None:
            shifted = _shifted(self.position, parent_path, index, delta)
            if shifted is not None:
                self.position = shifted

        steps = set()
        for step in self._validated_steps:
            shifted = _shifted(step, parent_path, index, delta)
            if shifted is not None:
                steps.add(shifted)
        self._validated_steps = steps

    # Position

    @property
    def current_node(self) -> StepNode | None:
        if self.position is None:
            return None
        return node_at(self.tree, self.position)

    def current_fields(self) -> list[FieldId] | None:
        """Return the de-duplicated fields of the current step, None when unset."""
        if self.position is None:
            return None
        return fields_of(self.current_node)

    @property
    def is_first_step(self) -> bool:
        return self.position is None or prev_leaf_parent(self.tree, self.position) is None

    @property
    def is_last_step(self) -> bool:
        return self.position is None or next_leaf_parent(self.tree, self.position) is None

    def commit(self, path: Sequence[int]) -> bool:
        """
        Move the position to ``path``.

        Returns:
            True if moved, False if path is not a leaf-parent of the current tree
        """
        path = validate_path(path)
        if not is_leaf_parent(node_at(self.tree, path)):
            logger.warning("Refusing to move to %s: not a step", path)
            return False
        logger.debug("Position %s -> %s", self.position, path)
        self.position = path
        return True

    def leaf_parent_paths(self) -> list[StepPath]:
        return leaf_parent_paths(self.tree)

    def _reconcile_position(self) -> None:
        """Point the position back at a step after the tree changed shape."""
        if self._rebuilding:
            return
        if self.position is not None and is_leaf_parent(node_at(self.tree, self.position)):
            return

        candidate = None
        if self.position is not None:
            for depth in range(len(self.position), 0, -1):
                prefix = self.position[:depth]
                if node_at(self.tree, prefix) is not None:
                    candidate = first_leaf_parent(self.tree, prefix)
                    if candidate is not None:
                        break
        if candidate is None:
            candidate = first_leaf_parent(self.tree)

        if candidate != self.position:
            logger.debug("Position %s no longer a step, moved to %s", self.position, candidate)
        self.position = candidate

    # Validation ledgers

    @property
    def validated_fields(self) -> list[FieldId]:
        return list(self._validated_fields)

    @property
    def validated_steps(self) -> list[StepPath]:
        return sorted(self._validated_steps)

    def record_validated(self, field_ids: Iterable[FieldId], step: Sequence[int]) -> None:
        """Mark fields and their step as having passed validation."""
        for field_id in field_ids:
            self._validated_fields[field_id] = None
        self._validated_steps.add(tuple(step))

    def discard_validated(self, field_ids: Iterable[FieldId], step: Sequence[int]) -> None:
        """Drop fields and their step after a failed validation."""
        for field_id in field_ids:
            self._validated_fields.pop(field_id, None)
        self._validated_steps.discard(tuple(step))


def _shifted(
    path: StepPath, parent_path: StepPath, index: int, delta: int
) -> StepPath | None:
    """Return path adjusted for a sibling shift under parent_path, None if it was removed."""
    depth = len(parent_path)
    if len(path) <= depth or path[:depth] != parent_path:
        return path
    branch = path[depth]
    if branch < index:
        return path
    if delta < 0 and branch == index:
        return None
    return path[:depth] + (branch + delta,) + path[depth + 1 :]
