"""
Mount handles for step groups.

A ``StepScope`` is what a mounted step group holds on to: its own ordered
field list and its ordered child groups. Scopes translate mount, unmount and
field registration into registry operations:

- a top-level scope owns one fragment of the registry tree and remembers the
  index it was assigned
- nested scopes live inside their top-level scope's fragment; any change
  below a top-level scope re-announces that whole fragment in place
- removals go through ``rebuild``, after which every attached scope
  re-announces its subtree under the new registration key
"""

import logging
from collections.abc import Iterator
from typing import Optional

from steptree.core.path_utils import validate_path
from steptree.core.tree_node import Group, StepNode, leaf_parent
from steptree.core.types import FieldId, StepPath
from steptree.structure.registry import StepRegistry

logger = logging.getLogger(__name__)


class StepScope:
    """Handle owned by a mounted step group.

    A scope without children is a single step made of its fields, or the
    placeholder step while it has none. A scope with children is a group:
    its own fields, if any, form a leading step followed by the children.
    """

    def __init__(
        self,
        registry: StepRegistry,
        parent: Optional["StepScope"] = None,
        name: str | None = None,
    ):
        self.registry = registry
        self.parent = parent
        self.name = name
        self.index: int | None = None
        self.fields: list[FieldId] = []
        self.children: list["StepScope"] = []
        self.epoch: int | None = None
        self.mounted = False

    def __repr__(self) -> str:
        return f"StepScope(name={self.name!r}, index={self.index}, fields={self.fields})"

    @property
    def root(self) -> "StepScope":
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    @property
    def is_stale(self) -> bool:
        """True when the registry was rebuilt since this scope last announced itself."""
        return self.epoch != self.registry.registration_key

    def path(self) -> StepPath | None:
        """Path of this scope's node in the registry tree, None when unmounted."""
        if not self.mounted or self.index is None:
            return None
        if self.parent is None:
            return (self.index,)
        parent_path = self.parent.path()
        if parent_path is None:
            return None
        return parent_path + (self._slot(),)

    def contents(self) -> StepNode:
        """Build the step tree this scope contributes."""
        if not self.children:
            return leaf_parent(self.fields)
        nodes: list[StepNode] = [leaf_parent(self.fields)] if self.fields else []
        nodes.extend(child.contents() for child in self.children)
        return Group(nodes)

    # Mounting

    def mount(self, index: int | None = None) -> "StepScope":
        """
        Register this scope with its parent, or with the registry at top level.

        Params:
            index: Suggested position among siblings; appended when None

        Returns:
            self, for chaining
        """
        if self.mounted:
            return self
        if index is not None:
            validate_path((index,))

        if self.parent is None:
            self.index = self.registry.register_group(self.contents(), index)
            self.registry.attach(self)
            self.mounted = True
            self._mark_current()
            return self

        if not self.parent.mounted:
            logger.warning("Cannot mount %r: parent %r is not mounted", self, self.parent)
            return self

        siblings = self.parent.children
        slot_index = len(siblings) if index is None else min(index, len(siblings))
        had_siblings = bool(siblings)
        siblings.insert(slot_index, self)
        self.parent._reindex()
        self.mounted = True

        if had_siblings:
            self.registry.shift_position(
                self.parent.path(), self.parent._offset() + slot_index, 1
            )
        self.root._announce()
        return self

    def group(self, name: str | None = None, index: int | None = None) -> "StepScope":
        """Create and mount a child group."""
        return StepScope(self.registry, parent=self, name=name).mount(index)

    def unmount(self) -> None:
        """Remove this scope and its descendants, then rebuild the tree."""
        if not self.mounted:
            return

        if self.parent is None:
            self.registry.detach(self)
        else:
            parent_path = self.parent.path()
            slot = self._slot()
            self.parent.children.remove(self)
            self.parent._reindex()
            if parent_path is not None:
                self.registry.shift_position(parent_path, slot, -1)

        for scope in self._walk():
            scope.mounted = False
        logger.debug("Unmounted %r", self)

        target = self.parent.root if self.parent is not None else self
        target.rebuild()

    # Fields

    def add_field(self, field_id: FieldId) -> bool:
        """
        Register a field with this scope.

        Returns:
            True if the field is registered, False if the scope is not mounted
        """
        if not self.mounted:
            logger.warning("Ignoring field '%s' on unmounted %r", field_id, self)
            return False
        if field_id in self.fields:
            return True

        if self.children and not self.fields:
            # own fields now form a step in front of the children
            self.fields.append(field_id)
            self.registry.shift_position(self.path(), 0, 1)
            self.root._announce()
            return True

        self.fields.append(field_id)
        if self.children or not self.registry.register_field(self.path(), field_id):
            self.root._announce()
        return True

    def remove_field(self, field_id: FieldId) -> bool:
        """
        Unregister a field and rebuild the tree.

        Returns:
            True if the field was registered with this scope
        """
        if field_id not in self.fields:
            return False
        self.fields.remove(field_id)
        if self.children and not self.fields and self.mounted:
            self.registry.shift_position(self.path(), 0, -1)
        self.rebuild()
        return True

    # Re-registration

    def rebuild(self) -> int:
        """
        Rebuild the registry so this scope and its descendants announce again.

        Afterwards every mounted scope's ``epoch`` equals the new key.

        Returns:
            The registry's new registration key
        """
        return self.registry.rebuild()

    def reannounce(self) -> None:
        """Register this top-level scope's subtree again after the registry was cleared."""
        self.index = self.registry.register_group(self.contents(), self.index)
        self._mark_current()

    def _announce(self) -> None:
        if self.index is None or not self.registry.replace_group_at(self.index, self.contents()):
            self.registry.rebuild()
            return
        self._mark_current()

    def _mark_current(self) -> None:
        for scope in self._walk():
            scope.epoch = self.registry.registration_key

    def _walk(self) -> Iterator["StepScope"]:
        yield self
        for child in self.children:
            yield from child._walk()

    def _offset(self) -> int:
        return 1 if self.fields else 0

    def _slot(self) -> int:
        return self.parent._offset() + self.index

    def _reindex(self) -> None:
        for position, child in enumerate(self.children):
            child.index = position
