"""
Step navigation with validation gating.

``StepNavigator`` moves the registry position between steps. Every
transition optionally validates the step being left (depending on the
configured ``StepValidationMode`` and the direction of the move), records the
outcome in the registry's ledgers, runs the caller's ``on_leave`` hook with
the nested values of the step being left, and finally commits the new
position.

Navigation calls never raise for expected outcomes: failed validation, an
unset position, a missing target or an overlapping call all return False.
So does a move whose tree changed while validation or ``on_leave`` was
pending, since the paths it was computed from may no longer name the same
steps. Exceptions raised by ``on_leave`` propagate unchanged.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence

from steptree.config import NavigationConcurrency, NavigatorConfig, StepValidationMode
from steptree.core.path_utils import (
    compare_paths,
    first_leaf_parent,
    next_leaf_parent,
    prev_leaf_parent,
    validate_path,
)
from steptree.core.types import FieldId, LeaveHook, StepPath
from steptree.core.values import build_nested_values
from steptree.engines.base import FieldEngine, resolve
from steptree.structure.registry import StepRegistry

logger = logging.getLogger(__name__)


class StepNavigator:
    """Navigation controller over a ``StepRegistry``.

    States are "unset" (no step registered yet) and "at <path>" for each
    leaf-parent path of the tree. The registry moves from unset to the first
    step on its own; the navigator only moves between steps.

    Calls are serialised behind an ``asyncio.Lock`` so two overlapping calls
    can never both act on the same starting position. The configured
    ``NavigationConcurrency`` decides whether a call issued while another is
    pending is rejected or waits its turn.
    """

    def __init__(
        self,
        registry: StepRegistry,
        engine: FieldEngine,
        config: NavigatorConfig | None = None,
    ):
        self.registry = registry
        self.engine = engine
        self.config = config or NavigatorConfig()
        self._lock = asyncio.Lock()

    @property
    def validation_mode(self) -> StepValidationMode:
        return self.config.validation_mode

    @property
    def is_navigating(self) -> bool:
        return self._lock.locked()

    # Read-only views of the registry

    @property
    def position(self) -> StepPath | None:
        return self.registry.position

    @property
    def is_first_step(self) -> bool:
        return self.registry.is_first_step

    @property
    def is_last_step(self) -> bool:
        return self.registry.is_last_step

    @property
    def current_fields(self) -> list[FieldId] | None:
        return self.registry.current_fields()

    @property
    def validated_fields(self) -> list[FieldId]:
        return self.registry.validated_fields

    @property
    def validated_steps(self) -> list[StepPath]:
        return self.registry.validated_steps

    # Operations

    async def jump(self, target: Sequence[int], on_leave: LeaveHook | None = None) -> bool:
        """
        Move to ``target``.

        A target naming a group moves to the first step inside it.

        Params:
            target: Path of the destination step or group
            on_leave: Optional hook awaited with the nested values of the step being left

        Returns:
            True if the position moved, False otherwise

        Raises:
            PathValidationError: If target is not a sequence of non-negative ints
        """
        target = validate_path(target)
        return await self._navigate(lambda: target, on_leave)

    async def next(self, on_leave: LeaveHook | None = None) -> bool:
        """Move to the next step. Returns False when unset or already at the last step."""
        return await self._navigate(self._next_target, on_leave)

    async def prev(self, on_leave: LeaveHook | None = None) -> bool:
        """Move to the previous step. Returns False when unset or already at the first step."""
        return await self._navigate(self._prev_target, on_leave)

    def _next_target(self) -> StepPath | None:
        position = self.registry.position
        if position is None:
            return None
        return next_leaf_parent(self.registry.tree, position)

    def _prev_target(self) -> StepPath | None:
        position = self.registry.position
        if position is None:
            return None
        return prev_leaf_parent(self.registry.tree, position)

    async def _navigate(
        self, pick_target: Callable[[], StepPath | None], on_leave: LeaveHook | None
    ) -> bool:
        if (
            self._lock.locked()
            and self.config.concurrency is NavigationConcurrency.REJECT
        ):
            logger.warning("Navigation rejected: another navigation is in progress")
            return False

        async with self._lock:
            # targets are picked under the lock so they never use a stale position
            target = pick_target()
            if target is None:
                logger.debug("No step to navigate to from %s", self.registry.position)
                return False
            return await self._transition(target, on_leave)

    async def _transition(self, target: StepPath, on_leave: LeaveHook | None) -> bool:
        registry = self.registry
        resolved = first_leaf_parent(registry.tree, target)
        if resolved is None:
            logger.debug("Target %s holds no step", target)
            return False

        current = registry.position
        fields = registry.current_fields() or []
        revision = registry.revision

        if current is not None and self._should_validate(resolved, current):
            passed = not fields or await resolve(self.engine.validate(fields))
            if self._tree_changed(revision, current, resolved):
                return False
            if not passed:
                registry.discard_validated(fields, current)
                logger.debug("Validation of %s failed, staying at %s", fields, current)
                return False
            registry.record_validated(fields, current)

        if on_leave is not None and fields:
            live = await resolve(self.engine.read_live(fields))
            await resolve(on_leave(build_nested_values(fields, live)))
            if self._tree_changed(revision, current, resolved):
                return False

        return registry.commit(resolved)

    def _tree_changed(self, revision: int, current: StepPath, target: StepPath) -> bool:
        # paths taken before an await may name other steps once the tree changed
        if self.registry.revision == revision:
            return False
        logger.debug("Tree changed while leaving %s, dropping move to %s", current, target)
        return True

    def _should_validate(self, target: StepPath, current: StepPath) -> bool:
        mode = self.config.validation_mode
        if mode is StepValidationMode.NONE:
            return False
        if mode is StepValidationMode.ALL:
            return True
        return compare_paths(target, current) > 0
