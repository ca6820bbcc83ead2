"""
Multi-step form façade.

``StepForm`` wires together a ``StepRegistry``, a ``StepNavigator`` and a
root ``StepScope`` mounted at index 0, and reports positions relative to
that root scope: the first step is ``0`` rather than ``(0, 0)``, and steps of
nested groups are tuples such as ``(1, 0)``.

Example:
    form = StepForm(ModelFieldEngine(Signup), validation_mode="forward")
    account = form.step("account")
    account.add_field("email")
    profile = form.step("profile")
    profile.add_field("address.city")

    await form.next()          # validates "email" first
    form.current_step          # -> 1
"""

from collections.abc import Sequence

from steptree.config import NavigatorConfig, StepValidationMode
from steptree.core.tree_node import StepNode
from steptree.core.types import FieldId, LeaveHook, StepPath
from steptree.engines.base import FieldEngine
from steptree.navigation.controller import StepNavigator
from steptree.structure.registry import StepRegistry
from steptree.structure.scopes import StepScope

StepRef = int | tuple[int, ...]


class StepForm:
    """A multi-step form: registry, navigator and root scope in one object."""

    def __init__(
        self,
        engine: FieldEngine,
        config: NavigatorConfig | None = None,
        *,
        validation_mode: StepValidationMode | str | None = None,
    ):
        if config is not None and validation_mode is not None:
            raise ValueError("Pass either config or validation_mode, not both")
        if config is None:
            config = (
                NavigatorConfig()
                if validation_mode is None
                else NavigatorConfig(validation_mode=validation_mode)
            )

        self.registry = StepRegistry()
        self.navigator = StepNavigator(self.registry, engine, config)
        self.root = StepScope(self.registry, name="form").mount(0)

    # Registration

    def step(self, name: str | None = None, index: int | None = None) -> StepScope:
        """Mount a top-level step group and return its scope."""
        return self.root.group(name=name, index=index)

    def add_field(self, field_id: FieldId) -> bool:
        """Register a field directly on the form's root scope."""
        return self.root.add_field(field_id)

    def close(self) -> None:
        """Unmount the root scope; the tree empties and the position becomes unset."""
        self.root.unmount()

    @property
    def registration_key(self) -> int:
        return self.registry.registration_key

    # Navigation

    async def jump(self, step: int | Sequence[int], on_leave: LeaveHook | None = None) -> bool:
        """
        Move to a step given relative to the root scope.

        Params:
            step: Index of a top-level step, or a path into nested groups
            on_leave: Optional hook awaited with the values of the step being left

        Returns:
            True if the position moved
        """
        relative = (step,) if isinstance(step, int) and not isinstance(step, bool) else tuple(step)
        return await self.navigator.jump(self._absolute(relative), on_leave)

    async def next(self, on_leave: LeaveHook | None = None) -> bool:
        return await self.navigator.next(on_leave)

    async def prev(self, on_leave: LeaveHook | None = None) -> bool:
        return await self.navigator.prev(on_leave)

    # State

    @property
    def current_step(self) -> StepRef | None:
        """The current step relative to the root scope, None while unset."""
        if self.registry.position is None:
            return None
        return self._relative(self.registry.position)

    @property
    def current_step_node(self) -> StepNode | None:
        return self.registry.current_node

    @property
    def current_fields(self) -> list[FieldId] | None:
        return self.registry.current_fields()

    @property
    def validated_fields(self) -> list[FieldId]:
        return self.registry.validated_fields

    @property
    def validated_steps(self) -> list[StepRef]:
        return [self._relative(path) for path in self.registry.validated_steps]

    @property
    def is_first_step(self) -> bool:
        return self.registry.is_first_step

    @property
    def is_last_step(self) -> bool:
        return self.registry.is_last_step

    def _absolute(self, relative: tuple[int, ...]) -> StepPath:
        return (self.root.index or 0,) + relative

    def _relative(self, path: StepPath) -> StepRef:
        relative = path[1:]
        return relative[0] if len(relative) == 1 else relative
