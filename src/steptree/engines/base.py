"""
Field engine protocol.

The navigator never validates or reads field values itself. It delegates to
a field engine, the object that owns field values and their validation rules
(the form library binding in a UI, ``ModelFieldEngine`` in memory).
"""

import inspect
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from steptree.core.types import FieldId, MaybeAwaitable, T


@runtime_checkable
class FieldEngine(Protocol):
    """Validation and live-value access for named fields."""

    def validate(self, field_ids: Sequence[FieldId]) -> MaybeAwaitable[bool]:
        """Validate exactly the named fields and report whether all of them passed."""
        ...

    def read_live(self, field_ids: Sequence[FieldId]) -> MaybeAwaitable[list[Any]]:
        """Return the current values of the named fields, aligned with field_ids."""
        ...


async def resolve(result: MaybeAwaitable[T]) -> T:
    """Await result if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(result):
        return await result
    return result
