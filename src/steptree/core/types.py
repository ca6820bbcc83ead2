"""
Core type definitions for steptree.

This module contains the type aliases shared by the tree model, the path
algebra, the registry and the navigator.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar, Union

T = TypeVar("T")

FieldId = str

StepPath = tuple[int, ...]

# Nested lists of field ids, e.g. [["name", "email"], [["street"], ["city"]]]
RawStepTree = Union[str, list["RawStepTree"], tuple["RawStepTree", ...]]

StepValues = dict[str, Any]

MaybeAwaitable = Union[T, Awaitable[T]]

LeaveHook = Callable[[StepValues], MaybeAwaitable[None]]
