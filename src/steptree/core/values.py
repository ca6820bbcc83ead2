"""
Nested value assembly from dotted field identifiers.

Form fields are addressed by dotted identifiers such as ``address.city`` or
``items.0.name``. ``build_nested_values`` turns a flat list of those
identifiers and their values back into the nested dict/list structure they
describe.
"""

import re
from collections.abc import Sequence
from typing import Any

from steptree.core.types import FieldId
from steptree.exceptions import FieldPathError

_INDEX_SEGMENT = re.compile(r"[0-9]+")


def _is_index(segment: str) -> bool:
    return _INDEX_SEGMENT.fullmatch(segment) is not None


def _get(container: dict | list, key: str) -> Any:
    if isinstance(container, list):
        index = int(key)
        return container[index] if index < len(container) else None
    return container.get(key)


def _assign(container: dict | list, key: str, value: Any) -> None:
    if isinstance(container, list):
        index = int(key)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[key] = value


def _descend(
    container: dict | list, key: str, want_list: bool, field_id: FieldId
) -> dict | list:
    existing = _get(container, key)
    if existing is None:
        created: dict | list = [] if want_list else {}
        _assign(container, key, created)
        return created

    expected = list if want_list else dict
    if not isinstance(existing, expected):
        raise FieldPathError(
            field_id,
            f"segment '{key}' already holds a {type(existing).__name__}, "
            f"expected a {expected.__name__}",
        )
    return existing


def build_nested_values(
    field_ids: Sequence[FieldId], values: Sequence[Any]
) -> dict[str, Any]:
    """
    Assemble parallel field ids and values into a nested structure.

    Each dot-separated segment becomes a key. A segment becomes a list when
    the segment after it is made only of digits; list slots that are skipped
    over are padded with None.

    Params:
        field_ids: Dotted field identifiers, e.g. "address.city"
        values: Values aligned position by position with field_ids

    Returns:
        Nested dict mirroring the dotted paths

    Raises:
        ValueError: If the two sequences differ in length
        FieldPathError: If an identifier has an empty segment, or needs a
            container where an incompatible value was already placed

    Examples:
        (["a.b", "a.c"], [1, 2]) -> {"a": {"b": 1, "c": 2}}
        (["items.0.x"], [9]) -> {"items": [{"x": 9}]}
    """
    if len(field_ids) != len(values):
        raise ValueError(
            f"field_ids and values must have the same length ({len(field_ids)} != {len(values)})"
        )

    result: dict[str, Any] = {}
    for field_id, value in zip(field_ids, values):
        segments = field_id.split(".")
        if not all(segments):
            raise FieldPathError(field_id, "contains an empty segment")

        container: dict | list = result
        for segment, next_segment in zip(segments, segments[1:]):
            container = _descend(container, segment, _is_index(next_segment), field_id)
        _assign(container, segments[-1], value)

    return result
