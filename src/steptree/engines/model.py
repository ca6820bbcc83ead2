"""
In-memory field engine backed by a pydantic model.

Live values are kept flat, keyed by dotted field id. Validation assembles
them into the nested structure the model expects and validates the whole
model, then keeps only the errors located on the requested fields, so a step
is never blocked by fields that belong to other steps.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from steptree.core.types import FieldId
from steptree.core.values import build_nested_values

logger = logging.getLogger(__name__)


def _touches(location: str, field_id: FieldId) -> bool:
    # an error on the field itself, inside it, or on an enclosing object;
    # model-level validators report the empty root location
    return (
        location == ""
        or location == field_id
        or location.startswith(field_id + ".")
        or field_id.startswith(location + ".")
    )


class ModelFieldEngine:
    """Field engine validating live values against a pydantic model.

    Params:
        model: Pydantic model class describing the whole form
        values: Initial live values keyed by dotted field id

    Attributes:
        errors: Error messages of the last validation, keyed by field id
    """

    def __init__(
        self, model: type[BaseModel], values: Mapping[FieldId, Any] | None = None
    ):
        self.model = model
        self._values: dict[FieldId, Any] = dict(values or {})
        self.errors: dict[FieldId, list[str]] = {}

    def set_value(self, field_id: FieldId, value: Any) -> None:
        self._values[field_id] = value

    def get_value(self, field_id: FieldId, default: Any = None) -> Any:
        return self._values.get(field_id, default)

    def values(self) -> dict[str, Any]:
        """Return all live values as a nested structure."""
        return build_nested_values(list(self._values), list(self._values.values()))

    def read_live(self, field_ids: Sequence[FieldId]) -> list[Any]:
        return [self._values.get(field_id) for field_id in field_ids]

    async def validate(self, field_ids: Sequence[FieldId]) -> bool:
        """
        Validate the named fields against the model.

        Previous errors of the named fields are cleared first; errors of other
        fields are left untouched.

        Params:
            field_ids: Dotted identifiers of the fields to validate

        Returns:
            True if none of the named fields has an error
        """
        for field_id in field_ids:
            self.errors.pop(field_id, None)

        try:
            self.model.model_validate(self.values())
        except ValidationError as e:
            failures: dict[FieldId, list[str]] = {}
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                for field_id in field_ids:
                    if _touches(location, field_id):
                        failures.setdefault(field_id, []).append(error["msg"])

            if failures:
                logger.debug("Validation failed for %s", sorted(failures))
                self.errors.update(failures)
                return False
        return True
