"""
Navigator configuration for steptree.

``NavigatorConfig`` is a frozen pydantic model so configuration coming from
plain mappings (settings files, keyword arguments) is coerced to the enums
below and unknown keys are rejected early.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class StepValidationMode(Enum):
    """When the fields of the step being left are validated."""

    ALL = "all"  # every transition, in either direction
    FORWARD = "forward"  # only when moving to a later position
    NONE = "none"  # never


class NavigationConcurrency(Enum):
    """What happens to a navigation call issued while another one is in flight."""

    REJECT = "reject"  # return False immediately
    QUEUE = "queue"  # wait for the pending call to finish


class NavigatorConfig(BaseModel):
    """Settings for ``StepNavigator``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    validation_mode: StepValidationMode = StepValidationMode.FORWARD
    concurrency: NavigationConcurrency = NavigationConcurrency.REJECT

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "NavigatorConfig":
        """
        Build a config from a plain mapping.

        Params:
            values: Mapping such as {"validation_mode": "all"}; None gives defaults

        Returns:
            Validated NavigatorConfig

        Raises:
            pydantic.ValidationError: On unknown keys or invalid values
        """
        return cls.model_validate(dict(values or {}))
