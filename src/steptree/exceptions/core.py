"""
Exception classes for steptree.

This module defines the exception types raised for malformed input: raw step
trees, step paths and dotted field identifiers. Expected navigation outcomes
(failed validation, navigating before any step is registered) are reported
as ``False`` return values instead and never reach these classes.
"""

from typing import Any


class StepTreeError(Exception):
    """Base exception for all steptree errors."""

    pass


class TreeStructureError(StepTreeError):
    """Raised when a raw step tree contains an element that is neither a field id nor a sequence."""

    def __init__(self, node: Any, reason: str):
        """
        Initialize the exception.

        Params:
            node: The offending raw element
            reason: Why the element cannot be part of a step tree
        """
        self.node = node
        self.reason = reason
        super().__init__(f"Invalid step tree element {node!r}: {reason}")


class PathValidationError(StepTreeError):
    """Raised when a step path is malformed."""

    def __init__(self, path: Any, reason: str):
        """
        Initialize the exception.

        Params:
            path: The invalid path
            reason: Why the path is invalid
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid step path {path!r}: {reason}")


class FieldPathError(StepTreeError):
    """Raised when a dotted field identifier cannot be mapped onto a nested structure."""

    def __init__(self, field_id: str, reason: str):
        """
        Initialize the exception.

        Params:
            field_id: The dotted field identifier
            reason: Why it cannot be placed
        """
        self.field_id = field_id
        self.reason = reason
        super().__init__(f"Invalid field path '{field_id}': {reason}")
