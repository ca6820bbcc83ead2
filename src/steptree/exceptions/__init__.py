"""
steptree exception classes.

This package provides the exception types raised for malformed step trees,
step paths and field identifiers.
"""

from steptree.exceptions.core import (
    FieldPathError,
    PathValidationError,
    StepTreeError,
    TreeStructureError,
)

__all__ = [
    "StepTreeError",
    "TreeStructureError",
    "PathValidationError",
    "FieldPathError",
]
