"""
steptree structure components.

This package provides the step tree registry and the scope handles used to
mount and unmount step groups.
"""

from steptree.structure.registry import StepRegistry
from steptree.structure.scopes import StepScope

__all__ = [
    "StepRegistry",
    "StepScope",
]
