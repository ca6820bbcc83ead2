"""
steptree field engines.

This package provides the protocol the navigator uses to validate fields and
read their live values, and a pydantic-backed in-memory implementation.
"""

from steptree.engines.base import FieldEngine, resolve
from steptree.engines.model import ModelFieldEngine

__all__ = [
    "FieldEngine",
    "ModelFieldEngine",
    "resolve",
]
