"""
steptree - declarative step trees and validation-gated navigation for multi-step forms

Steps and fields register themselves wherever they are mounted; steptree keeps
the resulting step tree, the current position within it and the fields that
passed validation, and moves between steps under a configurable validation
policy.
"""

from importlib.metadata import version

from steptree.config import NavigationConcurrency, NavigatorConfig, StepValidationMode
from steptree.core import Group, Leaf, build_nested_values
from steptree.engines import FieldEngine, ModelFieldEngine
from steptree.form import StepForm
from steptree.navigation import StepNavigator
from steptree.structure import StepRegistry, StepScope

__version__ = version("steptree")

__all__ = [
    "__version__",
    "StepForm",
    "StepRegistry",
    "StepScope",
    "StepNavigator",
    "NavigatorConfig",
    "StepValidationMode",
    "NavigationConcurrency",
    "FieldEngine",
    "ModelFieldEngine",
    "Leaf",
    "Group",
    "build_nested_values",
]
