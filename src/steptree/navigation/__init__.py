"""
steptree navigation.

This package provides the navigation controller moving between steps under
validation gating.
"""

from steptree.navigation.controller import StepNavigator

__all__ = [
    "StepNavigator",
]
