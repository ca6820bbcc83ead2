"""
Shared test fixtures and utilities for the steptree test suite.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from steptree import StepRegistry


@pytest.fixture
def engine():
    """Field engine double.

    Validation passes unless one of the requested fields is listed in
    ``engine.invalid``; live values are read from ``engine.live``.

    Usage:
        def test_something(engine):
            engine.invalid.add("email")
            engine.live["email"] = "not-an-email"
    """
    engine = Mock()
    engine.invalid = set()
    engine.live = {}
    engine.validate = AsyncMock(
        side_effect=lambda field_ids: not (set(field_ids) & engine.invalid)
    )
    engine.read_live = Mock(
        side_effect=lambda field_ids: [engine.live.get(f) for f in field_ids]
    )
    return engine


@pytest.fixture
def two_step_registry():
    """Registry holding the steps ["f1", "f2"] and ["f3"], positioned on the first."""
    registry = StepRegistry()
    registry.register_group(["f1", "f2"])
    registry.register_group(["f3"])
    return registry
