"""
Shared test fixtures for the pH simulator tests.

This module provides:
- Solutions (empty, partially filled with acid)
- A flow model with autofill disabled
- A seeded random generator for particle placement
"""

import numpy as np
import pytest

from ph_simulator.core import (
    FlowIntegrator,
    ModelConfiguration,
    Solution,
    SolutionConfiguration,
    WATER,
)
from ph_simulator.core.solute import BATTERY_ACID


# =============================================================================
# Solutions
# =============================================================================

@pytest.fixture
def empty_solution():
    """Empty 1.2 L beaker holding water."""
    return Solution(WATER, SolutionConfiguration(max_volume=1.2))


@pytest.fixture
def acid_solution():
    """Battery acid: 0.4 L solute + 0.6 L water in a 1.2 L beaker."""
    solution = Solution(BATTERY_ACID, SolutionConfiguration(max_volume=1.2))
    solution.set_volumes(solute_volume=0.4, water_volume=0.6)
    return solution


# =============================================================================
# Flow model
# =============================================================================

@pytest.fixture
def manual_model():
    """Flow model that never autofills."""
    return FlowIntegrator(ModelConfiguration(autofill_enabled=False))


@pytest.fixture
def autofill_model():
    """Flow model with the default 0.5 L autofill."""
    return FlowIntegrator(ModelConfiguration(autofill_volume=0.5))


# =============================================================================
# Randomness
# =============================================================================

@pytest.fixture
def rng():
    """Seeded generator, reproducible particle placement."""
    return np.random.default_rng(1234)

