"""
pH Simulator Core Package
=========================

Solution chemistry for a beaker of solute + water.

This package provides:
- pH math: pH ↔ concentration ↔ moles, dilution pH, color interpolation
- Solutes: stock chemical catalog and custom solutes
- Solution: volumes with derived total volume, pH and color
- Flow model: per-tick dropper/faucet/drain integration with autofill

USAGE EXAMPLE
============

```python
from ph_simulator.core import FlowIntegrator, ModelConfiguration, get_solute

model = FlowIntegrator(ModelConfiguration(autofill_volume=0.5))
model.set_solute(get_solute("coffee"))   # starts autofill

for _ in range(60):
    model.step(dt=1 / 60)

model.water_faucet.set_flow_rate(0.1)
model.step(dt=1.0)

print(model.solution.pH.value, model.solution.total_volume.value)
```

OBSERVING STATE
==============

Every quantity is an observable value:

```python
model.solution.pH.subscribe(lambda pH, old_pH: print("pH", pH))
```

Derived values (total volume, pH, color) are read-only and published once
per logical operation; draining never exposes a half-updated pH.

WHAT THIS MODULE DOES NOT DO:
- NO chemical equilibrium solving (mixing is reaction-free dilution)
- NO user-input handling (callers set flow rates each tick)
- NO drawing (see ph_simulator.particles)

Run validation: `python -m ph_simulator.core` or call `run_all_validations()`

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

# Version
__version__ = "1.0.0"
__author__ = "Guilherme F. G. Santos"

# pH math
from .ph_math import (
    Color,
    Species,
    PH_RANGE,
    NEUTRAL_PH,
    compute_pH,
    concentration_from_pH,
    pH_from_concentration,
    moles_from_concentration,
    concentration_from_moles,
    pH_from_moles,
    interpolate_color,
    validate_ph_math,
)

# Observables
from .observable import ObservableValue, DerivedValue

# Solutes
from .solute import (
    Solute,
    SOLUTES,
    WATER,
    create_custom,
    get_solute,
    validate_solute,
)

# Solution
from .solution import Solution, SolutionConfiguration, validate_solution
from .derived_quantities import SolutionDerivedQuantities

# Flow model
from .model import (
    FlowIntegrator,
    FlowState,
    ModelConfiguration,
    Faucet,
    Dropper,
    validate_flow_model,
)

# Convenience imports
__all__ = [
    # Main model
    "FlowIntegrator",
    "FlowState",
    "ModelConfiguration",
    "Faucet",
    "Dropper",
    # Solution
    "Solution",
    "SolutionConfiguration",
    "SolutionDerivedQuantities",
    # Solutes
    "Solute",
    "SOLUTES",
    "WATER",
    "create_custom",
    "get_solute",
    # pH math
    "Color",
    "Species",
    "PH_RANGE",
    "NEUTRAL_PH",
    "compute_pH",
    "concentration_from_pH",
    "pH_from_concentration",
    "moles_from_concentration",
    "concentration_from_moles",
    "pH_from_moles",
    "interpolate_color",
    # Observables
    "ObservableValue",
    "DerivedValue",
    # Validation functions
    "validate_ph_math",
    "validate_solute",
    "validate_solution",
    "validate_flow_model",
    "run_all_validations",
]


def run_all_validations():
    """
    Run all core validation checks.

    This should be run after any code changes to ensure the mixing model
    still behaves.
    """
    print("Running pH Simulator Core Validation Suite")
    print("=" * 70)

    print("\n1. pH math...")
    validate_ph_math()

    print("\n2. Solutes...")
    validate_solute()

    print("\n3. Solution...")
    validate_solution()

    print("\n4. Flow model...")
    validate_flow_model()

    print("\n" + "=" * 70)
    print("ALL VALIDATIONS PASSED ✓")
    print("=" * 70)


if __name__ == "__main__":
    """Run all validations when package is executed."""
    run_all_validations()
