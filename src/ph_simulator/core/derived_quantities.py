"""
Solution Derived Quantities
===========================

Concentrations and quantities of H₃O⁺, OH⁻ and H₂O derived from a
solution's pH and total volume. A screen that graphs these attaches the
record to its Solution:

    quantities = solution.attach_extension(SolutionDerivedQuantities(solution))

and consumers look it up with solution.get_extension(SolutionDerivedQuantities).

All values are None when the beaker is empty.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from typing import Optional

from .observable import DerivedValue, publish_all
from .ph_math import (
    H2O_CONCENTRATION,
    Species,
    concentration_from_pH,
    moles_from_concentration,
)


class SolutionDerivedQuantities:
    """
    Observable concentrations [mol/L] and quantities [mol] for a solution.

    Recomputed whenever the solution publishes a new pH or total volume.
    """

    def __init__(self, solution):
        self.solution = solution

        self.concentration_H3O: DerivedValue[Optional[float]] = DerivedValue(None, "concentration_H3O")
        self.concentration_OH: DerivedValue[Optional[float]] = DerivedValue(None, "concentration_OH")
        self.concentration_H2O: DerivedValue[Optional[float]] = DerivedValue(None, "concentration_H2O")
        self.quantity_H3O: DerivedValue[Optional[float]] = DerivedValue(None, "quantity_H3O")
        self.quantity_OH: DerivedValue[Optional[float]] = DerivedValue(None, "quantity_OH")
        self.quantity_H2O: DerivedValue[Optional[float]] = DerivedValue(None, "quantity_H2O")

        solution.pH.subscribe(self._update)
        solution.total_volume.subscribe(self._update)
        self._update()

    def _update(self, *args) -> None:
        pH = self.solution.pH.value
        volume = self.solution.total_volume.value

        h3o = concentration_from_pH(pH, Species.H3O)
        oh = concentration_from_pH(pH, Species.OH)
        h2o = H2O_CONCENTRATION if volume > 0 else None

        publish_all(
            (self.concentration_H3O, h3o),
            (self.concentration_OH, oh),
            (self.concentration_H2O, h2o),
            (self.quantity_H3O, moles_from_concentration(h3o, volume)),
            (self.quantity_OH, moles_from_concentration(oh, volume)),
            (self.quantity_H2O, moles_from_concentration(h2o, volume)),
        )

    def concentration(self, species: Species) -> Optional[float]:
        if species is Species.H3O:
            return self.concentration_H3O.value
        return self.concentration_OH.value

    def quantity(self, species: Species) -> Optional[float]:
        if species is Species.H3O:
            return self.quantity_H3O.value
        return self.quantity_OH.value
