"""
Particle Count Model
====================

Maps a solution's displayed pH to a drawable number of H₃O⁺ and OH⁻
particles.

Real ion counts span 14 orders of magnitude across the pH scale, which is
not drawable. The mapping is a hybrid:

    count
      ▲
 max ─┤╲                                           ╱
      │ ╲  linear                       linear    ╱
      │  ╲                                       ╱
      │   ╲___       logarithmic            ___╱
      │       ╲____________  ______________╱
      │     H₃O⁺           ╲╱            OH⁻
 min ─┤────────────────────────────────────────────
      └──────┬───────────┬───────────┬─────────────► pH
      0      6           7           8            14

1. Inside the log band [6, 8]:
   N = round(concentration(pH) * (total_at_neutral / 2) / 1e-7)
   so pH 7 gives total_at_neutral / 2 of each species.

2. Outside the band, the majority count grows linearly from its band-edge
   value with slope

   s = (max_count - N_majority(band edge)) / (14 - band edge)

   reaching max_count at pH 0 or 14. The minority count shrinks by one per
   pH unit and never drops below min_minority.

pH is rounded to display precision first, so sub-display noise in pH
never changes the counts.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from ..core.observable import DerivedValue
from ..core.ph_math import (
    NEUTRAL_PH,
    PH_RANGE,
    Species,
    concentration_from_pH,
    round_symmetric,
    to_fixed,
)

logger = logging.getLogger(__name__)

NEUTRAL_CONCENTRATION = 1e-7  # [mol/L] H₃O⁺ and OH⁻ in pure water


class ParticleCounts(NamedTuple):
    """Number of particles to draw for each species."""

    h3o: int = 0
    oh: int = 0

    @property
    def majority(self) -> Optional[Species]:
        """Species with the larger count, None on a tie."""
        if self.h3o > self.oh:
            return Species.H3O
        if self.oh > self.h3o:
            return Species.OH
        return None

    def count(self, species: Species) -> int:
        return self.h3o if species is Species.H3O else self.oh


@dataclass
class ParticleCountParameters:
    """
    Tuning constants for the particle count mapping.

    Attributes:
        total_at_neutral: Particles of both species combined at pH 7
        max_count: Cap for either species
        min_minority: Floor for a species whose count is non-zero
        log_band: pH range where counts follow concentration
        ph_decimal_places: Display precision applied to pH
        linear_slope: Particles per pH unit outside the band; None derives
            the slope that reaches max_count at the ends of the pH range
    """

    total_at_neutral: int = 100
    max_count: int = 3000
    min_minority: int = 5
    log_band: Tuple[float, float] = (6.0, 8.0)
    ph_decimal_places: int = 2
    linear_slope: Optional[float] = None

    def validate(self) -> None:
        """Validate parameter consistency."""
        low, high = self.log_band
        if not PH_RANGE[0] < low <= NEUTRAL_PH <= high < PH_RANGE[1]:
            raise ValueError(
                f"Log band {self.log_band} must contain pH 7 and lie inside {PH_RANGE}"
            )
        if self.total_at_neutral <= 0:
            raise ValueError(
                f"Total at neutral must be positive, got {self.total_at_neutral}"
            )
        if self.min_minority < 0:
            raise ValueError(f"Min minority cannot be negative: {self.min_minority}")
        if self.ph_decimal_places < 0:
            raise ValueError("Decimal places cannot be negative")
        if self.linear_slope is not None and self.linear_slope < 0:
            raise ValueError(f"Linear slope cannot be negative: {self.linear_slope}")

        edge = max(
            _log_count(low, Species.H3O, self.total_at_neutral),
            _log_count(high, Species.OH, self.total_at_neutral),
        )
        if self.max_count < edge:
            raise ValueError(
                f"Max count {self.max_count} is below the band-edge count {edge}"
            )

    def slope(self, species: Species) -> float:
        """Majority particles added per pH unit outside the band."""
        if self.linear_slope is not None:
            return self.linear_slope
        low, high = self.log_band
        if species is Species.H3O:
            edge_count = _log_count(low, Species.H3O, self.total_at_neutral)
            span = low - PH_RANGE[0]
        else:
            edge_count = _log_count(high, Species.OH, self.total_at_neutral)
            span = PH_RANGE[1] - high
        return (self.max_count - edge_count) / span


def _log_count(pH: float, species: Species, total_at_neutral: int) -> int:
    concentration = concentration_from_pH(pH, species)
    return round_symmetric(concentration * (total_at_neutral / 2) / NEUTRAL_CONCENTRATION)


def compute_particle_counts(
    pH: Optional[float], params: Optional[ParticleCountParameters] = None
) -> ParticleCounts:
    """
    Particle counts for a pH.

    Args:
        pH: Solution pH, None for an empty beaker
        params: Tuning constants, defaults if None

    Returns:
        ParticleCounts, both 0 when pH is None

    Example:
        >>> compute_particle_counts(7.0)
        ParticleCounts(h3o=50, oh=50)
        >>> compute_particle_counts(None)
        ParticleCounts(h3o=0, oh=0)
    """
    if pH is None:
        return ParticleCounts(0, 0)
    params = params if params is not None else ParticleCountParameters()

    pH = to_fixed(pH, params.ph_decimal_places)
    low, high = params.log_band
    total = params.total_at_neutral

    if low <= pH <= high:
        # Logarithmic
        h3o = max(params.min_minority, _log_count(pH, Species.H3O, total))
        oh = max(params.min_minority, _log_count(pH, Species.OH, total))
    elif pH > high:
        # Strong base, OH⁻ majority
        difference = pH - high
        h3o = max(params.min_minority, _log_count(high, Species.H3O, total) - difference)
        oh = _log_count(high, Species.OH, total) + difference * params.slope(Species.OH)
    else:
        # Strong acid, H₃O⁺ majority
        difference = low - pH
        h3o = _log_count(low, Species.H3O, total) + difference * params.slope(Species.H3O)
        oh = max(params.min_minority, _log_count(low, Species.OH, total) - difference)

    h3o = min(params.max_count, max(0, round_symmetric(h3o)))
    oh = min(params.max_count, max(0, round_symmetric(oh)))
    return ParticleCounts(h3o, oh)


class ParticleCountModel:
    """
    Keeps particle counts in step with a solution's pH.

    Counts are recomputed only when the displayed (rounded) pH changes, so
    volume changes that leave the displayed pH alone publish nothing.
    """

    def __init__(self, solution, params: Optional[ParticleCountParameters] = None):
        """
        Args:
            solution: Solution whose pH observable drives the counts
            params: Tuning constants
        """
        params = params if params is not None else ParticleCountParameters()
        params.validate()
        self.params = params
        self.solution = solution

        self._displayed_pH = self._round(solution.pH.value)
        self.counts: DerivedValue[ParticleCounts] = DerivedValue(
            compute_particle_counts(self._displayed_pH, params), "particle_counts"
        )
        solution.pH.subscribe(self._on_pH_changed)

    def _round(self, pH: Optional[float]) -> Optional[float]:
        return to_fixed(pH, self.params.ph_decimal_places)

    def _on_pH_changed(self, pH: Optional[float], old_pH: Optional[float]) -> None:
        displayed = self._round(pH)
        if displayed == self._displayed_pH:
            return
        self._displayed_pH = displayed
        counts = compute_particle_counts(displayed, self.params)
        logger.debug(f"pH {displayed}: {counts.h3o} H3O+ / {counts.oh} OH-")
        self.counts._publish(counts)

    @property
    def h3o(self) -> int:
        return self.counts.value.h3o

    @property
    def oh(self) -> int:
        return self.counts.value.oh
