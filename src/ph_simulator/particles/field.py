"""
Particle Field Cache
====================

Screen positions of the H₃O⁺ and OH⁻ particles drawn over the solution.

Positions are random but STABLE: a redraw for an unrelated reason (the
solution level moved, the window repainted) must not reshuffle particles.
Positions therefore change only when the counts do, and only the entries
beyond what was already generated are new:

    counts (50, 50) → (50, 60):  OH⁻ array grows by 10,
                                  the first 50 OH⁻ and all H₃O⁺ are kept
    counts (50, 60) → (50, 40):  nothing generated,
                                  the renderer reads the first 40

The random generator is injected, so placement is reproducible with a
seeded numpy Generator.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Optional

from ..core.ph_math import Species
from .counts import ParticleCounts

logger = logging.getLogger(__name__)

# Draw order and opacity: the majority species is drawn first, and more
# transparent, so the minority species stays visible on top
MAJORITY_ALPHA = 0.55
MINORITY_ALPHA = 1.0


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in integer screen coordinates."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def __post_init__(self):
        if self.max_x < self.min_x or self.max_y < self.min_y:
            raise ValueError(f"Invalid bounds: {self}")

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


class ParticleFieldCache:
    """
    Cached particle positions for both species.

    Attributes:
        counts: Number of significant positions per species
        bounds: Rectangle positions are drawn from
    """

    def __init__(self, bounds: Bounds, rng: Optional[np.random.Generator] = None):
        """
        Args:
            bounds: Rectangle to scatter particles in
            rng: Random generator; a fresh unseeded one if None
        """
        self.bounds = bounds
        self.rng = rng if rng is not None else np.random.default_rng()
        self.counts = ParticleCounts(0, 0)
        self._positions = {
            Species.H3O: np.empty((0, 2), dtype=np.int64),
            Species.OH: np.empty((0, 2), dtype=np.int64),
        }
        # Incremented whenever what a renderer would draw changes
        self.revision = 0

    def update(self, h3o: int, oh: int, bounds: Optional[Bounds] = None) -> bool:
        """
        Bring the cache up to date with new counts.

        Args:
            h3o: Number of H₃O⁺ particles
            oh: Number of OH⁻ particles
            bounds: New bounds; if they differ from the current bounds, all
                positions are regenerated

        Returns:
            True if anything changed
        """
        counts = ParticleCounts(max(0, int(h3o)), max(0, int(oh)))

        if bounds is not None and bounds != self.bounds:
            self.bounds = bounds
            for species in Species:
                self._positions[species] = np.empty((0, 2), dtype=np.int64)
        elif counts == self.counts:
            return False

        for species in Species:
            self._grow(species, counts.count(species))

        self.counts = counts
        self.revision += 1
        return True

    def update_counts(self, counts: ParticleCounts, bounds: Optional[Bounds] = None) -> bool:
        return self.update(counts.h3o, counts.oh, bounds)

    def _grow(self, species: Species, count: int) -> None:
        existing = self._positions[species]
        needed = count - len(existing)
        if needed <= 0:
            return
        # Integer coordinates, inclusive of both edges
        xs = self.rng.integers(self.bounds.min_x, self.bounds.max_x, size=needed, endpoint=True)
        ys = self.rng.integers(self.bounds.min_y, self.bounds.max_y, size=needed, endpoint=True)
        self._positions[species] = np.concatenate([existing, np.column_stack([xs, ys])])

    def positions(self, species: Species) -> np.ndarray:
        """The significant (count × 2) positions of one species, read-only."""
        view = self._positions[species][: self.counts.count(species)]
        view.flags.writeable = False
        return view

    @property
    def h3o_positions(self) -> np.ndarray:
        return self.positions(Species.H3O)

    @property
    def oh_positions(self) -> np.ndarray:
        return self.positions(Species.OH)

    def capacity(self, species: Species) -> int:
        """Number of positions generated so far, including unused ones."""
        return len(self._positions[species])

    def draw_order(self):
        """
        Species in the order a renderer must draw them, with their opacity.

        Majority first at MAJORITY_ALPHA, then minority at MINORITY_ALPHA.
        On a tie OH⁻ is drawn first.

        Returns:
            [(species, alpha), (species, alpha)]
        """
        if self.counts.h3o > self.counts.oh:
            majority, minority = Species.H3O, Species.OH
        else:
            majority, minority = Species.OH, Species.H3O
        return [(majority, MAJORITY_ALPHA), (minority, MINORITY_ALPHA)]
