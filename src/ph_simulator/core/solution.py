"""
Solution Module
===============

Solute + water in a beaker, with derived total volume, pH and color.

DERIVED STATE GRAPH
==================

    solute ─────────┐
    solute_volume ──┼──► total_volume
    water_volume ───┘    pH     = compute_pH(solute.pH, V_solute, V_water)
                         color  = f(solute, V_solute, V_water, pH)

Every write to a source value pushes a synchronous recomputation of the
derived values before the write returns.

ATOMIC UPDATES
=============

Draining removes the same fraction of solute and water. The two volumes are
written one after the other, and a pH computed between the writes would mix
one new volume with one stale volume. While a compound operation is in
progress, recomputation is suppressed; it runs once after the last write,
so subscribers see one consistent update per logical operation.

VOLUME INVARIANT
===============

total_volume <= max_volume is enforced by clamping the amount added, never by
trimming stored volumes afterwards. Volumes are never negative.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional, Type, TypeVar

from .observable import DerivedValue, ObservableValue, publish_all
from .ph_math import BLACK, Color, NEUTRAL_PH, compute_pH, to_fixed
from .solute import WATER, WATER_COLOR, Solute

logger = logging.getLogger(__name__)

E = TypeVar("E")

# Round-off allowed when comparing total volume to max volume [L]
VOLUME_TOLERANCE = 1e-12


@dataclass
class SolutionConfiguration:
    """
    Construction-time configuration for a Solution.

    Fixed for the lifetime of one Solution instance.
    """

    max_volume: float = 1.2  # [L]
    solute_volume: float = 0.0  # [L] initial
    water_volume: float = 0.0  # [L] initial

    # Display precision
    volume_decimal_places: int = 3
    ph_decimal_places: int = 2

    @property
    def min_volume(self) -> float:
        """Smallest volume resolvable at the displayed precision [L]."""
        return 10.0 ** (-self.volume_decimal_places)

    def validate(self) -> None:
        """Validate configuration consistency."""
        if not np.isfinite(self.max_volume) or self.max_volume <= 0:
            raise ValueError(f"Max volume must be positive, got {self.max_volume}")
        if self.solute_volume < 0:
            raise ValueError(
                f"Initial solute volume cannot be negative: {self.solute_volume}"
            )
        if self.water_volume < 0:
            raise ValueError(
                f"Initial water volume cannot be negative: {self.water_volume}"
            )
        if self.solute_volume + self.water_volume > self.max_volume:
            raise ValueError(
                f"Initial volume {self.solute_volume + self.water_volume}L "
                f"exceeds max volume {self.max_volume}L"
            )
        if self.volume_decimal_places < 0 or self.ph_decimal_places < 0:
            raise ValueError("Decimal places cannot be negative")
        if self.max_volume < self.min_volume:
            raise ValueError(
                f"Max volume {self.max_volume}L is below the resolvable "
                f"volume {self.min_volume}L"
            )


class Solution:
    """
    Mutable solute/water mixture.

    Observable sources:
        solute_volume, water_volume
        solute (read-only, changed through set_solute())

    Observable derived (read-only):
        total_volume, pH, color

    Extensions (extra derived quantities owned by a particular screen) are
    attached by composition, see attach_extension().
    """

    def __init__(
        self,
        solute: Solute = WATER,
        config: Optional[SolutionConfiguration] = None,
    ):
        """
        Initialize solution.

        Args:
            solute: Initial solute
            config: Volumes and precision; defaults to an empty 1.2 L beaker
        """
        config = config if config is not None else SolutionConfiguration()
        config.validate()
        self.config = config
        self.max_volume = config.max_volume
        self.min_volume = config.min_volume

        # Read-only, replaced through set_solute() so the volume reset
        # always accompanies a solute change
        self.solute: DerivedValue[Solute] = DerivedValue(solute, "solute")
        self.solute_volume: ObservableValue[float] = ObservableValue(
            float(config.solute_volume), "solute_volume"
        )
        self.water_volume: ObservableValue[float] = ObservableValue(
            float(config.water_volume), "water_volume"
        )

        self.total_volume: DerivedValue[float] = DerivedValue(
            self._compute_total_volume(), "total_volume"
        )
        pH = self._compute_pH()
        self.pH: DerivedValue[Optional[float]] = DerivedValue(pH, "pH")
        self.color: DerivedValue[Color] = DerivedValue(self._compute_color(pH), "color")

        # True while a compound update is writing its source values
        self._ignore_volume_update = False
        # True while set_solute() is restoring state; solute listeners
        # skip their side effects
        self._suppress_side_effects = False

        self._extensions: Dict[type, object] = {}

        for source in (self.solute_volume, self.water_volume):
            source.subscribe(self._on_source_changed)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def _compute_total_volume(self) -> float:
        return self.solute_volume.value + self.water_volume.value

    def _compute_pH(self) -> Optional[float]:
        return compute_pH(
            self.solute.value.pH, self.solute_volume.value, self.water_volume.value
        )

    def _compute_color(self, pH: Optional[float]) -> Color:
        solute_volume = self.solute_volume.value
        total_volume = solute_volume + self.water_volume.value
        if total_volume <= 0:
            # No solution, never displayed
            return BLACK
        if solute_volume <= 0 or self._is_equivalent_to_water(pH):
            return WATER_COLOR
        return self.solute.value.compute_color(solute_volume / total_volume)

    def _is_equivalent_to_water(self, pH: Optional[float]) -> bool:
        return pH is not None and to_fixed(pH, self.config.ph_decimal_places) == NEUTRAL_PH

    def is_equivalent_to_water(self) -> bool:
        """True if the displayed pH reads as neutral, e.g. '7.00'."""
        return self._is_equivalent_to_water(self.pH.value)

    def _on_source_changed(self, new_value, old_value) -> None:
        if not self._ignore_volume_update:
            self._update_derived()

    def _update_derived(self) -> None:
        pH = self._compute_pH()
        publish_all(
            (self.total_volume, self._compute_total_volume()),
            (self.pH, pH),
            (self.color, self._compute_color(pH)),
        )

    # ------------------------------------------------------------------
    # Volume (liters)
    # ------------------------------------------------------------------

    @property
    def free_volume(self) -> float:
        """Volume still available to fill [L]."""
        return self.max_volume - self.total_volume.value

    @property
    def is_full(self) -> bool:
        return self.free_volume <= VOLUME_TOLERANCE

    @property
    def is_empty(self) -> bool:
        return self.total_volume.value <= 0

    def add_solute(self, delta_volume: float) -> None:
        """Add up to delta_volume liters of solute, limited by free volume."""
        self._add_volume(self.solute_volume, delta_volume)

    def add_water(self, delta_volume: float) -> None:
        """Add up to delta_volume liters of water, limited by free volume."""
        self._add_volume(self.water_volume, delta_volume)

    def _add_volume(self, volume: ObservableValue, delta_volume: float) -> None:
        free_volume = self.free_volume
        if not delta_volume > 0 or free_volume <= VOLUME_TOLERANCE:
            return
        current = volume.value
        # Snap tiny additions up to what the display can resolve, but never
        # past max_volume
        new_volume = max(self.min_volume, current + min(delta_volume, free_volume))
        volume.set(min(new_volume, current + free_volume))

    def drain_solution(self, delta_volume: float) -> None:
        """
        Drain delta_volume liters, removing equal fractions of solute and water.

        If less than the minimum resolvable volume would remain, the beaker
        is emptied completely.
        """
        if not delta_volume > 0:
            return
        total_volume = self.total_volume.value
        if total_volume <= 0:
            return

        if total_volume - delta_volume < self.min_volume:
            logger.debug("Drained remaining solution")
            self._set_volumes_atomic(0.0, 0.0)
        else:
            remaining = 1.0 - delta_volume / total_volume
            self._set_volumes_atomic(
                self.water_volume.value * remaining,
                self.solute_volume.value * remaining,
            )

    def _set_volumes_atomic(self, water_volume: float, solute_volume: float) -> None:
        """Write both volumes, then publish derived values once."""
        self._ignore_volume_update = True
        try:
            self.water_volume.set(max(0.0, water_volume))
            self.solute_volume.set(max(0.0, solute_volume))
        finally:
            self._ignore_volume_update = False
        self._update_derived()

    # ------------------------------------------------------------------
    # Solute and lifecycle
    # ------------------------------------------------------------------

    def set_solute(self, solute: Solute, suppress_side_effects: bool = False) -> None:
        """
        Replace the solute.

        A new solute invalidates the dispensed mixture, so volumes return to
        their construction-time values. Pass suppress_side_effects=True when
        restoring saved state, to keep the restored volumes; solute
        listeners see is_restoring_state True during their notification.
        """
        old_solute = self.solute.value
        if solute is old_solute:
            return
        self._ignore_volume_update = True
        try:
            self.solute._assign(solute)
            if not suppress_side_effects:
                self.water_volume.reset()
                self.solute_volume.reset()
        finally:
            self._ignore_volume_update = False
        self._update_derived()

        # Solute listeners run last, after volumes and derived values
        # are consistent
        self._suppress_side_effects = suppress_side_effects
        try:
            self.solute._notify(solute, old_solute)
        finally:
            self._suppress_side_effects = False

    @property
    def is_restoring_state(self) -> bool:
        """True while a solute change is restoring saved state."""
        return self._suppress_side_effects

    def set_volumes(self, solute_volume: float, water_volume: float) -> None:
        """
        Set both volumes directly, as when restoring saved state.

        Volumes are clamped non-negative and scaled down proportionally if
        their sum would exceed max_volume.
        """
        solute_volume = max(0.0, solute_volume)
        water_volume = max(0.0, water_volume)
        total = solute_volume + water_volume
        if total > self.max_volume:
            scale = self.max_volume / total
            solute_volume *= scale
            water_volume *= scale
        self._set_volumes_atomic(water_volume, solute_volume)

    def reset(self) -> None:
        """Restore construction-time volumes."""
        self._set_volumes_atomic(
            self.water_volume.initial_value, self.solute_volume.initial_value
        )

    # ------------------------------------------------------------------
    # Extensions
    # ------------------------------------------------------------------

    def attach_extension(self, extension: E) -> E:
        """Attach an extension record, keyed by its type."""
        self._extensions[type(extension)] = extension
        return extension

    def get_extension(self, extension_type: Type[E]) -> Optional[E]:
        return self._extensions.get(extension_type)

    def has_extension(self, extension_type: type) -> bool:
        return extension_type in self._extensions

    def __repr__(self) -> str:
        pH = self.pH.value
        return (
            f"Solution({self.solute.value.name!r}, "
            f"solute={self.solute_volume.value:.4f}L, "
            f"water={self.water_volume.value:.4f}L, "
            f"pH={'None' if pH is None else f'{pH:.2f}'})"
        )


def validate_solution() -> None:
    """
    Validation of solution volume handling.

    Tests:
    1. Additions never exceed max volume
    2. Draining preserves the solute:water ratio
    3. Draining everything leaves exactly zero
    4. Draining publishes pH once
    """
    from .solute import BATTERY_ACID

    solution = Solution(BATTERY_ACID, SolutionConfiguration(max_volume=1.2))
    solution.add_water(1.0)
    solution.add_solute(1.0)
    assert solution.total_volume.value <= 1.2 + 1e-12, "Max volume exceeded"

    solution.reset()
    solution.add_water(0.6)
    solution.add_solute(0.4)
    ratio = solution.solute_volume.value / solution.water_volume.value
    notifications = []
    solution.pH.subscribe(lambda new, old: notifications.append(new))
    solution.drain_solution(0.5)
    assert abs(solution.solute_volume.value / solution.water_volume.value - ratio) < 1e-12
    assert len(notifications) <= 1, "Drain must publish pH at most once"

    solution.drain_solution(10.0)
    assert solution.solute_volume.value == 0.0 and solution.water_volume.value == 0.0
    assert solution.pH.value is None, "Empty solution has no pH"

    print("✓ All solution validations passed")
