"""
Beaker Flow Model
=================

Per-tick integration of the flows into and out of the beaker:
- Dropper: dispenses solute
- Water faucet: adds water
- Drain faucet: removes solution

STATE MACHINE
=============

    ┌──────────┐  solute changed  ┌─────────────┐
    │ FLOWING  │ ───────────────► │ AUTOFILLING │
    │          │ ◄─────────────── │             │
    └──────────┘  target reached  └─────────────┘

FLOWING, each step(dt):
    add_solute(dropper_rate * dt)
    add_water(water_faucet_rate * dt)
    drain_solution(drain_faucet_rate * dt)

The order is fixed: draining acts on the post-addition volume.

AUTOFILLING, each step(dt):
    add_solute(min(autofill_rate * dt, autofill_volume - total_volume))

Both faucets are disabled while autofilling. In FLOWING, the faucets and
dropper are enabled from the fill level after every volume change: water
faucet and dropper off when full, drain faucet off when empty.

This is PURE MODEL code. Translating drag gestures into flow rates is the
caller's job; it sets Faucet.flow_rate / Dropper.is_dispensing each tick.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import numpy as np
import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .observable import ObservableValue
from .solute import WATER, Solute
from .solution import Solution, SolutionConfiguration

logger = logging.getLogger(__name__)


class FlowState(Enum):
    """Operating state of the flow model."""

    FLOWING = "flowing"
    AUTOFILLING = "autofilling"


class Faucet:
    """
    A faucet with an adjustable flow rate.

    Disabling the faucet shuts it off. While disabled, flow rate requests
    are ignored.
    """

    def __init__(self, name: str, max_flow_rate: float, enabled: bool = True):
        """
        Args:
            name: Faucet identifier (e.g., "water_faucet")
            max_flow_rate: Flow rate when fully open [L/s]
            enabled: Initial enabled state
        """
        if max_flow_rate < 0:
            raise ValueError(f"Max flow rate cannot be negative: {max_flow_rate}")
        self.name = name
        self.max_flow_rate = max_flow_rate
        self.flow_rate = ObservableValue(0.0, f"{name}.flow_rate")
        self.enabled = ObservableValue(enabled, f"{name}.enabled")
        self.enabled.subscribe(self._on_enabled_changed)

    def _on_enabled_changed(self, enabled: bool, old_value: bool) -> None:
        if not enabled:
            self.flow_rate.set(0.0)

    def set_flow_rate(self, flow_rate: float) -> None:
        """Set flow rate [L/s], clamped to [0, max_flow_rate]."""
        if not self.enabled.value:
            return
        if not np.isfinite(flow_rate):
            flow_rate = 0.0
        self.flow_rate.set(float(np.clip(flow_rate, 0.0, self.max_flow_rate)))

    def reset(self) -> None:
        self.flow_rate.reset()
        self.enabled.reset()


class Dropper:
    """
    Solute dropper.

    While dispensing, flows at its standard rate unless a caller overrides
    flow_rate (the autofill animation does).
    """

    def __init__(self, flow_rate: float, enabled: bool = True):
        """
        Args:
            flow_rate: Standard dispensing rate [L/s]
            enabled: Initial enabled state
        """
        if flow_rate < 0:
            raise ValueError(f"Dropper flow rate cannot be negative: {flow_rate}")
        self.standard_flow_rate = flow_rate
        self.flow_rate = ObservableValue(0.0, "dropper.flow_rate")
        self.is_dispensing = ObservableValue(False, "dropper.is_dispensing")
        self.enabled = ObservableValue(enabled, "dropper.enabled")

        self.is_dispensing.subscribe(self._on_dispensing_changed)
        self.enabled.subscribe(self._on_enabled_changed)

    def _on_dispensing_changed(self, dispensing: bool, old_value: bool) -> None:
        self.flow_rate.set(self.standard_flow_rate if dispensing else 0.0)

    def _on_enabled_changed(self, enabled: bool, old_value: bool) -> None:
        if not enabled:
            self.is_dispensing.set(False)

    def reset(self) -> None:
        self.is_dispensing.reset()
        self.flow_rate.reset()
        self.enabled.reset()


@dataclass
class ModelConfiguration:
    """
    Complete configuration for the flow model.

    Fixed for the lifetime of the model.
    """

    solution: SolutionConfiguration = field(default_factory=SolutionConfiguration)

    # Autofill, triggered by a solute change
    autofill_enabled: bool = True
    autofill_volume: float = 0.5  # [L] target total volume
    autofill_flow_rate: float = 0.75  # [L/s] faster than standard dispensing

    # Flow rates
    dropper_flow_rate: float = 0.05  # [L/s]
    water_faucet_max_flow_rate: float = 0.25  # [L/s]
    drain_faucet_max_flow_rate: float = 0.25  # [L/s]

    def validate(self) -> None:
        """Validate configuration consistency."""
        self.solution.validate()
        if self.autofill_volume < 0:
            raise ValueError(
                f"Autofill volume cannot be negative: {self.autofill_volume}"
            )
        if self.autofill_volume > self.solution.max_volume:
            raise ValueError(
                f"Autofill volume {self.autofill_volume}L exceeds "
                f"max volume {self.solution.max_volume}L"
            )
        for name in (
            "autofill_flow_rate",
            "dropper_flow_rate",
            "water_faucet_max_flow_rate",
            "drain_faucet_max_flow_rate",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative: {getattr(self, name)}")
        if self.autofill_enabled and self.autofill_volume > 0 and self.autofill_flow_rate == 0:
            raise ValueError("Autofill is enabled but autofill_flow_rate is 0")
        if 0 < self.autofill_volume < self.solution.min_volume:
            warnings.warn(
                f"Autofill volume {self.autofill_volume}L is below the "
                f"displayed precision {self.solution.min_volume}L"
            )


class FlowIntegrator:
    """
    Beaker model: solution, two faucets and a dropper, advanced by step(dt).

    Single-threaded; every step runs to completion.
    """

    def __init__(self, config: Optional[ModelConfiguration] = None, solute: Solute = WATER):
        """
        Initialize flow model.

        Args:
            config: Model configuration
            solute: Initial solute
        """
        config = config if config is not None else ModelConfiguration()
        config.validate()
        self.config = config
        self.initial_solute = solute

        self.solution = Solution(solute, config.solution)
        self.dropper = Dropper(config.dropper_flow_rate)
        self.water_faucet = Faucet("water_faucet", config.water_faucet_max_flow_rate)
        self.drain_faucet = Faucet("drain_faucet", config.drain_faucet_max_flow_rate)

        self.state = ObservableValue(FlowState.FLOWING, "state")

        self.solution.total_volume.subscribe(self._on_total_volume_changed)
        self.solution.solute.subscribe(self._on_solute_changed)

        logger.info(
            f"Flow model initialized: V_max={config.solution.max_volume}L, "
            f"autofill={'on' if config.autofill_enabled else 'off'} "
            f"({config.autofill_volume}L)"
        )

        # Selecting the initial solute counts as a solute change
        self._start_autofill()

    @property
    def is_autofilling(self) -> bool:
        return self.state.value is FlowState.AUTOFILLING

    def set_solute(self, solute: Solute, suppress_side_effects: bool = False) -> None:
        """
        Select a new solute.

        Equivalent to solution.set_solute(); the model reacts to the solute
        change either way.

        Args:
            solute: New solute
            suppress_side_effects: True while restoring saved state; keeps
                volumes and skips autofill
        """
        self.solution.set_solute(solute, suppress_side_effects=suppress_side_effects)

    def _on_solute_changed(self, solute: Solute, old_solute: Solute) -> None:
        if self.solution.is_restoring_state:
            self._update_faucets_and_dropper()
            return

        # Cancel any interaction in progress
        self.water_faucet.enabled.set(False)
        self.drain_faucet.enabled.set(False)
        self._start_autofill()

    def reset(self) -> None:
        """Return solute, volumes, faucets and dropper to initial state."""
        self._stop_autofill()
        self.solution.set_solute(self.initial_solute, suppress_side_effects=True)
        self.solution.reset()
        self.dropper.reset()
        self.water_faucet.reset()
        self.drain_faucet.reset()
        self._start_autofill()
        logger.info("Flow model reset")

    def step(self, dt: float) -> None:
        """
        Advance the model by dt seconds.

        Args:
            dt: Time step [s]; non-positive steps do nothing
        """
        if not dt > 0:
            return
        if self.is_autofilling:
            self._step_autofill(dt)
        else:
            self.solution.add_solute(self.dropper.flow_rate.value * dt)
            self.solution.add_water(self.water_faucet.flow_rate.value * dt)
            self.solution.drain_solution(self.drain_faucet.flow_rate.value * dt)

    # Convenience flow mutators, for callers driving the model directly

    def add_solute(self, delta_volume: float) -> None:
        self.solution.add_solute(delta_volume)

    def add_water(self, delta_volume: float) -> None:
        self.solution.add_water(delta_volume)

    def drain_solution(self, delta_volume: float) -> None:
        self.solution.drain_solution(delta_volume)

    # ------------------------------------------------------------------
    # Autofill
    # ------------------------------------------------------------------

    def _start_autofill(self) -> None:
        if self.config.autofill_enabled and self.config.autofill_volume > 0:
            logger.debug(
                f"Autofill started: {self.solution.solute.value.name} "
                f"to {self.config.autofill_volume}L"
            )
            self.state.set(FlowState.AUTOFILLING)
            self.water_faucet.enabled.set(False)
            self.drain_faucet.enabled.set(False)
            self.dropper.is_dispensing.set(True)
            self.dropper.flow_rate.set(self.config.autofill_flow_rate)
            if self._autofill_complete():
                self._stop_autofill()
        else:
            self._update_faucets_and_dropper()

    def _step_autofill(self, dt: float) -> None:
        remaining = self.config.autofill_volume - self.solution.total_volume.value
        self.solution.add_solute(min(self.dropper.flow_rate.value * dt, remaining))
        if self._autofill_complete():
            self._stop_autofill()

    def _autofill_complete(self) -> bool:
        total_volume = self.solution.total_volume.value
        target = self.config.autofill_volume
        return total_volume >= target or bool(np.isclose(total_volume, target, rtol=0.0, atol=1e-12))

    def _stop_autofill(self) -> None:
        if not self.is_autofilling:
            return
        self.state.set(FlowState.FLOWING)
        self.dropper.is_dispensing.set(False)
        self._update_faucets_and_dropper()
        logger.debug(f"Autofill stopped at {self.solution.total_volume.value:.3f}L")

    # ------------------------------------------------------------------
    # Enabled state
    # ------------------------------------------------------------------

    def _on_total_volume_changed(self, volume: float, old_volume: float) -> None:
        # Faucets stay off until autofill finishes
        if not self.is_autofilling:
            self._update_faucets_and_dropper()

    def _update_faucets_and_dropper(self) -> None:
        """Enable faucets and dropper based on the amount of solution."""
        full = self.solution.is_full
        self.water_faucet.enabled.set(not full)
        self.drain_faucet.enabled.set(not self.solution.is_empty)
        self.dropper.enabled.set(not full)


def validate_flow_model() -> None:
    """
    Validation of the flow model.

    Tests:
    1. Autofill reaches its target exactly and returns to FLOWING
    2. Faucets are disabled at the fill limits
    3. Flowing step adds, then drains
    """
    from .solute import COFFEE

    model = FlowIntegrator(ModelConfiguration(autofill_volume=0.5))
    model.set_solute(COFFEE)
    assert model.is_autofilling, "Solute change should start autofill"
    for _ in range(100):
        model.step(0.1)
    assert not model.is_autofilling, "Autofill should finish"
    assert abs(model.solution.total_volume.value - 0.5) < 1e-9, "Autofill target missed"

    model.water_faucet.set_flow_rate(model.water_faucet.max_flow_rate)
    for _ in range(100):
        model.step(0.1)
    assert not model.water_faucet.enabled.value, "Water faucet should be off when full"
    assert model.drain_faucet.enabled.value, "Drain should be on when not empty"

    print("✓ All flow model validations passed")
