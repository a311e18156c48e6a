"""
Solute Module
=============

Immutable descriptions of stock chemicals that can be dispensed into the
beaker, and the catalog they are chosen from.

A solute's color depends on how diluted it is. compute_color() maps the
solute fraction V_solute / V_total onto a gradient:

    0.0 ─────────── color_stop_ratio ─────────── 1.0
    water color        diluted color          stock color

Solutes without a diluted color use a two-stop linear blend.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from scipy.interpolate import interp1d

from .ph_math import Color, NEUTRAL_PH, PH_RANGE, clamp_pH, interpolate_color

logger = logging.getLogger(__name__)


WATER_COLOR = Color(224, 255, 255)


@dataclass(frozen=True, eq=False)
class Solute:
    """
    A stock chemical.

    Solutes compare by identity: selecting a new solute object is a solute
    change even when it has the same pH as the old one.

    Attributes:
        name: Display name
        pH: Stock (undiluted) pH
        stock_color: Color of the undiluted solute
        diluted_color: Optional color at color_stop_ratio
        color_stop_ratio: Solute fraction where diluted_color applies (0, 1)
    """

    name: str
    pH: float
    stock_color: Color
    diluted_color: Optional[Color] = None
    color_stop_ratio: float = 0.25

    def __post_init__(self):
        if not PH_RANGE[0] <= self.pH <= PH_RANGE[1]:
            raise ValueError(f"Solute pH out of range {PH_RANGE}: {self.pH}")
        if not 0.0 < self.color_stop_ratio < 1.0:
            raise ValueError(
                f"Color stop ratio must be in (0, 1), got {self.color_stop_ratio}"
            )

        # Two-stop gradients are a plain linear blend, see compute_color()
        gradient = None
        if self.diluted_color is not None:
            colors = [WATER_COLOR, self.diluted_color, self.stock_color]
            gradient = interp1d(
                [0.0, self.color_stop_ratio, 1.0],
                np.array([c.as_array() for c in colors]),
                axis=0,
                bounds_error=False,
                fill_value=(colors[0].as_array(), colors[-1].as_array()),
            )
        # Frozen dataclass, so bypass __setattr__ for the cached gradient
        object.__setattr__(self, "_gradient", gradient)

    @property
    def initial_pH(self) -> float:
        return self.pH

    def compute_color(self, fraction: float) -> Color:
        """
        Color of this solute diluted to a solute fraction.

        Args:
            fraction: V_solute / V_total, clipped to [0, 1]

        Returns:
            Interpolated color
        """
        fraction = float(np.clip(fraction, 0.0, 1.0))
        if self._gradient is None:
            return interpolate_color(WATER_COLOR, self.stock_color, fraction)
        return Color.from_array(self._gradient(fraction))

    def __repr__(self) -> str:
        return f"Solute({self.name!r}, pH={self.pH})"


def create_custom(pH: float) -> Solute:
    """
    Synthesize a colorless solute with an arbitrary pH.

    Used while the displayed pH is being manipulated directly. Requests
    outside the pH range are clamped.
    """
    clamped = clamp_pH(pH)
    if clamped != pH:
        logger.warning(f"Custom solute pH {pH} clamped to {clamped}")
    return Solute(name="custom", pH=clamped, stock_color=WATER_COLOR)


# Catalog of stock solutions
BATTERY_ACID = Solute("battery acid", 1.0, Color(255, 255, 0))
BLOOD = Solute("blood", 7.4, Color(211, 79, 68), Color(255, 207, 204))
CHICKEN_SOUP = Solute("chicken soup", 5.8, Color(255, 240, 104), Color(255, 250, 209))
COFFEE = Solute("coffee", 5.0, Color(164, 99, 7), Color(255, 240, 218))
DRAIN_CLEANER = Solute("drain cleaner", 13.0, Color(255, 255, 0))
HAND_SOAP = Solute("hand soap", 10.0, Color(224, 141, 242), Color(232, 204, 255))
MILK = Solute("milk", 6.5, Color(250, 250, 250))
ORANGE_JUICE = Solute("orange juice", 3.5, Color(255, 180, 0), Color(255, 242, 157))
SODA = Solute("soda pop", 2.5, Color(204, 255, 102), Color(238, 255, 170))
SPIT = Solute("spit", 7.4, Color(202, 240, 239))
VOMIT = Solute("vomit", 2.0, Color(255, 171, 120), Color(255, 224, 204))
WATER = Solute("water", NEUTRAL_PH, WATER_COLOR)

# Alphabetical, the order a chooser presents them in
SOLUTES: Tuple[Solute, ...] = (
    BATTERY_ACID,
    BLOOD,
    CHICKEN_SOUP,
    COFFEE,
    DRAIN_CLEANER,
    HAND_SOAP,
    MILK,
    ORANGE_JUICE,
    SODA,
    SPIT,
    VOMIT,
    WATER,
)

CATALOG: Dict[str, Solute] = {s.name.replace(" ", "_"): s for s in SOLUTES}


def get_solute(key: str) -> Solute:
    """
    Look up a catalog solute by key (e.g. 'battery_acid', 'coffee').

    Raises:
        KeyError: If key is not in the catalog
    """
    try:
        return CATALOG[key.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown solute {key!r}, choose one of: {', '.join(sorted(CATALOG))}"
        ) from None


def validate_solute() -> None:
    """
    Validation of the solute catalog.

    Tests:
    1. Every stock solute's color at fraction 1 is its stock color
    2. Every solute fades to water color at fraction 0
    3. Custom solutes clamp pH
    """
    for solute in SOLUTES:
        stock = solute.compute_color(1.0)
        assert np.allclose(stock.as_array(), solute.stock_color.as_array()), solute.name
        water = solute.compute_color(0.0)
        assert np.allclose(water.as_array(), WATER_COLOR.as_array()), solute.name

    assert create_custom(20.0).pH == PH_RANGE[1], "Custom pH should clamp"
    assert create_custom(3.0) is not create_custom(3.0), "Custom solutes are distinct"

    print("✓ All solute validations passed")
