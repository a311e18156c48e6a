"""
pH Mathematics Module
=====================

Pure, stateless conversions between pH, concentration and moles, plus the
dilution formula used to compute the pH of a solute/water mixture.

THEORETICAL FOUNDATION
=====================

1. Water self-ionization:
   2H₂O ⇌ H₃O⁺ + OH⁻       Kw = [H₃O⁺][OH⁻] = 1e-14 at 25°C

   [H₃O⁺] = 10^(-pH)
   [OH⁻]  = 10^(pH - 14)

2. Dilution (no reaction between solute and solvent):
   The acid-or-base concentration of the stock solute is diluted by
   V_solute / (V_solute + V_water). Water contributes its own 1e-7 mol/L.

   Acidic solute:
   [H₃O⁺] = (10^(-pH_s) * V_s + 1e-7 * V_w) / (V_s + V_w)
   pH = -log10([H₃O⁺])

   Basic solute:
   [OH⁻] = (10^(pH_s - 14) * V_s + 1e-7 * V_w) / (V_s + V_w)
   pH = 14 + log10([OH⁻])

   Both limits are exact: V_s → 0 gives pH 7, V_w → 0 gives pH_s.

pH outputs are NOT clamped here. Use clamp_pH() at presentation time.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# Water constants (25°C)
KW = 1.0e-14  # [mol²/L²] Water ionization constant
PKW = 14.0
NEUTRAL_PH = 7.0
H2O_CONCENTRATION = 55.0  # [mol/L] Concentration of water in water

# Range shown on the pH meter
PH_RANGE: Tuple[float, float] = (0.0, 14.0)


class Species(Enum):
    """The two ion species produced by water self-ionization."""

    H3O = "H3O+"  # acid
    OH = "OH-"  # base


def concentration_from_pH(pH: Optional[float], species: Species) -> Optional[float]:
    """
    Convert pH to the concentration of one ion species.

    Args:
        pH: pH value, or None when there is no solution
        species: Species.H3O (acid) or Species.OH (base)

    Returns:
        Concentration [mol/L], or None if pH is None

    Example:
        >>> concentration_from_pH(3.0, Species.H3O)
        0.001
    """
    if pH is None:
        return None
    if species is Species.H3O:
        return 10 ** (-pH)
    return 10 ** (pH - PKW)


def pH_from_concentration(concentration: Optional[float], species: Species) -> Optional[float]:
    """
    Inverse of concentration_from_pH().

    Returns None for a missing or non-positive concentration, which has no pH.
    """
    if concentration is None or concentration <= 0:
        return None
    if species is Species.H3O:
        return float(-np.log10(concentration))
    return float(PKW + np.log10(concentration))


def moles_from_concentration(concentration: Optional[float], volume_L: float) -> Optional[float]:
    """Moles = concentration [mol/L] × volume [L]."""
    if concentration is None:
        return None
    return concentration * volume_L


def concentration_from_moles(moles: Optional[float], volume_L: float) -> Optional[float]:
    """Concentration [mol/L] = moles / volume [L], None for an empty volume."""
    if moles is None or volume_L <= 0:
        return None
    return moles / volume_L


def pH_from_moles(moles: Optional[float], volume_L: float, species: Species) -> Optional[float]:
    """pH of a solution holding some moles of one species in a volume."""
    return pH_from_concentration(concentration_from_moles(moles, volume_L), species)


def is_acidic(pH: float) -> bool:
    return pH < NEUTRAL_PH


def is_basic(pH: float) -> bool:
    return pH > NEUTRAL_PH


def compute_pH(solute_pH: float, solute_volume: float, water_volume: float) -> Optional[float]:
    """
    Compute the pH of solute diluted in water.

    Args:
        solute_pH: Stock pH of the solute
        solute_volume: Volume of solute [L]
        water_volume: Volume of water [L]

    Returns:
        pH of the mixture, or None if there is no solution

    Example:
        >>> compute_pH(2.0, 1.0, 0.0)
        2.0
        >>> compute_pH(2.0, 0.0, 1.0)
        7.0
        >>> compute_pH(2.0, 0.0, 0.0) is None
        True
    """
    total_volume = solute_volume + water_volume
    if total_volume <= 0:
        return None

    # Limit cases, exact rather than via log10 of a tiny sum
    if solute_volume <= 0:
        return NEUTRAL_PH
    if water_volume <= 0:
        return float(solute_pH)

    if is_acidic(solute_pH):
        species = Species.H3O
    elif is_basic(solute_pH):
        species = Species.OH
    else:
        return NEUTRAL_PH

    solute_concentration = concentration_from_pH(solute_pH, species)
    water_concentration = concentration_from_pH(NEUTRAL_PH, species)
    mixed = (solute_concentration * solute_volume + water_concentration * water_volume) / total_volume
    return pH_from_concentration(mixed, species)


def clamp_pH(pH: Optional[float]) -> Optional[float]:
    """Clamp pH to the displayable range. Presentation only."""
    if pH is None:
        return None
    return float(np.clip(pH, PH_RANGE[0], PH_RANGE[1]))


def to_fixed(value: Optional[float], decimal_places: int) -> Optional[float]:
    """
    Round to a number of decimal places, half away from zero.

    This matches what a numeric display shows, unlike round() which
    rounds half to even.
    """
    if value is None:
        return None
    multiplier = 10 ** decimal_places
    return float(np.sign(value) * np.floor(abs(value) * multiplier + 0.5) / multiplier)


def round_symmetric(value: float) -> int:
    """Round to the nearest integer, half away from zero."""
    return int(np.sign(value) * np.floor(abs(value) + 0.5))


@dataclass(frozen=True)
class Color:
    """
    RGBA color.

    Attributes:
        r, g, b: Channels [0, 255]
        a: Alpha [0, 1]
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    def with_alpha(self, alpha: float) -> "Color":
        return Color(self.r, self.g, self.b, alpha)

    def as_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b, self.a], dtype=float)

    @classmethod
    def from_array(cls, values: np.ndarray) -> "Color":
        r, g, b, a = (float(v) for v in values)
        return cls(r, g, b, a)

    def to_rgba(self) -> Tuple[float, float, float, float]:
        """Normalized (0-1) RGBA tuple, as matplotlib expects."""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a)


BLACK = Color(0, 0, 0)


def interpolate_color(color1: Color, color2: Color, distance: float) -> Color:
    """
    Linear RGBA interpolation.

    Args:
        color1: Color at distance 0
        color2: Color at distance 1
        distance: Position between the colors, clipped to [0, 1]
    """
    distance = float(np.clip(distance, 0.0, 1.0))
    mixed = color1.as_array() + (color2.as_array() - color1.as_array()) * distance
    return Color.from_array(mixed)


def validate_ph_math() -> None:
    """
    Validation of the pH conversions.

    Tests:
    1. concentration/pH round trip for both species
    2. Dilution limits (pure water, pure solute)
    3. Dilution moves pH toward neutral
    4. Empty solution has no pH
    """
    for pH in (0.0, 3.5, 7.0, 10.0, 14.0):
        for species in Species:
            c = concentration_from_pH(pH, species)
            assert abs(pH_from_concentration(c, species) - pH) < 1e-10, "Round trip failed"

    assert abs(compute_pH(2.0, 1e-12, 1.0) - NEUTRAL_PH) < 1e-3, "Solute → 0 should approach 7"
    assert abs(compute_pH(2.0, 1.0, 1e-12) - 2.0) < 1e-3, "Water → 0 should approach stock pH"

    acid = compute_pH(2.0, 0.3, 0.5)
    base = compute_pH(12.0, 0.3, 0.5)
    assert 2.0 < acid < 7.0, f"Diluted acid pH {acid} outside (2, 7)"
    assert 7.0 < base < 12.0, f"Diluted base pH {base} outside (7, 12)"

    assert compute_pH(2.0, 0.0, 0.0) is None, "Empty solution must have no pH"

    print("✓ All pH math validations passed")


if __name__ == "__main__":
    print("pH Dilution Demonstration")
    print("=" * 60)
    print(f"{'solute (L)':<12} {'water (L)':<12} {'pH (acid 2.0)':<16} {'pH (base 12.0)':<16}")
    print("-" * 60)
    for solute_volume in (0.0, 0.001, 0.01, 0.1, 0.5, 1.0):
        acid = compute_pH(2.0, solute_volume, 0.5)
        base = compute_pH(12.0, solute_volume, 0.5)
        print(f"{solute_volume:<12.3f} {0.5:<12.3f} {acid:<16.3f} {base:<16.3f}")
    print()

    validate_ph_math()
