"""
Tests for solute.py module.

Tests:
- Catalog contents and lookup
- Color gradients
- Custom solutes
"""

import logging

import numpy as np
import pytest

from ph_simulator.core import solute as solute_module
from ph_simulator.core.ph_math import Color, interpolate_color
from ph_simulator.core.solute import (
    CATALOG,
    COFFEE,
    DRAIN_CLEANER,
    SOLUTES,
    WATER,
    WATER_COLOR,
    Solute,
    create_custom,
    get_solute,
)


# =============================================================================
# Catalog
# =============================================================================

class TestCatalog:
    """Tests for the stock solute catalog."""

    def test_catalog_size(self):
        assert len(SOLUTES) == 12
        assert len(CATALOG) == 12

    def test_alphabetical(self):
        names = [s.name for s in SOLUTES]
        assert names == sorted(names)

    def test_pH_in_range(self):
        for s in SOLUTES:
            assert 0.0 <= s.pH <= 14.0, s.name

    def test_lookup(self):
        assert get_solute("coffee") is COFFEE
        assert get_solute("Drain_Cleaner") is DRAIN_CLEANER
        assert get_solute("soda_pop").name == "soda pop"

    def test_unknown_key(self):
        with pytest.raises(KeyError, match="battery_acid"):
            get_solute("lemonade")

    def test_water_is_neutral(self):
        assert WATER.pH == 7.0
        assert WATER.initial_pH == 7.0


# =============================================================================
# Colors
# =============================================================================

class TestSoluteColor:
    """Tests for Solute.compute_color()."""

    @pytest.mark.parametrize("s", SOLUTES, ids=lambda s: s.name)
    def test_gradient_endpoints(self, s):
        assert np.allclose(s.compute_color(1.0).as_array(), s.stock_color.as_array())
        assert np.allclose(s.compute_color(0.0).as_array(), WATER_COLOR.as_array())

    def test_diluted_color_at_stop(self):
        stop = COFFEE.color_stop_ratio
        assert np.allclose(
            COFFEE.compute_color(stop).as_array(), COFFEE.diluted_color.as_array()
        )

    def test_fraction_clipped(self):
        assert COFFEE.compute_color(3.0) == COFFEE.compute_color(1.0)
        assert COFFEE.compute_color(-1.0) == COFFEE.compute_color(0.0)

    def test_two_stop_linear(self):
        s = Solute("test", 3.0, Color(0, 0, 0))
        mid = s.compute_color(0.5)
        expected = (WATER_COLOR.as_array() + Color(0, 0, 0).as_array()) / 2
        assert np.allclose(mid.as_array(), expected)

    def test_two_stop_matches_linear_blend(self):
        for fraction in (0.0, 0.3, 0.75, 1.0):
            assert DRAIN_CLEANER.compute_color(fraction) == interpolate_color(
                WATER_COLOR, DRAIN_CLEANER.stock_color, fraction
            )


# =============================================================================
# Construction
# =============================================================================

class TestSoluteConstruction:
    """Tests for Solute validation and identity."""

    def test_pH_out_of_range(self):
        with pytest.raises(ValueError):
            Solute("bad", 15.0, Color(0, 0, 0))

    def test_stop_ratio_out_of_range(self):
        with pytest.raises(ValueError):
            Solute("bad", 3.0, Color(0, 0, 0), Color(1, 1, 1), color_stop_ratio=1.0)

    def test_identity_equality(self):
        a = Solute("x", 3.0, Color(0, 0, 0))
        b = Solute("x", 3.0, Color(0, 0, 0))
        assert a != b
        assert a == a

    def test_immutable(self):
        with pytest.raises(AttributeError):
            COFFEE.pH = 3.0

    def test_repr(self):
        assert repr(COFFEE) == "Solute('coffee', pH=5.0)"


# =============================================================================
# Custom solutes
# =============================================================================

class TestCustomSolute:
    """Tests for create_custom()."""

    def test_custom_pH(self):
        custom = create_custom(4.2)
        assert custom.pH == 4.2
        assert custom.name == "custom"

    def test_custom_is_colorless(self):
        assert create_custom(2.0).compute_color(1.0) == create_custom(2.0).compute_color(0.0)

    def test_custom_clamped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger=solute_module.__name__):
            custom = create_custom(-3.0)
        assert custom.pH == 0.0
        assert "clamped" in caplog.text


def test_validate_solute():
    solute_module.validate_solute()
