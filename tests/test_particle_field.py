"""
Tests for particles/field.py module.

Tests:
- Bounds validation
- Stable positions: no regeneration on equal counts, grow-only on increase
- Shrinking reads fewer entries
- Bounds change regenerates
- Draw order and opacity
"""

import numpy as np
import pytest

from ph_simulator.core.ph_math import Species
from ph_simulator.particles.counts import ParticleCounts
from ph_simulator.particles.field import (
    MAJORITY_ALPHA,
    MINORITY_ALPHA,
    Bounds,
    ParticleFieldCache,
)

BOUNDS = Bounds(10, 20, 110, 220)


@pytest.fixture
def cache(rng):
    return ParticleFieldCache(BOUNDS, rng)


# =============================================================================
# Bounds
# =============================================================================

class TestBounds:
    """Tests for Bounds."""

    def test_size(self):
        assert BOUNDS.width == 100
        assert BOUNDS.height == 200

    def test_contains(self):
        assert BOUNDS.contains(10, 20)
        assert BOUNDS.contains(110, 220)
        assert not BOUNDS.contains(9, 50)

    def test_inverted_rejected(self):
        with pytest.raises(ValueError):
            Bounds(10, 0, 0, 10)


# =============================================================================
# Cache updates
# =============================================================================

class TestParticleFieldCache:
    """Tests for ParticleFieldCache.update()."""

    def test_starts_empty(self, cache):
        assert cache.counts == ParticleCounts(0, 0)
        assert cache.h3o_positions.shape == (0, 2)
        assert cache.oh_positions.shape == (0, 2)

    def test_positions_inside_bounds(self, cache):
        cache.update(500, 500)
        for positions in (cache.h3o_positions, cache.oh_positions):
            assert positions.shape == (500, 2)
            assert positions.dtype.kind == "i"
            assert positions[:, 0].min() >= BOUNDS.min_x
            assert positions[:, 0].max() <= BOUNDS.max_x
            assert positions[:, 1].min() >= BOUNDS.min_y
            assert positions[:, 1].max() <= BOUNDS.max_y

    def test_equal_counts_no_regeneration(self, cache):
        assert cache.update(50, 50) is True
        h3o = cache.h3o_positions.copy()
        oh = cache.oh_positions.copy()
        revision = cache.revision

        assert cache.update(50, 50) is False

        assert np.array_equal(cache.h3o_positions, h3o)
        assert np.array_equal(cache.oh_positions, oh)
        assert cache.revision == revision

    def test_growth_appends_only(self, cache):
        cache.update(50, 50)
        h3o = cache.h3o_positions.copy()
        oh = cache.oh_positions.copy()

        cache.update(50, 60)

        assert np.array_equal(cache.h3o_positions, h3o)
        assert np.array_equal(cache.oh_positions[:50], oh)
        assert len(cache.oh_positions) == 60
        assert cache.capacity(Species.OH) == 60
        assert cache.capacity(Species.H3O) == 50

    def test_shrink_reads_fewer(self, cache):
        cache.update(50, 60)
        oh = cache.oh_positions.copy()

        cache.update(50, 40)

        assert len(cache.oh_positions) == 40
        assert np.array_equal(cache.oh_positions, oh[:40])
        assert cache.capacity(Species.OH) == 60

    def test_regrow_reuses_positions(self, cache):
        cache.update(50, 60)
        oh = cache.oh_positions.copy()
        cache.update(50, 40)
        cache.update(50, 60)
        assert np.array_equal(cache.oh_positions, oh)

    def test_bounds_change_regenerates(self, cache):
        cache.update(30, 30)
        new_bounds = Bounds(500, 500, 600, 600)
        assert cache.update(30, 30, new_bounds) is True
        assert cache.bounds == new_bounds
        assert cache.h3o_positions[:, 0].min() >= 500
        assert cache.capacity(Species.H3O) == 30

    def test_same_bounds_no_regeneration(self, cache):
        cache.update(30, 30)
        h3o = cache.h3o_positions.copy()
        assert cache.update(30, 30, Bounds(10, 20, 110, 220)) is False
        assert np.array_equal(cache.h3o_positions, h3o)

    def test_negative_counts_clamped(self, cache):
        cache.update(-5, 3)
        assert cache.counts == ParticleCounts(0, 3)

    def test_update_counts(self, cache):
        cache.update_counts(ParticleCounts(12, 7))
        assert len(cache.h3o_positions) == 12
        assert len(cache.oh_positions) == 7

    def test_positions_read_only(self, cache):
        cache.update(5, 5)
        with pytest.raises(ValueError):
            cache.h3o_positions[0, 0] = 0

    def test_seed_reproducible(self):
        a = ParticleFieldCache(BOUNDS, np.random.default_rng(7))
        b = ParticleFieldCache(BOUNDS, np.random.default_rng(7))
        a.update(20, 20)
        b.update(20, 20)
        assert np.array_equal(a.h3o_positions, b.h3o_positions)
        assert np.array_equal(a.oh_positions, b.oh_positions)

    def test_default_rng(self):
        cache = ParticleFieldCache(BOUNDS)
        cache.update(3, 3)
        assert cache.h3o_positions.shape == (3, 2)


# =============================================================================
# Draw order
# =============================================================================

class TestDrawOrder:
    """Tests for ParticleFieldCache.draw_order()."""

    def test_acid_majority_first(self, cache):
        cache.update(500, 5)
        assert cache.draw_order() == [
            (Species.H3O, MAJORITY_ALPHA),
            (Species.OH, MINORITY_ALPHA),
        ]

    def test_base_majority_first(self, cache):
        cache.update(5, 500)
        assert cache.draw_order()[0] == (Species.OH, MAJORITY_ALPHA)

    def test_majority_more_transparent(self):
        assert MAJORITY_ALPHA < MINORITY_ALPHA

    def test_tie(self, cache):
        cache.update(50, 50)
        order = cache.draw_order()
        assert {species for species, _ in order} == set(Species)
