"""
Particles Package
=================

H₃O⁺/OH⁻ particle visualization for a solution's pH.

- ParticleCountModel: pH → drawable particle counts (log/linear hybrid)
- ParticleFieldCache: stable random particle positions
- render_particle_field: matplotlib renderer

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from .counts import (
    ParticleCounts,
    ParticleCountParameters,
    ParticleCountModel,
    compute_particle_counts,
)
from .field import Bounds, ParticleFieldCache, MAJORITY_ALPHA, MINORITY_ALPHA
from .render import render_particle_field

__all__ = [
    "ParticleCounts",
    "ParticleCountParameters",
    "ParticleCountModel",
    "compute_particle_counts",
    "Bounds",
    "ParticleFieldCache",
    "MAJORITY_ALPHA",
    "MINORITY_ALPHA",
    "render_particle_field",
]
