"""
Particle Field Renderer
=======================

Draws a ParticleFieldCache with matplotlib.

The majority species is drawn first and semi-transparent; the minority
species is drawn on top, opaque. Only the part of the field below the
solution surface is shown.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
from typing import Dict, Optional

from ..core.ph_math import Color, Species
from .field import ParticleFieldCache

logger = logging.getLogger(__name__)

SPECIES_COLORS: Dict[Species, Color] = {
    Species.H3O: Color(204, 0, 0),
    Species.OH: Color(0, 0, 255),
}
PARTICLE_SIZE = 9  # [points²]


def render_particle_field(
    cache: ParticleFieldCache,
    ax=None,
    fill_fraction: float = 1.0,
    solution_color: Optional[Color] = None,
):
    """
    Render particles onto a matplotlib Axes.

    Args:
        cache: Particle positions and counts
        ax: Axes to draw on; a new figure is created if None
        fill_fraction: total_volume / max_volume; particles above the
            solution surface are hidden
        solution_color: Background fill for the solution, if any

    Returns:
        The Axes drawn on
    """
    import matplotlib.pyplot as plt
    from matplotlib.patches import Rectangle

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    bounds = cache.bounds
    fill_fraction = min(max(fill_fraction, 0.0), 1.0)

    # Screen coordinates: y grows downward, the surface is at the top
    surface_y = bounds.max_y - bounds.height * fill_fraction

    if solution_color is not None and fill_fraction > 0:
        ax.add_patch(
            Rectangle(
                (bounds.min_x, surface_y),
                bounds.width,
                bounds.max_y - surface_y,
                facecolor=solution_color.to_rgba(),
                edgecolor="none",
                zorder=0,
            )
        )

    # Nothing to draw in an empty beaker
    draw_order = cache.draw_order() if fill_fraction > 0 else []

    for zorder, (species, alpha) in enumerate(draw_order, start=1):
        positions = cache.positions(species)
        if fill_fraction < 1.0:
            positions = positions[positions[:, 1] >= surface_y]
        if len(positions) == 0:
            continue
        ax.scatter(
            positions[:, 0],
            positions[:, 1],
            s=PARTICLE_SIZE,
            color=SPECIES_COLORS[species].with_alpha(alpha).to_rgba(),
            edgecolors="none",
            label=f"{species.value} ({len(positions)})",
            zorder=zorder,
        )

    ax.set_xlim(bounds.min_x, bounds.max_x)
    ax.set_ylim(bounds.max_y, bounds.min_y)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])

    logger.debug(
        f"Rendered {cache.counts.h3o} H3O+ / {cache.counts.oh} OH- "
        f"at fill {fill_fraction:.2f}"
    )
    return ax
