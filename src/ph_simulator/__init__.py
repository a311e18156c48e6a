"""
pH Simulator
============

Beaker chemistry (solute + water) with a pH-driven particle visualization.

Subpackages:
- core: pH math, solutes, solution, flow model
- particles: particle counts, cached positions, matplotlib rendering

Run a scripted session: `python -m ph_simulator --help`

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Guilherme F. G. Santos"
