"""
Visualization Module
====================

This module provides plotting functions for inspecting generated PJVS
waveforms.
"""

from .pjvs_plotter import PJVSPlotter

__all__ = ["PJVSPlotter"]
