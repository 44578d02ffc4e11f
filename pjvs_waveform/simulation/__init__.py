"""
Simulation Module
=================

This module provides the orchestration layer that ties together all
components of the PJVS waveform generation.
"""

from .generator_runner import (
    PJVSWaveformGenerator,
    GeneratorConfiguration,
    GeneratorResults,
    generate
)

__all__ = [
    "PJVSWaveformGenerator",
    "GeneratorConfiguration",
    "GeneratorResults",
    "generate"
]
