"""
PJVS Waveform Simulation Package
================================

This package simulates the sampled output of a Programmable Josephson
Voltage Standard (PJVS) that approximates a reference waveform by a
staircase of quantized voltage steps. The generated records are meant
for testing and calibrating digitizer-based sampling algorithms.

Package Structure:
- signals/: Sample time axis and reference waveform evaluation
- steps/: PJVS step grid, Josephson quantizer, sample assignment
- simulation/: Generator configuration and orchestration
- metrics/: Per-step diagnostics
- analysis/: Subsampling averager consuming the generated steps
- visualization/: Plotting tools
"""

from .exceptions import (
    PJVSWaveformError,
    InvalidParameter,
    UnknownWaveformType,
    InsufficientSamples
)
from .signals.reference_waveform import WaveformType
from .simulation.generator_runner import (
    GeneratorConfiguration,
    GeneratorResults,
    PJVSWaveformGenerator,
    generate
)

__version__ = "1.0.0"

__all__ = [
    "PJVSWaveformError",
    "InvalidParameter",
    "UnknownWaveformType",
    "InsufficientSamples",
    "WaveformType",
    "GeneratorConfiguration",
    "GeneratorResults",
    "PJVSWaveformGenerator",
    "generate"
]
