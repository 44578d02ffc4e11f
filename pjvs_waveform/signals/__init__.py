"""
Signals Module
==============

This module contains classes for the sample time axis, the reference
waveform and the per-sample signal container.
"""

from .time_base import TimeBase
from .reference_waveform import (
    WaveformType,
    WaveformSpecification,
    AbstractReferenceEvaluator,
    SineReferenceEvaluator,
    TriangleReferenceEvaluator,
    SawtoothReferenceEvaluator,
    RectangularReferenceEvaluator,
    create_reference_evaluator,
    wrap_phase
)
from .signal_container import SignalContainer

__all__ = [
    "TimeBase",
    "WaveformType",
    "WaveformSpecification",
    "AbstractReferenceEvaluator",
    "SineReferenceEvaluator",
    "TriangleReferenceEvaluator",
    "SawtoothReferenceEvaluator",
    "RectangularReferenceEvaluator",
    "create_reference_evaluator",
    "wrap_phase",
    "SignalContainer"
]
