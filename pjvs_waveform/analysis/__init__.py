"""
Analysis Module
===============

Downstream analysis of records digitized against PJVS steps.
"""

from .subsampling_averager import (
    SubsamplingAverager,
    SubsamplingConfiguration,
    SubsamplingResults,
    compute_amplitude_spectrum,
    compute_voltage_limit
)

__all__ = [
    "SubsamplingAverager",
    "SubsamplingConfiguration",
    "SubsamplingResults",
    "compute_amplitude_spectrum",
    "compute_voltage_limit"
]
