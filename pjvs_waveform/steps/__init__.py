"""
Steps Module
============

This module contains the PJVS step components: the step grid, the
Josephson quantizer, the assignment of samples to steps and the
collection of step start indices.
"""

from .josephson_quantizer import (
    JosephsonQuantizer,
    JOSEPHSON_CONSTANT_HZ_PER_VOLT,
    compute_voltage_quantum,
    round_half_away_from_zero
)
from .step_grid import StepGrid, StepGridSpecification, StepBoundary
from .sample_assigner import SampleAssigner, SampleAssignment, UsedStep
from .step_index_collector import StepIndexCollector, CollectedSteps

__all__ = [
    "JosephsonQuantizer",
    "JOSEPHSON_CONSTANT_HZ_PER_VOLT",
    "compute_voltage_quantum",
    "round_half_away_from_zero",
    "StepGrid",
    "StepGridSpecification",
    "StepBoundary",
    "SampleAssigner",
    "SampleAssignment",
    "UsedStep",
    "StepIndexCollector",
    "CollectedSteps"
]
