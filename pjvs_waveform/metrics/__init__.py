"""
Metrics Module
==============

This module contains diagnostics of the distribution of samples over
the PJVS steps.
"""

from .step_diagnostics import StepDiagnostics, compute_step_diagnostics

__all__ = [
    "StepDiagnostics",
    "compute_step_diagnostics"
]
