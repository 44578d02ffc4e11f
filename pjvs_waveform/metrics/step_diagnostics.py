"""
Step Diagnostics
================

This module computes diagnostic quantities describing how the samples
of a record are distributed over the PJVS steps.

These numbers are useful to check a measurement setup:
- Samples per step should equal fs / fstep for coherent sampling.
- The step phase that moves the step changes by half a sample period
  places every step change between two samples, so that no sample is
  taken exactly at a switch.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..signals.time_base import TimeBase
from ..steps.step_grid import StepGrid
from ..steps.sample_assigner import SampleAssignment


@dataclass(frozen=True)
class StepDiagnostics:
    """
    Per-step diagnostics of one generated record.

    Attributes:
        voltage_quantum_volts: Voltage change for a quantum number change by 1.
        samples_per_step: Number of samples in every computed step.
        total_assigned_samples: Samples that fell into any step.
        mean_samples_per_step: Mean of samples_per_step without the leading
            padding step (which lies before the record start).
        expected_samples_per_step: fs / fstep, or mean(1/diff(t)) / fstep for
            explicit sample times. None if it cannot be determined.
        samples_per_step_deviation: mean minus expected samples per step.
        half_sample_step_phase_radians: Step phase shifting the step changes
            by half a sample period. None if the sampling rate is unknown.
        number_of_samples: Samples in the record.
        number_of_computed_steps: Steps in the grid, padding included.
        number_of_used_steps: Steps containing at least one sample.
        number_of_first_period_steps: Used steps in the first reference period.
    """
    voltage_quantum_volts: float
    samples_per_step: np.ndarray
    total_assigned_samples: int
    mean_samples_per_step: float
    expected_samples_per_step: Optional[float]
    samples_per_step_deviation: Optional[float]
    half_sample_step_phase_radians: Optional[float]
    number_of_samples: int
    number_of_computed_steps: int
    number_of_used_steps: int
    number_of_first_period_steps: int

    def format_report(self) -> str:
        """Return the diagnostics as a printable multi-line text."""

        def _fmt(value: Optional[float], spec: str) -> str:
            return "n/a" if value is None else format(value, spec)

        lines = [
            "PJVS step diagnostics:",
            f"  Change of quantum number by 1:        {self.voltage_quantum_volts:.4g} V",
            f"  Step phase for half-sample shift:     "
            f"{_fmt(self.half_sample_step_phase_radians, '.4f')} rad",
            f"  Samples per PJVS step:                {self.samples_per_step.tolist()}",
            f"  Total samples in all PJVS steps:      {self.total_assigned_samples}",
            f"  Mean samples per step (no pad step):  {self.mean_samples_per_step:g}",
            f"  Expected samples per step:            "
            f"{_fmt(self.expected_samples_per_step, 'f')}",
            f"  Mean minus expected samples per step: "
            f"{_fmt(self.samples_per_step_deviation, 'g')}",
            f"  No. of samples:                       {self.number_of_samples}",
            f"  No. of calculated PJVS steps:         {self.number_of_computed_steps}",
            f"  No. of used PJVS steps:               {self.number_of_used_steps}",
            f"  No. of used steps in first period:    {self.number_of_first_period_steps}",
        ]
        return "\n".join(lines)


def compute_step_diagnostics(
    time_base: TimeBase,
    grid: StepGrid,
    assignment: SampleAssignment
) -> StepDiagnostics:
    """
    Compute the step diagnostics of a generated record.

    Args:
        time_base: Sample time axis of the record.
        grid: PJVS step grid used for the record.
        assignment: Result of assigning the samples to the steps.

    Returns:
        StepDiagnostics for the record.
    """
    step_frequency_hz: float = grid.specification.step_frequency_hz
    samples_per_step: np.ndarray = assignment.samples_per_step.copy()

    # The first step is the padding step before the record start
    if samples_per_step.size > 1:
        mean_samples_per_step = float(np.mean(samples_per_step[1:]))
    else:
        mean_samples_per_step = float(np.mean(samples_per_step))

    sampling_frequency_hz: Optional[float] = time_base.get_mean_sampling_frequency()
    expected: Optional[float] = None
    deviation: Optional[float] = None
    half_sample_phase: Optional[float] = None

    if sampling_frequency_hz is not None and np.isfinite(sampling_frequency_hz):
        expected = sampling_frequency_hz / step_frequency_hz
        deviation = mean_samples_per_step - expected
        # Half a sampling period relative to one step period, as a phase
        half_sample_phase = (0.5 / sampling_frequency_hz) / (1.0 / step_frequency_hz) * 2.0 * np.pi

    return StepDiagnostics(
        voltage_quantum_volts=grid.specification.voltage_quantum_volts,
        samples_per_step=samples_per_step,
        total_assigned_samples=int(np.sum(samples_per_step)),
        mean_samples_per_step=mean_samples_per_step,
        expected_samples_per_step=expected,
        samples_per_step_deviation=deviation,
        half_sample_step_phase_radians=half_sample_phase,
        number_of_samples=time_base.number_of_samples,
        number_of_computed_steps=grid.number_of_steps,
        number_of_used_steps=assignment.get_number_of_used_steps(),
        number_of_first_period_steps=sum(
            1 for step in assignment.used_steps if step.in_first_period
        )
    )
