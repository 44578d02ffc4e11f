"""
Sample Assigner Module
======================

This module assigns to every sample the quantized voltage of the PJVS
step during which the sample was taken.

Membership rule:
    sample i belongs to step j  <=>  start[j] <= t[i] < end[j]

A sample taken exactly at a step change belongs to the step that starts
there. Whether a sample lies exactly at a step change is decided by
machine precision of the computed times, nothing else is done about
such ties (the voltages of adjacent steps are never averaged).

Steps without any sample are not "used": they do not appear in the
output lists at all.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .step_grid import StepGrid


@dataclass(frozen=True)
class UsedStep:
    """
    A PJVS step that contains at least one sample.

    Attributes:
        step_index: Index of the step in the step grid (zero-based).
        first_sample_index: Zero-based index of the first sample in the step.
        sample_count: Number of samples in the step.
        quantum_number: Quantum number of the step.
        voltage: Quantized voltage of the step (V).
        in_first_period: True if the first sample of the step was taken
            within one reference waveform period from the record start.
    """
    step_index: int
    first_sample_index: int
    sample_count: int
    quantum_number: int
    voltage: float
    in_first_period: bool


@dataclass
class SampleAssignment:
    """
    Result of assigning the samples to PJVS steps.

    Attributes:
        sample_voltages: Quantized voltage of every sample, NaN for samples
            outside of all steps.
        step_index_per_sample: Step index of every sample, -1 for samples
            outside of all steps.
        samples_per_step: Number of samples in every step of the grid.
        used_steps: The steps with at least one sample, in step order.
    """
    sample_voltages: np.ndarray
    step_index_per_sample: np.ndarray
    samples_per_step: np.ndarray
    used_steps: List[UsedStep]

    def get_number_of_used_steps(self) -> int:
        """Return the number of steps containing at least one sample."""
        return len(self.used_steps)


class SampleAssigner:
    """
    Assigns quantized PJVS step voltages to the samples of a record.

    Attributes:
        grid (StepGrid): The PJVS step grid the samples are matched against.
    """

    def __init__(self, grid: StepGrid) -> None:
        self.grid: StepGrid = grid

    def locate_samples(self, sample_times_seconds: np.ndarray) -> np.ndarray:
        """
        Return the index of the step containing every sample.

        The number of step changes at or before t[i] minus one is the
        step with start <= t[i] < end. Samples outside the grid get -1.
        """
        sample_times_seconds = np.asarray(sample_times_seconds, dtype=float)
        step_index: np.ndarray = (
            np.searchsorted(self.grid.boundaries, sample_times_seconds, side='right') - 1
        )
        outside: np.ndarray = (step_index < 0) | (step_index >= self.grid.number_of_steps)
        step_index[outside] = -1
        return step_index.astype(np.int64)

    def assign(
        self,
        sample_times_seconds: np.ndarray,
        quantum_numbers: np.ndarray,
        quantized_voltages: np.ndarray,
        reference_period_seconds: float
    ) -> SampleAssignment:
        """
        Assign the quantized step voltages to the samples.

        Args:
            sample_times_seconds: Time of every sample (s).
            quantum_numbers: Quantum number of every step of the grid.
            quantized_voltages: Quantized voltage of every step of the grid (V).
            reference_period_seconds: Period T of the reference waveform (s),
                used to flag the steps of the first period.

        Returns:
            SampleAssignment with per-sample voltages and the used steps.
        """
        sample_times_seconds = np.asarray(sample_times_seconds, dtype=float)
        number_of_steps: int = self.grid.number_of_steps

        # ===== LOCATE EVERY SAMPLE =====
        step_index_per_sample: np.ndarray = self.locate_samples(sample_times_seconds)
        covered: np.ndarray = step_index_per_sample >= 0

        # ===== QUANTIZED SAMPLES =====
        # NaN marks samples not covered by any step
        sample_voltages: np.ndarray = np.full(sample_times_seconds.shape, np.nan)
        sample_voltages[covered] = np.asarray(quantized_voltages)[
            step_index_per_sample[covered]
        ]

        # ===== SAMPLES PER STEP =====
        samples_per_step: np.ndarray = np.bincount(
            step_index_per_sample[covered],
            minlength=number_of_steps
        )

        # ===== FIRST SAMPLE OF EVERY STEP =====
        first_sample_index: np.ndarray = np.full(
            number_of_steps, sample_times_seconds.size, dtype=np.int64
        )
        covered_indices: np.ndarray = np.nonzero(covered)[0]
        np.minimum.at(
            first_sample_index,
            step_index_per_sample[covered_indices],
            covered_indices
        )

        # ===== USED STEPS, IN STEP ORDER =====
        first_period_end: float = (
            float(np.min(sample_times_seconds)) + reference_period_seconds
        )
        used_steps: List[UsedStep] = []
        for step_index in np.nonzero(samples_per_step)[0]:
            first_index: int = int(first_sample_index[step_index])
            used_steps.append(UsedStep(
                step_index=int(step_index),
                first_sample_index=first_index,
                sample_count=int(samples_per_step[step_index]),
                quantum_number=int(quantum_numbers[step_index]),
                voltage=float(quantized_voltages[step_index]),
                in_first_period=bool(sample_times_seconds[first_index] < first_period_end)
            ))

        return SampleAssignment(
            sample_voltages=sample_voltages,
            step_index_per_sample=step_index_per_sample,
            samples_per_step=samples_per_step,
            used_steps=used_steps
        )
