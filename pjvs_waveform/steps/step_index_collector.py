"""
Step Index Collector Module
===========================

This module collects, from the used PJVS steps, the sample indices at
which the PJVS switches, and the voltages of the used steps.

Step start indices are one-based sample numbers: a switch happens
before or at the sample with that number. The list always starts with
1 (start of the record) and ends with L + 1, one past the last sample,
so that consecutive entries delimit the samples of one step:

    samples of segment k = numbers start[k] .. start[k+1] - 1
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .sample_assigner import UsedStep


@dataclass
class CollectedSteps:
    """
    Used PJVS steps in the form consumed by downstream analysis.

    Attributes:
        step_start_indices: One-based sample numbers of the step switches,
            starting with 1 and ending with number_of_samples + 1.
        quantum_numbers: Quantum numbers of the used steps, in step order.
        pjvs_voltages: Quantized voltages of the used steps, in step order.
        pjvs_voltages_first_period: Quantized voltages of the used steps
            whose first sample lies in the first reference period.
    """
    step_start_indices: np.ndarray
    quantum_numbers: np.ndarray
    pjvs_voltages: np.ndarray
    pjvs_voltages_first_period: np.ndarray

    def to_slices(self) -> List[slice]:
        """Return zero-based slices of the samples between consecutive switches."""
        return [
            slice(int(start) - 1, int(stop) - 1)
            for start, stop in zip(self.step_start_indices[:-1], self.step_start_indices[1:])
        ]


class StepIndexCollector:
    """
    Builds step start indices and voltage lists from the used steps.

    Attributes:
        number_of_samples (int): Number of samples in the record.
    """

    def __init__(self, number_of_samples: int) -> None:
        self.number_of_samples: int = int(number_of_samples)

    def collect_start_indices(self, used_steps: Sequence[UsedStep]) -> np.ndarray:
        """
        Return the ascending one-based sample numbers of the step switches.

        Entries outside [1, L + 1] are dropped, then 1 is put at the front
        and L + 1 at the end if they are missing.
        """
        end_of_record: int = self.number_of_samples + 1

        starts: np.ndarray = np.unique(np.array(
            [step.first_sample_index + 1 for step in used_steps],
            dtype=np.int64
        ))
        starts = starts[(starts >= 1) & (starts <= end_of_record)]

        if starts.size == 0 or starts[0] != 1:
            starts = np.concatenate(([1], starts))

        if starts[-1] != end_of_record:
            # Steps mark their start, so the next one begins after the last sample
            starts = np.concatenate((starts, [end_of_record]))

        return starts.astype(np.int64)

    def collect(self, used_steps: Sequence[UsedStep]) -> CollectedSteps:
        """Collect step start indices and the voltages of the used steps."""
        return CollectedSteps(
            step_start_indices=self.collect_start_indices(used_steps),
            quantum_numbers=np.array(
                [step.quantum_number for step in used_steps], dtype=np.int64
            ),
            pjvs_voltages=np.array(
                [step.voltage for step in used_steps], dtype=float
            ),
            pjvs_voltages_first_period=np.array(
                [step.voltage for step in used_steps if step.in_first_period],
                dtype=float
            )
        )
