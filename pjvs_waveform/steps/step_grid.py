"""
PJVS Step Grid Module
=====================

This module computes the times at which the PJVS switches from one
step to the next.

The PJVS steps are always equidistant, independent of the sample
times:

    Tseg = 1 / fstep                      (duration of one step)
    tdel = Tseg * phstep / (2*pi)         (delay given by the step phase)
    t_k  = tdel + k * Tseg                (step change times)

Only the step changes inside the record are kept. Then exactly one
more step change is added before the first and after the last kept
one, so that partial steps at both edges of the record are calculated
too and no edge sample is left without a step:

    ... |-- pad --|-- step --|-- step --| ... |-- step --|-- pad --|
        ^         ^                                      ^         ^
   first-Tseg   first kept                          last kept   last+Tseg

Step j is the half-open interval [boundary[j], boundary[j+1]).
"""

from dataclasses import dataclass
from typing import Iterator, NamedTuple

import numpy as np

from ..exceptions import InvalidParameter
from ..signals.reference_waveform import wrap_phase, step_midpoints
from .josephson_quantizer import compute_voltage_quantum


@dataclass(frozen=True)
class StepGridSpecification:
    """
    Parameters of the PJVS step sequence.

    Attributes:
        step_frequency_hz: Frequency of the PJVS steps fstep (Hz), > 0.
        step_phase_radians: Phase of the PJVS steps (rad), normalized into
            [0, 2*pi) on construction.
        microwave_frequency_hz: Microwave drive frequency fm (Hz), > 0.
    """
    step_frequency_hz: float = 10.0
    step_phase_radians: float = -0.3142
    microwave_frequency_hz: float = 75e9

    def __post_init__(self) -> None:
        if not self.step_frequency_hz > 0:
            raise InvalidParameter(
                f"Frequency of the PJVS steps must be greater than zero. "
                f"Received: {self.step_frequency_hz} Hz"
            )

        if not self.microwave_frequency_hz > 0:
            raise InvalidParameter(
                f"Microwave frequency must be greater than zero. "
                f"Received: {self.microwave_frequency_hz} Hz"
            )

        if not np.isfinite(self.step_phase_radians):
            raise InvalidParameter(
                f"Phase of the PJVS steps must be finite. "
                f"Received: {self.step_phase_radians} rad"
            )

        object.__setattr__(self, "step_phase_radians", wrap_phase(self.step_phase_radians))

    @property
    def step_period_seconds(self) -> float:
        """Duration Tseg = 1/fstep of one PJVS step (s)."""
        return 1.0 / self.step_frequency_hz

    @property
    def voltage_quantum_volts(self) -> float:
        """Voltage quantum VS = fm / KJ (V)."""
        return compute_voltage_quantum(self.microwave_frequency_hz)

    @property
    def step_delay_seconds(self) -> float:
        """Delay tdel = Tseg * phstep / (2*pi) of the first step change (s)."""
        return self.step_period_seconds * self.step_phase_radians / (2.0 * np.pi)


class StepBoundary(NamedTuple):
    """One PJVS step: the interval [start, end) and its middle."""
    index: int
    start: float
    end: float
    midpoint: float


class StepGrid:
    """
    Ascending, contiguous PJVS step boundaries covering a sample record.

    Attributes:
        specification (StepGridSpecification): Step parameters.
        boundaries (np.ndarray): Step change times, length number_of_steps + 1.
        step_starts (np.ndarray): Start time of every step.
        step_ends (np.ndarray): End time of every step (start of the next one).
        step_midpoints (np.ndarray): Middle of every step.
    """

    def __init__(
        self,
        specification: StepGridSpecification,
        boundaries: np.ndarray
    ) -> None:
        """
        Initialize the grid from already computed step change times.

        Use StepGrid.from_sample_times() to compute the step change times
        for a sample record.

        Raises:
            InvalidParameter: If there are fewer than two boundaries or they
                are not strictly ascending.
        """
        boundaries = np.asarray(boundaries, dtype=float)

        if boundaries.ndim != 1 or boundaries.size < 2:
            raise InvalidParameter("A step grid needs at least two step change times.")

        if np.any(np.diff(boundaries) <= 0):
            raise InvalidParameter("Step change times must be strictly ascending.")

        self.specification: StepGridSpecification = specification
        self.boundaries: np.ndarray = boundaries
        self.step_starts: np.ndarray = boundaries[:-1]
        self.step_ends: np.ndarray = boundaries[1:]
        self.step_midpoints: np.ndarray = step_midpoints(self.step_starts, self.step_ends)

    @classmethod
    def from_sample_times(
        cls,
        specification: StepGridSpecification,
        sample_times_seconds: np.ndarray
    ) -> "StepGrid":
        """
        Compute the step grid covering the given sample times.

        The step change times tdel + k*Tseg are kept inside
        [min(0, t_min), t_max] and one padding step is added at each end.
        If no step change falls inside the record (record shorter than one
        step), the last step change before t_max is used as the only kept
        one. The grid always ends after t_max, even where the computed
        step change times round onto a sample time.

        Args:
            specification: PJVS step parameters.
            sample_times_seconds: Time of every sample (s), not necessarily
                sorted.

        Returns:
            StepGrid covering all sample times.
        """
        sample_times_seconds = np.asarray(sample_times_seconds, dtype=float)
        if sample_times_seconds.size == 0:
            raise InvalidParameter("Time of samples must contain at least one value.")

        period: float = specification.step_period_seconds
        delay: float = specification.step_delay_seconds

        # Record range. The grid always starts at t = 0 unless samples
        # precede it.
        lower_time: float = min(0.0, float(np.min(sample_times_seconds)))
        upper_time: float = float(np.max(sample_times_seconds))

        # ===== CANDIDATE STEP CHANGE TIMES =====
        # One extra candidate on each side, the exact selection is done by
        # comparing the computed times themselves.
        first_k: int = int(np.floor((lower_time - delay) / period)) - 1
        last_k: int = int(np.ceil((upper_time - delay) / period)) + 1
        step_numbers: np.ndarray = np.arange(first_k, last_k + 1)
        candidates: np.ndarray = delay + step_numbers * period

        # ===== KEEP STEP CHANGES INSIDE THE RECORD =====
        kept_k: np.ndarray = step_numbers[
            (candidates <= upper_time) & (candidates >= lower_time)
        ]

        if kept_k.size == 0:
            anchor_k: int = int(np.floor((upper_time - delay) / period))
            if delay + anchor_k * period > upper_time:
                anchor_k -= 1
            kept_k = np.array([anchor_k])

        # ===== PAD ONE STEP AT EACH END =====
        # Pads are computed from the step number, not by adding a period to
        # the last kept time, which can round onto a sample time
        boundaries: np.ndarray = delay + np.arange(kept_k[0] - 1, kept_k[-1] + 2) * period

        # The grid must end after the last sample and start at or before
        # the first one, whatever the rounding of the step change times
        while boundaries[-1] <= upper_time:
            boundaries = np.append(boundaries, boundaries[-1] + period)
        while boundaries[0] > lower_time:
            boundaries = np.insert(boundaries, 0, boundaries[0] - period)

        return cls(specification, boundaries)

    @property
    def number_of_steps(self) -> int:
        """Number of step intervals, including the padding steps."""
        return len(self.step_starts)

    def iter_boundaries(self) -> Iterator[StepBoundary]:
        """Yield every step as a StepBoundary record."""
        for index in range(self.number_of_steps):
            yield StepBoundary(
                index=index,
                start=float(self.step_starts[index]),
                end=float(self.step_ends[index]),
                midpoint=float(self.step_midpoints[index])
            )

    def covers(self, time_seconds: float) -> bool:
        """Return True if the time lies inside [first boundary, last boundary)."""
        return bool(self.boundaries[0] <= time_seconds < self.boundaries[-1])
