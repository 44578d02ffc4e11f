"""
Reference Waveform Module
=========================

This module evaluates the continuous reference waveform that the PJVS
staircase approximates.

Every waveform type supplies two things:
1. Values of the reference waveform at the sample times (diagnostic).
2. One representative voltage per PJVS step, which is later quantized.

Representative step voltage:
    - Sine: the exact mean value of the waveform over the step, from the
      analytic integral

          U = A * (cos(w*t1 + ph) - cos(w*t2 + ph)) / (w * (t2 - t1))

    - Triangle, sawtooth, rectangular: the waveform evaluated at the
      middle of the step.

The midpoint evaluation is only an approximation. If a step spans a
break of the waveform (change of slope or of polarity), the step
voltage is not the mean value of the waveform over the step. Calibration
workflows rely on these exact numbers, so the approximation is kept.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from ..exceptions import InvalidParameter, UnknownWaveformType


def wrap_phase(phase_radians: float) -> float:
    """
    Remove additional multiples of 2*pi from a phase.

    The remainder keeps the sign of the input, negative results are then
    moved into [0, 2*pi).
    """
    wrapped: float = float(np.fmod(phase_radians, 2.0 * np.pi))
    if wrapped < 0:
        wrapped = wrapped + 2.0 * np.pi
    return wrapped


class WaveformType(Enum):
    """The four reference waveform types, with their numeric codes."""

    SINE = 1
    TRIANGLE = 2
    SAWTOOTH = 3
    RECTANGULAR = 4

    @classmethod
    def parse(cls, value: Union["WaveformType", int, str]) -> "WaveformType":
        """
        Convert an enum member, numeric code or name to a WaveformType.

        Raises:
            UnknownWaveformType: If value does not name one of the four types.
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        elif not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass

        known: str = ", ".join(
            f"{member.value} ({member.name.lower()})" for member in cls
        )
        raise UnknownWaveformType(
            f"Unknown waveform type {value!r}. Only possible values are: {known}"
        )


@dataclass(frozen=True)
class WaveformSpecification:
    """
    Parameters of the reference waveform.

    Attributes:
        waveform_type: One of the four WaveformType members.
        frequency_hz: Frequency of the reference waveform (Hz), > 0.
        amplitude_volts: Amplitude of the reference waveform (V), > 0.
        phase_radians: Phase of the reference waveform (rad), normalized
            into [0, 2*pi) on construction.
    """
    waveform_type: WaveformType = WaveformType.SINE
    frequency_hz: float = 1.0
    amplitude_volts: float = 1.0
    phase_radians: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "waveform_type", WaveformType.parse(self.waveform_type))

        if not self.frequency_hz > 0:
            raise InvalidParameter(
                f"Frequency of the reference waveform must be greater than zero. "
                f"Received: {self.frequency_hz} Hz"
            )

        if not self.amplitude_volts > 0:
            raise InvalidParameter(
                f"Amplitude must be greater than zero. "
                f"Received: {self.amplitude_volts} V"
            )

        if not np.isfinite(self.phase_radians):
            raise InvalidParameter(
                f"Phase must be finite. Received: {self.phase_radians} rad"
            )

        object.__setattr__(self, "phase_radians", wrap_phase(self.phase_radians))

    @property
    def angular_frequency(self) -> float:
        """Angular frequency w = 2*pi*f (rad/s)."""
        return 2.0 * np.pi * self.frequency_hz

    @property
    def period_seconds(self) -> float:
        """Period T = 1/f of the reference waveform (s)."""
        return 1.0 / self.frequency_hz


class AbstractReferenceEvaluator(ABC):
    """Abstract base class for reference waveform evaluators."""

    # True only where the step voltage is the exact mean over the step
    uses_exact_step_average: bool = False

    def __init__(self, specification: WaveformSpecification) -> None:
        self.specification: WaveformSpecification = specification
        self.amplitude: float = specification.amplitude_volts
        self.phase: float = specification.phase_radians
        self.angular_frequency: float = specification.angular_frequency
        self.period: float = specification.period_seconds

    @abstractmethod
    def evaluate_samples(self, time_seconds: np.ndarray) -> np.ndarray:
        """Evaluate the reference waveform at the given times."""
        pass

    def evaluate_steps(
        self,
        step_starts: np.ndarray,
        step_ends: np.ndarray
    ) -> np.ndarray:
        """
        Representative voltage of every step [step_starts[j], step_ends[j]).

        The default is the waveform value at the middle of the step.
        """
        return self.evaluate_samples(step_midpoints(step_starts, step_ends))


def step_midpoints(step_starts: np.ndarray, step_ends: np.ndarray) -> np.ndarray:
    """Time of the middle of every step."""
    step_starts = np.asarray(step_starts, dtype=float)
    step_ends = np.asarray(step_ends, dtype=float)
    return (step_ends - step_starts) / 2.0 + step_starts


class SineReferenceEvaluator(AbstractReferenceEvaluator):
    """
    Sine reference waveform: u(t) = A * sin(w*t + ph).

    The step voltage is the exact time average over the step, so
    noncoherency between the waveform and the step grid is handled
    correctly.
    """

    uses_exact_step_average = True

    def evaluate_samples(self, time_seconds: np.ndarray) -> np.ndarray:
        time_seconds = np.asarray(time_seconds, dtype=float)
        return self.amplitude * np.sin(
            self.angular_frequency * time_seconds + self.phase
        )

    def evaluate_steps(
        self,
        step_starts: np.ndarray,
        step_ends: np.ndarray
    ) -> np.ndarray:
        """
        Exact mean of A*sin(w*t + ph) over [t1, t2]:

            U = A * (cos(w*t1 + ph) - cos(w*t2 + ph)) / (w * (t2 - t1))
        """
        t1: np.ndarray = np.asarray(step_starts, dtype=float)
        t2: np.ndarray = np.asarray(step_ends, dtype=float)
        w: float = self.angular_frequency

        return (
            self.amplitude
            * (np.cos(w * t1 + self.phase) - np.cos(w * t2 + self.phase))
            / (w * (t2 - t1))
        )


class TriangleReferenceEvaluator(AbstractReferenceEvaluator):
    """
    Triangle reference waveform:

        u(t) = 2A * |mod((w*t + ph)/pi, 2) - 1| - A

    Step voltage: value at the step midpoint. Incorrect as a mean value
    for steps where the triangle changes its slope.
    """

    def evaluate_samples(self, time_seconds: np.ndarray) -> np.ndarray:
        time_seconds = np.asarray(time_seconds, dtype=float)
        return (
            2.0 * self.amplitude * np.abs(
                np.mod((self.angular_frequency * time_seconds + self.phase) / np.pi, 2.0)
                - 1.0
            )
            - self.amplitude
        )


class SawtoothReferenceEvaluator(AbstractReferenceEvaluator):
    """
    Sawtooth reference waveform:

        u(t) = 2A * (t/T - floor(t/T + 1/2))

    The phase of the reference waveform is not applied to the sawtooth.
    Step voltage: value at the step midpoint. Incorrect as a mean value
    for steps where the sawtooth flips its polarity.
    """

    def evaluate_samples(self, time_seconds: np.ndarray) -> np.ndarray:
        time_seconds = np.asarray(time_seconds, dtype=float)
        return self.amplitude * 2.0 * (
            time_seconds / self.period
            - np.floor(time_seconds / self.period + 0.5)
        )


class RectangularReferenceEvaluator(AbstractReferenceEvaluator):
    """
    Rectangular reference waveform: u(t) = sign(A * sin(w*t + ph)).

    The output levels are +1, -1 (and 0 exactly at a zero crossing).
    Step voltage: value at the step midpoint. Incorrect as a mean value
    for steps where the rectangle flips its polarity.
    """

    def evaluate_samples(self, time_seconds: np.ndarray) -> np.ndarray:
        time_seconds = np.asarray(time_seconds, dtype=float)
        return np.sign(
            self.amplitude * np.sin(self.angular_frequency * time_seconds + self.phase)
        )


_EVALUATORS = {
    WaveformType.SINE: SineReferenceEvaluator,
    WaveformType.TRIANGLE: TriangleReferenceEvaluator,
    WaveformType.SAWTOOTH: SawtoothReferenceEvaluator,
    WaveformType.RECTANGULAR: RectangularReferenceEvaluator,
}


def create_reference_evaluator(
    specification: WaveformSpecification
) -> AbstractReferenceEvaluator:
    """
    Create the evaluator matching the waveform type of the specification.

    Raises:
        UnknownWaveformType: If the waveform type has no evaluator.
    """
    waveform_type: WaveformType = WaveformType.parse(specification.waveform_type)
    return _EVALUATORS[waveform_type](specification)
