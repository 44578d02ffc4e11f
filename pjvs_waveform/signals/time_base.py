"""
Time Base
=========

This module resolves the time instants at which the digitizer takes
its samples.

Two ways of describing the sampling are supported:
- An explicit time sequence (seconds). It may be irregular, i.e. the
  samples do not have to be equidistant.
- A sampling frequency and a number of samples. The samples are then
  taken at t[i] = i / fs for i = 0 .. L-1.

If both are given, the explicit time sequence takes precedence.
"""

import numpy as np
from typing import Optional, Sequence, Union

from ..exceptions import InvalidParameter


class TimeBase:
    """
    Sample time axis of a simulated digitizer record.

    Attributes:
        sampling_frequency_hz (float or None): Sampling rate used to build
            the time axis. None when explicit sample times were given.

        number_of_samples (int): Number of samples in the record.

        is_explicit (bool): True if the time axis came from an explicit
            (possibly irregular) time sequence.
    """

    def __init__(
        self,
        sampling_frequency_hz: Optional[float] = None,
        number_of_samples: Optional[int] = None,
        sample_times_seconds: Optional[Union[Sequence[float], np.ndarray]] = None
    ) -> None:
        """
        Initialize the time base.

        Args:
            sampling_frequency_hz: The sampling rate in Hertz (Hz).
                Ignored if sample_times_seconds is given.

            number_of_samples: How many samples the record contains.
                Ignored if sample_times_seconds is given.

            sample_times_seconds: Explicit time of every sample in seconds.
                Must be one-dimensional, non-empty and finite.

        Raises:
            InvalidParameter: If the sampling description is invalid.
        """
        # ===== EXPLICIT TIME SEQUENCE =====
        if sample_times_seconds is not None:
            times: np.ndarray = np.asarray(sample_times_seconds, dtype=float)

            if times.ndim != 1:
                raise InvalidParameter(
                    f"Time of samples must be a one-dimensional sequence. "
                    f"Received an array of shape {times.shape}"
                )

            if times.size == 0:
                raise InvalidParameter(
                    "Time of samples must contain at least one value."
                )

            if not np.all(np.isfinite(times)):
                raise InvalidParameter(
                    "Time of samples must contain only finite values."
                )

            self.sampling_frequency_hz: Optional[float] = None
            self.number_of_samples: int = int(times.size)
            self.is_explicit: bool = True
            self.time_axis_seconds: np.ndarray = times.copy()
            return

        # ===== REGULAR SAMPLING =====
        if number_of_samples is None or number_of_samples <= 0:
            raise InvalidParameter(
                f"Number of samples must be greater than zero. "
                f"Received: {number_of_samples}"
            )

        if sampling_frequency_hz is None or not sampling_frequency_hz > 0:
            raise InvalidParameter(
                f"Sampling frequency must be greater than zero. "
                f"Received: {sampling_frequency_hz} Hz"
            )

        self.sampling_frequency_hz = float(sampling_frequency_hz)
        self.number_of_samples = int(number_of_samples)
        self.is_explicit = False

        # Time of every sample: t[i] = i / fs
        self.time_axis_seconds = (
            np.arange(self.number_of_samples) / self.sampling_frequency_hz
        )

    def get_time_axis(self) -> np.ndarray:
        """Return a copy of the sample times."""
        return self.time_axis_seconds.copy()

    def get_mean_sampling_frequency(self) -> Optional[float]:
        """
        Return the (mean) sampling frequency of the record.

        For regular sampling this is the sampling frequency itself. For an
        explicit time sequence it is mean(1 / diff(t)), which is undefined
        for a single sample.
        """
        if not self.is_explicit:
            return self.sampling_frequency_hz

        if self.number_of_samples < 2:
            return None

        with np.errstate(divide='ignore'):
            return float(np.mean(1.0 / np.diff(self.time_axis_seconds)))
