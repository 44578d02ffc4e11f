"""
Signal Container
================

This module provides a data class for storing the per-sample signals
produced by the PJVS waveform generator.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional


@dataclass
class SignalContainer:
    """
    Container for the per-sample signals of one generated record.

    The signal flow of the generator is:
    [Sample Times] → [Reference Waveform] → [PJVS Steps] → [Quantized Samples]

    Attributes:
        time_axis_seconds: Time of every sample.
        reference_samples: The continuous reference waveform at the sample times.
        quantized_samples: PJVS voltage of every sample (NaN if no step covers it).
        step_index_per_sample: Index of the step containing every sample
            (-1 if no step covers it).
    """
    # Required attributes
    time_axis_seconds: np.ndarray
    reference_samples: np.ndarray

    # Optional attributes (filled during generation)
    quantized_samples: Optional[np.ndarray] = None
    step_index_per_sample: Optional[np.ndarray] = None

    # Metadata
    sampling_frequency_hz: Optional[float] = None
    signal_frequency_hz: float = 0.0
    step_frequency_hz: float = 0.0

    def validate(self) -> bool:
        """Validate that all arrays have consistent lengths."""
        expected_length: int = len(self.time_axis_seconds)

        if len(self.reference_samples) != expected_length:
            raise ValueError("Reference signal length mismatch")

        if self.quantized_samples is not None:
            if len(self.quantized_samples) != expected_length:
                raise ValueError("Quantized signal length mismatch")

        if self.step_index_per_sample is not None:
            if len(self.step_index_per_sample) != expected_length:
                raise ValueError("Step index length mismatch")

        return True

    def get_number_of_samples(self) -> int:
        """Return the number of samples in the container."""
        return len(self.time_axis_seconds)

    def get_uncovered_sample_count(self) -> int:
        """Return how many samples did not fall into any PJVS step."""
        if self.quantized_samples is None:
            return self.get_number_of_samples()
        return int(np.count_nonzero(np.isnan(self.quantized_samples)))
