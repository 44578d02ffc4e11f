"""
Subsampling Averager
====================

This module recovers the amplitude of a device signal digitized against
a PJVS staircase, using the PJVS step voltages produced by the
generator.

Method (strictly coherent, anything else fails):
1. Voltage limit = half of the most common absolute difference between
   consecutive PJVS voltages. Samples outside (-limit, limit] are
   replaced by NaN, removing samples influenced by the digitizer gain.
2. For every period of the PJVS waveform (the "envelope"):
   a. Split the samples into PJVS steps, one row per step.
   b. Subtract the PJVS voltage of every step.
   c. Remove Rs transient samples at the start and Re at the end of
      every step.
   d. Fold the remaining samples into single periods of the device
      signal and average them (NaN samples ignored).
   e. Amplitude from the RMS value: A = sqrt(mean(y_avg^2)) * sqrt(2).
   f. Amplitude from the peak of the amplitude spectrum.

Required integer relationships:
    fs / fstep      samples in one PJVS step
    fs / f_env      samples in one envelope period
    fstep / f_env   PJVS steps in one envelope period
    fs / f          samples in one period of the device signal
"""

import warnings
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..exceptions import InvalidParameter, InsufficientSamples


def _integer_ratio(numerator: float, denominator: float, description: str) -> int:
    """Return numerator/denominator as an int, or raise if it is not one."""
    ratio: float = numerator / denominator
    rounded: int = int(round(ratio))
    if rounded < 1 or not np.isclose(ratio, rounded, rtol=0.0, atol=1e-9 * max(1.0, abs(ratio))):
        raise InvalidParameter(
            f"Sampling is not coherent: {description} must be a positive integer. "
            f"Received: {ratio:g}"
        )
    return rounded


def compute_amplitude_spectrum(
    signal: np.ndarray,
    sampling_frequency_hz: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the single-sided amplitude spectrum of a real signal.

    A sine of amplitude A placed exactly on a frequency bin shows up with
    height A; the DC bin shows the mean value.

    Returns:
        Tuple of (frequencies in Hz, amplitudes).
    """
    signal = np.asarray(signal, dtype=float)
    number_of_samples: int = len(signal)

    amplitudes: np.ndarray = np.abs(np.fft.rfft(signal)) / number_of_samples
    # Fold negative frequencies, except DC and (for even length) Nyquist
    if number_of_samples % 2 == 0:
        amplitudes[1:-1] *= 2.0
    else:
        amplitudes[1:] *= 2.0

    frequencies: np.ndarray = np.fft.rfftfreq(
        number_of_samples, d=1.0 / sampling_frequency_hz
    )
    return frequencies, amplitudes


def compute_voltage_limit(pjvs_voltages: np.ndarray) -> float:
    """
    Return half of the most common absolute difference of consecutive PJVS voltages.

    Ties of the most common value resolve to the smallest difference.
    """
    pjvs_voltages = np.asarray(pjvs_voltages, dtype=float)
    if pjvs_voltages.size < 2:
        raise InvalidParameter(
            "At least two PJVS voltages are needed to compute the voltage limit."
        )

    values, counts = np.unique(np.abs(np.diff(pjvs_voltages)), return_counts=True)
    return float(values[np.argmax(counts)]) / 2.0


@dataclass(frozen=True)
class SubsamplingConfiguration:
    """
    Parameters of the subsampling averaging.

    Attributes:
        sampling_frequency_hz: Sampling frequency of the record fs (Hz).
        signal_frequency_hz: Frequency of the device signal f (Hz).
        step_frequency_hz: Frequency of the PJVS steps fstep (Hz).
        envelope_frequency_hz: Frequency of the PJVS waveform (Hz).
        transient_start_samples: Samples Rs removed at the start of every step.
        transient_end_samples: Samples Re removed at the end of every step.
    """
    sampling_frequency_hz: float
    signal_frequency_hz: float
    step_frequency_hz: float
    envelope_frequency_hz: float
    transient_start_samples: int = 0
    transient_end_samples: int = 0

    def __post_init__(self) -> None:
        for name, value in (
            ("sampling_frequency_hz", self.sampling_frequency_hz),
            ("signal_frequency_hz", self.signal_frequency_hz),
            ("step_frequency_hz", self.step_frequency_hz),
            ("envelope_frequency_hz", self.envelope_frequency_hz)
        ):
            if not value > 0:
                raise InvalidParameter(
                    f"{name} must be greater than zero. Received: {value} Hz"
                )

        for name, value in (
            ("transient_start_samples", self.transient_start_samples),
            ("transient_end_samples", self.transient_end_samples)
        ):
            if value < 0 or int(value) != value:
                raise InvalidParameter(
                    f"{name} must be a non-negative integer. Received: {value}"
                )

        # Raises for non-coherent sampling
        _ = (
            self.samples_in_step,
            self.samples_in_envelope,
            self.steps_in_envelope,
            self.samples_in_signal_period
        )

    @property
    def samples_in_step(self) -> int:
        return _integer_ratio(
            self.sampling_frequency_hz, self.step_frequency_hz, "fs / fstep"
        )

    @property
    def samples_in_envelope(self) -> int:
        return _integer_ratio(
            self.sampling_frequency_hz, self.envelope_frequency_hz, "fs / f_envelope"
        )

    @property
    def steps_in_envelope(self) -> int:
        return _integer_ratio(
            self.step_frequency_hz, self.envelope_frequency_hz, "fstep / f_envelope"
        )

    @property
    def samples_in_signal_period(self) -> int:
        return _integer_ratio(
            self.sampling_frequency_hz, self.signal_frequency_hz, "fs / f"
        )


@dataclass
class SubsamplingResults:
    """
    Results of the subsampling averaging.

    Attributes:
        amplitudes_rms: Amplitude from the RMS value, one per envelope period.
        amplitudes_fft: Amplitude from the spectrum peak, one per envelope period.
        averaged_periods: Averaged single signal period, one row per envelope period.
        averaged_periods_std: Standard deviation of the averaged samples.
        time_axis_seconds: Time of the samples of one averaged period.
        voltage_limit_volts: Limit used to reject samples.
    """
    amplitudes_rms: np.ndarray
    amplitudes_fft: np.ndarray
    averaged_periods: np.ndarray
    averaged_periods_std: np.ndarray
    time_axis_seconds: np.ndarray
    voltage_limit_volts: float

    @property
    def number_of_envelope_periods(self) -> int:
        return len(self.amplitudes_rms)

    def get_mean_amplitude_rms(self) -> float:
        """Return the mean of the RMS amplitudes of all envelope periods."""
        return float(np.mean(self.amplitudes_rms))


class SubsamplingAverager:
    """
    Averages a device signal sampled against PJVS steps into one period.

    Attributes:
        configuration (SubsamplingConfiguration): Coherent sampling setup.
    """

    def __init__(self, configuration: SubsamplingConfiguration) -> None:
        """
        Initialize the averager.

        Raises:
            InsufficientSamples: If the transients to remove leave no sample
                in a PJVS step.
            InvalidParameter: If the samples left in the steps of one envelope
                period cannot be folded into whole signal periods.
        """
        self.configuration: SubsamplingConfiguration = configuration

        self.samples_in_step: int = configuration.samples_in_step
        self.samples_in_envelope: int = configuration.samples_in_envelope
        self.steps_in_envelope: int = configuration.steps_in_envelope
        self.samples_in_signal_period: int = configuration.samples_in_signal_period

        removed: int = int(
            configuration.transient_start_samples + configuration.transient_end_samples
        )
        if removed >= self.samples_in_step:
            raise InsufficientSamples(
                f"Not enough samples to be removed in PJVS step! "
                f"Rs: {configuration.transient_start_samples}, "
                f"Re: {configuration.transient_end_samples}, "
                f"samples in step: {self.samples_in_step}"
            )

        self.samples_kept_in_step: int = self.samples_in_step - removed
        if (self.samples_kept_in_step * self.steps_in_envelope) % self.samples_in_signal_period:
            raise InvalidParameter(
                f"Samples left in one envelope period "
                f"({self.samples_kept_in_step * self.steps_in_envelope}) are not a "
                f"multiple of the samples in one signal period "
                f"({self.samples_in_signal_period})."
            )

    def analyse(
        self,
        record: np.ndarray,
        pjvs_voltages: np.ndarray,
        verbose: bool = False
    ) -> SubsamplingResults:
        """
        Average the record and estimate the device signal amplitude.

        Args:
            record: Digitized samples, a whole number of envelope periods.
            pjvs_voltages: PJVS voltage of every step of one envelope period.
            verbose: If True, print intermediate information.

        Returns:
            SubsamplingResults with one amplitude pair per envelope period.
        """
        config = self.configuration
        record = np.asarray(record, dtype=float)
        pjvs_voltages = np.asarray(pjvs_voltages, dtype=float)

        if pjvs_voltages.size != self.steps_in_envelope:
            raise InvalidParameter(
                f"Expected {self.steps_in_envelope} PJVS voltages (steps in one "
                f"envelope period). Received: {pjvs_voltages.size}"
            )

        envelope_periods: int = _integer_ratio(
            record.size, self.samples_in_envelope, "record length / samples in envelope"
        )

        # ===== REJECT SAMPLES OUTSIDE THE VOLTAGE LIMIT =====
        limit: float = compute_voltage_limit(pjvs_voltages)
        useful_record: np.ndarray = record.copy()
        useful_record[~((record <= limit) & (record > -limit))] = np.nan

        amplitudes_rms: np.ndarray = np.zeros(envelope_periods)
        amplitudes_fft: np.ndarray = np.zeros(envelope_periods)
        averaged_periods: np.ndarray = np.zeros((envelope_periods, self.samples_in_signal_period))
        averaged_std: np.ndarray = np.zeros_like(averaged_periods)

        start: int = int(config.transient_start_samples)
        stop: int = self.samples_in_step - int(config.transient_end_samples)

        for period_index in range(envelope_periods):
            segment: np.ndarray = useful_record[
                period_index * self.samples_in_envelope:
                (period_index + 1) * self.samples_in_envelope
            ]

            # Every row holds the samples of one PJVS step
            steps: np.ndarray = segment.reshape(self.steps_in_envelope, self.samples_in_step)
            steps = steps - pjvs_voltages[:, np.newaxis]
            steps = steps[:, start:stop]

            # Every row holds one period of the device signal
            periods: np.ndarray = steps.reshape(-1, self.samples_in_signal_period)

            with warnings.catch_warnings():
                # Positions where every sample was rejected average to NaN
                warnings.simplefilter("ignore", category=RuntimeWarning)
                y_avg: np.ndarray = np.nanmean(periods, axis=0)
                y_std: np.ndarray = np.nanstd(periods, axis=0, ddof=1)

            averaged_periods[period_index] = y_avg
            averaged_std[period_index] = y_std

            amplitudes_rms[period_index] = np.sqrt(np.mean(y_avg ** 2)) * np.sqrt(2.0)
            _, spectrum = compute_amplitude_spectrum(y_avg, config.sampling_frequency_hz)
            amplitudes_fft[period_index] = np.max(spectrum)

        time_axis: np.ndarray = (
            np.arange(self.samples_in_signal_period) / config.sampling_frequency_hz
        )

        if verbose:
            all_steps: np.ndarray = record.reshape(-1, self.samples_in_step)
            all_steps = all_steps - np.tile(pjvs_voltages, envelope_periods)[:, np.newaxis]
            print("---")
            print("Subsampling averager information:")
            print(f"  Calculated limit: {limit:.7f}")
            print(f"  Mean of amplitudes from RMS value of limited samples: "
                  f"{np.mean(amplitudes_rms):.7f}")
            print(f"  RMS value of all samples: "
                  f"{np.sqrt(np.mean(all_steps ** 2)) * np.sqrt(2.0):.7f}")

        return SubsamplingResults(
            amplitudes_rms=amplitudes_rms,
            amplitudes_fft=amplitudes_fft,
            averaged_periods=averaged_periods,
            averaged_periods_std=averaged_std,
            time_axis_seconds=time_axis,
            voltage_limit_volts=limit
        )
