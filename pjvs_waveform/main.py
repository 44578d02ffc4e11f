"""
PJVS Waveform Simulation - Main Entry Point
===========================================

This file demonstrates how to use the components of the package to
simulate digitizer records of a PJVS staircase.

The generation workflow is:
1. Configure the sampling, the reference waveform and the PJVS steps
2. Compute the PJVS step grid
3. Calculate and quantize the step voltages
4. Assign the step voltages to the samples
5. Inspect diagnostics and plot the results

Usage:
    python -m pjvs_waveform.main --example basic

Or import and use programmatically:
    from pjvs_waveform.main import run_single_generation
"""

import argparse
from typing import Dict, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .signals.reference_waveform import WaveformType
from .simulation.generator_runner import (
    GeneratorConfiguration,
    GeneratorResults,
    PJVSWaveformGenerator
)
from .analysis.subsampling_averager import (
    SubsamplingAverager,
    SubsamplingConfiguration,
    SubsamplingResults
)
from .visualization.pjvs_plotter import PJVSPlotter


# ============================================================================
# GENERATION FUNCTIONS
# ============================================================================

def run_single_generation(
    sampling_frequency_hz: Optional[float] = 100.0,
    number_of_samples: Optional[int] = 200,
    sample_times_seconds: Optional[Sequence[float]] = None,
    signal_frequency_hz: float = 1.0,
    amplitude_volts: float = 1.0,
    phase_radians: float = 0.0,
    step_frequency_hz: float = 10.0,
    step_phase_radians: float = 0.0,
    microwave_frequency_hz: float = 75e9,
    waveform_type: WaveformType = WaveformType.SINE,
    plot_results: bool = True,
    verbose: bool = True
) -> GeneratorResults:
    """
    Generate one PJVS record and optionally report and plot it.

    Args:
        sampling_frequency_hz: Sampling rate of the digitizer (Hz).
        number_of_samples: Record length.
        sample_times_seconds: Explicit (possibly irregular) sample times.
            Takes precedence over the sampling rate and record length.
        signal_frequency_hz: Frequency of the reference waveform (Hz).
        amplitude_volts: Amplitude of the reference waveform (V).
        phase_radians: Phase of the reference waveform (rad).
        step_frequency_hz: Frequency of the PJVS steps (Hz).
        step_phase_radians: Phase of the PJVS steps (rad).
        microwave_frequency_hz: Microwave drive frequency (Hz).
        waveform_type: Reference waveform type.
        plot_results: If True, show the overview plot.
        verbose: If True, print progress and the summary.

    Returns:
        GeneratorResults of the run.
    """
    configuration = GeneratorConfiguration(
        sampling_frequency_hz=sampling_frequency_hz,
        number_of_samples=number_of_samples,
        sample_times_seconds=sample_times_seconds,
        signal_frequency_hz=signal_frequency_hz,
        amplitude_volts=amplitude_volts,
        phase_radians=phase_radians,
        step_frequency_hz=step_frequency_hz,
        step_phase_radians=step_phase_radians,
        microwave_frequency_hz=microwave_frequency_hz,
        waveform_type=waveform_type
    )

    results = PJVSWaveformGenerator(configuration).run(verbose=verbose)

    if verbose:
        results.print_summary()

    if plot_results:
        PJVSPlotter.plot_step_overview(results)

    return results


# ============================================================================
# EXAMPLES
# ============================================================================

def example_basic_generation() -> GeneratorResults:
    """Default sine waveform: 10 PJVS steps per period, 100 samples per step."""
    print("\n" + "=" * 70)
    print("   EXAMPLE: BASIC SINE GENERATION")
    print("=" * 70)

    return run_single_generation(
        sampling_frequency_hz=1000.0,
        number_of_samples=1000,
        step_phase_radians=0.0
    )


def example_waveform_types() -> Dict[str, GeneratorResults]:
    """Generate all four reference waveform types with the same steps."""
    print("\n" + "=" * 70)
    print("   EXAMPLE: ALL WAVEFORM TYPES")
    print("=" * 70)

    all_results: Dict[str, GeneratorResults] = {}
    fig, axes = plt.subplots(4, 1, figsize=(12, 10), sharex=True)

    for ax, waveform_type in zip(axes, WaveformType):
        results = run_single_generation(
            sampling_frequency_hz=1000.0,
            number_of_samples=2000,
            amplitude_volts=0.5,
            step_frequency_hz=20.0,
            waveform_type=waveform_type,
            plot_results=False,
            verbose=False
        )
        all_results[waveform_type.name.lower()] = results

        ax.plot(results.sample_times, results.reference_samples, 'g-',
                linewidth=0.8, label='reference')
        ax.step(results.sample_times, results.sample_values, 'b-',
                where='post', linewidth=0.8, label='PJVS')
        ax.set_title(f"{waveform_type.name.lower()}: "
                     f"{len(results.used_steps)} used steps", fontsize=11)
        ax.set_ylabel('voltage (V)')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='upper right', fontsize=9)

    axes[-1].set_xlabel('t (s)')
    plt.tight_layout()
    plt.show()

    return all_results


def example_noncoherent_sampling() -> GeneratorResults:
    """Irregular sample times with step grid not matching the sampling."""
    print("\n" + "=" * 70)
    print("   EXAMPLE: NONCOHERENT, IRREGULAR SAMPLING")
    print("=" * 70)

    rng = np.random.default_rng(seed=1)
    sample_times: np.ndarray = np.sort(rng.uniform(0.0, 2.0, size=300))

    return run_single_generation(
        sample_times_seconds=sample_times,
        signal_frequency_hz=1.3,
        step_frequency_hz=17.0,
        step_phase_radians=1.0
    )


def example_subsampling_average() -> SubsamplingResults:
    """
    Recover the amplitude of a small device signal from a coherent record.

    The PJVS alternates between zero and +/- one step voltage. Only the
    samples within half of that step voltage are kept for averaging.
    """
    print("\n" + "=" * 70)
    print("   EXAMPLE: SUBSAMPLING AVERAGE")
    print("=" * 70)

    configuration = SubsamplingConfiguration(
        sampling_frequency_hz=1000.0,
        signal_frequency_hz=200.0,
        step_frequency_hz=40.0,
        envelope_frequency_hz=10.0
    )
    step_voltage: float = 0.5
    pjvs_voltages: np.ndarray = np.array([0.0, step_voltage, 0.0, -step_voltage])

    samples_per_step: int = configuration.samples_in_step
    number_of_samples: int = 2 * configuration.samples_in_envelope
    time_axis: np.ndarray = np.arange(number_of_samples) / configuration.sampling_frequency_hz

    device_amplitude: float = 0.1
    device_signal: np.ndarray = device_amplitude * np.sin(
        2.0 * np.pi * configuration.signal_frequency_hz * time_axis
    )
    pjvs_per_sample: np.ndarray = np.tile(
        np.repeat(pjvs_voltages, samples_per_step), 2
    )

    results = SubsamplingAverager(configuration).analyse(
        device_signal + pjvs_per_sample,
        pjvs_voltages,
        verbose=True
    )
    print(f"  Amplitude (RMS): {results.amplitudes_rms}")
    print(f"  Amplitude (FFT): {results.amplitudes_fft}")
    print(f"  True amplitude:  {device_amplitude}")

    return results


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description='PJVS waveform simulation examples'
    )
    parser.add_argument(
        '--example',
        type=str,
        choices=['basic', 'types', 'noncoherent', 'subsampling', 'all'],
        default='basic',
        help='Which example to run (default: basic)'
    )

    args = parser.parse_args(argv)

    if args.example in ('basic', 'all'):
        example_basic_generation()
    if args.example in ('types', 'all'):
        example_waveform_types()
    if args.example in ('noncoherent', 'all'):
        example_noncoherent_sampling()
    if args.example in ('subsampling', 'all'):
        example_subsampling_average()


if __name__ == "__main__":
    main()
