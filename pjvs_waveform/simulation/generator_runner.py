"""
Generator Runner
================

This module provides the configuration and orchestration of the PJVS
waveform generator.

The PJVSWaveformGenerator class runs the complete pipeline:
1. Sample time axis (TimeBase)
2. PJVS step grid (StepGrid)
3. Reference waveform and step voltages (reference evaluator)
4. Quantization to the Josephson voltage quantum (JosephsonQuantizer)
5. Assignment of step voltages to samples (SampleAssigner)
6. Step start indices and used step voltages (StepIndexCollector)

Every run recomputes everything from the configuration, so two runs of
the same configuration give bit-identical results.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Sequence, Tuple, Union

import numpy as np

from ..exceptions import InvalidParameter
from ..signals.time_base import TimeBase
from ..signals.signal_container import SignalContainer
from ..signals.reference_waveform import (
    WaveformType,
    WaveformSpecification,
    AbstractReferenceEvaluator,
    create_reference_evaluator
)
from ..steps.step_grid import StepGrid, StepGridSpecification
from ..steps.josephson_quantizer import JosephsonQuantizer
from ..steps.sample_assigner import SampleAssigner, SampleAssignment, UsedStep
from ..steps.step_index_collector import StepIndexCollector, CollectedSteps
from ..metrics.step_diagnostics import StepDiagnostics, compute_step_diagnostics


# Defaults used for every parameter left as None
DEFAULT_SAMPLING_FREQUENCY_HZ: float = 100.0
DEFAULT_NUMBER_OF_SAMPLES: int = 200
DEFAULT_SIGNAL_FREQUENCY_HZ: float = 1.0
DEFAULT_AMPLITUDE_VOLTS: float = 1.0
DEFAULT_PHASE_RADIANS: float = 0.0
DEFAULT_STEP_FREQUENCY_HZ: float = 10.0
DEFAULT_STEP_PHASE_RADIANS: float = -0.3142
DEFAULT_MICROWAVE_FREQUENCY_HZ: float = 75e9
DEFAULT_WAVEFORM_TYPE: WaveformType = WaveformType.SINE


@dataclass
class GeneratorConfiguration:
    """
    Configuration parameters of a PJVS waveform generation.

    Every parameter may be left as None, its default is then used.
    Either give sample_times_seconds, or keep it empty and give
    sampling_frequency_hz and number_of_samples. If both are given, the
    sample times take precedence and the other two are cleared.

    Attributes:
        sampling_frequency_hz: Frequency of the samples fs (Hz). Default 100.
        number_of_samples: Number of samples L (record length). Default 200.
        sample_times_seconds: Explicit time of every sample (s), may be
            irregular. An empty sequence counts as not given.
        signal_frequency_hz: Frequency of the reference waveform f (Hz). Default 1.
        amplitude_volts: Amplitude of the reference waveform A (V). Default 1.
        phase_radians: Phase of the reference waveform ph (rad). Default 0.
        step_frequency_hz: Frequency of the PJVS steps fstep (Hz). Default 10.
        step_phase_radians: Phase of the PJVS steps phstep (rad). Default -0.3142.
        microwave_frequency_hz: Microwave frequency fm (Hz). Default 75 GHz.
        waveform_type: Reference waveform type, a WaveformType, its numeric
            code (1: sine, 2: triangle, 3: sawtooth, 4: rectangular) or name.
            Default sine.

    Raises:
        InvalidParameter: For non-positive L, fs, f, fstep, fm or A, or an
            invalid sample time sequence.
        UnknownWaveformType: For a waveform type outside the four known ones.
    """
    # Sampling
    sampling_frequency_hz: Optional[float] = None
    number_of_samples: Optional[int] = None
    sample_times_seconds: Optional[Union[Sequence[float], np.ndarray]] = None

    # Reference waveform
    signal_frequency_hz: Optional[float] = None
    amplitude_volts: Optional[float] = None
    phase_radians: Optional[float] = None
    waveform_type: Optional[Union[WaveformType, int, str]] = None

    # PJVS steps
    step_frequency_hz: Optional[float] = None
    step_phase_radians: Optional[float] = None
    microwave_frequency_hz: Optional[float] = None

    # Derived parameters (built in __post_init__)
    waveform_specification: WaveformSpecification = field(init=False, repr=False)
    step_grid_specification: StepGridSpecification = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Resolve defaults and validate all parameters."""
        # ===== SAMPLING =====
        if self.sample_times_seconds is not None and np.size(self.sample_times_seconds) == 0:
            self.sample_times_seconds = None

        if self.sample_times_seconds is None:
            if self.sampling_frequency_hz is None:
                self.sampling_frequency_hz = DEFAULT_SAMPLING_FREQUENCY_HZ
            if self.number_of_samples is None:
                self.number_of_samples = DEFAULT_NUMBER_OF_SAMPLES
        else:
            self.sample_times_seconds = np.array(self.sample_times_seconds, dtype=float)
            self.sampling_frequency_hz = None
            self.number_of_samples = None

        # ===== REFERENCE WAVEFORM =====
        if self.signal_frequency_hz is None:
            self.signal_frequency_hz = DEFAULT_SIGNAL_FREQUENCY_HZ
        if self.amplitude_volts is None:
            self.amplitude_volts = DEFAULT_AMPLITUDE_VOLTS
        if self.phase_radians is None:
            self.phase_radians = DEFAULT_PHASE_RADIANS
        if self.waveform_type is None:
            self.waveform_type = DEFAULT_WAVEFORM_TYPE

        # ===== PJVS STEPS =====
        if self.step_frequency_hz is None:
            self.step_frequency_hz = DEFAULT_STEP_FREQUENCY_HZ
        if self.step_phase_radians is None:
            self.step_phase_radians = DEFAULT_STEP_PHASE_RADIANS
        if self.microwave_frequency_hz is None:
            self.microwave_frequency_hz = DEFAULT_MICROWAVE_FREQUENCY_HZ

        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters and build the specifications."""
        # Check sampling
        if self.sample_times_seconds is None:
            if not (np.isfinite(self.number_of_samples) and self.number_of_samples > 0):
                raise InvalidParameter(
                    f"Number of samples `L` must be greater than zero. "
                    f"Received: {self.number_of_samples}"
                )
            if float(self.number_of_samples) != int(self.number_of_samples):
                raise InvalidParameter(
                    f"Number of samples `L` must be an integer. "
                    f"Received: {self.number_of_samples}"
                )
            self.number_of_samples = int(self.number_of_samples)

            if not self.sampling_frequency_hz > 0:
                raise InvalidParameter(
                    f"Frequency of the samples `fs` must be greater than zero. "
                    f"Received: {self.sampling_frequency_hz} Hz"
                )
        else:
            if self.sample_times_seconds.ndim != 1:
                raise InvalidParameter(
                    f"Time of samples `t` must be a one-dimensional sequence. "
                    f"Received an array of shape {self.sample_times_seconds.shape}"
                )
            if not np.all(np.isfinite(self.sample_times_seconds)):
                raise InvalidParameter(
                    "Time of samples `t` must contain only finite values."
                )

        # Check frequencies
        for name, value in (
            ("f", self.signal_frequency_hz),
            ("fstep", self.step_frequency_hz),
            ("fm", self.microwave_frequency_hz)
        ):
            if not value > 0:
                raise InvalidParameter(
                    f"All frequencies (`fs`, `f`, `fstep`, `fm`) must be greater "
                    f"than zero. Received `{name}` = {value} Hz"
                )

        # The specifications check amplitude, phases and waveform type
        self.waveform_specification = WaveformSpecification(
            waveform_type=self.waveform_type,
            frequency_hz=float(self.signal_frequency_hz),
            amplitude_volts=float(self.amplitude_volts),
            phase_radians=float(self.phase_radians)
        )
        self.waveform_type = self.waveform_specification.waveform_type

        self.step_grid_specification = StepGridSpecification(
            step_frequency_hz=float(self.step_frequency_hz),
            step_phase_radians=float(self.step_phase_radians),
            microwave_frequency_hz=float(self.microwave_frequency_hz)
        )

        # Warn about steps shorter than the sampling period
        if (
            self.sampling_frequency_hz is not None
            and self.step_frequency_hz > self.sampling_frequency_hz
        ):
            print(
                f"WARNING: Step frequency ({self.step_frequency_hz} Hz) is above "
                f"the sampling frequency ({self.sampling_frequency_hz} Hz). "
                f"Some PJVS steps will not contain any sample."
            )

    def get_summary_dict(self) -> Dict[str, Any]:
        """Return a dictionary summary of the configuration."""
        return {
            "sampling_frequency_hz": self.sampling_frequency_hz,
            "number_of_samples": self.number_of_samples,
            "explicit_sample_times": self.sample_times_seconds is not None,
            "signal_frequency_hz": self.signal_frequency_hz,
            "amplitude_volts": self.amplitude_volts,
            "phase_radians": self.waveform_specification.phase_radians,
            "waveform_type": self.waveform_type.name.lower(),
            "step_frequency_hz": self.step_frequency_hz,
            "step_phase_radians": self.step_grid_specification.step_phase_radians,
            "microwave_frequency_hz": self.microwave_frequency_hz,
            "voltage_quantum_volts": self.step_grid_specification.voltage_quantum_volts
        }


@dataclass
class GeneratorResults:
    """
    Container for all outputs of a PJVS waveform generation.

    Attributes:
        configuration: The GeneratorConfiguration used for this run.
        signals: SignalContainer with times, reference and quantized samples.
        grid: The PJVS step grid.
        step_reference_voltages: Representative (unquantized) voltage of
            every step of the grid.
        step_quantum_numbers: Quantum number of every step of the grid.
        step_voltages: Quantized voltage of every step of the grid.
        used_steps: The steps containing at least one sample.
        collected_steps: Step start indices and voltages of the used steps.
        diagnostics: Per-step diagnostics of the record.
    """
    configuration: GeneratorConfiguration
    signals: SignalContainer
    grid: StepGrid
    step_reference_voltages: np.ndarray
    step_quantum_numbers: np.ndarray
    step_voltages: np.ndarray
    used_steps: List[UsedStep]
    collected_steps: CollectedSteps
    diagnostics: StepDiagnostics

    @property
    def sample_values(self) -> np.ndarray:
        """Samples of the quantized reference waveform y (V)."""
        return self.signals.quantized_samples

    @property
    def sample_times(self) -> np.ndarray:
        """Time of every sample (s)."""
        return self.signals.time_axis_seconds

    @property
    def reference_samples(self) -> np.ndarray:
        """The unquantized reference waveform at the sample times (V)."""
        return self.signals.reference_samples

    @property
    def quantum_numbers(self) -> np.ndarray:
        """Quantum numbers of the used PJVS steps n."""
        return self.collected_steps.quantum_numbers

    @property
    def pjvs_voltages(self) -> np.ndarray:
        """PJVS voltages of the used steps Upjvs (V)."""
        return self.collected_steps.pjvs_voltages

    @property
    def pjvs_voltages_first_period(self) -> np.ndarray:
        """PJVS voltages of the used steps in the first reference period (V)."""
        return self.collected_steps.pjvs_voltages_first_period

    @property
    def step_start_indices(self) -> np.ndarray:
        """One-based sample numbers of the step switches, 1 .. L + 1."""
        return self.collected_steps.step_start_indices

    def as_tuple(self) -> Tuple[np.ndarray, ...]:
        """Return (y, n, Upjvs, Upjvs1period, step_start_indices, sample_times)."""
        return (
            self.sample_values,
            self.quantum_numbers,
            self.pjvs_voltages,
            self.pjvs_voltages_first_period,
            self.step_start_indices,
            self.sample_times
        )

    def print_summary(self) -> None:
        """Print a formatted summary of the generation results."""
        summary: Dict[str, Any] = self.configuration.get_summary_dict()

        print("\n" + "=" * 70)
        print("PJVS WAVEFORM GENERATION SUMMARY")
        print("=" * 70)

        print("\n--- Configuration ---")
        print(f"  Waveform Type:           {summary['waveform_type']}")
        print(f"  Signal Frequency:        {summary['signal_frequency_hz']:g} Hz")
        print(f"  Amplitude:               {summary['amplitude_volts']:g} V")
        print(f"  Phase:                   {summary['phase_radians']:.4f} rad")
        print(f"  Step Frequency:          {summary['step_frequency_hz']:g} Hz")
        print(f"  Step Phase:              {summary['step_phase_radians']:.4f} rad")
        print(f"  Microwave Frequency:     {summary['microwave_frequency_hz'] / 1e9:.3f} GHz")
        if summary['explicit_sample_times']:
            print(f"  Sample Times:            explicit ({len(self.sample_times)} samples)")
        else:
            print(f"  Sampling Frequency:      {summary['sampling_frequency_hz']:g} Hz")
            print(f"  Number of Samples:       {summary['number_of_samples']}")

        print("\n--- Steps ---")
        print(self.diagnostics.format_report())

        print("\n--- Status ---")
        uncovered: int = self.signals.get_uncovered_sample_count()
        if uncovered:
            print(f"  WARNING: {uncovered} samples are not covered by any PJVS step!")
        else:
            print("  All samples covered by PJVS steps")

        print("\n" + "=" * 70)

    def get_summary_dict(self) -> Dict[str, Any]:
        """
        Return the main results as a dictionary.

        The quantum number extremes are None when no step holds a sample.
        """
        quantum_numbers: np.ndarray = self.quantum_numbers
        has_steps: bool = quantum_numbers.size > 0

        return {
            "number_of_samples": len(self.sample_times),
            "number_of_computed_steps": self.grid.number_of_steps,
            "number_of_used_steps": len(self.used_steps),
            "number_of_first_period_steps": len(self.pjvs_voltages_first_period),
            "voltage_quantum_volts": self.diagnostics.voltage_quantum_volts,
            "minimum_quantum_number": int(np.min(quantum_numbers)) if has_steps else None,
            "maximum_quantum_number": int(np.max(quantum_numbers)) if has_steps else None,
            "uncovered_samples": self.signals.get_uncovered_sample_count()
        }


class PJVSWaveformGenerator:
    """
    Main orchestrator of the PJVS waveform generation.

    Usage:
        config = GeneratorConfiguration(
            sampling_frequency_hz=1000.0,
            number_of_samples=1000,
            step_frequency_hz=10.0,
            step_phase_radians=0.0
        )
        generator = PJVSWaveformGenerator(config)
        results = generator.run()
        results.print_summary()

    Attributes:
        configuration: The GeneratorConfiguration of this generator.
        time_base: The sample time axis.
        reference_evaluator: Evaluator of the reference waveform.
        quantizer: The Josephson quantizer.
    """

    def __init__(self, configuration: GeneratorConfiguration) -> None:
        """
        Initialize the generator with a configuration.

        Args:
            configuration: GeneratorConfiguration with all parameters.
        """
        self.configuration: GeneratorConfiguration = configuration

        # ===== CREATE TIME BASE =====
        self.time_base: TimeBase = TimeBase(
            sampling_frequency_hz=configuration.sampling_frequency_hz,
            number_of_samples=configuration.number_of_samples,
            sample_times_seconds=configuration.sample_times_seconds
        )

        # ===== CREATE REFERENCE EVALUATOR =====
        self.reference_evaluator: AbstractReferenceEvaluator = create_reference_evaluator(
            configuration.waveform_specification
        )

        # ===== CREATE QUANTIZER =====
        self.quantizer: JosephsonQuantizer = JosephsonQuantizer(
            microwave_frequency_hz=configuration.microwave_frequency_hz
        )

    def run(self, verbose: bool = False) -> GeneratorResults:
        """
        Execute the complete generation.

        Args:
            verbose: If True, print progress messages.

        Returns:
            GeneratorResults containing all outputs.
        """
        config = self.configuration

        if verbose:
            print("\n" + "-" * 50)
            print(f"Generating PJVS waveform: "
                  f"{config.waveform_type.name.lower()}, "
                  f"f={config.signal_frequency_hz:g} Hz, "
                  f"fstep={config.step_frequency_hz:g} Hz")
            print("-" * 50)

        # ===== STEP 1: SAMPLE TIMES =====
        if verbose:
            print("  [1/6] Resolving sample times...")

        sample_times: np.ndarray = self.time_base.get_time_axis()

        # ===== STEP 2: STEP GRID =====
        if verbose:
            print("  [2/6] Computing PJVS step changes...")

        grid: StepGrid = StepGrid.from_sample_times(
            config.step_grid_specification,
            sample_times
        )

        # ===== STEP 3: REFERENCE WAVEFORM =====
        if verbose:
            print("  [3/6] Evaluating reference waveform...")

        reference_samples: np.ndarray = self.reference_evaluator.evaluate_samples(sample_times)
        step_reference_voltages: np.ndarray = self.reference_evaluator.evaluate_steps(
            grid.step_starts,
            grid.step_ends
        )

        # ===== STEP 4: QUANTIZATION =====
        if verbose:
            print("  [4/6] Quantizing PJVS step voltages...")

        step_quantum_numbers, step_voltages = self.quantizer.quantize(step_reference_voltages)

        # ===== STEP 5: SAMPLE ASSIGNMENT =====
        if verbose:
            print("  [5/6] Assigning step voltages to samples...")

        assignment: SampleAssignment = SampleAssigner(grid).assign(
            sample_times,
            step_quantum_numbers,
            step_voltages,
            config.waveform_specification.period_seconds
        )

        # ===== STEP 6: STEP INDICES =====
        if verbose:
            print("  [6/6] Collecting step start indices...")

        collected: CollectedSteps = StepIndexCollector(len(sample_times)).collect(
            assignment.used_steps
        )

        signals: SignalContainer = SignalContainer(
            time_axis_seconds=sample_times,
            reference_samples=reference_samples,
            quantized_samples=assignment.sample_voltages,
            step_index_per_sample=assignment.step_index_per_sample,
            sampling_frequency_hz=config.sampling_frequency_hz,
            signal_frequency_hz=config.signal_frequency_hz,
            step_frequency_hz=config.step_frequency_hz
        )
        signals.validate()

        results: GeneratorResults = GeneratorResults(
            configuration=config,
            signals=signals,
            grid=grid,
            step_reference_voltages=step_reference_voltages,
            step_quantum_numbers=step_quantum_numbers,
            step_voltages=step_voltages,
            used_steps=assignment.used_steps,
            collected_steps=collected,
            diagnostics=compute_step_diagnostics(self.time_base, grid, assignment)
        )

        if verbose:
            print(f"  Generation complete! {len(results.used_steps)} PJVS steps used "
                  f"out of {grid.number_of_steps}")

        return results


def generate(
    sampling_frequency_hz: Optional[float] = None,
    number_of_samples: Optional[int] = None,
    sample_times_seconds: Optional[Union[Sequence[float], np.ndarray]] = None,
    signal_frequency_hz: Optional[float] = None,
    amplitude_volts: Optional[float] = None,
    phase_radians: Optional[float] = None,
    step_frequency_hz: Optional[float] = None,
    step_phase_radians: Optional[float] = None,
    microwave_frequency_hz: Optional[float] = None,
    waveform_type: Optional[Union[WaveformType, int, str]] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Simulate the sampled PJVS waveform approximating a reference waveform.

    Every argument is optional, see GeneratorConfiguration for defaults.

    Returns:
        Tuple containing:
        - y: Samples of the quantized reference waveform (V).
        - n: Quantum numbers of the used PJVS steps.
        - Upjvs: PJVS voltages of the used PJVS steps (V).
        - Upjvs1period: PJVS voltages of the used steps in the first
          period of the reference waveform (V).
        - step_start_indices: One-based sample numbers of the step
          switches; a switch happens before or at that sample. Starts
          with 1 and ends with L + 1.
        - sample_times: Time of every sample of y (s).

    Example:
        y, n, Upjvs, Upjvs1period, starts, t = generate()
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
    return PJVSWaveformGenerator(configuration).run(verbose=False).as_tuple()
