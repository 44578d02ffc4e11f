"""Tests for the PJVS waveform generator: configuration, pipeline and results."""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from pjvs_waveform import (
    GeneratorConfiguration,
    InvalidParameter,
    PJVSWaveformGenerator,
    UnknownWaveformType,
    WaveformType,
    generate,
)
from pjvs_waveform.steps.josephson_quantizer import compute_voltage_quantum
from pjvs_waveform.steps.step_index_collector import StepIndexCollector


EXPECTED_QUANTUM_NUMBERS = [1960, 5131, 6342, 5131, 1960, -1960, -5131, -6342, -5131, -1960]


def _reference_kwargs(**overrides) -> dict:
    """One second of a 1 Hz sine sampled at 1 kHz with 10 PJVS steps per period."""
    kwargs = dict(
        sampling_frequency_hz=1000.0,
        number_of_samples=1000,
        sample_times_seconds=[],
        signal_frequency_hz=1.0,
        amplitude_volts=1.0,
        phase_radians=0.0,
        step_frequency_hz=10.0,
        step_phase_radians=0.0,
        microwave_frequency_hz=75e9,
        waveform_type=WaveformType.SINE,
    )
    kwargs.update(overrides)
    return kwargs


def _run(**overrides):
    return PJVSWaveformGenerator(GeneratorConfiguration(**_reference_kwargs(**overrides))).run()


# -----------------------------------------------------------------------
# Reference scenario
# -----------------------------------------------------------------------


def test_reference_scenario_quantum_numbers() -> None:
    y, n, upjvs, upjvs_1period, starts, t = generate(**_reference_kwargs())

    assert len(y) == 1000
    assert len(t) == 1000
    assert n.tolist() == EXPECTED_QUANTUM_NUMBERS
    assert len(upjvs) == 10
    assert len(upjvs_1period) == 10
    assert starts[0] == 1
    assert starts[-1] == 1001


def test_double_amplitude_doubles_quantum_number() -> None:
    _, n, _, _, _, _ = generate(**_reference_kwargs(amplitude_volts=2.0))
    assert n[0] == 2 * 1960


def test_step_phase_exposes_extra_step() -> None:
    _, n, upjvs, _, _, _ = generate(**_reference_kwargs(step_phase_radians=np.pi))
    assert len(n) == 11
    assert len(upjvs) == 11


def test_amplitude_scaling_scales_quantum_numbers() -> None:
    base = _run().quantum_numbers
    scaled = _run(amplitude_volts=3.0).quantum_numbers
    # Rounding of the scaled value can differ by at most one quantum
    assert np.all(np.abs(scaled - 3 * base) <= 1)


# -----------------------------------------------------------------------
# Properties
# -----------------------------------------------------------------------


@pytest.mark.parametrize("waveform_type", list(WaveformType))
@pytest.mark.parametrize("phstep", [0.0, -0.3142, 2.5])
def test_output_properties_for_all_waveform_types(waveform_type, phstep) -> None:
    results = _run(
        waveform_type=waveform_type, step_phase_radians=phstep,
        signal_frequency_hz=1.3, step_frequency_hz=17.0,
    )
    vs = compute_voltage_quantum(75e9)

    assert len(results.sample_values) == 1000
    assert not np.any(np.isnan(results.sample_values))

    # Step voltages are exact multiples of the voltage quantum
    assert results.quantum_numbers.dtype == np.int64
    assert np.array_equal(results.pjvs_voltages, results.quantum_numbers * vs)
    assert np.array_equal(results.step_voltages, results.step_quantum_numbers * vs)

    # Sample values only take used step voltages
    assert set(np.unique(results.sample_values)) <= set(results.pjvs_voltages)

    starts = results.step_start_indices
    assert starts[0] == 1
    assert starts[-1] == 1001
    assert np.all(np.diff(starts) > 0)


def test_samples_between_switches_share_one_voltage() -> None:
    results = _run(step_phase_radians=0.7)
    for segment, voltage in zip(results.collected_steps.to_slices(), results.pjvs_voltages):
        assert np.all(results.sample_values[segment] == voltage)


def test_grid_boundaries_are_contiguous() -> None:
    grid = _run(step_phase_radians=1.1).grid
    assert np.array_equal(grid.step_ends[:-1], grid.step_starts[1:])
    assert np.allclose(np.diff(grid.boundaries), 0.1)


def test_generate_is_deterministic() -> None:
    first = generate(**_reference_kwargs(waveform_type=2, step_phase_radians=0.3))
    second = generate(**_reference_kwargs(waveform_type=2, step_phase_radians=0.3))
    for a, b in zip(first, second):
        assert np.array_equal(a, b)


# -----------------------------------------------------------------------
# Sample times
# -----------------------------------------------------------------------


def test_defaults() -> None:
    y, n, upjvs, _, starts, t = generate()
    assert len(y) == 200
    assert t[1] == pytest.approx(0.01)
    assert starts[-1] == 201
    assert len(n) == len(upjvs)

    config = GeneratorConfiguration()
    assert config.waveform_type is WaveformType.SINE
    assert config.step_phase_radians == -0.3142
    assert config.step_grid_specification.step_phase_radians == pytest.approx(2 * np.pi - 0.3142)


def test_explicit_irregular_times_take_precedence() -> None:
    rng = np.random.default_rng(seed=3)
    t = np.sort(rng.uniform(0.0, 2.0, size=300))
    y, _, _, _, starts, t_out = generate(
        sampling_frequency_hz=1000.0, number_of_samples=50, sample_times_seconds=t
    )
    assert len(y) == 300
    assert np.array_equal(t_out, t)
    assert starts[-1] == 301
    assert not np.any(np.isnan(y))


def test_unsorted_times_give_same_voltages_per_sample() -> None:
    rng = np.random.default_rng(seed=5)
    t = np.sort(rng.uniform(0.0, 1.5, size=120))
    permutation = rng.permutation(t.size)

    y_sorted = generate(sample_times_seconds=t, step_phase_radians=0.4)[0]
    y_shuffled = generate(sample_times_seconds=t[permutation], step_phase_radians=0.4)[0]
    assert np.array_equal(y_shuffled, y_sorted[permutation])


def test_negative_and_single_sample_times_are_covered() -> None:
    y = generate(sample_times_seconds=np.linspace(-1.0, 1.0, 201))[0]
    assert not np.any(np.isnan(y))

    y = generate(sample_times_seconds=np.linspace(5.0, 5.3, 31), step_phase_radians=0.0)[0]
    assert not np.any(np.isnan(y))

    y, n, _, _, starts, _ = generate(number_of_samples=1)
    assert len(y) == 1
    assert not np.isnan(y[0])
    assert len(n) == 1
    assert starts.tolist() == [1, 2]


@pytest.mark.parametrize(
    "fs, length, fstep",
    [(10.0, 7, 10.0), (7.0, 15, 7.0), (30.0, 61, 3.0), (13.0, 40, 13.0), (100.0, 301, 10.0)],
)
def test_last_sample_of_coherent_record_is_covered(fs, length, fstep) -> None:
    y, _, _, _, starts, _ = generate(
        sampling_frequency_hz=fs, number_of_samples=length,
        step_frequency_hz=fstep, step_phase_radians=0.0,
    )
    assert not np.any(np.isnan(y))
    assert starts[0] == 1
    assert starts[-1] == length + 1


def test_single_sample_on_rounded_step_change() -> None:
    config = GeneratorConfiguration(sample_times_seconds=[0.6], step_phase_radians=0.0)
    results = PJVSWaveformGenerator(config).run()

    assert not np.isnan(results.sample_values[0])
    summary = results.get_summary_dict()
    assert summary["uncovered_samples"] == 0
    assert summary["minimum_quantum_number"] == summary["maximum_quantum_number"]


def test_summary_without_used_steps() -> None:
    results = _run()
    empty = dataclasses.replace(
        results,
        used_steps=[],
        collected_steps=StepIndexCollector(len(results.sample_times)).collect([]),
    )
    summary = empty.get_summary_dict()
    assert summary["number_of_used_steps"] == 0
    assert summary["minimum_quantum_number"] is None
    assert summary["maximum_quantum_number"] is None


# -----------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------


@pytest.mark.parametrize(
    "overrides",
    [
        dict(number_of_samples=0),
        dict(number_of_samples=-10),
        dict(number_of_samples=10.5),
        dict(sampling_frequency_hz=0.0),
        dict(signal_frequency_hz=0.0),
        dict(step_frequency_hz=-10.0),
        dict(microwave_frequency_hz=0.0),
        dict(amplitude_volts=0.0),
        dict(amplitude_volts=-1.0),
        dict(sample_times_seconds=[0.0, np.inf]),
    ],
)
def test_invalid_parameters_are_rejected(overrides) -> None:
    with pytest.raises(InvalidParameter):
        generate(**_reference_kwargs(**overrides))


def test_invalid_parameter_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        GeneratorConfiguration(amplitude_volts=-2.0)


def test_sampling_frequency_ignored_with_explicit_times() -> None:
    config = GeneratorConfiguration(sampling_frequency_hz=-5.0, sample_times_seconds=[0.0, 0.1])
    assert config.sampling_frequency_hz is None
    assert config.number_of_samples is None


@pytest.mark.parametrize("waveform_type", [0, 5, "square"])
def test_unknown_waveform_type(waveform_type) -> None:
    with pytest.raises(UnknownWaveformType):
        generate(**_reference_kwargs(waveform_type=waveform_type))


# -----------------------------------------------------------------------
# Diagnostics and reporting
# -----------------------------------------------------------------------


def test_step_diagnostics_for_reference_scenario() -> None:
    diagnostics = _run().diagnostics

    assert diagnostics.number_of_samples == 1000
    assert diagnostics.number_of_computed_steps == 11
    assert diagnostics.number_of_used_steps == 10
    assert diagnostics.number_of_first_period_steps == 10
    assert diagnostics.total_assigned_samples == 1000
    assert diagnostics.samples_per_step[0] == 0
    assert diagnostics.expected_samples_per_step == pytest.approx(100.0)
    assert diagnostics.mean_samples_per_step == pytest.approx(100.0)
    assert diagnostics.samples_per_step_deviation == pytest.approx(0.0, abs=1e-9)
    assert diagnostics.half_sample_step_phase_radians == pytest.approx(0.01 * np.pi)
    assert "No. of used PJVS steps" in diagnostics.format_report()


def test_run_verbose_and_summary(capsys) -> None:
    results = PJVSWaveformGenerator(GeneratorConfiguration()).run(verbose=True)
    results.print_summary()
    out = capsys.readouterr().out
    assert "[6/6]" in out
    assert "PJVS WAVEFORM GENERATION SUMMARY" in out
    assert "All samples covered" in out

    summary = results.get_summary_dict()
    assert summary["number_of_samples"] == 200
    assert summary["uncovered_samples"] == 0


def test_warning_for_steps_shorter_than_sampling_period(capsys) -> None:
    GeneratorConfiguration(sampling_frequency_hz=10.0, step_frequency_hz=50.0)
    assert "WARNING" in capsys.readouterr().out
