"""Tests for the sample time axis and the reference waveform evaluators."""

from __future__ import annotations

import numpy as np
import pytest

from pjvs_waveform.exceptions import InvalidParameter, UnknownWaveformType
from pjvs_waveform.signals.time_base import TimeBase
from pjvs_waveform.signals.reference_waveform import (
    WaveformType,
    WaveformSpecification,
    SineReferenceEvaluator,
    TriangleReferenceEvaluator,
    SawtoothReferenceEvaluator,
    RectangularReferenceEvaluator,
    create_reference_evaluator,
    wrap_phase,
)


def _spec(waveform_type=WaveformType.SINE, f=1.0, A=1.0, ph=0.0) -> WaveformSpecification:
    return WaveformSpecification(
        waveform_type=waveform_type, frequency_hz=f, amplitude_volts=A, phase_radians=ph
    )


# -----------------------------------------------------------------------
# TimeBase
# -----------------------------------------------------------------------


def test_time_base_regular_sampling() -> None:
    tb = TimeBase(sampling_frequency_hz=100.0, number_of_samples=5)
    assert not tb.is_explicit
    assert np.allclose(tb.get_time_axis(), [0.0, 0.01, 0.02, 0.03, 0.04])
    assert tb.get_mean_sampling_frequency() == 100.0


def test_time_base_explicit_times_take_precedence() -> None:
    t = [0.0, 0.1, 0.3, 0.35]
    tb = TimeBase(sampling_frequency_hz=100.0, number_of_samples=50, sample_times_seconds=t)
    assert tb.is_explicit
    assert tb.number_of_samples == 4
    assert tb.sampling_frequency_hz is None
    assert np.array_equal(tb.get_time_axis(), np.array(t))


def test_time_base_returns_copy() -> None:
    tb = TimeBase(sampling_frequency_hz=10.0, number_of_samples=3)
    axis = tb.get_time_axis()
    axis[0] = 99.0
    assert tb.get_time_axis()[0] == 0.0


def test_time_base_mean_sampling_frequency_of_irregular_times() -> None:
    tb = TimeBase(sample_times_seconds=[0.0, 0.5, 0.75])
    assert tb.get_mean_sampling_frequency() == pytest.approx((2.0 + 4.0) / 2.0)
    assert TimeBase(sample_times_seconds=[1.0]).get_mean_sampling_frequency() is None


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(sampling_frequency_hz=100.0, number_of_samples=0),
        dict(sampling_frequency_hz=100.0, number_of_samples=-3),
        dict(sampling_frequency_hz=0.0, number_of_samples=10),
        dict(sampling_frequency_hz=-1.0, number_of_samples=10),
        dict(sample_times_seconds=[]),
        dict(sample_times_seconds=[0.0, np.nan]),
        dict(sample_times_seconds=[[0.0, 1.0]]),
    ],
)
def test_time_base_rejects_invalid_input(kwargs) -> None:
    with pytest.raises(InvalidParameter):
        TimeBase(**kwargs)


# -----------------------------------------------------------------------
# Phase and waveform type
# -----------------------------------------------------------------------


def test_wrap_phase_into_zero_two_pi() -> None:
    assert wrap_phase(-0.3142) == pytest.approx(2 * np.pi - 0.3142)
    assert wrap_phase(7.0) == pytest.approx(7.0 - 2 * np.pi)
    assert wrap_phase(0.0) == 0.0
    assert wrap_phase(2 * np.pi) == 0.0
    assert _spec(ph=-np.pi / 2).phase_radians == pytest.approx(1.5 * np.pi)


@pytest.mark.parametrize(
    "value, expected",
    [
        (WaveformType.SAWTOOTH, WaveformType.SAWTOOTH),
        (1, WaveformType.SINE),
        (2, WaveformType.TRIANGLE),
        (np.int64(4), WaveformType.RECTANGULAR),
        ("triangle", WaveformType.TRIANGLE),
        (" Rectangular ", WaveformType.RECTANGULAR),
    ],
)
def test_waveform_type_parse(value, expected) -> None:
    assert WaveformType.parse(value) is expected


@pytest.mark.parametrize("value", [0, 5, "square", True, None, 2.5])
def test_waveform_type_parse_rejects_unknown(value) -> None:
    with pytest.raises(UnknownWaveformType):
        WaveformType.parse(value)


def test_specification_rejects_invalid_values() -> None:
    with pytest.raises(InvalidParameter):
        _spec(A=0.0)
    with pytest.raises(InvalidParameter):
        _spec(f=-1.0)
    with pytest.raises(InvalidParameter):
        _spec(ph=np.inf)
    with pytest.raises(UnknownWaveformType):
        _spec(waveform_type=7)


def test_create_reference_evaluator_dispatches_on_type() -> None:
    assert isinstance(create_reference_evaluator(_spec(1)), SineReferenceEvaluator)
    assert isinstance(create_reference_evaluator(_spec(2)), TriangleReferenceEvaluator)
    assert isinstance(create_reference_evaluator(_spec(3)), SawtoothReferenceEvaluator)
    assert isinstance(create_reference_evaluator(_spec(4)), RectangularReferenceEvaluator)


# -----------------------------------------------------------------------
# Sample values
# -----------------------------------------------------------------------


def test_sine_samples() -> None:
    ev = create_reference_evaluator(_spec(WaveformType.SINE, f=2.0, A=3.0, ph=0.5))
    t = np.array([0.0, 0.1, 0.37])
    assert np.allclose(ev.evaluate_samples(t), 3.0 * np.sin(4 * np.pi * t + 0.5))


def test_triangle_samples() -> None:
    ev = create_reference_evaluator(_spec(WaveformType.TRIANGLE, f=1.0, A=2.0))
    values = ev.evaluate_samples(np.array([0.0, 0.25, 0.5, 0.75]))
    assert np.allclose(values, [2.0, 0.0, -2.0, 0.0], atol=1e-12)


def test_sawtooth_samples_ignore_phase() -> None:
    t = np.array([0.0, 0.25, 0.75])
    ev = create_reference_evaluator(_spec(WaveformType.SAWTOOTH, f=1.0, A=2.0))
    ev_shifted = create_reference_evaluator(_spec(WaveformType.SAWTOOTH, f=1.0, A=2.0, ph=1.0))
    assert np.allclose(ev.evaluate_samples(t), [0.0, 1.0, -1.0])
    assert np.array_equal(ev.evaluate_samples(t), ev_shifted.evaluate_samples(t))


def test_rectangular_samples_have_unit_height() -> None:
    ev = create_reference_evaluator(_spec(WaveformType.RECTANGULAR, f=1.0, A=5.0))
    assert np.array_equal(ev.evaluate_samples(np.array([0.25, 0.75])), [1.0, -1.0])


# -----------------------------------------------------------------------
# Step voltages
# -----------------------------------------------------------------------


def test_sine_step_voltage_is_exact_mean() -> None:
    ev = create_reference_evaluator(_spec(WaveformType.SINE, f=1.7, A=1.3, ph=0.4))
    t1, t2 = 0.13, 0.21

    n = 20000
    h = (t2 - t1) / n
    midpoints = t1 + h * (np.arange(n) + 0.5)
    numerical_mean = np.mean(ev.evaluate_samples(midpoints))

    exact = ev.evaluate_steps(np.array([t1]), np.array([t2]))[0]
    assert exact == pytest.approx(numerical_mean, rel=1e-9, abs=1e-12)
    assert ev.uses_exact_step_average


@pytest.mark.parametrize(
    "waveform_type",
    [WaveformType.TRIANGLE, WaveformType.SAWTOOTH, WaveformType.RECTANGULAR],
)
def test_other_types_use_midpoint_value(waveform_type) -> None:
    ev = create_reference_evaluator(_spec(waveform_type, f=1.0, A=1.0, ph=0.3))
    starts = np.array([0.0, 0.1, 0.45])
    ends = np.array([0.1, 0.2, 0.55])
    assert not ev.uses_exact_step_average
    assert np.array_equal(
        ev.evaluate_steps(starts, ends),
        ev.evaluate_samples((ends - starts) / 2.0 + starts),
    )


def test_triangle_step_over_slope_change_keeps_midpoint_approximation() -> None:
    # The step is centred on the minimum of the triangle
    ev = create_reference_evaluator(_spec(WaveformType.TRIANGLE, f=1.0, A=1.0))
    t1, t2 = 0.4, 0.6
    step_value = ev.evaluate_steps(np.array([t1]), np.array([t2]))[0]

    true_mean = np.mean(ev.evaluate_samples(np.linspace(t1, t2, 20001)))
    assert step_value == pytest.approx(-1.0)
    assert true_mean == pytest.approx(-0.8, abs=1e-3)
