"""Tests for the assignment of samples to PJVS steps and the step index collection."""

from __future__ import annotations

import numpy as np

from pjvs_waveform.steps.step_grid import StepGrid, StepGridSpecification
from pjvs_waveform.steps.sample_assigner import SampleAssigner, UsedStep
from pjvs_waveform.steps.step_index_collector import StepIndexCollector


def _unit_grid() -> StepGrid:
    """Three steps [0,1), [1,2), [2,3)."""
    return StepGrid(StepGridSpecification(step_frequency_hz=1.0), np.array([0.0, 1.0, 2.0, 3.0]))


def _used(step_index: int, first: int, in_first_period: bool = True) -> UsedStep:
    return UsedStep(
        step_index=step_index,
        first_sample_index=first,
        sample_count=1,
        quantum_number=step_index,
        voltage=float(step_index),
        in_first_period=in_first_period,
    )


# -----------------------------------------------------------------------
# SampleAssigner
# -----------------------------------------------------------------------


def test_locate_samples_uses_half_open_intervals() -> None:
    assigner = SampleAssigner(_unit_grid())
    times = np.array([0.0, 0.5, 1.0, 2.999, 3.0, -0.1])
    assert np.array_equal(assigner.locate_samples(times), [0, 0, 1, 2, -1, -1])


def test_assign_gives_step_voltage_to_every_sample() -> None:
    assigner = SampleAssigner(_unit_grid())
    times = np.array([0.0, 0.5, 1.0, 2.999, 3.0])
    n = np.array([10, 20, 30])
    u = np.array([1.0, 2.0, 3.0])

    assignment = assigner.assign(times, n, u, reference_period_seconds=10.0)

    assert np.array_equal(assignment.sample_voltages[:4], [1.0, 1.0, 2.0, 3.0])
    # Outside of all steps
    assert np.isnan(assignment.sample_voltages[4])
    assert assignment.step_index_per_sample[4] == -1
    assert np.array_equal(assignment.samples_per_step, [2, 1, 1])
    assert [s.quantum_number for s in assignment.used_steps] == [10, 20, 30]


def test_steps_without_samples_are_not_used() -> None:
    assigner = SampleAssigner(_unit_grid())
    assignment = assigner.assign(
        np.array([0.1, 2.5]), np.array([1, 2, 3]), np.array([1.0, 2.0, 3.0]), 10.0
    )
    assert assignment.get_number_of_used_steps() == 2
    assert [s.step_index for s in assignment.used_steps] == [0, 2]
    assert np.array_equal(assignment.samples_per_step, [1, 0, 1])


def test_first_sample_index_for_unsorted_times() -> None:
    assigner = SampleAssigner(_unit_grid())
    assignment = assigner.assign(
        np.array([2.5, 0.9, 0.2, 2.1]), np.array([1, 2, 3]), np.array([1.0, 2.0, 3.0]), 10.0
    )
    first = {s.step_index: s.first_sample_index for s in assignment.used_steps}
    assert first == {0: 1, 2: 0}


def test_first_period_flag_relative_to_record_start() -> None:
    assigner = SampleAssigner(_unit_grid())
    assignment = assigner.assign(
        np.array([0.1, 1.2, 2.5]), np.array([1, 2, 3]), np.array([1.0, 2.0, 3.0]),
        reference_period_seconds=1.5,
    )
    assert [s.in_first_period for s in assignment.used_steps] == [True, True, False]


# -----------------------------------------------------------------------
# StepIndexCollector
# -----------------------------------------------------------------------


def test_collect_start_indices_are_one_based_and_closed() -> None:
    collector = StepIndexCollector(300)
    collected = collector.collect([_used(1, 0), _used(2, 100), _used(3, 250)])
    assert np.array_equal(collected.step_start_indices, [1, 101, 251, 301])


def test_collect_forces_record_start() -> None:
    collector = StepIndexCollector(10)
    starts = collector.collect_start_indices([_used(0, 4), _used(1, 7)])
    assert np.array_equal(starts, [1, 5, 8, 11])


def test_collect_without_used_steps() -> None:
    starts = StepIndexCollector(5).collect_start_indices([])
    assert np.array_equal(starts, [1, 6])


def test_collect_voltages_in_step_order() -> None:
    steps = [_used(1, 0, True), _used(2, 3, False), _used(3, 6, True)]
    collected = StepIndexCollector(9).collect(steps)
    assert np.array_equal(collected.quantum_numbers, [1, 2, 3])
    assert np.array_equal(collected.pjvs_voltages, [1.0, 2.0, 3.0])
    assert np.array_equal(collected.pjvs_voltages_first_period, [1.0, 3.0])


def test_to_slices_covers_the_record() -> None:
    collected = StepIndexCollector(300).collect([_used(1, 0), _used(2, 100), _used(3, 250)])
    slices = collected.to_slices()
    assert slices == [slice(0, 100), slice(100, 250), slice(250, 300)]
