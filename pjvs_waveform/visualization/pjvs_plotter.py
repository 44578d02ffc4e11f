"""
PJVS Plotter
============

This module provides plotting functions for inspecting generated PJVS
waveforms.

Plots included:
1. Overview: reference waveform, step voltages, quantized samples and
   step changes
2. Quantized waveform only

Do not use the overview for large records, drawing one line per step
change takes a long time.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Tuple

from ..simulation.generator_runner import GeneratorResults


class PJVSPlotter:
    """
    Plotting utilities for PJVS waveform generation results.

    All methods are static to allow easy use without instantiation.
    """

    DEFAULT_SINGLE_PLOT_SIZE: Tuple[int, int] = (12, 6)

    @staticmethod
    def plot_step_overview(
        results: GeneratorResults,
        save_path: Optional[str] = None,
        show: bool = True
    ) -> plt.Figure:
        """
        Plot the reference waveform together with the PJVS steps.

        Args:
            results: Output of PJVSWaveformGenerator.run().
            save_path: If provided, save figure to this path.
            show: If True, call plt.show().

        Returns:
            The matplotlib figure.
        """
        grid = results.grid
        times: np.ndarray = results.sample_times
        y: np.ndarray = results.sample_values

        fig, ax = plt.subplots(figsize=PJVSPlotter.DEFAULT_SINGLE_PLOT_SIZE)

        ax.plot(times, results.reference_samples, '+-g',
                label='reference waveform at samples')
        ax.plot(grid.step_midpoints, results.step_voltages, 'or',
                markersize=10, linewidth=2, label='PJVS at middle of the step')
        ax.plot(times, y, 'x-b', label='PJVS at samples')

        # Samples at which a step switch happens (one-based sample numbers)
        switch_indices: np.ndarray = results.step_start_indices[:-1] - 1
        ax.plot(times[switch_indices], y[switch_indices], 'ok',
                markersize=6, linewidth=2, label='step switch at samples')

        y_limits = ax.get_ylim()
        ax.vlines(grid.boundaries, y_limits[0], y_limits[1],
                  colors='k', linestyles=':', label='time of a step change')
        ax.hlines(results.step_voltages, grid.step_starts, grid.step_ends,
                  colors='r', linestyles='-')
        ax.set_ylim(y_limits)

        ax.set_xlabel('t (s)')
        ax.set_ylabel('voltage (V)')
        ax.set_title('PJVS steps')
        ax.legend(loc='upper right', fontsize=9)
        ax.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Figure saved to:  {save_path}")

        if show:
            plt.show()

        return fig

    @staticmethod
    def plot_quantized_waveform(
        results: GeneratorResults,
        save_path: Optional[str] = None,
        show: bool = True
    ) -> plt.Figure:
        """Plot the sampled PJVS voltage against time."""
        fig, ax = plt.subplots(figsize=PJVSPlotter.DEFAULT_SINGLE_PLOT_SIZE)

        ax.plot(results.sample_times, results.sample_values, '-x')
        ax.set_xlabel('t (s)')
        ax.set_ylabel('sampled PJVS voltage (V)')
        ax.set_title('PJVS steps')
        ax.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Figure saved to:  {save_path}")

        if show:
            plt.show()

        return fig
