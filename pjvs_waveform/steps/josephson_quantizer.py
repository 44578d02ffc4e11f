"""
Josephson Quantizer Module
==========================

This module provides the quantizer of the PJVS step voltages.

A PJVS can only produce voltages that are integer multiples of the
voltage quantum given by the microwave drive frequency:

    VS = fm / KJ,    KJ = 2e / h   (Josephson constant, Hz/V)

For fm = 75 GHz the voltage quantum is about 155.09 uV.

The quantizer converts the representative voltage of every PJVS step
to the nearest producible voltage:
    n = round(U / VS)     (quantum number, integer)
    U_quantized = n * VS

Rounding policy: half away from zero, so that ties are resolved
deterministically and symmetrically for positive and negative voltages.
"""

from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np
from scipy import constants

from ..exceptions import InvalidParameter


# Josephson constant 2e/h (Hz/V), from the exact SI values of e and h
JOSEPHSON_CONSTANT_HZ_PER_VOLT: float = 2 * constants.e / constants.h


def compute_voltage_quantum(microwave_frequency_hz: float) -> float:
    """Return the voltage quantum VS = fm / KJ (V)."""
    return microwave_frequency_hz / JOSEPHSON_CONSTANT_HZ_PER_VOLT


def round_half_away_from_zero(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer, ties away from zero."""
    values = np.asarray(values, dtype=float)
    truncated: np.ndarray = np.trunc(values)
    # values - truncated is exact in floating point
    fraction: np.ndarray = values - truncated
    return truncated + np.where(np.abs(fraction) >= 0.5, np.sign(values), 0.0)


class AbstractQuantizer(ABC):
    """Abstract base class for step voltage quantizers."""

    @abstractmethod
    def quantize(self, step_voltages: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Quantize step voltages, returning (quantum numbers, voltages)."""
        pass

    @abstractmethod
    def get_voltage_quantum(self) -> float:
        """Return the smallest producible voltage increment."""
        pass


class JosephsonQuantizer(AbstractQuantizer):
    """
    Quantizer producing integer multiples of the Josephson voltage quantum.

    Attributes:
        microwave_frequency_hz (float): Microwave drive frequency fm (Hz).
        voltage_quantum_volts (float): VS = fm / KJ (V).
    """

    def __init__(self, microwave_frequency_hz: float = 75e9) -> None:
        """
        Initialize the quantizer.

        Args:
            microwave_frequency_hz: Microwave frequency driving the PJVS (Hz).

        Raises:
            InvalidParameter: If the microwave frequency is not positive.
        """
        if not microwave_frequency_hz > 0:
            raise InvalidParameter(
                f"Microwave frequency must be greater than zero. "
                f"Received: {microwave_frequency_hz} Hz"
            )

        self.microwave_frequency_hz: float = float(microwave_frequency_hz)
        self.voltage_quantum_volts: float = compute_voltage_quantum(
            self.microwave_frequency_hz
        )

    def quantum_numbers(self, step_voltages: np.ndarray) -> np.ndarray:
        """Return the quantum number of every step voltage, n = round(U / VS)."""
        return round_half_away_from_zero(
            np.asarray(step_voltages, dtype=float) / self.voltage_quantum_volts
        ).astype(np.int64)

    def quantize(self, step_voltages: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Quantize the representative voltages of the PJVS steps.

        Args:
            step_voltages: Representative voltage of every step (V).

        Returns:
            Tuple containing:
            - quantum_numbers: Integer quantum number of every step.
            - quantized_voltages: quantum_numbers * VS (V).
        """
        quantum_numbers: np.ndarray = self.quantum_numbers(step_voltages)
        quantized_voltages: np.ndarray = quantum_numbers * self.voltage_quantum_volts
        return quantum_numbers, quantized_voltages

    def get_voltage_quantum(self) -> float:
        """Return the voltage quantum VS (V)."""
        return self.voltage_quantum_volts
