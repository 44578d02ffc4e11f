"""
Exceptions
==========

Error conditions raised by the PJVS waveform simulation.

All errors derive from ValueError as well, since every one of them is
caused by caller input and nothing is retried internally.
"""


class PJVSWaveformError(Exception):
    """Base class for all PJVS waveform simulation errors."""


class InvalidParameter(PJVSWaveformError, ValueError):
    """A numeric parameter or the sample time sequence is invalid."""


class UnknownWaveformType(PJVSWaveformError, ValueError):
    """The requested reference waveform type is not one of the four known types."""


class InsufficientSamples(PJVSWaveformError, ValueError):
    """Too few samples in a PJVS step to remove the requested transients."""
