"""
Exceptions raised by PyDispersal.

Argument errors are plain ValueError (and pydantic.ValidationError, a
ValueError subclass, for invalid heatmap parameters). The classes below
cover the two conditions that are not argument errors.
"""


class GPUUnavailableError(RuntimeError):
    """
    No usable GPU compute device.

    Raised by ComputeDevice.acquire when Taichi cannot be initialised on a
    GPU arch, or when it silently fell back to the CPU arch and that arch is
    not accepted. The GPU density engine always catches it and falls back to
    the CPU engine.
    """


class ComputationCancelled(Exception):
    """Raised when a CancellationToken is triggered while a grid is computed."""
