"""
Compute backend management for PyDispersal.

Wraps Taichi runtime initialisation for the GPU density engine: acquiring a
device, detecting a silent fall back to the CPU arch, and rebooting the
runtime after a device loss.

Core Classes and Functions:
- ComputeDevice: acquire()/mark_lost() handle on the Taichi runtime
- gpu_available: capability probe used when the host does not say
- reboot: reset the Taichi runtime

Usage:
    from pydispersal.backend import ComputeDevice, gpu_available

    if gpu_available():
        device = ComputeDevice().acquire()
        print(device.arch_name)

    # Run the Taichi pipeline on Taichi's CPU arch (tests, CI)
    device = ComputeDevice(allow_cpu_arch=True).acquire()
"""

from .device import ComputeDevice, gpu_available, reboot

__all__ = [
    "ComputeDevice",
    "gpu_available",
    "reboot",
]
