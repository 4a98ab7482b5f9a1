"""Transport layer for configured serial devices."""

from .configurator import SerialConfigurator, apply_posix, apply_windows
from .handle import DeviceHandle, StreamOption

__all__ = [
    "DeviceHandle",
    "SerialConfigurator",
    "StreamOption",
    "apply_posix",
    "apply_windows",
]
