"""Map logical device names onto platform device paths."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .settings import PROTOCOL_NAME

POSIX = "posix"
DARWIN = "darwin"
WINDOWS = "windows"

_COM_PORT = re.compile(r"^(?:com)?(\d+)$", re.IGNORECASE)
_DEV_PREFIX = "/dev/"
_WIN_DEVICE_PREFIX = "\\\\.\\"


@dataclass(frozen=True)
class DeviceAddress:
    """A logical device name and the path it resolves to."""

    name: str
    path: str
    native_path: str = ""

    def __post_init__(self) -> None:
        if not self.native_path:
            object.__setattr__(self, "native_path", self.path)

    def __str__(self) -> str:
        return self.path


def strip_scheme(path: str, scheme: str = PROTOCOL_NAME) -> str:
    prefix = f"{scheme}://"
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def resolve_address(path: str, platform: str, scheme: str = PROTOCOL_NAME) -> DeviceAddress:
    """Resolve *path* for *platform*.

    Never fails: names that do not look like a known device form are passed
    through unchanged and will fail later when the device is opened.
    """

    name = strip_scheme(path, scheme)

    if platform == WINDOWS:
        match = _COM_PORT.match(name)
        if match is None:
            return DeviceAddress(name=name, path=name)
        device = f"com{int(match.group(1))}"
        # COM ports above 9 are only reachable through the device namespace.
        return DeviceAddress(name=name, path=device, native_path=_WIN_DEVICE_PREFIX + device)

    if name.startswith(_DEV_PREFIX):
        return DeviceAddress(name=name, path=name)
    return DeviceAddress(name=name, path=_DEV_PREFIX + name)
