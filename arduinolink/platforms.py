"""Platform selection for device resolution, planning and configuration."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

import serial.tools.list_ports

from .address import DARWIN, POSIX, WINDOWS, DeviceAddress, resolve_address
from .config import SerialConfig
from .errors import Outcome
from .planner import InvalidHandler, build_command, plan_command
from .settings import PROTOCOL_NAME
from .transport.configurator import apply_posix, apply_windows
from .transport.handle import DeviceHandle

GENERIC = "generic"

ApplyConfiguration = Callable[..., Outcome[DeviceHandle]]


def _path_exists(address: DeviceAddress) -> bool:
    return os.path.exists(address.path)


def _com_port_exists(address: DeviceAddress) -> bool:
    """Check COM ports against the port list; anything else against the filesystem."""

    name = address.path.lower()
    if name.startswith("com") and name[3:].isdigit():
        ports = {
            (getattr(info, "device", "") or "").lower()
            for info in serial.tools.list_ports.comports()
        }
        return name in ports
    return os.path.exists(address.path)


@dataclass(frozen=True)
class Platform:
    """The capabilities one host platform provides to the configurator."""

    name: str
    device_exists: Callable[[DeviceAddress], bool]
    apply_configuration: Optional[ApplyConfiguration] = None

    @property
    def concrete(self) -> bool:
        return self.apply_configuration is not None

    def resolve_address(self, path: str, scheme: str = PROTOCOL_NAME) -> DeviceAddress:
        return resolve_address(path, self.name, scheme)

    def plan_command(
        self,
        config: SerialConfig,
        on_invalid: Optional[InvalidHandler] = None,
        *,
        device: str = "",
    ) -> Iterator[str]:
        return plan_command(config, self.name, on_invalid, device=device)

    def build_command(self, address: DeviceAddress, tokens: Iterable[str]) -> List[str]:
        return build_command(address, tokens, self.name)


POSIX_PLATFORM = Platform(POSIX, _path_exists, apply_posix)
DARWIN_PLATFORM = Platform(DARWIN, _path_exists, apply_posix)
WINDOWS_PLATFORM = Platform(WINDOWS, _com_port_exists, apply_windows)
GENERIC_PLATFORM = Platform(GENERIC, _path_exists)


def detect_platform(system: Optional[str] = None) -> Platform:
    """Pick the platform for *system* (defaults to ``sys.platform``)."""

    plat = (system if system is not None else sys.platform).lower()
    if plat.startswith("win"):
        return WINDOWS_PLATFORM
    if plat.startswith("darwin"):
        return DARWIN_PLATFORM
    if any(
        plat.startswith(term)
        for term in ("linux", "cygwin", "freebsd", "netbsd", "openbsd", "bsd")
    ):
        return POSIX_PLATFORM
    if system is None and os.name == "posix":
        return POSIX_PLATFORM
    return GENERIC_PLATFORM
