"""arduinolink exposes USB-serial microcontrollers as file-like handles."""

from __future__ import annotations

from .address import DeviceAddress, resolve_address
from .config import BAUD_RATES, Parity, SerialConfig, load_config, save_config
from .errors import (
    ArduinoLinkError,
    BlockingModeFailure,
    ConfigurationError,
    DeviceNotFound,
    DeviceOpenFailure,
    InvalidBaudRate,
    InvalidParity,
    NotATerminal,
    Outcome,
    RegistrationFailure,
    RegistrationNotConcrete,
)
from .packing import byte_pack, byte_unpack
from .planner import build_command, plan_command
from .platforms import Platform, detect_platform
from .registry import (
    ProtocolRegistry,
    get_registry,
    init_registry,
    open_device,
    register,
    reset_registry,
)
from .settings import PROTOCOL_NAME, configure_logging
from .transport import DeviceHandle, SerialConfigurator, StreamOption

__all__ = [
    "ArduinoLinkError",
    "BAUD_RATES",
    "BlockingModeFailure",
    "ConfigurationError",
    "DeviceAddress",
    "DeviceHandle",
    "DeviceNotFound",
    "DeviceOpenFailure",
    "InvalidBaudRate",
    "InvalidParity",
    "NotATerminal",
    "Outcome",
    "PROTOCOL_NAME",
    "Parity",
    "Platform",
    "ProtocolRegistry",
    "RegistrationFailure",
    "RegistrationNotConcrete",
    "SerialConfig",
    "SerialConfigurator",
    "StreamOption",
    "build_command",
    "byte_pack",
    "byte_unpack",
    "configure_logging",
    "detect_platform",
    "get_registry",
    "init_registry",
    "load_config",
    "open_device",
    "plan_command",
    "register",
    "reset_registry",
    "resolve_address",
    "save_config",
]
