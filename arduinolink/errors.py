"""Error taxonomy and the open-attempt result type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ArduinoLinkError(Exception):
    """Base class for every failure raised by arduinolink."""

    def __init__(self, message: str, *, device: str = "") -> None:
        super().__init__(message)
        self.device = device


class RegistrationNotConcrete(ArduinoLinkError):
    """Registration was attempted on a platform without a configurator."""


class RegistrationFailure(ArduinoLinkError):
    """The scheme could not be bound."""


class DeviceNotFound(ArduinoLinkError):
    """The resolved device path does not exist."""


class DeviceOpenFailure(ArduinoLinkError):
    """The operating system refused to open the device."""


class NotATerminal(ArduinoLinkError):
    """The opened handle does not refer to a terminal device."""


class BlockingModeFailure(ArduinoLinkError):
    """The handle could not be switched to non-blocking mode."""


class ConfigurationError(ArduinoLinkError):
    """A communication parameter has no platform token."""

    def __init__(self, message: str, *, device: str = "", value: object = None) -> None:
        super().__init__(message, device=device)
        self.value = value


class InvalidBaudRate(ConfigurationError):
    pass


class InvalidParity(ConfigurationError):
    pass


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either the value produced by an operation or the error that stopped it."""

    value: Optional[T] = None
    error: Optional[ArduinoLinkError] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ArduinoLinkError) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self, *, report_errors: bool = True) -> Optional[T]:
        """Return the value, raising or returning ``None`` on failure.

        The ``report_errors`` flag mirrors the stream-open convention: a
        reported failure raises the typed error, a suppressed one collapses
        into the ``None`` sentinel.
        """

        if self.error is None:
            return self.value
        if report_errors:
            raise self.error
        return None
