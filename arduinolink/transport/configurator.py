"""Open and configure serial devices in the order each platform requires.

USB-serial adapters commonly reset the attached microcontroller when the port
is opened, so every open is followed by a boot delay before the device can be
used. Windows must be configured before a handle is held; POSIX drivers drop
the configuration of a tty that nobody holds, so there the device is opened
first and configured afterwards.
"""

from __future__ import annotations

import io
import logging
import os
import subprocess
import time
from typing import TYPE_CHECKING, List

from ..address import DeviceAddress
from ..config import SerialConfig
from ..errors import (
    BlockingModeFailure,
    ConfigurationError,
    DeviceNotFound,
    DeviceOpenFailure,
    NotATerminal,
    Outcome,
    RegistrationNotConcrete,
)
from ..settings import PROTOCOL_NAME
from .handle import DeviceHandle

if TYPE_CHECKING:
    from ..platforms import Platform

_LOGGER = logging.getLogger(__name__)


def _open_native(path: str, mode: str) -> io.RawIOBase:
    if "b" not in mode:
        mode = f"{mode}b"
    return open(path, mode, buffering=0)


def _run_command(command: List[str], *, shell: bool = False) -> None:
    """Run a configuration command; its exit status is reported, not enforced."""

    _LOGGER.debug("Configuring device: %s", " ".join(command))
    try:
        result = subprocess.run(
            command, shell=shell, capture_output=True, text=True, check=False
        )
    except OSError as exc:
        _LOGGER.warning("Could not run %s: %s", command[0], exc)
        return
    if result.returncode != 0:
        _LOGGER.warning(
            "%s exited with status %s: %s",
            command[0],
            result.returncode,
            (result.stderr or "").strip(),
        )


def apply_windows(
    address: DeviceAddress,
    command: List[str],
    config: SerialConfig,
    mode: str = "r+b",
    *,
    suppress_errors: bool = False,
) -> Outcome[DeviceHandle]:
    # The port rejects configuration changes once a handle is held.
    _run_command(command, shell=True)
    try:
        raw = _open_native(address.native_path, mode)
    except OSError as exc:
        return Outcome.failure(
            DeviceOpenFailure(
                f'Unable to open device "{address.path}": {exc}', device=address.path
            )
        )
    try:
        time.sleep(config.boot_delay)
        # Unreliable on Windows, and missing before Python 3.12.
        set_blocking = getattr(os, "set_blocking", None)
        if set_blocking is None:
            _LOGGER.debug("Non-blocking mode is unavailable for %s", address.path)
        else:
            try:
                set_blocking(raw.fileno(), False)
            except OSError as exc:
                _LOGGER.debug("Ignoring non-blocking failure on %s: %s", address.path, exc)
    except BaseException:
        raw.close()
        raise
    return Outcome.success(DeviceHandle(raw, address, suppress_errors=suppress_errors))


def apply_posix(
    address: DeviceAddress,
    command: List[str],
    config: SerialConfig,
    mode: str = "r+b",
    *,
    suppress_errors: bool = False,
) -> Outcome[DeviceHandle]:
    try:
        raw = _open_native(address.native_path, mode)
    except OSError as exc:
        return Outcome.failure(
            DeviceOpenFailure(
                f'Unable to open device "{address.path}": {exc}', device=address.path
            )
        )
    try:
        time.sleep(config.boot_delay)
        # Our handle keeps the driver from resetting this configuration.
        _run_command(command)

        if not raw.isatty():
            raw.close()
            return Outcome.failure(
                NotATerminal(
                    f'Unable to open device "{address.path}": no TTY detected.',
                    device=address.path,
                )
            )

        try:
            os.set_blocking(raw.fileno(), False)
        except OSError as exc:
            raw.close()
            return Outcome.failure(
                BlockingModeFailure(
                    f'Unable to open device "{address.path}" in non-blocking mode: {exc}',
                    device=address.path,
                )
            )
    except BaseException:
        raw.close()
        raise
    return Outcome.success(DeviceHandle(raw, address, suppress_errors=suppress_errors))


class SerialConfigurator:
    """Resolve, configure and open devices for one platform."""

    def __init__(self, platform: "Platform", *, scheme: str = PROTOCOL_NAME) -> None:
        self.platform = platform
        self.scheme = scheme

    def build_command(
        self, address: DeviceAddress, config: SerialConfig, *, report_errors: bool = True
    ) -> List[str]:
        """Return the full configuration command for *address*.

        Raises :class:`ConfigurationError` for an invalid baud rate or parity
        when *report_errors* is set; otherwise the offending token is dropped.
        """

        def on_invalid(error: ConfigurationError) -> None:
            if report_errors:
                raise error
            _LOGGER.warning("%s", error)

        tokens = self.platform.plan_command(config, on_invalid, device=address.path)
        return self.platform.build_command(address, tokens)

    def open(
        self,
        path: str,
        config: SerialConfig,
        *,
        mode: str = "r+b",
        report_errors: bool = True,
    ) -> Outcome[DeviceHandle]:
        if not self.platform.concrete:
            return Outcome.failure(
                RegistrationNotConcrete(
                    f"No serial configurator is available for platform {self.platform.name!r}."
                )
            )

        address = self.platform.resolve_address(path, self.scheme)
        if not self.platform.device_exists(address):
            _LOGGER.debug("Device %s does not exist", address.path)
            return Outcome.failure(
                DeviceNotFound(
                    f'Unable to open device "{address.path}". The file does not exist!',
                    device=address.path,
                )
            )

        try:
            command = self.build_command(address, config, report_errors=report_errors)
        except ConfigurationError as exc:
            return Outcome.failure(exc)

        _LOGGER.info(
            "Opening %s on %s, waiting %.1fs for the device to boot",
            address.path,
            self.platform.name,
            config.boot_delay,
        )
        outcome = self.platform.apply_configuration(
            address, command, config, mode, suppress_errors=not report_errors
        )
        if not outcome.ok:
            _LOGGER.warning("%s", outcome.error)
        return outcome
