"""Configuration helpers and shared constants for arduinolink."""

from __future__ import annotations

import logging

PROTOCOL_NAME = "arduino"
CONFIG_FILE = "arduinolink.json"
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

OPTION_BAUD_RATE = "baud_rate"
OPTION_PARITY = "parity"
OPTION_DATA_SIZE = "data_size"
OPTION_STOP_SIZE = "stop_size"
OPTION_COMMAND = "custom_command"
OPTION_USLEEP_S = "usleep_s"

DEFAULT_BAUD_RATE = 9600
DEFAULT_PARITY = -1
DEFAULT_DATA_SIZE = 8
DEFAULT_STOP_SIZE = 1
DEFAULT_BOOT_DELAY = 2.0
MIN_BOOT_DELAY = 1.0

DEFAULT_OPTIONS = {
    OPTION_BAUD_RATE: DEFAULT_BAUD_RATE,
    OPTION_PARITY: DEFAULT_PARITY,
    OPTION_DATA_SIZE: DEFAULT_DATA_SIZE,
    OPTION_STOP_SIZE: DEFAULT_STOP_SIZE,
    OPTION_COMMAND: None,
    OPTION_USLEEP_S: DEFAULT_BOOT_DELAY,
}


def configure_logging(
    *, level: int | str = LOG_LEVEL, fmt: str = LOG_FORMAT, force: bool = False
) -> None:
    """Set up root logging for arduinolink.

    *level* may be a number or a level name such as ``"DEBUG"``. Existing
    root handlers are left alone unless *force* is set.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = LOG_LEVEL

    if not force and logging.getLogger().handlers:
        return
    logging.basicConfig(level=level, format=fmt, force=force)
