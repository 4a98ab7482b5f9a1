"""Configuration helpers for arduinolink."""
from __future__ import annotations

import enum
import json
import logging
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from .errors import ConfigurationError
from .settings import (
    CONFIG_FILE,
    DEFAULT_BAUD_RATE,
    DEFAULT_BOOT_DELAY,
    DEFAULT_DATA_SIZE,
    DEFAULT_PARITY,
    DEFAULT_STOP_SIZE,
    MIN_BOOT_DELAY,
    OPTION_BAUD_RATE,
    OPTION_COMMAND,
    OPTION_DATA_SIZE,
    OPTION_PARITY,
    OPTION_STOP_SIZE,
    OPTION_USLEEP_S,
)

logger = logging.getLogger(__name__)

BAUD_RATES = (
    300,
    600,
    1200,
    2400,
    4800,
    9600,
    14400,
    19200,
    28800,
    31250,
    38400,
    57600,
    115200,
)


class Parity(enum.IntEnum):
    NONE = -1
    EVEN = 0
    ODD = 1


_PARITY_NAMES = {
    "none": Parity.NONE,
    "n": Parity.NONE,
    "even": Parity.EVEN,
    "e": Parity.EVEN,
    "odd": Parity.ODD,
    "o": Parity.ODD,
}


def _ensure_parent(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.debug("Could not create %s: %s", path.parent, exc)


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_parity(value: Any) -> Union[Parity, int]:
    """Map an option value onto :class:`Parity`; unknown integers pass through."""

    if isinstance(value, Parity):
        return value
    if isinstance(value, str) and value.strip().lower() in _PARITY_NAMES:
        return _PARITY_NAMES[value.strip().lower()]
    number = _coerce_int(value, DEFAULT_PARITY)
    try:
        return Parity(number)
    except ValueError:
        return number


def _coerce_command(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        try:
            return tuple(shlex.split(value))
        except ValueError as exc:
            raise ConfigurationError(
                f'Invalid custom command "{value}": {exc}.', value=value
            ) from exc
    if isinstance(value, Sequence):
        return tuple(str(part) for part in value)
    return (str(value),)


def clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


@dataclass
class SerialConfig:
    """Communication parameters for one open attempt.

    ``data_bits`` and ``stop_bits`` are kept as given and clamped when the
    command is planned; ``baud_rate`` and ``parity`` are validated there too.
    """

    baud_rate: int = DEFAULT_BAUD_RATE
    parity: Union[Parity, int] = Parity.NONE
    data_bits: int = DEFAULT_DATA_SIZE
    stop_bits: int = DEFAULT_STOP_SIZE
    custom_command: Optional[Tuple[str, ...]] = None
    boot_delay: float = field(default=DEFAULT_BOOT_DELAY)

    def __post_init__(self) -> None:
        self.boot_delay = max(MIN_BOOT_DELAY, abs(float(self.boot_delay)))
        if self.custom_command is not None:
            self.custom_command = tuple(self.custom_command)

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "SerialConfig":
        """Build a config from a stream option map, falling back to defaults.

        Raises :class:`ConfigurationError` when ``custom_command`` is a string
        that cannot be split into tokens.
        """

        options = dict(options or {})
        known = {
            OPTION_BAUD_RATE,
            OPTION_PARITY,
            OPTION_DATA_SIZE,
            OPTION_STOP_SIZE,
            OPTION_COMMAND,
            OPTION_USLEEP_S,
        }
        unknown = sorted(set(options) - known)
        if unknown:
            logger.debug("Ignoring unknown serial options: %s", ", ".join(unknown))

        return cls(
            baud_rate=_coerce_int(options.get(OPTION_BAUD_RATE), DEFAULT_BAUD_RATE),
            parity=_coerce_parity(options.get(OPTION_PARITY, DEFAULT_PARITY)),
            data_bits=_coerce_int(options.get(OPTION_DATA_SIZE), DEFAULT_DATA_SIZE),
            stop_bits=_coerce_int(options.get(OPTION_STOP_SIZE), DEFAULT_STOP_SIZE),
            custom_command=_coerce_command(options.get(OPTION_COMMAND)),
            boot_delay=_coerce_float(options.get(OPTION_USLEEP_S), DEFAULT_BOOT_DELAY),
        )

    def to_options(self) -> dict:
        """Return the option map equivalent of this config."""

        return {
            OPTION_BAUD_RATE: self.baud_rate,
            OPTION_PARITY: int(self.parity),
            OPTION_DATA_SIZE: self.data_bits,
            OPTION_STOP_SIZE: self.stop_bits,
            OPTION_COMMAND: list(self.custom_command) if self.custom_command is not None else None,
            OPTION_USLEEP_S: self.boot_delay,
        }

    def snapshot(self) -> "SerialConfig":
        return replace(self)


def load_config(path: str | Path = CONFIG_FILE) -> SerialConfig:
    """Load default serial options from *path* or return defaults on failure."""

    defaults = SerialConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return defaults

    try:
        raw = json.loads(cfg_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.error("Config file %s contains invalid JSON: %s", cfg_path, exc)
        return defaults
    except OSError as exc:
        logger.error("Could not read config file %s: %s", cfg_path, exc)
        return defaults

    if not isinstance(raw, dict):
        logger.error("Config file %s did not contain an object", cfg_path)
        return defaults

    try:
        return SerialConfig.from_options(raw)
    except ConfigurationError as exc:
        logger.error("Config file %s: %s", cfg_path, exc)
        return defaults


def save_config(config: SerialConfig, path: str | Path = CONFIG_FILE) -> None:
    """Persist *config* to *path*, logging errors without raising."""

    cfg_path = Path(path)
    _ensure_parent(cfg_path)
    try:
        cfg_path.write_text(json.dumps(config.to_options(), indent=4), encoding="utf-8")
    except OSError as exc:
        logger.error("Could not write config file %s: %s", cfg_path, exc)
