"""Translate a :class:`SerialConfig` into platform configuration tokens."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional

from .address import DARWIN, WINDOWS, DeviceAddress
from .config import BAUD_RATES, Parity, SerialConfig, clamp
from .errors import ConfigurationError, InvalidBaudRate, InvalidParity

InvalidHandler = Callable[[ConfigurationError], None]

# `mode` takes the leading two digits for the classic rates.
WINDOWS_BAUD_CODES = {
    rate: (int(str(rate)[:2]) if rate <= 19200 else rate) for rate in BAUD_RATES
}
POSIX_BAUD_CODES = {rate: rate for rate in BAUD_RATES}

POSIX_PARITY_TOKENS = {
    Parity.NONE: ("-parenb",),
    Parity.EVEN: ("parenb", "-parodd"),
    Parity.ODD: ("parenb", "parodd"),
}
WINDOWS_PARITY_TOKENS = {
    Parity.NONE: ("parity=n",),
    Parity.EVEN: ("parity=e",),
    Parity.ODD: ("parity=o",),
}

# Raw, non-echoing line discipline without modem control or flow control.
POSIX_DEFAULTS = (
    "clocal",
    "-crtscts",
    "-ixon",
    "-ixoff",
    "ignbrk",
    "-brkint",
    "-icrnl",
    "-imaxbel",
    "-opost",
    "-onlcr",
    "-isig",
    "-icanon",
    "-iexten",
    "-echo",
    "-echoe",
    "-echok",
    "-echoctl",
    "-echoke",
    "noflsh",
)
WINDOWS_DEFAULTS = (
    "to=on",
    "xon=off",
    "odsr=off",
    "octs=off",
    "dtr=on",
    "rts=on",
    "idsr=off",
)


def _raise(error: ConfigurationError) -> None:
    raise error


def _baud_token(rate: int, windows: bool) -> Optional[str]:
    if windows:
        code = WINDOWS_BAUD_CODES.get(rate)
        return None if code is None else f"baud={code}"
    code = POSIX_BAUD_CODES.get(rate)
    return None if code is None else str(code)


def _iter_tokens(
    config: SerialConfig, platform: str, device: str, on_invalid: InvalidHandler
) -> Iterator[str]:
    if config.custom_command is not None:
        yield from config.custom_command
        return

    windows = platform == WINDOWS

    token = _baud_token(config.baud_rate, windows)
    if token is None:
        on_invalid(
            InvalidBaudRate(
                f'Unable to open device "{device}": invalid baud rate option "{config.baud_rate}".',
                device=device,
                value=config.baud_rate,
            )
        )
    else:
        yield token

    table = WINDOWS_PARITY_TOKENS if windows else POSIX_PARITY_TOKENS
    try:
        parity_tokens = table[Parity(config.parity)]
    except ValueError:
        on_invalid(
            InvalidParity(
                f'Unable to open device "{device}": invalid parity option "{config.parity}".',
                device=device,
                value=config.parity,
            )
        )
    else:
        yield from parity_tokens

    data_bits = clamp(config.data_bits, 5, 8)
    yield f"data={data_bits}" if windows else f"cs{data_bits}"

    stop_bits = clamp(config.stop_bits, 1, 2)
    if windows:
        yield f"stop={stop_bits}"
    else:
        yield "cstopb" if stop_bits > 1 else "-cstopb"

    yield from WINDOWS_DEFAULTS if windows else POSIX_DEFAULTS


def plan_command(
    config: SerialConfig,
    platform: str,
    on_invalid: Optional[InvalidHandler] = None,
    *,
    device: str = "",
) -> Iterator[str]:
    """Return a single-use iterator over the configuration tokens.

    The config is copied up front, so later changes to *config* do not leak
    into a plan that is already being consumed. An invalid baud rate or
    parity is handed to *on_invalid*; when the handler returns, planning
    continues without that token. Without a handler the error is raised.
    """

    return _iter_tokens(config.snapshot(), platform, device, on_invalid or _raise)


def build_command(address: DeviceAddress, tokens: Iterable[str], platform: str) -> List[str]:
    """Prefix *tokens* with the platform tool invocation for *address*."""

    if platform == WINDOWS:
        return ["mode", address.path, *tokens]
    file_flag = "-f" if platform == DARWIN else "-F"
    return ["stty", file_flag, address.path, *tokens]
