"""File-handle-like access to a configured serial device."""

from __future__ import annotations

import enum
import io
import logging
import os
import select
from typing import Optional

from ..address import DeviceAddress

_LOGGER = logging.getLogger(__name__)


class StreamOption(enum.IntEnum):
    BLOCKING = 1
    READ_BUFFER = 2
    WRITE_BUFFER = 3
    READ_TIMEOUT = 4


class DeviceHandle:
    """Owns one open native handle to a serial device.

    Reads follow the raw I/O convention: ``None`` means no data is available
    yet on a non-blocking handle, ``b""`` means the device reached end of
    stream. Instances are created by the configurator once the device has
    been opened and configured; a handle has exactly one owner and is not
    safe to share between threads.
    """

    def __init__(
        self,
        raw: io.RawIOBase,
        address: DeviceAddress,
        *,
        suppress_errors: bool = False,
    ) -> None:
        self._raw = raw
        self.address = address
        self.suppress_errors = suppress_errors
        self._eof = False
        self._read_timeout: Optional[float] = None

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<DeviceHandle {self.address.path} {state}>"

    def __enter__(self) -> "DeviceHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._raw.closed

    @property
    def eof(self) -> bool:
        return self._eof

    def fileno(self) -> int:
        return self._raw.fileno()

    def _usable(self, action: str) -> bool:
        if not self._raw.closed:
            return True
        if not self.suppress_errors:
            raise ValueError(f"Cannot {action} {self.address.path}: handle is closed")
        _LOGGER.warning("Cannot %s %s: handle is closed", action, self.address.path)
        return False

    def read(self, count: int) -> Optional[bytes]:
        if not self._usable("read from"):
            return None
        if self._read_timeout is not None and not self._wait_readable(self._read_timeout):
            return None
        try:
            data = self._raw.read(count)
        except OSError as exc:
            if not self.suppress_errors:
                raise
            _LOGGER.warning("Read from %s failed: %s", self.address.path, exc)
            return None
        if data == b"" and count > 0:
            self._eof = True
        return data

    def write(self, data: bytes) -> int:
        if not self._usable("write to"):
            return 0
        try:
            written = self._raw.write(data)
        except OSError as exc:
            if not self.suppress_errors:
                raise
            _LOGGER.warning("Write to %s failed: %s", self.address.path, exc)
            return 0
        # None signals a full output buffer on a non-blocking handle.
        return written or 0

    def flush(self) -> bool:
        if not self._usable("flush"):
            return False
        self._raw.flush()
        return True

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> bool:
        if not self._raw.seekable():
            return False
        self._raw.seek(offset, whence)
        return True

    def tell(self) -> int:
        """Return the stream position, or -1 when the device is not seekable."""

        if not self._raw.seekable():
            return -1
        return self._raw.tell()

    def truncate(self, size: int) -> bool:
        if not self._raw.seekable():
            return False
        self._raw.truncate(size)
        return True

    def stat(self) -> os.stat_result:
        return os.fstat(self.fileno())

    def set_blocking(self, blocking: bool) -> bool:
        set_blocking = getattr(os, "set_blocking", None)
        if set_blocking is None:
            _LOGGER.debug("Blocking mode cannot be changed on this platform")
            return False
        try:
            set_blocking(self.fileno(), blocking)
        except OSError as exc:
            _LOGGER.debug("Could not change blocking mode of %s: %s", self.address.path, exc)
            return False
        return True

    def set_option(self, option: StreamOption, arg1: int, arg2: int = 0) -> bool:
        """Apply a stream option.

        ``READ_TIMEOUT`` takes seconds in *arg1* and microseconds in *arg2*;
        the buffer options only accept a size of zero because the handle is
        always unbuffered.
        """

        if option == StreamOption.BLOCKING:
            return self.set_blocking(bool(arg1))
        if option == StreamOption.READ_TIMEOUT:
            timeout = arg1 + arg2 / 1_000_000
            self._read_timeout = timeout if timeout > 0 else None
            return True
        if option in (StreamOption.READ_BUFFER, StreamOption.WRITE_BUFFER):
            return arg2 == 0
        return False

    def close(self) -> None:
        if self._raw.closed:
            return
        self._raw.close()
        _LOGGER.debug("Closed %s", self.address.path)

    def _wait_readable(self, timeout: float) -> bool:
        if os.name != "posix":
            return True
        readable, _, _ = select.select([self._raw], [], [], timeout)
        return bool(readable)
