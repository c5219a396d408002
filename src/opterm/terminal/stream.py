"""Byte-level terminal I/O behind small capability interfaces."""

from __future__ import annotations

import logging
import os
import select
from typing import Protocol, runtime_checkable

from opterm.core.errors import DeviceError, EndOfStream

logger = logging.getLogger(__name__)


@runtime_checkable
class ByteSource(Protocol):
    """Anything that can hand out input bytes with a bounded wait."""

    def read(self, max_bytes: int, timeout: float) -> bytes:
        """
        Read up to max_bytes, waiting at most timeout seconds.

        Returns b"" if nothing arrived in time. Raises EndOfStream at end
        of input and DeviceError on any other failure.
        """
        ...


@runtime_checkable
class ByteSink(Protocol):
    """Anything that accepts a complete output buffer in one write."""

    def write_all(self, data: bytes) -> None:
        """Write data in a single call; a short write is a DeviceError."""
        ...


class TerminalStream:
    """
    File-descriptor backed terminal stream.

    Uses os.read()/os.write() to bypass Python's I/O buffering, and
    select() for the bounded wait so a read never blocks forever on a
    silent terminal.
    """

    def __init__(self, in_fd: int, out_fd: int) -> None:
        self.in_fd = in_fd
        self.out_fd = out_fd

    def read(self, max_bytes: int, timeout: float) -> bytes:
        """Read up to max_bytes available bytes, or b"" after timeout."""
        try:
            ready, _, _ = select.select([self.in_fd], [], [], timeout)
        except (OSError, ValueError) as e:
            raise DeviceError.from_exception("select", e) from e
        if not ready:
            return b""

        try:
            data = os.read(self.in_fd, max_bytes)
        except BlockingIOError:
            return b""
        except OSError as e:
            raise DeviceError.from_exception("read", e) from e

        if not data:
            # Readable but empty: the other end is gone
            raise EndOfStream("end of input")
        return data

    def write_all(self, data: bytes) -> None:
        """Write the whole buffer with one os.write call."""
        if not data:
            return
        try:
            written = os.write(self.out_fd, data)
        except OSError as e:
            raise DeviceError.from_exception("write", e) from e
        if written != len(data):
            # Partial escape sequences would corrupt the terminal state
            logger.error("Short write: %d of %d bytes", written, len(data))
            raise DeviceError("write", None, f"short write ({written} of {len(data)} bytes)")
