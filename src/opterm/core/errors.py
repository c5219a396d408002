"""Error taxonomy for terminal control."""

from __future__ import annotations

from typing import Optional


class TerminalError(Exception):
    """Base class for all terminal control errors."""


class DeviceError(TerminalError):
    """
    OS-level terminal I/O failure.

    Fatal: once raised, the terminal configuration can no longer be
    trusted, so callers unwind, restore and exit.
    """

    def __init__(
        self,
        operation: str,
        errno: Optional[int] = None,
        strerror: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.errno = errno
        self.strerror = strerror
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.strerror:
            return f"{self.operation}: {self.strerror}"
        return self.operation

    @classmethod
    def from_exception(cls, operation: str, exc: BaseException) -> DeviceError:
        """Build from an OSError or termios.error (which carries (errno, msg) args)."""
        if isinstance(exc, OSError):
            return cls(operation, exc.errno, exc.strerror or str(exc))
        args = getattr(exc, "args", ())
        if len(args) >= 2 and isinstance(args[0], int):
            return cls(operation, args[0], str(args[1]))
        return cls(operation, None, str(exc) or type(exc).__name__)


class ProtocolError(TerminalError):
    """Malformed or incomplete cursor position report."""

    def __init__(self, message: str, data: bytes = b"") -> None:
        self.data = bytes(data)
        super().__init__(f"{message}: {self.data!r}" if data else message)


class EndOfStream(TerminalError):
    """The input device reported end of input."""
