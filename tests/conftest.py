"""Shared fakes: scripted byte feeds and an in-memory termios device."""

import copy
import termios
from collections import deque
from typing import Optional

import pytest

from opterm.config import TerminalConfig
from opterm.core.errors import EndOfStream
from opterm.terminal.session import RawModeSession


class ScriptedSource:
    """
    ByteSource fed from a script.

    Each script item is a bytes chunk or None, which plays as one read
    timeout. An exhausted script keeps timing out, or reports end of
    input when eof=True.
    """

    def __init__(self, *script: Optional[bytes], eof: bool = False) -> None:
        self._script = deque(script)
        self.eof = eof
        self.consumed = 0
        self.reads = 0

    def read(self, max_bytes: int, timeout: float) -> bytes:
        self.reads += 1
        if not self._script:
            if self.eof:
                raise EndOfStream("end of script")
            return b""
        item = self._script.popleft()
        if item is None:
            return b""
        chunk, rest = item[:max_bytes], item[max_bytes:]
        if rest:
            self._script.appendleft(rest)
        self.consumed += len(chunk)
        return chunk

    def feed(self, *script: Optional[bytes]) -> None:
        self._script.extend(script)

    @property
    def remaining(self) -> bytes:
        return b"".join(item for item in self._script if item)


class RecordingSink:
    """ByteSink that keeps every write separately."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []

    def write_all(self, data: bytes) -> None:
        self.writes.append(bytes(data))

    @property
    def output(self) -> bytes:
        return b"".join(self.writes)


class FakeTerminal(ScriptedSource, RecordingSink):
    """Both ends of a terminal stream."""

    def __init__(self, *script: Optional[bytes], eof: bool = False) -> None:
        ScriptedSource.__init__(self, *script, eof=eof)
        RecordingSink.__init__(self)


def cooked_attrs() -> list:
    """Typical line-buffered, echoing terminal configuration."""
    cc = [b"\x00"] * termios.NCCS
    cc[termios.VMIN] = b"\x01"
    cc[termios.VTIME] = b"\x00"
    return [
        termios.BRKINT | termios.ICRNL | termios.IXON,
        termios.OPOST | termios.ONLCR,
        termios.CS7 | termios.CREAD,
        termios.ECHO | termios.ECHOE | termios.ICANON | termios.ISIG | termios.IEXTEN,
        termios.B38400,
        termios.B38400,
        cc,
    ]


class FakeTermios:
    """In-memory stand-in for the termios module's get/set calls."""

    error = termios.error

    def __init__(self, attrs: Optional[list] = None, fail_get: bool = False, fail_sets: int = 0) -> None:
        self.attrs = attrs if attrs is not None else cooked_attrs()
        self.fail_get = fail_get
        self.fail_sets = fail_sets
        self.set_calls: list[tuple[int, int, list]] = []

    def tcgetattr(self, fd: int) -> list:
        if self.fail_get:
            raise termios.error(25, "Inappropriate ioctl for device")
        return copy.deepcopy(self.attrs)

    def tcsetattr(self, fd: int, when: int, attrs: list) -> None:
        self.set_calls.append((fd, when, copy.deepcopy(attrs)))
        if self.fail_sets:
            self.fail_sets -= 1
            raise termios.error(5, "Input/output error")
        self.attrs = copy.deepcopy(attrs)


@pytest.fixture
def config() -> TerminalConfig:
    return TerminalConfig()


@pytest.fixture
def device() -> FakeTermios:
    return FakeTermios()


@pytest.fixture
def session(device: FakeTermios, config: TerminalConfig):
    s = RawModeSession(0, config, backend=device, handle_signals=False)
    yield s
    s.exit()
