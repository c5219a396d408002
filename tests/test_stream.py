"""Tests for the file-descriptor stream, using pipes."""

import os

import pytest

from opterm.core.errors import DeviceError, EndOfStream
from opterm.terminal.stream import ByteSink, ByteSource, TerminalStream


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


class TestTerminalStream:
    """Tests for TerminalStream."""

    def test_satisfies_protocols(self, pipe) -> None:
        stream = TerminalStream(*pipe)
        assert isinstance(stream, ByteSource)
        assert isinstance(stream, ByteSink)

    def test_write_then_read(self, pipe) -> None:
        read_fd, write_fd = pipe
        stream = TerminalStream(read_fd, write_fd)
        stream.write_all(b"\x1b[24;80R")
        assert stream.read(3, 0.5) == b"\x1b[2"
        assert stream.read(32, 0.5) == b"4;80R"

    def test_read_timeout_returns_empty(self, pipe) -> None:
        stream = TerminalStream(*pipe)
        assert stream.read(1, 0.01) == b""

    def test_end_of_stream(self, pipe) -> None:
        read_fd, write_fd = pipe
        os.close(write_fd)
        stream = TerminalStream(read_fd, write_fd)
        with pytest.raises(EndOfStream):
            stream.read(1, 0.5)

    def test_write_failure(self, pipe) -> None:
        read_fd, write_fd = pipe
        os.close(read_fd)
        stream = TerminalStream(read_fd, write_fd)
        with pytest.raises(DeviceError) as exc_info:
            stream.write_all(b"x")
        assert exc_info.value.operation == "write"

    def test_short_write(self, pipe, monkeypatch) -> None:
        stream = TerminalStream(*pipe)
        monkeypatch.setattr(os, "write", lambda fd, data: len(data) - 1)
        with pytest.raises(DeviceError) as exc_info:
            stream.write_all(b"\x1b[?25l")
        assert exc_info.value.operation == "write"
        assert "short write" in str(exc_info.value)

    def test_empty_write_is_noop(self, pipe) -> None:
        TerminalStream(*pipe).write_all(b"")
