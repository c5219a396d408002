"""Tests for configuration and value types."""

import pytest

from opterm.config import TerminalConfig
from opterm.core.errors import DeviceError
from opterm.core.geometry import CursorPosition, ScreenGeometry


class TestTerminalConfig:
    """Tests for TerminalConfig."""

    def test_defaults(self) -> None:
        config = TerminalConfig()
        assert config.idle_timeout == 0.1
        assert config.idle_deciseconds == 1
        assert config.report_budget == 32
        assert config.quit_key == 0x11
        assert config.fallback_geometry is None

    def test_deciseconds_bounds(self) -> None:
        assert TerminalConfig(idle_timeout=0.01).idle_deciseconds == 1
        assert TerminalConfig(idle_timeout=60).idle_deciseconds == 255

    @pytest.mark.parametrize("kwargs", [
        {"idle_timeout": 0},
        {"idle_timeout": float("nan")},
        {"idle_timeout": float("inf")},
        {"report_budget": 3},
        {"far_move": 0},
        {"filler": ""},
        {"filler": "~~"},
        {"quit_key": 300},
    ])
    def test_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            TerminalConfig(**kwargs)

    def test_from_env(self) -> None:
        config = TerminalConfig.from_env({
            "OPTERM_IDLE_TIMEOUT": "0.3",
            "OPTERM_REPORT_BUDGET": "64",
            "OPTERM_FALLBACK_SIZE": "25x80",
            "OPTERM_FILLER": ".",
        })
        assert config.idle_timeout == 0.3
        assert config.report_budget == 64
        assert config.fallback_geometry == ScreenGeometry(25, 80)
        assert config.filler == "."

    def test_from_env_empty(self) -> None:
        assert TerminalConfig.from_env({}) == TerminalConfig()

    def test_from_env_bad_size(self) -> None:
        with pytest.raises(ValueError):
            TerminalConfig.from_env({"OPTERM_FALLBACK_SIZE": "big"})

    @pytest.mark.parametrize("value", ["nan", "inf"])
    def test_from_env_non_finite_timeout(self, value: str) -> None:
        with pytest.raises(ValueError):
            TerminalConfig.from_env({"OPTERM_IDLE_TIMEOUT": value})


class TestGeometry:
    """Tests for ScreenGeometry and CursorPosition."""

    def test_geometry_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            ScreenGeometry(0, 80)

    def test_parse(self) -> None:
        assert ScreenGeometry.parse("24x80") == ScreenGeometry(24, 80)
        assert str(ScreenGeometry(24, 80)) == "24x80"

    def test_cursor_to_wire(self) -> None:
        assert CursorPosition(0, 0).to_wire() == (1, 1)

    def test_cursor_clamp(self) -> None:
        geometry = ScreenGeometry(24, 80)
        assert CursorPosition(-1, 100).clamp(geometry) == CursorPosition(0, 79)


class TestDeviceError:
    """Tests for DeviceError construction."""

    def test_from_os_error(self) -> None:
        err = DeviceError.from_exception("read", OSError(5, "Input/output error"))
        assert err.errno == 5
        assert str(err) == "read: Input/output error"

    def test_from_termios_error(self) -> None:
        import termios
        err = DeviceError.from_exception("tcgetattr", termios.error(25, "Inappropriate ioctl for device"))
        assert err.errno == 25
        assert str(err) == "tcgetattr: Inappropriate ioctl for device"
