"""Runtime configuration for the terminal core."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from opterm.core.constants import FAR_MOVE
from opterm.core.geometry import ScreenGeometry
from opterm.core.keys import ctrl_key


@dataclass(frozen=True)
class TerminalConfig:
    """
    Tunables for raw mode, geometry discovery and rendering.

    Defaults match a VT100-compatible terminal on a local connection.
    Slow links may want a longer idle timeout, at the cost of latency
    on every bare Escape press.
    """

    # Seconds a single read waits for the first byte
    idle_timeout: float = 0.1

    # Max bytes read while waiting for a cursor position report
    report_budget: int = 32

    # Cell count for the clamped move to the bottom-right corner
    far_move: int = FAR_MOVE

    # Used when the probe fails; None = fail startup
    fallback_geometry: Optional[ScreenGeometry] = None

    # Marker drawn on rows past the end of content
    filler: str = "~"

    quit_key: int = ctrl_key("q")

    def __post_init__(self) -> None:
        if not math.isfinite(self.idle_timeout) or self.idle_timeout <= 0:
            raise ValueError(f"idle_timeout must be positive, got {self.idle_timeout}")
        if self.report_budget < 6:
            # Shortest valid reply is ESC [ 1 ; 1 R
            raise ValueError(f"report_budget must be at least 6, got {self.report_budget}")
        if self.far_move <= 0:
            raise ValueError(f"far_move must be positive, got {self.far_move}")
        if len(self.filler) != 1:
            raise ValueError(f"filler must be a single character, got {self.filler!r}")
        if not 0 <= self.quit_key <= 0xFF:
            raise ValueError(f"quit_key must be a byte value, got {self.quit_key}")

    @property
    def idle_deciseconds(self) -> int:
        """Idle timeout in the tenths of a second used by VTIME (1-255)."""
        return max(1, min(255, round(self.idle_timeout * 10)))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> TerminalConfig:
        """
        Build a config from OPTERM_* environment variables.

        Recognized: OPTERM_IDLE_TIMEOUT, OPTERM_REPORT_BUDGET,
        OPTERM_FALLBACK_SIZE (ROWSxCOLS), OPTERM_FILLER.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        if value := env.get("OPTERM_IDLE_TIMEOUT"):
            kwargs["idle_timeout"] = float(value)
        if value := env.get("OPTERM_REPORT_BUDGET"):
            kwargs["report_budget"] = int(value)
        if value := env.get("OPTERM_FALLBACK_SIZE"):
            kwargs["fallback_geometry"] = ScreenGeometry.parse(value)
        if value := env.get("OPTERM_FILLER"):
            kwargs["filler"] = value

        return cls(**kwargs)
