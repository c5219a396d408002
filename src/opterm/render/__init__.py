"""Frame rendering."""

from opterm.render.frame import FrameCompositor, OutputBuffer

__all__ = ["FrameCompositor", "OutputBuffer"]
