"""Terminal rendering: frame builders and the in-place redraw engine."""

from routerctl.display.frames import build_scan_frame, build_status_frame  # noqa: F401
from routerctl.display.renderer import FrameWriter, render  # noqa: F401
