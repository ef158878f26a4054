"""Fixed-cadence poll loop feeding frames to the in-place renderer.

The loop never retries: the first failed fetch ends it and is handed to
``on_fatal``.  A display that silently went stale would mislead whoever is
watching it.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from routerctl.display.frames import build_scan_frame, build_status_frame
from routerctl.display.renderer import FrameWriter
from routerctl.router_common import DeviceGateway, Frame, RouterError

_LOGGER = logging.getLogger(__name__)

# Shown on the SSID line when the connected network cannot be determined.
SSID_PLACEHOLDER = "FAILED TO RETRIEVE"


def run(
    interval: float,
    fetch: Callable[[], Frame],
    on_fatal: Callable[[RouterError], None],
    *,
    writer: FrameWriter | None = None,
    sleep: Callable[[float], None] | None = None,
    max_frames: int | None = None,
) -> int:
    """Fetch and draw frames every *interval* seconds until a fetch fails.

    Args:
        interval: Seconds to sleep after each rendered frame.
        fetch: Returns the next frame or raises :class:`RouterError`.
        on_fatal: Called exactly once with the error that ended the loop.
        writer: Destination for frames (default: stdout).
        sleep: Injected for tests.
        max_frames: Stop normally after this many frames (default: never).

    Returns:
        The number of frames rendered.
    """
    writer = writer or FrameWriter()
    sleep = sleep or time.sleep
    previous: Frame | None = None
    rendered = 0
    while max_frames is None or rendered < max_frames:
        try:
            frame = fetch()
        except RouterError as exc:
            _LOGGER.debug("poll loop stopped after %d frame(s): %s", rendered, exc)
            on_fatal(exc)
            return rendered
        previous = writer.write(previous, frame)
        rendered += 1
        sleep(interval)
    return rendered


# ---------------------------------------------------------------------------
# Frame sources
# ---------------------------------------------------------------------------

def scan_frames(gateway: DeviceGateway) -> Callable[[], Frame]:
    """List mode: every fetch is a fresh scan, one line per network."""

    def fetch() -> Frame:
        return build_scan_frame(gateway.scan_networks())

    return fetch


class StatusSource:
    """Status mode: connected SSID, its signal, and current throughput.

    The SSID is looked up once.  When it cannot be determined the
    placeholder is shown, or with ``strict_ssid`` the error is raised
    instead.  The signal keeps its last value while the connected
    network is missing from a scan.
    """

    def __init__(
        self,
        gateway: DeviceGateway,
        *,
        strict_ssid: bool = False,
        emphasis: bool = True,
    ) -> None:
        self.gateway = gateway
        self.emphasis = emphasis
        self.ssid = self._resolve_ssid(strict_ssid)
        self.signal = "0"

    def _resolve_ssid(self, strict: bool) -> str:
        try:
            ssid = self.gateway.connected_ssid()
        except RouterError:
            if strict:
                raise
            _LOGGER.warning("could not read connected SSID", exc_info=True)
            return SSID_PLACEHOLDER
        if ssid is None:
            if strict:
                raise RouterError("connected_ssid", "router is not connected to any network")
            return SSID_PLACEHOLDER
        return ssid

    def __call__(self) -> Frame:
        info = self.gateway.fetch_status()
        for entry in self.gateway.scan_networks():
            if entry.ssid == self.ssid:
                self.signal = entry.signal
                break
        return build_status_frame(self.ssid, self.signal, info, emphasis=self.emphasis)
