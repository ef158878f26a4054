"""Frame builders for the scan list and the live status view."""

from __future__ import annotations

from rich.style import Style

from routerctl.router_common import Frame, RouterInfo, ScanEntry, scale_speed

_BOLD = Style(bold=True)
_DIM = Style(dim=True)

LABEL_WIDTH = 8
SSID_WIDTH = 30
SIGNAL_WIDTH = 5


def bold(text: str, *, emphasis: bool = True) -> str:
    return _BOLD.render(text) if emphasis else text


def dim(text: str, *, emphasis: bool = True) -> str:
    return _DIM.render(text) if emphasis else text


def format_speed(speed: float, *, emphasis: bool = True) -> str:
    """Format a bytes/second value as e.g. ``"146.5 KB/s"``.

    Whole numbers drop the decimal point (``"500 B/s"``).
    """
    value, unit = scale_speed(speed)
    number = f"{value:.0f}" if value == int(value) else f"{value:.1f}"
    return f"{bold(number, emphasis=emphasis)} {dim(unit, emphasis=emphasis)}"


def format_router_info(info: RouterInfo, *, emphasis: bool = True) -> str:
    """One-line throughput summary: ``↑ <up> \\t ↓ <down>``."""
    up = format_speed(info.upspeed, emphasis=emphasis)
    down = format_speed(info.downspeed, emphasis=emphasis)
    return f"↑ {up} \t ↓ {down}"


# ---------------------------------------------------------------------------
# List mode
# ---------------------------------------------------------------------------

def scan_line(ssid: str, signal: str) -> str:
    return f"{ssid:<{SSID_WIDTH}} {signal:<{SIGNAL_WIDTH}}"


def build_scan_frame(entries: list[ScanEntry]) -> Frame:
    """Header plus one line per scanned network, in scan order."""
    return (scan_line("SSID", "SIGNAL"),) + tuple(
        scan_line(e.ssid, e.signal) for e in entries
    )


# ---------------------------------------------------------------------------
# Status mode
# ---------------------------------------------------------------------------

def status_line(label: str, value: str) -> str:
    return f"{label:>{LABEL_WIDTH}}: {value}"


def build_status_frame(
    ssid: str, signal: str, info: RouterInfo, *, emphasis: bool = True,
) -> Frame:
    """The three fixed status lines: SSID, Signal and Speed."""
    return (
        status_line("SSID", ssid),
        status_line("Signal", signal),
        status_line("Speed", format_router_info(info, emphasis=emphasis)),
    )
