"""Shared data structures, errors and helpers for routerctl."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

# Marker the router firmware uses for "no cipher" in association requests.
UNDEFINED_CIPHER = "undefined"

# Secondary key sent when the device reports none for its own uplink.
DEFAULT_SECONDARY_KEY = "12345678"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class RouterError(Exception):
    """Base class for every failure talking to the device.

    ``operation`` names the gateway call that failed (e.g. ``"scan_networks"``)
    so the CLI can report which request broke.
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.detail = message


class TransportError(RouterError):
    """Connection failure, timeout or HTTP error status."""


class ProtocolError(RouterError):
    """Malformed or unexpected response body."""


class NotFoundError(RouterError):
    """The association target never showed up in a scan."""


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

Frame = tuple[str, ...]


@dataclass(frozen=True)
class ScanEntry:
    """One network seen by the router's repeater scan."""

    ssid: str
    bssid: str = ""
    channel: str = ""
    ext_channel: str = ""
    security: str = ""     # raw descriptor, e.g. "WPA2/AES"
    signal: str = "0"

    @property
    def security_mode(self) -> str:
        return split_security(self.security)[0]

    @property
    def cipher(self) -> str:
        return split_security(self.security)[1]


@dataclass(frozen=True)
class RouterInfo:
    """Current throughput in bytes/second."""

    upspeed: float = 0.0
    downspeed: float = 0.0


@dataclass(frozen=True)
class AssociationTarget:
    """The network the operator wants the router to repeat."""

    ssid: str
    key: str


@dataclass(frozen=True)
class SecondaryNetworkInfo:
    """The router's own Wi-Fi identity, kept as the secondary network."""

    ssid: str
    psk_mode: str = ""
    cipher_mode: str = ""
    psk: str | None = None


@dataclass(frozen=True)
class AssociationRequest:
    """Everything the router needs to join a network as a repeater."""

    channel: str
    bssid: str
    ssid: str
    security_mode: str
    cipher: str
    key: str
    ext_channel: str
    secondary_ssid: str
    secondary_psk_mode: str
    secondary_cipher_mode: str
    secondary_key: str

    def to_form(self) -> dict[str, str]:
        """Return the form fields posted to ``goform/set_repeater_cfg``."""
        return {
            "channel": self.channel,
            "bssid": self.bssid,
            "ssid": self.ssid,
            "security": self.security_mode,
            "arithmetic": self.cipher,
            "passphrase": self.key,
            "extch": self.ext_channel,
            "wifi_ssid": self.secondary_ssid,
            "wifi_security": self.secondary_psk_mode,
            "wifi_arithmetic": self.secondary_cipher_mode,
            "wifi_passphrase": self.secondary_key,
        }


# ---------------------------------------------------------------------------
# Gateway protocol (composition seam)
# ---------------------------------------------------------------------------

class DeviceGateway(Protocol):
    """Protocol for the router's management API.

    Every method either returns its value or raises a :class:`RouterError`
    subclass.  :class:`routerctl.gateway.http.HttpGateway` is the real
    implementation; tests substitute an in-memory fake.
    """

    def fetch_status(self) -> RouterInfo:
        ...  # pragma: no cover

    def scan_networks(self) -> list[ScanEntry]:
        ...  # pragma: no cover

    def fetch_secondary_network_info(self) -> SecondaryNetworkInfo:
        ...  # pragma: no cover

    def connected_ssid(self) -> str | None:
        ...  # pragma: no cover

    def associate(self, request: AssociationRequest) -> None:
        ...  # pragma: no cover

    def reboot(self) -> None:
        ...  # pragma: no cover

    def reset_to_defaults(self) -> None:
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# Security / speed helpers
# ---------------------------------------------------------------------------

def split_security(security: str) -> tuple[str, str]:
    """Split ``"WPA2/AES"`` into ``("WPA2", "AES")``.

    Only the first ``/`` separates; a descriptor without one is all mode and
    the cipher is :data:`UNDEFINED_CIPHER`.
    """
    mode, sep, cipher = security.partition("/")
    if not sep:
        return security, UNDEFINED_CIPHER
    return mode, cipher


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def speed_unit(speed: float) -> str:
    """Return the display unit for a speed in bytes/second."""
    if speed < 1024:
        return "B/s"
    if _round_half_up(speed / 1024) > 1024:
        return "MB/s"
    return "KB/s"


def scale_speed(speed: float) -> tuple[float, str]:
    """Return *speed* scaled into its display unit, plus the unit."""
    unit = speed_unit(speed)
    if unit == "MB/s":
        return speed / (1024 * 1024), unit
    if unit == "KB/s":
        return speed / 1024, unit
    return speed, unit
