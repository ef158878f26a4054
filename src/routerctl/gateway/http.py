"""Router management API over HTTP (``goform`` endpoints).

The router answers plain JSON on ``GET`` and accepts form posts for
commands.  This module can also be invoked as a standalone tool to dump
raw results while troubleshooting::

    python -m routerctl.gateway.http status
    python -m routerctl.gateway.http scan --host 192.168.0.1
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from dataclasses import asdict
from typing import Any

import requests

from routerctl import __version__
from routerctl.config import Settings
from routerctl.router_common import (
    AssociationRequest,
    ProtocolError,
    RouterInfo,
    ScanEntry,
    SecondaryNetworkInfo,
    TransportError,
)

logger = logging.getLogger(__name__)

USER_AGENT = f"routerctl/{__version__}"

# The firmware reports a disconnected uplink as the literal string "NULL".
_NOT_CONNECTED = "NULL"


class HttpGateway:
    """DeviceGateway backed by one :class:`requests.Session`.

    Args:
        host: Router address, e.g. ``"192.168.16.1"``.
        timeout: Per-request timeout in seconds.
        session: Optional pre-built session (testing seam).
    """

    def __init__(
        self,
        host: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = f"http://{host}"
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpGateway:
        return cls(settings.host, timeout=settings.timeout)

    # -- plumbing -----------------------------------------------------------

    def _request(
        self, operation: str, method: str, path: str, data: dict[str, str] | None = None,
    ) -> requests.Response:
        url = f"{self.base_url}/{path}"
        logger.debug("%s: %s %s", operation, method, url)
        try:
            response = self.session.request(method, url, data=data, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(operation, str(exc)) from exc
        return response

    def _get_json(self, operation: str, path: str) -> dict[str, Any]:
        response = self._request(operation, "GET", path)
        try:
            body = response.json()
        except ValueError as exc:
            raise ProtocolError(operation, f"response is not JSON: {exc}") from exc
        if not isinstance(body, dict):
            raise ProtocolError(operation, f"expected a JSON object, got {type(body).__name__}")
        return body

    def _post(self, operation: str, path: str, data: dict[str, str]) -> None:
        self._request(operation, "POST", path, data=data)

    # -- session ------------------------------------------------------------

    def login(self, user: str, password: str) -> None:
        """Authenticate; the router sets a session cookie on success."""
        self._post("login", "login/auth", {"user": user, "pass": password})

    # -- reads --------------------------------------------------------------

    def fetch_status(self) -> RouterInfo:
        body = self._get_json("fetch_status", "goform/get_router_info")
        return RouterInfo(
            upspeed=_speed_field(body, "upspeed"),
            downspeed=_speed_field(body, "downspeed"),
        )

    def connected_ssid(self) -> str | None:
        body = self._get_json("connected_ssid", "goform/get_connetsta_cfg")
        ssid = _str_field("connected_ssid", body, "ssid")
        return None if ssid == _NOT_CONNECTED else ssid

    def scan_networks(self) -> list[ScanEntry]:
        body = self._get_json("scan_networks", "goform/get_RepeaterScan_cfg")
        items = body.get("list")
        if not isinstance(items, list):
            raise ProtocolError("scan_networks", "missing 'list' array")
        entries = [parse_scan_entry(item) for item in items]
        logger.debug("scan_networks: %d entries", len(entries))
        return entries

    def fetch_secondary_network_info(self) -> SecondaryNetworkInfo:
        op = "fetch_secondary_network_info"
        body = self._get_json(op, "goform/get_wifi_basic_cfg")
        psk = body.get("psk")
        return SecondaryNetworkInfo(
            ssid=_str_field(op, body, "ssid"),
            psk_mode=str(body.get("pskMode", "")),
            cipher_mode=str(body.get("cipherMode", "")),
            psk=str(psk) if psk else None,
        )

    # -- commands -----------------------------------------------------------

    def associate(self, request: AssociationRequest) -> None:
        self._post("associate", "goform/set_repeater_cfg", request.to_form())

    def reboot(self) -> None:
        self._post("reboot", "goform/set_reboot", {"mode": "reboot"})

    def reset_to_defaults(self) -> None:
        self._post("reset_to_defaults", "goform/set_restore", {"type": "restore"})


# ---------------------------------------------------------------------------
# JSON field mapping
# ---------------------------------------------------------------------------

def _str_field(operation: str, body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    if value is None:
        raise ProtocolError(operation, f"missing field {key!r}")
    return str(value)


def _speed_field(body: dict[str, Any], key: str) -> float:
    """Parse a speed; the firmware sends numbers as strings."""
    raw = body.get(key)
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ProtocolError("fetch_status", f"invalid {key} {raw!r}") from exc
    if not math.isfinite(value):
        raise ProtocolError("fetch_status", f"invalid {key} {raw!r}")
    if value < 0:
        raise ProtocolError("fetch_status", f"negative {key} {raw!r}")
    return value


def parse_scan_entry(item: Any) -> ScanEntry:
    """Map one element of the scan ``list`` onto a :class:`ScanEntry`."""
    if not isinstance(item, dict) or "ssid" not in item:
        raise ProtocolError("scan_networks", f"malformed scan entry {item!r}")
    return ScanEntry(
        ssid=str(item["ssid"]),
        bssid=str(item.get("bssid", "")),
        channel=str(item.get("channel", "")),
        ext_channel=str(item.get("extch", "")),
        security=str(item.get("security", "")),
        signal=str(item.get("signal", "0")),
    )


# ---------------------------------------------------------------------------
# Standalone CLI
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for standalone invocation."""
    parser = argparse.ArgumentParser(
        description="Query the router API once and print the JSON result.",
    )
    parser.add_argument("what", choices=["status", "scan", "ssid", "secondary"])
    parser.add_argument("--host", help="router address")
    parser.add_argument("--user", help="login user")
    parser.add_argument("--password", help="login password")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Log in, run one read and print it as JSON."""
    args = _parse_args(argv)
    settings = Settings.from_env().override(
        host=args.host, user=args.user, password=args.password,
    )
    gateway = HttpGateway.from_settings(settings)
    try:
        gateway.login(settings.user, settings.password)
        if args.what == "status":
            data: Any = asdict(gateway.fetch_status())
        elif args.what == "scan":
            data = [asdict(e) for e in gateway.scan_networks()]
        elif args.what == "ssid":
            data = {"ssid": gateway.connected_ssid()}
        else:
            data = asdict(gateway.fetch_secondary_network_info())
    except (TransportError, ProtocolError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(data, indent=2))


if __name__ == "__main__":
    main()
