"""Shared test fixtures: an in-memory gateway and a terminal emulator."""

from __future__ import annotations

import re

import pytest

from routerctl.router_common import (
    AssociationRequest,
    RouterInfo,
    ScanEntry,
    SecondaryNetworkInfo,
)


class FakeGateway:
    """DeviceGateway double driven by queued results.

    Each queue holds return values or exceptions; exceptions are raised.
    The last value of a queue is reused once the queue runs dry.
    """

    def __init__(
        self,
        *,
        statuses=None,
        scans=None,
        ssid="HomeNet",
        secondary=None,
    ):
        self.statuses = list(statuses or [RouterInfo(0.0, 0.0)])
        self.scans = list(scans or [[]])
        self.ssid = ssid
        self.secondary = secondary or SecondaryNetworkInfo(
            ssid="Tenda_1234", psk_mode="psk2", cipher_mode="aes", psk="routerpass",
        )
        self.calls: list[str] = []
        self.associated: list[AssociationRequest] = []

    @staticmethod
    def _next(queue):
        value = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(value, Exception):
            raise value
        return value

    def login(self, user, password):
        self.calls.append("login")

    def fetch_status(self) -> RouterInfo:
        self.calls.append("fetch_status")
        return self._next(self.statuses)

    def scan_networks(self) -> list[ScanEntry]:
        self.calls.append("scan_networks")
        return self._next(self.scans)

    def fetch_secondary_network_info(self) -> SecondaryNetworkInfo:
        self.calls.append("fetch_secondary_network_info")
        if isinstance(self.secondary, Exception):
            raise self.secondary
        return self.secondary

    def connected_ssid(self):
        self.calls.append("connected_ssid")
        if isinstance(self.ssid, Exception):
            raise self.ssid
        return self.ssid

    def associate(self, request: AssociationRequest) -> None:
        self.calls.append("associate")
        self.associated.append(request)

    def reboot(self) -> None:
        self.calls.append("reboot")

    def reset_to_defaults(self) -> None:
        self.calls.append("reset_to_defaults")


@pytest.fixture
def fake_gateway():
    return FakeGateway()


# ---------------------------------------------------------------------------
# Minimal terminal emulator (only the codes the renderer emits)
# ---------------------------------------------------------------------------

_TOKEN_RE = re.compile(r"\x1b\[(\d+)([AK])|\r|\n|[^\x1b\r\n]+")


class Screen:
    """Interprets cursor-up, erase-line, carriage return and newline."""

    def __init__(self) -> None:
        self.lines: list[str] = [""]
        self.row = 0
        self.col = 0

    def feed(self, text: str) -> None:
        pos = 0
        while pos < len(text):
            m = _TOKEN_RE.match(text, pos)
            assert m is not None, f"unexpected control sequence at {text[pos:pos + 10]!r}"
            token = m.group(0)
            if m.group(2) == "A":
                self.row = max(0, self.row - int(m.group(1)))
            elif m.group(2) == "K":
                assert m.group(1) == "2"
                self.lines[self.row] = ""
            elif token == "\r":
                self.col = 0
            elif token == "\n":
                self.row += 1
                self.col = 0
                if self.row == len(self.lines):
                    self.lines.append("")
            else:
                line = self.lines[self.row].ljust(self.col)
                self.lines[self.row] = line[:self.col] + token + line[self.col + len(token):]
                self.col += len(token)
            pos = m.end()

    def visible(self) -> list[str]:
        """Non-trailing-blank content; the cursor line is excluded when empty."""
        lines = list(self.lines)
        while lines and lines[-1] == "":
            lines.pop()
        return lines


@pytest.fixture
def screen():
    return Screen()
