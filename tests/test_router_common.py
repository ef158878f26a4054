"""Tests for routerctl.router_common shared types and helpers."""

from __future__ import annotations

import pytest

from routerctl.router_common import (
    UNDEFINED_CIPHER,
    AssociationRequest,
    NotFoundError,
    ProtocolError,
    RouterError,
    ScanEntry,
    TransportError,
    scale_speed,
    speed_unit,
    split_security,
)


# ---------------------------------------------------------------------------
# split_security
# ---------------------------------------------------------------------------

class TestSplitSecurity:
    @pytest.mark.parametrize("raw, expected", [
        ("WPA2/AES", ("WPA2", "AES")),
        ("WPA/WPA2/TKIP", ("WPA", "WPA2/TKIP")),
        ("OPEN", ("OPEN", UNDEFINED_CIPHER)),
        ("", ("", UNDEFINED_CIPHER)),
        ("WEP/", ("WEP", "")),
    ])
    def test_splits_on_first_slash(self, raw, expected):
        assert split_security(raw) == expected

    def test_undefined_marker_literal(self):
        assert UNDEFINED_CIPHER == "undefined"


class TestScanEntry:
    def test_defaults(self):
        entry = ScanEntry(ssid="HomeNet")
        assert entry.bssid == ""
        assert entry.signal == "0"

    def test_security_properties(self):
        entry = ScanEntry(ssid="HomeNet", security="WPA2/AES")
        assert entry.security_mode == "WPA2"
        assert entry.cipher == "AES"


# ---------------------------------------------------------------------------
# speed_unit / scale_speed
# ---------------------------------------------------------------------------

class TestSpeedUnit:
    @pytest.mark.parametrize("speed, unit", [
        (0.0, "B/s"),
        (500.0, "B/s"),
        (1023.9, "B/s"),
        (1024.0, "KB/s"),
        (150000.0, "KB/s"),
        (1024 * 1024, "KB/s"),
        (1024 * 1024.5 - 1, "KB/s"),
        (1024 * 1024.5, "MB/s"),
        (10 * 1024 * 1024, "MB/s"),
    ])
    def test_thresholds(self, speed, unit):
        assert speed_unit(speed) == unit

    def test_half_rounds_up_at_megabyte_boundary(self):
        # 1024.5 KB rounds to 1025, which is above the KB/s ceiling.
        assert speed_unit(1024.5 * 1024) == "MB/s"

    def test_scale_kilobytes(self):
        assert scale_speed(2048.0) == (2.0, "KB/s")

    def test_scale_megabytes(self):
        assert scale_speed(3 * 1024 * 1024) == (3.0, "MB/s")

    def test_scale_bytes_unchanged(self):
        assert scale_speed(12.0) == (12.0, "B/s")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestErrors:
    @pytest.mark.parametrize("cls", [TransportError, ProtocolError, NotFoundError])
    def test_subclasses_router_error(self, cls):
        assert issubclass(cls, RouterError)

    def test_message_names_operation(self):
        exc = TransportError("scan_networks", "connection refused")
        assert str(exc) == "scan_networks failed: connection refused"
        assert exc.operation == "scan_networks"
        assert exc.detail == "connection refused"


class TestAssociationRequestForm:
    def test_form_fields(self):
        request = AssociationRequest(
            channel="6", bssid="aa:bb:cc:dd:ee:ff", ssid="HomeNet",
            security_mode="WPA2", cipher="AES", key="secret", ext_channel="1",
            secondary_ssid="Tenda_1234", secondary_psk_mode="psk2",
            secondary_cipher_mode="aes", secondary_key="routerpass",
        )
        form = request.to_form()
        assert form["ssid"] == "HomeNet"
        assert form["security"] == "WPA2"
        assert form["arithmetic"] == "AES"
        assert form["passphrase"] == "secret"
        assert form["extch"] == "1"
        assert form["wifi_ssid"] == "Tenda_1234"
        assert form["wifi_passphrase"] == "routerpass"
        assert all(isinstance(v, str) for v in form.values())
