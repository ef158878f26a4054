"""Join a network as a repeater once it shows up in the router's scan.

The router only accepts an association request built from a live scan
entry (channel, BSSID, extension channel), so the target has to be
scanned for first.  Searching is bounded by a :class:`RetryPolicy`;
scan failures abort immediately.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from routerctl.router_common import (
    DEFAULT_SECONDARY_KEY,
    AssociationRequest,
    AssociationTarget,
    DeviceGateway,
    NotFoundError,
    ScanEntry,
    SecondaryNetworkInfo,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds for the search phase.

    ``max_attempts`` caps the number of scans and ``timeout`` caps the
    elapsed seconds; ``None`` disables either bound.  ``delay`` is slept
    between scans.
    """

    max_attempts: int | None = 30
    delay: float = 2.0
    timeout: float | None = None


def find_target(entries: list[ScanEntry], ssid: str) -> ScanEntry | None:
    """Return the first entry whose SSID equals *ssid* exactly."""
    for entry in entries:
        if entry.ssid == ssid:
            return entry
    return None


def build_association_request(
    entry: ScanEntry,
    target: AssociationTarget,
    secondary: SecondaryNetworkInfo,
) -> AssociationRequest:
    """Combine the matched scan entry, the operator's key and the router's own network."""
    return AssociationRequest(
        channel=entry.channel,
        bssid=entry.bssid,
        ssid=entry.ssid,
        security_mode=entry.security_mode,
        cipher=entry.cipher,
        key=target.key,
        ext_channel=entry.ext_channel,
        secondary_ssid=secondary.ssid,
        secondary_psk_mode=secondary.psk_mode,
        secondary_cipher_mode=secondary.cipher_mode,
        secondary_key=secondary.psk or DEFAULT_SECONDARY_KEY,
    )


def associate_when_visible(
    gateway: DeviceGateway,
    target: AssociationTarget,
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], None] | None = None,
    clock: Callable[[], float] | None = None,
) -> AssociationRequest:
    """Scan until *target* appears, then submit the association request.

    Returns:
        The request that was submitted.

    Raises:
        NotFoundError: The policy ran out before the target was seen.
        RouterError: Any scan, info or associate call failed.
    """
    policy = policy or RetryPolicy()
    sleep = sleep or time.sleep
    clock = clock or time.monotonic
    deadline = None if policy.timeout is None else clock() + policy.timeout
    attempts = 0

    while True:
        attempts += 1
        entries = gateway.scan_networks()
        entry = find_target(entries, target.ssid)
        if entry is not None:
            break
        _LOGGER.debug(
            "scan %d: %r not among %d network(s)", attempts, target.ssid, len(entries),
        )
        if policy.max_attempts is not None and attempts >= policy.max_attempts:
            raise NotFoundError(
                "scan_networks",
                f"{target.ssid!r} not found after {attempts} scan(s)",
            )
        if deadline is not None and clock() >= deadline:
            raise NotFoundError(
                "scan_networks",
                f"{target.ssid!r} not found within {policy.timeout:g}s",
            )
        if policy.delay > 0:
            sleep(policy.delay)

    _LOGGER.info(
        "found %r on channel %s (%s) after %d scan(s)",
        entry.ssid, entry.channel, entry.security, attempts,
    )
    request = build_association_request(
        entry, target, gateway.fetch_secondary_network_info(),
    )
    gateway.associate(request)
    return request
