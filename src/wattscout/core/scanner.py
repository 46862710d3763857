from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

import httpx

from wattscout.models import DeviceRecord

from .fanout import fan_out
from .probe import DEFAULT_PROBE_TIMEOUT, probe_device

logger = logging.getLogger(__name__)


def build_client(
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """HTTP client for talking to devices on the local network.

    Connection limits are lifted so the client never throttles a fan-out.
    """
    return httpx.AsyncClient(
        transport=transport,
        limits=httpx.Limits(max_connections=None, max_keepalive_connections=None),
        trust_env=False,
    )


async def scan_network(
    addresses: Sequence[str],
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    stop_event: asyncio.Event | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, DeviceRecord]:
    """Probe every address concurrently and map each responder by address."""
    logger.debug("Scanning %d addresses (timeout=%.2fs)", len(addresses), timeout)
    start = time.monotonic()

    async with build_client(transport) as client:

        async def _probe(ip: str) -> DeviceRecord | None:
            return await probe_device(client, ip, timeout)

        results = await fan_out(_probe, addresses, stop_event)

    devices = {device.ip: device for device in results if device is not None}
    logger.info(
        "Device discovery completed in %.2f seconds, found %d devices",
        time.monotonic() - start,
        len(devices),
    )
    return devices
