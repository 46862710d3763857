from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

import httpx

from wattscout.models import DeviceRecord, StatusResponse

from .fanout import fan_out
from .probe import REQUEST_ERRORS, STATUS_PATH, device_url, http_get
from .scanner import build_client
from .store import MetricsStore

logger = logging.getLogger(__name__)

DEFAULT_STATUS_TIMEOUT = 5.0


async def fetch_status(
    client: httpx.AsyncClient, device: DeviceRecord, timeout: float
) -> StatusResponse | None:
    try:
        response = await http_get(client, device_url(device.ip, STATUS_PATH), timeout)
        return StatusResponse.model_validate_json(response.content)
    except (asyncio.TimeoutError, TimeoutError):
        logger.warning("Error getting status from %s: timed out", device.ip)
    except REQUEST_ERRORS as exc:
        logger.warning("Error getting status from %s: %s", device.ip, exc)
    return None


def record_readings(
    store: MetricsStore, device: DeviceRecord, status: StatusResponse
) -> int:
    """Write the valid meter readings of ``status``; return how many."""
    written = 0
    for meter in status.valid_meters():
        store.set(device.labels, meter.power)
        written += 1
    return written


async def collect_readings(
    devices: Sequence[DeviceRecord],
    store: MetricsStore,
    timeout: float = DEFAULT_STATUS_TIMEOUT,
    stop_event: asyncio.Event | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Refresh ``store`` from every device; return the number that answered."""
    if not devices:
        logger.info("No known devices to collect metrics from")
        return 0

    start = time.monotonic()
    store.clear()

    async with build_client(transport) as client:

        async def _collect(device: DeviceRecord) -> bool:
            status = await fetch_status(client, device, timeout)
            if status is None:
                return False
            record_readings(store, device, status)
            return True

        results = await fan_out(_collect, devices, stop_event)

    success_count = sum(1 for result in results if result)
    logger.info(
        "Metrics collection completed in %.2f seconds, collected from %d/%d devices",
        time.monotonic() - start,
        success_count,
        len(devices),
    )
    return success_count
