from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError

from wattscout.models import DeviceRecord, DeviceSettings, IdentifyResponse

logger = logging.getLogger(__name__)

IDENTIFY_PATH = "/identify"
SETTINGS_PATH = "/settings"
STATUS_PATH = "/status"

DEFAULT_PROBE_TIMEOUT = 2.0

# Failures that mean "no usable answer from this address".
REQUEST_ERRORS = (
    httpx.HTTPError,
    httpx.InvalidURL,
    OSError,
    ValidationError,
)


def device_url(ip: str, path: str) -> str:
    return f"http://{ip}{path}"


async def http_get(
    client: httpx.AsyncClient, url: str, timeout: float
) -> httpx.Response:
    """GET ``url``, bounding the whole exchange by ``timeout`` seconds."""
    return await asyncio.wait_for(client.get(url, timeout=timeout), timeout=timeout)


def derive_device_id(device_type: str, mac: str) -> str:
    """Stable id built from the device type and the MAC's last 6 characters."""
    return f"{device_type.lower()}-{mac[-6:].lower()}"


def resolve_display_name(settings: DeviceSettings | None, device_id: str) -> str:
    if settings is None:
        return device_id
    nested = settings.device
    candidates = (
        settings.name,
        nested.name if nested else None,
        nested.hostname if nested else None,
        settings.hostname,
    )
    for candidate in candidates:
        if candidate:
            return candidate
    return device_id


async def identify(
    client: httpx.AsyncClient, ip: str, timeout: float
) -> IdentifyResponse | None:
    try:
        response = await http_get(client, device_url(ip, IDENTIFY_PATH), timeout)
        if response.status_code != httpx.codes.OK:
            logger.debug("%s answered identify with HTTP %d", ip, response.status_code)
            return None
        info = IdentifyResponse.model_validate_json(response.content)
    except (asyncio.TimeoutError, TimeoutError):
        logger.debug("No response from %s (timeout)", ip)
        return None
    except REQUEST_ERRORS as exc:
        logger.debug("Failed to identify %s: %s", ip, exc)
        return None

    if not info.device_type:
        logger.debug("%s reported an empty device type", ip)
        return None
    return info


async def fetch_settings(
    client: httpx.AsyncClient, ip: str, timeout: float
) -> DeviceSettings | None:
    try:
        response = await http_get(client, device_url(ip, SETTINGS_PATH), timeout)
        return DeviceSettings.model_validate_json(response.content)
    except (asyncio.TimeoutError, TimeoutError):
        logger.debug("No settings from %s (timeout)", ip)
        return None
    except REQUEST_ERRORS as exc:
        logger.debug("Failed to read settings from %s: %s", ip, exc)
        return None


async def probe_device(
    client: httpx.AsyncClient, ip: str, timeout: float = DEFAULT_PROBE_TIMEOUT
) -> DeviceRecord | None:
    """Identify the device at ``ip``, or return None if nothing usable answers."""
    logger.debug("Checking %s", ip)
    info = await identify(client, ip, timeout)
    if info is None:
        return None

    device_id = derive_device_id(info.device_type, info.mac)
    settings = await fetch_settings(client, ip, timeout)
    device = DeviceRecord(
        ip=ip,
        device_id=device_id,
        device_name=resolve_display_name(settings, device_id),
        device_type=info.device_type,
    )
    logger.debug("Found device '%s' (%s) at %s", device.device_name, device_id, ip)
    return device
