from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

import httpx
import pytest

from wattscout.config import get_settings

_ENV_VARS = (
    "WATTSCOUT_CONFIG",
    "NETWORK_RANGE",
    "DISCOVERY_INTERVAL",
    "METRICS_INTERVAL",
    "HTTP_PORT",
)

# host -> {path: JSON payload | httpx.Response | Exception}
DeviceMap = Mapping[str, Mapping[str, Any]]


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_transport(devices: DeviceMap, delay: float = 0.0) -> httpx.MockTransport:
    async def handler(request: httpx.Request) -> httpx.Response:
        if delay:
            await asyncio.sleep(delay)
        routes = devices.get(request.url.host)
        if routes is None:
            raise httpx.ConnectError("connection refused", request=request)
        answer = routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404, text="not found")
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    return httpx.MockTransport(handler)


@pytest.fixture
def device_transport() -> Callable[..., httpx.MockTransport]:
    return make_transport


def plug(
    device_type: str = "SHPLG-S",
    mac: str = "AABBCCDDEEFF",
    name: str = "Kitchen",
    meters: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Routes for a well-behaved device."""
    return {
        "/identify": {"type": device_type, "mac": mac, "fw": "1.14.0"},
        "/settings": {"name": name, "device": {"hostname": "shellyplug"}},
        "/status": {
            "meters": meters
            if meters is not None
            else [{"power": 12.5, "is_valid": True, "timestamp": 0}]
        },
    }


@pytest.fixture
def plug_routes() -> Callable[..., dict[str, Any]]:
    return plug
