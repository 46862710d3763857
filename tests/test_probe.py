from __future__ import annotations

import asyncio

import httpx
import pytest

from wattscout.core import (
    build_client,
    derive_device_id,
    probe_device,
    resolve_display_name,
)
from wattscout.models import DeviceSettings

IP = "10.0.0.5"


def _probe(transport: httpx.AsyncBaseTransport, ip: str = IP, timeout: float = 1.0):
    async def _run():
        async with build_client(transport) as client:
            return await probe_device(client, ip, timeout)

    return asyncio.run(_run())


@pytest.mark.parametrize(
    ("device_type", "mac", "expected"),
    [
        ("SHPLG-S", "AABBCCDDEEFF", "shplg-s-ddeeff"),
        ("SHEM", "c45bbe6a1b2c", "shem-6a1b2c"),
        ("shsw-pm", "A4CF12F3D5E6", "shsw-pm-f3d5e6"),
    ],
)
def test_derive_device_id(device_type, mac, expected):
    assert derive_device_id(device_type, mac) == expected
    assert derive_device_id(device_type, mac) == derive_device_id(device_type, mac)


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"name": "Root", "device": {"name": "Nested", "hostname": "h1"}}, "Root"),
        ({"name": "", "device": {"name": "Kitchen"}}, "Kitchen"),
        (
            {"device": {"hostname": "shellyplug-s-ddeeff"}, "hostname": "root"},
            "shellyplug-s-ddeeff",
        ),
        ({"hostname": "root-host"}, "root-host"),
        ({"name": None, "device": {}}, "fallback-id"),
        ({"name": "Kitchen", "device": None}, "Kitchen"),
        ({"device": None, "hostname": None}, "fallback-id"),
        ({}, "fallback-id"),
    ],
)
def test_resolve_display_name_order(payload, expected):
    settings = DeviceSettings.model_validate(payload)
    assert resolve_display_name(settings, "fallback-id") == expected


def test_resolve_display_name_without_settings():
    assert resolve_display_name(None, "shplg-s-ddeeff") == "shplg-s-ddeeff"


def test_probe_identifies_device(device_transport, plug_routes):
    device = _probe(device_transport({IP: plug_routes(name="Kitchen")}))

    assert device is not None
    assert device.ip == IP
    assert device.device_id == "shplg-s-ddeeff"
    assert device.device_name == "Kitchen"
    assert device.device_type == "SHPLG-S"
    assert device.last_seen.tzinfo is not None


def test_probe_falls_back_to_id_when_settings_fail(device_transport, plug_routes):
    routes = plug_routes()
    routes["/settings"] = httpx.Response(200, text="<html>oops</html>")

    device = _probe(device_transport({IP: routes}))

    assert device is not None
    assert device.device_name == "shplg-s-ddeeff"


def test_probe_falls_back_when_settings_unreachable(device_transport, plug_routes):
    routes = plug_routes()
    routes["/settings"] = httpx.ReadError("reset by peer")

    device = _probe(device_transport({IP: routes}))

    assert device is not None
    assert device.device_name == device.device_id


@pytest.mark.parametrize(
    "identify",
    [
        httpx.Response(500, json={"type": "SHPLG-S", "mac": "AABBCCDDEEFF"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"type": "", "mac": "AABBCCDDEEFF"}),
        httpx.Response(200, json={"mac": "AABBCCDDEEFF"}),
        httpx.Response(200, json=["unexpected"]),
    ],
)
def test_probe_rejects_bad_identify(identify, device_transport, plug_routes):
    routes = plug_routes()
    routes["/identify"] = identify

    assert _probe(device_transport({IP: routes})) is None


def test_probe_unreachable_address(device_transport):
    assert _probe(device_transport({})) is None


def test_probe_times_out(device_transport, plug_routes):
    transport = device_transport({IP: plug_routes()}, delay=0.5)

    assert _probe(transport, timeout=0.05) is None


def test_probe_tolerates_null_settings_fields(device_transport, plug_routes):
    routes = plug_routes()
    routes["/identify"] = {"type": "SHPLG-S", "mac": "AABBCCDDEEFF", "fw": None}
    routes["/settings"] = {"name": "Kitchen", "device": None, "hostname": None}

    device = _probe(device_transport({IP: routes}))

    assert device is not None
    assert device.device_name == "Kitchen"
