from __future__ import annotations

import asyncio

import httpx

from wattscout.config import ScanningConfig, Settings
from wattscout.core import Exporter, scan_network
from wattscout.models import DeviceRecord


def test_scan_returns_exactly_the_responders(device_transport, plug_routes):
    broken = plug_routes()
    broken["/identify"] = httpx.Response(200, json={"type": ""})
    transport = device_transport(
        {
            "10.0.0.2": plug_routes(mac="000000000002", name="Desk"),
            "10.0.0.5": plug_routes(device_type="SHEM", mac="000000000005"),
            "10.0.0.6": broken,
        }
    )
    addresses = [f"10.0.0.{n}" for n in range(1, 7)]

    devices = asyncio.run(scan_network(addresses, timeout=1.0, transport=transport))

    assert set(devices) == {"10.0.0.2", "10.0.0.5"}
    assert devices["10.0.0.2"].device_name == "Desk"
    assert devices["10.0.0.5"].device_id == "shem-000005"


def test_scan_skips_probes_after_stop(device_transport, plug_routes):
    transport = device_transport({"10.0.0.2": plug_routes()})
    stop = asyncio.Event()
    stop.set()

    devices = asyncio.run(
        scan_network(["10.0.0.2"], timeout=1.0, stop_event=stop, transport=transport)
    )

    assert devices == {}


def test_empty_address_list():
    assert asyncio.run(scan_network([], timeout=0.1)) == {}


def _settings(network: str) -> Settings:
    return Settings(scanning=ScanningConfig(network=network, timeout=1.0))


def test_discover_replaces_registry(device_transport, plug_routes):
    transport = device_transport({"192.168.5.2": plug_routes()})
    exporter = Exporter(_settings("192.168.5.0/29"), transport=transport)
    stale = DeviceRecord(
        ip="192.168.5.3", device_id="old-000003", device_name="Old", device_type="OLD"
    )
    exporter.registry.replace({stale.ip: stale})

    snapshot = asyncio.run(exporter.discover())

    assert set(snapshot) == {"192.168.5.2"}
    assert set(exporter.registry.snapshot()) == {"192.168.5.2"}
    assert exporter.stats.known_devices == 1


def test_registry_reads_during_sweep_see_previous_snapshot(
    device_transport, plug_routes
):
    transport = device_transport({"192.168.5.2": plug_routes()}, delay=0.1)
    exporter = Exporter(_settings("192.168.5.0/29"), transport=transport)
    previous = DeviceRecord(
        ip="192.168.5.4", device_id="old-000004", device_name="Old", device_type="OLD"
    )
    exporter.registry.replace({previous.ip: previous})

    async def _run():
        sweep = asyncio.create_task(exporter.discover())
        await asyncio.sleep(0.05)
        during = dict(exporter.registry.snapshot())
        await sweep
        return during

    during = asyncio.run(_run())

    assert during == {previous.ip: previous}
    assert set(exporter.registry.snapshot()) == {"192.168.5.2"}


def test_malformed_range_installs_empty_registry(device_transport, plug_routes):
    exporter = Exporter(
        _settings("garbage"), transport=device_transport({"10.0.0.1": plug_routes()})
    )
    exporter.registry.replace(
        {
            "10.0.0.1": DeviceRecord(
                ip="10.0.0.1", device_id="x-1", device_name="x", device_type="X"
            )
        }
    )

    asyncio.run(exporter.discover())

    assert len(exporter.registry) == 0
