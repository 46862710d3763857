from __future__ import annotations

import pytest

from wattscout.core import DeviceRegistry
from wattscout.models import DeviceRecord


def _record(ip: str, suffix: str = "ddeeff") -> DeviceRecord:
    return DeviceRecord(
        ip=ip,
        device_id=f"shplg-s-{suffix}",
        device_name="Plug",
        device_type="SHPLG-S",
    )


def test_starts_empty():
    registry = DeviceRegistry()
    assert len(registry) == 0
    assert registry.devices() == []


def test_replace_installs_exact_set():
    registry = DeviceRegistry()
    registry.replace({"10.0.0.1": _record("10.0.0.1"), "10.0.0.2": _record("10.0.0.2")})
    registry.replace({"10.0.0.3": _record("10.0.0.3")})

    assert set(registry.snapshot()) == {"10.0.0.3"}
    assert "10.0.0.1" not in registry


def test_snapshot_is_read_only_and_detached():
    registry = DeviceRegistry()
    source = {"10.0.0.1": _record("10.0.0.1")}
    registry.replace(source)
    before = registry.snapshot()

    source["10.0.0.2"] = _record("10.0.0.2")
    with pytest.raises(TypeError):
        before["10.0.0.9"] = _record("10.0.0.9")  # type: ignore[index]

    registry.replace({})
    assert set(before) == {"10.0.0.1"}
    assert len(registry) == 0


def test_devices_is_a_copy():
    registry = DeviceRegistry()
    registry.replace({"10.0.0.1": _record("10.0.0.1")})

    devices = registry.devices()
    devices.clear()

    assert len(registry) == 1


def test_records_are_immutable():
    record = _record("10.0.0.1")
    with pytest.raises(ValueError):
        record.device_name = "Other"  # type: ignore[misc]
