from __future__ import annotations

from .collector import collect_readings, fetch_status, record_readings
from .engine import Exporter
from .network import detect_local_network, enumerate_addresses
from .probe import derive_device_id, probe_device, resolve_display_name
from .registry import DeviceRegistry
from .scanner import build_client, scan_network
from .stats import EngineStats
from .store import MetricsStore

__all__ = [
    "DeviceRegistry",
    "EngineStats",
    "Exporter",
    "MetricsStore",
    "build_client",
    "collect_readings",
    "derive_device_id",
    "detect_local_network",
    "enumerate_addresses",
    "fetch_status",
    "probe_device",
    "record_readings",
    "resolve_display_name",
    "scan_network",
]
