from __future__ import annotations

import platform
import threading
import time
from collections.abc import Iterator
from importlib.metadata import version

from prometheus_client.core import GaugeMetricFamily, Metric

# (metric name, help text, EngineStats attribute)
_GAUGES = (
    (
        "wattscout_known_devices",
        "Devices found by the last discovery sweep.",
        "known_devices",
    ),
    (
        "wattscout_discovery_duration_seconds",
        "Duration of the last discovery sweep.",
        "discovery_duration",
    ),
    (
        "wattscout_last_discovery_timestamp_seconds",
        "Unix time the last discovery sweep finished.",
        "last_discovery",
    ),
    (
        "wattscout_collected_devices",
        "Devices that answered during the last collection cycle.",
        "collected_devices",
    ),
    (
        "wattscout_attempted_devices",
        "Devices polled during the last collection cycle.",
        "attempted_devices",
    ),
    (
        "wattscout_collection_duration_seconds",
        "Duration of the last collection cycle.",
        "collection_duration",
    ),
    (
        "wattscout_last_collection_timestamp_seconds",
        "Unix time the last collection cycle finished.",
        "last_collection",
    ),
)


class EngineStats:
    """Exporter self-metrics, updated by the engine and read by the HTTP thread."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.known_devices = 0
        self.discovery_duration = 0.0
        self.last_discovery = 0.0
        self.collected_devices = 0
        self.attempted_devices = 0
        self.collection_duration = 0.0
        self.last_collection = 0.0

    def record_discovery(self, found: int, duration: float) -> None:
        with self._lock:
            self.known_devices = found
            self.discovery_duration = duration
            self.last_discovery = time.time()

    def record_collection(
        self, succeeded: int, attempted: int, duration: float
    ) -> None:
        with self._lock:
            self.collected_devices = succeeded
            self.attempted_devices = attempted
            self.collection_duration = duration
            self.last_collection = time.time()

    def collect(self) -> Iterator[Metric]:
        with self._lock:
            values = [
                (name, documentation, float(getattr(self, attribute)))
                for name, documentation, attribute in _GAUGES
            ]
        for name, documentation, value in values:
            yield GaugeMetricFamily(name, documentation, value=value)

        build = GaugeMetricFamily(
            "wattscout_build_info",
            "Exporter build information.",
            labels=["version", "python"],
        )
        build.add_metric([version("wattscout"), platform.python_version()], 1.0)
        yield build
