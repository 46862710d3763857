from __future__ import annotations

import threading
from collections.abc import Iterator

from prometheus_client.core import GaugeMetricFamily, Metric

from wattscout.models import PowerLabels

POWER_METRIC = "wattscout_power_watts"
POWER_HELP = "Current power consumption in watts reported by the device."


class MetricsStore:
    """Latest power reading per label tuple.

    Registered on a prometheus ``CollectorRegistry``; ``collect`` may run on
    the HTTP server thread while the collector writes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[PowerLabels, float] = {}

    def set(self, labels: PowerLabels, value: float) -> None:
        with self._lock:
            self._values[labels] = float(value)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def snapshot(self) -> dict[PowerLabels, float]:
        with self._lock:
            return dict(self._values)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def describe(self) -> list[Metric]:
        return [GaugeMetricFamily(POWER_METRIC, POWER_HELP, labels=PowerLabels._fields)]

    def collect(self) -> Iterator[Metric]:
        gauge = GaugeMetricFamily(POWER_METRIC, POWER_HELP, labels=PowerLabels._fields)
        for labels, value in self.snapshot().items():
            gauge.add_metric(list(labels), value)
        yield gauge
