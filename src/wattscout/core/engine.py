"""Discovery and collection loops sharing one stop signal."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable, Mapping

import httpx

from wattscout.config import Settings, format_duration
from wattscout.models import DeviceRecord

from .collector import collect_readings
from .network import enumerate_addresses
from .registry import DeviceRegistry
from .scanner import scan_network
from .stats import EngineStats
from .store import MetricsStore

logger = logging.getLogger(__name__)


class Exporter:
    """Owns the device registry, the metrics store and the stop signal.

    ``run`` drives two independent periodic loops: discovery sweeps that
    replace the registry, and collection cycles that refresh the store from a
    copy of whatever registry snapshot is installed when the cycle starts.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.registry = DeviceRegistry()
        self.store = MetricsStore()
        self.stats = EngineStats()
        self._transport = transport
        self._stop = asyncio.Event()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        """Stop scheduling cycles; cycles already running finish first."""
        if not self._stop.is_set():
            logger.info("Stop requested")
        self._stop.set()

    async def discover(self) -> Mapping[str, DeviceRecord]:
        """Run one discovery sweep and install its result."""
        scanning = self.settings.scanning
        start = time.monotonic()
        addresses = enumerate_addresses(scanning.network)
        devices = await scan_network(
            addresses,
            timeout=scanning.timeout,
            stop_event=self._stop,
            transport=self._transport,
        )
        self.registry.replace(devices)
        self.stats.record_discovery(len(devices), time.monotonic() - start)
        return self.registry.snapshot()

    async def collect(self) -> int:
        """Run one collection cycle; return the number of devices that answered."""
        devices = self.registry.devices()
        start = time.monotonic()
        succeeded = await collect_readings(
            devices,
            self.store,
            timeout=self.settings.metrics.timeout,
            stop_event=self._stop,
            transport=self._transport,
        )
        if devices:
            self.stats.record_collection(
                succeeded, len(devices), time.monotonic() - start
            )
        return succeeded

    async def _wait(self, delay: float) -> bool:
        """Sleep up to ``delay`` seconds; True if stop was requested."""
        if self._stop.is_set():
            return True
        if delay <= 0:
            return False
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=delay)
        except (asyncio.TimeoutError, TimeoutError):
            return False
        return True

    async def _run_periodic(
        self,
        cycle: Callable[[], Awaitable[object]],
        interval: float,
        initial_delay: float = 0.0,
    ) -> None:
        # Fixed-rate schedule: ticks missed while a cycle overran are dropped.
        loop = asyncio.get_running_loop()
        if await self._wait(initial_delay):
            return
        # Ticks count from the start of the first cycle, not from its end.
        next_run = loop.time()
        while True:
            await cycle()
            next_run += interval
            now = loop.time()
            if next_run <= now:
                next_run += (math.floor((now - next_run) / interval) + 1) * interval
            if await self._wait(next_run - now):
                return

    async def run_discovery(self) -> None:
        await self._run_periodic(self.discover, self.settings.scanning.interval)
        logger.debug("Discovery loop exited")

    async def run_collection(self) -> None:
        metrics = self.settings.metrics
        await self._run_periodic(
            self.collect, metrics.interval, initial_delay=metrics.startup_delay
        )
        logger.debug("Collection loop exited")

    async def run(self) -> None:
        """Run both loops until ``stop`` is called."""
        scanning = self.settings.scanning
        logger.info("Network range: %s", scanning.network)
        logger.info("Device discovery interval: %s", format_duration(scanning.interval))
        logger.info(
            "Metrics collection interval: %s",
            format_duration(self.settings.metrics.interval),
        )
        await asyncio.gather(self.run_discovery(), self.run_collection())
        logger.info("Exporter stopped")
