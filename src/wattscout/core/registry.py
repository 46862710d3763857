from __future__ import annotations

import threading
from collections.abc import Mapping
from types import MappingProxyType

from wattscout.models import DeviceRecord


class DeviceRegistry:
    """Devices known as of the last completed discovery sweep.

    The installed snapshot is a read-only mapping of address to record and is
    only ever replaced as a whole, so readers never see a partial sweep.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._devices: Mapping[str, DeviceRecord] = MappingProxyType({})

    def replace(self, devices: Mapping[str, DeviceRecord]) -> None:
        snapshot = MappingProxyType(dict(devices))
        with self._lock:
            self._devices = snapshot

    def snapshot(self) -> Mapping[str, DeviceRecord]:
        with self._lock:
            return self._devices

    def devices(self) -> list[DeviceRecord]:
        """Point-in-time copy of the known devices."""
        return list(self.snapshot().values())

    def __len__(self) -> int:
        return len(self.snapshot())

    def __contains__(self, ip: object) -> bool:
        return ip in self.snapshot()
