from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Redactor:
    """Masks addresses and hardware ids in CLI output."""

    enabled: bool = True
    _id_map: dict[str, int] = field(default_factory=dict)

    def _counter(self, value: str) -> int:
        counter = self._id_map.get(value)
        if counter is None:
            counter = len(self._id_map) + 1
            self._id_map[value] = counter
        return counter

    def redact_ip(self, ip: str) -> str:
        if not self.enabled:
            return ip
        parts = ip.split(".")
        if len(parts) == 4 and all(part.isdigit() for part in parts):
            return f"x.x.x.{parts[3]}"
        return ip

    def redact_device_id(self, device_id: str) -> str:
        """Replace the MAC-derived suffix of ``type-xxxxxx`` ids."""
        if not self.enabled:
            return device_id
        prefix, sep, _suffix = device_id.rpartition("-")
        if not sep:
            return device_id
        return f"{prefix}-xxxx{self._counter(device_id):02d}"
