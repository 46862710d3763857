"""Device models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PowerLabels(NamedTuple):
    """Label tuple identifying one power reading."""

    device_id: str
    device_name: str
    device_type: str
    ip_address: str


class DeviceRecord(BaseModel):
    """Power meter found by a discovery sweep."""

    model_config = {"frozen": True, "extra": "forbid"}

    ip: str
    device_id: str
    device_name: str
    device_type: str
    last_seen: datetime = Field(default_factory=_utcnow)

    @property
    def labels(self) -> PowerLabels:
        return PowerLabels(
            device_id=self.device_id,
            device_name=self.device_name,
            device_type=self.device_type,
            ip_address=self.ip,
        )
