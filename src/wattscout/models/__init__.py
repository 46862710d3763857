"""Data models for wattscout."""

from wattscout.models.device import DeviceRecord, PowerLabels
from wattscout.models.wire import (
    DeviceSettings,
    IdentifyResponse,
    Meter,
    SettingsDevice,
    StatusResponse,
)

__all__ = [
    "DeviceRecord",
    "DeviceSettings",
    "IdentifyResponse",
    "Meter",
    "PowerLabels",
    "SettingsDevice",
    "StatusResponse",
]
